"""
Small utility classes.
"""

import re

from ._errors import ConfigurationError


def isidentifier(s):
    # http://stackoverflow.com/questions/2544972/
    if not isinstance(s, str):
        return False
    return re.match(r'^\w+$', s, re.UNICODE) and re.match(r'^[0-9]', s) is None


class Parameters(dict):
    """ A dict in which the items can be get/set as attributes.

    Used to pass configuration to the construction of an interpolant.
    See get_default_params() for the available parameters.
    """

    __reserved_names__ = dir(dict())

    __slots__ = []

    def __repr__(self):
        identifier_items = []
        nonidentifier_items = []
        for key, val in self.items():
            if isidentifier(key):
                identifier_items.append('%s=%r' % (key, val))
            else:
                nonidentifier_items.append('(%r, %r)' % (key, val))
        if nonidentifier_items:
            return 'Parameters([%s], %s)' % (', '.join(nonidentifier_items),
                                       ', '.join(identifier_items))
        else:
            return 'Parameters(%s)' % (', '.join(identifier_items))

    def __getattribute__(self, key):
        try:
            return object.__getattribute__(self, key)
        except AttributeError:
            if key in self:
                return self[key]
            else:
                raise

    def __setattr__(self, key, val):
        if key in self.__class__.__reserved_names__:
            raise AttributeError('Reserved name, this key can only ' +
                                 'be set via ``d[%r] = X``' % key)
        else:
            self[key] = val

    def __dir__(self):
        names = [k for k in self.keys() if isidentifier(k)]
        return self.__class__.__reserved_names__ + names


def get_default_params():
    """ get_default_params()

    Get the default parameters for building an interpolant:

      * boundary ('line'): the boundary condition for quadratic axes that
        do not specify one. Can be 'line', 'flat', 'reflect' or 'periodic'.
      * placement ('ongrid'): where boundary conditions are anchored when
        neither the axis nor its boundary condition specify it. Either
        'ongrid' (at the outer samples) or 'oncell' (half a cell beyond).
      * workers (1): the number of threads used for prefiltering.

    """
    params = Parameters()
    params.boundary = 'line'
    params.placement = 'ongrid'
    params.workers = 1
    return params


def merge_params(params):
    """ merge_params(params)

    Combine the given parameters (a dict, Parameters or None) with the
    defaults. Unknown keys raise a ConfigurationError.
    """
    result = get_default_params()
    if params is None:
        return result
    if not isinstance(params, dict):
        raise ConfigurationError('params must be a dict or Parameters object.')
    invalid_keys = [key for key in params if key not in result]
    if invalid_keys:
        raise ConfigurationError('Invalid parameters given: ' +
                                 ', '.join(sorted(invalid_keys)))
    result.update(params)
    if not (isinstance(result.workers, int) and result.workers >= 1):
        raise ConfigurationError('workers must be a positive integer.')
    return result
