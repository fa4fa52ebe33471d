"""
Extrapolation: define the value of an interpolant outside its domain by
remapping the coordinates before evaluating.
"""

import numpy as np

from ._errors import ConfigurationError
from ._grid import ON_CELL
from ._interpolant import Interpolant, check_point, check_samples, format_point

POLICIES = ('flat', 'periodic', 'reflect', 'error', 'nan')


def policy_to_id(policy):
    """ policy_to_id(policy)

    Normalize the name of an extrapolation policy (case insensitive):

      * 'flat' (or 'clamp'): use the value at the nearest boundary.
      * 'periodic' (or 'wrap'): repeat the interpolant with the period of
        the axis.
      * 'reflect' (or 'mirror'): mirror the interpolant at the boundaries.
      * 'error' (or 'raise'): raise OutOfDomain.
      * 'nan' (or 'nanfill', 'fill'): return NaN.

    """
    if isinstance(policy, str):
        name = policy.lower()
        if name in ['flat', 'clamp']:
            return 'flat'
        elif name in ['periodic', 'wrap']:
            return 'periodic'
        elif name in ['reflect', 'mirror']:
            return 'reflect'
        elif name in ['error', 'raise', 'throw']:
            return 'error'
        elif name in ['nan', 'nanfill', 'fill']:
            return 'nan'
    raise ConfigurationError('Unknown extrapolation policy: ' + repr(policy))


class Extrapolator:
    """ Extrapolator(interpolant, policy='error')

    Wraps an Interpolant to define its values outside the domain. The
    interpolant is referenced, not copied.

    Parameters
    ----------
    interpolant : Interpolant
        The interpolant to wrap.
    policy : str or sequence of str
        The extrapolation policy for all axes, or one per axis. See
        policy_to_id() for the options. The 'periodic' policy requires
        the axis to have a Periodic boundary condition (or, for degree 0
        and 1 on-grid, no boundary condition at all); otherwise a
        ConfigurationError is raised.

    Coordinates inside the domain are passed on unchanged. Coordinates
    that have no image in the domain (NaN, or infinite under the
    periodic and reflect policies) evaluate to NaN.
    """

    def __init__(self, interpolant, policy='error'):

        if not isinstance(interpolant, Interpolant):
            raise TypeError('Extrapolator needs an Interpolant.')
        ndim = interpolant.ndim

        if isinstance(policy, (list, tuple)):
            policies = [policy_to_id(p) for p in policy]
            if len(policies) != ndim:
                raise ConfigurationError('Need %i extrapolation policies, got %i.' %
                                         (ndim, len(policies)))
        else:
            policies = [policy_to_id(policy)] * ndim

        periods = []
        for axis, (p, spec, n) in enumerate(zip(policies, interpolant.axes,
                                                 interpolant.shape)):
            period = spec.period(n)
            if p == 'periodic':
                if (period is None and spec.boundary is None and
                        spec.degree <= 1 and spec.placement != ON_CELL):
                    period = n - 1  # the last sample is the image of the first
                elif period is None:
                    raise ConfigurationError('Periodic extrapolation needs a '
                                             'periodic boundary condition, '
                                             'got %r.' % spec.boundary, axis)
            periods.append(period)

        self._interpolant = interpolant
        self._policies = tuple(policies)
        self._periods = tuple(periods)

    def __repr__(self):
        return '<Extrapolator %r around %r>' % (self._policies, self._interpolant)

    @property
    def interpolant(self):
        """ The wrapped Interpolant.
        """
        return self._interpolant

    @property
    def policies(self):
        """ The extrapolation policy of each axis.
        """
        return self._policies

    @property
    def ndim(self):
        return self._interpolant.ndim

    def evaluate(self, *coords):
        """ evaluate(*coords)

        Evaluate at a single point, given as one coordinate per axis.
        """
        point = check_point(self.ndim, coords)
        return format_point(self.sample_coords(point),
                            self._interpolant.value_shape)

    __call__ = evaluate

    def sample(self, samples):
        """ sample(samples)

        Evaluate at many points, see Interpolant.sample().
        """
        coords, shape = check_samples(self.ndim, samples)
        result = self.sample_coords(coords)
        return result.reshape(shape + self._interpolant.value_shape)

    def sample_coords(self, coords):
        """ sample_coords(coords)

        Low level evaluation at coords, a float64 array of shape
        (ndim, npoints). Returns an array of shape (npoints, nvalues).
        """
        coords, outside = self.remap(coords)
        if not outside.any():
            return self._interpolant.sample_coords(coords)
        nvalues = int(np.prod(self._interpolant.value_shape, dtype=np.int64))
        result = np.full((coords.shape[1], nvalues), np.nan,
                         self._interpolant.dtype)
        inside = ~outside
        if inside.any():
            result[inside] = self._interpolant.sample_coords(coords[:, inside])
        return result

    def remap(self, coords):
        """ remap(coords)

        Map the coordinates (ndim, npoints) into the domain according to
        the policies. Returns (new_coords, outside), where outside flags the
        points that evaluate to NaN: those out of the domain along an axis
        with the 'nan' policy, and those whose coordinate has no image in
        the domain (NaN for 'flat', NaN or infinite for 'periodic' and
        'reflect'). Axes with the 'error' policy are left unchanged.
        """
        coords = np.array(coords, np.float64)
        outside = np.zeros((coords.shape[1], ), bool)
        for axis, (policy, period) in enumerate(zip(self._policies, self._periods)):
            lo, hi = self._interpolant.bounds[axis]
            c = coords[axis]
            out = ~((c >= lo) & (c <= hi))
            if policy == 'error' or not out.any():
                continue
            elif policy == 'nan':
                outside |= out
                continue
            if policy == 'flat':
                undefined = np.isnan(c)
            else:
                undefined = ~np.isfinite(c)
            outside |= undefined
            out &= ~undefined
            if policy == 'flat':
                c[out] = np.clip(c[out], lo, hi)
            elif policy == 'periodic':
                c[out] = lo + np.mod(c[out] - lo, period)
            elif policy == 'reflect':
                length = hi - lo
                if length == 0:
                    c[out] = lo
                else:
                    y = np.mod(c[out] - lo, 2 * length)
                    c[out] = lo + np.where(y > length, 2 * length - y, y)
        return coords, outside


def wrap(interpolant, policy='error'):
    """ wrap(interpolant, policy='error')

    Wrap an Interpolant in an Extrapolator with the given policy (for all
    axes, or a sequence with one policy per axis).
    """
    return Extrapolator(interpolant, policy)
