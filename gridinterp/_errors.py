"""
Exceptions raised by gridinterp. They all derive from ValueError, so
code that checks input by catching ValueError keeps working.
"""


class GridInterpError(ValueError):
    """ GridInterpError(message, axis=None)
    
    Base class for the errors of this package. If the error can be
    attributed to a single axis of the grid, its index is stored in
    the ``axis`` attribute and mentioned in the message.
    """
    
    def __init__(self, message, axis=None):
        self.axis = axis
        if axis is not None:
            message = 'axis %i: %s' % (axis, message)
        ValueError.__init__(self, message)


class UnsupportedDegree(GridInterpError):
    """ The requested degree has no implemented basis.
    """
    pass


class ConfigurationError(GridInterpError):
    """ Incompatible combination of degree, boundary condition, placement
    or extrapolation policy.
    """
    pass


class SingularSystem(GridInterpError):
    """ Too few samples along an axis to solve the prefilter system.
    """
    pass


class OutOfDomain(GridInterpError):
    """ A coordinate lies outside the domain of the interpolant.
    """
    pass
