# flake8: noqa
"""
Gridinterp - B-spline interpolation of N-dimensional gridded samples.

Build an Interpolant from an array of samples, with a degree (constant,
linear or quadratic) and boundary condition per axis. Quadratic axes are
prefiltered so that the spline passes through the samples. Wrap the
interpolant in an Extrapolator to define its values outside the domain.
"""

__version__ = '0.1.0'


# Check compat
import sys
if sys.version_info < (3, 6):
    raise RuntimeError('Gridinterp requires at least Python 3.6')

# Imports

from ._errors import (GridInterpError, UnsupportedDegree, ConfigurationError,
                      SingularSystem, OutOfDomain)

from ._utils import Parameters, get_default_params

from .interp import (get_spline_coefs, meshgrid,
                     BoundaryCondition, Line, Flat, Reflect, Periodic,
                     make_boundary_rows, prefilter,
                     solve_tridiagonal, solve_cyclic_tridiagonal)

from ._grid import AxisSpec, CoefficientGrid

from ._interpolant import Interpolant, build

from ._extrapolate import Extrapolator, wrap, POLICIES

# Clean up
del sys
