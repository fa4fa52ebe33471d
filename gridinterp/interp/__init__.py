# flake8: noqa
"""
The interp module implements the numerical building blocks of the
interpolants: basis weights, boundary conditions, prefiltering and
sampling, implemented in Numba.
"""

from ._basis import get_spline_coefs, degree_to_id, MAX_DEGREE

from ._boundary import (BoundaryCondition, Line, Flat, Reflect, Periodic,
                        make_boundary_rows, boundary_from_name,
                        placement_to_id, ON_GRID, ON_CELL)

from ._prefilter import prefilter, solve_tridiagonal, solve_cyclic_tridiagonal

from ._sample import sample_coefs

from ._misc import meshgrid
