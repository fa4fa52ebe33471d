"""
B-spline basis weights for degrees 0 (constant), 1 (linear) and 2 (quadratic).
"""

import numpy as np
import numba

from .._errors import UnsupportedDegree

MAX_DEGREE = 2


def get_spline_coefs(x, degree=1):
    """ get_spline_coefs(x, degree=1)

    Calculates the B-spline weights for sample coordinate x (1-based,
    sample j sits at coordinate j). Returns a tuple (start, weights), where
    start is the index of the first sample in the support and weights is
    a tuple of degree+1 weights for samples start, start+1, ...

    degree can be (case insensitive):

        0 or 'constant' / 'nearest': Nearest neighbour. A single weight of 1
        for the nearest sample. Ties go to the lower index.

        1 or 'linear': Linear interpolation. Weights (1-t, t) for the
        samples floor(x) and floor(x)+1, with t = x - floor(x).

        2 or 'quadratic': The uniform quadratic B-spline. The support is
        centered on the nearest sample j, with f = x - j in [-0.5, 0.5)
        the weights are ((f-0.5)**2/2, 3/4-f**2, (f+0.5)**2/2). Note that
        these weights apply to spline coefficients, not to the samples
        themselves; prefiltering makes the spline interpolating.

    The weights sum to one.
    """
    degree = degree_to_id(degree)
    x = float(x)
    if not np.isfinite(x):
        raise ValueError('Cannot calculate spline weights for %r.' % x)
    # Range wide enough to never clamp
    lo = floor(x) - 2
    out = np.zeros((degree + 1, ), np.float64)
    start = set_spline_coefs(x, degree, lo, lo + 6, out)
    return lo + start, tuple(out)


def degree_to_id(degree):
    """ degree_to_id(degree)

    Map a degree name to its integer value. Integers are checked and
    returned as-is. Raises UnsupportedDegree for unknown names and
    degrees without an implemented basis.
    """

    if isinstance(degree, str):
        name = degree.lower()
        if name in ['0', 'c', 'const', 'constant', 'near', 'nearest']:
            return 0
        elif name in ['1', 'lin', 'linear']:
            return 1
        elif name in ['2', 'quad', 'quadratic']:
            return 2
        else:
            raise UnsupportedDegree('Unknown degree: ' + str(degree))
    elif isinstance(degree, (int, np.integer)) and not isinstance(degree, bool):
        if 0 <= degree <= MAX_DEGREE:
            return int(degree)
        raise UnsupportedDegree('No basis implemented for degree %i.' % degree)
    else:
        raise UnsupportedDegree('Invalid degree: ' + repr(degree))


@numba.jit(nopython=True, nogil=True)
def floor(i):
    if i >= 0 or int(i) == i:
        return int(i)
    else:
        return int(i) - 1


@numba.jit(nopython=True, nogil=True)
def set_spline_coefs(x, degree, lo, hi, out):
    """ set_spline_coefs(x, degree, lo, hi, out)

    Calculate the B-spline weights for coordinate x and store them in out.
    Only samples lo..hi (inclusive) are available; the support is shifted
    inside that range when needed, which extends the polynomial piece at
    the edge. Returns the position of the first weight relative to lo.
    """
    if degree == 0:
        j = -floor(0.5 - x)  # ceil(x - 0.5), ties go down
        if j < lo:
            j = lo
        if j > hi:
            j = hi
        out[0] = 1.0
        return j - lo
    elif degree == 1:
        j = floor(x)
        if j < lo:
            j = lo
        if j > hi - 1:
            j = hi - 1
        splinecoef_linear(x - j, out)
        return j - lo
    else:
        j = floor(x + 0.5)
        if j < lo + 1:
            j = lo + 1
        if j > hi - 1:
            j = hi - 1
        splinecoef_quadratic(x - j, out)
        return j - 1 - lo


## The coefficient functions

@numba.jit(nopython=True, nogil=True)
def splinecoef_linear(t, out):
    out[0] = 1.0 - t
    out[1] = t


@numba.jit(nopython=True, nogil=True)
def splinecoef_quadratic(f, out):
    # f is the offset from the center sample, in [-0.5, 0.5) inside the domain
    out[0] = 0.5 * (f - 0.5)**2
    out[2] = 0.5 * (f + 0.5)**2
    out[1] = 1.0 - out[0] - out[2]
