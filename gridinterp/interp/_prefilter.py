""" Prefiltering: turn samples into B-spline coefficients, implemented
with Numba to make it fast.

For a quadratic axis the spline coefficients follow from a tridiagonal
system (circulant for periodic axes). The system matrix only depends on
the number of samples and the boundary condition, so it is factored
once per axis, after which every line along that axis is solved with a
single forward/backward sweep. N-dimensional data is filtered one axis
at a time, which is valid because the tensor-product basis is separable.
"""

import logging
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import numba

from .._errors import SingularSystem, UnsupportedDegree
from ._basis import MAX_DEGREE
from ._boundary import QUADRATIC_STENCIL

logger = logging.getLogger(__name__)


## Tridiagonal solvers


def solve_tridiagonal(lower, diag, upper, rhs):
    """ solve_tridiagonal(lower, diag, upper, rhs)

    Solve the tridiagonal system A x = rhs with the Thomas algorithm.

    Parameters
    ----------
    lower : array (n-1, )
        The sub-diagonal, lower[i] = A[i+1, i].
    diag : array (n, )
        The main diagonal.
    upper : array (n-1, )
        The super-diagonal, upper[i] = A[i, i+1].
    rhs : array (..., n)
        The right hand side. The system is solved along the last axis,
        for all other axes at once.

    Returns
    -------
    x : array
        The solution, with the shape of rhs.

    The algorithm does not pivot, so it is meant for systems that are
    diagonally dominant (like those of spline prefiltering). A zero pivot
    raises SingularSystem.
    """
    lower, diag, upper = _check_diagonals(lower, diag, upper, -1)
    cp, inv = factor_tridiagonal(lower, diag, upper)
    lines, rhs_shape = _as_lines(rhs, diag.size)
    out = np.empty_like(lines)
    _solve_lines(lines, out, lower, cp, inv)
    return out.reshape(rhs_shape)


def solve_cyclic_tridiagonal(lower, diag, upper, rhs):
    """ solve_cyclic_tridiagonal(lower, diag, upper, rhs)

    Solve a cyclic tridiagonal system, in which row i reads
    ``lower[i] * x[i-1] + diag[i] * x[i] + upper[i] * x[i+1] = rhs[i]``
    with indices taken modulo n. So lower[0] and upper[n-1] are the
    corner elements. All three diagonals have n elements.

    Uses the Sherman-Morrison formula: the cyclic system is a tridiagonal
    system plus a rank one correction. The correction needs one extra
    tridiagonal solve that does not depend on rhs. With fewer than 3
    unknowns the corners coincide with the off-diagonals, and the system
    is solved as a plain tridiagonal one.
    """
    lower, diag, upper = _check_diagonals(lower, diag, upper, 0)
    lines, rhs_shape = _as_lines(rhs, diag.size)
    out = np.empty_like(lines)
    if diag.size < 3:
        lower, diag, upper = fold_cyclic_tridiagonal(lower, diag, upper)
        cp, inv = factor_tridiagonal(lower, diag, upper)
        _solve_lines(lines, out, lower, cp, inv)
    else:
        factors = factor_cyclic_tridiagonal(lower, diag, upper)
        _solve_cyclic_lines(lines, out, *factors)
    return out.reshape(rhs_shape)


def _check_diagonals(lower, diag, upper, offdiag_extra):
    diag = np.ascontiguousarray(diag, np.float64)
    lower = np.ascontiguousarray(lower, np.float64)
    upper = np.ascontiguousarray(upper, np.float64)
    if diag.ndim != 1 or diag.size == 0:
        raise ValueError('diag must be a non-empty 1D array.')
    n_off = diag.size + offdiag_extra
    if lower.shape != (n_off, ) or upper.shape != (n_off, ):
        raise ValueError('lower and upper must have %i elements.' % n_off)
    return lower, diag, upper


def _as_lines(rhs, n):
    rhs = np.asarray(rhs)
    if rhs.ndim == 0 or rhs.shape[-1] != n:
        raise ValueError('The last dimension of rhs must have %i elements.' % n)
    dtype = np.result_type(rhs.dtype, np.float64)
    lines = np.ascontiguousarray(rhs.reshape(-1, n), dtype)
    return lines, rhs.shape


def factor_tridiagonal(lower, diag, upper):
    """ factor_tridiagonal(lower, diag, upper)

    LU-factor a tridiagonal matrix (see solve_tridiagonal() for the layout).
    Returns (cp, inv): the modified super-diagonal and the inverse pivots.
    """
    n = diag.size
    cp = np.zeros((n, ), np.float64)
    inv = np.zeros((n, ), np.float64)
    if not _factor_tridiagonal(lower, diag, upper, cp, inv):
        raise SingularSystem('Zero pivot in tridiagonal system.')
    return cp, inv


def fold_cyclic_tridiagonal(lower, diag, upper):
    """ fold_cyclic_tridiagonal(lower, diag, upper)

    Turn a cyclic system of 1 or 2 unknowns into a tridiagonal one, by
    adding the corner elements to the off-diagonals (or, for a single
    unknown, everything to the diagonal).
    """
    n = diag.size
    if n == 1:
        return (np.zeros((0, ), np.float64), diag + lower + upper,
                np.zeros((0, ), np.float64))
    elif n == 2:
        return (lower[1:] + upper[1:], diag.copy(), upper[:1] + lower[:1])
    raise ValueError('Only cyclic systems with 1 or 2 unknowns can be folded.')


def factor_cyclic_tridiagonal(lower, diag, upper):
    """ factor_cyclic_tridiagonal(lower, diag, upper)

    Prepare the solution of a cyclic tridiagonal system (see
    solve_cyclic_tridiagonal() for the layout). Returns the tuple
    (lower, cp, inv, z, vfactor, denom) used by the line solver.
    """
    n = diag.size
    alpha = upper[n - 1]  # A[n-1, 0]
    beta = lower[0]  # A[0, n-1]
    gamma = -diag[0]

    # The tridiagonal part, with the diagonal corrected for the
    # rank one update u * v.T, u = (gamma, 0, ..., alpha),
    # v = (1, 0, ..., beta/gamma)
    bb = diag.copy()
    bb[0] -= gamma
    bb[n - 1] -= alpha * beta / gamma
    sub = lower[1:].copy()
    cp, inv = factor_tridiagonal(sub, bb, upper[:-1])

    # Data independent solve for the correction
    u = np.zeros((1, n), np.float64)
    u[0, 0] = gamma
    u[0, n - 1] = alpha
    z = np.empty_like(u)
    _solve_lines(u, z, sub, cp, inv)
    z = z[0]

    vfactor = beta / gamma
    denom = 1.0 + z[0] + vfactor * z[n - 1]
    if denom == 0.0:
        raise SingularSystem('Cyclic tridiagonal system is singular.')
    return sub, cp, inv, z, vfactor, denom


@numba.jit(nopython=True, nogil=True)
def _factor_tridiagonal(lower, diag, upper, cp, inv):
    n = diag.shape[0]
    cp_prev = 0.0
    for i in range(n):
        denom = diag[i]
        if i > 0:
            denom -= lower[i - 1] * cp_prev
        if denom == 0.0:
            return False
        inv[i] = 1.0 / denom
        if i < n - 1:
            cp_prev = upper[i] * inv[i]
            cp[i] = cp_prev
    return True


@numba.jit(nopython=True, nogil=True)
def _thomas(rhs, y, lower, cp, inv):
    # Forward sweep, then back substitution. y may be a view.
    n = inv.shape[0]
    y[0] = rhs[0] * inv[0]
    for i in range(1, n):
        y[i] = (rhs[i] - lower[i - 1] * y[i - 1]) * inv[i]
    for i in range(n - 2, -1, -1):
        y[i] -= cp[i] * y[i + 1]


@numba.jit(nopython=True, nogil=True)
def _solve_lines(lines, out, lower, cp, inv):
    for k in range(lines.shape[0]):
        _thomas(lines[k], out[k], lower, cp, inv)


@numba.jit(nopython=True, nogil=True)
def _cyclic(rhs, y, lower, cp, inv, z, vfactor, denom):
    n = inv.shape[0]
    _thomas(rhs, y, lower, cp, inv)
    fact = (y[0] + vfactor * y[n - 1]) / denom
    for i in range(n):
        y[i] -= fact * z[i]


@numba.jit(nopython=True, nogil=True)
def _solve_cyclic_lines(lines, out, lower, cp, inv, z, vfactor, denom):
    for k in range(lines.shape[0]):
        _cyclic(lines[k], out[k], lower, cp, inv, z, vfactor, denom)


## Line kernels for the axes of a grid


@numba.jit(nopython=True, nogil=True)
def _filter_lines_quadratic(lines, out, lower, cp, inv, left, right):
    n = lines.shape[1]
    for k in range(lines.shape[0]):
        _thomas(lines[k], out[k, 1:n + 1], lower, cp, inv)
        # Recover the padding coefficients from the (homogeneous) boundary rows
        out[k, 0] = -(left[1] * out[k, 1] + left[2] * out[k, 2]) / left[0]
        out[k, n + 1] = -(right[0] * out[k, n - 1] + right[1] * out[k, n]) / right[2]


@numba.jit(nopython=True, nogil=True)
def _filter_lines_cyclic(lines, out, period, lower, cp, inv, z, vfactor, denom):
    m = out.shape[1]
    if lines.shape[0] == 0:
        return
    tmp = np.empty_like(out[0, :period])
    for k in range(lines.shape[0]):
        _cyclic(lines[k, :period], tmp, lower, cp, inv, z, vfactor, denom)
        for i in range(m):
            out[k, i] = tmp[(i - 1) % period]


@numba.jit(nopython=True, nogil=True)
def _filter_lines_folded(lines, out, period, lower, cp, inv):
    m = out.shape[1]
    if lines.shape[0] == 0:
        return
    tmp = np.empty_like(out[0, :period])
    for k in range(lines.shape[0]):
        _thomas(lines[k, :period], tmp, lower, cp, inv)
        for i in range(m):
            out[k, i] = tmp[(i - 1) % period]


@numba.jit(nopython=True, nogil=True)
def _wrap_lines(lines, out, period):
    m = out.shape[1]
    for k in range(lines.shape[0]):
        for i in range(m):
            out[k, i] = lines[k, (i - 1) % period]


def quadratic_system(n, left, right):
    """ quadratic_system(n, left, right)

    Get the diagonals (lower, diag, upper) of the n x n system that
    solves for the n inner coefficients of a quadratic spline. The
    boundary rows are substituted into the first and last interpolation
    rows to eliminate the two padding coefficients.
    """
    a, b, _ = QUADRATIC_STENCIL
    lower = np.full((n - 1, ), a, np.float64)
    upper = np.full((n - 1, ), a, np.float64)
    diag = np.full((n, ), b, np.float64)
    # c[0] = -(left[1] * c[1] + left[2] * c[2]) / left[0]
    diag[0] = b - a * left[1] / left[0]
    upper[0] = a - a * left[2] / left[0]
    # c[n+1] = -(right[0] * c[n-1] + right[1] * c[n]) / right[2]
    lower[n - 2] = a - a * right[0] / right[2]
    diag[n - 1] = b - a * right[1] / right[2]
    return lower, diag, upper


def circulant_system(period, left, right):
    """ circulant_system(period, left, right)

    Get the diagonals of the cyclic system of a periodic quadratic
    spline (see solve_cyclic_tridiagonal() for the layout).
    """
    a, b, _ = QUADRATIC_STENCIL
    lower = np.full((period, ), a, np.float64)
    upper = np.full((period, ), a, np.float64)
    diag = np.full((period, ), b, np.float64)
    lower[0] = left[0]
    upper[period - 1] = right[0]
    return lower, diag, upper


## The prefilter


def prepare_axis(n, spec, axis=None):
    """ prepare_axis(n, spec, axis=None)

    Check that an axis with n samples can be filtered according to the
    given axis spec, and factor its system. Returns (kernel, args, m),
    with m the number of coefficients along the axis, or None if the
    axis needs no filtering.
    """
    degree = spec.degree
    boundary = spec.boundary
    if degree > MAX_DEGREE:
        raise UnsupportedDegree('No basis implemented for degree %i.' % degree,
                                axis)
    if n < degree + 1:
        raise SingularSystem('Need at least %i samples for degree %i, got %i.' %
                             (degree + 1, degree, n), axis)

    if boundary is not None and boundary.circulant:
        period = boundary.period(n)
        if period < 1:
            raise SingularSystem('An on-grid periodic axis needs at least ' +
                                 '2 samples.', axis)
        m = n + 2
        if degree <= 1:
            return _wrap_lines, (period, ), m
        left, right = boundary.make_boundary_rows(degree)
        system = circulant_system(period, left, right)
        if period < 3:
            lower, diag, upper = fold_cyclic_tridiagonal(*system)
            cp, inv = factor_tridiagonal(lower, diag, upper)
            return _filter_lines_folded, (period, lower, cp, inv), m
        factors = factor_cyclic_tridiagonal(*system)
        return _filter_lines_cyclic, (period, ) + factors, m

    elif degree <= 1:
        return None

    else:
        left, right = boundary.make_boundary_rows(degree)
        lower, diag, upper = quadratic_system(n, left, right)
        try:
            cp, inv = factor_tridiagonal(lower, diag, upper)
        except SingularSystem as err:
            raise SingularSystem(str(err), axis)
        return _filter_lines_quadratic, (lower, cp, inv, left, right), n + 2


def filter_axis(data, axis, spec, workers=1, plan=None):
    """ filter_axis(data, axis, spec, workers=1, plan=None)

    Filter all lines of data along the given axis. Returns a new array
    (or data itself if the axis needs no filtering). The lines are
    independent; with workers > 1 they are divided over a pool of threads.
    plan is the result of prepare_axis(), computed here if not given.
    """
    n = data.shape[axis]
    if plan is None:
        plan = prepare_axis(n, spec, axis)
    if plan is None:
        return data
    kernel, args, m = plan

    boundary = spec.boundary
    if boundary.circulant and boundary.period(n) != n:
        first = np.take(data, 0, axis)
        last = np.take(data, n - 1, axis)
        if not np.allclose(first, last):
            logger.warning('axis %i: the last sample of an on-grid periodic ' +
                           'axis differs from the first; using the first.', axis)

    moved = np.moveaxis(data, axis, -1)
    lines = np.ascontiguousarray(moved).reshape(-1, n)
    out = np.empty((lines.shape[0], m), data.dtype)
    run_lines(kernel, args, lines, out, workers)
    out = out.reshape(moved.shape[:-1] + (m, ))
    return np.moveaxis(out, -1, axis)


def run_lines(kernel, args, lines, out, workers=1):
    """ run_lines(kernel, args, lines, out, workers=1)

    Apply a line kernel, splitting the lines in chunks that are
    processed by a pool of threads (the kernels release the GIL).
    """
    nlines = lines.shape[0]
    workers = min(workers, nlines)
    if workers <= 1:
        kernel(lines, out, *args)
        return

    bounds = np.linspace(0, nlines, workers + 1).astype(np.int64)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(kernel, lines[i0:i1], out[i0:i1], *args)
                   for i0, i1 in zip(bounds[:-1], bounds[1:]) if i1 > i0]
        for future in futures:
            future.result()


def prefilter(data, axes, workers=1):
    """ prefilter(data, axes, workers=1)

    Calculate the spline coefficients for the given data.

    Parameters
    ----------
    data : array (float64 or complex128)
        The samples. The first len(axes) dimensions form the grid,
        any remaining dimensions hold the components of vector values.
    axes : sequence of AxisSpec
        The degree and boundary condition for each grid axis.
    workers : int
        The number of threads to divide the lines of an axis over.

    Returns
    -------
    coefs : array
        The coefficients. Quadratic and periodic axes are padded
        with one coefficient at each end.
    """
    if len(axes) > data.ndim:
        raise ValueError('data has fewer dimensions than there are axes.')

    # Check all axes before doing any work
    plans = [prepare_axis(data.shape[axis], spec, axis)
             for axis, spec in enumerate(axes)]

    coefs = data
    for axis, spec in enumerate(axes):
        if plans[axis] is None:
            continue
        logger.debug('Prefiltering axis %i (%i samples, %r)',
                     axis, data.shape[axis], spec)
        coefs = filter_axis(coefs, axis, spec, workers, plans[axis])
    return coefs
