""" Low level sampling of coefficient grids, implemented with Numba to make
it fast.

The value at a coordinate is the separable tensor-product sum over the
support of the basis along each axis. The work per sample is the product
of (degree + 1) over the axes, independent of the grid size.
"""

import numpy as np
import numba

from ._basis import set_spline_coefs


def sample_coefs(coefs, strides, degrees, los, his, coords):
    """ sample_coefs(coefs, strides, degrees, los, his, coords)

    Evaluate a spline at the given coordinates.

    Parameters
    ----------
    coefs : array (ncoefs, nvalues)
        The flattened (C order) coefficient grid, one column per value
        component.
    strides : int64 array (ndim, )
        Element strides of the flattened grid.
    degrees : int64 array (ndim, )
        The degree of each axis.
    los, his : int64 arrays (ndim, )
        The (1-based) sample index of the first and last coefficient along
        each axis; these differ from 1 and n for padded axes.
    coords : float64 array (ndim, npoints)
        The coordinates to sample at. They are assumed to be inside the
        domain; coordinates outside extend the edge polynomial pieces.

    Returns
    -------
    result : array (npoints, nvalues)
        The sampled values, of the dtype of coefs.
    """
    result = np.empty((coords.shape[1], coefs.shape[1]), coefs.dtype)
    _sample(coefs, strides, degrees, los, his, coords, result)
    return result


@numba.jit(nopython=True, nogil=True)
def _sample(coefs_, strides, degrees, los, his, coords_, result_):

    ndim = coords_.shape[0]
    Ni = coords_.shape[1]
    Nv = coefs_.shape[1]

    starts = np.empty((ndim, ), np.int64)
    widths = np.empty((ndim, ), np.int64)
    counter = np.zeros((ndim, ), np.int64)
    cc = np.zeros((ndim, 3), np.float64)

    for d in range(ndim):
        widths[d] = degrees[d] + 1

    # Iterate over all samples
    for i in range(0, Ni):

        # Get the start of the support and the weights for each axis
        for d in range(ndim):
            starts[d] = set_spline_coefs(coords_[d, i], degrees[d],
                                         los[d], his[d], cc[d])

        for v in range(Nv):
            result_[i, v] = 0.0

        # Walk the tensor product of the supports, last axis fastest
        for d in range(ndim):
            counter[d] = 0
        while True:
            w = 1.0
            offset = 0
            for d in range(ndim):
                w *= cc[d, counter[d]]
                offset += (starts[d] + counter[d]) * strides[d]
            for v in range(Nv):
                result_[i, v] += coefs_[offset, v] * w

            # Advance the counter
            d = ndim - 1
            while d >= 0:
                counter[d] += 1
                if counter[d] < widths[d]:
                    break
                counter[d] = 0
                d -= 1
            if d < 0:
                break
