import numpy as np


def meshgrid(*args):
    """ Meshgrid implementation for 1D, 2D, 3D and beyond.

    meshgrid(nz, ny, nx) will create coordinate grids with the specified
    shape, holding the (1-based) sample coordinates 1..n per axis.

    meshgrid(ndarray) will create coordinate grids corresponding to the
    shape of the given array.

    meshgrid([2,3,4], [1,2,3], [4,1,2]) uses the supplied values to
    create the grids. These lists can also be numpy arrays.

    Returns a tuple with one float64 grid per axis, in the order of the
    array axes, suitable as samples for Interpolant.sample().
    """

    # Test args
    if len(args) == 1:
        args = args[0]
    if isinstance(args, np.ndarray) and args.ndim > 1:
        args = args.shape
    elif isinstance(args, (int, np.integer, np.ndarray)):
        args = (args, )
    if not isinstance(args, (list, tuple)):
        raise ValueError('Invalid argument for meshgrid.')
    iterators = []
    for arg in args:
        if isinstance(arg, (int, np.integer)) and not isinstance(arg, bool):
            iterators.append(np.arange(1, arg + 1, dtype=np.float64))
        elif isinstance(arg, list):
            try:
                iterators.append(np.array(arg, dtype=np.float64))
            except ValueError:
                raise ValueError('Invalid argument for meshgrid.')
        elif isinstance(arg, np.ndarray) and arg.ndim == 1:
            iterators.append(arg.astype(np.float64))
        else:
            raise ValueError('Invalid argument for meshgrid.')

    # Use Numpy, in matrix indexing to keep the axis order
    res = np.meshgrid(*iterators, indexing='ij')
    return tuple(np.ascontiguousarray(a) for a in res)
