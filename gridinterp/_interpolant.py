"""
The Interpolant: a B-spline representation of gridded samples that can be
evaluated at arbitrary coordinates.
"""

import logging

import numpy as np

from ._errors import ConfigurationError, OutOfDomain
from ._utils import merge_params
from ._grid import AxisSpec, CoefficientGrid, as_axis_spec
from .interp import prefilter

logger = logging.getLogger(__name__)


class Interpolant:
    """ Interpolant(samples, axes=None, params=None)

    Interpolate gridded samples with B-splines of degree 0 (nearest
    neighbour), 1 (linear) or 2 (quadratic). For quadratic axes the
    samples are prefiltered, so that the spline passes exactly through
    them.

    Parameters
    ----------
    samples : array-like
        The samples, of a real or complex type. Integer samples are
        converted to float64.
    axes : list or spec
        A list with one spec per grid axis, or a single spec that applies
        to all dimensions of samples. A spec is an AxisSpec, a degree
        (e.g. 2 or 'quadratic'), a tuple (degree, boundary, placement)
        or a dict. When a list is given, the dimensions of samples beyond
        the grid axes are the components of vector values. Default linear.
    params : dict or Parameters
        Overrides for the defaults of get_default_params().

    Coordinates are 1-based sample indices in the order of the array
    axes: coordinate j on an axis is the position of sample j (index
    j-1). The domain of an axis with n samples is [1, n] (on-grid) or
    [0.5, n+0.5] (on-cell). Evaluating outside the domain raises
    OutOfDomain; use an Extrapolator to define values out there.

    The interpolant is immutable and can be evaluated from multiple
    threads at the same time.
    """

    def __init__(self, samples, axes=None, params=None):

        params = merge_params(params)

        # Check samples
        samples = np.asarray(samples)
        if samples.dtype.kind not in 'biufc':
            raise TypeError('samples must be numeric, not %s.' % samples.dtype)
        if samples.ndim == 0:
            raise ValueError('samples must have at least one dimension.')
        dtype = np.result_type(samples.dtype, np.float64)

        # Get axis specs
        if axes is None:
            axes = AxisSpec(1)
        if isinstance(axes, list):
            specs = [as_axis_spec(spec) for spec in axes]
        else:
            specs = [as_axis_spec(axes)] * samples.ndim
        ndim = len(specs)
        if ndim == 0:
            raise ConfigurationError('Need at least one axis.')
        if ndim > samples.ndim:
            raise ConfigurationError('Got %i axis specs for samples with %i '
                                     'dimensions.' % (ndim, samples.ndim))
        specs = [spec.resolve(params, axis) for axis, spec in enumerate(specs)]

        grid_shape = samples.shape[:ndim]
        value_shape = samples.shape[ndim:]
        nvalues = int(np.prod(value_shape, dtype=np.int64))

        # Prefilter (checks all axes first)
        data = np.ascontiguousarray(samples, dtype).reshape(grid_shape + (nvalues, ))
        coefs = prefilter(data, specs, params.workers)
        coefs = coefs.reshape(coefs.shape[:ndim] + value_shape)

        self._grid = CoefficientGrid(coefs, specs, grid_shape, value_shape)
        self._bounds = tuple(spec.bounds(n) for spec, n in zip(specs, grid_shape))
        self._lows = np.array([b[0] for b in self._bounds], np.float64)
        self._highs = np.array([b[1] for b in self._bounds], np.float64)

        logger.debug('Built %r', self)

    def __repr__(self):
        degrees = ', '.join(str(spec.degree) for spec in self.axes)
        return '<Interpolant shape=%r degrees=(%s) value_shape=%r>' % (
                self.shape, degrees, self.value_shape)

    @property
    def ndim(self):
        """ The number of grid dimensions.
        """
        return self._grid.ndim

    @property
    def shape(self):
        """ The number of samples along each axis.
        """
        return self._grid.sizes

    @property
    def value_shape(self):
        """ The shape of the values, an empty tuple for scalars.
        """
        return self._grid.value_shape

    @property
    def dtype(self):
        """ The type of the values.
        """
        return self._grid.dtype

    @property
    def axes(self):
        """ The (resolved) AxisSpec of each axis.
        """
        return self._grid.axes

    @property
    def bounds(self):
        """ The domain (lo, hi) of each axis.
        """
        return self._bounds

    @property
    def grid(self):
        """ The CoefficientGrid (read-only).
        """
        return self._grid

    def evaluate(self, *coords):
        """ evaluate(*coords)

        Evaluate the interpolant at a single point, given as one coordinate
        per axis. Returns a scalar, or an array of shape value_shape for
        vector values.
        """
        point = check_point(self.ndim, coords)
        return format_point(self.sample_coords(point), self.value_shape)

    __call__ = evaluate

    def sample(self, samples):
        """ sample(samples)

        Evaluate the interpolant at many points. samples is a tuple or list
        of arrays (one per axis) of equal shape, as e.g. produced by
        meshgrid(). For 1D interpolants a single array is also accepted.
        Returns an array of shape samples[0].shape + value_shape.
        """
        coords, shape = check_samples(self.ndim, samples)
        result = self.sample_coords(coords)
        return result.reshape(shape + self.value_shape)

    def sample_coords(self, coords):
        """ sample_coords(coords)

        Low level evaluation at coords, a float64 array of shape
        (ndim, npoints). Returns an array of shape (npoints, nvalues).
        """
        self.check_domain(coords)
        return self._grid.sample(coords)

    def check_domain(self, coords):
        """ check_domain(coords)

        Raise OutOfDomain if any of the coordinates (an array of shape
        (ndim, npoints)) lies outside the domain or is NaN.
        """
        for axis in range(self.ndim):
            c = coords[axis]
            inside = (c >= self._lows[axis]) & (c <= self._highs[axis])
            if not inside.all():
                bad = c[~inside][0]
                lo, hi = self._bounds[axis]
                raise OutOfDomain('coordinate %r is outside the domain '
                                  '[%g, %g].' % (float(bad), lo, hi), axis)


def build(samples, axes=None, params=None):
    """ build(samples, axes=None, params=None)

    Build an Interpolant for the given samples. See Interpolant for
    a description of the arguments.
    """
    return Interpolant(samples, axes, params)


## Helper functions


def check_point(ndim, coords):
    """ check_point(ndim, coords)

    Turn the coordinates of a single point into an array (ndim, 1).
    A single sequence with ndim elements is also accepted.
    """
    if len(coords) == 1 and isinstance(coords[0], (tuple, list, np.ndarray)):
        coords = tuple(coords[0])
    if len(coords) != ndim:
        raise ValueError('Need %i coordinates, got %i.' % (ndim, len(coords)))
    try:
        point = np.array(coords, np.float64).reshape(ndim, 1)
    except (TypeError, ValueError):
        raise ValueError('Coordinates must be real numbers.')
    return point


def check_samples(ndim, samples):
    """ check_samples(ndim, samples)

    Turn a tuple of sample arrays (one per axis) into an array of
    coordinates (ndim, npoints). Returns (coords, shape).
    """
    if isinstance(samples, list):
        samples = tuple(samples)
    elif not isinstance(samples, tuple):
        if ndim == 1:
            samples = (samples, )
        else:
            raise ValueError('samples must be a tuple or list of arrays.')
    if len(samples) != ndim:
        tmp = 'samples must contain as many arrays as there are axes.'
        raise ValueError(tmp)
    arrays = [np.asarray(s, np.float64) for s in samples]
    shape = arrays[0].shape
    for a in arrays:
        if a.shape != shape:
            raise ValueError('sample arrays must all have the same shape.')
    coords = np.empty((ndim, arrays[0].size), np.float64)
    for axis, a in enumerate(arrays):
        coords[axis] = a.ravel()
    return coords, shape


def format_point(result, value_shape):
    # result has shape (1, nvalues)
    if value_shape:
        return result[0].reshape(value_shape)
    return result[0, 0]
