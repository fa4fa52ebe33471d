"""
Axis descriptions and the coefficient grid.
"""

import numpy as np

from ._errors import ConfigurationError
from .interp import (degree_to_id, boundary_from_name, placement_to_id,
                     sample_coefs, BoundaryCondition, ON_CELL)


class AxisSpec:
    """ AxisSpec(degree=1, boundary=None, placement=None)

    Describes how to interpolate along one axis of a grid.

    Parameters
    ----------
    degree : int or str
        0 ('constant'), 1 ('linear') or 2 ('quadratic').
    boundary : BoundaryCondition, str or None
        The boundary condition that closes the prefilter system. Required
        for degree 2 (if not given, the default from the parameters is
        used). Degree 0 and 1 need no prefiltering, but accept a Periodic
        condition to mark the axis as periodic.
    placement : str or None
        'ongrid' or 'oncell'. Determines the domain of the axis ([1, n]
        or [0.5, n+0.5]) and where the boundary condition is anchored.
        If not given, the placement of the boundary condition or the
        default from the parameters is used.

    """

    def __init__(self, degree=1, boundary=None, placement=None):
        self._degree = degree_to_id(degree)
        if placement is not None:
            placement = placement_to_id(placement)
        if boundary is not None:
            boundary = boundary_from_name(boundary, placement)
            if placement is None:
                placement = boundary.placement
            elif boundary.placement is None:
                boundary = boundary.with_placement(placement)
            elif boundary.placement != placement:
                raise ConfigurationError('Placement %r conflicts with %r.' %
                                         (placement, boundary))
        self._boundary = boundary
        self._placement = placement

    def __repr__(self):
        return 'AxisSpec(degree=%i, boundary=%r, placement=%r)' % (
                self._degree, self._boundary, self._placement)

    def __eq__(self, other):
        return (isinstance(other, AxisSpec) and
                (self._degree, self._boundary, self._placement) ==
                (other._degree, other._boundary, other._placement))

    def __hash__(self):
        return hash((self._degree, self._boundary, self._placement))

    @property
    def degree(self):
        """ The degree of the basis along this axis.
        """
        return self._degree

    @property
    def boundary(self):
        """ The boundary condition (or None).
        """
        return self._boundary

    @property
    def placement(self):
        """ The placement, 'ongrid' or 'oncell' (None if unresolved).
        """
        return self._placement

    @property
    def periodic(self):
        """ Whether the axis has a periodic boundary condition.
        """
        return self._boundary is not None and self._boundary.circulant

    @property
    def pad(self):
        """ The number of padding coefficients at each end of the axis.
        """
        return 1 if (self._degree >= 2 or self.periodic) else 0

    def resolve(self, params, axis=None):
        """ resolve(params, axis=None)

        Get a fully specified copy of this spec, filling in the defaults
        from the given parameters. Raises ConfigurationError if the
        boundary condition does not fit the degree.
        """
        placement = self._placement or placement_to_id(params.placement)
        boundary = self._boundary
        if boundary is None and self._degree >= 2:
            if params.boundary is None:
                raise ConfigurationError('Degree %i needs a boundary condition.' %
                                         self._degree, axis)
            boundary = boundary_from_name(params.boundary)
        if boundary is not None:
            if self._degree <= 1 and not boundary.circulant:
                raise ConfigurationError('Boundary condition %r is incompatible '
                                         'with degree %i.' % (boundary, self._degree),
                                         axis)
            if boundary.placement is None:
                boundary = boundary.with_placement(placement)
            placement = boundary.placement
        return AxisSpec(self._degree, boundary, placement)

    def bounds(self, n):
        """ bounds(n)

        The domain (lo, hi) of this axis for n samples.
        """
        if self._placement == ON_CELL:
            return 0.5, n + 0.5
        return 1.0, float(n)

    def period(self, n):
        """ period(n)

        The period of this axis for n samples, or None if it is not periodic.
        """
        if not self.periodic:
            return None
        return self._boundary.period(n)

    def coef_range(self, n):
        """ coef_range(n)

        The (1-based) sample indices (lo, hi) of the first and last
        coefficient along this axis, for n samples.
        """
        pad = self.pad
        return 1 - pad, n + pad


def as_axis_spec(spec):
    """ as_axis_spec(spec)

    Turn an AxisSpec, degree (int or str), dict or tuple into an AxisSpec.
    """
    if isinstance(spec, AxisSpec):
        return spec
    elif isinstance(spec, dict):
        return AxisSpec(**spec)
    elif isinstance(spec, tuple):
        return AxisSpec(*spec)
    elif isinstance(spec, BoundaryCondition):
        raise ConfigurationError('A boundary condition is not an axis spec; ' +
                                 'use AxisSpec(degree, boundary).')
    return AxisSpec(spec)


class CoefficientGrid:
    """ CoefficientGrid(coefs, axes, sizes, value_shape=())

    The N-dimensional array of spline coefficients, together with the
    description of each axis. The buffer is read-only.

    Parameters
    ----------
    coefs : array
        The coefficients, shaped (*shape, *value_shape), where shape is the
        padded sample count of each axis.
    axes : sequence of AxisSpec
        The (resolved) spec of each axis.
    sizes : sequence of int
        The number of samples along each axis.
    value_shape : tuple
        The shape of the values (empty for scalar values).

    """

    def __init__(self, coefs, axes, sizes, value_shape=()):

        self._axes = tuple(axes)
        self._sizes = tuple(int(n) for n in sizes)
        self._value_shape = tuple(value_shape)
        ndim = len(self._axes)

        if len(self._sizes) != ndim:
            raise ValueError('Need one size per axis.')
        shape = tuple(n + 2 * spec.pad for n, spec in zip(self._sizes, self._axes))
        if coefs.shape != shape + self._value_shape:
            raise ValueError('Coefficients of shape %r do not match the axes '
                             '(expected %r).' % (coefs.shape, shape + self._value_shape))
        self._shape = shape

        # Store flattened, one column per value component
        nvalues = int(np.prod(self._value_shape, dtype=np.int64))
        flat = np.array(coefs, copy=True, order='C').reshape(-1, nvalues)
        flat.setflags(write=False)
        self._coefs = flat

        # Index arithmetic
        strides = np.ones((ndim, ), np.int64)
        for d in range(ndim - 2, -1, -1):
            strides[d] = strides[d + 1] * shape[d + 1]
        self._strides = strides

        # Arrays for the sampling kernel
        self._degrees = np.array([spec.degree for spec in self._axes], np.int64)
        ranges = [spec.coef_range(n) for spec, n in zip(self._axes, self._sizes)]
        self._los = np.array([r[0] for r in ranges], np.int64)
        self._his = np.array([r[1] for r in ranges], np.int64)
        for a in (self._strides, self._degrees, self._los, self._his):
            a.setflags(write=False)

    def __repr__(self):
        return '<CoefficientGrid shape=%r value_shape=%r dtype=%s>' % (
                self._shape, self._value_shape, self.dtype)

    @property
    def ndim(self):
        """ The number of grid dimensions.
        """
        return len(self._shape)

    @property
    def shape(self):
        """ The shape of the (padded) coefficient grid.
        """
        return self._shape

    @property
    def sizes(self):
        """ The number of samples along each axis.
        """
        return self._sizes

    @property
    def pads(self):
        """ The number of padding coefficients at each end of each axis.
        """
        return tuple(spec.pad for spec in self._axes)

    @property
    def axes(self):
        """ The AxisSpec of each axis.
        """
        return self._axes

    @property
    def value_shape(self):
        """ The shape of the values (an empty tuple for scalars).
        """
        return self._value_shape

    @property
    def dtype(self):
        return self._coefs.dtype

    @property
    def strides(self):
        """ The element strides of the C-ordered flattened grid.
        """
        return tuple(int(s) for s in self._strides)

    @property
    def values(self):
        """ A read-only view of the coefficients, shaped
        (*shape, *value_shape).
        """
        return self._coefs.reshape(self._shape + self._value_shape)

    def check_index(self, index):
        """ check_index(index)

        Check that index (a tuple with one int per axis) lies inside the
        grid. Raises IndexError otherwise.
        """
        if len(index) != self.ndim:
            raise IndexError('Index must have %i elements.' % self.ndim)
        for axis, (i, n) in enumerate(zip(index, self._shape)):
            if not (0 <= i < n):
                raise IndexError('axis %i: index %i out of range [0, %i).' %
                                 (axis, i, n))

    def ravel_index(self, index):
        """ ravel_index(index)

        Get the position of index in the flattened grid.
        """
        self.check_index(index)
        return int(sum(i * s for i, s in zip(index, self._strides)))

    def unravel_index(self, flat_index):
        """ unravel_index(flat_index)

        Get the index tuple for a position in the flattened grid.
        """
        size = self._coefs.shape[0]
        if not (0 <= flat_index < size):
            raise IndexError('flat index %i out of range [0, %i).' %
                             (flat_index, size))
        index = []
        for s in self._strides:
            i, flat_index = divmod(flat_index, int(s))
            index.append(i)
        return tuple(index)

    def __getitem__(self, index):
        if not isinstance(index, tuple):
            index = (index, )
        row = self._coefs[self.ravel_index(index)]
        if self._value_shape:
            return row.reshape(self._value_shape).copy()
        return row[0]

    def sample(self, coords):
        """ sample(coords)

        Evaluate the spline at coords, a float64 array (ndim, npoints).
        Returns an array (npoints, nvalues). No domain checks are done.
        """
        return sample_coefs(self._coefs, self._strides, self._degrees,
                            self._los, self._his, coords)


