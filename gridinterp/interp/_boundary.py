"""
Boundary conditions that close the prefilter system of quadratic splines.

A quadratic spline over n samples has n + 2 coefficients (one padding
coefficient at each end), but interpolating the samples only gives n
equations. Each boundary condition supplies the two missing rows.
"""

import numpy as np

from .._errors import UnsupportedDegree, ConfigurationError

# The interior stencil of the quadratic B-spline at the sample points
QUADRATIC_STENCIL = (0.125, 0.75, 0.125)

ON_GRID = 'ongrid'
ON_CELL = 'oncell'


def placement_to_id(placement):
    """ placement_to_id(placement)

    Normalize a placement name to either 'ongrid' or 'oncell'. On-grid
    anchors the condition at the outer samples, on-cell anchors it half a
    cell beyond them.
    """
    if isinstance(placement, str):
        name = placement.lower().replace('-', '').replace('_', '')
        if name in ['grid', 'ongrid']:
            return ON_GRID
        elif name in ['cell', 'oncell']:
            return ON_CELL
    raise ConfigurationError('Unknown placement: ' + repr(placement))


class BoundaryCondition:
    """ BoundaryCondition(placement='ongrid')

    Base class for boundary conditions. Instances are immutable and can be
    compared and hashed. The placement is 'ongrid' or 'oncell' (a placement
    of None means that the default of the axis or configuration applies).
    """

    name = ''
    circulant = False

    def __init__(self, placement=None):
        if placement is not None:
            placement = placement_to_id(placement)
        object.__setattr__(self, '_placement', placement)

    def __setattr__(self, key, val):
        raise AttributeError('%s is immutable.' % self.__class__.__name__)

    def __repr__(self):
        if self._placement is None:
            return '%s()' % self.__class__.__name__
        return '%s(%r)' % (self.__class__.__name__, self._placement)

    def __eq__(self, other):
        return (self.__class__ is other.__class__ and
                self._placement == other._placement)

    def __hash__(self):
        return hash((self.__class__.__name__, self._placement))

    @property
    def placement(self):
        """ Where the condition is anchored: 'ongrid', 'oncell' or None.
        """
        return self._placement

    def with_placement(self, placement):
        """ Get a copy of this condition with the given placement.
        """
        return self.__class__(placement)

    def make_boundary_rows(self, degree):
        """ make_boundary_rows(degree)

        Get the rows (left_row, right_row) that close the prefilter
        system. The left row applies to the first three coefficients,
        the right row to the last three (in array order). Both rows
        are homogeneous (their right hand side is zero).
        """
        check_boundary_degree(degree)
        left = np.array(self._left_row(), np.float64)
        return left, left[::-1].copy()

    def _left_row(self):
        raise NotImplementedError()


class Line(BoundaryCondition):
    """ Line(placement=None)

    The second derivative of the spline vanishes at the boundary, so that
    the spline continues as a straight line. For a quadratic spline the
    second derivative is constant over the outer (half) cell, so on-grid
    and on-cell give the same row.
    """
    name = 'line'

    def _left_row(self):
        return 1.0, -2.0, 1.0


class Flat(BoundaryCondition):
    """ Flat(placement=None)

    The first derivative of the spline is zero at the boundary: at the
    outer sample (on-grid), or half a cell beyond it (on-cell).
    """
    name = 'flat'

    def _left_row(self):
        if self.placement == ON_CELL:
            return -1.0, 1.0, 0.0
        return -1.0, 0.0, 1.0


class Reflect(BoundaryCondition):
    """ Reflect(placement=None)

    The samples are mirrored across the boundary: at the outer sample
    (on-grid) or half a cell beyond it (on-cell). Mirror symmetry of the
    coefficients gives the same rows as Flat.
    """
    name = 'reflect'

    def _left_row(self):
        if self.placement == ON_CELL:
            return -1.0, 1.0, 0.0
        return -1.0, 0.0, 1.0


class Periodic(BoundaryCondition):
    """ Periodic(placement=None)

    The samples repeat. On-grid, the last sample is the image of the first
    (the period is n - 1). On-cell the period is n. The prefilter system
    becomes circulant; the boundary rows are its corner couplings (the
    coupling of the first row to the last coefficient and vice versa).
    """
    name = 'periodic'
    circulant = True

    def make_boundary_rows(self, degree):
        check_boundary_degree(degree)
        corner = np.array([QUADRATIC_STENCIL[0]], np.float64)
        return corner, corner.copy()

    def period(self, n):
        """ The period for an axis with n samples.
        """
        if self.placement == ON_CELL:
            return n
        return n - 1


BOUNDARY_CLASSES = {'line': Line, 'flat': Flat, 'reflect': Reflect,
                    'periodic': Periodic}


def check_boundary_degree(degree):
    if not isinstance(degree, (int, np.integer)) or degree > 2:
        raise UnsupportedDegree('No boundary rows for degree %r.' % (degree, ))
    elif degree <= 1:
        raise UnsupportedDegree('Boundary conditions are meaningless for ' +
                                'degree %i (no prefiltering).' % degree)


def boundary_from_name(name, placement=None):
    """ boundary_from_name(name, placement=None)

    Create a boundary condition from its name: 'line', 'flat', 'reflect'
    or 'periodic' (case insensitive). BoundaryCondition instances are
    passed through.
    """
    if isinstance(name, BoundaryCondition):
        return name
    elif isinstance(name, type) and issubclass(name, BoundaryCondition):
        return name(placement)
    elif isinstance(name, str):
        try:
            cls = BOUNDARY_CLASSES[name.lower()]
        except KeyError:
            raise ConfigurationError('Unknown boundary condition: ' + name)
        return cls(placement)
    raise ConfigurationError('Invalid boundary condition: ' + repr(name))


def make_boundary_rows(degree, boundary):
    """ make_boundary_rows(degree, boundary)

    Get the rows (left_row, right_row) that the given boundary condition
    adds to the prefilter system for the given degree. See
    BoundaryCondition.make_boundary_rows().
    """
    return boundary_from_name(boundary).make_boundary_rows(degree)
