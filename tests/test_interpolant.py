from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

import gridinterp
from gridinterp import AxisSpec, Line, Flat, Reflect, Periodic
from gridinterp import (ConfigurationError, OutOfDomain, SingularSystem,
                        UnsupportedDegree)


WAVE = [0, 1, 0, -1, 0, 1, 0, -1, 0, 1]


def all_specs():
    specs = []
    for placement in ('ongrid', 'oncell'):
        for degree in (0, 1):
            specs.append(AxisSpec(degree, placement=placement))
            specs.append(AxisSpec(degree, Periodic(placement)))
        for cls in (Line, Flat, Reflect, Periodic):
            specs.append(AxisSpec(2, cls(placement)))
    return specs


def test_interpolation_property():

    rng = np.random.RandomState(0)
    for spec in all_specs():
        samples = rng.normal(size=11)
        if spec.periodic and spec.placement == 'ongrid':
            samples[-1] = samples[0]
        itp = gridinterp.build(samples, spec)
        for j in range(1, 12):
            assert np.isclose(itp.evaluate(j), samples[j - 1], rtol=0, atol=1e-12)


def test_wave_end_to_end():

    itp = gridinterp.build(WAVE, 1)
    assert itp.evaluate(1.5) == 0.5
    assert itp(2.5) == 0.5
    assert itp(4.25) == -0.75

    itp = gridinterp.build(WAVE, 'constant')
    assert itp.evaluate(1.5) == 0
    assert itp.evaluate(1.51) == 1
    assert itp.evaluate(2.5) == 1
    assert itp.evaluate(3.5) == 0

    itp = gridinterp.build(WAVE, 2)
    for j in range(1, 11):
        assert abs(itp(j) - WAVE[j - 1]) < 1e-12


def test_linear_midpoints():

    samples = np.random.RandomState(1).normal(size=8)
    itp = gridinterp.build(samples)
    for ix in range(1, 8):
        expected = 0.5 * (samples[ix - 1] + samples[ix])
        assert np.isclose(itp.evaluate(ix + 0.5), expected)


def test_quadratic_monotone_data():

    samples = np.log(np.arange(1, 11, dtype=np.float64))
    itp = gridinterp.build(samples, AxisSpec(2, Line('oncell')))
    n = samples.size
    for x in np.linspace(1, n, 91):
        j = int(np.floor(x))
        near = samples[max(j - 2, 0):min(j + 2, n)]
        val = itp(x)
        assert near.min() - 1e-12 <= val <= near.max() + 1e-12


def test_quadratic_line_reproduces_lines():

    samples = 0.25 * np.arange(1, 9) - 1
    for placement in ('ongrid', 'oncell'):
        itp = gridinterp.build(samples, AxisSpec(2, Line(placement)))
        lo, hi = itp.bounds[0]
        for x in np.linspace(lo, hi, 29):
            assert np.isclose(itp(x), 0.25 * x - 1, rtol=0, atol=1e-12)


def test_quadratic_flat_boundary():

    samples = np.array([3, 1, 4, 1, 5, 9, 2, 6], np.float64)
    h = 1e-6
    for placement in ('ongrid', 'oncell'):
        itp = gridinterp.build(samples, AxisSpec(2, Flat(placement)))
        lo, hi = itp.bounds[0]
        assert abs(itp(lo + h) - itp(lo)) / h < 1e-3
        assert abs(itp(hi) - itp(hi - h)) / h < 1e-3


def test_separable():

    rng = np.random.RandomState(2)
    samples = rng.normal(size=(6, 7))
    spec0 = AxisSpec(2, Reflect('oncell'))
    spec1 = AxisSpec(2, Line('ongrid'))
    itp = gridinterp.build(samples, [spec0, spec1])

    for x, y in [(1, 1), (2.3, 4.9), (6, 7), (0.6, 3.5), (4.5, 1.2)]:
        # Interpolate each row at y, then the resulting column at x
        column = [gridinterp.build(row, spec1)(y) for row in samples]
        expected = gridinterp.build(column, spec0)(x)
        assert np.isclose(itp(x, y), expected, rtol=0, atol=1e-12)

    # At the grid points it is just the samples
    assert np.allclose(itp.sample(gridinterp.meshgrid(samples)), samples)


def test_mixed_degrees_3d():

    rng = np.random.RandomState(3)
    samples = rng.normal(size=(4, 5, 6))
    axes = [AxisSpec(0), AxisSpec(1), AxisSpec(2, Flat('ongrid'))]
    itp = gridinterp.build(samples, axes)
    assert itp.ndim == 3
    assert itp.grid.shape == (4, 5, 8)
    assert itp.grid.pads == (0, 0, 1)
    assert np.allclose(itp.sample(gridinterp.meshgrid(4, 5, 6)), samples)

    # Nearest along axis 0, linear along axis 1
    expected = 0.5 * (gridinterp.build(samples[1, 2], axes[2])(3.3) +
                      gridinterp.build(samples[1, 3], axes[2])(3.3))
    assert np.isclose(itp(2.2, 3.5, 3.3), expected)


def test_vector_values():

    rng = np.random.RandomState(4)
    samples = rng.normal(size=(9, 3))
    spec = AxisSpec(2, Flat('ongrid'))
    itp = gridinterp.build(samples, [spec])
    assert itp.ndim == 1
    assert itp.shape == (9, )
    assert itp.value_shape == (3, )

    val = itp(4.4)
    assert isinstance(val, np.ndarray)
    assert val.shape == (3, )
    for k in range(3):
        assert np.isclose(val[k], gridinterp.build(samples[:, k], spec)(4.4))

    # Sampling at many points gives the value dimensions last
    xx = np.array([[1.0, 2.5], [3.0, 8.9]])
    result = itp.sample(xx)
    assert result.shape == (2, 2, 3)
    assert np.allclose(result[1, 0], samples[2])


def test_complex_values():

    rng = np.random.RandomState(5)
    real, imag = rng.normal(size=(2, 6, 5))
    spec = AxisSpec(2, Periodic('oncell'))
    itp = gridinterp.build(real + 1j * imag, spec)
    assert itp.dtype == np.complex128
    itp_r = gridinterp.build(real, spec)
    itp_i = gridinterp.build(imag, spec)
    for point in [(1, 1), (3.7, 2.2), (0.5, 5.5)]:
        val = itp(*point)
        assert np.isclose(val, itp_r(*point) + 1j * itp_i(*point))


def test_dtypes():

    itp = gridinterp.build(np.arange(5))
    assert itp.dtype == np.float64
    assert itp(2.5) == 1.5

    itp = gridinterp.build(np.arange(5, dtype=np.float32), 2)
    assert itp.dtype == np.float64

    with pytest.raises(TypeError):
        gridinterp.build(['a', 'b', 'c'])


def test_sample():

    samples = np.arange(12, dtype=np.float64).reshape(3, 4)
    itp = gridinterp.build(samples)

    # Tuple or list of arrays
    yy, xx = gridinterp.meshgrid([1.5, 2.5], [1, 4])
    for samples_ in [(yy, xx), [yy, xx]]:
        result = itp.sample(samples_)
        assert result.shape == (2, 2)
        assert result.tolist() == [[2.0, 5.0], [6.0, 9.0]]

    with pytest.raises(ValueError):
        itp.sample(yy)  # not a tuple
    with pytest.raises(ValueError):
        itp.sample((yy, ))
    with pytest.raises(ValueError):
        itp.sample((yy, xx[:1]))
    with pytest.raises(OutOfDomain):
        itp.sample((yy - 1, xx))


def test_evaluate_args():

    itp = gridinterp.build(np.arange(12.0).reshape(3, 4))
    assert itp(2, 3) == 6.0
    assert itp((2, 3)) == 6.0
    assert itp.evaluate([2, 3]) == 6.0

    with pytest.raises(ValueError):
        itp(2)
    with pytest.raises(ValueError):
        itp(2, 3, 4)
    with pytest.raises(ValueError):
        itp('a', 3)


def test_out_of_domain():

    itp = gridinterp.build(np.zeros((4, 5)), 2)
    assert itp.bounds == ((1.0, 4.0), (1.0, 5.0))
    itp(1, 5)
    itp(4, 1)

    with pytest.raises(OutOfDomain) as err:
        itp(2, 5.01)
    assert err.value.axis == 1
    with pytest.raises(OutOfDomain) as err:
        itp(0.99, 2)
    assert err.value.axis == 0
    with pytest.raises(OutOfDomain):
        itp(np.nan, 2)
    with pytest.raises(ValueError):
        itp(-1, 2)  # OutOfDomain is a ValueError

    # On-cell has a wider domain
    itp = gridinterp.build(np.zeros(5), AxisSpec(0, placement='oncell'))
    assert itp.bounds == ((0.5, 5.5), )
    assert itp(0.5) == 0
    assert itp(5.5) == 0
    with pytest.raises(OutOfDomain):
        itp(5.6)


def test_axis_specs():

    samples = np.zeros((5, 6))

    itp = gridinterp.build(samples, [(2, 'flat', 'oncell'), 'linear'])
    assert itp.axes[0] == AxisSpec(2, Flat('oncell'))
    assert itp.axes[1] == AxisSpec(1, None, 'ongrid')

    itp = gridinterp.build(samples, {'degree': 'quadratic', 'boundary': 'reflect'})
    assert itp.axes[0] == AxisSpec(2, Reflect('ongrid'))
    assert itp.axes[1] == itp.axes[0]

    # Defaults from the parameters
    params = gridinterp.get_default_params()
    params.boundary = 'flat'
    params.placement = 'oncell'
    itp = gridinterp.build(samples, 2, params)
    assert itp.axes[0].boundary == Flat('oncell')
    assert itp.bounds[1] == (0.5, 6.5)

    # A boundary condition carries its own placement
    itp = gridinterp.build(samples, AxisSpec(2, Line('oncell')),
                           {'placement': 'ongrid'})
    assert itp.axes[0].placement == 'oncell'

    # Periodic marks linear axes as periodic
    itp = gridinterp.build(samples, AxisSpec(1, 'periodic'))
    assert itp.axes[0].periodic
    assert itp.grid.shape == (7, 8)


def test_construction_errors():

    samples = np.zeros((5, 6))

    with pytest.raises(ValueError):
        gridinterp.build(np.array(3.0))
    with pytest.raises(ConfigurationError):
        gridinterp.build(samples, [1, 1, 1])
    with pytest.raises(ConfigurationError):
        gridinterp.build(samples, [])
    with pytest.raises(ConfigurationError):
        gridinterp.build(samples, Line())
    with pytest.raises(ConfigurationError):
        gridinterp.build(samples, AxisSpec(2, Flat('oncell'), 'ongrid'))
    with pytest.raises(ConfigurationError):
        gridinterp.build(samples, 2, {'boundary': None})
    with pytest.raises(ConfigurationError):
        gridinterp.build(samples, 2, {'foo': 3})
    with pytest.raises(ConfigurationError):
        gridinterp.build(samples, 2, {'workers': 0})
    with pytest.raises(ConfigurationError):
        gridinterp.build(samples, 1, {'placement': 'somewhere'})
    with pytest.raises(UnsupportedDegree):
        gridinterp.build(samples, 3)
    with pytest.raises(UnsupportedDegree):
        gridinterp.build(samples, 'cubic')

    # Boundary conditions other than Periodic make no sense for linear
    with pytest.raises(ConfigurationError) as err:
        gridinterp.build(samples, [1, AxisSpec(1, 'flat')])
    assert err.value.axis == 1

    # Too few samples
    with pytest.raises(SingularSystem) as err:
        gridinterp.build(np.zeros((5, 2)), 2)
    assert err.value.axis == 1
    with pytest.raises(SingularSystem):
        gridinterp.build(np.zeros(1), 1)
    gridinterp.build(np.zeros(1), 0)


def test_grid():

    samples = np.arange(20, dtype=np.float64).reshape(4, 5)
    itp = gridinterp.build(samples, [AxisSpec(2, Line()), AxisSpec(1)])
    grid = itp.grid
    assert isinstance(grid, gridinterp.CoefficientGrid)
    assert grid.ndim == 2
    assert grid.shape == (6, 5)
    assert grid.sizes == (4, 5)
    assert grid.pads == (1, 0)
    assert grid.strides == (5, 1)
    assert grid.value_shape == ()
    assert grid.values.shape == (6, 5)

    # Linear data is not changed by a Line boundary
    assert np.allclose(grid.values[1:-1], samples)
    assert np.allclose(grid.values[0], samples[0] - 5)

    # Read-only
    with pytest.raises(ValueError):
        grid.values[0, 0] = 1.0
    assert not grid.values.flags.writeable

    # Index arithmetic
    assert grid.ravel_index((2, 3)) == 13
    assert grid.unravel_index(13) == (2, 3)
    for flat in range(30):
        assert grid.ravel_index(grid.unravel_index(flat)) == flat
    assert grid[2, 3] == grid.values[2, 3]
    with pytest.raises(IndexError):
        grid[6, 0]
    with pytest.raises(IndexError):
        grid[0, -1]
    with pytest.raises(IndexError):
        grid[0]
    with pytest.raises(IndexError):
        grid.unravel_index(30)


def test_grid_vector_item():

    samples = np.random.RandomState(6).normal(size=(4, 2))
    grid = gridinterp.build(samples, [0]).grid
    item = grid[1]
    assert item.shape == (2, )
    assert np.all(item == samples[1])
    item[0] = 100  # a copy
    assert grid[1][0] == samples[1, 0]


def test_workers():

    samples = np.random.RandomState(7).normal(size=(30, 40))
    axes = AxisSpec(2, Flat('oncell'))
    itp1 = gridinterp.build(samples, axes)
    itp3 = gridinterp.build(samples, axes, {'workers': 3})
    assert np.all(itp1.grid.values == itp3.grid.values)


def test_concurrent_evaluation():

    rng = np.random.RandomState(8)
    samples = rng.normal(size=(20, 20))
    itp = gridinterp.build(samples, AxisSpec(2, Reflect('ongrid')))
    points = [tuple(p) for p in rng.uniform(1, 20, size=(200, 2))]
    expected = [itp(*p) for p in points]

    with ThreadPoolExecutor(max_workers=4) as executor:
        results = list(executor.map(lambda p: itp(*p), points))
    assert results == expected


def test_repr():

    itp = gridinterp.build(np.zeros((3, 4)), [2, 0])
    assert 'Interpolant' in repr(itp)
    assert '(2, 0)' in repr(itp)
    assert 'CoefficientGrid' in repr(itp.grid)
    assert 'AxisSpec' in repr(itp.axes[0])


def test_periodic_quadratic_three_samples():

    itp = gridinterp.build([1.0, 2.0, 1.0], AxisSpec(2, Periodic('ongrid')))
    assert [itp(j) for j in (1, 2, 3)] == pytest.approx([1.0, 2.0, 1.0])
    assert itp(1.5) == pytest.approx(itp(2.5))
    ex = gridinterp.wrap(itp, 'periodic')
    assert ex(3.25) == pytest.approx(itp(1.25))
