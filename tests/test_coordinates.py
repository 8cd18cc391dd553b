import numpy as np
import pytest
from hypothesis import given
from hypothesis import strategies as st

from pcdm_modelling import coordinates
from pcdm_modelling.coordinates import HorizontalCoordinates


def test_regular_grid_order_and_size():
    """The grid varies northing fastest, with inclusive bounds."""
    grid = coordinates.regular_grid(-7, 0.1, 7, -5, 0.1, 5)
    assert len(grid) == 141 * 101 == 14241
    assert grid.east[0] == pytest.approx(-7)
    assert grid.north[0] == pytest.approx(-5)
    assert grid.east[1] == pytest.approx(-7)
    assert grid.north[1] == pytest.approx(-4.9)
    assert grid.east[101] == pytest.approx(-6.9)
    assert grid.north[101] == pytest.approx(-5)
    assert grid.east[-1] == pytest.approx(7)
    assert grid.north[-1] == pytest.approx(5)


@given(
    minimum=st.floats(-100, 100),
    step=st.floats(0.01, 10),
    count=st.integers(1, 50),
)
def test_regular_grid_includes_upper_bound(minimum: float, step: float, count: int):
    maximum = minimum + (count - 1) * step
    grid = coordinates.regular_grid(minimum, step, maximum, 0, 1, 0)
    assert len(grid) == count
    assert grid.east[-1] == pytest.approx(maximum)
    assert np.all(grid.north == 0)


@pytest.mark.parametrize(
    "bounds",
    [(0, 0, 1, 0, 1, 1), (0, -1, 1, 0, 1, 1), (1, 0.1, 0, 0, 1, 1)],
)
def test_invalid_grids_raise(bounds: tuple):
    with pytest.raises(ValueError):
        coordinates.regular_grid(*bounds)


def test_coordinates_are_copied():
    east = [0.0, 1.0, 2.0]
    north = np.array([3.0, 4.0, 5.0])
    horizontal_coords = HorizontalCoordinates.from_sequences(east, north)
    east[0] = 10.0
    north[0] = 10.0
    assert horizontal_coords.east[0] == 0.0
    assert horizontal_coords.north[0] == 3.0
    with pytest.raises(ValueError):
        horizontal_coords.east[0] = 1.0


def test_inconsistent_coordinates():
    horizontal_coords = HorizontalCoordinates.from_sequences([0, 1, 2], [0, 1, 2, 3])
    assert not horizontal_coords.is_consistent
    assert len(horizontal_coords) == 0


def test_empty_coordinates():
    horizontal_coords = HorizontalCoordinates.empty()
    assert horizontal_coords.is_consistent
    assert len(horizontal_coords) == 0


def test_as_coordinates():
    horizontal_coords = coordinates.as_coordinates(([1, 2], [3, 4]))
    assert isinstance(horizontal_coords, HorizontalCoordinates)
    assert coordinates.as_coordinates(horizontal_coords) is horizontal_coords
