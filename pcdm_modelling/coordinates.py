"""Observation point coordinates on the half-space surface."""

import dataclasses
from collections.abc import Sequence

import numpy as np
import numpy.typing as npt


@dataclasses.dataclass(frozen=True, eq=False)
class HorizontalCoordinates:
    """Easting and northing of a set of observation points.

    The arrays are owned copies of whatever the caller supplied, so later
    changes to the caller's sequences do not affect a computation.

    Attributes
    ----------
    east : np.ndarray
        Easting of each observation point.
    north : np.ndarray
        Northing of each observation point.
    """

    east: np.ndarray
    north: np.ndarray

    @classmethod
    def from_sequences(
        cls, east: npt.ArrayLike, north: npt.ArrayLike
    ) -> "HorizontalCoordinates":
        """Copy two coordinate sequences into a new instance.

        Parameters
        ----------
        east : array-like
            The easting values.
        north : array-like
            The northing values.

        Returns
        -------
        HorizontalCoordinates
            Coordinates backed by read-only float64 copies of the inputs.
        """
        east = np.array(east, dtype=np.float64).ravel()
        north = np.array(north, dtype=np.float64).ravel()
        east.flags.writeable = False
        north.flags.writeable = False
        return cls(east=east, north=north)

    @classmethod
    def empty(cls) -> "HorizontalCoordinates":  # numpydoc ignore=RT01
        """Coordinates without any points."""
        return cls.from_sequences([], [])

    @property
    def is_consistent(self) -> bool:  # numpydoc ignore=RT01
        """bool: True if east and north have the same number of values."""
        return len(self.east) == len(self.north)

    def __len__(self) -> int:
        if not self.is_consistent:
            return 0
        return len(self.east)


def _axis_values(minimum: float, step: float, maximum: float) -> np.ndarray:
    if step <= 0:
        raise ValueError(f"Grid step must be positive, got {step}.")
    if maximum < minimum:
        raise ValueError(f"Grid bounds are reversed: {minimum} > {maximum}.")
    # The upper bound is included if it is within a small fraction of a step.
    count = int(np.floor((maximum - minimum) / step + 1e-4)) + 1
    return np.arange(count) * step + minimum


def regular_grid(
    east_min: float,
    east_step: float,
    east_max: float,
    north_min: float,
    north_step: float,
    north_max: float,
) -> HorizontalCoordinates:
    """Build a regular grid of observation points.

    Points are ordered with easting varying slowest, i.e. all northings for
    the first easting come first.

    Parameters
    ----------
    east_min : float
        The first easting value.
    east_step : float
        The spacing between eastings.
    east_max : float
        The last easting value (inclusive).
    north_min : float
        The first northing value.
    north_step : float
        The spacing between northings.
    north_max : float
        The last northing value (inclusive).

    Returns
    -------
    HorizontalCoordinates
        The grid points.

    Raises
    ------
    ValueError
        If a step is not positive or a maximum is below its minimum.
    """
    east_values = _axis_values(east_min, east_step, east_max)
    north_values = _axis_values(north_min, north_step, north_max)
    east, north = np.meshgrid(east_values, north_values, indexing="ij")
    return HorizontalCoordinates.from_sequences(east.ravel(), north.ravel())


def as_coordinates(
    coordinates: HorizontalCoordinates | Sequence[npt.ArrayLike],
) -> HorizontalCoordinates:
    """Coerce a coordinate pair into `HorizontalCoordinates`.

    Parameters
    ----------
    coordinates : HorizontalCoordinates or sequence of two array-likes
        The coordinates to convert.

    Returns
    -------
    HorizontalCoordinates
        An owned copy of the coordinates.
    """
    if isinstance(coordinates, HorizontalCoordinates):
        return coordinates
    east, north = coordinates
    return HorizontalCoordinates.from_sequences(east, north)
