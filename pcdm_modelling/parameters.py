"""Source and computation parameters for the point Compound Dislocation Model.

Classes
-------
PointCDMParameters:
    Position, depth, orientation and potencies of a point CDM.

Parameters:
    Source parameters together with the Poisson's ratio of the half-space.
"""

import dataclasses

import numpy as np

# Relative tolerance for parameter equality. Parameters that compare equal
# under this tolerance do not invalidate previously computed results.
EQUALITY_RTOL = 1e-12

POTENCY_SIGN_MESSAGE = "Potencies (DV x, y, z) must have the same sign."
DEPTH_MESSAGE = "Depth must be a positive value."


def _fuzzy_equal(a: np.ndarray, b: np.ndarray) -> bool:
    return bool(np.all(np.isclose(a, b, rtol=EQUALITY_RTOL, atol=0.0)))


@dataclasses.dataclass(frozen=True, eq=False)
class PointCDMParameters:
    """Parameters describing a point CDM source.

    Attributes
    ----------
    horizontal_coord : tuple[float, float]
        Easting and northing of the source, in the same coordinate
        system and unit as the observation points.
    depth : float
        Depth of the source below the surface (positive down).
    omega : tuple[float, float, float]
        Clockwise rotations about the x, y and z axes (degrees).
    dv : tuple[float, float, float]
        Potencies of the point tensile dislocations that, before the
        rotation is applied, are normal to the x, y and z axes. Potency
        has the unit of volume (displacement unit cubed).

    Instances compare equal when all values agree to a relative tolerance
    of `EQUALITY_RTOL`. That relation has no consistent hash, so instances
    are not hashable.
    """

    horizontal_coord: tuple[float, float] = (0.0, 0.0)
    depth: float = 0.0
    omega: tuple[float, float, float] = (0.0, 0.0, 0.0)
    dv: tuple[float, float, float] = (0.0, 0.0, 0.0)

    def __post_init__(self):
        object.__setattr__(
            self, "horizontal_coord", tuple(float(v) for v in self.horizontal_coord)
        )
        object.__setattr__(self, "depth", float(self.depth))
        object.__setattr__(self, "omega", tuple(float(v) for v in self.omega))
        object.__setattr__(self, "dv", tuple(float(v) for v in self.dv))
        if len(self.horizontal_coord) != 2:
            raise ValueError("horizontal_coord must have exactly two values.")
        if len(self.omega) != 3 or len(self.dv) != 3:
            raise ValueError("omega and dv must have exactly three values.")

    @property
    def total_potency(self) -> float:  # numpydoc ignore=RT01
        """float: The summed potency of the three dislocations."""
        return sum(self.dv)

    def validate(self) -> str:
        """Check the parameters for physical consistency.

        Returns
        -------
        str
            An empty string if the parameters are valid, otherwise a
            user-friendly message naming the rule that failed.
        """
        dv = np.asarray(self.dv)
        if not np.all(dv >= 0) and not np.all(dv <= 0):
            return POTENCY_SIGN_MESSAGE
        if self.depth < 0:
            return DEPTH_MESSAGE
        return ""

    def is_valid(self) -> bool:
        """Check if the parameters are valid.

        Returns
        -------
        bool
            True if all potencies share a sign and the depth is not negative.
        """
        return not self.validate()

    def as_array(self) -> np.ndarray:
        """Flatten all scalar fields into one array.

        Returns
        -------
        np.ndarray
            The values (east, north, depth, omega x, y, z, dv x, y, z).
        """
        return np.array(
            [*self.horizontal_coord, self.depth, *self.omega, *self.dv],
            dtype=np.float64,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PointCDMParameters):
            return NotImplemented
        return _fuzzy_equal(self.as_array(), other.as_array())

    __hash__ = None


@dataclasses.dataclass(frozen=True, eq=False)
class Parameters:
    """All inputs of a pCDM computation besides the observation points.

    Attributes
    ----------
    source_parameters : PointCDMParameters
        The point CDM source.
    nu : float
        Poisson's ratio of the elastic half-space. Conventionally in
        (0, 0.5), but not range checked.

    Compares like `PointCDMParameters` and is not hashable either.
    """

    source_parameters: PointCDMParameters = dataclasses.field(
        default_factory=PointCDMParameters
    )
    nu: float = 0.25

    def as_array(self) -> np.ndarray:
        """Flatten all scalar fields into one array.

        Returns
        -------
        np.ndarray
            The source parameter values followed by Poisson's ratio.
        """
        return np.append(self.source_parameters.as_array(), float(self.nu))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Parameters):
            return NotImplemented
        return _fuzzy_equal(self.as_array(), other.as_array())

    __hash__ = None
