"""Surface displacements of a point Compound Dislocation Model (pCDM).

A pCDM is composed of three mutually orthogonal point tensile dislocations
(PTDs) in an elastic half-space. Before rotation the PTDs are normal to the
x, y and z axes; the triad is then rotated by the angles omega and the
displacements of the three PTDs are superposed.

Based on the pCDM MATLAB script by Mehdi Nikkhoo
(http://volcanodeformation.com/software.html).

Classes
-------
State:
    Lifecycle state of a `PCDMBackend`.

DisplacementResults:
    East, north and vertical displacement arrays.

PTDOrientation:
    Strike and dip of one of the three PTDs.

PCDMBackend:
    Holds inputs and results of a pCDM computation and tracks whether the
    results are up to date.
"""

import logging
from collections.abc import Callable, Sequence
from enum import Enum, auto
from typing import NamedTuple

import numpy as np
import numpy.typing as npt
import pandas as pd

from pcdm_modelling.coordinates import HorizontalCoordinates, as_coordinates
from pcdm_modelling.parameters import Parameters, PointCDMParameters
from pcdm_modelling.ptd import ptd_surface_displacement

logger = logging.getLogger(__name__)


class PCDMError(Exception):
    """Base error for pCDM modelling."""

    pass


class ResultsUnavailableError(PCDMError):
    """Raised when results are requested before they have been computed."""

    pass


class State(Enum):
    """Lifecycle state of a `PCDMBackend`."""

    UNINITIALIZED = auto()
    """No inputs have been set."""

    PARAMETERS_CHANGED = auto()
    """Inputs are set, but results are not computed for them."""

    INVALID_PARAMETERS = auto()
    """The coordinates or parameters are invalid."""

    RESULTS_READY = auto()
    """Results are computed for the current inputs."""


class DisplacementResults(NamedTuple):
    """Surface displacement at each observation point."""

    east: np.ndarray
    """Displacement towards east."""

    north: np.ndarray
    """Displacement towards north."""

    vertical: np.ndarray
    """Displacement upwards."""

    @classmethod
    def empty(cls) -> "DisplacementResults":  # numpydoc ignore=RT01
        """Results without any values."""
        return cls(np.empty(0), np.empty(0), np.empty(0))

    def to_dataframe(self) -> pd.DataFrame:
        """Convert the results into a dataframe.

        Returns
        -------
        pd.DataFrame
            A dataframe with columns 'ue', 'un' and 'uv', one row per
            observation point.
        """
        return pd.DataFrame({"ue": self.east, "un": self.north, "uv": self.vertical})


class PTDOrientation(NamedTuple):
    """Orientation of a single point tensile dislocation."""

    strike: float
    """Strike (degrees)."""

    dip: float
    """Dip (radians)."""


StateListener = Callable[[State, State], None]


def rotation_matrix(omega: Sequence[float]) -> np.ndarray:
    """Rotation matrix of the dislocation triad.

    The angles are clockwise rotations, so the matrix is the product of the
    counter-clockwise rotations by the negated angles, Rz @ Ry @ Rx.

    Parameters
    ----------
    omega : sequence of float
        Clockwise rotation about the x, y and z axes (degrees).

    Returns
    -------
    np.ndarray
        A (3 x 3) rotation matrix.
    """
    a, b, c = -np.radians(np.asarray(omega, dtype=np.float64))
    rx = np.array([[1, 0, 0], [0, np.cos(a), -np.sin(a)], [0, np.sin(a), np.cos(a)]])
    ry = np.array([[np.cos(b), 0, np.sin(b)], [0, 1, 0], [-np.sin(b), 0, np.cos(b)]])
    rz = np.array([[np.cos(c), -np.sin(c), 0], [np.sin(c), np.cos(c), 0], [0, 0, 1]])
    return rz @ ry @ rx


def ptd_orientations(omega: Sequence[float]) -> list[PTDOrientation]:
    """Derive the strike and dip of the three PTDs of a rotated triad.

    Parameters
    ----------
    omega : sequence of float
        Clockwise rotation about the x, y and z axes (degrees).

    Returns
    -------
    list[PTDOrientation]
        One orientation for each of the PTDs that are, before rotation,
        normal to the x, y and z axes.
    """
    rotation = rotation_matrix(omega)
    orientations = []
    for k in range(3):
        strike_vector = np.array([-rotation[1, k], rotation[0, k]])
        # A vertical normal vector has no horizontal component, normalising
        # it yields NaN and the strike is undefined.
        with np.errstate(invalid="ignore", divide="ignore"):
            strike_vector = strike_vector / np.linalg.norm(strike_vector)
        strike = np.degrees(np.arctan2(strike_vector[0], strike_vector[1]))
        if np.isnan(strike):
            strike = 0.0
        dip = np.arccos(np.clip(rotation[2, k], -1.0, 1.0))
        orientations.append(PTDOrientation(float(strike), float(dip)))
    return orientations


def pcdm_displacement_contributions(
    east: npt.ArrayLike,
    north: npt.ArrayLike,
    source_parameters: PointCDMParameters,
    nu: float,
) -> np.ndarray:
    """Compute the displacement of each of the three PTDs of a pCDM.

    PTDs with zero potency are not evaluated; their contribution is exactly
    zero.

    Parameters
    ----------
    east : array-like
        Easting of the observation points.
    north : array-like
        Northing of the observation points.
    source_parameters : PointCDMParameters
        The pCDM source.
    nu : float
        Poisson's ratio.

    Returns
    -------
    np.ndarray
        Array of shape (3, 3, n): the PTD (normal to x, y, z before
        rotation), the component (east, north, vertical) and the point.
    """
    east = np.asarray(east, dtype=np.float64)
    contributions = np.zeros((3, 3, east.size))
    for k, (orientation, potency) in enumerate(
        zip(ptd_orientations(source_parameters.omega), source_parameters.dv)
    ):
        if potency == 0:
            continue
        contributions[k] = ptd_surface_displacement(
            east,
            north,
            source_parameters.horizontal_coord,
            source_parameters.depth,
            orientation.strike,
            orientation.dip,
            potency,
            nu,
        )
    return contributions


def pcdm_surface_displacement(
    east: npt.ArrayLike,
    north: npt.ArrayLike,
    source_parameters: PointCDMParameters,
    nu: float,
) -> DisplacementResults:
    """Compute the surface displacement of a pCDM.

    Parameters
    ----------
    east : array-like
        Easting of the observation points.
    north : array-like
        Northing of the observation points.
    source_parameters : PointCDMParameters
        The pCDM source.
    nu : float
        Poisson's ratio.

    Returns
    -------
    DisplacementResults
        The sum of the displacements of the three PTDs.
    """
    total = pcdm_displacement_contributions(east, north, source_parameters, nu).sum(
        axis=0
    )
    return DisplacementResults(*total)


class PCDMBackend:
    """Inputs, results and lifecycle state of a pCDM computation.

    Set the observation points with `set_horizontal_coords` and the source
    with `set_parameters`, then call `run`. Results are only available in
    `State.RESULTS_READY`; any change of inputs discards them.

    The backend is not thread-safe. To compute in the background, run a
    whole backend on a worker thread and take the results afterwards.
    """

    def __init__(self):
        self._state = State.UNINITIALIZED
        self._coordinates = HorizontalCoordinates.empty()
        self._parameters = Parameters()
        self._results = DisplacementResults.empty()
        self._error_message = ""
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> State:  # numpydoc ignore=RT01
        """State: The current lifecycle state."""
        return self._state

    @property
    def error_message(self) -> str:  # numpydoc ignore=RT01
        """str: Why the inputs are invalid, or an empty string."""
        return self._error_message

    @property
    def horizontal_coords(self) -> HorizontalCoordinates:  # numpydoc ignore=RT01
        """HorizontalCoordinates: The observation points."""
        return self._coordinates

    @property
    def parameters(self) -> Parameters:  # numpydoc ignore=RT01
        """Parameters: The source parameters and Poisson's ratio."""
        return self._parameters

    @property
    def results(self) -> DisplacementResults:  # numpydoc ignore=RT01
        """DisplacementResults: Read-only results, empty unless results are ready."""
        views = []
        for component in self._results:
            view = component.view()
            view.flags.writeable = False
            views.append(view)
        return DisplacementResults(*views)

    def add_state_listener(self, listener: StateListener) -> None:
        """Register a callback for state changes.

        Parameters
        ----------
        listener : Callable[[State, State], None]
            Called with the old and new state whenever the state changes.
        """
        self._listeners.append(listener)

    def remove_state_listener(self, listener: StateListener) -> None:
        """Unregister a state change callback.

        Parameters
        ----------
        listener : Callable[[State, State], None]
            A callback previously passed to `add_state_listener`.
        """
        self._listeners.remove(listener)

    def _set_state(self, state: State) -> State:
        if state != State.RESULTS_READY:
            self._results = DisplacementResults.empty()
        if state == self._state:
            return state
        old_state = self._state
        self._state = state
        logger.debug("pCDM backend state %s -> %s", old_state.name, state.name)
        for listener in list(self._listeners):
            listener(old_state, state)
        return state

    def _invalid(self, message: str) -> State:
        self._error_message = message
        logger.warning("Invalid pCDM inputs: %s", message)
        return self._set_state(State.INVALID_PARAMETERS)

    def _check_parameters(self) -> State:
        message = self._parameters.source_parameters.validate()
        if message:
            return self._invalid(message)
        self._error_message = ""
        return self._set_state(State.PARAMETERS_CHANGED)

    def set_horizontal_coords(
        self, coordinates: HorizontalCoordinates | Sequence[npt.ArrayLike]
    ) -> State:
        """Set the observation points.

        Parameters
        ----------
        coordinates : HorizontalCoordinates or sequence of two array-likes
            The easting and northing of the observation points. The values
            are copied. Arrays of different lengths are rejected and leave
            the backend without observation points.

        Returns
        -------
        State
            The new state.
        """
        coordinates = as_coordinates(coordinates)
        if not coordinates.is_consistent:
            self._coordinates = HorizontalCoordinates.empty()
            return self._invalid("Input X, Y must have same size.")
        self._coordinates = coordinates
        return self._check_parameters()

    def set_parameters(self, parameters: Parameters) -> State:
        """Set the source parameters and Poisson's ratio.

        Parameters
        ----------
        parameters : Parameters
            The new parameters. Nothing changes if they are equal to the
            current parameters.

        Returns
        -------
        State
            The new state.
        """
        if parameters == self._parameters and self._state != State.UNINITIALIZED:
            return self._state
        self._parameters = parameters
        return self._check_parameters()

    def invalidate(self) -> State:
        """Discard computed results.

        Returns
        -------
        State
            The new state.
        """
        if self._state == State.RESULTS_READY:
            return self._set_state(State.PARAMETERS_CHANGED)
        return self._state

    def run(self) -> State:
        """Compute the results for the current inputs, if required.

        Returns
        -------
        State
            The new state, `State.RESULTS_READY` after a successful
            computation.
        """
        if self._state in (State.INVALID_PARAMETERS, State.RESULTS_READY):
            return self._state

        coordinates = self._coordinates
        if not coordinates.is_consistent:
            return self._invalid("Input X, Y must have same size.")
        if len(coordinates) == 0:
            return self._invalid("No input set.")

        parameters = self._parameters
        logger.debug("Computing pCDM displacements for %d points", len(coordinates))
        results = pcdm_surface_displacement(
            coordinates.east,
            coordinates.north,
            parameters.source_parameters,
            parameters.nu,
        )
        self._results = results
        return self._set_state(State.RESULTS_READY)

    def take_results(self) -> DisplacementResults:
        """Move the results out of the backend.

        The backend no longer holds the results afterwards and returns to
        `State.PARAMETERS_CHANGED`.

        Returns
        -------
        DisplacementResults
            The computed results.

        Raises
        ------
        ResultsUnavailableError
            If the backend is not in `State.RESULTS_READY`.
        """
        if self._state != State.RESULTS_READY:
            raise ResultsUnavailableError(
                f"No results to take in state {self._state.name}."
            )
        results = self._results
        self._results = DisplacementResults.empty()
        self._set_state(State.PARAMETERS_CHANGED)
        return results
