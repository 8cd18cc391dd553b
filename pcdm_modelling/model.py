"""A named pCDM parametrization that computes its results in the background.

A `PCDMModel` pairs a set of source parameters with the observation points
and Poisson's ratio it is evaluated for, and caches the displacements once
they are computed. Changing any input invalidates the cached results.

Examples
--------
>>> grid = coordinates.regular_grid(-7, 0.1, 7, -5, 0.1, 5)
>>> model = PCDMModel(grid, name="inflation")
>>> model.set_parameters(PointCDMParameters(depth=2.75, dv=(1e-3, 1e-3, 1e-3)))
>>> future = model.request_results_async()
>>> model.wait_for_results()
True
"""

import dataclasses
import datetime
import logging
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import Executor, Future, ThreadPoolExecutor

import numpy.typing as npt

from pcdm_modelling import coordinates
from pcdm_modelling.backend import DisplacementResults, PCDMBackend, State
from pcdm_modelling.parameters import Parameters, PointCDMParameters

logger = logging.getLogger(__name__)

_executor: ThreadPoolExecutor | None = None
_executor_lock = threading.Lock()


def default_executor() -> ThreadPoolExecutor:
    """Return the shared worker used for background computations.

    Returns
    -------
    ThreadPoolExecutor
        A single worker thread pool, created on first use.
    """
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="pcdm-compute"
            )
        return _executor


@dataclasses.dataclass
class _Listeners:
    name_changed: list[Callable[[str], None]] = dataclasses.field(
        default_factory=list
    )
    request_completed: list[Callable[[], None]] = dataclasses.field(
        default_factory=list
    )


class PCDMModel:
    """A pCDM parametrization with cached results.

    Parameters
    ----------
    horizontal_coords : HorizontalCoordinates or sequence of two array-likes
        The observation points.
    poissons_ratio : float, optional
        Poisson's ratio of the half-space. Defaults to 0.25.
    parameters : PointCDMParameters, optional
        The source parameters. Defaults to `PointCDMParameters()`.
    name : str, optional
        A user-defined name. Models are identified by their timestamp.
    timestamp : datetime.datetime, optional
        Creation time of the model. Defaults to now.
    """

    def __init__(
        self,
        horizontal_coords: coordinates.HorizontalCoordinates
        | Sequence[npt.ArrayLike],
        poissons_ratio: float = 0.25,
        parameters: PointCDMParameters | None = None,
        name: str = "",
        timestamp: datetime.datetime | None = None,
    ):
        self._coordinates = coordinates.as_coordinates(horizontal_coords)
        self._nu = poissons_ratio
        self._parameters = parameters or PointCDMParameters()
        self._name = name
        self._timestamp = timestamp or datetime.datetime.now()
        self._results = DisplacementResults.empty()
        self._error_message = ""
        self._lock = threading.Lock()
        # Incremented on every invalidation, so that a computation started
        # for older inputs does not store its results.
        self._generation = 0
        self._pending: Future | None = None
        self._listeners = _Listeners()

    @property
    def timestamp(self) -> datetime.datetime:  # numpydoc ignore=RT01
        """datetime.datetime: The creation time, identifying the model."""
        return self._timestamp

    @property
    def name(self) -> str:  # numpydoc ignore=RT01
        """str: The user-defined name."""
        return self._name

    def set_name(self, name: str) -> None:
        """Rename the model, notifying name listeners if it changed.

        Parameters
        ----------
        name : str
            The new name.
        """
        if name == self._name:
            return
        self._name = name
        for listener in list(self._listeners.name_changed):
            listener(name)

    def add_name_listener(self, listener: Callable[[str], None]) -> None:
        """Call `listener` with the new name whenever the name changes.

        Parameters
        ----------
        listener : Callable[[str], None]
            The callback.
        """
        self._listeners.name_changed.append(listener)

    def add_completion_listener(self, listener: Callable[[], None]) -> None:
        """Call `listener` whenever a results request is completed.

        The listener may be called from the worker thread.

        Parameters
        ----------
        listener : Callable[[], None]
            The callback.
        """
        self._listeners.request_completed.append(listener)

    @property
    def parameters(self) -> PointCDMParameters:  # numpydoc ignore=RT01
        """PointCDMParameters: The source parameters."""
        return self._parameters

    def set_parameters(self, source_parameters: PointCDMParameters) -> None:
        """Set the source parameters, invalidating results if they changed.

        Parameters
        ----------
        source_parameters : PointCDMParameters
            The new source parameters.
        """
        if source_parameters == self._parameters:
            return
        self._parameters = source_parameters
        self.invalidate_results()

    @property
    def horizontal_coords(self) -> coordinates.HorizontalCoordinates:  # numpydoc ignore=RT01
        """HorizontalCoordinates: The observation points."""
        return self._coordinates

    def set_horizontal_coords(
        self,
        horizontal_coords: coordinates.HorizontalCoordinates
        | Sequence[npt.ArrayLike],
    ) -> None:
        """Replace the observation points, invalidating results.

        Parameters
        ----------
        horizontal_coords : HorizontalCoordinates or sequence of two array-likes
            The new observation points.
        """
        self._coordinates = coordinates.as_coordinates(horizontal_coords)
        self.invalidate_results()

    @property
    def poissons_ratio(self) -> float:  # numpydoc ignore=RT01
        """float: Poisson's ratio of the half-space."""
        return self._nu

    def set_poissons_ratio(self, nu: float) -> None:
        """Set Poisson's ratio, invalidating results if it changed.

        Parameters
        ----------
        nu : float
            The new Poisson's ratio.
        """
        if nu == self._nu:
            return
        self._nu = nu
        self.invalidate_results()

    @property
    def error_message(self) -> str:  # numpydoc ignore=RT01
        """str: Why the last computation failed, or an empty string."""
        return self._error_message

    @property
    def has_results(self) -> bool:  # numpydoc ignore=RT01
        """bool: True if valid results are available."""
        with self._lock:
            return _results_are_valid(self._results)

    @property
    def results(self) -> DisplacementResults:  # numpydoc ignore=RT01
        """DisplacementResults: The cached results, empty if not computed."""
        with self._lock:
            return self._results

    def invalidate_results(self) -> None:
        """Discard cached results."""
        with self._lock:
            self._generation += 1
            self._results = DisplacementResults.empty()

    def _compute(
        self,
        generation: int,
        horizontal_coords: coordinates.HorizontalCoordinates,
        parameters: Parameters,
    ) -> bool:
        try:
            return self._run_backend(generation, horizontal_coords, parameters)
        finally:
            self._notify_completed()

    def _run_backend(
        self,
        generation: int,
        horizontal_coords: coordinates.HorizontalCoordinates,
        parameters: Parameters,
    ) -> bool:
        backend = PCDMBackend()
        backend.set_horizontal_coords(horizontal_coords)
        backend.set_parameters(parameters)
        if backend.run() != State.RESULTS_READY:
            logger.warning(
                "pCDM model %r could not be computed: %s",
                self._name,
                backend.error_message,
            )
            with self._lock:
                if generation == self._generation:
                    self._error_message = backend.error_message
            return False

        results = backend.take_results()
        with self._lock:
            if generation != self._generation:
                logger.debug("Discarding outdated results of pCDM model %r", self._name)
                return False
            self._results = results
            self._error_message = ""
        return True

    def _notify_completed(self) -> None:
        for listener in list(self._listeners.request_completed):
            listener()

    def request_results_async(self, executor: Executor | None = None) -> Future:
        """Compute the results in the background, if required.

        Completion listeners are notified once the request is done, also if
        results were already available.

        Parameters
        ----------
        executor : Executor, optional
            The executor to run the computation on. Defaults to a shared
            single worker thread.

        Returns
        -------
        Future
            Resolves to True if valid results are available afterwards.
        """
        self.wait_for_results()

        if self.has_results:
            future: Future = Future()
            future.set_result(True)
            self._notify_completed()
            return future

        with self._lock:
            generation = self._generation
        parameters = Parameters(self._parameters, self._nu)
        executor = executor or default_executor()
        future = executor.submit(
            self._compute, generation, self._coordinates, parameters
        )
        self._pending = future
        return future

    def wait_for_results(self) -> bool:
        """Block until a pending computation is done.

        Returns
        -------
        bool
            True if valid results are available.
        """
        pending = self._pending
        if pending is not None:
            pending.result()
            self._pending = None
        return self.has_results


def _results_are_valid(results: DisplacementResults) -> bool:
    size = len(results.east)
    return size > 0 and all(len(component) == size for component in results)
