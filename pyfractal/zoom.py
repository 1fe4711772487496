"""Click-to-zoom state machine.

A primary click captured while idle becomes the next regeneration: the
clicked pixel is resolved against the bounds the engine is currently
showing, becomes the new center, the zoom is multiplied by a fixed factor
and the iteration budget grows by a fixed increment. Only one click is
held at a time; clicks arriving while a regeneration is pending or running
are dropped, as are all clicks once another step would zoom past what
float64 can resolve.
"""

from concurrent.futures import Executor, Future
from dataclasses import dataclass
from enum import Enum
from typing import Optional
import time

import numpy as np

from .coords import CoordinateMapper, PixelCoordinate, PlaneCoordinate
from .engine import FieldEngine
from .report import log


class ZoomPhase(Enum):
    IDLE = "idle"
    PENDING_REGEN = "pending"
    REGENERATING = "regenerating"


@dataclass
class ViewState:
    """Current view. Only ZoomController mutates it."""
    center: PlaneCoordinate
    zoom_scale: float = 1.0
    iteration_budget: int = 1000

    def __post_init__(self):
        self.center = PlaneCoordinate(*self.center)
        if self.zoom_scale <= 0:
            raise ValueError(f"Zoom scale must be positive, got {self.zoom_scale}")
        if self.iteration_budget <= 0:
            raise ValueError(f"Iteration budget must be positive, got {self.iteration_budget}")


@dataclass(frozen=True)
class ZoomStep:
    """Outcome of one completed regeneration."""
    pixel: PixelCoordinate
    point: PlaneCoordinate
    zoom_scale: float
    iteration_budget: int
    elapsed: float


class ZoomController:
    def __init__(self, engine: FieldEngine, view: ViewState, mapper: CoordinateMapper,
                 zoom_factor: float, iteration_gap: int,
                 executor: Optional[Executor] = None):
        if zoom_factor <= 1:
            raise ValueError(f"Zoom factor must be greater than 1, got {zoom_factor}")
        if iteration_gap < 0:
            raise ValueError(f"Iteration increment must not be negative, got {iteration_gap}")
        self.engine = engine
        self.view = view
        self.mapper = mapper
        self.zoom_factor = zoom_factor
        self.iteration_gap = iteration_gap
        self.executor = executor

        self.phase = ZoomPhase.IDLE
        self.steps = 0
        self.dropped = 0
        self._pending: Optional[PixelCoordinate] = None
        self._last_pixel: Optional[PixelCoordinate] = None
        self._point: Optional[PlaneCoordinate] = None
        self._future: Optional[Future] = None
        self._started = 0.0
        self.at_limit = False

    @property
    def busy(self) -> bool:
        return self.phase is not ZoomPhase.IDLE

    def on_pointer_down(self, pixel: PixelCoordinate) -> bool:
        """Capture a click. Returns False when the click is dropped."""
        pixel = PixelCoordinate(*pixel)
        if not self.mapper.contains(pixel):
            raise ValueError(
                f"Click {tuple(pixel)} is outside the {self.mapper.width}x{self.mapper.height} surface"
            )
        if self.busy or self.at_limit:
            self.dropped += 1
            reason = "zoom limit reached" if self.at_limit else self.phase.value
            log(f"Ignoring click at {tuple(pixel)}: {reason}")
            return False
        self._pending = pixel
        self.phase = ZoomPhase.PENDING_REGEN
        return True

    def tick(self) -> Optional[ZoomStep]:
        """Advance the state machine. Returns the step once it completes."""
        if self.phase is ZoomPhase.PENDING_REGEN:
            self._begin()

        if self.phase is not ZoomPhase.REGENERATING:
            return None

        if self._future is not None:
            if not self._future.done():
                return None
            future, self._future = self._future, None
            try:
                future.result()
            except Exception:
                self.phase = ZoomPhase.IDLE
                raise

        return self._finish()

    def _begin(self):
        pixel = self._pending
        self._pending = None

        # Bounds must be read before the engine is moved
        try:
            point = self.mapper.pixel_to_plane(pixel, self.engine.get_bounds())
        except ValueError:
            self.phase = ZoomPhase.IDLE
            raise
        self.phase = ZoomPhase.REGENERATING
        self.view.center = point
        self.view.zoom_scale *= self.zoom_factor
        self.view.iteration_budget += self.iteration_gap
        self._point = point
        self._last_pixel = pixel

        self.engine.set_center(point)
        self.engine.scale_zoom(self.zoom_factor)
        self.engine.set_iteration_budget(self.view.iteration_budget)

        print("Regenerating...")
        self._started = time.perf_counter()
        if self.executor is None:
            try:
                self.engine.generate()
            except Exception:
                self.phase = ZoomPhase.IDLE
                raise
        else:
            self._future = self.executor.submit(self.engine.generate)

    def _finish(self) -> ZoomStep:
        elapsed = time.perf_counter() - self._started
        self.phase = ZoomPhase.IDLE
        self.steps += 1

        point = self._point
        print("Done!")
        print(f"{point} at {self.engine.get_zoom()}x")
        log(f"Step {self.steps}: imax={self.view.iteration_budget} in {elapsed * 1000:.1f}ms")
        self._check_limit(point)

        return ZoomStep(
            pixel=self._last_pixel,
            point=point,
            zoom_scale=self.view.zoom_scale,
            iteration_budget=self.view.iteration_budget,
            elapsed=elapsed,
        )

    def _check_limit(self, point: PlaneCoordinate):
        """Stop accepting clicks once another step would outrun float64."""
        spacing = self.mapper.pixel_spacing(self.engine.get_bounds()) / self.zoom_factor
        limit = 4 * np.finfo(np.float64).eps * max(1.0, abs(point.re), abs(point.im))
        if spacing < limit:
            self.at_limit = True
            print(f"Zoom limit reached: pixel spacing would drop to {spacing:.3e}, "
                  "below float64 resolution")
