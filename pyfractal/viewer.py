"""Interactive viewer: pygame window, tick loop and wiring."""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional
import os
import sys
import time

import numpy as np
import pygame
from PIL import Image

from . import events as input_events
from .colors import make_color_mapper
from .config import ViewerConfig
from .coords import CoordinateMapper, PixelCoordinate, PlaneCoordinate
from .engine import FieldEngine, FieldSnapshot, MandelbrotEngine
from .events import Other, PointerDown, Quit
from .report import log, set_verbose
from .zoom import ViewState, ZoomController


# =============================================================================
# Surface
# =============================================================================

def prefer_x11():
    """Ask SDL for X11 on Linux unless a video driver was already chosen.

    Under Wayland this gives the window proper decorations through XWayland.
    Export ``SDL_VIDEODRIVER=wayland`` to opt out.
    """
    if sys.platform.startswith("linux"):
        os.environ.setdefault("SDL_VIDEODRIVER", "x11")


class PygameSurface:
    """Window that frames are presented to."""

    def __init__(self, width: int, height: int, title: str):
        prefer_x11()
        pygame.init()
        self.screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption(title)

    def present(self, frame: np.ndarray):
        """Blit a ``(height, width, 3)`` uint8 frame and flip."""
        surface = pygame.surfarray.make_surface(frame.swapaxes(0, 1))
        self.screen.blit(surface, (0, 0))
        pygame.display.flip()

    def close(self):
        pygame.quit()


# =============================================================================
# Render Loop
# =============================================================================

class RenderLoop:
    """Single-threaded loop: poll, regenerate, colorize, present, sleep.

    State changes happen only inside the controller's tick, which always
    finishes before the field is read for coloring, so no locking is
    needed. Failures while presenting propagate to the caller.
    """

    def __init__(self, controller: ZoomController, color_mapper, engine: FieldEngine,
                 surface, events: Callable[[], list],
                 frame_budget: float = 1 / 60,
                 clock: Callable[[], float] = time.monotonic,
                 sleep: Callable[[float], None] = time.sleep):
        self.controller = controller
        self.color_mapper = color_mapper
        self.engine = engine
        self.surface = surface
        self.events = events
        self.frame_budget = frame_budget
        self.clock = clock
        self.sleep = sleep

        self.running = True
        self.frames = 0
        self.frame_times: list[float] = []
        self.frame: Optional[np.ndarray] = None
        self._colored: Optional[FieldSnapshot] = None

    @property
    def shape(self) -> tuple[int, int]:
        return (self.controller.mapper.height, self.controller.mapper.width)

    def run(self) -> int:
        """Tick until a quit event arrives. Returns frames presented."""
        while self.running:
            self.tick()
        return self.frames

    def tick(self) -> bool:
        """Run one tick. Returns False once the loop has been told to stop."""
        tick_start = self.clock()

        self._handle_events()
        if not self.running:
            return False

        self.controller.tick()
        self.render()
        self.surface.present(self.frame)
        self.frames += 1

        elapsed = self.clock() - tick_start
        self.frame_times.append(elapsed)
        self.sleep(max(0.0, self.frame_budget - elapsed))
        return True

    def _handle_events(self):
        for event in self.events():
            if isinstance(event, Quit):
                print("Quit")
                self.running = False
            elif isinstance(event, PointerDown):
                self._on_pointer_down(event)
            elif isinstance(event, Other):
                pass
            else:
                raise TypeError(f"Unhandled input event: {event!r}")

    def _on_pointer_down(self, event: PointerDown):
        if not event.primary or not self.running:
            return
        pixel = PixelCoordinate(event.x, event.y)
        if not self.controller.mapper.contains(pixel):
            log(f"Ignoring click outside the surface at {tuple(pixel)}")
            return
        self.controller.on_pointer_down(pixel)

    def render(self) -> np.ndarray:
        """Colorize the engine's field if it changed since the last frame."""
        field = self.engine.get_field()
        if field is self._colored and self.frame is not None:
            return self.frame

        if field.shape != self.shape:
            raise RuntimeError(
                f"Field shape {field.shape} does not match surface shape {self.shape}"
            )
        if field.hue is not None and field.hue.shape != self.shape:
            raise RuntimeError(
                f"Hue shape {field.hue.shape} does not match surface shape {self.shape}"
            )

        self.frame = self.color_mapper.colorize(field)
        self._colored = field
        return self.frame


# =============================================================================
# Main Viewer Class
# =============================================================================

class FractalViewer:
    """Click-to-zoom Mandelbrot viewer."""

    def __init__(self, config: ViewerConfig):
        self.config = config.validate()
        set_verbose(config.verbose)

        self.view = ViewState(
            center=PlaneCoordinate(*config.center),
            zoom_scale=config.zoom,
            iteration_budget=config.iterations,
        )
        self.mapper = CoordinateMapper(config.width, config.height)
        self.engine = MandelbrotEngine(
            config.width, config.height, self.view.center,
            zoom=config.zoom, iteration_budget=config.iterations,
        )
        self.color_mapper = make_color_mapper(config)

        self.executor = ThreadPoolExecutor(max_workers=1) if config.background else None
        self.controller = ZoomController(
            self.engine, self.view, self.mapper,
            zoom_factor=config.zoom_factor,
            iteration_gap=config.iteration_gap,
            executor=self.executor,
        )

        # Pygame objects (initialized in run())
        self.surface = None
        self.loop = None

    def run(self):
        """Open the window and loop until quit."""
        print("Starting")
        try:
            print("Creating window")
            self.surface = PygameSurface(self.config.width, self.config.height, self.config.title)
            self.loop = RenderLoop(
                self.controller, self.color_mapper, self.engine, self.surface,
                events=input_events.poll,
                frame_budget=self.config.frame_budget,
            )

            t0 = time.perf_counter()
            self.engine.generate()
            log(f"Initial field in {(time.perf_counter() - t0) * 1000:.1f}ms")

            self.loop.run()
            self._print_stats()
            self._save_screenshot()
        finally:
            if self.executor is not None:
                self.executor.shutdown(wait=True)
            if self.surface is not None:
                self.surface.close()

    def _print_stats(self):
        """Print rendering statistics on exit."""
        frame_times = self.loop.frame_times
        if frame_times:
            avg_ms = sum(frame_times) / len(frame_times) * 1000
            print(f"\nRendered {len(frame_times)} frames")
            print(f"Average frame time: {avg_ms:.1f}ms ({1000 / max(avg_ms, 1e-9):.0f} FPS)")
        print(f"Zoom steps: {self.controller.steps}, dropped clicks: {self.controller.dropped}")

    def _save_screenshot(self):
        if self.config.screenshot and self.loop.frame is not None:
            Image.fromarray(self.loop.frame).save(self.config.screenshot)
            print(f"Saved to {self.config.screenshot}")
