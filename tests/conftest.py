"""Shared fixtures: headless SDL and engines that record instead of iterate."""

import os

# Must be set before pygame opens a display
os.environ["SDL_VIDEODRIVER"] = "dummy"
os.environ["SDL_AUDIODRIVER"] = "dummy"

import numpy as np
import pytest

from pyfractal.coords import CoordinateMapper, PlaneCoordinate
from pyfractal.engine import FieldSnapshot, MandelbrotEngine
from pyfractal.zoom import ViewState, ZoomController


class RecordingEngine(MandelbrotEngine):
    """Real bounds and bookkeeping, but ``generate`` only records its inputs."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = []
        self.on_generate = None

    def generate(self):
        self.calls.append((self.center, self.zoom, self.iteration_budget))
        if self.on_generate is not None:
            self.on_generate()
        self._field = FieldSnapshot(
            counts=np.zeros((self.height, self.width), dtype=np.int32),
            hue=np.zeros((self.height, self.width), dtype=np.float64),
            iteration_budget=self.iteration_budget,
        )
        self.generations += 1


@pytest.fixture
def make_controller():
    def factory(width=500, height=500, center=(-0.5, 0.0), zoom=1.0,
                budget=1000, increment=1000, factor=10.0, executor=None):
        engine = RecordingEngine(width, height, PlaneCoordinate(*center),
                                 zoom=zoom, iteration_budget=budget)
        view = ViewState(center=PlaneCoordinate(*center), zoom_scale=zoom,
                         iteration_budget=budget)
        controller = ZoomController(engine, view, CoordinateMapper(width, height),
                                    zoom_factor=factor, iteration_gap=increment,
                                    executor=executor)
        return controller, engine
    return factory
