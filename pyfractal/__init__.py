"""Click-to-zoom Mandelbrot viewer."""

from .colors import GradientColorMapper, GrayscaleColorMapper, make_color_mapper
from .config import ViewerConfig
from .coords import (
    CoordinateMapper,
    PixelCoordinate,
    PlaneCoordinate,
    ViewportBounds,
    to_pixel,
    to_plane,
)
from .engine import FieldEngine, FieldSnapshot, MandelbrotEngine
from .zoom import ViewState, ZoomController, ZoomPhase, ZoomStep

__all__ = [
    "CoordinateMapper",
    "FieldEngine",
    "FieldSnapshot",
    "GradientColorMapper",
    "GrayscaleColorMapper",
    "MandelbrotEngine",
    "PixelCoordinate",
    "PlaneCoordinate",
    "ViewState",
    "ViewerConfig",
    "ViewportBounds",
    "ZoomController",
    "ZoomPhase",
    "ZoomStep",
    "make_color_mapper",
    "to_pixel",
    "to_plane",
]
