"""Mapping between pixel space and the complex plane.

Both axes use the same linear interpolation: pixel ``p`` on an axis of
``n`` pixels maps to ``lo + (p / n) * (hi - lo)``. Row 0 is ``min_im`` and
rows grow toward ``max_im``; the engine samples its grid with the same
formula, so the mapping is the exact inverse of field generation.
"""

from typing import NamedTuple


class PixelCoordinate(NamedTuple):
    x: int
    y: int


class PlaneCoordinate(NamedTuple):
    re: float
    im: float

    def __str__(self):
        op = "-" if self.im < 0 else "+"
        return f"({self.re} {op} {abs(self.im)}i)"


class ViewportBounds(NamedTuple):
    """Visible rectangle of the plane."""
    min_re: float
    min_im: float
    max_re: float
    max_im: float

    @classmethod
    def checked(cls, min_re: float, min_im: float, max_re: float, max_im: float) -> "ViewportBounds":
        """Build bounds, raising ``ValueError`` unless both minimums are below the maximums."""
        return cls(min_re, min_im, max_re, max_im).validate()

    @classmethod
    def around(cls, center: PlaneCoordinate, half_w: float, half_h: float) -> "ViewportBounds":
        return cls.checked(
            center.re - half_w, center.im - half_h,
            center.re + half_w, center.im + half_h,
        )

    def validate(self) -> "ViewportBounds":
        if not (self.min_re < self.max_re and self.min_im < self.max_im):
            raise ValueError(f"Degenerate viewport bounds: {self}")
        return self

    @property
    def re_span(self) -> float:
        return self.max_re - self.min_re

    @property
    def im_span(self) -> float:
        return self.max_im - self.min_im


def to_plane(pixel: float, axis_length: int, bounds_min: float, bounds_max: float) -> float:
    """Interpolate a pixel position onto ``[bounds_min, bounds_max]``."""
    if axis_length <= 0:
        raise ValueError(f"Axis length must be positive, got {axis_length}")
    return bounds_min + (pixel / axis_length) * (bounds_max - bounds_min)


def to_pixel(value: float, axis_length: int, bounds_min: float, bounds_max: float) -> float:
    """Inverse of :func:`to_plane`; the result is fractional."""
    if axis_length <= 0:
        raise ValueError(f"Axis length must be positive, got {axis_length}")
    span = bounds_max - bounds_min
    if span == 0:
        raise ValueError("Cannot map onto a zero-width axis")
    return (value - bounds_min) / span * axis_length


class CoordinateMapper:
    """Per-axis mapping for a surface of fixed size."""

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height

    def contains(self, pixel: PixelCoordinate) -> bool:
        return 0 <= pixel.x < self.width and 0 <= pixel.y < self.height

    def pixel_to_plane(self, pixel: PixelCoordinate, bounds: ViewportBounds) -> PlaneCoordinate:
        bounds.validate()
        return PlaneCoordinate(
            to_plane(pixel.x, self.width, bounds.min_re, bounds.max_re),
            to_plane(pixel.y, self.height, bounds.min_im, bounds.max_im),
        )

    def plane_to_pixel(self, point: PlaneCoordinate, bounds: ViewportBounds) -> tuple[float, float]:
        bounds.validate()
        return (
            to_pixel(point.re, self.width, bounds.min_re, bounds.max_re),
            to_pixel(point.im, self.height, bounds.min_im, bounds.max_im),
        )

    def pixel_spacing(self, bounds: ViewportBounds) -> float:
        """Smallest plane distance between neighbouring pixels."""
        return min(bounds.re_span / self.width, bounds.im_span / self.height)
