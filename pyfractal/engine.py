"""Escape-time field generation.

The viewer only talks to an engine through :class:`FieldEngine`.
:class:`MandelbrotEngine` is the bundled numpy implementation.
"""

from dataclasses import dataclass
from typing import Optional, Protocol

import numpy as np

from .coords import PlaneCoordinate, ViewportBounds


# Escape when |z| reaches this; a horizon above 2 keeps the smooth count stable
HORIZON = 4.0

# Half-height of the view at zoom 1
BASE_HALF_EXTENT = 1.5


@dataclass(frozen=True)
class FieldSnapshot:
    """One completed regeneration, published as a unit."""
    counts: np.ndarray
    hue: Optional[np.ndarray]
    iteration_budget: int

    @property
    def shape(self) -> tuple:
        return self.counts.shape


class FieldEngine(Protocol):
    """Operations the viewer consumes from a field generator."""

    width: int
    height: int

    def set_iteration_budget(self, n: int) -> None: ...

    def generate(self) -> None: ...

    def get_field(self) -> FieldSnapshot: ...

    def get_bounds(self) -> ViewportBounds: ...

    def set_center(self, center: PlaneCoordinate) -> None: ...

    def scale_zoom(self, factor: float) -> None: ...

    def get_zoom(self) -> float: ...


def escape_time(c: np.ndarray, imax: int) -> tuple[np.ndarray, np.ndarray]:
    """Iterate z -> z^2 + c for every point of ``c``.

    Returns ``(counts, hue)``. Points still bounded after ``imax`` steps
    get ``counts == imax`` and hue 0; escaped points get the zero-based
    step they escaped on, so their counts are always below ``imax``.
    """
    counts = np.full(c.size, imax, dtype=np.int32)
    hue = np.zeros(c.size, dtype=np.float64)

    # Only the points that have not escaped are carried between steps
    idx = np.arange(c.size)
    cs = c.ravel().astype(np.complex128)
    zs = np.zeros_like(cs)
    horizon_sq = HORIZON * HORIZON
    norm = np.log1p(imax)

    for n in range(imax):
        zs = zs * zs + cs
        escaped = (zs.real * zs.real + zs.imag * zs.imag) >= horizon_sq
        if escaped.any():
            hit = idx[escaped]
            counts[hit] = n
            # log|z| >= log(HORIZON) > 0 here
            smooth = n + 1 - np.log2(np.log(np.abs(zs[escaped])))
            hue[hit] = np.clip(np.log1p(np.maximum(smooth, 0.0)) / norm, 0.0, 1.0)

            alive = ~escaped
            idx, zs, cs = idx[alive], zs[alive], cs[alive]
            if idx.size == 0:
                break

    return counts.reshape(c.shape), hue.reshape(c.shape)


class MandelbrotEngine:
    """Mandelbrot field over a fixed ``width x height`` grid."""

    def __init__(self, width: int, height: int, center: PlaneCoordinate,
                 zoom: float = 1.0, iteration_budget: int = 1000):
        if width <= 0 or height <= 0:
            raise ValueError(f"Field dimensions must be positive, got {width}x{height}")
        if zoom <= 0:
            raise ValueError(f"Zoom must be positive, got {zoom}")
        self.width = width
        self.height = height
        self.center = PlaneCoordinate(*center)
        self.zoom = float(zoom)
        self.iteration_budget = 0
        self.set_iteration_budget(iteration_budget)
        self.generations = 0

        self._field = FieldSnapshot(
            counts=np.zeros((height, width), dtype=np.int32),
            hue=np.zeros((height, width), dtype=np.float64),
            iteration_budget=self.iteration_budget,
        )

    def set_iteration_budget(self, n: int):
        if n <= 0:
            raise ValueError(f"Iteration budget must be positive, got {n}")
        self.iteration_budget = int(n)

    def set_center(self, center: PlaneCoordinate):
        self.center = PlaneCoordinate(*center)

    def scale_zoom(self, factor: float):
        if factor <= 0:
            raise ValueError(f"Zoom factor must be positive, got {factor}")
        self.zoom *= factor

    def get_zoom(self) -> float:
        return self.zoom

    def get_bounds(self) -> ViewportBounds:
        half_h = BASE_HALF_EXTENT / self.zoom
        half_w = half_h * self.width / self.height
        return ViewportBounds.around(self.center, half_w, half_h)

    def get_field(self) -> FieldSnapshot:
        return self._field

    def sample_grid(self) -> np.ndarray:
        """Complex plane value at every pixel, shape ``(height, width)``."""
        bounds = self.get_bounds()
        xs = bounds.min_re + np.arange(self.width) / self.width * bounds.re_span
        ys = bounds.min_im + np.arange(self.height) / self.height * bounds.im_span
        return xs[np.newaxis, :] + 1j * ys[:, np.newaxis]

    def generate(self):
        """Recompute the whole field. Blocks until done."""
        budget = self.iteration_budget
        counts, hue = escape_time(self.sample_grid(), budget)
        # Single assignment so readers see either the old or the new field
        self._field = FieldSnapshot(counts=counts, hue=hue, iteration_budget=budget)
        self.generations += 1
