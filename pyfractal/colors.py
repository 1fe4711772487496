"""Turning field samples into RGB.

Both strategies are pure functions of ``(count, hue, budget)``: the same
sample always gives the same color, wherever it sits in the frame.
``color`` handles one sample and ``colorize`` a whole field; the two agree
sample for sample.
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .config import GRAYSCALE, ViewerConfig, parse_color
from .engine import FieldSnapshot


RGB = tuple[int, int, int]

# Past this magnitude any non-zero channel delta saturates anyway
HUE_LIMIT = 256.0


def _sanitize_hue(hue: float) -> float:
    if math.isnan(hue):
        return 0.0
    return min(max(hue, -HUE_LIMIT), HUE_LIMIT)


@dataclass(frozen=True)
class GrayscaleColorMapper:
    """Gray level proportional to the escape count."""
    interior: RGB = (0, 0, 0)

    def color(self, count: int, hue: Optional[float], budget: int) -> RGB:
        if count >= budget:
            return self.interior
        level = min(max(round(count / budget * 255), 0), 255)
        return (level, level, level)

    def colorize(self, field: FieldSnapshot) -> np.ndarray:
        budget = field.iteration_budget
        counts = field.counts
        level = np.clip(np.rint(counts / budget * 255), 0, 255).astype(np.uint8)
        rgb = np.repeat(level[..., np.newaxis], 3, axis=-1)
        rgb[counts >= budget] = self.interior
        return rgb


@dataclass(frozen=True)
class GradientColorMapper:
    """Linear blend from ``start`` (hue 0) to ``end`` (hue 1)."""
    start: RGB = (0, 0, 0)
    end: RGB = (255, 255, 255)
    interior: Optional[RGB] = None

    def __post_init__(self):
        if self.interior is None:
            object.__setattr__(self, "interior", self.start)

    def color(self, count: int, hue: Optional[float], budget: int) -> RGB:
        if count >= budget:
            return self.interior
        if hue is None:
            hue = count / budget
        hue = _sanitize_hue(hue)
        return tuple(
            min(max(round(a + (b - a) * hue), 0), 255)
            for a, b in zip(self.start, self.end)
        )

    def colorize(self, field: FieldSnapshot) -> np.ndarray:
        budget = field.iteration_budget
        counts = field.counts
        if field.hue is None:
            hue = counts / budget
        else:
            hue = np.nan_to_num(field.hue, nan=0.0, posinf=HUE_LIMIT, neginf=-HUE_LIMIT)
            hue = np.clip(hue, -HUE_LIMIT, HUE_LIMIT)

        start = np.asarray(self.start, dtype=np.float64)
        end = np.asarray(self.end, dtype=np.float64)
        blended = start + (end - start) * hue[..., np.newaxis]
        rgb = np.clip(np.rint(blended), 0, 255).astype(np.uint8)
        rgb[counts >= budget] = self.interior
        return rgb


def make_color_mapper(config: ViewerConfig):
    """Build the strategy selected by ``config.color_mode``."""
    interior = parse_color(config.interior_color) if config.interior_color else None
    if config.color_mode == GRAYSCALE:
        return GrayscaleColorMapper(interior=interior or (0, 0, 0))
    return GradientColorMapper(
        start=parse_color(config.dark_color),
        end=parse_color(config.light_color),
        interior=interior,
    )
