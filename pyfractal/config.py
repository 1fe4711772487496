"""Startup configuration for the viewer."""

from dataclasses import dataclass
from typing import Optional

from PIL import ImageColor


GRADIENT = "gradient"
GRAYSCALE = "grayscale"
COLOR_MODES = (GRADIENT, GRAYSCALE)


def parse_color(spec: str) -> tuple[int, int, int]:
    """Parse a Pillow color string ("#1e90ff", "white", "rgb(0,0,0)")."""
    try:
        rgb = ImageColor.getrgb(spec)
    except (ValueError, AttributeError) as e:
        raise ValueError(f"Invalid color {spec!r}: {e}") from e
    return tuple(int(v) for v in rgb[:3])


@dataclass(frozen=True)
class ViewerConfig:
    """Everything fixed at startup. Nothing here is reloaded at runtime."""
    width: int = 1000
    height: int = 1000
    title: str = "Fractal Interactive"
    center: tuple[float, float] = (-0.5, 0.0)
    zoom: float = 1.0
    iterations: int = 2000
    iteration_gap: int = 1000
    zoom_factor: float = 5.0
    color_mode: str = GRADIENT
    dark_color: str = "#000000"
    light_color: str = "#ffffff"
    interior_color: Optional[str] = None
    fps: float = 60.0
    background: bool = False
    verbose: bool = False
    screenshot: Optional[str] = None

    def validate(self) -> "ViewerConfig":
        """Raise ValueError on the first invalid setting; return self."""
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Window dimensions must be positive, got {self.width}x{self.height}")
        if self.zoom <= 0:
            raise ValueError(f"Initial zoom must be positive, got {self.zoom}")
        if self.iterations <= 0:
            raise ValueError(f"Iteration budget must be positive, got {self.iterations}")
        if self.iteration_gap < 0:
            raise ValueError(f"Iteration increment must not be negative, got {self.iteration_gap}")
        if self.zoom_factor <= 1:
            raise ValueError(f"Zoom factor must be greater than 1, got {self.zoom_factor}")
        if self.color_mode not in COLOR_MODES:
            raise ValueError(f"Unknown color mode {self.color_mode!r}, expected one of {COLOR_MODES}")
        if self.fps <= 0:
            raise ValueError(f"Frame rate must be positive, got {self.fps}")
        for spec in (self.dark_color, self.light_color, self.interior_color):
            if spec is not None:
                parse_color(spec)
        return self

    @property
    def frame_budget(self) -> float:
        """Seconds available per tick."""
        return 1.0 / self.fps
