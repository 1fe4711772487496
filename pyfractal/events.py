"""Input events the render loop understands."""

from dataclasses import dataclass
from typing import Union

import pygame


PRIMARY_BUTTON = 1

QUIT_KEYS = (pygame.K_ESCAPE, pygame.K_q)


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class PointerDown:
    x: int
    y: int
    button: int = PRIMARY_BUTTON

    @property
    def primary(self) -> bool:
        return self.button == PRIMARY_BUTTON


@dataclass(frozen=True)
class Other:
    type: int = 0


InputEvent = Union[Quit, PointerDown, Other]


def translate(event) -> InputEvent:
    """Map a pygame event onto the viewer's input events."""
    if event.type == pygame.QUIT:
        return Quit()
    if event.type == pygame.KEYDOWN and event.key in QUIT_KEYS:
        return Quit()
    if event.type == pygame.MOUSEBUTTONDOWN:
        x, y = event.pos
        return PointerDown(int(x), int(y), event.button)
    return Other(event.type)


def poll() -> list:
    """Drain pygame's queue."""
    return [translate(event) for event in pygame.event.get()]
