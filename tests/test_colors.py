import math

import numpy as np
import pytest

from pyfractal.colors import GradientColorMapper, GrayscaleColorMapper, make_color_mapper
from pyfractal.config import ViewerConfig
from pyfractal.engine import FieldSnapshot


def test_grayscale_interior_is_black():
    mapper = GrayscaleColorMapper()
    assert mapper.color(1000, 0.3, 1000) == (0, 0, 0)
    assert mapper.color(1500, 0.3, 1000) == (0, 0, 0)


def test_grayscale_levels():
    mapper = GrayscaleColorMapper()
    assert mapper.color(0, 0.0, 1000) == (0, 0, 0)
    assert mapper.color(500, 0.0, 1000) == (128, 128, 128)
    assert mapper.color(999, 0.0, 1000) == (255, 255, 255)


def test_gradient_endpoints():
    mapper = GradientColorMapper(start=(10, 20, 30), end=(200, 100, 50))
    assert mapper.color(0, 0.0, 1000) == (10, 20, 30)
    assert mapper.color(1, 1.0, 1000) == (200, 100, 50)
    assert mapper.color(1, 0.5, 1000) == (105, 60, 40)


def test_gradient_interior_defaults_to_start():
    mapper = GradientColorMapper(start=(10, 20, 30), end=(200, 100, 50))
    assert mapper.color(1000, 0.7, 1000) == (10, 20, 30)


def test_gradient_custom_interior():
    mapper = GradientColorMapper(start=(0, 0, 0), end=(255, 255, 255), interior=(255, 0, 0))
    assert mapper.color(2000, 0.0, 2000) == (255, 0, 0)


@pytest.mark.parametrize("hue, expected", [
    (1.5, (255, 140, 60)),
    (-1.0, (0, 0, 10)),
    (math.inf, (255, 255, 255)),
    (-math.inf, (0, 0, 0)),
    (math.nan, (10, 20, 30)),
])
def test_gradient_clamps_out_of_range_hue(hue, expected):
    mapper = GradientColorMapper(start=(10, 20, 30), end=(200, 100, 50))
    assert mapper.color(5, hue, 1000) == expected


def test_color_does_not_depend_on_position():
    mapper = GradientColorMapper(start=(0, 0, 64), end=(255, 200, 0))
    counts = np.full((4, 5), 7, dtype=np.int32)
    hue = np.full((4, 5), 0.25)
    rgb = mapper.colorize(FieldSnapshot(counts, hue, 100))
    assert (rgb == rgb[0, 0]).all()


MAPPERS = [
    GrayscaleColorMapper(),
    GrayscaleColorMapper(interior=(0, 0, 255)),
    GradientColorMapper(start=(0, 0, 0), end=(255, 255, 255)),
    GradientColorMapper(start=(30, 10, 90), end=(250, 240, 5), interior=(1, 2, 3)),
]


@pytest.mark.parametrize("mapper", MAPPERS)
def test_colorize_matches_per_sample_color(mapper):
    rng = np.random.default_rng(1234)
    budget = 50
    counts = rng.integers(0, budget + 5, size=(6, 7)).astype(np.int32)
    hue = rng.uniform(-0.5, 1.5, size=(6, 7))
    hue[0, 0] = np.nan

    rgb = mapper.colorize(FieldSnapshot(counts, hue, budget))

    assert rgb.shape == (6, 7, 3)
    assert rgb.dtype == np.uint8
    for y in range(6):
        for x in range(7):
            assert tuple(rgb[y, x]) == mapper.color(int(counts[y, x]), float(hue[y, x]), budget)


@pytest.mark.parametrize("mapper", MAPPERS)
def test_colorize_without_hue_matches_per_sample_color(mapper):
    rng = np.random.default_rng(99)
    budget = 40
    counts = rng.integers(0, budget + 5, size=(5, 6)).astype(np.int32)

    rgb = mapper.colorize(FieldSnapshot(counts, None, budget))

    for y in range(5):
        for x in range(6):
            assert tuple(rgb[y, x]) == mapper.color(int(counts[y, x]), None, budget)


def test_gradient_color_without_hue_uses_count_ratio():
    mapper = GradientColorMapper(start=(0, 0, 0), end=(200, 200, 200))
    assert mapper.color(50, None, 100) == (100, 100, 100)
    assert mapper.color(100, None, 100) == (0, 0, 0)


def test_gradient_without_hue_uses_count_ratio():
    mapper = GradientColorMapper(start=(0, 0, 0), end=(200, 200, 200))
    counts = np.array([[0, 50, 100]], dtype=np.int32)
    rgb = mapper.colorize(FieldSnapshot(counts, None, 100))
    assert [tuple(px) for px in rgb[0]] == [(0, 0, 0), (100, 100, 100), (0, 0, 0)]


def test_make_color_mapper_gradient():
    config = ViewerConfig(dark_color="#102030", light_color="white", interior_color="red")
    mapper = make_color_mapper(config)
    assert isinstance(mapper, GradientColorMapper)
    assert mapper.start == (16, 32, 48)
    assert mapper.end == (255, 255, 255)
    assert mapper.interior == (255, 0, 0)


def test_make_color_mapper_grayscale():
    mapper = make_color_mapper(ViewerConfig(color_mode="grayscale"))
    assert isinstance(mapper, GrayscaleColorMapper)
    assert mapper.interior == (0, 0, 0)
