"""Tests for display-to-image rendering."""

import numpy as np
import pytest
from PIL import Image
from chip8vm.rendering import COLOR_SCHEMES, chip8_display_to_rgb, create_color_scheme, save_screenshot


@pytest.fixture
def display():
    pixels = np.zeros((64, 32), dtype=bool)
    pixels[0, 0] = True
    pixels[63, 31] = True
    return pixels


def test_rgb_layout(display):
    rgb = chip8_display_to_rgb(display, scale=1)

    assert rgb.shape == (32, 64, 3)
    assert rgb.dtype == np.uint8
    assert tuple(rgb[0, 0]) == (0, 255, 0)
    assert tuple(rgb[31, 63]) == (0, 255, 0)
    assert tuple(rgb[0, 63]) == (0, 0, 0)


def test_rgb_scaling(display):
    rgb = chip8_display_to_rgb(display, scale=4, on_color=(255, 255, 255), off_color=(1, 2, 3))

    assert rgb.shape == (128, 256, 3)
    assert np.all(rgb[:4, :4] == 255)
    assert tuple(rgb[4, 4]) == (1, 2, 3)


def test_invalid_scale(display):
    with pytest.raises(ValueError):
        chip8_display_to_rgb(display, scale=0)


def test_color_schemes():
    assert create_color_scheme() == ((0, 255, 0), (0, 0, 0))
    assert create_color_scheme("amber")[0] == (255, 176, 0)
    with pytest.raises(ValueError):
        create_color_scheme("plaid")


def test_save_screenshot(display, tmp_path):
    path = tmp_path / "screen.png"

    save_screenshot(display, str(path), scale=2, color_scheme="white")

    with Image.open(path) as image:
        assert image.size == (128, 64)
        assert image.getpixel((0, 0))[:3] == (255, 255, 255)
        assert image.getpixel((2, 0))[:3] == (0, 0, 0)


def test_every_scheme_renders(display):
    for name in COLOR_SCHEMES:
        on_color, off_color = create_color_scheme(name)
        rgb = chip8_display_to_rgb(display, scale=1, on_color=on_color, off_color=off_color)
        assert tuple(rgb[0, 0]) == on_color
        assert tuple(rgb[0, 1]) == off_color
