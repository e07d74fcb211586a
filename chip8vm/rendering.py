"""Framebuffer to image conversion for the window and screenshots."""

from typing import Tuple

import numpy as np
from PIL import Image

RGB = Tuple[int, int, int]

# name -> (lit pixel, unlit pixel)
COLOR_SCHEMES = {
    "classic": ((0, 255, 0), (0, 0, 0)),
    "amber": ((255, 176, 0), (0, 0, 0)),
    "white": ((255, 255, 255), (0, 0, 0)),
    "blue": ((0, 255, 255), (0, 0, 64)),
    "retro": ((255, 255, 0), (64, 0, 64)),
    "violet": ((179, 102, 184), (45, 25, 61)),
}


def chip8_display_to_rgb(
    display: np.ndarray,
    scale: int = 8,
    on_color: RGB = (0, 255, 0),
    off_color: RGB = (0, 0, 0),
) -> np.ndarray:
    """Paint a (64, 32) ``[x, y]`` pixel grid as a row-major RGB image.

    Each CHIP-8 pixel becomes a ``scale`` x ``scale`` block, so the result
    has shape ``(32 * scale, 64 * scale, 3)`` and dtype uint8.
    """
    if scale < 1:
        raise ValueError(f"scale must be at least 1, got {scale}")

    palette = np.array([off_color, on_color], dtype=np.uint8)
    rows = np.asarray(display, dtype=np.bool_).T
    block = np.ones((scale, scale), dtype=np.intp)
    return palette[np.kron(rows.astype(np.intp), block)]


def create_color_scheme(scheme: str = "classic") -> Tuple[RGB, RGB]:
    """Look up ``(on_color, off_color)`` for a scheme in ``COLOR_SCHEMES``."""
    try:
        return COLOR_SCHEMES[scheme]
    except KeyError:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(COLOR_SCHEMES)}"
        ) from None


def save_screenshot(
    display: np.ndarray,
    filename: str,
    scale: int = 8,
    color_scheme: str = "classic",
) -> Image.Image:
    """Write the display to an image file (format chosen from the extension).

    Returns:
        The saved PIL image.
    """
    on_color, off_color = create_color_scheme(color_scheme)
    image = Image.fromarray(chip8_display_to_rgb(display, scale, on_color, off_color))
    image.save(filename)
    return image
