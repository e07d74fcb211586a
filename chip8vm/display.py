"""CHIP-8 framebuffer: 64x32 monochrome grid with XOR sprite blitting."""

import jax.numpy as jnp
import numpy as np
from flax.struct import PyTreeNode, field

from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH

# Pre-computed coordinate grids, indexed [x, y] like the framebuffer
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


class Framebuffer(PyTreeNode):
    """Pixel grid of shape (SCREEN_WIDTH, SCREEN_HEIGHT), True for lit pixels."""
    pixels: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_))


def clear(framebuffer: Framebuffer) -> Framebuffer:
    """Turn every pixel off."""
    return framebuffer.replace(pixels=jnp.zeros_like(framebuffer.pixels))


def sprite_mask(x, y, rows: jnp.ndarray, wrap: bool = True) -> jnp.ndarray:
    """Boolean grid of the pixels an 8-wide sprite would toggle at (x, y).

    The start coordinate always wraps onto the screen. With ``wrap`` the
    sprite continues on the opposite edge; without it, pixels past the
    right or bottom edge are dropped.
    """
    rows = jnp.asarray(rows, dtype=jnp.uint8)
    height = rows.shape[0]
    if height == 0:
        return jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_)

    origin_x = jnp.astype(x, jnp.int32) % SCREEN_WIDTH
    origin_y = jnp.astype(y, jnp.int32) % SCREEN_HEIGHT

    col_offset = xx - origin_x
    row_offset = yy - origin_y
    if wrap:
        col_offset = col_offset % SCREEN_WIDTH
        row_offset = row_offset % SCREEN_HEIGHT

    covered = (col_offset >= 0) & (col_offset < SPRITE_WIDTH) & (row_offset >= 0) & (row_offset < height)

    sprite_bytes = jnp.astype(rows[jnp.clip(row_offset, 0, height - 1)], jnp.int32)
    bits = (sprite_bytes >> (7 - jnp.clip(col_offset, 0, SPRITE_WIDTH - 1))) & 1
    return (bits == 1) & covered


def draw_sprite(framebuffer: Framebuffer, x, y, rows, wrap: bool = True) -> tuple[Framebuffer, bool]:
    """XOR a sprite onto the framebuffer.

    Returns:
        The new framebuffer and whether any lit pixel was turned off.
    """
    sprite = sprite_mask(x, y, rows, wrap)
    collided = bool(jnp.any(framebuffer.pixels & sprite))
    return framebuffer.replace(pixels=framebuffer.pixels ^ sprite), collided


def snapshot(framebuffer: Framebuffer) -> np.ndarray:
    """Read-only numpy copy of the pixels for renderers."""
    pixels = np.array(framebuffer.pixels, dtype=np.bool_)
    pixels.setflags(write=False)
    return pixels
