"""CHIP-8 hex keypad latch.

The input adapter writes key state with ``set_pressed``; the CPU only reads
it. ``latched`` is the key state seen at the last ``newly_pressed`` check
and is what makes FX0A react to key-down edges rather than held keys.
"""

from typing import Optional

import jax.numpy as jnp
from flax.struct import PyTreeNode, field

from chip8vm.constants import NUM_KEYS


class KeypadLatch(PyTreeNode):
    pressed: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    latched: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))


def _check_key(key: int) -> int:
    key = int(key)
    if not 0 <= key < NUM_KEYS:
        raise ValueError(f"Key index {key} outside 0x0-0x{NUM_KEYS - 1:X}")
    return key


def set_pressed(keypad: KeypadLatch, key: int, pressed: bool) -> KeypadLatch:
    """Record a key going down or up."""
    return keypad.replace(pressed=keypad.pressed.at[_check_key(key)].set(bool(pressed)))


def is_pressed(keypad: KeypadLatch, key: int) -> bool:
    return bool(keypad.pressed[_check_key(key)])


def arm(keypad: KeypadLatch) -> KeypadLatch:
    """Snapshot the current keys so only later presses count as new."""
    return keypad.replace(latched=keypad.pressed)


def newly_pressed(keypad: KeypadLatch) -> tuple[KeypadLatch, Optional[int]]:
    """Lowest key pressed now but not at the previous check.

    Always refreshes the snapshot. A held key is reported once; it has to
    be seen released by a check before it can be reported again.
    """
    fresh = keypad.pressed & ~keypad.latched
    keypad = arm(keypad)
    if not bool(jnp.any(fresh)):
        return keypad, None
    return keypad, int(jnp.argmax(fresh))
