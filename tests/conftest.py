"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chip8vm import create_state, load_rom


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def clip_state():
    """Provide a fresh state that clips sprites at the screen edges."""
    return create_state(sprite_wrap=False)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def assemble(*instructions):
    """Helper to turn 16-bit instruction words into ROM bytes."""
    rom = bytearray()
    for instruction in instructions:
        rom += instruction.to_bytes(2, "big")
    return bytes(rom)


def state_with_program(*instructions, **kwargs):
    """Helper to build a state with the given instructions loaded at 0x200."""
    return load_rom(create_state(**kwargs), assemble(*instructions))
