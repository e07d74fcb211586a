"""CHIP-8 memory image.

Memory is a flat ``jnp.uint8`` array of 4096 bytes. Every function here is
pure: writers return a new array. Single-byte accessors reject addresses
outside ``[0x000, 0xFFF]``; the executor masks computed addresses before
calling them, so an ``IndexError`` here is a bug in the caller.
"""

import jax.numpy as jnp
import numpy as np

from chip8vm.constants import ADDRESS_MASK, MAX_ROM_SIZE, MEMORY_SIZE, PROGRAM_START
from chip8vm.errors import RomTooLargeError


def _check_address(address: int) -> int:
    address = int(address)
    if not 0 <= address <= ADDRESS_MASK:
        raise IndexError(f"Memory address 0x{address:X} outside 0x000-0x{ADDRESS_MASK:03X}")
    return address


def read8(memory: jnp.ndarray, address: int) -> int:
    """Read one byte."""
    return int(memory[_check_address(address)])


def read16(memory: jnp.ndarray, address: int) -> int:
    """Read a big-endian word: high byte at ``address``, low byte after it.

    The low byte of a word starting at 0xFFF comes from 0x000.
    """
    address = _check_address(address)
    high = int(memory[address])
    low = int(memory[(address + 1) & ADDRESS_MASK])
    return (high << 8) | low


def write8(memory: jnp.ndarray, address: int, value: int) -> jnp.ndarray:
    """Write one byte, truncating ``value`` to 8 bits."""
    return memory.at[_check_address(address)].set(int(value) & 0xFF)


def block_indices(address, length: int) -> jnp.ndarray:
    """Addresses ``address .. address+length-1`` wrapped to the 12-bit space."""
    return (jnp.astype(address, jnp.int32) + jnp.arange(length)) & ADDRESS_MASK


def read_block(memory: jnp.ndarray, address, length: int) -> jnp.ndarray:
    """Read ``length`` consecutive bytes, wrapping past 0xFFF."""
    return memory[block_indices(address, length)]


def write_block(memory: jnp.ndarray, address, values: jnp.ndarray) -> jnp.ndarray:
    """Write ``values`` to consecutive addresses, wrapping past 0xFFF."""
    values = jnp.asarray(values, dtype=jnp.uint8)
    return memory.at[block_indices(address, values.shape[0])].set(values)


def load_rom_bytes(memory: jnp.ndarray, rom: bytes) -> jnp.ndarray:
    """Copy ROM bytes to 0x200 and zero the rest of the program region.

    Raises:
        RomTooLargeError: if the ROM does not fit in ``[0x200, 0xFFF]``
    """
    if len(rom) > MAX_ROM_SIZE:
        raise RomTooLargeError(len(rom), MAX_ROM_SIZE)

    memory = memory.at[PROGRAM_START:MEMORY_SIZE].set(0)
    if rom:
        rom_array = jnp.asarray(np.frombuffer(bytes(rom), dtype=np.uint8))
        memory = memory.at[PROGRAM_START:PROGRAM_START + len(rom)].set(rom_array)
    return memory
