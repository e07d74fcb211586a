"""Main CHIP-8 emulator execution engine."""

import os
from typing import Union

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction, decode
from chip8vm.constants import ADDRESS_MASK
from chip8vm.errors import ExecutionError
from chip8vm.keypad import newly_pressed
from chip8vm.memory import load_rom_bytes, read16
from chip8vm.rom import read_rom
from chip8vm.instructions.system import SYSTEM_HANDLERS
from chip8vm.instructions.control_flow import CONTROL_FLOW_HANDLERS
from chip8vm.instructions.alu import ALU_HANDLERS
from chip8vm.instructions.memory import MEMORY_HANDLERS
from chip8vm.instructions.display import DISPLAY_HANDLERS
from chip8vm.instructions.misc import MISC_HANDLERS


HANDLERS = {
    **SYSTEM_HANDLERS,
    **CONTROL_FLOW_HANDLERS,
    **ALU_HANDLERS,
    **MEMORY_HANDLERS,
    **DISPLAY_HANDLERS,
    **MISC_HANDLERS,
}


def execute(state: EmulatorState, instruction: Union[int, DecodedInstruction]) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    ``state.pc`` is expected to already point past the instruction, as
    left by ``fetch``.

    Raises:
        UnknownOpcodeError: if ``instruction`` does not decode
        StackOverflowError: on a call with 16 return addresses stacked
        StackUnderflowError: on a return with an empty stack
    """
    if not isinstance(instruction, DecodedInstruction):
        instruction = decode(instruction)

    try:
        return HANDLERS[instruction.op](state, instruction)
    except ExecutionError as err:
        if err.opcode is None:
            err.opcode = instruction.raw
        raise


def fetch(state: EmulatorState) -> tuple[EmulatorState, int]:
    """Fetch next instruction from memory and advance PC past it."""
    instruction = read16(state.memory, state.pc)
    next_pc = (jnp.astype(state.pc, jnp.int32) + 2) & ADDRESS_MASK
    return state.replace(pc=jnp.astype(next_pc, jnp.uint16)), instruction


def _resolve_key_wait(state: EmulatorState) -> EmulatorState:
    keypad, key = newly_pressed(state.keypad)
    if key is None:
        return state.replace(keypad=keypad)

    next_pc = (jnp.astype(state.pc, jnp.int32) + 2) & ADDRESS_MASK
    return state.replace(
        keypad=keypad,
        V=state.V.at[state.key_register].set(key),
        pc=jnp.astype(next_pc, jnp.uint16),
        awaiting_key=False,
    )


def step(state: EmulatorState) -> EmulatorState:
    """Run one instruction cycle.

    While awaiting a key (FX0A) the cycle only polls the keypad. Otherwise
    it fetches, decodes and executes the instruction at PC. On failure the
    raised ``ExecutionError`` carries the failing PC and opcode; the input
    state is left as it was.
    """
    if state.awaiting_key:
        return _resolve_key_wait(state)

    pc = int(state.pc)
    fetched, instruction = fetch(state)
    try:
        return execute(fetched, instruction)
    except ExecutionError as err:
        err.pc = pc
        if err.opcode is None:
            err.opcode = instruction
        raise


def run_cycles(state: EmulatorState, cycles: int) -> EmulatorState:
    """Run ``cycles`` instruction cycles without touching the timers."""
    for _ in range(cycles):
        state = step(state)
    return state


def _decrement(timer: jnp.ndarray) -> jnp.ndarray:
    return jnp.astype(jnp.where(timer > 0, timer - 1, timer), jnp.uint8)


def tick_timers(state: EmulatorState) -> EmulatorState:
    """60 Hz tick: decrement delay and sound timers, stopping at zero."""
    return state.replace(
        delay_timer=_decrement(state.delay_timer),
        sound_timer=_decrement(state.sound_timer),
    )


def load_rom(state: EmulatorState, rom: Union[bytes, str, os.PathLike]) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200.

    ``rom`` is either the ROM bytes or a path to a ROM file.

    Raises:
        RomNotFoundError: if ``rom`` is a path that does not exist
        RomTooLargeError: if the ROM exceeds 3584 bytes
    """
    if isinstance(rom, (str, os.PathLike)):
        rom = read_rom(rom)
    return state.replace(memory=load_rom_bytes(state.memory, rom))
