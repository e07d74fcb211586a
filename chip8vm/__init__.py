"""CHIP-8 emulator package."""

from chip8vm.state import EmulatorState, StackState, create_state
from chip8vm.emulator import execute, fetch, load_rom, run_cycles, step, tick_timers
from chip8vm.decode import DecodedInstruction, Op, decode
from chip8vm.clock import Scheduler
from chip8vm.errors import (
    Chip8Error,
    ExecutionError,
    RomError,
    RomNotFoundError,
    RomTooLargeError,
    StackOverflowError,
    StackUnderflowError,
    UnknownOpcodeError,
)
from chip8vm.rng import SequenceRandomSource, jax_random_byte
from chip8vm.constants import *

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "fetch",
    "execute",
    "step",
    "run_cycles",
    "tick_timers",
    "load_rom",
    "DecodedInstruction",
    "Op",
    "decode",
    "Scheduler",
    "Chip8Error",
    "ExecutionError",
    "RomError",
    "RomNotFoundError",
    "RomTooLargeError",
    "StackOverflowError",
    "StackUnderflowError",
    "UnknownOpcodeError",
    "SequenceRandomSource",
    "jax_random_byte",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
]
