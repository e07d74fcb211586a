"""Dual-clock scheduler driving the CHIP-8 engine.

The instruction clock runs at a caller-chosen rate; the delay and sound
timers tick at a fixed 60 Hz. Both are kept on one virtual timeline: event
``k`` of a clock fires at ``k / frequency`` seconds, so neither rate
influences the other and they do not drift against each other.
"""

import math
import time
from typing import Callable, Optional

import jax
import numpy as np

from chip8vm.constants import DEFAULT_INSTRUCTION_FREQUENCY, TIMER_FREQUENCY
from chip8vm.display import snapshot
from chip8vm.emulator import load_rom, step, tick_timers
from chip8vm.errors import ExecutionError
from chip8vm.keypad import set_pressed
from chip8vm.logging import ConsoleLogger, get_logger
from chip8vm.rng import SequenceRandomSource, jax_random_byte
from chip8vm.state import EmulatorState, create_state

# Floating point slack when comparing event deadlines with elapsed time
_EPSILON = 1e-9


class Scheduler:
    """Owns the emulator state and fires instruction and timer events.

    Adapters talk to the machine only through this object: the renderer
    reads ``framebuffer_snapshot()``, the audio adapter polls
    ``sound_active`` and the input adapter calls ``press_key`` /
    ``release_key``.

    A runtime error halts the engine: ``halted`` becomes True, ``error``
    keeps the exception and ``state`` stays as it was before the failing
    instruction. Timers keep ticking; instruction events are ignored until
    ``reset()``.
    """

    def __init__(
        self,
        rom: bytes,
        instruction_frequency: float = DEFAULT_INSTRUCTION_FREQUENCY,
        timer_frequency: float = TIMER_FREQUENCY,
        *,
        rng: Optional[jax.Array] = None,
        random_source: Callable = jax_random_byte,
        sprite_wrap: bool = True,
        logger: Optional[ConsoleLogger] = None,
    ):
        if instruction_frequency <= 0:
            raise ValueError(f"instruction_frequency must be positive, got {instruction_frequency}")
        if timer_frequency <= 0:
            raise ValueError(f"timer_frequency must be positive, got {timer_frequency}")

        self.rom = bytes(rom)
        self.instruction_frequency = float(instruction_frequency)
        self.timer_frequency = float(timer_frequency)
        self.rng = rng if rng is not None else jax.random.PRNGKey(0)
        self.random_source = random_source
        self.sprite_wrap = sprite_wrap
        self.logger = logger or get_logger("Scheduler")
        self.reset()

    def reset(self):
        """Rebuild the machine from scratch with the same ROM.

        A ``SequenceRandomSource`` is rewound to its first value.
        """
        state = create_state(self.rng, random_source=self.random_source, sprite_wrap=self.sprite_wrap)
        self.state: EmulatorState = load_rom(state, self.rom)
        self.halted = False
        self.error: Optional[ExecutionError] = None
        self.elapsed = 0.0
        self.instruction_ticks = 0
        self.timer_ticks = 0
        self.instruction_count = 0
        self.dropped_instructions = 0
        if isinstance(self.random_source, SequenceRandomSource):
            self.random_source.rewind()
        self.logger.info(
            f"Machine reset: {len(self.rom)} byte ROM, "
            f"{self.instruction_frequency:g} Hz instructions, {self.timer_frequency:g} Hz timers"
        )

    @property
    def sound_active(self) -> bool:
        return self.state.sound_active

    @property
    def awaiting_key(self) -> bool:
        return bool(self.state.awaiting_key)

    def framebuffer_snapshot(self) -> np.ndarray:
        return snapshot(self.state.framebuffer)

    def press_key(self, key: int):
        self.state = self.state.replace(keypad=set_pressed(self.state.keypad, key, True))

    def release_key(self, key: int):
        self.state = self.state.replace(keypad=set_pressed(self.state.keypad, key, False))

    def run_instruction_cycle(self):
        """Fire one instruction event.

        Raises:
            ExecutionError: when the instruction fails; the scheduler halts
        """
        if self.halted:
            return
        try:
            self.state = step(self.state)
        except ExecutionError as err:
            self.halted = True
            self.error = err
            self.logger.error(f"Engine halted after {self.instruction_count} instructions: {err}")
            raise
        self.instruction_count += 1

    def run_timer_cycle(self):
        """Fire one 60 Hz timer event."""
        self.state = tick_timers(self.state)

    def _drop_due_instructions(self, horizon: float) -> int:
        due = math.floor(horizon * self.instruction_frequency)
        dropped = max(due - self.instruction_ticks, 0)
        self.instruction_ticks += dropped
        self.dropped_instructions += dropped
        return dropped

    def advance(self, seconds: float, wall_deadline: Optional[float] = None) -> int:
        """Move the virtual clock forward, firing every event now due.

        Events fire in time order; a timer event and an instruction event
        due at the same instant fire timer first.

        Args:
            seconds: Virtual time to move forward by
            wall_deadline: ``time.perf_counter()`` value after which due
                instruction events are dropped instead of executed. Timer
                events always fire.

        Returns:
            Number of instruction events fired.
        """
        if seconds < 0:
            raise ValueError(f"Cannot advance by a negative duration: {seconds}")
        self.elapsed += seconds
        horizon = self.elapsed + _EPSILON
        fired = 0

        while True:
            next_instruction = (self.instruction_ticks + 1) / self.instruction_frequency
            next_timer = (self.timer_ticks + 1) / self.timer_frequency
            if min(next_instruction, next_timer) > horizon:
                break

            if next_timer <= next_instruction:
                self.timer_ticks += 1
                self.run_timer_cycle()
            elif wall_deadline is not None and time.perf_counter() > wall_deadline:
                self._drop_due_instructions(horizon)
            else:
                self.instruction_ticks += 1
                fired += 1
                self.run_instruction_cycle()

        return fired

    def run(
        self,
        on_frame: Optional[Callable[["Scheduler"], None]] = None,
        should_stop: Optional[Callable[[], bool]] = None,
        frame_rate: float = 60.0,
    ):
        """Real-time host loop.

        Advances the machine by wall-clock time once per frame and calls
        ``on_frame`` so adapters can poll input, draw and play sound.
        Instruction work is capped at one frame period per frame. When the
        host falls behind, the instruction events it could not run are
        dropped; timer events keep following the wall clock.
        """
        frame_period = 1.0 / frame_rate
        last = time.perf_counter()

        while not (should_stop and should_stop()):
            now = time.perf_counter()
            self.advance(now - last, wall_deadline=now + frame_period)
            last = now

            if on_frame is not None:
                on_frame(self)

            sleep_time = frame_period - (time.perf_counter() - now)
            if sleep_time > 0:
                time.sleep(sleep_time)
