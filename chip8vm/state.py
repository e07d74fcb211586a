"""CHIP-8 emulator state structures."""

from typing import Callable

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chip8vm.constants import PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, NUM_REGISTERS, STACK_SIZE
from chip8vm.display import Framebuffer
from chip8vm.keypad import KeypadLatch
from chip8vm.rng import jax_random_byte


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    Holds the whole machine: memory image, register file, call stack,
    timers, framebuffer and keypad latch. Instances are immutable; every
    operation returns an updated copy via ``replace``.

    ``awaiting_key`` and ``key_register`` encode the FX0A cycle mode: while
    set, instruction cycles only poll the keypad for a new press to store
    in ``V[key_register]``.
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    stack: StackState = StackState()
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    framebuffer: Framebuffer = Framebuffer()
    keypad: KeypadLatch = KeypadLatch()
    awaiting_key: bool = False
    key_register: int = 0
    random_source: Callable = field(pytree_node=False, default=jax_random_byte)
    sprite_wrap: bool = field(pytree_node=False, default=True)

    @property
    def display(self) -> jnp.ndarray:
        """Framebuffer pixels, shape (64, 32), indexed [x, y]."""
        return self.framebuffer.pixels

    @property
    def sound_active(self) -> bool:
        """True while the sound timer is nonzero."""
        return int(self.sound_timer) > 0


def create_state(
    rng: jax.random.PRNGKey = None,
    *,
    random_source: Callable = jax_random_byte,
    sprite_wrap: bool = True,
) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    if rng is None:
        rng = jax.random.PRNGKey(0)
    state = EmulatorState(rng, random_source=random_source, sprite_wrap=sprite_wrap)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(jnp.array(FONT_DATA, dtype=jnp.uint8)))
