"""Random byte sources for the CXNN instruction.

A source is any callable ``source(key) -> (new_key, byte)``. The emulator
state carries both the JAX PRNG key and the source, so seeding is done by
choosing the key and tests can swap in a fixed sequence.
"""

from collections.abc import Iterable

import jax
import jax.numpy as jnp


def jax_random_byte(key: jax.Array) -> tuple[jax.Array, int]:
    """Draw a uniform byte from the JAX PRNG, returning the advanced key."""
    key, subkey = jax.random.split(key)
    value = jax.random.randint(subkey, shape=(), minval=0, maxval=256, dtype=jnp.int32)
    return key, int(value)


class SequenceRandomSource:
    """Replays a fixed list of bytes, cycling when exhausted."""

    def __init__(self, values: Iterable[int]):
        self.values = [int(v) & 0xFF for v in values]
        if not self.values:
            raise ValueError("SequenceRandomSource needs at least one value")
        self.position = 0

    def rewind(self):
        """Start replaying from the first value again."""
        self.position = 0

    def __call__(self, key: jax.Array) -> tuple[jax.Array, int]:
        value = self.values[self.position % len(self.values)]
        self.position += 1
        return key, value
