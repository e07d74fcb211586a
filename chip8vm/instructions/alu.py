"""CHIP-8 ALU operations (8xxx).

Each operation takes the values of VX and VY and returns ``(result, flag)``.
``flag`` is the new VF value, or ``None`` when the operation leaves VF
alone. The functions are pure jnp code, so they also work elementwise on
whole arrays of operands.
"""

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction, Op


def _wide(value) -> jnp.ndarray:
    return jnp.astype(value, jnp.int32)


def _byte(value) -> jnp.ndarray:
    return jnp.astype(value & 0xFF, jnp.uint8)


def alu_set(vx, vy):
    """8XY0 - Set: VX = VY."""
    return _byte(_wide(vy)), None


def alu_or(vx, vy):
    """8XY1 - Binary OR: VX |= VY."""
    return _byte(_wide(vx) | _wide(vy)), None


def alu_and(vx, vy):
    """8XY2 - Binary AND: VX &= VY."""
    return _byte(_wide(vx) & _wide(vy)), None


def alu_xor(vx, vy):
    """8XY3 - Logical XOR: VX ^= VY."""
    return _byte(_wide(vx) ^ _wide(vy)), None


def alu_add(vx, vy):
    """8XY4 - Add: VX += VY, VF = carry."""
    result = _wide(vx) + _wide(vy)
    carry = jnp.astype(result > 255, jnp.uint8)
    return _byte(result), carry


def alu_sub_xy(vx, vy):
    """8XY5 - Subtract: VX -= VY, VF = 1 when no borrow occurred."""
    no_borrow = jnp.astype(_wide(vx) >= _wide(vy), jnp.uint8)
    return _byte(_wide(vx) - _wide(vy)), no_borrow


def alu_shift_right(vx, vy):
    """8XY6 - Shift right: VX >>= 1, VF = bit shifted out."""
    shifted_bit = _byte(_wide(vx) & 1)
    return _byte(_wide(vx) >> 1), shifted_bit


def alu_sub_yx(vx, vy):
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when no borrow occurred."""
    no_borrow = jnp.astype(_wide(vy) >= _wide(vx), jnp.uint8)
    return _byte(_wide(vy) - _wide(vx)), no_borrow


def alu_shift_left(vx, vy):
    """8XYE - Shift left: VX <<= 1, VF = bit shifted out."""
    shifted_bit = _byte((_wide(vx) & 0x80) >> 7)
    return _byte(_wide(vx) << 1), shifted_bit


ALU_OPERATIONS = {
    Op.LD_REG: alu_set,
    Op.OR: alu_or,
    Op.AND: alu_and,
    Op.XOR: alu_xor,
    Op.ADD: alu_add,
    Op.SUB: alu_sub_xy,
    Op.SHR: alu_shift_right,
    Op.SUBN: alu_sub_yx,
    Op.SHL: alu_shift_left,
}


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    vx = state.V[instruction.x]
    vy = state.V[instruction.y]

    result, vf = ALU_OPERATIONS[instruction.op](vx, vy)

    # The flag is written last so VF as destination ends up holding the flag
    new_V = state.V.at[instruction.x].set(result)
    if vf is not None:
        new_V = new_V.at[15].set(vf)
    return state.replace(V=new_V)


ALU_HANDLERS = {op: execute_alu_operation for op in ALU_OPERATIONS}
