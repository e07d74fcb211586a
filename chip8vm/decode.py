"""CHIP-8 instruction decoding."""

import enum

from chex import dataclass

from chip8vm.errors import UnknownOpcodeError


class Op(enum.Enum):
    """One tag per instruction of the original CHIP-8 set."""
    CLS = "00E0"
    RET = "00EE"
    JP = "1NNN"
    CALL = "2NNN"
    SE_IMM = "3XNN"
    SNE_IMM = "4XNN"
    SE_REG = "5XY0"
    LD_IMM = "6XNN"
    ADD_IMM = "7XNN"
    LD_REG = "8XY0"
    OR = "8XY1"
    AND = "8XY2"
    XOR = "8XY3"
    ADD = "8XY4"
    SUB = "8XY5"
    SHR = "8XY6"
    SUBN = "8XY7"
    SHL = "8XYE"
    SNE_REG = "9XY0"
    LD_I = "ANNN"
    JP_V0 = "BNNN"
    RND = "CXNN"
    DRW = "DXYN"
    SKP = "EX9E"
    SKNP = "EXA1"
    LD_VX_DT = "FX07"
    LD_VX_K = "FX0A"
    LD_DT_VX = "FX15"
    LD_ST_VX = "FX18"
    ADD_I = "FX1E"
    LD_F = "FX29"
    BCD = "FX33"
    STORE = "FX55"
    LOAD = "FX65"


# Second-level tables keyed by the low nibble / low byte
_ALU_OPS = {
    0x0: Op.LD_REG, 0x1: Op.OR, 0x2: Op.AND, 0x3: Op.XOR, 0x4: Op.ADD,
    0x5: Op.SUB, 0x6: Op.SHR, 0x7: Op.SUBN, 0xE: Op.SHL,
}
_KEY_OPS = {0x9E: Op.SKP, 0xA1: Op.SKNP}
_MISC_OPS = {
    0x07: Op.LD_VX_DT, 0x0A: Op.LD_VX_K, 0x15: Op.LD_DT_VX, 0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I, 0x29: Op.LD_F, 0x33: Op.BCD, 0x55: Op.STORE, 0x65: Op.LOAD,
}
_SIMPLE_OPS = {
    0x1: Op.JP, 0x2: Op.CALL, 0x3: Op.SE_IMM, 0x4: Op.SNE_IMM, 0x6: Op.LD_IMM,
    0x7: Op.ADD_IMM, 0xA: Op.LD_I, 0xB: Op.JP_V0, 0xC: Op.RND, 0xD: Op.DRW,
}


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    op: Op
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


def classify(instruction: int) -> Op:
    """Map a raw 16-bit word to its instruction tag.

    Raises:
        UnknownOpcodeError: if the word is not a CHIP-8 instruction
    """
    family = (instruction & 0xF000) >> 12
    n = instruction & 0x000F
    nn = instruction & 0x00FF

    if family in _SIMPLE_OPS:
        op = _SIMPLE_OPS[family]
    elif instruction == 0x00E0:
        op = Op.CLS
    elif instruction == 0x00EE:
        op = Op.RET
    elif family == 0x5 and n == 0:
        op = Op.SE_REG
    elif family == 0x8:
        op = _ALU_OPS.get(n)
    elif family == 0x9 and n == 0:
        op = Op.SNE_REG
    elif family == 0xE:
        op = _KEY_OPS.get(nn)
    elif family == 0xF:
        op = _MISC_OPS.get(nn)
    else:
        op = None

    if op is None:
        raise UnknownOpcodeError(instruction)
    return op


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into its tag and operands."""
    instruction = int(instruction) & 0xFFFF
    return DecodedInstruction(
        raw=instruction,
        op=classify(instruction),
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )
