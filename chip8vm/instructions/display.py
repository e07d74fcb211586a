"""CHIP-8 display operations."""

from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction, Op
from chip8vm.display import draw_sprite
from chip8vm.memory import read_block


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N, VF = collision."""
    rows = read_block(state.memory, state.I, instruction.n)
    framebuffer, collided = draw_sprite(
        state.framebuffer,
        state.V[instruction.x],
        state.V[instruction.y],
        rows,
        wrap=state.sprite_wrap,
    )
    return state.replace(
        framebuffer=framebuffer,
        V=state.V.at[15].set(int(collided))
    )


DISPLAY_HANDLERS = {
    Op.DRW: execute_display,
}
