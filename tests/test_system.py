"""Tests for system instructions (0xxx) and the call stack."""

import jax.numpy as jnp
import pytest
from chip8vm import execute, step, StackOverflowError, StackUnderflowError, STACK_SIZE
from conftest import state_with_program


def test_execute_clear_screen(fresh_state):
    """Test 00E0 - Clear display."""
    pixels = fresh_state.display.at[0, 0].set(True).at[63, 31].set(True)
    state = fresh_state.replace(framebuffer=fresh_state.framebuffer.replace(pixels=pixels))

    state = execute(state, 0x00E0)

    assert jnp.sum(state.display) == 0


def test_execute_call_and_return(fresh_state):
    """Test 2NNN (call) and 00EE (return) together."""
    state = fresh_state
    initial_pc = state.pc

    # Call subroutine
    state = execute(state, 0x2300)  # Call 0x300
    assert state.pc == 0x300
    assert state.stack.pointer == 1
    assert state.stack.data[state.stack.pointer - 1] == initial_pc

    # Return from subroutine
    state = execute(state, 0x00EE)  # Return
    assert state.pc == initial_pc
    assert state.stack.pointer == 0


def test_call_pushes_address_after_call_instruction():
    """A fetched call returns to the instruction following it."""
    state = state_with_program(0x2206, 0x6A01, 0x1204, 0x00EE)

    state = step(state)  # 0x200: call 0x206
    assert state.pc == 0x206
    assert state.stack.data[0] == 0x202

    state = step(state)  # 0x206: return
    assert state.pc == 0x202


def test_return_with_empty_stack_raises(fresh_state):
    """00EE with nothing stacked is a stack underflow."""
    with pytest.raises(StackUnderflowError) as excinfo:
        execute(fresh_state, 0x00EE)
    assert excinfo.value.opcode == 0x00EE


def test_return_underflow_reports_pc():
    state = state_with_program(0x00EE)

    with pytest.raises(StackUnderflowError) as excinfo:
        step(state)

    assert excinfo.value.pc == 0x200
    assert excinfo.value.opcode == 0x00EE


class TestStackDepth:
    """Test the 16-entry call stack limit."""

    def test_sixteen_nested_calls_succeed(self):
        state = state_with_program(0x2200)  # Calls itself forever

        for depth in range(1, STACK_SIZE + 1):
            state = step(state)
            assert state.stack.pointer == depth
            assert state.pc == 0x200

    def test_seventeenth_call_overflows(self):
        state = state_with_program(0x2200)
        for _ in range(STACK_SIZE):
            state = step(state)

        with pytest.raises(StackOverflowError) as excinfo:
            step(state)

        assert excinfo.value.pc == 0x200
        assert excinfo.value.opcode == 0x2200
        # The failing step leaves the previous state untouched
        assert state.pc == 0x200
        assert state.stack.pointer == STACK_SIZE

    def test_return_unwinds_in_order(self, fresh_state):
        state = fresh_state
        state = execute(state, 0x2300)
        state = execute(state, 0x2400)
        state = execute(state, 0x00EE)
        assert state.pc == 0x300
        state = execute(state, 0x00EE)
        assert state.pc == 0x200
