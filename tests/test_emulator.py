"""End-to-end tests running small programs through fetch/decode/execute."""

import jax.numpy as jnp
import pytest
from chip8vm import create_state, fetch, load_rom, run_cycles, step, tick_timers, UnknownOpcodeError
from chip8vm.constants import FONT_DATA
from chip8vm.keypad import set_pressed
from conftest import assemble, state_with_program


class TestPrograms:
    """Small ROMs with known outcomes."""

    def test_clear_screen_program(self):
        state = load_rom(create_state(), bytes([0x00, 0xE0]))
        pixels = state.display.at[5, 5].set(True)
        state = state.replace(framebuffer=state.framebuffer.replace(pixels=pixels))

        state = step(state)

        assert int(jnp.sum(state.display)) == 0
        assert state.pc == 0x202

    def test_load_and_add_program(self):
        state = load_rom(create_state(), bytes([0x6A, 0x02, 0x7A, 0x05]))

        state = run_cycles(state, 2)

        assert state.V[0xA] == 7
        assert state.pc == 0x204

    def test_draw_font_glyph_program(self):
        state = state_with_program(
            0x6000,  # V0 = 0
            0xF029,  # I = glyph for V0
            0xD005,  # Draw 5 rows at (V0, V0)
        )

        state = run_cycles(state, 3)

        glyph = FONT_DATA[0:5]
        for y, row in enumerate(glyph):
            for x in range(8):
                assert state.display[x, y] == bool((row >> (7 - x)) & 1)
        assert int(jnp.sum(state.display[:, 5:])) == 0
        assert state.V[15] == 0

    def test_skip_program(self):
        state = state_with_program(
            0x6105,  # V1 = 5
            0x3105,  # Skip next if V1 == 5
            0x6163,  # Skipped
            0x6207,  # V2 = 7
        )

        state = run_cycles(state, 3)

        assert state.V[1] == 5
        assert state.V[2] == 7
        assert state.pc == 0x208

    def test_countdown_loop(self):
        state = state_with_program(
            0x6003,  # V0 = 3
            0x7101,  # V1 += 1
            0x70FF,  # V0 -= 1
            0x3000,  # Skip next if V0 == 0
            0x1202,  # Loop
        )

        state = run_cycles(state, 1 + 4 + 4 + 3)

        assert state.V[0] == 0
        assert state.V[1] == 3
        assert state.pc == 0x20A


class TestFetch:
    """Test instruction fetch."""

    def test_fetch_reads_big_endian_and_advances(self):
        state = load_rom(create_state(), assemble(0xA2F0))
        state, instruction = fetch(state)
        assert instruction == 0xA2F0
        assert state.pc == 0x202


class TestUnknownOpcode:
    """Unknown instructions stop the engine with diagnostics."""

    def test_step_raises_with_pc(self):
        state = state_with_program(0x6001, 0xFFFF)
        state = step(state)

        with pytest.raises(UnknownOpcodeError) as excinfo:
            step(state)

        assert excinfo.value.pc == 0x202
        assert excinfo.value.opcode == 0xFFFF

    def test_empty_memory_is_not_executable(self):
        with pytest.raises(UnknownOpcodeError):
            step(create_state())


class TestAwaitKey:
    """FX0A suspends instruction progress until a key goes down."""

    def test_waits_until_key_pressed(self):
        state = state_with_program(0xF30A, 0x6001)

        state = step(state)
        assert state.awaiting_key
        assert state.pc == 0x200

        for _ in range(3):
            state = step(state)
            assert state.awaiting_key
            assert state.pc == 0x200

        state = state.replace(keypad=set_pressed(state.keypad, 0xB, True))
        state = step(state)

        assert not state.awaiting_key
        assert state.V[3] == 0xB
        assert state.pc == 0x202

        state = step(state)
        assert state.V[0] == 1

    def test_key_held_before_wait_is_ignored(self):
        state = state_with_program(0xF30A)
        state = state.replace(keypad=set_pressed(state.keypad, 0x2, True))

        state = step(state)  # Starts waiting with key 2 already down
        state = step(state)
        assert state.awaiting_key

        state = state.replace(keypad=set_pressed(state.keypad, 0x2, False))
        state = step(state)
        state = state.replace(keypad=set_pressed(state.keypad, 0x2, True))
        state = step(state)

        assert not state.awaiting_key
        assert state.V[3] == 0x2

    def test_timers_decay_while_waiting(self):
        state = state_with_program(0x6005, 0xF015, 0xF00A)
        state = run_cycles(state, 3)
        assert state.awaiting_key

        for _ in range(5):
            state = tick_timers(state)

        assert state.delay_timer == 0
        assert state.awaiting_key


class TestTimers:
    """Test the 60 Hz timer tick."""

    def test_tick_decrements_both(self, fresh_state):
        state = fresh_state.replace(
            delay_timer=jnp.array(3, dtype=jnp.uint8),
            sound_timer=jnp.array(1, dtype=jnp.uint8),
        )

        state = tick_timers(state)

        assert state.delay_timer == 2
        assert state.sound_timer == 0
        assert not state.sound_active

    def test_tick_floors_at_zero(self, fresh_state):
        state = tick_timers(tick_timers(fresh_state))
        assert state.delay_timer == 0
        assert state.sound_timer == 0
