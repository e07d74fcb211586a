"""Tests for ROM reading and loading."""

import pytest
from chip8vm import create_state, load_rom, RomNotFoundError, RomTooLargeError
from chip8vm.constants import MAX_ROM_SIZE
from chip8vm.rom import read_rom


def test_read_rom(tmp_path):
    path = tmp_path / "game.ch8"
    path.write_bytes(bytes([0x00, 0xE0, 0x12, 0x00]))
    assert read_rom(path) == bytes([0x00, 0xE0, 0x12, 0x00])


def test_missing_rom(tmp_path):
    with pytest.raises(RomNotFoundError) as excinfo:
        read_rom(tmp_path / "missing.ch8")
    assert "missing.ch8" in str(excinfo.value)


def test_directory_is_not_a_rom(tmp_path):
    with pytest.raises(RomNotFoundError):
        read_rom(tmp_path)


def test_largest_rom_accepted(tmp_path):
    path = tmp_path / "big.ch8"
    path.write_bytes(bytes(MAX_ROM_SIZE))
    assert len(read_rom(path)) == 3584


def test_oversized_rom_rejected(tmp_path):
    path = tmp_path / "huge.ch8"
    path.write_bytes(bytes(MAX_ROM_SIZE + 1))
    with pytest.raises(RomTooLargeError):
        read_rom(path)


def test_load_rom_accepts_path(tmp_path):
    path = tmp_path / "game.ch8"
    path.write_bytes(bytes([0x6A, 0x02]))

    state = load_rom(create_state(), path)

    assert state.memory[0x200] == 0x6A
    assert state.memory[0x201] == 0x02


def test_load_rom_size_limit():
    load_rom(create_state(), bytes(3584))
    with pytest.raises(RomTooLargeError):
        load_rom(create_state(), bytes(3585))
