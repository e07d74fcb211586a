"""Reading ROM images from disk."""

import os
from typing import Union

from chip8vm.constants import MAX_ROM_SIZE
from chip8vm.errors import RomNotFoundError, RomTooLargeError


def read_rom(path: Union[str, os.PathLike]) -> bytes:
    """Read a raw CHIP-8 ROM file.

    Raises:
        RomNotFoundError: if ``path`` does not name a readable file
        RomTooLargeError: if the file is larger than 3584 bytes
    """
    try:
        with open(path, 'rb') as f:
            rom_data = f.read()
    except (FileNotFoundError, IsADirectoryError) as err:
        raise RomNotFoundError(os.fspath(path)) from err

    if len(rom_data) > MAX_ROM_SIZE:
        raise RomTooLargeError(len(rom_data), MAX_ROM_SIZE)
    return rom_data
