"""Exceptions raised by the CHIP-8 engine and ROM loader."""

from typing import Optional


class Chip8Error(Exception):
    """Base class for every error raised by chip8vm."""


class RomError(Chip8Error):
    """ROM could not be loaded; raised before any cycle runs."""


class RomNotFoundError(RomError):
    def __init__(self, path: str):
        super().__init__(f"ROM file not found: {path}")
        self.path = path


class RomTooLargeError(RomError):
    def __init__(self, size: int, limit: int):
        super().__init__(f"ROM is {size} bytes, at most {limit} bytes fit in memory")
        self.size = size
        self.limit = limit


class ExecutionError(Chip8Error):
    """Fatal runtime error. Halts the engine.

    Attributes:
        pc: Address of the instruction that failed (filled in by ``step``)
        opcode: Raw 16-bit instruction word
    """

    def __init__(self, message: str, opcode: Optional[int] = None, pc: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.opcode = opcode
        self.pc = pc

    def __str__(self) -> str:
        details = []
        if self.pc is not None:
            details.append(f"pc=0x{self.pc:03X}")
        if self.opcode is not None:
            details.append(f"opcode=0x{self.opcode:04X}")
        if details:
            return f"{self.message} ({', '.join(details)})"
        return self.message


class UnknownOpcodeError(ExecutionError):
    def __init__(self, opcode: int, pc: Optional[int] = None):
        super().__init__("Unknown opcode", opcode=opcode, pc=pc)


class StackOverflowError(ExecutionError):
    def __init__(self, opcode: Optional[int] = None, pc: Optional[int] = None):
        super().__init__("Call stack overflow", opcode=opcode, pc=pc)


class StackUnderflowError(ExecutionError):
    def __init__(self, opcode: Optional[int] = None, pc: Optional[int] = None):
        super().__init__("Return with empty call stack", opcode=opcode, pc=pc)
