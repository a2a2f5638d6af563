"""
CHIP-8 VM Error Hierarchy
=========================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from Chip8Error, allowing callers to catch every
VM-related failure with a single except clause if desired.

Exception Hierarchy
-------------------
Chip8Error (base)
├── ExecutionError (fatal, raised by the interpreter during a step)
│   ├── StackOverflowError - call with all 16 stack slots in use
│   ├── StackUnderflowError - return with no pending call
│   ├── InvalidOpcodeError - instruction word outside the decode table
│   └── MemoryAccessError - address outside the 4 KiB memory
└── ProgramError (raised while loading a program)
    ├── ProgramTooLargeError - program does not fit above the reserved area
    └── RomFormatError - ROM file empty or unreadable

Halting is not an error: the halt instruction is reported through
StepResult.HALTED so drivers can leave their loop cleanly.
"""

from typing import Optional


class Chip8Error(Exception):
    """
    Base exception for all CHIP-8 VM errors.

        try:
            emu.run()
        except Chip8Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Execution Errors
# =============================================================================

class ExecutionError(Chip8Error):
    """
    Fatal condition raised while executing an instruction.

    Attributes:
        message: The error description
        address: Address of the instruction that failed (optional)
    """

    def __init__(self, message: str, address: Optional[int] = None):
        self.message = message
        self.address = address
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.address is not None:
            return f"{self.message} at ${self.address:03X}"
        return self.message

    def set_address(self, address: int) -> None:
        """Attach the failing instruction's address and refresh the message."""
        self.address = address
        self.args = (self._format_message(),)


class StackOverflowError(ExecutionError):
    """Subroutine call attempted with no free stack slot."""

    def __init__(self, address: Optional[int] = None):
        super().__init__("Stack overflow", address)


class StackUnderflowError(ExecutionError):
    """Return attempted with no pending call."""

    def __init__(self, address: Optional[int] = None):
        super().__init__("Stack underflow", address)


class InvalidOpcodeError(ExecutionError):
    """
    Instruction word with no handler in the decode table.

    The raw 16-bit word is kept on the exception so drivers can report
    exactly what was fetched.

    Attributes:
        opcode: The raw instruction word
    """

    def __init__(self, opcode: int, address: Optional[int] = None):
        self.opcode = opcode
        super().__init__(f"Unimplemented opcode 0x{opcode:04X}", address)


class MemoryAccessError(ExecutionError):
    """
    Memory access outside the addressable range.

    Attributes:
        target: The address that was out of range
    """

    def __init__(self, target: int, address: Optional[int] = None):
        self.target = target
        super().__init__(f"Memory access out of range (0x{target:X})", address)


# =============================================================================
# Program Loading Errors
# =============================================================================

class ProgramError(Chip8Error):
    """Base exception for program and ROM loading problems."""
    pass


class ProgramTooLargeError(ProgramError):
    """
    Program image does not fit in memory above the reserved area.

    Attributes:
        size: Size of the rejected program in bytes
        limit: Maximum program size in bytes
    """

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"Program is {size} bytes, maximum is {limit}")


class RomFormatError(ProgramError):
    """ROM file is empty or cannot be used as a program image."""
    pass
