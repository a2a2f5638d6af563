"""
chip8-vm - CHIP-8 Virtual Machine
=================================

This package emulates the CPU of a simple 8-bit virtual machine with a
fixed instruction set: sixteen 8-bit registers, 4 KiB of memory, a
16-level call stack and a 64 x 32 monochrome display.

Main Components
---------------
- **emulator**: The fetch-decode-execute interpreter (CPU), memory, display
  buffer, breakpoints and the headless Emulator driver

- **disassembler**: Turns program bytes into assembly listings

- **cli**: Command-line tools (chip8run, chip8disasm)

Quick Start
-----------
Run a ROM:
    >>> from chip8_vm import Emulator, EmulatorConfig
    >>> emu = Emulator(EmulatorConfig(seed=0))
    >>> emu.load_rom("glyphs.ch8")
    >>> event = emu.run(max_steps=10_000)
    >>> print(emu.display_text)

Or use the command-line tools:
    $ chip8run glyphs.ch8 --steps 1000
    $ chip8disasm glyphs.ch8
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from chip8_vm.errors import (
    Chip8Error,
    ExecutionError,
    StackOverflowError,
    StackUnderflowError,
    InvalidOpcodeError,
    MemoryAccessError,
    ProgramError,
    ProgramTooLargeError,
    RomFormatError,
)

from chip8_vm.emulator import (
    Emulator,
    EmulatorConfig,
    CPU,
    CPUConfig,
    CPUState,
    StepResult,
    Display,
    Memory,
    BreakEvent,
    BreakReason,
)

from chip8_vm.disassembler import Chip8Disassembler

__all__ = [
    "__version__",
    # Exception hierarchy
    "Chip8Error",
    "ExecutionError",
    "StackOverflowError",
    "StackUnderflowError",
    "InvalidOpcodeError",
    "MemoryAccessError",
    "ProgramError",
    "ProgramTooLargeError",
    "RomFormatError",
    # Emulator
    "Emulator",
    "EmulatorConfig",
    "CPU",
    "CPUConfig",
    "CPUState",
    "StepResult",
    "Display",
    "Memory",
    "BreakEvent",
    "BreakReason",
    # Disassembler
    "Chip8Disassembler",
]
