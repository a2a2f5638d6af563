"""
CHIP-8 Virtual Machine Emulator
===============================

Interpreter and headless driver for a CHIP-8 style 8-bit virtual machine:

- **CPU**: 16 x 8-bit registers, I register, 16-level call stack
- **Memory**: 4 KiB with the hexadecimal glyph table at $000-$04F
- **Display**: 64 x 32 monochrome XOR-drawn pixel buffer
- **Debugging**: PC breakpoints and register conditions

Quick Start
-----------

Interpreter only::

    >>> from chip8_vm.emulator import CPU, CPUConfig, Display, StepResult
    >>> cpu = CPU(CPUConfig(program=bytes([0x60, 0x05, 0x00, 0x00])))
    >>> display = Display()
    >>> while cpu.step(display) is StepResult.CONTINUE:
    ...     pass
    >>> cpu.register(0)
    5

Driver::

    >>> from chip8_vm.emulator import Emulator, EmulatorConfig
    >>> emu = Emulator(EmulatorConfig(rom_path=Path("glyphs.ch8")))
    >>> event = emu.run()
    >>> print(emu.display_text)

Module Structure
----------------

- `emulator.py`: Emulator driver (high-level API)
- `cpu.py`: Fetch-decode-execute interpreter
- `decoder.py`: Instruction word decoding
- `memory.py`: 4 KiB memory and glyph table
- `display.py`: Pixel buffer and rendering
- `breakpoints.py`: Debugging support

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

# Main entry point
from .emulator import Emulator, EmulatorConfig

# CPU components
from .cpu import CPU, CPUConfig, CPUState, StepResult

# Decoding
from .decoder import Instruction, Opcode, decode, decode_nibbles

# Memory and display
from .memory import (
    Memory,
    FONT_GLYPHS,
    MEMORY_SIZE,
    PROGRAM_START,
    MAX_PROGRAM_SIZE,
    glyph_address,
)
from .display import Display, DISPLAY_WIDTH, DISPLAY_HEIGHT

# Debugging support
from .breakpoints import (
    BreakpointManager,
    BreakEvent,
    BreakReason,
    RegisterCondition,
)

__all__ = [
    # Main API
    "Emulator",
    "EmulatorConfig",

    # CPU
    "CPU",
    "CPUConfig",
    "CPUState",
    "StepResult",

    # Decoding
    "Instruction",
    "Opcode",
    "decode",
    "decode_nibbles",

    # Memory
    "Memory",
    "FONT_GLYPHS",
    "MEMORY_SIZE",
    "PROGRAM_START",
    "MAX_PROGRAM_SIZE",
    "glyph_address",

    # Display
    "Display",
    "DISPLAY_WIDTH",
    "DISPLAY_HEIGHT",

    # Debugging
    "BreakpointManager",
    "BreakEvent",
    "BreakReason",
    "RegisterCondition",
]
