"""
CHIP-8 Disassembler Package
===========================

Converts CHIP-8 program bytes back into assembly listings.

    >>> from chip8_vm.disassembler import Chip8Disassembler
    >>> disasm = Chip8Disassembler()
    >>> listing = disasm.disassemble(rom_bytes, start_address=0x0C8)

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from .chip8 import Chip8Disassembler, DisassembledInstruction, format_instruction

__all__ = [
    "Chip8Disassembler",
    "DisassembledInstruction",
    "format_instruction",
]
