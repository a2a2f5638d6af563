"""
chip8-vm Command-Line Interface
===============================

This package provides command-line tools:

- **chip8run**: Headless ROM runner with text/PNG display output
- **chip8disasm**: Disassembler

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["chip8run", "chip8disasm"]
