#!/usr/bin/env python3
"""
CHIP-8 Emulator Demo
====================

Draws the built-in glyphs A to E side by side, then spins on a jump to
itself. The Emulator runs the program for a fixed number of steps and
prints the display.

Usage:
    python examples/emulator_demo.py
"""

from pathlib import Path

from chip8_vm.emulator import Emulator, EmulatorConfig, glyph_address


def build_program() -> bytes:
    program = bytearray()
    for n, digit in enumerate(range(0xA, 0xF)):
        addr = glyph_address(digit)
        # LD I, glyph
        program += bytes([0xA0 | (addr >> 8), addr & 0xFF])
        # LD V0, column
        program += bytes([0x60, n * 9])
        # DRW V0, V1, 5
        program += bytes([0xD0, 0x15])
    # JP to this instruction (program starts at $0C8)
    loop = 0x0C8 + len(program)
    program += bytes([0x10 | (loop >> 8), loop & 0xFF])
    return bytes(program)


def main():
    output_dir = Path("trash")
    output_dir.mkdir(exist_ok=True)

    emu = Emulator(EmulatorConfig(max_steps=100))
    emu.load_program(build_program())

    print("Disassembly:")
    for line in emu.disassemble_at(0x0C8, count=16):
        print(f"  {line}")

    event = emu.run()
    print(f"\n{event} after {emu.total_steps} steps\n")
    print(emu.display_text)

    screenshot = output_dir / "glyphs.png"
    screenshot.write_bytes(emu.render_display(scale=8))
    print(f"\nScreenshot saved to {screenshot}")


if __name__ == "__main__":
    main()
