"""
Memory Subsystem for the CHIP-8 VM
==================================

Memory Map:
    $000-$04F  Hexadecimal digit glyphs (16 glyphs x 5 bytes)
    $050-$0C7  Reserved, never written by program loading
    $0C8-$FFF  Program image and working memory

The glyph table is installed on construction, after any supplied memory
image, so it is always present regardless of what the caller passed in.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from typing import Optional

from ..errors import MemoryAccessError, ProgramTooLargeError


# =============================================================================
# GLYPH DATA
# =============================================================================
# 4 pixels wide x 5 rows per digit, stored in the high nibble of each byte
# (MSB = leftmost pixel), as drawn by the Dxyn instruction.

FONT_GLYPHS = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])

GLYPH_HEIGHT = 5

MEMORY_SIZE = 0x1000
RESERVED_END = 0x0C8
PROGRAM_START = RESERVED_END
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START


def glyph_address(digit: int) -> int:
    """Address of the glyph for hexadecimal digit 0-15."""
    if not 0 <= digit <= 0xF:
        raise ValueError(f"digit must be 0-15, got {digit}")
    return digit * GLYPH_HEIGHT


class Memory:
    """
    Flat 4 KiB byte-addressable memory.

    Reads and writes outside $000-$FFF raise MemoryAccessError. Values are
    masked to 8 bits on write.

    Example:
        >>> mem = Memory()
        >>> mem.load_program(bytes([0x60, 0x05]))
        >>> hex(mem.read(0x0C8))
        '0x60'
    """

    def __init__(self, image: Optional[bytes] = None):
        """
        Initialize memory.

        Args:
            image: Optional full memory image (at most 4096 bytes). Shorter
                   images are zero-padded. The glyph table is installed on
                   top of it.

        Raises:
            ValueError: If the image is longer than 4096 bytes
        """
        self._data = bytearray(MEMORY_SIZE)
        if image is not None:
            if len(image) > MEMORY_SIZE:
                raise ValueError(
                    f"Memory image is {len(image)} bytes, maximum is {MEMORY_SIZE}"
                )
            self._data[:len(image)] = image
        self._install_glyphs()

    def _install_glyphs(self) -> None:
        self._data[:len(FONT_GLYPHS)] = FONT_GLYPHS

    def __len__(self) -> int:
        return MEMORY_SIZE

    def read(self, address: int) -> int:
        """Read byte at address."""
        if not 0 <= address < MEMORY_SIZE:
            raise MemoryAccessError(address)
        return self._data[address]

    def write(self, address: int, value: int) -> None:
        """Write byte to address (value masked to 8 bits)."""
        if not 0 <= address < MEMORY_SIZE:
            raise MemoryAccessError(address)
        self._data[address] = value & 0xFF

    def read_block(self, address: int, count: int) -> bytes:
        """Read count consecutive bytes starting at address."""
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        if address < 0:
            raise MemoryAccessError(address)
        if address + count > MEMORY_SIZE:
            raise MemoryAccessError(address + count - 1)
        return bytes(self._data[address:address + count])

    def load_program(self, program: bytes) -> None:
        """
        Place a program image at the program start address ($0C8).

        Args:
            program: Program bytes

        Raises:
            ProgramTooLargeError: If the program does not fit in memory
        """
        if len(program) > MAX_PROGRAM_SIZE:
            raise ProgramTooLargeError(len(program), MAX_PROGRAM_SIZE)
        self._data[PROGRAM_START:PROGRAM_START + len(program)] = program

    def dump(self) -> bytes:
        """Return a copy of the whole memory."""
        return bytes(self._data)
