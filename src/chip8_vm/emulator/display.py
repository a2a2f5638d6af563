"""
Monochrome Display Buffer for the CHIP-8 VM
===========================================

The display is a 64 x 32 grid of pixels, row-major, True meaning lit.
It is owned by the driver and lent to the CPU for each step; only the
draw instruction mutates it.

Sprites are 8 pixels wide and 1-15 rows tall, one byte per row with the
most significant bit as the leftmost pixel. Each sprite bit is XORed onto
the grid. A pixel going from lit to unlit is a collision.

Edge policy: sprite origins and pixels that run past an edge wrap around
to the opposite side (modulo 64 columns and 32 rows).

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import io
from typing import List

from PIL import Image


DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
SPRITE_WIDTH = 8


class Display:
    """
    64 x 32 monochrome pixel buffer.

    Example:
        >>> display = Display()
        >>> display.draw_sprite(0, 0, bytes([0xF0]))
        False
        >>> display.get_pixel(3, 0)
        True
    """

    def __init__(self):
        self.pixels: List[List[bool]] = [
            [False] * DISPLAY_WIDTH for _ in range(DISPLAY_HEIGHT)
        ]
        self._needs_refresh = True

    @property
    def width(self) -> int:
        return DISPLAY_WIDTH

    @property
    def height(self) -> int:
        return DISPLAY_HEIGHT

    @property
    def needs_refresh(self) -> bool:
        """True if the buffer changed since the last render."""
        return self._needs_refresh

    @property
    def lit_count(self) -> int:
        """Number of lit pixels."""
        return sum(row.count(True) for row in self.pixels)

    def clear(self) -> None:
        """Turn every pixel off."""
        for row in self.pixels:
            for col in range(DISPLAY_WIDTH):
                row[col] = False
        self._needs_refresh = True

    def get_pixel(self, col: int, row: int) -> bool:
        """Pixel state at (col, row), no wrapping."""
        return self.pixels[row][col]

    def draw_sprite(self, col: int, row: int, sprite: bytes) -> bool:
        """
        XOR a sprite onto the buffer.

        Args:
            col: Column of the sprite's top-left corner
            row: Row of the sprite's top-left corner
            sprite: One byte per sprite row, MSB leftmost

        Returns:
            True if any lit pixel was turned off (collision)
        """
        collision = False
        for row_offset, line in enumerate(sprite):
            y = (row + row_offset) % DISPLAY_HEIGHT
            target = self.pixels[y]
            for bit in range(SPRITE_WIDTH):
                if not line & (0x80 >> bit):
                    continue
                x = (col + bit) % DISPLAY_WIDTH
                if target[x]:
                    collision = True
                target[x] = not target[x]
        self._needs_refresh = True
        return collision

    # =========================================================================
    # Output
    # =========================================================================

    def get_text_grid(self, on: str = "#", off: str = " ") -> List[str]:
        """Return the buffer as one string per row."""
        return ["".join(on if lit else off for lit in row) for row in self.pixels]

    def get_text(self, on: str = "#", off: str = " ") -> str:
        """Return the buffer as newline-separated rows."""
        return "\n".join(self.get_text_grid(on, off))

    def render_image(
        self,
        scale: int = 10,
        ink_color: tuple = (0, 255, 0),
        paper_color: tuple = (0, 0, 0),
    ) -> bytes:
        """
        Render the buffer as a PNG image.

        Lit pixels are drawn as uniform squares of ink_color on a
        paper_color background.

        Args:
            scale: Size in image pixels of one display pixel (default 10)
            ink_color: RGB tuple for lit pixels (default green)
            paper_color: RGB tuple for background (default black)

        Returns:
            PNG image bytes
        """
        if scale < 1:
            raise ValueError(f"scale must be at least 1, got {scale}")

        img = Image.new("RGB", (DISPLAY_WIDTH, DISPLAY_HEIGHT), color=paper_color)
        for y, row in enumerate(self.pixels):
            for x, lit in enumerate(row):
                if lit:
                    img.putpixel((x, y), ink_color)
        if scale > 1:
            img = img.resize(
                (DISPLAY_WIDTH * scale, DISPLAY_HEIGHT * scale),
                resample=Image.Resampling.NEAREST,
            )

        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        self._needs_refresh = False
        return buffer.getvalue()
