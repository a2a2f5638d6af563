"""
Instruction Decoder
===================

Splits a 16-bit instruction word into its fields and maps the nibble
pattern onto an Opcode.

Field layout (big-endian word):

    15    12 11     8 7      4 3      0
    +-------+--------+--------+--------+
    |   c   |   x    |   y    |   d    |
    +-------+--------+--------+--------+
            |<------------ nnn ------->|
                     |<----- nn ------>|

decode_nibbles() is a pure function and the single source of truth for
which words are valid. Anything it does not recognise returns None and the
CPU treats it as a fatal decode failure.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional


class Opcode(Enum):
    """Operations understood by the interpreter."""
    # Control flow
    HALT = auto()           # 0000
    RETURN = auto()         # 00EE
    JUMP = auto()           # 1nnn
    CALL = auto()           # 2nnn
    JUMP_OFFSET = auto()    # Bnnn
    # Conditional skips
    SKIP_EQ_IMM = auto()    # 3xnn
    SKIP_NE_IMM = auto()    # 4xnn
    SKIP_EQ_REG = auto()    # 5xy0
    SKIP_NE_REG = auto()    # 9xy0
    # Register / ALU
    LOAD_IMM = auto()       # 6xnn
    ADD_IMM = auto()        # 7xnn
    MOVE = auto()           # 8xy0
    OR = auto()             # 8xy1
    AND = auto()            # 8xy2
    XOR = auto()            # 8xy3
    ADD = auto()            # 8xy4
    SUB = auto()            # 8xy5
    SHIFT_RIGHT = auto()    # 8xy6
    SUBN = auto()           # 8xy7
    SHIFT_LEFT = auto()     # 8xyE
    RAND = auto()           # Cxnn
    # Memory indirection
    LOAD_I = auto()         # Annn
    ADD_I = auto()          # Fx1E
    BCD = auto()            # Fx33
    STORE_REGS = auto()     # Fx55
    LOAD_REGS = auto()      # Fx65
    # Display
    DRAW = auto()           # Dxyn


def split_nibbles(word: int) -> tuple[int, int, int, int]:
    """Split a 16-bit word into (c, x, y, d)."""
    return (
        (word & 0xF000) >> 12,
        (word & 0x0F00) >> 8,
        (word & 0x00F0) >> 4,
        word & 0x000F,
    )


def decode_nibbles(c: int, x: int, y: int, d: int) -> Optional[Opcode]:
    """
    Map a nibble pattern to its Opcode.

    Returns:
        The Opcode, or None if the pattern is not part of the instruction set
    """
    match (c, x, y, d):
        case (0x0, 0x0, 0x0, 0x0):
            return Opcode.HALT
        case (0x0, 0x0, 0xE, 0xE):
            return Opcode.RETURN
        case (0x1, _, _, _):
            return Opcode.JUMP
        case (0x2, _, _, _):
            return Opcode.CALL
        case (0x3, _, _, _):
            return Opcode.SKIP_EQ_IMM
        case (0x4, _, _, _):
            return Opcode.SKIP_NE_IMM
        case (0x5, _, _, 0x0):
            return Opcode.SKIP_EQ_REG
        case (0x6, _, _, _):
            return Opcode.LOAD_IMM
        case (0x7, _, _, _):
            return Opcode.ADD_IMM
        case (0x8, _, _, 0x0):
            return Opcode.MOVE
        case (0x8, _, _, 0x1):
            return Opcode.OR
        case (0x8, _, _, 0x2):
            return Opcode.AND
        case (0x8, _, _, 0x3):
            return Opcode.XOR
        case (0x8, _, _, 0x4):
            return Opcode.ADD
        case (0x8, _, _, 0x5):
            return Opcode.SUB
        case (0x8, _, _, 0x6):
            return Opcode.SHIFT_RIGHT
        case (0x8, _, _, 0x7):
            return Opcode.SUBN
        case (0x8, _, _, 0xE):
            return Opcode.SHIFT_LEFT
        case (0x9, _, _, 0x0):
            return Opcode.SKIP_NE_REG
        case (0xA, _, _, _):
            return Opcode.LOAD_I
        case (0xB, _, _, _):
            return Opcode.JUMP_OFFSET
        case (0xC, _, _, _):
            return Opcode.RAND
        case (0xD, _, _, _):
            return Opcode.DRAW
        case (0xF, _, 0x1, 0xE):
            return Opcode.ADD_I
        case (0xF, _, 0x3, 0x3):
            return Opcode.BCD
        case (0xF, _, 0x5, 0x5):
            return Opcode.STORE_REGS
        case (0xF, _, 0x6, 0x5):
            return Opcode.LOAD_REGS
        case _:
            return None


@dataclass(frozen=True)
class Instruction:
    """
    A fetched instruction word with its decoded fields.

    Attributes:
        word: The raw 16-bit instruction word
        opcode: Decoded operation, or None if the word is not valid
    """
    word: int
    opcode: Optional[Opcode] = field(init=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "opcode", decode_nibbles(*split_nibbles(self.word)))

    @property
    def c(self) -> int:
        """Operation class nibble (bits 12-15)."""
        return (self.word & 0xF000) >> 12

    @property
    def x(self) -> int:
        """First register nibble (bits 8-11)."""
        return (self.word & 0x0F00) >> 8

    @property
    def y(self) -> int:
        """Second register nibble (bits 4-7)."""
        return (self.word & 0x00F0) >> 4

    @property
    def d(self) -> int:
        """Low nibble (bits 0-3)."""
        return self.word & 0x000F

    @property
    def nnn(self) -> int:
        """12-bit address immediate."""
        return self.word & 0x0FFF

    @property
    def nn(self) -> int:
        """8-bit immediate."""
        return self.word & 0x00FF

    @property
    def is_valid(self) -> bool:
        return self.opcode is not None


def decode(word: int) -> Instruction:
    """Decode a 16-bit instruction word."""
    return Instruction(word & 0xFFFF)
