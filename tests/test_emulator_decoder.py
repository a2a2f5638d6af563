"""
CHIP-8 Decoder Unit Tests
=========================

Tests for nibble splitting, the decode table and the Instruction
field accessors.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import pytest

from chip8_vm.emulator.decoder import (
    Instruction,
    Opcode,
    decode,
    decode_nibbles,
    split_nibbles,
)


# =============================================================================
# Field Extraction Tests
# =============================================================================

class TestFields:
    """Test extraction of instruction fields."""

    def test_split_nibbles(self):
        assert split_nibbles(0x8156) == (0x8, 0x1, 0x5, 0x6)

    def test_instruction_fields(self):
        inst = decode(0xD12A)
        assert inst.c == 0xD
        assert inst.x == 0x1
        assert inst.y == 0x2
        assert inst.d == 0xA
        assert inst.nnn == 0x12A
        assert inst.nn == 0x2A

    def test_decode_masks_to_16_bits(self):
        assert decode(0x1_6005).word == 0x6005

    def test_instruction_equality_uses_word(self):
        assert decode(0x6005) == Instruction(0x6005)

    def test_instruction_is_frozen(self):
        inst = decode(0x6005)
        with pytest.raises(AttributeError):
            inst.word = 0x6006


# =============================================================================
# Decode Table Tests
# =============================================================================

class TestDecodeTable:
    """Test that every listed pattern maps to its operation."""

    @pytest.mark.parametrize("word,opcode", [
        (0x0000, Opcode.HALT),
        (0x00EE, Opcode.RETURN),
        (0x1234, Opcode.JUMP),
        (0x2345, Opcode.CALL),
        (0x3A12, Opcode.SKIP_EQ_IMM),
        (0x4A12, Opcode.SKIP_NE_IMM),
        (0x5AB0, Opcode.SKIP_EQ_REG),
        (0x6A12, Opcode.LOAD_IMM),
        (0x7A12, Opcode.ADD_IMM),
        (0x8AB0, Opcode.MOVE),
        (0x8AB1, Opcode.OR),
        (0x8AB2, Opcode.AND),
        (0x8AB3, Opcode.XOR),
        (0x8AB4, Opcode.ADD),
        (0x8AB5, Opcode.SUB),
        (0x8AB6, Opcode.SHIFT_RIGHT),
        (0x8AB7, Opcode.SUBN),
        (0x8ABE, Opcode.SHIFT_LEFT),
        (0x9AB0, Opcode.SKIP_NE_REG),
        (0xA123, Opcode.LOAD_I),
        (0xB123, Opcode.JUMP_OFFSET),
        (0xC3FF, Opcode.RAND),
        (0xD125, Opcode.DRAW),
        (0xF31E, Opcode.ADD_I),
        (0xF333, Opcode.BCD),
        (0xF355, Opcode.STORE_REGS),
        (0xF365, Opcode.LOAD_REGS),
    ])
    def test_valid(self, word, opcode):
        inst = decode(word)
        assert inst.opcode is opcode
        assert inst.is_valid
        assert decode_nibbles(*split_nibbles(word)) is opcode

    @pytest.mark.parametrize("word", [
        0x00E0,  # clear screen is not part of this instruction set
        0x0001,
        0x0ABC,
        0x5AB1,
        0x8AB8,
        0x8ABF,
        0x9ABF,
        0xE09E,
        0xE0A1,
        0xF007,
        0xF00A,
        0xF018,
        0xF029,
        0xF3FF,
    ])
    def test_invalid(self, word):
        inst = decode(word)
        assert inst.opcode is None
        assert not inst.is_valid

    def test_every_word_decodes_without_error(self):
        """Decoding is total: any 16-bit word yields an Opcode or None."""
        for word in range(0x10000):
            result = decode_nibbles(*split_nibbles(word))
            assert result is None or isinstance(result, Opcode)

    def test_arithmetic_class_ignores_y_for_shifts(self):
        assert decode(0x8106).opcode is Opcode.SHIFT_RIGHT
        assert decode(0x81F6).opcode is Opcode.SHIFT_RIGHT
