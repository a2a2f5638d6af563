"""
CHIP-8 Disassembler
===================

Turns CHIP-8 program bytes into readable assembly, using the same decoder
as the interpreter so the listing always agrees with what the CPU runs.

Every instruction is two bytes, big-endian. Words the decoder rejects are
listed as `.WORD $xxxx` data.

Mnemonics follow the common CHIP-8 assembler conventions:

    0000 HALT            8xy4 ADD Vx, Vy      Annn LD I, $nnn
    00EE RET             8xy5 SUB Vx, Vy      Bnnn JP V0, $nnn
    1nnn JP $nnn         8xy6 SHR Vx          Cxnn RND V0, #$nn
    2nnn CALL $nnn       8xy7 SUBN Vx, Vy     Dxyn DRW Vx, Vy, n
    3xnn SE Vx, #$nn     8xyE SHL Vx          Fx1E ADD I, Vx
    4xnn SNE Vx, #$nn    9xy0 SNE Vx, Vy      Fx33 LD B, Vx
    5xy0 SE Vx, Vy       6xnn LD Vx, #$nn     Fx55 LD [I], Vx
    7xnn ADD Vx, #$nn    8xy0-3 LD/OR/AND/XOR Fx65 LD Vx, [I]

Usage:
    disasm = Chip8Disassembler()
    for instr in disasm.disassemble(rom, start_address=0x0C8):
        print(instr)

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..emulator.decoder import Instruction, Opcode, decode


@dataclass
class DisassembledInstruction:
    """
    A single disassembled instruction.

    Attributes:
        address: Memory address of the instruction
        opcode: The raw 16-bit word
        mnemonic: Instruction mnemonic (e.g. "LD", "DRW")
        operand_str: Formatted operands
        raw_bytes: Bytes comprising this instruction
        comment: Optional annotation
    """
    address: int
    opcode: int
    mnemonic: str
    operand_str: str
    raw_bytes: bytes
    comment: str = ""

    @property
    def size(self) -> int:
        return len(self.raw_bytes)

    def __str__(self) -> str:
        hex_bytes = " ".join(f"{b:02X}" for b in self.raw_bytes).ljust(5)
        asm = f"{self.mnemonic} {self.operand_str}" if self.operand_str else self.mnemonic
        if self.comment:
            return f"${self.address:03X}: {hex_bytes}  {asm:<16} ; {self.comment}"
        return f"${self.address:03X}: {hex_bytes}  {asm}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "address": f"${self.address:03X}",
            "address_int": self.address,
            "opcode": f"${self.opcode:04X}",
            "mnemonic": self.mnemonic,
            "operand": self.operand_str,
            "bytes": [f"${b:02X}" for b in self.raw_bytes],
            "comment": self.comment,
        }


def format_instruction(inst: Instruction) -> Tuple[str, str, str]:
    """
    Format a decoded instruction.

    Returns:
        Tuple of (mnemonic, operand_string, comment)
    """
    x, y = inst.x, inst.y
    vx, vy = f"V{x:X}", f"V{y:X}"
    nn = f"#${inst.nn:02X}"
    nnn = f"${inst.nnn:03X}"

    match inst.opcode:
        case Opcode.HALT:
            return "HALT", "", ""
        case Opcode.RETURN:
            return "RET", "", ""
        case Opcode.JUMP:
            return "JP", nnn, ""
        case Opcode.CALL:
            return "CALL", nnn, ""
        case Opcode.JUMP_OFFSET:
            return "JP", f"V0, {nnn}", ""
        case Opcode.SKIP_EQ_IMM:
            return "SE", f"{vx}, {nn}", ""
        case Opcode.SKIP_NE_IMM:
            return "SNE", f"{vx}, {nn}", ""
        case Opcode.SKIP_EQ_REG:
            return "SE", f"{vx}, {vy}", ""
        case Opcode.SKIP_NE_REG:
            return "SNE", f"{vx}, {vy}", ""
        case Opcode.LOAD_IMM:
            return "LD", f"{vx}, {nn}", ""
        case Opcode.ADD_IMM:
            return "ADD", f"{vx}, {nn}", ""
        case Opcode.MOVE:
            return "LD", f"{vx}, {vy}", ""
        case Opcode.OR:
            return "OR", f"{vx}, {vy}", ""
        case Opcode.AND:
            return "AND", f"{vx}, {vy}", ""
        case Opcode.XOR:
            return "XOR", f"{vx}, {vy}", ""
        case Opcode.ADD:
            return "ADD", f"{vx}, {vy}", ""
        case Opcode.SUB:
            return "SUB", f"{vx}, {vy}", ""
        case Opcode.SHIFT_RIGHT:
            return "SHR", vx, ""
        case Opcode.SUBN:
            return "SUBN", f"{vx}, {vy}", ""
        case Opcode.SHIFT_LEFT:
            return "SHL", vx, ""
        case Opcode.RAND:
            comment = f"x={x:X} ignored, writes V0" if x else ""
            return "RND", f"V0, {nn}", comment
        case Opcode.LOAD_I:
            return "LD", f"I, {nnn}", ""
        case Opcode.ADD_I:
            return "ADD", f"I, {vx}", ""
        case Opcode.BCD:
            return "LD", f"B, {vx}", ""
        case Opcode.STORE_REGS:
            return "LD", f"[I], {vx}", ""
        case Opcode.LOAD_REGS:
            return "LD", f"{vx}, [I]", ""
        case Opcode.DRAW:
            return "DRW", f"{vx}, {vy}, {inst.d}", ""
        case _:
            return ".WORD", f"${inst.word:04X}", "unknown opcode"


class Chip8Disassembler:
    """
    Disassembler for CHIP-8 program bytes.

    Example:
        >>> disasm = Chip8Disassembler()
        >>> str(disasm.disassemble_one(bytes([0x81, 0x54]), address=0x0C8))
        '$0C8: 81 54  ADD V1, V5'
    """

    def disassemble_one(
        self,
        data: bytes,
        address: int = 0,
        offset: int = 0
    ) -> DisassembledInstruction:
        """
        Disassemble the instruction at data[offset].

        Args:
            data: Byte buffer containing the instruction
            address: Memory address of the instruction (for display)
            offset: Offset into data where the instruction starts

        Returns:
            DisassembledInstruction

        Raises:
            ValueError: If offset is beyond the end of data
        """
        if offset >= len(data):
            raise ValueError(f"Offset {offset} beyond data length {len(data)}")

        if offset + 2 > len(data):
            # Trailing odd byte
            return DisassembledInstruction(
                address=address,
                opcode=data[offset],
                mnemonic=".BYTE",
                operand_str=f"${data[offset]:02X}",
                raw_bytes=bytes(data[offset:offset + 1]),
                comment="incomplete instruction",
            )

        raw = bytes(data[offset:offset + 2])
        inst = decode((raw[0] << 8) | raw[1])
        mnemonic, operand_str, comment = format_instruction(inst)
        return DisassembledInstruction(
            address=address,
            opcode=inst.word,
            mnemonic=mnemonic,
            operand_str=operand_str,
            raw_bytes=raw,
            comment=comment,
        )

    def disassemble(
        self,
        data: bytes,
        start_address: int = 0,
        count: Optional[int] = None
    ) -> List[DisassembledInstruction]:
        """
        Disassemble a run of instructions.

        Args:
            data: Program bytes
            start_address: Address of data[0]
            count: Maximum number of instructions (default: all)

        Returns:
            List of DisassembledInstruction
        """
        result = []
        offset = 0
        while offset < len(data):
            if count is not None and len(result) >= count:
                break
            instr = self.disassemble_one(data, start_address + offset, offset)
            result.append(instr)
            offset += instr.size
        return result
