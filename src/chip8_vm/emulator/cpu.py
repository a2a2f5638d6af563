"""
CHIP-8 CPU Interpreter
======================

Fetch-decode-execute engine for the CHIP-8 style virtual machine.

Registers:
- V0-VF: 16 general purpose 8-bit registers. VF doubles as the
  carry/borrow/collision flag and is overwritten by arithmetic, shift and
  draw instructions.
- I: 16-bit address register for indirect memory access and sprites
- PC: program counter, starts at $0C8
- SP: index of the next free slot in the 16-entry return stack

Each call to step() fetches the big-endian word at PC, advances PC by 2,
decodes the word and runs its handler. Relative effects (skips) therefore
add 2 to the already-advanced PC.

The halt instruction (0000) is a normal terminal state reported through
StepResult.HALTED. Stack misuse, invalid words and out-of-range memory
accesses raise ExecutionError subclasses instead.

Known quirk: Cxnn always writes register V0, whatever x says.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Optional

from ..errors import (
    ExecutionError,
    InvalidOpcodeError,
    StackOverflowError,
    StackUnderflowError,
)
from .decoder import Instruction, Opcode, decode
from .display import Display
from .memory import Memory, PROGRAM_START


logger = logging.getLogger(__name__)

NUM_REGISTERS = 16
STACK_SIZE = 16
FLAG_REGISTER = 0xF


class StepResult(Enum):
    """Outcome of a single fetch-decode-execute cycle."""
    CONTINUE = "continue"
    HALTED = "halted"


@dataclass(frozen=True)
class CPUConfig:
    """
    Construction options for the CPU.

    Attributes:
        registers: Initial V0-VF values (16 bytes). Default all zero.
        memory: Full initial memory image (up to 4096 bytes). Default zeros.
        program: Program bytes placed at $0C8, on top of memory.
        seed: Seed for the random generator used by Cxnn.

    The glyph table at $000-$04F is installed regardless of memory.

    Example:
        >>> cpu = CPU(CPUConfig(program=bytes([0x60, 0x2A, 0x00, 0x00])))
    """
    registers: Optional[bytes] = None
    memory: Optional[bytes] = None
    program: Optional[bytes] = None
    seed: Optional[int] = None


@dataclass
class CPUState:
    """
    Complete interpreter state.

    All values stored as Python ints but represent:
    - registers: 8-bit unsigned (0-255)
    - stack entries, i: 16-bit unsigned
    - program_counter: byte address into memory
    """
    memory: Memory = field(default_factory=Memory)
    registers: bytearray = field(default_factory=lambda: bytearray(NUM_REGISTERS))
    stack: list[int] = field(default_factory=lambda: [0] * STACK_SIZE)
    stack_pointer: int = 0
    program_counter: int = PROGRAM_START
    i: int = 0
    halted: bool = False


class CPU:
    """
    CHIP-8 interpreter.

    The CPU owns its state exclusively. The display buffer is owned by the
    caller and passed into every step.

    Example:
        >>> cpu = CPU(CPUConfig(program=bytes([0x60, 0x05, 0x00, 0x00])))
        >>> display = Display()
        >>> cpu.step(display)
        <StepResult.CONTINUE: 'continue'>
        >>> cpu.step(display)
        <StepResult.HALTED: 'halted'>
        >>> cpu.register(0)
        5
    """

    def __init__(self, config: Optional[CPUConfig] = None, rng: Optional[random.Random] = None):
        """
        Initialize CPU state from a configuration.

        Args:
            config: Construction options. Defaults to zeroed state.
            rng: Random generator for Cxnn. Takes precedence over config.seed.

        Raises:
            ValueError: If the register array is not 16 bytes long
            ProgramTooLargeError: If the program does not fit in memory
        """
        config = config or CPUConfig()
        self.config = config

        memory = Memory(config.memory)
        if config.program is not None:
            memory.load_program(config.program)

        registers = bytearray(NUM_REGISTERS)
        if config.registers is not None:
            if len(config.registers) != NUM_REGISTERS:
                raise ValueError(
                    f"registers must hold {NUM_REGISTERS} values, got {len(config.registers)}"
                )
            registers[:] = bytes(config.registers)

        self.state = CPUState(memory=memory, registers=registers)
        self.rng = rng if rng is not None else random.Random(config.seed)

        self._handlers: Dict[Opcode, Callable[[Instruction, Display], None]] = {
            Opcode.RETURN: self._ret,
            Opcode.JUMP: self._jump,
            Opcode.CALL: self._call_op,
            Opcode.JUMP_OFFSET: self._jump_offset,
            Opcode.SKIP_EQ_IMM: self._skip_eq_imm,
            Opcode.SKIP_NE_IMM: self._skip_ne_imm,
            Opcode.SKIP_EQ_REG: self._skip_eq_reg,
            Opcode.SKIP_NE_REG: self._skip_ne_reg,
            Opcode.LOAD_IMM: self._load_imm,
            Opcode.ADD_IMM: self._add_imm,
            Opcode.MOVE: self._move,
            Opcode.OR: self._or,
            Opcode.AND: self._and,
            Opcode.XOR: self._xor,
            Opcode.ADD: self._add_op,
            Opcode.SUB: self._sub_op,
            Opcode.SHIFT_RIGHT: self._shift_right_op,
            Opcode.SUBN: self._subn_op,
            Opcode.SHIFT_LEFT: self._shift_left_op,
            Opcode.RAND: self._rand,
            Opcode.LOAD_I: self._load_i,
            Opcode.ADD_I: self._add_i,
            Opcode.BCD: self._bcd_op,
            Opcode.STORE_REGS: self._store_regs,
            Opcode.LOAD_REGS: self._load_regs,
            Opcode.DRAW: self._draw,
        }

    # ========================================
    # Inspection
    # ========================================

    @property
    def memory(self) -> Memory:
        return self.state.memory

    @property
    def pc(self) -> int:
        """Program counter."""
        return self.state.program_counter

    @property
    def i(self) -> int:
        """Address register I."""
        return self.state.i

    @property
    def stack_pointer(self) -> int:
        return self.state.stack_pointer

    @property
    def halted(self) -> bool:
        """True once the halt instruction has executed."""
        return self.state.halted

    def register(self, index: int) -> int:
        """
        Read register V{index}.

        Raises:
            ValueError: If index is outside 0-15
        """
        if not 0 <= index < NUM_REGISTERS:
            raise ValueError(f"Register index must be 0-15, got {index}")
        return self.state.registers[index]

    # ========================================
    # Fetch / Decode / Execute
    # ========================================

    def read_opcode(self) -> int:
        """Return the two bytes at PC concatenated big-endian."""
        pc = self.state.program_counter
        return (self.memory.read(pc) << 8) | self.memory.read(pc + 1)

    def step(self, display: Display) -> StepResult:
        """
        Execute exactly one instruction.

        Args:
            display: Display buffer mutated by draw instructions

        Returns:
            StepResult.HALTED once the halt instruction has run,
            StepResult.CONTINUE otherwise

        Raises:
            ExecutionError: On stack overflow/underflow, invalid opcode or
                            out-of-range memory access
        """
        if self.state.halted:
            return StepResult.HALTED

        address = self.state.program_counter
        try:
            inst = decode(self.read_opcode())
            self.state.program_counter += 2

            if inst.opcode is None:
                raise InvalidOpcodeError(inst.word)
            if inst.opcode is Opcode.HALT:
                self.state.halted = True
                logger.info(f"Halted at ${address:03X}")
                return StepResult.HALTED

            self._handlers[inst.opcode](inst, display)
        except ExecutionError as e:
            if e.address is None:
                e.set_address(address)
            logger.debug(f"Execution stopped: {e}")
            raise
        return StepResult.CONTINUE

    # ========================================
    # Control Flow
    # ========================================

    def call(self, addr: int) -> None:
        """
        Push PC onto the stack and jump to addr.

        Raises:
            StackOverflowError: If all stack slots are in use
        """
        state = self.state
        if state.stack_pointer >= STACK_SIZE:
            raise StackOverflowError()
        state.stack[state.stack_pointer] = state.program_counter
        state.stack_pointer += 1
        state.program_counter = addr

    def ret(self) -> None:
        """
        Pop the most recent return address into PC.

        Raises:
            StackUnderflowError: If no call is pending
        """
        state = self.state
        if state.stack_pointer == 0:
            raise StackUnderflowError()
        state.stack_pointer -= 1
        state.program_counter = state.stack[state.stack_pointer]

    def _ret(self, inst: Instruction, display: Display) -> None:
        self.ret()

    def _call_op(self, inst: Instruction, display: Display) -> None:
        self.call(inst.nnn)

    def _jump(self, inst: Instruction, display: Display) -> None:
        self.state.program_counter = inst.nnn

    def _jump_offset(self, inst: Instruction, display: Display) -> None:
        self.state.program_counter = self.state.registers[0] + inst.nnn

    # ========================================
    # Conditional Skips
    # ========================================

    def _skip_if(self, condition: bool) -> None:
        if condition:
            self.state.program_counter += 2

    def _skip_eq_imm(self, inst: Instruction, display: Display) -> None:
        self._skip_if(self.state.registers[inst.x] == inst.nn)

    def _skip_ne_imm(self, inst: Instruction, display: Display) -> None:
        self._skip_if(self.state.registers[inst.x] != inst.nn)

    def _skip_eq_reg(self, inst: Instruction, display: Display) -> None:
        regs = self.state.registers
        self._skip_if(regs[inst.x] == regs[inst.y])

    def _skip_ne_reg(self, inst: Instruction, display: Display) -> None:
        regs = self.state.registers
        self._skip_if(regs[inst.x] != regs[inst.y])

    # ========================================
    # Register / ALU Operations
    # ========================================

    def add_xy(self, x: int, y: int) -> None:
        """Vx += Vy; VF = 1 on carry, else 0."""
        regs = self.state.registers
        result = regs[x] + regs[y]
        regs[x] = result & 0xFF
        regs[FLAG_REGISTER] = 1 if result > 0xFF else 0

    def sub_xy(self, x: int, y: int) -> None:
        """Vx -= Vy; VF = 0 on borrow, else 1."""
        regs = self.state.registers
        a, b = regs[x], regs[y]
        regs[x] = (a - b) & 0xFF
        regs[FLAG_REGISTER] = 0 if a < b else 1

    def subn_xy(self, x: int, y: int) -> None:
        """Vx = Vy - Vx; VF = 0 on borrow, else 1."""
        regs = self.state.registers
        a, b = regs[x], regs[y]
        regs[x] = (b - a) & 0xFF
        regs[FLAG_REGISTER] = 0 if b < a else 1

    def shift_right(self, x: int) -> None:
        """Vx >>= 1; VF = old bit 0."""
        regs = self.state.registers
        value = regs[x]
        regs[x] = value >> 1
        regs[FLAG_REGISTER] = value & 0x01

    def shift_left(self, x: int) -> None:
        """Vx <<= 1; VF = old bit 7."""
        regs = self.state.registers
        value = regs[x]
        regs[x] = (value << 1) & 0xFF
        regs[FLAG_REGISTER] = (value & 0x80) >> 7

    def _load_imm(self, inst: Instruction, display: Display) -> None:
        self.state.registers[inst.x] = inst.nn

    def _add_imm(self, inst: Instruction, display: Display) -> None:
        # No carry into VF for this form
        regs = self.state.registers
        regs[inst.x] = (regs[inst.x] + inst.nn) & 0xFF

    def _move(self, inst: Instruction, display: Display) -> None:
        regs = self.state.registers
        regs[inst.x] = regs[inst.y]

    def _or(self, inst: Instruction, display: Display) -> None:
        regs = self.state.registers
        regs[inst.x] |= regs[inst.y]

    def _and(self, inst: Instruction, display: Display) -> None:
        regs = self.state.registers
        regs[inst.x] &= regs[inst.y]

    def _xor(self, inst: Instruction, display: Display) -> None:
        regs = self.state.registers
        regs[inst.x] ^= regs[inst.y]

    def _add_op(self, inst: Instruction, display: Display) -> None:
        self.add_xy(inst.x, inst.y)

    def _sub_op(self, inst: Instruction, display: Display) -> None:
        self.sub_xy(inst.x, inst.y)

    def _subn_op(self, inst: Instruction, display: Display) -> None:
        self.subn_xy(inst.x, inst.y)

    def _shift_right_op(self, inst: Instruction, display: Display) -> None:
        self.shift_right(inst.x)

    def _shift_left_op(self, inst: Instruction, display: Display) -> None:
        self.shift_left(inst.x)

    def _rand(self, inst: Instruction, display: Display) -> None:
        # Destination is always V0, x is ignored
        self.state.registers[0] = inst.nn & self.rng.randrange(256)

    # ========================================
    # Memory Indirection
    # ========================================

    def bcd(self, x: int) -> None:
        """Store the hundreds, tens and ones digits of Vx at I, I+1, I+2."""
        value = self.state.registers[x]
        i = self.state.i
        self.memory.write(i, value // 100)
        self.memory.write(i + 1, (value // 10) % 10)
        self.memory.write(i + 2, value % 10)

    def _load_i(self, inst: Instruction, display: Display) -> None:
        self.state.i = inst.nnn

    def _add_i(self, inst: Instruction, display: Display) -> None:
        self.state.i = (self.state.i + self.state.registers[inst.x]) & 0xFFFF

    def _bcd_op(self, inst: Instruction, display: Display) -> None:
        self.bcd(inst.x)

    def _store_regs(self, inst: Instruction, display: Display) -> None:
        regs = self.state.registers
        for index in range(inst.x + 1):
            self.memory.write(self.state.i + index, regs[index])

    def _load_regs(self, inst: Instruction, display: Display) -> None:
        regs = self.state.registers
        for index in range(inst.x + 1):
            regs[index] = self.memory.read(self.state.i + index)

    # ========================================
    # Display
    # ========================================

    def draw(self, x: int, y: int, height: int, display: Display) -> None:
        """
        Draw an 8 x height sprite from memory[I] at (Vx, Vy).

        VF is set to 1 if any lit pixel was turned off, else 0.
        """
        regs = self.state.registers
        sprite = self.memory.read_block(self.state.i, height)
        collision = display.draw_sprite(regs[x], regs[y], sprite)
        regs[FLAG_REGISTER] = 1 if collision else 0

    def _draw(self, inst: Instruction, display: Display) -> None:
        self.draw(inst.x, inst.y, inst.d, display)
