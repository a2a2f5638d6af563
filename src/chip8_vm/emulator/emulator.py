"""
CHIP-8 Emulator - Headless Driver
=================================

This module provides the `Emulator` class that wraps the interpreter with
everything a driver needs:

- Program loading from ROM files or raw bytes
- Execution control (step, run, run_until_pc)
- Breakpoints and register conditions
- Display inspection as text or PNG
- Instruction tracing through the logging module (DEBUG level)

Example usage:
    >>> from chip8_vm.emulator import Emulator, EmulatorConfig
    >>> emu = Emulator(EmulatorConfig(seed=1))
    >>> emu.load_rom("glyphs.ch8")
    >>> event = emu.run(max_steps=10_000)
    >>> print(emu.display_text)

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from ..disassembler import Chip8Disassembler
from ..errors import RomFormatError
from .breakpoints import BreakEvent, BreakpointManager, BreakReason
from .cpu import CPU, CPUConfig, StepResult
from .display import Display
from .memory import MAX_PROGRAM_SIZE, MEMORY_SIZE


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmulatorConfig:
    """
    Configuration for emulator initialization.

    Attributes:
        rom_path: Optional ROM file loaded on construction.
        seed: Seed for the random generator (None = nondeterministic).
        max_steps: Default step budget for run().

    Example:
        >>> config = EmulatorConfig(rom_path=Path("pong.ch8"), seed=42)
    """
    rom_path: Optional[Path] = None
    seed: Optional[int] = None
    max_steps: int = 100_000


class Emulator:
    """
    CHIP-8 emulator driver.

    Owns one CPU and the display buffer it draws on. Each call to step()
    runs exactly one instruction; run() repeats that until the program
    halts, a breakpoint triggers, or the step budget is spent. Fatal
    execution errors propagate as ExecutionError subclasses.

    Attributes:
        config: The EmulatorConfig used to initialize this instance
        cpu: The CPU instance (accessible for low-level inspection)
        display: The display buffer
        breakpoints: The breakpoint manager

    Example:
        >>> emu = Emulator()
        >>> emu.load_program(bytes([0xA0, 0x32, 0xD0, 0x15, 0x00, 0x00]))
        >>> emu.run().reason
        <BreakReason.HALT: 2>
    """

    def __init__(self, config: Optional[EmulatorConfig] = None):
        """
        Initialize the emulator.

        Args:
            config: EmulatorConfig. If None, defaults are used.

        Raises:
            FileNotFoundError: If config.rom_path does not exist
            RomFormatError: If the ROM file is empty
            ProgramTooLargeError: If the ROM does not fit in memory
        """
        self.config = config or EmulatorConfig()
        self.display = Display()
        self.breakpoints = BreakpointManager()
        self._disassembler = Chip8Disassembler()
        self._program = b""
        self._total_steps = 0
        self.cpu = CPU(CPUConfig(seed=self.config.seed))

        if self.config.rom_path:
            self.load_rom(self.config.rom_path)

    # =========================================================================
    # Program Loading
    # =========================================================================

    def load_rom(self, path: Union[str, Path]) -> None:
        """
        Load a ROM file as the program and reset.

        Args:
            path: Path to the ROM file

        Raises:
            FileNotFoundError: If the file doesn't exist
            RomFormatError: If the file is empty
            ProgramTooLargeError: If the ROM is larger than available memory
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"ROM file not found: {path}")

        data = path.read_bytes()
        if not data:
            raise RomFormatError(f"ROM file is empty: {path}")

        self.load_program(data)
        logger.info(f"Loaded {path.name} ({len(data)} bytes)")

    def load_program(self, program: bytes) -> None:
        """
        Install program bytes at $0C8 and reset the CPU and display.

        Raises:
            ProgramTooLargeError: If the program is larger than available memory
        """
        self._program = bytes(program)
        self.reset()
        logger.debug(f"Program installed: {len(program)} of {MAX_PROGRAM_SIZE} bytes")

    def reset(self) -> None:
        """
        Rebuild CPU state from the loaded program and clear the display.

        The random generator is re-seeded from config.seed, so a seeded
        emulator replays identically after reset.
        """
        self.cpu = CPU(CPUConfig(program=self._program, seed=self.config.seed))
        self.display.clear()
        self.breakpoints.clear_last_event()
        self._total_steps = 0

    # =========================================================================
    # Execution Control
    # =========================================================================

    def step(self) -> BreakEvent:
        """
        Execute a single instruction, ignoring breakpoints.

        Returns:
            BreakEvent with reason HALT if the program has halted,
            STEP otherwise
        """
        self.breakpoints.clear_last_event()
        if self._step_once() is StepResult.HALTED:
            return self._halt_event()
        return BreakEvent(
            BreakReason.STEP,
            address=self.cpu.pc,
            message=f"Step at ${self.cpu.pc:03X}"
        )

    def run(self, max_steps: Optional[int] = None) -> BreakEvent:
        """
        Run until halt, breakpoint, or max_steps instructions.

        Breakpoints are checked before each instruction, including the
        first, except when execution is already sitting on the breakpoint
        address it last stopped at (so run() can resume past it).

        Args:
            max_steps: Step budget (default: config.max_steps)

        Returns:
            BreakEvent describing why execution stopped
        """
        budget = self.config.max_steps if max_steps is None else max_steps
        resume_from = self._resume_address()
        self.breakpoints.clear_last_event()

        for _ in range(budget):
            if self.cpu.halted:
                return self._halt_event()

            pc = self.cpu.pc
            if pc != resume_from and not self.breakpoints.check_instruction(self.cpu, pc):
                return self.breakpoints.last_event
            resume_from = None

            if self._step_once() is StepResult.HALTED:
                return self._halt_event()

        return BreakEvent(
            BreakReason.MAX_STEPS,
            address=self.cpu.pc,
            message=f"Reached max steps ({budget})"
        )

    def run_until_pc(self, address: int, max_steps: Optional[int] = None) -> bool:
        """
        Run until PC reaches a specific address.

        Creates a temporary breakpoint at the address and runs until hit.

        Returns:
            True if address was reached, False otherwise
        """
        was_set = self.breakpoints.has_breakpoint(address)
        if not was_set:
            self.breakpoints.add_breakpoint(address)

        try:
            event = self.run(max_steps)
            return (event.reason == BreakReason.PC_BREAKPOINT and
                    event.address == address)
        finally:
            if not was_set:
                self.breakpoints.remove_breakpoint(address)

    def _halt_event(self) -> BreakEvent:
        # PC has already moved past the halt instruction and stays there
        return BreakEvent(BreakReason.HALT, address=self.cpu.pc - 2, message="Halted")

    def _resume_address(self) -> Optional[int]:
        last = self.breakpoints.last_event
        if last is not None and last.reason in (
            BreakReason.PC_BREAKPOINT, BreakReason.REGISTER_CONDITION
        ):
            return last.address
        return None

    def _step_once(self) -> StepResult:
        if self.cpu.halted:
            return StepResult.HALTED
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(self._trace_line())
        result = self.cpu.step(self.display)
        self._total_steps += 1
        return result

    def _trace_line(self) -> str:
        pc = self.cpu.pc
        if pc + 2 > MEMORY_SIZE:
            return f"${pc:03X}: <out of range>"
        return str(self._disassembler.disassemble_one(
            self.cpu.memory.read_block(pc, 2), address=pc
        ))

    # =========================================================================
    # Breakpoint Management (delegates to BreakpointManager)
    # =========================================================================

    def add_breakpoint(self, address: int) -> None:
        """Stop before executing the instruction at address."""
        self.breakpoints.add_breakpoint(address)

    def remove_breakpoint(self, address: int) -> None:
        self.breakpoints.remove_breakpoint(address)

    def clear_breakpoints(self) -> None:
        """Remove all breakpoints and register conditions."""
        self.breakpoints.clear_all()

    # =========================================================================
    # Inspection
    # =========================================================================

    @property
    def display_text(self) -> str:
        """Display contents as text, '#' for lit pixels."""
        return self.display.get_text()

    def render_display(self, scale: int = 10) -> bytes:
        """Display contents as PNG bytes."""
        return self.display.render_image(scale=scale)

    @property
    def registers(self) -> dict:
        """Snapshot of V0-VF, I, PC and SP."""
        regs = {f"v{n:x}": self.cpu.register(n) for n in range(16)}
        regs.update(i=self.cpu.i, pc=self.cpu.pc, sp=self.cpu.stack_pointer)
        return regs

    @property
    def total_steps(self) -> int:
        """Instructions executed since the last reset."""
        return self._total_steps

    @property
    def halted(self) -> bool:
        return self.cpu.halted

    def disassemble_at(self, address: int, count: int = 10) -> List[str]:
        """Disassemble count instructions from memory starting at address."""
        end = min(address + count * 2, MEMORY_SIZE)
        data = self.cpu.memory.read_block(address, end - address)
        return [str(instr) for instr in self._disassembler.disassemble(data, address, count)]

    def __repr__(self) -> str:
        state = "halted" if self.cpu.halted else "ready"
        return f"Emulator(pc=${self.cpu.pc:03X}, steps={self._total_steps}, {state})"
