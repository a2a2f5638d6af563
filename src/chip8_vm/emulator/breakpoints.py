"""
Breakpoint Support for the CHIP-8 Emulator
==========================================

Provides debugging stops for the headless driver:
- PC breakpoints (break when PC reaches address, before executing it)
- Register conditions (break when a register comparison holds)

The Emulator asks the BreakpointManager before every step whether to
stop, and reports the outcome of a run as a BreakEvent.

Example usage:

    >>> from chip8_vm.emulator import Emulator, BreakReason
    >>> emu = Emulator()
    >>> emu.load_program(bytes([0x60, 0x01, 0x10, 0xCA]))
    >>> emu.breakpoints.add_breakpoint(0x0CA)
    >>> event = emu.run(1_000)
    >>> event.reason == BreakReason.PC_BREAKPOINT
    True

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, Set, TYPE_CHECKING

if TYPE_CHECKING:
    from .cpu import CPU


class BreakReason(Enum):
    """
    Why execution stopped.

    Used in BreakEvent to indicate what ended a run or step.
    """
    NONE = auto()                # No specific reason
    HALT = auto()                # Halt instruction executed
    PC_BREAKPOINT = auto()       # PC reached a breakpoint address
    REGISTER_CONDITION = auto()  # Register condition met
    STEP = auto()                # Single-step completed
    MAX_STEPS = auto()           # Step budget exhausted


@dataclass
class BreakEvent:
    """
    Information about why execution stopped.

    Attributes:
        reason: Why execution stopped
        address: PC value when execution stopped (if applicable)
        message: Human-readable description
    """
    reason: BreakReason
    address: Optional[int] = None
    message: str = ""

    def __str__(self) -> str:
        if self.message:
            return self.message
        match self.reason:
            case BreakReason.HALT:
                return "Halted"
            case BreakReason.PC_BREAKPOINT:
                return f"Breakpoint at ${self.address:03X}" if self.address is not None else "Breakpoint"
            case BreakReason.REGISTER_CONDITION:
                return "Register condition met"
            case BreakReason.STEP:
                return "Single step"
            case BreakReason.MAX_STEPS:
                return "Maximum steps reached"
            case _:
                return "Unknown"


class RegisterCondition:
    """
    Condition on CPU registers.

    Supported registers: v0-vf, i, pc, sp

    Supported operators: ==, !=, <, <=, >, >=, & (true if AND is non-zero)

    Examples:
        >>> cond = RegisterCondition('v0', '==', 0x42)
        >>> cond = RegisterCondition('vf', '!=', 0, description="collision")
    """

    VALID_REGISTERS = {f"v{n:x}" for n in range(16)} | {"i", "pc", "sp"}
    VALID_OPERATORS = {'==', '!=', '<', '<=', '>', '>=', '&'}

    def __init__(self, register: str, operator: str, value: int, description: str = ""):
        self.register = register.lower()
        self.operator = operator
        self.value = value
        self.description = description or f"{self.register} {operator} {value}"

        if self.register not in self.VALID_REGISTERS:
            raise ValueError(
                f"Unknown register '{register}'. Valid registers: {', '.join(sorted(self.VALID_REGISTERS))}"
            )
        if self.operator not in self.VALID_OPERATORS:
            raise ValueError(
                f"Unknown operator '{operator}'. Valid operators: {', '.join(sorted(self.VALID_OPERATORS))}"
            )

    def _read(self, cpu: "CPU") -> int:
        match self.register:
            case "i":
                return cpu.i
            case "pc":
                return cpu.pc
            case "sp":
                return cpu.stack_pointer
            case _:
                return cpu.register(int(self.register[1:], 16))

    def check(self, cpu: "CPU") -> bool:
        """Return True if the condition holds for the CPU's current state."""
        actual = self._read(cpu)
        match self.operator:
            case '==':
                return actual == self.value
            case '!=':
                return actual != self.value
            case '<':
                return actual < self.value
            case '<=':
                return actual <= self.value
            case '>':
                return actual > self.value
            case '>=':
                return actual >= self.value
            case '&':
                return (actual & self.value) != 0
            case _:
                return False

    def __repr__(self) -> str:
        return f"RegisterCondition({self.register!r}, {self.operator!r}, {self.value!r})"


class BreakpointManager:
    """
    Manages PC breakpoints and register conditions.

    Example:
        >>> mgr = BreakpointManager()
        >>> mgr.add_breakpoint(0x0D0)
        >>> mgr.add_condition('vf', '==', 1)
    """

    def __init__(self):
        self._pc_breakpoints: Set[int] = set()
        self._register_conditions: List[RegisterCondition] = []
        self._last_event: Optional[BreakEvent] = None

    @property
    def last_event(self) -> Optional[BreakEvent]:
        """The last break event recorded by check_instruction()."""
        return self._last_event

    @property
    def breakpoint_count(self) -> int:
        return len(self._pc_breakpoints)

    # =========================================================================
    # PC Breakpoints
    # =========================================================================

    def add_breakpoint(self, address: int) -> None:
        """Stop when PC reaches address, before the instruction runs."""
        self._pc_breakpoints.add(address & 0xFFF)

    def remove_breakpoint(self, address: int) -> None:
        self._pc_breakpoints.discard(address & 0xFFF)

    def has_breakpoint(self, address: int) -> bool:
        return (address & 0xFFF) in self._pc_breakpoints

    def clear_breakpoints(self) -> None:
        self._pc_breakpoints.clear()

    def list_breakpoints(self) -> List[int]:
        """Sorted list of breakpoint addresses."""
        return sorted(self._pc_breakpoints)

    # =========================================================================
    # Register Conditions
    # =========================================================================

    def add_condition(self, register: str, operator: str, value: int, description: str = "") -> RegisterCondition:
        """Create and register a RegisterCondition."""
        condition = RegisterCondition(register, operator, value, description)
        self._register_conditions.append(condition)
        return condition

    def remove_condition(self, condition: RegisterCondition) -> None:
        if condition in self._register_conditions:
            self._register_conditions.remove(condition)

    def clear_conditions(self) -> None:
        self._register_conditions.clear()

    def list_conditions(self) -> List[RegisterCondition]:
        return list(self._register_conditions)

    def clear_all(self) -> None:
        """Remove all breakpoints and conditions."""
        self.clear_breakpoints()
        self.clear_conditions()
        self._last_event = None

    def clear_last_event(self) -> None:
        self._last_event = None

    # =========================================================================
    # Check Function
    # =========================================================================

    def check_instruction(self, cpu: "CPU", pc: int) -> bool:
        """
        Check whether to break before executing the instruction at pc.

        Returns:
            True to continue execution, False to break
        """
        if pc in self._pc_breakpoints:
            self._last_event = BreakEvent(
                BreakReason.PC_BREAKPOINT,
                address=pc,
                message=f"Breakpoint at ${pc:03X}"
            )
            return False

        for cond in self._register_conditions:
            if cond.check(cpu):
                self._last_event = BreakEvent(
                    BreakReason.REGISTER_CONDITION,
                    address=pc,
                    message=f"Condition: {cond.description}"
                )
                return False

        return True
