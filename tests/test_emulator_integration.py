"""
CHIP-8 Emulator Integration Tests
=================================

End-to-end tests of the Emulator driver: ROM loading, run control,
breakpoints, inspection and disassembly of live memory.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import pytest

from chip8_vm.emulator import (
    BreakReason,
    Emulator,
    EmulatorConfig,
    glyph_address,
)
from chip8_vm.errors import (
    InvalidOpcodeError,
    ProgramTooLargeError,
    RomFormatError,
    StackOverflowError,
)


def program(*words: int) -> bytes:
    return b"".join(w.to_bytes(2, "big") for w in words)


# $0C8: LD V0, #$05
# $0CA: LD V1, #$03
# $0CC: ADD V0, V1
# $0CE: HALT
ADD_PROGRAM = program(0x6005, 0x6103, 0x8014, 0x0000)

# $0C8: ADD V2, #$01
# $0CA: JP $0C8
COUNTER_PROGRAM = program(0x7201, 0x10C8)


@pytest.fixture
def emu():
    return Emulator(EmulatorConfig(seed=1))


# =============================================================================
# Loading Tests
# =============================================================================

class TestLoading:
    """Test program and ROM loading."""

    def test_initial_state(self, emu):
        assert emu.cpu.pc == 0x0C8
        assert emu.total_steps == 0
        assert not emu.halted

    def test_load_program(self, emu):
        emu.load_program(ADD_PROGRAM)
        assert emu.cpu.memory.read_block(0x0C8, 8) == ADD_PROGRAM

    def test_load_rom(self, emu, tmp_path):
        rom = tmp_path / "add.ch8"
        rom.write_bytes(ADD_PROGRAM)
        emu.load_rom(rom)
        assert emu.run().reason is BreakReason.HALT
        assert emu.registers["v0"] == 8

    def test_rom_from_config(self, tmp_path):
        rom = tmp_path / "add.ch8"
        rom.write_bytes(ADD_PROGRAM)
        emu = Emulator(EmulatorConfig(rom_path=rom))
        assert emu.cpu.memory.read(0x0C8) == 0x60

    def test_missing_rom(self, emu, tmp_path):
        with pytest.raises(FileNotFoundError):
            emu.load_rom(tmp_path / "missing.ch8")

    def test_empty_rom(self, emu, tmp_path):
        rom = tmp_path / "empty.ch8"
        rom.write_bytes(b"")
        with pytest.raises(RomFormatError):
            emu.load_rom(rom)

    def test_oversized_rom(self, emu, tmp_path):
        rom = tmp_path / "big.ch8"
        rom.write_bytes(bytes(4096))
        with pytest.raises(ProgramTooLargeError):
            emu.load_rom(rom)


# =============================================================================
# Execution Tests
# =============================================================================

class TestExecution:
    """Test step, run and reset."""

    def test_run_to_halt(self, emu):
        emu.load_program(ADD_PROGRAM)
        event = emu.run()
        assert event.reason is BreakReason.HALT
        assert emu.halted
        assert event.address == 0x0CE
        assert emu.total_steps == 4
        assert emu.registers["v0"] == 8
        assert emu.registers["v1"] == 3

    def test_run_after_halt_is_a_no_op(self, emu):
        emu.load_program(ADD_PROGRAM)
        emu.run()
        event = emu.run()
        assert event.reason is BreakReason.HALT
        assert event.address == 0x0CE
        assert emu.total_steps == 4

    def test_step(self, emu):
        emu.load_program(ADD_PROGRAM)
        event = emu.step()
        assert event.reason is BreakReason.STEP
        assert event.address == 0x0CA
        assert emu.registers["v0"] == 5

    def test_step_to_halt(self, emu):
        emu.load_program(program(0x0000))
        event = emu.step()
        assert event.reason is BreakReason.HALT
        assert event.address == 0x0C8
        assert emu.step().address == 0x0C8

    def test_max_steps(self, emu):
        emu.load_program(COUNTER_PROGRAM)
        event = emu.run(max_steps=10)
        assert event.reason is BreakReason.MAX_STEPS
        assert emu.total_steps == 10
        assert emu.registers["v2"] == 5

    def test_config_max_steps(self):
        emu = Emulator(EmulatorConfig(max_steps=6))
        emu.load_program(COUNTER_PROGRAM)
        assert emu.run().reason is BreakReason.MAX_STEPS
        assert emu.total_steps == 6

    def test_reset(self, emu):
        emu.load_program(ADD_PROGRAM)
        emu.run()
        emu.reset()
        assert emu.cpu.pc == 0x0C8
        assert emu.registers["v0"] == 0
        assert emu.total_steps == 0
        assert not emu.halted

    def test_seeded_replay(self):
        """Same seed, same random sequence, including after reset."""
        rand_program = program(0xC0FF, 0x8300, 0xC0FF, 0x0000)
        emu = Emulator(EmulatorConfig(seed=1234))
        emu.load_program(rand_program)
        emu.run()
        first = (emu.registers["v0"], emu.registers["v3"])

        emu.reset()
        emu.run()
        assert (emu.registers["v0"], emu.registers["v3"]) == first

        other = Emulator(EmulatorConfig(seed=1234))
        other.load_program(rand_program)
        other.run()
        assert (other.registers["v0"], other.registers["v3"]) == first

    def test_fatal_error_propagates(self, emu):
        emu.load_program(program(0x6001, 0xE09E))
        with pytest.raises(InvalidOpcodeError) as excinfo:
            emu.run()
        assert excinfo.value.address == 0x0CA
        assert not emu.halted

    def test_runaway_recursion(self, emu):
        emu.load_program(program(0x20C8))
        with pytest.raises(StackOverflowError):
            emu.run()
        assert emu.total_steps == 16


# =============================================================================
# Breakpoint Tests
# =============================================================================

class TestBreakpoints:
    """Test breakpoints through the driver."""

    def test_breakpoint_stops_before_instruction(self, emu):
        emu.load_program(ADD_PROGRAM)
        emu.add_breakpoint(0x0CC)
        event = emu.run()
        assert event.reason is BreakReason.PC_BREAKPOINT
        assert event.address == 0x0CC
        assert emu.registers["v0"] == 5
        assert emu.total_steps == 2

    def test_resume_past_breakpoint(self, emu):
        emu.load_program(ADD_PROGRAM)
        emu.add_breakpoint(0x0CC)
        emu.run()
        event = emu.run()
        assert event.reason is BreakReason.HALT
        assert emu.registers["v0"] == 8

    def test_manual_step_does_not_skip_breakpoint(self, emu):
        """After a single step, returning to the breakpoint stops again."""
        # $0C8: LD V0, #$01 / $0CA: JP $0CA
        emu.load_program(program(0x6001, 0x10CA))
        emu.add_breakpoint(0x0CA)
        assert emu.run(10).reason is BreakReason.PC_BREAKPOINT

        emu.step()
        assert emu.cpu.pc == 0x0CA

        event = emu.run(10)
        assert event.reason is BreakReason.PC_BREAKPOINT
        assert event.address == 0x0CA
        assert emu.total_steps == 2

    def test_breakpoint_in_loop_hits_every_pass(self, emu):
        emu.load_program(COUNTER_PROGRAM)
        emu.add_breakpoint(0x0CA)
        for expected in range(1, 4):
            event = emu.run()
            assert event.reason is BreakReason.PC_BREAKPOINT
            assert emu.registers["v2"] == expected

    def test_breakpoint_on_first_instruction(self, emu):
        emu.load_program(ADD_PROGRAM)
        emu.add_breakpoint(0x0C8)
        assert emu.run().reason is BreakReason.PC_BREAKPOINT
        assert emu.total_steps == 0

    def test_register_condition(self, emu):
        emu.load_program(COUNTER_PROGRAM)
        emu.breakpoints.add_condition("v2", ">=", 3)
        event = emu.run()
        assert event.reason is BreakReason.REGISTER_CONDITION
        assert emu.registers["v2"] == 3

    def test_remove_breakpoint(self, emu):
        emu.load_program(ADD_PROGRAM)
        emu.add_breakpoint(0x0CC)
        emu.remove_breakpoint(0x0CC)
        assert emu.run().reason is BreakReason.HALT

    def test_clear_breakpoints(self, emu):
        emu.load_program(ADD_PROGRAM)
        emu.add_breakpoint(0x0CC)
        emu.breakpoints.add_condition("v0", "==", 5)
        emu.clear_breakpoints()
        assert emu.run().reason is BreakReason.HALT

    def test_run_until_pc(self, emu):
        emu.load_program(ADD_PROGRAM)
        assert emu.run_until_pc(0x0CE) is True
        assert emu.cpu.pc == 0x0CE
        assert not emu.breakpoints.has_breakpoint(0x0CE)

    def test_run_until_pc_not_reached(self, emu):
        emu.load_program(ADD_PROGRAM)
        assert emu.run_until_pc(0x200) is False
        assert emu.halted

    def test_run_until_pc_keeps_existing_breakpoint(self, emu):
        emu.load_program(ADD_PROGRAM)
        emu.add_breakpoint(0x0CE)
        emu.run_until_pc(0x0CE)
        assert emu.breakpoints.has_breakpoint(0x0CE)


# =============================================================================
# Inspection Tests
# =============================================================================

class TestInspection:
    """Test display, register and memory inspection."""

    def test_draw_glyph_program(self, emu):
        address = glyph_address(0xA)
        emu.load_program(program(0xA000 | address, 0xD015, 0x0000))
        emu.run()

        rows = emu.display_text.split("\n")
        assert rows[0][:4] == "####"
        assert rows[1][:4] == "#  #"
        assert rows[2][:4] == "####"
        assert rows[3][:4] == "#  #"
        assert rows[4][:4] == "#  #"
        assert emu.registers["vf"] == 0

    def test_render_display(self, emu):
        emu.load_program(ADD_PROGRAM)
        png = emu.render_display(scale=2)
        assert png.startswith(b"\x89PNG")

    def test_registers_snapshot(self, emu):
        emu.load_program(program(0xA123, 0x20CE, 0x0000, 0x6F07, 0x0000))
        emu.run(max_steps=3)
        regs = emu.registers
        assert set(regs) == {f"v{n:x}" for n in range(16)} | {"i", "pc", "sp"}
        assert regs["i"] == 0x123
        assert regs["vf"] == 7
        assert regs["sp"] == 1
        assert regs["pc"] == 0x0D0

    def test_disassemble_at(self, emu):
        emu.load_program(ADD_PROGRAM)
        lines = emu.disassemble_at(0x0C8, count=4)
        assert lines == [
            "$0C8: 60 05  LD V0, #$05",
            "$0CA: 61 03  LD V1, #$03",
            "$0CC: 80 14  ADD V0, V1",
            "$0CE: 00 00  HALT",
        ]

    def test_disassemble_at_end_of_memory(self, emu):
        lines = emu.disassemble_at(0xFFE, count=5)
        assert len(lines) == 1

    def test_repr(self, emu):
        assert repr(emu) == "Emulator(pc=$0C8, steps=0, ready)"
