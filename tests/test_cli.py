"""
chip8run CLI Tests
==================

Tests for the headless runner command and the shared CLI error helpers.
"""

import io

import click
import pytest
from click.testing import CliRunner
from PIL import Image

from chip8_vm.cli.chip8run import main
from chip8_vm.cli.errors import ExitCode, parse_address


def program(*words: int) -> bytes:
    return b"".join(w.to_bytes(2, "big") for w in words)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def glyph_rom(tmp_path):
    """ROM that draws glyph 0 at the top-left corner and halts."""
    path = tmp_path / "glyph.ch8"
    path.write_bytes(program(0xA000, 0xD015, 0x6342, 0x0000))
    return path


# =============================================================================
# Address Parsing Tests
# =============================================================================

class TestParseAddress:
    """Tests for parse_address()."""

    @pytest.mark.parametrize("text,value", [
        ("0x0D4", 0x0D4),
        ("0XFFF", 0xFFF),
        ("$0C8", 0x0C8),
        ("200", 200),
        ("0", 0),
    ])
    def test_valid(self, text, value):
        assert parse_address(text) == value

    @pytest.mark.parametrize("text", ["0x1000", "-1", "4096", "zz", "$"])
    def test_invalid(self, text):
        with pytest.raises(click.BadParameter):
            parse_address(text)


# =============================================================================
# chip8run Tests
# =============================================================================

class TestRunCLI:
    """Tests for the chip8run CLI tool."""

    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Run a CHIP-8 ROM headlessly" in result.output

    def test_run_to_halt(self, runner, glyph_rom):
        result = runner.invoke(main, [str(glyph_rom)])
        assert result.exit_code == ExitCode.SUCCESS
        lines = result.output.splitlines()
        assert lines[0] == "+" + "-" * 64 + "+"
        assert lines[1] == "|####" + " " * 60 + "|"
        assert lines[2] == "|#  #" + " " * 60 + "|"
        assert lines[33] == lines[0]
        assert "Halted (after 4 steps)" in result.output

    def test_no_display(self, runner, glyph_rom):
        result = runner.invoke(main, [str(glyph_rom), "--no-display"])
        assert result.exit_code == 0
        assert "+---" not in result.output
        assert "Halted" in result.output

    def test_registers(self, runner, glyph_rom):
        result = runner.invoke(main, [str(glyph_rom), "--no-display", "--registers"])
        assert result.exit_code == 0
        assert "V3=42" in result.output
        assert "I=000 PC=0D0 SP=0" in result.output

    def test_step_limit(self, runner, tmp_path):
        rom = tmp_path / "loop.ch8"
        rom.write_bytes(program(0x10C8))
        result = runner.invoke(main, [str(rom), "--no-display", "--steps", "25"])
        assert result.exit_code == 0
        assert "Reached max steps (25) (after 25 steps)" in result.output

    def test_breakpoint(self, runner, glyph_rom):
        result = runner.invoke(main, [str(glyph_rom), "--no-display", "-b", "0x0CC"])
        assert result.exit_code == 0
        assert "Breakpoint at $0CC (after 2 steps)" in result.output

    def test_screenshot(self, runner, glyph_rom, tmp_path):
        shot = tmp_path / "out.png"
        result = runner.invoke(
            main, [str(glyph_rom), "--no-display", "--screenshot", str(shot), "--scale", "3"]
        )
        assert result.exit_code == 0
        assert "Screenshot written to" in result.output
        img = Image.open(io.BytesIO(shot.read_bytes()))
        assert img.size == (192, 96)

    def test_invalid_opcode_exit_code(self, runner, tmp_path):
        rom = tmp_path / "bad.ch8"
        rom.write_bytes(program(0x00E0))
        result = runner.invoke(main, [str(rom)])
        assert result.exit_code == ExitCode.EMULATION_ERROR
        assert "Emulation error: Unimplemented opcode 0x00E0 at $0C8" in result.output

    def test_stack_underflow_exit_code(self, runner, tmp_path):
        rom = tmp_path / "ret.ch8"
        rom.write_bytes(program(0x00EE))
        result = runner.invoke(main, [str(rom)])
        assert result.exit_code == ExitCode.EMULATION_ERROR
        assert "Stack underflow" in result.output

    def test_empty_rom(self, runner, tmp_path):
        rom = tmp_path / "empty.ch8"
        rom.write_bytes(b"")
        result = runner.invoke(main, [str(rom)])
        assert result.exit_code == ExitCode.EMULATION_ERROR
        assert "empty" in result.output

    def test_invalid_break_address(self, runner, glyph_rom):
        result = runner.invoke(main, [str(glyph_rom), "-b", "0x1000"])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_missing_rom(self, runner, tmp_path):
        result = runner.invoke(main, [str(tmp_path / "missing.ch8")])
        assert result.exit_code == 2
