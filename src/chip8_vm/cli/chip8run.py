"""
chip8run - Headless CHIP-8 Runner
=================================

Runs a CHIP-8 ROM without a window and prints the final display as text.

Usage Examples
--------------
Run until the program halts (or 100000 steps):
    $ chip8run glyphs.ch8

Limit the number of steps, fix the random seed:
    $ chip8run game.ch8 --steps 500 --seed 7

Save a PNG of the display:
    $ chip8run glyphs.ch8 --screenshot out.png --scale 8

Stop at an address and dump registers:
    $ chip8run game.ch8 --break 0x0D4 --registers

Trace every instruction:
    $ chip8run game.ch8 --steps 20 -v

Exit Codes
----------
0 - Program halted, hit a breakpoint, or used up its step budget
1 - Fatal emulation error (bad opcode, stack misuse, memory access)
2 - Invalid arguments or missing files

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import logging
from pathlib import Path
from typing import Optional

import click

from chip8_vm import __version__
from chip8_vm.cli.errors import handle_cli_exception, parse_address
from chip8_vm.emulator import Emulator, EmulatorConfig


logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


@click.command()
@click.argument(
    "rom_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-n", "--steps",
    type=click.IntRange(min=1),
    default=100_000,
    show_default=True,
    help="Maximum number of instructions to execute",
)
@click.option(
    "-s", "--seed",
    type=int,
    default=None,
    help="Seed for the random number instruction (default: random)",
)
@click.option(
    "-b", "--break", "break_addresses",
    multiple=True,
    help="Stop before executing this address (hex with 0x or $ prefix, or decimal). Repeatable.",
)
@click.option(
    "--screenshot",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the final display to a PNG file",
)
@click.option(
    "--scale",
    type=click.IntRange(min=1),
    default=10,
    show_default=True,
    help="Pixel scale for --screenshot",
)
@click.option(
    "--registers",
    is_flag=True,
    help="Print register contents after the run",
)
@click.option(
    "--no-display",
    is_flag=True,
    help="Do not print the display",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Trace every instruction (DEBUG logging)",
)
@click.version_option(version=__version__, prog_name="chip8run")
def main(
    rom_file: Path,
    steps: int,
    seed: Optional[int],
    break_addresses: tuple,
    screenshot: Optional[Path],
    scale: int,
    registers: bool,
    no_display: bool,
    verbose: bool,
) -> None:
    """
    Run a CHIP-8 ROM headlessly.

    ROM_FILE is loaded at address 200 ($0C8) and executed until the program
    halts, a breakpoint is reached, or the step budget runs out. The final
    display is printed with '#' for lit pixels.
    """
    setup_logging(verbose)

    try:
        addresses = [parse_address(a) for a in break_addresses]

        emu = Emulator(EmulatorConfig(rom_path=rom_file, seed=seed, max_steps=steps))
        for address in addresses:
            emu.add_breakpoint(address)

        event = emu.run()
        logger.info(f"Stopped after {emu.total_steps} steps: {event}")

        if not no_display:
            border = "+" + "-" * emu.display.width + "+"
            click.echo(border)
            for line in emu.display.get_text_grid():
                click.echo(f"|{line}|")
            click.echo(border)

        click.echo(f"{event} (after {emu.total_steps} steps)")

        if registers:
            regs = emu.registers
            click.echo(" ".join(f"V{n:X}={regs[f'v{n:x}']:02X}" for n in range(16)))
            click.echo(f"I={regs['i']:03X} PC={regs['pc']:03X} SP={regs['sp']}")

        if screenshot:
            screenshot.write_bytes(emu.render_display(scale=scale))
            click.echo(f"Screenshot written to: {screenshot}")

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
