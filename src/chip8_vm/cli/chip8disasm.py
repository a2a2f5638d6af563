"""
chip8disasm - CHIP-8 Disassembler Command-Line Interface
========================================================

Usage Examples
--------------
Disassemble a ROM (loaded at $0C8 by default):
    $ chip8disasm game.ch8

With a different base address:
    $ chip8disasm code.bin --address 0x200

Limit number of instructions:
    $ chip8disasm game.ch8 --count 20

Output to file:
    $ chip8disasm game.ch8 -o listing.asm

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import sys
from pathlib import Path
from typing import Optional

import click

from chip8_vm import __version__
from chip8_vm.cli.errors import ExitCode, parse_address
from chip8_vm.disassembler import Chip8Disassembler


@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "-a", "--address",
    type=str,
    default="0x0C8",
    help="Base address (hex with 0x or $ prefix, or decimal). Default: 0x0C8",
)
@click.option(
    "-c", "--count",
    type=int,
    default=None,
    help="Maximum number of instructions to disassemble (default: all)",
)
@click.option(
    "--no-bytes",
    is_flag=True,
    help="Omit raw bytes from output (show only mnemonic and operand)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="chip8disasm")
def main(
    input_file: Path,
    output: Optional[Path],
    address: str,
    count: Optional[int],
    no_bytes: bool,
    verbose: bool,
) -> None:
    """
    Disassemble CHIP-8 program bytes.

    INPUT_FILE is the ROM to disassemble.
    """
    try:
        base_address = parse_address(address)
    except click.BadParameter as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    try:
        data = input_file.read_bytes()
    except IOError as e:
        click.echo(f"Error reading {input_file}: {e}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    if len(data) == 0:
        click.echo(f"Error: {input_file} is empty", err=True)
        sys.exit(ExitCode.EMULATION_ERROR)

    if verbose:
        click.echo(f"Input file: {input_file} ({len(data)} bytes)", err=True)
        click.echo(f"Base address: ${base_address:03X}", err=True)

    output_lines = [
        f"; Disassembly of {input_file.name}",
        f"; Size: {len(data)} bytes",
        f"; Base address: ${base_address:03X}",
        "",
    ]

    instructions = Chip8Disassembler().disassemble(data, start_address=base_address, count=count)
    for instr in instructions:
        if no_bytes:
            if instr.operand_str:
                line = f"${instr.address:03X}: {instr.mnemonic} {instr.operand_str}"
            else:
                line = f"${instr.address:03X}: {instr.mnemonic}"
            if instr.comment:
                line += f"  ; {instr.comment}"
            output_lines.append(line)
        else:
            output_lines.append(str(instr))

    result = "\n".join(output_lines) + "\n"

    if output:
        try:
            output.write_text(result, encoding="utf-8")
        except IOError as e:
            click.echo(f"Error writing {output}: {e}", err=True)
            sys.exit(ExitCode.INVALID_ARGS)
        if verbose:
            click.echo(f"Output written to: {output}", err=True)
    else:
        click.echo(result, nl=False)

    if verbose:
        click.echo(f"Instructions disassembled: {len(instructions)}", err=True)


if __name__ == "__main__":
    main()
