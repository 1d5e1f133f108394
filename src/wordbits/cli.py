from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table
from rich.traceback import install
from toolz import pipe

from .geometry import BLOCK_TYPES
from .reader import BitReader
from .utils.log import configure_logger
from .utils.words import from_bytes, to_bytes
from .writer import BitWriter

console = Console()
install(show_locals=True)

app = typer.Typer(help="Read and pack bit fields in padded fixed-width words")

WIDTH = typer.Option(8, "-w", "--width", help="Word width in bits (8, 16, 32 or 64)")
LEFT_PAD = typer.Option(0, "--left-pad", help="Unused high bits in every word")
RIGHT_PAD = typer.Option(0, "--right-pad", help="Unused low bits in every word")
ENDIAN = typer.Option("big", "-e", "--endian", help='Byte order of the words ("big" or "little")')
LIMIT = typer.Option(None, "--limit", help="Number of valid bits in the file")
LOGGING = typer.Option(False, "-l", "--logging", help="Enable logging")


def _open_reader(
    file: Path, width: int, left_pad: int, right_pad: int, endian: str, limit: int | None, logging: bool
) -> BitReader:
    configure_logger(logging)
    words = from_bytes(file.read_bytes(), BLOCK_TYPES.get(width, width), endian)
    reader = BitReader(words, left_pad, right_pad)
    if limit is not None:
        reader.limit_bits(limit)
    return reader


def _field_width(bits: int) -> int:
    # Smallest block type that holds the field
    return next((width for width in BLOCK_TYPES if bits <= width), 64)


@app.command()
def read(
    file: Path = typer.Argument(
        ...,
        help="File holding the words",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    bits: int = typer.Option(..., "-b", "--bits", help="Bits per block"),
    index: int = typer.Option(0, "-n", "--index", help="Block index"),
    width: int = WIDTH,
    left_pad: int = LEFT_PAD,
    right_pad: int = RIGHT_PAD,
    endian: str = ENDIAN,
    limit: int | None = LIMIT,
    logging: bool = LOGGING,
) -> None:
    try:
        reader = _open_reader(file, width, left_pad, right_pad, endian, limit, logging)
        value = int(reader.read_block(_field_width(bits), bits, index))
        console.print(f"{value} {value:#x} {value:#0{bits + 2}b}")
    except Exception as e:
        console.print(f"[bold red]Unexpected error:[/] {e}")
        raise typer.Exit(1)


@app.command()
def dump(
    file: Path = typer.Argument(
        ...,
        help="File holding the words",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    bits: int = typer.Option(..., "-b", "--bits", help="Bits per block"),
    width: int = WIDTH,
    left_pad: int = LEFT_PAD,
    right_pad: int = RIGHT_PAD,
    endian: str = ENDIAN,
    limit: int | None = LIMIT,
    logging: bool = LOGGING,
) -> None:
    try:
        reader = _open_reader(file, width, left_pad, right_pad, endian, limit, logging)
        if bits <= 0:
            console.print("[bold red]Unexpected error:[/] bits per block must be positive")
            raise typer.Exit(1)

        # The last block may be partial and is zero-filled.
        rows: list[tuple[int, int]] = pipe(
            range(-(-len(reader) // bits)),
            lambda arg: map(lambda n: (n, int(reader.read_block(_field_width(bits), bits, n))), arg),
            list,
        )

        table = Table(title=f"{file.name}: {len(reader)} bits, {bits}-bit blocks")
        table.add_column("Block", justify="right")
        table.add_column("Bits", justify="right")
        table.add_column("Dec", justify="right")
        table.add_column("Hex", justify="right")
        table.add_column("Bin", justify="right")
        for n, value in rows:
            table.add_row(
                str(n),
                f"{n * bits}-{n * bits + bits - 1}",
                str(value),
                f"{value:#x}",
                f"{value:0{bits}b}",
            )
        console.print(table)
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[bold red]Unexpected error:[/] {e}")
        raise typer.Exit(1)


@app.command()
def pack(
    output: Path = typer.Argument(..., help="File to write the words to", dir_okay=False),
    values: list[int] = typer.Argument(..., help="Values to pack"),
    bits: int = typer.Option(..., "-b", "--bits", help="Bits per value"),
    width: int = WIDTH,
    left_pad: int = LEFT_PAD,
    right_pad: int = RIGHT_PAD,
    endian: str = ENDIAN,
    logging: bool = LOGGING,
) -> None:
    configure_logger(logging)
    try:
        writer = BitWriter(left_pad, right_pad, dtype=BLOCK_TYPES.get(width, width))
        source = _field_width(bits)
        for value in values:
            if not 0 <= value < 1 << bits:
                console.print(f"[bold red]Unexpected error:[/] {value} does not fit in {bits} bits")
                raise typer.Exit(1)
            writer.write_block(source, source - bits, bits, value)

        output.write_bytes(to_bytes(writer.data(), endian))
        console.print(f"Packed {len(values)} values into {len(writer)} bits ({len(writer.data())} words)")
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[bold red]Unexpected error:[/] {e}")
        raise typer.Exit(1)
