"""
dinasty CLI - Account PSBT batches against descriptors and convert PSBT encodings.

Commands read their input from standard input and write the result to
standard output, so they can be chained:

    dinasty b64-to-bin < psbts.txt | dinasty details -n regtest -d "tr(tpub.../<0;1>/*)"
"""

from __future__ import annotations

import sys

import typer
from loguru import logger

from dinasty.config import get_settings
from dinasty.constants import MAX_HORIZON
from dinasty.models import NetworkType
from dinasty.psbt.container import (
    ContainerDecodeError,
    decode,
    encode,
    psbts_from_base64,
    psbts_to_base64,
    read_psbts,
)
from dinasty.psbt.details import ClassificationError, psbt_details
from dinasty.psbt.report import render_report
from dinasty.wallet.descriptor import DescriptorError, explode

app = typer.Typer(
    name="dinasty",
    help="Descriptor-scoped PSBT accounting",
    add_completion=False,
)


class StdinError(Exception):
    pass


def setup_logging(level: str = "WARNING") -> None:
    """Configure loguru logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


def read_stdin() -> bytes:
    return sys.stdin.buffer.read()


def to_multiline_string(data: bytes) -> list[str]:
    """Non-empty lines of UTF-8 text"""
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise StdinError(f"Stdin is not valid UTF-8: {e}") from e
    return [line.strip() for line in text.splitlines() if line.strip()]


def to_single_text_line(data: bytes) -> str:
    lines = to_multiline_string(data)
    if len(lines) != 1:
        raise StdinError(f"One text line expected in stdin, found {len(lines)}")
    return lines[0]


@app.command()
def details(
    descriptors: list[str] = typer.Option(
        ...,
        "--descriptor",
        "-d",
        help="Descriptor whose scripts are ours, <0;1> multipath allowed. Repeatable",
    ),
    network: NetworkType | None = typer.Option(
        None, "--network", "-n", help="Bitcoin network (default: NETWORK env or mainnet)"
    ),
    horizon: int | None = typer.Option(
        None,
        "--horizon",
        min=1,
        max=MAX_HORIZON,
        help="Derivation indices checked per descriptor (default: HORIZON env or 1000)",
    ),
    log_level: str | None = typer.Option(None, "--log-level", "-l"),
) -> None:
    """Print incoming, outgoing and fees of the PSBTs given in standard input.

    PSBTs are read either as the binary container or as one base64 PSBT per line.
    """
    settings = get_settings()
    setup_logging(log_level or settings.log_level)

    try:
        psbts = read_psbts(read_stdin())
        report = psbt_details(
            psbts,
            descriptors,
            network=network or settings.network,
            horizon=horizon or settings.horizon,
        )
    except (ContainerDecodeError, DescriptorError, ClassificationError) as e:
        logger.error(f"Failed to account PSBTs: {e}")
        raise typer.Exit(1)

    typer.echo(render_report(report), nl=False)


@app.command("explode")
def explode_descriptor(
    with_private_keys: bool = typer.Option(
        False,
        "--with-private-keys",
        help="The descriptor is expected to contain private keys",
    ),
    log_level: str | None = typer.Option(None, "--log-level", "-l"),
) -> None:
    """Split the <0;1> descriptor given in standard input into external and internal ones.

    Prints the external (receive) descriptor, then the internal (change) one, with checksums.
    """
    setup_logging(log_level or get_settings().log_level)

    try:
        descriptor = to_single_text_line(read_stdin())
        exploded = explode(descriptor, expect_private=with_private_keys)
    except (StdinError, DescriptorError) as e:
        logger.error(f"Failed to explode descriptor: {e}")
        raise typer.Exit(1)

    external, internal = exploded.with_checksums()
    typer.echo(external)
    typer.echo(internal)


@app.command()
def b64_to_bin(
    log_level: str | None = typer.Option(None, "--log-level", "-l"),
) -> None:
    """Convert base64 PSBTs, one per line, into the binary container."""
    setup_logging(log_level or get_settings().log_level)

    try:
        psbts = psbts_from_base64("\n".join(to_multiline_string(read_stdin())))
    except (StdinError, ContainerDecodeError) as e:
        logger.error(f"Failed to read base64 PSBTs: {e}")
        raise typer.Exit(1)

    typer.echo(encode(psbts), nl=False)


@app.command()
def bin_to_b64(
    log_level: str | None = typer.Option(None, "--log-level", "-l"),
) -> None:
    """Convert the binary container into base64 PSBTs, one per line."""
    setup_logging(log_level or get_settings().log_level)

    try:
        psbts = decode(read_stdin())
    except ContainerDecodeError as e:
        logger.error(f"Failed to decode PSBT container: {e}")
        raise typer.Exit(1)

    typer.echo(psbts_to_base64(psbts))


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
