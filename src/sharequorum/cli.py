"""
CLI for consensus reconstruction of threshold-shared secrets.

Commands:
    recover        Recover the secret agreed on by the most share subsets
    tally          Show every candidate secret with its agreement count
    decode         Decode a base-N digit string
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from .core.consensus import reconstruct, ranked, tally_subsets
from .core.shareset import load_share_set
from .crypto.combinations import count_combinations
from .crypto.encoding import decode_value, encode_value
from .errors import InsufficientSharesError, SecretRecoveryError


__version__ = "0.1.0"

app = typer.Typer(
    name="sharequorum",
    help="Recover Shamir-shared secrets from partly corrupted share sets",
)

logger = logging.getLogger(__name__)

# Above this many subsets, enumeration gets slow enough to be worth a warning.
LARGE_ENUMERATION_WARNING = 100_000

DEFAULT_WORKERS = 1


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"sharequorum {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log every step, including each subset"
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True
    ),
) -> None:
    """
    Consensus reconstruction for Shamir secret sharing.

    Every k-subset of the supplied shares is interpolated at x = 0 and the
    value most subsets agree on is reported, so a minority of corrupted
    shares cannot change the result.
    """
    level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR

    # Secrets and share values may exceed the default int <-> str digit limit
    if hasattr(sys, "set_int_max_str_digits"):
        sys.set_int_max_str_digits(0)

    # Logs go to stderr; stdout carries only results.
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )


def _warn_if_large(n: int, k: int) -> None:
    total = count_combinations(n, k)
    if total > LARGE_ENUMERATION_WARNING:
        logger.warning("C(%d, %d) = %d subsets to evaluate; this may take a while", n, k, total)


@app.command()
def recover(
    share_file: Path = typer.Argument(..., help="Share document (JSON), or - for stdin"),
    workers: int = typer.Option(
        DEFAULT_WORKERS,
        "--workers",
        "-w",
        min=1,
        envvar="SHAREQUORUM_WORKERS",
        help="Processes used to interpolate subsets",
    ),
    show_witness: bool = typer.Option(
        False, "--show-witness", help="Also print the shares that agreed"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """
    Recover the secret.

    Prints "Secret: <value>" when the consensus value is an integer, and
    "Secret (rational): <n>/<d>" otherwise.

    Example:
        sharequorum recover shares.json
        sharequorum recover --show-witness - < shares.json
    """
    try:
        share_set = load_share_set(share_file)
        _warn_if_large(len(share_set), share_set.k)
        result = reconstruct(share_set.shares, share_set.k, workers=workers)
    except SecretRecoveryError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return

    if result.is_integer:
        typer.echo(f"Secret: {result.integer_value}")
    else:
        typer.echo(f"Secret (rational): {result.value}")

    if show_witness:
        xs = ", ".join(str(s.x) for s in result.witness)
        typer.echo(f"  Witness shares: {xs}")
        typer.echo(
            f"  Agreement: {result.count}/{result.subsets_evaluated} subsets "
            f"({result.distinct_values} distinct values)"
        )


@app.command()
def tally(
    share_file: Path = typer.Argument(..., help="Share document (JSON), or - for stdin"),
    limit: Optional[int] = typer.Option(
        None, "--limit", "-l", min=1, help="Show only the top N values"
    ),
    workers: int = typer.Option(
        DEFAULT_WORKERS, "--workers", "-w", min=1, envvar="SHAREQUORUM_WORKERS"
    ),
) -> None:
    """
    List every candidate secret with the number of subsets producing it.

    Rows are in selection order: the first row is what 'recover' reports.
    """
    try:
        share_set = load_share_set(share_file)
        if len(share_set) < share_set.k:
            raise InsufficientSharesError(
                f"Not enough shares in input: need {share_set.k}, got {len(share_set)}"
            )
        _warn_if_large(len(share_set), share_set.k)
        entries = ranked(tally_subsets(share_set.shares, share_set.k, workers=workers))
    except SecretRecoveryError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    total = sum(e.count for e in entries)
    typer.echo(f"Threshold: k = {share_set.k}, shares: {len(share_set)}, subsets: {total}")
    typer.echo("-" * 50)

    for entry in entries[:limit]:
        xs = ",".join(str(s.x) for s in entry.witness)
        typer.echo(f"  {entry.value}: {entry.count} subset(s), witness x={xs}")

    if not entries:
        typer.echo("  (none)")


@app.command()
def decode(
    value: str = typer.Argument(..., help="Digit string, underscores allowed"),
    base: int = typer.Option(..., "--base", "-b", help="Base of VALUE (2-36)"),
    to_base: Optional[int] = typer.Option(
        None, "--to", "-t", help="Also print the value in this base"
    ),
) -> None:
    """Decode a share value and print it in decimal."""
    try:
        decoded = decode_value(value, base)
        typer.echo(str(decoded))
        if to_base is not None:
            typer.echo(encode_value(decoded, to_base))
    except SecretRecoveryError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
