# src/metricline/cli.py
"""
metricline Command Line Interface (CLI).

This module implements the terminal interface using `typer` and `rich`. Every
command reads a timeline document (see :mod:`metricline.core.contracts.timeline`)
and runs one of the timeline operations on it.

Usage
-----
    # Markdown report of the newest snapshot
    $ metricline report timeline.json

    # Compact a timeline and write it back out
    $ metricline trim timeline.json -o trimmed.json

    # Value of a key at an instant
    $ metricline infer timeline.json requests --at 2026-01-01T00:00:01Z

    # Resample two keys onto a shared 1s axis, as CSV
    $ metricline extract timeline.json -k requests -k errors --granularity 1 --csv

    # Rate at the middle of three (seconds=value) samples
    $ metricline rate 1=1 2=2 5=4
"""

from __future__ import annotations

import csv
import sys
import traceback
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from metricline.core.contracts.timeline import TimelineDocument
from metricline.core.rate import Sample, rate
from metricline.core.report import dump_md_table
from metricline.core.settings import load_settings
from metricline.core.store.snapshot import Snapshot
from metricline.core.timeline import extract_numbers, infer, trim

# Pick up LOG_LEVEL / METRICLINE_* from a local .env before any command runs
load_dotenv()

app = typer.Typer(
    help="metricline: inspect, compact and resample metric snapshot timelines.",
    rich_markup_mode="markdown",
)
console = Console()


# --------------------------------------------------------------------------- #
# Helpers: parsing & I/O
# --------------------------------------------------------------------------- #


def _fail(message: str, verbose: bool = False) -> typer.Exit:
    """Print `message` in red and return the exit to raise."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")
    if verbose:
        traceback.print_exc()
    return typer.Exit(code=1)


def _load_timeline(path: Path) -> list[Snapshot]:
    """Read and validate a timeline document, exiting with code 1 on failure."""
    try:
        doc = TimelineDocument.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as e:
        raise _fail(f"invalid timeline document {path}:\n{e}") from e
    return doc.to_snapshots()


def _parse_instant(text: str) -> datetime:
    """Parse an ISO-8601 instant, or seconds since the Unix epoch (always aware)."""
    try:
        return datetime.fromtimestamp(float(text), UTC)
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise typer.BadParameter(f"{text!r} is neither ISO-8601 nor epoch seconds") from e
    # Timeline documents are normalized to UTC, so naive input is read as UTC
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)


def _parse_sample(text: str) -> Sample:
    """Parse ``WHEN=VALUE`` into a :class:`Sample`."""
    when, sep, value = text.rpartition("=")
    if not sep or not when:
        raise typer.BadParameter(f"{text!r} must look like WHEN=VALUE")
    try:
        number = float(value)
    except ValueError as e:
        raise typer.BadParameter(f"{value!r} in {text!r} is not a number") from e
    return Sample(when=_parse_instant(when), value=number)


def _render_rows(keys: list[str], rows: list[list[float]], granularity: timedelta) -> None:
    table = Table(title=f"{len(rows)} rows, tick = {granularity.total_seconds():g}s")
    table.add_column("tick", justify="right", style="cyan")
    for key in keys:
        table.add_column(escape(key), justify="right")
    for row in rows:
        table.add_row(f"{row[0]:.0f}", *(f"{v:g}" for v in row[1:]))
    console.print(table)


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #

TimelineArg = Annotated[
    Path,
    typer.Argument(
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Path to a JSON timeline document.",
    ),
]


@app.command()  # type: ignore[misc]
def report(file: TimelineArg) -> None:
    """Print a markdown table of the newest snapshot in the timeline."""
    snaps = _load_timeline(file)
    if not snaps:
        raise _fail(f"{file} holds no snapshots")
    # One table row per line, however long the value
    sys.stdout.write(dump_md_table(snaps[-1]))


@app.command("trim")  # type: ignore[misc]
def trim_command(
    file: TimelineArg,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the compacted timeline here instead of stdout."),
    ] = None,
) -> None:
    """Drop redundant unchanged values from a timeline."""
    snaps = _load_timeline(file)
    before = len(snaps)
    trim(snaps)
    payload = TimelineDocument.from_snapshots(snaps).model_dump_json(indent=2)
    if output is None:
        sys.stdout.write(payload + "\n")
        return
    output.write_text(payload + "\n", encoding="utf-8")
    console.print(f"[green]Trimmed {before} -> {len(snaps)} snapshots[/green] into {output}")


@app.command("infer")  # type: ignore[misc]
def infer_command(
    file: TimelineArg,
    key: Annotated[str, typer.Argument(help="Metric key to look up.")],
    at: Annotated[
        str | None,
        typer.Option("--at", help="Instant to query (ISO-8601 or epoch seconds). Default: newest."),
    ] = None,
) -> None:
    """Show the value `KEY` held at an instant."""
    snaps = _load_timeline(file)
    t = _parse_instant(at) if at is not None else (snaps[-1].when if snaps else datetime.now(UTC))
    found = infer(snaps, t, key)
    if found.is_err():
        raise _fail(f"{key!r} at {t.isoformat()}: {found.unwrap_err()}")
    hit = found.unwrap()
    when = snaps[hit.index].when.isoformat()
    shown = escape(repr(hit.value))
    console.print(f"{escape(key)} = [bold]{shown}[/bold] (snapshot {hit.index}, {when})")


@app.command()  # type: ignore[misc]
def extract(
    file: TimelineArg,
    keys: Annotated[
        list[str],
        typer.Option("--key", "-k", help="Metric key to resample (repeatable, order kept)."),
    ],
    start: Annotated[
        str | None,
        typer.Option("--from", help="Window start. Default: first snapshot."),
    ] = None,
    end: Annotated[
        str | None,
        typer.Option(
            "--to", help="Window end (exclusive). Default: one tick after the last snapshot."
        ),
    ] = None,
    granularity: Annotated[
        float | None,
        typer.Option("--granularity", "-g", help="Tick length in seconds. Default: settings."),
    ] = None,
    as_csv: Annotated[bool, typer.Option("--csv", help="Emit CSV on stdout.")] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show full tracebacks.")
    ] = False,
) -> None:
    """Resample numeric keys onto one shared time axis."""
    snaps = trim(_load_timeline(file))
    if not snaps:
        raise _fail(f"{file} holds no snapshots")

    tick = (
        timedelta(seconds=granularity) if granularity is not None else load_settings().granularity
    )
    t0 = _parse_instant(start) if start is not None else snaps[0].when
    t1 = _parse_instant(end) if end is not None else snaps[-1].when + tick

    try:
        result = extract_numbers(snaps, tick, t0, t1, keys)
    except ValueError as e:
        raise _fail(str(e), verbose) from e
    if result.is_err():
        raise _fail(str(result.unwrap_err()), verbose)
    rows = result.unwrap()

    if as_csv:
        writer = csv.writer(sys.stdout, lineterminator="\n")
        writer.writerow(["tick", *keys])
        for row in rows:
            writer.writerow([f"{row[0]:.0f}", *(f"{v:g}" for v in row[1:])])
        return
    _render_rows(keys, rows, tick)


@app.command("rate")  # type: ignore[misc]
def rate_command(
    samples: Annotated[
        list[str] | None,
        typer.Argument(help="Samples as WHEN=VALUE, oldest first (WHEN: ISO-8601 or seconds)."),
    ] = None,
) -> None:
    """Estimate the per-second rate of change at the middle sample (0 for none or one)."""
    parsed = [_parse_sample(s) for s in samples or []]
    console.print(f"{rate(*parsed):g}")


if __name__ == "__main__":
    app()
