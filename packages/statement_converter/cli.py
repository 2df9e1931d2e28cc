"""Typer console interface for ``statement_converter``.

Commands
--------
- ``convert``: extract a PDF statement (or use demo data), show the ledger and
  the balance banner, optionally review it interactively, and write a CSV.
- ``validate``: extract a PDF statement and report balance consistency only.

The root callback loads ``.env`` from the working directory with
``python-dotenv`` (existing variables win) and configures logging. Command
handlers (``cmd_*``) return an exit code so they can be called directly.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from typer.models import OptionInfo

from .api import export_statement, load_statement
from .display import build_summary_panel, build_warning_panel
from .intake import UploadRejected
from .logging_setup import configure_logging
from .models import DateFormat, ExportSettings
from .review import render_session, review_ledger
from .session import StatementSession

app = typer.Typer(
    name="statement-converter",
    help="Convert PDF bank statements to CSV with balance validation.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


# Module-level option objects keep calls out of parameter defaults (ruff B008).
PDF_PATH_OPTION: OptionInfo = typer.Option(
    ...,
    "--pdf-path",
    help="Path to the PDF bank statement (max 10MB).",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports missing files with a clear message
)
DEMO_OPTION: OptionInfo = typer.Option(
    False, "--demo", help="Skip AI extraction and load the demo dataset."
)


def parse_columns(raw: str | None) -> tuple[str, ...] | None:
    """Split a comma-separated ``--columns`` value; ``None``/blank means all columns."""

    if raw is None or not raw.strip():
        return None
    return tuple(part.strip().lower() for part in raw.split(",") if part.strip())


def _load_or_report(pdf_path: Path, *, demo: bool) -> StatementSession | None:
    try:
        session = load_statement(pdf_path, use_demo=demo)
    except UploadRejected as e:
        err_console.print(f"[red]Error:[/red] {e}")
        return None
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {pdf_path}")
        return None
    except PermissionError:
        err_console.print(f"[red]Error:[/red] Permission denied: {pdf_path}")
        return None
    except OSError as e:
        err_console.print(f"[red]Error:[/red] Could not read '{pdf_path}': {e}")
        return None

    if session.warning:
        err_console.print(build_warning_panel(session.warning))
    return session


def cmd_convert(
    pdf_path: Path,
    *,
    out: Path | None = None,
    settings: ExportSettings | None = None,
    review: bool = False,
    demo: bool = False,
) -> int:
    """Extract ``pdf_path``, optionally review it, and write the CSV export."""

    session = _load_or_report(pdf_path, demo=demo)
    if session is None:
        return 1

    render_session(session, console)
    if review:
        review_ledger(session, render=lambda s: render_session(s, console))

    try:
        written = export_statement(session.records, settings=settings, out_path=out)
    except OSError as e:
        err_console.print(f"[red]Error:[/red] Could not write CSV: {e}")
        return 1

    exported = len(session.records)
    if settings is not None and settings.exclude_invalid:
        exported = sum(1 for r in session.records if r.is_valid)
    console.print(f"Exported {exported} rows to {written}")
    return 0


def cmd_validate(pdf_path: Path, *, demo: bool = False, strict: bool = False) -> int:
    """Extract ``pdf_path`` and print the balance banner.

    A mismatch is reported, not treated as an error, unless ``strict`` is set.
    """

    session = _load_or_report(pdf_path, demo=demo)
    if session is None:
        return 1

    summary = session.summary
    panel = build_summary_panel(summary)
    if panel is None:
        console.print("No transactions were extracted.")
        return 0
    console.print(panel)
    if strict and summary is not None and not summary.is_valid:
        return 1
    return 0


@app.command("convert")
def convert_cmd(
    pdf_path: Annotated[Path, PDF_PATH_OPTION],
    *,
    out: Path | None = typer.Option(
        None, "--out", help="Output CSV path or directory (default: bank_statement_<date>.csv)."
    ),
    columns: str | None = typer.Option(
        None,
        "--columns",
        help="Comma-separated columns: date,description,debit,credit,balance,category.",
    ),
    date_format: DateFormat = typer.Option(
        DateFormat.ISO, "--date-format", help="Date format used in the CSV."
    ),
    exclude_invalid: bool = typer.Option(
        False, "--exclude-invalid", help="Leave rows flagged for review out of the CSV."
    ),
    review: bool = typer.Option(
        False, "--review/--no-review", help="Edit cells interactively before exporting."
    ),
    demo: bool = DEMO_OPTION,
) -> None:
    """Convert a PDF bank statement to CSV."""

    selected = parse_columns(columns)
    try:
        settings = ExportSettings(
            columns=selected if selected is not None else ExportSettings().columns,
            date_format=date_format,
            exclude_invalid=exclude_invalid,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--columns") from e

    code = cmd_convert(pdf_path, out=out, settings=settings, review=review, demo=demo)
    if code:
        raise typer.Exit(code)


@app.command("validate")
def validate_cmd(
    pdf_path: Annotated[Path, PDF_PATH_OPTION],
    *,
    demo: bool = DEMO_OPTION,
    strict: bool = typer.Option(
        False, "--strict", help="Exit with status 1 when the balances do not reconcile."
    ),
) -> None:
    """Check that the declared running balances of a statement reconcile."""

    code = cmd_validate(pdf_path, demo=demo, strict=strict)
    if code:
        raise typer.Exit(code)


@app.callback()
def _root(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Logging level (default: STATEMENT_CONVERTER_LOG_LEVEL or INFO).",
    ),
) -> None:
    """Load ``.env`` (without overriding the environment) and configure logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)


if __name__ == "__main__":  # pragma: no cover
    app()
