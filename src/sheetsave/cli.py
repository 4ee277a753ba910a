"""Command-line interface for sheetsave."""
import json
import sys
from pathlib import Path
from typing import Callable

import click

from sheetsave.__version__ import __version__
from sheetsave.config import DEFAULT_CONFIG_NAME, Config, load_config
from sheetsave.document import serialize_document
from sheetsave.errors import PersistenceError
from sheetsave.file_reader import load_document
from sheetsave.logging_config import get_logger, setup_logging
from sheetsave.reporter import (
    format_detailed_report,
    format_error_report,
    format_json_report,
    get_exit_code,
)
from sheetsave.retry import retry_with_backoff
from sheetsave.session import SheetSession


@click.group()
@click.version_option(version=__version__, prog_name="sheetsave")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.option("--verbose", is_flag=True, help="Enable verbose logging")
@click.option("--quiet", is_flag=True, help="Suppress warnings (errors only)")
@click.option("--config", type=click.Path(exists=True), help="Path to config file")
@click.option(
    "--retries", type=click.IntRange(min=1), default=1, show_default=True,
    help="Attempts at saving before giving up",
)
@click.pass_context
def main(
    ctx: click.Context,
    output_json: bool,
    verbose: bool,
    quiet: bool,
    config: str | None,
    retries: int,
) -> None:
    """Sheetsave: edit CSV and XLSX files without risking the previous version."""
    setup_logging(verbose=verbose, quiet=quiet)

    config_path = Path(config) if config else Path.cwd() / DEFAULT_CONFIG_NAME
    try:
        cfg = load_config(config_path)
    except ValueError as e:
        click.echo(f"Error: invalid configuration in {config_path}: {e}", err=True)
        sys.exit(2)

    ctx.obj = {"config": cfg, "json": output_json, "retries": retries}


@main.command()
@click.argument("file", type=click.Path(dir_okay=False))
@click.pass_obj
def show(obj: dict, file: str) -> None:
    """Print FILE as CSV."""
    try:
        document = load_document(Path(file), obj["config"])
    except (ValueError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)

    if obj["json"]:
        click.echo(json.dumps({"header": document.header, "rows": document.rows}, indent=2))
    else:
        click.echo(serialize_document(document, "csv").decode("utf-8"), nl=False)


@main.command("set")
@click.argument("file", type=click.Path(dir_okay=False))
@click.argument("row", type=int)
@click.argument("column", type=int)
@click.argument("value")
@click.pass_obj
def set_cell(obj: dict, file: str, row: int, column: int, value: str) -> None:
    """Set the cell at data ROW and COLUMN (zero-based) of FILE."""
    _edit(obj, Path(file), lambda session: session.set_cell(row, column, value))


@main.command()
@click.argument("file", type=click.Path(dir_okay=False))
@click.argument("values", nargs=-1, required=True)
@click.pass_obj
def append(obj: dict, file: str, values: tuple[str, ...]) -> None:
    """Append a row of VALUES to FILE."""
    _edit(obj, Path(file), lambda session: session.append_row(list(values)))


@main.command("delete-row")
@click.argument("file", type=click.Path(dir_okay=False))
@click.argument("row", type=int)
@click.pass_obj
def delete_row(obj: dict, file: str, row: int) -> None:
    """Delete data ROW (zero-based) from FILE."""
    _edit(obj, Path(file), lambda session: session.delete_row(row))


def _edit(obj: dict, path: Path, edit: Callable[[SheetSession], None]) -> None:
    """Open a session on path, apply one edit, save and report."""
    cfg: Config = obj["config"]
    output_json: bool = obj["json"]

    try:
        session = SheetSession.open(path, cfg)
        edit(session)
        report = retry_with_backoff(
            session.close,
            max_retries=obj["retries"],
            initial_delay=0.5,
            retry_on=(PersistenceError,),
        )
    except KeyboardInterrupt:
        click.echo("\nOperation cancelled by user", err=True)
        sys.exit(130)
    except PersistenceError as e:
        session.metrics.finish()
        if output_json:
            click.echo(format_json_report(None, session.metrics, error=e))
        else:
            click.echo(format_error_report(e), err=True)
        sys.exit(get_exit_code(e))
    except (ValueError, IndexError, FileNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)
    except Exception as e:
        logger = get_logger(__name__)
        logger.exception("Unexpected error during execution")
        click.echo(
            f"An unexpected error occurred: {e}\n" "Run with --verbose for details.", err=True
        )
        sys.exit(2)

    session.metrics.finish()
    if output_json:
        click.echo(format_json_report(report, session.metrics))
    else:
        click.echo(format_detailed_report(report, session.metrics))
    sys.exit(get_exit_code(None))


if __name__ == "__main__":
    main()
