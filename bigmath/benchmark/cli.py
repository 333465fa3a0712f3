"""
bigmath-bench - time bigmath functions and write CSV reports

Commands:
- bigmath-bench list                 - show the available reports
- bigmath-bench run [REPORT...]      - run reports (default: the standard set)
"""

import logging
from functools import partial
from pathlib import Path
from typing import Optional

import typer

from bigmath.benchmark.config import (
    DEFAULT_OUTPUT_DIRECTORY,
    DEFAULT_REFERENCE_PRECISION,
    DEFAULT_REPEATS,
    BenchmarkConfig,
)
from bigmath.benchmark.harness import write_report
from bigmath.benchmark.reports import DEFAULT_REPORTS, REPORTS
from bigmath.core.context import Precision
from bigmath.core.errors import BigMathError
from bigmath.core.result import Err, Ok, sequence

app = typer.Typer(
    help="Benchmark bigmath functions across input ranges and precisions",
    no_args_is_help=True,
)
logger = logging.getLogger(__name__)


def _in_report(name: str, error: BigMathError) -> BigMathError:
    return error.with_context(f"report {name}")


@app.command("list")
def list_reports() -> None:
    """Show the report names accepted by `run`."""
    for name, factory in REPORTS.items():
        match factory().map(lambda suite: suite.name):
            case Ok(filename):
                typer.echo(f"{name:20s} {filename}")
            case Err(error):
                typer.echo(f"{name:20s} INVALID: {error.message}")


@app.command()
def run(
    reports: Optional[list[str]] = typer.Argument(
        None,
        help="Reports to run (default: standard, slow, very-slow, big-range)",
    ),
    output_dir: Path = typer.Option(
        DEFAULT_OUTPUT_DIRECTORY,
        "--output", "-o",
        help="Directory the CSV reports are written to",
    ),
    precision: int = typer.Option(
        DEFAULT_REFERENCE_PRECISION,
        "--precision", "-p",
        help="Significant digits every function is timed at",
    ),
    repeats: int = typer.Option(
        DEFAULT_REPEATS,
        "--repeats", "-r",
        help="Calls per data point; the median is reported",
        min=1,
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ...)",
    ),
) -> None:
    """Run benchmark reports and write one CSV file per report."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    names = list(reports) if reports else list(DEFAULT_REPORTS)
    unknown = [name for name in names if name not in REPORTS]
    if unknown:
        typer.echo(f"Unknown report(s): {', '.join(unknown)}", err=True)
        raise typer.Exit(code=2)

    match Precision.parse(precision):
        case Ok(parsed):
            digits = parsed.digits
        case Err(message):
            typer.echo(f"Invalid --precision: {message}", err=True)
            raise typer.Exit(code=2)

    # every requested report is validated before the first one runs
    validated = sequence(REPORTS[name]().map_err(partial(_in_report, name)) for name in names)
    if isinstance(validated, Err):
        logger.error("invalid report: %s", validated.error.to_dict())
        typer.echo(f"Invalid {validated.error.message}", err=True)
        raise typer.Exit(code=1)

    config = BenchmarkConfig(
        output_directory=output_dir,
        reference_precision=digits,
        repeats=repeats,
    )
    for suite in validated.value:
        path = write_report(suite, config)
        typer.echo(f"Wrote {path}")


def main() -> None:
    app(prog_name="bigmath-bench")


if __name__ == "__main__":
    main()
