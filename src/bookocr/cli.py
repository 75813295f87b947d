"""Book OCR CLI."""

from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bookocr.config import RunConfig, settings
from bookocr.errors import BookOcrError
from bookocr.log import configure_logging
from bookocr.models import RunReport
from bookocr.pipeline import check_external_tools, run_pipeline

app = typer.Typer(
    name="bookocr",
    help="Turn a directory of scanned pages (TIFF/PDF) into one searchable PDF",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


def print_report(report: RunReport) -> None:
    """Print a run summary table."""
    table = Table(title="Book OCR", show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Output", escape(str(report.output_path)))
    table.add_row("Pages in output", str(report.output_page_count))
    table.add_row("Input files", str(report.intake_files))
    table.add_row("Scanned sheets", str(report.canonical_pages))
    if report.skipped_files:
        table.add_row("Skipped", escape(", ".join(report.skipped_files)))
    if report.ambiguous_pages:
        table.add_row("Ambiguous orientation", escape(", ".join(report.ambiguous_pages)))
    if report.degraded_count:
        table.add_row(
            "Degraded OCR",
            f"[yellow]{report.degraded_count}[/yellow]: {escape(', '.join(report.degraded_artifacts))}",
        )

    console.print(table)


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def main(
    input_pattern: Optional[str] = typer.Option(
        None,
        "-i",
        "--input-pattern",
        help="Regex matching the scanned pages to process. "
        f"Default: '{settings.input_pattern}'.",
    ),
    output_name: Optional[str] = typer.Option(
        None,
        "-o",
        "--output",
        help=f"Filename of the final PDF. Default: '{settings.output_name}'.",
    ),
    dpi: Optional[int] = typer.Option(
        None,
        "-d",
        "--dpi",
        min=1,
        help=f"DPI to process all files with. Default: {settings.dpi}.",
    ),
    input_dir: Path = typer.Option(
        Path("."),
        "--input-dir",
        exists=True,
        file_okay=False,
        dir_okay=True,
        help="Directory holding the scanned pages.",
    ),
    keep_staging: bool = typer.Option(
        settings.keep_staging_on_failure,
        "--keep-staging",
        help="Keep the staging directory if the run fails.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Convert scanned pages into a single searchable PDF."""
    configure_logging("DEBUG" if verbose else settings.log_level, console=err_console)

    try:
        config = RunConfig.from_settings(
            settings,
            input_pattern=input_pattern,
            output_name=output_name,
            dpi=dpi,
        )
    except ValidationError as exc:
        err_console.print(f"[bold red]Invalid options:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=2)

    run_settings = settings.model_copy(update={"keep_staging_on_failure": keep_staging})

    try:
        check_external_tools(run_settings)
        report = run_pipeline(config, input_dir, Path.cwd(), settings=run_settings)
    except BookOcrError as exc:
        err_console.print(f"[bold red]ERROR:[/bold red] {escape(exc.message)}")
        raise typer.Exit(code=exc.exit_code)

    print_report(report)
    console.print("[bold green]DONE.[/bold green]")


if __name__ == "__main__":
    app()
