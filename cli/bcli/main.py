from typing import Optional
import logging
import pathlib

import typer
from rich import print
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from bcli.compress.terms import REPLACEMENTS, TermCompressor, merge_replacements
from bcli.config import CONFIG_PATH, load_config, validate_config_file
from bcli.extract.directory import summarize_directory
from bcli.render.render import (
    FORMATS,
    default_filename,
    filter_summaries,
    render,
    resolve_mode,
)

__version__ = "1.0.0"

app = typer.Typer(
    help=(
        "bian2context: compact BIAN OpenAPI context extractor "
        "(service domains, entities, domain events)."
    ),
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, show_time=False)],
        force=True,
    )


def build_compressor(cfg: dict) -> TermCompressor:
    return TermCompressor(merge_replacements(REPLACEMENTS, cfg.get("replacements")))


def _version_callback(value: bool):
    if value:
        Console().print(f"bian2context v{__version__}", style="bold cyan")
        raise typer.Exit(0)


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-v", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """📚 bian2context - summarize BIAN API specs into compact LLM context."""


@app.command()
def summarize(
    directory: str = typer.Argument(..., help="Directory with .yaml/.yml/.json specs"),
    only_domains: bool = typer.Option(False, "--only-domains", help="Output only the list of Service Domains"),
    only_entities: bool = typer.Option(False, "--only-entities", help="Output only the Entities (per domain)"),
    only_events: bool = typer.Option(False, "--only-events", help="Output only the Domain Events (per domain)"),
    compress: Optional[bool] = typer.Option(
        None, "--compress/--no-compress", help="Apply abbreviations from the replacement dictionary"
    ),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Custom output filename"),
    json_out: bool = typer.Option(False, "--json", help="Alias of --format json"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: txt | json"),
    filter: Optional[str] = typer.Option(None, "--filter", help="Keep Service Domains containing this text"),
    workers: Optional[int] = typer.Option(None, "--workers", help="Parse files on N threads"),
    stdout: bool = typer.Option(False, "--stdout", help="Print to stdout instead of writing a file"),
    config: str = typer.Option(CONFIG_PATH, "--config", help="Path to config file"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
):
    """Summarize a directory of BIAN specs into compact text or JSON."""
    setup_logging(verbose)
    console = Console()
    try:
        cfg = load_config(config)
    except OSError as e:
        console.print(f"[red]❌ Error reading config {config}:[/red] {e}")
        raise typer.Exit(1)

    fmt = format or ("json" if json_out else cfg["format"])
    if fmt not in FORMATS:
        console.print(f"[red]❌ Invalid --format.[/red] Use: {' | '.join(FORMATS)}")
        raise typer.Exit(1)
    compress = cfg["compress"] if compress is None else compress
    text_filter = filter if filter is not None else cfg.get("filter")
    mode = resolve_mode(only_domains, only_entities, only_events)
    compressor = build_compressor(cfg)

    try:
        summaries = summarize_directory(
            directory,
            compress=compress,
            workers=workers or cfg["workers"],
            compressor=compressor,
        )
    except OSError as e:
        console.print(f"[red]❌ Error reading {directory}:[/red] {e}")
        raise typer.Exit(1)

    summaries = filter_summaries(summaries, text_filter)
    text = render(summaries, mode, fmt, compress, compressor.replacements)

    if stdout:
        typer.echo(text)
        return

    file_name = output or default_filename(mode, fmt)
    try:
        out_path = pathlib.Path(file_name)
        if out_path.parent != pathlib.Path("."):
            out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text, encoding="utf-8")
    except OSError as e:
        console.print(f"[red]❌ Error writing {file_name}:[/red] {e}")
        raise typer.Exit(1)
    print(f"[green]✅ {file_name} generated[/green] ({len(summaries)} service domains)")


@app.command()
def dictionary(
    config: str = typer.Option(CONFIG_PATH, "--config", help="Path to config file"),
):
    """Show the active abbreviation dictionary."""
    setup_logging()
    try:
        compressor = build_compressor(load_config(config))
    except OSError as e:
        Console().print(f"[red]❌ Error reading config {config}:[/red] {e}")
        raise typer.Exit(1)
    table = Table(title="📖 Replacement dictionary", show_header=True, header_style="bold cyan")
    table.add_column("Abbreviation", style="cyan")
    table.add_column("Phrase", style="white")
    for phrase, abbr in compressor.replacements.items():
        table.add_row(abbr, phrase)
    Console().print(table)


@app.command("config-check")
def config_check(path: str = typer.Argument(CONFIG_PATH, help="Config file to validate")):
    """Validate a .bian2context.yml file."""
    console = Console()
    if not pathlib.Path(path).exists():
        console.print(f"[red]❌ Error:[/red] File '{path}' does not exist")
        raise typer.Exit(1)
    try:
        errors = validate_config_file(path)
    except OSError as e:
        console.print(f"[red]❌ Error reading {path}:[/red] {e}")
        raise typer.Exit(1)
    if errors:
        console.print("[red]Configuration validation errors:[/red]")
        for error in errors:
            console.print(f"  • {error}")
        raise typer.Exit(1)
    console.print(f"[green]✅ {path} is valid[/green]")


if __name__ == "__main__":
    app()
