"""
CLI module - Command line interface for exr-tools

Entry point for the `exr-tools` command using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .codec import Codec, EncodingError, ImageLoadError, OpenExrCodec
from .compression import ALL_COMPRESSIONS, LOSSLESS_COMPRESSIONS
from .config import AppConfig, load_config, validate_config
from .metadata import format_attribute, read_metadata
from .report import format_layer_report
from .runners import AnalysisCallbacks, CompressionStatsRunner, LayerAnalysis

console = Console()
app = typer.Typer(
    name="exr-tools",
    help="exr-tools - OpenEXR inspection and compression analysis.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool):
    if value:
        console.print(f"exr-tools version {__version__}")
        raise typer.Exit()


# Type aliases for common options
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to config file", exists=True, dir_okay=False),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", help="Show debug logging")]


def get_codec() -> Codec:
    return OpenExrCodec()


def get_config(config_path: Path | None = None) -> AppConfig:
    """Load and validate configuration, exiting on invalid values."""
    cfg = load_config(config_path)
    errors = validate_config(cfg)
    if errors:
        for err in errors:
            console.print(f"[red]Config error:[/red] {err}")
        raise typer.Exit(1)
    return cfg


def setup_logging(cfg: AppConfig, verbose: bool = False):
    """Route log records through Rich."""
    level = logging.DEBUG if verbose else cfg.logging.level_number
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: Annotated[
        bool, typer.Option("--version", "-v", callback=version_callback, is_eager=True, help="Show version")
    ] = False,
):
    """exr-tools - OpenEXR inspection and compression analysis."""
    pass


@app.command("compression-stats")
def compression_stats(
    path: Annotated[Path, typer.Argument(help="OpenEXR file to analyse", exists=True, dir_okay=False)],
    jobs: Annotated[int | None, typer.Option("--jobs", "-j", min=1, help="Compressions encoded in parallel")] = None,
    apply_best: Annotated[
        bool | None, typer.Option("--apply-best/--no-apply-best", help="Apply the recommended compression per layer")
    ] = None,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write the image with applied recommendations", dir_okay=False)
    ] = None,
    verbose: VerboseOption = False,
    config: ConfigOption = None,
):
    """
    Benchmark every layer under all lossless compressions and its current one.

    Prints the size and encoding time of each compression, the smallest and
    fastest alternatives, and a recommended compression per layer.

    [bold]Examples:[/bold]

        exr-tools compression-stats render.exr

        exr-tools compression-stats render.exr --jobs 4

        exr-tools compression-stats render.exr --apply-best -o render_small.exr
    """
    cfg = get_config(config)
    setup_logging(cfg, verbose)

    jobs = jobs if jobs is not None else cfg.stats.jobs
    apply_best = apply_best if apply_best is not None else cfg.stats.apply_best

    if output is not None and not apply_best:
        console.print("[red]Error:[/red] --output requires --apply-best")
        raise typer.Exit(1)

    if cfg.stats.timing_warning:
        console.print(
            "[yellow]warning:[/yellow] measured timing only applies to the OpenEXR Python bindings "
            "on this machine, not to other implementations."
        )
        if jobs > 1:
            console.print("[yellow]warning:[/yellow] parallel encoding makes timings less reliable.")

    codec = get_codec()
    console.print(f"analyzing exr file `{path}`...")

    try:
        image = codec.load_image(path)
    except ImageLoadError as err:
        console.print(f"[red]Error:[/red] {err}")
        raise typer.Exit(1) from None

    runner = CompressionStatsRunner(codec, jobs=jobs, apply_best=apply_best)

    with console.status("Analysing...") as status:

        def on_layer_start(index: int, name: str | None, candidates: int):
            label = f" ({name})" if name else ""
            status.update(f"Layer #{index}{label}: encoding {candidates} compressions...")

        def on_layer_complete(analysis: LayerAnalysis):
            console.print()
            console.print(format_layer_report(analysis), markup=False, highlight=False, soft_wrap=True)

        callbacks = AnalysisCallbacks(on_layer_start=on_layer_start, on_layer_complete=on_layer_complete)
        result = runner.run(image, callbacks)

    console.print()
    changed = len(result.changed_layers)
    console.print(
        f"[bold]Complete:[/bold] {len(result.layers)} layers, {changed} with a better compression, "
        f"{len(result.failed_layers)} failed"
    )

    if output is not None:
        try:
            codec.write_image(image, output)
        except EncodingError as err:
            console.print(f"[red]Error:[/red] {err}")
            raise typer.Exit(1) from None
        console.print(f"[green]Written:[/green] {output}")

    if not result.success:
        raise typer.Exit(1)


@app.command("extract-meta")
def extract_meta(
    path: Annotated[Path, typer.Argument(help="OpenEXR file to inspect", exists=True, dir_okay=False)],
    verbose: VerboseOption = False,
    config: ConfigOption = None,
):
    """Print the header attributes of every part of an OpenEXR file."""
    cfg = get_config(config)
    setup_logging(cfg, verbose)

    console.print(f"loading image from path {path}")
    try:
        parts = read_metadata(get_codec(), path)
    except ImageLoadError as err:
        console.print(f"[red]Error:[/red] {err}")
        raise typer.Exit(1) from None

    for part in parts:
        table = Table(title=part.title)
        table.add_column("Attribute", style="cyan")
        table.add_column("Value")

        for key, value in part.attributes.items():
            table.add_row(key, format_attribute(value))

        console.print(table)


@app.command("list-compressions")
def list_compressions():
    """List compressions and whether they are benchmarked for every layer."""
    table = Table(title="Compressions")
    table.add_column("Name", style="cyan")
    table.add_column("Value", style="dim")
    table.add_column("Lossy")
    table.add_column("Benchmarked")

    for compression in ALL_COMPRESSIONS:
        lossy = "[yellow]yes[/yellow]" if compression.may_lose_data else "no"
        benchmarked = "always" if compression in LOSSLESS_COMPRESSIONS else "when current"
        table.add_row(compression.label, compression.value, lossy, benchmarked)

    console.print(table)


def main_cli():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main_cli()
