"""
Command-line interface for the icon pipeline.
Provides commands for both pipeline stages and their supporting tasks.
"""

import os
from pathlib import Path
from typing import Optional, List
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.progress import Progress, BarColumn, TextColumn

from .config import PipelineConfig
from .catalog import CatalogError
from .sources.base import SourceError
from .sources.npm import NpmPackageSource
from .pipeline import IconPipeline, PipelineError, NoWorkError
from .processing.stats import RunStats

# Initialize typer app and rich console
app = typer.Typer(
    name="icon-pipeline",
    help="Icon pipeline - export normalized SVG icon sets and render them to PNG variants",
    add_completion=False,
    rich_markup_mode="rich",
    epilog="""
[bold]Examples:[/bold]
  [cyan]icon-pipeline export[/cyan]                      Download the package and export every icon set
  [cyan]icon-pipeline export -p mdi -p tabler[/cyan]     Export selected icon sets only
  [cyan]icon-pipeline rasterize[/cyan]                   Choose a provider and render PNG variants
  [cyan]icon-pipeline rasterize --provider mdi[/cyan]    Render a provider without prompting

[bold]Environment Variables:[/bold]
  Use [cyan]icon-pipeline config --env-vars[/cyan] to see all available variables.
    """
)
console = Console()
err_console = Console(stderr=True)


@app.command()
def export(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file path"),
    prefixes: Optional[List[str]] = typer.Option(None, "--prefix", "-p", help="Icon set to export (repeatable)"),
    source_dir: Optional[Path] = typer.Option(None, "--source-dir", help="Use an extracted package directory"),
    output_dir: Optional[Path] = typer.Option(None, "--output", "-o", help="SVG output directory")
):
    """Download the icon-set package and export normalized SVG files."""
    console.print("[bold blue]Exporting icon sets...[/bold blue]")

    config = _load_config(config_file)
    if source_dir:
        config.source_dir = str(source_dir)
    if output_dir:
        config.svg_dir = str(output_dir)

    try:
        pipeline = IconPipeline(config)
        summary = pipeline.run_export(prefixes or None)
    except (SourceError, CatalogError) as e:
        err_console.print(f"[red]Error acquiring icon sets:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Package version: {escape(summary.version)}")

    table = Table(title="Exported Icon Sets")
    table.add_column("Prefix", style="cyan")
    table.add_column("Name")
    table.add_column("Exported", style="green", justify="right")
    table.add_column("Dropped", style="yellow", justify="right")
    for result in summary.results:
        table.add_row(
            escape(result.prefix), escape(result.name),
            str(len(result.exported)), str(result.stats.failed)
        )
    console.print(table)

    for failure in summary.failed_sets:
        console.print(f"[red]✗[/red] {escape(failure.item)}: {escape(failure.reason)}")

    console.print(
        f"  • Icons processed: {summary.icons.processed}, "
        f"dropped: {summary.icons.failed}, files written: {summary.files_written}"
    )
    console.print("[green]✓ Download and export complete![/green]")


@app.command()
def rasterize(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file path"),
    provider: Optional[str] = typer.Option(None, "--provider", "-p", help="Provider to render (skips the prompt)"),
    input_dir: Optional[Path] = typer.Option(None, "--input", "-i", help="SVG input directory"),
    output_dir: Optional[Path] = typer.Option(None, "--output", "-o", help="PNG output directory")
):
    """Render every SVG of one provider into PNG variants."""
    config = _load_config(config_file)
    if input_dir:
        config.svg_dir = str(input_dir)
    if output_dir:
        config.png_dir = str(output_dir)

    pipeline = IconPipeline(config)
    providers = pipeline.list_providers()
    if not providers:
        err_console.print(f"[red]No providers found in {escape(config.svg_dir)}/.[/red]")
        raise typer.Exit(1)

    if provider is None:
        console.print("Available providers:")
        for index, name in enumerate(providers, start=1):
            console.print(f"{index}. {escape(name)}")
        provider = _prompt_provider(providers)

    try:
        with Progress(
            TextColumn("Progress: {task.completed}/{task.total} ({task.percentage:.2f}%)"),
            BarColumn(),
            console=console
        ) as progress:
            task = progress.add_task("rasterize", total=None)

            def on_progress(stats: RunStats) -> None:
                progress.update(task, completed=stats.processed, total=stats.total)

            stats = pipeline.run_rasterize(provider, on_progress=on_progress)
    except NoWorkError as e:
        err_console.print(f"[red]Nothing to convert:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except PipelineError as e:
        err_console.print(f"[red]Pipeline error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if stats.failed:
        console.print(f"[yellow]{stats.failed} of {stats.total} files failed to convert[/yellow]")
    console.print(f"  • Files converted: {stats.succeeded}, PNG files: {stats.succeeded * len(config.sizes)}")
    console.print(f'\n[green]All SVGs for provider "{escape(provider)}" converted to PNG.[/green]')


@app.command()
def providers(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file path"),
    input_dir: Optional[Path] = typer.Option(None, "--input", "-i", help="SVG input directory")
):
    """List providers available for rasterization."""
    config = _load_config(config_file)
    if input_dir:
        config.svg_dir = str(input_dir)

    names = IconPipeline(config).list_providers()
    if not names:
        err_console.print(f"[red]No providers found in {escape(config.svg_dir)}/.[/red]")
        raise typer.Exit(1)

    for index, name in enumerate(names, start=1):
        console.print(f"{index}. {escape(name)}")


@app.command()
def cache(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file path"),
    clear: bool = typer.Option(False, "--clear", help="Delete the downloaded package")
):
    """Show or clear the downloaded package cache."""
    config = _load_config(config_file)
    source = NpmPackageSource(
        package=config.package,
        cache_dir=Path(config.cache_dir),
        registry=config.registry,
        timeout=config.request_timeout,
    )

    if clear:
        source.clear_cache()
        console.print(f"[green]✓[/green] Cleared cache: {escape(config.cache_dir)}")
        return

    info = source.get_cache_info()
    table = Table(title="Package Cache", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Package", escape(info["package"]))
    table.add_row("Cache Directory", escape(info["cache_dir"]))
    table.add_row("Cached", str(info["cached"]))
    table.add_row("Version", escape(info["version"] or "-"))
    table.add_row("Size", f"{info['size_mb']:.1f} MB")
    console.print(table)


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    validate_config: bool = typer.Option(False, "--validate", help="Validate configuration file"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file path"),
    env_vars: bool = typer.Option(False, "--env-vars", help="Show available environment variables")
):
    """Manage pipeline configuration."""
    if env_vars:
        _display_env_vars()
        return

    if show or validate_config:
        try:
            config = _load_config(config_file, validate=False)
        except (ValueError, OSError) as e:
            console.print(f"[red]Error managing configuration:[/red] {escape(str(e))}")
            raise typer.Exit(1)

        if show:
            _display_config(config)

        if validate_config:
            errors = config.validate()
            if errors:
                console.print("[red]Configuration validation errors:[/red]")
                for error in errors:
                    console.print(f"  • {escape(error)}")
                raise typer.Exit(1)
            else:
                console.print("[green]✓ Configuration is valid[/green]")
    else:
        console.print("Use --show to display configuration, --validate to check it, or --env-vars to see environment variables.")


def _prompt_provider(providers: List[str]) -> str:
    """Ask for a 1-based provider index until a valid one is given."""
    while True:
        answer = typer.prompt("Choose a provider by number")
        try:
            index = int(answer.strip()) - 1
        except ValueError:
            index = -1
        if 0 <= index < len(providers):
            return providers[index]
        console.print("Invalid selection. Please try again.")


def _load_config(config_file: Optional[Path], validate: bool = True) -> PipelineConfig:
    """Load configuration from file or use defaults with environment variable support.

    Unless ``validate`` is False, an invalid configuration ends the command.
    """
    config = None

    if config_file:
        if not config_file.exists():
            console.print(f"[red]Configuration file not found:[/red] {escape(str(config_file))}")
            raise typer.Exit(1)
        config = PipelineConfig.from_file(config_file)
        console.print(f"[dim]Using configuration: {escape(str(config_file))}[/dim]")
    else:
        # Try to find default config files
        default_configs = [
            Path("icon_pipeline.toml"),
            Path("icon_pipeline.json"),
            Path("scripts/icon_pipeline.toml"),
            Path("scripts/icon_pipeline.json")
        ]

        for config_path in default_configs:
            if config_path.exists():
                console.print(f"[dim]Using configuration: {config_path}[/dim]")
                config = PipelineConfig.from_file(config_path)
                break

        if config is None:
            config = PipelineConfig()

    # Apply environment variable overrides
    config = PipelineConfig._apply_env_overrides(config)

    env_vars_used = [key for key in os.environ if key.startswith('ICON_PIPELINE_')]
    if env_vars_used:
        console.print(f"[dim]Environment overrides applied: {len(env_vars_used)} variables[/dim]")

    if validate:
        errors = config.validate()
        if errors:
            console.print("[red]Invalid configuration:[/red]")
            for error in errors:
                console.print(f"  • {escape(error)}")
            raise typer.Exit(1)

    return config


def _display_config(config: PipelineConfig) -> None:
    """Display configuration in a formatted table."""
    table = Table(title="Icon Pipeline Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    # Package source
    table.add_row("Package", escape(config.package))
    table.add_row("Registry", escape(config.registry))
    table.add_row("Cache Directory", escape(config.cache_dir))
    table.add_row("Source Directory", escape(config.source_dir or "-"))
    table.add_row("Request Timeout", f"{config.request_timeout:g}s")

    # Paths
    table.add_row("SVG Directory", escape(config.svg_dir))
    table.add_row("PNG Directory", escape(config.png_dir))

    # Normalization settings
    table.add_row("Canonical Color", escape(config.color))
    table.add_row("Add Missing Color", str(config.add_missing_color))
    table.add_row("Include Aliases", str(config.include_aliases))
    table.add_row("Prefixes", escape(", ".join(config.prefixes) or "all"))

    # Raster settings
    table.add_row("PNG Widths", ", ".join(str(size) for size in config.sizes))
    table.add_row("Compression Level", str(config.compression_level))

    console.print(table)


def _display_env_vars() -> None:
    """Display available environment variables for configuration."""
    table = Table(title="Icon Pipeline Environment Variables")
    table.add_column("Environment Variable", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Example", style="green")

    env_vars = [
        ("ICON_PIPELINE_PACKAGE", "npm package holding the icon sets", "@iconify/json"),
        ("ICON_PIPELINE_REGISTRY", "npm registry base URL", "https://registry.npmjs.org"),
        ("ICON_PIPELINE_CACHE_DIR", "Directory for the downloaded package", "cache"),
        ("ICON_PIPELINE_SOURCE_DIR", "Use an already-extracted package directory", "node_modules/@iconify/json"),
        ("ICON_PIPELINE_REQUEST_TIMEOUT", "HTTP timeout in seconds", "60"),
        ("ICON_PIPELINE_SVG_DIR", "Normalized SVG output directory", "svg"),
        ("ICON_PIPELINE_PNG_DIR", "PNG output directory", "png"),
        ("ICON_PIPELINE_COLOR", "Canonical foreground color", "#fcfcfc"),
        ("ICON_PIPELINE_ADD_MISSING_COLOR", "Fill shapes without a color (true/false)", "true"),
        ("ICON_PIPELINE_INCLUDE_ALIASES", "Export aliases as files (true/false)", "false"),
        ("ICON_PIPELINE_PREFIXES", "Comma-separated icon sets to export", "mdi,tabler"),
        ("ICON_PIPELINE_SIZES", "Comma-separated PNG widths", "24,48,64,128"),
        ("ICON_PIPELINE_COMPRESSION_LEVEL", "PNG compression level (0-9)", "6"),
    ]

    for var_name, description, example in env_vars:
        table.add_row(var_name, description, escape(example))

    console.print(table)
    console.print("\n[dim]Set these environment variables to override configuration file settings.[/dim]")
    console.print("[dim]Example: export ICON_PIPELINE_PREFIXES=mdi[/dim]")


if __name__ == "__main__":
    app()
