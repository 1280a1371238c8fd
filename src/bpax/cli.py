"""CLI interface for bpax using Typer framework."""

import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from bpax import __description__, __version__
from bpax.analyzer import Analyzer
from bpax.config import BpaxConfig, LogLevel, OutputFormat, load_config
from bpax.diagnostics import count_by_severity
from bpax.errors import FileRejectedError, MalformedXmlError, UnrecognizedFormatError
from bpax.intake import read_export
from bpax.models.analysis import (
    AnalysisResult,
    ProcessAnalysis,
    ReleaseAnalysis,
    VBOAnalysis,
    VBODependency,
    VBOElement,
)
from bpax.parser.elements import build_element_tree
from bpax.schemas import SchemaGenerator

app = typer.Typer(
    name="bpax",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

_LOG_LEVELS = {
    LogLevel.ERROR.value: logging.ERROR,
    LogLevel.WARN.value: logging.WARNING,
    LogLevel.INFO.value: logging.INFO,
    LogLevel.DEBUG.value: logging.DEBUG,
}

FileArgument = Annotated[
    Path,
    typer.Argument(help="Path to a .bpprocess, .bpobject or .bprelease file")
]
ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Configuration file path (default: search for .bpax.json)")
]
LogLevelOption = Annotated[
    Optional[str],
    typer.Option("--log-level", help="Log level: error, warn, info, debug (default: from config)")
]


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"bpax version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """bpax - Dependency and metadata analysis for Blue Prism exports."""


def _configure_logging(level: str) -> None:
    """Route library logging through rich on stderr."""
    if level not in _LOG_LEVELS:
        raise ValueError(f"Unknown log level '{level}'; expected one of {', '.join(_LOG_LEVELS)}")
    logging.basicConfig(
        level=_LOG_LEVELS[level],
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _run_analysis(file: Path, config_path: Path | None, log_level: str | None) -> tuple[BpaxConfig, AnalysisResult]:
    """Load configuration, read the file and analyse it.

    Raises:
        typer.Exit: On any configuration, intake or analysis failure
    """
    try:
        config = load_config(config_path)
        _configure_logging(log_level or config.logging.level)
        content, size = read_export(file, config.intake)
        return config, Analyzer(config).analyze(content, file.name, size)
    except MalformedXmlError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        console.print("[dim]The file is not valid XML; re-export it from Blue Prism[/dim]")
        raise typer.Exit(1)
    except UnrecognizedFormatError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        console.print("[dim]The file is XML but not the expected kind of Blue Prism export[/dim]")
        raise typer.Exit(1)
    except FileRejectedError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def _dump_json(payload: Any, indent: int, out: Path | None) -> None:
    text = jsonlib.dumps(payload, indent=indent or None, ensure_ascii=False)
    if out:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text + "\n", encoding="utf-8")
        console.print(f"[green]OK[/green] Wrote {escape(str(out))}")
    else:
        typer.echo(text)


@app.command()
def analyze(
    file: FileArgument,
    format: Annotated[
        Optional[str],
        typer.Option("--format", "-f", help="Output format: json, table (default: from config)")
    ] = None,
    out: Annotated[
        Optional[Path],
        typer.Option("--out", "-o", help="Write JSON output to this file instead of stdout")
    ] = None,
    config: ConfigOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """Analyse a Blue Prism export and print its analysis record."""
    cfg, result = _run_analysis(file, config, log_level)
    output_format = format or cfg.output.format

    if output_format == OutputFormat.JSON.value:
        _dump_json(result.to_json_dict(), cfg.output.indent, out)
    elif output_format == OutputFormat.TABLE.value:
        _print_summary(result)
    else:
        console.print(f"[red]Error:[/red] Invalid format '{escape(output_format)}'. Must be one of: json, table")
        raise typer.Exit(1)


@app.command()
def deps(
    file: FileArgument,
    config: ConfigOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """Show VBO dependencies of a process or of every process in a release."""
    _, result = _run_analysis(file, config, log_level)

    if isinstance(result, ProcessAnalysis):
        _print_dependencies(result.process_name, result.dependencies)
    elif isinstance(result, ReleaseAnalysis):
        if not result.processes:
            console.print("[yellow]No processes in release[/yellow]")
        for process in result.processes:
            _print_dependencies(process.name, process.dependencies)
    else:
        console.print(f"[red]Error:[/red] {escape(file.name)} is a VBO; use 'bpax actions' or 'bpax elements'")
        raise typer.Exit(1)


@app.command()
def actions(
    file: FileArgument,
    config: ConfigOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """Show action definitions of a VBO, or of every VBO in a release."""
    _, result = _run_analysis(file, config, log_level)

    if isinstance(result, VBOAnalysis):
        _print_actions(result.vbo_name, result.actions)
    elif isinstance(result, ReleaseAnalysis):
        for vbo in result.vbos:
            if vbo.is_stub:
                console.print(f"[dim]{escape(vbo.name)}: {escape(vbo.narrative)}[/dim]")
                continue
            _print_actions(vbo.name, vbo.actions)
    else:
        console.print(f"[red]Error:[/red] {escape(file.name)} is a process; use 'bpax deps'")
        raise typer.Exit(1)


@app.command()
def elements(
    file: FileArgument,
    flat: Annotated[
        bool,
        typer.Option("--flat", help="List elements with their paths instead of a tree")
    ] = False,
    config: ConfigOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """Show the Application Modeller elements of a VBO."""
    _, result = _run_analysis(file, config, log_level)

    if isinstance(result, VBOAnalysis):
        sources = [(result.vbo_name, result.elements)]
    elif isinstance(result, ReleaseAnalysis):
        sources = [(vbo.name, vbo.elements) for vbo in result.vbos if not vbo.is_stub]
    else:
        console.print(f"[red]Error:[/red] {escape(file.name)} is a process and has no Application Modeller")
        raise typer.Exit(1)

    for vbo_name, flat_elements in sources:
        if flat:
            table = Table(title=f"Elements: {escape(vbo_name)}")
            table.add_column("Path", style="cyan")
            table.add_column("Type", style="green")
            table.add_column("Attributes", justify="right")
            for element in flat_elements:
                table.add_row(escape(element.path), escape(element.type), str(len(element.attributes or {})))
            console.print(table)
        else:
            tree = Tree(f"[bold]{escape(vbo_name)}[/bold]")
            for root in build_element_tree(flat_elements):
                _add_tree_node(tree, root)
            console.print(tree)


@app.command()
def schema(
    out: Annotated[
        Optional[Path],
        typer.Option("--out", "-o", help="Directory to write *.schema.json files (default: print to stdout)")
    ] = None,
) -> None:
    """Generate JSON Schemas for the analysis records."""
    generator = SchemaGenerator()
    schemas = generator.generate_all_schemas()

    if out:
        files = generator.save_schemas(out)
        for name, path in files.items():
            console.print(f"[green]OK[/green] {name}: {escape(str(path))}")
    else:
        typer.echo(jsonlib.dumps(schemas, indent=2))


def _add_tree_node(parent: Tree, element: VBOElement) -> None:
    stack = [(parent, element)]
    while stack:
        branch, node = stack.pop()
        child_branch = branch.add(f"{escape(node.name)} [dim]({escape(node.type)})[/dim]")
        stack.extend((child_branch, child) for child in reversed(node.children or []))


def _print_summary(result: AnalysisResult) -> None:
    """Print a key/value summary of an analysis."""
    table = Table(title=f"Analysis: {escape(result.file_name)}", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("File size", f"{result.file_size} bytes")
    if isinstance(result, ProcessAnalysis):
        table.add_row("Process", escape(result.process_name))
        table.add_row("Version", escape(result.version))
        table.add_row("Stages", str(result.total_stages))
        table.add_row("Subsheets", str(result.subsheet_count))
        table.add_row("VBOs", str(result.vbo_count))
        table.add_row("Actions", str(result.action_count))
    elif isinstance(result, VBOAnalysis):
        table.add_row("VBO", escape(result.vbo_name))
        table.add_row("Version", escape(result.version))
        table.add_row("Actions", str(result.action_count))
        table.add_row("Elements", str(result.element_count))
    else:
        table.add_row("Release", escape(result.release_name))
        table.add_row("Package", escape(result.package_name))
        table.add_row("Created", escape(result.created))
        table.add_row("Created by", escape(result.created_by))
        table.add_row("Processes", str(result.process_count))
        table.add_row("VBOs", str(result.vbo_count))
        table.add_row("Total actions", str(result.total_action_count))
        table.add_row("Total elements", str(result.total_element_count))

    if result.notes:
        counts = ", ".join(f"{count} {severity}" for severity, count in count_by_severity(result.notes).items())
        table.add_row("Data-quality notes", f"[yellow]{counts}[/yellow]")
    console.print(table)


def _print_dependencies(title: str, dependencies: list[VBODependency]) -> None:
    table = Table(title=f"VBO dependencies: {escape(title)}")
    table.add_column("VBO", style="cyan")
    table.add_column("Action", style="green")
    table.add_column("Usage", justify="right")
    table.add_column("Locations")

    for dep in dependencies:
        for action in dep.actions:
            table.add_row(
                escape(dep.name),
                escape(action.name),
                str(action.usage_count),
                escape(", ".join(action.locations)),
            )

    if not dependencies:
        console.print(f"[yellow]No VBO dependencies found in {escape(title)}[/yellow]")
        return
    console.print(table)


def _print_actions(title: str, action_defs: list) -> None:
    table = Table(title=f"Actions: {escape(title)}")
    table.add_column("Action", style="cyan")
    table.add_column("Inputs")
    table.add_column("Outputs")
    table.add_column("Description", style="dim")

    for action in action_defs:
        inputs = ", ".join(f"{p.name}: {p.type}" for p in action.inputs or [])
        outputs = ", ".join(f"{p.name}: {p.type}" for p in action.outputs or [])
        table.add_row(escape(action.name), escape(inputs), escape(outputs), escape(action.description or ""))
    console.print(table)


if __name__ == "__main__":
    app()
