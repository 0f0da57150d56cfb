"""Command line interface for tasktree."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from .actions.builtin import register_builtin_actions
from .actions.registry import ActionRegistry
from .builder import TreeBuilder
from .config import ConfigError, ProjectConfig, TaskNodeSpec
from .logging_setup import setup_logging
from .tasks.output import OutputSink
from .tasks.runner import TaskRunner

app = typer.Typer(help="Hierarchical task runner")
console = Console()


def _load(config_path: Path) -> tuple[ProjectConfig, TreeBuilder]:
    try:
        config = ProjectConfig.from_file(config_path)
        return config, TreeBuilder(config)
    except ConfigError as exc:
        console.print(f"[bold red]Invalid configuration:[/] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


def _render_node(branch: Tree, node: TaskNodeSpec) -> None:
    label = f"[bold]{escape(node.name)}[/]" if node.name is not None else "[dim]<anonymous>[/]"
    if node.action is not None:
        label += f" [cyan]({escape(node.action)})[/]"
    elif not node.tasks:
        label += " [red](no action)[/]"
    child = branch.add(label)
    for sub_node in node.tasks:
        _render_node(child, sub_node)


@app.command()
def run(
    config_path: Path = typer.Argument(..., help="Path to YAML project file"),
    only: Optional[str] = typer.Option(None, help="Run the action of a single named task"),
    color: Optional[str] = typer.Option(None, help="Progress styling: auto, always or never"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress progress output"),
    log_level: str = typer.Option("WARNING", help="Console log level"),
    log_file: Optional[Path] = typer.Option(None, help="Write full debug logs to this file"),
) -> None:
    """Execute the task tree described in the given project file."""

    try:
        setup_logging(level=log_level, log_file=log_file)
    except ValueError as exc:
        console.print(f"[bold red]{escape(str(exc))}[/]")
        raise typer.Exit(code=2) from exc
    config, builder = _load(config_path)
    try:
        output = OutputSink.disabled() if quiet else OutputSink.for_stream(sys.stdout, color or config.output.color)
    except ValueError as exc:
        console.print(f"[bold red]{escape(str(exc))}[/]")
        raise typer.Exit(code=2) from exc
    try:
        tree = builder.build(output)
    except ConfigError as exc:
        console.print(f"[bold red]Invalid configuration:[/] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    runner = TaskRunner(output)
    try:
        result = runner.run(tree, only=only)
    except KeyError as exc:
        console.print(f"[bold red]No task with an action named[/] {escape(str(only))}")
        raise typer.Exit(code=1) from exc

    if result.success:
        if not quiet:
            console.print(f"[bold green]Done[/] {config.name}: {tree.length()} action(s) in {result.duration:.2f}s")
        return
    console.print(f"[bold red]Failed[/] {config.name}: {type(result.error).__name__}: {escape(str(result.error))}")
    raise typer.Exit(code=1)


@app.command()
def inspect(config_path: Path = typer.Argument(..., help="Project file to inspect")) -> None:
    """Print the task tree defined by a project file without running it."""

    config, builder = _load(config_path)
    try:
        tree = builder.build(OutputSink.disabled())
    except ConfigError as exc:
        console.print(f"[bold red]Invalid configuration:[/] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    console.print(f"[bold]Project:[/] {config.name}\n{config.description or ''}")
    root = Tree(f"[bold]{config.root_name}[/]" if config.root_name else "[dim]<anonymous>[/]")
    for node in config.tasks:
        _render_node(root, node)
    console.print(root)
    if tree.is_empty:
        console.print("[yellow]No task defines an action.[/]")
    else:
        console.print(f"{tree.length()} action(s)")


@app.command()
def actions() -> None:
    """List the built-in actions."""

    registry = ActionRegistry()
    register_builtin_actions(registry)
    table = Table(title="Built-in actions", show_lines=True)
    table.add_column("Name")
    table.add_column("Description")
    for name, description in registry.available().items():
        table.add_row(name, description)
    console.print(table)


if __name__ == "__main__":  # pragma: no cover
    app()
