"""CLI entry point for diagrammer."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from diagrammer.config import DiagrammerConfig, load_config
from diagrammer.config.loader import DEFAULT_CONFIG_TEMPLATE
from diagrammer.llm import LLMError, build_prompts, create_llm_provider
from diagrammer.publish import (
    PublishCoordinator,
    PublishError,
    PublishResult,
    TargetKind,
    markdown_reference,
)
from diagrammer.render import RenderError, Renderer
from diagrammer.spec import DiagramSpecification, OutputKind, RecoveryError, recover
from diagrammer.workspace import ArtifactStore, WorkspaceNotFoundError

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="diagrammer",
    help="Generate architecture diagrams from plain-language descriptions.",
)

config_app = typer.Typer(help="Manage diagrammer configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: DiagrammerConfig | None = None

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def _get_config() -> DiagrammerConfig:
    if _config is None:
        return load_config()
    return _config


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=_LOG_LEVELS.get(level, logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to diagrammer.yaml")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    _configure_logging("debug" if verbose else _config.log_level)


def _store(cfg: DiagrammerConfig) -> ArtifactStore:
    return ArtifactStore(cfg.workspace.directory, Renderer(cfg.render))


def _show_spec(spec: DiagramSpecification, title: str) -> None:
    rprint(Panel(
        f"[bold]{escape(spec.title)}[/bold]\n"
        f"{escape(spec.description) or '(no description)'}\n\n"
        f"[dim]Name:[/dim]     {spec.name}\n"
        f"[dim]Kind:[/dim]     {spec.output_kind.value}\n"
        f"[dim]Style:[/dim]    {spec.style}\n"
        f"[dim]Quality:[/dim]  {spec.quality}",
        title=title,
        border_style="blue",
    ))


def _show_render_error(e: RenderError, source_path: Path) -> None:
    rprint(f"[red]Render failed ({e.kind.value}):[/red] {e}")
    if e.stderr:
        rprint(Panel(escape(e.stderr.rstrip()), title="stderr", border_style="red"))
    rprint(
        f"[yellow]Edit[/yellow] {source_path} "
        "[yellow]and run[/yellow] diagrammer regenerate"
    )


def _lexer(kind: OutputKind) -> str:
    return "python" if kind is OutputKind.program else "text"


@app.command()
def generate(
    description: str = typer.Argument(..., help="What the diagram should show"),
    style: str = typer.Option("generic", "--style", "-s", help="Style tag (azure, aws, gcp, k8s, generic)"),
    quality: str = typer.Option("standard", "--quality", "-q", help="Quality tag (simple, standard, enterprise)"),
    kind: OutputKind = typer.Option(OutputKind.program, "--kind", "-k", help="program or markup"),
    show_code: bool = typer.Option(False, "--code", help="Print the generated source"),
) -> None:
    """Ask the model for a diagram, recover its spec, stage and render it."""
    cfg = _get_config()

    try:
        llm = create_llm_provider(cfg.llm)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    system, user = build_prompts(description, style, quality, kind)
    rprint(f"[bold]Generating[/bold] ({cfg.llm.provider}: {cfg.llm.model})...")
    try:
        response = asyncio.run(llm.generate(system, user))
    except LLMError as e:
        rprint(f"[red]Model call failed:[/red] {e}")
        raise typer.Exit(1)
    logger.debug("%s used %d tokens", response.model, response.usage.total_tokens)

    try:
        spec = recover(response.content, style=style, quality=quality, output_kind=kind)
    except RecoveryError as e:
        rprint(f"[red]Could not read the model response ({e.kind.value}):[/red] {e}")
        rprint(Panel(escape(e.raw[:4000]), title="Raw response", border_style="red"))
        raise typer.Exit(1)

    _show_spec(spec, "Generated Specification")
    if show_code:
        rprint(Syntax(spec.source_code, _lexer(spec.output_kind), theme="monokai"))

    store = _store(cfg)
    try:
        artifact = store.stage(spec)
    except RenderError as e:
        _show_render_error(e, store.source_path(spec.output_kind))
        raise typer.Exit(1)

    rprint(Panel(
        f"[dim]Artifact:[/dim]  {artifact}\n"
        f"[dim]Source:[/dim]    {store.source_path(spec.output_kind)}\n\n"
        "Publish with: diagrammer publish --target local|github|azure_devops|all",
        title="Diagram Ready",
        border_style="green",
    ))


@app.command()
def preview(
    show_code: bool = typer.Option(False, "--code", "-c", help="Show the staged source"),
) -> None:
    """Show the diagram currently staged in the workspace."""
    store = _store(_get_config())
    try:
        spec = store.load()
    except WorkspaceNotFoundError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    _show_spec(spec, "Current Diagram")
    artifact = store.artifact_path(spec.output_kind)
    status = "" if artifact.is_file() else " [yellow](not rendered)[/yellow]"
    rprint(f"[dim]Artifact:[/dim] {artifact}{status}")

    if show_code:
        source_path = store.source_path(spec.output_kind)
        code = source_path.read_text(encoding="utf-8") if source_path.is_file() else spec.source_code
        rprint(Syntax(code, _lexer(spec.output_kind), theme="monokai", line_numbers=True))


@app.command()
def regenerate() -> None:
    """Re-render the staged (possibly hand-edited) source."""
    store = _store(_get_config())
    try:
        spec = store.load()
        artifact = store.regenerate()
    except WorkspaceNotFoundError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except RenderError as e:
        _show_render_error(e, store.source_path(spec.output_kind))
        raise typer.Exit(1)

    rprint(f"[green]Regenerated[/green] {spec.name}: {artifact}")


def _display_results(spec: DiagramSpecification, results: list[PublishResult]) -> None:
    table = Table(title=f"Published ({len(results)})")
    table.add_column("Target", style="cyan")
    table.add_column("Status")
    table.add_column("Location", style="green")
    for r in results:
        status = "[green]committed[/green]" if r.committed else "[yellow]unchanged[/yellow]"
        if r.target_kind is TargetKind.local:
            status = "[green]written[/green]"
        table.add_row(r.target_kind.value, status, r.resolved_locator)
    rprint(table)

    rprint("\n[bold]Markdown reference:[/bold]")
    for r in results:
        print(markdown_reference(spec, r))


@app.command()
def publish(
    target: str = typer.Option(
        "local", "--target", "-t", help="local, github, azure_devops or all"
    ),
    clean: bool = typer.Option(False, "--clean", help="Purge the workspace afterwards"),
) -> None:
    """Publish the staged artifact."""
    cfg = _get_config()
    store = _store(cfg)

    if target != "all":
        try:
            kind = TargetKind(target)
        except ValueError:
            choices = ", ".join(k.value for k in TargetKind)
            rprint(f"[red]Error:[/red] Unknown target '{target}'. Choose {choices} or all.")
            raise typer.Exit(1)

    try:
        spec = store.load()
        data = store.load_artifact_bytes()
    except WorkspaceNotFoundError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    ext = store.renderer.profile(spec.output_kind).artifact_ext
    coordinator = PublishCoordinator.from_config(cfg)
    try:
        if target == "all":
            results = coordinator.publish_all(spec, data, ext=ext)
        else:
            results = [coordinator.publish(spec, data, kind, ext=ext)]
    except PublishError as e:
        rprint(f"[red]Publish failed ({e.kind.value}):[/red] {e}")
        raise typer.Exit(1)

    _display_results(spec, results)

    if clean:
        store.purge()
        rprint("[dim]Workspace cleaned.[/dim]")


@app.command()
def clean() -> None:
    """Remove the workspace."""
    store = _store(_get_config())
    store.purge()
    rprint(f"[green]Removed[/green] {store.directory}")


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default diagrammer.yaml in current directory."""
    target = Path("diagrammer.yaml")
    if target.exists() and not force:
        rprint("[yellow]diagrammer.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")
