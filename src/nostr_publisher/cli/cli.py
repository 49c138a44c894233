"""
Nostr Publisher CLI Application.

Main entry point for the command-line interface: publish documents,
preview their structure and list supported event kinds.
"""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from .. import __version__
from ..core.document_processor import DocumentFormat, MetadataExtractor, SectionTreeParser
from ..core.document_processor.structure import DocumentSection
from ..core.event_kinds import EventKindRegistry
from ..core.publishing import DirectDocumentPublisher, JsonLinesPublisher, PublicationReport
from ..exceptions.compiler_exceptions import DocumentCompilerError
from ..exceptions.config_exceptions import ConfigurationError
from ..utils.config import ConfigManager
from ..utils.logging_config import configure_logging

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="nostr-publisher",
    help="Compile AsciiDoc and Markdown documents into Nostr publication events",
    add_completion=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

_global_config: dict = {}


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Set up logging with a rich handler on stderr.

    Args:
        verbose: Enable DEBUG logging; otherwise only warnings and errors show

    Returns:
        The package logger
    """
    logging.getLogger().handlers.clear()
    log_level = logging.DEBUG if verbose else logging.WARNING

    rich_handler = RichHandler(
        console=err_console,
        show_time=verbose,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    rich_handler.setLevel(log_level)

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[rich_handler],
    )

    logger = logging.getLogger("nostr_publisher")
    logger.setLevel(log_level)
    return logger


def get_config_manager() -> ConfigManager:
    """
    Configuration manager for the current invocation.

    Raises:
        typer.Exit: If the settings cannot be loaded
    """
    manager = _global_config.get("config_manager")
    if manager is None:
        try:
            manager = ConfigManager(config_file=_global_config.get("config_path"))
            manager.load_config()
        except ConfigurationError as e:
            rprint(f"[red]Configuration Error:[/red] {e}")
            raise typer.Exit(1)
        _global_config["config_manager"] = manager
        _apply_log_file(manager)
    return manager


def _apply_log_file(manager: ConfigManager) -> None:
    """Mirror package logs into the settings' log file, if one is configured."""
    settings = manager.get("logging", {})
    if not settings.get("file"):
        return

    level = "DEBUG" if _global_config.get("verbose") else settings["level"]
    configure_logging(level, settings["format"], log_file=settings["file"], enable_console=False)


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[str] = typer.Option(
        None,
        "--config-path",
        "-c",
        help="Path to settings file (default: nostrpublisher.config.json)",
        metavar="PATH",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging (DEBUG level)",
    ),
) -> None:
    """
    Nostr Publisher - turn documents into Nostr publications.

    Common workflows:
    • Preview events: nostr-publisher publish guide.adoc --content-level 2 --dry-run
    • Write events for signing: nostr-publisher publish guide.adoc -l 2 -o events.jsonl
    • Inspect structure: nostr-publisher inspect guide.adoc
    """
    _global_config.clear()
    _global_config.update({
        "config_path": config_path,
        "verbose": verbose,
        "config_manager": None,
        "logger": setup_logging(verbose),
    })
    ctx.obj = _global_config


@app.command()
def publish(
    path: Path = typer.Argument(..., help="Document to publish (.adoc, .asciidoc, .md, .markdown)"),
    content_level: Optional[int] = typer.Option(
        None, "--content-level", "-l", help="Heading depth at which sections become content events (0-6)"
    ),
    content_kind: Optional[str] = typer.Option(
        None, "--content-kind", "-k", help="Content event kind: 30023/longform, 30041/publication, 30818/wiki"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Compile and validate without publishing"),
    static_d_tag: Optional[bool] = typer.Option(
        None, "--static-d-tag/--timestamped-d-tag", help="Generate identifiers without a timestamp suffix"
    ),
    json_output: bool = typer.Option(False, "--json", help="Print the full report as JSON"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Append unsigned events as JSON lines to this file"
    ),
) -> None:
    """Compile a document into events and publish them."""
    manager = get_config_manager()
    settings = manager.publisher_settings()

    publisher = None
    if output is not None and not dry_run:
        publisher = JsonLinesPublisher(output, relays=settings["default_relays"])
    elif not dry_run:
        err_console.print("[yellow]No --output given; running as a dry run.[/yellow]")

    document_publisher = DirectDocumentPublisher(
        registry=EventKindRegistry.with_defaults(),
        publisher=publisher,
        settings=settings,
    )
    report = document_publisher.publish_document(
        path,
        content_level=content_level,
        content_kind=content_kind,
        dry_run=dry_run or publisher is None,
        static_d_tag=static_d_tag,
    )

    if json_output:
        typer.echo(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        _print_report(report)

    if not report.success:
        raise typer.Exit(1)


@app.command()
def kinds() -> None:
    """List supported event kinds and their fields."""
    registry = EventKindRegistry.with_defaults()

    table = Table(title="Supported Event Kinds")
    table.add_column("Kind", style="cyan", no_wrap=True)
    table.add_column("Name", style="bold")
    table.add_column("Required fields")
    table.add_column("Description")

    for description in registry.describe():
        table.add_row(
            str(description["kind"]),
            description["name"],
            ", ".join(description["required_fields"]),
            description["description"],
        )

    console.print(table)


@app.command()
def inspect(
    path: Path = typer.Argument(..., help="Document to inspect"),
) -> None:
    """Show document metadata and section structure without compiling events."""
    try:
        document_format = DocumentFormat.from_path(str(path))
        text = path.read_text(encoding="utf-8")
        extraction = MetadataExtractor().extract(text, document_format, str(path))
        tree = None
        if document_format is DocumentFormat.ASCIIDOC:
            tree = SectionTreeParser().parse(
                extraction.body,
                extraction.title,
                title_line=extraction.title_line or 1,
                first_body_line=extraction.body_line,
                document_path=str(path),
            )
    except DocumentCompilerError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except OSError as e:
        rprint(f"[red]File Error:[/red] {e}")
        raise typer.Exit(1)

    metadata = Table(title=f"Metadata ({document_format.value})", show_header=False)
    metadata.add_column("Attribute", style="cyan")
    metadata.add_column("Value")
    for key, value in extraction.attributes.items():
        shown = ", ".join(str(item) for item in value) if isinstance(value, list) else str(value)
        metadata.add_row(key, shown)
    console.print(metadata)

    if tree is None:
        console.print(Panel(f"{extraction.title}\n\nFlat article (Markdown has no section tree)", title="Structure"))
        return

    root = Tree(Text(tree.root.title, style="bold"))
    _add_sections(root, tree.root)
    console.print(Panel(root, title=f"Structure: {tree.get_section_count()} sections, depth {tree.get_max_depth()}"))


@app.command()
def version() -> None:
    """Show version information."""
    rprint(f"Nostr Publisher [blue]v{__version__}[/blue]")


def _add_sections(node: Tree, section: DocumentSection) -> None:
    for child in section.children:
        branch = node.add(f"{child.title} [dim](level {child.level}, line {child.line_number})[/dim]")
        _add_sections(branch, child)


def _print_report(report: PublicationReport) -> None:
    if not report.success:
        body = Text()
        body.append("Publication failed\n\n", style="bold red")
        for error in report.errors:
            body.append(f"• {error}\n")
        console.print(Panel(body, title=report.document_title or "Error", border_style="red"))
        return

    summary = Text()
    summary.append(f"{report.document_title}\n\n", style="bold")
    summary.append(f"Content sections: {report.content_sections}\n")
    summary.append(f"Index sections: {report.index_sections}\n")
    summary.append(f"Total events: {report.total_events}\n")
    if report.dry_run:
        summary.append("\nDry run: no events were published", style="yellow")
    else:
        summary.append(f"\nPublished events: {len(report.published_events)}", style="green")
    console.print(Panel(summary, title="Publication Report", border_style="green"))

    units = report.structure.get("content_sections", []) + report.structure.get("index_sections", [])
    if units:
        table = Table(title="Events")
        table.add_column("Kind", style="cyan", no_wrap=True)
        table.add_column("Type")
        table.add_column("Title")
        table.add_column("d tag", overflow="fold")
        for unit in units:
            table.add_row(str(unit["kind"]), unit["section_type"], unit["title"], unit["d_tag"])
        console.print(table)


def cli_main() -> None:
    """
    Main CLI entry point with error handling.

    This function is called by the console script entry point.
    """
    try:
        app()
    except KeyboardInterrupt:
        rprint("\n[yellow]Operation cancelled by user[/yellow]")
        raise typer.Exit(130)


if __name__ == "__main__":
    cli_main()
