# typescan/cli/main.py

import logging
from pathlib import Path

import click
# The 'rich' library renders our grouped results as trees and tables.
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

# Everything the CLI shows comes from the core; this module only presents it.
from typescan.core.aggregator import GroupedResult, process_directory
from typescan.core.classifier import Classifier, no_mime_type, system_mime_type
from typescan.core.config_manager import load_registry
from typescan.core.directory_scanner import count_files_in_dir
from typescan.core.type_registry import DIRECTORY
from typescan.utils.logger import setup_logging

# --- Setup ---
# A single Console object manages all rich-formatted output.
console = Console()
logger = logging.getLogger(__name__)

# --- Shared Options ---
# Every command that classifies accepts the same two options, so we define
# them once and stack them onto each command.
config_option = click.option(
    '--config', type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path), default=None,
    help="Path to a JSON knowledge base that extends the built-in type tables.")
no_system_mime_option = click.option(
    '--no-system-mime', is_flag=True,
    help="Skip the platform MIME registry and classify by the extension table only.")


def render_tree(path: Path, result: GroupedResult) -> Tree:
    """
    Builds a rich Tree of a grouped result: category -> type label -> entries.

    Categories and labels are sorted here for a stable display. The result
    itself stays unordered. Folders are listed flat under 'Directory'.
    """
    tree = Tree(f"[bold cyan]{escape(str(path))}[/bold cyan]")
    for category in sorted(result):
        bucket = result[category]
        branch = tree.add(f"[bold magenta]{escape(category)}[/bold magenta] ({len(bucket)})")
        if category == DIRECTORY:
            for entry in bucket.entries:
                branch.add(f"[blue]{escape(entry.name)}/[/blue]")
            continue
        for label in sorted(bucket.by_label):
            leaf = branch.add(f"[yellow]{escape(label)}[/yellow]")
            for entry in bucket.by_label[label]:
                leaf.add(f"[green]{escape(entry.name)}[/green] ({entry.size_display})")
    return tree


# --- Main Command Group ---
@click.group(context_settings=dict(help_option_names=['-h', '--help']))
@click.version_option(version="1.0", prog_name="typescan")
@click.option('-v', '--verbose', is_flag=True, help="Log every classification decision.")
@click.option('--log-file', type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Also write a detailed, rotating log to this file.")
def typescan(verbose: bool, log_file: Path):
    """
    typescan - see what kinds of files a folder holds.

    Lists a single directory and groups its visible entries by category
    (Audio, Video, Document, ...) and file type (MP3 Audio, PDF Document, ...).
    Use `[COMMAND] --help` for more information on a specific command.
    """
    setup_logging(log_file=log_file, verbose=verbose)


# --- Scan Command ---
@typescan.command()
@click.argument('path', type=click.Path(file_okay=False, dir_okay=True, path_type=Path))
@config_option
@no_system_mime_option
@click.pass_context
def scan(ctx: click.Context, path: Path, config: Path, no_system_mime: bool):
    """Groups the entries of PATH by category and file type."""
    # Listing and knowledge-base errors end the command; nothing is shown half-done.
    try:
        registry = load_registry(config)
        resolver = no_mime_type if no_system_mime else system_mime_type
        result = process_directory(path, registry=registry, mime_resolver=resolver)
    except (OSError, ValueError) as e:
        console.print(f"[bold red]Could not scan '{escape(str(path))}': {escape(str(e))}[/bold red]")
        logger.error("CLI scan command failed.", exc_info=True)
        ctx.exit(1)

    if not len(result):
        console.print("[bold green]Nothing to show: the directory has no visible entries.[/bold green]")
        return

    console.print(render_tree(path, result))
    directories = len(result.directories())
    console.print(f"{directories} folders, {result.total() - directories} files.")


# --- Count Command ---
@typescan.command()
@click.argument('path', type=click.Path(file_okay=False, dir_okay=True, path_type=Path))
@click.pass_context
def count(ctx: click.Context, path: Path):
    """Counts the visible entries of PATH (files and folders)."""
    try:
        total = count_files_in_dir(path)
    except OSError as e:
        console.print(f"[bold red]Could not count '{escape(str(path))}': {escape(str(e))}[/bold red]")
        logger.error("CLI count command failed.", exc_info=True)
        ctx.exit(1)
    console.print(total)


# --- Classify Command ---
# Answers "what would this file be?" for names that need not exist on disk.
@typescan.command(name="classify")
@click.argument('names', nargs=-1, required=True)
@config_option
@no_system_mime_option
@click.pass_context
def classify_names(ctx: click.Context, names: tuple, config: Path, no_system_mime: bool):
    """Shows how file NAMES would be classified, without touching the disk."""
    try:
        registry = load_registry(config)
    except (OSError, ValueError) as e:
        console.print(f"[bold red]Could not load knowledge base: {escape(str(e))}[/bold red]")
        logger.error("CLI classify command failed.", exc_info=True)
        ctx.exit(1)

    classifier = Classifier(registry, no_mime_type if no_system_mime else system_mime_type)
    table = Table(title="Classification", style="cyan", title_style="bold magenta")
    table.add_column("Name", style="green", no_wrap=True)
    table.add_column("Category", style="blue")
    table.add_column("Type", style="yellow")
    for name in names:
        ftype = classifier.classify(name)
        table.add_row(escape(name), escape(ftype.category), escape(ftype.label))
    console.print(table)
