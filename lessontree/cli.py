# cli.py - Command line interface for LessonTree
"""
LessonTree CLI - Build artifacts from the unit/lesson/tab/card tree

COMMANDS:
    Build:
        lessontree manifest [--root DIR] [--output FILE]   Write manifest.json if changed
        lessontree master [--root DIR] [--output FILE]     Write the master HTML document
        lessontree build                                   Both of the above
        lessontree watch [--no-master]                     Rebuild on every change

    Other:
        lessontree info                                    Show configuration and content counts
        lessontree init-config [--force]                   Write a lessontree.yaml template
        lessontree version                                 Show version information

EXIT CODES:
    0   Completed (whether or not the manifest changed)
    2   Generation failed (content root unreadable, output not writable,
        invalid configuration)

EXAMPLES:
    # Regenerate the manifest used by the web client
    lessontree manifest

    # Build a printable document from another folder
    lessontree master --root usii --output exports/master.html --title "US II"
"""

import sys
from pathlib import Path
from typing import Optional

import click

from lessontree import __version__, icons
from lessontree.config_utils import LessonTreeConfig, get_config, create_config_template
from lessontree.errors import LessonTreeError, output_write_error
from lessontree.manifest import build_manifest, generate_manifest
from lessontree.master_document import write_master_html

EXIT_GENERATION_FAILED = 2


# ============================================================================
# Configuration & Utilities
# ============================================================================

class LessonTreeContext:
    """Shared context for CLI commands"""

    def __init__(self, config: LessonTreeConfig):
        self.config = config

    def apply_overrides(
        self,
        root: Optional[str] = None,
        sort: Optional[bool] = None,
    ) -> None:
        if root:
            self.config.content_dir = root
            self.config._sources["content_dir"] = "option:--root"
        if sort is not None:
            self.config.sort_entries = sort
            self.config._sources["sort_entries"] = "option:--sort"


def fail(message: str) -> None:
    """Report a fatal generation error and exit with the failure status."""
    click.echo(f"{icons.ERROR} {message}", err=True)
    sys.exit(EXIT_GENERATION_FAILED)


def _run_manifest(ctx: LessonTreeContext, output: Optional[str]) -> None:
    config = ctx.config
    output_path = config.resolve(output) if output else config.manifest_file
    try:
        result = generate_manifest(
            config.content_root,
            output_path,
            sort_entries=config.sort_entries,
        )
    except LessonTreeError as e:
        fail(f"Error generating manifest:{e}")
    except OSError as e:
        fail(f"Error generating manifest: {e}")

    message = f"Wrote manifest to {result.path}" if result.changed else "Manifest unchanged"
    click.echo(f"{icons.changed_icon(result.changed)} {message}")


def _run_master(ctx: LessonTreeContext, output: Optional[str], title: Optional[str]) -> None:
    config = ctx.config
    output_path = config.resolve(output) if output else config.master_file
    try:
        path = write_master_html(
            config.content_root,
            output_path,
            title=title or config.master_title,
            sort_entries=config.sort_entries,
        )
    except LessonTreeError as e:
        fail(f"Error generating master document:{e}")
    except OSError as e:
        fail(f"Error generating master document:{output_write_error(output_path, e)}")

    click.echo(f"{icons.SUCCESS} Master document created: {path}")


sort_option = click.option(
    '--sort/--no-sort',
    default=None,
    help='Sort folders and files by name (default from config: on)',
)
root_option = click.option(
    '--root',
    type=click.Path(file_okay=False),
    help='Content folder (default from config: usii)',
)


# ============================================================================
# Click Group Setup
# ============================================================================

@click.group()
@click.option('--verbose', '-v', count=True, help='Show progress (-v) or debug detail (-vv)')
@click.option('--ascii', 'ascii_icons', is_flag=True, help='Use ASCII instead of emoji icons')
@click.pass_context
def cli(ctx, verbose: int, ascii_icons: bool):
    """
    LessonTree - Manifest and master document builder

    Walks the unit/lesson/tab/card content folders and writes the
    JSON manifest and a printable master HTML document.
    """
    icons.setup_logging(verbose)
    try:
        config = get_config()
    except LessonTreeError as e:
        fail(f"Invalid configuration:{e}")

    if ascii_icons or config.ascii_icons:
        icons.use_ascii_icons()
    else:
        icons.use_unicode_icons()

    ctx.obj = LessonTreeContext(config)


# ============================================================================
# Build Commands
# ============================================================================

@cli.command()
@root_option
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Manifest path (default: usii/manifest.json)')
@sort_option
@click.pass_obj
def manifest(ctx: LessonTreeContext, root: Optional[str], output: Optional[str], sort: Optional[bool]):
    """
    Build the content manifest

    Rebuilds the whole manifest and writes it only when its text
    differs from the existing file.

    Examples:
        lessontree manifest
        lessontree manifest --root usii --output usii/manifest.json
    """
    ctx.apply_overrides(root=root, sort=sort)
    _run_manifest(ctx, output)


@cli.command()
@root_option
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Output HTML path (default: master.html)')
@click.option('--title', '-t', help='Document title')
@sort_option
@click.pass_obj
def master(ctx: LessonTreeContext, root: Optional[str], output: Optional[str], title: Optional[str], sort: Optional[bool]):
    """
    Build the master HTML document

    Combines every card's writing and images into one file for PDF
    export. The file is rewritten on every run.

    Examples:
        lessontree master
        lessontree master --title "US II Review" -o exports/review.html
    """
    ctx.apply_overrides(root=root, sort=sort)
    _run_master(ctx, output, title)


@cli.command()
@root_option
@sort_option
@click.pass_obj
def build(ctx: LessonTreeContext, root: Optional[str], sort: Optional[bool]):
    """
    Build the manifest and the master document

    Paths and title come from configuration.
    """
    ctx.apply_overrides(root=root, sort=sort)
    _run_manifest(ctx, None)
    _run_master(ctx, None, None)


@cli.command()
@click.option('--master/--no-master', 'include_master', default=True, help='Also rebuild the master document')
@click.pass_obj
def watch(ctx: LessonTreeContext, include_master: bool):
    """
    Watch the content folder and rebuild on change

    Every change triggers a full regeneration after the debounce
    window (watch.debounce in lessontree.yaml).
    """
    from lessontree.watch_and_build import watch as run_watch

    try:
        run_watch(ctx.config, include_master=include_master)
    except LessonTreeError as e:
        fail(f"Cannot watch:{e}")


# ============================================================================
# Information
# ============================================================================

@cli.command()
@click.pass_obj
def info(ctx: LessonTreeContext):
    """
    Show configuration and content statistics
    """
    config = ctx.config
    click.echo(f"{icons.INFO} LessonTree Information\n")
    click.echo("=" * 60)

    for label, attr, value in [
        ("Project Root", "project_root", config.project_root),
        ("Content Root", "content_dir", config.content_root),
        ("Manifest", "manifest_path", config.manifest_file),
        ("Master Document", "master_output", config.master_file),
        ("Master Title", "master_title", config.master_title),
        ("Sort Entries", "sort_entries", config.sort_entries),
    ]:
        click.echo(f"{label}: {value}  ({config.source_of(attr)})")

    click.echo(f"\n{icons.FOLDER} Content Statistics")
    click.echo("-" * 60)

    if not config.content_root.is_dir():
        click.echo(f"{icons.WARNING} Content folder not found: {config.content_root}")
        return

    tree = build_manifest(config.content_root, sort_entries=config.sort_entries)
    lessons = [lesson for unit in tree.units for lesson in unit.lessons]
    tabs = [tab for lesson in lessons for tab in lesson.tabs]
    cards = [card for tab in tabs for card in tab.cards]

    click.echo(f"Units: {len(tree.units)}")
    click.echo(f"Lessons: {len(lessons)}")
    click.echo(f"Tabs: {len(tabs)}")
    click.echo(f"Cards: {len(cards)}")
    click.echo(f"Cards with writing: {sum(1 for c in cards if c.has_writing)}")
    click.echo(f"Media files: {sum(len(c.media) for c in cards)}")


@cli.command('init-config')
@click.option('--force', is_flag=True, help='Overwrite an existing lessontree.yaml')
@click.option('--minimal', is_flag=True, help='Leave out explanatory comments')
@click.pass_obj
def init_config(ctx: LessonTreeContext, force: bool, minimal: bool):
    """
    Write a lessontree.yaml template in the project root
    """
    yaml_path = Path(ctx.config.project_root) / "lessontree.yaml"
    if yaml_path.exists() and not force:
        click.echo(f"{icons.WARNING} lessontree.yaml already exists (use --force to overwrite)", err=True)
        sys.exit(1)

    try:
        yaml_path.write_text(create_config_template(include_comments=not minimal), encoding="utf-8")
    except OSError as e:
        fail(f"Cannot create lessontree.yaml:{output_write_error(yaml_path, e)}")

    click.echo(f"{icons.SUCCESS} Created {yaml_path}")


# ============================================================================
# Version
# ============================================================================

@cli.command()
def version():
    """Show LessonTree version"""
    click.echo(f"LessonTree CLI v{__version__}")
    click.echo("Manifest and master document builder for card-based course content")


# ============================================================================
# Entry Point
# ============================================================================

if __name__ == '__main__':
    cli()
