"""CLI entry point for tocedit."""

import functools
import logging
import sys
import tomllib
from pathlib import Path

import click
from pydantic import ValidationError

from .adapters.metadata import PdftkAdapter
from .adapters.storage import FilesystemAdapter
from .config import load_settings
from .domain.errors import TocEditError
from .domain.models import Bookmark
from .domain.services import BookmarkService

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_service(config_path: Path | None) -> BookmarkService:
    """Wire up adapters from the settings."""
    try:
        settings = load_settings(config_path)
    except (ValidationError, tomllib.TOMLDecodeError) as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e

    return BookmarkService(
        metadata=PdftkAdapter(binary=settings.tool.pdftk, utf8=settings.tool.utf8),
        storage=FilesystemAdapter(backup_suffix=settings.files.backup_suffix),
        files=settings.files,
    )


def handle_errors(f):
    """Report tocedit failures as click errors (exit status 1)."""

    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except TocEditError as e:
            logger.debug("Command failed", exc_info=True)
            raise click.ClickException(str(e)) from e

    return wrapper


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("-c", "--config", type=click.Path(exists=True), help="Config file path")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config: str | None) -> None:
    """tocedit - edit the bookmarks (table of contents) stored in a PDF."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config) if config else None


@cli.command()
@click.argument("pdf", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("metadata_file", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
@handle_errors
def dump(ctx: click.Context, pdf: Path, metadata_file: Path | None) -> None:
    """Write the full metadata of PDF to METADATA_FILE."""
    service = build_service(ctx.obj["config_path"])
    result = service.dump(pdf, metadata_file)
    click.echo(f"metadata: {result.path}")
    click.echo(f"bookmarks: {result.count}")


@cli.command()
@click.argument("pdf", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("metadata_file", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
@handle_errors
def update(ctx: click.Context, pdf: Path, metadata_file: Path | None) -> None:
    """Write METADATA_FILE into PDF, keeping a backup of the original."""
    service = build_service(ctx.obj["config_path"])
    result = service.update(pdf, metadata_file)
    click.echo(f"updated: {result.path}")
    click.echo(f"bookmarks: {result.count}")


@cli.command()
@click.argument("pdf", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("description", nargs=-1, required=True)
@click.option("-p", "--page", type=click.IntRange(min=1), required=True, help="Target page")
@click.option(
    "-l", "--level", type=click.IntRange(min=1), default=1, show_default=True, help="Nesting level"
)
@click.option("--dump", "dump_first", is_flag=True, help="Dump fresh metadata from PDF first")
@click.option("--update", "update_after", is_flag=True, help="Write the result into PDF")
@click.option(
    "-m",
    "--metadata",
    "metadata_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Metadata file (default: next to PDF)",
)
@click.pass_context
@handle_errors
def add(
    ctx: click.Context,
    pdf: Path,
    description: tuple[str, ...],
    page: int,
    level: int,
    dump_first: bool,
    update_after: bool,
    metadata_file: Path | None,
) -> None:
    """Add one bookmark DESCRIPTION to the metadata of PDF."""
    service = build_service(ctx.obj["config_path"])
    bookmark = Bookmark(page=page, level=level, title=" ".join(description))
    result = service.add(
        pdf,
        bookmark,
        dump=dump_first,
        update=update_after,
        metadata_file=metadata_file,
    )
    click.echo(f"metadata: {result.path}")
    click.echo(f"bookmarks: {result.count}")
    if update_after:
        click.echo(f"updated: {pdf}")


@cli.group()
@click.argument("pdf", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def batch(ctx: click.Context, pdf: Path) -> None:
    """Edit all bookmarks of PDF through a TOC file (PAGE LEVEL DESCRIPTION)."""
    ctx.obj["pdf"] = pdf


@batch.command("dump")
@click.argument("toc_file", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
@handle_errors
def batch_dump(ctx: click.Context, toc_file: Path | None) -> None:
    """Write the bookmarks of PDF to TOC_FILE."""
    service = build_service(ctx.obj["config_path"])
    result = service.batch_dump(ctx.obj["pdf"], toc_file)
    click.echo(f"toc: {result.path}")
    click.echo(f"bookmarks: {result.count}")


@batch.command("update")
@click.argument("toc_file", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
@handle_errors
def batch_update(ctx: click.Context, toc_file: Path | None) -> None:
    """Replace the bookmarks of PDF with the entries of TOC_FILE."""
    service = build_service(ctx.obj["config_path"])
    result = service.batch_update(ctx.obj["pdf"], toc_file)
    click.echo(f"updated: {result.path}")
    click.echo(f"bookmarks: {result.count}")


@cli.command()
@click.argument("toc_file", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
@handle_errors
def validate(ctx: click.Context, toc_file: Path) -> None:
    """Check TOC_FILE without touching any PDF."""
    service = build_service(ctx.obj["config_path"])
    result = service.validate(toc_file)

    if not result.valid:
        for error in result.errors:
            click.echo(f"{toc_file}: {error}", err=True)
        sys.exit(1)

    click.echo(f"{toc_file}: ok")


def main() -> None:
    """Run the CLI; usage errors exit with status 1 like every other failure."""
    try:
        cli.main(standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(1)
    except click.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
