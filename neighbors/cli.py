"""Neighbors Vote CLI."""

import logging
from pathlib import Path

import click

from neighbors.config import (
    BATCH_SIZE,
    INPUT_DIR,
    REGISTER_NAME,
    SHARE_SPLIT,
    TEMPLATE_NAME,
    WORKERS,
)
from neighbors.notices.template import TemplateStructureError
from neighbors.pipeline import MissingInputError, generate_notices, load_groups
from neighbors.register.normalize import format_decimal

logger = logging.getLogger(__name__)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log debug output.")
def main(verbose: bool):
    """Neighbors Vote — per-owner notices from a co-owner register."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


@main.command()
@click.option("--input-dir", type=click.Path(file_okay=False, path_type=Path),
              default=INPUT_DIR, show_default=True, help="Folder with the register and template.")
@click.option("--register", "register_name", default=REGISTER_NAME, show_default=True,
              help="Register spreadsheet file name.")
@click.option("--template", "template_name", default=TEMPLATE_NAME, show_default=True,
              help="Notice template file name.")
@click.option("--batch-size", default=BATCH_SIZE, show_default=True, type=click.IntRange(min=1),
              help="Persons per output file.")
@click.option("--workers", default=WORKERS, show_default=True, type=click.IntRange(min=1),
              help="Worker threads per batch.")
@click.option("--strict-lock", is_flag=True, help="Hold the template lock for the whole fill of each notice.")
@click.option("--share-split", type=click.Choice(["even", "exact"]), default=SHARE_SPLIT,
              show_default=True, help="How a shared row's share is divided between co-owners.")
@click.option("--dry-run", is_flag=True, help="Group the register and report batches without writing.")
def generate(input_dir: Path, register_name: str, template_name: str, batch_size: int,
             workers: int, strict_lock: bool, share_split: str, dry_run: bool):
    """Generate notice documents, one file per batch of persons.

    Reads the register, merges records of the same person, fills a copy of
    the template for every person and writes the notices into the input
    folder.
    """
    try:
        summary = generate_notices(
            input_dir=input_dir,
            register_name=register_name,
            template_name=template_name,
            batch_size=batch_size,
            workers=workers,
            strict_lock=strict_lock,
            share_policy=share_split,
            dry_run=dry_run,
        )
    except MissingInputError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    except TemplateStructureError as e:
        click.echo(f"Template error: {e}", err=True)
        raise SystemExit(1)

    if summary["groups"] == 0:
        click.echo("No ownership records found. Nothing to do.")
        return

    click.echo(f"Persons:  {summary['groups']:,}")
    click.echo(f"Records:  {summary['records']:,}")
    click.echo(f"Batches:  {summary['batches']:,}")

    if dry_run:
        click.echo("\nDry run — no files written.")
        return

    click.echo(f"Notices:  {summary['processed']:,} in {summary['elapsed']}s")
    for path in summary["outputs"]:
        click.echo(f"  {path}")


@main.command()
@click.option("--input-dir", type=click.Path(file_okay=False, path_type=Path),
              default=INPUT_DIR, show_default=True, help="Folder with the register.")
@click.option("--register", "register_name", default=REGISTER_NAME, show_default=True,
              help="Register spreadsheet file name.")
@click.option("--limit", default=0, type=click.IntRange(min=0), help="Show only the first N persons.")
def groups(input_dir: Path, register_name: str, limit: int):
    """List persons found in the register with record counts and total share."""
    try:
        person_groups = load_groups(input_dir / register_name)
    except MissingInputError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    shown = person_groups[:limit] if limit else person_groups
    for group in shown:
        click.echo(
            f"{group.name}  records={len(group)}  "
            f"area={format_decimal(group.total_area)}  share={format_decimal(group.total_share)}"
        )
    click.echo(f"\n{len(person_groups):,} persons")


if __name__ == "__main__":
    main()
