# ABOUTME: Command-line interface for inspecting threaded mail list projections
# ABOUTME: Loads a JSON record batch into a MailStore, applies toggles and prints the result
"""mailthread command-line interface"""

import json
import logging
import os
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console

from mailthread.config import Config
from mailthread.display import display_counts, display_store
from mailthread.exceptions import DataError, MailthreadError, ValidationError
from mailthread.logging_config import setup_logging
from mailthread.mail_store import MailStore
from mailthread.models import MessageRecord, records_from_dicts

logger = logging.getLogger(__name__)


def read_batch(path: Path) -> list[MessageRecord]:
    """Read a JSON list of server rows into records."""
    try:
        rows = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise DataError(
            f"Cannot read batch {path}: {e}",
            recovery_hint="The batch must be a JSON list of record objects",
        ) from e

    if not isinstance(rows, list):
        raise DataError(
            f"Batch {path} is not a JSON list",
            recovery_hint="Wrap the records in [ ... ]",
        )

    try:
        return records_from_dicts(rows)
    except ValidationError as e:
        raise DataError(f"Invalid record in {path}: {e}") from e


def build_store(config: Config, path: Path, folder_id: str | None) -> MailStore:
    settings = config.mail_settings
    store = MailStore(folder_id=folder_id or settings["primary_folder_id"], settings=settings)
    store.load_records(read_batch(path))
    return store


def find_record(store: MailStore, record_id: str) -> MessageRecord | None:
    for record in store.snapshot:
        if record.id == record_id:
            return record
    return None


@click.group()
@click.pass_context
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Config directory (default: $MAILTHREAD_CONFIG_DIR or XDG config home)",
)
def cli(ctx, debug, config_dir):
    """mailthread - Conversation threading for mail lists"""
    load_dotenv()

    config_dir = config_dir or os.environ.get("MAILTHREAD_CONFIG_DIR")
    try:
        config = Config(config_dir=config_dir)
    except MailthreadError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config

    setup_logging(config, debug=debug)


@cli.command()
@click.pass_context
@click.argument("batch", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--folder-id", default=None, help="Folder the batch was loaded from (default: primary folder)")
@click.option("--expand", "expand_ids", multiple=True, help="Expand the conversation of this record id")
@click.option("--collapse-all", is_flag=True, help="Collapse all conversations after expanding")
@click.option("--keep", default=None, help="With --collapse-all, keep this record's conversation open")
@click.option("--unread", is_flag=True, help="Count as if the unread filter were applied")
def view(ctx, batch, folder_id, expand_ids, collapse_all, keep, unread):
    """Show the visible rows of BATCH as the mail list would render them."""
    config = ctx.obj["config"]
    try:
        store = build_store(config, batch, folder_id)
    except DataError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for record_id in expand_ids:
        record = find_record(store, record_id)
        if record is None:
            click.echo(f"Warning: no record with id {record_id}", err=True)
            continue
        store.expand_conversation(record)

    if collapse_all:
        keep_record = find_record(store, keep) if keep else None
        store.collapse_all_conversations(keep_record)

    store.set_unread_filter(unread)

    ui_settings = config.settings["ui"]
    display_store(Console(), store, indent=ui_settings["indent"], show_counts=ui_settings["show_counts"])


@cli.command()
@click.pass_context
@click.argument("batch", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--folder-id", default=None, help="Folder the batch was loaded from (default: primary folder)")
def stats(ctx, batch, folder_id):
    """Print item and conversation counts for BATCH."""
    try:
        store = build_store(ctx.obj["config"], batch, folder_id)
    except DataError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    display_counts(Console(), store)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
