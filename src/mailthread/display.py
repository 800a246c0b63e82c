# ABOUTME: Rich rendering of a mail store's visible rows and counts for the CLI.
"""Rich rendering of a mail store's visible rows and counts."""

from rich.console import Console
from rich.table import Table

from mailthread.mail_store import MailStore
from mailthread.models import MessageRecord


def format_marker(store: MailStore, record: MessageRecord) -> str:
    """Expand/collapse marker for headers, blank for everything else."""
    if not record.is_header:
        return ""
    if record.id in store.open_set:
        return f"▾ {record.conversation_count}"
    return f"▸ {record.conversation_count}"


def build_rows_table(store: MailStore, indent: int = 2) -> Table:
    """Table of the store's live (visible) rows, items indented by depth."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("", no_wrap=True)
    table.add_column("Id")
    table.add_column("Subject")
    table.add_column("From")
    table.add_column("Folder", style="cyan")

    for row, record in enumerate(store):
        pad = " " * (indent * min(record.depth, 1))
        subject = record.subject or "(no subject)"
        style = None if record.read else "bold"
        table.add_row(
            str(row),
            format_marker(store, record),
            pad + record.id,
            pad + subject,
            record.sender,
            record.folder_label,
            style=style,
        )
    return table


def display_store(console: Console, store: MailStore, indent: int = 2, show_counts: bool = True) -> None:
    console.print(build_rows_table(store, indent=indent))
    if show_counts:
        display_counts(console, store)


def display_counts(console: Console, store: MailStore) -> None:
    threaded = store.contains_conversations()
    console.print(f"Conversation view: {'on' if threaded else 'off'}")
    console.print(f"Items: {store.get_store_length()}")
    console.print(f"Conversations: {store.get_conversation_count()}")
