# ABOUTME: Locates conversation headers and items inside a flat, ordered record batch.
"""Locate conversation headers and items inside a flat, ordered record batch.

A conversation is a contiguous run: a depth 0 header followed by its depth > 0
items. Nothing here trusts conversation_count for the length of the run, since
a partially loaded page may cut a conversation short.
"""

from collections.abc import Sequence

from mailthread.models import MessageRecord


def index_of(batch: Sequence[MessageRecord], record: MessageRecord) -> int:
    """Position of the record in the batch by id, or -1."""
    for i, candidate in enumerate(batch):
        if candidate.id == record.id:
            return i
    return -1


def items_of(batch: Sequence[MessageRecord], header: MessageRecord) -> list[MessageRecord]:
    """Return the items following the header, up to the next depth 0 record.

    Args:
        batch: Unfiltered records in store order
        header: The conversation header

    Returns:
        The items actually present, possibly fewer than header.conversation_count
    """
    start = index_of(batch, header)
    if start < 0:
        return []
    return items_after(batch, start)


def items_after(batch: Sequence[MessageRecord], start: int) -> list[MessageRecord]:
    """Items of the run that starts at the header at position start."""
    items = []
    for i in range(start + 1, len(batch)):
        record = batch[i]
        if record.depth <= 0:
            break
        items.append(record)
    return items


def header_of(batch: Sequence[MessageRecord], record: MessageRecord) -> MessageRecord | None:
    """Return the header of the conversation the record belongs to.

    A header resolves to itself and a standalone message to None. For an item
    the batch is scanned backwards; None when no header precedes it or the
    item is not in the batch.
    """
    if record.depth == 0:
        return record if record.conversation_count > 0 else None

    index = index_of(batch, record)
    for i in range(index - 1, -1, -1):
        candidate = batch[i]
        if candidate.depth == 0 and candidate.conversation_count > 0:
            return candidate
    return None


def newest_in_conversation(batch: Sequence[MessageRecord], record: MessageRecord) -> MessageRecord:
    """Newest message of the record's conversation.

    Items are ordered newest first, so this is the first item after the header.
    A standalone record is its own newest message, as is a header whose items
    are not loaded.
    """
    header = header_of(batch, record)
    if header is None:
        return record
    items = items_of(batch, header)
    return items[0] if items else header
