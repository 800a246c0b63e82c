# ABOUTME: Folder-aware item and conversation counts for threaded mail lists.
"""Folder-aware item and conversation counts for threaded mail lists."""

from collections.abc import Sequence
from typing import Any

from mailthread.models import MessageRecord


def compare_entry_ids(left: str | None, right: str | None) -> bool:
    """Compare two folder entry ids; hex ids may differ in case."""
    if not left or not right:
        return False
    return str(left).lower() == str(right).lower()


def is_threaded_view(settings: dict[str, Any], folder_id: str | None) -> bool:
    """Check whether a list bound to folder_id is rendered as conversations.

    Conversations need the feature flag, continuous (live scroll) loading and
    the store being bound to the primary folder.
    """
    if not settings.get("enable_conversation_view"):
        return False
    if not settings.get("enable_live_scroll"):
        return False
    return compare_entry_ids(folder_id, settings.get("primary_folder_id"))


def visible_item_count(
    batch: Sequence[MessageRecord],
    primary_folder_label: str,
    threaded: bool,
    has_explicit_filter_applied: bool,
) -> int:
    """Number of messages the list represents.

    In a threaded view only records stored in the primary folder count, so
    thread participants shown from other folders (e.g. a Sent Items copy
    inside an Inbox thread) are not counted twice.
    """
    if not threaded or has_explicit_filter_applied:
        return len(batch)
    return sum(1 for record in batch if record.folder_label == primary_folder_label)


def conversation_count(batch: Sequence[MessageRecord]) -> int:
    """Number of depth 0 rows (headers and standalone messages) in the unfiltered batch."""
    return sum(1 for record in batch if record.depth == 0)
