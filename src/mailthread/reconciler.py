# ABOUTME: Reconciles expanded conversations against a freshly loaded record batch.
"""Reconcile expanded conversations against a freshly loaded record batch."""

import logging
from collections.abc import Sequence

from mailthread.locator import items_after
from mailthread.models import MessageRecord
from mailthread.open_set import OpenSet

logger = logging.getLogger(__name__)


def reconcile(batch: Sequence[MessageRecord], open_set: OpenSet) -> bool:
    """Update open_set so it matches the conversations in batch.

    A conversation with any item that was open before this pass stays expanded
    and picks up its newly arrived items. An expanded conversation none of
    whose items were open is collapsed. Every decision is taken against the
    open set as it was when the pass started, so running it again over the
    same batch changes nothing.

    Args:
        batch: Unfiltered records in store order
        open_set: Open set owned by the store, mutated in place

    Returns:
        True if open_set was changed
    """
    prior_headers = set(open_set.header_ids())
    prior_items = open_set.open_item_ids()
    before = open_set.snapshot()

    def was_open(record_id: str) -> bool:
        return record_id in prior_headers or record_id in prior_items

    absorbed = 0
    collapsed = 0
    i = 0
    while i < len(batch):
        header = batch[i]
        if header.depth != 0 or header.conversation_count == 0:
            i += 1
            continue

        children = items_after(batch, i)
        any_open = header.id in prior_items or any(was_open(child.id) for child in children)

        if any_open:
            # Includes items already open under another header
            tracked = set(open_set.get(header.id) or [])
            new_ids = [child.id for child in children if child.id not in tracked]
            open_set.absorb(header.id, new_ids)
            absorbed += len(new_ids)
        elif header.id in open_set:
            open_set.close(header.id)
            collapsed += 1

        i += 1 + len(children)

    changed = open_set.snapshot() != before
    if changed:
        logger.debug(
            f"Reconciled {len(batch)} records: absorbed {absorbed} items, collapsed {collapsed} conversations"
        )
    return changed
