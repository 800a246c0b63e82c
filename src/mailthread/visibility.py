# ABOUTME: Visibility predicate installed on the list store to hide collapsed items.
"""Visibility predicate installed on the list store to hide collapsed items."""

from collections.abc import Callable

from mailthread.models import MessageRecord
from mailthread.open_set import OpenSet


def make_visibility_filter(open_set: OpenSet) -> Callable[[MessageRecord], bool]:
    """Return a predicate showing every depth 0 record and every open item.

    The predicate reads open_set on each call; reinstall it whenever the open
    set changes so the store refilters.
    """

    def visible(record: MessageRecord) -> bool:
        return record.depth == 0 or open_set.is_open(record.id)

    return visible
