# ABOUTME: Mail list store that renders the primary folder as expandable conversations
# ABOUTME: Wires open-set tracking, reconciliation, visibility filtering and counting into ListStore
"""Mail list store with conversation threading."""

import logging
from collections.abc import Sequence
from typing import Any

from mailthread.config import DEFAULT_SETTINGS
from mailthread.counting import conversation_count, is_threaded_view, visible_item_count
from mailthread.list_store import ListStore, Loader
from mailthread.locator import header_of, items_of, newest_in_conversation
from mailthread.models import MessageRecord
from mailthread.open_set import OpenSet
from mailthread.reconciler import reconcile
from mailthread.visibility import make_visibility_filter

logger = logging.getLogger(__name__)

FILTER_UNREAD = "unread"

# PR_MESSAGE_FLAGS bit set once a message has been read
MSGFLAG_READ = 0x1


class MailStore(ListStore):
    """List store for one mail folder.

    When the folder is shown as conversations, headers are always visible and
    their items only while the conversation is expanded. The open set lives
    and dies with the store; binding another folder means creating another
    store.
    """

    def __init__(
        self,
        folder_id: str | None = None,
        loader: Loader | None = None,
        settings: dict[str, Any] | None = None,
    ):
        super().__init__(folder_id=folder_id, loader=loader)
        self.settings = {**DEFAULT_SETTINGS["mail"], **(settings or {})}
        self.open_set = OpenSet()
        self.has_filter_applied = False
        self.preview_record: MessageRecord | None = None
        self._unread_restriction: dict[str, Any] | None = None

    # --- Configuration ---

    def contains_conversations(self) -> bool:
        """True if this store is rendered as conversations."""
        return is_threaded_view(self.settings, self.folder_id)

    @property
    def primary_folder_label(self) -> str:
        return self.settings.get("primary_folder_label", "")

    # --- Loading ---

    def on_load(self, records: list[MessageRecord]) -> None:
        if not self.settings.get("enable_conversation_view"):
            return
        self.manage_open_conversations(records)

    def manage_open_conversations(self, records: Sequence[MessageRecord]) -> None:
        """Carry expanded conversations over to a new batch and refilter."""
        reconcile(records, self.open_set)
        self.filter_by_conversations()

    async def reload(self, params: dict[str, Any] | None = None) -> list[MessageRecord] | None:
        """Reload with the previous params merged with params.

        While the unread filter is on the restriction param is replaced by the
        unread restriction. Once the filter is off that restriction is removed
        again, leaving any restriction passed by the caller untouched.
        """
        merged = dict(self.last_params)
        merged.update(params or {})
        if self.has_filter_applied:
            self._unread_restriction = {"filter": self.get_filter_restriction(FILTER_UNREAD)}
            merged["restriction"] = self._unread_restriction
        else:
            # Drop only the restriction this store added; a caller's own one stays
            if self._unread_restriction is not None and merged.get("restriction") is self._unread_restriction:
                del merged["restriction"]
            self._unread_restriction = None
        return await self.load(merged)

    # --- Conversation state ---

    def is_conversation_opened(self, record: MessageRecord) -> bool:
        return self.open_set.is_open(record.id)

    def filter_by_conversations(self) -> None:
        self.filter_by(make_visibility_filter(self.open_set))

    def get_conversation_items(self, header: MessageRecord) -> list[MessageRecord]:
        return items_of(self.snapshot, header)

    def get_header_record(self, record: MessageRecord) -> MessageRecord | None:
        return header_of(self.snapshot, record)

    def get_newest_record_in_conversation(self, record: MessageRecord) -> MessageRecord:
        return newest_in_conversation(self.snapshot, record)

    def toggle_conversation(self, record: MessageRecord, expand: bool | None = None) -> None:
        """Expand or collapse the conversation the record belongs to.

        Args:
            record: A header or one of its items
            expand: True to expand, False to collapse, None to flip
        """
        header = header_of(self.snapshot, record)
        if header is None:
            logger.debug(f"Record {record.id} is not part of a conversation, nothing to toggle")
            return

        hide = not expand if expand is not None else header.id in self.open_set
        if hide:
            self.open_set.close(header.id)
            logger.debug(f"Collapsed conversation {header.id}")
        else:
            # The locator must see the whole run, not only the visible rows
            self.clear_filter(suppress_event=True)
            item_ids = [item.id for item in items_of(self.snapshot, header)]
            self.open_set.open(header.id, item_ids)
            logger.debug(f"Expanded conversation {header.id} with {len(item_ids)} items")

        self.filter_by_conversations()

    def expand_conversation(self, record: MessageRecord) -> None:
        self.toggle_conversation(record, True)

    def collapse_conversation(self, record: MessageRecord) -> None:
        self.toggle_conversation(record, False)

    def collapse_all_conversations(self, except_record: MessageRecord | None = None) -> None:
        """Collapse every conversation, optionally keeping the one of except_record open."""
        keep = header_of(self.snapshot, except_record) if except_record is not None else None
        self.open_set.close_all_except(keep.id if keep is not None else None)
        self.filter_by_conversations()

    def close_selected_conversation(self, selections: Sequence[MessageRecord]) -> int | None:
        """Collapse the conversation of a single selected item.

        Returns:
            Row index to select next: the row above the header, else the row
            below it. None if nothing was collapsed or there is no such row.
        """
        if len(selections) != 1 or not selections[0].is_conversation_item:
            return None

        header = header_of(self.snapshot, selections[0])
        if header is None:
            return None

        self.collapse_conversation(header)

        row = self.index_of(header)
        if row > 0:
            return row - 1
        if 0 <= row < len(self) - 1:
            return row + 1
        return None

    # --- Counting ---

    def get_store_length(self) -> int:
        """Number of messages, counting only primary folder rows in conversation view."""
        return visible_item_count(
            self.snapshot,
            self.primary_folder_label,
            self.contains_conversations(),
            self.has_filter_applied,
        )

    def get_conversation_count(self) -> int:
        return conversation_count(self.snapshot)

    # --- Unread filter ---

    def set_unread_filter(self, enabled: bool, preview_record: MessageRecord | None = None) -> None:
        """Switch the unread filter; takes effect on the next reload().

        The previewed record stays in the result even once it has been read.
        """
        self.has_filter_applied = enabled
        self.preview_record = preview_record if enabled else None

    def get_filter_restriction(self, filter_type: str) -> dict[str, Any] | None:
        """Server side restriction for filter_type, or None if the type is unknown."""
        if filter_type != FILTER_UNREAD:
            return None

        unread = {
            "type": "bitmask",
            "property": "PR_MESSAGE_FLAGS",
            "relop": "BMR_EQZ",
            "mask": MSGFLAG_READ,
        }
        if self.preview_record is not None and self.has_filter_applied:
            return {
                "type": "or",
                "restrictions": [
                    {
                        "type": "property",
                        "property": "entryid",
                        "relop": "RELOP_EQ",
                        "value": self.preview_record.id,
                    },
                    unread,
                ],
            }
        return unread
