# ABOUTME: Tracker of expanded conversations and the child rows shown for each.
"""Tracker of expanded conversations and the child rows shown for each."""

from collections.abc import Iterable


class OpenSet:
    """Maps a conversation header id to the ordered ids of its visible children.

    A key being present means the conversation is expanded. The list holds the
    child ids currently shown for it, which may lag behind the header's live
    children until the next reconciliation.
    """

    def __init__(self):
        self._entries: dict[str, list[str]] = {}

    def __contains__(self, header_id: str) -> bool:
        return header_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"OpenSet({self._entries!r})"

    def get(self, header_id: str) -> list[str] | None:
        children = self._entries.get(header_id)
        return list(children) if children is not None else None

    def header_ids(self) -> list[str]:
        return list(self._entries)

    def open_item_ids(self) -> set[str]:
        """Union of every tracked child list."""
        return {child_id for children in self._entries.values() for child_id in children}

    def is_open(self, record_id: str) -> bool:
        if record_id in self._entries:
            return True
        return any(record_id in children for children in self._entries.values())

    def open(self, header_id: str, child_ids: Iterable[str]) -> None:
        """Set the children for a header, replacing any previous list."""
        self._entries[header_id] = list(dict.fromkeys(child_ids))

    def absorb(self, header_id: str, extra_child_ids: Iterable[str]) -> None:
        """Append ids the header does not track yet, keeping encounter order."""
        children = self._entries.setdefault(header_id, [])
        for child_id in extra_child_ids:
            if child_id not in children:
                children.append(child_id)

    def close(self, header_id: str) -> None:
        self._entries.pop(header_id, None)

    def close_all_except(self, header_id: str | None = None) -> None:
        kept = self._entries.get(header_id) if header_id is not None else None
        self._entries.clear()
        if kept is not None:
            self._entries[header_id] = kept

    def snapshot(self) -> dict[str, list[str]]:
        return {header_id: list(children) for header_id, children in self._entries.items()}
