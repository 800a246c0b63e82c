# ABOUTME: Read-only message record model consumed by the threading engine
# ABOUTME: Provides the MessageRecord dataclass with tolerant construction from wire dicts
import logging
from dataclasses import dataclass
from typing import Any

from mailthread.exceptions import ValidationError

logger = logging.getLogger(__name__)


def _non_negative_int(value: Any, field_name: str, record_id: str) -> int:
    """Coerce a structural field to an int >= 0, never raising."""
    if value is None:
        return 0
    try:
        number = int(value)
    except (TypeError, ValueError):
        logger.warning(f"Record {record_id}: invalid {field_name} {value!r}, treating as 0")
        return 0
    if number < 0:
        logger.warning(f"Record {record_id}: negative {field_name} {number}, treating as 0")
        return 0
    return number


@dataclass(frozen=True)
class MessageRecord:
    """A single row of a mail list as delivered by the server.

    depth 0 is a conversation header or a standalone message, depth > 0 is an
    item of the nearest preceding header. conversation_count is only
    meaningful for depth 0 records.
    """

    id: str
    depth: int = 0
    conversation_count: int = 0
    folder_label: str = ""
    subject: str = ""
    sender: str = ""
    read: bool = True

    def __post_init__(self):
        if not self.id:
            raise ValidationError("Record id cannot be empty")
        # Frozen dataclass, so clamping goes through object.__setattr__
        object.__setattr__(self, "depth", _non_negative_int(self.depth, "depth", self.id))
        object.__setattr__(
            self,
            "conversation_count",
            _non_negative_int(self.conversation_count, "conversation_count", self.id),
        )

    @property
    def is_header(self) -> bool:
        return self.depth == 0 and self.conversation_count > 0

    @property
    def is_conversation_item(self) -> bool:
        return self.depth > 0

    @property
    def is_normal(self) -> bool:
        return self.depth == 0 and self.conversation_count == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "depth": self.depth,
            "conversation_count": self.conversation_count,
            "folder_name": self.folder_label,
            "subject": self.subject,
            "sender": self.sender,
            "read": self.read,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MessageRecord":
        """Build a record from a server row.

        Accepts either 'id' or 'entryid' for the identifier and either
        'folder_name' or 'folder_label' for the origin folder.
        """
        if not isinstance(data, dict):
            raise ValidationError(f"Invalid record data: expected an object, got {type(data).__name__}")
        record_id = data.get("id") or data.get("entryid")
        if not record_id:
            raise ValidationError(
                "Invalid record data: missing id",
                recovery_hint="Every row needs an 'id' or 'entryid' field",
            )
        return cls(
            id=str(record_id),
            depth=data.get("depth", 0),
            conversation_count=data.get("conversation_count", 0),
            folder_label=str(data.get("folder_name", data.get("folder_label", "")) or ""),
            subject=str(data.get("subject") or ""),
            sender=str(data.get("sender") or ""),
            read=bool(data.get("read", True)),
        )


def records_from_dicts(rows: list[dict[str, Any]]) -> list[MessageRecord]:
    return [MessageRecord.from_dict(row) for row in rows]
