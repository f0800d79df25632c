"""Vector Manager Message Domain Models - Chat messages as seen by the pipeline.

This module contains the ChatMessage model, which mirrors a host chat message,
plus the derived ClassifiedMessage and ExtractedPassage models produced by the
selection and extraction stages.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from ..types import MessageIndex, MessageKind, Timestamp


@dataclass(frozen=True)
class ChatMessage:
    """Domain model representing one message of the host transcript.

    The pipeline never mutates messages; the injector builds new synthetic
    messages instead.

    Attributes:
        text: Raw message body (may contain markup)
        name: Speaker name as recorded by the host
        is_user: Host flag for user-authored messages
        is_system: Host flag for system messages
        is_hidden: Host flag for messages hidden from the prompt
        timestamp: Host send date (string or epoch)
        extra: Host extra metadata (``type`` tag, plugin markers)
    """

    text: str = ""
    name: str = ""
    is_user: bool = False
    is_system: bool = False
    is_hidden: bool = False
    timestamp: Timestamp = None
    extra: Dict[str, Any] = field(default_factory=dict, hash=False, compare=False)

    @property
    def extra_type(self) -> Optional[str]:
        """Get the host's informational message kind tag, if any."""
        value = self.extra.get("type")
        return str(value) if value else None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChatMessage":
        """Create a ChatMessage from a host message dictionary.

        Accepts the host's field names (``mes``, ``send_date``) as well as the
        model's own names, so round-tripping through ``to_dict`` works.

        Args:
            data: Host message dictionary

        Returns:
            ChatMessage built from the dictionary
        """
        extra = data.get("extra") or {}
        return cls(
            text=str(data.get("mes", data.get("text", "")) or ""),
            name=str(data.get("name", "") or ""),
            is_user=bool(data.get("is_user", False)),
            is_system=bool(data.get("is_system", False)),
            is_hidden=bool(data.get("is_hidden", False)),
            timestamp=data.get("send_date", data.get("timestamp")),
            extra=dict(extra) if isinstance(extra, Mapping) else {},
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the message to the host's dictionary shape."""
        result: Dict[str, Any] = {
            "name": self.name,
            "is_user": self.is_user,
            "is_system": self.is_system,
            "mes": self.text,
        }
        if self.is_hidden:
            result["is_hidden"] = True
        if self.timestamp is not None:
            result["send_date"] = self.timestamp
        if self.extra:
            result["extra"] = dict(self.extra)
        return result


@dataclass(frozen=True)
class ClassifiedMessage:
    """A transcript message with its classification and transcript position."""

    message: ChatMessage
    kind: MessageKind
    index: MessageIndex


@dataclass(frozen=True)
class ExtractedPassage:
    """Cleaned message text with provenance.

    Attributes:
        text: Markup-free, trimmed message text (never empty)
        speaker: Speaker name, falling back to "User" / "Assistant"
        timestamp: Host send date of the source message
        is_user: Whether the source message was classified as user
        index: Index of the source message in the full transcript
    """

    text: str
    speaker: str
    timestamp: Timestamp
    is_user: bool
    index: MessageIndex
