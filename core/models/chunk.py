"""Vector Manager Chunk Domain Model - Represents a slice of message text.

This module contains the Chunk domain model which represents a bounded,
contiguous window of source text prepared for embedding, together with the
content hash used as the record id inside a collection.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..exceptions import ValidationError
from ..types import ChunkHash, Offset, Timestamp

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value >= 0x80000000 else value


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    value = abs(value)
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return sign + "".join(reversed(digits))


def content_hash(text: str) -> ChunkHash:
    """Compute the 32-bit rolling hash of a text, rendered in base 36.

    The hash runs over UTF-16 code units so ids match the ones the host
    already stores for the same text.

    Args:
        text: Text to hash

    Returns:
        Signed base36 hash string (e.g. "-1a2b3c")
    """
    data = text.encode("utf-16-le")
    value = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        value = _to_int32(value * 31 + unit)
    return ChunkHash(_to_base36(value))


@dataclass(frozen=True)
class Chunk:
    """Domain model representing a window of source text.

    Attributes:
        text: Trimmed window content
        start: Window start offset in the source text (inclusive)
        end: Window end offset in the source text (exclusive)
        source_length: Length of the source text
        source: Source reference (e.g. "message_3_chunk_0")
        hash: Content hash of ``text``
        timestamp: Send date of the source message, if known
        speaker: Speaker of the source message, if known
        message_index: Transcript index of the source message, if known
    """

    text: str
    start: Offset
    end: Offset
    source_length: int
    source: str = ""
    hash: Optional[ChunkHash] = None
    timestamp: Timestamp = None
    speaker: Optional[str] = None
    message_index: Optional[int] = None

    def __post_init__(self):
        """Validate chunk model after initialization."""
        self._validate()
        if self.hash is None:
            object.__setattr__(self, "hash", content_hash(self.text))

    def _validate(self) -> None:
        if not self.text:
            raise ValidationError("text", self.text, "Chunk text cannot be empty")

        if self.start < 0:
            raise ValidationError("start", self.start, "Start offset cannot be negative")

        if self.start >= self.end:
            raise ValidationError(
                "range",
                f"{self.start}-{self.end}",
                "Start offset must be less than end offset"
            )

        if self.end > self.source_length:
            raise ValidationError(
                "end",
                self.end,
                f"End offset exceeds source length ({self.source_length})"
            )

    @property
    def length(self) -> int:
        """Get the window length in characters."""
        return self.end - self.start

    def overlap_with(self, other: "Chunk") -> int:
        """Number of characters this window shares with another window."""
        return max(0, min(self.end, other.end) - max(self.start, other.start))

    def to_dict(self) -> Dict[str, Any]:
        """Convert Chunk model to dictionary."""
        result: Dict[str, Any] = {
            "text": self.text,
            "start": self.start,
            "end": self.end,
            "source": self.source,
            "hash": self.hash,
        }
        if self.timestamp is not None:
            result["timestamp"] = self.timestamp
        if self.speaker is not None:
            result["speaker"] = self.speaker
        if self.message_index is not None:
            result["message_index"] = self.message_index
        return result

    def __str__(self) -> str:
        preview = self.text[:40].replace("\n", " ")
        if len(self.text) > 40:
            preview += "..."
        return f"Chunk({self.source or 'text'}[{self.start}:{self.end}] '{preview}')"
