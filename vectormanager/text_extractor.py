"""Text extraction for Vector Manager - markup stripping with provenance."""

import re
from typing import List, Sequence

from core.models import ChatMessage, ClassifiedMessage, ExtractedPassage
from core.types import MessageKind

from .message_selector import is_special_system

_TAG_PATTERN = re.compile(r"<[^>]*>")


def clean_text(text: str) -> str:
    """Strip markup tags and surrounding whitespace."""
    return _TAG_PATTERN.sub("", text or "").strip()


def extract_passages(classified: Sequence[ClassifiedMessage]) -> List[ExtractedPassage]:
    """Turn classified messages into cleaned passages, dropping empty ones."""
    passages = []
    for item in classified:
        text = clean_text(item.message.text)
        if not text:
            continue

        is_user = item.kind is MessageKind.USER
        speaker = item.message.name.strip() or ("User" if is_user else "Assistant")
        passages.append(
            ExtractedPassage(
                text=text,
                speaker=speaker,
                timestamp=item.message.timestamp,
                is_user=is_user,
                index=item.index,
            )
        )
    return passages


def build_query_text(transcript: Sequence[ChatMessage], count: int) -> str:
    """Join the cleaned text of the last ``count`` non-special messages."""
    if count <= 0:
        return ""

    recent = [m for m in transcript if not is_special_system(m)][-count:]
    texts = [clean_text(m.text) for m in recent]
    return "\n".join(t for t in texts if t)


def format_preview(passages: Sequence[ExtractedPassage]) -> str:
    """Render passages as numbered ``[speaker] text`` lines."""
    return "\n\n".join(
        f"{i}. [{passage.speaker}] {passage.text}" for i, passage in enumerate(passages, start=1)
    )
