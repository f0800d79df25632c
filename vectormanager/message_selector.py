"""Message selection and classification for Vector Manager.

Picks a 1-based layer range from the transcript and assigns each message one
closed MessageKind. Classification happens once here; later stages only read
the kind.
"""

import re
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from loguru import logger

from core.models import ChatMessage, ClassifiedMessage, EventLog
from core.types import MessageIndex, MessageKind

DEFAULT_LAYER_RANGE = (1, 10)

# Host informational message kinds that never belong in the vector collection
SPECIAL_SYSTEM_TYPES = frozenset({
    "help",
    "welcome",
    "empty",
    "generic",
    "narrator",
    "comment",
    "slash_commands",
    "formatting",
    "hotkeys",
    "macros",
    "assistant_note",
})

INJECTION_MESSAGE_TYPE = "vector_manager_injection"
INJECTION_MARKER = "vector_manager"

# Speaker names treated as the user when role metadata is unreliable
USER_NAME_PATTERNS = (
    "user",
    "you",
    "me",
    "player",
    "{{user}}",
    "用户",
)

_RANGE_PATTERN = re.compile(r"^\s*(-?\d+)\s*(?:-\s*(-?\d+)\s*)?$")


def is_synthetic(message: ChatMessage) -> bool:
    """Check if a message was inserted by the injector."""
    return message.extra_type == INJECTION_MESSAGE_TYPE or bool(message.extra.get(INJECTION_MARKER))


def is_special_system(message: ChatMessage) -> bool:
    return message.extra_type in SPECIAL_SYSTEM_TYPES or is_synthetic(message)


def parse_layer_range(value: Optional[str], events: Optional[EventLog] = None) -> Tuple[int, int]:
    """Parse a textual layer range such as ``"1-10"`` or ``"5"``.

    Malformed input falls back to the default range with a warning.
    """
    match = _RANGE_PATTERN.match(value or "")
    if not match:
        message = f"Invalid layer range {value!r}, using {DEFAULT_LAYER_RANGE[0]}-{DEFAULT_LAYER_RANGE[1]}"
        if events is not None:
            events.record("selector", "warning", message, value=value)
        else:
            logger.warning(message)
        return DEFAULT_LAYER_RANGE

    start = int(match.group(1))
    end = int(match.group(2)) if match.group(2) is not None else start
    return start, end


def select_layer_range(
    transcript: Sequence[ChatMessage],
    start: int,
    end: int,
    events: Optional[EventLog] = None,
) -> List[Tuple[MessageIndex, ChatMessage]]:
    """Select messages by 1-based inclusive layer range (1 = oldest).

    Reversed bounds are swapped and bounds below 1 are clamped to 1. A range
    past the end of the transcript is an empty selection.

    Returns:
        (transcript index, message) pairs in transcript order
    """
    if start > end:
        start, end = end, start

    if start < 1:
        message = f"Layer start {start} is below 1, using 1"
        if events is not None:
            events.record("selector", "warning", message, start=start)
        else:
            logger.warning(message)
        start = 1
        end = max(end, 1)

    lower = max(0, start - 1)
    upper = min(len(transcript), end)
    return [(MessageIndex(i), transcript[i]) for i in range(lower, upper)]


def matches_user_name(name: str, user_names: Iterable[str] = ()) -> bool:
    """Check a speaker name against the user-name rule table."""
    normalized = name.strip().lower()
    if not normalized:
        return False
    patterns = set(USER_NAME_PATTERNS) | {n.strip().lower() for n in user_names if n and n.strip()}
    return normalized in patterns


def classify_by_name(message: ChatMessage, user_names: Iterable[str] = ()) -> MessageKind:
    """Best-effort classification from the speaker name alone."""
    if not message.name.strip():
        return MessageKind.UNKNOWN
    if matches_user_name(message.name, user_names):
        return MessageKind.USER
    return MessageKind.AI


def classify_message(
    message: ChatMessage,
    use_name_fallback: bool = False,
    user_names: Iterable[str] = (),
) -> MessageKind:
    """Classify one message.

    Args:
        message: Message to classify
        use_name_fallback: Classify system-tagged messages by speaker name
        user_names: Extra persona names counted as the user

    Returns:
        The message's kind
    """
    if is_special_system(message):
        return MessageKind.SPECIAL_SYSTEM
    if message.is_hidden:
        return MessageKind.HIDDEN
    if message.is_user:
        return MessageKind.USER
    if message.is_system:
        return classify_by_name(message, user_names) if use_name_fallback else MessageKind.UNKNOWN
    return MessageKind.AI


def needs_name_fallback(messages: Iterable[ChatMessage]) -> bool:
    """True when every non-special message is system-tagged."""
    regular = [m for m in messages if not is_special_system(m)]
    return bool(regular) and all(m.is_system for m in regular)


def classify_messages(
    selection: Sequence[Tuple[MessageIndex, ChatMessage]],
    user_names: Iterable[str] = (),
    events: Optional[EventLog] = None,
) -> List[ClassifiedMessage]:
    """Classify a selection, switching to name matching for all-system selections."""
    user_names = list(user_names)
    fallback = needs_name_fallback(message for _, message in selection)
    if fallback and events is not None:
        events.record(
            "selector", "warning",
            "All selected messages are system-tagged, classifying by speaker name",
            count=len(selection),
        )

    return [
        ClassifiedMessage(
            message=message,
            kind=classify_message(message, use_name_fallback=fallback, user_names=user_names),
            index=index,
        )
        for index, message in selection
    ]


def filter_messages_by_type(
    classified: Sequence[ClassifiedMessage],
    flags: Mapping[str, bool],
) -> List[ClassifiedMessage]:
    """Keep messages whose kind is enabled by the ``user``/``ai``/``hidden`` flags."""
    enabled = {
        MessageKind.USER: bool(flags.get("user", False)),
        MessageKind.AI: bool(flags.get("ai", False)),
        MessageKind.HIDDEN: bool(flags.get("hidden", False)),
    }
    return [item for item in classified if enabled.get(item.kind, False)]
