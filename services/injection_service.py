"""Injection service for Vector Manager - formats results and places them in the prompt."""

from datetime import datetime, timezone
from typing import List, Optional, Sequence

from loguru import logger

from core.models import ChatMessage, EventLog, QueryResult
from core.types import RoleType, Timestamp
from interfaces.host_adapter import HostAdapter
from vectormanager.message_selector import INJECTION_MARKER, INJECTION_MESSAGE_TYPE, is_synthetic

INJECTION_KEY = "vector-manager"
PLACEHOLDER = "{{text}}"
INJECTION_SPEAKER = "Vector Manager"

# Epoch values above this are milliseconds
_EPOCH_MS_THRESHOLD = 100_000_000_000


def format_timestamp(timestamp: Timestamp) -> str:
    """Render a host send date; epoch numbers are formatted in UTC."""
    if timestamp is None or timestamp == "":
        return "unknown time"
    if isinstance(timestamp, bool):
        return str(timestamp)
    if isinstance(timestamp, (int, float)):
        seconds = timestamp / 1000 if timestamp > _EPOCH_MS_THRESHOLD else timestamp
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")
        except (OverflowError, OSError, ValueError):
            return str(timestamp)
    return str(timestamp)


def format_result_line(rank: int, result: QueryResult) -> str:
    speaker = result.speaker or "Unknown"
    return (
        f"{rank}. [{result.similarity_percentage}%] {speaker} "
        f"({format_timestamp(result.timestamp)}): {result.text}"
    )


def format_results(
    results: Sequence[QueryResult],
    template: str,
    events: Optional[EventLog] = None,
) -> str:
    """Render results through a template with a single ``{{text}}`` placeholder.

    A template without the placeholder gets the block appended; extra
    placeholders are removed. Both cases record a warning event.
    """
    events = events if events is not None else EventLog()
    block = "\n".join(format_result_line(rank, r) for rank, r in enumerate(results, start=1))

    occurrences = template.count(PLACEHOLDER)
    if occurrences == 0:
        events.record("injector", "warning", "Template has no {{text}} placeholder, appending results")
        return f"{template.rstrip()}\n{block}" if template.strip() else block

    if occurrences > 1:
        events.record(
            "injector", "warning",
            f"Template has {occurrences} {{{{text}}}} placeholders, only the first is used",
        )

    head, tail = template.split(PLACEHOLDER, 1)
    return head + block + tail.replace(PLACEHOLDER, "")


def build_injection_message(text: str, role: RoleType) -> ChatMessage:
    """Create the synthetic transcript message carrying injected context."""
    return ChatMessage(
        text=text,
        name=INJECTION_SPEAKER,
        is_user=role is RoleType.USER,
        is_system=role is RoleType.SYSTEM,
        extra={"type": INJECTION_MESSAGE_TYPE, INJECTION_MARKER: True},
    )


class InjectionService:
    """Delivers formatted context through the host's injection mechanism.

    Hosts with named prompt injection get one injection keyed by
    ``vector-manager`` (each call replaces the previous one); others get a
    synthetic message spliced into the transcript.
    """

    def __init__(self, host: HostAdapter):
        """Initialize injection service.

        Args:
            host: Host adapter receiving the injection
        """
        self._host = host

    def inject(
        self,
        text: str,
        depth: int,
        role: RoleType,
        events: Optional[EventLog] = None,
    ) -> str:
        """Place text ``depth`` turns before the end of the transcript.

        Returns:
            Delivery mode used ("prompt_injection" or "transcript_splice")
        """
        events = events if events is not None else EventLog()
        transcript = [m for m in self._host.get_transcript() if not is_synthetic(m)]
        clamped = min(max(0, depth), len(transcript))
        if clamped != depth:
            events.record(
                "injector", "warning", f"Injection depth {depth} clamped to {clamped}",
                transcript_length=len(transcript),
            )

        if self._host.supports_prompt_injection:
            self._host.register_prompt_injection(INJECTION_KEY, text, clamped, role)
            logger.debug(f"Registered prompt injection at depth {clamped} as {role.value}")
            return "prompt_injection"

        position = len(transcript) - clamped
        spliced: List[ChatMessage] = transcript[:position] + [build_injection_message(text, role)] + transcript[position:]
        self._host.set_transcript(spliced)
        logger.debug(f"Spliced injection message at position {position} of {len(spliced)}")
        return "transcript_splice"

    def clear(self) -> None:
        """Remove any previous injection."""
        if self._host.supports_prompt_injection:
            self._host.register_prompt_injection(INJECTION_KEY, "", 0, RoleType.SYSTEM)
            return

        transcript = list(self._host.get_transcript())
        remaining = [m for m in transcript if not is_synthetic(m)]
        if len(remaining) != len(transcript):
            self._host.set_transcript(remaining)
