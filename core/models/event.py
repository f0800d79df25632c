"""Vector Manager Pipeline Events - Structured diagnostics returned with results.

Every pipeline invocation returns a PipelineResult carrying the events it
recorded, so hosts can inspect what happened without scraping log output.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from loguru import logger


class PipelineStatus(Enum):
    """Outcome of one pipeline invocation."""

    SUCCESS = "success"
    EMPTY = "empty"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass(frozen=True)
class PipelineEvent:
    """One diagnostic record.

    Attributes:
        stage: Pipeline stage that emitted the event (e.g. "chunker", "rerank")
        level: "debug" | "info" | "warning" | "error"
        message: Human-readable description
        context: Structured details
    """

    stage: str
    level: str
    message: str
    context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stage": self.stage,
            "level": self.level,
            "message": self.message,
            "context": dict(self.context),
        }


class EventLog(list):
    """List of PipelineEvents that mirrors each record to the logger."""

    def record(self, stage: str, level: str, message: str, **context: Any) -> PipelineEvent:
        """Append an event and log it at the matching level."""
        event = PipelineEvent(stage=stage, level=level, message=message, context=context)
        self.append(event)
        logger.log(level.upper(), f"[{stage}] {message}")
        return event

    def warnings(self) -> List[PipelineEvent]:
        return [e for e in self if e.level == "warning"]

    def errors(self) -> List[PipelineEvent]:
        return [e for e in self if e.level == "error"]


@dataclass
class PipelineResult:
    """Outcome of one pipeline invocation.

    Attributes:
        status: Overall outcome
        message: Summary suitable for a user notification
        payload: Operation-specific data (injected text, chunks, results)
        events: Diagnostics recorded during the invocation
    """

    status: PipelineStatus
    message: str = ""
    payload: Dict[str, Any] = field(default_factory=dict)
    events: List[PipelineEvent] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        """True unless the invocation failed."""
        return self.status is not PipelineStatus.ERROR

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "message": self.message,
            "payload": self.payload,
            "events": [e.to_dict() for e in self.events],
        }
