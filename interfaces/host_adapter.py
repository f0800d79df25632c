"""HostAdapter protocol for Vector Manager - the narrow seam to the chat application."""

from typing import Any, Optional, Protocol, Sequence

from core.models import ChatMessage
from core.types import RoleType


class HostAdapter(Protocol):
    """Everything the pipeline needs from the host chat application.

    The host supplies the transcript, the conversation identity, persisted
    settings and a notification sink. Prompt injection is optional; hosts
    without it get the transcript-splice fallback via ``set_transcript``.
    """

    @property
    def user_names(self) -> Sequence[str]:
        """Persona names the user chats under (for name-based classification)."""
        ...

    @property
    def supports_prompt_injection(self) -> bool:
        """True if register_prompt_injection is available."""
        ...

    def get_transcript(self) -> Sequence[ChatMessage]:
        """Return the current chat transcript, oldest first."""
        ...

    def set_transcript(self, messages: Sequence[ChatMessage]) -> None:
        """Replace the transcript used for the upcoming generation."""
        ...

    def get_conversation_identity(self) -> tuple[Optional[str], Optional[str]]:
        """Return (character_id, chat_id) for the active conversation."""
        ...

    def notify(self, message: str, level: str = "info") -> None:
        """Show a user-visible notification ('info' | 'success' | 'warning' | 'error')."""
        ...

    def persist_settings(self, data: dict[str, Any]) -> None:
        """Persist plugin settings."""
        ...

    def register_prompt_injection(
        self,
        key: str,
        text: str,
        depth: int,
        role: RoleType,
    ) -> None:
        """Register (or replace) a named prompt injection at an in-chat depth."""
        ...
