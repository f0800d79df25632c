"""JSONL chat-file host adapter for Vector Manager.

Reads a host chat export: the first line is a metadata header
(``user_name``, ``character_name``, ``chat_metadata``), every following line
is one message in the host's dictionary shape.
"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from loguru import logger

from core.exceptions import ConfigurationError
from core.models import ChatMessage
from core.types import RoleType

NotificationSink = Callable[[str, str], None]


class JsonlChatHost:
    """HostAdapter over a JSONL chat file, used by the command line tools."""

    def __init__(
        self,
        chat_path: Union[Path, str],
        notify: Optional[NotificationSink] = None,
        settings_path: Optional[Union[Path, str]] = None,
        prompt_injection: bool = True,
    ):
        """Initialize host adapter.

        Args:
            chat_path: JSONL chat file
            notify: Sink receiving (message, level) notifications
            settings_path: File persist_settings writes to (None disables persistence)
            prompt_injection: Whether named prompt injections are supported
        """
        self._chat_path = Path(chat_path).expanduser()
        self._notify = notify
        self._settings_path = Path(settings_path).expanduser() if settings_path else None
        self._prompt_injection = prompt_injection

        self._metadata: Dict[str, Any] = {}
        self._transcript: List[ChatMessage] = []
        self.injections: Dict[str, Tuple[str, int, RoleType]] = {}
        self.notifications: List[Tuple[str, str]] = []

        self._load()

    def _load(self) -> None:
        if not self._chat_path.exists():
            raise ConfigurationError("chat", str(self._chat_path), "Chat file does not exist")

        lines = [line for line in self._chat_path.read_text(encoding="utf-8").splitlines() if line.strip()]
        try:
            rows = [json.loads(line) for line in lines]
        except json.JSONDecodeError as e:
            raise ConfigurationError("chat", str(self._chat_path), f"Invalid JSONL: {e}") from e

        # Header line has no message body
        if rows and isinstance(rows[0], dict) and "mes" not in rows[0]:
            self._metadata = rows.pop(0)

        self._transcript = [ChatMessage.from_dict(row) for row in rows if isinstance(row, dict)]
        logger.debug(f"Loaded {len(self._transcript)} messages from {self._chat_path}")

    @property
    def chat_path(self) -> Path:
        return self._chat_path

    @property
    def user_names(self) -> Sequence[str]:
        name = self._metadata.get("user_name")
        return [name] if name else []

    @property
    def supports_prompt_injection(self) -> bool:
        return self._prompt_injection

    def get_transcript(self) -> Sequence[ChatMessage]:
        return list(self._transcript)

    def set_transcript(self, messages: Sequence[ChatMessage]) -> None:
        self._transcript = list(messages)

    def get_conversation_identity(self) -> Tuple[Optional[str], Optional[str]]:
        character = self._metadata.get("character_name")
        return (str(character) if character else None, self._chat_path.stem)

    def notify(self, message: str, level: str = "info") -> None:
        self.notifications.append((message, level))
        if self._notify is not None:
            self._notify(message, level)

    def persist_settings(self, data: Dict[str, Any]) -> None:
        if self._settings_path is None:
            return
        self._settings_path.parent.mkdir(parents=True, exist_ok=True)
        self._settings_path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def register_prompt_injection(self, key: str, text: str, depth: int, role: RoleType) -> None:
        if not text:
            self.injections.pop(key, None)
            return
        self.injections[key] = (text, depth, role)
