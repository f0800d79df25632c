"""Shared fixtures for Vector Manager tests."""

import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import Any, Optional

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from core.models import ChatMessage
from core.types import RoleType
from vectormanager.core.config import VectorManagerConfig


class FakeHost:
    """In-memory HostAdapter recording everything the pipeline hands to it."""

    def __init__(
        self,
        messages: Optional[list[ChatMessage]] = None,
        identity: tuple[Optional[str], Optional[str]] = ("Alice", "chat-1"),
        prompt_injection: bool = True,
        user_names: Optional[list[str]] = None,
    ):
        self.transcript = list(messages or [])
        self.identity = identity
        self.prompt_injection = prompt_injection
        self._user_names = user_names or []
        self.notifications: list[tuple[str, str]] = []
        self.injections: dict[str, tuple[str, int, RoleType]] = {}
        self.persisted: list[dict[str, Any]] = []

    @property
    def user_names(self) -> list[str]:
        return self._user_names

    @property
    def supports_prompt_injection(self) -> bool:
        return self.prompt_injection

    def get_transcript(self) -> list[ChatMessage]:
        return list(self.transcript)

    def set_transcript(self, messages) -> None:
        self.transcript = list(messages)

    def get_conversation_identity(self):
        return self.identity

    def notify(self, message: str, level: str = "info") -> None:
        self.notifications.append((message, level))

    def persist_settings(self, data: dict[str, Any]) -> None:
        self.persisted.append(data)

    def register_prompt_injection(self, key: str, text: str, depth: int, role: RoleType) -> None:
        if not text:
            self.injections.pop(key, None)
            return
        self.injections[key] = (text, depth, role)

    def levels(self, level: str) -> list[str]:
        return [message for message, lvl in self.notifications if lvl == level]


class KeywordEmbeddingProvider:
    """Deterministic embedding provider: one dimension per keyword."""

    def __init__(self, keywords: tuple[str, ...] = ("dragon", "castle", "sword", "tea")):
        self.keywords = keywords
        self.calls: list[list[str]] = []
        self.fail_with: Optional[Exception] = None

    @property
    def name(self) -> str:
        return "keyword"

    @property
    def model(self) -> str:
        return "keyword-test"

    def vector(self, text: str) -> list[float]:
        lowered = text.lower()
        return [float(lowered.count(word)) for word in self.keywords] + [0.01]

    async def embed(self, texts, api_key=None, model=None):
        if isinstance(texts, str):
            return (await self.embed_batch([texts]))[0]
        return await self.embed_batch(list(texts))

    async def embed_batch(self, texts, batch_size=None, progress=None, api_key=None, model=None):
        if self.fail_with is not None:
            raise self.fail_with
        self.calls.append(list(texts))
        if progress is not None:
            progress(len(texts), len(texts))
        return [self.vector(text) for text in texts]


def make_message(
    text: str,
    name: str = "Bob",
    is_user: bool = False,
    is_system: bool = False,
    is_hidden: bool = False,
    timestamp: Any = None,
    extra: Optional[dict[str, Any]] = None,
) -> ChatMessage:
    return ChatMessage(
        text=text,
        name=name,
        is_user=is_user,
        is_system=is_system,
        is_hidden=is_hidden,
        timestamp=timestamp,
        extra=extra or {},
    )


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_transcript() -> list[ChatMessage]:
    """Short alternating conversation."""
    return [
        make_message("I found a <b>dragon</b> near the castle.", name="You", is_user=True, timestamp=1700000000),
        make_message("The dragon guards an old sword.", name="Narrator Bot", timestamp=1700000060),
        make_message("Let's have tea first.", name="You", is_user=True, timestamp=1700000120),
        make_message("Tea is served in the castle hall.", name="Narrator Bot", timestamp=1700000180),
        make_message("What about the sword?", name="You", is_user=True, timestamp=1700000240),
    ]


@pytest.fixture
def fake_host(sample_transcript) -> FakeHost:
    return FakeHost(sample_transcript)


@pytest.fixture
def embedding_provider() -> KeywordEmbeddingProvider:
    return KeywordEmbeddingProvider()


@pytest.fixture
def base_config() -> VectorManagerConfig:
    """Configuration with small chunks, local search and no rate delays."""
    return VectorManagerConfig(
        embedding={"api_key": "sk-test", "batch_delay": 0},
        retrieval={"strategy": "local", "score_threshold": 0.5, "query_message_count": 1},
        vectorization={"chunk_size": 200, "overlap": 20, "layer_start": 1, "layer_end": 10},
    )


@pytest.fixture
async def http_server():
    """Track started aiohttp test servers and close them after the test."""
    servers: list[TestServer] = []

    async def start(app: web.Application) -> TestServer:
        server = TestServer(app)
        await server.start_server()
        servers.append(server)
        return server

    yield start

    for server in servers:
        await server.close()
