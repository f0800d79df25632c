"""Host adapters package for Vector Manager."""

from .jsonl_host import JsonlChatHost, NotificationSink

__all__ = [
    "JsonlChatHost",
    "NotificationSink",
]
