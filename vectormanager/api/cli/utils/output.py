"""Output formatting utilities for Vector Manager CLI commands."""

import json
import sys
from typing import Any, Dict

from core.models import PipelineResult


class OutputFormatter:
    """Handles consistent output formatting across CLI commands."""

    def __init__(self, verbose: bool = False):
        """Initialize output formatter.

        Args:
            verbose: Whether to enable verbose output
        """
        self.verbose = verbose

    def info(self, message: str) -> None:
        print(f"ℹ️  {message}")

    def success(self, message: str) -> None:
        print(f"✅ {message}")

    def warning(self, message: str) -> None:
        print(f"⚠️  {message}")

    def error(self, message: str) -> None:
        print(f"❌ {message}", file=sys.stderr)

    def verbose_info(self, message: str) -> None:
        """Print a verbose info message if verbose mode is enabled."""
        if self.verbose:
            print(f"🔍 {message}")

    def notify(self, message: str, level: str = "info") -> None:
        """Notification sink for the host adapter.

        Args:
            message: Notification text
            level: "info" | "success" | "warning" | "error"
        """
        handler = {
            "success": self.success,
            "warning": self.warning,
            "error": self.error,
        }.get(level, self.info)
        handler(message)

    def json_output(self, data: Dict[str, Any]) -> None:
        """Print data as formatted JSON."""
        print(json.dumps(data, indent=2, default=str, ensure_ascii=False))

    def events(self, result: PipelineResult) -> None:
        """Print a result's diagnostic events in verbose mode."""
        for event in result.events:
            self.verbose_info(f"[{event.stage}] {event.level}: {event.message}")


def format_ingestion_stats(payload: Dict[str, Any]) -> str:
    """Format ingestion counts for display."""
    return (
        f"{payload.get('inserted', 0)} inserted, "
        f"{payload.get('skipped_existing', 0)} already stored, "
        f"{payload.get('skipped_duplicate', 0)} duplicates "
        f"({payload.get('total', 0)} chunks)"
    )
