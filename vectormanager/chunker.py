"""Chunker module for Vector Manager - splits message text into overlapping windows."""

import math
from typing import List, Optional, Sequence

from loguru import logger

# Core domain models
from core.models import Chunk, EventLog, ExtractedPassage
from core.types import Offset


class Chunker:
    """Fixed-size overlapping window chunker.

    Bad parameters are clamped, never raised; every clamp and the iteration
    ceiling are recorded in ``diagnostics`` for the most recent call.
    """

    def __init__(self, chunk_size: int = 512, overlap: int = 50):
        """Initialize the chunker.

        Args:
            chunk_size: Window size in characters
            overlap: Characters shared by consecutive windows
        """
        self.chunk_size = chunk_size
        self.overlap = overlap
        self.diagnostics = EventLog()

    def _resolve_params(self, chunk_size: int, overlap: int) -> tuple[int, int]:
        if overlap < 0:
            self.diagnostics.record(
                "chunker", "warning", f"Overlap {overlap} is negative, using 0",
                overlap=overlap,
            )
            overlap = 0

        if overlap >= chunk_size:
            clamped = chunk_size // 2
            self.diagnostics.record(
                "chunker", "warning",
                f"Overlap {overlap} >= chunk size {chunk_size}, using {clamped}",
                chunk_size=chunk_size, overlap=overlap,
            )
            overlap = clamped

        return chunk_size, overlap

    def chunk(
        self,
        text: str,
        chunk_size: Optional[int] = None,
        overlap: Optional[int] = None,
        source: str = "",
    ) -> List[Chunk]:
        """Split text into overlapping windows.

        Args:
            text: Normalized source text
            chunk_size: Window size (defaults to the chunker's)
            overlap: Window overlap (defaults to the chunker's)
            source: Source reference prefix for each chunk

        Returns:
            Chunks in text order; windows whose trimmed text is empty are skipped
        """
        self.diagnostics = EventLog()
        size = self.chunk_size if chunk_size is None else chunk_size
        overlap = self.overlap if overlap is None else overlap
        length = len(text)

        if not text:
            return []

        if size <= 0:
            self.diagnostics.record(
                "chunker", "warning", f"Chunk size {size} is not positive, using a single chunk",
                chunk_size=size,
            )
            return self._window(text, 0, length, source, 0)

        size, overlap = self._resolve_params(size, overlap)
        step = size - overlap
        max_iterations = math.ceil(length / step) + 10

        chunks: List[Chunk] = []
        start = 0
        iterations = 0

        while start < length:
            if iterations >= max_iterations:
                self.diagnostics.record(
                    "chunker", "error",
                    f"Iteration ceiling {max_iterations} reached at offset {start}",
                    length=length, chunk_size=size, overlap=overlap,
                )
                break
            iterations += 1

            end = min(start + size, length)
            chunks.extend(self._window(text, start, end, source, len(chunks)))

            if end >= length:
                break

            next_start = start + step
            if next_start <= start:
                next_start = start + max(1, size // 2)

            # Remaining tail is already covered by this window
            if length - next_start < overlap:
                break
            start = next_start

        logger.debug(f"Chunked {length} characters into {len(chunks)} chunks (size={size}, overlap={overlap})")
        return chunks

    def _window(self, text: str, start: int, end: int, source: str, ordinal: int) -> List[Chunk]:
        piece = text[start:end].strip()
        if not piece:
            return []
        label = f"{source}_chunk_{ordinal}" if source else f"chunk_{ordinal}"
        return [
            Chunk(
                text=piece,
                start=Offset(start),
                end=Offset(end),
                source_length=len(text),
                source=label,
            )
        ]

    def chunk_passages(
        self,
        passages: Sequence[ExtractedPassage],
        chunk_size: Optional[int] = None,
        overlap: Optional[int] = None,
    ) -> List[Chunk]:
        """Chunk every passage, attaching speaker, timestamp and message index.

        Diagnostics from all passages are accumulated.
        """
        events = EventLog()
        chunks: List[Chunk] = []

        for passage in passages:
            for piece in self.chunk(passage.text, chunk_size, overlap, source=f"message_{passage.index}"):
                chunks.append(
                    Chunk(
                        text=piece.text,
                        start=piece.start,
                        end=piece.end,
                        source_length=piece.source_length,
                        source=piece.source,
                        hash=piece.hash,
                        timestamp=passage.timestamp,
                        speaker=passage.speaker,
                        message_index=passage.index,
                    )
                )
            events.extend(self.diagnostics)

        self.diagnostics = events
        return chunks


def chunk_text(text: str, chunk_size: int, overlap: int, source: str = "") -> List[Chunk]:
    """Split text into overlapping windows with a throwaway chunker."""
    return Chunker(chunk_size, overlap).chunk(text, source=source)
