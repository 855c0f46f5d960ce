"""Recursive character text splitting with overlapping windows.

Splits document text into chunks no longer than ``chunk_size`` characters,
preferring the coarsest natural boundary that fits:

1. **Separator cascade** -- Text is first split on paragraph breaks
   (``"\\n\\n"``), then line breaks, then spaces, and finally into single
   characters.  A piece that is still too long after one separator is split
   again with the next, finer one.

2. **Greedy merge with overlap** -- Adjacent small pieces are merged back
   together up to ``chunk_size``.  When a chunk is emitted, pieces are dropped
   from its head until at most ``chunk_overlap`` characters remain, and those
   carry over into the next chunk.

For text without any separator (e.g. 4000 characters of ``"a"``), the
splitter falls through to single characters and produces fixed windows:
``[0:1000]``, ``[980:1980]``, ``[1960:2960]``, ``[2940:3940]``, ``[3920:4000]``.
"""

from __future__ import annotations

import structlog

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_SEPARATORS: tuple[str, ...] = ("\n\n", "\n", " ", "")


class RecursiveCharacterTextSplitter:
    """Splits text into overlapping, size-bounded chunks.

    Parameters
    ----------
    chunk_size:
        Maximum characters per chunk (default 1000).
    chunk_overlap:
        Characters shared between consecutive chunks (default 20).  Must be
        smaller than *chunk_size*.
    separators:
        Boundaries to try, coarsest first.  The empty string means "split
        into characters" and should come last.
    """

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 20,
        separators: tuple[str, ...] | list[str] = DEFAULT_SEPARATORS,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if chunk_overlap < 0 or chunk_overlap >= chunk_size:
            raise ValueError(
                f"chunk_overlap ({chunk_overlap}) must be in [0, chunk_size={chunk_size})"
            )
        self._chunk_size = chunk_size
        self._chunk_overlap = chunk_overlap
        self._separators = list(separators)

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def chunk_overlap(self) -> int:
        return self._chunk_overlap

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def split_text(self, text: str | None) -> list[str]:
        """Split *text* into chunks.  Empty or blank input returns ``[]``."""
        if not text or not text.strip():
            return []
        chunks = self._split(text, self._separators)
        logger.debug(
            "text_split_complete",
            num_chunks=len(chunks),
            text_length=len(text),
            chunk_size=self._chunk_size,
        )
        return chunks

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _split(self, text: str, separators: list[str]) -> list[str]:
        separator = separators[-1] if separators else ""
        finer: list[str] = []
        for index, candidate in enumerate(separators):
            if candidate == "":
                separator = candidate
                break
            if candidate in text:
                separator = candidate
                finer = separators[index + 1 :]
                break

        pieces = text.split(separator) if separator else list(text)

        final_chunks: list[str] = []
        pending: list[str] = []
        for piece in pieces:
            if len(piece) < self._chunk_size:
                pending.append(piece)
                continue
            if pending:
                final_chunks.extend(self._merge(pending, separator))
                pending = []
            if finer:
                final_chunks.extend(self._split(piece, finer))
            else:
                final_chunks.append(piece)

        if pending:
            final_chunks.extend(self._merge(pending, separator))
        return final_chunks

    def _merge(self, pieces: list[str], separator: str) -> list[str]:
        """Greedily join *pieces* into chunks, carrying an overlap tail forward."""
        sep_len = len(separator)
        chunks: list[str] = []
        window: list[str] = []
        total = 0

        for piece in pieces:
            piece_len = len(piece)
            joined_len = total + piece_len + (sep_len if window else 0)
            if joined_len > self._chunk_size:
                if total > self._chunk_size:
                    logger.warning(
                        "chunk_exceeds_size",
                        length=total,
                        chunk_size=self._chunk_size,
                    )
                if window:
                    chunk = self._join(window, separator)
                    if chunk is not None:
                        chunks.append(chunk)
                    # Drop from the head until only the overlap remains and
                    # the incoming piece fits.
                    while total > self._chunk_overlap or (
                        total + piece_len + (sep_len if window else 0) > self._chunk_size
                        and total > 0
                    ):
                        total -= len(window[0]) + (sep_len if len(window) > 1 else 0)
                        window.pop(0)
            window.append(piece)
            total += piece_len + (sep_len if len(window) > 1 else 0)

        chunk = self._join(window, separator)
        if chunk is not None:
            chunks.append(chunk)
        return chunks

    @staticmethod
    def _join(pieces: list[str], separator: str) -> str | None:
        text = separator.join(pieces).strip()
        return text or None
