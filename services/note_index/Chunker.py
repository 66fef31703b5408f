"""Paragraph-based chunking of note bodies."""

import re

from shared.models.document import Chunk

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_PARAGRAPH_SEPARATOR = "\n\n"


class Chunker:
    """Splits a note body into bounded, overlapping chunks.

    Paragraphs (separated by blank lines) are packed into a buffer until the
    next one would push it past max_size. The flushed buffer becomes a chunk
    and its last `overlap` characters seed the next buffer, glued directly to
    the incoming paragraph. The seam is shortened so that seam plus paragraph
    never exceeds max_size; a paragraph longer than max_size therefore starts
    its own chunk without a seam and is never split.
    """

    def __init__(self, max_size: int = 1000, overlap: int = 100) -> None:
        if max_size <= 0:
            raise ValueError("max_size must be positive.")
        if overlap < 0 or overlap >= max_size:
            raise ValueError("overlap must be >= 0 and smaller than max_size.")
        self.max_size = max_size
        self.overlap = overlap

    def chunk(self, content: str) -> list[Chunk]:
        """Split content into chunks.

        Args:
            content (str): The note body (frontmatter already removed).

        Returns:
            list[Chunk]: Ordered chunks, never empty. Blank content yields a
                single chunk holding the stripped (possibly empty) text.
        """
        texts: list[str] = []
        buffer = ""

        for paragraph in _PARAGRAPH_BREAK.split(content):
            # leading or trailing blank lines split off as empty paragraphs
            if not paragraph.strip():
                continue
            if buffer.strip() and len(buffer) + len(_PARAGRAPH_SEPARATOR) + len(paragraph) > self.max_size:
                texts.append(buffer.strip())
                buffer = self._seam(buffer, paragraph) + paragraph
            else:
                buffer += (_PARAGRAPH_SEPARATOR if buffer else "") + paragraph

        if buffer.strip():
            texts.append(buffer.strip())

        if not texts:
            texts = [content.strip()]

        return [Chunk(text=text, ordinal=ordinal) for ordinal, text in enumerate(texts)]

    def _seam(self, flushed: str, paragraph: str) -> str:
        room = min(self.overlap, max(0, self.max_size - len(paragraph)))
        return flushed[-room:] if room else ""
