"""VectorPoint model — metadata stored alongside each note chunk in a RAG backend."""

from typing import Any

from pydantic import BaseModel


class VectorPoint(BaseModel):
    """Payload stored alongside each vector chunk in a RAG backend.

    file_path and chunk_index together identify the point; the point id is
    derived from them, and deletes of a whole note filter on file_path.

    Attributes:
        file_path:      Vault-relative path of the note (also the document id).
        chunk_index:    Zero-based position of this chunk within the note.
        text:           Raw text content of this chunk.
        title:          Resolved note title (frontmatter, first heading or file stem).
        tags:           Union of frontmatter tags and inline hashtags, deduplicated.
        frontmatter:    The note's parsed YAML frontmatter.
        last_modified:  ISO-8601 modification timestamp of the note.
    """

    file_path: str
    chunk_index: int
    text: str
    title: str
    tags: list[str] = []
    frontmatter: dict[str, Any] = {}
    last_modified: str | None = None
