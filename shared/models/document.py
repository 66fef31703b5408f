"""Pydantic models for notes on their way into the vector store.

Hierarchy:
  Document  — one markdown note as handed to the engine by the ingestion caller.
  Chunk     — a bounded slice of a note's body, indexed on its own.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """A markdown note, immutable once passed to the engine.

    The id equals the vault-relative path of the note.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    path: str
    content: str
    frontmatter: dict[str, Any] = Field(default_factory=dict)
    last_modified: datetime


class Chunk(BaseModel):
    """One chunk of a document body, ordinal is its zero-based position."""

    text: str
    ordinal: int = Field(ge=0)
