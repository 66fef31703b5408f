"""Pydantic models for search results."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class MatchType(str, Enum):
    """Which retrieval leg produced a hit."""

    SEMANTIC = "semantic"
    LEXICAL = "lexical"


class SearchHit(BaseModel):
    """A single ranked passage returned by a search call.

    Exactly one hit exists per (file_path, chunk_index) within one result list.
    """

    score: float = Field(ge=0.0, le=1.0)
    matched_query: str
    match_type: MatchType
    file_path: str
    chunk_index: int
    text: str
    title: str = ""
    tags: list[str] = []
    frontmatter: dict[str, Any] = {}
    last_modified: str | None = None

    @property
    def key(self) -> tuple[str, int]:
        return (self.file_path, self.chunk_index)
