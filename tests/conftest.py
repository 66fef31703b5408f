"""Shared fixtures: in-memory stand-ins for the embedding service and Qdrant."""

import copy
import hashlib
import logging
import math
import re
from datetime import datetime, timezone
from typing import Any, Callable

import pytest

from shared.clients.rag.models.Scroll import ScrollResult, SearchResult
from shared.errors import ServiceUnavailableError
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EngineConfig
from shared.models.document import Document

DIMS = 768


def _bucket(token: str) -> int:
    return int(hashlib.md5(token.encode("utf-8")).hexdigest(), 16) % DIMS


def bag_of_words_vector(text: str) -> list[float]:
    """Deterministic bag-of-words embedding, so similar texts get similar vectors."""
    vector = [0.0] * DIMS
    for word in re.findall(r"\w+", text.lower()):
        vector[_bucket(word)] += 1.0
    if not any(vector):
        vector[0] = 1.0
    return vector


def exact_text_vector(text: str) -> list[float]:
    """One-hot embedding keyed on the exact text; used to script per-variant results."""
    vector = [0.0] * DIMS
    vector[_bucket("exact:" + text)] = 1.0
    return vector


def make_document(path: str, content: str, frontmatter: dict | None = None) -> Document:
    return Document(
        id=path,
        path=path,
        content=content,
        frontmatter=frontmatter or {},
        last_modified=datetime(2025, 7, 22, 9, 30, tzinfo=timezone.utc),
    )


def make_payload(file_path: str, chunk_index: int, text: str, title: str = "", tags: list[str] | None = None) -> dict:
    return {
        "file_path": file_path,
        "chunk_index": chunk_index,
        "text": text,
        "title": title,
        "tags": tags or [],
        "frontmatter": {},
        "last_modified": "2025-07-22T09:30:00+00:00",
    }


class FakeEmbedClient:
    """Stands in for EmbedClientInterface; records every text it embeds."""

    embed_model = "fake-embed"

    def __init__(self, vectorizer: Callable[[str], list[float]] = bag_of_words_vector) -> None:
        self.vectorizer = vectorizer
        self.calls: list[str] = []
        self.fail_all = False
        self.fail_on_substring: str | None = None

    def get_service_name(self) -> str:
        return "embed/fake"

    async def do_embed_text(self, text: str, expected_size: int | None = None) -> list[float]:
        self.calls.append(text)
        if self.fail_all or (self.fail_on_substring and self.fail_on_substring in text):
            raise ServiceUnavailableError("embedding service down", service="embed/fake")
        vector = self.vectorizer(text)
        if expected_size is not None and len(vector) != expected_size:
            raise ServiceUnavailableError("wrong dimension", service="embed/fake")
        return vector


class InMemoryRAGClient:
    """Stands in for RAGClientInterface, evaluating Qdrant-style filters in memory."""

    def __init__(self) -> None:
        self.points: dict[str, dict] = {}
        self.collection_exists = False
        self.created_with: tuple[int, str] | None = None
        self.upsert_calls: list[list[dict]] = []
        self.delete_calls: list[dict] = []
        self.scroll_filters: list[dict | None] = []
        self.fail_scroll = False
        self.fail_search = False
        self.fail_delete = False

    def get_collection_name(self) -> str:
        return "test_notes"

    def get_service_name(self) -> str:
        return "rag/memory"

    ################ FILTER BUILDER ##################
    def get_match_value_filter(self, key: str, value: Any) -> dict:
        return {"must": [{"key": key, "match": {"value": value}}]}

    def get_trailing_chunks_filter(self, file_path: str, first_index: int) -> dict:
        return {"must": [
            {"key": "file_path", "match": {"value": file_path}},
            {"key": "chunk_index", "range": {"gte": first_index}},
        ]}

    def get_text_match_filter(self, keys: list[str], text: str) -> dict:
        return {"should": [{"key": key, "match": {"text": text}} for key in keys]}

    ################ REQUESTS ##################
    async def do_existence_check(self) -> bool:
        return self.collection_exists

    async def do_create_collection(self, vector_size: int = 768, distance: str = "Cosine") -> None:
        self.collection_exists = True
        self.created_with = (vector_size, distance)

    async def do_upsert_points(self, points: list[dict], wait: bool = True) -> None:
        self.upsert_calls.append(points)
        for point in points:
            self.points[point["id"]] = copy.deepcopy(point)

    async def do_delete_points_by_filter(self, filter: dict, wait: bool = True) -> None:
        self.delete_calls.append(filter)
        if self.fail_delete:
            raise ServiceUnavailableError("delete failed", service="rag/memory")
        self.points = {
            point_id: point for point_id, point in self.points.items()
            if not _matches(filter, point["payload"])
        }

    async def do_search(self, vector: list[float], limit: int, score_threshold: float | None = None, with_payload=True) -> SearchResult:
        if self.fail_search:
            raise ServiceUnavailableError("search failed", service="rag/memory")
        scored = []
        for point_id, point in self.points.items():
            score = _cosine(vector, point["vector"])
            if score_threshold is not None and score < score_threshold:
                continue
            scored.append({"id": point_id, "score": score, "payload": copy.deepcopy(point["payload"])})
        scored.sort(key=lambda p: p["score"], reverse=True)
        return SearchResult(result=scored[:limit], status="ok", time=0)

    async def do_scroll(self, filter: dict | None, with_payload=True, with_vector=False, limit: int | None = None, offset=None) -> ScrollResult:
        self.scroll_filters.append(filter)
        if self.fail_scroll:
            raise ServiceUnavailableError("scroll failed", service="rag/memory")
        matched = [
            {"id": point_id, "payload": copy.deepcopy(point["payload"])}
            for point_id, point in sorted(self.points.items())
            if filter is None or _matches(filter, point["payload"])
        ]
        return ScrollResult(result=matched[:limit] if limit else matched, status="ok", time=0)

    async def do_scroll_all(self, filter: dict | None, with_payload=True, with_vector=False) -> ScrollResult:
        return await self.do_scroll(filter, with_payload, with_vector, limit=None)

    ################ HELPERS ##################
    def paths(self) -> set[str]:
        return {point["payload"]["file_path"] for point in self.points.values()}


class ScriptedRAGClient(InMemoryRAGClient):
    """Returns canned results per query variant instead of evaluating anything.

    Pair with FakeEmbedClient(vectorizer=exact_text_vector).
    """

    def __init__(self) -> None:
        super().__init__()
        self.semantic: dict[tuple, list[dict]] = {}
        self.lexical: dict[str, list[dict]] = {}
        self.fail_scroll_on: set[str] = set()

    def script_semantic(self, variant: str, points: list[dict]) -> None:
        self.semantic[tuple(exact_text_vector(variant))] = points

    def script_lexical(self, variant: str, payloads: list[dict]) -> None:
        self.lexical[variant] = [{"id": str(i), "payload": payload} for i, payload in enumerate(payloads)]

    async def do_search(self, vector, limit, score_threshold=None, with_payload=True) -> SearchResult:
        if self.fail_search:
            raise ServiceUnavailableError("search failed", service="rag/scripted")
        return SearchResult(result=self.semantic.get(tuple(vector), [])[:limit], status="ok", time=0)

    async def do_scroll(self, filter, with_payload=True, with_vector=False, limit=None, offset=None) -> ScrollResult:
        self.scroll_filters.append(filter)
        variant = filter["should"][0]["match"]["text"]
        if self.fail_scroll or variant in self.fail_scroll_on:
            raise ServiceUnavailableError("scroll failed", service="rag/scripted")
        return ScrollResult(result=self.lexical.get(variant, [])[:limit], status="ok", time=0)


def _matches(filter: dict, payload: dict) -> bool:
    must = filter.get("must", [])
    should = filter.get("should", [])
    if must and not all(_condition(c, payload) for c in must):
        return False
    if should and not any(_condition(c, payload) for c in should):
        return False
    return True


def _condition(condition: dict, payload: dict) -> bool:
    value = payload.get(condition["key"])
    if "match" in condition:
        match = condition["match"]
        if "value" in match:
            return value == match["value"]
        if "text" in match:
            return isinstance(value, str) and match["text"] in value
    if "range" in condition:
        bounds = condition["range"]
        return value is not None and ("gte" not in bounds or value >= bounds["gte"])
    return False


def _cosine(a: list[float], b: list[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return dot / norm if norm else 0.0


@pytest.fixture
def helper_config() -> HelperConfig:
    return HelperConfig(logger=logging.getLogger("tests"))


@pytest.fixture
def engine_config() -> EngineConfig:
    return EngineConfig()


@pytest.fixture
def embed_client() -> FakeEmbedClient:
    return FakeEmbedClient()


@pytest.fixture
def rag_client() -> InMemoryRAGClient:
    return InMemoryRAGClient()
