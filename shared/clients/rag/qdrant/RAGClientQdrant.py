from typing import Any

from shared.clients.rag.RAGClientInterface import COUNT, CREATE, DELETE, EXISTS, POINTS, SCROLL, SEARCH, RAGClientInterface
from shared.clients.rag.models.Scroll import ScrollResult, SearchResult
from shared.models.config import EnvConfig

_ENDPOINTS = {
    EXISTS: "/collections/{collection}/exists",
    CREATE: "/collections/{collection}",
    POINTS: "/collections/{collection}/points",
    DELETE: "/collections/{collection}/points/delete",
    SEARCH: "/collections/{collection}/points/search",
    SCROLL: "/collections/{collection}/points/scroll",
    COUNT: "/collections/{collection}/points/count",
}


class RAGClientQdrant(RAGClientInterface):
    """Qdrant over its REST API."""

    def _get_engine_name(self) -> str:
        return "Qdrant"

    def get_collection_name(self) -> str:
        return self.get_setting("COLLECTION")

    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default="http://localhost:6333"),
            EnvConfig(env_key="API_KEY", val_type="string", default=""),
            EnvConfig(env_key="COLLECTION", val_type="string", default="obsidian_notes"),
        ]

    def _get_auth_header(self) -> dict:
        api_key = self.get_setting("API_KEY")
        return {"api-key": api_key} if api_key else {}

    def _get_endpoint_healthcheck(self) -> str:
        return "/healthz"

    def _get_endpoint(self, operation: str) -> str:
        return _ENDPOINTS[operation].format(collection=self.get_collection_name())

    ############ FILTER BUILDER ##############
    def get_match_value_filter(self, key: str, value: Any) -> dict:
        return {"must": [{"key": key, "match": {"value": value}}]}

    def get_trailing_chunks_filter(self, file_path: str, first_index: int) -> dict:
        return {
            "must": [
                {"key": "file_path", "match": {"value": file_path}},
                {"key": "chunk_index", "range": {"gte": first_index}},
            ]
        }

    def get_text_match_filter(self, keys: list[str], text: str) -> dict:
        # without a full-text index qdrant treats "text" as a substring match
        return {"should": [{"key": key, "match": {"text": text}} for key in keys]}

    ########### PAYLOAD BUILDER ##############
    def get_create_collection_payload(self, vector_size: int, distance: str) -> dict:
        return {"vectors": {"size": vector_size, "distance": distance}}

    def get_upsert_payload(self, points: list[dict]) -> dict:
        return {"points": points}

    def get_delete_payload(self, filter: dict) -> dict:
        return {"filter": filter}

    def get_search_payload(self, vector: list[float], limit: int, score_threshold: float | None, with_payload: bool | list) -> dict:
        payload: dict = {"vector": vector, "limit": limit, "with_payload": with_payload}
        if score_threshold is not None:
            payload["score_threshold"] = score_threshold
        return payload

    def get_scroll_payload(self, filter: dict | None, with_payload: bool | list, with_vector: bool | list, limit: int | None, offset: str | int | None) -> dict:
        payload: dict = {"with_payload": with_payload, "with_vector": with_vector}
        if limit is not None:
            payload["limit"] = limit
        if filter:
            payload["filter"] = filter
        if offset is not None:
            payload["offset"] = offset
        return payload

    def get_count_payload(self, filter: dict | None) -> dict:
        return {"exact": True, "filter": filter} if filter else {"exact": True}

    ########### RESPONSE PARSER ##############
    def extract_exists(self, raw_response: dict) -> bool:
        return bool((raw_response.get("result") or {}).get("exists"))

    def extract_search_result(self, raw_response: dict) -> SearchResult:
        return SearchResult(
            result=raw_response.get("result") or [],
            status=raw_response.get("status", "ok"),
            time=raw_response.get("time", 0),
        )

    def extract_scroll_result(self, raw_response: dict) -> ScrollResult:
        result = raw_response.get("result") or {}
        return ScrollResult(
            result=result.get("points") or [],
            status=raw_response.get("status", "ok"),
            time=raw_response.get("time", 0),
            next_page_offset=result.get("next_page_offset"),
        )

    def extract_count(self, raw_response: dict) -> int:
        return int((raw_response.get("result") or {}).get("count", 0))
