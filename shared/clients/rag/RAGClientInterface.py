import math
from abc import abstractmethod
from typing import Any

from shared.clients.ClientInterface import ClientInterface
from shared.clients.rag.models.Scroll import ScrollResult, SearchResult

# operations every vector store backend maps to an endpoint path
EXISTS = "exists"
CREATE = "create"
POINTS = "points"
DELETE = "delete"
SEARCH = "search"
SCROLL = "scroll"
COUNT = "count"


class RAGClientInterface(ClientInterface):
    """Vector store holding one collection of note-chunk points.

    Subclasses speak the backend's dialect: they map operations to endpoint
    paths, build filters and request bodies, and unpack responses. The
    request flow itself lives here.
    """

    def _get_client_type(self) -> str:
        return "rag"

    @abstractmethod
    def get_collection_name(self) -> str:
        pass

    @abstractmethod
    def _get_endpoint(self, operation: str) -> str:
        """
        Returns the path for one of EXISTS, CREATE, POINTS, DELETE, SEARCH, SCROLL, COUNT.
        """
        pass

    ##########################################
    ############ FILTER BUILDER ##############
    ##########################################

    @abstractmethod
    def get_match_value_filter(self, key: str, value: Any) -> dict:
        """Points whose payload field `key` equals `value`."""
        pass

    @abstractmethod
    def get_trailing_chunks_filter(self, file_path: str, first_index: int) -> dict:
        """Points of one note whose chunk_index is >= first_index."""
        pass

    @abstractmethod
    def get_text_match_filter(self, keys: list[str], text: str) -> dict:
        """Points where `text` occurs in at least one of the payload fields `keys`."""
        pass

    ##########################################
    ########### PAYLOAD BUILDER ##############
    ##########################################

    @abstractmethod
    def get_create_collection_payload(self, vector_size: int, distance: str) -> dict:
        pass

    @abstractmethod
    def get_upsert_payload(self, points: list[dict]) -> dict:
        pass

    @abstractmethod
    def get_delete_payload(self, filter: dict) -> dict:
        pass

    @abstractmethod
    def get_search_payload(self, vector: list[float], limit: int, score_threshold: float | None, with_payload: bool | list) -> dict:
        pass

    @abstractmethod
    def get_scroll_payload(self, filter: dict | None, with_payload: bool | list, with_vector: bool | list, limit: int | None, offset: str | int | None) -> dict:
        """
        Args:
            filter: None scrolls the whole collection.
            offset: Cursor from the previous page; None starts at the beginning.
        """
        pass

    @abstractmethod
    def get_count_payload(self, filter: dict | None) -> dict:
        pass

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    @abstractmethod
    def extract_exists(self, raw_response: dict) -> bool:
        pass

    @abstractmethod
    def extract_search_result(self, raw_response: dict) -> SearchResult:
        pass

    @abstractmethod
    def extract_scroll_result(self, raw_response: dict) -> ScrollResult:
        """
        Returns one page of points; next_page_offset is None on the last page.
        """
        pass

    @abstractmethod
    def extract_count(self, raw_response: dict) -> int:
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_existence_check(self) -> bool:
        response = await self.do_request("GET", self._get_endpoint(EXISTS), raise_on_error=True)
        return self.extract_exists(response.json())

    async def do_create_collection(self, vector_size: int = 768, distance: str = "Cosine") -> None:
        await self.do_request(
            "PUT",
            self._get_endpoint(CREATE),
            json=self.get_create_collection_payload(vector_size, distance),
            raise_on_error=True,
        )
        self.logging.info(
            "Created collection %r on %s (size=%d, distance=%s).",
            self.get_collection_name(), self.get_engine_name(), vector_size, distance,
        )

    async def do_upsert_points(self, points: list[dict], wait: bool = True) -> None:
        """Insert points, replacing any existing point with the same id.

        Args:
            points: Dicts with "id", "vector" and "payload".
            wait: Return only once the backend has applied the write.
        """
        await self.do_request(
            "PUT",
            self._get_endpoint(POINTS),
            json=self.get_upsert_payload(points),
            params={"wait": str(wait).lower()},
            raise_on_error=True,
        )

    async def do_delete_points_by_filter(self, filter: dict, wait: bool = True) -> None:
        await self.do_request(
            "POST",
            self._get_endpoint(DELETE),
            json=self.get_delete_payload(filter),
            params={"wait": str(wait).lower()},
            raise_on_error=True,
        )

    async def do_search(self, vector: list[float], limit: int, score_threshold: float | None = None, with_payload: bool | list = True) -> SearchResult:
        """Vector similarity search, best match first.

        Args:
            vector: The query embedding.
            limit: Maximum number of points.
            score_threshold: Points scoring below it are left out by the backend.
            with_payload: True, False or the payload fields to return.
        """
        response = await self.do_request(
            "POST",
            self._get_endpoint(SEARCH),
            json=self.get_search_payload(vector, limit, score_threshold, with_payload),
            raise_on_error=True,
        )
        return self.extract_search_result(response.json())

    async def do_scroll(self, filter: dict | None, with_payload: bool | list, with_vector: bool | list, limit: int | None = None, offset: str | int | None = None) -> ScrollResult:
        """Fetch one page of points matching the filter, unscored."""
        response = await self.do_request(
            "POST",
            self._get_endpoint(SCROLL),
            json=self.get_scroll_payload(filter, with_payload, with_vector, limit, offset),
            raise_on_error=True,
        )
        return self.extract_scroll_result(response.json())

    async def do_count(self, filter: dict | None) -> int:
        response = await self.do_request("POST", self._get_endpoint(COUNT), json=self.get_count_payload(filter), raise_on_error=True)
        return self.extract_count(response.json())

    async def do_scroll_all(self, filter: dict | None, with_payload: bool | list, with_vector: bool | list, page_size: int = 1000) -> ScrollResult:
        """Collect every point matching the filter, following page cursors.

        Returns:
            ScrollResult: All points; next_page_offset is None.
        """
        total = await self.do_count(filter)
        pages = max(1, math.ceil(total / page_size))
        points: list[dict] = []
        offset: str | int | None = None
        page = 0
        while True:
            page += 1
            result = await self.do_scroll(filter, with_payload, with_vector, limit=page_size, offset=offset)
            points.extend(result.result)
            self.logging.debug("Scrolled page %d/%d of %r: %d/%d points", page, pages, self.get_collection_name(), len(points), total)
            offset = result.next_page_offset
            if offset is None:
                return ScrollResult(result=points, status="ok", time=0)
