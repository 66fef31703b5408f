"""Engine facade.

The three operations the rest of the application depends on: index a note,
remove a note, search the notes.
"""

from datetime import date

from services.note_index.IndexService import IndexService
from services.note_search.SearchService import SearchService
from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.clients.rag.RAGClientInterface import RAGClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EngineConfig
from shared.models.document import Document
from shared.models.search import SearchHit


class NoteSearchEngine:
    """Hybrid search engine over a vault of markdown notes."""

    def __init__(
        self,
        helper_config: HelperConfig,
        rag_client: RAGClientInterface,
        embed_client: EmbedClientInterface,
        engine_config: EngineConfig | None = None,
    ) -> None:
        self.logging = helper_config.get_logger()
        self.config = engine_config or EngineConfig.from_helper_config(helper_config)
        self._index_service = IndexService(
            helper_config=helper_config,
            engine_config=self.config,
            rag_client=rag_client,
            embed_client=embed_client,
        )
        self._search_service = SearchService(
            helper_config=helper_config,
            engine_config=self.config,
            rag_client=rag_client,
            embed_client=embed_client,
        )

    async def initialize(self) -> None:
        """Make sure the backing collection exists."""
        await self._index_service.do_ensure_collection()
        self.logging.info("Note search engine initialized")

    async def index(self, document: Document) -> None:
        """Index (or re-index) one note. All-or-nothing per note."""
        await self._index_service.do_index(document)

    async def remove(self, file_path: str) -> None:
        """Remove every indexed chunk of one note."""
        await self._index_service.do_remove(file_path)

    async def search(self, query: str, limit: int = 10, today: date | None = None) -> list[SearchHit]:
        """Hybrid search; see SearchService.do_search."""
        return await self._search_service.do_search(query, limit=limit, today=today)
