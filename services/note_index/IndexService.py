"""Indexing service.

Splits a note into chunks, embeds every chunk via an EmbedClient and upserts
the resulting points into the RAG backend in one pass. Point ids are derived
from (file_path, chunk_index), so re-indexing a note overwrites its points in
place.
"""

import hashlib

from services.note_index.Chunker import Chunker
from services.note_index.NoteMetadata import extract_tags, extract_title
from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.clients.rag.RAGClientInterface import RAGClientInterface
from shared.clients.rag.models.VectorPoint import VectorPoint
from shared.errors import InvalidArgumentError, ServiceUnavailableError
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EngineConfig
from shared.models.document import Document


def make_point_id(file_path: str, chunk_index: int) -> str:
    """Build the deterministic point ID for a note chunk.

    The same (file_path, chunk_index) always maps to the same ID, across runs
    and processes, so re-indexing overwrites rather than duplicates.

    Args:
        file_path (str): Vault-relative path of the note.
        chunk_index (int): Zero-based chunk index within the note.

    Returns:
        str: 32-character hex MD5 digest of "{file_path}_chunk_{chunk_index}".
    """
    return hashlib.md5(f"{file_path}_chunk_{chunk_index}".encode("utf-8")).hexdigest()


class IndexService:
    """Writes notes into and removes notes from the vector store."""

    def __init__(
        self,
        helper_config: HelperConfig,
        engine_config: EngineConfig,
        rag_client: RAGClientInterface,
        embed_client: EmbedClientInterface,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._config = engine_config
        self._rag_client = rag_client
        self._embed_client = embed_client
        self._chunker = Chunker(max_size=engine_config.chunk_size, overlap=engine_config.chunk_overlap)

    ##########################################
    ############### COLLECTION ###############
    ##########################################

    async def do_ensure_collection(self) -> bool:
        """Create the collection if it does not exist yet.

        Returns:
            bool: True if the collection was created, False if it already existed.
        """
        if await self._rag_client.do_existence_check():
            self.logging.info("Collection %r already exists.", self._rag_client.get_collection_name())
            return False
        self.logging.info("Creating collection %r", self._rag_client.get_collection_name())
        await self._rag_client.do_create_collection(vector_size=self._config.vector_size, distance=self._config.distance)
        return True

    ##########################################
    ################ INDEXING ################
    ##########################################

    async def do_index(self, document: Document) -> int:
        """Chunk, embed and upsert a single note.

        All chunks are embedded before anything is written; an embedding
        failure leaves the store untouched for this note. Once the upsert
        succeeded the note counts as indexed: if dropping stale trailing chunks
        of a shrunk note fails, that is logged as a warning and they stay until
        the next re-index.

        Args:
            document (Document): The note to index.

        Returns:
            int: Number of points upserted.

        Raises:
            InvalidArgumentError: If the document has no path.
            ServiceUnavailableError: If embedding or upsert fails.
        """
        if not document.path or not document.path.strip():
            raise InvalidArgumentError("Document path must not be empty.")

        self.logging.info("Processing document: %s", document.path)
        points = await self.build_points(document)

        await self._rag_client.do_upsert_points(points, wait=True)

        # the note may have shrunk; drop points past its last chunk
        try:
            await self._rag_client.do_delete_points_by_filter(
                self._rag_client.get_trailing_chunks_filter(document.path, len(points)), wait=True
            )
        except ServiceUnavailableError as exc:
            self.logging.warning(
                "Indexed %s but could not drop chunks past index %d: %s", document.path, len(points) - 1, exc
            )

        self.logging.info("Processed %d chunks for %s", len(points), document.path)
        return len(points)

    async def build_points(self, document: Document) -> list[dict]:
        """Build the upsert-ready points for a note, embedding each chunk in order.

        Args:
            document (Document): The note to convert.

        Returns:
            list[dict]: Points with "id", "vector" and "payload".

        Raises:
            ServiceUnavailableError: If any chunk cannot be embedded.
        """
        chunks = self._chunker.chunk(document.content)
        title = extract_title(document)
        tags = extract_tags(document)
        last_modified = document.last_modified.isoformat()

        points: list[dict] = []
        for chunk in chunks:
            try:
                vector = await self._embed_client.do_embed_text(chunk.text, expected_size=self._config.vector_size)
            except Exception as exc:
                self.logging.error(
                    "Embedding failed for %s chunk %d: %s", document.path, chunk.ordinal, exc
                )
                raise

            payload = VectorPoint(
                file_path=document.path,
                chunk_index=chunk.ordinal,
                text=chunk.text,
                title=title,
                tags=tags,
                frontmatter=document.frontmatter,
                last_modified=last_modified,
            )
            points.append({
                "id": make_point_id(document.path, chunk.ordinal),
                "vector": vector,
                "payload": payload.model_dump(mode="json"),
            })
        return points

    async def do_remove(self, file_path: str) -> None:
        """Delete every point that belongs to the given note.

        Args:
            file_path (str): Vault-relative path of the note.

        Raises:
            InvalidArgumentError: If file_path is empty.
            ServiceUnavailableError: If the delete request fails.
        """
        if not file_path or not file_path.strip():
            raise InvalidArgumentError("File path must not be empty.")

        self.logging.info("Deleting document: %s", file_path)
        await self._rag_client.do_delete_points_by_filter(
            self._rag_client.get_match_value_filter("file_path", file_path), wait=True
        )
        self.logging.info("Deleted document: %s", file_path)
