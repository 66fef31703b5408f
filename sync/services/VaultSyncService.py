"""Vault synchronisation service.

Reads every markdown note of the vault, indexes it through the note search
engine and removes vectors of notes that no longer exist on disk.
"""

import asyncio
from dataclasses import dataclass
from pathlib import Path

from services.engine.NoteSearchEngine import NoteSearchEngine
from shared.clients.rag.RAGClientInterface import RAGClientInterface
from shared.helper.HelperConfig import HelperConfig
from sync.services.NoteLoader import iter_note_paths, load_note


@dataclass
class SyncReport:
    synced: int = 0
    errors: int = 0
    removed: int = 0


class VaultSyncService:
    """Orchestrates a full sync of one vault directory into the vector store."""

    def __init__(
        self,
        helper_config: HelperConfig,
        engine: NoteSearchEngine,
        rag_client: RAGClientInterface,
        notebook_path: Path | None = None,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._engine = engine
        self._rag_client = rag_client
        self._notebook_path = Path(notebook_path) if notebook_path else helper_config.get_path_val("NOTEBOOK_PATH")
        self._doc_concurrency = int(helper_config.get_number_val("SYNC_DOC_CONCURRENCY", default=5))

    ##########################################
    ############### CORE SYNC ################
    ##########################################

    async def do_full_sync(self) -> SyncReport:
        """Index all notes of the vault and clean up vectors of deleted notes.

        A failing note is logged and counted; it never stops the others.

        Returns:
            SyncReport: Counts of synced notes, failed notes and removed notes.
        """
        if not self._notebook_path.is_dir():
            raise ValueError(f"Notebook path {str(self._notebook_path)!r} is not a directory.")

        self.logging.info("Starting full sync of %s", self._notebook_path)
        await self._engine.initialize()

        note_paths = list(iter_note_paths(self._notebook_path))
        self.logging.info("Processing %d existing files", len(note_paths))

        sem = asyncio.Semaphore(self._doc_concurrency)
        results = await asyncio.gather(
            *[self._sync_note(path, sem) for path in note_paths],
            return_exceptions=True,
        )

        report = SyncReport()
        for path, result in zip(note_paths, results):
            if isinstance(result, BaseException):
                report.errors += 1
                self.logging.error("Error processing file %s: %s", path, result)
            else:
                report.synced += 1

        report.removed = await self._cleanup_orphans(set(note_paths))
        self.logging.info(
            "Sync complete: %d synced, %d errors, %d removed.",
            report.synced, report.errors, report.removed,
        )
        return report

    async def _sync_note(self, relative_path: str, sem: asyncio.Semaphore) -> None:
        async with sem:
            document = await asyncio.to_thread(load_note, self._notebook_path, relative_path)
            await self._engine.index(document)

    ##########################################
    ############ ORPHAN CLEANUP ##############
    ##########################################

    async def _cleanup_orphans(self, disk_paths: set[str]) -> int:
        """Remove the vectors of notes that are indexed but no longer on disk.

        Args:
            disk_paths (set[str]): Relative paths of all notes currently in the vault.

        Returns:
            int: Number of notes whose vectors were removed.
        """
        try:
            scroll_result = await self._rag_client.do_scroll_all(
                filter=None,
                with_payload=["file_path"],
                with_vector=False,
            )
        except Exception as exc:
            self.logging.error("Orphan cleanup scroll failed: %s. Skipping cleanup.", exc)
            return 0

        indexed_paths = {
            (point.get("payload") or {}).get("file_path")
            for point in scroll_result.result
        }
        indexed_paths.discard(None)

        orphan_paths = sorted(indexed_paths - disk_paths)
        if not orphan_paths:
            self.logging.info("Orphan cleanup: no stale notes found.")
            return 0

        self.logging.info("Orphan cleanup: removing vectors for %d stale note(s).", len(orphan_paths))
        removed = 0
        for path in orphan_paths:
            try:
                await self._engine.remove(path)
                removed += 1
            except Exception as exc:
                self.logging.error("Orphan cleanup: failed to delete vectors for %s: %s", path, exc)
        return removed
