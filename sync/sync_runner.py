"""Sync runner entry point.

Indexes every markdown note of NOTEBOOK_PATH into Qdrant for hybrid search
and removes vectors of notes that were deleted in the meantime.

Usage:
    python -m sync.sync_runner
"""

import asyncio

from services.engine.NoteSearchEngine import NoteSearchEngine
from shared.clients.embed.EmbedClientManager import EmbedClientManager
from shared.clients.rag.RAGClientManager import RAGClientManager
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import setup_logging
from shared.models.config import EngineConfig
from sync.services.VaultSyncService import VaultSyncService


async def main() -> int:
    """Run the full synchronisation pipeline.

    Returns:
        int: Process exit code.
    """
    logger = setup_logging()
    config = HelperConfig(logger=logger)
    engine_config = EngineConfig.from_helper_config(config)
    embed_client = EmbedClientManager(helper_config=config).get_client()
    rag_client = RAGClientManager(helper_config=config).get_client()

    try:
        # both backends are required, there is nothing to sync without either of them
        for client in (embed_client, rag_client):
            try:
                await client.boot()
                await client.do_healthcheck()
            except Exception as e:
                logger.error("Error booting %s client: %s. Aborting.", client.get_service_name(), e)
                return 1

        try:
            model_size = await embed_client.do_fetch_embedding_vector_size()
            if model_size != engine_config.vector_size:
                logger.error(
                    "Embedding model %r produces %d dimensions but the engine is configured for %d. Aborting.",
                    embed_client.embed_model, model_size, engine_config.vector_size,
                )
                return 1
        except Exception as e:
            logger.warning("Could not verify embedding dimension: %s", e)

        engine = NoteSearchEngine(
            helper_config=config,
            rag_client=rag_client,
            embed_client=embed_client,
            engine_config=engine_config,
        )
        sync_service = VaultSyncService(helper_config=config, engine=engine, rag_client=rag_client)
        report = await sync_service.do_full_sync()
        if report.errors:
            logger.warning("Sync finished with %d failed note(s).", report.errors, color="yellow")
            return 2
        logger.info("Sync finished without errors.", color="green")
        return 0
    finally:
        await embed_client.close()
        await rag_client.close()


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
