"""Hybrid search service.

For every query variant a semantic leg (embedding + vector similarity) and a
lexical leg (substring filter + heuristic score) run; all candidates are then
merged into one hit per (file_path, chunk_index) and ranked.

Variants run as concurrent tasks. Their candidates are collected first and
merged once, in a fixed order (all semantic candidates, then all lexical
ones, variants in canonical order), so task completion order never changes
the result.
"""

import asyncio
from datetime import date

from services.note_search.HitMerger import HitKey, merge_hits, rank_hits
from services.note_search.QueryExpander import expand_query
from services.note_search.TextScorer import DEFAULT_WEIGHTS, TextScoreWeights, calculate_text_score
from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.clients.rag.RAGClientInterface import RAGClientInterface
from shared.errors import InvalidArgumentError
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EngineConfig
from shared.models.search import MatchType, SearchHit

LEXICAL_FIELDS = ["text", "title", "file_path"]

Candidates = list[tuple[HitKey, SearchHit]]


def order_variants(query: str, variants: set[str]) -> list[str]:
    """Canonical processing order: the original query first, the rest sorted."""
    return [query] + sorted(v for v in variants if v != query)


def build_hit(payload: dict, score: float, variant: str, match_type: MatchType) -> SearchHit:
    """Build a SearchHit from a stored point payload."""
    return SearchHit(
        score=max(0.0, min(float(score), 1.0)),
        matched_query=variant,
        match_type=match_type,
        file_path=payload.get("file_path", ""),
        chunk_index=int(payload.get("chunk_index", 0)),
        text=payload.get("text", ""),
        title=payload.get("title") or "",
        tags=payload.get("tags") or [],
        frontmatter=payload.get("frontmatter") or {},
        last_modified=payload.get("last_modified"),
    )


class SearchService:
    """Runs hybrid (semantic + lexical) searches over the indexed notes."""

    def __init__(
        self,
        helper_config: HelperConfig,
        engine_config: EngineConfig,
        rag_client: RAGClientInterface,
        embed_client: EmbedClientInterface,
        weights: TextScoreWeights = DEFAULT_WEIGHTS,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._config = engine_config
        self._rag_client = rag_client
        self._embed_client = embed_client
        self._weights = weights

    ##########################################
    ################ CORE ####################
    ##########################################

    async def do_search(self, query: str, limit: int = 10, today: date | None = None) -> list[SearchHit]:
        """Search the notes for a free-text query.

        Args:
            query (str): The user query.
            limit (int): Maximum number of hits to return.
            today (date | None): Reference date for date variants (defaults to today).

        Returns:
            list[SearchHit]: At most `limit` hits, best first, one per chunk.

        Raises:
            InvalidArgumentError: If the query is blank or limit < 1.
            ServiceUnavailableError: If the semantic leg of any variant fails.
        """
        if not isinstance(query, str) or not query.strip():
            raise InvalidArgumentError("Query must not be empty.")
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise InvalidArgumentError(f"Limit must be a positive integer, got {limit!r}.")

        variants = order_variants(query, expand_query(query, today=today))
        self.logging.info("Searching %r (limit=%d) with %d variants", query[:80], limit, len(variants))
        self.logging.debug("Variants for %r: %s", query[:80], variants)

        per_variant = await self._run_variants(variants, limit)

        semantic: Candidates = [pair for sem, _ in per_variant for pair in sem]
        lexical: Candidates = [pair for _, lex in per_variant for pair in lex]
        hits = rank_hits(merge_hits(semantic + lexical), limit)

        self.logging.info(
            "Search complete for %r: %d semantic, %d lexical candidates, %d hits returned",
            query[:80], len(semantic), len(lexical), len(hits),
        )
        return hits

    async def _run_variants(self, variants: list[str], limit: int) -> list[tuple[Candidates, Candidates]]:
        """Run both legs for every variant with bounded concurrency.

        Results come back in variant order. If any task fails, the others are
        cancelled and the error propagates.
        """
        sem = asyncio.Semaphore(self._config.search_concurrency)

        async def run(variant: str) -> tuple[Candidates, Candidates]:
            async with sem:
                semantic = await self._semantic_leg(variant, limit)
                lexical = await self._lexical_leg(variant, limit)
                return semantic, lexical

        tasks = [asyncio.ensure_future(run(variant)) for variant in variants]
        try:
            return await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    ##########################################
    ################ LEGS ####################
    ##########################################

    async def _semantic_leg(self, variant: str, limit: int) -> Candidates:
        """Vector similarity candidates for one variant. Errors propagate."""
        vector = await self._embed_client.do_embed_text(variant, expected_size=self._config.vector_size)
        search_result = await self._rag_client.do_search(
            vector=vector,
            limit=limit * 2,
            score_threshold=self._config.score_threshold,
            with_payload=True,
        )
        self.logging.debug("Semantic query %r returned %d results", variant, len(search_result.result))

        candidates: Candidates = []
        for point in search_result.result:
            payload = point.get("payload") or {}
            hit = build_hit(payload, point.get("score", 0.0), variant, MatchType.SEMANTIC)
            candidates.append((hit.key, hit))
        return candidates

    async def _lexical_leg(self, variant: str, limit: int) -> Candidates:
        """Substring-filter candidates for one variant.

        Supplementary: any error is logged and the variant contributes no
        lexical candidates.
        """
        try:
            return await self._lexical_candidates(variant, limit)
        except Exception as exc:
            self.logging.warning("Full-text query %r failed, continuing without it: %s", variant, exc)
            return []

    async def _lexical_candidates(self, variant: str, limit: int) -> Candidates:
        scroll_result = await self._rag_client.do_scroll(
            filter=self._rag_client.get_text_match_filter(LEXICAL_FIELDS, variant),
            with_payload=True,
            with_vector=False,
            limit=limit * 2,
        )
        self.logging.debug("Full-text query %r returned %d results", variant, len(scroll_result.result))

        candidates: Candidates = []
        for point in scroll_result.result:
            payload = point.get("payload") or {}
            score = calculate_text_score(
                variant,
                text=payload.get("text", ""),
                title=payload.get("title") or "",
                file_path=payload.get("file_path", ""),
                weights=self._weights,
            )
            hit = build_hit(payload, score, variant, MatchType.LEXICAL)
            candidates.append((hit.key, hit))
        return candidates
