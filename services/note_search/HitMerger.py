"""Keyed max-merge of search candidates."""

from functools import reduce
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

from shared.models.search import SearchHit

HitKey = tuple[str, int]
Combinator = Callable[[SearchHit, SearchHit], SearchHit]


def keep_if_strictly_greater(current: SearchHit, candidate: SearchHit) -> SearchHit:
    """Replace the current hit only when the candidate scores strictly higher; ties keep the current one."""
    return candidate if candidate.score > current.score else current


def merge_hits(
    candidates: Iterable[tuple[HitKey, SearchHit]],
    combine: Combinator = keep_if_strictly_greater,
    initial: Mapping[HitKey, SearchHit] | None = None,
) -> Mapping[HitKey, SearchHit]:
    """Fold (key, hit) pairs into one hit per key.

    Args:
        candidates: Pairs in registration order.
        combine: Decides between the registered hit and a new candidate for the same key.
        initial: Hits already merged, if any.

    Returns:
        Mapping[HitKey, SearchHit]: Read-only mapping of key to winning hit.
    """
    def step(acc: dict[HitKey, SearchHit], pair: tuple[HitKey, SearchHit]) -> dict[HitKey, SearchHit]:
        key, hit = pair
        current = acc.get(key)
        acc[key] = hit if current is None else combine(current, hit)
        return acc

    merged = reduce(step, candidates, dict(initial or {}))
    return MappingProxyType(merged)


def rank_hits(merged: Mapping[HitKey, SearchHit], limit: int) -> list[SearchHit]:
    """Sort merged hits by descending score and keep the best `limit`.

    The sort is stable, so equal scores keep their registration order.
    """
    return sorted(merged.values(), key=lambda hit: hit.score, reverse=True)[:limit]
