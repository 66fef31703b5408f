"""Heuristic scoring of lexical (substring) matches."""

from pydantic import BaseModel


class TextScoreWeights(BaseModel):
    """Additive weights of the lexical score. The sum is capped at `cap`."""

    base: float = 0.5
    phrase_in_text: float = 0.3
    phrase_in_title: float = 0.4
    phrase_in_path: float = 0.2
    word_in_text: float = 0.1
    word_in_title: float = 0.15
    word_in_path: float = 0.05
    text_starts_with_phrase: float = 0.2
    exact_match_bonus: float = 0.2
    min_word_length: int = 3
    cap: float = 1.0


DEFAULT_WEIGHTS = TextScoreWeights()


def calculate_text_score(query: str, text: str, title: str = "", file_path: str = "", weights: TextScoreWeights = DEFAULT_WEIGHTS) -> float:
    """Score how well a point's payload matches a query variant literally.

    All comparisons are case-insensitive. The exact-match bonus is added on top
    of the phrase/word bonuses whenever the chunk text contains the variant,
    and the cap is applied once, after every bonus.

    Args:
        query (str): The query variant.
        text (str): The chunk text.
        title (str): The note title.
        file_path (str): The note path.
        weights (TextScoreWeights): The weight table.

    Returns:
        float: Score in [0, weights.cap].
    """
    query_lower = query.lower()
    text_lower = (text or "").lower()
    title_lower = (title or "").lower()
    path_lower = (file_path or "").lower()

    score = weights.base

    if query_lower in text_lower:
        score += weights.phrase_in_text
    if query_lower in title_lower:
        score += weights.phrase_in_title
    if query_lower in path_lower:
        score += weights.phrase_in_path

    for word in query_lower.split():
        if len(word) < weights.min_word_length:
            continue
        if word in text_lower:
            score += weights.word_in_text
        if word in title_lower:
            score += weights.word_in_title
        if word in path_lower:
            score += weights.word_in_path

    if text_lower.startswith(query_lower):
        score += weights.text_starts_with_phrase

    if query_lower in text_lower:
        score += weights.exact_match_bonus

    return min(score, weights.cap)
