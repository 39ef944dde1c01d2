"""Ranking score for catalog search candidates.

The score blends three signals:

- popularity, on a log scale so that blockbusters do not drown everything else;
- quality, a bonus proportional to the average rating that only applies once
  a title has enough votes to be trusted;
- textual relevance of the title to the query, plus a small bonus for every
  pair of overlapping words.

Popularity dominates on purpose: a well known near-match should outrank an
obscure title that happens to match the query exactly.
"""

import math

from .config import DEFAULT_RELEVANCE_WEIGHTS, RelevanceWeights
from .text import normalize_text


def popularity_score(popularity: float | None, weights: RelevanceWeights = DEFAULT_RELEVANCE_WEIGHTS) -> float:
    value = popularity or 0.0
    if not math.isfinite(value):
        value = 0.0
    return math.log(max(value, 1.0)) * weights.popularity_multiplier


def quality_score(
    rating: float | None,
    vote_count: int | None,
    weights: RelevanceWeights = DEFAULT_RELEVANCE_WEIGHTS,
) -> float:
    if not rating or not math.isfinite(rating) or rating < 0:
        return 0.0
    if (vote_count or 0) <= weights.quality_vote_threshold:
        return 0.0
    return (min(rating, 10.0) / 10.0) * weights.quality_max


def relevance_score(title: str, query: str, weights: RelevanceWeights = DEFAULT_RELEVANCE_WEIGHTS) -> float:
    """Text-match bonus of ``title`` against ``query``.

    An empty query contributes nothing, even though it is technically a
    prefix of every title.
    """
    title_norm = normalize_text(title)
    query_norm = normalize_text(query)
    if not query_norm:
        return 0.0

    score = 0.0
    if query_norm in title_norm:
        score += weights.contains_bonus
        if title_norm == query_norm:
            score += weights.exact_bonus
        if title_norm.startswith(query_norm):
            score += weights.prefix_bonus

    title_words = title_norm.split()
    matches = 0
    for query_word in query_norm.split():
        for title_word in title_words:
            if query_word in title_word or title_word in query_word:
                matches += 1
    return score + matches * weights.word_overlap_bonus


def smart_score(
    title: str,
    query: str,
    popularity: float | None,
    rating: float | None,
    vote_count: int | None,
    weights: RelevanceWeights = DEFAULT_RELEVANCE_WEIGHTS,
) -> float:
    return (
        popularity_score(popularity, weights)
        + quality_score(rating, vote_count, weights)
        + relevance_score(title, query, weights)
    )
