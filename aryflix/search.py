import asyncio
import logging

from .config import DEFAULT_SEARCH_SETTINGS, SearchSettings
from .deps import get_catalog
from .errors import InvalidInput, SearchFailed, UpstreamUnavailable
from .models import MediaKind, SearchCandidate
from .providers import CatalogSearchProvider
from .scoring import smart_score

logger = logging.getLogger(__name__)


def rank_candidates(
    candidates: list[SearchCandidate],
    query: str,
    settings: SearchSettings = DEFAULT_SEARCH_SETTINGS,
) -> list[SearchCandidate]:
    scored = [
        c.model_copy(
            update={
                "score": smart_score(
                    c.title, query, c.popularity, c.vote_average, c.vote_count, settings.weights
                )
            }
        )
        for c in candidates
    ]
    # sorted() is stable, so equal scores keep movie-before-series order.
    scored = sorted(scored, key=lambda c: c.score, reverse=True)
    return scored[: settings.limit]


async def search(
    query: str,
    catalog: CatalogSearchProvider | None = None,
    settings: SearchSettings = DEFAULT_SEARCH_SETTINGS,
) -> list[SearchCandidate]:
    """Search movies and series together and rank them by ``smart_score``.

    Raises ``InvalidInput`` for a blank query and ``SearchFailed`` when either
    catalog search fails, so an outage is never mistaken for "no matches".
    """
    if not query or not query.strip():
        raise InvalidInput("Search query must not be empty.")
    catalog = catalog or get_catalog()
    query = query.strip()

    movies, series = await asyncio.gather(
        catalog.search_movies(query),
        catalog.search_series(query),
        return_exceptions=True,
    )
    for outcome in (movies, series):
        if isinstance(outcome, UpstreamUnavailable):
            logger.warning("Search for %r failed: %s", query, outcome)
            raise SearchFailed(outcome.provider, outcome.detail) from outcome
        if isinstance(outcome, BaseException):
            raise outcome

    candidates = [SearchCandidate.from_tmdb(raw, MediaKind.MOVIE) for raw in movies if raw.get("id")]
    candidates += [SearchCandidate.from_tmdb(raw, MediaKind.SERIES) for raw in series if raw.get("id")]
    logger.info("Search for %r: %d movies, %d series", query, len(movies), len(series))
    return rank_candidates(candidates, query, settings)
