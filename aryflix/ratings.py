import logging

from .deps import get_ratings_provider
from .errors import InvalidInput
from .fallback import first_result
from .models import RatingPair
from .providers import RatingsProvider
from .text import parse_leading_number

IMDB_SOURCE = "Internet Movie Database"
ROTTEN_TOMATOES_SOURCE = "Rotten Tomatoes"

logger = logging.getLogger(__name__)


def _parse_imdb(value) -> float | None:
    parsed = parse_leading_number(value)
    if parsed is None or parsed > 10.0:
        return None
    return parsed


def _parse_rotten(value) -> int | None:
    parsed = parse_leading_number(value)
    if parsed is None or parsed > 100:
        return None
    return int(parsed)


def extract_ratings(entries: list[dict] | None) -> RatingPair:
    """Pick the IMDb and Rotten Tomatoes values out of OMDb's rating list.

    Other sources are ignored. A missing or unparsable entry stays ``None``.
    """
    imdb = None
    rotten = None
    for entry in entries or []:
        source = entry.get("Source")
        value = entry.get("Value")
        if source == IMDB_SOURCE:
            imdb = _parse_imdb(value)
        elif source == ROTTEN_TOMATOES_SOURCE:
            rotten = _parse_rotten(value)
    return RatingPair(imdb=imdb, rotten_tomatoes=rotten)


async def get_ratings(
    title: str | None,
    year: int | None,
    imdb_id: str | None,
    provider: RatingsProvider | None = None,
) -> RatingPair:
    """Ratings for one title, looked up by IMDb id first and title + year second.

    The title lookup only runs when the id lookup is unavailable or found
    neither score. A title that cannot be found yields an empty pair; transport
    failures raise ``UpstreamUnavailable``.
    """
    provider = provider or get_ratings_provider()
    imdb_id = (imdb_id or "").strip() or None
    title = (title or "").strip() or None
    if not imdb_id and not (title and year):
        raise InvalidInput("Either an IMDb id or both title and year are required.")

    async def by_id() -> RatingPair | None:
        pair = extract_ratings(await provider.lookup_by_id(imdb_id))
        if pair.has_any:
            logger.debug("Ratings for %s resolved by id", imdb_id)
            return pair
        return None

    async def by_title() -> RatingPair | None:
        logger.debug("Looking up ratings by title: %s (%s)", title, year)
        return extract_ratings(await provider.lookup_by_title_year(title, year))

    stages = []
    if imdb_id:
        stages.append(by_id)
    if title and year:
        stages.append(by_title)
    pair = await first_result(*stages)
    return pair if pair is not None else RatingPair()
