import os

from pydantic import BaseModel, ConfigDict, Field

OFFICIAL_CHANNELS = ("netflix", "hbo", "amazon prime", "disney", "warner")


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "")
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip()


def tmdb_timeout() -> float:
    return _env_float("TMDB_TIMEOUT", 10.0)


def omdb_timeout() -> float:
    return _env_float("OMDB_TIMEOUT", 8.0)


def youtube_timeout() -> float:
    return _env_float("YOUTUBE_TIMEOUT", 10.0)


def rate_limit() -> str:
    return env_str("SEARCH_RATE_LIMIT", "60/minute") or "60/minute"


def log_level() -> str:
    return (env_str("LOG_LEVEL", "INFO") or "INFO").upper()


def cors_origins() -> list[str]:
    origins = os.environ.get("CORS_ORIGINS", "").split(",")
    return [o.strip() for o in origins if o.strip()]


class RelevanceWeights(BaseModel):
    """Weights for ranking catalog search candidates.

    Popularity is the dominant term, the quality bonus only applies once a
    title has more than ``quality_vote_threshold`` votes, and the text bonuses
    keep results topical.
    """

    model_config = ConfigDict(frozen=True)

    popularity_multiplier: float = 50.0
    quality_max: float = 20.0
    quality_vote_threshold: int = 100
    contains_bonus: float = 30.0
    exact_bonus: float = 20.0
    prefix_bonus: float = 15.0
    word_overlap_bonus: float = 5.0


class TrailerWeights(BaseModel):
    model_config = ConfigDict(frozen=True)

    title_match: int = 10
    year_match: int = 5
    official: int = 8
    trailer: int = 6
    official_channel: int = 10
    reaction: int = -10
    review: int = -10
    fan_made: int = -15
    official_channels: tuple[str, ...] = OFFICIAL_CHANNELS
    # Lowest score a fallback video may have and still be chosen.
    min_score: int = 0


class SearchSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    limit: int = Field(default=20, ge=1)
    weights: RelevanceWeights = RelevanceWeights()


class TrailerSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_results: int = Field(default=10, ge=1)
    weights: TrailerWeights = TrailerWeights()


DEFAULT_RELEVANCE_WEIGHTS = RelevanceWeights()
DEFAULT_TRAILER_WEIGHTS = TrailerWeights()
DEFAULT_SEARCH_SETTINGS = SearchSettings()
DEFAULT_TRAILER_SETTINGS = TrailerSettings()
