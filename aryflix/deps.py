from .omdb import OMDbRatings
from .tmdb import TMDBCatalog
from .youtube import YouTubeVideoSearch

_catalog = TMDBCatalog()
_video_search = YouTubeVideoSearch()
_ratings = OMDbRatings()


def get_catalog() -> TMDBCatalog:
    return _catalog


def get_video_search() -> YouTubeVideoSearch:
    return _video_search


def get_ratings_provider() -> OMDbRatings:
    return _ratings
