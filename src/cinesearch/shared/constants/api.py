"""
API Configuration Constants

Constants for the TMDB-backed remote catalog.
"""


class TMDBConfig:
    """TMDB API constants."""

    DEFAULT_LANGUAGE = "en-US"
    DEFAULT_REGION = "US"
    IMAGE_BASE_URL = "https://image.tmdb.org/t/p/w500"
    MAX_TRENDING_KEYWORDS = 20

    MEDIA_TYPE_MOVIE = "movie"
    MEDIA_TYPE_TV = "tv"

