"""
Genre Constants

Vocabulary used by the genre bypass and the TMDB genre id table used to
fill the auxiliary ``Genre`` field of catalog items.
"""

from typing import ClassVar


class GenreVocabulary:
    """Broad genre/category keywords that always go to the remote catalog."""

    KEYWORDS: ClassVar[tuple[str, ...]] = (
        "action",
        "adventure",
        "animation",
        "comedy",
        "crime",
        "documentary",
        "drama",
        "family",
        "fantasy",
        "history",
        "horror",
        "music",
        "mystery",
        "romance",
        "science fiction",
        "sci-fi",
        "sci fi",
        "scifi",
        "thriller",
        "war",
        "western",
        "anime",
        "bollywood",
        "hollywood",
        "korean",
        "japanese",
        "kids",
        "reality",
        "soap",
        "talk",
    )


class TMDBGenres:
    """TMDB genre ids for movies and TV."""

    NAMES: ClassVar[dict[int, str]] = {
        28: "Action",
        12: "Adventure",
        16: "Animation",
        35: "Comedy",
        80: "Crime",
        99: "Documentary",
        18: "Drama",
        10751: "Family",
        14: "Fantasy",
        36: "History",
        27: "Horror",
        10402: "Music",
        9648: "Mystery",
        10749: "Romance",
        878: "Science Fiction",
        10770: "TV Movie",
        53: "Thriller",
        10752: "War",
        37: "Western",
        10759: "Action & Adventure",
        10762: "Kids",
        10763: "News",
        10764: "Reality",
        10765: "Sci-Fi & Fantasy",
        10766: "Soap",
        10767: "Talk",
        10768: "War & Politics",
    }
