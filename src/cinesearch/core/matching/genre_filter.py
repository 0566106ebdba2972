"""Genre-style query detection.

Broad genre queries such as "comedy" always go to the remote catalog.
The local cache is never consulted for them.
"""

from __future__ import annotations

from collections.abc import Iterable

from cinesearch.shared.constants import GenreVocabulary


def is_genre_query(
    term: str,
    keywords: Iterable[str] = GenreVocabulary.KEYWORDS,
) -> bool:
    """Check whether the whole query is a genre keyword.

    The comparison is case-insensitive and accepts the keyword itself or
    its naive plural ("comedy", "comedys", "horrors").

    Args:
        term: Normalized search term
        keywords: Genre vocabulary

    Returns:
        True if the query should bypass the local index
    """
    query = " ".join(term.lower().split())
    if not query:
        return False
    return any(query in (keyword, f"{keyword}s") for keyword in keywords)
