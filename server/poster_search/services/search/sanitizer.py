"""Validate raw search input and strip filler words."""

from poster_search.services.search.constants import MIN_SEARCH_TERM_LENGTH, STOP_WORDS


def validate_and_clean_search_term(search_term: str | None) -> str | None:
    """Return the trimmed search term, or None when it is too short to search on."""
    if not search_term or not search_term.strip():
        return None

    cleaned = search_term.strip()
    if len(cleaned) < MIN_SEARCH_TERM_LENGTH:
        return None

    return cleaned


def filter_stop_words(search_term: str) -> str:
    """Drop stop words ("or", "the", ...) and single-character tokens.

    Falls back to the original term when filtering would leave nothing useful,
    so the result is never empty.
    """
    filtered = " ".join(
        word
        for word in search_term.split()
        if word.lower() not in STOP_WORDS and len(word) > 1
    )
    return filtered if len(filtered) > 1 else search_term
