"""Candidate artist / venue / city substrings for a tokenized query.

A query like "grateful dead seattle" can be split several ways; these
helpers enumerate the splits so the query executors can try each one.
"""

import re
from dataclasses import dataclass

from poster_search.services.search.classifiers import collapse_whitespace, find_multi_word_cities

_NON_WORD_RUN = re.compile(r"[\W_]+")
_CAPITALS = re.compile(r"^[A-Z]{2,}$")
_SPACED_CAPITALS = re.compile(r"^[A-Z](?:\s+[A-Z])+$")


@dataclass(frozen=True)
class ArtistCity:
    """One hypothesis of how a query divides into artist and city."""

    artist: str
    city: str

    def is_searchable(self) -> bool:
        return len(self.artist) >= 2 and len(self.city) >= 2


def generate_potential_artist_terms(
    term_for_matching: str,
    search_terms: list[str],
    is_potential_artist_venue_search: bool,
) -> list[str]:
    """Artist-name candidates, most specific first.

    The full term always comes first ("Red Hot Chili Peppers"). Shorter
    prefixes cover "Grateful Dead Seattle" and "Phish Madison". When the
    query does not look venue-related each token is also tried on its own,
    which handles "Phish Grateful Dead" once "OR" has been filtered out.
    """
    candidates = [term_for_matching]

    if len(search_terms) >= 3:
        candidates.append(" ".join(search_terms[:2]))

    if len(search_terms) >= 2:
        candidates.append(search_terms[0])
        candidates.append(" ".join(search_terms[:-1]))

    if len(search_terms) > 1 and not is_potential_artist_venue_search:
        candidates.extend(term for term in search_terms if len(term) > 1)

    return candidates


def generate_potential_venue_terms(term_for_matching: str, search_terms: list[str]) -> list[str]:
    """Venue/city candidates taken from the tail of the query."""
    candidates = []

    if len(search_terms) >= 3:
        candidates.append(" ".join(search_terms[2:]))

    if len(search_terms) >= 2:
        candidates.append(" ".join(search_terms[1:]))
        candidates.append(search_terms[-1])
        candidates.append(term_for_matching)

    return candidates


def _split_on_city(search_term: str, city: str) -> ArtistCity:
    lower_term = search_term.lower()
    artist = collapse_whitespace(lower_term.replace(city, " ", 1))
    return ArtistCity(artist=artist, city=city)


def _keeps_cities_whole(split: ArtistCity, cities: list[str]) -> bool:
    # "san" / "francisco" cuts "san francisco" in two
    return all(city in split.artist.lower() or city in split.city.lower() for city in cities)


def generate_artist_city_combinations(search_without_year: str) -> list[ArtistCity]:
    """Artist/city splits for "artist city year" queries once the year is removed.

    Splits on a known multi-word city ("phish new york") take priority over
    the positional last-word / first-word splits. Positional splits that cut
    a multi-word city in two are dropped.
    """
    remaining = search_without_year.split()
    if len(remaining) < 2:
        return []

    cities = find_multi_word_cities(search_without_year)
    combinations = [
        combo
        for combo in (
            ArtistCity(artist=" ".join(remaining[:-1]), city=remaining[-1]),
            ArtistCity(artist=remaining[0], city=" ".join(remaining[1:])),
        )
        if _keeps_cities_whole(combo, cities)
    ]

    for city in cities:
        candidate = _split_on_city(search_without_year, city)
        if len(candidate.artist) > 1:
            combinations.insert(0, candidate)

    return combinations


def generate_artist_city_splits(search_term: str, search_terms: list[str]) -> list[ArtistCity]:
    """Artist/city splits for "artist city" queries with no year.

    A bare multi-word city ("San Francisco") yields no splits at all.
    """
    splits = []

    if len(search_terms) >= 3:
        # "Phish Los Angeles"
        splits.append(ArtistCity(artist=search_terms[0], city=" ".join(search_terms[1:])))
        # "Grateful Dead Seattle"
        splits.append(ArtistCity(artist=" ".join(search_terms[:-1]), city=search_terms[-1]))

    if len(search_terms) == 2:
        splits.append(ArtistCity(artist=search_terms[0], city=search_terms[1]))

    cities = find_multi_word_cities(search_term)
    splits = [split for split in splits if _keeps_cities_whole(split, cities)]

    for city in cities:
        candidate = _split_on_city(search_term, city)
        if len(candidate.artist) > 1:
            splits.insert(0, candidate)
            break

    return splits


def generate_query_variants(search_term: str) -> list[str]:
    """Spellings worth trying for punctuated names and abbreviations, original first.

    "AC/DC" -> "AC DC", "ACDC"; "ACDC" -> "A C D C", "A/C/D/C";
    "A C D C" -> "ACDC", "A/C/D/C"; "N.W.A" -> "NWA", "N W A".
    """
    term = search_term.strip()
    if not term:
        return []

    variants = [term]

    if _NON_WORD_RUN.search(term):
        variants.append(_NON_WORD_RUN.sub(" ", term).strip())
        variants.append(_NON_WORD_RUN.sub("", term))

    if _CAPITALS.match(term):
        variants.append(" ".join(term))
        variants.append("/".join(term))

    if _SPACED_CAPITALS.match(term):
        letters = term.split()
        variants.append("".join(letters))
        variants.append("/".join(letters))

    if "." in term:
        variants.append(term.replace(".", ""))
        variants.append(collapse_whitespace(term.replace(".", " ")))

    return [variant for variant in dict.fromkeys(variants) if variant]
