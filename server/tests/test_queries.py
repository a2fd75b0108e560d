"""Tests for the strict and fallback query executors against the seeded catalog."""

import datetime

from sqlalchemy.orm import Session

from poster_search.models import Poster, PosterStatus
from poster_search.services.search import fallback, queries
from poster_search.services.search.classifiers import extract_date_info


def _add_unlinked_poster(db: Session, title: str, description: str | None = None) -> Poster:
    poster = Poster(title=title, description=description, status=PosterStatus.ACTIVE.value)
    db.add(poster)
    db.commit()
    return poster


class TestStrictArtistQueries:
    def test_artist_with_city(self, db: Session, catalog):
        assert queries.search_for_artist_with_city(db, "Grateful Dead", "Seattle") == [
            catalog.dead_seattle
        ]

    def test_artist_with_city_requires_both(self, db: Session, catalog):
        assert queries.search_for_artist_with_city(db, "Pearl Jam", "Seattle") == []

    def test_artist_with_city_and_year(self, db: Session, catalog):
        assert queries.search_for_artist_with_city_and_year(db, "phish", "new york", 2024) == [
            catalog.phish_msg
        ]
        assert queries.search_for_artist_with_city_and_year(db, "phish", "new york", 2023) == []

    def test_artist_with_year(self, db: Session, catalog):
        assert queries.search_for_artist_with_year(db, "Phish", 2023) == [catalog.phish_red_rocks]

    def test_fuzzy_artist_name(self, db: Session, catalog):
        # Misspelled but close enough on trigram similarity
        assert queries.search_for_artist_with_year(db, "Grateful Ded", 1977) == [
            catalog.dead_seattle
        ]

    def test_artist_on_date(self, db: Session, catalog):
        assert queries.search_for_artist_on_date(db, "phish", datetime.date(2024, 6, 30)) == [
            catalog.phish_msg
        ]

    def test_artist_on_month_day(self, db: Session, catalog):
        assert queries.search_for_artist_on_month_day(db, "Phish", 8, 5) == [
            catalog.phish_red_rocks
        ]

    def test_inactive_posters_excluded(self, db: Session, catalog):
        results = queries.search_for_artist_on_date(db, "phish", datetime.date(2024, 6, 30))
        assert catalog.phish_draft not in results

    def test_artist_in_date_range(self, db: Session, catalog):
        summer_2023 = (datetime.date(2023, 6, 1), datetime.date(2023, 8, 31))
        assert queries.search_for_artist_in_date_range(db, "Phish", *summer_2023) == [
            catalog.phish_red_rocks
        ]

    def test_date_range_bounds_are_inclusive(self, db: Session, catalog):
        show_day = datetime.date(2023, 8, 5)
        assert queries.search_for_artist_in_date_range(db, "Phish", show_day, show_day) == [
            catalog.phish_red_rocks
        ]
        assert (
            queries.search_for_artist_in_date_range(
                db, "Phish", datetime.date(2023, 8, 6), datetime.date(2023, 12, 31)
            )
            == []
        )


class TestSingleArtist:
    def test_name_substring(self, db: Session, catalog):
        assert queries.search_for_single_artist(db, "Phish") == [
            catalog.phish_msg,
            catalog.phish_red_rocks,
        ]

    def test_no_match(self, db: Session, catalog):
        assert queries.search_for_single_artist(db, "Nirvana") == []

    def test_description_mention(self, db: Session, catalog):
        poster = _add_unlinked_poster(db, "Fall Tour Print", "Signed by Goose")
        assert queries.search_for_single_artist(db, "Goose") == [poster.id]

    def test_close_title(self, db: Session, catalog):
        poster = _add_unlinked_poster(db, "Goose")
        assert queries.search_for_single_artist(db, "Gose") == [poster.id]

    def test_artist_name_ranks_before_title_and_description(self, db: Session, catalog):
        poster = _add_unlinked_poster(db, "Lotus tribute night")
        results = queries.search_for_single_artist(db, "Lotus")
        assert results.index(catalog.lotus) < results.index(poster.id)
        assert results.index(catalog.flying_lotus) < results.index(poster.id)


class TestSpecialCharacters:
    def test_exact_name_has_top_priority(self, db: Session, catalog):
        assert queries.rank_special_character_matches(db, "AC/DC") == [(catalog.acdc, 1)]

    def test_spelling_without_punctuation(self, db: Session, catalog):
        assert queries.search_with_special_characters(db, "ac-dc") == [catalog.acdc]

    def test_punctuation_only_matches_nothing(self, db: Session, catalog):
        assert queries.search_with_special_characters(db, "!!") == []

    def test_name_without_punctuation_is_exact(self, db: Session, catalog):
        assert queries.rank_special_character_matches(db, "ACDC") == [(catalog.acdc, 1)]
        assert queries.rank_special_character_matches(db, "a c d c") == [(catalog.acdc, 1)]

    def test_underscore_is_literal_in_substring_matches(self, db: Session, catalog):
        ranked = dict(queries.rank_special_character_matches(db, "phis_"))
        # "_" is literal in the substring tier; Phish only matches further down
        assert ranked[catalog.phish_msg] == 3
        assert ranked[catalog.phish_red_rocks] == 3


class TestCitySearch:
    def test_multi_word_city(self, db: Session, catalog):
        assert set(queries.search_for_city(db, "New York")) == {catalog.phish_msg, catalog.acdc}

    def test_unknown_city(self, db: Session, catalog):
        assert queries.search_for_city(db, "Las Vegas") == []


class TestSingleTermSearch:
    def test_exact_artist_ranks_first(self, db: Session, catalog):
        results = fallback.execute_single_term_search(db, "Lotus")
        assert results[0] == catalog.lotus
        assert catalog.flying_lotus in results
        assert catalog.phish_msg not in results

    def test_only_active_posters(self, db: Session, catalog):
        results = fallback.execute_single_term_search(db, "Phish")
        assert set(results) == {catalog.phish_msg, catalog.phish_red_rocks}


class TestComplexSearch:
    def _search(self, db: Session, term: str) -> list[int]:
        date_info = extract_date_info(term)
        term_for_matching = date_info.search_without_date if date_info.has_date else term
        return fallback.execute_complex_search(
            db, term, date_info, term_for_matching.split(), term_for_matching
        )

    def test_exact_venue(self, db: Session, catalog):
        assert self._search(db, "Red Rocks") == [catalog.phish_red_rocks]

    def test_artist_and_venue(self, db: Session, catalog):
        results = self._search(db, "Flying Lotus Hollywood Bowl")
        assert results == [catalog.flying_lotus]

    def test_full_date_ranks_exact_date_first(self, db: Session, catalog):
        results = self._search(db, "Phish Madison Square Garden 6/30/2024")
        assert results[0] == catalog.phish_msg
        assert catalog.phish_draft not in results
