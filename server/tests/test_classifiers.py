"""Tests for the lexical query classifiers."""

import datetime

from poster_search.services.search.classifiers import (
    extract_date_info,
    extract_year,
    find_multi_word_cities,
    has_special_characters,
    is_abbreviation,
    is_likely_venue_search,
    is_multi_word_city_name,
)


class TestIsLikelyVenueSearch:
    def test_specific_venue(self):
        assert is_likely_venue_search("Phish Madison Square Garden")
        assert is_likely_venue_search("red rocks")

    def test_venue_keyword(self):
        assert is_likely_venue_search("Widespread Panic Fox Theatre")

    def test_city(self):
        assert is_likely_venue_search("Grateful Dead Seattle")
        assert is_likely_venue_search("Phish New York")

    def test_artist_only(self):
        assert not is_likely_venue_search("Flying Lotus")
        assert not is_likely_venue_search("Red Hot Chili Peppers")

    def test_keyword_must_be_whole_word(self):
        assert not is_likely_venue_search("Bowling for Soup")

    def test_empty(self):
        assert not is_likely_venue_search("")
        assert not is_likely_venue_search(None)


class TestMultiWordCities:
    def test_finds_city(self):
        assert find_multi_word_cities("phish new york") == ["new york"]

    def test_case_insensitive(self):
        assert is_multi_word_city_name("San Francisco")

    def test_punctuated_city(self):
        assert find_multi_word_cities("Phish St. Louis") == ["st. louis"]

    def test_single_word_city_is_not_multi_word(self):
        assert not is_multi_word_city_name("Seattle")

    def test_first_word_alone_is_not_a_city(self):
        assert not is_multi_word_city_name("new")
        assert not is_multi_word_city_name("Phish San")

    def test_city_inside_a_longer_token_is_not_a_city(self):
        assert not is_multi_word_city_name("newyork")
        assert not is_multi_word_city_name("xnew yorkx")
        assert find_multi_word_cities("renew yorkshire") == []

    def test_empty(self):
        assert not is_multi_word_city_name("")
        assert find_multi_word_cities("") == []


class TestHasSpecialCharacters:
    def test_punctuated_names(self):
        assert has_special_characters("AC/DC")
        assert has_special_characters("P!nk")
        assert has_special_characters("R.E.M.")

    def test_plain_words(self):
        assert not has_special_characters("Phish")

    def test_whitespace_disqualifies(self):
        assert not has_special_characters("Guns N' Roses")


class TestExtractDateInfo:
    def test_full_slash_date(self):
        info = extract_date_info("phish 6/30/2024")
        assert info.has_date
        assert (info.year, info.month, info.day) == (2024, 6, 30)
        assert info.search_without_date == "phish"
        assert info.is_full_date
        assert info.as_date() == datetime.date(2024, 6, 30)

    def test_month_day_without_year(self):
        info = extract_date_info("Phish 12/31")
        assert (info.year, info.month, info.day) == (None, 12, 31)
        assert info.search_without_date == "Phish"
        assert info.is_partial_date
        assert info.as_date() is None

    def test_two_digit_year(self):
        assert extract_date_info("phish 6/30/24").year == 2024
        assert extract_date_info("dead 5/8/77").year == 1977

    def test_year_in_the_middle(self):
        info = extract_date_info("Grateful Dead 1977 Cornell")
        assert info.year == 1977
        assert info.month is None
        assert info.search_without_date == "Grateful Dead Cornell"

    def test_month_name_is_one_based(self):
        info = extract_date_info("Pink Floyd August poster")
        assert info.month == 8
        assert info.search_without_date == "Pink Floyd poster"

    def test_month_name_with_year(self):
        info = extract_date_info("Phish December 2019")
        assert (info.year, info.month) == (2019, 12)
        assert info.search_without_date == "Phish"

    def test_invalid_slash_date_is_ignored(self):
        info = extract_date_info("phish 13/45")
        assert not info.has_date
        assert info.search_without_date == "phish 13/45"

    def test_no_date(self):
        info = extract_date_info("Flying Lotus")
        assert not info.has_date
        assert info.year is None
        assert info.search_without_date == "Flying Lotus"

    def test_only_first_year_kept_but_all_removed(self):
        info = extract_date_info("Phish 1997 1998")
        assert info.year == 1997
        assert info.search_without_date == "Phish"


class TestExtractYear:
    def test_year_removed(self):
        assert extract_year("Phish 2023") == (2023, "Phish")

    def test_first_year_wins(self):
        assert extract_year("Dead 1977 1978 Cornell") == (1977, "Dead Cornell")

    def test_no_year(self):
        assert extract_year("Phish 3000") == (None, "Phish 3000")


class TestIsAbbreviation:
    def test_all_caps(self):
        assert is_abbreviation("ACDC")
        assert is_abbreviation("RHCP")

    def test_spaced_capitals(self):
        assert is_abbreviation("A C D C")

    def test_ordinary_words(self):
        assert not is_abbreviation("Phish")
        assert not is_abbreviation("A")
        assert not is_abbreviation("PEARL JAM")


class TestDateRanges:
    def test_from_to_months(self):
        info = extract_date_info("Phish from June 2025 to August 2025")
        assert info.has_date
        assert info.is_date_range
        assert info.start_date == datetime.date(2025, 6, 1)
        assert info.end_date == datetime.date(2025, 8, 31)
        assert (info.year, info.month, info.day) == (2025, 6, None)
        assert info.search_without_date == "Phish"
        assert not info.is_full_date

    def test_missing_year_taken_from_other_end(self):
        info = extract_date_info("Phish June to August 2025")
        assert info.start_date == datetime.date(2025, 6, 1)
        assert info.end_date == datetime.date(2025, 8, 31)

    def test_year_span_with_hyphen(self):
        info = extract_date_info("Grateful Dead 1977-1979")
        assert info.start_date == datetime.date(1977, 1, 1)
        assert info.end_date == datetime.date(1979, 12, 31)
        assert info.search_without_date == "Grateful Dead"

    def test_between_without_and(self):
        # "and" is a stop word, so it is usually gone by the time dates are parsed
        info = extract_date_info("Phish between 6/1/2024 6/3/2024")
        assert info.start_date == datetime.date(2024, 6, 1)
        assert info.end_date == datetime.date(2024, 6, 3)
        assert info.search_without_date == "Phish"

    def test_day_names_with_ordinals(self):
        info = extract_date_info("Phish from June 15th 2024 to June 20th 2024")
        assert info.start_date == datetime.date(2024, 6, 15)
        assert info.end_date == datetime.date(2024, 6, 20)

    def test_reversed_range_is_normalised(self):
        info = extract_date_info("Phish 1999 to 1997")
        assert info.start_date == datetime.date(1997, 1, 1)
        assert info.end_date == datetime.date(1999, 12, 31)

    def test_impossible_endpoint_is_not_a_range(self):
        info = extract_date_info("Phish February 30 to March 2 2024")
        assert not info.is_date_range

    def test_single_date_is_not_a_range(self):
        info = extract_date_info("phish 6/30/2024")
        assert not info.is_date_range
        assert info.start_date is None


class TestRelativeDates:
    TODAY = datetime.date(2024, 6, 12)  # a Wednesday

    def test_next_month(self):
        info = extract_date_info("Phish next month concert", today=self.TODAY)
        assert info.has_date
        assert info.search_without_date == "Phish concert"
        assert info.start_date == datetime.date(2024, 7, 1)
        assert info.end_date == datetime.date(2024, 7, 31)
        assert (info.year, info.month) == (2024, 7)

    def test_last_month_crosses_year(self):
        info = extract_date_info("Phish last month", today=datetime.date(2024, 1, 20))
        assert info.start_date == datetime.date(2023, 12, 1)
        assert info.end_date == datetime.date(2023, 12, 31)

    def test_this_week_starts_on_monday(self):
        info = extract_date_info("Goose this week", today=self.TODAY)
        assert info.start_date == datetime.date(2024, 6, 10)
        assert info.end_date == datetime.date(2024, 6, 16)
        assert info.year is None

    def test_last_year(self):
        info = extract_date_info("Phish last year", today=self.TODAY)
        assert info.start_date == datetime.date(2023, 1, 1)
        assert info.end_date == datetime.date(2023, 12, 31)
        assert info.year == 2023
