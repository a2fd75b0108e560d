"""Pure lexical checks that pull structure out of a free-text poster query.

None of these touch the database. They decide which interpretation
strategies are worth trying and split dates away from the text that is
left for artist/venue matching.
"""

import datetime
import re
from dataclasses import dataclass

from dateutil import parser as date_parser
from dateutil.relativedelta import MO, relativedelta

from poster_search.core.time import utcnow
from poster_search.services.search.constants import (
    COMMON_CITIES,
    MONTH_NAMES,
    MULTI_WORD_CITIES,
    SPECIFIC_VENUES,
    VENUE_KEYWORDS,
)

YEAR_PATTERN = re.compile(r"\b(?:19|20)\d{2}\b")

# "6/30", "6/30/2024", "06/30/24"
SLASH_DATE_PATTERN = re.compile(r"\b(\d{1,2})/(\d{1,2})(?:/(\d{4}|\d{2}))?\b")

_MONTH_ALTERNATION = "|".join(MONTH_NAMES)

MONTH_PATTERN = re.compile(rf"\b({_MONTH_ALTERNATION})\b", re.IGNORECASE)

# "June", "June 15th", "June 15, 2025", "June 2025", "6/30/2024", "1977"
_DATE_PHRASE = (
    rf"(?:(?:{_MONTH_ALTERNATION})(?:\s+\d{{1,2}}(?:st|nd|rd|th)?\b)?(?:,?\s+(?:19|20)\d{{2}})?"
    r"|\d{1,2}/\d{1,2}(?:/(?:\d{4}|\d{2}))?"
    r"|(?:19|20)\d{2})"
)

# "from June 2025 to August 2025", "1977-1979", "6/1/2024 through 6/3/2024"
DATE_RANGE_PATTERN = re.compile(
    rf"(?:\bfrom\s+)?\b(?P<start>{_DATE_PHRASE})\s*(?:-|\b(?:to|through|thru|until|till)\b)\s*"
    rf"(?P<end>{_DATE_PHRASE})\b",
    re.IGNORECASE,
)

# "between 1977 and 1979"; the "and" may already be gone as a stop word
BETWEEN_DATES_PATTERN = re.compile(
    rf"\bbetween\s+(?P<start>{_DATE_PHRASE})\s+(?:and\s+)?(?P<end>{_DATE_PHRASE})\b",
    re.IGNORECASE,
)

# "next month", "last year", "this week"
RELATIVE_DATE_PATTERN = re.compile(r"\b(next|last|this)\s+(week|month|year)\b", re.IGNORECASE)

_RELATIVE_OFFSETS = {"last": -1, "this": 0, "next": 1}

_DAY_OF_MONTH_PATTERN = re.compile(r"\b\d{1,2}(?:st|nd|rd|th)?\b")

# "ACDC", "RHCP", "A C D C"
ABBREVIATION_PATTERN = re.compile(r"^(?:[A-Z]{2,}|[A-Z](?:\s+[A-Z])+)$")

_NON_WORD_PATTERN = re.compile(r"[\W_]")
_WHITESPACE_PATTERN = re.compile(r"\s")
_MULTI_WHITESPACE_PATTERN = re.compile(r"\s+")


def _phrase_pattern(phrase: str) -> re.Pattern[str]:
    # \b fails next to punctuation ("st. louis"), so bound on non-word characters instead
    return re.compile(rf"(?<!\w){re.escape(phrase)}(?!\w)", re.IGNORECASE)


_VENUE_KEYWORD_PATTERNS = tuple(_phrase_pattern(keyword) for keyword in VENUE_KEYWORDS)
_COMMON_CITY_PATTERNS = tuple(_phrase_pattern(city) for city in COMMON_CITIES)
_MULTI_WORD_CITY_PATTERNS = tuple((city, _phrase_pattern(city)) for city in MULTI_WORD_CITIES)


def collapse_whitespace(text: str) -> str:
    return _MULTI_WHITESPACE_PATTERN.sub(" ", text).strip()


def is_likely_venue_search(search_term: str | None) -> bool:
    """Check whether the query mentions a venue or a city.

    Separates multi-word artist names like "Flying Lotus" from artist+venue
    queries like "Grateful Dead Seattle". Keywords and cities only count as
    whole words, so "Bowling for Soup" does not match "bowl".
    """
    if not search_term or not search_term.strip():
        return False

    lower_term = search_term.lower()

    if any(venue in lower_term for venue in SPECIFIC_VENUES):
        return True

    if any(pattern.search(lower_term) for pattern in _VENUE_KEYWORD_PATTERNS):
        return True

    return any(pattern.search(lower_term) for pattern in _COMMON_CITY_PATTERNS)


def find_multi_word_cities(search_term: str) -> list[str]:
    """Return every listed multi-word city that appears in the term, in list order."""
    if not search_term:
        return []
    return [city for city, pattern in _MULTI_WORD_CITY_PATTERNS if pattern.search(search_term)]


def is_multi_word_city_name(search_term: str | None) -> bool:
    """Check whether the term is, or contains, a multi-word city such as "New York"."""
    if not search_term or not search_term.strip():
        return False
    return bool(find_multi_word_cities(search_term))


def has_special_characters(search_term: str) -> bool:
    """Single-token terms with punctuation, e.g. "AC/DC" or "P!nk" (but not "Pearl Jam")."""
    return bool(_NON_WORD_PATTERN.search(search_term)) and not _WHITESPACE_PATTERN.search(
        search_term
    )


def is_abbreviation(search_term: str) -> bool:
    """All-caps initials such as "ACDC", "RHCP" or "A C D C"."""
    return bool(ABBREVIATION_PATTERN.match(search_term))


@dataclass(frozen=True)
class DateInfo:
    """Date signal found in a query plus the text that remains once it is removed.

    ``start_date``/``end_date`` are only set for explicit ranges ("from June
    2025 to August 2025") and relative periods ("next month"); both ends are
    inclusive.
    """

    has_date: bool
    year: int | None
    month: int | None  # 1-12
    day: int | None
    search_without_date: str
    start_date: datetime.date | None = None
    end_date: datetime.date | None = None

    @property
    def is_full_date(self) -> bool:
        return self.year is not None and self.month is not None and self.day is not None

    @property
    def is_partial_date(self) -> bool:
        return self.has_date and not self.is_full_date

    @property
    def is_date_range(self) -> bool:
        return self.start_date is not None and self.end_date is not None

    def as_date(self) -> datetime.date | None:
        if not self.is_full_date:
            return None
        return datetime.date(self.year, self.month, self.day)


def extract_year(search_term: str) -> tuple[int | None, str]:
    """Return the first 19xx/20xx year and the term with every such year removed."""
    match = YEAR_PATTERN.search(search_term)
    year = int(match.group(0)) if match else None
    return year, collapse_whitespace(YEAR_PATTERN.sub(" ", search_term))


def _expand_two_digit_year(value: str) -> int:
    year = int(value)
    if len(value) == 4:
        return year
    return 2000 + year if year < 50 else 1900 + year


def _parse_slash_date(match: re.Match[str]) -> tuple[int | None, int, int] | None:
    month = int(match.group(1))
    day = int(match.group(2))
    year = _expand_two_digit_year(match.group(3)) if match.group(3) else None

    if not 1 <= month <= 12 or not 1 <= day <= 31:
        return None
    try:
        # Leap year 2000 accepts Feb 29 when no year is given
        datetime.date(year or 2000, month, day)
    except ValueError:
        return None
    return year, month, day


def _parse_date_phrase(text: str) -> tuple[int | None, int | None, int | None] | None:
    """(year, month, day) of one range endpoint; components the text omits are None."""
    slash = SLASH_DATE_PATTERN.fullmatch(text)
    if slash:
        return _parse_slash_date(slash)
    if YEAR_PATTERN.fullmatch(text):
        return int(text), None, None

    year_match = YEAR_PATTERN.search(text)
    year = int(year_match.group(0)) if year_match else None
    has_day = bool(_DAY_OF_MONTH_PATTERN.search(YEAR_PATTERN.sub(" ", text)))
    try:
        parsed = date_parser.parse(text, default=datetime.datetime(year or 2000, 1, 1))
    except (ValueError, OverflowError):
        return None
    return year, parsed.month, parsed.day if has_day else None


def _phrase_span(
    parts: tuple[int | None, int | None, int | None], year: int
) -> tuple[datetime.date, datetime.date]:
    _, month, day = parts
    if month is None:
        return datetime.date(year, 1, 1), datetime.date(year, 12, 31)
    first = datetime.date(year, month, day or 1)
    if day is not None:
        return first, first
    return first, first + relativedelta(day=31)


def _remove_match(search_term: str, match: re.Match[str]) -> str:
    return collapse_whitespace(search_term[: match.start()] + " " + search_term[match.end() :])


def _extract_date_range(search_term: str, today: datetime.date) -> DateInfo | None:
    match = BETWEEN_DATES_PATTERN.search(search_term) or DATE_RANGE_PATTERN.search(search_term)
    if match is None:
        return None

    start = _parse_date_phrase(match.group("start"))
    end = _parse_date_phrase(match.group("end"))
    if start is None or end is None:
        return None

    # "June to August 2025": a missing year comes from the other end
    year = start[0] or end[0]
    try:
        start_first, start_last = _phrase_span(start, year or today.year)
        end_first, end_last = _phrase_span(end, end[0] or year or today.year)
    except ValueError:
        return None

    return DateInfo(
        has_date=True,
        year=year,
        month=start[1],
        day=None,
        search_without_date=_remove_match(search_term, match),
        start_date=min(start_first, end_first),
        end_date=max(start_last, end_last),
    )


def _extract_relative_period(search_term: str, today: datetime.date) -> DateInfo | None:
    match = RELATIVE_DATE_PATTERN.search(search_term)
    if match is None:
        return None

    offset = _RELATIVE_OFFSETS[match.group(1).lower()]
    unit = match.group(2).lower()
    year = month = None
    if unit == "week":
        start = today + relativedelta(weeks=offset, weekday=MO(-1))
        end = start + relativedelta(days=6)
    elif unit == "month":
        start = today + relativedelta(months=offset, day=1)
        end = start + relativedelta(day=31)
        year, month = start.year, start.month
    else:
        start = datetime.date(today.year + offset, 1, 1)
        end = datetime.date(start.year, 12, 31)
        year = start.year

    return DateInfo(
        has_date=True,
        year=year,
        month=month,
        day=None,
        search_without_date=_remove_match(search_term, match),
        start_date=start,
        end_date=end,
    )


def extract_date_info(search_term: str, today: datetime.date | None = None) -> DateInfo:
    """Find a date range, a relative period, a slash date, a year and/or a month name.

    Examples:
        "Phish from June 2025 to August 2025" -> 2025-06-01..2025-08-31, "Phish"
        "Phish next month concert"  -> the whole of next month, "Phish concert"
        "phish 6/30/2024"           -> year 2024, month 6, day 30, "phish"
        "Phish 12/31"               -> month 12, day 31, "Phish"
        "Grateful Dead 1977 Cornell" -> year 1977, "Grateful Dead Cornell"
        "Pink Floyd August poster"  -> month 8, "Pink Floyd poster"

    Relative periods are resolved against ``today`` (UTC by default). Only
    the first year is kept but every year is removed from the residual.
    """
    today = today or utcnow().date()
    span_info = _extract_date_range(search_term, today) or _extract_relative_period(
        search_term, today
    )
    if span_info is not None:
        return span_info

    year: int | None = None
    month: int | None = None
    day: int | None = None
    remaining = search_term

    for match in SLASH_DATE_PATTERN.finditer(remaining):
        parsed = _parse_slash_date(match)
        if parsed is None:
            continue
        year, month, day = parsed
        remaining = remaining[: match.start()] + " " + remaining[match.end() :]
        break

    found_year, remaining = extract_year(remaining)
    if year is None:
        year = found_year

    if month is None:
        month_match = MONTH_PATTERN.search(remaining)
        if month_match:
            month = MONTH_NAMES.index(month_match.group(1).lower()) + 1
            remaining = remaining[: month_match.start()] + " " + remaining[month_match.end() :]

    has_date = year is not None or month is not None
    return DateInfo(
        has_date=has_date,
        year=year,
        month=month,
        day=day,
        search_without_date=collapse_whitespace(remaining) if has_date else search_term,
    )
