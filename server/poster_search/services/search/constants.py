"""Word lists and similarity thresholds used by the poster search pipeline.

Everything here is immutable and loaded once per process. The thresholds are
tuned policy values for pg_trgm ``similarity()`` scores (0.0 - 1.0).
"""

# Generic threshold for poster title/description and event/venue fields
DEFAULT_SIMILARITY_THRESHOLD = 0.35

# Artist-name matches in the fallback searches
ARTIST_SIMILARITY_THRESHOLD = 0.3

# Venue name/city/state/country matches in the complex search
VENUE_SIMILARITY_THRESHOLD = 0.2

# Strict AND searches (artist+city, artist+year, artist+city+year, dates)
STRICT_SIMILARITY_THRESHOLD = 0.3

# Spaced variant of names like "AC/DC"
SPECIAL_CHARACTER_SIMILARITY_THRESHOLD = 0.3

# Two-word queries that look like a single artist ("Flying Lotus")
ARTIST_NAME_ONLY_THRESHOLD = 0.8

# Single-artist searches rank names at least this close just below title hits
CLOSE_ARTIST_SIMILARITY = 0.7

# Multi-word city searches lower the threshold by this much, never below the floor
CITY_THRESHOLD_REDUCTION = 0.1
CITY_SIMILARITY_FLOOR = 0.2

STRICT_RESULT_LIMIT = 100
SINGLE_ARTIST_RESULT_LIMIT = 50
SPECIAL_CHARACTER_RESULT_LIMIT = 50
CITY_RESULT_LIMIT = 50
COMPLEX_RESULT_LIMIT = 50
SINGLE_TERM_RESULT_LIMIT = 20

MIN_SEARCH_TERM_LENGTH = 2

STOP_WORDS = frozenset(
    {
        "or",
        "and",
        "the",
        "in",
        "at",
        "on",
        "by",
        "of",
        "with",
        "for",
    }
)

# Whole-word keywords that mark a venue reference ("Hollywood Bowl", "the arena")
VENUE_KEYWORDS = (
    "arena",
    "stadium",
    "amphitheatre",
    "amphitheater",
    "theatre",
    "theater",
    "hall",
    "ballroom",
    "auditorium",
    "pavilion",
    "coliseum",
    "forum",
    "bowl",
    "garden",
    "gardens",
    "center",
    "centre",
    "fillmore",
    "casino",
    "fairgrounds",
    "opera house",
    "music hall",
    "speedway",
)

# Matched as substrings anywhere in the query
SPECIFIC_VENUES = (
    "madison square garden",
    "red rocks",
    "hollywood bowl",
    "the gorge",
    "greek theatre",
    "radio city",
    "ryman",
    "fillmore",
    "capitol theatre",
    "merriweather",
    "alpine valley",
    "dick's sporting goods park",
)

MULTI_WORD_CITIES = (
    "new york",
    "los angeles",
    "san francisco",
    "san diego",
    "san jose",
    "san antonio",
    "las vegas",
    "new orleans",
    "salt lake city",
    "santa fe",
    "santa barbara",
    "santa cruz",
    "cedar rapids",
    "st. louis",
    "st. paul",
    "jersey city",
    "kansas city",
    "oklahoma city",
    "fort worth",
    "el paso",
    "long beach",
    "virginia beach",
    "colorado springs",
    "ann arbor",
    "baton rouge",
    "des moines",
    "grand rapids",
    "little rock",
    "palm springs",
    "atlantic city",
)

# Whole-word city references; multi-word cities are matched as phrases
COMMON_CITIES = (
    "chicago",
    "seattle",
    "boston",
    "austin",
    "denver",
    "portland",
    "atlanta",
    "nashville",
    "philadelphia",
    "detroit",
    "miami",
    "dallas",
    "houston",
    "minneapolis",
    "berkeley",
    "oakland",
    "brooklyn",
    "baltimore",
    "pittsburgh",
    "cleveland",
    "milwaukee",
    "morrison",
    "asheville",
    "burlington",
) + MULTI_WORD_CITIES

MONTH_NAMES = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)
