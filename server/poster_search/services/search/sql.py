"""SQL building blocks for trigram search.

``similarity()`` comes from PostgreSQL's pg_trgm extension. The test suite
registers a compatible function on SQLite connections, so everything here
sticks to constructs both backends compile.
"""

from sqlalchemy import Float, String, func
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.expression import ColumnElement, FunctionElement


class greatest(FunctionElement):
    """Max of its arguments, ignoring NULLs (PostgreSQL ``GREATEST`` semantics)."""

    type = Float()
    name = "greatest"
    inherit_cache = True


@compiles(greatest)
def _compile_greatest(element, compiler, **kw):
    return f"GREATEST({compiler.process(element.clauses, **kw)})"


@compiles(greatest, "sqlite")
def _compile_greatest_sqlite(element, compiler, **kw):
    # SQLite's scalar max() returns NULL if any argument is NULL, and max(x) is an aggregate
    args = [f"coalesce({compiler.process(clause, **kw)}, 0.0)" for clause in element.clauses]
    if len(args) == 1:
        return args[0]
    return f"max({', '.join(args)})"


class strip_punctuation(FunctionElement):
    """The argument with everything but letters and digits removed ("AC/DC" -> "ACDC")."""

    type = String()
    name = "strip_punctuation"
    inherit_cache = True


# SQLite has no regexp_replace(); these cover the punctuation seen in artist names
_SQLITE_PUNCTUATION = " ./-!'&$,_:+*?#@"
_SQLITE_PUNCTUATION_LITERALS = tuple(
    "'" + char.replace("'", "''") + "'" for char in _SQLITE_PUNCTUATION
)


@compiles(strip_punctuation)
def _compile_strip_punctuation(element, compiler, **kw):
    return f"regexp_replace({compiler.process(element.clauses, **kw)}, '[^[:alnum:]]+', '', 'g')"


@compiles(strip_punctuation, "sqlite")
def _compile_strip_punctuation_sqlite(element, compiler, **kw):
    sql = compiler.process(element.clauses, **kw)
    for literal in _SQLITE_PUNCTUATION_LITERALS:
        sql = f"replace({sql}, {literal}, '')"
    return sql


def trigram_similarity(column, value) -> ColumnElement[float]:
    """``similarity(lower(column), lower(value))`` with ``value`` bound as a parameter."""
    return func.similarity(func.lower(column), func.lower(value), type_=Float)


def max_similarity(column, values: list[str]) -> ColumnElement[float]:
    """Best similarity between ``column`` and any of ``values``."""
    return greatest(*(trigram_similarity(column, value) for value in values))
