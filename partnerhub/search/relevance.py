import re
from typing import Optional

EXACT_MATCH_SCORE = 100
PREFIX_MATCH_SCORE = 80
WHOLE_WORD_MATCH_SCORE = 60
SUBSTRING_MATCH_SCORE = 40


def whole_word_pattern(query: str) -> "re.Pattern[str]":
    """Compile a word-boundary pattern for the query, taking every character literally."""
    return re.compile(rf"\b{re.escape(query)}\b")


def score_field(query: str, field: Optional[str]) -> int:
    """Match-quality points for one field. Both sides are expected lower-cased."""
    if not field:
        return 0
    if field == query:
        return EXACT_MATCH_SCORE
    if field.startswith(query):
        return PREFIX_MATCH_SCORE
    if whole_word_pattern(query).search(field):
        return WHOLE_WORD_MATCH_SCORE
    if query in field:
        return SUBSTRING_MATCH_SCORE
    return 0


def calculate_relevance(query: str, *fields: Optional[str]) -> int:
    """Sum of per-field match points (exact 100, prefix 80, whole word 60, substring 40).

    The total is not capped, so a hit in several fields can exceed 100.
    """
    lower_query = (query or "").lower()
    return sum(score_field(lower_query, field.lower() if field else None) for field in fields)
