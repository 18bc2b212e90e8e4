"""
db/queries.py
-------------
Translates search criteria into MongoDB filter documents.

Every builder validates its input first, so a bad criterion fails with
ValidationError before the store is touched. Author search is two-stage:
``author_name_filter`` selects authors, then ``books_by_authors_filter``
selects the books referencing any of them.
"""

import re
from typing import Iterable

from db import mapper
from models.book import validate_rating
from models.genre import Genre
from models.search_mode import SearchMode
from utils.errors import ValidationError


def _require_text(value, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Enter a {what} to search for.")
    return value.strip()


def _contains(field: str, text: str) -> dict:
    """Case-insensitive substring match, with the text taken literally."""
    return {field: {"$regex": re.escape(text), "$options": "i"}}


def title_filter(title: str) -> dict:
    return _contains(mapper.TITLE, _require_text(title, "title"))


def author_name_filter(name: str) -> dict:
    """
    Match authors whose first OR last name contains ``name``.

    A two-part name such as ``"Ann Lee"`` also matches an author with
    first name containing ``Ann`` and last name containing ``Lee``.
    """
    name = _require_text(name, "author name")
    clauses = [_contains(mapper.FIRST_NAME, name), _contains(mapper.LAST_NAME, name)]
    parts = name.split()
    if len(parts) == 2:
        clauses.append({"$and": [
            _contains(mapper.FIRST_NAME, parts[0]),
            _contains(mapper.LAST_NAME, parts[1]),
        ]})
    return {"$or": clauses}


def books_by_authors_filter(author_ids: Iterable[int]) -> dict:
    return {mapper.AUTHOR_IDS: {"$in": list(author_ids)}}


def genre_filter(genre) -> dict:
    return {mapper.GENRE: Genre.parse(genre).value}


def rating_filter(rating: int) -> dict:
    return {mapper.RATING: validate_rating(rating)}


def isbn_filter(isbn: str) -> dict:
    return {mapper.ISBN: _require_text(isbn, "ISBN")}


def parse_criterion(mode: SearchMode, text: str):
    """
    Convert user-entered search text into the criterion a mode expects.

    Raises:
        ValidationError: On empty text or a non-numeric rating.
    """
    text = _require_text(text, "search string")
    if mode is SearchMode.RATING:
        try:
            return int(text)
        except ValueError:
            raise ValidationError(
                f"Invalid rating format: {text!r}. Please enter a numeric value."
            ) from None
    return text
