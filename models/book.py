"""
models/book.py
--------------
Domain model for catalog books.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from functools import total_ordering
from typing import Optional

from models.author import Author, validate_date
from models.genre import Genre
from utils.errors import ValidationError

ISBN_PATTERN = re.compile(r"[0-9]{10}|[0-9]{13}")
MIN_RATING = 1
MAX_RATING = 5


def validate_isbn(isbn) -> str:
    """Return the ISBN if it is exactly 10 or 13 digits, else raise."""
    if not isinstance(isbn, str) or not ISBN_PATTERN.fullmatch(isbn):
        raise ValidationError(f"Invalid ISBN: {isbn!r}")
    return isbn


def validate_rating(rating) -> int:
    """Return the rating if it is an integer between 1 and 5, else raise."""
    if isinstance(rating, bool) or not isinstance(rating, int) \
            or not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(
            f"Invalid rating: {rating!r} (must be between {MIN_RATING} and {MAX_RATING})"
        )
    return rating


@total_ordering
@dataclass(eq=False)
class Book:
    """
    Represents a single book in the catalog.

    Attributes:
        book_id: Caller-assigned unique identifier.
        isbn: 10 or 13 digit ISBN, validated on assignment.
        title: Book title, used for ordering.
        rating: Integer 1-5, validated on every assignment.
        genre: One of the Genre members (tokens are normalized).
        published: Publication date, if known.
        authors: Associated authors, without duplicates.

    Books order by title, then id. Equality follows ordering.
    """
    book_id: int
    isbn: str
    title: str
    rating: int
    genre: Genre
    published: Optional[date] = None
    authors: list[Author] = field(default_factory=list)

    def __post_init__(self):
        if self.book_id is None or isinstance(self.book_id, bool) \
                or not isinstance(self.book_id, int):
            raise ValidationError(f"Invalid book id: {self.book_id!r}")
        if self.title is None:
            raise ValidationError("Book title is required")
        authors, self.authors = self.authors, []
        for author in authors:
            self.add_author(author)

    def __setattr__(self, name, value):
        if name == "isbn":
            value = validate_isbn(value)
        elif name == "rating":
            value = validate_rating(value)
        elif name == "genre":
            value = Genre.parse(value)
        elif name == "published":
            value = validate_date(value, "publication date")
        super().__setattr__(name, value)

    @property
    def author_ids(self) -> list[int]:
        return [a.author_id for a in self.authors]

    def add_author(self, author: Author) -> None:
        """Attach an author (no-op if already attached) and record the back-reference."""
        if author not in self.authors:
            self.authors.append(author)
        author.add_book(self.book_id)

    def _sort_key(self) -> tuple:
        return (self.title, self.book_id)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return self._sort_key() == other._sort_key()

    def __lt__(self, other) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __hash__(self) -> int:
        return hash(self._sort_key())

    def __str__(self) -> str:
        names = ", ".join(a.full_name for a in self.authors) or "unknown author"
        return f"#{self.book_id} {self.title} ({names}) | ISBN {self.isbn} | {self.genre} | {self.rating}/5"
