"""
models/author.py
----------------
Domain model for book authors.
"""

from dataclasses import dataclass, field
from datetime import date
from functools import total_ordering
from typing import Optional

from utils.errors import ValidationError


def validate_date(value, what: str) -> Optional[date]:
    """Return the value if it is a date or None, else raise."""
    if value is not None and not isinstance(value, date):
        raise ValidationError(f"Invalid {what}: {value!r} (expected a date)")
    return value


@total_ordering
@dataclass(eq=False)
class Author:
    """
    Represents a single author.

    Attributes:
        author_id: Caller-assigned unique identifier.
        first_name: Given name.
        last_name: Family name, used for ordering.
        birth_date: Date of birth, if known.
        book_ids: Ids of the books this author has written. Rebuilt from
            the store on every fetch, never the source of truth.

    Authors order by last name, then id. Two authors are equal when
    neither orders before the other.
    """
    author_id: int
    first_name: str
    last_name: str
    birth_date: Optional[date] = None
    book_ids: set[int] = field(default_factory=set)

    def __post_init__(self):
        if self.author_id is None or isinstance(self.author_id, bool) \
                or not isinstance(self.author_id, int):
            raise ValidationError(f"Invalid author id: {self.author_id!r}")
        if self.first_name is None or self.last_name is None:
            raise ValidationError("Author first and last name are required")
        self.birth_date = validate_date(self.birth_date, "birth date")
        self.book_ids = set(self.book_ids)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def add_book(self, book_id: int) -> None:
        self.book_ids.add(book_id)

    def remove_book(self, book_id: int) -> None:
        self.book_ids.discard(book_id)

    def _sort_key(self) -> tuple:
        return (self.last_name, self.author_id)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Author):
            return NotImplemented
        return self._sort_key() == other._sort_key()

    def __lt__(self, other) -> bool:
        if not isinstance(other, Author):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __hash__(self) -> int:
        return hash(self._sort_key())

    def __str__(self) -> str:
        return f"#{self.author_id} {self.full_name}"
