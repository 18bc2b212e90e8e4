"""
models/genre.py
---------------
The fixed set of genres a book can belong to.
"""

from enum import Enum

from utils.errors import ValidationError


class Genre(Enum):
    """Book genre. The value is the canonical token stored in the database."""
    FICTION = "FICTION"
    NONFICTION = "NONFICTION"
    MYSTERY = "MYSTERY"
    THRILLER = "THRILLER"
    FANTASY = "FANTASY"
    SCIFI = "SCIFI"
    ROMANCE = "ROMANCE"
    HORROR = "HORROR"
    BIOGRAPHY = "BIOGRAPHY"
    HISTORY = "HISTORY"
    POETRY = "POETRY"
    DRAMA = "DRAMA"
    CHILDREN = "CHILDREN"

    @classmethod
    def parse(cls, token) -> "Genre":
        """
        Normalize user or stored input to a Genre member.

        Accepts a Genre unchanged, otherwise matches the token
        case-insensitively after stripping whitespace.

        Raises:
            ValidationError: If the token is not a known genre.
        """
        if isinstance(token, cls):
            return token
        if not isinstance(token, str) or not token.strip():
            raise ValidationError(f"Invalid genre: {token!r}")
        try:
            return cls[token.strip().upper()]
        except KeyError:
            raise ValidationError(f"Invalid genre: {token}") from None

    def __str__(self) -> str:
        return self.value
