"""
db/mapper.py
------------
Conversion between domain objects and MongoDB documents.

This is the only module that knows the physical schema:

    books:   {bookID, isbn, title, published, rating, genre, authorIDs[]}
    authors: {authorID, firstName, lastName, birthDate, bookIDs[]}

The id arrays are the only representation of the book/author
relationship. They are always written with set semantics.
"""

from datetime import date, datetime, time
from typing import Iterable, Optional

from pymongo.collection import Collection

from models.author import Author
from models.book import Book
from models.genre import Genre
from utils.errors import ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)

# ── Field names ───────────────────────────────────────────
BOOK_ID = "bookID"
ISBN = "isbn"
TITLE = "title"
PUBLISHED = "published"
RATING = "rating"
GENRE = "genre"
AUTHOR_IDS = "authorIDs"

AUTHOR_ID = "authorID"
FIRST_NAME = "firstName"
LAST_NAME = "lastName"
BIRTH_DATE = "birthDate"
BOOK_IDS = "bookIDs"


# ── Dates ─────────────────────────────────────────────────

def _to_bson_date(value: Optional[date]) -> Optional[datetime]:
    """BSON has no date-only type; store dates as midnight datetimes."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, date):
        raise ValidationError(f"Invalid date: {value!r}")
    return datetime.combine(value, time.min)


def _from_bson_date(value) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            raise ValidationError(f"Invalid stored date: {value!r}") from None
    raise ValidationError(f"Invalid stored date: {value!r}")


def _unique(ids: Iterable[int]) -> list[int]:
    """Drop duplicate ids while keeping first-seen order."""
    return list(dict.fromkeys(ids))


# ── Write direction ───────────────────────────────────────

def book_to_document(book: Book) -> dict:
    """Flatten a Book, reducing its authors to a duplicate-free id array."""
    return {
        BOOK_ID: book.book_id,
        ISBN: book.isbn,
        TITLE: book.title,
        PUBLISHED: _to_bson_date(book.published),
        RATING: book.rating,
        GENRE: book.genre.value,
        AUTHOR_IDS: _unique(book.author_ids),
    }


def author_to_document(author: Author, with_books: bool = True) -> dict:
    """
    Flatten an Author.

    Args:
        author: The author to convert.
        with_books: If False the book id array is written empty, as for a
            newly added author whose links are created separately.
    """
    return {
        AUTHOR_ID: author.author_id,
        FIRST_NAME: author.first_name,
        LAST_NAME: author.last_name,
        BIRTH_DATE: _to_bson_date(author.birth_date),
        BOOK_IDS: sorted(author.book_ids) if with_books else [],
    }


# ── Read direction ────────────────────────────────────────

def document_to_author(doc: dict) -> Author:
    """Build an Author and its back-reference cache from a document."""
    try:
        return Author(
            author_id=doc[AUTHOR_ID],
            first_name=doc.get(FIRST_NAME, ""),
            last_name=doc.get(LAST_NAME, ""),
            birth_date=_from_bson_date(doc.get(BIRTH_DATE)),
            book_ids=set(doc.get(BOOK_IDS) or []),
        )
    except KeyError as e:
        raise ValidationError(f"Corrupt author document, missing field {e}") from None


def resolve_authors(author_ids: list[int], authors: Collection) -> list[Author]:
    """
    Look up authors by id in one query, in the given id order.

    Ids with no matching document are skipped: a dangling reference left
    by a half-finished link write shrinks the result instead of failing.
    """
    author_ids = _unique(author_ids)
    if not author_ids:
        return []
    found = {}
    for doc in authors.find({AUTHOR_ID: {"$in": author_ids}}):
        author = document_to_author(doc)
        found[author.author_id] = author
    missing = [i for i in author_ids if i not in found]
    if missing:
        logger.warning(f"Skipping dangling author references {missing}")
    return [found[i] for i in author_ids if i in found]


def document_to_book(doc: dict, authors: Collection) -> Book:
    """
    Build a Book from a document and rehydrate its authors.

    Args:
        doc: A document from the books collection.
        authors: The authors collection, used to resolve ``authorIDs``.

    Raises:
        ValidationError: If the stored ISBN, rating or genre is invalid.
    """
    try:
        book = Book(
            book_id=doc[BOOK_ID],
            isbn=doc[ISBN],
            title=doc[TITLE],
            rating=doc[RATING],
            genre=Genre.parse(doc[GENRE]),
            published=_from_bson_date(doc.get(PUBLISHED)),
        )
    except KeyError as e:
        raise ValidationError(f"Corrupt book document, missing field {e}") from None
    for author in resolve_authors(doc.get(AUTHOR_IDS) or [], authors):
        book.add_author(author)
    return book


def document_book_id(doc: dict) -> int:
    return doc[BOOK_ID]


def document_author_id(doc: dict) -> int:
    return doc[AUTHOR_ID]


def document_author_ids(doc: dict) -> list[int]:
    return list(doc.get(AUTHOR_IDS) or [])


def document_book_ids(doc: dict) -> list[int]:
    return list(doc.get(BOOK_IDS) or [])


# ── Filters and updates ───────────────────────────────────

BOOK_LINKS_PROJECTION = {"_id": 0, BOOK_ID: 1, AUTHOR_IDS: 1}
AUTHOR_LINKS_PROJECTION = {"_id": 0, AUTHOR_ID: 1, BOOK_IDS: 1}


def book_filter(book_id: int) -> dict:
    return {BOOK_ID: book_id}


def author_filter(author_id: int) -> dict:
    return {AUTHOR_ID: author_id}


def books_by_ids_filter(book_ids: Iterable[int]) -> dict:
    return {BOOK_ID: {"$in": list(book_ids)}}


def link_author_update(author_id: int) -> dict:
    """Add an author id to a book's array; re-adding is a no-op."""
    return {"$addToSet": {AUTHOR_IDS: author_id}}


def link_book_update(book_id: int) -> dict:
    """Add a book id to an author's array; re-adding is a no-op."""
    return {"$addToSet": {BOOK_IDS: book_id}}


def unlink_book_update(book_id: int) -> dict:
    return {"$pull": {BOOK_IDS: book_id}}


def authors_of_book_filter(book_id: int) -> dict:
    """Authors whose array still references the book."""
    return {BOOK_IDS: book_id}


def rating_update(rating: int) -> dict:
    return {"$set": {RATING: rating}}
