"""
repositories/library_repo.py
----------------------------
Data access facade for the book catalog.
All MongoDB reads and writes for books and authors go through here.

MongoDB has no join and no transaction spanning the two collections, so
the book/author relationship is kept consistent by hand:

    - a link is two $addToSet writes, book side first, then author side;
    - if the second write fails the error propagates and the two sides
      disagree until the link is retried (retries are idempotent);
    - every read skips ids that point at missing documents instead of
      failing, and find_divergent_links() reports one-sided pairs.
"""

from typing import Iterable, Optional

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from config import AUTHORS_COLLECTION, BOOKS_COLLECTION
from db import mapper, queries
from db.connection import MongoSession
from models.author import Author
from models.book import Book, validate_rating
from models.search_mode import SearchMode
from utils.errors import NotFoundError, ValidationError, translate_store_errors
from utils.logger import get_logger

logger = get_logger(__name__)

# Search mode -> name of the LibraryRepository method that runs it.
SEARCH_OPERATIONS = {
    SearchMode.TITLE: "search_books_by_title",
    SearchMode.ISBN: "search_books_by_isbn",
    SearchMode.AUTHOR: "search_books_by_author",
    SearchMode.RATING: "search_books_by_rating",
    SearchMode.GENRE: "search_books_by_genre",
}


class LibraryRepository:
    """
    Repository for CRUD and search operations on books and authors.

    Args:
        session: The session every operation runs against. A new
            unconnected MongoSession is created when none is given.
    """

    def __init__(self, session: Optional[MongoSession] = None):
        self.session = session if session is not None else MongoSession()

    # ── SESSION ───────────────────────────────────────────

    @property
    def is_connected(self) -> bool:
        return self.session.is_connected

    def connect(self, database_name: str) -> None:
        """
        Connect to the named database.

        Raises:
            SessionError: If already connected.
            StoreError: If the server is unreachable.
        """
        if not database_name:
            raise ValidationError("A database name is required.")
        self.session.connect(database_name)

    def disconnect(self) -> None:
        """
        Release the session.

        Raises:
            SessionError: If not connected.
        """
        self.session.disconnect()

    @property
    def _books(self) -> Collection:
        return self.session.get_collection(BOOKS_COLLECTION)

    @property
    def _authors(self) -> Collection:
        return self.session.get_collection(AUTHORS_COLLECTION)

    # ── CREATE ────────────────────────────────────────────

    @translate_store_errors("adding book to database")
    def add_book(self, book: Book) -> Book:
        """
        Insert a book with its current author ids.

        Author documents are not touched here; use ``add_author_to_book``
        to create both sides of a link.
        """
        if book is None:
            raise ValidationError("A book is required.")
        self._books.insert_one(mapper.book_to_document(book))
        logger.info(f"Added book #{book.book_id} '{book.title}'")
        return book

    @translate_store_errors("adding author to database")
    def add_author(self, author: Author) -> Author:
        """Insert an author with an empty book id array."""
        if author is None:
            raise ValidationError("An author is required.")
        self._authors.insert_one(mapper.author_to_document(author, with_books=False))
        logger.info(f"Added author #{author.author_id} {author.full_name}")
        return author

    # ── RELATIONSHIP ──────────────────────────────────────

    @translate_store_errors("adding author to book in database")
    def add_author_to_book(self, author: Author, book: Book) -> None:
        """
        Link an author and a book on both sides.

        Both documents must exist before anything is written. The two
        updates are not atomic: if the author-side update fails, the book
        lists the author but the author does not list the book until the
        call is repeated. The StoreError is still raised.

        Raises:
            ValidationError: If either argument is None.
            NotFoundError: If the book or the author is not in the store.
        """
        if author is None or book is None:
            raise ValidationError("Both an author and a book are required.")
        books, authors = self._books, self._authors

        if books.find_one(mapper.book_filter(book.book_id)) is None:
            raise NotFoundError(f"Book with ID {book.book_id} not found.")
        if authors.find_one(mapper.author_filter(author.author_id)) is None:
            raise NotFoundError(f"Author with ID {author.author_id} not found.")

        books.update_one(
            mapper.book_filter(book.book_id),
            mapper.link_author_update(author.author_id),
        )
        try:
            authors.update_one(
                mapper.author_filter(author.author_id),
                mapper.link_book_update(book.book_id),
            )
        except PyMongoError:
            logger.warning(
                f"Link book #{book.book_id} -> author #{author.author_id} is one-sided: "
                f"author update failed after book update succeeded"
            )
            raise

        book.add_author(author)
        logger.info(f"Linked author #{author.author_id} to book #{book.book_id}")

    # ── READ ──────────────────────────────────────────────

    @translate_store_errors("fetching book")
    def get_book(self, book_id: int) -> Book:
        """
        Fetch a single book with its authors.

        Raises:
            NotFoundError: If no book has this id.
        """
        doc = self._books.find_one(mapper.book_filter(book_id))
        if doc is None:
            raise NotFoundError(f"Book with ID {book_id} not found.")
        return mapper.document_to_book(doc, self._authors)

    @translate_store_errors("fetching author")
    def get_author(self, author_id: int) -> Author:
        """
        Fetch a single author with its book id cache.

        Raises:
            NotFoundError: If no author has this id.
        """
        doc = self._authors.find_one(mapper.author_filter(author_id))
        if doc is None:
            raise NotFoundError(f"Author with ID {author_id} not found.")
        return mapper.document_to_author(doc)

    @translate_store_errors("retrieving authors for book")
    def get_authors_for_book(self, book_id: int) -> list[Author]:
        """
        Fetch the authors a book references.

        Author ids without a matching document are skipped.

        Raises:
            NotFoundError: If the book itself does not exist.
        """
        doc = self._books.find_one(mapper.book_filter(book_id))
        if doc is None:
            raise NotFoundError(f"Book with ID {book_id} not found.")
        return mapper.resolve_authors(mapper.document_author_ids(doc), self._authors)

    @translate_store_errors("retrieving books for author")
    def get_books_for_author(self, author_id: int) -> list[Book]:
        """
        Fetch the books an author references, in book order.

        Raises:
            NotFoundError: If the author does not exist.
        """
        doc = self._authors.find_one(mapper.author_filter(author_id))
        if doc is None:
            raise NotFoundError(f"Author with ID {author_id} not found.")
        book_ids = mapper.document_book_ids(doc)
        if not book_ids:
            return []
        return self._to_books(self._books.find(mapper.books_by_ids_filter(book_ids)))

    @translate_store_errors("retrieving all authors")
    def get_all_authors(self) -> list[Author]:
        """Fetch every author, ordered by last name then id."""
        return sorted(mapper.document_to_author(doc) for doc in self._authors.find())

    # ── SEARCH ────────────────────────────────────────────

    @translate_store_errors("searching books by title")
    def search_books_by_title(self, title: str) -> list[Book]:
        """Books whose title contains ``title``, ignoring case."""
        query = queries.title_filter(title)
        return self._to_books(self._books.find(query))

    @translate_store_errors("searching books by author")
    def search_books_by_author(self, author_name: str) -> list[Book]:
        """Books with at least one author whose first or last name contains ``author_name``."""
        author_query = queries.author_name_filter(author_name)
        author_ids = [
            mapper.document_author_id(doc)
            for doc in self._authors.find(author_query, mapper.AUTHOR_LINKS_PROJECTION)
        ]
        if not author_ids:
            return []
        return self._to_books(self._books.find(queries.books_by_authors_filter(author_ids)))

    @translate_store_errors("searching books by genre")
    def search_books_by_genre(self, genre) -> list[Book]:
        """
        Books of the given genre; the token is matched case-insensitively.

        Raises:
            ValidationError: If the genre is not recognized.
        """
        query = queries.genre_filter(genre)
        return self._to_books(self._books.find(query))

    @translate_store_errors("searching books by rating")
    def search_books_by_rating(self, rating: int) -> list[Book]:
        """
        Books with exactly this rating.

        Raises:
            ValidationError: If the rating is outside 1-5.
        """
        query = queries.rating_filter(rating)
        return self._to_books(self._books.find(query))

    @translate_store_errors("searching books by ISBN")
    def search_books_by_isbn(self, isbn: str) -> list[Book]:
        """Books with exactly this ISBN."""
        query = queries.isbn_filter(isbn)
        return self._to_books(self._books.find(query))

    def search(self, mode: SearchMode, criterion) -> list[Book]:
        """Run the search operation that belongs to ``mode``."""
        if mode not in SEARCH_OPERATIONS:
            raise ValidationError(f"Unknown search mode: {mode!r}")
        return getattr(self, SEARCH_OPERATIONS[mode])(criterion)

    # ── UPDATE ────────────────────────────────────────────

    @translate_store_errors("updating book rating")
    def update_rating(self, book_id: int, rating: int) -> None:
        """
        Set a book's rating.

        Raises:
            ValidationError: If the rating is outside 1-5 (nothing is written).
            NotFoundError: If no book has this id.
        """
        validate_rating(rating)
        result = self._books.update_one(mapper.book_filter(book_id), mapper.rating_update(rating))
        if result.matched_count == 0:
            raise NotFoundError(f"Book with ID {book_id} not found in database.")
        logger.info(f"Updated rating of book #{book_id} to {rating}")

    # ── DELETE ────────────────────────────────────────────

    @translate_store_errors("deleting book from database")
    def delete_book(self, book_id: int) -> None:
        """
        Delete a book and drop it from its authors' book lists.

        The book document is removed first. If dropping the id from the
        authors then fails, the book is already gone and the StoreError
        only concerns the leftover back-references; find_divergent_links()
        reports them and they are skipped on read.

        Raises:
            NotFoundError: If no book has this id (nothing is modified).
            StoreError: If either write fails.
        """
        result = self._books.delete_one(mapper.book_filter(book_id))
        if result.deleted_count == 0:
            raise NotFoundError(f"Book with ID {book_id} not found in database.")
        try:
            unlinked = self._authors.update_many(
                mapper.authors_of_book_filter(book_id),
                mapper.unlink_book_update(book_id),
            )
        except PyMongoError:
            logger.warning(
                f"Book #{book_id} was deleted but authors still reference it: "
                f"author update failed after book delete succeeded"
            )
            raise
        logger.info(
            f"Deleted book #{book_id} (unlinked from {unlinked.modified_count} authors)"
        )

    # ── CONSISTENCY ───────────────────────────────────────

    @translate_store_errors("checking relationship consistency")
    def find_divergent_links(self) -> list[tuple[int, int]]:
        """
        Find book/author pairs recorded on only one side.

        Returns:
            Sorted ``(book_id, author_id)`` pairs present in a book's
            author array but not the author's book array, or vice versa.
        """
        from_books = {
            (mapper.document_book_id(doc), author_id)
            for doc in self._books.find({}, mapper.BOOK_LINKS_PROJECTION)
            for author_id in mapper.document_author_ids(doc)
        }
        from_authors = {
            (book_id, mapper.document_author_id(doc))
            for doc in self._authors.find({}, mapper.AUTHOR_LINKS_PROJECTION)
            for book_id in mapper.document_book_ids(doc)
        }
        divergent = sorted(from_books ^ from_authors)
        if divergent:
            logger.warning(f"Found {len(divergent)} one-sided book/author links")
        return divergent

    # ── HELPERS ───────────────────────────────────────────

    def _to_books(self, docs: Iterable[dict]) -> list[Book]:
        """Rehydrate book documents, dropping duplicates, in book order."""
        authors = self._authors
        books = [mapper.document_to_book(doc, authors) for doc in docs]
        return sorted(dict.fromkeys(books))
