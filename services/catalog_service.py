"""
services/catalog_service.py
---------------------------
Asynchronous front for the catalog, for callers that run an event loop.

The repository is synchronous and blocking. Every call here runs the
repository operation on a worker thread so the caller's loop never
blocks, and failures surface as the catalog's own exceptions.
No timeouts are applied; wrap calls in ``asyncio.wait_for`` if needed.
"""

import asyncio
from typing import Any, Awaitable, Callable, Iterable, Optional

from config import MONGO_DB_NAME
from db.queries import parse_criterion
from models.author import Author
from models.book import Book
from models.search_mode import SearchMode
from repositories.library_repo import LibraryRepository
from utils.logger import get_logger

logger = get_logger(__name__)


class CatalogService:
    """
    Handles the user-level catalog workflows.

    Workflow for adding a book:
        1. Insert the book.
        2. Link each of its authors on both sides.
        3. Re-read the authors from the store so the returned book
           reflects what was actually persisted.
    """

    def __init__(self, repo: Optional[LibraryRepository] = None):
        self.repo = repo if repo is not None else LibraryRepository()

    async def _run(self, func: Callable, *args) -> Any:
        return await asyncio.to_thread(func, *args)

    # ── SESSION ───────────────────────────────────────────

    async def connect(self, database_name: str = MONGO_DB_NAME) -> None:
        await self._run(self.repo.connect, database_name)

    async def disconnect(self) -> None:
        await self._run(self.repo.disconnect)

    # ── WRITES ────────────────────────────────────────────

    async def add_book_with_authors(self, book: Book, authors: Iterable[Author] = ()) -> Book:
        """
        Add a book and link it to its authors.

        Args:
            book: The book to insert. Authors already attached to it are
                linked as well.
            authors: Extra existing authors to link.

        Every author is looked up before the book is inserted, so an
        unknown author leaves the store unchanged.

        Returns:
            The book, with its authors replaced by those read back from the store.

        Raises:
            NotFoundError: If any author is not in the store.
        """
        to_link = list(dict.fromkeys([*book.authors, *authors]))
        for author in to_link:
            await self._run(self.repo.get_author, author.author_id)
        await self._run(self.repo.add_book, book)
        for author in to_link:
            await self._run(self.repo.add_author_to_book, author, book)
        fetched = await self._run(self.repo.get_authors_for_book, book.book_id)
        book.authors = []
        for author in fetched:
            book.add_author(author)
        return book

    async def add_author(self, author: Author) -> Author:
        return await self._run(self.repo.add_author, author)

    async def link(self, author: Author, book: Book) -> None:
        await self._run(self.repo.add_author_to_book, author, book)

    async def update_rating(self, book_id: int, rating: int) -> None:
        await self._run(self.repo.update_rating, book_id, rating)

    async def delete_book(self, book_id: int) -> None:
        await self._run(self.repo.delete_book, book_id)

    # ── READS ─────────────────────────────────────────────

    async def get_all_authors(self) -> list[Author]:
        return await self._run(self.repo.get_all_authors)

    async def get_authors_for_book(self, book_id: int) -> list[Author]:
        return await self._run(self.repo.get_authors_for_book, book_id)

    async def search(self, text: str, mode: SearchMode) -> list[Book]:
        """
        Search with user-entered text in the selected mode.

        Raises:
            ValidationError: On empty text, a non-numeric or out-of-range
                rating, or an unknown genre. Raised before the store is used.
        """
        criterion = parse_criterion(mode, text)
        books = await self._run(self.repo.search, mode, criterion)
        logger.info(f"Search by {mode.value} for {text!r} returned {len(books)} books")
        return books


def dispatch(
    operation: Awaitable,
    on_success: Optional[Callable[[Any], None]] = None,
    on_failure: Optional[Callable[[BaseException], None]] = None,
) -> asyncio.Task:
    """
    Schedule a service call and report its outcome through callbacks.

    Must be called from inside a running event loop. The callbacks run on
    the loop's thread.
    """
    task = asyncio.ensure_future(operation)

    def _done(t: asyncio.Task) -> None:
        if t.cancelled():
            return
        error = t.exception()
        if error is not None:
            logger.error(f"Catalog operation failed: {error}")
            if on_failure is not None:
                on_failure(error)
        elif on_success is not None:
            on_success(t.result())

    task.add_done_callback(_done)
    return task
