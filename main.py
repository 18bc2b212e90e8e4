"""
main.py
-------
Command-line entry point for the LibraryDB catalog.

Usage:
    python main.py <title|isbn|author|rating|genre> <search text>
    python main.py authors

Responsibilities:
    - Connect to the configured database. Indexes are a separate setup
      step (python -m db.init_db), so reads work on any existing data.
    - Run one catalog request through the CatalogService.
    - Print the results and disconnect.
"""

import asyncio
import sys

from config import MONGO_DB_NAME
from models.search_mode import SearchMode
from services.catalog_service import CatalogService
from utils.errors import LibraryError
from utils.logger import get_logger

logger = get_logger(__name__)

USAGE = (
    "Usage: python main.py <title|isbn|author|rating|genre> <search text>\n"
    "       python main.py authors"
)


async def run(args: list[str]) -> int:
    """Execute one request. Returns the process exit code."""
    if not args:
        print(USAGE)
        return 2

    command = args[0].lower()
    if command != "authors":
        try:
            mode = SearchMode(command)
        except ValueError:
            print(USAGE)
            return 2
        if len(args) < 2:
            print(USAGE)
            return 2

    service = CatalogService()
    try:
        await service.connect(MONGO_DB_NAME)
    except LibraryError as e:
        print(f"Failed to connect to database: {e}")
        return 1

    try:
        if command == "authors":
            authors = await service.get_all_authors()
            for author in authors:
                print(author)
            if not authors:
                print("No authors in the catalog.")
        else:
            text = " ".join(args[1:])
            books = await service.search(text, mode)
            for book in books:
                print(book)
            if not books:
                print(f"No books found for {mode.value}: {text}")
        return 0
    except LibraryError as e:
        print(f"Error: {e}")
        return 1
    finally:
        await service.disconnect()


def main() -> None:
    logger.info("LibraryDB client starting")
    sys.exit(asyncio.run(run(sys.argv[1:])))


if __name__ == "__main__":
    main()
