"""
db/init_db.py
-------------
Creates the collection indexes if they do not already exist.
Run this module directly to prepare a fresh database:
    python -m db.init_db
"""

from pymongo import ASCENDING

from config import AUTHORS_COLLECTION, BOOKS_COLLECTION, MONGO_DB_NAME
from db import mapper
from db.connection import MongoSession
from utils.errors import translate_store_errors
from utils.logger import get_logger

logger = get_logger(__name__)

# (collection, field, unique)
INDEXES = [
    (BOOKS_COLLECTION, mapper.BOOK_ID, True),
    (BOOKS_COLLECTION, mapper.ISBN, False),
    (BOOKS_COLLECTION, mapper.GENRE, False),
    (BOOKS_COLLECTION, mapper.AUTHOR_IDS, False),
    (AUTHORS_COLLECTION, mapper.AUTHOR_ID, True),
    (AUTHORS_COLLECTION, mapper.LAST_NAME, False),
]


@translate_store_errors("creating indexes")
def create_indexes(session: MongoSession) -> None:
    """
    Install the lookup indexes. Safe to call multiple times.

    The unique indexes on bookID and authorID make the store reject a
    second document with the same application id.
    """
    for collection, field, unique in INDEXES:
        session.get_collection(collection).create_index(
            [(field, ASCENDING)], unique=unique
        )
    logger.info("Database indexes initialized successfully.")


if __name__ == "__main__":
    session = MongoSession()
    session.connect(MONGO_DB_NAME)
    try:
        create_indexes(session)
    finally:
        session.disconnect()
    print("Database indexes created successfully.")
