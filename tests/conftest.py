import mongomock
import pytest

from db.connection import MongoSession
from models.author import Author
from models.book import Book
from models.genre import Genre
from repositories.library_repo import LibraryRepository

TEST_DB = "test_library"


@pytest.fixture
def client():
    return mongomock.MongoClient()


@pytest.fixture
def session(client):
    # Every connect() on this session gets the same in-memory client
    return MongoSession(client_factory=lambda uri, **kwargs: client)


@pytest.fixture
def repo(session):
    repository = LibraryRepository(session)
    repository.connect(TEST_DB)
    yield repository
    if repository.is_connected:
        repository.disconnect()


@pytest.fixture
def db(client):
    return client[TEST_DB]


@pytest.fixture
def ann():
    return Author(1, "Ann", "Lee")


@pytest.fixture
def gone():
    return Book(100, "1234567890", "Gone", 4, Genre.FICTION)
