"""Tests for the domain models."""
from datetime import date

import pytest

from models.author import Author
from models.book import Book
from models.genre import Genre
from models.search_mode import SearchMode
from utils.errors import ValidationError


@pytest.mark.parametrize("isbn", ["1234567890", "9780199535675", "0000000000"])
def test_book_accepts_10_and_13_digit_isbn(isbn):
    book = Book(1, isbn, "Title", 3, Genre.FICTION)
    assert book.isbn == isbn


@pytest.mark.parametrize("isbn", [
    "", "123456789", "12345678901", "123456789012", "12345678901234",
    "123456789X", "978-0199535675", " 1234567890", None, 1234567890,
    "\u0661\u0662\u0663\u0664\u0665\u0666\u0667\u0668\u0669\u0660",  # Arabic-Indic digits
])
def test_book_rejects_malformed_isbn(isbn):
    with pytest.raises(ValidationError, match="Invalid ISBN"):
        Book(1, isbn, "Title", 3, Genre.FICTION)


@pytest.mark.parametrize("rating", [1, 2, 3, 4, 5])
def test_valid_rating_is_kept_exactly(rating):
    book = Book(1, "1234567890", "Title", rating, Genre.FICTION)
    assert book.rating == rating
    book.rating = rating
    assert book.rating == rating


@pytest.mark.parametrize("rating", [0, 6, -1, 100, "4", 4.0, True, None])
def test_invalid_rating_rejected_at_construction(rating):
    with pytest.raises(ValidationError, match="Invalid rating"):
        Book(1, "1234567890", "Title", rating, Genre.FICTION)


@pytest.mark.parametrize("rating", [0, 6, "5"])
def test_invalid_rating_rejected_on_update(rating):
    book = Book(1, "1234567890", "Title", 3, Genre.FICTION)
    with pytest.raises(ValidationError):
        book.rating = rating
    assert book.rating == 3


def test_book_genre_token_is_normalized():
    book = Book(1, "1234567890", "Title", 3, " mystery ")
    assert book.genre is Genre.MYSTERY


def test_book_requires_title_and_id():
    with pytest.raises(ValidationError):
        Book(1, "1234567890", None, 3, Genre.FICTION)
    with pytest.raises(ValidationError):
        Book(None, "1234567890", "Title", 3, Genre.FICTION)


def test_book_ordering_by_title_then_id():
    a = Book(2, "1234567890", "Alpha", 3, Genre.FICTION)
    b = Book(1, "1234567890", "Beta", 3, Genre.FICTION)
    c = Book(3, "1234567890", "Alpha", 3, Genre.FICTION)
    assert sorted([b, c, a]) == [a, c, b]


def test_book_equality_follows_ordering():
    a = Book(1, "1234567890", "Same", 3, Genre.FICTION)
    b = Book(1, "9780199535675", "Same", 5, Genre.HORROR)
    assert a == b
    assert hash(a) == hash(b)
    assert a != Book(2, "1234567890", "Same", 3, Genre.FICTION)


def test_add_author_is_idempotent_and_sets_back_reference(ann):
    book = Book(100, "1234567890", "Gone", 4, Genre.FICTION)
    book.add_author(ann)
    book.add_author(Author(1, "Ann", "Lee"))

    assert book.authors == [ann]
    assert ann.book_ids == {100}


def test_author_ordering_by_last_name_then_id():
    lee2 = Author(2, "Zed", "Lee")
    lee1 = Author(1, "Ann", "Lee")
    adams = Author(3, "Douglas", "Adams")
    assert sorted([lee2, lee1, adams]) == [adams, lee1, lee2]
    assert lee1 == Author(1, "Other", "Lee")
    assert lee1 != lee2


def test_author_back_references():
    author = Author(1, "Ann", "Lee", date(1970, 1, 2))
    author.add_book(5)
    author.add_book(5)
    author.add_book(7)
    author.remove_book(5)
    author.remove_book(99)
    assert author.book_ids == {7}
    assert author.full_name == "Ann Lee"


def test_author_requires_names():
    with pytest.raises(ValidationError):
        Author(1, None, "Lee")


@pytest.mark.parametrize("value", ["1970-01-02", 19700102, (1970, 1, 2)])
def test_author_rejects_non_date_birth_date(value):
    with pytest.raises(ValidationError, match="Invalid birth date"):
        Author(1, "Ann", "Lee", birth_date=value)


@pytest.mark.parametrize("value", ["2001-05-03", 2001])
def test_book_rejects_non_date_published(value):
    with pytest.raises(ValidationError, match="Invalid publication date"):
        Book(1, "1234567890", "Title", 3, Genre.FICTION, published=value)

    book = Book(1, "1234567890", "Title", 3, Genre.FICTION)
    with pytest.raises(ValidationError):
        book.published = value
    assert book.published is None


def test_dates_accept_date_and_none():
    author = Author(1, "Ann", "Lee", birth_date=date(1970, 1, 2))
    book = Book(1, "1234567890", "Title", 3, Genre.FICTION, published=date(2001, 5, 3))
    book.published = None
    assert author.birth_date == date(1970, 1, 2)
    assert book.published is None


@pytest.mark.parametrize("token", ["mystery", "MYSTERY", "Mystery", "  mystery\n"])
def test_genre_parse_is_case_insensitive(token):
    assert Genre.parse(token) is Genre.MYSTERY


@pytest.mark.parametrize("token", ["", "   ", "detective", None, 3])
def test_genre_parse_rejects_unknown(token):
    with pytest.raises(ValidationError, match="Invalid genre"):
        Genre.parse(token)


def test_search_mode_values():
    assert SearchMode("rating") is SearchMode.RATING
