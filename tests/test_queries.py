"""Tests for the search criteria translator."""
import pytest

from db import queries
from models.search_mode import SearchMode
from utils.errors import ValidationError


def test_title_filter_is_case_insensitive_substring():
    assert queries.title_filter("gone") == {"title": {"$regex": "gone", "$options": "i"}}


def test_title_filter_escapes_regex_characters():
    query = queries.title_filter("C++ (2nd ed.)")
    assert query["title"]["$regex"] == r"C\+\+\ \(2nd\ ed\.\)"


def test_author_filter_matches_first_or_last_name():
    query = queries.author_name_filter("lee")
    assert query == {"$or": [
        {"firstName": {"$regex": "lee", "$options": "i"}},
        {"lastName": {"$regex": "lee", "$options": "i"}},
    ]}


def test_author_filter_with_full_name_adds_combined_clause():
    clauses = queries.author_name_filter("Ann Lee")["$or"]
    assert clauses[-1] == {"$and": [
        {"firstName": {"$regex": "Ann", "$options": "i"}},
        {"lastName": {"$regex": "Lee", "$options": "i"}},
    ]}


def test_books_by_authors_filter():
    assert queries.books_by_authors_filter({3, 1}) in (
        {"authorIDs": {"$in": [1, 3]}},
        {"authorIDs": {"$in": [3, 1]}},
    )


@pytest.mark.parametrize("token", ["mystery", "MYSTERY", " Mystery "])
def test_genre_filter_normalizes_token(token):
    assert queries.genre_filter(token) == {"genre": "MYSTERY"}


def test_genre_filter_rejects_unknown_genre():
    with pytest.raises(ValidationError):
        queries.genre_filter("cookbooks")


@pytest.mark.parametrize("rating", [0, 6, -3])
def test_rating_filter_rejects_out_of_range(rating):
    with pytest.raises(ValidationError):
        queries.rating_filter(rating)


def test_rating_and_isbn_filters_are_exact():
    assert queries.rating_filter(5) == {"rating": 5}
    assert queries.isbn_filter(" 1234567890 ") == {"isbn": "1234567890"}


@pytest.mark.parametrize("builder", [
    queries.title_filter, queries.author_name_filter, queries.isbn_filter,
])
def test_text_filters_reject_blank_input(builder):
    with pytest.raises(ValidationError):
        builder("   ")


def test_parse_criterion():
    assert queries.parse_criterion(SearchMode.RATING, " 4 ") == 4
    assert queries.parse_criterion(SearchMode.TITLE, " Gone ") == "Gone"
    with pytest.raises(ValidationError, match="numeric"):
        queries.parse_criterion(SearchMode.RATING, "four")
    with pytest.raises(ValidationError):
        queries.parse_criterion(SearchMode.GENRE, "")
