"""
models/search_mode.py
---------------------
Which attribute a free-text search is run against.
"""

from enum import Enum


class SearchMode(Enum):
    TITLE = "title"
    ISBN = "isbn"
    AUTHOR = "author"
    RATING = "rating"
    GENRE = "genre"
