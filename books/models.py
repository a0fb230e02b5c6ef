"""
books/models.py -- Domain dataclass for the book catalogue.

Pure data container with zero logic. All persistence lives in books/store.py;
request validation lives in api/models.py.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Book:
    """A book a user has added to their collection.

    username is the owner: the authenticated user who created the record.
    id is None before the record is written to the database.
    """

    title: str
    description: str
    author: str
    username: str
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert
    updated_at: str = ""  # ISO 8601, refreshed by store on update
