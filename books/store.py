"""
books/store.py -- SQLAlchemy-backed persistence layer for books.

Uses SQLAlchemy Core (not ORM) so the Book dataclass in books/models.py
remains the authoritative domain representation. Swapping SQLite for
PostgreSQL is a connection string change, not a rewrite.

Pattern: Repository + Data Mapper. BookStore is the repository; _row_to_book
is the mapper. Route handlers never touch SQL directly.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = BookStore("sqlite:///bookshelf.db")
    book_id = store.create_book(Book(title="The One Thing", description="...",
                                     author="Gary Keller", username="alice"))
    books = store.list_by_username("alice")
    store.update_book(book_id, title="...", description="...", author="...")
    store.delete_book(book_id)
    store.close()
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, create_engine, event
from sqlalchemy.engine import Engine

from books.models import Book

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_books = Table(
    "books",
    metadata,
    Column("book_id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(255), nullable=False),
    Column("description", Text, nullable=False),
    Column("author", String(255), nullable=False),
    Column("username", String(255), nullable=False, index=True),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class BookStore:
    """Repository for Book entities."""

    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args, hide_parameters=True)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        metadata.create_all(self.engine)

    def create_book(self, book: Book) -> int:
        """Insert a new book and return its assigned book_id."""
        now = _now_iso()
        with self.engine.connect() as conn:
            result = conn.execute(
                _books.insert().values(
                    title=book.title,
                    description=book.description,
                    author=book.author,
                    username=book.username,
                    created_at=now,
                    updated_at=now,
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def list_by_username(self, username: str) -> list[Book]:
        """Return every book owned by username, oldest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _books.select().where(_books.c.username == username).order_by(_books.c.book_id)
            ).fetchall()
        return [_row_to_book(r) for r in rows]

    def get_book(self, book_id: int) -> Optional[Book]:
        """Look up a book by primary key. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_books.select().where(_books.c.book_id == book_id)).fetchone()
        return _row_to_book(row) if row is not None else None

    def update_book(self, book_id: int, title: str, description: str, author: str) -> Optional[Book]:
        """Replace the editable fields of a book and refresh updated_at.

        Returns the updated Book, or None if book_id does not exist. The owner
        and created_at are never changed here.
        """
        with self.engine.connect() as conn:
            result = conn.execute(
                _books.update()
                .where(_books.c.book_id == book_id)
                .values(title=title, description=description, author=author, updated_at=_now_iso())
            )
            conn.commit()
        if result.rowcount == 0:
            return None
        return self.get_book(book_id)

    def delete_book(self, book_id: int) -> bool:
        """Permanently delete a book. Returns True if deleted, False if not found."""
        with self.engine.connect() as conn:
            result = conn.execute(_books.delete().where(_books.c.book_id == book_id))
            conn.commit()
        return result.rowcount > 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_book(row) -> Book:
    return Book(
        id=row.book_id,
        title=row.title,
        description=row.description,
        author=row.author,
        username=row.username,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
