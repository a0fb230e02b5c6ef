"""
api/routes/books.py -- Book collection routes.

Routes:
  POST   /books             -- add a book owned by the caller; 201 {message}
  GET    /books             -- list the caller's books; 200 {data: [...]}
  GET    /books/{book_id}   -- one book; 200 {data} | 404
  PUT    /books/{book_id}   -- replace title/description/author; 200 {message, data} | 404
  DELETE /books/{book_id}   -- remove; 204 | 404

Every route requires a bearer token. The router-level dependency runs the
auth gate before any handler, so an unauthenticated request is answered with
401 and the handler body never executes.

Ownership: books are created under the token's username and GET /books lists
that user's books. Lookups by id are not owner-restricted.

Store failures become 500 with a fixed message; the driver error is logged.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request, Response
from sqlalchemy.exc import SQLAlchemyError

from api.models import BookDetailResponse, BookListResponse, BookOut, BookUpdatedResponse, BookWrite, MessageResponse
from auth.dependencies import require_claims
from auth.models import TokenClaims
from books.models import Book
from books.store import BookStore
from core.errors import NotFoundError, StoreError

logger = logging.getLogger("bookshelf.books")

# Router-level dependency applies to every route registered on this router,
# so individual handlers don't each need to repeat Depends(require_claims).
router = APIRouter(dependencies=[Depends(require_claims)])

# Ids outside the signed 64-bit range are rejected as 400 before reaching the store.
BookId = Annotated[int, Path(ge=1, le=2**63 - 1)]


@contextmanager
def _store_errors(message: str) -> Iterator[None]:
    """Translate any SQLAlchemy failure inside the block into StoreError(message)."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("%s (%s)", message, type(exc).__name__)
        raise StoreError(message) from exc


def _claims(request: Request) -> TokenClaims:
    return request.state.claims


# ---------------------------------------------------------------------------
# POST /books
# ---------------------------------------------------------------------------


@router.post("/books", response_model=MessageResponse, status_code=201)
def create_book(request: Request, body: BookWrite) -> MessageResponse:
    """Add a book to the caller's collection."""
    store: BookStore = request.app.state.book_store
    owner = _claims(request).username
    with _store_errors("Server could not create book."):
        book_id = store.create_book(
            Book(title=body.title, description=body.description, author=body.author, username=owner)
        )
    logger.info("Book %s created by %r", book_id, owner)
    return MessageResponse(message="Created book successfully.")


# ---------------------------------------------------------------------------
# GET /books
# ---------------------------------------------------------------------------


@router.get("/books", response_model=BookListResponse)
def list_books(request: Request) -> BookListResponse:
    store: BookStore = request.app.state.book_store
    with _store_errors("Server could not read books."):
        books = store.list_by_username(_claims(request).username)
    return BookListResponse(data=[BookOut.from_book(b) for b in books])


# ---------------------------------------------------------------------------
# GET /books/{book_id}
# ---------------------------------------------------------------------------


@router.get("/books/{book_id}", response_model=BookDetailResponse)
def get_book(request: Request, book_id: BookId) -> BookDetailResponse:
    store: BookStore = request.app.state.book_store
    with _store_errors("Server could not read books from id."):
        book = store.get_book(book_id)
    if book is None:
        raise NotFoundError(f"Server could not find a requested book (book_id: {book_id})")
    return BookDetailResponse(data=BookOut.from_book(book))


# ---------------------------------------------------------------------------
# PUT /books/{book_id}
# ---------------------------------------------------------------------------


@router.put("/books/{book_id}", response_model=BookUpdatedResponse)
def update_book(request: Request, book_id: BookId, body: BookWrite) -> BookUpdatedResponse:
    """Replace a book's title, description and author."""
    store: BookStore = request.app.state.book_store
    with _store_errors("Server could not update book."):
        updated = store.update_book(book_id, title=body.title, description=body.description, author=body.author)
    if updated is None:
        raise NotFoundError("Book not found.")
    return BookUpdatedResponse(message="update book info successfully.", data=BookOut.from_book(updated))


# ---------------------------------------------------------------------------
# DELETE /books/{book_id}
# ---------------------------------------------------------------------------


@router.delete("/books/{book_id}", status_code=204)
def delete_book(request: Request, book_id: BookId) -> Response:
    store: BookStore = request.app.state.book_store
    with _store_errors("Server could not delete book."):
        deleted = store.delete_book(book_id)
    if not deleted:
        raise NotFoundError("Book not found.")
    return Response(status_code=204)
