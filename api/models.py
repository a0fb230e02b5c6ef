"""
API request and response models for the Bookshelf REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
books/models.py, which own the internal domain representation. Route handlers
map between the two.

Every request body is validated here, before it reaches AccountService or a
store: required strings are stripped and must be non-empty. A failure becomes
a 400 via the RequestValidationError handler in api/main.py.

JSON field names follow the public contract (firstName, lastName, book_id);
Python attribute names are snake_case.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

from books.models import Book

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# bcrypt only looks at the first 72 bytes of a password; newer bcrypt releases
# refuse longer input outright.
MAX_PASSWORD_BYTES = 72

_RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
_RequiredLongText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=10_000)]


# ---------------------------------------------------------------------------
# Auth -- request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /auth/register."""

    model_config = ConfigDict(populate_by_name=True)

    username: _RequiredText
    # Not stripped: leading/trailing spaces are part of the secret.
    password: str = Field(min_length=1)
    first_name: _RequiredText = Field(alias="firstName")
    last_name: _RequiredText = Field(alias="lastName")

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class LoginRequest(BaseModel):
    """Request body for POST /auth/login."""

    username: _RequiredText
    password: str = Field(min_length=1)


# ---------------------------------------------------------------------------
# Auth -- response models
# ---------------------------------------------------------------------------


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


class LoginResponse(BaseModel):
    """Response for a successful POST /auth/login."""

    model_config = ConfigDict(frozen=True)

    message: str
    token: str


# ---------------------------------------------------------------------------
# Books
# ---------------------------------------------------------------------------


class BookWrite(BaseModel):
    """Request body for POST /books and PUT /books/{book_id}.

    The owner is never taken from the body; it is the authenticated user.
    Unknown fields (e.g. a legacy "username") are ignored.
    """

    title: _RequiredText
    description: _RequiredLongText
    author: _RequiredText


class BookOut(BaseModel):
    """A single book as returned to clients."""

    model_config = ConfigDict(frozen=True)

    book_id: int
    title: str
    description: str
    author: str
    username: str
    created_at: str
    updated_at: str

    @classmethod
    def from_book(cls, book: Book) -> "BookOut":
        return cls(
            book_id=book.id,
            title=book.title,
            description=book.description,
            author=book.author,
            username=book.username,
            created_at=book.created_at,
            updated_at=book.updated_at,
        )


class BookListResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: list[BookOut]


class BookDetailResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: BookOut


class BookUpdatedResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    data: BookOut


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Error body returned on every 4xx/5xx response."""

    model_config = ConfigDict(frozen=True)

    message: str
    code: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]
