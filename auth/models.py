"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in books/models.py -- dataclasses own domain shape; stores, services and
routes do the work.

Layer rule: no imports from api/ or books/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """A registered account.

    password_hash is the bcrypt output, never the plaintext. It must not be
    logged or copied into any response model.

    id is None before the record is written to the database.
    """

    username: str
    password_hash: str
    first_name: str
    last_name: str
    id: int | None = None
    created_at: str = ""  # ISO 8601, set by store on insert
    updated_at: str = ""  # ISO 8601, set by store on insert


@dataclass(frozen=True)
class TokenClaims:
    """Identity claims carried by a verified bearer token.

    Built by TokenService.verify() and attached to request.state.claims by
    the auth gate. Downstream handlers read identity from here and never hit
    the users table to do so.
    """

    subject_id: int
    username: str
    first_name: str
    last_name: str
    issued_at: datetime
    expires_at: datetime
