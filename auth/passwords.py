"""
auth/passwords.py -- Password hashing and verification.

bcrypt directly, no passlib wrapper. passlib's wrap-bug detection builds a
password longer than 72 bytes, which current bcrypt releases reject with an
explicit error. The API layer caps passwords at 72 UTF-8 bytes for the same
reason (see api/models.py).

hash_password() lets bcrypt errors propagate: a failed hash aborts the
registration with a server error and is never replaced by a weaker scheme.
verify_password() never raises -- a malformed stored hash simply fails to
match.
"""

from __future__ import annotations

from functools import lru_cache

import bcrypt

DEFAULT_ROUNDS = 10


def hash_password(plain: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Return a salted bcrypt hash of plain.

    The result embeds the algorithm, work factor and salt
    ($2b$<rounds>$<22-char salt><31-char hash>), so verify_password() needs
    nothing else to check it later.
    """
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except Exception:
        return False


@lru_cache(maxsize=4)
def _dummy_hash(rounds: int) -> str:
    return hash_password("bookshelf_timing_dummy", rounds)


def burn_verification(plain: str, rounds: int = DEFAULT_ROUNDS) -> None:
    """Run one bcrypt check against a throwaway hash of the same work factor.

    Called when a login names an unknown username so the response takes as
    long as a real password check. The cached dummy hash is computed on first
    use per work factor.
    """
    verify_password(plain, _dummy_hash(rounds))
