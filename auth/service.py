"""
auth/service.py -- Account registration and login.

AccountService is the only place that combines the user store, the password
hasher and the token service. Routes call register() / login() and let the
raised AppError subclasses become HTTP responses (see api/main.py).

register():
  1. Look up the username. Taken -> ConflictError, nothing is written.
  2. Hash the password (bcrypt, configured work factor).
  3. Insert the row. If a concurrent registration won the race, the UNIQUE
     constraint fires and that is also reported as ConflictError.

login():
  1. Look up the username. Missing -> NotFoundError, after burning one bcrypt
     verification so the response time matches a real password check.
  2. Verify the password. Mismatch -> AuthError.
  3. Issue a token.

  With uniform_login_errors=True both failures raise the same AuthError, so a
  client cannot tell an unknown username from a wrong password.

Database failures become StoreError with a fixed message. The driver error is
logged, never returned.

Layer rule: no imports from api/ or books/.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth.models import User
from auth.passwords import DEFAULT_ROUNDS, burn_verification, hash_password, verify_password
from auth.store import UserStore
from auth.tokens import TokenService
from core.errors import AuthError, ConflictError, NotFoundError, StoreError

logger = logging.getLogger("bookshelf.auth")

_GENERIC_LOGIN_FAILURE = "Invalid username or password."


class AccountService:
    def __init__(
        self,
        store: UserStore,
        tokens: TokenService,
        bcrypt_rounds: int = DEFAULT_ROUNDS,
        uniform_login_errors: bool = False,
    ) -> None:
        self._store = store
        self._tokens = tokens
        self._rounds = bcrypt_rounds
        self._uniform_login_errors = uniform_login_errors

    def register(self, username: str, password: str, first_name: str, last_name: str) -> User:
        """Create a new account and return the stored User."""
        try:
            existing = self._store.get_by_username(username)
        except SQLAlchemyError as exc:
            logger.error("User lookup failed during registration: %s", type(exc).__name__)
            raise StoreError("Server could not create user.") from exc
        if existing is not None:
            logger.info("Registration rejected for %r: username taken", username)
            raise ConflictError("User already existed.")

        user = User(
            username=username,
            password_hash=hash_password(password, self._rounds),
            first_name=first_name,
            last_name=last_name,
        )
        try:
            user.id = self._store.create_user(user)
        except IntegrityError as exc:
            logger.info("Registration rejected for %r: lost race on unique username", username)
            raise ConflictError("User already existed.") from exc
        except SQLAlchemyError as exc:
            logger.error("User insert failed: %s", type(exc).__name__)
            raise StoreError("Server could not create user.") from exc

        logger.info("Registered user %r (id=%s)", username, user.id)
        return user

    def login(self, username: str, password: str) -> str:
        """Check credentials and return a signed bearer token."""
        try:
            user = self._store.get_by_username(username)
        except SQLAlchemyError as exc:
            logger.error("User lookup failed during login: %s", type(exc).__name__)
            raise StoreError("Server could not log in user.") from exc

        if user is None:
            burn_verification(password, self._rounds)
            logger.info("Login failed for %r: unknown username", username)
            if self._uniform_login_errors:
                raise AuthError(_GENERIC_LOGIN_FAILURE)
            raise NotFoundError("User not found.")

        if not verify_password(password, user.password_hash):
            logger.info("Login failed for %r: wrong password", username)
            if self._uniform_login_errors:
                raise AuthError(_GENERIC_LOGIN_FAILURE)
            raise AuthError("password not valid.")

        token = self._tokens.issue(user)
        logger.info("User %r logged in", username)
        return token
