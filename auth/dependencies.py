"""
auth/dependencies.py -- FastAPI Depends() helper that guards protected routes.

One auth method: the Authorization: Bearer <token> header. require_claims()
runs before the route handler; when it raises, the handler never executes.

Per request the gate moves from unchecked to exactly one of:
  authorized -- claims attached to request.state.claims and returned
  rejected   -- AuthError(401); missing credential or any TokenRejected

The client sees one of two fixed messages. The specific rejection reason
(malformed, bad signature, expired) goes to the log only.

The gate performs no database access: identity comes from the token alone.

Layer rule: auth/dependencies.py may import from fastapi (for Request)
because this module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

import logging

from fastapi import Request

from auth.models import TokenClaims
from auth.tokens import RejectionReason, TokenRejected, TokenService
from core.errors import AuthError

logger = logging.getLogger("bookshelf.auth")


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, credential = header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return credential.strip() or None


def require_claims(request: Request) -> TokenClaims:
    """Require a valid bearer token. Raises 401 AuthError otherwise.

    Use as a FastAPI dependency:
        router = APIRouter(dependencies=[Depends(require_claims)])

        @router.get("/protected")
        def route(claims: TokenClaims = Depends(require_claims)): ...
    """
    token = _bearer_token(request)
    if token is None:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, RejectionReason.MISSING_TOKEN.value)
        raise AuthError("Authentication required.", code="unauthorized", status_code=401)

    tokens: TokenService = request.app.state.tokens
    try:
        claims = tokens.verify(token)
    except TokenRejected as exc:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.reason.value)
        raise AuthError("Invalid or expired token.", code="unauthorized", status_code=401) from exc

    request.state.claims = claims
    return claims
