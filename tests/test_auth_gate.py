"""
tests/test_auth_gate.py -- Unit tests for the require_claims route guard.

A throwaway FastAPI app with one protected route is used so the handler can
be replaced by a spy: the guard's main promise is that a rejected request
never reaches the handler, and only a call-count assertion proves that.

Covers:
  - missing / non-Bearer / empty Authorization header -> 401, handler not run
  - bad signature, expired, malformed token -> 401 with one generic message
  - valid token -> handler runs once with the verified claims attached
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.testclient import TestClient

from api.main import app_error_handler
from auth.dependencies import require_claims
from auth.models import User
from auth.tokens import TokenService
from conftest import OTHER_SECRET, TEST_TTL, bearer, tamper
from core.errors import AppError

_USER = User(id=3, username="carol", password_hash="h", first_name="C", last_name="D")


@pytest.fixture
def gated(tokens: TokenService) -> tuple[TestClient, MagicMock]:
    spy = MagicMock(return_value={"ok": True})
    gate_app = FastAPI()
    gate_app.state.tokens = tokens
    gate_app.add_exception_handler(AppError, app_error_handler)

    router = APIRouter(dependencies=[Depends(require_claims)])

    @router.get("/protected")
    def protected(request: Request):
        return spy(request.state.claims)

    gate_app.include_router(router)
    return TestClient(gate_app), spy


class TestRejectedRequests:
    @pytest.mark.parametrize(
        "headers",
        [
            {},
            {"Authorization": ""},
            {"Authorization": "Bearer"},
            {"Authorization": "Bearer    "},
            {"Authorization": "Basic Y2Fyb2w6cHc="},
        ],
    )
    def test_missing_credential(self, gated, headers) -> None:
        client, spy = gated
        resp = client.get("/protected", headers=headers)
        assert resp.status_code == 401
        assert resp.json()["message"] == "Authentication required."
        assert spy.call_count == 0

    def test_bad_signature(self, gated) -> None:
        client, spy = gated
        foreign = TokenService(OTHER_SECRET, TEST_TTL).issue(_USER)
        resp = client.get("/protected", headers=bearer(foreign))
        assert resp.status_code == 401
        assert spy.call_count == 0

    def test_tampered_token(self, gated, tokens: TokenService) -> None:
        client, spy = gated
        resp = client.get("/protected", headers=bearer(tamper(tokens.issue(_USER))))
        assert resp.status_code == 401
        assert spy.call_count == 0

    def test_expired_token(self, gated, tokens: TokenService) -> None:
        client, spy = gated
        past = datetime.now(timezone.utc) - timedelta(hours=1)
        resp = client.get("/protected", headers=bearer(tokens.issue(_USER, issued_at=past)))
        assert resp.status_code == 401
        assert spy.call_count == 0

    def test_malformed_token(self, gated) -> None:
        client, spy = gated
        resp = client.get("/protected", headers=bearer("definitely.not.ajwt"))
        assert resp.status_code == 401
        assert spy.call_count == 0

    def test_rejection_reason_is_not_disclosed(self, gated, tokens: TokenService) -> None:
        """Expired and forged tokens get byte-identical bodies."""
        client, _ = gated
        past = datetime.now(timezone.utc) - timedelta(hours=1)
        expired = client.get("/protected", headers=bearer(tokens.issue(_USER, issued_at=past)))
        forged = client.get("/protected", headers=bearer(TokenService(OTHER_SECRET, TEST_TTL).issue(_USER)))
        assert expired.json() == forged.json()
        assert expired.json()["message"] == "Invalid or expired token."
        body = expired.text.lower()
        assert "expired_signature" not in body and "bad_signature" not in body


class TestAuthorizedRequests:
    def test_valid_token_reaches_handler_with_claims(self, gated, tokens: TokenService) -> None:
        client, spy = gated
        resp = client.get("/protected", headers=bearer(tokens.issue(_USER)))
        assert resp.status_code == 200
        assert spy.call_count == 1
        claims = spy.call_args.args[0]
        assert claims.subject_id == 3
        assert claims.username == "carol"

    def test_scheme_is_case_insensitive(self, gated, tokens: TokenService) -> None:
        client, spy = gated
        resp = client.get("/protected", headers={"Authorization": f"bearer {tokens.issue(_USER)}"})
        assert resp.status_code == 200
        assert spy.call_count == 1
