"""
auth/tokens.py -- Bearer token issuance and verification.

Security design decisions:
  JWT: python-jose with HS256. Issuer and verifier are the same process, so a
       symmetric secret is enough -- there is no key distribution problem to
       solve with RS256. Tokens carry the user id (sub), username, first and
       last name, issue time and expiry.

  Stateless: nothing is stored server-side. A token is valid until exp passes;
       there is no revocation list.

  Secret: passed to the TokenService constructor (normally from
       core.config.get_settings()). Nothing in this module reads configuration
       on its own, so two services with different secrets can coexist in one
       test run.

  Rejections: verify() raises TokenRejected with a RejectionReason. The reason
       is for logs and tests only. The auth gate turns every rejection into the
       same generic 401 so clients learn nothing about why a token failed.

Layer rule: no imports from api/ or books/.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError

from auth.models import TokenClaims, User

_ALGORITHM = "HS256"


class RejectionReason(str, Enum):
    """Why a request failed authentication.

    MISSING_TOKEN is produced by the auth gate (no bearer credential at all);
    TokenService.verify() only ever raises the other three.
    """

    MISSING_TOKEN = "missing_token"
    MALFORMED = "malformed"
    BAD_SIGNATURE = "bad_signature"
    EXPIRED = "expired"


class TokenRejected(Exception):
    def __init__(self, reason: RejectionReason) -> None:
        super().__init__(reason.value)
        self.reason = reason


class TokenService:
    """Issues and verifies signed, time-limited bearer tokens.

    Usage:
        tokens = TokenService(settings.secret_key, settings.token_ttl_seconds)
        token = tokens.issue(user)
        claims = tokens.verify(token)   # raises TokenRejected
    """

    def __init__(self, secret_key: str, ttl_seconds: int, algorithm: str = _ALGORITHM) -> None:
        if not secret_key:
            raise ValueError("TokenService requires a non-empty secret key.")
        if ttl_seconds <= 0:
            raise ValueError("Token TTL must be a positive number of seconds.")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.ttl_seconds = ttl_seconds

    def issue(self, user: User, issued_at: datetime | None = None) -> str:
        """Encode a signed JWT for user, valid for ttl_seconds from issued_at.

        issued_at defaults to now. Callers other than tests have no reason to
        pass it.
        """
        if user.id is None:
            raise ValueError("Cannot issue a token for a user that has not been stored.")
        now = issued_at or datetime.now(timezone.utc)
        iat = int(now.timestamp())
        payload = {
            "sub": str(user.id),
            "username": user.username,
            "firstName": user.first_name,
            "lastName": user.last_name,
            "iat": iat,
            "exp": iat + self.ttl_seconds,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        """Check structure, signature and expiry, in that order.

        Raises TokenRejected:
          MALFORMED      -- not a decodable JWT, or required claims missing/invalid
          BAD_SIGNATURE  -- signature does not match this service's secret
          EXPIRED        -- correctly signed but exp has passed
        """
        try:
            jwt.get_unverified_header(token)
            jwt.get_unverified_claims(token)
        except JWTError as exc:
            raise TokenRejected(RejectionReason.MALFORMED) from exc

        # jose verifies the signature before it looks at any claim, so an
        # ExpiredSignatureError always comes from a correctly signed token.
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except ExpiredSignatureError as exc:
            raise TokenRejected(RejectionReason.EXPIRED) from exc
        except JWTClaimsError as exc:
            raise TokenRejected(RejectionReason.MALFORMED) from exc
        except JWTError as exc:
            raise TokenRejected(RejectionReason.BAD_SIGNATURE) from exc

        return _claims_from_payload(payload)


def _claims_from_payload(payload: dict) -> TokenClaims:
    sub = payload.get("sub")
    username = payload.get("username")
    iat = payload.get("iat")
    exp = payload.get("exp")
    if not isinstance(sub, str) or not sub.isdigit():
        raise TokenRejected(RejectionReason.MALFORMED)
    if not isinstance(username, str) or not username:
        raise TokenRejected(RejectionReason.MALFORMED)
    # A token without exp would never expire; treat it as unusable.
    if not isinstance(exp, int) or not isinstance(iat, int):
        raise TokenRejected(RejectionReason.MALFORMED)
    return TokenClaims(
        subject_id=int(sub),
        username=username,
        first_name=str(payload.get("firstName") or ""),
        last_name=str(payload.get("lastName") or ""),
        issued_at=datetime.fromtimestamp(iat, tz=timezone.utc),
        expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
    )
