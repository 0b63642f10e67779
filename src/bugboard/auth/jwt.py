"""
bugboard.auth.jwt

JWT issuing and verification helpers.

Responsibilities:
- Issue HS256 tokens for local/dev scenarios and tests.
- Verify bearer tokens with an ordered pair of strategies: the shared secret
  (HS256) first, then the issuer's published key set (RS256/ES256).

Note:
- Verification never raises across the module boundary; `None` means "not
  authenticated" and callers map it to 401.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol

import jwt
from jwt import PyJWKClient, PyJWTError

from bugboard.observability.logging import get_logger
from bugboard.settings import Settings

log = get_logger(__name__)

SYMMETRIC_ALGORITHMS = ["HS256"]
ASYMMETRIC_ALGORITHMS = ["RS256", "ES256"]
REQUIRED_CLAIMS = ["exp", "sub"]


@dataclass(frozen=True, slots=True)
class JwtConfig:
    # Issuer/audience are enforced by both strategies; issuer is skipped when unknown.
    audience: str
    secret: str | None = None
    issuer: str | None = None

    @property
    def jwks_url(self) -> str | None:
        if not self.issuer:
            return None
        return f"{self.issuer}/.well-known/jwks.json"

    @classmethod
    def from_settings(cls, settings: Settings) -> JwtConfig:
        return cls(
            audience=settings.jwt_audience,
            secret=settings.jwt_secret,
            issuer=settings.resolved_jwt_issuer,
        )


class JwtValidationError(Exception):
    pass


class SigningKeySource(Protocol):
    def get_signing_key_from_jwt(self, token: str) -> Any: ...


def issue_token(
    *,
    cfg: JwtConfig,
    subject: str,
    email: str = "",
    ttl: timedelta = timedelta(hours=1),
) -> str:
    if not cfg.secret:
        raise JwtValidationError("no shared secret configured")
    now = datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        "aud": cfg.audience,
        "sub": subject,
        "email": email,
        "role": "authenticated",
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    if cfg.issuer:
        payload["iss"] = cfg.issuer
    return jwt.encode(payload, cfg.secret, algorithm="HS256")


class JwtVerifier:
    def __init__(self, cfg: JwtConfig, *, key_source: SigningKeySource | None = None) -> None:
        self._cfg = cfg
        self._key_source = key_source
        if self._key_source is None and cfg.jwks_url:
            # PyJWKClient caches the fetched key set between calls.
            self._key_source = PyJWKClient(cfg.jwks_url, cache_keys=True, lifespan=600)

    def _decode(self, token: str, key: Any, algorithms: list[str]) -> dict[str, Any]:
        options: dict[str, Any] = {"require": REQUIRED_CLAIMS}
        try:
            return jwt.decode(
                token,
                key,
                algorithms=algorithms,
                audience=self._cfg.audience,
                issuer=self._cfg.issuer,
                options=options,
            )
        except PyJWTError as e:
            raise JwtValidationError(str(e)) from e

    def _verify_symmetric(self, token: str) -> dict[str, Any]:
        return self._decode(token, self._cfg.secret, SYMMETRIC_ALGORITHMS)

    def _verify_asymmetric(self, token: str, key_source: SigningKeySource) -> dict[str, Any]:
        try:
            signing_key = key_source.get_signing_key_from_jwt(token)
        except (PyJWTError, ValueError) as e:
            # ValueError covers a key-set endpoint that answers with a non-JSON body.
            raise JwtValidationError(f"signing key lookup failed: {e}") from e
        return self._decode(token, signing_key.key, ASYMMETRIC_ALGORITHMS)

    def verify(self, token: str) -> dict[str, Any] | None:
        if self._cfg.secret:
            try:
                return self._verify_symmetric(token)
            except JwtValidationError as e:
                # Fall through: the token may be signed by the issuer's key set.
                log.debug("jwt_symmetric_rejected", reason=str(e))

        if self._key_source is not None:
            try:
                return self._verify_asymmetric(token, self._key_source)
            except JwtValidationError as e:
                log.debug("jwt_asymmetric_rejected", reason=str(e))

        return None


# --- Module Notes -----------------------------------------------------------
# Token issuing is used by `api/routers/dev_auth.py` and the test suite.
# The verifier is built once per app (see `api/app.py`) so the key-set cache
# survives across requests.
