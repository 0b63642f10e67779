"""
bugboard.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Identity`) injected into endpoints.
- Define the decision type returned by authentication strategies.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Authenticated caller identity.
    """

    user_id: str
    email: str = ""


@dataclass(frozen=True, slots=True)
class AuthDecision:
    # A definitive answer from one strategy; identity=None means "reject".
    identity: Identity | None

    @classmethod
    def reject(cls) -> AuthDecision:
        return cls(identity=None)


# --- Module Notes -----------------------------------------------------------
# Keep these models minimal; they are used across API, services, and auth strategies.
