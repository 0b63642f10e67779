"""
bugboard.auth

Authentication package.

Responsibilities:
- JWT issuing and verification.
- Cookie-session lookup against the backing auth service.
- Request authentication strategies and FastAPI dependencies.
- Encryption of secrets stored at rest.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing here touches the database; board-level access lives in `services`.
