"""
bugboard.api

API package for the BugBoard service.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring and request/response models.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Routes keep the paths the web and mobile clients already call (`/api/...`).
