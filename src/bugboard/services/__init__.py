"""
bugboard.services

Service layer.

Responsibilities:
- Board-owner resolution for team boards.
- Task creation and report promotion (transaction ownership).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Routers call services for multi-step writes; single-row CRUD goes straight to
# repositories.
