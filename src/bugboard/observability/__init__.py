"""
bugboard.observability

Observability package.

Responsibilities:
- Structured logging configuration with credential redaction.
- Request context propagation for consistent log enrichment.
"""

# Package marker.
