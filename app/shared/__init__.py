"""Shared cross-cutting helpers (telemetry and logging).

Used by application, infrastructure and API layers. No business logic.
"""

from app.shared.telemetry import (
    add_span_attributes,
    add_span_event,
    get_logger,
    setup_logging,
    traced,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "traced",
    "add_span_attributes",
    "add_span_event",
]
