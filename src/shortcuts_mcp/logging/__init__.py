"""Structured logging utilities."""

from .audit import (
    REFRESH_EVENT_TOOL,
    AuditEvent,
    JsonlAuditLogger,
    sanitize_arguments,
    utc_timestamp,
)

__all__ = [
    "AuditEvent",
    "JsonlAuditLogger",
    "REFRESH_EVENT_TOOL",
    "sanitize_arguments",
    "utc_timestamp",
]
