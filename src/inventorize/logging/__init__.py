"""Console and structured audit logging utilities."""

from .audit import AuditEvent, JsonlAuditLogger, utc_timestamp
from .console import LOG_FORMAT, configure_console_logging

__all__ = [
    "AuditEvent",
    "JsonlAuditLogger",
    "LOG_FORMAT",
    "configure_console_logging",
    "utc_timestamp",
]
