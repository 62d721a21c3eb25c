"""Audit logging for citemeta.

Main Components
---------------
- AuditLogger: JSONL event logger
- LogEvent: event envelope
"""

from citemeta.audit.logger import AuditLogger, generate_run_id
from citemeta.audit.models import LogEvent

__all__ = [
    "AuditLogger",
    "LogEvent",
    "generate_run_id",
]
