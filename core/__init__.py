# fsbridge - Core Module
"""
Core infrastructure for fsbridge.
This module provides the error taxonomy, audit logging and configuration
that the file access layer depends on.
"""

from .errors import FileOperationError, ReadError, WriteError, ParseError, SerializeError
from .logger import AuditLogger, AuditEntry, ActionType, ActionStatus
from .config import FileAccessConfig

__all__ = [
    "FileOperationError",
    "ReadError",
    "WriteError",
    "ParseError",
    "SerializeError",
    "AuditLogger",
    "AuditEntry",
    "ActionType",
    "ActionStatus",
    "FileAccessConfig",
]

__version__ = "0.1.0"
