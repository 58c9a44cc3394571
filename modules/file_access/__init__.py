"""
File access module for fsbridge.

Provides typed file, directory and metadata operations over resolved paths,
plus the command boundary the UI layer invokes.
"""

from .paths import PathResolver, home_from_environment
from .file_ops import FileAccess, FileInfo
from .commands import CommandResult, COMMAND_NAMES, dispatch, dispatch_async

__all__ = [
    'PathResolver',
    'home_from_environment',
    'FileAccess',
    'FileInfo',
    'CommandResult',
    'COMMAND_NAMES',
    'dispatch',
    'dispatch_async',
]
