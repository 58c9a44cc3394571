"""
Command boundary for fsbridge.

Exposes each file operation under the command name the UI layer invokes.
Only boundary-safe values cross: strings, lists of byte values, booleans,
integers, ISO-8601 timestamps and JSON trees. Every failure is flattened
to a single message string.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from core.errors import FileOperationError

from .file_ops import FileAccess, FileInfo


@dataclass
class CommandResult:
    """Outcome of a dispatched command."""
    success: bool
    data: Any = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {"ok": True, "data": self.data}
        return {"ok": False, "error": self.error}


def _to_boundary(value: Any) -> Any:
    """Convert a return value to its boundary representation."""
    if isinstance(value, (bytes, bytearray)):
        return list(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, FileInfo):
        return value.to_dict()
    return value


STRING_ARGS = ("path", "from", "to")


def _to_bytes(content: Any) -> bytes:
    if isinstance(content, (bytes, bytearray)):
        return bytes(content)
    if isinstance(content, list) and all(
        isinstance(b, int) and not isinstance(b, bool) for b in content
    ):
        return bytes(content)
    raise TypeError("content must be bytes or a list of byte values")


def _check_args(name: str, args: Dict[str, Any]) -> None:
    """Reject non-string paths, and non-string text content."""
    for key in STRING_ARGS:
        if key in args and not isinstance(args[key], str):
            raise TypeError(f"{key} must be a string, not {type(args[key]).__name__}")

    if name != "file_write_bytes" and "content" in args and not isinstance(args["content"], str):
        raise TypeError(f"content must be a string, not {type(args['content']).__name__}")


COMMANDS: Dict[str, Callable[..., Any]] = {
    "file_exists": lambda access, path: access.exists(path),
    "file_is_file": lambda access, path: access.is_file(path),
    "file_dir_exists": lambda access, path: access.is_dir(path),
    "file_read": lambda access, path: access.read_text(path),
    "file_read_bytes": lambda access, path: access.read_bytes(path),
    "file_read_json": lambda access, path: access.read_structured(path),
    "file_write": lambda access, path, content: access.write_text(path, content),
    "file_write_bytes": lambda access, path, content: access.write_bytes(path, _to_bytes(content)),
    "file_write_json": lambda access, path, data: access.write_structured(path, data),
    "file_append": lambda access, path, content: access.append_text(path, content),
    "file_create_dir": lambda access, path: access.create_dir(path),
    "file_list_dir": lambda access, path: access.list_dir(path),
    "file_delete": lambda access, path: access.delete_file(path),
    "file_copy": lambda access, **kw: access.copy_file(kw["from"], kw["to"]),
    "file_move": lambda access, **kw: access.move_file(kw["from"], kw["to"]),
    "file_size": lambda access, path: access.file_size(path),
    "file_modified": lambda access, path: access.file_modified(path),
    "file_info": lambda access, path: access.file_info(path),
    "get_user_home_dir": lambda access: access.home_dir(),
    # Legacy names kept by the host
    "read_file_content": lambda access, path: access.read_text(path),
    "check_file_exists": lambda access, path: access.is_file(path),
}

COMMAND_NAMES: List[str] = sorted(COMMANDS)


def dispatch(access: FileAccess, name: str, args: Optional[Dict[str, Any]] = None) -> CommandResult:
    """
    Invoke a command by name.

    Args:
        access: FileAccess instance that performs the operation
        name: Command name, e.g. "file_read"
        args: Keyword arguments for the command

    Returns:
        CommandResult carrying the boundary value or the error message
    """
    handler = COMMANDS.get(name)
    if handler is None:
        return CommandResult(success=False, error=f"Unknown command: {name}", error_kind="UnknownCommand")

    args = args or {}

    try:
        if not isinstance(args, dict):
            raise TypeError("arguments must be an object")
        _check_args(name, args)
        value = handler(access, **args)
    except FileOperationError as e:
        return CommandResult(success=False, error=str(e), error_kind=e.kind)
    except (TypeError, KeyError, ValueError) as e:
        return CommandResult(
            success=False,
            error=f"Invalid arguments for {name}: {e}",
            error_kind="InvalidArguments"
        )

    return CommandResult(success=True, data=_to_boundary(value))


async def dispatch_async(
    access: FileAccess,
    name: str,
    args: Optional[Dict[str, Any]] = None
) -> CommandResult:
    """Run dispatch on a worker thread. Concurrent calls are not ordered."""
    return await asyncio.to_thread(dispatch, access, name, args)
