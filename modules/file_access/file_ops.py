"""
File operations module for fsbridge.

Provides whole-file read/write of text, bytes and JSON, directory
operations and metadata queries. Every OS failure is classified into the
error vocabulary of core.errors before it reaches the caller.
"""

import json
import os
import shutil
import stat
import warnings
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Type

from core.config import DEFAULT_JSON_INDENT
from core.errors import (
    FileOperationError,
    ReadError,
    WriteError,
    ParseError,
    SerializeError,
    describe_cause,
)
from core.logger import AuditLogger, ActionType, ActionStatus

from .paths import PathResolver


@dataclass
class FileInfo:
    """Snapshot of a file's metadata. Never cached."""
    path: str
    size: int
    modified: datetime
    is_dir: bool
    is_file: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "size": self.size,
            "modified": self.modified.isoformat(),
            "is_dir": self.is_dir,
            "is_file": self.is_file,
        }


def _reject_constant(name: str):
    raise ValueError(f"invalid JSON constant: {name}")


def _is_text_name(name: str) -> bool:
    # Undecodable names come back from the OS with surrogate escapes.
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


class FileAccess:
    """Typed filesystem operations over resolved paths."""

    def __init__(
        self,
        resolver: Optional[PathResolver] = None,
        logger: Optional[AuditLogger] = None,
        json_indent: int = DEFAULT_JSON_INDENT
    ):
        """
        Initialize FileAccess.

        Args:
            resolver: Path resolver used for every path argument
                (default: reads the home directory from the environment)
            logger: Audit logger, or None to disable auditing
            json_indent: Indent used when writing JSON
        """
        self.resolver = resolver or PathResolver.from_environment()
        self.logger = logger
        self.json_indent = json_indent

    def resolve(self, path: str) -> str:
        return self.resolver.resolve(path)

    def _log(
        self,
        action_type: ActionType,
        operation: str,
        target: str,
        status: ActionStatus = ActionStatus.EXECUTED,
        result: Optional[str] = None
    ) -> None:
        if self.logger is None:
            return
        # An unwritable audit log never changes the operation's outcome.
        try:
            self.logger.log_action(
                action_type=action_type,
                operation=operation,
                target=target,
                status=status,
                result=result
            )
        except OSError as e:
            warnings.warn(f"Could not write audit entry for {operation}: {e}", RuntimeWarning)

    @contextmanager
    def _classified(
        self,
        error_cls: Type[FileOperationError],
        operation: str,
        path: str,
        action_type: ActionType
    ) -> Iterator[None]:
        """Turn OS and codec failures raised in the block into error_cls."""
        try:
            yield
        except FileOperationError as e:
            self._log(action_type, operation, path, ActionStatus.FAILED, str(e))
            raise
        except (OSError, ValueError) as e:
            error = error_cls(operation, path, describe_cause(e))
            self._log(action_type, operation, path, ActionStatus.FAILED, str(error))
            raise error from e

    # Existence / kind queries never fail.

    def exists(self, path: str) -> bool:
        return os.path.exists(self.resolve(path))

    def is_file(self, path: str) -> bool:
        return os.path.isfile(self.resolve(path))

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(self.resolve(path))

    def home_dir(self) -> str:
        """
        Get the current user's home directory.

        Raises:
            ReadError: If the home directory cannot be determined
        """
        home = self.resolver.home_dir
        if home is None:
            raise ReadError("home_dir", "~", "cannot determine the user's home directory")
        return home

    # Reads

    def _read(self, resolved: str, operation: str) -> bytes:
        with self._classified(ReadError, operation, resolved, ActionType.READ):
            with open(resolved, "rb") as f:
                return f.read()

    def read_bytes(self, path: str) -> bytes:
        """
        Read a whole file without decoding.

        Raises:
            ReadError: If the file is missing, a directory or unreadable
        """
        resolved = self.resolve(path)
        data = self._read(resolved, "read_bytes")
        self._log(ActionType.READ, "read_bytes", resolved, result=f"{len(data)} bytes")
        return data

    def read_text(self, path: str) -> str:
        """
        Read a whole file as UTF-8 text.

        No newline translation is applied.

        Raises:
            ReadError: If the file can't be read or is not valid UTF-8
        """
        resolved = self.resolve(path)
        data = self._read(resolved, "read_text")
        with self._classified(ReadError, "read_text", resolved, ActionType.READ):
            content = data.decode("utf-8")
        self._log(ActionType.READ, "read_text", resolved, result=f"{len(data)} bytes")
        return content

    def read_structured(self, path: str) -> Any:
        """
        Read a whole file and parse it as JSON.

        Mapping key order is preserved as it appears in the file.

        Raises:
            ReadError: If the file can't be read as UTF-8 text
            ParseError: If the text is not a well-formed JSON document
        """
        resolved = self.resolve(path)
        data = self._read(resolved, "read_structured")
        with self._classified(ReadError, "read_structured", resolved, ActionType.READ):
            text = data.decode("utf-8")

        try:
            value = json.loads(text, parse_constant=_reject_constant)
        except (ValueError, RecursionError) as e:
            error = ParseError("read_structured", resolved, describe_cause(e))
            self._log(ActionType.READ, "read_structured", resolved, ActionStatus.FAILED, str(error))
            raise error from e

        self._log(ActionType.READ, "read_structured", resolved, result=f"{len(data)} bytes")
        return value

    # Writes

    def _write(self, resolved: str, data: bytes, operation: str, mode: str = "wb") -> None:
        with self._classified(WriteError, operation, resolved, ActionType.WRITE):
            with open(resolved, mode) as f:
                f.write(data)
        self._log(ActionType.WRITE, operation, resolved, result=f"{len(data)} bytes")

    def _encode(self, content: str, resolved: str, operation: str) -> bytes:
        with self._classified(WriteError, operation, resolved, ActionType.WRITE):
            return content.encode("utf-8")

    def write_bytes(self, path: str, content: bytes) -> None:
        """
        Overwrite a file with raw bytes, creating it if absent.

        Parent directories are never created.

        Raises:
            WriteError: If the parent is missing, the target is a
                directory or permission is denied
            TypeError: If content is not a bytes-like object
        """
        if not isinstance(content, (bytes, bytearray, memoryview)):
            raise TypeError(f"content must be bytes, not {type(content).__name__}")

        resolved = self.resolve(path)
        self._write(resolved, bytes(content), "write_bytes")

    def write_text(self, path: str, content: str) -> None:
        """
        Overwrite a file with UTF-8 text, creating it if absent.

        Parent directories are never created.

        Raises:
            WriteError: If the file can't be written
        """
        resolved = self.resolve(path)
        data = self._encode(content, resolved, "write_text")
        self._write(resolved, data, "write_text")

    def write_structured(self, path: str, value: Any) -> None:
        """
        Serialize a value as pretty-printed JSON and write it.

        Mapping keys keep the order they were given in.

        Raises:
            SerializeError: If the value is not representable as JSON
            WriteError: If the file can't be written
        """
        resolved = self.resolve(path)
        try:
            text = json.dumps(
                value,
                indent=self.json_indent,
                ensure_ascii=False,
                allow_nan=False
            )
            data = text.encode("utf-8")
        except (TypeError, ValueError, RecursionError) as e:
            error = SerializeError("write_structured", resolved, describe_cause(e))
            self._log(ActionType.WRITE, "write_structured", resolved, ActionStatus.FAILED, str(error))
            raise error from e

        self._write(resolved, data, "write_structured")

    def append_text(self, path: str, content: str) -> None:
        """
        Append UTF-8 text at the end of a file, creating it if absent.

        Concurrent appenders are not coordinated. Parent directories are
        never created.

        Raises:
            WriteError: If the file can't be opened or written
        """
        resolved = self.resolve(path)
        data = self._encode(content, resolved, "append_text")
        self._write(resolved, data, "append_text", mode="ab")

    # Directories

    def create_dir(self, path: str) -> None:
        """
        Create a directory and any missing ancestors.

        An existing directory is not an error.

        Raises:
            WriteError: If a non-directory entry is in the way or
                permission is denied
        """
        resolved = self.resolve(path)
        with self._classified(WriteError, "create_dir", resolved, ActionType.WRITE):
            os.makedirs(resolved, exist_ok=True)
        self._log(ActionType.WRITE, "create_dir", resolved)

    def list_dir(self, path: str) -> List[str]:
        """
        List the immediate child names of a directory.

        Names are returned in the order the OS reports them. Names that
        can't be represented as text are omitted.

        Raises:
            ReadError: If the path is missing, not a directory or unreadable
        """
        resolved = self.resolve(path)
        with self._classified(ReadError, "list_dir", resolved, ActionType.READ):
            with os.scandir(resolved) as it:
                names = [entry.name for entry in it]

        names = [name for name in names if _is_text_name(name)]
        self._log(ActionType.READ, "list_dir", resolved, result=f"{len(names)} entries")
        return names

    def delete_file(self, path: str) -> None:
        """
        Delete a file. A missing file is not an error.

        Raises:
            WriteError: If the path is a directory or permission is denied
        """
        resolved = self.resolve(path)
        with self._classified(WriteError, "delete_file", resolved, ActionType.DELETE):
            try:
                os.remove(resolved)
            except FileNotFoundError:
                self._log(ActionType.DELETE, "delete_file", resolved, result="absent")
                return
        self._log(ActionType.DELETE, "delete_file", resolved, result="deleted")

    def copy_file(self, from_path: str, to_path: str) -> int:
        """
        Copy a file's contents, overwriting the destination.

        Args:
            from_path: Source file path
            to_path: Destination file path

        Returns:
            Number of bytes copied

        Raises:
            ReadError: If the source is missing or a directory
            WriteError: If the destination can't be written
        """
        src = self.resolve(from_path)
        dst = self.resolve(to_path)

        with self._classified(ReadError, "copy_file", src, ActionType.WRITE):
            if stat.S_ISDIR(os.stat(src).st_mode):
                raise ReadError("copy_file", src, "is a directory")

        with self._classified(WriteError, "copy_file", dst, ActionType.WRITE):
            shutil.copyfile(src, dst)
            shutil.copymode(src, dst)
            copied = os.path.getsize(dst)

        self._log(ActionType.WRITE, "copy_file", f"{src} -> {dst}", result=f"{copied} bytes")
        return copied

    def move_file(self, from_path: str, to_path: str) -> None:
        """
        Rename a file, replacing the destination if it exists.

        No copy-and-delete fallback is attempted across volumes.

        Raises:
            WriteError: If the rename fails
        """
        src = self.resolve(from_path)
        dst = self.resolve(to_path)
        with self._classified(WriteError, "move_file", src, ActionType.WRITE):
            os.replace(src, dst)
        self._log(ActionType.WRITE, "move_file", f"{src} -> {dst}")

    # Metadata

    def _stat(self, resolved: str, operation: str) -> os.stat_result:
        with self._classified(ReadError, operation, resolved, ActionType.QUERY):
            return os.stat(resolved)

    def file_size(self, path: str) -> int:
        """
        Get the byte length of a file.

        Raises:
            ReadError: If the path can't be stat'ed
        """
        resolved = self.resolve(path)
        size = self._stat(resolved, "file_size").st_size
        self._log(ActionType.QUERY, "file_size", resolved, result=f"{size} bytes")
        return size

    def file_modified(self, path: str) -> datetime:
        """
        Get the last-modification time of a file.

        Raises:
            ReadError: If the path can't be stat'ed
        """
        resolved = self.resolve(path)
        modified = datetime.fromtimestamp(
            self._stat(resolved, "file_modified").st_mtime, tz=timezone.utc
        )
        self._log(ActionType.QUERY, "file_modified", resolved, result=modified.isoformat())
        return modified

    def file_info(self, path: str) -> FileInfo:
        """
        Get a metadata snapshot for a file or directory.

        Raises:
            ReadError: If the path can't be stat'ed
        """
        resolved = self.resolve(path)
        st = self._stat(resolved, "file_info")
        self._log(ActionType.QUERY, "file_info", resolved)

        return FileInfo(
            path=resolved,
            size=st.st_size,
            modified=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
            is_dir=stat.S_ISDIR(st.st_mode),
            is_file=stat.S_ISREG(st.st_mode)
        )
