"""Errors raised by the virtual filesystem.

Every error records the operation and the path it was applied to. The
classes also derive from the matching builtin so that generic code can
catch FileNotFoundError, NotADirectoryError or ValueError.
"""

import builtins
from typing import Any


class PathError(OSError):
    """Error resolving or operating on a path.

    Attributes:
        op: Operation that failed ("open", "stat", "read", "readdir")
        path: Path the operation was applied to
        reason: Underlying cause, an exception or a message
    """

    def __init__(self, op: str, path: str, reason: Any = None):
        self.op = op
        self.path = path
        self.reason = reason
        super().__init__(f"{op} {path}: {reason}")

    def __str__(self) -> str:
        return f"{self.op} {self.path}: {self.reason}"


class InvalidPathError(PathError, ValueError):
    """Path is syntactically malformed."""
    pass


class NotFoundError(PathError, FileNotFoundError):
    """Path does not exist."""
    pass


class NotADirectoryError(PathError, builtins.NotADirectoryError):
    """Directory operation attempted on a file."""
    pass


class RemoteError(PathError):
    """The data source failed while serving a path."""
    pass
