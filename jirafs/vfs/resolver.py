"""Path resolution for the Virtual File System.

Handles path validation and the segment-by-segment walk from the root.
"""

import posixpath
from typing import List

from jirafs.source import DataSourceError
from jirafs.vfs.base import DirectoryNode, Node
from jirafs.vfs.errors import InvalidPathError, NotFoundError, RemoteError

# Characters that may never appear in a path.
RESERVED_CHARS = ("\\", "\x00")


def validate_path(path: str, op: str = "open") -> None:
    """Check path syntax without touching the data source.

    A valid path is "." or a sequence of non-empty, slash-separated
    segments with no leading or trailing slash, no "." or ".." segments
    and no reserved characters.

    Raises:
        InvalidPathError: If the path is malformed
    """
    if path == ".":
        return
    if not path:
        raise InvalidPathError(op, path, "empty path")
    for char in RESERVED_CHARS:
        if char in path:
            raise InvalidPathError(op, path, f"reserved character {char!r}")
    for segment in path.split("/"):
        if segment in ("", ".", ".."):
            raise InvalidPathError(op, path, f"invalid segment {segment!r}")


class PathResolver:
    """Resolves paths in the VFS.

    Resolution starts at the root and asks each directory for the next
    segment:
    - Root: the segment must be a listed project key
    - Project: the segment must be an existing issue number
    - Issue directory: "issue" or an existing comment id
    """

    def __init__(self, root: DirectoryNode):
        """Initialize path resolver.

        Args:
            root: Root node of the VFS
        """
        self.root = root

    def resolve(self, path: str) -> Node:
        """Resolve a path to a tree node.

        The returned node may be shared with other callers; hand out a
        clone() of it, never the node itself.

        Args:
            path: Slash-separated path relative to the root

        Returns:
            Resolved node

        Raises:
            InvalidPathError: If the path is malformed
            NotFoundError: If any segment does not exist
            RemoteError: If an existence check fails
        """
        validate_path(path)
        path = self.normalize_path(path)

        node: Node = self.root
        for part in self._parse_path(path):
            if not isinstance(node, DirectoryNode):
                raise NotFoundError("open", path, "file does not exist")
            try:
                child = node.get_child(part)
            except DataSourceError as e:
                raise RemoteError("open", path, e) from e
            if child is None:
                raise NotFoundError("open", path, "file does not exist")
            node = child

        return node

    def normalize_path(self, path: str) -> str:
        """Normalize a validated path ("a//b" style input is rejected earlier)."""
        return posixpath.normpath(path)

    def _parse_path(self, path: str) -> List[str]:
        """Split a normalized path into segments ("." has none)."""
        if path == ".":
            return []
        return path.split("/")
