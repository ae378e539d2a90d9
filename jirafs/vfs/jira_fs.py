"""Main JiraFS class - entry point for VFS access."""

import logging
import posixpath
import threading
from typing import Iterator, List, Optional, Tuple

from jirafs.source import DataSource
from jirafs.vfs.base import Node, Stat
from jirafs.vfs.errors import NotADirectoryError, RemoteError
from jirafs.vfs.nodes import RootNode
from jirafs.vfs.resolver import PathResolver, validate_path

logger = logging.getLogger(__name__)


class JiraFS:
    """Read-only filesystem view of an issue tracker.

    The root (the project list) is fetched on the first open and kept for
    the lifetime of this object. Every open returns an independent handle,
    so handles can be used from different threads without interfering.

    Usage:
        >>> fsys = JiraFS(JiraClient("https://jira.example.com/rest/api/2"))
        >>>
        >>> with fsys.open("TEST/1/issue") as f:
        ...     print(f.read().decode())
        >>>
        >>> with fsys.open("TEST") as d:
        ...     for entry in d.read_dir():
        ...         print(entry.name, entry.is_dir)
    """

    def __init__(self, source: DataSource):
        """Initialize the filesystem.

        Args:
            source: Data source providing projects, issues and comments
        """
        self.source = source
        self._root: Optional[RootNode] = None
        self._resolver: Optional[PathResolver] = None
        self._lock = threading.Lock()

    def _get_resolver(self, path: str) -> PathResolver:
        if self._resolver is not None:
            return self._resolver
        with self._lock:
            if self._resolver is None:
                root = RootNode(self.source)
                try:
                    root.children("open")
                except RemoteError as e:
                    raise RemoteError("open", path, f"make root: {e.reason}") from e
                self._root = root
                self._resolver = PathResolver(root)
        return self._resolver

    @property
    def root(self) -> RootNode:
        """The shared root node, created on first access."""
        self._get_resolver(".")
        return self._root

    def open(self, path: str) -> Node:
        """Open a path and return an independent handle on it.

        Args:
            path: Slash-separated path such as "TEST/1/issue", or "."

        Returns:
            A Node handle with its own caches and cursor

        Raises:
            InvalidPathError: If the path is malformed (no remote access)
            NotFoundError: If the path does not exist
            RemoteError: If the data source fails
        """
        validate_path(path)
        resolver = self._get_resolver(path)
        logger.debug("open %s", path)
        return resolver.resolve(path).clone()

    def stat(self, path: str) -> Stat:
        """Stat a path."""
        with self.open(path) as node:
            return node.stat()

    def read_file(self, path: str) -> bytes:
        """Read the whole content of a path."""
        with self.open(path) as node:
            return node.read()

    def list_dir(self, path: str = ".") -> List[Node]:
        """List every entry of a directory.

        Raises:
            NotADirectoryError: If path is not a directory
        """
        with self.open(path) as node:
            return node.read_dir(-1)

    def walk(self, path: str = ".") -> Iterator[Tuple[str, List[str], List[str]]]:
        """Walk the tree top-down, like os.walk.

        Yields:
            Tuples of (directory path, subdirectory names, file names)
        """
        top = self.open(path)
        if not top.is_dir:
            raise NotADirectoryError("walk", path, "not a directory")
        yield from self._walk(path, top)

    def _walk(self, path: str, node: Node) -> Iterator[Tuple[str, List[str], List[str]]]:
        entries = node.read_dir(-1)
        dirs = [e for e in entries if e.is_dir]
        files = [e.name for e in entries if not e.is_dir]
        yield path, [d.name for d in dirs], files
        for entry in dirs:
            child_path = entry.name if path == "." else posixpath.join(path, entry.name)
            yield from self._walk(child_path, entry)
