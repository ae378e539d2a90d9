"""Base classes for the Virtual File System.

The VFS maps the tracker's projects, issues and comments to a read-only
filesystem-like structure that can be opened, stat'd, read and listed.

Architecture:
    - Node: Base class for all VFS nodes (one open handle per instance)
    - DirectoryNode: Nodes that can contain children (read_dir them)
    - FileNode: Leaf nodes with rendered content (read them)
    - Listing: A directory's children, shared between copies of the node
"""

import copy
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from stat import S_IFDIR, S_IFREG, S_ISDIR
from typing import Callable, Iterable, List, Optional, Tuple

from jirafs.source import DataSource, DataSourceError
from jirafs.vfs.errors import NotADirectoryError, RemoteError

logger = logging.getLogger(__name__)

DIR_MODE = S_IFDIR | 0o444
FILE_MODE = S_IFREG | 0o444


class NodeKind(Enum):
    """Kind of VFS node."""
    ROOT = "root"
    PROJECT = "project"
    ISSUE_DIRECTORY = "issue_directory"
    ISSUE_FILE = "issue_file"
    COMMENT = "comment"

    @property
    def is_dir(self) -> bool:
        return self in (NodeKind.ROOT, NodeKind.PROJECT, NodeKind.ISSUE_DIRECTORY)


@dataclass(frozen=True)
class Stat:
    """Metadata snapshot of a node.

    Attributes:
        name: Base name of the entry
        size: Size in bytes (entry count for the root, -1 if unknown)
        mode: st_mode style bits
        mtime: Modification time, None when the tracker has none
    """
    name: str
    size: int
    mode: int
    mtime: Optional[datetime] = None

    @property
    def is_dir(self) -> bool:
        return S_ISDIR(self.mode)


class Listing:
    """Children of a directory, populated at most once.

    A listing is shared by a tree-resident directory node and every copy
    handed out for it, so concurrent opens reuse one fetch. The first
    populator wins; afterwards the entries are an immutable tuple.
    """

    def __init__(self, entries: Optional[Iterable['Node']] = None):
        self._lock = threading.Lock()
        self._entries: Optional[Tuple['Node', ...]] = None
        if entries is not None:
            self._entries = tuple(entries)

    @property
    def populated(self) -> bool:
        return self._entries is not None

    def populate(self, loader: Callable[[], Iterable['Node']]) -> Tuple['Node', ...]:
        """Return the entries, calling loader under the lock if still empty.

        A loader that raises leaves the listing empty.
        """
        entries = self._entries
        if entries is not None:
            return entries
        with self._lock:
            if self._entries is None:
                self._entries = tuple(loader())
            return self._entries

    def lookup(self, name: str) -> Optional['Node']:
        """Find an entry by name without populating the listing."""
        entries = self._entries
        if entries is None:
            return None
        for entry in entries:
            if entry.name == name:
                return entry
        return None

    def __len__(self) -> int:
        return len(self._entries) if self._entries is not None else 0


class Node(ABC):
    """Base class for all VFS nodes.

    A Node is an entry in the virtual filesystem and, once returned by
    JiraFS.open, an open handle on it. Per-handle state (content cache,
    stat cache, read offset) lives on the instance; clone() gives every
    caller its own copy.

    Attributes:
        name: The name of this node (e.g., "TEST", "1", "issue", "69")
        source: Data source used to materialize content
        parent: Parent directory node (None for root)
    """

    kind: NodeKind

    def __init__(
        self,
        name: str,
        source: DataSource,
        parent: Optional['DirectoryNode'] = None,
        content: Optional[bytes] = None,
        stat: Optional[Stat] = None,
    ):
        """Initialize a VFS node.

        Args:
            name: Name of this node
            source: Data source for remote lookups
            parent: Parent directory (None for root)
            content: Already-rendered content, if known
            stat: Already-known metadata, if known
        """
        self.name = name
        self.source = source
        self.parent = parent
        self._content = content
        self._stat = stat
        self._offset = 0

    @property
    def is_dir(self) -> bool:
        return self.kind.is_dir

    def get_path(self) -> str:
        """Get the slash-separated path of this node relative to the root.

        Returns:
            Path like TEST/1/issue, or "." for the root
        """
        parts = []
        node = self
        while node.parent is not None:
            parts.append(node.name)
            node = node.parent

        if not parts:
            return "."

        return "/".join(reversed(parts))

    def clone(self) -> 'Node':
        """Copy this node into an independent handle.

        The copy shares the parent chain and any directory listing but has
        its own caches, read offset and enumeration cursor.
        """
        dup = copy.copy(self)
        dup._offset = 0
        return dup

    def stat(self) -> Stat:
        """Return metadata, fetching it on first use."""
        logger.debug("stat %s", self.get_path())
        if self._stat is not None:
            return self._stat
        try:
            self._stat = self._fetch_stat()
        except DataSourceError as e:
            raise RemoteError("stat", self.get_path(), e) from e
        return self._stat

    @abstractmethod
    def _fetch_stat(self) -> Stat:
        """Fetch metadata from the data source."""
        pass

    @abstractmethod
    def _render(self) -> str:
        """Produce the readable content of this node.

        Raises:
            RemoteError: If the data source fails
        """
        pass

    def _content_bytes(self) -> bytes:
        if self._content is None:
            self._content = self._render().encode("utf-8")
        return self._content

    def read(self, size: int = -1) -> bytes:
        """Read up to size bytes (everything if negative).

        Returns:
            The next chunk of content, b"" at end of content
        """
        logger.debug("read %s", self.get_path())
        content = self._content_bytes()
        if size is None or size < 0:
            end = len(content)
        else:
            end = min(self._offset + size, len(content))
        data = content[self._offset:end]
        self._offset = end
        return data

    def readinto(self, buffer) -> int:
        """Read into a writable buffer, returning the number of bytes read."""
        data = self.read(len(buffer))
        buffer[:len(data)] = data
        return len(data)

    def read_dir(self, n: int = -1) -> List['Node']:
        raise NotADirectoryError("readdir", self.get_path(), "not a directory")

    def close(self) -> None:
        """Drop cached content and metadata; the next read or stat refetches."""
        self._content = None
        self._stat = None
        self._offset = 0

    def __enter__(self) -> 'Node':
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __str__(self) -> str:
        if self.is_dir:
            return f"d {self.name}/"
        return f"- {self.name}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}', path='{self.get_path()}')"


class DirectoryNode(Node):
    """A directory node that can contain children.

    Children are computed on demand by _load_children() and kept in a
    shared Listing. Each handle walks them with its own cursor.
    """

    def __init__(
        self,
        name: str,
        source: DataSource,
        parent: Optional['DirectoryNode'] = None,
        stat: Optional[Stat] = None,
        listing: Optional[Listing] = None,
    ):
        super().__init__(name, source, parent=parent, stat=stat)
        self._listing = listing if listing is not None else Listing()
        self._cursor = 0

    @abstractmethod
    def _load_children(self) -> List[Node]:
        """Fetch this directory's children from the data source."""
        pass

    @abstractmethod
    def get_child(self, name: str) -> Optional[Node]:
        """Locate a child by name, confirming it exists remotely.

        Args:
            name: Name of child node

        Returns:
            Child node or None if not found

        Raises:
            DataSourceError: If an existence check fails
        """
        pass

    def clone(self) -> 'DirectoryNode':
        dup = super().clone()
        dup._cursor = 0
        return dup

    def children(self, op: str = "readdir") -> Tuple[Node, ...]:
        """Return the shared children, populating them if necessary."""
        try:
            return self._listing.populate(self._load_children)
        except DataSourceError as e:
            raise RemoteError(op, self.get_path(), e) from e

    @property
    def at_end(self) -> bool:
        """True once this handle's cursor has passed every child."""
        return self._listing.populated and self._cursor >= len(self._listing)

    def read_dir(self, n: int = -1) -> List[Node]:
        """Read the next directory entries.

        Args:
            n: Maximum number of entries; n <= 0 means all remaining

        Returns:
            Independent copies of the next entries. With n <= 0 an empty
            list means the cursor was already at the end. With n > 0 a
            list shorter than n means the end has been reached; check
            at_end to tell a full final batch from one with more to come.

        Raises:
            EOFError: If n > 0 and no entries remain
            RemoteError: If the listing cannot be fetched
        """
        logger.debug("readdir %s", self.get_path())
        entries = self.children()
        remaining = entries[self._cursor:]
        if n <= 0:
            self._cursor = len(entries)
            return [entry.clone() for entry in remaining]

        if not remaining:
            raise EOFError(f"readdir {self.get_path()}: end of directory")

        batch = remaining[:n]
        self._cursor += len(batch)
        return [entry.clone() for entry in batch]

    def _render(self) -> str:
        return "".join(f"{child}\n" for child in self.children("read"))

    def close(self) -> None:
        super().close()
        self._cursor = 0


class FileNode(Node):
    """A leaf node whose content is a rendered tracker record.

    Fetching the record yields both the content and its metadata, so stat
    and read each cache the other's result.
    """

    @abstractmethod
    def _fetch(self) -> Tuple[str, Optional[datetime]]:
        """Fetch the record and render it.

        Returns:
            Tuple of (rendered text, modification time)

        Raises:
            DataSourceError: If the fetch fails
        """
        pass

    def _fetch_stat(self) -> Stat:
        text, mtime = self._fetch()
        # We will probably be read soon; keep the rendered record.
        content = text.encode("utf-8")
        if self._content is None:
            self._content = content
        return Stat(self.name, len(content), FILE_MODE, mtime)

    def _render(self) -> str:
        try:
            text, _ = self._fetch()
        except DataSourceError as e:
            raise RemoteError("read", self.get_path(), e) from e
        return text
