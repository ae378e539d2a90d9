"""Mapping between tree positions and issue keys.

An issue lives at PROJECT/NUMBER/ in the tree and is addressed remotely as
"PROJECT-NUMBER". Nothing here touches the data source.
"""

import re

from jirafs.vfs.base import Node, NodeKind

ISSUE_FILE_NAME = "issue"

ISSUE_KEY_RE = re.compile(r"^([A-Z][A-Z0-9_]*)-([0-9]+)$")

# Issue numbers and comment ids are both decimal.
NUMBER_RE = re.compile(r"[0-9]+")


def is_number(name: str) -> bool:
    """Check whether a path segment can name an issue or a comment."""
    return NUMBER_RE.fullmatch(name) is not None


def make_key(project: str, number: str) -> str:
    """Join a project key and issue number, e.g. ("TEST", "1") -> "TEST-1"."""
    return f"{project}-{number}"


def issue_key(node: Node) -> str:
    """Reconstruct the issue key a node belongs to.

    For comments and the issue file, the issue number is the parent's name
    and the project is the grandparent's. For an issue directory they are
    its own name and its parent's.

    Args:
        node: An issue directory, issue file or comment node

    Returns:
        Key like "TEST-1"

    Raises:
        ValueError: If the node has no issue or its ancestry is incomplete
    """
    if node.kind in (NodeKind.COMMENT, NodeKind.ISSUE_FILE):
        issue_dir = node.parent
        if issue_dir is None or issue_dir.parent is None:
            raise ValueError(f"{node.name}: missing issue ancestry")
        return make_key(issue_dir.parent.name, issue_dir.name)

    if node.kind is NodeKind.ISSUE_DIRECTORY:
        if node.parent is None:
            raise ValueError(f"{node.name}: missing project ancestry")
        return make_key(node.parent.name, node.name)

    raise ValueError(f"{node.name}: {node.kind.value} node has no issue key")


def is_issue_key(text: str) -> bool:
    """Check whether text looks like an issue key such as "TEST-1"."""
    return ISSUE_KEY_RE.match(text.strip()) is not None


def path_for_key(key: str) -> str:
    """Path of the issue file for a key, e.g. "TEST-1" -> "TEST/1/issue".

    Raises:
        ValueError: If key is not an issue key
    """
    match = ISSUE_KEY_RE.match(key.strip())
    if match is None:
        raise ValueError(f"not an issue key: {key!r}")
    project, number = match.groups()
    return f"{project}/{number}/{ISSUE_FILE_NAME}"
