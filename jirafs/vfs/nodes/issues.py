"""Issue-related VFS nodes."""

from datetime import datetime
from typing import List, Optional, Tuple

from jirafs.models import Issue
from jirafs.render import print_issue
from jirafs.vfs.base import (
    DIR_MODE,
    FILE_MODE,
    DirectoryNode,
    FileNode,
    Node,
    NodeKind,
    Stat,
)
from jirafs.vfs.keys import ISSUE_FILE_NAME, is_number, issue_key
from jirafs.vfs.nodes.comments import CommentNode


class IssueDirectoryNode(DirectoryNode):
    """TEST/1/ - An issue, containing its comments and the issue body.

    Contains:
    - 69, 70, ...   - One file per comment, in tracker order
    - issue         - The rendered issue (always last)
    """

    kind = NodeKind.ISSUE_DIRECTORY

    @property
    def key(self) -> str:
        return issue_key(self)

    def _load_children(self) -> List[Node]:
        return issue_children(self, self.source.get_issue(self.key))

    def get_child(self, name: str) -> Optional[Node]:
        """Get the issue file or a comment by id.

        Comments are taken from an already-populated listing when possible,
        otherwise confirmed with an existence check. Comment ids are
        numeric, so any other name is missing without asking.
        """
        listed = self._listing.lookup(name)
        if listed is not None:
            return listed

        if name == ISSUE_FILE_NAME:
            return IssueFileNode(name, self.source, parent=self)

        if not is_number(name):
            return None

        if not self.source.comment_exists(self.key, name):
            return None
        return CommentNode(name, self.source, parent=self)

    def _fetch_stat(self) -> Stat:
        issue = self.source.get_issue(self.key)
        # Same fetch lists the directory; keep it.
        self._listing.populate(lambda: issue_children(self, issue))
        size = len(print_issue(issue).encode("utf-8"))
        return Stat(self.name, size, DIR_MODE, issue.updated)


class IssueFileNode(FileNode):
    """TEST/1/issue - The issue rendered as text."""

    kind = NodeKind.ISSUE_FILE

    def _fetch(self) -> Tuple[str, Optional[datetime]]:
        issue = self.source.get_issue(issue_key(self))
        return print_issue(issue), issue.updated


def issue_children(parent: IssueDirectoryNode, issue: Issue) -> List[Node]:
    """Build the entries of an issue directory from a fetched issue.

    Every entry carries its rendered content and metadata, so opening one
    later needs no further round trip.

    Args:
        parent: Issue directory the entries belong to
        issue: The issue, including comments

    Returns:
        Comment nodes in order, then the issue file
    """
    children: List[Node] = []
    for comment in issue.comments:
        children.append(CommentNode.from_comment(comment, parent.source, parent))

    content = print_issue(issue).encode("utf-8")
    children.append(IssueFileNode(
        ISSUE_FILE_NAME,
        parent.source,
        parent=parent,
        content=content,
        stat=Stat(ISSUE_FILE_NAME, len(content), FILE_MODE, issue.updated),
    ))
    return children
