"""Comment VFS nodes."""

from datetime import datetime
from typing import Optional, Tuple

from jirafs.models import Comment
from jirafs.render import print_comment
from jirafs.source import DataSource
from jirafs.vfs.base import FILE_MODE, DirectoryNode, FileNode, NodeKind, Stat
from jirafs.vfs.keys import issue_key


class CommentNode(FileNode):
    """TEST/1/69 - A single comment rendered as text."""

    kind = NodeKind.COMMENT

    @classmethod
    def from_comment(
        cls,
        comment: Comment,
        source: DataSource,
        parent: DirectoryNode,
    ) -> 'CommentNode':
        """Create a node that already holds its rendered comment."""
        content = print_comment(comment).encode("utf-8")
        return cls(
            comment.id,
            source,
            parent=parent,
            content=content,
            stat=Stat(comment.id, len(content), FILE_MODE, comment.date),
        )

    def _fetch(self) -> Tuple[str, Optional[datetime]]:
        comment = self.source.get_comment(issue_key(self), self.name)
        return print_comment(comment), comment.date
