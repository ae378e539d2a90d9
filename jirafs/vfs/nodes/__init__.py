"""VFS node implementations."""

from jirafs.vfs.nodes.root import RootNode
from jirafs.vfs.nodes.projects import ProjectNode
from jirafs.vfs.nodes.issues import IssueDirectoryNode, IssueFileNode, issue_children
from jirafs.vfs.nodes.comments import CommentNode

__all__ = [
    "RootNode",
    "ProjectNode",
    "IssueDirectoryNode",
    "IssueFileNode",
    "CommentNode",
    "issue_children",
]
