"""Project VFS nodes."""

from typing import List, Optional

from jirafs.vfs.base import DIR_MODE, DirectoryNode, Node, NodeKind, Stat
from jirafs.vfs.keys import is_number, make_key
from jirafs.vfs.nodes.issues import IssueDirectoryNode


class ProjectNode(DirectoryNode):
    """TEST/ - A project, listing its issues by number.

    Children are IssueDirectoryNode instances: TEST/1/, TEST/2/, ...
    """

    kind = NodeKind.PROJECT

    def _load_children(self) -> List[Node]:
        return [
            IssueDirectoryNode(issue.number, self.source, parent=self)
            for issue in self.source.list_issues(self.name)
        ]

    def get_child(self, name: str) -> Optional[Node]:
        """Get an issue directory by number.

        Reuses the listed node when this project has already been listed,
        otherwise asks the data source whether the issue exists.
        """
        if not is_number(name):
            return None

        listed = self._listing.lookup(name)
        if listed is not None:
            return listed

        if not self.source.issue_exists(make_key(self.name, name)):
            return None
        return IssueDirectoryNode(name, self.source, parent=self)

    def _fetch_stat(self) -> Stat:
        project = self.source.get_project(self.name)
        return Stat(project.key, -1, DIR_MODE, None)
