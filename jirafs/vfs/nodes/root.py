"""Root VFS node."""

from typing import List, Optional

from jirafs.source import DataSource
from jirafs.vfs.base import DIR_MODE, DirectoryNode, Node, NodeKind, Stat


class RootNode(DirectoryNode):
    """Root directory (.) of the VFS.

    Contains one ProjectNode per project visible at the data source,
    in the order the data source lists them.
    """

    kind = NodeKind.ROOT

    def __init__(self, source: DataSource):
        """Initialize root node.

        Args:
            source: Data source for remote lookups
        """
        super().__init__(name=".", source=source, parent=None)

    def _load_children(self) -> List[Node]:
        from jirafs.vfs.nodes.projects import ProjectNode

        return [
            ProjectNode(project.key, self.source, parent=self)
            for project in self.source.list_projects()
        ]

    def get_child(self, name: str) -> Optional[Node]:
        """Get a project by key from the cached project list."""
        self._listing.populate(self._load_children)
        return self._listing.lookup(name)

    def _fetch_stat(self) -> Stat:
        return Stat(".", len(self.children("stat")), DIR_MODE, None)
