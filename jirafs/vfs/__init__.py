"""Virtual File System projecting an issue tracker onto a directory tree.

The VFS presents projects, issues and comments as a read-only tree whose
content is fetched from a data source on demand.

Architecture:

    ```
    .                           # Root (RootNode)
    ├── TEST/                   # Project (ProjectNode)
    │   ├── 1/                 # Issue (IssueDirectoryNode)
    │   │   ├── 69             # Comment (CommentNode)
    │   │   ├── 70
    │   │   └── issue          # Issue body (IssueFileNode)
    │   └── 2/
    └── OTHER/
    ```

Node Types:

    - Node: Base class for all VFS entries and open handles
    - DirectoryNode: Can contain children (read_dir them)
    - FileNode: Leaf nodes with rendered content (read them)

Path Resolution:

    PathResolver validates a path, then walks it from the root one segment
    at a time. Issue numbers and comment ids are confirmed with existence
    checks against the data source unless the parent has already been
    listed.

Usage Example:

    ```python
    from jirafs.client import JiraClient
    from jirafs.vfs import JiraFS

    fsys = JiraFS(JiraClient("https://jira.example.com/rest/api/2"))

    with fsys.open("TEST") as project:
        for entry in project.read_dir():
            print(entry)

    with fsys.open("TEST/1/issue") as issue:
        print(issue.read().decode())
    ```
"""

from jirafs.vfs.base import (
    Node,
    DirectoryNode,
    FileNode,
    Listing,
    NodeKind,
    Stat,
)
from jirafs.vfs.errors import (
    PathError,
    InvalidPathError,
    NotFoundError,
    NotADirectoryError,
    RemoteError,
)
from jirafs.vfs.keys import issue_key, is_issue_key, path_for_key
from jirafs.vfs.resolver import PathResolver, validate_path
from jirafs.vfs.jira_fs import JiraFS

__all__ = [
    # Main entry point
    "JiraFS",
    # Core classes
    "Node",
    "DirectoryNode",
    "FileNode",
    "Listing",
    "NodeKind",
    "Stat",
    # Path resolution
    "PathResolver",
    "validate_path",
    # Keys
    "issue_key",
    "is_issue_key",
    "path_for_key",
    # Errors
    "PathError",
    "InvalidPathError",
    "NotFoundError",
    "NotADirectoryError",
    "RemoteError",
]
