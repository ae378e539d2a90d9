"""
jirafs - Browse a Jira server as a read-only filesystem.

Main API:
    from jirafs import JiraClient, JiraFS

    fsys = JiraFS(JiraClient("https://jira.example.com/rest/api/2"))

    # List projects
    for project in fsys.list_dir("."):
        print(project.name)

    # Read an issue
    print(fsys.read_file("TEST/1/issue").decode())
"""

from .client import JiraClient
from .source import DataSource, DataSourceError
from .vfs import JiraFS

__version__ = "0.1.0"
__all__ = ["JiraClient", "JiraFS", "DataSource", "DataSourceError"]
