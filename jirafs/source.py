"""
Abstract data source interface.

The filesystem never talks HTTP itself. It consumes this narrow interface,
which a Jira REST client (see ``jirafs.client``) or a test double implements.
"""

from abc import ABC, abstractmethod
from typing import List

from jirafs.models import Comment, Issue, Project


class DataSourceError(Exception):
    """A data source request failed (network, status or decoding)."""
    pass


class DataSource(ABC):
    """
    Remote store of projects, issues and comments.

    Implementations own pagination, authentication, retries and timeouts.
    Every method may raise DataSourceError.
    """

    @abstractmethod
    def list_projects(self) -> List[Project]:
        """List every visible project."""
        pass

    @abstractmethod
    def get_project(self, key: str) -> Project:
        """Fetch a single project by key."""
        pass

    @abstractmethod
    def list_issues(self, project_key: str) -> List[Issue]:
        """List the issues of a project, in the order the tracker returns them."""
        pass

    @abstractmethod
    def issue_exists(self, issue_key: str) -> bool:
        """Check that an issue exists without fetching it."""
        pass

    @abstractmethod
    def get_issue(self, issue_key: str) -> Issue:
        """Fetch an issue including its comments."""
        pass

    @abstractmethod
    def comment_exists(self, issue_key: str, comment_id: str) -> bool:
        """Check that a comment exists on an issue without fetching it."""
        pass

    @abstractmethod
    def get_comment(self, issue_key: str, comment_id: str) -> Comment:
        """Fetch a single comment."""
        pass

    @abstractmethod
    def search_issues(self, jql: str) -> List[Issue]:
        """Run a JQL query and return the matching issues."""
        pass
