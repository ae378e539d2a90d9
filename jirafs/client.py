"""
Jira REST data source.

Talks to a Jira server's REST v2 API (e.g. https://jira.example.com/rest/api/2)
using httpx. Only the read-only subset needed by the filesystem is covered.
"""

import logging
from typing import Any, Callable, List, Optional, TypeVar
from urllib.parse import quote

import httpx

from jirafs.models import Comment, Issue, Project
from jirafs.source import DataSource, DataSourceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class JiraClient(DataSource):
    """
    DataSource backed by the Jira REST API.

    Usage:
        >>> with JiraClient("https://jira.example.com/rest/api/2") as client:
        ...     projects = client.list_projects()
    """

    def __init__(
        self,
        api_root: str,
        timeout: float = 30.0,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Initialize the client.

        Args:
            api_root: Base URL of the REST API, without trailing slash
            timeout: Request timeout in seconds
            http_client: Preconfigured httpx client (tests, custom auth)
        """
        self.api_root = api_root.rstrip("/")
        self.timeout = timeout
        self._client = http_client or httpx.Client(timeout=timeout)

    def __enter__(self) -> 'JiraClient':
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        """Release the underlying HTTP connection pool."""
        self._client.close()

    def _url(self, *segments: str) -> str:
        # Each segment is one path component; "/", "?", "#" and "%" are escaped.
        return self.api_root + "".join("/" + quote(s, safe="") for s in segments)

    def _get_json(self, *segments: str, params: Optional[dict] = None) -> Any:
        url = self._url(*segments)
        logger.debug("GET %s", url)
        try:
            response = self._client.get(url, params=params)
        except httpx.HTTPError as e:
            raise DataSourceError(f"GET {url}: {e}") from e
        if response.status_code != httpx.codes.OK:
            raise DataSourceError(
                f"GET {url}: non-ok status: {response.status_code} {response.reason_phrase}"
            )
        try:
            return response.json()
        except ValueError as e:
            raise DataSourceError(f"GET {url}: decode response: {e}") from e

    def _exists(self, *segments: str) -> bool:
        url = self._url(*segments)
        logger.debug("HEAD %s", url)
        try:
            response = self._client.head(url)
        except httpx.HTTPError as e:
            raise DataSourceError(f"HEAD {url}: {e}") from e
        if response.status_code >= httpx.codes.INTERNAL_SERVER_ERROR:
            raise DataSourceError(
                f"HEAD {url}: server error: {response.status_code} {response.reason_phrase}"
            )
        return response.status_code == httpx.codes.OK

    def _decode(self, what: str, func: Callable[[Any], T], data: Any) -> T:
        try:
            return func(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise DataSourceError(f"decode {what}: {e}") from e

    def list_projects(self) -> List[Project]:
        data = self._get_json("project")
        return self._decode("projects", lambda d: [Project.from_json(p) for p in d], data)

    def get_project(self, key: str) -> Project:
        data = self._get_json("project", key)
        return self._decode("project", Project.from_json, data)

    def list_issues(self, project_key: str) -> List[Issue]:
        return self.search_issues(f'project = "{project_key}"')

    def search_issues(self, jql: str) -> List[Issue]:
        """Run a JQL search and return the first page of matching issues."""
        data = self._get_json("search", params={"jql": jql})
        return self._decode(
            "issues", lambda d: [Issue.from_json(i) for i in d.get("issues", [])], data
        )

    def issue_exists(self, issue_key: str) -> bool:
        return self._exists("issue", issue_key)

    def get_issue(self, issue_key: str) -> Issue:
        data = self._get_json("issue", issue_key)
        return self._decode("issue", Issue.from_json, data)

    def comment_exists(self, issue_key: str, comment_id: str) -> bool:
        return self._exists("issue", issue_key, "comment", comment_id)

    def get_comment(self, issue_key: str, comment_id: str) -> Comment:
        data = self._get_json("issue", issue_key, "comment", comment_id)
        return self._decode("comment", Comment.from_json, data)
