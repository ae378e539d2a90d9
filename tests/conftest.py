"""Shared fixtures: an in-memory, call-counting data source."""

import threading
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest

from jirafs.models import Comment, Issue, Project, User
from jirafs.source import DataSource, DataSourceError
from jirafs.vfs import JiraFS

TZ = timezone(timedelta(hours=10))


class FakeSource(DataSource):
    """DataSource serving fixed records and counting every call.

    Methods named in ``failing`` raise DataSourceError instead of answering.
    """

    def __init__(self, projects: List[Project], issues: List[Issue]):
        self.projects = projects
        self.issues: Dict[str, Issue] = {issue.key: issue for issue in issues}
        self.calls: Counter = Counter()
        self.failing: set = set()
        self.queries: List[str] = []
        self._lock = threading.Lock()

    def _record(self, method: str) -> None:
        with self._lock:
            self.calls[method] += 1
        if method in self.failing:
            raise DataSourceError(f"{method}: simulated failure")

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())

    def _issue(self, issue_key: str) -> Issue:
        issue = self.issues.get(issue_key)
        if issue is None:
            raise DataSourceError(f"GET issue/{issue_key}: non-ok status: 404 Not Found")
        return issue

    def list_projects(self) -> List[Project]:
        self._record("list_projects")
        return list(self.projects)

    def get_project(self, key: str) -> Project:
        self._record("get_project")
        for project in self.projects:
            if project.key == key:
                return project
        raise DataSourceError(f"GET project/{key}: non-ok status: 404 Not Found")

    def list_issues(self, project_key: str) -> List[Issue]:
        self._record("list_issues")
        return [i for i in self.issues.values() if i.key.startswith(project_key + "-")]

    def search_issues(self, jql: str) -> List[Issue]:
        """Match issues whose summary contains the query text."""
        self._record("search_issues")
        self.queries.append(jql)
        return [i for i in self.issues.values() if jql.lower() in i.summary.lower()]

    def issue_exists(self, issue_key: str) -> bool:
        self._record("issue_exists")
        return issue_key in self.issues

    def get_issue(self, issue_key: str) -> Issue:
        self._record("get_issue")
        return self._issue(issue_key)

    def comment_exists(self, issue_key: str, comment_id: str) -> bool:
        self._record("comment_exists")
        issue = self.issues.get(issue_key)
        return issue is not None and any(c.id == comment_id for c in issue.comments)

    def get_comment(self, issue_key: str, comment_id: str) -> Comment:
        self._record("get_comment")
        for comment in self._issue(issue_key).comments:
            if comment.id == comment_id:
                return comment
        raise DataSourceError(f"GET comment {comment_id}: non-ok status: 404 Not Found")


def make_issue(key: str, summary: str, comments: Optional[List[Comment]] = None) -> Issue:
    return Issue(
        key=key,
        id="100" + key.split("-")[1],
        url=f"https://jira.example.com/rest/api/2/issue/{key}",
        summary=summary,
        description=f"Description of {key}.\r\nSecond line.",
        status="Open",
        reporter=User(name="alice", display_name="Alice Example"),
        created=datetime(2024, 3, 1, 9, 30, 0, tzinfo=TZ),
        updated=datetime(2024, 3, 2, 10, 0, 0, tzinfo=TZ),
        comments=comments or [],
    )


def make_comment(comment_id: str, body: str, author: str = "bob") -> Comment:
    return Comment(
        id=comment_id,
        body=body,
        author=User(name=author, display_name=author.title()),
        created=datetime(2024, 3, 1, 12, 0, 0, tzinfo=TZ),
        updated=datetime(2024, 3, 1, 13, 0, 0, tzinfo=TZ),
    )


@pytest.fixture
def source():
    """Three projects; TEST-1 has comments 69 and 70, TEST-2 has none."""
    projects = [Project(key="TEST", id="1"), Project(key="OTHER", id="2"), Project(key="EMPTY", id="3")]
    issues = [
        make_issue("TEST-1", "First issue", [
            make_comment("69", "Looks good to me."),
            make_comment("70", "Merged in r1234.\nClosing.", author="carol"),
        ]),
        make_issue("TEST-2", "Second issue"),
        make_issue("OTHER-7", "Unrelated issue"),
    ]
    return FakeSource(projects, issues)


@pytest.fixture
def fsys(source):
    """A JiraFS over the fake source."""
    return JiraFS(source)
