"""
Tests for the Jira REST client and record decoding.

The HTTP layer is replaced with httpx.MockTransport serving a tiny,
read-only subset of the Jira API.
"""

import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from jirafs.client import JiraClient
from jirafs.models import Comment, Issue, Project, User, parse_timestamp
from jirafs.source import DataSourceError
from jirafs.vfs import JiraFS
from jirafs.vfs.errors import NotFoundError, RemoteError

API = "https://jira.example.com/rest/api/2"

COMMENT_JSON = {
    "self": f"{API}/issue/10001/comment/69",
    "id": "69",
    "author": {"name": "bob", "displayName": "Bob Builder"},
    "updateAuthor": {"name": "bob", "displayName": "Bob Builder"},
    "body": "Looks good to me.",
    "created": "2024-03-01T12:00:00.000+1000",
    "updated": "2024-03-01T13:00:00.000+1000",
}

ISSUE_JSON = {
    "id": "10001",
    "self": f"{API}/issue/10001",
    "key": "TEST-1",
    "fields": {
        "summary": "First issue",
        "description": "Something is broken.",
        "status": {"name": "In Progress"},
        "reporter": {"name": "alice", "displayName": "Alice Example"},
        "assignee": None,
        "project": {"id": "1", "key": "TEST", "self": f"{API}/project/1"},
        "created": "2024-03-01T09:30:00.000+1000",
        "updated": "2024-03-02T10:00:00.000+1000",
        "comment": {"comments": [COMMENT_JSON]},
        "issuelinks": [{"outwardIssue": {"key": "TEST-2"}}],
        "subtasks": [{"key": "TEST-3"}],
    },
}

PROJECTS_JSON = [
    {"id": "1", "key": "TEST", "name": "Test project", "self": f"{API}/project/1"},
]


def handler(request: httpx.Request) -> httpx.Response:
    """Serve the fake API; anything unknown is a 404."""
    path = request.url.path.replace("/rest/api/2", "", 1)
    if request.method == "HEAD":
        if path in ("/issue/TEST-1", "/issue/TEST-1/comment/69"):
            return httpx.Response(200)
        return httpx.Response(404)

    if path == "/project":
        return httpx.Response(200, json=PROJECTS_JSON)
    if path == "/project/TEST":
        return httpx.Response(200, json=PROJECTS_JSON[0])
    if path == "/search":
        assert request.url.params["jql"] == 'project = "TEST"'
        return httpx.Response(200, json={"issues": [ISSUE_JSON]})
    if path == "/issue/TEST-1":
        return httpx.Response(200, json=ISSUE_JSON)
    if path == "/issue/TEST-1/comment/69":
        return httpx.Response(200, json=COMMENT_JSON)
    if path == "/issue/BAD-1":
        return httpx.Response(200, content=b"not json")
    return httpx.Response(404)


@pytest.fixture
def client():
    http = httpx.Client(transport=httpx.MockTransport(handler))
    with JiraClient(API + "/", http_client=http) as client:
        yield client


class TestJiraClient:
    """Test each data source operation against the fake API."""

    def test_list_projects(self, client):
        projects = client.list_projects()
        assert [p.key for p in projects] == ["TEST"]
        assert projects[0].name == "Test project"

    def test_get_project(self, client):
        assert client.get_project("TEST").key == "TEST"

    def test_list_issues(self, client):
        issues = client.list_issues("TEST")
        assert [i.key for i in issues] == ["TEST-1"]

    def test_get_issue(self, client):
        issue = client.get_issue("TEST-1")
        assert issue.summary == "First issue"
        assert issue.status == "In Progress"
        assert [c.id for c in issue.comments] == ["69"]

    def test_get_comment(self, client):
        comment = client.get_comment("TEST-1", "69")
        assert comment.id == "69"
        assert comment.author.display_name == "Bob Builder"

    def test_issue_exists(self, client):
        assert client.issue_exists("TEST-1")
        assert not client.issue_exists("TEST-99")

    def test_comment_exists(self, client):
        assert client.comment_exists("TEST-1", "69")
        assert not client.comment_exists("TEST-1", "70")

    def test_not_found_status_is_error(self, client):
        with pytest.raises(DataSourceError) as excinfo:
            client.get_issue("TEST-99")
        assert "404" in str(excinfo.value)

    def test_bad_json_is_error(self, client):
        with pytest.raises(DataSourceError):
            client.get_issue("BAD-1")

    def test_transport_error_is_error(self):
        def broken(request):
            raise httpx.ConnectError("connection refused", request=request)

        http = httpx.Client(transport=httpx.MockTransport(broken))
        with JiraClient(API, http_client=http) as client:
            with pytest.raises(DataSourceError):
                client.list_projects()
            with pytest.raises(DataSourceError):
                client.issue_exists("TEST-1")

    def test_filesystem_over_client(self, client):
        """The whole tree is browsable through the HTTP client."""
        fsys = JiraFS(client)
        assert [e.name for e in fsys.list_dir(".")] == ["TEST"]
        assert [e.name for e in fsys.list_dir("TEST")] == ["1"]
        assert [e.name for e in fsys.list_dir("TEST/1")] == ["69", "issue"]
        assert fsys.read_file("TEST/1/69").endswith(b"Looks good to me.\n")
        assert b"Subject: First issue" in fsys.read_file("TEST/1/issue")


class TestRequestPaths:
    """Path segments reach the server as single, escaped URL components."""

    @pytest.fixture
    def requests(self):
        return []

    @pytest.fixture
    def recording_client(self, requests):
        def recording(request: httpx.Request) -> httpx.Response:
            requests.append((request.method, request.url.raw_path, request.url.query))
            if request.url.path == "/rest/api/2/project":
                return httpx.Response(200, json=PROJECTS_JSON)
            # Both the issue and its comment collection exist.
            if request.url.path in ("/rest/api/2/issue/TEST-1", "/rest/api/2/issue/TEST-1/comment"):
                return httpx.Response(200)
            return httpx.Response(404)

        http = httpx.Client(transport=httpx.MockTransport(recording))
        with JiraClient(API, http_client=http) as client:
            yield client

    @pytest.mark.parametrize("comment_id, raw_path", [
        ("?x", b"/rest/api/2/issue/TEST-1/comment/%3Fx"),
        ("#x", b"/rest/api/2/issue/TEST-1/comment/%23x"),
        ("%2e%2e", b"/rest/api/2/issue/TEST-1/comment/%252e%252e"),
        ("a/b", b"/rest/api/2/issue/TEST-1/comment/a%2Fb"),
    ])
    def test_segments_are_escaped(self, recording_client, requests, comment_id, raw_path):
        assert not recording_client.comment_exists("TEST-1", comment_id)
        assert requests == [("HEAD", raw_path, b"")]

    @pytest.mark.parametrize("path", ["TEST/1/?x", "TEST/1/#x", "TEST/1/%2e%2e"])
    def test_open_reserved_url_characters_is_not_found(self, recording_client, requests, path):
        """
        Given: A server where the issue and its comment collection exist
        When: Opening a comment name holding URL syntax
        Then: Not found, and the comment collection is never asked
        """
        fsys = JiraFS(recording_client)
        with pytest.raises(NotFoundError):
            fsys.open(path)
        assert all(not raw.endswith(b"/comment") and not raw.endswith(b"/comment/")
                   for _, raw, _ in requests)

    def test_server_error_on_existence_check_is_error(self):
        def unavailable(request):
            return httpx.Response(503)

        http = httpx.Client(transport=httpx.MockTransport(unavailable))
        with JiraClient(API, http_client=http) as client:
            with pytest.raises(DataSourceError) as excinfo:
                client.issue_exists("TEST-1")
            assert "503" in str(excinfo.value)

    def test_server_error_on_open_is_remote_error(self):
        def flaky(request):
            if request.url.path.endswith("/project"):
                return httpx.Response(200, json=PROJECTS_JSON)
            return httpx.Response(500)

        http = httpx.Client(transport=httpx.MockTransport(flaky))
        with JiraClient(API, http_client=http) as client:
            with pytest.raises(RemoteError):
                JiraFS(client).open("TEST/1")

    def test_client_error_on_existence_check_is_missing(self, recording_client):
        assert not recording_client.issue_exists("TEST-2")


class TestDecoding:
    """Test decoding of Jira JSON into records."""

    def test_issue_fields(self):
        issue = Issue.from_json(json.loads(json.dumps(ISSUE_JSON)))
        assert issue.key == "TEST-1"
        assert issue.number == "1"
        assert issue.url == f"{API}/issue/10001"
        assert issue.reporter == User("alice", "Alice Example")
        assert str(issue.assignee) == ""
        assert issue.project == Project(key="TEST", id="1", url=f"{API}/project/1")
        assert issue.links == ["TEST-2"]
        assert issue.subtasks == ["TEST-3"]
        assert issue.updated == datetime(2024, 3, 2, 10, 0, tzinfo=timezone(timedelta(hours=10)))

    def test_issue_without_comments(self):
        issue = Issue.from_json({"key": "TEST-2", "fields": {"summary": "x"}})
        assert issue.comments == []
        assert issue.created is None

    def test_issue_number_without_dash(self):
        assert Issue(key="ODD").number == "ODD"

    def test_comment_date_prefers_updated(self):
        comment = Comment.from_json(COMMENT_JSON)
        assert comment.date == comment.updated
        comment.updated = None
        assert comment.date == comment.created

    def test_parse_timestamp_without_fraction(self):
        assert parse_timestamp("2024-03-01T12:00:00+0000") == datetime(2024, 3, 1, 12, tzinfo=timezone.utc)

    def test_parse_timestamp_empty(self):
        assert parse_timestamp("") is None
        assert parse_timestamp(None) is None

    def test_parse_timestamp_invalid(self):
        with pytest.raises(ValueError):
            parse_timestamp("yesterday")

    def test_user_string(self):
        assert str(User("bob", "Bob B")) == "Bob B"
        assert str(User("bob")) == "bob"
