"""Plain-text rendering of issues and comments.

The layout is mail-like: a block of headers, a blank line, then the body.
"""

from datetime import datetime
from email.utils import format_datetime
from typing import Iterable, List, Optional
from urllib.parse import urlsplit, urlunsplit

from jirafs.models import Comment, Issue

SUMMARY_LENGTH = 36


def _rfc1123(when: Optional[datetime]) -> str:
    if when is None:
        return ""
    return format_datetime(when)


def _browse_url(issue: Issue) -> Optional[str]:
    """Human-facing URL of an issue, derived from its API URL."""
    if not issue.url:
        return None
    parts = urlsplit(issue.url)
    if not parts.scheme or not parts.netloc:
        return None
    return urlunsplit((parts.scheme, parts.netloc, f"/browse/{issue.key}", "", ""))


def summarise(body: str, length: int) -> str:
    """Squash text onto one line, truncating to length with an ellipsis.

    Args:
        body: Text to summarise
        length: Maximum number of characters kept before the ellipsis

    Returns:
        Single-line summary
    """
    if len(body) < length:
        return body.replace("\n", " ").strip()
    body = body[:length]
    body = body.replace("\r", "").replace("\n", " ").strip()
    body = body.replace("  ", " ")
    return body + "..."


def print_issues(issues: Iterable[Issue]) -> str:
    """One line per issue: its file path and summary."""
    lines = []
    for issue in issues:
        name = issue.key.replace("-", "/", 1)
        lines.append(f"{name}/issue\t{issue.summary}\n")
    return "".join(lines)


def print_issue(issue: Issue) -> str:
    """Render an issue with headers, description and a comment index."""
    lines: List[str] = []
    lines.append(f"From: {issue.reporter}")
    lines.append(f"Date: {_rfc1123(issue.created)}")
    if str(issue.assignee):
        lines.append(f"Assignee: {issue.assignee}")
    browse = _browse_url(issue)
    if browse:
        lines.append(f"Archived-At: <{browse}>")
    if issue.url:
        lines.append(f"Archived-At: <{issue.url}>")
    lines.append(f"Status: {issue.status}")
    if issue.links:
        lines.append("References: " + ", ".join(issue.links))
    if issue.subtasks:
        lines.append("Subtasks: " + ", ".join(issue.subtasks))
    lines.append(f"Subject: {issue.summary}")
    lines.append("")

    if issue.description:
        lines.append(issue.description.replace("\r", ""))
    if not issue.comments:
        return "\n".join(lines) + "\n"

    lines.append("")
    for comment in issue.comments:
        date = comment.date.strftime("%Y-%m-%d %H:%M:%S") if comment.date else ""
        summary = summarise(comment.body, SUMMARY_LENGTH)
        lines.append(f"{comment.id}\t{summary}\t{comment.author.name} ({date})")
    return "\n".join(lines) + "\n"


def print_comment(comment: Comment) -> str:
    """Render a comment with From/Date headers and its body."""
    lines = [
        f"From: {comment.author}",
        f"Date: {_rfc1123(comment.date)}",
        "",
        comment.body.strip(),
    ]
    return "\n".join(lines) + "\n"
