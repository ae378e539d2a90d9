"""Plain records mirroring Jira REST resources.

These are deliberately simple dataclasses: the filesystem layer only needs
names, bodies and timestamps. Decoding from the Jira v2 JSON shape lives in
the ``from_json`` classmethods so that any data source can reuse it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

# Jira encodes timestamps like "2006-01-02T15:04:05.000-0700".
TIMESTAMP_FORMATS = ("%Y-%m-%dT%H:%M:%S.%f%z", "%Y-%m-%dT%H:%M:%S%z")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a Jira timestamp.

    Args:
        value: Timestamp string, or None/empty

    Returns:
        Timezone-aware datetime, or None if value is empty

    Raises:
        ValueError: If the string is not a Jira timestamp
    """
    if not value:
        return None
    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    raise ValueError(f"unrecognised timestamp {value!r}")


@dataclass
class User:
    """A Jira user as embedded in issues and comments."""
    name: str = ""
    display_name: str = ""

    @classmethod
    def from_json(cls, data: Optional[Dict[str, Any]]) -> 'User':
        if not data:
            return cls()
        return cls(
            name=data.get("name") or "",
            display_name=data.get("displayName") or "",
        )

    def __str__(self) -> str:
        return self.display_name or self.name


@dataclass
class Project:
    """A project; its key is the top-level directory name."""
    key: str
    id: str = ""
    name: str = ""
    url: str = ""

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'Project':
        return cls(
            key=data["key"],
            id=str(data.get("id", "")),
            name=data.get("name") or "",
            url=data.get("self") or "",
        )


@dataclass
class Comment:
    """A comment on an issue."""
    id: str
    body: str = ""
    author: User = field(default_factory=User)
    update_author: User = field(default_factory=User)
    created: Optional[datetime] = None
    updated: Optional[datetime] = None
    url: str = ""

    @property
    def date(self) -> Optional[datetime]:
        """Most recent timestamp: updated if set, otherwise created."""
        return self.updated or self.created

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'Comment':
        return cls(
            id=str(data["id"]),
            body=data.get("body") or "",
            author=User.from_json(data.get("author")),
            update_author=User.from_json(data.get("updateAuthor")),
            created=parse_timestamp(data.get("created")),
            updated=parse_timestamp(data.get("updated")),
            url=data.get("self") or "",
        )


@dataclass
class Issue:
    """An issue together with its comments.

    Attributes:
        key: Composite key such as "TEST-1"
        summary: One-line title
        description: Free text body
        links: Keys of linked issues
        subtasks: Keys of subtasks
    """
    key: str
    id: str = ""
    url: str = ""
    summary: str = ""
    description: str = ""
    status: str = ""
    reporter: User = field(default_factory=User)
    assignee: User = field(default_factory=User)
    project: Optional[Project] = None
    created: Optional[datetime] = None
    updated: Optional[datetime] = None
    comments: List[Comment] = field(default_factory=list)
    links: List[str] = field(default_factory=list)
    subtasks: List[str] = field(default_factory=list)

    @property
    def number(self) -> str:
        """Issue number within its project, e.g. "1" for "TEST-1"."""
        _, sep, number = self.key.partition("-")
        if not sep:
            return self.key
        return number

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'Issue':
        """Decode an issue from the Jira REST representation.

        The interesting fields are nested under ``fields``; comments live
        under ``fields.comment.comments``.
        """
        fields = data.get("fields") or {}

        project = None
        if fields.get("project"):
            project = Project.from_json(fields["project"])

        comments = []
        comment_block = fields.get("comment") or {}
        for raw in comment_block.get("comments") or []:
            comments.append(Comment.from_json(raw))

        links = []
        for link in fields.get("issuelinks") or []:
            other = link.get("outwardIssue") or link.get("inwardIssue") or {}
            if other.get("key"):
                links.append(other["key"])

        status = fields.get("status") or {}

        return cls(
            key=data["key"],
            id=str(data.get("id", "")),
            url=data.get("self") or "",
            summary=fields.get("summary") or "",
            description=fields.get("description") or "",
            status=status.get("name") or "",
            reporter=User.from_json(fields.get("reporter")),
            assignee=User.from_json(fields.get("assignee")),
            project=project,
            created=parse_timestamp(fields.get("created")),
            updated=parse_timestamp(fields.get("updated")),
            comments=comments,
            links=links,
            subtasks=[s["key"] for s in fields.get("subtasks") or [] if s.get("key")],
        )
