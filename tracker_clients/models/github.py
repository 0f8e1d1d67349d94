"""GitHub record models.

Covers the REST resources the client touches and the webhook payloads the
receiver understands, see
https://docs.github.com/en/webhooks/webhook-events-and-payloads
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .common import text, integer, boolean, optional, many, strings


@dataclass
class User:
    """GitHub user or organization account."""
    id: int = 0
    login: str = ""
    node_id: str = ""
    avatar_url: str = ""
    url: str = ""
    html_url: str = ""
    type: str = ""
    site_admin: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'User':
        return cls(
            id=integer(data, "id"),
            login=text(data, "login"),
            node_id=text(data, "node_id"),
            avatar_url=text(data, "avatar_url"),
            url=text(data, "url"),
            html_url=text(data, "html_url"),
            type=text(data, "type"),
            site_admin=boolean(data, "site_admin")
        )


@dataclass
class Label:
    id: int = 0
    node_id: str = ""
    url: str = ""
    name: str = ""
    description: str = ""
    color: str = ""
    default: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Label':
        return cls(
            id=integer(data, "id"),
            node_id=text(data, "node_id"),
            url=text(data, "url"),
            name=text(data, "name"),
            description=text(data, "description"),
            color=text(data, "color"),
            default=boolean(data, "default")
        )


@dataclass
class Milestone:
    id: int = 0
    node_id: str = ""
    url: str = ""
    html_url: str = ""
    labels_url: str = ""
    number: int = 0
    state: str = ""
    title: str = ""
    description: str = ""
    creator: Optional[User] = None
    open_issues: int = 0
    closed_issues: int = 0
    created_at: str = ""
    updated_at: str = ""
    closed_at: str = ""
    due_on: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Milestone':
        return cls(
            id=integer(data, "id"),
            node_id=text(data, "node_id"),
            url=text(data, "url"),
            html_url=text(data, "html_url"),
            labels_url=text(data, "labels_url"),
            number=integer(data, "number"),
            state=text(data, "state"),
            title=text(data, "title"),
            description=text(data, "description"),
            creator=optional(User.from_dict, data.get("creator")),
            open_issues=integer(data, "open_issues"),
            closed_issues=integer(data, "closed_issues"),
            created_at=text(data, "created_at"),
            updated_at=text(data, "updated_at"),
            closed_at=text(data, "closed_at"),
            due_on=text(data, "due_on")
        )


@dataclass
class Issue:
    """GitHub issue (pull requests show up here too, see ``is_pull_request``)."""
    id: int = 0
    node_id: str = ""
    url: str = ""
    repository_url: str = ""
    labels_url: str = ""
    comments_url: str = ""
    events_url: str = ""
    html_url: str = ""
    number: int = 0
    state: str = ""
    title: str = ""
    body: str = ""
    user: Optional[User] = None
    labels: List[Label] = field(default_factory=list)
    assignee: Optional[User] = None
    assignees: List[User] = field(default_factory=list)
    milestone: Optional[Milestone] = None
    locked: bool = False
    active_lock_reason: str = ""
    comments: int = 0
    pull_request: Optional[Dict[str, Any]] = None
    created_at: str = ""
    updated_at: str = ""
    closed_at: str = ""
    closed_by: Optional[User] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Issue':
        pull_request = data.get("pull_request")
        return cls(
            id=integer(data, "id"),
            node_id=text(data, "node_id"),
            url=text(data, "url"),
            repository_url=text(data, "repository_url"),
            labels_url=text(data, "labels_url"),
            comments_url=text(data, "comments_url"),
            events_url=text(data, "events_url"),
            html_url=text(data, "html_url"),
            number=integer(data, "number"),
            state=text(data, "state"),
            title=text(data, "title"),
            body=text(data, "body"),
            user=optional(User.from_dict, data.get("user")),
            labels=many(Label.from_dict, data.get("labels")),
            assignee=optional(User.from_dict, data.get("assignee")),
            assignees=many(User.from_dict, data.get("assignees")),
            milestone=optional(Milestone.from_dict, data.get("milestone")),
            locked=boolean(data, "locked"),
            active_lock_reason=text(data, "active_lock_reason"),
            comments=integer(data, "comments"),
            pull_request=pull_request if isinstance(pull_request, dict) else None,
            created_at=text(data, "created_at"),
            updated_at=text(data, "updated_at"),
            closed_at=text(data, "closed_at"),
            closed_by=optional(User.from_dict, data.get("closed_by")),
            raw=data
        )

    @property
    def is_pull_request(self) -> bool:
        return self.pull_request is not None

    def has_label(self, label: str) -> bool:
        """Case-insensitive label check."""
        wanted = label.lower()
        return any(existing.name.lower() == wanted for existing in self.labels)

    def is_assignee(self, user: str) -> bool:
        wanted = user.lower()
        return any(assignee.login.lower() == wanted for assignee in self.assignees)


@dataclass
class Comment:
    id: int = 0
    node_id: str = ""
    url: str = ""
    html_url: str = ""
    issue_url: str = ""
    user: Optional[User] = None
    created_at: str = ""
    updated_at: str = ""
    author_association: str = ""
    body: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Comment':
        return cls(
            id=integer(data, "id"),
            node_id=text(data, "node_id"),
            url=text(data, "url"),
            html_url=text(data, "html_url"),
            issue_url=text(data, "issue_url"),
            user=optional(User.from_dict, data.get("user")),
            created_at=text(data, "created_at"),
            updated_at=text(data, "updated_at"),
            author_association=text(data, "author_association"),
            body=text(data, "body")
        )


@dataclass
class Repository:
    id: int = 0
    node_id: str = ""
    name: str = ""
    full_name: str = ""
    private: bool = False
    owner: Optional[User] = None
    html_url: str = ""
    description: str = ""
    fork: bool = False
    url: str = ""
    issues_url: str = ""
    milestones_url: str = ""
    labels_url: str = ""
    default_branch: str = ""
    archived: bool = False
    disabled: bool = False
    has_issues: bool = False
    has_projects: bool = False
    open_issues_count: int = 0
    created_at: str = ""
    updated_at: str = ""
    pushed_at: str = ""
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Repository':
        return cls(
            id=integer(data, "id"),
            node_id=text(data, "node_id"),
            name=text(data, "name"),
            full_name=text(data, "full_name"),
            private=boolean(data, "private"),
            owner=optional(User.from_dict, data.get("owner")),
            html_url=text(data, "html_url"),
            description=text(data, "description"),
            fork=boolean(data, "fork"),
            url=text(data, "url"),
            issues_url=text(data, "issues_url"),
            milestones_url=text(data, "milestones_url"),
            labels_url=text(data, "labels_url"),
            default_branch=text(data, "default_branch"),
            archived=boolean(data, "archived"),
            disabled=boolean(data, "disabled"),
            has_issues=boolean(data, "has_issues"),
            has_projects=boolean(data, "has_projects"),
            open_issues_count=integer(data, "open_issues_count"),
            # push payloads send these as epoch ints, the REST API as strings
            created_at=text(data, "created_at"),
            updated_at=text(data, "updated_at"),
            pushed_at=text(data, "pushed_at"),
            raw=data
        )


@dataclass
class Organization:
    id: int = 0
    login: str = ""
    node_id: str = ""
    url: str = ""
    repos_url: str = ""
    hooks_url: str = ""
    issues_url: str = ""
    members_url: str = ""
    public_members_url: str = ""
    avatar_url: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Organization':
        return cls(
            id=integer(data, "id"),
            login=text(data, "login"),
            node_id=text(data, "node_id"),
            url=text(data, "url"),
            repos_url=text(data, "repos_url"),
            hooks_url=text(data, "hooks_url"),
            issues_url=text(data, "issues_url"),
            members_url=text(data, "members_url"),
            public_members_url=text(data, "public_members_url"),
            avatar_url=text(data, "avatar_url"),
            description=text(data, "description")
        )


@dataclass
class Enterprise:
    id: int = 0
    slug: str = ""
    name: str = ""
    node_id: str = ""
    avatar_url: str = ""
    description: str = ""
    website_url: str = ""
    html_url: str = ""
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Enterprise':
        return cls(
            id=integer(data, "id"),
            slug=text(data, "slug"),
            name=text(data, "name"),
            node_id=text(data, "node_id"),
            avatar_url=text(data, "avatar_url"),
            description=text(data, "description"),
            website_url=text(data, "website_url"),
            html_url=text(data, "html_url"),
            created_at=text(data, "created_at"),
            updated_at=text(data, "updated_at")
        )


@dataclass
class Team:
    id: int = 0
    node_id: str = ""
    url: str = ""
    html_url: str = ""
    name: str = ""
    slug: str = ""
    description: str = ""
    privacy: str = ""
    permission: str = ""
    members_url: str = ""
    repositories_url: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Team':
        return cls(
            id=integer(data, "id"),
            node_id=text(data, "node_id"),
            url=text(data, "url"),
            html_url=text(data, "html_url"),
            name=text(data, "name"),
            slug=text(data, "slug"),
            description=text(data, "description"),
            privacy=text(data, "privacy"),
            permission=text(data, "permission"),
            members_url=text(data, "members_url"),
            repositories_url=text(data, "repositories_url")
        )


@dataclass
class Project:
    """Classic (v1) repository project."""
    id: int = 0
    node_id: str = ""
    url: str = ""
    html_url: str = ""
    columns_url: str = ""
    owner_url: str = ""
    name: str = ""
    body: str = ""
    number: int = 0
    state: str = ""
    creator: Optional[User] = None
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Project':
        return cls(
            id=integer(data, "id"),
            node_id=text(data, "node_id"),
            url=text(data, "url"),
            html_url=text(data, "html_url"),
            columns_url=text(data, "columns_url"),
            owner_url=text(data, "owner_url"),
            name=text(data, "name"),
            body=text(data, "body"),
            number=integer(data, "number"),
            state=text(data, "state"),
            creator=optional(User.from_dict, data.get("creator")),
            created_at=text(data, "created_at"),
            updated_at=text(data, "updated_at")
        )


@dataclass
class Column:
    id: int = 0
    node_id: str = ""
    url: str = ""
    project_url: str = ""
    cards_url: str = ""
    name: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Column':
        return cls(
            id=integer(data, "id"),
            node_id=text(data, "node_id"),
            url=text(data, "url"),
            project_url=text(data, "project_url"),
            cards_url=text(data, "cards_url"),
            name=text(data, "name")
        )


@dataclass
class Card:
    id: int = 0
    node_id: str = ""
    url: str = ""
    note: str = ""
    creator: Optional[User] = None
    archived: bool = False
    column_url: str = ""
    content_url: str = ""
    project_url: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Card':
        return cls(
            id=integer(data, "id"),
            node_id=text(data, "node_id"),
            url=text(data, "url"),
            note=text(data, "note"),
            creator=optional(User.from_dict, data.get("creator")),
            archived=boolean(data, "archived"),
            column_url=text(data, "column_url"),
            content_url=text(data, "content_url"),
            project_url=text(data, "project_url")
        )


@dataclass
class MiniUser:
    """Git identity as it appears in push payloads."""
    name: str = ""
    email: str = ""
    username: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MiniUser':
        return cls(
            name=text(data, "name"),
            email=text(data, "email"),
            username=text(data, "username")
        )


@dataclass
class Commit:
    id: str = ""
    tree_id: str = ""
    distinct: bool = False
    message: str = ""
    timestamp: str = ""
    url: str = ""
    author: Optional[MiniUser] = None
    committer: Optional[MiniUser] = None
    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    modified: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Commit':
        return cls(
            id=text(data, "id"),
            tree_id=text(data, "tree_id"),
            distinct=boolean(data, "distinct"),
            message=text(data, "message"),
            timestamp=text(data, "timestamp"),
            url=text(data, "url"),
            author=optional(MiniUser.from_dict, data.get("author")),
            committer=optional(MiniUser.from_dict, data.get("committer")),
            added=strings(data.get("added")),
            removed=strings(data.get("removed")),
            modified=strings(data.get("modified"))
        )


# Webhook events

def _changed_from(changes: Any, key: str) -> Optional[str]:
    """Pull ``changes[key]["from"]`` out of an ``edited`` payload."""
    if not isinstance(changes, dict):
        return None
    change = changes.get(key)
    if not isinstance(change, dict):
        return None
    return change.get("from")


@dataclass
class IssuesEvent:
    action: str = ""
    issue: Optional[Issue] = None
    assignee: Optional[User] = None
    label: Optional[Label] = None
    repository: Optional[Repository] = None
    organization: Optional[Organization] = None
    sender: Optional[User] = None
    title_from: Optional[str] = None
    body_from: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'IssuesEvent':
        return cls(
            action=text(data, "action"),
            issue=optional(Issue.from_dict, data.get("issue")),
            assignee=optional(User.from_dict, data.get("assignee")),
            label=optional(Label.from_dict, data.get("label")),
            repository=optional(Repository.from_dict, data.get("repository")),
            organization=optional(Organization.from_dict, data.get("organization")),
            sender=optional(User.from_dict, data.get("sender")),
            title_from=_changed_from(data.get("changes"), "title"),
            body_from=_changed_from(data.get("changes"), "body"),
            raw=data
        )


@dataclass
class IssueCommentEvent:
    action: str = ""
    issue: Optional[Issue] = None
    comment: Optional[Comment] = None
    repository: Optional[Repository] = None
    organization: Optional[Organization] = None
    sender: Optional[User] = None
    body_from: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'IssueCommentEvent':
        return cls(
            action=text(data, "action"),
            issue=optional(Issue.from_dict, data.get("issue")),
            comment=optional(Comment.from_dict, data.get("comment")),
            repository=optional(Repository.from_dict, data.get("repository")),
            organization=optional(Organization.from_dict, data.get("organization")),
            sender=optional(User.from_dict, data.get("sender")),
            body_from=_changed_from(data.get("changes"), "body"),
            raw=data
        )


@dataclass
class MilestoneEvent:
    action: str = ""
    milestone: Optional[Milestone] = None
    repository: Optional[Repository] = None
    organization: Optional[Organization] = None
    sender: Optional[User] = None
    title_from: Optional[str] = None
    description_from: Optional[str] = None
    due_on_from: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MilestoneEvent':
        changes = data.get("changes")
        return cls(
            action=text(data, "action"),
            milestone=optional(Milestone.from_dict, data.get("milestone")),
            repository=optional(Repository.from_dict, data.get("repository")),
            organization=optional(Organization.from_dict, data.get("organization")),
            sender=optional(User.from_dict, data.get("sender")),
            title_from=_changed_from(changes, "title"),
            description_from=_changed_from(changes, "description"),
            due_on_from=_changed_from(changes, "due_on"),
            raw=data
        )


@dataclass
class PushEvent:
    ref: str = ""
    before: str = ""
    after: str = ""
    created: bool = False
    deleted: bool = False
    forced: bool = False
    compare: str = ""
    commits: List[Commit] = field(default_factory=list)
    head_commit: Optional[Commit] = None
    pusher: Optional[MiniUser] = None
    repository: Optional[Repository] = None
    organization: Optional[Organization] = None
    enterprise: Optional[Enterprise] = None
    sender: Optional[User] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PushEvent':
        return cls(
            ref=text(data, "ref"),
            before=text(data, "before"),
            after=text(data, "after"),
            created=boolean(data, "created"),
            deleted=boolean(data, "deleted"),
            forced=boolean(data, "forced"),
            compare=text(data, "compare"),
            commits=many(Commit.from_dict, data.get("commits")),
            head_commit=optional(Commit.from_dict, data.get("head_commit")),
            pusher=optional(MiniUser.from_dict, data.get("pusher")),
            repository=optional(Repository.from_dict, data.get("repository")),
            organization=optional(Organization.from_dict, data.get("organization")),
            enterprise=optional(Enterprise.from_dict, data.get("enterprise")),
            sender=optional(User.from_dict, data.get("sender")),
            raw=data
        )

    @property
    def action(self) -> str:
        return ""


@dataclass
class GenericEvent:
    """Any delivery we have no dedicated model for."""
    event_type: str = ""
    action: str = ""
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)


GitHubEvent = Union[IssuesEvent, IssueCommentEvent, MilestoneEvent, PushEvent, GenericEvent]

EVENT_MODELS = {
    "issues": IssuesEvent,
    "issue_comment": IssueCommentEvent,
    "milestone": MilestoneEvent,
    "push": PushEvent,
}


def parse_event(event_type: str, payload: Dict[str, Any]) -> GitHubEvent:
    """Decode a webhook payload given its ``X-GitHub-Event`` header value."""
    model = EVENT_MODELS.get(event_type)
    if model is None:
        return GenericEvent(event_type=event_type, action=text(payload, "action"), raw=payload)
    return model.from_dict(payload)
