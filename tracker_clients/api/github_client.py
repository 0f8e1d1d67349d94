"""GitHub / GitHub Enterprise API client for issues, repositories and projects."""

import base64
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from ..exceptions import (
    APIError, AuthenticationError, GraphQLError, NotFoundError, ResponseDecodeError
)
from ..models.github import (
    Card, Column, Issue, Label, Milestone, Project, Repository, Team
)
from ..parsing.issue_data import IssueData
from ..utils.logging import StructuredLogger
from .base import BaseAPIClient


T = TypeVar("T")

PUBLIC_HOST = "github.com"
INERTIA_PREVIEW = "application/vnd.github.inertia-preview+json"
ALREADY_ON_PROJECT = "Project already has the associated issue"


@dataclass
class GitResponse:
    """Response of a single GitHub request.

    ``links`` maps each ``rel`` of the ``Link`` header to its URL.
    """
    status_code: int
    links: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    content: bytes = b""


def _strip_at(user: str) -> str:
    if len(user) > 1 and user.startswith("@"):
        return user[1:]
    return user


def _replace(target: Any, source: Any) -> None:
    for item in fields(source):
        setattr(target, item.name, getattr(source, item.name))


def _with_query(url: str, query: str) -> str:
    if query:
        return f"{url}?{query}"
    return url


class GitHubAPIClient(BaseAPIClient):
    """GitHub REST and GraphQL client.

    ``host`` is ``github.com`` or the host name of a GitHub Enterprise server.
    """

    def __init__(self, host: str, token: str, timeout: int = 30, verify_ssl: bool = True):
        """Initialize GitHub API client.

        Args:
            host: github.com or a GitHub Enterprise host name
            token: Personal access token
            timeout: Request timeout in seconds
            verify_ssl: Verify TLS certificates
        """
        self.host = host or PUBLIC_HOST
        self.token = token

        if self.host == PUBLIC_HOST:
            base_url = "https://api.github.com"
            self.graphql_url = "https://api.github.com/graphql"
        else:
            base_url = f"https://{self.host}/api/v3"
            self.graphql_url = f"https://{self.host}/api/graphql"

        super().__init__(base_url=base_url, timeout=timeout, verify_ssl=verify_ssl)

        self.structured_logger = StructuredLogger(__name__)

    def authenticate(self) -> Dict[str, str]:
        """Return GitHub authentication headers."""
        if not self.token:
            raise AuthenticationError("Missing GitHub token, set GITHUB_TOKEN or create .gitToken")

        auth = base64.b64encode(f"user:{self.token}".encode()).decode()
        return {
            "Authorization": f"Basic {auth}",
            "Content-Type": "application/json",
            "User-Agent": "tracker-clients/1.0"
        }

    def test_connection(self) -> bool:
        """Test GitHub API connection and authentication."""
        try:
            response = self.get("/user")
            user_data = response.json()
            self.logger.info(f"Connected to GitHub as: {user_data.get('login')}")
            return True
        except Exception as e:
            self.logger.error(f"GitHub connection test failed: {e}")
            return False

    # Transport

    def git(
        self,
        method: str,
        url: str,
        body: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> GitResponse:
        """Send one request; ``url`` may be relative to the API root or absolute."""
        extra = {}
        if any(part in url for part in ("projects", "columns", "cards")):
            extra["Accept"] = INERTIA_PREVIEW
        if headers:
            extra.update(headers)

        response = self._make_request(method, url, json_data=body, headers=extra)

        links = {
            rel: link["url"]
            for rel, link in response.links.items()
            if "url" in link
        }

        content_type = response.headers.get("Content-Type", "")
        body_data = self.decode(response) if "json" in content_type or not content_type else None

        return GitResponse(
            status_code=response.status_code,
            links=links,
            body=body_data,
            content=response.content
        )

    def get_all(self, url: str, record_cls: Type[T]) -> List[T]:
        """GET a list endpoint, following ``rel="next"`` links to the end."""
        result: List[T] = []
        next_url: Optional[str] = url

        while next_url:
            res = self.git("GET", next_url)
            if res.body is None:
                res.body = []
            if not isinstance(res.body, list):
                raise ResponseDecodeError(f"Expected a list from {next_url}, got {type(res.body).__name__}")

            result.extend(record_cls.from_dict(item) for item in res.body if isinstance(item, dict))
            next_url = res.links.get("next")

        return result

    def _get_one(self, url: str, from_dict: Callable[[Dict[str, Any]], T]) -> T:
        res = self.git("GET", url)
        if not isinstance(res.body, dict):
            raise ResponseDecodeError(f"Expected an object from {url}")
        return from_dict(res.body)

    def graphql(self, query: str) -> Dict[str, Any]:
        """POST a GraphQL query; a response with ``errors`` raises GraphQLError."""
        res = self.git("POST", self.graphql_url, {"query": query})
        if not isinstance(res.body, dict):
            raise ResponseDecodeError("Expected an object from GraphQL")
        if res.body.get("errors"):
            raise GraphQLError(f"GraphQL error: {res.body['errors']!r}", res.body["errors"])
        return res.body

    # Issues

    def get_issue(self, url: str) -> Issue:
        return self._get_one(url, Issue.from_dict)

    def get_issue_by_number(self, org: str, repo: str, num: int) -> Issue:
        return self.get_issue(f"/repos/{org}/{repo}/issues/{num}")

    def get_repository_issues(self, org: str, repo: str, query: str = "") -> List[Issue]:
        issues = self.get_all(_with_query(f"/repos/{org}/{repo}/issues", query), Issue)
        self.logger.info(f"Retrieved {len(issues)} issues from {org}/{repo}")
        return issues

    def refresh_issue(self, issue: Issue) -> Issue:
        _replace(issue, self.get_issue(issue.url))
        return issue

    def add_label(self, issue: Issue, label: str) -> None:
        self.git("POST", f"{issue.url}/labels", {"labels": [label]})

    def remove_label(self, issue: Issue, label: str) -> None:
        self.git("DELETE", f"{issue.url}/labels/{label}")

    def add_comment(self, issue: Issue, comment: str) -> None:
        self.git("POST", f"{issue.url}/comments", {"body": comment})

    def close_issue(self, issue: Issue) -> None:
        self.git("PATCH", issue.url, {"state": "closed"})

    def reopen_issue(self, issue: Issue) -> None:
        self.git("PATCH", issue.url, {"state": "open"})

    def set_body(self, issue: Issue, body: str) -> Issue:
        """Replace the issue body; ``issue`` is updated to the server's copy."""
        res = self.git("PATCH", issue.url, {"body": body})
        if not isinstance(res.body, dict):
            raise ResponseDecodeError(f"Expected an issue from {issue.url}")
        _replace(issue, Issue.from_dict(res.body))
        return issue

    def add_assignee(self, issue: Issue, user: str) -> None:
        self.git("POST", f"{issue.url}/assignees", {"assignees": [_strip_at(user)]})

    def remove_assignee(self, issue: Issue, user: str) -> None:
        self.git("DELETE", f"{issue.url}/assignees", {"assignees": [_strip_at(user)]})

    def _milestone_number(self, milestones: List[Milestone], title: str) -> int:
        for milestone in milestones:
            if milestone.title == title:
                return milestone.number
        raise NotFoundError(f"Can't find milestone {title!r}")

    def set_milestone(self, issue: Issue, title: str) -> None:
        """Set the issue milestone by title; an empty title clears it."""
        if not title:
            self.git("PATCH", issue.url, {"milestone": None})
            return

        milestones = self.get_all(f"{issue.repository_url}/milestones", Milestone)
        self.git("PATCH", issue.url, {"milestone": self._milestone_number(milestones, title)})

    def set_issue_milestone(self, org: str, repo: str, num: int, title: str) -> Issue:
        number = self._milestone_number(self.get_repository_milestones(org, repo), title)
        res = self.git("PATCH", f"/repos/{org}/{repo}/issues/{num}", {"milestone": number})
        if not isinstance(res.body, dict):
            raise ResponseDecodeError(f"Expected an issue from {org}/{repo}#{num}")
        return Issue.from_dict(res.body)

    def get_issue_repository(self, issue: Issue) -> Repository:
        return self._get_one(issue.repository_url, Repository.from_dict)

    def move_issue_to_repository(self, issue: Issue, repo_name: str) -> None:
        """Transfer the issue to another repository of the same owner."""
        old_repo = self.get_issue_repository(issue)
        owner = old_repo.owner.login if old_repo.owner else ""
        new_repo = self.get_repository(owner, repo_name)

        query = (
            "mutation {\n"
            "  transferIssue(input: {\n"
            f"    issueId: \"{issue.node_id}\",\n"
            f"    repositoryId: \"{new_repo.node_id}\"\n"
            "  }) {\n"
            "    issue { number }\n"
            "  }\n"
            "}\n"
        )
        self.graphql(query)
        self.logger.info(f"Moved {issue.html_url or issue.url} to {owner}/{repo_name}")

    # Repositories

    def get_repository(self, org: str, name: str) -> Repository:
        return self._get_one(f"/repos/{org}/{name}", Repository.from_dict)

    def get_labels(self, repo: Repository) -> List[Label]:
        return self.get_all(f"{repo.url}/labels", Label)

    def get_issues(self, repo: Repository, query: str = "") -> List[Issue]:
        return self.get_all(_with_query(f"{repo.url}/issues", query), Issue)

    def get_milestones(self, repo: Repository, query: str = "") -> List[Milestone]:
        return self.get_all(_with_query(f"{repo.url}/milestones", query), Milestone)

    def get_repository_milestones(self, org: str, repo: str) -> List[Milestone]:
        return self.get_all(f"/repos/{org}/{repo}/milestones", Milestone)

    def get_milestone(self, url: str) -> Milestone:
        return self._get_one(url, Milestone.from_dict)

    def refresh_milestone(self, milestone: Milestone) -> Milestone:
        _replace(milestone, self.get_milestone(milestone.url))
        return milestone

    def get_repository_teams(self, org: str, repo: str) -> List[Team]:
        return self.get_all(f"/repos/{org}/{repo}/teams", Team)

    def get_file(self, repo: Repository, path: str) -> bytes:
        """Raw contents of a file in the default branch."""
        try:
            res = self.git(
                "GET", f"{repo.url}/contents/{path}",
                headers={"Accept": "application/vnd.github.raw"}
            )
        except APIError as e:
            if e.is_not_found:
                raise NotFoundError(f"File not found: {path}")
            raise
        return res.content

    # Organizations

    def is_member(self, org: str, user: str) -> bool:
        """Public membership check; 404 means not a member."""
        try:
            self.git("GET", f"/orgs/{org}/public_members/{_strip_at(user)}")
        except APIError as e:
            if e.is_not_found:
                return False
            raise
        return True

    def is_team_member(self, org: str, user: str, team: str) -> bool:
        user = _strip_at(user)
        try:
            res = self.git("GET", f"/orgs/{org}/teams/{team}")
        except APIError as e:
            if e.is_not_found:
                raise NotFoundError(f"Team {team!r} not found")
            raise

        team_slug = res.body.get("slug") if isinstance(res.body, dict) else None
        try:
            self.git("GET", f"/orgs/{org}/teams/{team_slug or team}/memberships/{user}")
        except APIError as e:
            if e.is_not_found:
                return False
            raise
        return True

    def is_user_in_organization(self, org: str, user: str) -> bool:
        return self.is_member(org, user)

    # Classic projects

    def get_projects(self, repo: Repository) -> List[Project]:
        return self.get_all(f"{repo.url}/projects", Project)

    def get_project(self, repo: Repository, name: str) -> Optional[Project]:
        for project in self.get_projects(repo):
            if project.name == name:
                return project
        return None

    def get_columns(self, project: Project) -> List[Column]:
        return self.get_all(project.columns_url, Column)

    def get_column(self, project: Project, name: str) -> Optional[Column]:
        for column in self.get_columns(project):
            if column.name == name:
                return column
        return None

    def get_column_cards(self, column: Column) -> List[Card]:
        return self.get_all(column.cards_url, Card)

    def get_project_cards(self, project: Project) -> List[Card]:
        cards: List[Card] = []
        for column in self.get_columns(project):
            cards.extend(self.get_column_cards(column))
        return cards

    def _issue_project(self, issue: Issue, project_name: str) -> Project:
        repo = self.get_issue_repository(issue)
        project = self.get_project(repo, project_name)
        if project is None:
            raise NotFoundError(f"Can't find project {project_name!r} in {repo.full_name}")
        return project

    def get_issue_project_cards(self, issue: Issue, project_name: str) -> List[Card]:
        """Cards of ``project_name`` that point at ``issue``."""
        project = self._issue_project(issue, project_name)
        return [card for card in self.get_project_cards(project) if card.content_url == issue.url]

    def add_to_project(self, issue: Issue, project_name: str, column: str = "Under Review") -> None:
        project = self._issue_project(issue, project_name)
        target = self.get_column(project, column)
        if target is None:
            raise NotFoundError(f"Can't find column {column!r} in project {project_name!r}")

        try:
            self.git("POST", target.cards_url, {
                "note": None,
                "content_id": issue.id,
                "content_type": "Issue"
            })
        except APIError as e:
            if ALREADY_ON_PROJECT in (e.body or ""):
                self.logger.debug(f"{issue.url} already on project {project_name!r}")
                return
            raise

    def remove_from_project(self, issue: Issue, project_name: str) -> None:
        for card in self.get_issue_project_cards(issue, project_name):
            self.delete_card(card)

    def delete_card(self, card: Card) -> None:
        self.git("DELETE", card.url)

    # Issue data

    def get_issue_data(self, issue: Issue) -> IssueData:
        return IssueData.parse(issue.body)

    def get_data(self, issue: Issue, label: str) -> List[str]:
        return self.get_issue_data(issue).values(label)

    def get_single_data(self, issue: Issue, label: str) -> str:
        return self.get_issue_data(issue).first(label)

    def has_data(self, issue: Issue, label: str, value: str) -> bool:
        return self.get_issue_data(issue).has(label, value)

    def add_data(self, issue: Issue, label: str, value: str) -> Issue:
        data = self.get_issue_data(issue)
        if data.has(label, value):
            return issue
        data.add(label, value)
        self.structured_logger.log_issue_data_update(issue.url, label, "ADD", value=repr(value))
        return self.set_issue_data(issue, data)

    def delete_data(self, issue: Issue, label: str, value: str = "") -> Issue:
        data = self.get_issue_data(issue)
        if not data.delete(label, value):
            return issue
        self.structured_logger.log_issue_data_update(issue.url, label, "DELETE", value=repr(value))
        return self.set_issue_data(issue, data)

    def set_data(self, issue: Issue, label: str, value: str) -> Issue:
        data = self.get_issue_data(issue)
        if data.values(label) == [value]:
            return issue
        data.set(label, value)
        self.structured_logger.log_issue_data_update(issue.url, label, "SET", value=repr(value))
        return self.set_issue_data(issue, data)

    def set_issue_data(self, issue: Issue, data: IssueData) -> Issue:
        return self.set_body(issue, data.render())
