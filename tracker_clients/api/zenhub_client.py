"""ZenHub API client for epics, workspaces and pipelines."""

from typing import Any, Dict, List, Optional

from ..exceptions import AuthenticationError, NotFoundError, ResponseDecodeError
from ..models.zenhub import Board, Pipeline, RepositoryEpics, Workspace, ZenHubIssue
from .base import BaseAPIClient


DEFAULT_URL = "https://api.zenhub.com"


class ZenHubAPIClient(BaseAPIClient):
    """ZenHub REST client, see https://github.com/ZenHubIO/API"""

    def __init__(self, token: str, url: str = DEFAULT_URL, timeout: int = 30, verify_ssl: bool = True):
        self.token = token
        super().__init__(base_url=url or DEFAULT_URL, timeout=timeout, verify_ssl=verify_ssl)

    def authenticate(self) -> Dict[str, str]:
        """Return ZenHub authentication headers."""
        if not self.token:
            raise AuthenticationError("Missing ZenHub token, set ZENHUB_TOKEN or create .zenToken")

        return {
            "X-Authentication-Token": self.token,
            "Content-Type": "application/json"
        }

    def zen(self, method: str, endpoint: str, body: Optional[Any] = None) -> Any:
        """Send one request and return the decoded JSON body."""
        response = self._make_request(method, endpoint, json_data=body)
        return self.decode(response)

    def _object(self, endpoint: str) -> Dict[str, Any]:
        data = self.zen("GET", endpoint)
        if not isinstance(data, dict):
            raise ResponseDecodeError(f"Expected an object from {endpoint}")
        return data

    # Issues and epics

    def get_issue(self, repo_id: int, num: int) -> ZenHubIssue:
        return ZenHubIssue.from_dict(self._object(f"/p1/repositories/{repo_id}/issues/{num}"))

    def make_epic(self, repo_id: int, num: int) -> None:
        self.zen("POST", f"/p1/repositories/{repo_id}/issues/{num}/convert_to_epic", [])
        self.logger.info(f"Converted issue {repo_id}#{num} to an epic")

    def get_epics(self, repo_id: int) -> RepositoryEpics:
        return RepositoryEpics.from_dict(self._object(f"/p1/repositories/{repo_id}/epics"))

    def add_task(self, epic_repo_id: int, epic_num: int, task_repo_id: int, task_num: int) -> None:
        """Add an issue to an epic."""
        self.zen("POST", f"/p1/repositories/{epic_repo_id}/epics/{epic_num}/update_issues", {
            "add_issues": [{"repo_id": task_repo_id, "issue_number": task_num}]
        })

    # Workspaces and boards

    def get_workspaces(self, repo_id: int) -> List[Workspace]:
        data = self.zen("GET", f"/p2/repositories/{repo_id}/workspaces")
        if data is None:
            return []
        if not isinstance(data, list):
            raise ResponseDecodeError(f"Expected a list of workspaces for repository {repo_id}")
        return [Workspace.from_dict(item) for item in data if isinstance(item, dict)]

    def get_workspace(self, repo_id: int, name: str) -> Optional[Workspace]:
        for workspace in self.get_workspaces(repo_id):
            if workspace.name == name:
                return workspace
        return None

    def get_workspace_board(self, workspace: Workspace, repo_id: int) -> Board:
        board = Board.from_dict(
            self._object(f"/p2/workspaces/{workspace.id}/repositories/{repo_id}/board")
        )
        board.workspace = workspace
        board.repo_id = repo_id
        return board

    def get_workspace_pipeline(self, workspace: Workspace, repo_id: int, name: str) -> Optional[Pipeline]:
        return self.get_workspace_board(workspace, repo_id).find_pipeline(name)

    def get_board(self, repo_id: int, workspace_name: str) -> Board:
        workspace = self.get_workspace(repo_id, workspace_name)
        if workspace is None:
            raise NotFoundError(f"Can't find workspace {workspace_name!r}")
        return self.get_workspace_board(workspace, repo_id)

    def get_pipeline(self, repo_id: int, workspace_name: str, pipeline_name: str) -> Optional[Pipeline]:
        return self.get_board(repo_id, workspace_name).find_pipeline(pipeline_name)

    # Moves

    def set_issue_pipeline(
        self,
        workspace_id: str,
        repo_id: int,
        num: int,
        pipeline_id: str,
        position: str = "top"
    ) -> None:
        self.zen(
            "POST",
            f"/p2/workspaces/{workspace_id}/repositories/{repo_id}/issues/{num}/moves",
            {"pipeline_id": pipeline_id, "position": position}
        )

    def set_issue_pipeline_by_name(self, repo_id: int, workspace_name: str, num: int, pipeline_name: str) -> None:
        board = self.get_board(repo_id, workspace_name)
        pipeline = board.find_pipeline(pipeline_name)
        if pipeline is None:
            raise NotFoundError(f"Can't find pipeline {pipeline_name!r}")

        self.set_issue_pipeline(board.workspace.id, repo_id, num, pipeline.id)
        self.logger.info(f"Moved issue {repo_id}#{num} to {pipeline_name!r} in {workspace_name!r}")
