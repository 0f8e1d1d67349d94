"""ZenHub record models (https://github.com/ZenHubIO/API)."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .common import text, integer, boolean, many


def _estimate(data: Dict[str, Any]) -> int:
    estimate = data.get("estimate")
    if isinstance(estimate, dict):
        return integer(estimate, "value")
    return 0


@dataclass
class IssuePipeline:
    """Where an issue sits in one workspace."""
    name: str = ""
    pipeline_id: str = ""
    workspace_id: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'IssuePipeline':
        return cls(
            name=text(data, "name"),
            pipeline_id=text(data, "pipeline_id"),
            workspace_id=text(data, "workspace_id")
        )


@dataclass
class ZenHubIssue:
    """GET /p1/repositories/:repo_id/issues/:issue_number"""
    estimate: int = 0
    plus_ones: List[str] = field(default_factory=list)
    pipelines: List[IssuePipeline] = field(default_factory=list)
    is_epic: bool = False
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ZenHubIssue':
        plus_ones = [
            text(plus_one, "created_at")
            for plus_one in data.get("plus_ones") or []
            if isinstance(plus_one, dict)
        ]
        return cls(
            estimate=_estimate(data),
            plus_ones=plus_ones,
            pipelines=many(IssuePipeline.from_dict, data.get("pipelines")),
            is_epic=boolean(data, "is_epic"),
            raw=data
        )

    def pipeline_in(self, workspace_id: str) -> Optional[IssuePipeline]:
        for pipeline in self.pipelines:
            if pipeline.workspace_id == workspace_id:
                return pipeline
        return None


@dataclass
class Workspace:
    """GET /p2/repositories/:repo_id/workspaces"""
    id: str = ""
    name: str = ""
    description: str = ""
    repositories: List[int] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Workspace':
        repositories = [
            int(repo_id) for repo_id in data.get("repositories") or []
            if isinstance(repo_id, int)
        ]
        return cls(
            id=text(data, "id"),
            name=text(data, "name"),
            description=text(data, "description"),
            repositories=repositories
        )


@dataclass
class PipelineIssue:
    issue_number: int = 0
    estimate: int = 0
    position: int = 0
    is_epic: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PipelineIssue':
        return cls(
            issue_number=integer(data, "issue_number"),
            estimate=_estimate(data),
            position=integer(data, "position"),
            is_epic=boolean(data, "is_epic")
        )


@dataclass
class Pipeline:
    id: str = ""
    name: str = ""
    issues: List[PipelineIssue] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Pipeline':
        return cls(
            id=text(data, "id"),
            name=text(data, "name"),
            issues=many(PipelineIssue.from_dict, data.get("issues"))
        )


@dataclass
class Board:
    """GET /p2/workspaces/:workspace_id/repositories/:repo_id/board

    ``workspace`` and ``repo_id`` are filled in by the client.
    """
    pipelines: List[Pipeline] = field(default_factory=list)
    workspace: Optional[Workspace] = None
    repo_id: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Board':
        return cls(pipelines=many(Pipeline.from_dict, data.get("pipelines")))

    def find_pipeline(self, name: str) -> Optional[Pipeline]:
        for pipeline in self.pipelines:
            if pipeline.name == name:
                return pipeline
        return None


@dataclass
class EpicIssue:
    issue_number: int = 0
    repo_id: int = 0
    issue_url: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EpicIssue':
        return cls(
            issue_number=integer(data, "issue_number"),
            repo_id=integer(data, "repo_id"),
            issue_url=text(data, "issue_url")
        )


@dataclass
class RepositoryEpics:
    """GET /p1/repositories/:repo_id/epics"""
    epic_issues: List[EpicIssue] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RepositoryEpics':
        return cls(epic_issues=many(EpicIssue.from_dict, data.get("epic_issues")))
