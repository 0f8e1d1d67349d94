"""Validate the ZenHub client against mocked HTTP responses."""

import pytest

from tracker_clients.api.zenhub_client import ZenHubAPIClient
from tracker_clients.exceptions import APIError, AuthenticationError, NotFoundError


BASE = "https://api.zenhub.com"

WORKSPACES = [
    {"id": "ws-1", "name": "Platform", "repositories": [900, 901]},
    {"id": "ws-2", "name": "Mobile", "repositories": [900]},
]

BOARD = {
    "pipelines": [
        {"id": "p-1", "name": "New Issues", "issues": [{"issue_number": 3, "position": 0}]},
        {"id": "p-2", "name": "In Progress", "issues": []},
    ]
}


class TestZenHubIssues:
    """Validate issue and epic endpoints."""

    def setup_method(self):
        self.client = ZenHubAPIClient("zh-token")

    def test_get_issue(self, make_response, queue_responses):
        mock = queue_responses(self.client, [make_response(200, {
            "estimate": {"value": 5},
            "plus_ones": [{"created_at": "2024-01-01T00:00:00Z"}],
            "pipelines": [{"name": "In Progress", "pipeline_id": "p-2", "workspace_id": "ws-1"}],
            "is_epic": True,
        })])

        issue = self.client.get_issue(900, 7)

        assert issue.estimate == 5
        assert issue.is_epic
        assert issue.pipeline_in("ws-1").name == "In Progress"
        assert issue.pipeline_in("ws-9") is None
        kwargs = mock.call_args.kwargs
        assert kwargs["url"] == f"{BASE}/p1/repositories/900/issues/7"
        assert kwargs["headers"]["X-Authentication-Token"] == "zh-token"

    def test_missing_token(self, queue_responses):
        client = ZenHubAPIClient("")
        mock = queue_responses(client, [])

        with pytest.raises(AuthenticationError):
            client.get_issue(900, 7)
        mock.assert_not_called()

    def test_make_epic_sends_empty_list(self, make_response, queue_responses):
        mock = queue_responses(self.client, [make_response(200)])

        self.client.make_epic(900, 7)

        assert mock.call_args.kwargs["url"] == f"{BASE}/p1/repositories/900/issues/7/convert_to_epic"
        assert mock.call_args.kwargs["json"] == []

    def test_add_task(self, make_response, queue_responses):
        mock = queue_responses(self.client, [make_response(200, {"added": []})])

        self.client.add_task(900, 1, 901, 12)

        assert mock.call_args.kwargs["url"] == f"{BASE}/p1/repositories/900/epics/1/update_issues"
        assert mock.call_args.kwargs["json"] == {"add_issues": [{"repo_id": 901, "issue_number": 12}]}

    def test_get_epics(self, make_response, queue_responses):
        queue_responses(self.client, [make_response(200, {
            "epic_issues": [{"issue_number": 1, "repo_id": 900, "issue_url": "https://github.com/org/repo/issues/1"}]
        })])

        epics = self.client.get_epics(900)

        assert [epic.issue_number for epic in epics.epic_issues] == [1]


class TestZenHubBoards:
    """Validate workspace lookups and pipeline moves."""

    def setup_method(self):
        self.client = ZenHubAPIClient("zh-token", url="https://zenhub.example.com/")

    def test_custom_url(self, make_response, queue_responses):
        mock = queue_responses(self.client, [make_response(200, WORKSPACES)])

        workspace = self.client.get_workspace(900, "Mobile")

        assert workspace.id == "ws-2"
        assert mock.call_args.kwargs["url"] == "https://zenhub.example.com/p2/repositories/900/workspaces"

    def test_get_board(self, make_response, queue_responses):
        queue_responses(self.client, [make_response(200, WORKSPACES), make_response(200, BOARD)])

        board = self.client.get_board(900, "Platform")

        assert board.workspace.id == "ws-1"
        assert board.repo_id == 900
        assert board.find_pipeline("New Issues").issues[0].issue_number == 3
        assert board.find_pipeline("Done") is None

    def test_unknown_workspace(self, make_response, queue_responses):
        queue_responses(self.client, [make_response(200, WORKSPACES)])

        with pytest.raises(NotFoundError):
            self.client.get_board(900, "Nope")

    def test_move_by_name(self, make_response, queue_responses):
        mock = queue_responses(self.client, [
            make_response(200, WORKSPACES),
            make_response(200, BOARD),
            make_response(200),
        ])

        self.client.set_issue_pipeline_by_name(900, "Platform", 7, "In Progress")

        move = mock.call_args.kwargs
        assert move["method"] == "POST"
        assert move["url"] == "https://zenhub.example.com/p2/workspaces/ws-1/repositories/900/issues/7/moves"
        assert move["json"] == {"pipeline_id": "p-2", "position": "top"}

    def test_move_to_unknown_pipeline(self, make_response, queue_responses):
        mock = queue_responses(self.client, [make_response(200, WORKSPACES), make_response(200, BOARD)])

        with pytest.raises(NotFoundError):
            self.client.set_issue_pipeline_by_name(900, "Platform", 7, "Done")
        assert mock.call_count == 2

    def test_move_error(self, make_response, queue_responses):
        queue_responses(self.client, [make_response(400, {"message": "Invalid position"})])

        with pytest.raises(APIError) as exc_info:
            self.client.set_issue_pipeline("ws-1", 900, 7, "p-2", position="middle")
        assert exc_info.value.status_code == 400
