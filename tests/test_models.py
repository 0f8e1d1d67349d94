"""Validate record decoding from vendor JSON."""

import pytest

from tracker_clients.exceptions import CustomFieldError
from tracker_clients.models.aha import Feature, Product
from tracker_clients.models.github import (
    GenericEvent, IssueCommentEvent, IssuesEvent, MilestoneEvent, parse_event
)

from sample_data import FEATURE, PRODUCT


class TestAhaModels:

    def test_feature_tolerates_missing_and_null(self):
        feature = Feature.from_dict({"reference_num": "APP-1", "tags": None, "workflow_status": None})

        assert feature.reference_num == "APP-1"
        assert feature.tags == []
        assert feature.workflow_status is None
        assert feature.product is None

    def test_workflow_kind_object(self):
        feature = Feature.from_dict({"workflow_kind": {"id": "1", "name": "New"}})

        assert feature.workflow_kind == "New"

    def test_get_custom_field(self):
        feature = Feature.from_dict(FEATURE)

        assert feature.get_custom_field("Team") == ("Core", True)
        assert feature.get_custom_field("Platforms") == ("", False)
        assert feature.get_custom_field("Missing") == ("", False)

    def test_git_url(self):
        assert Feature.from_dict(FEATURE).git_url() == "https://github.com/org/repo/issues/1"
        assert Feature.from_dict({}).git_url() == ""

        broken = Feature.from_dict({"custom_fields": [
            {"key": "ghe_url", "name": "GitHub URL", "type": "url", "value": ["x"]}
        ]})
        with pytest.raises(CustomFieldError):
            broken.git_url()

    def test_product_feature_definitions(self):
        product = Product.from_dict(PRODUCT)

        keys = [definition.key for definition in product.feature_field_definitions()]

        assert "team" in keys
        assert "codename" not in keys
        assert product.raw is PRODUCT


class TestGitHubEvents:

    def test_issues_edited(self):
        event = parse_event("issues", {
            "action": "edited",
            "issue": {"number": 3, "labels": [{"name": "bug"}, "junk"]},
            "changes": {"title": {"from": "Old title"}},
        })

        assert isinstance(event, IssuesEvent)
        assert event.title_from == "Old title"
        assert event.body_from is None
        assert [label.name for label in event.issue.labels] == ["bug"]

    def test_comment_and_milestone(self):
        comment = parse_event("issue_comment", {"action": "created", "comment": {"body": "hi"}})
        milestone = parse_event("milestone", {
            "action": "edited",
            "milestone": {"title": "v2"},
            "changes": {"due_on": {"from": "2024-01-01T00:00:00Z"}},
        })

        assert isinstance(comment, IssueCommentEvent)
        assert comment.comment.body == "hi"
        assert isinstance(milestone, MilestoneEvent)
        assert milestone.due_on_from == "2024-01-01T00:00:00Z"

    def test_unknown_event(self):
        event = parse_event("star", {"action": "created"})

        assert isinstance(event, GenericEvent)
        assert event.event_type == "star"
        assert event.action == "created"

    def test_pull_request_issue(self):
        event = parse_event("issues", {"issue": {"pull_request": {"url": "x"}}})

        assert event.issue.is_pull_request
