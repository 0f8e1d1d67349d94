"""Validate parsing and rendering of the issue body data block."""

from tracker_clients.parsing import IssueData


BODY = """Login fails on Safari.

Steps:
1. open the page

---
**_Aha_**: https://company.aha.io/features/APP-12
**_Owner_**: @alice
**_Owner_**: @bob
"""


class TestIssueDataParse:
    """Validate how issue bodies split into text and entries."""

    def test_entries_and_body(self):
        data = IssueData.parse(BODY)

        assert data.body == ["Login fails on Safari.", "", "Steps:", "1. open the page"]
        assert data.entries == [
            ("Aha", "https://company.aha.io/features/APP-12"),
            ("Owner", "@alice"),
            ("Owner", "@bob"),
        ]

    def test_labels_and_values_are_trimmed(self):
        data = IssueData.parse("**_ Size _**:   L  ")

        assert data.entries == [("Size", "L")]
        assert data.body == []

    def test_lines_that_only_look_like_entries_stay_in_body(self):
        text = "see **_Aha_**: inline\n**_Aha_** missing colon\n*_**: too short"
        data = IssueData.parse(text)

        assert data.entries == []
        assert data.body == text.split("\n")

    def test_duplicate_entries_are_kept_once(self):
        data = IssueData.parse("**_A_**: 1\n**_A_**: 1\n**_A_**: 2")

        assert data.entries == [("A", "1"), ("A", "2")]

    def test_trailing_separator_and_blank_lines_dropped(self):
        data = IssueData.parse("text\n\n---\n\n")

        assert data.body == ["text"]

    def test_empty_body(self):
        data = IssueData.parse("")

        assert data.body == []
        assert data.entries == []
        assert data.render() == ""


class TestIssueDataRender:
    """Validate how entries are written back into the body."""

    def test_render_sorts_entries(self):
        data = IssueData(body=["text"], entries=[("Owner", "@bob"), ("Aha", "x"), ("Owner", "@alice")])

        assert data.render() == (
            "text\n"
            "\n---\n"
            "**_Aha_**: x\n"
            "**_Owner_**: @alice\n"
            "**_Owner_**: @bob\n"
        )

    def test_render_without_entries_has_no_separator(self):
        data = IssueData(body=["one", "two", "---", ""])

        assert data.render() == "one\ntwo\n"

    def test_parse_of_render_is_stable(self):
        data = IssueData.parse(BODY)
        rendered = data.render()

        assert IssueData.parse(rendered).render() == rendered


class TestIssueDataEdit:
    """Validate entry manipulation helpers."""

    def setup_method(self):
        self.data = IssueData.parse(BODY)

    def test_add_skips_exact_duplicate(self):
        self.data.add("Owner", "@alice")
        self.data.add("Owner", "@carol")

        assert self.data.values("Owner") == ["@alice", "@bob", "@carol"]

    def test_delete_single_value(self):
        assert self.data.delete("Owner", "@alice") is True
        assert self.data.values("Owner") == ["@bob"]

    def test_delete_every_value_of_label(self):
        assert self.data.delete("Owner") is True
        assert self.data.values("Owner") == []
        assert self.data.has("Aha", "https://company.aha.io/features/APP-12")

    def test_delete_missing_reports_false(self):
        assert self.data.delete("Owner", "@nobody") is False
        assert self.data.delete("Missing") is False
        assert len(self.data.entries) == 3

    def test_set_replaces_all_values(self):
        self.data.set("Owner", "@dave")

        assert self.data.values("Owner") == ["@dave"]

    def test_first_and_has(self):
        assert self.data.first("Owner") == "@alice"
        assert self.data.first("Missing") == ""
        assert self.data.has("Owner", "@bob")
        assert not self.data.has("Owner", "@carol")
