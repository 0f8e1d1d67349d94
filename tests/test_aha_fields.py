"""Validate the Aha custom field dispatcher for every field kind and action."""

import pytest

from tracker_clients.api.aha_fields import FieldAction, resolve_custom_field
from tracker_clients.exceptions import (
    CustomFieldError, InvalidOptionError, NotFoundError, UnsupportedFieldError
)
from tracker_clients.models.aha import Feature, Product

from sample_data import FEATURE, PRODUCT


def make_feature(**overrides):
    data = dict(FEATURE)
    data.update(overrides)
    feature = Feature.from_dict(data)
    feature.product = Product.from_dict(PRODUCT)
    return feature


def custom_fields(key, value):
    return {"feature": {"custom_fields": {key: value}}}


def object_links(key, ids):
    return {"feature": {"custom_object_links": {key: ids}}}


class TestLookup:
    """Validate how field definitions are found."""

    def test_name_or_key(self):
        feature = make_feature()

        by_name = resolve_custom_field(feature, "GitHub URL", FieldAction.GET)
        by_key = resolve_custom_field(feature, "ghe_url", FieldAction.GET)

        assert by_name.value == by_key.value == "https://github.com/org/repo/issues/1"

    def test_action_accepts_strings(self):
        outcome = resolve_custom_field(make_feature(), "Team", "get")

        assert outcome.value == "Core"
        assert outcome.is_noop

    def test_unknown_field(self):
        with pytest.raises(NotFoundError):
            resolve_custom_field(make_feature(), "Nope", FieldAction.GET)

    def test_only_feature_screens_are_searched(self):
        with pytest.raises(NotFoundError):
            resolve_custom_field(make_feature(), "Codename", FieldAction.GET)

    def test_unknown_kind_is_skipped(self):
        with pytest.raises(NotFoundError):
            resolve_custom_field(make_feature(), "Due", FieldAction.GET)

    def test_api_type_mismatch(self):
        with pytest.raises(UnsupportedFieldError):
            resolve_custom_field(make_feature(), "Broken", FieldAction.GET)

    def test_feature_without_product(self):
        feature = Feature.from_dict(FEATURE)

        with pytest.raises(NotFoundError):
            resolve_custom_field(feature, "Team", FieldAction.GET)


class TestScalarFields:
    """Validate url, note and text fields."""

    def setup_method(self):
        self.feature = make_feature()

    def test_compare(self):
        assert resolve_custom_field(
            self.feature, "GitHub URL", FieldAction.COMPARE, "https://github.com/org/repo/issues/1"
        ).value == "true"
        assert resolve_custom_field(self.feature, "GitHub URL", FieldAction.COMPARE, "x").value == "false"
        assert resolve_custom_field(self.feature, "Notes", FieldAction.COMPARE, "").value == "true"

    def test_missing_value_reads_empty(self):
        assert resolve_custom_field(self.feature, "Notes", FieldAction.GET).value == ""

    def test_set_same_value_is_noop(self):
        outcome = resolve_custom_field(
            self.feature, "GitHub URL", FieldAction.SET, " https://github.com/org/repo/issues/1 "
        )

        assert outcome.is_noop

    def test_set_new_value(self):
        outcome = resolve_custom_field(self.feature, "Notes", FieldAction.SET, "hello")

        assert outcome.update == custom_fields("notes", "hello")
        assert outcome.value == ""

    def test_set_empty_clears(self):
        outcome = resolve_custom_field(self.feature, "GitHub URL", FieldAction.SET, "")

        assert outcome.update == custom_fields("ghe_url", "")

    def test_remove(self):
        assert resolve_custom_field(self.feature, "GitHub URL", FieldAction.REMOVE, "other").is_noop
        assert resolve_custom_field(self.feature, "Notes", FieldAction.REMOVE).is_noop

        outcome = resolve_custom_field(self.feature, "GitHub URL", FieldAction.REMOVE)
        assert outcome.update == custom_fields("ghe_url", "")

        outcome = resolve_custom_field(
            self.feature, "GitHub URL", FieldAction.REMOVE, "https://github.com/org/repo/issues/1"
        )
        assert outcome.update == custom_fields("ghe_url", "")


class TestSelectField:
    """Validate single select fields."""

    def setup_method(self):
        self.feature = make_feature()

    def test_get_and_compare(self):
        assert resolve_custom_field(self.feature, "Team", FieldAction.GET).value == "Core"
        assert resolve_custom_field(self.feature, "Team", FieldAction.COMPARE, "Core").value == "true"
        assert resolve_custom_field(self.feature, "Team", FieldAction.COMPARE, "Web").value == "false"

    def test_set_writes_option_id(self):
        outcome = resolve_custom_field(self.feature, "Team", FieldAction.SET, "  Web ")

        assert outcome.update == custom_fields("team", "102")

    def test_set_current_value_is_noop(self):
        assert resolve_custom_field(self.feature, "Team", FieldAction.SET, "Core").is_noop

    def test_set_unknown_option(self):
        with pytest.raises(InvalidOptionError):
            resolve_custom_field(self.feature, "Team", FieldAction.SET, "Mobile")

    def test_set_empty_clears(self):
        outcome = resolve_custom_field(self.feature, "Team", FieldAction.SET, "")

        assert outcome.update == custom_fields("team", "")

    def test_remove(self):
        assert resolve_custom_field(self.feature, "Team", FieldAction.REMOVE, "Web").is_noop
        assert resolve_custom_field(
            self.feature, "Team", FieldAction.REMOVE, "Core"
        ).update == custom_fields("team", "")


class TestSelectMultipleField:
    """Validate multi select fields."""

    def setup_method(self):
        self.feature = make_feature()

    def test_get_joins_values(self):
        assert resolve_custom_field(self.feature, "Platforms", FieldAction.GET).value == "iOS,Android"

    def test_compare(self):
        assert resolve_custom_field(self.feature, "Platforms", FieldAction.COMPARE, "iOS").value == "true"
        assert resolve_custom_field(self.feature, "Platforms", FieldAction.COMPARE, "Web").value == "false"
        assert resolve_custom_field(self.feature, "Platforms", FieldAction.COMPARE, "").value == "false"

    def test_set_appends(self):
        outcome = resolve_custom_field(self.feature, "Platforms", FieldAction.SET, "Web")

        assert outcome.update == custom_fields("platforms", ["iOS", "Android", "Web"])

    def test_set_present_value_is_noop(self):
        assert resolve_custom_field(self.feature, "Platforms", FieldAction.SET, "iOS").is_noop

    def test_remove_one(self):
        outcome = resolve_custom_field(self.feature, "Platforms", FieldAction.REMOVE, "iOS")

        assert outcome.update == custom_fields("platforms", ["Android"])

    def test_remove_last_value_sends_null(self):
        feature = make_feature(custom_fields=[
            {"key": "platforms", "name": "Platforms", "type": "array", "value": ["iOS"]}
        ])

        outcome = resolve_custom_field(feature, "Platforms", FieldAction.REMOVE, "iOS")

        assert outcome.update == custom_fields("platforms", None)

    def test_clear(self):
        assert resolve_custom_field(
            self.feature, "Platforms", FieldAction.REMOVE
        ).update == custom_fields("platforms", None)
        assert resolve_custom_field(
            self.feature, "Platforms", FieldAction.SET, ""
        ).update == custom_fields("platforms", None)

    def test_clear_empty_field_is_noop(self):
        feature = make_feature(custom_fields=[])

        assert resolve_custom_field(feature, "Platforms", FieldAction.REMOVE).is_noop
        assert resolve_custom_field(feature, "Platforms", FieldAction.COMPARE, "").value == "true"

    def test_non_list_value(self):
        feature = make_feature(custom_fields=[
            {"key": "platforms", "name": "Platforms", "type": "array", "value": "iOS"}
        ])

        with pytest.raises(CustomFieldError):
            resolve_custom_field(feature, "Platforms", FieldAction.GET)


class TestLinkManyField:
    """Validate custom object link fields."""

    def setup_method(self):
        self.feature = make_feature()

    def test_get_sorted_labels(self):
        assert resolve_custom_field(self.feature, "Squads", FieldAction.GET).value == "Alpha,Beta"

    def test_compare(self):
        assert resolve_custom_field(self.feature, "Squads", FieldAction.COMPARE, "Beta").value == "true"
        assert resolve_custom_field(self.feature, "Squads", FieldAction.COMPARE, "Gamma").value == "false"
        assert resolve_custom_field(self.feature, "Squads", FieldAction.COMPARE, "").value == "false"

    def test_set_appends_record_id(self):
        outcome = resolve_custom_field(self.feature, "Squads", FieldAction.SET, "Gamma")

        assert outcome.update == object_links("squads", ["9002", "9001", "9003"])

    def test_set_present_label_is_noop(self):
        assert resolve_custom_field(self.feature, "Squads", FieldAction.SET, "Alpha").is_noop

    def test_remove_one(self):
        outcome = resolve_custom_field(self.feature, "Squads", FieldAction.REMOVE, "Alpha")

        assert outcome.update == object_links("squads", ["9002"])

    def test_remove_absent_label_is_noop(self):
        assert resolve_custom_field(self.feature, "Squads", FieldAction.REMOVE, "Gamma").is_noop

    def test_clear_sends_empty_string_list(self):
        outcome = resolve_custom_field(self.feature, "Squads", FieldAction.REMOVE)

        assert outcome.update == object_links("squads", [""])

    def test_clear_without_links_is_noop(self):
        feature = make_feature(custom_object_links=[])

        assert resolve_custom_field(feature, "Squads", FieldAction.SET, "").is_noop
        assert resolve_custom_field(feature, "Squads", FieldAction.COMPARE, "").value == "true"

    def test_unknown_label(self):
        with pytest.raises(InvalidOptionError):
            resolve_custom_field(self.feature, "Squads", FieldAction.COMPARE, "Delta")
