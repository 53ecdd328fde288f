"""Tests for change detection and change-type classification."""

import pytest

from content_versioning.models.history import ChangeType
from content_versioning.versioning.changes import (
    calculate_changes,
    determine_change_type,
    has_changed,
)
from content_versioning.versioning.sanitize import ABSENT


class TestHasChanged:
    """Equality rules for old/new field values."""

    def test_equal_primitives(self):
        assert has_changed("a", "a") is False
        assert has_changed(3, 3) is False
        assert has_changed(False, False) is False

    def test_different_primitives(self):
        assert has_changed("a", "b") is True
        assert has_changed(1, 2) is True

    def test_int_and_float_compare_numerically(self):
        assert has_changed(1, 1.0) is False

    def test_bool_and_int_are_different(self):
        assert has_changed(True, 1) is True
        assert has_changed(0, False) is True

    def test_string_and_number_are_different(self):
        assert has_changed("1", 1) is True

    def test_null_like_pairs(self):
        assert has_changed(None, None) is False
        assert has_changed(ABSENT, None) is False
        assert has_changed(None, "x") is True
        assert has_changed("x", None) is True
        assert has_changed(ABSENT, 0) is True

    def test_deep_equal_containers(self):
        assert has_changed({"a": [1, {"b": 2}]}, {"a": [1, {"b": 2}]}) is False
        assert has_changed(["x", "y"], ["x", "y"]) is False

    def test_deep_different_containers(self):
        assert has_changed({"a": [1, {"b": 2}]}, {"a": [1, {"b": 3}]}) is True
        assert has_changed(["x", "y"], ["y", "x"]) is True

    def test_container_vs_scalar(self):
        assert has_changed([], "") is True
        assert has_changed({}, 0) is True


class TestCalculateChanges:
    """Change-set construction."""

    def test_only_changed_keys_reported(self):
        current = {"id": "news-1", "title": "Spring Issue", "isPublished": False}
        updates = {"title": "Spring Issue", "isPublished": True}
        assert calculate_changes(current, updates) == {"isPublished": [False, True]}

    def test_identical_updates_give_empty_changes(self):
        current = {"title": "Spring Issue", "tags": ["garden"]}
        assert calculate_changes(current, {"title": "Spring Issue", "tags": ["garden"]}) == {}

    def test_new_field_reports_none_as_old(self):
        assert calculate_changes({"title": "T"}, {"pageCount": 8}) == {"pageCount": [None, 8]}

    def test_absent_update_value_recorded_as_none(self):
        assert calculate_changes({"title": "T"}, {"title": ABSENT}) == {"title": ["T", None]}

    def test_absent_update_on_missing_key_unchanged(self):
        assert calculate_changes({"title": "T"}, {"description": ABSENT}) == {}

    def test_absent_published_flag_classifies_archive(self):
        changes = calculate_changes({"isPublished": True}, {"isPublished": ABSENT})
        assert changes == {"isPublished": [True, None]}
        assert determine_change_type(changes) == ChangeType.ARCHIVE

    def test_nested_change(self):
        current = {"meta": {"pages": 8, "author": "Board"}}
        updates = {"meta": {"pages": 10, "author": "Board"}}
        changes = calculate_changes(current, updates)
        assert changes == {"meta": [current["meta"], updates["meta"]]}

    def test_fields_not_in_updates_ignored(self):
        assert calculate_changes({"title": "T", "year": 2023}, {}) == {}


class TestDetermineChangeType:
    """Change-type classification."""

    def test_plain_update(self):
        assert determine_change_type({"title": ["A", "B"]}) is ChangeType.UPDATE

    def test_empty_changes_is_update(self):
        assert determine_change_type({}) is ChangeType.UPDATE

    @pytest.mark.parametrize("new_value", [True, 1, "yes"])
    def test_publish(self, new_value):
        assert determine_change_type({"isPublished": [False, new_value]}) is ChangeType.PUBLISH

    @pytest.mark.parametrize("new_value", [False, None, 0, ""])
    def test_archive(self, new_value):
        assert determine_change_type({"isPublished": [True, new_value]}) is ChangeType.ARCHIVE

    def test_publish_wins_over_other_fields(self):
        changes = {"title": ["A", "B"], "isPublished": [False, True]}
        assert determine_change_type(changes) is ChangeType.PUBLISH
