"""
Unit tests for diff computation.

Tests deep equality, field-level comparison and diff formatting.
"""

from datetime import date, datetime

from rulebook.versioning.diff import (
    ChangeType,
    DiffChange,
    RuleDiff,
    ValueKind,
    compare_rules,
    deep_equal,
    format_diff,
    value_kind,
)


class TestValueKind:
    """Tests for value classification."""

    def test_bool_is_not_number(self) -> None:
        """Booleans are their own kind."""
        assert value_kind(True) == ValueKind.BOOLEAN
        assert value_kind(1) == ValueKind.NUMBER

    def test_containers(self) -> None:
        """Lists and dicts map to sequence and mapping."""
        assert value_kind([1]) == ValueKind.SEQUENCE
        assert value_kind((1,)) == ValueKind.SEQUENCE
        assert value_kind({"a": 1}) == ValueKind.MAPPING
        assert value_kind(None) == ValueKind.NULL


class TestDeepEqual:
    """Tests for deep_equal."""

    def test_primitives(self) -> None:
        """Primitives compare by value."""
        assert deep_equal("a", "a")
        assert not deep_equal("a", "b")
        assert deep_equal(1, 1.0)
        assert not deep_equal(1, 2)

    def test_kind_mismatch(self) -> None:
        """Different kinds are never equal."""
        assert not deep_equal(1, "1")
        assert not deep_equal(True, 1)
        assert not deep_equal([], {})
        assert not deep_equal(None, "")

    def test_none(self) -> None:
        """None only equals None."""
        assert deep_equal(None, None)
        assert not deep_equal(None, 0)
        assert not deep_equal({"a": None}, {"a": 0})

    def test_sequences(self) -> None:
        """Sequences compare positionally."""
        assert deep_equal(["a", "b"], ["a", "b"])
        assert not deep_equal(["a", "b"], ["b", "a"])
        assert not deep_equal(["a"], ["a", "b"])
        assert deep_equal([], [])

    def test_mappings(self) -> None:
        """Mappings need the same keys and equal values, in any order."""
        assert deep_equal({"a": 1, "b": 2}, {"b": 2, "a": 1})
        assert not deep_equal({"a": 1}, {"a": 1, "b": 2})
        assert not deep_equal({"a": 1, "b": 2}, {"a": 1, "c": 2})

    def test_nested(self) -> None:
        """Nested structures are compared recursively."""
        a = {"examples": {"good": ["x"], "bad": []}, "tags": [{"k": [1, 2]}]}
        b = {"examples": {"good": ["x"], "bad": []}, "tags": [{"k": [1, 2]}]}
        assert deep_equal(a, b)
        b["tags"][0]["k"].append(3)
        assert not deep_equal(a, b)


class TestCompareRules:
    """Tests for compare_rules."""

    def test_identical_snapshot(self) -> None:
        """A snapshot compared with itself has no changes."""
        snapshot = {"id": "r1", "tags": ["a"], "metadata": {"version": "1.0.0"}}
        assert compare_rules(snapshot, snapshot) == []

    def test_modified_tags(self) -> None:
        """A changed list is reported as modified."""
        changes = compare_rules({"id": "r1", "tags": ["a"]}, {"id": "r1", "tags": ["a", "b"]})
        assert changes == [DiffChange("tags", ["a"], ["a", "b"], ChangeType.MODIFIED)]

    def test_added_and_removed(self) -> None:
        """Keys missing on one side are added or removed."""
        changes = compare_rules(
            {"id": "r1", "examples": {"good": []}},
            {"id": "r1", "scope": "python"},
        )
        assert changes == [
            DiffChange("examples", {"good": []}, None, ChangeType.REMOVED),
            DiffChange("scope", None, "python", ChangeType.ADDED),
        ]

    def test_key_order(self) -> None:
        """From-keys come first in order, then keys only in the target."""
        changes = compare_rules(
            {"b": 1, "a": 1, "c": 1},
            {"z": 2, "a": 2, "b": 2, "c": 2},
        )
        assert [change.field for change in changes] == ["b", "a", "c", "z"]

    def test_none_value_is_present(self) -> None:
        """A key holding None is present, not absent."""
        changes = compare_rules({"owner": None}, {"owner": "alice"})
        assert changes == [DiffChange("owner", None, "alice", ChangeType.MODIFIED)]

        assert compare_rules({"owner": None}, {"owner": None}) == []

    def test_metadata_change(self) -> None:
        """Nested metadata differences are reported on the metadata field."""
        changes = compare_rules(
            {"metadata": {"version": "1.0.0", "status": "draft"}},
            {"metadata": {"version": "1.0.1", "status": "draft"}},
        )
        assert len(changes) == 1
        assert changes[0].field == "metadata"
        assert changes[0].type == ChangeType.MODIFIED


class TestRuleDiff:
    """Tests for RuleDiff helpers."""

    def test_empty_diff(self) -> None:
        """An empty diff reports no changes."""
        diff = RuleDiff("r1", "1.0.0", "1.0.0")
        assert not diff.has_changes()
        assert diff.summary() == "No changes"

    def test_count_and_summary(self) -> None:
        """Changes are counted by type."""
        diff = RuleDiff(
            "r1",
            "1.0.0",
            "1.0.1",
            [
                DiffChange("tags", ["a"], ["a", "b"], ChangeType.MODIFIED),
                DiffChange("scope", None, "py", ChangeType.ADDED),
            ],
        )
        assert diff.count_by_type() == {"added": 1, "removed": 0, "modified": 1}
        assert diff.summary() == "1 fields added, 1 fields modified"

    def test_to_dict(self) -> None:
        """Diffs serialize with plain change types."""
        diff = RuleDiff(
            "r1", "1.0.0", "1.0.1", [DiffChange("name", "a", "b", ChangeType.MODIFIED)]
        )
        assert diff.to_dict()["changes"] == [
            {"field": "name", "old_value": "a", "new_value": "b", "type": "modified"}
        ]


class TestFormatDiff:
    """Tests for format_diff."""

    def test_no_changes(self) -> None:
        """An empty diff renders a no-changes line."""
        text = format_diff(RuleDiff("r1", "1.0.0", "1.0.0"))
        assert text == "Rule: r1\nVersion: 1.0.0 → 1.0.0\n\nNo changes"

    def test_change_lines(self) -> None:
        """Each change type has its own prefix and value lines."""
        diff = RuleDiff(
            "r1",
            "1.0.0",
            "1.0.1",
            [
                DiffChange("scope", None, "python", ChangeType.ADDED),
                DiffChange("examples", {"good": []}, None, ChangeType.REMOVED),
                DiffChange("tags", ["a"], ["a", "b"], ChangeType.MODIFIED),
            ],
        )
        lines = format_diff(diff).split("\n")

        assert lines[:3] == ["Rule: r1", "Version: 1.0.0 → 1.0.1", ""]
        assert lines[3:6] == ["+ scope:", '  + "python"', ""]
        assert lines[6:9] == ["- examples:", '  - {"good": []}', ""]
        assert lines[9:13] == ["~ tags:", '  - ["a"]', '  + ["a", "b"]', ""]

    def test_non_ascii_preserved(self) -> None:
        """Non-ASCII values are shown as-is."""
        diff = RuleDiff(
            "r1", "1.0.0", "1.0.1", [DiffChange("name", "이름", "名前", ChangeType.MODIFIED)]
        )
        assert '"名前"' in diff.format()


class TestNonStringScalars:
    """Dates and other scalar objects compare by value."""

    def test_equal_dates(self) -> None:
        """Two equal date objects are deep-equal."""
        assert deep_equal(date(2024, 1, 1), date(2024, 1, 1))
        assert not deep_equal(date(2024, 1, 1), date(2024, 1, 2))

    def test_different_types(self) -> None:
        """Equal-looking objects of different types are not equal."""
        assert not deep_equal(date(2024, 1, 1), datetime(2024, 1, 1))

    def test_unchanged_date_field_not_reported(self) -> None:
        """A date that did not change is not a modification."""
        changes = compare_rules(
            {"reviewed": date(2024, 1, 1), "tags": ["a"]},
            {"reviewed": date(2024, 1, 1), "tags": ["a", "b"]},
        )
        assert [change.field for change in changes] == ["tags"]
