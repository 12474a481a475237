"""
Diff computation for comparing rule snapshots.

Computes field-level differences between two snapshots using a generic
deep equality, and formats them for display.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping


class ChangeType(str, Enum):
    """Type of change in a diff."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"


class ValueKind(str, Enum):
    """Kinds of values that can appear in a snapshot."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    OTHER = "other"


CHANGE_ICONS = {
    ChangeType.ADDED: "+",
    ChangeType.REMOVED: "-",
    ChangeType.MODIFIED: "~",
}


@dataclass
class DiffChange:
    """A change to a single top-level field."""

    field: str
    old_value: Any
    new_value: Any
    type: ChangeType

    def to_dict(self) -> Dict[str, Any]:
        """Convert change to dictionary for serialization."""
        return {
            "field": self.field,
            "old_value": self.old_value,
            "new_value": self.new_value,
            "type": self.type.value,
        }


@dataclass
class RuleDiff:
    """
    Complete diff between two versions of a rule.
    """

    rule_id: str
    from_version: str
    to_version: str
    changes: List[DiffChange] = field(default_factory=list)

    def has_changes(self) -> bool:
        """Check if there are any changes."""
        return len(self.changes) > 0

    def count_by_type(self) -> Dict[str, int]:
        """Count changes by type."""
        counts = {change_type.value: 0 for change_type in ChangeType}
        for change in self.changes:
            counts[change.type.value] += 1
        return counts

    def summary(self) -> str:
        """Generate a one-line summary of the diff."""
        if not self.has_changes():
            return "No changes"

        counts = self.count_by_type()
        parts = []
        if counts["added"] > 0:
            parts.append(f"{counts['added']} fields added")
        if counts["removed"] > 0:
            parts.append(f"{counts['removed']} fields removed")
        if counts["modified"] > 0:
            parts.append(f"{counts['modified']} fields modified")
        return ", ".join(parts)

    def format(self) -> str:
        """Format diff for display."""
        return format_diff(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert diff to dictionary for serialization."""
        return {
            "rule_id": self.rule_id,
            "from_version": self.from_version,
            "to_version": self.to_version,
            "changes": [change.to_dict() for change in self.changes],
        }


def value_kind(value: Any) -> ValueKind:
    """
    Classify a snapshot value.

    ``bool`` is checked before numbers since it is an ``int`` subclass.
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    return ValueKind.OTHER


def deep_equal(a: Any, b: Any) -> bool:
    """
    Structural equality over snapshot values.

    Args:
        a: First value
        b: Second value

    Returns:
        True if both values have the same kind and the same content
    """
    kind = value_kind(a)
    if kind != value_kind(b):
        return False

    if kind == ValueKind.NULL:
        return True
    if kind in (ValueKind.BOOLEAN, ValueKind.NUMBER, ValueKind.STRING):
        return bool(a == b)
    if kind == ValueKind.SEQUENCE:
        if len(a) != len(b):
            return False
        return all(deep_equal(x, y) for x, y in zip(a, b))
    if kind == ValueKind.MAPPING:
        if set(a.keys()) != set(b.keys()):
            return False
        return all(deep_equal(a[key], b[key]) for key in a)
    # Other objects (dates, sets) compare by value within the same type
    return type(a) is type(b) and bool(a == b)


def compare_rules(
    from_snapshot: Mapping[str, Any], to_snapshot: Mapping[str, Any]
) -> List[DiffChange]:
    """
    Compare two rule snapshots field by field.

    Keys of ``from_snapshot`` are visited first, in order, followed by keys
    that only appear in ``to_snapshot``. A key whose value is None is
    present; only a missing key counts as absent.

    Args:
        from_snapshot: Older snapshot
        to_snapshot: Newer snapshot

    Returns:
        Ordered list of changes (empty if the snapshots are equal)
    """
    keys = list(from_snapshot.keys())
    keys.extend(key for key in to_snapshot.keys() if key not in from_snapshot)

    changes: List[DiffChange] = []
    for key in keys:
        in_from = key in from_snapshot
        in_to = key in to_snapshot
        old_value = from_snapshot.get(key)
        new_value = to_snapshot.get(key)

        if not in_from and in_to:
            changes.append(DiffChange(key, None, new_value, ChangeType.ADDED))
        elif in_from and not in_to:
            changes.append(DiffChange(key, old_value, None, ChangeType.REMOVED))
        elif not deep_equal(old_value, new_value):
            changes.append(DiffChange(key, old_value, new_value, ChangeType.MODIFIED))

    return changes


def _render(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)


def format_diff(diff: RuleDiff) -> str:
    """
    Render a diff as human readable text.

    Args:
        diff: Diff to render

    Returns:
        Multi-line string; "No changes" when the diff is empty
    """
    lines = [
        f"Rule: {diff.rule_id}",
        f"Version: {diff.from_version} → {diff.to_version}",
        "",
    ]

    if not diff.changes:
        lines.append("No changes")
        return "\n".join(lines)

    for change in diff.changes:
        lines.append(f"{CHANGE_ICONS[change.type]} {change.field}:")
        if change.type == ChangeType.ADDED:
            lines.append(f"  + {_render(change.new_value)}")
        elif change.type == ChangeType.REMOVED:
            lines.append(f"  - {_render(change.old_value)}")
        else:
            lines.append(f"  - {_render(change.old_value)}")
            lines.append(f"  + {_render(change.new_value)}")
        lines.append("")

    return "\n".join(lines)
