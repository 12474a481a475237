"""
Version history for rule documents.

Provides version arithmetic, bounded history storage, snapshot diffing and
rollback for coding-guideline rules.
"""

from .semver import (
    VersionBump,
    ParsedVersion,
    validate_version,
    parse_version,
    increment_version,
    compare_versions,
    ensure_valid_version,
)

from .rule import (
    Rule,
    RuleMetadata,
    RuleExamples,
    ChangelogEntry,
    Severity,
    RuleStatus,
    create_snapshot,
    utc_now,
)

from .diff import (
    RuleDiff,
    DiffChange,
    ChangeType,
    deep_equal,
    compare_rules,
    format_diff,
)

from .storage import HistoryStore, MAX_HISTORY_ENTRIES, bounded_prepend

from .manager import VersionManager, initialize_versioning

__all__ = [
    # Version arithmetic
    "VersionBump",
    "ParsedVersion",
    "validate_version",
    "parse_version",
    "increment_version",
    "compare_versions",
    "ensure_valid_version",
    # Rule records
    "Rule",
    "RuleMetadata",
    "RuleExamples",
    "ChangelogEntry",
    "Severity",
    "RuleStatus",
    "create_snapshot",
    "utc_now",
    # Diff
    "RuleDiff",
    "DiffChange",
    "ChangeType",
    "deep_equal",
    "compare_rules",
    "format_diff",
    # Storage
    "HistoryStore",
    "MAX_HISTORY_ENTRIES",
    "bounded_prepend",
    # Manager
    "VersionManager",
    "initialize_versioning",
]
