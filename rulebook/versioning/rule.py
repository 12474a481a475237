"""
Rule records and their snapshots.

Defines the serializable rule document, its version metadata and changelog,
and the snapshot codec that captures a rule's state for the history store.
"""

import copy
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from rulebook.errors import ValidationError, YAMLParseError

CORE_FIELDS = (
    "id",
    "name",
    "description",
    "category",
    "tags",
    "severity",
    "created",
    "updated",
    "examples",
    "metadata",
)
SNAPSHOT_METADATA_FIELDS = ("version", "status", "author")


class Severity(str, Enum):
    """How strongly a rule violation is reported."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class RuleStatus(str, Enum):
    """Lifecycle status of a rule."""

    DRAFT = "draft"
    ACTIVE = "active"
    DEPRECATED = "deprecated"


def utc_now() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def _as_timestamp(value: Any) -> Any:
    # Unquoted timestamps in hand-written YAML load as datetime objects
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _as_timestamp(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_as_timestamp(v) for v in value]
    return value


def _require_type(
    data: Dict[str, Any], key: str, expected: type, label: str, file: Optional[str]
) -> None:
    if key in data and data[key] is not None and not isinstance(data[key], expected):
        raise ValidationError.invalid_type(key, label, type(data[key]).__name__, file)


def _parse_enum(enum_cls: Any, key: str, value: Any, file: Optional[str]) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = "|".join(member.value for member in enum_cls)
        raise ValidationError.invalid_value(key, allowed, str(value), file) from None


@dataclass(frozen=True)
class ChangelogEntry:
    """
    One record in a rule's history.

    Attributes:
        version: Version label this entry describes
        date: When the entry was written (ISO-8601 UTC)
        author: Who made the change
        changes: Free-text description
        snapshot: Partial rule capturing the state at that point
    """

    version: str
    date: str
    author: str
    changes: str
    snapshot: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert entry to dictionary for serialization."""
        data: Dict[str, Any] = {
            "version": self.version,
            "date": self.date,
            "author": self.author,
            "changes": self.changes,
        }
        if self.snapshot is not None:
            data["snapshot"] = copy.deepcopy(self.snapshot)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChangelogEntry":
        """Create entry from dictionary."""
        snapshot = data.get("snapshot")
        return cls(
            version=str(data.get("version") or ""),
            date=str(_as_timestamp(data.get("date") or "")),
            author=str(data.get("author") or "unknown"),
            changes=str(data.get("changes") or ""),
            snapshot=_as_timestamp(snapshot) if isinstance(snapshot, dict) else None,
        )


@dataclass
class RuleExamples:
    """Good and bad code examples illustrating a rule."""

    good: List[str] = field(default_factory=list)
    bad: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"good": list(self.good), "bad": list(self.bad)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RuleExamples":
        return cls(good=list(data.get("good") or []), bad=list(data.get("bad") or []))


@dataclass
class RuleMetadata:
    """
    Version metadata carried by a rule.

    The changelog is ordered newest first. Keys other than the known ones are
    kept in ``extra`` and written back unchanged.
    """

    version: Optional[str] = None
    status: Optional[RuleStatus] = None
    author: Optional[str] = None
    changelog: List[ChangelogEntry] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert metadata to dictionary, omitting absent values."""
        data: Dict[str, Any] = copy.deepcopy(self.extra)
        if self.version is not None:
            data["version"] = self.version
        if self.status is not None:
            data["status"] = self.status.value
        if self.author is not None:
            data["author"] = self.author
        data["changelog"] = [entry.to_dict() for entry in self.changelog]
        return data

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], file: Optional[str] = None
    ) -> "RuleMetadata":
        """Create metadata from dictionary."""
        _require_type(data, "changelog", list, "list", file)
        status = data.get("status")
        version = data.get("version")
        author = data.get("author")
        return cls(
            version=str(version) if version is not None else None,
            status=_parse_enum(RuleStatus, "metadata.status", status, file)
            if status is not None
            else None,
            author=str(author) if author is not None else None,
            changelog=[
                ChangelogEntry.from_dict(entry)
                for entry in data.get("changelog") or []
                if isinstance(entry, dict)
            ],
            extra={
                k: _as_timestamp(copy.deepcopy(v))
                for k, v in data.items()
                if k not in ("version", "status", "author", "changelog")
            },
        )


@dataclass
class Rule:
    """
    A single coding-guideline record.

    Attributes:
        id: Stable identifier, never changes
        name: Short rule name
        description: What the rule asks for
        category: Grouping, e.g. "naming" or "security"
        tags: Ordered keywords
        severity: How violations are reported
        created: Creation timestamp (ISO-8601)
        updated: Last update timestamp (ISO-8601)
        examples: Optional good/bad examples
        metadata: Optional version metadata
        extra: Any other document keys, preserved as-is
    """

    id: str
    name: str = ""
    description: str = ""
    category: str = ""
    tags: List[str] = field(default_factory=list)
    severity: Severity = Severity.INFO
    created: str = ""
    updated: str = ""
    examples: Optional[RuleExamples] = None
    metadata: Optional[RuleMetadata] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def version(self) -> Optional[str]:
        """Current version, if versioning metadata is present."""
        return self.metadata.version if self.metadata else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert rule to dictionary for serialization."""
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "tags": list(self.tags),
            "severity": self.severity.value,
            "created": self.created,
            "updated": self.updated,
        }
        if self.examples is not None:
            data["examples"] = self.examples.to_dict()
        if self.metadata is not None:
            data["metadata"] = self.metadata.to_dict()
        for key, value in self.extra.items():
            data[key] = copy.deepcopy(value)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], file: Optional[str] = None) -> "Rule":
        """
        Create rule from dictionary.

        Args:
            data: Rule document
            file: Source path, used in error messages

        Raises:
            ValidationError: If ``id`` is missing or a field is malformed
        """
        if not data.get("id"):
            raise ValidationError.missing_required("id", file)
        for key in ("name", "description", "category"):
            _require_type(data, key, str, "string", file)
        _require_type(data, "tags", list, "list of strings", file)
        _require_type(data, "examples", dict, "mapping", file)
        _require_type(data, "metadata", dict, "mapping", file)

        tags = data.get("tags") or []
        if not all(isinstance(tag, str) for tag in tags):
            raise ValidationError.invalid_type("tags", "list of strings", repr(tags), file)

        examples = data.get("examples")
        metadata = data.get("metadata")
        return cls(
            id=str(data["id"]),
            name=data.get("name") or "",
            description=data.get("description") or "",
            category=data.get("category") or "",
            tags=list(tags),
            severity=_parse_enum(Severity, "severity", data.get("severity") or "info", file),
            created=str(_as_timestamp(data.get("created") or "")),
            updated=str(_as_timestamp(data.get("updated") or "")),
            examples=RuleExamples.from_dict(examples) if examples is not None else None,
            metadata=RuleMetadata.from_dict(metadata, file)
            if metadata is not None
            else None,
            extra={
                k: _as_timestamp(copy.deepcopy(v))
                for k, v in data.items()
                if k not in CORE_FIELDS
            },
        )

    @classmethod
    def from_yaml(cls, path: Path) -> "Rule":
        """
        Load a rule from a YAML document.

        Raises:
            YAMLParseError: If the file is not valid YAML
            ValidationError: If the document is not a valid rule
        """
        content = Path(path).read_text(encoding="utf-8")
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise YAMLParseError.from_yaml_error(e, str(path), content) from e

        if not isinstance(data, dict):
            raise ValidationError.invalid_type(
                "(document)", "mapping", type(data).__name__, str(path)
            )
        return cls.from_dict(data, file=str(path))

    def to_yaml(self, path: Path) -> None:
        """Write the rule to a YAML document."""
        Path(path).write_text(dump_yaml(self.to_dict()), encoding="utf-8")


def dump_yaml(data: Any) -> str:
    """Serialize plain data as block-style YAML, preserving key order."""
    return yaml.safe_dump(
        data, sort_keys=False, allow_unicode=True, default_flow_style=False
    )


def create_snapshot(rule: Rule) -> Dict[str, Any]:
    """
    Capture a rule's state for the history store.

    The snapshot holds every rule field except the full metadata, which is
    reduced to version, status and author. The changelog is never embedded,
    so history entries do not nest earlier history.

    Args:
        rule: Rule to capture

    Returns:
        Plain dictionary, independent of ``rule``
    """
    data = rule.to_dict()
    metadata = data.pop("metadata", None)
    if metadata is not None:
        data["metadata"] = {
            key: metadata[key] for key in SNAPSHOT_METADATA_FIELDS if key in metadata
        }
    return data
