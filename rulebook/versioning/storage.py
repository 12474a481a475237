"""
Storage backend for rule history.

Handles persistence of per-rule changelog entries to disk.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from rulebook.errors import ValidationError
from rulebook.logging import get_rulebook_logger
from .rule import ChangelogEntry, Rule, create_snapshot, dump_yaml, utc_now

MAX_HISTORY_ENTRIES = 50
HISTORY_DIR = ".history"
SNAPSHOT_CHANGES = "Snapshot before update"
PATH_SEPARATORS = ("/", "\\")

logger = get_rulebook_logger("history")


def bounded_prepend(
    entries: Sequence[ChangelogEntry], entry: ChangelogEntry, capacity: int
) -> List[ChangelogEntry]:
    """
    Put ``entry`` in front of ``entries`` and drop the oldest beyond ``capacity``.

    Args:
        entries: Existing entries, newest first (not modified)
        entry: New entry
        capacity: Maximum number of entries to keep

    Returns:
        New list of at most ``capacity`` entries
    """
    return [entry, *entries][:capacity]


class HistoryStore:
    """
    File-based history storage.

    Stores one YAML document per rule in a directory structure:
    - {base_path}/
      - rules/
        - .history/
          - {rule_id}.yaml  (entries: [...], newest first)
    """

    def __init__(
        self,
        base_path: Path = Path("."),
        history_dir: str = HISTORY_DIR,
        max_entries: int = MAX_HISTORY_ENTRIES,
    ):
        """
        Initialize storage.

        Args:
            base_path: Project root containing the rules directory
            history_dir: Name of the history directory inside rules/
            max_entries: Maximum number of entries retained per rule
        """
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.base_path = Path(base_path)
        self.history_path = self.base_path / "rules" / history_dir
        self.max_entries = max_entries

    def history_file(self, rule_id: str) -> Path:
        """
        Path of the history document for a rule.

        Raises:
            ValidationError: If the rule id contains a path separator
        """
        if any(sep in rule_id for sep in PATH_SEPARATORS):
            raise ValidationError.invalid_value(
                "id", "an identifier without path separators", rule_id
            )
        return self.history_path / f"{rule_id}.yaml"

    def save_snapshot(self, rule: Rule) -> ChangelogEntry:
        """
        Record the rule's current state in its history.

        Args:
            rule: Rule whose current state is captured

        Returns:
            The entry that was written
        """
        metadata = rule.metadata
        entry = ChangelogEntry(
            version=(metadata.version if metadata else None) or "0.0.0",
            date=utc_now(),
            author=(metadata.author if metadata else None) or "unknown",
            changes=SNAPSHOT_CHANGES,
            snapshot=create_snapshot(rule),
        )

        existing = self.get_history(rule.id)
        entries = bounded_prepend(existing, entry, self.max_entries)
        dropped = len(existing) + 1 - len(entries)
        if dropped > 0:
            logger.debug(
                "Trimmed {dropped} oldest history entries of {rule_id}",
                rule_id=rule.id,
                dropped=dropped,
            )

        self._write_entries(rule.id, entries)
        logger.debug(
            "Saved snapshot of {rule_id} at version {version}",
            rule_id=rule.id,
            version=entry.version,
            entries=len(entries),
        )
        return entry

    def get_history(self, rule_id: str) -> List[ChangelogEntry]:
        """
        Load a rule's history.

        A missing, unreadable or corrupt history document is treated as an
        empty history. Corruption is logged, not raised.

        Args:
            rule_id: Rule identifier

        Returns:
            Entries, newest first
        """
        history_file = self.history_file(rule_id)
        if not history_file.exists():
            return []

        document = self._read_document(history_file)
        if document is None:
            return []

        raw_entries = document.get("entries") or []
        if not isinstance(raw_entries, list):
            logger.warning(
                "Ignoring malformed history for {rule_id}: entries is not a list",
                rule_id=rule_id,
            )
            return []

        return [
            ChangelogEntry.from_dict(raw) for raw in raw_entries if isinstance(raw, dict)
        ]

    def list_rule_ids(self) -> List[str]:
        """
        List rules that have a history document.

        Returns:
            Sorted rule identifiers
        """
        if not self.history_path.exists():
            return []
        return sorted(f.stem for f in self.history_path.glob("*.yaml"))

    def _read_document(self, path: Path) -> Optional[Dict[str, Any]]:
        """
        Read a history document.

        Returns:
            Parsed mapping, or None if it cannot be read
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                document = yaml.safe_load(f)
        except (yaml.YAMLError, OSError, UnicodeDecodeError) as e:
            logger.warning("Treating unreadable history {} as empty: {}", path, e)
            return None

        if document is None:
            return {}
        if not isinstance(document, dict):
            logger.warning("Treating malformed history {} as empty", path)
            return None
        return document

    def _write_entries(self, rule_id: str, entries: List[ChangelogEntry]) -> None:
        """
        Write a history document atomically using temp file + rename.

        Args:
            rule_id: Rule identifier
            entries: Entries to persist, newest first
        """
        self.history_path.mkdir(parents=True, exist_ok=True)
        path = self.history_file(rule_id)
        temp_path = path.with_suffix(".tmp")
        content = dump_yaml({"entries": [entry.to_dict() for entry in entries]})
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                f.write(content)
            temp_path.replace(path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink()
            raise
