"""
Version manager for rule documents.

Creates new versions, reads history, diffs two recorded versions and rolls
a rule back to an earlier snapshot.
"""

import copy
from pathlib import Path
from typing import List, Optional, Union

from rulebook.config import Config, config as default_config
from rulebook.errors import VersionError
from rulebook.logging import get_rulebook_logger
from .diff import RuleDiff, compare_rules
from .rule import (
    ChangelogEntry,
    Rule,
    RuleMetadata,
    RuleStatus,
    create_snapshot,
    utc_now,
)
from .semver import (
    INITIAL_VERSION,
    ZERO_VERSION,
    VersionBump,
    compare_versions,
    increment_version,
    validate_version,
)
from .storage import HistoryStore

ROLLBACK_AUTHOR = "system"

logger = get_rulebook_logger("versioning")


class VersionManager:
    """
    Single-writer version ledger for rules.

    Provides operations for:
    - Creating a new patch version of a rule
    - Reading a rule's history
    - Computing the diff between two recorded versions
    - Rolling back to a recorded version (always advancing the version)
    """

    def __init__(
        self,
        base_path: Optional[Path] = None,
        store: Optional[HistoryStore] = None,
        config: Optional[Config] = None,
    ):
        """
        Initialize the version manager.

        Args:
            base_path: Project root containing rules/ (default from config)
            store: History store to use instead of the file store at base_path
            config: Configuration (default: global config)
        """
        config = config or default_config
        if store is None:
            store = HistoryStore(
                base_path=Path(base_path or config.history.base_path),
                history_dir=config.history.history_dir,
                max_entries=config.history.max_entries,
            )
        self.store = store

    def create_version(self, rule: Rule, changes: str, author: str) -> Rule:
        """
        Record the rule's current state and return it at the next patch version.

        Args:
            rule: Rule before the edit
            changes: Description of the change
            author: Who made the change

        Returns:
            Copy of ``rule`` with a new version and a prepended changelog entry

        Example:
            >>> manager = VersionManager(Path("."))
            >>> updated = manager.create_version(rule, "Clarify wording", "alice")
        """
        metadata = rule.metadata or RuleMetadata()
        new_version = increment_version(metadata.version or ZERO_VERSION, VersionBump.PATCH)

        self.store.save_snapshot(rule)

        now = utc_now()
        entry = ChangelogEntry(
            version=new_version,
            date=now,
            author=author,
            changes=changes,
            snapshot=create_snapshot(rule),
        )

        updated = copy.deepcopy(rule)
        updated.updated = now
        updated.metadata = RuleMetadata(
            version=new_version,
            status=metadata.status or RuleStatus.ACTIVE,
            author=metadata.author,
            changelog=[entry, *metadata.changelog],
            extra=copy.deepcopy(metadata.extra),
        )

        logger.info(
            "Created version {version} of {rule_id}",
            rule_id=rule.id,
            version=new_version,
            author=author,
        )
        return updated

    def get_history(self, rule_id: str) -> List[ChangelogEntry]:
        """
        Get a rule's history, newest first.

        Returns:
            Entries, or an empty list if none are recorded
        """
        return self.store.get_history(rule_id)

    def diff(self, rule_id: str, from_version: str, to_version: str) -> RuleDiff:
        """
        Compute the diff between two recorded versions.

        Args:
            rule_id: Rule identifier
            from_version: Older version
            to_version: Newer version

        Returns:
            RuleDiff with field-level changes

        Raises:
            VersionError: If either version is not recorded with a snapshot
        """
        history = self.get_history(rule_id)
        from_entry = _find_entry(history, from_version)
        to_entry = _find_entry(history, to_version)

        if from_entry is None or from_entry.snapshot is None:
            raise VersionError.not_found(rule_id, from_version)
        if to_entry is None or to_entry.snapshot is None:
            raise VersionError.not_found(rule_id, to_version)

        return RuleDiff(
            rule_id=rule_id,
            from_version=from_version,
            to_version=to_version,
            changes=compare_rules(from_entry.snapshot, to_entry.snapshot),
        )

    def rollback(self, rule_id: str, target_version: str) -> Rule:
        """
        Restore a rule's content from a recorded version.

        History is not rewritten: the returned rule gets a new version one
        patch beyond the latest recorded version, and its changelog records
        the rollback in front of the full prior history.

        Args:
            rule_id: Rule identifier
            target_version: Version to restore

        Returns:
            Rolled-back rule

        Raises:
            VersionError: If the target version is not recorded with a snapshot
        """
        history = self.get_history(rule_id)
        target = _find_entry(history, target_version)
        if target is None or target.snapshot is None:
            raise VersionError.not_found(rule_id, target_version)

        new_version = increment_version(history[0].version or ZERO_VERSION, VersionBump.PATCH)
        now = utc_now()

        data = copy.deepcopy(target.snapshot)
        snapshot_metadata = data.pop("metadata", None) or {}
        data.update(
            id=rule_id,
            name=data.get("name") or "",
            description=data.get("description") or "",
            category=data.get("category") or "",
            tags=data.get("tags") or [],
            severity=data.get("severity") or "info",
            created=data.get("created") or now,
            updated=now,
        )

        rule = Rule.from_dict(data)
        rule.metadata = RuleMetadata.from_dict(snapshot_metadata)
        rule.metadata.version = new_version
        rule.metadata.status = RuleStatus.ACTIVE
        rule.metadata.changelog = [
            ChangelogEntry(
                version=new_version,
                date=now,
                author=ROLLBACK_AUTHOR,
                changes=f"Rolled back to version {target_version}",
            ),
            *history,
        ]

        logger.warning(
            "Rolled back {rule_id} to {target_version}",
            rule_id=rule_id,
            target_version=target_version,
            new_version=new_version,
        )
        return rule

    def validate_version(self, version: str) -> bool:
        """Check that a version matches major.minor.patch."""
        return validate_version(version)

    def increment_version(
        self, version: str, bump: Union[VersionBump, str] = VersionBump.PATCH
    ) -> str:
        """Increment a version; malformed input becomes 1.0.0."""
        return increment_version(version, bump)

    def compare_versions(self, a: str, b: str) -> int:
        """Compare two versions (-1, 0, 1); malformed input counts as 0.0.0."""
        return compare_versions(a, b)


def _find_entry(history: List[ChangelogEntry], version: str) -> Optional[ChangelogEntry]:
    # First match in newest-first order; versions are not guaranteed unique
    return next((entry for entry in history if entry.version == version), None)


def initialize_versioning(rule: Rule, author: Optional[str] = None) -> Rule:
    """
    Give a fresh rule its initial version metadata.

    Args:
        rule: Rule to initialize
        author: Author of the initial version

    Returns:
        Copy of ``rule`` at version 1.0.0, status draft, with one changelog entry
    """
    initialized = copy.deepcopy(rule)
    initialized.metadata = RuleMetadata(
        version=INITIAL_VERSION,
        status=RuleStatus.DRAFT,
        author=author,
        changelog=[
            ChangelogEntry(
                version=INITIAL_VERSION,
                date=utc_now(),
                author=author or "unknown",
                changes="Initial version",
            )
        ],
    )
    return initialized
