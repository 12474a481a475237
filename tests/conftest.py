"""Shared fixtures for rulebook tests."""

from pathlib import Path

import pytest
from loguru import logger

from rulebook.versioning import (
    HistoryStore,
    Rule,
    RuleMetadata,
    RuleStatus,
    Severity,
    VersionManager,
)


def make_rule(
    rule_id: str = "r1",
    version: str = "1.0.0",
    tags: list = None,
    **overrides,
) -> Rule:
    """Build a versioned rule with sensible defaults."""
    fields = dict(
        id=rule_id,
        name="Use snake_case",
        description="Function names use snake_case.",
        category="naming",
        tags=list(tags) if tags is not None else ["a"],
        severity=Severity.WARNING,
        created="2024-01-01T00:00:00.000Z",
        updated="2024-01-01T00:00:00.000Z",
        metadata=RuleMetadata(
            version=version, status=RuleStatus.ACTIVE, author="alice"
        ),
    )
    fields.update(overrides)
    return Rule(**fields)


@pytest.fixture
def rule_factory():
    """Factory building rules via make_rule."""
    return make_rule


@pytest.fixture
def rule() -> Rule:
    """Rule r1 at version 1.0.0 with tags ["a"]."""
    return make_rule()


@pytest.fixture
def store(tmp_path: Path) -> HistoryStore:
    """History store rooted in a temporary directory."""
    return HistoryStore(base_path=tmp_path)


@pytest.fixture
def manager(store: HistoryStore) -> VersionManager:
    """Version manager backed by the temporary history store."""
    return VersionManager(store=store)


@pytest.fixture(autouse=True)
def _reset_loguru():
    """Drop sinks added during a test (the CLI binds them to captured streams)."""
    yield
    logger.remove()
