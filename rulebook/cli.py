"""
CLI Interface for rule versioning.

This module provides a Click-based command-line interface over the
version manager.

Commands:
- init: Initialize version metadata on a rule file
- bump: Record a new patch version of a rule file
- history: Show a rule's recorded history
- diff: Show the differences between two recorded versions
- rollback: Restore a rule from a recorded version
- compare: Compare two version strings
"""

import sys
from pathlib import Path
from typing import NoReturn, Optional

import click

from rulebook import __version__
from rulebook.config import config
from rulebook.errors import RulebookError, format_error
from rulebook.logging import initialize_logging
from rulebook.versioning import (
    Rule,
    VersionManager,
    compare_versions,
    ensure_valid_version,
    format_diff,
    initialize_versioning,
)
from rulebook.versioning.rule import dump_yaml


def _manager(ctx: click.Context) -> VersionManager:
    return VersionManager(base_path=Path(ctx.obj["base_path"]))


def _fail(error: RulebookError) -> NoReturn:
    click.echo(format_error(error), err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--base-path",
    type=click.Path(file_okay=False),
    default=config.history.base_path,
    show_default=True,
    help="Project root containing the rules/ directory",
)
@click.option(
    "--log-level",
    type=click.Choice(
        ["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        case_sensitive=False,
    ),
    default=config.logging.level,
    help="Logging level",
)
@click.pass_context
def cli(ctx: click.Context, base_path: str, log_level: str) -> None:
    """Rulebook version history.

    Record versions of rule documents, inspect their history, diff two
    versions and roll a rule back.
    """
    initialize_logging(config.logging, level=log_level)
    ctx.ensure_object(dict)
    ctx.obj["base_path"] = base_path


@cli.command()
@click.argument("rule_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--author", default=None, help="Author of the initial version")
def init(rule_file: str, author: Optional[str]) -> None:
    """Initialize version metadata on RULE_FILE (version 1.0.0, draft)."""
    try:
        rule = Rule.from_yaml(Path(rule_file))
    except RulebookError as e:
        _fail(e)

    initialized = initialize_versioning(rule, author)
    initialized.to_yaml(Path(rule_file))
    click.echo(f"Initialized {initialized.id} at version {initialized.version}")


@cli.command()
@click.argument("rule_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--changes", "-m", required=True, help="Description of the change")
@click.option("--author", default="unknown", show_default=True, help="Author of the change")
@click.pass_context
def bump(ctx: click.Context, rule_file: str, changes: str, author: str) -> None:
    """Record the current state of RULE_FILE and advance its patch version."""
    try:
        rule = Rule.from_yaml(Path(rule_file))
        updated = _manager(ctx).create_version(rule, changes, author)
    except RulebookError as e:
        _fail(e)

    updated.to_yaml(Path(rule_file))
    click.echo(f"{updated.id}: {rule.version or '0.0.0'} -> {updated.version}")


@cli.command()
@click.argument("rule_id")
@click.option(
    "--limit", "-n", type=click.IntRange(min=0), default=None, help="Show at most N entries"
)
@click.pass_context
def history(ctx: click.Context, rule_id: str, limit: Optional[int]) -> None:
    """Show the recorded history of RULE_ID, newest first."""
    try:
        entries = _manager(ctx).get_history(rule_id)
    except RulebookError as e:
        _fail(e)

    if not entries:
        click.echo(f"No history for {rule_id}")
        return

    if limit is not None:
        entries = entries[:limit]

    for entry in entries:
        marker = " [snapshot]" if entry.snapshot is not None else ""
        click.echo(
            f"{entry.version}  {entry.date}  {entry.author}  {entry.changes}{marker}"
        )


@cli.command()
@click.argument("rule_id")
@click.argument("from_version")
@click.argument("to_version")
@click.pass_context
def diff(ctx: click.Context, rule_id: str, from_version: str, to_version: str) -> None:
    """Show the differences of RULE_ID between FROM_VERSION and TO_VERSION."""
    try:
        ensure_valid_version(from_version)
        ensure_valid_version(to_version)
        rule_diff = _manager(ctx).diff(rule_id, from_version, to_version)
    except RulebookError as e:
        _fail(e)

    click.echo(format_diff(rule_diff))


@cli.command()
@click.argument("rule_id")
@click.argument("version")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the rolled-back rule here instead of printing it",
)
@click.pass_context
def rollback(ctx: click.Context, rule_id: str, version: str, output: Optional[str]) -> None:
    """Restore RULE_ID from recorded VERSION."""
    try:
        ensure_valid_version(version)
        rule = _manager(ctx).rollback(rule_id, version)
    except RulebookError as e:
        _fail(e)

    if output:
        rule.to_yaml(Path(output))
        click.echo(f"Rolled back {rule_id} to {version} as {rule.version}: {output}")
    else:
        click.echo(dump_yaml(rule.to_dict()), nl=False)


@cli.command()
@click.argument("a")
@click.argument("b")
def compare(a: str, b: str) -> None:
    """Compare versions A and B (prints -1, 0 or 1)."""
    click.echo(str(compare_versions(a, b)))


def main() -> None:
    """Entry point for the ``rulebook`` console script."""
    cli(obj={})


if __name__ == "__main__":
    main()
