"""
Structured error classes for the rulebook.

Every error carries a stable code and an optional context (file location,
snippet, suggestion) so the CLI can render a helpful message.
"""

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional


@dataclass
class ErrorContext:
    """Location and hint information attached to a RulebookError."""

    file: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None
    snippet: Optional[str] = None
    suggestion: Optional[str] = None
    docs: Optional[str] = None


class RulebookError(Exception):
    """Base exception for all rulebook errors."""

    def __init__(
        self,
        code: str,
        message: str,
        context: Optional[ErrorContext] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def format(self) -> str:
        """
        Render the error as a multi-line, human readable string.

        Returns:
            Formatted error message
        """
        lines = [f"[{self.code}] {self.message}"]

        if self.context.file:
            location = self.context.file
            if self.context.line:
                location = f"{location}:{self.context.line}"
                if self.context.column:
                    location = f"{location}:{self.context.column}"
            lines.append(f"  Location: {location}")

        if self.context.snippet:
            lines.append("")
            lines.append("  Problem:")
            for snippet_line in self.context.snippet.split("\n"):
                lines.append(f"    {snippet_line}")

        if self.context.suggestion:
            lines.append("")
            lines.append(f"  Suggestion: {self.context.suggestion}")

        if self.context.docs:
            lines.append(f"  Docs: {self.context.docs}")

        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "name": type(self).__name__,
            "code": self.code,
            "message": self.message,
            "context": {k: v for k, v in asdict(self.context).items() if v is not None},
            "timestamp": self.timestamp,
        }


class YAMLParseError(RulebookError):
    """Raised when a rule document is not valid YAML."""

    def __init__(
        self,
        message: str,
        file: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        snippet: Optional[str] = None,
    ):
        super().__init__(
            "YAML_PARSE_ERROR",
            message,
            ErrorContext(
                file=file,
                line=line,
                column=column,
                snippet=snippet,
                suggestion="Check the YAML syntax, especially indentation and the space after colons.",
                docs="https://yaml.org/spec/1.2/spec.html",
            ),
        )

    @classmethod
    def from_yaml_error(
        cls, error: Exception, file: str, content: Optional[str] = None
    ) -> "YAMLParseError":
        """
        Build a YAMLParseError from a PyYAML exception.

        Args:
            error: Exception raised by yaml.safe_load
            file: Path of the document being parsed
            content: Raw document text, used to extract a snippet

        Returns:
            YAMLParseError with line/column information when available
        """
        mark = getattr(error, "problem_mark", None)
        line = mark.line + 1 if mark is not None else None
        column = mark.column + 1 if mark is not None else None

        snippet = None
        if content and line:
            lines = content.split("\n")
            start = max(0, line - 2)
            end = min(len(lines), line + 2)
            snippet_lines = []
            for offset, text in enumerate(lines[start:end]):
                line_no = start + offset + 1
                marker = "> " if line_no == line else "  "
                snippet_lines.append(f"{marker}{line_no:>4} | {text}")
            snippet = "\n".join(snippet_lines)

        return cls(str(error), file, line=line, column=column, snippet=snippet)


class ValidationError(RulebookError):
    """Raised when a rule document has missing or invalid fields."""

    def __init__(
        self,
        message: str,
        file: Optional[str] = None,
        field: Optional[str] = None,
        expected: Optional[str] = None,
        received: Optional[str] = None,
    ):
        if field:
            suggestion = f"Check the '{field}' field."
            if expected:
                suggestion += f" Expected: {expected}"
        else:
            suggestion = "Check the rule fields."

        super().__init__(
            "VALIDATION_ERROR",
            message,
            ErrorContext(file=file, suggestion=suggestion),
        )
        self.field = field
        self.expected = expected
        self.received = received

    @classmethod
    def missing_required(cls, field: str, file: Optional[str] = None) -> "ValidationError":
        """Required field is absent."""
        return cls(f"Missing required field: {field}", file=file, field=field)

    @classmethod
    def invalid_type(
        cls, field: str, expected: str, received: str, file: Optional[str] = None
    ) -> "ValidationError":
        """Field has the wrong type."""
        return cls(
            f"Field '{field}' has an invalid type",
            file=file,
            field=field,
            expected=expected,
            received=received,
        )

    @classmethod
    def invalid_value(
        cls, field: str, expected: str, received: str, file: Optional[str] = None
    ) -> "ValidationError":
        """Field has a value outside the allowed set."""
        return cls(
            f"Field '{field}' has an invalid value",
            file=file,
            field=field,
            expected=expected,
            received=received,
        )


class VersionError(RulebookError):
    """Raised when a version cannot be found or is malformed at an input boundary."""

    def __init__(
        self,
        message: str,
        rule_id: Optional[str] = None,
        version: Optional[str] = None,
        file: Optional[str] = None,
    ):
        super().__init__(
            "VERSION_ERROR",
            message,
            ErrorContext(file=file, suggestion="Check the rule's version information."),
        )
        self.rule_id = rule_id
        self.version = version

    @classmethod
    def not_found(cls, rule_id: str, version: str) -> "VersionError":
        """Version is absent from the rule's history, or has no snapshot."""
        return cls(
            f"Version '{version}' of rule '{rule_id}' was not found",
            rule_id=rule_id,
            version=version,
        )

    @classmethod
    def invalid_format(cls, version: str) -> "VersionError":
        """Version string does not follow major.minor.patch."""
        return cls(
            f"Invalid version format: '{version}'. Use semver (e.g. 1.0.0)",
            version=version,
        )


def is_rulebook_error(error: object) -> bool:
    """Check whether an error is a RulebookError."""
    return isinstance(error, RulebookError)


def categorize_error(error: object) -> str:
    """
    Classify an error into a coarse category.

    Args:
        error: Any exception (or object)

    Returns:
        One of "yaml", "validation", "version", "rulebook", "unknown"
    """
    if isinstance(error, YAMLParseError):
        return "yaml"
    if isinstance(error, ValidationError):
        return "validation"
    if isinstance(error, VersionError):
        return "version"
    if isinstance(error, RulebookError):
        return "rulebook"
    return "unknown"


def format_error(error: object) -> str:
    """Convert an error to a user friendly message."""
    if isinstance(error, RulebookError):
        return error.format()
    if isinstance(error, Exception):
        return str(error)
    return repr(error)
