"""
Unit tests for structured errors.
"""

import pytest
import yaml

from rulebook.errors import (
    RulebookError,
    ValidationError,
    VersionError,
    YAMLParseError,
    categorize_error,
    format_error,
    is_rulebook_error,
)


class TestRulebookError:
    """Tests for the base error."""

    def test_format_with_location(self) -> None:
        """Location, snippet and suggestion are rendered."""
        error = YAMLParseError("bad indent", "rules/r1.yaml", line=3, column=5, snippet="> 3 | x")
        text = error.format()

        assert text.startswith("[YAML_PARSE_ERROR] bad indent")
        assert "Location: rules/r1.yaml:3:5" in text
        assert "Problem:" in text
        assert "Suggestion:" in text

    def test_to_dict_omits_empty_context(self) -> None:
        """Serialized context only holds values that are set."""
        data = VersionError.not_found("r1", "1.0.0").to_dict()

        assert data["name"] == "VersionError"
        assert data["code"] == "VERSION_ERROR"
        assert "file" not in data["context"]
        assert "suggestion" in data["context"]

    def test_is_exception(self) -> None:
        """Errors can be raised and caught as RulebookError."""
        with pytest.raises(RulebookError):
            raise ValidationError.missing_required("id")


class TestYAMLParseError:
    """Tests for YAMLParseError.from_yaml_error."""

    def test_location_and_snippet(self) -> None:
        """Line and column come from the PyYAML mark."""
        content = "id: r1\ntags: [a, b\nname: x\n"
        with pytest.raises(yaml.YAMLError) as exc_info:
            yaml.safe_load(content)

        error = YAMLParseError.from_yaml_error(exc_info.value, "r1.yaml", content)

        assert error.context.file == "r1.yaml"
        assert error.context.line is not None
        assert ">" in error.context.snippet

    def test_without_mark(self) -> None:
        """Errors without a mark have no location."""
        error = YAMLParseError.from_yaml_error(yaml.YAMLError("boom"), "r1.yaml")
        assert error.context.line is None
        assert error.context.snippet is None


class TestValidationError:
    """Tests for ValidationError factories."""

    def test_missing_required(self) -> None:
        error = ValidationError.missing_required("id", "r1.yaml")
        assert error.field == "id"
        assert error.context.file == "r1.yaml"
        assert "id" in error.message

    def test_invalid_type(self) -> None:
        error = ValidationError.invalid_type("tags", "list of strings", "str")
        assert error.expected == "list of strings"
        assert error.received == "str"
        assert "Expected: list of strings" in error.context.suggestion


class TestVersionError:
    """Tests for VersionError factories."""

    def test_not_found(self) -> None:
        error = VersionError.not_found("r1", "2.0.0")
        assert error.rule_id == "r1"
        assert error.version == "2.0.0"
        assert "2.0.0" in str(error)

    def test_invalid_format(self) -> None:
        error = VersionError.invalid_format("1.0")
        assert error.version == "1.0"
        assert error.rule_id is None


class TestHelpers:
    """Tests for the error helpers."""

    @pytest.mark.parametrize(
        "error,category",
        [
            (YAMLParseError("x", "f"), "yaml"),
            (ValidationError("x"), "validation"),
            (VersionError("x"), "version"),
            (RulebookError("OTHER", "x"), "rulebook"),
            (ValueError("x"), "unknown"),
        ],
    )
    def test_categorize_error(self, error: Exception, category: str) -> None:
        assert categorize_error(error) == category

    def test_is_rulebook_error(self) -> None:
        assert is_rulebook_error(VersionError("x"))
        assert not is_rulebook_error(ValueError("x"))

    def test_format_error(self) -> None:
        assert format_error(VersionError("missing")).startswith("[VERSION_ERROR] missing")
        assert format_error(ValueError("plain")) == "plain"
        assert format_error("text") == "'text'"
