"""
Tests for utility functions, reserved words and column types.
"""

import logging

import pytest

from column_encoder.core.column_types import (
    CONCRETE_TYPES,
    ColumnType,
    is_valid_type_name,
    qualified_name,
)
from column_encoder.core.reserved_words import is_dot_dot_name, is_reserved_word
from column_encoder.core.utils import (
    escape_html,
    has_only_identifier_chars,
    sort_longest_first,
    validate_identifier,
)
from column_encoder.exceptions import InvalidIdentifierError
from column_encoder.logging_config import get_logger, setup_logging


class TestValidateIdentifier:
    """Tests for validate_identifier."""

    @pytest.mark.parametrize("name", ["JaspColumn_0_Encoded", "x", ".hidden", "a.b_c9"])
    def test_valid(self, name):
        """Well-formed identifiers pass."""
        assert validate_identifier(name) == (True, "")

    @pytest.mark.parametrize("name,reason", [
        ("", "empty"),
        ("0abc", "must start"),
        ("_abc", "must start"),
        (".1x", "must start"),
        ("a b", "invalid character ' '"),
        ("TRUE", "reserved"),
        ("...", "reserved"),
        ("..2", "reserved"),
    ])
    def test_invalid(self, name, reason):
        """Malformed identifiers are rejected with a reason."""
        valid, error = validate_identifier(name, raise_on_error=False)
        assert not valid
        assert reason in error

    def test_raises(self):
        """By default invalid identifiers raise."""
        with pytest.raises(InvalidIdentifierError) as exc_info:
            validate_identifier("if")
        assert exc_info.value.identifier == "if"


class TestReservedWords:
    """Tests for reserved word checks."""

    def test_keywords(self):
        """Keywords and constants are reserved."""
        for word in ("if", "function", "TRUE", "NA_integer_", "Inf"):
            assert is_reserved_word(word)

    def test_case_sensitive(self):
        """Reserved words are case-sensitive."""
        assert not is_reserved_word("true")
        assert not is_reserved_word("If")

    def test_dot_dot_names(self):
        """... and ..N are reserved, other dotted names are not."""
        assert is_dot_dot_name("...")
        assert is_dot_dot_name("..1")
        assert not is_dot_dot_name("..a")
        assert not is_dot_dot_name(".x")


class TestHelpers:
    """Tests for small helpers."""

    def test_escape_html(self):
        """HTML specials and brackets are escaped."""
        assert escape_html("<a href='x'>[1] & \"2\"</a>") == (
            "&lt;a href=&#x27;x&#x27;&gt;&#91;1&#93; &amp; &quot;2&quot;&lt;/a&gt;"
        )

    def test_escape_html_without_brackets(self):
        """Brackets may be left alone."""
        assert escape_html("[x]", escape_square_brackets=False) == "[x]"

    def test_sort_longest_first_stable(self):
        """Longer names come first, ties keep their order."""
        assert sort_longest_first(["b", "abc", "a", "ab"]) == ["abc", "ab", "b", "a"]

    def test_has_only_identifier_chars(self):
        """Suffix characters must fit in an identifier."""
        assert has_only_identifier_chars("_Encoded")
        assert has_only_identifier_chars("")
        assert not has_only_identifier_chars("_En coded")


class TestColumnTypes:
    """Tests for ColumnType."""

    def test_from_string(self):
        """Known names parse, anything else is UNKNOWN."""
        assert ColumnType.from_string("scale") == ColumnType.SCALE
        assert ColumnType.from_string("Scale") == ColumnType.UNKNOWN
        assert ColumnType.from_string(None) == ColumnType.UNKNOWN
        assert ColumnType.from_string(ColumnType.NOMINAL) == ColumnType.NOMINAL

    def test_concrete_types_order(self):
        """Concrete types are scale, ordinal, nominal."""
        assert [t.value for t in CONCRETE_TYPES] == ["scale", "ordinal", "nominal"]

    def test_is_valid_type_name(self):
        """Type names are checked against the enum values."""
        assert is_valid_type_name("ordinal")
        assert is_valid_type_name("unknown")
        assert not is_valid_type_name("text")

    def test_qualified_name(self):
        """Qualified names append the type."""
        assert qualified_name("body mass", ColumnType.SCALE) == "body mass.scale"


class TestLogging:
    """Tests for logging setup."""

    def test_setup_logging_level(self):
        """setup_logging sets the package logger level."""
        logger = setup_logging("DEBUG")
        assert logger.level == logging.DEBUG
        assert not logger.propagate

    def test_get_logger_namespaced(self):
        """Module loggers live under the package logger."""
        assert get_logger("registry").name == "column_encoder.registry"
