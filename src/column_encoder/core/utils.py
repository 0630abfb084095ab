"""
Utility functions for the Column Encoder.

This module provides helper functions for:
- Script identifier validation
- HTML escaping of decoded names
- Longest-first ordering of name lists
"""

import html
import re
from typing import Iterable, List

from column_encoder.core.reserved_words import is_dot_dot_name, is_reserved_word
from column_encoder.exceptions import InvalidIdentifierError

# Syntactically valid script name: a letter, or a dot not followed by a
# digit, then letters, digits, dots and underscores
IDENTIFIER_PATTERN = re.compile(r"^(?:[A-Za-z]|\.(?![0-9]))[A-Za-z0-9._]*$")

# Characters that may appear inside an identifier
IDENTIFIER_CHARS_PATTERN = re.compile(r"^[A-Za-z0-9._]*$")


def validate_identifier(name: str, raise_on_error: bool = True) -> tuple[bool, str]:
    """Validate that a name is a syntactically valid script identifier.

    Identifiers must:
    - Be non-empty
    - Start with a letter, or a dot that is not followed by a digit
    - Contain only letters, digits, dots and underscores
    - Not be a reserved word

    Args:
        name: The identifier to validate
        raise_on_error: If True, raise exception on invalid; otherwise return tuple

    Returns:
        Tuple of (is_valid, error_message)

    Raises:
        InvalidIdentifierError: If name violates the rules
    """
    error = ""

    if not name:
        error = "identifier is empty"
    elif is_reserved_word(name) or is_dot_dot_name(name):
        error = "is a reserved word"
    elif not IDENTIFIER_PATTERN.match(name):
        for i, char in enumerate(name):
            if not (char.isascii() and (char.isalnum() or char in "._")):
                error = f"contains invalid character '{char}' at position {i}"
                break
        else:
            error = "must start with a letter or a dot not followed by a digit"

    if error and raise_on_error:
        raise InvalidIdentifierError(name, error)
    return not error, error


def has_only_identifier_chars(text: str) -> bool:
    """Check that text could be glued onto an identifier without breaking it."""
    return bool(IDENTIFIER_CHARS_PATTERN.match(text))


def escape_html(text: str, escape_square_brackets: bool = True) -> str:
    """Escape HTML special characters in a decoded name.

    Square brackets are escaped as well by default, the rendering layer
    treats them as markup.

    Args:
        text: Text to escape
        escape_square_brackets: Also replace ``[`` and ``]``

    Returns:
        Escaped text
    """
    escaped = html.escape(text, quote=True)
    if escape_square_brackets:
        escaped = escaped.replace("[", "&#91;").replace("]", "&#93;")
    return escaped


def sort_longest_first(names: Iterable[str]) -> List[str]:
    """Sort names descending by length.

    Replacement must try longer names before shorter ones, otherwise a
    short name bites a chunk out of a longer name that contains it.
    The sort is stable, so equally long names keep their order.
    """
    return sorted(names, key=len, reverse=True)
