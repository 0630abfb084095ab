"""
Script Reserved Words - Keywords of the target script language (R).

Synthetic identifiers must never be one of these words. Column names that
happen to equal one (a column called ``if`` or ``TRUE``) are exactly why
the encoder exists: they get replaced by a synthetic identifier before the
script is evaluated.
"""

from typing import Set


RESERVED_WORDS: Set[str] = {
    # Control flow
    "if", "else", "repeat", "while", "function", "for", "in", "next",
    "break",

    # Constants
    "TRUE", "FALSE", "NULL", "Inf", "NaN", "NA", "NA_integer_", "NA_real_",
    "NA_character_", "NA_complex_",
}

_RESERVED_WORDS: frozenset = frozenset(RESERVED_WORDS)


def is_reserved_word(word: str) -> bool:
    """
    Check if a word is a reserved word of the script language.

    The check is case-sensitive: ``true`` is a valid identifier, ``TRUE``
    is not.

    Args:
        word: The word to check

    Returns:
        True if the word is reserved
    """
    return word in _RESERVED_WORDS


def is_dot_dot_name(word: str) -> bool:
    """Check for ``...`` and ``..1``-style names, also reserved in R."""
    if word == "...":
        return True
    return word.startswith("..") and word[2:].isdigit()
