"""
Name Scanner - Locates free occurrences of a column name in script text.

This is not a tokenizer. It approximates "is this occurrence a free
identifier" with two heuristics:
- Occurrences that start inside a single- or double-quoted run are skipped.
  Quote tracking is a plain toggle without escape handling, so an escaped
  quote inside a string ends the string.
- An occurrence is free only when the characters around it are not
  identifier characters (``[A-Za-z0-9_.]``), which keeps a column ``E``
  from matching inside ``TRUE``.
"""

from typing import List, Optional

QUOTE_CHARS = ("'", '"')
WHITESPACE_CHARS = (" ", "\t")


def is_identifier_char(char: str) -> bool:
    """Check if a character can be part of a script identifier."""
    return char.isascii() and (char.isalnum() or char in "._")


def quoted_positions(text: str) -> List[bool]:
    """
    Flag every offset of text that lies inside a quoted run.

    The flag at an offset reflects the quote state before the character
    there is read, so an opening quote is itself unflagged.
    """
    flags = []
    in_string = False
    delimiter = ""

    for char in text:
        flags.append(in_string)
        if char in QUOTE_CHARS:
            if not in_string:
                delimiter = char
                in_string = True
            elif char == delimiter:
                in_string = False

    return flags


def find_occurrences(text: str, name: str, quoted: Optional[List[bool]] = None) -> List[int]:
    """
    Find every start offset of name in text that is outside quotes.

    Args:
        text: The script text to search
        name: The literal name to look for
        quoted: Result of :func:`quoted_positions` for text, when the
            caller searches the same text for many names

    Returns:
        Ascending list of start offsets
    """
    positions = []
    if not name:
        return positions

    if name[0] in QUOTE_CHARS:
        return _find_quote_led_occurrences(text, name)

    if quoted is None:
        quoted = quoted_positions(text)

    pos = text.find(name)
    while pos != -1:
        if not quoted[pos]:
            positions.append(pos)
        pos = text.find(name, pos + 1)

    return positions


def _find_quote_led_occurrences(text: str, name: str) -> List[int]:
    # A match consumes its leading quote without toggling the quote state
    positions = []
    in_string = False
    delimiter = ""

    for pos, char in enumerate(text):
        if not in_string and text.startswith(name, pos):
            positions.append(pos)
        elif char in QUOTE_CHARS:
            if not in_string:
                delimiter = char
                in_string = True
            elif char == delimiter:
                in_string = False

    return positions


def has_free_start(text: str, pos: int) -> bool:
    """True if the character before pos (if any) is not an identifier character."""
    return pos == 0 or not is_identifier_char(text[pos - 1])


def has_free_prefix(text: str, pos: int, prefix: str) -> bool:
    """
    Check that ``prefix`` sits directly before pos and is itself free.

    An empty prefix never counts as present.

    Args:
        text: The script text
        pos: Start offset of the matched name
        prefix: The mandatory prefix, e.g. ``data.``

    Returns:
        True if the prefix is there and nothing identifier-like precedes it
    """
    if not prefix:
        return False
    prefix_start = pos - len(prefix)
    if prefix_start < 0:
        return False
    if text[prefix_start:pos] != prefix:
        return False
    return has_free_start(text, prefix_start)


def has_free_end(text: str, end: int, skip_calls: bool = False) -> bool:
    """
    Check that the match ending at ``end`` is not glued to a longer word.

    A name followed by ``(``, directly or after spaces and tabs, still
    counts as free: a column may shadow a function or keyword name. With
    ``skip_calls`` such call-position matches are rejected instead.

    Args:
        text: The script text
        end: Offset just past the matched name
        skip_calls: Reject matches that are followed by a call parenthesis

    Returns:
        True if the end of the match is free
    """
    if end >= len(text):
        return True
    if is_identifier_char(text[end]):
        return False
    if not skip_calls:
        return True

    for char in text[end:]:
        if char == "(":
            return False
        if char not in WHITESPACE_CHARS:
            break
    return True


def is_free_occurrence(
    text: str,
    pos: int,
    name_length: int,
    mandatory_prefix: str = "",
    skip_calls: bool = False,
) -> bool:
    """
    Decide whether an occurrence may be replaced.

    Args:
        text: The script text
        pos: Start offset of the occurrence
        name_length: Length of the matched name
        mandatory_prefix: When non-empty, the occurrence must be directly
            preceded by this prefix
        skip_calls: Passed on to :func:`has_free_end`

    Returns:
        True if the occurrence is a free identifier match
    """
    if mandatory_prefix:
        if not has_free_prefix(text, pos, mandatory_prefix):
            return False
    elif not has_free_start(text, pos):
        return False

    return has_free_end(text, pos + name_length, skip_calls)
