"""
Substitution Engine - Replaces names in free text and document trees.

This module provides:
- replace_all: leftmost-first, longest-first substitution with cursor resume
- replace_all_strict: whole-text lookup, used for member keys
- encode_script_text: boundary- and quote-aware substitution in script
  source, optionally scoped by a mandatory prefix
- replace_in_document: applies either form to every string leaf of a
  JSON-shaped document, optionally renaming member keys

Every function expects ``ordered_names`` sorted longest-first (see
:func:`column_encoder.core.utils.sort_longest_first`). Ties between names
found at the same offset go to the one listed first, so a longer name wins
over a shorter name it contains.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Set, Tuple

from column_encoder.core.scanner import (
    QUOTE_CHARS,
    find_occurrences,
    is_free_occurrence,
    quoted_positions,
)


@dataclass
class ScriptEncoding:
    """Result of encoding one script text."""
    text: str
    names_found: Set[str] = field(default_factory=set)


@dataclass
class PrefixedScriptEncoding:
    """
    Result of encoding a script text under several prefix scopes.

    Attributes:
        text: The fully substituted text
        names_by_prefix: For every prefix tried (the empty prefix
            included), the original names substituted under that scope
    """
    text: str
    names_by_prefix: Dict[str, Set[str]] = field(default_factory=dict)

    def names_for(self, prefix: str) -> Set[str]:
        return self.names_by_prefix.get(prefix, set())


def replace_all(text: str, mapping: Mapping[str, str], ordered_names: Sequence[str]) -> str:
    """
    Replace every occurrence of the names in text, left to right.

    At each step the name whose next occurrence starts earliest is
    replaced, and scanning resumes just past the inserted replacement, so
    replaced text is never replaced again.

    Args:
        text: Text to transform
        mapping: Name to replacement
        ordered_names: Names to look for, longest first

    Returns:
        The transformed text
    """
    names = [name for name in ordered_names if name]
    cursor = 0

    while True:
        first_pos = -1
        replace_this = ""

        for name in names:
            pos = text.find(name, cursor)
            if pos != -1 and (first_pos == -1 or pos < first_pos):
                first_pos = pos
                replace_this = name

        if first_pos == -1:
            break

        replacement = mapping[replace_this]
        text = text[:first_pos] + replacement + text[first_pos + len(replace_this):]
        cursor = first_pos + len(replacement)

    return text


def replace_all_strict(text: str, mapping: Mapping[str, str]) -> str:
    """Return the mapped value if the whole text is a key, else the text."""
    return mapping.get(text, text)


def _occurrence_lists(text: str, names: Sequence[str]) -> List[List[int]]:
    quoted = quoted_positions(text)
    return [find_occurrences(text, name, quoted) for name in names]


def encode_script_text(
    text: str,
    mapping: Mapping[str, str],
    ordered_names: Sequence[str],
    mandatory_prefix: str = "",
    skip_calls: bool = False,
) -> ScriptEncoding:
    """
    Replace free occurrences of column names in script source.

    Occurrences inside quotes, occurrences glued to other identifier
    characters and, when ``mandatory_prefix`` is given, occurrences lacking
    that prefix are left alone.

    The text is scanned once per name up front. Identifiers never contain
    quotes, so later replacements only shift the remaining offsets; the
    scan is redone only after replacing a name that itself holds a quote.

    Args:
        text: Script source
        mapping: Original name to synthetic identifier
        ordered_names: Names to look for, longest first
        mandatory_prefix: Only replace names directly preceded by this
        skip_calls: Leave names in call position (``name(``) alone

    Returns:
        ScriptEncoding with the new text and the names that were replaced
    """
    names = [name for name in ordered_names if name]
    names_found: Set[str] = set()

    occurrences = _occurrence_lists(text, names)
    next_index = [0] * len(names)
    # cursor is in scanned offsets; shift maps them onto the current text
    cursor = 0
    shift = 0

    while True:
        first_pos = -1
        replace_index = -1

        for index, name in enumerate(names):
            positions = occurrences[index]
            i = next_index[index]
            while i < len(positions):
                pos = positions[i]
                if pos >= cursor and is_free_occurrence(
                    text, pos + shift, len(name), mandatory_prefix, skip_calls
                ):
                    break
                i += 1
            next_index[index] = i

            if i < len(positions) and (first_pos == -1 or positions[i] < first_pos):
                first_pos = positions[i]
                replace_index = index

        if replace_index == -1:
            break

        replace_this = names[replace_index]
        replacement = mapping[replace_this]
        start = first_pos + shift
        text = text[:start] + replacement + text[start + len(replace_this):]
        names_found.add(replace_this)

        if any(char in QUOTE_CHARS for char in replace_this):
            occurrences = _occurrence_lists(text, names)
            next_index = [0] * len(names)
            cursor = start + len(replacement)
            shift = 0
        else:
            cursor = first_pos + len(replace_this)
            shift += len(replacement) - len(replace_this)

    return ScriptEncoding(text=text, names_found=names_found)


def order_prefixes(prefixes: Iterable[str]) -> List[str]:
    """Empty prefix first, then the others shortest-first."""
    return [""] + sorted({p for p in prefixes if p}, key=len)


def encode_script_text_with_prefixes(
    text: str,
    mapping: Mapping[str, str],
    ordered_names: Sequence[str],
    prefixes: Iterable[str],
    skip_calls: bool = False,
) -> PrefixedScriptEncoding:
    """
    Encode script source once per allowed prefix.

    Supports syntaxes like ``data.columnName`` where the same name can show
    up both bare and prefixed, and callers need to know which one fired.

    Args:
        text: Script source
        mapping: Original name to synthetic identifier
        ordered_names: Names to look for, longest first
        prefixes: Allowed prefixes; the empty prefix is always tried first
        skip_calls: Leave names in call position alone

    Returns:
        PrefixedScriptEncoding with the text and the names found per prefix
    """
    result = PrefixedScriptEncoding(text=text)

    for prefix in order_prefixes(prefixes):
        encoded = encode_script_text(result.text, mapping, ordered_names, prefix, skip_calls)
        result.text = encoded.text
        result.names_by_prefix[prefix] = encoded.names_found

    return result


def replace_in_document(
    document: Any,
    mapping: Mapping[str, str],
    ordered_names: Sequence[str],
    rename_keys: bool = False,
    strict: bool = False,
) -> Any:
    """
    Apply substitution to every string leaf of a JSON-shaped document.

    The document is not modified; a transformed copy is returned. Object
    member order is kept, renamed members stay in place.

    Args:
        document: dict / list / str / scalar tree
        mapping: Name to replacement
        ordered_names: Names for non-strict replacement, longest first
        rename_keys: Also substitute in object member names
        strict: Only replace strings that equal a mapped name as a whole

    Returns:
        The transformed document
    """

    def replace_text(text: str) -> str:
        if strict:
            return replace_all_strict(text, mapping)
        return replace_all(text, mapping, ordered_names)

    def walk(node: Any) -> Any:
        if isinstance(node, dict):
            members: List[Tuple[str, Any]] = []
            for key, value in node.items():
                new_key = replace_text(key) if rename_keys else key
                members.append((new_key, walk(value)))
            return dict(members)
        if isinstance(node, list):
            return [walk(item) for item in node]
        if isinstance(node, str):
            return replace_text(node)
        return node

    return walk(document)

