"""
Script Rewrite - Renames or removes column names in existing scripts.

Both operations reuse the encoder: the old names are first encoded with a
throwaway name table whose identifiers decode to the new text, then decoded.
The table is never registered, so the registry is not touched.
"""

from typing import Iterable, Mapping

from column_encoder.core.name_table import REPLACEMENT_PREFIX, REPLACEMENT_SUFFIX, NameTable
from column_encoder.core.substitution import encode_script_text, replace_all
from column_encoder.logging_config import get_logger

logger = get_logger("script_rewrite")

REMOVED_COLUMN_TEMPLATE = "stop('column {name} was removed from this RScript')"


def replace_column_names_in_script(
    script: str,
    changed_names: Mapping[str, str],
    prefix: str = REPLACEMENT_PREFIX,
    suffix: str = REPLACEMENT_SUFFIX,
) -> str:
    """
    Rename column names in script source.

    Only free occurrences are renamed: quoted text and longer words that
    contain an old name stay as they are.

    Args:
        script: Script source
        changed_names: Mapping from old column name to new text
        prefix: Prefix of the temporary identifiers
        suffix: Suffix of the temporary identifiers

    Returns:
        The rewritten script
    """
    if not script or not changed_names:
        return script

    table = NameTable.for_replacements(changed_names, prefix, suffix)
    encoded = encode_script_text(script, table.encoding_map, table.original_names)
    logger.debug("Rewrote %d column names in script", len(encoded.names_found))

    return replace_all(encoded.text, table.decoding_map, table.encoded_names)


def remove_column_names_from_script(script: str, removed_names: Iterable[str]) -> str:
    """
    Replace removed columns with a call that fails when the script runs.

    Args:
        script: Script source
        removed_names: Column names that no longer exist

    Returns:
        The rewritten script
    """
    replace_by = {name: REMOVED_COLUMN_TEMPLATE.format(name=name) for name in removed_names}
    return replace_column_names_in_script(script, replace_by)
