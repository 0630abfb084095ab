"""
Option Metadata - Reads the ``.meta`` companion of an options document.

Every options document may carry a ``.meta`` member: a tree parallel to the
options that says, per node, what the node holds:
- ``{"shouldEncode": true}``: the node enumerates column names
- ``{"rCode": true}``: the node's string leaves are script source
- any other object or array: recurse with the matching meta child
- ``{"encodeThis": "name"}`` or ``{"encodeThis": [...]}``: names to encode
  that are not dataset columns (factor levels, generated symbols)
"""

from enum import Enum
from typing import Any, Dict

from column_encoder.core.column_types import ColumnType

META_KEY = ".meta"
SHOULD_ENCODE_KEY = "shouldEncode"
R_CODE_KEY = "rCode"
ENCODE_THIS_KEY = "encodeThis"


class NodeIntent(Enum):
    """What to do with an options node, decided by its meta node."""
    ENCODE_ALL = "encode_all"              # Node lists column names
    SCRIPT_TEXT = "script_text"            # String leaves are script source
    RECURSE_PARALLEL = "recurse_parallel"  # Walk on with the meta children
    NONE = "none"                          # Leave the subtree alone


def _flag(meta: dict, key: str) -> bool:
    return bool(meta.get(key, False))


def intent_for(meta: Any) -> NodeIntent:
    """
    Decide the intent of a meta node.

    ``shouldEncode`` takes precedence over ``rCode``, which takes precedence
    over recursion.

    Args:
        meta: The meta node (dict, list, or anything else)

    Returns:
        The NodeIntent for the paired options node
    """
    if isinstance(meta, dict):
        if _flag(meta, SHOULD_ENCODE_KEY):
            return NodeIntent.ENCODE_ALL
        if _flag(meta, R_CODE_KEY):
            return NodeIntent.SCRIPT_TEXT
        return NodeIntent.RECURSE_PARALLEL
    if isinstance(meta, list):
        return NodeIntent.RECURSE_PARALLEL
    return NodeIntent.NONE


def collect_names_from_meta(meta: Any) -> Dict[str, ColumnType]:
    """
    Collect every name listed under an ``encodeThis`` key in a meta tree.

    An object carrying ``encodeThis`` is not searched further.

    Args:
        meta: The meta tree

    Returns:
        Mapping of collected names to ColumnType.UNKNOWN
    """
    names: Dict[str, ColumnType] = {}

    def walk(node: Any) -> None:
        if isinstance(node, list):
            for item in node:
                walk(item)
        elif isinstance(node, dict):
            if ENCODE_THIS_KEY in node:
                encode_this = node[ENCODE_THIS_KEY]
                if isinstance(encode_this, str):
                    names[encode_this] = ColumnType.UNKNOWN
                elif isinstance(encode_this, list):
                    for name in encode_this:
                        names[str(name)] = ColumnType.UNKNOWN
            else:
                for child in node.values():
                    walk(child)

    walk(meta)
    return names
