"""
Option Tree Encoder - Encodes column names inside analysis option documents.

An options document is a JSON-shaped value (dict / list / str / scalars)
with a ``.meta`` member describing, per node, where column names and script
source live (see :mod:`column_encoder.options.meta`).

Encoding takes two passes:
1. Typed option nodes (``{"value": ..., "types": ...}``, optionally with an
   ``optionKey``) are flattened and their column names qualified with their
   declared type (``age`` -> ``age.scale``).
2. The document is walked together with its ``.meta`` tree and every column
   name found is replaced by its synthetic identifier.

Both passes change the options document in place; the top-level functions
also return it.
"""

import copy
from typing import Any, List, Optional, Set, Tuple

from column_encoder.core.column_types import ColumnType, is_valid_type_name
from column_encoder.core.registry import Registry, default_registry
from column_encoder.logging_config import get_logger
from column_encoder.options.meta import META_KEY, NodeIntent, intent_for

logger = get_logger("options")

VALUE_KEY = "value"
TYPES_KEY = "types"
OPTION_KEY = "optionKey"
TYPES_SUFFIX = ".types"

ColumnsWithTypes = Set[Tuple[str, ColumnType]]


# ----------------------------------------------------------------------
# Pass 2: the meta-driven walk
# ----------------------------------------------------------------------

def _encode_node(node: Any, meta: Any, registry: Registry) -> Any:
    intent = intent_for(meta)
    if intent == NodeIntent.NONE:
        return node

    if isinstance(node, list):
        if intent == NodeIntent.ENCODE_ALL:
            return registry.encode_document(node, rename_keys=False, strict=True)
        if isinstance(meta, list):
            for i in range(min(len(node), len(meta))):
                node[i] = _encode_node(node[i], meta[i], registry)
        elif intent == NodeIntent.SCRIPT_TEXT:
            for i, item in enumerate(node):
                if isinstance(item, str):
                    node[i] = registry.encode_script_text(item)
        else:
            # An object meta over an array applies to every element
            for i, item in enumerate(node):
                node[i] = _encode_node(item, meta, registry)
        return node

    if isinstance(node, dict):
        for member, value in node.items():
            if member == META_KEY:
                continue
            if isinstance(meta, dict) and member in meta:
                node[member] = _encode_node(value, meta[member], registry)
            elif intent == NodeIntent.SCRIPT_TEXT:
                if isinstance(value, str):
                    node[member] = registry.encode_script_text(value)
            elif intent == NodeIntent.ENCODE_ALL:
                node[member] = registry.encode_document(value, rename_keys=False, strict=True)
        return node

    if isinstance(node, str):
        if intent == NodeIntent.SCRIPT_TEXT:
            return registry.encode_script_text(node)
        if intent == NodeIntent.ENCODE_ALL:
            return registry.encode_all(node)

    return node


def encode_options_with_meta(options: Any, meta: Any, registry: Optional[Registry] = None) -> Any:
    """
    Encode the column names in an options node as its meta node describes.

    Subtrees without meta are left alone; ``.meta`` members are never
    touched.

    Args:
        options: The options node (changed in place where it is a container)
        meta: The matching meta node
        registry: Registry to encode with (defaults to the process registry)

    Returns:
        The encoded options node
    """
    registry = registry or default_registry()
    return _encode_node(options, meta, registry)


# ----------------------------------------------------------------------
# Pass 1: typed option nodes
# ----------------------------------------------------------------------

def _is_typed_option(node: Any) -> bool:
    return isinstance(node, dict) and VALUE_KEY in node and TYPES_KEY in node


def _option_key(node: dict) -> str:
    key = node.get(OPTION_KEY)
    return key if isinstance(key, str) else ""


def _keeps_original(node: dict, option_key: str) -> bool:
    # value, types and optionKey are the recognized members; anything beyond
    # them must survive the conversion
    return bool(option_key) and len(node) > 3


def _type_name(json_type: Any, index: int = 0) -> str:
    if isinstance(json_type, str):
        return json_type
    if isinstance(json_type, list) and len(json_type) > index and isinstance(json_type[index], str):
        return json_type[index]
    return ""


def _qualify(column_name: str, type_name: str, registry: Registry, found: ColumnsWithTypes) -> str:
    """Append the column's type to its name and remember the result."""
    has_type = type_name != ColumnType.UNKNOWN.value and is_valid_type_name(type_name)

    if not has_type and column_name and column_name in registry.primary.dataset_types:
        type_name = registry.primary.dataset_types[column_name].value
        has_type = type_name != ColumnType.UNKNOWN.value

    if not column_name:
        return ""

    qualified = f"{column_name}.{type_name}" if has_type else column_name
    if has_type:
        found.add((qualified, ColumnType.from_string(type_name)))
    return qualified


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, list):
        return value
    if value is None:
        return []
    return [value]


def _convert_preloading_data_option(
    options: dict,
    option_name: str,
    registry: Registry,
    found: ColumnsWithTypes,
) -> None:
    """
    Replace a typed option node by its type-qualified values.

    Values come in three shapes:
    - a list of names (or a lone name, which stays a lone name)
    - a list of name lists, one per interaction term
    - a list of row objects; ``optionKey`` names the member holding the
      name or name list of each row
    """
    node = options[option_name]
    option_key = _option_key(node)
    keep_original = _keeps_original(node, option_key)

    value_list = node[VALUE_KEY]
    single_value = isinstance(value_list, str)
    value_list = _as_list(value_list)
    type_list = _as_list(node[TYPES_KEY])

    converted: List[Any] = []

    for i, original_value in enumerate(value_list):
        json_type = type_list[i] if i < len(type_list) else None

        use_row_member = (
            option_key
            and not keep_original
            and isinstance(original_value, dict)
            and option_key in original_value
        )
        value = original_value[option_key] if use_row_member else original_value

        if isinstance(value, str):
            new_value: Any = _qualify(value, _type_name(json_type), registry, found)
        elif isinstance(value, list):
            new_value = []
            for term, column_name in enumerate(value):
                type_name = _type_name(json_type, term)
                name = column_name if isinstance(column_name, str) else ""
                new_value.append(_qualify(name, type_name, registry, found))
        else:
            converted.append(original_value)
            continue

        if option_key and not keep_original and isinstance(original_value, dict):
            row = copy.deepcopy(original_value)
            row[option_key] = new_value
            converted.append(row)
        else:
            converted.append(new_value)

    options[option_name + TYPES_SUFFIX] = node[TYPES_KEY]

    if keep_original:
        new_option = copy.deepcopy(node)
        new_option[option_key] = converted
        options[option_name] = new_option
    elif single_value and converted:
        options[option_name] = converted[0]
    else:
        options[option_name] = converted


def add_types_to_column_names(
    options: Any,
    preloading_data: bool,
    registry: Optional[Registry] = None,
    found: Optional[ColumnsWithTypes] = None,
) -> ColumnsWithTypes:
    """
    Process every typed option node of an options document.

    In preloading mode the node's column names are qualified with their
    types. Otherwise the node is replaced by its ``value`` (unless it carries
    extra members that must be kept). Either way ``"<option>.types"`` is
    written next to it.

    Args:
        options: The options document (changed in place)
        preloading_data: Whether the analysis preloads its data
        registry: Registry holding the dataset types
        found: Set to add discovered qualified names to

    Returns:
        The set of (qualified name, type) pairs discovered
    """
    registry = registry or default_registry()
    if found is None:
        found = set()

    if isinstance(options, dict):
        for option_name in list(options.keys()):
            node = options[option_name]
            if _is_typed_option(node):
                if preloading_data:
                    _convert_preloading_data_option(options, option_name, registry, found)
                else:
                    options[option_name + TYPES_SUFFIX] = node[TYPES_KEY]
                    if not _keeps_original(node, _option_key(node)):
                        options[option_name] = node[VALUE_KEY]
            else:
                add_types_to_column_names(node, preloading_data, registry, found)
    elif isinstance(options, list):
        for item in options:
            add_types_to_column_names(item, preloading_data, registry, found)

    return found


def encode_column_names_in_options(
    options: Any,
    preloading_data: bool,
    registry: Optional[Registry] = None,
) -> ColumnsWithTypes:
    """
    Encode all column names in an options document.

    Args:
        options: The options document, with its ``.meta`` member (changed
            in place)
        preloading_data: Whether the analysis preloads its data
        registry: Registry to encode with (defaults to the process registry)

    Returns:
        Every (type-qualified name, type) pair found, so the caller can
        register the names it still needs
    """
    registry = registry or default_registry()

    found = add_types_to_column_names(options, preloading_data, registry)
    logger.debug("Found %d typed column names in options", len(found))

    if isinstance(options, dict):
        encode_options_with_meta(options, options.get(META_KEY), registry)

    return found
