"""
Column Encoder - Swap user column names for safe identifiers in scripts.

This package replaces human-chosen data-column names (which may contain
spaces, quotes or operators, or shadow language keywords) with synthetic
identifiers inside generated script code and analysis option documents,
and turns them back into the original names afterwards.

Basic Usage:
    from column_encoder import Registry, ColumnType

    registry = Registry()
    registry.set_names({"body mass": ColumnType.SCALE})

    script = registry.encode_script_text("mean(body mass)")
    registry.decode_script_text(script)   # -> "mean(body mass)"

    # Options documents with a ".meta" description
    found = encode_column_names_in_options(options, preloading_data=True,
                                           registry=registry)

Command-Line Usage:
    column-encode encode-script --names names.json --input analysis.R
    column-encode encode-options --options options.json --preloading
    column-encode remove --column age --input analysis.R
"""

__version__ = "1.0.0"
__author__ = "Column Encoder Team"

from column_encoder.exceptions import (
    EncoderError,
    LookupFailure,
    NotAColumnName,
    NotAnEncodedName,
    InconsistentRegistry,
    InvalidIdentifierError,
    ConfigError,
)

from column_encoder.config import Config, create_default_config
from column_encoder.core.column_types import ColumnType
from column_encoder.core.name_table import EncoderRole, NameTable
from column_encoder.core.registry import LookupResult, Registry, default_registry
from column_encoder.core.script_rewrite import (
    remove_column_names_from_script,
    replace_column_names_in_script,
)
from column_encoder.options.option_tree import encode_column_names_in_options

__all__ = [
    # Version
    "__version__",
    # Main API
    "Registry",
    "default_registry",
    "LookupResult",
    "encode_column_names_in_options",
    "replace_column_names_in_script",
    "remove_column_names_from_script",
    # Configuration
    "Config",
    "create_default_config",
    # Data Types
    "ColumnType",
    "EncoderRole",
    "NameTable",
    # Exceptions
    "EncoderError",
    "LookupFailure",
    "NotAColumnName",
    "NotAnEncodedName",
    "InconsistentRegistry",
    "InvalidIdentifierError",
    "ConfigError",
]
