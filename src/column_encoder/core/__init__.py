"""
Core modules for the Column Encoder.

This package contains the core processing logic:
- name_table: Per-encoder bidirectional name store
- scanner: Quote- and boundary-aware name search
- substitution: Text and document substitution
- registry: Primary and auxiliary encoders with merged views
- script_rewrite: Renaming and removing columns in scripts
- utils: Utility functions
"""

from column_encoder.core.utils import (
    escape_html,
    sort_longest_first,
    validate_identifier,
)

__all__ = [
    "validate_identifier",
    "escape_html",
    "sort_longest_first",
]
