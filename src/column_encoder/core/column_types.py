"""
Column Types - Declared measurement types of dataset columns.

A column in the data carries one of three concrete types. Names that are
not dataset columns (factor levels, synthetic symbols) use UNKNOWN.
"""

from enum import Enum


class ColumnType(str, Enum):
    """Declared type of a column."""
    UNKNOWN = "unknown"
    SCALE = "scale"
    ORDINAL = "ordinal"
    NOMINAL = "nominal"

    @classmethod
    def from_string(cls, text: str) -> "ColumnType":
        """Parse a type name, falling back to UNKNOWN."""
        try:
            return cls(text)
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_known(self) -> bool:
        return self is not ColumnType.UNKNOWN


# Order matters: identifiers are handed out in this order per column
CONCRETE_TYPES = (ColumnType.SCALE, ColumnType.ORDINAL, ColumnType.NOMINAL)


def is_valid_type_name(text: str) -> bool:
    """Check whether text names one of the ColumnType values."""
    return text in {t.value for t in ColumnType}


def qualified_name(name: str, column_type: ColumnType) -> str:
    """Build the type-qualified form of a name, e.g. ``age.scale``."""
    return f"{name}.{column_type.value}"
