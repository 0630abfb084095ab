"""
Column Name Table - Per-encoder bidirectional name store.

This module provides the name table that:
- Maps original column names to synthetic identifiers and back
- Registers type-qualified variants (``name.scale``, ``name.ordinal``,
  ``name.nominal``) for columns with a declared type
- Keeps the name lists sorted longest-first for safe replacement
- Notifies its owning registry whenever its contents change
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from column_encoder.core.column_types import CONCRETE_TYPES, ColumnType, qualified_name
from column_encoder.core.utils import sort_longest_first
from column_encoder.generators.name_generator import (
    DEFAULT_PREFIX,
    DEFAULT_SUFFIX,
    NameGeneratorConfig,
    SyntheticNameGenerator,
)
from column_encoder.logging_config import get_logger

if TYPE_CHECKING:
    from column_encoder.core.registry import Registry

logger = get_logger("name_table")

REPLACEMENT_PREFIX = "JASPColumn_"
REPLACEMENT_SUFFIX = "_For_Replacement"


class EncoderRole(Enum):
    """Ownership tag of a name table inside a registry."""
    PRIMARY = "primary"        # Lives as long as the registry
    AUXILIARY = "auxiliary"    # Scoped renaming task
    DETACHED = "detached"      # Not registered anywhere


@dataclass(eq=False)
class NameTable:
    """
    Bidirectional mapping between column names and synthetic identifiers.

    Tables compare by identity: a registry uses them as dict keys.

    Usage:
        table = NameTable()
        table.set_names({"age": ColumnType.SCALE, "level one": ColumnType.UNKNOWN})
        table.encoding_map["age"]        # -> "JaspColumn_0_Encoded"
        table.encoding_map["age.ordinal"] # -> "JaspColumn_1_Encoded"
        table.decoding_map["JaspColumn_1_Encoded"]  # -> "age"
    """

    prefix: str = DEFAULT_PREFIX
    suffix: str = DEFAULT_SUFFIX
    role: EncoderRole = EncoderRole.DETACHED
    registry: Optional["Registry"] = field(default=None, repr=False)

    encoding_map: Dict[str, str] = field(default_factory=dict, init=False)
    decoding_map: Dict[str, str] = field(default_factory=dict, init=False)
    decoding_types: Dict[str, ColumnType] = field(default_factory=dict, init=False)
    original_names: List[str] = field(default_factory=list, init=False)
    encoded_names: List[str] = field(default_factory=list, init=False)
    dataset_types: Dict[str, ColumnType] = field(default_factory=dict, init=False)

    def __post_init__(self):
        # Fails early on a prefix/suffix pair that cannot make valid names
        SyntheticNameGenerator.validate_affixes(self.prefix, self.suffix)

    def set_names(self, names_with_types: Mapping[str, ColumnType]) -> None:
        """
        Replace the table contents with a fresh set of names.

        Names with an unknown type get one identifier. Dataset columns get
        one identifier per concrete type, registered under the qualified
        name; the bare name is bound to the identifier of its declared
        type. Decoding always yields the bare name.

        Args:
            names_with_types: Mapping from bare name to declared type
        """
        self.encoding_map.clear()
        self.decoding_map.clear()
        self.decoding_types.clear()
        self.original_names.clear()
        self.encoded_names.clear()
        self.dataset_types = {
            name: ColumnType.from_string(declared_type)
            for name, declared_type in names_with_types.items()
        }

        generator = SyntheticNameGenerator(
            NameGeneratorConfig(prefix=self.prefix, suffix=self.suffix)
        )

        for name, declared_type in self.dataset_types.items():
            self.original_names.append(name)

            if not declared_type.is_known:
                encoded = generator.generate()
                self.encoding_map[name] = encoded
                self.decoding_map[encoded] = name
                self.encoded_names.append(encoded)
                continue

            for column_type in CONCRETE_TYPES:
                qualified = qualified_name(name, column_type)
                encoded = generator.generate()

                self.original_names.append(qualified)
                self.encoding_map[qualified] = encoded
                self.decoding_map[encoded] = name
                self.decoding_types[encoded] = column_type
                self.encoded_names.append(encoded)

                if column_type == declared_type:
                    self.encoding_map[name] = encoded

        self.original_names = sort_longest_first(self.original_names)
        self.encoded_names = sort_longest_first(self.encoded_names)

        logger.debug(
            "%s table now holds %d names (%d identifiers)",
            self.role.value, len(names_with_types), len(self.encoded_names),
        )
        self.invalidate()

    def redirect_decoding(self, decode_as: Mapping[str, str]) -> None:
        """
        Make identifiers decode to different text than their original name.

        Args:
            decode_as: Mapping from original name to the text its
                identifier should decode to
        """
        for encoded in self.encoded_names:
            original = self.decoding_map[encoded]
            if original in decode_as:
                self.decoding_map[encoded] = decode_as[original]
        self.invalidate()

    @classmethod
    def for_replacements(
        cls,
        replacements: Mapping[str, str],
        prefix: str = REPLACEMENT_PREFIX,
        suffix: str = REPLACEMENT_SUFFIX,
    ) -> "NameTable":
        """
        Build a detached table that renames instead of round-tripping.

        Encoding with it and then decoding yields the replacement text for
        every name in ``replacements``.

        Args:
            replacements: Mapping from old name to its replacement
            prefix: Identifier prefix
            suffix: Identifier suffix

        Returns:
            A detached NameTable
        """
        table = cls(prefix=prefix, suffix=suffix)
        table.set_names({name: ColumnType.UNKNOWN for name in replacements})
        table.redirect_decoding(replacements)
        return table

    def invalidate(self) -> None:
        """Tell the owning registry that its aggregate views are stale."""
        if self.registry is not None:
            self.registry.invalidate_all()

    def should_encode(self, name: str) -> bool:
        return name in self.encoding_map

    def should_decode(self, name: str) -> bool:
        return name in self.decoding_map

    def type_of(self, encoded_name: str) -> ColumnType:
        return self.decoding_types.get(encoded_name, ColumnType.UNKNOWN)

    def clear(self) -> None:
        """Empty the table."""
        self.set_names({})

    def __len__(self) -> int:
        return len(self.encoded_names)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for reporting."""
        return {
            "role": self.role.value,
            "prefix": self.prefix,
            "suffix": self.suffix,
            "encoding_map": dict(self.encoding_map),
            "decoding_map": dict(self.decoding_map),
            "decoding_types": {k: v.value for k, v in self.decoding_types.items()},
            "dataset_types": {k: v.value for k, v in self.dataset_types.items()},
        }
