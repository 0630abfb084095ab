"""
Encoder Registry - The set of active name tables and their merged views.

A registry owns:
- One primary name table (created on first use, lives as long as the
  registry)
- Any number of auxiliary name tables, created for scoped renaming tasks
- Six aggregate views (encode map, decode map, html-safe decode map, type
  map, original names, encoded names). Each view carries its own dirty
  flag, is marked dirty whenever any table changes, and is rebuilt on the
  next read.

Merging rule: the primary table's entries come first, auxiliary tables only
fill in keys that are still missing, in registration order. Collisions
between two auxiliary tables should be avoided by callers.

Thread model: a registry is meant to be owned by a single thread (or a
single request). All mutations and rebuilds are additionally serialized
behind one re-entrant lock; :meth:`Registry.auxiliary` holds that lock for
the whole create/use/destroy span of a scoped table.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Generic, Iterator, List, Mapping, Optional, Tuple, TypeVar

from column_encoder.config import Config, create_default_config
from column_encoder.core.column_types import ColumnType
from column_encoder.core.name_table import EncoderRole, NameTable
from column_encoder.core.substitution import (
    PrefixedScriptEncoding,
    ScriptEncoding,
    encode_script_text,
    encode_script_text_with_prefixes,
    replace_all,
    replace_in_document,
)
from column_encoder.core.utils import escape_html, sort_longest_first
from column_encoder.exceptions import (
    InconsistentRegistry,
    LookupFailure,
    NotAColumnName,
    NotAnEncodedName,
)
from column_encoder.logging_config import get_logger
from column_encoder.options.meta import META_KEY, collect_names_from_meta

logger = get_logger("registry")

T = TypeVar("T")


@dataclass
class LookupResult:
    """
    Outcome of an encode or decode lookup.

    Exactly one of ``value`` and ``error`` is meaningful: ``error`` is None
    on success.
    """
    value: str = ""
    error: Optional[LookupFailure] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> str:
        """Return the value or raise the stored failure."""
        if self.error is not None:
            raise self.error
        return self.value


def _empty_map() -> Mapping:
    return MappingProxyType({})


class AggregateView(Generic[T]):
    """A merged read-only value, rebuilt on read after invalidation."""

    def __init__(self, name: str, build: Callable[[], T], empty: Callable[[], T]):
        self.name = name
        self.dirty = True
        self._build = build
        self._empty = empty
        self._value: T = empty()

    def get(self) -> T:
        if self.dirty:
            self._value = self._build()
            self.dirty = False
        return self._value

    def invalidate(self) -> None:
        self.dirty = True

    def clear(self) -> None:
        self._value = self._empty()
        self.dirty = True


class Registry:
    """
    Process- or request-wide set of name tables.

    Usage:
        registry = Registry()
        registry.set_names({"age": ColumnType.SCALE})
        registry.encode("age")                   # -> "JaspColumn_0_Encoded"
        registry.encode_script_text("mean(age)")  # -> "mean(JaspColumn_0_Encoded)"

        with registry.auxiliary() as extra:
            extra.set_names({"level 1": ColumnType.UNKNOWN})
            registry.encode("level 1")
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or create_default_config()
        self._lock = threading.RLock()
        self._primary: Optional[NameTable] = None
        # dict keeps registration order, values unused
        self._auxiliaries: Dict[NameTable, None] = {}

        self._encoding_map = AggregateView("encoding_map", lambda: self._merge_maps("encoding_map"), _empty_map)
        self._decoding_map = AggregateView("decoding_map", lambda: self._merge_maps("decoding_map"), _empty_map)
        self._decoding_types = AggregateView("decoding_types", lambda: self._merge_maps("decoding_types"), _empty_map)
        self._decoding_map_html = AggregateView("decoding_map_html", self._merge_html_safe, _empty_map)
        self._original_names = AggregateView("original_names", lambda: self._merge_names("original_names"), tuple)
        self._encoded_names = AggregateView("encoded_names", lambda: self._merge_names("encoded_names"), tuple)
        self._views: List[AggregateView] = [
            self._encoding_map,
            self._decoding_map,
            self._decoding_types,
            self._decoding_map_html,
            self._original_names,
            self._encoded_names,
        ]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def primary(self) -> NameTable:
        """The primary name table, created on first access."""
        with self._lock:
            if self._primary is None:
                self._primary = NameTable(
                    prefix=self.config.prefix,
                    suffix=self.config.suffix,
                    role=EncoderRole.PRIMARY,
                    registry=self,
                )
                logger.debug("Created primary encoder")
                self.invalidate_all()
            return self._primary

    @property
    def has_primary(self) -> bool:
        return self._primary is not None

    def create_auxiliary(self, prefix: Optional[str] = None, suffix: Optional[str] = None) -> NameTable:
        """
        Create and register an auxiliary name table.

        Its prefix should differ from the primary's, otherwise identifiers
        of the two tables collide and the primary wins.

        Args:
            prefix: Identifier prefix (defaults to the replacement prefix)
            suffix: Identifier suffix (defaults to the replacement suffix)

        Returns:
            The new, empty table
        """
        with self._lock:
            table = NameTable(
                prefix=prefix if prefix is not None else self.config.replacement_prefix,
                suffix=suffix if suffix is not None else self.config.replacement_suffix,
                role=EncoderRole.AUXILIARY,
                registry=self,
            )
            self._auxiliaries[table] = None
            logger.debug("Registered auxiliary encoder (%d live)", len(self._auxiliaries))
            self.invalidate_all()
            return table

    def destroy(self, table: NameTable) -> None:
        """
        Remove a name table from the registry.

        Destroying the primary table destroys every auxiliary table too.
        Destroying a table that is not registered is a no-op.

        Args:
            table: The table to destroy
        """
        with self._lock:
            if table is self._primary:
                self.destroy_primary()
            elif table in self._auxiliaries:
                del self._auxiliaries[table]
                self._detach(table)
                logger.debug("Destroyed auxiliary encoder (%d live)", len(self._auxiliaries))
                self.invalidate_all()

    def destroy_primary(self) -> None:
        """Destroy the primary table and cascade to all auxiliary tables."""
        with self._lock:
            if self._primary is not None:
                self._detach(self._primary)
                self._primary = None

            for table in list(self._auxiliaries):
                self.destroy(table)

            if self._auxiliaries:
                logger.error("%s", InconsistentRegistry(len(self._auxiliaries)))

            for view in self._views:
                view.clear()
            logger.debug("Destroyed primary encoder")

    @contextmanager
    def auxiliary(self, prefix: Optional[str] = None, suffix: Optional[str] = None) -> Iterator[NameTable]:
        """
        Scoped auxiliary table, destroyed when the block exits.

        The registry lock is held for the whole block, so no other thread
        sees the registry while the table exists.
        """
        with self._lock:
            table = self.create_auxiliary(prefix, suffix)
            try:
                yield table
            finally:
                self.destroy(table)

    def live_encoders(self) -> List[NameTable]:
        """Primary (if created) followed by the auxiliary tables."""
        tables = [self._primary] if self._primary is not None else []
        return tables + list(self._auxiliaries)

    @staticmethod
    def _detach(table: NameTable) -> None:
        table.registry = None
        table.role = EncoderRole.DETACHED

    # ------------------------------------------------------------------
    # Aggregate views
    # ------------------------------------------------------------------

    def invalidate_all(self) -> None:
        """Mark every aggregate view dirty."""
        for view in self._views:
            view.invalidate()

    def _merge_maps(self, attribute: str) -> Mapping:
        with self._lock:
            merged = dict(getattr(self.primary, attribute))
            for table in self._auxiliaries:
                for key, value in getattr(table, attribute).items():
                    if key not in merged:
                        merged[key] = value
            return MappingProxyType(merged)

    def _merge_html_safe(self) -> Mapping[str, str]:
        escape_brackets = self.config.escape_square_brackets
        return MappingProxyType({
            key: escape_html(value, escape_brackets)
            for key, value in self._merge_maps("decoding_map").items()
        })

    def _merge_names(self, attribute: str) -> Tuple[str, ...]:
        with self._lock:
            names = list(getattr(self.primary, attribute))
            for table in self._auxiliaries:
                names.extend(getattr(table, attribute))
            return tuple(sort_longest_first(names))

    @property
    def encoding_map(self) -> Mapping[str, str]:
        """Merged name to identifier map, primary first. Read-only."""
        with self._lock:
            return self._encoding_map.get()

    @property
    def decoding_map(self) -> Mapping[str, str]:
        with self._lock:
            return self._decoding_map.get()

    @property
    def decoding_map_html_safe(self) -> Mapping[str, str]:
        with self._lock:
            return self._decoding_map_html.get()

    @property
    def decoding_types(self) -> Mapping[str, ColumnType]:
        with self._lock:
            return self._decoding_types.get()

    @property
    def original_names(self) -> Tuple[str, ...]:
        with self._lock:
            return self._original_names.get()

    @property
    def encoded_names(self) -> Tuple[str, ...]:
        with self._lock:
            return self._encoded_names.get()

    def dirty_views(self) -> List[str]:
        """Names of the views that will be rebuilt on their next read."""
        return [view.name for view in self._views if view.dirty]

    # ------------------------------------------------------------------
    # Producer side
    # ------------------------------------------------------------------

    def set_names(self, names_with_types: Mapping[str, ColumnType]) -> None:
        """Replace the primary table's names (see :meth:`NameTable.set_names`)."""
        with self._lock:
            self.primary.set_names(names_with_types)
        logger.debug("Encoding %d column names", len(names_with_types))

    def set_names_from_options_meta(self, options: Any) -> None:
        """Register the ``encodeThis`` names found under ``options[".meta"]``."""
        names: Dict[str, ColumnType] = {}
        if isinstance(options, dict) and META_KEY in options:
            names = collect_names_from_meta(options[META_KEY])
        self.set_names(names)

    @staticmethod
    def collect_names_from_meta(meta: Any) -> Dict[str, ColumnType]:
        """Names listed under ``encodeThis`` keys anywhere in a meta tree."""
        return collect_names_from_meta(meta)

    def column_names(self) -> List[str]:
        """Original names of the primary table, longest first."""
        return list(self._primary.original_names) if self._primary is not None else []

    def column_names_encoded(self) -> List[str]:
        """Identifiers of the primary table, longest first."""
        return list(self._primary.encoded_names) if self._primary is not None else []

    # ------------------------------------------------------------------
    # Consumer side
    # ------------------------------------------------------------------

    def try_encode(self, name: str) -> LookupResult:
        """Look up the identifier of a name without raising."""
        if name == "":
            return LookupResult("")
        encoding_map = self.encoding_map
        if name not in encoding_map:
            return LookupResult(error=NotAColumnName(name))
        return LookupResult(encoding_map[name])

    def try_decode(self, name: str) -> LookupResult:
        """Look up the original name of an identifier without raising."""
        if name == "":
            return LookupResult("")
        decoding_map = self.decoding_map
        if name not in decoding_map:
            return LookupResult(error=NotAnEncodedName(name))
        return LookupResult(decoding_map[name])

    def encode(self, name: str) -> str:
        """
        Get the identifier of a column name.

        Raises:
            NotAColumnName: If the name is not registered
        """
        return self.try_encode(name).unwrap()

    def decode(self, name: str) -> str:
        """
        Get the column name behind an identifier.

        Raises:
            NotAnEncodedName: If the identifier is unknown
        """
        return self.try_decode(name).unwrap()

    def type_of(self, encoded_name: str) -> ColumnType:
        """Declared type behind an identifier, UNKNOWN if there is none."""
        if not encoded_name:
            return ColumnType.UNKNOWN
        return self.decoding_types.get(encoded_name, ColumnType.UNKNOWN)

    def should_encode(self, name: str) -> bool:
        return name in self.encoding_map

    def should_decode(self, name: str) -> bool:
        return name in self.decoding_map

    def encode_all(self, text: str) -> str:
        """Plain substring substitution of every column name."""
        return replace_all(text, self.encoding_map, self.original_names)

    def decode_all(self, text: str) -> str:
        return replace_all(text, self.decoding_map, self.encoded_names)

    def decode_all_html_safe(self, text: str) -> str:
        return replace_all(text, self.decoding_map_html_safe, self.encoded_names)

    def encode_script_text(self, text: str, mandatory_prefix: str = "") -> str:
        return self.encode_script_text_found(text, mandatory_prefix).text

    def encode_script_text_found(self, text: str, mandatory_prefix: str = "") -> ScriptEncoding:
        """Encode script source and report which names were replaced."""
        with self._lock:
            return encode_script_text(
                text,
                self.encoding_map,
                self.original_names,
                mandatory_prefix,
                self.config.skip_function_calls,
            )

    def encode_script_text_with_prefixes(self, text: str, prefixes=None) -> PrefixedScriptEncoding:
        """
        Encode script source once per allowed prefix.

        Args:
            text: Script source
            prefixes: Allowed prefixes (defaults to ``config.allowed_prefixes``)
        """
        if prefixes is None:
            prefixes = self.config.allowed_prefixes
        with self._lock:
            return encode_script_text_with_prefixes(
                text,
                self.encoding_map,
                self.original_names,
                prefixes,
                self.config.skip_function_calls,
            )

    def decode_script_text(self, text: str) -> str:
        """Turn identifiers in script source back into column names."""
        return self.decode_all(text)

    def encode_document(self, document: Any, rename_keys: bool = False, strict: bool = False) -> Any:
        with self._lock:
            return replace_in_document(
                document, self.encoding_map, self.original_names, rename_keys, strict
            )

    def decode_document(self, document: Any, rename_keys: bool = False) -> Any:
        with self._lock:
            return replace_in_document(
                document, self.decoding_map, self.encoded_names, rename_keys, False
            )

    def decode_document_html_safe(self, document: Any) -> Any:
        """Decode a document for display: decoded names are HTML-escaped."""
        with self._lock:
            return replace_in_document(
                document, self.decoding_map_html_safe, self.encoded_names, True, False
            )


_default_registry: Optional[Registry] = None


def default_registry() -> Registry:
    """Process-wide registry, created on first use."""
    global _default_registry
    if _default_registry is None:
        _default_registry = Registry()
    return _default_registry


def reset_default_registry() -> None:
    """Drop the process-wide registry (its tables are destroyed)."""
    global _default_registry
    if _default_registry is not None:
        _default_registry.destroy_primary()
    _default_registry = None
