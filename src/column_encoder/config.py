"""
Configuration - Handles encoder configuration.

This module handles:
- Configuration dataclass with all options
- JSON configuration file support
- Command-line overrides
- Configuration validation
"""

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from column_encoder.core.name_table import REPLACEMENT_PREFIX, REPLACEMENT_SUFFIX
from column_encoder.core.utils import IDENTIFIER_CHARS_PATTERN
from column_encoder.generators.name_generator import DEFAULT_PREFIX, DEFAULT_SUFFIX

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class Config:
    """
    Configuration for column name encoding.

    Attributes:
        prefix: Identifier prefix of the primary encoder
        suffix: Identifier suffix of the primary encoder
        replacement_prefix: Identifier prefix of auxiliary and rename encoders
        replacement_suffix: Identifier suffix of auxiliary and rename encoders
        allowed_prefixes: Prefixes tried by prefix-scoped script encoding
            (e.g. ``data.``), in addition to the empty prefix
        escape_square_brackets: Also escape ``[`` and ``]`` in html-safe decoding
        skip_function_calls: Leave names followed by ``(`` alone in scripts
        log_level: Logging level
        verbose: Enable verbose output
    """

    prefix: str = DEFAULT_PREFIX
    suffix: str = DEFAULT_SUFFIX
    replacement_prefix: str = REPLACEMENT_PREFIX
    replacement_suffix: str = REPLACEMENT_SUFFIX
    allowed_prefixes: list[str] = field(default_factory=list)

    # Substitution options
    escape_square_brackets: bool = True
    skip_function_calls: bool = False

    # Output options
    log_level: str = "INFO"
    verbose: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    def save_to_file(self, path: Path) -> None:
        """Save configuration to JSON file."""
        path.write_text(json.dumps(self.to_dict(), indent=2))

    @classmethod
    def load_from_file(cls, path: Path) -> "Config":
        """Load configuration from JSON file."""
        data = json.loads(path.read_text())
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create config from dictionary."""
        if "allowed_prefixes" in data and isinstance(data["allowed_prefixes"], str):
            data["allowed_prefixes"] = [data["allowed_prefixes"]]

        # Filter only known fields
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered_data = {k: v for k, v in data.items() if k in known_fields}

        return cls(**filtered_data)

    def validate(self) -> list[str]:
        """
        Validate configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        for label, prefix in (("prefix", self.prefix), ("replacement_prefix", self.replacement_prefix)):
            if not prefix or not prefix[0].isascii() or not prefix[0].isalpha():
                errors.append(f"Invalid {label} (must start with a letter): {prefix!r}")
            elif not IDENTIFIER_CHARS_PATTERN.match(prefix):
                errors.append(f"Invalid {label} (identifier characters only): {prefix!r}")

        for label, suffix in (("suffix", self.suffix), ("replacement_suffix", self.replacement_suffix)):
            if not IDENTIFIER_CHARS_PATTERN.match(suffix):
                errors.append(f"Invalid {label} (identifier characters only): {suffix!r}")

        if self.prefix == self.replacement_prefix:
            errors.append("prefix and replacement_prefix must differ")

        for allowed in self.allowed_prefixes:
            if not isinstance(allowed, str):
                errors.append(f"Allowed prefix is not a string: {allowed!r}")

        if self.log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(f"Invalid log level: {self.log_level}")

        return errors

    def is_valid(self) -> bool:
        """Check if configuration is valid."""
        return len(self.validate()) == 0


def create_default_config() -> Config:
    """Create a configuration with default values."""
    return Config()


def merge_configs(base: Config, override: Config) -> Config:
    """
    Merge two configurations, with override taking precedence.

    Args:
        base: Base configuration
        override: Override configuration

    Returns:
        Merged configuration
    """
    base_dict = base.to_dict()
    override_dict = override.to_dict()

    # Only override non-default values from override
    merged = {}
    default = create_default_config().to_dict()

    for key in base_dict:
        if override_dict.get(key) != default.get(key):
            merged[key] = override_dict[key]
        else:
            merged[key] = base_dict[key]

    return Config.from_dict(merged)
