"""
Synthetic Name Generator - Generates collision-free placeholder identifiers.

Identifiers have the form ``prefix + counter + suffix`` (for example
``JaspColumn_0_Encoded``). The slightly odd but syntactically valid shape
keeps them from colliding with anything a user would type into a script.
Key features:
- Monotonic counter starting at 0
- Reserved word and identifier validation of the prefix/suffix pair
"""

from dataclasses import dataclass, field

from column_encoder.core.utils import has_only_identifier_chars, validate_identifier
from column_encoder.exceptions import InvalidIdentifierError

DEFAULT_PREFIX = "JaspColumn_"
DEFAULT_SUFFIX = "_Encoded"

__all__ = [
    "SyntheticNameGenerator",
    "NameGeneratorConfig",
    "DEFAULT_PREFIX",
    "DEFAULT_SUFFIX",
]


@dataclass
class NameGeneratorConfig:
    """
    Configuration for identifier generation.

    Attributes:
        prefix: Text placed before the counter
        suffix: Text placed after the counter
    """

    prefix: str = DEFAULT_PREFIX
    suffix: str = DEFAULT_SUFFIX


@dataclass
class SyntheticNameGenerator:
    """
    Generates unique synthetic identifiers for one name table.

    Usage:
        generator = SyntheticNameGenerator()
        generator.generate()  # -> "JaspColumn_0_Encoded"
        generator.generate()  # -> "JaspColumn_1_Encoded"
    """

    config: NameGeneratorConfig = field(default_factory=NameGeneratorConfig)
    _counter: int = field(default=0, init=False)

    def __post_init__(self):
        self.validate_affixes(self.config.prefix, self.config.suffix)

    @staticmethod
    def validate_affixes(prefix: str, suffix: str) -> None:
        """
        Check that prefix and suffix produce valid identifiers.

        Args:
            prefix: Identifier prefix
            suffix: Identifier suffix

        Raises:
            InvalidIdentifierError: If the pair cannot produce a valid name
        """
        validate_identifier(f"{prefix}0{suffix}")
        if not has_only_identifier_chars(suffix):
            raise InvalidIdentifierError(suffix, "suffix contains non-identifier characters")

    def generate(self) -> str:
        """Return the next identifier and advance the counter."""
        name = f"{self.config.prefix}{self._counter}{self.config.suffix}"
        self._counter += 1
        return name
