"""
Exception classes for the Column Encoder.

This module defines all custom exceptions used throughout the encoder,
organized in a hierarchy for easy handling.
"""

from typing import Optional


class EncoderError(Exception):
    """Base exception for all encoder errors."""

    pass


class LookupFailure(EncoderError):
    """A name could not be found in the merged encoder maps.

    Attributes:
        name: The name that was looked up
    """

    def __init__(self, name: str, message: str):
        self.name = name
        super().__init__(message)


class NotAColumnName(LookupFailure):
    """Encoding was requested for a name that is not registered.

    Attributes:
        name: The unregistered column name
    """

    def __init__(self, name: str):
        super().__init__(
            name,
            f"Trying to encode columnName but '{name}' is not a columnName!",
        )


class NotAnEncodedName(LookupFailure):
    """Decoding was requested for an unknown synthetic identifier.

    Attributes:
        name: The unrecognized identifier
    """

    def __init__(self, name: str):
        super().__init__(
            name,
            f"Trying to decode columnName but '{name}' is not an encoded columnName!",
        )


class InconsistentRegistry(EncoderError):
    """Auxiliary encoders survived the destruction of the primary encoder.

    This points at a lifecycle bug elsewhere. The registry reports it
    through the logger instead of raising it.

    Attributes:
        remaining: Number of auxiliary encoders still registered
    """

    def __init__(self, remaining: int, message: Optional[str] = None):
        self.remaining = remaining
        if message is None:
            message = (
                f"Something went wrong removing other encoders "
                f"({remaining} still registered)"
            )
        super().__init__(message)


class InvalidIdentifierError(EncoderError):
    """A synthetic identifier is not a valid script name.

    Attributes:
        identifier: The invalid identifier
        reason: Why it's invalid
    """

    def __init__(self, identifier: str, reason: str):
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"Invalid identifier '{identifier}': {reason}")


class ConfigError(EncoderError):
    """Configuration error.

    Raised when there's an issue with the configuration,
    such as an invalid identifier prefix or log level.
    """

    pass
