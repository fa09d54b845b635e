"""Custom exceptions for subfilter.

Provides a structured exception hierarchy for the conditions the engine
recovers from. None of them is fatal: the worst outcome is filtering being
temporarily inactive.
"""


class SubFilterError(Exception):
    """Base exception class for all subfilter errors."""

    pass


class ConfigCorruptionError(SubFilterError):
    """Raised when stored rule data fails validation.

    Attributes:
        key: The store key holding the corrupt data.
    """

    def __init__(self, key: str, message: str):
        self.key = key
        self.detail = message
        super().__init__(f"Stored rules under {key!r} are corrupt: {message}")


class MissingHostError(SubFilterError):
    """Raised when an expected container element is not rendered yet.

    Attributes:
        host: Name of the missing container (e.g. 'button-dock').
    """

    def __init__(self, host: str, message: str = "not rendered yet"):
        self.host = host
        super().__init__(f"Host {host!r} unavailable: {message}")


class StorageError(SubFilterError):
    """Raised when the rule store cannot be read or written."""

    pass
