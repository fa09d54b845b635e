"""Abstract rule store interface using Protocol.

The store is a plain key/value store of JSON-compatible values, the same
contract userscript managers offer. Rule validation happens one level up,
in ``subfilter.storage.legacy``.
"""

from typing import Any, Protocol


class RuleStore(Protocol):
    """Persisted value store abstraction protocol."""

    async def get(self, key: str, default: Any = None) -> Any:
        """Read a value.

        Args:
            key: Store key.
            default: Returned when the key was never written.

        Returns:
            The stored JSON-compatible value.

        Raises:
            ConfigCorruptionError: When the stored bytes cannot be decoded.
            StorageError: When the backend fails.
        """
        ...

    async def set(self, key: str, value: Any) -> None:
        """Write a JSON-compatible value.

        Raises:
            StorageError: When the backend fails.
        """
        ...
