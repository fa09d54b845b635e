"""Dict-backed rule store."""

import copy
from typing import Any


class MemoryRuleStore:
    """In-process rule store.

    Values are deep-copied on the way in and out, so callers never share
    mutable state with the store.
    """

    def __init__(self, initial: dict[str, Any] | None = None):
        self._values: dict[str, Any] = copy.deepcopy(initial or {})

    async def get(self, key: str, default: Any = None) -> Any:
        if key not in self._values:
            return default
        return copy.deepcopy(self._values[key])

    async def set(self, key: str, value: Any) -> None:
        self._values[key] = copy.deepcopy(value)
