"""Rule store factory.

Creates the store backend selected in configuration.
"""

from subfilter.config.settings import Settings
from subfilter.storage.base import RuleStore
from subfilter.storage.memory import MemoryRuleStore
from subfilter.storage.sqlite import SQLiteRuleStore


def create_rule_store(settings: Settings) -> RuleStore:
    """Create a rule store based on configuration.

    Args:
        settings: Application settings.

    Returns:
        RuleStore instance (memory or SQLite).

    Raises:
        ValueError: If the store type is unsupported.

    Reason: callers only see the ``RuleStore`` protocol, so switching between
    the in-memory and SQLite backends is a configuration change.
    """
    store_type = settings.store_type.lower()

    if store_type == "memory":
        return MemoryRuleStore()

    elif store_type == "sqlite":
        return SQLiteRuleStore(settings.db_path)

    else:
        raise ValueError(f"Unsupported store type: {store_type}. Supported types: memory, sqlite")
