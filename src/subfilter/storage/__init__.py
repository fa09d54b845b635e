"""Storage package."""

from subfilter.storage.base import RuleStore
from subfilter.storage.factory import create_rule_store
from subfilter.storage.legacy import dump_legacy_rules, dump_rules, load_rules
from subfilter.storage.memory import MemoryRuleStore
from subfilter.storage.sqlite import SQLiteRuleStore

__all__ = [
    "RuleStore",
    "MemoryRuleStore",
    "SQLiteRuleStore",
    "create_rule_store",
    "load_rules",
    "dump_rules",
    "dump_legacy_rules",
]
