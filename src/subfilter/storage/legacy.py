"""Compatibility loader for stored rules.

Older configurations were saved by a generic config editor as positional
records::

    {"value": "<channel pattern>",
     "sub": [{"value": <enabled>}, {"value": "<streams scheduled>"}, ...]}

with ``sub`` in the fixed order of ``LEGACY_FIELDS``. The title slot was
appended after ``other``, so older seven-slot records still load. Current
records are plain ``Rule`` dumps tagged with ``schema_version``. Both shapes
are accepted on read; only the current one is stored.
"""

from typing import Any

from pydantic import ValidationError

from subfilter.exceptions import ConfigCorruptionError
from subfilter.models.rule import Rule

# Positional order of the "sub" list in legacy records
LEGACY_FIELDS: tuple[str, ...] = (
    "enabled",
    "stream_scheduled",
    "stream_live",
    "stream_finished",
    "premiere_scheduled",
    "premiere_live",
    "other",
    "title",
)


def is_legacy_record(record: Any) -> bool:
    """Return True for a positional ``{value, sub}`` record.

    Reason: a record carrying ``value`` without ``sub`` is a damaged legacy
    record. Routing it through the migration reports it instead of letting
    the current-schema path ignore the key and load a blank rule.
    """
    if not isinstance(record, dict) or "schema_version" in record:
        return False
    return "sub" in record or "value" in record


def _migrate(record: dict, index: int) -> dict:
    sub = record.get("sub")
    if not isinstance(sub, list):
        raise ValueError(f"rule #{index}: 'sub' must be a list")
    if len(sub) > len(LEGACY_FIELDS):
        raise ValueError(
            f"rule #{index}: 'sub' has {len(sub)} entries, expected {len(LEGACY_FIELDS)}"
        )

    fields: dict[str, Any] = {}
    if "value" in record:
        fields["source"] = record["value"]

    # Missing trailing slots keep the model defaults
    for field_name, slot in zip(LEGACY_FIELDS, sub):
        if not isinstance(slot, dict) or "value" not in slot:
            raise ValueError(f"rule #{index}: malformed entry for {field_name!r}")
        fields[field_name] = slot["value"]

    return fields


def load_rules(raw: Any, key: str = "rules") -> list[Rule]:
    """Validate stored data into rules, migrating legacy records.

    Args:
        raw: Value read from the store (None means "never configured").
        key: Store key, used in error messages.

    Returns:
        Rules in stored order.

    Raises:
        ConfigCorruptionError: When the data has the wrong shape, wrong types
            or an invalid pattern.
    """
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigCorruptionError(key, f"expected a list of rules, got {type(raw).__name__}")

    rules: list[Rule] = []
    for index, record in enumerate(raw):
        if not isinstance(record, dict):
            raise ConfigCorruptionError(key, f"rule #{index} is not an object")
        try:
            fields = _migrate(record, index) if is_legacy_record(record) else record
            rules.append(Rule.model_validate(fields, strict=True))
        except ValueError as e:
            # pydantic's ValidationError is a ValueError too
            message = _first_error(e) if isinstance(e, ValidationError) else str(e)
            raise ConfigCorruptionError(key, message) from e

    return rules


def _first_error(error: ValidationError) -> str:
    details = error.errors()
    if not details:
        return str(error)
    first = details[0]
    location = ".".join(str(part) for part in first["loc"]) or "rule"
    return f"{location}: {first['msg']}"


def dump_rules(rules: list[Rule]) -> list[dict]:
    """Serialize rules in the current schema."""
    return [rule.model_dump(mode="json") for rule in rules]


def dump_legacy_rules(rules: list[Rule]) -> list[dict]:
    """Serialize rules in the positional legacy shape."""
    return [
        {
            "value": rule.source,
            "sub": [{"value": getattr(rule, field_name)} for field_name in LEGACY_FIELDS],
        }
        for rule in rules
    ]
