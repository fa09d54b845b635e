"""Filter rule models.

A rule targets the channels whose name matches ``source`` and carries one
title pattern per filterable category. Stored rules use schema version 2
(named fields); older positional records are migrated by
``subfilter.storage.legacy``.
"""

import re
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from subfilter.models.category import Category

# Pattern that can never match: '.' needs a character before the start anchor
NEVER_MATCH = ".^"
# Pattern that matches any string, including the empty one
ALWAYS_MATCH = "^"

SCHEMA_VERSION = 2


class Rule(BaseModel):
    """Per-channel filter rule."""

    schema_version: Literal[2] = SCHEMA_VERSION
    source: str = Field(default=NEVER_MATCH, description="Channels")
    enabled: bool = Field(default=True, description="Enabled")
    # Checked for every category, unlike the per-category patterns below
    title: str = Field(default=ALWAYS_MATCH, description="Titles")

    # Per-category title patterns
    stream_scheduled: str = Field(default=NEVER_MATCH, description="Streams (scheduled)")
    stream_live: str = Field(default=NEVER_MATCH, description="Streams (live)")
    stream_finished: str = Field(default=NEVER_MATCH, description="Streams (finished)")
    premiere_scheduled: str = Field(default=NEVER_MATCH, description="Premieres (scheduled)")
    premiere_live: str = Field(default=NEVER_MATCH, description="Premieres (live)")
    other: str = Field(default=NEVER_MATCH, description="Others")

    @field_validator(
        "source",
        "title",
        "stream_scheduled",
        "stream_live",
        "stream_finished",
        "premiere_scheduled",
        "premiere_live",
        "other",
    )
    @classmethod
    def _check_pattern(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"invalid pattern {value!r}: {e}") from e
        return value

    def pattern_for(self, category: Category) -> str | None:
        """Return the title pattern configured for a category.

        Args:
            category: Classified category of an item.

        Returns:
            The pattern string, or None for ``Category.UNCATEGORIZED``.
        """
        field_name = CATEGORY_FIELDS.get(category)
        if field_name is None:
            return None
        return getattr(self, field_name)


# Category -> Rule field, in the positional order of the legacy schema
CATEGORY_FIELDS: dict[Category, str] = {
    Category.SCHEDULED_STREAM: "stream_scheduled",
    Category.LIVE_STREAM: "stream_live",
    Category.FINISHED_STREAM: "stream_finished",
    Category.SCHEDULED_PREMIERE: "premiere_scheduled",
    Category.LIVE_PREMIERE: "premiere_live",
    Category.OTHER: "other",
}


class RuleSet(BaseModel):
    """Ordered collection of rules."""

    rules: list[Rule] = Field(default_factory=list)

    def enabled_rules(self) -> list[Rule]:
        """Return only enabled rules, keeping their order."""
        return [r for r in self.rules if r.enabled]

    def __len__(self) -> int:
        return len(self.rules)
