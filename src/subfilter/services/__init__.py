"""Services package."""

from subfilter.services.filter_service import (
    ConfigEditor,
    ControlDock,
    FilterService,
    field_schema,
)

__all__ = [
    "FilterService",
    "ConfigEditor",
    "ControlDock",
    "field_schema",
]
