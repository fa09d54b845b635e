"""Navigation event payload."""

from pydantic import BaseModel, Field


class NavigationEvent(BaseModel):
    """Target view of a page navigation, as reported by the host."""

    url: str = Field(..., description="Destination URL")
    page_subtype: str | None = Field(default=None, description="e.g. 'subscriptions'")
    browse_id: str | None = Field(default=None, description="e.g. 'FEsubscriptions'")
    grid_view: bool = Field(default=True, description="False when the feed uses list layout")
