"""Settings schemas for request/response validation."""
from pydantic import BaseModel

from resource_tracker.models.settings import Theme


class ThemeResponse(BaseModel):
    """Current theme preference."""
    theme: Theme


class ThemeUpdate(BaseModel):
    """Schema for changing the theme."""
    theme: Theme


class ThemeToggle(BaseModel):
    """Schema for cycling the theme."""
    prefers_dark: bool = False  # Client's prefers-color-scheme hint
