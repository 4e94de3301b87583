"""Settings routes - local preferences, independent of the signed-in user."""
from typing import Optional

from fastapi import APIRouter, Depends

from resource_tracker.routes.deps import get_state
from resource_tracker.schemas.settings import ThemeResponse, ThemeToggle, ThemeUpdate
from resource_tracker.state import TrackerState

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("/theme", response_model=ThemeResponse)
async def get_theme(state: TrackerState = Depends(get_state)):
    """Get the current theme preference."""
    return ThemeResponse(theme=state.theme.theme)


@router.put("/theme", response_model=ThemeResponse)
async def update_theme(
    theme_update: ThemeUpdate,
    state: TrackerState = Depends(get_state)
):
    """Set the theme preference."""
    return ThemeResponse(theme=state.theme.set_theme(theme_update.theme))


@router.post("/theme/toggle", response_model=ThemeResponse)
async def toggle_theme(
    toggle: Optional[ThemeToggle] = None,
    state: TrackerState = Depends(get_state)
):
    """Cycle light -> dark -> system."""
    prefers_dark = toggle.prefers_dark if toggle else False
    return ThemeResponse(theme=state.theme.toggle(prefers_dark))
