"""Dashboard routes."""
from fastapi import APIRouter, Depends

from resource_tracker.routes.deps import get_state, require_identity
from resource_tracker.schemas.resource import ResourceStats
from resource_tracker.schemas.user import Identity
from resource_tracker.state import TrackerState

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=ResourceStats)
async def get_stats(
    state: TrackerState = Depends(get_state),
    current_user: Identity = Depends(require_identity)
):
    """Counts by category and status, recent activity and monthly additions."""
    return state.resources.compute_stats()
