"""Shared route dependencies."""
from fastapi import Depends, HTTPException, Request, status

from resource_tracker.errors import OperationResult
from resource_tracker.schemas.user import Identity
from resource_tracker.state import TrackerState

# Status code per error kind of a failed OperationResult
ERROR_STATUS_CODES = {
    "validation": status.HTTP_400_BAD_REQUEST,
    "not_authenticated": status.HTTP_401_UNAUTHORIZED,
    "not_found": status.HTTP_404_NOT_FOUND,
    "busy": status.HTTP_409_CONFLICT,
    "stale": status.HTTP_409_CONFLICT,
    "service": status.HTTP_502_BAD_GATEWAY,
}


def get_state(request: Request) -> TrackerState:
    """Process-wide state created at startup."""
    return request.app.state.tracker


def require_identity(state: TrackerState = Depends(get_state)) -> Identity:
    """Require a signed-in identity for API routes."""
    if state.session.identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )
    return state.session.identity


def raise_for_result(result: OperationResult) -> OperationResult:
    """Translate a failed result into an HTTP error carrying its message."""
    if not result.success:
        raise HTTPException(
            status_code=ERROR_STATUS_CODES.get(result.kind, status.HTTP_400_BAD_REQUEST),
            detail=result.error
        )
    return result
