"""Authentication and profile routes."""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from resource_tracker.forms.auth import LoginForm, RegisterForm
from resource_tracker.forms.profile import ProfileForm
from resource_tracker.routes.deps import get_state, raise_for_result, require_identity
from resource_tracker.schemas.user import (
    AuthResponse,
    Identity,
    LoginRequest,
    ProfileUpdate,
    RegisterRequest,
    SessionResponse,
)
from resource_tracker.state import TrackerState

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: LoginRequest,
    next_path: Optional[str] = Query(None, alias="next", description="Path to return to"),
    state: TrackerState = Depends(get_state)
):
    """Sign in with email and password."""
    form = LoginForm(state.session, next_path)
    form.update(**credentials.model_dump())
    result = raise_for_result(await form.submit())
    return AuthResponse(identity=result.data, redirect_to=form.redirect_to)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    registration: RegisterRequest,
    next_path: Optional[str] = Query(None, alias="next", description="Path to return to"),
    state: TrackerState = Depends(get_state)
):
    """Create an account. May require email confirmation before signing in."""
    form = RegisterForm(state.session, next_path)
    form.update(**registration.model_dump())
    result = raise_for_result(await form.submit())
    return AuthResponse(
        identity=result.data,
        pending_confirmation=result.pending_confirmation,
        redirect_to=form.redirect_to,
        message=form.message,
    )


@router.post("/logout", response_model=SessionResponse)
async def logout(state: TrackerState = Depends(get_state)):
    """Sign out. The local session is cleared even if the service cannot be reached."""
    await state.session.logout()
    return SessionResponse(authenticated=False, loading=state.session.loading)


@router.get("/session", response_model=SessionResponse)
async def get_session(state: TrackerState = Depends(get_state)):
    """Current session state."""
    session = state.session
    return SessionResponse(
        authenticated=session.is_authenticated,
        loading=session.loading,
        identity=session.identity,
    )


@router.put("/profile", response_model=Identity)
async def update_profile(
    profile: ProfileUpdate,
    state: TrackerState = Depends(get_state),
    current_user: Identity = Depends(require_identity)
):
    """Update display name, avatar and bio of the signed-in user."""
    form = ProfileForm(state.session)
    form.update(**{k: v or "" for k, v in profile.model_dump(exclude_unset=True).items()})
    result = raise_for_result(await form.submit())
    return result.data
