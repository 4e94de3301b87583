"""View routes and the session guard in front of them.

Views return the data a page renders. Every view except the authentication
view requires a signed-in identity and carries the navigation chrome.
"""
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse, RedirectResponse, Response

from resource_tracker.forms.auth import safe_next_path
from resource_tracker.forms.profile import ProfileForm
from resource_tracker.forms.resource import ResourceForm
from resource_tracker.models.resource import RESOURCE_CATEGORIES, RESOURCE_STATUSES
from resource_tracker.routes.deps import get_state
from resource_tracker.schemas.user import Identity
from resource_tracker.state import TrackerState

router = APIRouter(tags=["Views"])

LOGIN_PATH = "/authentication"

NAVIGATION = [
    {"title": "Dashboard", "href": "/"},
    {"title": "Resources", "href": "/resources"},
    {"title": "Add Resource", "href": "/add-resource"},
    {"title": "Settings", "href": "/settings"},
]


class ViewInterrupt(Exception):
    """Raised by the guard to answer with something other than the view."""

    def __init__(self, response: Response):
        self.response = response


async def view_interrupt_handler(request: Request, exc: ViewInterrupt) -> Response:
    return exc.response


def login_redirect_url(request: Request) -> str:
    """Login URL remembering the originally requested path and query."""
    target = request.url.path
    if request.url.query:
        target = f"{target}?{request.url.query}"
    return f"{LOGIN_PATH}?{urlencode({'next': target})}"


def require_view_session(request: Request, state: TrackerState = Depends(get_state)) -> Identity:
    """Guard: loading placeholder, redirect to login, or the signed-in identity."""
    session = state.session
    if session.loading:
        raise ViewInterrupt(
            JSONResponse(status_code=status.HTTP_202_ACCEPTED, content={"view": "loading"})
        )
    if session.identity is None:
        raise ViewInterrupt(
            RedirectResponse(url=login_redirect_url(request), status_code=status.HTTP_307_TEMPORARY_REDIRECT)
        )
    return session.identity


def _chrome(identity: Identity, state: TrackerState) -> dict:
    return {
        "navigation": NAVIGATION,
        "user": identity.model_dump(),
        "initials": identity.initials,
        "theme": state.theme.theme.value,
    }


@router.get("/authentication")
async def authentication_view(
    next_path: Optional[str] = Query(None, alias="next"),
    state: TrackerState = Depends(get_state)
):
    """Login/register view. Never guarded and rendered without navigation."""
    return {
        "view": "authentication",
        "next": safe_next_path(next_path),
        "authenticated": state.session.is_authenticated,
        "theme": state.theme.theme.value,
    }


@router.get("/")
async def dashboard_view(
    state: TrackerState = Depends(get_state),
    identity: Identity = Depends(require_view_session)
):
    """Dashboard with aggregate statistics."""
    return {
        "view": "dashboard",
        **_chrome(identity, state),
        "loading": state.resources.loading,
        "error": state.resources.error,
        "stats": state.resources.compute_stats().model_dump(mode="json"),
    }


@router.get("/resources")
async def resources_view(
    search: Optional[str] = None,
    category: Optional[str] = None,
    resource_status: Optional[str] = Query(None, alias="status"),
    state: TrackerState = Depends(get_state),
    identity: Identity = Depends(require_view_session)
):
    """Resource list with its search and filter bar."""
    collection = state.resources
    resources = collection.search(search, category, resource_status)
    return {
        "view": "resources",
        **_chrome(identity, state),
        "loading": collection.loading,
        "error": collection.error,
        "resources": [r.model_dump(mode="json") for r in resources],
        "filters": {"search": search or "", "category": category or "All", "status": resource_status or "All"},
        "categories": collection.categories_in_use(),
        "statuses": ["All"] + RESOURCE_STATUSES,
    }


@router.get("/add-resource")
async def add_resource_view(
    edit: Optional[str] = None,
    state: TrackerState = Depends(get_state),
    identity: Identity = Depends(require_view_session)
):
    """Add form, or edit form when ?edit=<id> is given."""
    form = ResourceForm(state.resources, edit_id=edit)
    return {
        "view": "add-resource",
        **_chrome(identity, state),
        "editing": form.is_editing,
        "resource_id": edit,
        "draft": form.draft.model_dump(),
        "error": form.error,
        "categories": RESOURCE_CATEGORIES,
        "statuses": RESOURCE_STATUSES,
    }


@router.get("/settings")
async def settings_view(
    state: TrackerState = Depends(get_state),
    identity: Identity = Depends(require_view_session)
):
    """Profile form and theme preference."""
    form = ProfileForm(state.session)
    return {
        "view": "settings",
        **_chrome(identity, state),
        "profile": form.draft.model_dump(),
        "total_resources": len(state.resources.resources),
        "themes": ["light", "dark", "system"],
    }
