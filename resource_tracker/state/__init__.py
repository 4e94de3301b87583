"""Application state containers and their wiring."""
from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy.orm import Session

from resource_tracker.database import SessionLocal
from resource_tracker.schemas.user import Identity
from resource_tracker.services.data_service import RemoteDataService
from resource_tracker.state.resources import ResourceCollection
from resource_tracker.state.session import SessionState
from resource_tracker.state.theme import ThemeStore


@dataclass
class TrackerState:
    """Process-wide state shared by all views."""
    service: RemoteDataService
    session: SessionState
    resources: ResourceCollection
    theme: ThemeStore


def build_state(
    service: RemoteDataService,
    session_factory: Callable[[], Session] = SessionLocal,
) -> TrackerState:
    """Create the containers and subscribe the collection to identity changes."""
    session = SessionState(service)
    resources = ResourceCollection(service, session)

    async def sync_resources(identity: Optional[Identity]) -> None:
        # Never show the previous identity's resources
        await resources.clear()
        if identity is not None:
            await resources.fetch_all()

    session.subscribe(sync_resources)
    return TrackerState(
        service=service,
        session=session,
        resources=resources,
        theme=ThemeStore(session_factory),
    )
