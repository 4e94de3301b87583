"""Resource collection state - the signed-in identity's resources."""
from typing import Any, Callable, List, Mapping, Optional, Set

from resource_tracker.errors import (
    BusyError,
    NotAuthenticated,
    OperationResult,
    StaleResponseError,
    TrackerError,
    ValidationError,
    validate_fields,
)
from resource_tracker.logging_config import get_logger
from resource_tracker.schemas.resource import (
    Resource,
    ResourceCreate,
    ResourceStats,
    ResourceUpdate,
)
from resource_tracker.services.data_service import RemoteDataService
from resource_tracker.services.stats import compute_stats
from resource_tracker.state.events import Listener, Subscribers
from resource_tracker.state.session import SessionState

logger = get_logger(__name__)

ALL = "All"


class ResourceCollection:
    """In-memory cache of the current identity's resources.

    Mutations go through the remote data service and the local list is
    reconciled with the returned records. At most one update or removal per
    resource id may be in flight. clear() starts a new generation; responses
    to requests issued in an earlier generation are discarded.
    """

    def __init__(self, service: RemoteDataService, session: SessionState):
        self.service = service
        self.session = session
        self.resources: List[Resource] = []
        self.error: Optional[str] = None
        self._pending_fetches = 0
        self._generation = 0
        self._in_flight: Set[str] = set()
        self._subscribers = Subscribers()

    @property
    def loading(self) -> bool:
        return self._pending_fetches > 0

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self._subscribers.add(listener)

    async def _changed(self) -> None:
        await self._subscribers.notify(list(self.resources))

    async def fetch_all(self) -> OperationResult:
        identity = self.session.identity
        if identity is None:
            self.resources = []
            self.error = None
            await self._changed()
            return OperationResult.fail(NotAuthenticated())

        generation = self._generation
        self._pending_fetches += 1
        try:
            resources = await self.service.select_resources(identity.id)
        except TrackerError as e:
            logger.warning("resources_fetch_failed", error=e.message)
            if generation == self._generation:
                self.error = e.message
            return OperationResult.fail(e)
        finally:
            self._pending_fetches -= 1

        if generation != self._generation:
            logger.info("resources_fetch_discarded")
            return OperationResult.fail(StaleResponseError())

        self.resources = list(resources)
        self.error = None
        await self._changed()
        logger.info("resources_fetched", count=len(self.resources))
        return OperationResult.ok(list(self.resources))

    async def add(self, fields: Mapping[str, Any]) -> OperationResult:
        identity = self.session.identity
        if identity is None:
            return OperationResult.fail(NotAuthenticated())
        try:
            data = validate_fields(ResourceCreate, fields)
        except ValidationError as e:
            return OperationResult.fail(e)

        record = data.model_dump(mode="json")
        record["user_id"] = identity.id

        generation = self._generation
        try:
            created = await self.service.insert_resource(record)
        except TrackerError as e:
            logger.warning("resource_add_failed", error=e.message)
            return OperationResult.fail(e)

        if generation != self._generation:
            return OperationResult.fail(StaleResponseError())

        self.resources = [created] + self.resources
        await self._changed()
        logger.info("resource_added", resource_id=created.id)
        return OperationResult.ok(created)

    async def update(self, resource_id: str, fields: Mapping[str, Any]) -> OperationResult:
        if self.session.identity is None:
            return OperationResult.fail(NotAuthenticated())
        try:
            data = validate_fields(ResourceUpdate, fields)
        except ValidationError as e:
            return OperationResult.fail(e)
        if resource_id in self._in_flight:
            return OperationResult.fail(BusyError())

        changes = data.model_dump(mode="json", exclude_unset=True)
        generation = self._generation
        self._in_flight.add(resource_id)
        try:
            updated = await self.service.update_resource(resource_id, changes)
        except TrackerError as e:
            logger.warning("resource_update_failed", resource_id=resource_id, error=e.message)
            return OperationResult.fail(e)
        finally:
            self._in_flight.discard(resource_id)

        if generation != self._generation:
            return OperationResult.fail(StaleResponseError())

        self.resources = [updated if r.id == resource_id else r for r in self.resources]
        await self._changed()
        logger.info("resource_updated", resource_id=resource_id)
        return OperationResult.ok(updated)

    async def remove(self, resource_id: str) -> OperationResult:
        """Delete a resource. Callers must have confirmed the deletion with the user."""
        if self.session.identity is None:
            return OperationResult.fail(NotAuthenticated())
        if resource_id in self._in_flight:
            return OperationResult.fail(BusyError())

        generation = self._generation
        self._in_flight.add(resource_id)
        try:
            await self.service.delete_resource(resource_id)
        except TrackerError as e:
            logger.warning("resource_remove_failed", resource_id=resource_id, error=e.message)
            return OperationResult.fail(e)
        finally:
            self._in_flight.discard(resource_id)

        if generation != self._generation:
            return OperationResult.fail(StaleResponseError())

        self.resources = [r for r in self.resources if r.id != resource_id]
        await self._changed()
        logger.info("resource_removed", resource_id=resource_id)
        return OperationResult.ok()

    def get_by_id(self, resource_id: str) -> Optional[Resource]:
        """Local lookup; may be stale while a fetch is in flight."""
        for resource in self.resources:
            if resource.id == resource_id:
                return resource
        return None

    def compute_stats(self) -> ResourceStats:
        return compute_stats(self.resources)

    def search(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[Resource]:
        """Filter by text in title or description, category and status."""
        needle = (query or "").strip().lower()
        results = []
        for resource in self.resources:
            if needle and needle not in resource.title.lower() and needle not in (resource.description or "").lower():
                continue
            if category and category != ALL and resource.category != category:
                continue
            if status and status != ALL and resource.status != status:
                continue
            results.append(resource)
        return results

    def categories_in_use(self) -> List[str]:
        categories = [ALL]
        for resource in self.resources:
            if resource.category not in categories:
                categories.append(resource.category)
        return categories

    async def clear(self) -> None:
        self._generation += 1
        self.resources = []
        self.error = None
        await self._changed()
