"""Add/edit resource form."""
from typing import Any, Optional, Set

from resource_tracker.errors import BusyError, OperationResult, TrackerError
from resource_tracker.forms.base import FormController
from resource_tracker.schemas.resource import ResourceDraft
from resource_tracker.state.resources import ResourceCollection

NOT_FOUND_MESSAGE = "Resource not found"
LOADING_MESSAGE = "Resources are still loading, try again shortly"


class ResourceForm(FormController):
    """Create mode when edit_id is None, edit mode otherwise.

    In edit mode only the fields changed through update() are sent, so a
    draft that could not be filled from the record never overwrites it.
    """

    success_path = "/resources"

    def __init__(self, collection: ResourceCollection, edit_id: Optional[str] = None):
        super().__init__()
        self.collection = collection
        self.edit_id = edit_id
        self.draft = ResourceDraft()
        self.changed: Set[str] = set()
        self.loaded = False
        self.not_found = False
        if edit_id:
            self.load()

    @property
    def is_editing(self) -> bool:
        return bool(self.edit_id)

    def load(self) -> bool:
        """Fill the draft from the record being edited."""
        resource = self.collection.get_by_id(self.edit_id)
        if resource is not None:
            self.draft = ResourceDraft.from_resource(resource)
            self.changed = set()
            self.loaded = True
            self.not_found = False
            self.error = None
            return True
        if not self.collection.loading:
            self.not_found = True
            self.error = NOT_FOUND_MESSAGE
        return False

    def update(self, **fields: Any) -> None:
        self.draft = self.draft.model_copy(update={k: "" if v is None else str(v) for k, v in fields.items()})
        self.changed.update(fields)

    def blocked(self) -> Optional[TrackerError]:
        if self.is_editing and not self.loaded and self.collection.loading:
            return BusyError(LOADING_MESSAGE)
        return None

    def validate(self) -> Optional[str]:
        if self.is_editing and (self.not_found or self.collection.get_by_id(self.edit_id) is None):
            self.not_found = True
            return NOT_FOUND_MESSAGE
        if (not self.is_editing or self.loaded or "title" in self.changed) and not self.draft.title.strip():
            return "Title is required"
        return None

    async def _perform(self) -> OperationResult:
        if self.is_editing:
            fields = self.draft.model_dump(include=self.changed)
            return await self.collection.update(self.edit_id, fields)
        return await self.collection.add(self.draft.model_dump())
