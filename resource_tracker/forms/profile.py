"""Profile settings form."""
from typing import Any

from pydantic import BaseModel

from resource_tracker.errors import OperationResult
from resource_tracker.forms.base import FormController
from resource_tracker.schemas.user import ProfileUpdate
from resource_tracker.state.session import SessionState


class ProfileDraft(BaseModel):
    name: str = ""
    email: str = ""
    avatar_url: str = ""
    bio: str = ""


class ProfileForm(FormController):
    """Edits the profile metadata of the signed-in identity. Email is read-only."""

    success_path = "/settings"

    def __init__(self, session: SessionState):
        super().__init__()
        self.session = session
        identity = session.identity
        if identity is None:
            self.draft = ProfileDraft()
        else:
            self.draft = ProfileDraft(
                name=identity.name or "",
                email=identity.email or "",
                avatar_url=identity.avatar_url or "",
                bio=identity.bio or "",
            )

    def update(self, **fields: Any) -> None:
        fields.pop("email", None)
        self.draft = self.draft.model_copy(update=fields)

    async def _perform(self) -> OperationResult:
        return await self.session.update_profile(
            ProfileUpdate(
                name=self.draft.name.strip(),
                avatar_url=self.draft.avatar_url.strip() or None,
                bio=self.draft.bio,
            )
        )

    def _on_success(self, result: OperationResult) -> None:
        self.message = "Profile updated successfully"
        super()._on_success(result)
