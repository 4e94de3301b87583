"""Login and registration forms."""
from typing import Any, Optional

from resource_tracker.errors import OperationResult
from resource_tracker.forms.base import FormController
from resource_tracker.schemas.user import LoginRequest, RegisterRequest
from resource_tracker.state.session import SessionState, is_valid_email

CONFIRMATION_MESSAGE = "Check your email to confirm your account, then sign in."


def safe_next_path(path: Optional[str]) -> str:
    """Only allow local paths as post-login destinations."""
    if not path or not path.startswith("/") or path.startswith("//") or path.startswith("/\\"):
        return "/"
    return path


class LoginForm(FormController):
    def __init__(self, session: SessionState, next_path: Optional[str] = None):
        super().__init__()
        self.session = session
        self.success_path = safe_next_path(next_path)
        self.draft = LoginRequest()

    def update(self, **fields: Any) -> None:
        self.draft = self.draft.model_copy(update=fields)

    def validate(self) -> Optional[str]:
        if not self.draft.email.strip() or not self.draft.password:
            return "Email and password are required"
        return None

    async def _perform(self) -> OperationResult:
        return await self.session.login(self.draft.email.strip(), self.draft.password)


class RegisterForm(FormController):
    def __init__(self, session: SessionState, next_path: Optional[str] = None):
        super().__init__()
        self.session = session
        self.success_path = safe_next_path(next_path)
        self.draft = RegisterRequest()

    def update(self, **fields: Any) -> None:
        self.draft = self.draft.model_copy(update=fields)

    def validate(self) -> Optional[str]:
        if self.draft.password != self.draft.confirm_password:
            return "Passwords do not match"
        if not is_valid_email(self.draft.email.strip()):
            return "Please enter a valid email address"
        if not self.draft.password:
            return "Password is required"
        return None

    async def _perform(self) -> OperationResult:
        return await self.session.register(
            self.draft.name.strip(), self.draft.email.strip(), self.draft.password
        )

    def _on_success(self, result: OperationResult) -> None:
        if result.pending_confirmation:
            # Stay on the authentication view until the address is confirmed
            self.message = CONFIRMATION_MESSAGE
            return
        super()._on_success(result)
