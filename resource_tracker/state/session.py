"""Session state - the signed-in identity."""
import re
from typing import Callable, Optional, Union

from resource_tracker.errors import (
    NotAuthenticated,
    OperationResult,
    TrackerError,
    ValidationError,
    validate_fields,
)
from resource_tracker.logging_config import get_logger
from resource_tracker.schemas.user import Identity, ProfileUpdate
from resource_tracker.services.data_service import RemoteDataService
from resource_tracker.state.events import Listener, Subscribers

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(email: str) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email) is not None


class SessionState:
    """Holds the current identity and the loading flag of the initial session check.

    Listeners registered with subscribe() are awaited with the new identity
    (or None) whenever the signed-in identity changes.
    """

    def __init__(self, service: RemoteDataService):
        self.service = service
        self.identity: Optional[Identity] = None
        self.loading = True
        self._subscribers = Subscribers()

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self._subscribers.add(listener)

    async def _set_identity(self, identity: Optional[Identity]) -> None:
        previous_id = self.identity.id if self.identity else None
        self.identity = identity
        current_id = identity.id if identity else None
        if previous_id != current_id:
            await self._subscribers.notify(identity)

    async def check_session(self) -> bool:
        """Restore an existing session, treating any failure as signed out."""
        self.loading = True
        identity = None
        try:
            identity = await self.service.get_session()
        except TrackerError as e:
            logger.warning("session_check_failed", error=e.message)
        except Exception:
            logger.exception("session_check_crashed")
        finally:
            self.loading = False

        await self._set_identity(identity)
        logger.info("session_checked", authenticated=self.is_authenticated)
        return self.is_authenticated

    async def register(self, name: str, email: str, password: str) -> OperationResult:
        if not is_valid_email(email):
            return OperationResult.fail(ValidationError("Please enter a valid email address"))
        if not password:
            return OperationResult.fail(ValidationError("Password is required"))

        try:
            outcome = await self.service.sign_up(email, password, {"full_name": name})
        except TrackerError as e:
            logger.info("registration_failed", error=e.message)
            return OperationResult.fail(e)

        if outcome.pending_confirmation:
            logger.info("registration_pending_confirmation")
            return OperationResult.ok(outcome.identity, pending_confirmation=True)

        await self._set_identity(outcome.identity)
        logger.info("registration_succeeded", user_id=outcome.identity.id)
        return OperationResult.ok(outcome.identity)

    async def login(self, email: str, password: str) -> OperationResult:
        try:
            identity = await self.service.sign_in(email, password)
        except TrackerError as e:
            logger.info("login_failed", error=e.message)
            return OperationResult.fail(e)

        await self._set_identity(identity)
        logger.info("login_succeeded", user_id=identity.id)
        return OperationResult.ok(identity)

    async def logout(self) -> OperationResult:
        """Sign out remotely if possible; the local session is always cleared."""
        try:
            await self.service.sign_out()
        except TrackerError as e:
            logger.warning("logout_revocation_failed", error=e.message)
        finally:
            await self._set_identity(None)
        logger.info("logged_out")
        return OperationResult.ok()

    async def update_profile(self, fields: Union[ProfileUpdate, dict]) -> OperationResult:
        if self.identity is None:
            return OperationResult.fail(NotAuthenticated())
        if isinstance(fields, dict):
            try:
                fields = validate_fields(ProfileUpdate, fields)
            except ValidationError as e:
                return OperationResult.fail(e)

        try:
            identity = await self.service.update_identity(fields.to_metadata())
        except TrackerError as e:
            logger.warning("profile_update_failed", error=e.message)
            return OperationResult.fail(e)

        await self._set_identity(identity)
        return OperationResult.ok(identity)
