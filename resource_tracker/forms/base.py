"""Shared behaviour of the form controllers."""
from typing import Optional

from resource_tracker.errors import BusyError, OperationResult, TrackerError, ValidationError


class FormController:
    """Draft holder with a single error slot and in-flight protection.

    Subclasses implement blocked() for state that forbids submitting for
    now, validate() for the local checks and _perform() for the call into
    session or collection state. After close() the form is
    detached from its view and late results are no longer applied to it.
    """

    success_path: Optional[str] = None

    def __init__(self):
        self.error: Optional[str] = None
        self.message: Optional[str] = None
        self.redirect_to: Optional[str] = None
        self.submitting = False
        self.closed = False

    def blocked(self) -> Optional[TrackerError]:
        return None

    def validate(self) -> Optional[str]:
        return None

    async def _perform(self) -> OperationResult:
        raise NotImplementedError

    def _on_success(self, result: OperationResult) -> None:
        self.redirect_to = self.success_path

    def close(self) -> None:
        self.closed = True

    async def submit(self) -> OperationResult:
        if self.submitting:
            return OperationResult.fail(BusyError("This form is already being submitted"))

        self.error = None
        self.message = None
        blocker = self.blocked()
        if blocker is not None:
            self.error = blocker.message
            return OperationResult.fail(blocker)

        local_error = self.validate()
        if local_error:
            self.error = local_error
            return OperationResult.fail(ValidationError(local_error))

        self.submitting = True
        try:
            result = await self._perform()
        finally:
            self.submitting = False

        if self.closed:
            return result
        if not result.success:
            self.error = result.error
        else:
            self._on_success(result)
        return result
