"""Reason form state machine.

Replaces blocking "please enter a reason" prompts. A form is opened for one
target (order or problem id), edited, then submitted:

    CLOSED --open--> EDITING --submit--> SUBMITTING --ok--> CLOSED
                        ^                     |
                        +------- error -------+

Validation happens on submit; an invalid reason keeps the form in EDITING
with `error` set and the action is never called.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, TypeVar

from core.domain.errors import AdminConsoleError
from core.services.moderation import validate_reason

R = TypeVar("R")


class FormState(str, Enum):
    CLOSED = "closed"
    EDITING = "editing"
    SUBMITTING = "submitting"


class ReasonFormError(AdminConsoleError):
    """Transición no permitida en el formulario."""


@dataclass
class ReasonForm:
    title: str
    state: FormState = FormState.CLOSED
    target: str | None = None
    reason: str = ""
    error: str | None = None

    def open(self, target: str) -> None:
        if self.state is not FormState.CLOSED:
            raise ReasonFormError(f"Form already open for {self.target}")
        self.state = FormState.EDITING
        self.target = target
        self.reason = ""
        self.error = None

    def set_reason(self, text: str) -> None:
        if self.state is not FormState.EDITING:
            raise ReasonFormError("Form is not being edited")
        self.reason = text

    def cancel(self) -> None:
        if self.state is FormState.SUBMITTING:
            raise ReasonFormError("Cannot cancel while submitting")
        self._reset()

    async def submit(self, action: Callable[[str, str], Awaitable[R]]) -> R:
        """Validate and run `action(target, reason)`.

        Success closes the form. Any `AdminConsoleError` returns it to
        EDITING with the message in `error` and is re-raised.
        """

        if self.state is not FormState.EDITING or self.target is None:
            raise ReasonFormError("Form is not being edited")
        try:
            reason = validate_reason(self.reason)
        except AdminConsoleError as exc:
            self.error = exc.message
            raise

        self.state = FormState.SUBMITTING
        self.error = None
        try:
            result = await action(self.target, reason)
        except AdminConsoleError as exc:
            self.state = FormState.EDITING
            self.error = exc.message
            raise
        self._reset()
        return result

    def _reset(self) -> None:
        self.state = FormState.CLOSED
        self.target = None
        self.reason = ""
        self.error = None
