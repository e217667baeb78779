"""
ReasonForm state machine tests.
"""

from __future__ import annotations

import pytest

from core.domain.errors import DomainRejectedError, InputValidationError
from core.services.reasons import FormState, ReasonForm, ReasonFormError


@pytest.mark.asyncio
async def test_submit_runs_action_and_closes():
    form = ReasonForm(title="Reject complaint")
    form.open("o1")
    form.set_reason("  duplicate order ")
    calls: list[tuple[str, str]] = []

    async def action(target: str, reason: str) -> str:
        assert form.state is FormState.SUBMITTING
        calls.append((target, reason))
        return "ok"

    assert await form.submit(action) == "ok"
    assert calls == [("o1", "duplicate order")]
    assert form.state is FormState.CLOSED
    assert form.target is None


@pytest.mark.asyncio
async def test_empty_reason_keeps_form_editing():
    form = ReasonForm(title="Close complaint")
    form.open("p1")
    called = False

    async def action(target: str, reason: str) -> None:
        nonlocal called
        called = True

    with pytest.raises(InputValidationError):
        await form.submit(action)

    assert not called
    assert form.state is FormState.EDITING
    assert form.error == "Reason is required"


@pytest.mark.asyncio
async def test_backend_error_returns_to_editing():
    form = ReasonForm(title="Accept complaint")
    form.open("o9")
    form.set_reason("refund")

    async def action(target: str, reason: str) -> None:
        raise DomainRejectedError("Complaint already resolved", status_code=409)

    with pytest.raises(DomainRejectedError):
        await form.submit(action)

    assert form.state is FormState.EDITING
    assert form.error == "Complaint already resolved"
    assert form.reason == "refund"


def test_invalid_transitions():
    form = ReasonForm(title="Reject complaint")
    with pytest.raises(ReasonFormError):
        form.set_reason("x")

    form.open("o1")
    with pytest.raises(ReasonFormError):
        form.open("o2")

    form.cancel()
    assert form.state is FormState.CLOSED


@pytest.mark.asyncio
async def test_submit_requires_open_form():
    async def action(target: str, reason: str) -> None:
        return None

    with pytest.raises(ReasonFormError):
        await ReasonForm(title="x").submit(action)
