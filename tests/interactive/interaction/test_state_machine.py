"""interactive.interaction.state_machine の遷移表をテスト。"""

from __future__ import annotations

import pytest

from gizmesh.interactive.interaction.state_machine import (
    CaptureRequest,
    InteractionContractError,
    InteractionState,
    PointerEvent,
    PointerEventKind,
    requires_pick,
    transition,
)

IDLE = InteractionState.IDLE
HOVERING = InteractionState.HOVERING
DRAGGING = InteractionState.DRAGGING

P = (10.0, 20.0)


def _ev(kind: PointerEventKind, button: int = 1) -> PointerEvent:
    return PointerEvent(kind, P, button)


@pytest.mark.parametrize(
    ("state", "kind", "picked", "expected_state", "consumed"),
    [
        (IDLE, PointerEventKind.ENTER, True, HOVERING, True),
        (IDLE, PointerEventKind.ENTER, False, IDLE, False),
        (HOVERING, PointerEventKind.ENTER, True, HOVERING, True),
        (HOVERING, PointerEventKind.ENTER, False, IDLE, True),
        (DRAGGING, PointerEventKind.ENTER, None, DRAGGING, False),
        (IDLE, PointerEventKind.HOVER_MOVE, True, HOVERING, True),
        (IDLE, PointerEventKind.HOVER_MOVE, False, IDLE, False),
        (HOVERING, PointerEventKind.HOVER_MOVE, True, HOVERING, True),
        (HOVERING, PointerEventKind.HOVER_MOVE, False, IDLE, True),
        (DRAGGING, PointerEventKind.HOVER_MOVE, True, HOVERING, True),
        (DRAGGING, PointerEventKind.HOVER_MOVE, False, IDLE, True),
        (IDLE, PointerEventKind.LEAVE, None, IDLE, False),
        (HOVERING, PointerEventKind.LEAVE, None, IDLE, True),
        (DRAGGING, PointerEventKind.LEAVE, None, DRAGGING, False),
        (IDLE, PointerEventKind.PRESS, False, IDLE, False),
        (HOVERING, PointerEventKind.PRESS, False, HOVERING, False),
        (IDLE, PointerEventKind.PRESS, True, DRAGGING, True),
        (HOVERING, PointerEventKind.PRESS, True, DRAGGING, True),
        (DRAGGING, PointerEventKind.MOVE, None, DRAGGING, True),
        (DRAGGING, PointerEventKind.RELEASE, True, HOVERING, True),
        (DRAGGING, PointerEventKind.RELEASE, False, IDLE, True),
        (IDLE, PointerEventKind.RELEASE, None, IDLE, False),
        (HOVERING, PointerEventKind.RELEASE, None, HOVERING, False),
    ],
)
def test_transition_table(state, kind, picked, expected_state, consumed) -> None:
    result = transition(state, _ev(kind), picked)
    assert result.state is expected_state
    assert result.consumed is consumed
    assert (result.update is not None) is consumed
    if result.update is not None:
        assert result.update.position == P
        assert result.update.hovered is expected_state.hovering
        assert result.update.dragging is expected_state.dragging


def test_press_on_handle_starts_drag_and_requests_grab() -> None:
    result = transition(HOVERING, _ev(PointerEventKind.PRESS), True)
    assert result.update is not None
    assert result.update.drag_started is True
    assert result.update.hovered is True
    assert result.update.dragging is True
    assert result.capture is CaptureRequest.GRAB


def test_release_requests_ungrab() -> None:
    result = transition(DRAGGING, _ev(PointerEventKind.RELEASE), False)
    assert result.capture is CaptureRequest.UNGRAB
    assert result.update is not None
    assert result.update.drag_started is False


def test_only_press_reports_drag_started() -> None:
    for state, kind, picked in [
        (IDLE, PointerEventKind.ENTER, True),
        (DRAGGING, PointerEventKind.MOVE, None),
        (DRAGGING, PointerEventKind.RELEASE, True),
    ]:
        result = transition(state, _ev(kind), picked)
        assert result.update is not None
        assert result.update.drag_started is False


@pytest.mark.parametrize("state", [IDLE, HOVERING, DRAGGING])
def test_non_left_buttons_are_ignored(state) -> None:
    for kind in (PointerEventKind.PRESS, PointerEventKind.RELEASE):
        event = _ev(kind, button=2)
        assert requires_pick(state, event) is False
        result = transition(state, event)
        assert result.state is state
        assert result.consumed is False


@pytest.mark.parametrize("state", [IDLE, HOVERING])
def test_move_without_drag_is_contract_violation(state) -> None:
    with pytest.raises(InteractionContractError):
        transition(state, _ev(PointerEventKind.MOVE))


def test_second_left_press_while_dragging_is_contract_violation() -> None:
    with pytest.raises(InteractionContractError):
        transition(DRAGGING, _ev(PointerEventKind.PRESS))


def test_missing_pick_result_is_contract_violation() -> None:
    with pytest.raises(InteractionContractError):
        transition(IDLE, _ev(PointerEventKind.HOVER_MOVE), None)


def test_requires_pick_matches_table() -> None:
    assert requires_pick(IDLE, _ev(PointerEventKind.ENTER))
    assert not requires_pick(DRAGGING, _ev(PointerEventKind.ENTER))
    assert requires_pick(DRAGGING, _ev(PointerEventKind.HOVER_MOVE))
    assert not requires_pick(HOVERING, _ev(PointerEventKind.LEAVE))
    assert requires_pick(HOVERING, _ev(PointerEventKind.PRESS))
    assert not requires_pick(DRAGGING, _ev(PointerEventKind.MOVE))
    assert requires_pick(DRAGGING, _ev(PointerEventKind.RELEASE))
    assert not requires_pick(HOVERING, _ev(PointerEventKind.RELEASE))


def test_state_flags() -> None:
    assert not IDLE.hovering and not IDLE.dragging
    assert HOVERING.hovering and not HOVERING.dragging
    assert DRAGGING.hovering and DRAGGING.dragging
