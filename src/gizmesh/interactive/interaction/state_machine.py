"""
どこで: `src/gizmesh/interactive/interaction/state_machine.py`。
何を: ポインタイベントと pick 結果から hover/drag 状態を遷移させる純粋関数。
なぜ: 状態をフラグの組み合わせで散らさず、遷移表そのものを単体でテストできるようにするため。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

Position = tuple[float, float]

LEFT_BUTTON = 1


class InteractionContractError(AssertionError):
    """イベント配送側のバグ（ドラッグしていないのに captured move が届いた等）。"""


class InteractionState(Enum):
    IDLE = "idle"
    HOVERING = "hovering"
    DRAGGING = "dragging"

    @property
    def hovering(self) -> bool:
        # ドラッグ中は常に hover 扱い。
        return self is not InteractionState.IDLE

    @property
    def dragging(self) -> bool:
        return self is InteractionState.DRAGGING


class PointerEventKind(Enum):
    ENTER = "enter"
    HOVER_MOVE = "hover_move"
    LEAVE = "leave"
    PRESS = "press"
    MOVE = "move"
    RELEASE = "release"


class CaptureRequest(Enum):
    """ホストへ要求するポインタ占有の変化。"""

    NONE = "none"
    GRAB = "grab"
    UNGRAB = "ungrab"


@dataclass(frozen=True, slots=True)
class PointerEvent:
    """アイテムローカル座標のポインタイベント。"""

    kind: PointerEventKind
    position: Position
    button: int = LEFT_BUTTON


@dataclass(frozen=True, slots=True)
class InteractionUpdate:
    """`update_interaction` に渡す引数の束。"""

    position: Position
    hovered: bool
    drag_started: bool
    dragging: bool


@dataclass(frozen=True, slots=True)
class Transition:
    """1 イベント分の遷移結果。

    Notes
    -----
    `consumed` が True のとき `update` は必ず非 None、False のとき必ず None。
    """

    state: InteractionState
    update: InteractionUpdate | None
    consumed: bool
    capture: CaptureRequest = CaptureRequest.NONE


def requires_pick(state: InteractionState, event: PointerEvent) -> bool:
    """この (state, event) の遷移に pick 結果が必要かを返す。"""
    kind = event.kind
    if kind in (PointerEventKind.PRESS, PointerEventKind.RELEASE) and event.button != LEFT_BUTTON:
        return False
    if kind in (PointerEventKind.ENTER, PointerEventKind.HOVER_MOVE):
        # ドラッグ中の enter は無視するので pick 不要。hover move はキャプチャ喪失として再判定する。
        return not (state is InteractionState.DRAGGING and kind is PointerEventKind.ENTER)
    if kind is PointerEventKind.PRESS:
        return state is not InteractionState.DRAGGING
    if kind is PointerEventKind.RELEASE:
        # ドラッグ終了位置が pick 範囲外のこともあるので、hover は再計算する。
        return state is InteractionState.DRAGGING
    return False


def _ignored(state: InteractionState) -> Transition:
    return Transition(state=state, update=None, consumed=False)


def _accepted(
    state: InteractionState,
    position: Position,
    *,
    drag_started: bool = False,
    capture: CaptureRequest = CaptureRequest.NONE,
) -> Transition:
    update = InteractionUpdate(
        position=position,
        hovered=state.hovering,
        drag_started=drag_started,
        dragging=state.dragging,
    )
    return Transition(state=state, update=update, consumed=True, capture=capture)


def transition(
    state: InteractionState,
    event: PointerEvent,
    picked: bool | None = None,
) -> Transition:
    """(state, event, pick 結果) から次状態・通知・消費有無を決める。

    Parameters
    ----------
    state : InteractionState
        現在状態。
    event : PointerEvent
        届いたイベント。
    picked : bool | None
        `requires_pick(state, event)` が True のときの pick 結果。不要な遷移では無視する。

    Raises
    ------
    InteractionContractError
        pick 結果が必要なのに None のとき、ドラッグ外で captured move が届いたとき、
        ドラッグ中に再度左プレスが届いたとき。
    """
    kind = event.kind
    pos = event.position

    if requires_pick(state, event) and picked is None:
        raise InteractionContractError(f"pick 結果が必要な遷移: state={state.value}, event={kind.value}")

    if kind in (PointerEventKind.ENTER, PointerEventKind.HOVER_MOVE):
        if state is InteractionState.DRAGGING and kind is PointerEventKind.ENTER:
            return _ignored(state)
        # DRAGGING 中の hover move はキャプチャが外部で失われた印。新規の hover 判定として扱う。
        if picked:
            return _accepted(InteractionState.HOVERING, pos)
        if state is InteractionState.IDLE:
            return _ignored(state)
        return _accepted(InteractionState.IDLE, pos)

    if kind is PointerEventKind.LEAVE:
        if state is InteractionState.HOVERING:
            return _accepted(InteractionState.IDLE, pos)
        # IDLE は対象外、DRAGGING はキャプチャ中なので leave を届けない。
        return _ignored(state)

    if kind is PointerEventKind.PRESS:
        if event.button != LEFT_BUTTON:
            return _ignored(state)
        if state is InteractionState.DRAGGING:
            raise InteractionContractError("ドラッグ中に左ボタンの press が届いた")
        if not picked:
            return _ignored(state)
        return _accepted(
            InteractionState.DRAGGING, pos, drag_started=True, capture=CaptureRequest.GRAB
        )

    if kind is PointerEventKind.MOVE:
        if state is not InteractionState.DRAGGING:
            raise InteractionContractError(f"ドラッグしていない状態で captured move が届いた: state={state.value}")
        return _accepted(state, pos)

    if kind is PointerEventKind.RELEASE:
        if state is not InteractionState.DRAGGING or event.button != LEFT_BUTTON:
            return _ignored(state)
        next_state = InteractionState.HOVERING if picked else InteractionState.IDLE
        return _accepted(next_state, pos, capture=CaptureRequest.UNGRAB)

    raise InteractionContractError(f"未知のイベント種別: {kind!r}")


__all__ = [
    "CaptureRequest",
    "InteractionContractError",
    "InteractionState",
    "InteractionUpdate",
    "LEFT_BUTTON",
    "PointerEvent",
    "PointerEventKind",
    "Position",
    "Transition",
    "requires_pick",
    "transition",
]
