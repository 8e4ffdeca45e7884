# どこで: `src/gizmesh/interactive/interaction/controller.py`。
# 何を: 遷移関数を包み、pick/通知/ポインタ占有をホストへ配線する抽象コントローラ。
# なぜ: 具体的なハンドル型は `pick_preview` と `update_interaction` の 2 メソッドだけ実装すれば済むようにするため。

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable

from gizmesh.interactive.interaction.state_machine import (
    LEFT_BUTTON,
    CaptureRequest,
    InteractionState,
    PointerEvent,
    PointerEventKind,
    Position,
    requires_pick,
    transition,
)

_logger = logging.getLogger(__name__)


class InteractionController(ABC):
    """hover/drag 状態機械を持つインタラクティブアイテムの基底。

    Notes
    -----
    - 受理したイベントは必ず 1 回だけ `update_interaction` を呼ぶ。無視したイベントは呼ばない。
    - `handle` の戻り値が False のイベントは、ホスト側で下のアイテムへ流してよい。
    - ドラッグ開始/終了時に `on_capture_change(True/False)` でポインタ占有を要求する。
    """

    def __init__(self, *, on_capture_change: Callable[[bool], None] | None = None) -> None:
        self._state = InteractionState.IDLE
        self._on_capture_change = on_capture_change

    @abstractmethod
    def pick_preview(self, position: Position) -> bool:
        """現在のジオメトリに対する hit test。"""

    @abstractmethod
    def update_interaction(
        self,
        position: Position,
        hovered: bool,
        drag_started: bool,
        dragging: bool,
    ) -> None:
        """受理したイベントごとに 1 回呼ばれる通知。"""

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def hovering(self) -> bool:
        return self._state.hovering

    @property
    def dragging(self) -> bool:
        return self._state.dragging

    def handle(self, event: PointerEvent) -> bool:
        """イベントを 1 つ処理し、消費したかどうかを返す。"""
        picked: bool | None = None
        if requires_pick(self._state, event):
            picked = bool(self.pick_preview(event.position))

        result = transition(self._state, event, picked)
        if result.state is not self._state:
            _logger.debug(
                "interaction %s -> %s on %s",
                self._state.value,
                result.state.value,
                event.kind.value,
            )
        # 通知より先に状態を確定させ、コールバック内から state を読んでも整合するようにする。
        self._state = result.state

        if result.update is not None:
            u = result.update
            self.update_interaction(u.position, u.hovered, u.drag_started, u.dragging)

        if result.capture is not CaptureRequest.NONE and self._on_capture_change is not None:
            self._on_capture_change(result.capture is CaptureRequest.GRAB)
        return result.consumed

    # ---------- イベント種別ごとの入口 ----------
    def hover_enter(self, position: Position) -> bool:
        return self.handle(PointerEvent(PointerEventKind.ENTER, position))

    def hover_move(self, position: Position) -> bool:
        return self.handle(PointerEvent(PointerEventKind.HOVER_MOVE, position))

    def hover_leave(self, position: Position) -> bool:
        return self.handle(PointerEvent(PointerEventKind.LEAVE, position))

    def press(self, position: Position, button: int = LEFT_BUTTON) -> bool:
        return self.handle(PointerEvent(PointerEventKind.PRESS, position, button))

    def move(self, position: Position) -> bool:
        return self.handle(PointerEvent(PointerEventKind.MOVE, position))

    def release(self, position: Position, button: int = LEFT_BUTTON) -> bool:
        return self.handle(PointerEvent(PointerEventKind.RELEASE, position, button))

    def reset(self) -> None:
        """アイテム破棄時に状態を初期化する。占有中なら解放を要求する。"""
        was_dragging = self._state.dragging
        self._state = InteractionState.IDLE
        if was_dragging and self._on_capture_change is not None:
            self._on_capture_change(False)


__all__ = ["InteractionController"]
