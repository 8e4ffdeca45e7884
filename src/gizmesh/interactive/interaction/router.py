# どこで: `src/gizmesh/interactive/interaction/router.py`。
# 何を: 複数のコントローラへポインタイベントを前面順に配送し、ドラッグ中の占有を管理する。
# なぜ: 「消費されなければ下のアイテムへ流す」「占有中は占有者だけに move を届ける」を 1 箇所で保証するため。

from __future__ import annotations

import logging
from typing import Sequence

from gizmesh.interactive.interaction.controller import InteractionController
from gizmesh.interactive.interaction.state_machine import (
    LEFT_BUTTON,
    PointerEvent,
    PointerEventKind,
    Position,
)

_logger = logging.getLogger(__name__)


class PointerRouter:
    """前面から順にコントローラへイベントを配る。

    Parameters
    ----------
    controllers : Sequence[InteractionController]
        前面（先に pick されるもの）から順に並べる。
    """

    def __init__(self, controllers: Sequence[InteractionController]) -> None:
        self._controllers = list(controllers)
        self._grabber: InteractionController | None = None

    @property
    def grabber(self) -> InteractionController | None:
        """ドラッグでポインタを占有しているコントローラ。"""
        return self._grabber

    def hover(self, position: Position, *, enter: bool = False) -> bool:
        kind = PointerEventKind.ENTER if enter else PointerEventKind.HOVER_MOVE
        consumed = False
        if self._grabber is not None:
            if enter:
                # ドラッグ中にウィンドウへ戻っただけ。占有は続いている。
                return self._grabber.handle(PointerEvent(kind, position))
            # 占有中に hover move が届いた = 外部で占有が失われた。占有者に再判定させる。
            _logger.debug("pointer capture lost externally")
            grabber = self._grabber
            self._grabber = None
            consumed = grabber.handle(PointerEvent(PointerEventKind.HOVER_MOVE, position))
            if grabber.hovering:
                self._leave_others(grabber, position)
                return True

        consumer: InteractionController | None = None
        for controller in self._controllers:
            if not controller.handle(PointerEvent(kind, position)):
                continue
            consumed = True
            # hover が外れただけの消費なら、下のアイテムにも判定させる。
            if controller.hovering:
                consumer = controller
                break
        self._leave_others(consumer, position)
        return consumed

    def leave(self, position: Position) -> bool:
        consumed = False
        for controller in self._controllers:
            if controller is self._grabber:
                continue
            consumed = controller.hover_leave(position) or consumed
        return consumed

    def press(self, position: Position, button: int = LEFT_BUTTON) -> bool:
        if self._grabber is not None:
            return False
        for controller in self._controllers:
            if controller.press(position, button):
                if controller.dragging:
                    self._grabber = controller
                self._leave_others(controller, position)
                return True
        return False

    def drag(self, position: Position) -> bool:
        """ボタン押下中の移動。占有者がいなければ hover として扱う。"""
        if self._grabber is None:
            return self.hover(position)
        return self._grabber.move(position)

    def release(self, position: Position, button: int = LEFT_BUTTON) -> bool:
        grabber = self._grabber
        if grabber is None:
            return False
        consumed = grabber.release(position, button)
        if not grabber.dragging:
            self._grabber = None
        return consumed

    def _leave_others(self, keep: InteractionController | None, position: Position) -> None:
        for controller in self._controllers:
            if controller is not keep and controller.hovering and not controller.dragging:
                controller.hover_leave(position)


__all__ = ["PointerRouter"]
