# どこで: `src/gizmesh/interactive/runtime/pointer_bridge.py`。
# 何を: pyglet のマウスイベントをアイテムローカル座標（左上原点）へ変換して PointerRouter へ渡す。
# なぜ: pyglet 依存をこの層に閉じ込め、状態機械/ルーターをヘッドレスに保つため。

from __future__ import annotations

from typing import Any

from pyglet.window import mouse

from gizmesh.interactive.interaction.router import PointerRouter
from gizmesh.interactive.interaction.state_machine import LEFT_BUTTON


class PygletPointerBridge:
    """pyglet window のイベントハンドラ群。`window.push_handlers(bridge)` で登録する。"""

    def __init__(self, window: Any, router: PointerRouter) -> None:
        self._window = window
        self._router = router

    def _local(self, x: float, y: float) -> tuple[float, float]:
        # pyglet は左下原点。アイテム座標は左上原点。
        return (float(x), float(self._window.height) - float(y))

    @staticmethod
    def _button(button: int) -> int:
        # 左ボタン以外は状態機械で無視されるよう 0 に寄せる。
        return LEFT_BUTTON if button == mouse.LEFT else 0

    def on_mouse_enter(self, x: float, y: float) -> None:
        self._router.hover(self._local(x, y), enter=True)

    def on_mouse_leave(self, x: float, y: float) -> None:
        self._router.leave(self._local(x, y))

    def on_mouse_motion(self, x: float, y: float, _dx: float, _dy: float) -> None:
        self._router.hover(self._local(x, y))

    def on_mouse_press(self, x: float, y: float, button: int, _modifiers: int) -> None:
        self._router.press(self._local(x, y), self._button(button))

    def on_mouse_drag(
        self, x: float, y: float, _dx: float, _dy: float, buttons: int, _modifiers: int
    ) -> None:
        self._router.drag(self._local(x, y))

    def on_mouse_release(self, x: float, y: float, button: int, _modifiers: int) -> None:
        self._router.release(self._local(x, y), self._button(button))


__all__ = ["PygletPointerBridge"]
