"""
どこで: `src/gizmesh/interactive/runtime/overlay_window.py`。
何を: pyglet + ModernGL でベジェ曲線とギズモを描き、マウスで操作できるデモウィンドウを提供する。
なぜ: バッファ再利用と hover/drag 状態機械を、実際の描画ループ上で確認できる経路を用意するため。
"""

from __future__ import annotations

import logging

import pyglet
from pyglet.gl import Config

from gizmesh.core.bezier import ControlPoints
from gizmesh.core.gizmo_visuals import GizmoOptions
from gizmesh.core.runtime_config import runtime_config, set_config_path
from gizmesh.interactive.gl.draw_renderer import OverlayRenderer
from gizmesh.interactive.interaction.router import PointerRouter
from gizmesh.interactive.items.bezier_curve import BezierCurveEditor, BezierCurveItem
from gizmesh.interactive.items.gizmo import GizmoItem
from gizmesh.interactive.items.planar_gizmo import PlanarTranslateBackend
from gizmesh.interactive.runtime.pointer_bridge import PygletPointerBridge

_logger = logging.getLogger(__name__)


def run(*, config_path: str | None = None, fps: float = 60.0) -> None:
    """デモウィンドウを開き、閉じられるまでループを回す。

    Parameters
    ----------
    config_path : str | None
        明示 config.yaml。None なら既定の探索に従う。
    fps : float
        目標フレームレート。`<=0` の場合はスロットリングしない。
    """
    if config_path is not None:
        set_config_path(config_path)
    cfg = runtime_config()

    width, height = cfg.window_size
    # 線描画を滑らかにするために MSAA を有効化
    config = Config(double_buffer=True, sample_buffers=1, samples=4)  # type: ignore[abstract]
    window = pyglet.window.Window(  # type: ignore[abstract]
        width=width,
        height=height,
        resizable=True,
        caption="gizmesh",
        config=config,
    )
    window.set_location(*cfg.window_pos)
    window.switch_to()

    renderer = OverlayRenderer.from_current_context(viewport_size=(width, height))
    curve = BezierCurveItem(
        size=(float(width), float(height)),
        points=ControlPoints(p1=(0.1, 0.8), p2=(0.3, 0.1), p3=(0.7, 0.1), p4=(0.9, 0.8)),
    )
    editor = BezierCurveEditor(curve)
    gizmo = GizmoItem(
        PlanarTranslateBackend(),
        targets=[{"position": (width * 0.5, height * 0.5, 0.0)}],
        options=GizmoOptions(visuals=cfg.gizmo_visuals),
        on_transform_updated=lambda records: _logger.debug("targets updated: %s", records),
    )
    router = PointerRouter([editor, gizmo])
    window.push_handlers(PygletPointerBridge(window, router))

    def on_resize(w: int, h: int) -> None:
        # pyglet はフレームバッファ寸法と論理寸法が異なる場合があるため、viewport は実寸で張る。
        fb_w, fb_h = window.get_framebuffer_size()
        renderer.viewport(fb_w, fb_h, logical_size=(float(w), float(h)))
        curve.size = (float(w), float(h))
        gizmo.update()

    def on_draw() -> None:
        renderer.clear(cfg.background_color)
        try:
            renderer.draw("bezier", curve.update_paint_node(), color=cfg.bezier_color)
            renderer.draw("gizmo", gizmo.update_paint_node())
        except Exception:
            _logger.exception("Failed to draw overlay frame")
            pyglet.app.exit()
            raise

    def on_close() -> None:
        curve.release()
        gizmo.destroy()
        renderer.release()

    window.push_handlers(on_resize=on_resize, on_draw=on_draw, on_close=on_close)

    # fps<=0 は「スロットリング無し」として扱う。
    pyglet.app.run(interval=None if fps <= 0 else 1.0 / float(fps))


__all__ = ["run"]
