"""
どこで: `src/gizmesh/interactive/items/bezier_curve.py`。
何を: 制御点 4 つからベジェ曲線を LINE_STRIP として描画するアイテムと、制御点をドラッグする編集コントローラ。
なぜ: プロパティ変更 → update 要求 → 描画時にバッファ再利用、という流れを 1 つのアイテムにまとめるため。
"""

from __future__ import annotations

from typing import Callable

import numpy as np

from gizmesh.core.bezier import ControlPoints, Point2D, Size2D, tessellate_control_points
from gizmesh.core.mesh_data import DrawMode, MeshData
from gizmesh.core.runtime_config import runtime_config
from gizmesh.interactive.gl.mesh_buffer import MeshBuffer
from gizmesh.interactive.gl.node_cache import RenderNodeCache
from gizmesh.interactive.interaction.controller import InteractionController
from gizmesh.interactive.interaction.pick_targets import PointPickTarget, PolylinePickTarget
from gizmesh.interactive.interaction.state_machine import Position


class BezierCurveItem:
    """ベジェ曲線を描くアイテム。

    Notes
    -----
    setter で値が変わると `needs_update` が立ち、次の `update_paint_node` でバッファを書き直す。
    変化が無いフレームでは既存バッファをそのまま返す（dirty は立てない）。
    """

    def __init__(
        self,
        *,
        size: Size2D = (1.0, 1.0),
        points: ControlPoints | None = None,
        segment_count: int | None = None,
        line_width: float | None = None,
        color: tuple[float, float, float] | None = None,
        visible: bool = True,
    ) -> None:
        cfg = runtime_config()
        base = points if points is not None else ControlPoints()
        self._p = [base.p1, base.p2, base.p3, base.p4]
        self._size = (float(size[0]), float(size[1]))
        self._segment_count = int(segment_count if segment_count is not None else cfg.bezier_segment_count)
        self._line_width = float(line_width if line_width is not None else cfg.bezier_line_width)
        self.color = color if color is not None else cfg.bezier_color
        self._visible = bool(visible)
        self._cache = RenderNodeCache()
        self._needs_update = True

    # ---------- プロパティ ----------
    def point(self, index: int) -> Point2D:
        return self._p[index]

    def set_point(self, index: int, value: Point2D) -> None:
        """制御点 `index`（0..3）を正規化座標で設定する。"""
        new = (float(value[0]), float(value[1]))
        if self._p[index] != new:
            self._p[index] = new
            self.update()

    @property
    def p1(self) -> Point2D:
        return self._p[0]

    @p1.setter
    def p1(self, value: Point2D) -> None:
        self.set_point(0, value)

    @property
    def p2(self) -> Point2D:
        return self._p[1]

    @p2.setter
    def p2(self, value: Point2D) -> None:
        self.set_point(1, value)

    @property
    def p3(self) -> Point2D:
        return self._p[2]

    @p3.setter
    def p3(self, value: Point2D) -> None:
        self.set_point(2, value)

    @property
    def p4(self) -> Point2D:
        return self._p[3]

    @p4.setter
    def p4(self, value: Point2D) -> None:
        self.set_point(3, value)

    @property
    def segment_count(self) -> int:
        return self._segment_count

    @segment_count.setter
    def segment_count(self, value: int) -> None:
        if int(value) != self._segment_count:
            self._segment_count = int(value)
            self.update()

    @property
    def line_width(self) -> float:
        return self._line_width

    @line_width.setter
    def line_width(self, value: float) -> None:
        if float(value) != self._line_width:
            self._line_width = float(value)
            self.update()

    @property
    def size(self) -> Size2D:
        return self._size

    @size.setter
    def size(self, value: Size2D) -> None:
        new = (float(value[0]), float(value[1]))
        if new != self._size:
            self._size = new
            self.update()

    @property
    def visible(self) -> bool:
        return self._visible

    @visible.setter
    def visible(self, value: bool) -> None:
        if bool(value) != self._visible:
            self._visible = bool(value)
            self.update()

    @property
    def control_points(self) -> ControlPoints:
        p1, p2, p3, p4 = self._p
        return ControlPoints(p1=p1, p2=p2, p3=p3, p4=p4, item_size=self._size)

    def handle_positions(self) -> np.ndarray:
        """制御点のピクセル座標 shape (4, 2)。"""
        return (self.control_points.as_array() * np.asarray(self._size)).astype(np.float32)

    def polyline(self) -> np.ndarray:
        """曲線の折れ線（ピクセル座標）。描画済みで変更が無ければバッファの頂点をそのまま返す。"""
        buffer = self._cache.buffer
        if not self._needs_update and buffer is not None:
            return buffer.vertices
        return tessellate_control_points(self.control_points, self._segment_count)

    # ---------- 描画 ----------
    @property
    def needs_update(self) -> bool:
        return self._needs_update

    def update(self) -> None:
        """次フレームでの再描画を要求する。"""
        self._needs_update = True

    def update_paint_node(self) -> MeshBuffer | None:
        """描画スレッドから毎フレーム呼ばれ、描画すべきバッファを返す。"""
        if not self._visible:
            self._needs_update = False
            return self._cache.update(None)
        if not self._needs_update and self._cache.buffer is not None:
            return self._cache.buffer

        vertices = tessellate_control_points(self.control_points, self._segment_count)
        request = MeshData(vertices=vertices, draw_mode=DrawMode.LINE_STRIP, line_width=self._line_width)
        buffer = self._cache.update(request)
        self._needs_update = False
        return buffer

    def release(self) -> None:
        self._cache.release()


class BezierCurveEditor(InteractionController):
    """制御点ハンドルと曲線本体を hover/ドラッグで動かすコントローラ。

    Notes
    -----
    - ハンドル（`handle_radius` px 以内）が曲線本体（`pick_tolerance` px 以内）より優先される。
    - ハンドルのドラッグはその制御点だけを、本体のドラッグは 4 点すべてを平行移動する。
    """

    def __init__(
        self,
        item: BezierCurveItem,
        *,
        handle_radius: float | None = None,
        pick_tolerance: float | None = None,
        on_capture_change: Callable[[bool], None] | None = None,
    ) -> None:
        super().__init__(on_capture_change=on_capture_change)
        self.item = item
        if handle_radius is None or pick_tolerance is None:
            cfg = runtime_config()
            handle_radius = cfg.handle_radius if handle_radius is None else handle_radius
            pick_tolerance = cfg.pick_tolerance if pick_tolerance is None else pick_tolerance
        self._handles = PointPickTarget(handle_radius)
        self._curve = PolylinePickTarget(pick_tolerance)
        self.hovered_index: int | None = None
        self.active_index: int | None = None
        self.curve_hovered = False
        self._anchor: Position | None = None
        self._origin: list[tuple[float, float]] | None = None

    def _refresh_targets(self) -> None:
        if not self.item.visible:
            self._handles.points = np.zeros((0, 2), dtype=np.float32)
            self._curve.vertices = np.zeros((0, 2), dtype=np.float32)
            return
        self._handles.points = self.item.handle_positions()
        self._curve.vertices = self.item.polyline()

    def pick_preview(self, position: Position) -> bool:
        self._refresh_targets()
        return self._handles.pick(position) or self._curve.pick(position)

    def update_interaction(
        self,
        position: Position,
        hovered: bool,
        drag_started: bool,
        dragging: bool,
    ) -> None:
        if drag_started:
            self._refresh_targets()
            self.active_index = self._handles.nearest(position)
            self._anchor = position
            self._origin = [self.item.point(i) for i in range(4)]

        if dragging:
            self._drag_to(position)
            self.hovered_index = self.active_index
            self.curve_hovered = self.active_index is None
            return

        self.active_index = None
        self._anchor = None
        self._origin = None
        if hovered:
            self.hovered_index = self._handles.nearest(position)
            self.curve_hovered = self.hovered_index is None
        else:
            self.hovered_index = None
            self.curve_hovered = False

    def _drag_to(self, position: Position) -> None:
        w, h = self.item.size
        if w <= 0 or h <= 0:
            return
        if self.active_index is not None:
            self.item.set_point(self.active_index, (position[0] / w, position[1] / h))
            return
        if self._anchor is None or self._origin is None:
            return
        dx = (position[0] - self._anchor[0]) / w
        dy = (position[1] - self._anchor[1]) / h
        for i, (x, y) in enumerate(self._origin):
            self.item.set_point(i, (x + dx, y + dy))


__all__ = ["BezierCurveEditor", "BezierCurveItem"]
