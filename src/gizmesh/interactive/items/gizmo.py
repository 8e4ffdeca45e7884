# どこで: `src/gizmesh/interactive/items/gizmo.py`。
# 何を: 外部の配置計算（GizmoBackend）が出す頂点/色/インデックスを描画し、hover/drag を配線するギズモアイテム。
# なぜ: ギズモ固有の数学をバックエンドへ閉じ込め、バッファ再利用と状態機械だけをここで担うため。

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Mapping, Protocol, Sequence

import numpy as np

from gizmesh.core.gizmo_visuals import GizmoOptions, sanitize_options
from gizmesh.core.mesh_data import DrawMode, MeshContractError, MeshData
from gizmesh.core.transform_targets import TransformArrays, arrays_to_targets, targets_to_arrays
from gizmesh.interactive.gl.mesh_buffer import MeshBuffer
from gizmesh.interactive.gl.node_cache import RenderNodeCache
from gizmesh.interactive.interaction.controller import InteractionController
from gizmesh.interactive.interaction.state_machine import Position

_logger = logging.getLogger(__name__)

TargetRecord = Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class GizmoInteraction:
    """バックエンドへ渡すポインタ状態。"""

    cursor_pos: Position = (0.0, 0.0)
    hovered: bool = False
    drag_started: bool = False
    dragging: bool = False


@dataclass(frozen=True, slots=True)
class GizmoDrawData:
    """バックエンドが出力する描画データ（float RGBA、三角形リスト）。"""

    vertices: np.ndarray
    colors: np.ndarray
    indices: np.ndarray

    @classmethod
    def empty(cls) -> "GizmoDrawData":
        return cls(
            vertices=np.zeros((0, 2), dtype=np.float32),
            colors=np.zeros((0, 4), dtype=np.float32),
            indices=np.zeros((0,), dtype=np.uint32),
        )


class GizmoBackend(Protocol):
    """ギズモの配置計算（3D → スクリーン投影・ハンドル形状・変換適用）。"""

    def update(
        self,
        interaction: GizmoInteraction,
        transforms: TransformArrays,
        options: GizmoOptions,
    ) -> TransformArrays | None:
        """インタラクションを適用し、ターゲットが変化したら新しい変換を返す。"""
        ...

    def draw(self) -> GizmoDrawData: ...

    def pick_preview(self, position: Position) -> bool: ...


class GizmoItem(InteractionController):
    """ギズモ 1 つ分のアイテム。"""

    def __init__(
        self,
        backend: GizmoBackend,
        *,
        targets: Sequence[TargetRecord] | None = None,
        options: GizmoOptions | None = None,
        visible: bool = True,
        on_transform_updated: Callable[[list[dict[str, tuple[float, ...]]]], None] | None = None,
        on_capture_change: Callable[[bool], None] | None = None,
    ) -> None:
        super().__init__(on_capture_change=on_capture_change)
        self._backend = backend
        self._targets: list[TargetRecord] = list(targets or [])
        self._options = sanitize_options(options if options is not None else GizmoOptions())
        self._visible = bool(visible)
        self._on_transform_updated = on_transform_updated
        self._cache = RenderNodeCache()
        self._needs_update = True
        self._updated_since_last_draw = False
        # ドラッグ中にターゲットが動いても同じ操作を再適用できるよう、最後の操作を保持する。
        self._last_interaction: GizmoInteraction | None = None

    # ---------- プロパティ ----------
    @property
    def targets(self) -> list[TargetRecord]:
        return list(self._targets)

    @targets.setter
    def targets(self, value: Sequence[TargetRecord] | None) -> None:
        self._targets = list(value or [])
        self.update()

    @property
    def options(self) -> GizmoOptions:
        return self._options

    @options.setter
    def options(self, value: GizmoOptions) -> None:
        self._options = sanitize_options(value)
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
    def needs_update(self) -> bool:
        return self._needs_update

    @property
    def last_interaction(self) -> GizmoInteraction | None:
        return self._last_interaction

    def update(self) -> None:
        self._needs_update = True

    # ---------- InteractionController ----------
    def pick_preview(self, position: Position) -> bool:
        return bool(self._backend.pick_preview(position))

    def update_interaction(
        self,
        position: Position,
        hovered: bool,
        drag_started: bool,
        dragging: bool,
    ) -> None:
        self.update()
        interaction = GizmoInteraction(
            cursor_pos=(float(position[0]), float(position[1])),
            hovered=hovered,
            drag_started=drag_started,
            dragging=dragging,
        )
        result = self._update_backend(interaction)
        if result is not None:
            records = arrays_to_targets(result)
            self._targets = list(records)
            if self._on_transform_updated is not None:
                self._on_transform_updated(records)
        self._last_interaction = replace(interaction, drag_started=False)

    def _update_backend(self, interaction: GizmoInteraction) -> TransformArrays | None:
        transforms = targets_to_arrays(self._targets)
        self._updated_since_last_draw = True
        return self._backend.update(interaction, transforms, self._options)

    # ---------- 描画 ----------
    def update_paint_node(self) -> MeshBuffer | None:
        """描画スレッドから呼ばれ、描画すべきバッファを返す（不可視/ターゲット無しなら None）。"""
        if not self._updated_since_last_draw:
            # カメラ等が変わっただけのフレームでも、描画前にバックエンドの update が必要。
            interaction = self._last_interaction or GizmoInteraction()
            if interaction.drag_started:
                raise MeshContractError("drag_started のインタラクションを再適用しようとした")
            self._update_backend(interaction)
        self._updated_since_last_draw = False
        self._needs_update = False

        if self._targets and self._visible:
            draw_data = self._backend.draw()
        else:
            draw_data = GizmoDrawData.empty()

        request = MeshData(
            vertices=draw_data.vertices,
            colors=draw_data.colors,
            indices=draw_data.indices,
            draw_mode=DrawMode.TRIANGLES,
        )
        buffer = self._cache.update(request)
        if buffer is None:
            _logger.debug("gizmo has no geometry this frame")
        return buffer

    def destroy(self) -> None:
        """アイテム破棄。バッファを解放し、状態機械を初期化する。"""
        self._cache.release()
        self.reset()


__all__ = ["GizmoBackend", "GizmoDrawData", "GizmoInteraction", "GizmoItem"]
