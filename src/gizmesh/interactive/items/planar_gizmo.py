# どこで: `src/gizmesh/interactive/items/planar_gizmo.py`。
# 何を: ターゲット位置の xy をそのままピクセル座標とみなす、最小の平面移動ギズモバックエンド。
# なぜ: 透視投影を持つ本格的な配置計算が無くても、GizmoItem の描画と hover/drag を通しで動かすため。

from __future__ import annotations

import numpy as np

from gizmesh.core.gizmo_visuals import GizmoMode, GizmoOptions, enabled_modes
from gizmesh.core.transform_targets import TransformArrays
from gizmesh.interactive.interaction.pick_targets import TriangleMeshPickTarget
from gizmesh.interactive.interaction.state_machine import Position
from gizmesh.interactive.items.gizmo import GizmoDrawData, GizmoInteraction


def _square(center: tuple[float, float], half: float) -> np.ndarray:
    cx, cy = center
    return np.array(
        [
            [cx - half, cy - half],
            [cx + half, cy - half],
            [cx + half, cy + half],
            [cx - half, cy + half],
        ],
        dtype=np.float32,
    )


class PlanarTranslateBackend:
    """ターゲットごとに正方形ハンドルを 1 つ描き、ドラッグで xy を平行移動する。

    Notes
    -----
    TRANSLATE_XY が無効なら何も描かず、pick もしない。
    スナップ有効時は移動量を `snap_distance` 単位に丸める。
    """

    def __init__(self) -> None:
        self._pick = TriangleMeshPickTarget()
        self._draw = GizmoDrawData.empty()
        self._anchor: Position | None = None
        self._origin: np.ndarray | None = None

    def update(
        self,
        interaction: GizmoInteraction,
        transforms: TransformArrays,
        options: GizmoOptions,
    ) -> TransformArrays | None:
        active = GizmoMode.TRANSLATE_XY in enabled_modes(options)
        if options.mode_override is not None:
            active = options.mode_override is GizmoMode.TRANSLATE_XY

        result: TransformArrays | None = None
        if active and interaction.drag_started:
            self._anchor = interaction.cursor_pos
            self._origin = transforms.positions.copy()
        elif active and interaction.dragging and self._anchor is not None and self._origin is not None:
            dx = interaction.cursor_pos[0] - self._anchor[0]
            dy = interaction.cursor_pos[1] - self._anchor[1]
            if options.snapping and options.snap_distance > 0:
                dx = round(dx / options.snap_distance) * options.snap_distance
                dy = round(dy / options.snap_distance) * options.snap_distance
            positions = self._origin.copy()
            if positions.shape[0] == transforms.positions.shape[0]:
                positions[:, 0] += dx
                positions[:, 1] += dy
                result = TransformArrays(
                    positions=positions, rotations=transforms.rotations, scales=transforms.scales
                )
                transforms = result
        if not interaction.dragging:
            self._anchor = None
            self._origin = None

        self._rebuild(transforms, options, interaction, active)
        return result

    def _rebuild(
        self,
        transforms: TransformArrays,
        options: GizmoOptions,
        interaction: GizmoInteraction,
        active: bool,
    ) -> None:
        n = len(transforms)
        if not active or n == 0:
            self._draw = GizmoDrawData.empty()
            self._pick.set_geometry(self._draw.vertices, self._draw.indices)
            return

        visuals = options.visuals
        half = 0.5 * float(visuals.gizmo_size) * 0.25 * float(options.pixels_per_point)
        vertices = np.concatenate(
            [_square((float(p[0]), float(p[1])), half) for p in transforms.positions], axis=0
        )
        highlighted = interaction.hovered or interaction.dragging
        alpha = visuals.highlight_alpha if highlighted else visuals.inactive_alpha
        r, g, b = visuals.s_color
        rgba = np.array([r / 255.0, g / 255.0, b / 255.0, min(alpha, 1.0)], dtype=np.float32)
        colors = np.tile(rgba, (vertices.shape[0], 1))
        base = np.arange(n, dtype=np.uint32)[:, None] * 4
        quad = np.array([0, 1, 2, 0, 2, 3], dtype=np.uint32)[None, :]
        indices = (base + quad).reshape(-1).astype(np.uint32)

        self._draw = GizmoDrawData(vertices=vertices, colors=colors, indices=indices)
        self._pick.set_geometry(vertices, indices)

    def draw(self) -> GizmoDrawData:
        return self._draw

    def pick_preview(self, position: Position) -> bool:
        return self._pick.pick(position)


__all__ = ["PlanarTranslateBackend"]
