# どこで: `src/gizmesh/core/gizmo_visuals.py`。
# 何を: ギズモの見た目/挙動設定と、ホストから来た値のサニタイズ規則を定義する。
# なぜ: NaN や負値がプロパティ経由で紛れ込んでも、配置計算へ渡る設定を常に有効に保つため。

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum

RGB8 = tuple[int, int, int]

DEFAULT_SNAP_ANGLE = math.radians(15.0)
DEFAULT_SNAP_DISTANCE = 0.1
DEFAULT_SNAP_SCALE = 0.1


class GizmoMode(Enum):
    ROTATE_VIEW = "rotate_view"
    ROTATE_X = "rotate_x"
    ROTATE_Y = "rotate_y"
    ROTATE_Z = "rotate_z"
    TRANSLATE_VIEW = "translate_view"
    TRANSLATE_X = "translate_x"
    TRANSLATE_Y = "translate_y"
    TRANSLATE_Z = "translate_z"
    TRANSLATE_XY = "translate_xy"
    TRANSLATE_XZ = "translate_xz"
    TRANSLATE_YZ = "translate_yz"
    SCALE_UNIFORM = "scale_uniform"
    SCALE_X = "scale_x"
    SCALE_Y = "scale_y"
    SCALE_Z = "scale_z"
    SCALE_XY = "scale_xy"
    SCALE_XZ = "scale_xz"
    SCALE_YZ = "scale_yz"


class GizmoOrientation(Enum):
    """変換軸の向き。GLOBAL はワールド軸、LOCAL は最後のターゲットの向き。"""

    GLOBAL = "global"
    LOCAL = "local"


class TransformPivotPoint(Enum):
    """回転の中心。"""

    MEDIAN_POINT = "median_point"
    INDIVIDUAL_ORIGINS = "individual_origins"


@dataclass(frozen=True, slots=True)
class GizmoVisuals:
    """ギズモの描画パラメータ。"""

    x_color: RGB8 = (255, 0, 125)
    y_color: RGB8 = (0, 255, 125)
    z_color: RGB8 = (0, 125, 255)
    s_color: RGB8 = (255, 255, 255)
    # 非アクティブ時のアルファ
    inactive_alpha: float = 0.7
    # ハイライト/アクティブ時のアルファ
    highlight_alpha: float = 1.0
    stroke_width: float = 4.0
    # ピクセル単位
    gizmo_size: float = 75.0


@dataclass(frozen=True, slots=True)
class GizmoOptions:
    """ギズモの挙動設定（有効モード/向き/スナップ）。"""

    translate: bool = True
    translate_plane: bool = True
    translate_view: bool = True
    rotate: bool = True
    rotate_view: bool = True
    scale: bool = True
    scale_plane: bool = True
    scale_uniform: bool = True
    mode_override: GizmoMode | None = None
    orientation: GizmoOrientation = GizmoOrientation.GLOBAL
    pivot_point: TransformPivotPoint = TransformPivotPoint.MEDIAN_POINT
    snapping: bool = False
    snap_angle: float = DEFAULT_SNAP_ANGLE
    snap_distance: float = DEFAULT_SNAP_DISTANCE
    snap_scale: float = DEFAULT_SNAP_SCALE
    pixels_per_point: float = 1.0
    visuals: GizmoVisuals = field(default_factory=GizmoVisuals)


def finite_abs(value: float, default: float) -> float:
    """有限なら絶対値、そうでなければ既定値を返す。"""
    v = float(value)
    if not math.isfinite(v):
        return float(default)
    return abs(v)


def _clamp_rgb8(color: RGB8) -> RGB8:
    r, g, b = color
    return (
        max(0, min(255, int(r))),
        max(0, min(255, int(g))),
        max(0, min(255, int(b))),
    )


def sanitize_visuals(visuals: GizmoVisuals) -> GizmoVisuals:
    d = GizmoVisuals()
    return GizmoVisuals(
        x_color=_clamp_rgb8(visuals.x_color),
        y_color=_clamp_rgb8(visuals.y_color),
        z_color=_clamp_rgb8(visuals.z_color),
        s_color=_clamp_rgb8(visuals.s_color),
        inactive_alpha=finite_abs(visuals.inactive_alpha, d.inactive_alpha),
        highlight_alpha=finite_abs(visuals.highlight_alpha, d.highlight_alpha),
        stroke_width=finite_abs(visuals.stroke_width, d.stroke_width),
        gizmo_size=finite_abs(visuals.gizmo_size, d.gizmo_size),
    )


def sanitize_options(options: GizmoOptions) -> GizmoOptions:
    """数値設定を有効範囲へ寄せた GizmoOptions を返す。"""
    return replace(
        options,
        snap_angle=finite_abs(options.snap_angle, DEFAULT_SNAP_ANGLE),
        snap_distance=finite_abs(options.snap_distance, DEFAULT_SNAP_DISTANCE),
        snap_scale=finite_abs(options.snap_scale, DEFAULT_SNAP_SCALE),
        pixels_per_point=finite_abs(options.pixels_per_point, 1.0),
        visuals=sanitize_visuals(options.visuals),
    )


def enabled_modes(options: GizmoOptions) -> frozenset[GizmoMode]:
    """有効フラグを具体的なモード集合へ展開する。"""
    modes: set[GizmoMode] = set()
    if options.translate:
        modes.update((GizmoMode.TRANSLATE_X, GizmoMode.TRANSLATE_Y, GizmoMode.TRANSLATE_Z))
    if options.translate_plane:
        modes.update((GizmoMode.TRANSLATE_XY, GizmoMode.TRANSLATE_XZ, GizmoMode.TRANSLATE_YZ))
    if options.translate_view:
        modes.add(GizmoMode.TRANSLATE_VIEW)
    if options.rotate:
        modes.update((GizmoMode.ROTATE_X, GizmoMode.ROTATE_Y, GizmoMode.ROTATE_Z))
    if options.rotate_view:
        modes.add(GizmoMode.ROTATE_VIEW)
    if options.scale:
        modes.update((GizmoMode.SCALE_X, GizmoMode.SCALE_Y, GizmoMode.SCALE_Z))
    if options.scale_plane:
        modes.update((GizmoMode.SCALE_XY, GizmoMode.SCALE_XZ, GizmoMode.SCALE_YZ))
    if options.scale_uniform:
        modes.add(GizmoMode.SCALE_UNIFORM)
    return frozenset(modes)


__all__ = [
    "DEFAULT_SNAP_ANGLE",
    "DEFAULT_SNAP_DISTANCE",
    "DEFAULT_SNAP_SCALE",
    "GizmoMode",
    "GizmoOptions",
    "GizmoOrientation",
    "GizmoVisuals",
    "TransformPivotPoint",
    "enabled_modes",
    "finite_abs",
    "sanitize_options",
    "sanitize_visuals",
]
