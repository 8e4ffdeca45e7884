"""
どこで: `src/gizmesh/core/bezier.py`。3 次ベジェ曲線のテッセレーション。
何を: 正規化済みの制御点 4 つとアイテム寸法から、LINE_STRIP 用の頂点列を生成する。
なぜ: 曲線形状の計算をバッファ構築から切り離し、純粋関数としてテストしやすくするため。
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numba import njit  # type: ignore[attr-defined]

from gizmesh.core.mesh_data import MeshContractError

Point2D = tuple[float, float]
Size2D = tuple[float, float]


@dataclass(frozen=True, slots=True)
class ControlPoints:
    """[0,1] 正規化空間の制御点 p1..p4 と、ピクセル空間へのスケールに使うアイテム寸法。"""

    p1: Point2D = (0.0, 0.0)
    p2: Point2D = (1.0, 0.0)
    p3: Point2D = (0.0, 1.0)
    p4: Point2D = (1.0, 1.0)
    item_size: Size2D = (1.0, 1.0)

    def as_array(self) -> np.ndarray:
        """制御点を float64 shape (4, 2) の配列として返す。"""
        return np.array([self.p1, self.p2, self.p3, self.p4], dtype=np.float64)


def tessellate_bezier(
    p1: Point2D,
    p2: Point2D,
    p3: Point2D,
    p4: Point2D,
    item_size: Size2D,
    segment_count: int,
) -> np.ndarray:
    """3 次ベジェ曲線上の点列を生成する。

    Parameters
    ----------
    p1, p2, p3, p4 : tuple[float, float]
        正規化座標の制御点。
    item_size : tuple[float, float]
        (width, height)。x/y をそれぞれ独立にスケールする。
    segment_count : int
        出力頂点数。2 以上。

    Returns
    -------
    np.ndarray
        float32 型 shape (segment_count, 2) のピクセル空間座標。
        `t = i / (segment_count - 1)` で 0 と 1 の両端点を含む。

    Raises
    ------
    MeshContractError
        segment_count < 2 のとき（t の分母が 0 になる）。
    """
    n = int(segment_count)
    if n < 2:
        raise MeshContractError(f"segment_count は 2 以上である必要がある: got={segment_count}")

    try:
        width, height = item_size
    except Exception as exc:
        raise MeshContractError(f"item_size は (width, height) である必要がある: got={item_size!r}") from exc

    control = np.array([p1, p2, p3, p4], dtype=np.float64)
    if control.shape != (4, 2):
        raise MeshContractError(f"制御点は (x, y) の組である必要がある: got={control.shape}")

    return _tessellate_numba(control, float(width), float(height), n)


def tessellate_control_points(points: ControlPoints, segment_count: int) -> np.ndarray:
    """`ControlPoints` をまとめて受け取る版の `tessellate_bezier`。"""
    return tessellate_bezier(
        points.p1, points.p2, points.p3, points.p4, points.item_size, segment_count
    )


@njit(cache=True)  # type: ignore[misc]
def _tessellate_numba(control: np.ndarray, width: float, height: float, n: int) -> np.ndarray:
    out = np.empty((n, 2), dtype=np.float32)
    denom = float(n - 1)
    for i in range(n):
        t = i / denom
        inv = 1.0 - t
        b0 = inv * inv * inv
        b1 = 3.0 * inv * inv * t
        b2 = 3.0 * inv * t * t
        b3 = t * t * t
        x = b0 * control[0, 0] + b1 * control[1, 0] + b2 * control[2, 0] + b3 * control[3, 0]
        y = b0 * control[0, 1] + b1 * control[1, 1] + b2 * control[2, 1] + b3 * control[3, 1]
        out[i, 0] = x * width
        out[i, 1] = y * height
    return out


__all__ = ["ControlPoints", "tessellate_bezier", "tessellate_control_points"]
