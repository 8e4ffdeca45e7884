# どこで: `src/gizmesh/interactive/interaction/pick_targets.py`。
# 何を: ハンドル/パーツ種別ごとの pick 実装（三角形メッシュ・折れ線・点）を提供する。
# なぜ: コントローラを hit test の幾何から切り離し、種別ごとに差し替えられるようにするため。

from __future__ import annotations

from typing import Protocol

import numpy as np

from gizmesh.core.hit_test import nearest_point, pick_polyline, pick_triangles
from gizmesh.interactive.interaction.state_machine import Position


class PickTarget(Protocol):
    def pick(self, position: Position) -> bool: ...


class TriangleMeshPickTarget:
    """三角形リストの内部を pick 対象とする（ギズモの面/矢印など）。"""

    def __init__(self, vertices: np.ndarray | None = None, indices: np.ndarray | None = None) -> None:
        self.vertices = np.zeros((0, 2), dtype=np.float32)
        self.indices = np.zeros((0,), dtype=np.uint32)
        if vertices is not None:
            self.set_geometry(vertices, indices)

    def set_geometry(self, vertices: np.ndarray, indices: np.ndarray | None) -> None:
        self.vertices = np.asarray(vertices, dtype=np.float32).reshape((-1, 2))
        if indices is None:
            # インデックス無しは頂点 3 つで 1 枚とみなす。
            indices = np.arange(self.vertices.shape[0], dtype=np.uint32)
        self.indices = np.asarray(indices, dtype=np.uint32)

    def pick(self, position: Position) -> bool:
        return pick_triangles(self.vertices, self.indices, position)


class PolylinePickTarget:
    """折れ線から `tolerance` px 以内を pick 対象とする（ベジェ曲線など）。"""

    def __init__(self, tolerance: float, vertices: np.ndarray | None = None) -> None:
        self.tolerance = float(tolerance)
        self.vertices = (
            np.zeros((0, 2), dtype=np.float32)
            if vertices is None
            else np.asarray(vertices, dtype=np.float32).reshape((-1, 2))
        )

    def pick(self, position: Position) -> bool:
        return pick_polyline(self.vertices, position, self.tolerance)


class PointPickTarget:
    """点群のうち `radius` px 以内で最も近い点を pick 対象とする（制御点ハンドル）。"""

    def __init__(self, radius: float, points: np.ndarray | None = None) -> None:
        self.radius = float(radius)
        self.points = (
            np.zeros((0, 2), dtype=np.float32)
            if points is None
            else np.asarray(points, dtype=np.float32).reshape((-1, 2))
        )

    def nearest(self, position: Position) -> int | None:
        """pick された点のインデックス。無ければ None。"""
        index = nearest_point(self.points, position, self.radius)
        return None if index < 0 else index

    def pick(self, position: Position) -> bool:
        return self.nearest(position) is not None


__all__ = ["PickTarget", "PointPickTarget", "PolylinePickTarget", "TriangleMeshPickTarget"]
