"""interactive.interaction.pick_targets をテスト。"""

from __future__ import annotations

import numpy as np

from gizmesh.interactive.interaction.pick_targets import (
    PointPickTarget,
    PolylinePickTarget,
    TriangleMeshPickTarget,
)


def test_triangle_mesh_target_hits_inside_only() -> None:
    vertices = np.array([[0, 0], [10, 0], [10, 10], [0, 10]], dtype=np.float32)
    target = TriangleMeshPickTarget(vertices, np.array([0, 1, 2, 0, 2, 3], dtype=np.uint32))
    assert target.pick((5.0, 5.0))
    assert not target.pick((15.0, 5.0))


def test_triangle_mesh_without_indices_uses_consecutive_triples() -> None:
    vertices = np.array([[0, 0], [10, 0], [0, 10]], dtype=np.float32)
    target = TriangleMeshPickTarget(vertices)
    assert target.indices.tolist() == [0, 1, 2]
    assert target.pick((2.0, 2.0))


def test_empty_triangle_target_never_picks() -> None:
    assert not TriangleMeshPickTarget().pick((0.0, 0.0))


def test_polyline_target_respects_tolerance() -> None:
    target = PolylinePickTarget(3.0, np.array([[0, 0], [100, 0]], dtype=np.float32))
    assert target.pick((50.0, 2.5))
    assert not target.pick((50.0, 3.5))


def test_point_target_returns_nearest_index() -> None:
    points = np.array([[0, 0], [20, 0], [40, 0]], dtype=np.float32)
    target = PointPickTarget(8.0, points)
    assert target.nearest((18.0, 1.0)) == 1
    assert target.nearest((30.0, 0.0)) is None
    assert not target.pick((30.0, 0.0))
