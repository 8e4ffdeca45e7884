"""interactive.items.bezier_curve（曲線アイテムと制御点編集）をテスト。"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from gizmesh.core.bezier import ControlPoints
from gizmesh.core.mesh_data import DrawMode
from gizmesh.core.runtime_config import set_config_path
from gizmesh.interactive.items.bezier_curve import BezierCurveEditor, BezierCurveItem


def _item(**kwargs) -> BezierCurveItem:
    params = dict(size=(100.0, 100.0), segment_count=33, line_width=2.0, color=(1.0, 0.0, 0.0))
    params.update(kwargs)
    return BezierCurveItem(**params)


def test_first_paint_tessellates_line_strip() -> None:
    item = _item()
    buffer = item.update_paint_node()
    assert buffer is not None
    assert buffer.draw_mode is DrawMode.LINE_STRIP
    assert buffer.vertex_count == 33
    assert buffer.line_width == 2.0
    assert buffer.vertices[0].tolist() == pytest.approx([0.0, 0.0])
    assert buffer.vertices[-1].tolist() == pytest.approx([100.0, 100.0])
    assert not item.needs_update


def test_unchanged_frame_returns_cached_buffer_without_rewrite() -> None:
    item = _item()
    buffer = item.update_paint_node()
    assert buffer is not None
    buffer.clear_dirty()
    revision = buffer.revision

    again = item.update_paint_node()
    assert again is buffer
    assert not again.dirty
    assert again.revision == revision


def test_control_point_change_rewrites_same_buffer() -> None:
    item = _item()
    buffer = item.update_paint_node()
    assert buffer is not None
    identity = buffer.identity

    item.p2 = (0.5, 0.5)
    assert item.needs_update
    updated = item.update_paint_node()
    assert updated is not None
    assert updated.identity == identity
    assert updated.dirty


def test_setting_same_value_does_not_request_update() -> None:
    item = _item()
    item.update_paint_node()
    item.p1 = (0.0, 0.0)
    item.size = (100.0, 100.0)
    assert not item.needs_update


def test_segment_count_change_resizes_in_place() -> None:
    item = _item()
    buffer = item.update_paint_node()
    assert buffer is not None
    item.segment_count = 10
    resized = item.update_paint_node()
    assert resized is buffer
    assert resized.vertex_count == 10


def test_invisible_item_releases_buffer() -> None:
    item = _item()
    buffer = item.update_paint_node()
    assert buffer is not None
    item.visible = False
    assert item.update_paint_node() is None
    assert buffer.released

    item.visible = True
    fresh = item.update_paint_node()
    assert fresh is not None
    assert fresh.identity != buffer.identity


def test_handle_positions_scale_by_size() -> None:
    item = _item(points=ControlPoints(p1=(0.1, 0.2)), size=(200.0, 50.0))
    assert item.handle_positions()[0].tolist() == pytest.approx([20.0, 10.0])


def test_defaults_follow_runtime_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    config_path = tmp_path / "config.yaml"
    config_path.write_text("version: 1\nbezier:\n  segment_count: 12\n  line_width: 5.0\n", encoding="utf-8")
    set_config_path(config_path)
    try:
        item = BezierCurveItem(size=(10.0, 10.0))
        assert item.segment_count == 12
        assert item.line_width == 5.0
    finally:
        set_config_path(None)


def test_editor_drags_nearest_control_point() -> None:
    item = _item()
    captures: list[bool] = []
    editor = BezierCurveEditor(
        item, handle_radius=10.0, pick_tolerance=6.0, on_capture_change=captures.append
    )

    assert editor.hover_enter((2.0, 2.0))
    assert editor.hovered_index == 0

    assert editor.press((2.0, 2.0))
    assert editor.active_index == 0
    assert editor.move((50.0, 40.0))
    assert item.p1 == pytest.approx((0.5, 0.4))
    assert item.needs_update

    assert editor.release((50.0, 40.0))
    assert editor.hovering and not editor.dragging
    assert editor.active_index is None
    assert editor.hovered_index == 0
    assert captures == [True, False]


def test_editor_ignores_pointer_away_from_handles() -> None:
    item = _item()
    editor = BezierCurveEditor(item, handle_radius=10.0, pick_tolerance=6.0)
    assert editor.hover_enter((90.0, 10.0)) is False
    assert editor.press((90.0, 10.0)) is False
    assert editor.hovered_index is None
    assert np.allclose(item.handle_positions()[0], (0.0, 0.0))


def test_editor_drags_whole_curve_from_its_body() -> None:
    item = _item()
    editor = BezierCurveEditor(item, handle_radius=10.0, pick_tolerance=6.0)

    # t=0.5 の点は (50, 50)
    assert editor.hover_enter((50.0, 52.0))
    assert editor.curve_hovered
    assert editor.hovered_index is None

    assert editor.press((50.0, 52.0))
    assert editor.active_index is None
    assert editor.move((60.0, 47.0))
    assert item.p1 == pytest.approx((0.1, -0.05))
    assert item.p4 == pytest.approx((1.1, 0.95))

    assert editor.release((60.0, 47.0))
    assert editor.hovering
    assert editor.curve_hovered


def test_editor_does_not_pick_invisible_curve() -> None:
    item = _item(visible=False)
    editor = BezierCurveEditor(item, handle_radius=10.0, pick_tolerance=6.0)
    assert editor.hover_enter((0.0, 0.0)) is False


def test_line_width_change_requests_update() -> None:
    item = _item()
    buffer = item.update_paint_node()
    assert buffer is not None

    item.line_width = 4.0
    assert item.needs_update
    updated = item.update_paint_node()
    assert updated is buffer
    assert updated.line_width == 4.0


def test_polyline_reuses_painted_vertices_until_changed() -> None:
    item = _item()
    buffer = item.update_paint_node()
    assert buffer is not None
    assert item.polyline() is buffer.vertices

    item.p2 = (0.5, 0.5)
    fresh = item.polyline()
    assert fresh is not buffer.vertices
    assert fresh.shape == (33, 2)
