"""core.mesh_data の検証ロジックと色量子化をテスト。"""

from __future__ import annotations

import numpy as np
import pytest

from gizmesh.core.mesh_data import DrawMode, MeshContractError, MeshData, colors_to_rgba8


def test_colors_are_truncated_and_clipped() -> None:
    colors = np.array([[0.5, 1.0, 0.0, 0.999], [-0.2, 1.7, 0.25, 1.0]], dtype=np.float32)
    rgba8 = colors_to_rgba8(colors)
    assert rgba8.dtype == np.uint8
    assert rgba8.tolist() == [[127, 255, 0, 254], [0, 255, 63, 255]]


def test_mesh_data_normalizes_dtypes_and_freezes_arrays() -> None:
    data = MeshData(
        vertices=[[0, 0], [1, 0], [0, 1]],
        colors=[[1.0, 0.0, 0.0, 1.0]] * 3,
        indices=[0, 1, 2],
    )
    assert data.vertices.dtype == np.float32
    assert data.colors is not None and data.colors.dtype == np.uint8
    assert data.indices is not None and data.indices.dtype == np.uint32
    assert data.vertex_count == 3
    assert data.index_count == 3
    assert not data.vertices.flags.writeable
    assert not data.colors.flags.writeable


def test_mesh_data_copies_caller_arrays() -> None:
    vertices = np.zeros((2, 2), dtype=np.float32)
    data = MeshData(vertices=vertices, draw_mode=DrawMode.LINE_STRIP)
    vertices[0, 0] = 5.0
    assert data.vertices[0, 0] == 0.0


def test_empty_vertices_are_allowed() -> None:
    data = MeshData(vertices=np.zeros((0, 2)), colors=np.zeros((0, 4)), indices=np.zeros((0,)))
    assert data.is_empty
    assert data.index_count == 0


def test_color_length_mismatch_is_contract_violation() -> None:
    with pytest.raises(MeshContractError):
        MeshData(vertices=[[0, 0], [1, 1]], colors=[[1.0, 1.0, 1.0, 1.0]])


def test_out_of_range_index_is_contract_violation() -> None:
    with pytest.raises(MeshContractError):
        MeshData(vertices=[[0, 0], [1, 1], [2, 2]], indices=[0, 1, 3])


def test_indices_without_vertices_is_contract_violation() -> None:
    with pytest.raises(MeshContractError):
        MeshData(vertices=np.zeros((0, 2)), indices=[0])


def test_wrong_vertex_shape_is_contract_violation() -> None:
    with pytest.raises(MeshContractError):
        MeshData(vertices=[[0, 0, 0]])


def test_contract_error_is_an_assertion_error() -> None:
    assert issubclass(MeshContractError, AssertionError)
