"""interactive.gl.gpu_mesh の転送判定と VAO 張り直しを偽コンテキストでテスト。"""

from __future__ import annotations

import numpy as np

from _fake_gl import FakeContext, FakeProgram
from gizmesh.core.mesh_data import DrawMode
from gizmesh.interactive.gl.buffer_builder import build_mesh_buffer
from gizmesh.interactive.gl.gpu_mesh import GpuMesh


def _triangles(n_quads: int = 1):
    vertices = np.zeros((4 * n_quads, 2), dtype=np.float32)
    colors = np.ones((4 * n_quads, 4), dtype=np.float32)
    indices = np.concatenate(
        [np.array([0, 1, 2, 0, 2, 3], dtype=np.uint32) + 4 * i for i in range(n_quads)]
    )
    return build_mesh_buffer(None, vertices, colors, indices, draw_mode=DrawMode.TRIANGLES)


def test_upload_writes_bytes_and_clears_dirty() -> None:
    ctx = FakeContext()
    mesh = GpuMesh(ctx, FakeProgram())
    buffer = _triangles()
    assert buffer is not None

    assert mesh.upload(buffer) is True
    assert not buffer.dirty
    assert mesh.vbo.data == buffer.vertices.tobytes()
    assert mesh.ibo.data == buffer.indices.tobytes()
    assert mesh.has_colors and mesh.has_indices
    assert mesh.vao.attributes == ("in_vert", "in_color")


def test_clean_buffer_is_not_uploaded_twice() -> None:
    ctx = FakeContext()
    mesh = GpuMesh(ctx, FakeProgram())
    buffer = _triangles()
    assert buffer is not None
    mesh.upload(buffer)
    orphans = mesh.vbo.orphans

    assert mesh.upload(buffer) is False
    assert mesh.vbo.orphans == orphans


def test_line_strip_layout_has_no_index_buffer() -> None:
    ctx = FakeContext()
    mesh = GpuMesh(ctx, FakeProgram())
    points = np.array([[0, 0], [5, 5], [10, 0]], dtype=np.float32)
    buffer = build_mesh_buffer(None, points, draw_mode=DrawMode.LINE_STRIP)
    assert buffer is not None

    mesh.upload(buffer)
    mesh.render()

    assert mesh.vao.index_buffer is None
    assert mesh.vao.attributes == ("in_vert",)
    assert mesh.vao.renders == [(ctx.LINE_STRIP, 3)]


def test_render_uses_index_count_for_triangles() -> None:
    ctx = FakeContext()
    mesh = GpuMesh(ctx, FakeProgram())
    buffer = _triangles(n_quads=2)
    assert buffer is not None
    mesh.upload(buffer)
    mesh.render()
    assert mesh.vao.renders == [(ctx.TRIANGLES, 12)]


def test_growth_reallocates_gpu_buffers_and_rebuilds_vao() -> None:
    ctx = FakeContext()
    mesh = GpuMesh(ctx, FakeProgram(), initial_reserve=16)
    old_vbo = mesh.vbo
    buffer = _triangles(n_quads=4)
    assert buffer is not None

    mesh.upload(buffer)

    assert old_vbo.released
    assert mesh.vbo is not old_vbo
    assert mesh.vbo.size >= buffer.vertices.nbytes
    assert mesh.vao.index_buffer is mesh.ibo


def test_release_frees_all_gpu_objects() -> None:
    ctx = FakeContext()
    mesh = GpuMesh(ctx, FakeProgram())
    mesh.release()
    assert mesh.vbo.released and mesh.cbo.released and mesh.ibo.released
    assert mesh.vao.released
