"""
どこで: `src/gizmesh/interactive/gl/gpu_mesh.py`。
何を: MeshBuffer の内容を VBO/IBO/VAO へ転送し、draw call を発行する。
なぜ: GPU 転送の詳細を Renderer から切り離し、再確保や VAO の張り直しを一元化するため。
"""

from __future__ import annotations

from typing import Any

import numpy as np

from gizmesh.core.mesh_data import DrawMode
from gizmesh.interactive.gl.mesh_buffer import MeshBuffer
from gizmesh.interactive.gl.utils import gl_mode


class GpuMesh:
    """
    MeshBuffer 1 つに対応する GPU 側リソース。

    VBO: 頂点座標（2f）。CBO: 頂点色（4f1 = 正規化 uint8 x4）。IBO: uint32 インデックス。
    VAO はバッファが差し替わるときか、属性構成（色/インデックスの有無）が変わるときだけ張り直す。
    """

    def __init__(
        self,
        ctx: Any,
        program: Any,
        # 小さなオーバーレイ向けに初期確保量を抑える。必要に応じて自動拡張。
        initial_reserve: int = 64 * 1024,
    ) -> None:
        self.ctx = ctx
        self.program = program
        self.initial_reserve = int(initial_reserve)

        self.vbo = ctx.buffer(reserve=self.initial_reserve, dynamic=True)
        self.cbo = ctx.buffer(reserve=self.initial_reserve, dynamic=True)
        self.ibo = ctx.buffer(reserve=self.initial_reserve, dynamic=True)

        self._layout: tuple[bool, bool] = (False, False)
        self.vao = self._create_vao()

        # 描画ステート
        self.draw_mode = DrawMode.TRIANGLES
        self.vertex_count = 0
        self.index_count = 0
        self.source_identity: int | None = None
        self.source_revision = -1

    @property
    def has_colors(self) -> bool:
        return self._layout[0]

    @property
    def has_indices(self) -> bool:
        return self._layout[1]

    def _create_vao(self) -> Any:
        has_colors, has_indices = self._layout
        content = [(self.vbo, "2f", "in_vert")]
        if has_colors:
            content.append((self.cbo, "4f1", "in_color"))
        if has_indices:
            return self.ctx.vertex_array(
                self.program, content, index_buffer=self.ibo, index_element_size=4
            )
        return self.ctx.vertex_array(self.program, content)

    # ---------- バッファ操作 ----------
    def _grow(self, buffer: Any, size: int) -> tuple[Any, bool]:
        if size <= buffer.size:
            return buffer, False
        buffer.release()
        return self.ctx.buffer(reserve=max(size, self.initial_reserve), dynamic=True), True

    def _ensure_capacity(self, vbo_size: int, cbo_size: int, ibo_size: int, layout: tuple[bool, bool]) -> None:
        """データが大きくなったら GPU のバッファを再確保"""
        self.vbo, vbo_grown = self._grow(self.vbo, vbo_size)
        self.cbo, cbo_grown = self._grow(self.cbo, cbo_size)
        self.ibo, ibo_grown = self._grow(self.ibo, ibo_size)

        if vbo_grown or cbo_grown or ibo_grown or layout != self._layout:
            self._layout = layout
            self.vao.release()
            self.vao = self._create_vao()

    def upload(self, buffer: MeshBuffer) -> bool:
        """MeshBuffer が dirty なら GPU へ送り込む。転送したら True。"""
        if (
            not buffer.dirty
            and buffer.identity == self.source_identity
            and buffer.revision == self.source_revision
        ):
            return False

        vertices_f32 = np.ascontiguousarray(buffer.vertices, dtype=np.float32)
        colors_u8 = (
            np.ascontiguousarray(buffer.colors, dtype=np.uint8)
            if buffer.colors is not None
            else np.zeros((0, 4), dtype=np.uint8)
        )
        indices_u32 = np.ascontiguousarray(buffer.indices, dtype=np.uint32)
        layout = (buffer.has_colors, indices_u32.size > 0)
        self._ensure_capacity(vertices_f32.nbytes, colors_u8.nbytes, indices_u32.nbytes, layout)

        self.vbo.orphan()
        self.vbo.write(vertices_f32.tobytes())
        if layout[0]:
            self.cbo.orphan()
            self.cbo.write(colors_u8.tobytes())
        if layout[1]:
            self.ibo.orphan()
            self.ibo.write(indices_u32.tobytes())

        self.draw_mode = buffer.draw_mode
        self.vertex_count = int(vertices_f32.shape[0])
        self.index_count = int(indices_u32.size)
        self.source_identity = buffer.identity
        self.source_revision = buffer.revision
        buffer.clear_dirty()
        return True

    def render(self) -> None:
        """現在の内容で draw call を発行する。"""
        count = self.index_count if self.has_indices else self.vertex_count
        if count == 0:
            return
        self.vao.render(mode=gl_mode(self.ctx, self.draw_mode), vertices=count)

    def release(self) -> None:
        """GPU のメモリを解放する（スロット破棄時・終了時に使う）。"""
        self.vbo.release()
        self.cbo.release()
        self.ibo.release()
        self.vao.release()
