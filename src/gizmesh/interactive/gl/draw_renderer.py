# どこで: `src/gizmesh/interactive/gl/draw_renderer.py`。
# 何を: オーバーレイ（ベジェ曲線/ギズモ）用の ModernGL レンダラーをカプセル化する。
# なぜ: コンテキスト生成・シェーダ設定・メッシュ転送をアイテム側から分離し、責務を明確にするため。

from __future__ import annotations

import logging
from typing import Any

import moderngl

from gizmesh.core.mesh_data import DrawMode
from gizmesh.interactive.gl import utils as render_utils
from gizmesh.interactive.gl.gpu_mesh import GpuMesh
from gizmesh.interactive.gl.mesh_buffer import MeshBuffer
from gizmesh.interactive.gl.shader import Shader

_logger = logging.getLogger(__name__)


class OverlayRenderer:
    """スロット名ごとに GpuMesh を保持し、MeshBuffer を描画するレンダラー。"""

    def __init__(self, ctx: Any, *, viewport_size: tuple[int, int]) -> None:
        self.ctx = ctx
        self.program = Shader.create_shader(ctx)
        self._meshes: dict[str, GpuMesh] = {}
        self.viewport(*viewport_size)

    @classmethod
    def from_current_context(cls, *, viewport_size: tuple[int, int]) -> "OverlayRenderer":
        """現在の OpenGL コンテキスト（pyglet window の switch_to 後）から生成する。"""
        return cls(moderngl.create_context(require=330), viewport_size=viewport_size)

    def viewport(
        self,
        width: int,
        height: int,
        *,
        logical_size: tuple[float, float] | None = None,
    ) -> None:
        """ビューポートと射影行列をウィンドウサイズに合わせて更新する。

        `logical_size` はアイテム座標系の寸法。HiDPI でフレームバッファ寸法と異なる場合に指定する。
        """
        self.ctx.viewport = (0, 0, int(width), int(height))
        lw, lh = logical_size if logical_size is not None else (float(width), float(height))
        projection = render_utils.build_projection(float(lw), float(lh))
        self.program["projection"].write(projection.tobytes())

    def clear(self, color: tuple[float, float, float]) -> None:
        """背景色でクリアする。"""
        self.ctx.clear(*color, 1.0)

    def draw(
        self,
        slot: str,
        buffer: MeshBuffer | None,
        *,
        color: tuple[float, float, float] = (1.0, 1.0, 1.0),
    ) -> None:
        """スロットのバッファを描画する。None ならスロットの GPU リソースを破棄する。"""
        if buffer is None:
            self.drop(slot)
            return

        mesh = self._meshes.get(slot)
        if mesh is None or mesh.source_identity not in (None, buffer.identity):
            # identity が変わった = 別バッファに差し替わったので作り直す。
            if mesh is not None:
                mesh.release()
            mesh = GpuMesh(self.ctx, self.program)
            self._meshes[slot] = mesh
        mesh.upload(buffer)

        self.program["use_vertex_color"].value = bool(mesh.has_colors)
        self.program["color"].value = (*color, 1.0)
        if buffer.draw_mode is DrawMode.LINE_STRIP:
            self.ctx.line_width = float(buffer.line_width)
        mesh.render()

    def drop(self, slot: str) -> None:
        mesh = self._meshes.pop(slot, None)
        if mesh is not None:
            _logger.debug("release gpu mesh: slot=%s", slot)
            mesh.release()

    @property
    def slots(self) -> tuple[str, ...]:
        return tuple(self._meshes)

    def release(self) -> None:
        """GPU リソースを解放する。"""
        for mesh in self._meshes.values():
            mesh.release()
        self._meshes.clear()
        self.program.release()
