# どこで: `src/gizmesh/interactive/gl/node_cache.py`。
# 何を: 1 つの描画プリミティブについて、フレームをまたいで MeshBuffer を保持するスロット。
# なぜ: 「前フレームのノードを受け取り、再利用か破棄かを決めて返す」流れをレンダラーから隠すため。

from __future__ import annotations

import logging

from gizmesh.core.mesh_data import MeshData
from gizmesh.interactive.gl.buffer_builder import build_from_mesh_data
from gizmesh.interactive.gl.mesh_buffer import MeshBuffer

_logger = logging.getLogger(__name__)


class RenderNodeCache:
    """プリミティブ 1 つ分の MeshBuffer キャッシュ。"""

    def __init__(self) -> None:
        self._buffer: MeshBuffer | None = None

    @property
    def buffer(self) -> MeshBuffer | None:
        """現在保持しているバッファ（無ければ None）。"""
        return self._buffer

    def update(self, request: MeshData | None) -> MeshBuffer | None:
        """1 フレーム分の更新を行い、描画すべきバッファを返す。

        `request` が None か空なら保持中のバッファを破棄して None を返す。
        """
        if request is None or request.is_empty:
            self.release()
            return None

        self._buffer = build_from_mesh_data(self._buffer, request)
        return self._buffer

    def release(self) -> None:
        """保持中のバッファを破棄する（アイテム破棄時にも使う）。"""
        buffer = self._buffer
        if buffer is None:
            return
        _logger.debug("release mesh buffer: identity=%d", buffer.identity)
        buffer.release()
        self._buffer = None


__all__ = ["RenderNodeCache"]
