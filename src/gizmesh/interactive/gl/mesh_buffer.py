"""
どこで: `src/gizmesh/interactive/gl/mesh_buffer.py`。
何を: フレームをまたいで再利用される CPU 側のジオメトリ格納領域（MeshBuffer）。
なぜ: 毎フレーム作り直さず、同一 identity のまま容量と内容だけを差し替えるため。
"""

from __future__ import annotations

import itertools

import numpy as np

from gizmesh.core.mesh_data import DrawMode, MeshContractError

_identity_counter = itertools.count(1)


class MeshBuffer:
    """描画モード固定・容量可変のジオメトリバッファ。

    Notes
    -----
    - `identity` は生成時に 1 度だけ払い出され、`allocate` による再確保でも変わらない。
      レンダラー側はこれをキーに GPU 転送状態（VBO 等）を保持する。
    - `draw_mode` は生成時に決まり、寿命中は変更できない。
    - `dirty` は内容が変わったことをレンダラーへ伝えるフラグ。転送後にレンダラーが落とす。
    """

    def __init__(
        self,
        draw_mode: DrawMode,
        vertex_count: int,
        index_count: int = 0,
        *,
        has_colors: bool = False,
        line_width: float = 1.0,
    ) -> None:
        self._identity = next(_identity_counter)
        self._draw_mode = draw_mode
        self._has_colors = bool(has_colors)
        self.line_width = float(line_width)
        self.vertices = np.zeros((0, 2), dtype=np.float32)
        self.colors: np.ndarray | None = np.zeros((0, 4), dtype=np.uint8) if has_colors else None
        self.indices = np.zeros((0,), dtype=np.uint32)
        self.dirty = False
        self.revision = 0
        self._released = False
        self.allocate(vertex_count, index_count)

    @property
    def identity(self) -> int:
        """生成時に払い出される安定 identity。"""
        return self._identity

    @property
    def draw_mode(self) -> DrawMode:
        return self._draw_mode

    @property
    def has_colors(self) -> bool:
        return self._has_colors

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def index_count(self) -> int:
        return int(self.indices.shape[0])

    @property
    def released(self) -> bool:
        return self._released

    def allocate(self, vertex_count: int, index_count: int = 0) -> None:
        """容量をその場で確保し直す（identity は維持する）。

        既存内容は保持しない。呼び出し側が直後に全スロットを書き込む前提。
        """
        self._ensure_alive()
        if vertex_count < 0 or index_count < 0:
            raise MeshContractError(
                f"容量は 0 以上である必要がある: vertices={vertex_count}, indices={index_count}"
            )
        self.vertices = np.zeros((int(vertex_count), 2), dtype=np.float32)
        if self._has_colors:
            self.colors = np.zeros((int(vertex_count), 4), dtype=np.uint8)
        self.indices = np.zeros((int(index_count),), dtype=np.uint32)

    def mark_dirty(self) -> None:
        """内容変更をレンダラーへ通知する。"""
        self._ensure_alive()
        self.dirty = True
        self.revision += 1

    def clear_dirty(self) -> None:
        """GPU 転送が済んだことを記録する。"""
        self.dirty = False

    def release(self) -> None:
        """バッファを破棄する。以後の操作は契約違反。"""
        self._released = True
        self.dirty = False
        self.vertices = np.zeros((0, 2), dtype=np.float32)
        self.colors = None
        self.indices = np.zeros((0,), dtype=np.uint32)

    def _ensure_alive(self) -> None:
        if self._released:
            raise MeshContractError(f"解放済みの MeshBuffer を操作した: identity={self._identity}")

    def __repr__(self) -> str:
        return (
            f"MeshBuffer(identity={self._identity}, draw_mode={self._draw_mode.value}, "
            f"vertex_count={self.vertex_count}, index_count={self.index_count}, "
            f"dirty={self.dirty})"
        )


__all__ = ["MeshBuffer"]
