# どこで: `src/gizmesh/interactive/gl/buffer_builder.py`。
# 何を: 前フレームの MeshBuffer を再利用（必要なら容量だけ再確保）して新しいジオメトリを書き込む。
# なぜ: 毎フレームのバッファ生成/破棄を避けつつ、古いデータが残らないことを保証するため。

from __future__ import annotations

import logging

import numpy as np

from gizmesh.core.mesh_data import DrawMode, MeshContractError, MeshData
from gizmesh.interactive.gl.mesh_buffer import MeshBuffer

_logger = logging.getLogger(__name__)


def build_mesh_buffer(
    previous: MeshBuffer | None,
    vertices: np.ndarray,
    colors: np.ndarray | None = None,
    indices: np.ndarray | None = None,
    *,
    draw_mode: DrawMode,
    line_width: float = 1.0,
) -> MeshBuffer | None:
    """配列からメッシュを組み立てて MeshBuffer を返す。

    Returns
    -------
    MeshBuffer | None
        頂点が空なら None（描画すべきジオメトリ無し）。`previous` の破棄は呼び出し側の責務。
    """
    data = MeshData(
        vertices=vertices,
        colors=colors,
        indices=indices,
        draw_mode=draw_mode,
        line_width=line_width,
    )
    return build_from_mesh_data(previous, data)


def build_from_mesh_data(previous: MeshBuffer | None, data: MeshData) -> MeshBuffer | None:
    """検証済み MeshData を書き込む。

    Notes
    -----
    検証はすべて書き込み前に行うため、契約違反で例外が出ても `previous` は直前の有効な状態のまま残る。
    """
    if data.is_empty:
        return None

    has_colors = data.colors is not None
    if previous is None:
        buffer = MeshBuffer(
            data.draw_mode,
            data.vertex_count,
            data.index_count,
            has_colors=has_colors,
            line_width=data.line_width,
        )
        _logger.debug(
            "allocate mesh buffer: identity=%d vertices=%d indices=%d",
            buffer.identity,
            data.vertex_count,
            data.index_count,
        )
    else:
        if previous.released:
            raise MeshContractError(f"解放済みの MeshBuffer は再利用できない: identity={previous.identity}")
        if previous.draw_mode is not data.draw_mode:
            raise MeshContractError(
                "draw_mode はバッファの寿命中に変更できない: "
                f"buffer={previous.draw_mode.value}, request={data.draw_mode.value}"
            )
        if previous.has_colors != has_colors:
            raise MeshContractError(
                f"頂点色の有無はバッファの寿命中に変更できない: buffer={previous.has_colors}, request={has_colors}"
            )
        buffer = previous
        if buffer.vertex_count != data.vertex_count or buffer.index_count != data.index_count:
            _logger.debug(
                "resize mesh buffer: identity=%d vertices=%d->%d indices=%d->%d",
                buffer.identity,
                buffer.vertex_count,
                data.vertex_count,
                buffer.index_count,
                data.index_count,
            )
            buffer.allocate(data.vertex_count, data.index_count)
        buffer.line_width = data.line_width

    # 差分更新はせず、全スロットを上書きする。
    buffer.vertices[:] = data.vertices
    if has_colors:
        assert buffer.colors is not None
        buffer.colors[:] = data.colors
    if data.indices is not None:
        buffer.indices[:] = data.indices

    buffer.mark_dirty()
    return buffer


__all__ = ["build_from_mesh_data", "build_mesh_buffer"]
