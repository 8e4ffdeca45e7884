# どこで: `src/gizmesh/core/mesh_data.py`。
# 何を: 1 フレーム分のメッシュ入力（頂点/色/インデックス/描画モード）のモデルと検証ロジック。
# なぜ: 不変条件の検査を書き込み前に 1 箇所で済ませ、バッファを部分的に壊さないため。

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np


class MeshContractError(AssertionError):
    """呼び出し側のバグに起因するジオメトリ契約違反。

    Notes
    -----
    復帰可能なエラーではない。`python -O` でも消えないよう `assert` 文ではなく明示的に送出する。
    """


class DrawMode(Enum):
    """頂点列のトポロジ解釈。"""

    LINE_STRIP = "line_strip"
    TRIANGLES = "triangles"


def colors_to_rgba8(colors: np.ndarray) -> np.ndarray:
    """[0,1] の float RGBA を 8bit チャンネルへ量子化する。

    各チャンネルは独立に [0,1] へクリップしたうえで `c * 255` を切り捨てる（0.5 -> 127）。
    """
    c = np.asarray(colors, dtype=np.float32)
    if c.ndim != 2 or c.shape[1] != 4:
        raise MeshContractError(f"colors は shape (N,4) である必要がある: got={c.shape}")
    return (np.clip(c, 0.0, 1.0) * np.float32(255.0)).astype(np.uint8)


@dataclass(frozen=True, slots=True)
class MeshData:
    """バッファへ書き込む直前の検証済みメッシュ入力。

    Parameters
    ----------
    vertices : np.ndarray
        float32 型 shape (N, 2) のピクセル空間座標。
    colors : np.ndarray | None
        uint8 型 shape (N, 4) の頂点色。float 入力は `colors_to_rgba8` で量子化する。
    indices : np.ndarray | None
        uint32 型 shape (M,) のインデックス。全要素が N 未満であること。
    draw_mode : DrawMode
        トポロジ。
    line_width : float
        LINE_STRIP 描画時の線幅（px）。

    Notes
    -----
    配列は writeable=False に固定する。
    """

    vertices: np.ndarray
    colors: np.ndarray | None = None
    indices: np.ndarray | None = None
    draw_mode: DrawMode = DrawMode.TRIANGLES
    line_width: float = 1.0

    def __post_init__(self) -> None:
        vertices = np.asarray(self.vertices, dtype=np.float32)
        if vertices.size == 0:
            vertices = vertices.reshape((0, 2))
        if vertices.ndim != 2 or vertices.shape[1] != 2:
            raise MeshContractError(
                f"vertices は shape (N,2) である必要がある: got={vertices.shape}"
            )
        n = int(vertices.shape[0])

        colors = self.colors
        if colors is not None:
            colors = np.asarray(colors)
            if colors.dtype != np.uint8:
                colors = colors_to_rgba8(colors)
            if colors.ndim != 2 or colors.shape[1] != 4:
                raise MeshContractError(f"colors は shape (N,4) である必要がある: got={colors.shape}")
            if colors.shape[0] != n:
                raise MeshContractError(
                    f"vertices と colors の長さが一致しない: vertices={n}, colors={colors.shape[0]}"
                )

        indices = self.indices
        if indices is not None:
            raw = np.asarray(indices)
            if raw.ndim != 1:
                raise MeshContractError(f"indices は 1 次元配列である必要がある: got={raw.shape}")
            if raw.size and (raw.min() < 0 or raw.max() >= n):
                raise MeshContractError(
                    f"indices が頂点範囲外を参照している: vertex_count={n}, "
                    f"min={int(raw.min())}, max={int(raw.max())}"
                )
            indices = raw.astype(np.uint32, copy=False)

        if n == 0 and indices is not None and indices.size:
            raise MeshContractError("頂点が空なのに indices が空ではない")

        if not isinstance(self.draw_mode, DrawMode):
            raise MeshContractError(f"draw_mode は DrawMode である必要がある: got={self.draw_mode!r}")

        # 検証後の配列は書き換え禁止にする（呼び出し側の配列とは切り離す）。
        vertices = np.array(vertices, dtype=np.float32, copy=True)
        vertices.setflags(write=False)
        if colors is not None:
            colors = np.array(colors, dtype=np.uint8, copy=True)
            colors.setflags(write=False)
        if indices is not None:
            indices = np.array(indices, dtype=np.uint32, copy=True)
            indices.setflags(write=False)

        object.__setattr__(self, "vertices", vertices)
        object.__setattr__(self, "colors", colors)
        object.__setattr__(self, "indices", indices)
        object.__setattr__(self, "line_width", float(self.line_width))

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def index_count(self) -> int:
        return 0 if self.indices is None else int(self.indices.shape[0])

    @property
    def is_empty(self) -> bool:
        """描画可能な頂点を持たないなら True。"""
        return self.vertex_count == 0


__all__ = ["DrawMode", "MeshContractError", "MeshData", "colors_to_rgba8"]
