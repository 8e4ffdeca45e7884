from __future__ import annotations

# どこで: `src/gizmesh/interactive/gl/utils.py`。
# 何を: 描画で使う小さなユーティリティ（投影行列生成・描画モード変換）を提供する。
# なぜ: renderer 初期化等で共有し、座標系の定義を一箇所に集約するため。

from typing import Any

import numpy as np

from gizmesh.core.mesh_data import DrawMode


def build_projection(viewport_width: float, viewport_height: float) -> "np.ndarray":
    """左上原点・y 下向きのピクセル座標を NDC へ写す正射影行列（ModernGL 用の転置済み）を返す。"""
    if viewport_width <= 0 or viewport_height <= 0:
        raise ValueError(
            f"viewport は正の寸法である必要がある: got=({viewport_width}, {viewport_height})"
        )
    proj = np.array(
        [
            [2 / viewport_width, 0, 0, -1],
            [0, -2 / viewport_height, 0, 1],
            [0, 0, -1, 0],
            [0, 0, 0, 1],
        ],
        dtype="f4",
    ).T
    return proj


def gl_mode(ctx: Any, draw_mode: DrawMode) -> int:
    """DrawMode を moderngl のプリミティブ定数へ変換する。"""
    if draw_mode is DrawMode.LINE_STRIP:
        return ctx.LINE_STRIP
    return ctx.TRIANGLES
