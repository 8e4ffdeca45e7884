# どこで: `src/gizmesh/__init__.py`。
# 何を: ルート `gizmesh` パッケージを定義する。
# なぜ: ヘッドレスに使える部品（テッセレーション/バッファ構築/状態機械）の import 起点を揃えるため。

from __future__ import annotations

from gizmesh.core.bezier import ControlPoints, tessellate_bezier
from gizmesh.core.mesh_data import DrawMode, MeshContractError, MeshData
from gizmesh.interactive.gl.buffer_builder import build_mesh_buffer
from gizmesh.interactive.gl.mesh_buffer import MeshBuffer
from gizmesh.interactive.gl.node_cache import RenderNodeCache
from gizmesh.interactive.interaction.controller import InteractionController
from gizmesh.interactive.interaction.state_machine import (
    InteractionContractError,
    InteractionState,
    transition,
)

__all__ = [
    "ControlPoints",
    "DrawMode",
    "InteractionContractError",
    "InteractionController",
    "InteractionState",
    "MeshBuffer",
    "MeshContractError",
    "MeshData",
    "RenderNodeCache",
    "build_mesh_buffer",
    "tessellate_bezier",
    "transition",
]
