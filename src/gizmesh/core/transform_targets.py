# どこで: `src/gizmesh/core/transform_targets.py`。
# 何を: 構造化レコード列（position/rotation/scale）と平坦な並列配列を相互変換する。
# なぜ: ギズモ配置計算が扱う配列形式と、ホスト側の汎用レコード形式の橋渡しを 1 箇所に閉じるため。

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

import numpy as np

from gizmesh.core.mesh_data import MeshContractError

DEFAULT_POSITION = (0.0, 0.0, 0.0)
DEFAULT_ROTATION = (0.0, 0.0, 0.0, 1.0)  # (x, y, z, w) の単位クォータニオン
DEFAULT_SCALE = (1.0, 1.0, 1.0)


@dataclass(frozen=True, slots=True)
class TransformArrays:
    """ターゲット N 個分の変換を表す並列配列。

    Parameters
    ----------
    positions : np.ndarray
        float32 型 shape (N, 3)。
    rotations : np.ndarray
        float32 型 shape (N, 4)。(x, y, z, w)。
    scales : np.ndarray
        float32 型 shape (N, 3)。
    """

    positions: np.ndarray
    rotations: np.ndarray
    scales: np.ndarray

    def __post_init__(self) -> None:
        positions = _as_rows(self.positions, 3, key="positions")
        rotations = _as_rows(self.rotations, 4, key="rotations")
        scales = _as_rows(self.scales, 3, key="scales")
        n = positions.shape[0]
        if rotations.shape[0] != n or scales.shape[0] != n:
            raise MeshContractError(
                "positions/rotations/scales の長さが一致しない: "
                f"{n}, {rotations.shape[0]}, {scales.shape[0]}"
            )
        object.__setattr__(self, "positions", positions)
        object.__setattr__(self, "rotations", rotations)
        object.__setattr__(self, "scales", scales)

    def __len__(self) -> int:
        return int(self.positions.shape[0])


def _as_rows(value: Any, width: int, *, key: str) -> np.ndarray:
    arr = np.asarray(value, dtype=np.float32)
    if arr.size == 0:
        arr = arr.reshape((0, width))
    if arr.ndim != 2 or arr.shape[1] != width:
        raise MeshContractError(f"{key} は shape (N,{width}) である必要がある: got={arr.shape}")
    return arr


def _field(record: Mapping[str, Any], name: str, default: tuple[float, ...]) -> tuple[float, ...]:
    value = record.get(name)
    if value is None:
        return default
    try:
        seq = tuple(float(v) for v in value)
    except Exception as exc:
        raise ValueError(f"{name} は数値シーケンスである必要がある: got={value!r}") from exc
    if len(seq) != len(default):
        raise ValueError(f"{name} は長さ {len(default)} である必要がある: got={value!r}")
    return seq


def targets_to_arrays(records: Sequence[Mapping[str, Any]] | None) -> TransformArrays:
    """レコード列を並列配列へ変換する。欠けたフィールドは既定値で補う。"""
    records = list(records or [])
    positions = [_field(r, "position", DEFAULT_POSITION) for r in records]
    rotations = [_field(r, "rotation", DEFAULT_ROTATION) for r in records]
    scales = [_field(r, "scale", DEFAULT_SCALE) for r in records]
    arrays = TransformArrays(positions=positions, rotations=rotations, scales=scales)
    if len(arrays) != len(records):
        raise MeshContractError(f"配列長がレコード数と一致しない: {len(arrays)} != {len(records)}")
    return arrays


def arrays_to_targets(arrays: TransformArrays) -> list[dict[str, tuple[float, ...]]]:
    """並列配列をレコード列へ戻す。"""
    out: list[dict[str, tuple[float, ...]]] = []
    for position, rotation, scale in zip(arrays.positions, arrays.rotations, arrays.scales):
        out.append(
            {
                "position": tuple(float(v) for v in position),
                "rotation": tuple(float(v) for v in rotation),
                "scale": tuple(float(v) for v in scale),
            }
        )
    if len(out) != len(arrays):
        raise MeshContractError(f"レコード数が配列長と一致しない: {len(out)} != {len(arrays)}")
    return out


__all__ = [
    "DEFAULT_POSITION",
    "DEFAULT_ROTATION",
    "DEFAULT_SCALE",
    "TransformArrays",
    "arrays_to_targets",
    "targets_to_arrays",
]
