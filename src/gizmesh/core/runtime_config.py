# どこで: `src/gizmesh/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: ウィンドウ寸法や曲線/ギズモの既定値を、コードを触らずにユーザーが差し替えられるようにするため。

from __future__ import annotations

from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

from gizmesh.core.gizmo_visuals import GizmoVisuals, sanitize_visuals


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """gizmesh の実行時設定。"""

    config_path: Path | None
    window_size: tuple[int, int]
    window_pos: tuple[int, int]
    background_color: tuple[float, float, float]
    bezier_segment_count: int
    bezier_line_width: float
    bezier_color: tuple[float, float, float]
    pick_tolerance: float
    handle_radius: float
    gizmo_visuals: GizmoVisuals


_EXPLICIT_CONFIG_PATH: Path | None = None
_CONFIG_CACHE: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    Notes
    -----
    `path` を None にすると明示指定を解除し、既定の探索に戻る。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    _CONFIG_CACHE = None
    if path is None:
        _EXPLICIT_CONFIG_PATH = None
        return
    _EXPLICIT_CONFIG_PATH = Path(str(path)).expanduser()


def _default_config_candidates() -> tuple[Path, ...]:
    cwd = Path.cwd()
    home = Path.home()
    return (
        cwd / ".gizmesh" / "config.yaml",
        home / ".config" / "gizmesh" / "config.yaml",
    )


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_tuple(value: Any, *, key: str, length: int, kind: type) -> tuple[Any, ...]:
    try:
        seq = list(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は長さ {length} の配列である必要があります: got={value!r}") from exc
    if len(seq) != length:
        raise RuntimeError(f"{key} は長さ {length} の配列である必要があります: got={value!r}")
    try:
        return tuple(kind(v) for v in seq)
    except Exception as exc:
        raise RuntimeError(f"{key} は数値配列である必要があります: got={value!r}") from exc


def _as_float(value: Any, *, key: str) -> float:
    try:
        return float(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}") from exc


def _require(mapping: dict[str, Any], name: str, *, key: str) -> Any:
    value = mapping.get(name)
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    return value


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    import yaml  # type: ignore[import-untyped]

    try:
        data = yaml.safe_load(text)
    except Exception as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")
    return dict(data)


def _load_yaml_config(path: Path) -> dict[str, Any]:
    return _load_yaml_text(path.read_text(encoding="utf-8"), source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱デフォルト config をロードして dict を返す。"""

    try:
        blob = (
            resources.files("gizmesh")
            .joinpath("resource", "default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(
            "同梱 default_config.yaml の読み込みに失敗しました"
            "（パッケージ配布物の package-data を確認してください）"
        ) from exc
    return _load_yaml_text(blob, source="gizmesh/resource/default_config.yaml")


def _merge_sections(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    # セクション単位（1 階層）でマージし、部分指定の上書きを許す。
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。

    上書き順（後勝ち）:
    1) 同梱 default_config.yaml
    2) `./.gizmesh/config.yaml` / `~/.config/gizmesh/config.yaml`
    3) `set_config_path(...)` の明示パス
    """

    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    explicit_path = _EXPLICIT_CONFIG_PATH
    if explicit_path is not None and not explicit_path.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit_path}")

    discovered_path: Path | None = None
    for p in _default_config_candidates():
        if p.is_file():
            discovered_path = p
            break

    payload = _load_packaged_default_config()
    if discovered_path is not None:
        payload = _merge_sections(payload, _load_yaml_config(discovered_path))
    if explicit_path is not None:
        payload = _merge_sections(payload, _load_yaml_config(explicit_path))

    version = payload.get("version")
    try:
        version_i = int(version)  # type: ignore[arg-type]
    except Exception as exc:
        raise RuntimeError(f"config.yaml の version は整数である必要があります: got={version!r}") from exc
    if version_i != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version_i}")

    window = _as_mapping(payload.get("window"), key="window")
    window_size = _as_tuple(
        _require(window, "size", key="window.size"), key="window.size", length=2, kind=int
    )
    if window_size[0] <= 0 or window_size[1] <= 0:
        raise ValueError(f"window.size は正の値である必要があります: got={window_size}")
    window_pos = _as_tuple(
        _require(window, "position", key="window.position"),
        key="window.position",
        length=2,
        kind=int,
    )
    background_color = _as_tuple(
        _require(window, "background_color", key="window.background_color"),
        key="window.background_color",
        length=3,
        kind=float,
    )

    bezier = _as_mapping(payload.get("bezier"), key="bezier")
    segment_count = int(
        _as_float(_require(bezier, "segment_count", key="bezier.segment_count"), key="bezier.segment_count")
    )
    if segment_count < 2:
        raise ValueError(f"bezier.segment_count は 2 以上である必要があります: got={segment_count}")
    line_width = _as_float(_require(bezier, "line_width", key="bezier.line_width"), key="bezier.line_width")
    bezier_color = _as_tuple(
        _require(bezier, "color", key="bezier.color"), key="bezier.color", length=3, kind=float
    )

    interaction = _as_mapping(payload.get("interaction"), key="interaction")
    pick_tolerance = _as_float(
        _require(interaction, "pick_tolerance", key="interaction.pick_tolerance"),
        key="interaction.pick_tolerance",
    )
    handle_radius = _as_float(
        _require(interaction, "handle_radius", key="interaction.handle_radius"),
        key="interaction.handle_radius",
    )
    if pick_tolerance < 0 or handle_radius < 0:
        raise ValueError("interaction の距離は 0 以上である必要があります")

    gizmo = _as_mapping(payload.get("gizmo"), key="gizmo")
    defaults = GizmoVisuals()
    visuals = GizmoVisuals(
        x_color=_as_tuple(gizmo.get("x_color", defaults.x_color), key="gizmo.x_color", length=3, kind=int),
        y_color=_as_tuple(gizmo.get("y_color", defaults.y_color), key="gizmo.y_color", length=3, kind=int),
        z_color=_as_tuple(gizmo.get("z_color", defaults.z_color), key="gizmo.z_color", length=3, kind=int),
        s_color=_as_tuple(gizmo.get("s_color", defaults.s_color), key="gizmo.s_color", length=3, kind=int),
        inactive_alpha=_as_float(gizmo.get("inactive_alpha", defaults.inactive_alpha), key="gizmo.inactive_alpha"),
        highlight_alpha=_as_float(
            gizmo.get("highlight_alpha", defaults.highlight_alpha), key="gizmo.highlight_alpha"
        ),
        stroke_width=_as_float(gizmo.get("stroke_width", defaults.stroke_width), key="gizmo.stroke_width"),
        gizmo_size=_as_float(gizmo.get("gizmo_size", defaults.gizmo_size), key="gizmo.gizmo_size"),
    )

    cfg = RuntimeConfig(
        config_path=explicit_path or discovered_path,
        window_size=(int(window_size[0]), int(window_size[1])),
        window_pos=(int(window_pos[0]), int(window_pos[1])),
        background_color=(
            float(background_color[0]),
            float(background_color[1]),
            float(background_color[2]),
        ),
        bezier_segment_count=segment_count,
        bezier_line_width=line_width,
        bezier_color=(float(bezier_color[0]), float(bezier_color[1]), float(bezier_color[2])),
        pick_tolerance=pick_tolerance,
        handle_radius=handle_radius,
        gizmo_visuals=sanitize_visuals(visuals),
    )
    _CONFIG_CACHE = cfg
    return cfg


__all__ = ["RuntimeConfig", "runtime_config", "set_config_path"]
