"""
どこで: `api.lava_runner.utils`（純粋関数/小ヘルパ）。
何を: ウィンドウ寸法・シェーダパス・ログレベルを「引数 > 環境変数 > 設定ファイル > 既定」で解決する。
なぜ: `api.lava` を薄く保ち、優先順位の規則をテスト可能な関数に閉じ込めるため。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from util.utils import config_section

DEFAULT_WIDTH = 960
DEFAULT_HEIGHT = 600
DEFAULT_CAPTION = "lavafield"


@dataclass(frozen=True)
class WindowOptions:
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    caption: str = DEFAULT_CAPTION
    vsync: bool = True


def _positive_int(value: Any, default: int) -> int:
    try:
        v = int(value)
    except (TypeError, ValueError):
        return default
    return v if v > 0 else default


def resolve_window_options(
    cfg: Mapping[str, Any] | None,
    *,
    width: int | None = None,
    height: int | None = None,
) -> WindowOptions:
    """ウィンドウ設定を解決する。

    - 明示指定があればそれを優先（1 未満は `ValueError`）。
    - それ以外は設定の `window:` セクション、無ければ既定値。
    """
    section = config_section(cfg, "window")
    if width is not None and int(width) <= 0:
        raise ValueError(f"width must be > 0, got {width}")
    if height is not None and int(height) <= 0:
        raise ValueError(f"height must be > 0, got {height}")
    w = int(width) if width is not None else _positive_int(section.get("width"), DEFAULT_WIDTH)
    h = int(height) if height is not None else _positive_int(section.get("height"), DEFAULT_HEIGHT)
    caption = str(section.get("caption") or DEFAULT_CAPTION)
    vsync = bool(section.get("vsync", True))
    return WindowOptions(width=w, height=h, caption=caption, vsync=vsync)


def resolve_shader_paths(
    cfg: Mapping[str, Any] | None,
    *,
    vertex: str | None = None,
    fragment: str | None = None,
) -> tuple[str | None, str | None]:
    """シェーダファイルのパスを返す（None は同梱シェーダ）。"""
    section = config_section(cfg, "shaders")
    v = vertex if vertex is not None else section.get("vertex")
    f = fragment if fragment is not None else section.get("fragment")
    return (str(v) if v else None, str(f) if f else None)


def resolve_log_level(
    cfg: Mapping[str, Any] | None,
    *,
    explicit: str | int | None = None,
    env_level: str | None = None,
) -> str | int:
    if explicit is not None:
        return explicit
    if env_level:
        return env_level
    level = config_section(cfg, "logging").get("level")
    return level if isinstance(level, (str, int)) else "INFO"


def resolve_parameter_gui(cfg: Mapping[str, Any] | None, explicit: bool | None = None) -> bool:
    if explicit is not None:
        return bool(explicit)
    if isinstance(cfg, Mapping) and "parameter_gui" in cfg:
        return bool(cfg["parameter_gui"])
    return True


__all__ = [
    "WindowOptions",
    "resolve_window_options",
    "resolve_shader_paths",
    "resolve_log_level",
    "resolve_parameter_gui",
]
