"""
どこで: `engine.render.shader`。
何を: 頂点/フラグメントのシェーダソースを読み込む（既定は同梱の `shaders/lava.*`）。
なぜ: ソース供給（同梱ファイル/設定で指定したファイル）とビルドを分け、差し替えを容易にするため。
"""

from __future__ import annotations

from dataclasses import dataclass
from importlib import resources
from pathlib import Path

from .errors import ShaderSourceError

DEFAULT_VERTEX = "lava.vert"
DEFAULT_FRAGMENT = "lava.frag"


@dataclass(frozen=True)
class ShaderSources:
    vertex: str
    fragment: str


def load_shader_sources(
    vertex_path: str | Path | None = None,
    fragment_path: str | Path | None = None,
) -> ShaderSources:
    """シェーダソースを読み込む。

    Parameters
    ----------
    vertex_path, fragment_path : str | Path | None
        読み込むファイル。None の場合は同梱の既定シェーダを使う。

    Raises
    ------
    ShaderSourceError
        ファイルが読めない（UTF-8 として復号できない場合を含む）、または中身が空。
    """
    return ShaderSources(
        vertex=_read(vertex_path, DEFAULT_VERTEX),
        fragment=_read(fragment_path, DEFAULT_FRAGMENT),
    )


def _read(path: str | Path | None, bundled: str) -> str:
    try:
        if path is None:
            bundle = resources.files(__package__).joinpath("shaders")
            text = bundle.joinpath(bundled).read_text(encoding="utf-8")
            origin = f"<bundled {bundled}>"
        else:
            text = Path(path).expanduser().read_text(encoding="utf-8")
            origin = str(path)
    except (OSError, UnicodeDecodeError) as e:
        raise ShaderSourceError(f"cannot read shader source: {path or bundled} ({e})") from e
    if not text.strip():
        raise ShaderSourceError(f"shader source is empty: {origin}")
    return text


__all__ = ["ShaderSources", "load_shader_sources"]
