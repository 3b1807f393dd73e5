"""
どこで: `engine.render.errors`。
何を: 描画初期化の失敗を表す例外階層（コンテキスト/シェーダ読込/コンパイル/リンク）。
なぜ: 起動時の致命的エラーを種類ごとに区別し、ランナーで一括して報告するため。
"""

from __future__ import annotations

from typing import Literal

Stage = Literal["vertex", "fragment"]


class RenderInitError(RuntimeError):
    """初期化段階の致命的エラーの基底。再試行はしない。"""


class ContextUnavailable(RenderInitError):
    """GL コンテキストを取得できない。"""


class ShaderSourceError(RenderInitError):
    """シェーダソースを読み込めない。"""


class CompileError(RenderInitError):
    """シェーダステージのコンパイル失敗。"""

    def __init__(self, stage: Stage, log: str, source: str) -> None:
        super().__init__(f"{stage} shader compile failed:\n{log}")
        self.stage: Stage = stage
        self.log = log
        self.source = source


class LinkError(RenderInitError):
    """プログラムのリンク失敗。"""

    def __init__(self, log: str) -> None:
        super().__init__(f"program link failed:\n{log}")
        self.log = log


__all__ = [
    "Stage",
    "RenderInitError",
    "ContextUnavailable",
    "ShaderSourceError",
    "CompileError",
    "LinkError",
]
