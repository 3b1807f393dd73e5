"""
どこで: `engine.runtime` の描画状態レコード。
何を: フレームスケジューラが 1 フレームの処理で参照するもの（Program/クアッド/サーフェス/
    レジストリ/描画先/レイアウト）をまとめた明示的な `RenderState`。
なぜ: 描画状態をクロージャやグローバルに隠さず、コンストラクタ引数として受け渡すため。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from engine.core.surface import LayoutSource, RenderTarget, SurfaceManager
from engine.render.program import Program
from engine.render.quad import FullscreenQuad
from engine.ui.parameters.registry import ParameterRegistry


class FrameTarget(RenderTarget, Protocol):
    """描画先として束縛でき、描画後に表示へ提示できるバッファ。"""

    def use(self) -> None: ...

    def present(self) -> None: ...


@dataclass(frozen=True)
class RenderState:
    """初期化済みの描画資源一式。生成後は差し替えない。"""

    program: Program
    quad: FullscreenQuad
    surface: SurfaceManager
    registry: ParameterRegistry
    target: FrameTarget
    layout: LayoutSource


__all__ = ["RenderState", "FrameTarget"]
