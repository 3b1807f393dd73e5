"""
どこで: `engine.render` の低レベルメッシュ層。
何を: 全面を覆う 2 三角形（6 頂点）の VBO/VAO を一度だけ確保し、描画呼び出しを提供する。
なぜ: 形状はプロセス寿命を通じて不変のため、毎フレームの再転送を避けて描画だけを行うため。
"""

from __future__ import annotations

from typing import Any

import moderngl as mgl
import numpy as np

POSITION_ATTRIBUTE = "aPos"

# (-1,-1),(1,-1),(-1,1) / (-1,1),(1,-1),(1,1)
QUAD_VERTICES = np.array(
    [[-1.0, -1.0], [1.0, -1.0], [-1.0, 1.0], [-1.0, 1.0], [1.0, -1.0], [1.0, 1.0]],
    dtype="f4",
)
VERTEX_COUNT = 6


class FullscreenQuad:
    """
    NDC 全面の四角形。VBO は 1 回だけ書き込み、以後は VAO を通して描画するのみ。
    """

    def __init__(self, ctx: Any) -> None:
        self.ctx = ctx
        self.vbo: Any | None = None
        self.vao: Any | None = None

    @property
    def uploaded(self) -> bool:
        return self.vao is not None

    def upload(self, program: Any) -> None:
        """頂点を GPU へ転送し、`aPos` に 2 成分 float（stride 0, 非正規化）で結び付ける。

        `program` は `Program` でも生の ModernGL プログラムでもよい。
        """
        if self.vao is not None:
            raise RuntimeError("FullscreenQuad.upload() may only be called once")
        self.vbo = self.ctx.buffer(QUAD_VERTICES.tobytes())
        self.vao = self.bind(program)

    def bind(self, program: Any) -> Any:
        """同じ VBO を別プログラムへ結び付けた VAO を返す（提示用パスで再利用）。"""
        if self.vbo is None:
            raise RuntimeError("FullscreenQuad.upload() must be called before bind()")
        handle = getattr(program, "handle", program)
        return self.ctx.vertex_array(handle, [(self.vbo, "2f", POSITION_ATTRIBUTE)])

    def render(self) -> None:
        """三角形リストとして 6 頂点を描画する。"""
        if self.vao is None:
            raise RuntimeError("FullscreenQuad.upload() has not been called")
        self.vao.render(mgl.TRIANGLES, vertices=VERTEX_COUNT)

    def release(self) -> None:
        """GPU リソースを解放する（終了時のみ）。"""
        if self.vao is not None:
            self.vao.release()
        if self.vbo is not None:
            self.vbo.release()
        self.vao = None
        self.vbo = None


__all__ = ["FullscreenQuad", "QUAD_VERTICES", "VERTEX_COUNT", "POSITION_ATTRIBUTE"]
