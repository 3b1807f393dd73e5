"""
どこで: `engine.render.target`。
何を: サーフェス寸法ちょうどのオフスクリーン FBO（描画先バッファ）と、その内容をウィンドウの
    既定フレームバッファへ引き伸ばして提示するパス。
なぜ: ウィンドウ側のフレームバッファは OS の密度（上限なし）に従うため、密度を 2.0 に抑えた
    解像度で描くには独立したバッファが必要になるため。
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import moderngl as mgl

from .program import ProgramBuilder
from .quad import FullscreenQuad

logger = logging.getLogger(__name__)

PRESENT_VERTEX_SHADER = """
#version 330
in vec2 aPos;
out vec2 vUv;
void main() {
    vUv = aPos * 0.5 + 0.5;
    gl_Position = vec4(aPos, 0.0, 1.0);
}
"""

PRESENT_FRAGMENT_SHADER = """
#version 330
uniform sampler2D uSource;
in vec2 vUv;
out vec4 fragColor;
void main() {
    fragColor = texture(uSource, vUv);
}
"""


class OffscreenTarget:
    """サーフェス寸法の FBO を保持し、描画後にウィンドウへ提示する。"""

    def __init__(
        self,
        ctx: Any,
        quad: FullscreenQuad,
        screen_size: Callable[[], tuple[int, int]],
    ) -> None:
        """
        ctx: ModernGL コンテキスト
        quad: アップロード済みの全面クアッド（提示用 VAO に VBO を共有する）
        screen_size: ウィンドウ既定フレームバッファのピクセル寸法を返す関数
        """
        self.ctx = ctx
        self._screen_size = screen_size
        self._size: tuple[int, int] = (0, 0)
        self._texture: Any | None = None
        self._fbo: Any | None = None

        self._program = ProgramBuilder(ctx).build(
            PRESENT_VERTEX_SHADER, PRESENT_FRAGMENT_SHADER, ("uSource",)
        )
        self._program.write("uSource", 0)
        self._vao = quad.bind(self._program)

    @property
    def size(self) -> tuple[int, int]:
        return self._size

    def resize(self, width: int, height: int) -> None:
        """バッファを `width x height` で作り直す（以前の内容は破棄）。"""
        self._release_buffers()
        texture = self.ctx.texture((width, height), 4)
        texture.filter = (mgl.LINEAR, mgl.LINEAR)
        self._texture = texture
        self._fbo = self.ctx.framebuffer(color_attachments=[texture])
        self._size = (width, height)

    def set_viewport(self, x: int, y: int, width: int, height: int) -> None:
        if self._fbo is not None:
            self._fbo.viewport = (x, y, width, height)

    def use(self) -> None:
        """以降の描画先をこのバッファにする。"""
        if self._fbo is not None:
            self._fbo.use()

    def present(self) -> None:
        """バッファ内容をウィンドウ全面へ描く。"""
        if self._texture is None:
            return
        w, h = self._screen_size()
        screen = self.ctx.screen
        screen.use()
        screen.viewport = (0, 0, int(w), int(h))
        self._texture.use(location=0)
        self._vao.render(mgl.TRIANGLES, vertices=6)

    def release(self) -> None:
        self._release_buffers()
        self._vao.release()
        self._program.release()

    def _release_buffers(self) -> None:
        if self._fbo is not None:
            self._fbo.release()
        if self._texture is not None:
            self._texture.release()
        self._fbo = None
        self._texture = None


__all__ = ["OffscreenTarget"]
