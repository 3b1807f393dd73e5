"""
どこで: `api.lava_runner.render`
何を: RenderWindow/ModernGL コンテキストの生成と、Program/クアッド/描画先/サーフェスを
    初期化順に組み立てた `RenderState` の構築。任意で GL エラーのポーリングも登録する。
なぜ: `api.lava` を薄くし、描画初期化の責務（と失敗の分類）を分離するため。

初期化順:
    コンテキスト → シェーダビルド → クアッド転送 → 描画先/サーフェス → RenderState
いずれかが失敗した時点で `RenderInitError` 系を送出し、スケジューラは生成されない。
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import moderngl

from engine.core.surface import SurfaceManager
from engine.render.errors import ContextUnavailable
from engine.render.program import ProgramBuilder
from engine.render.quad import FullscreenQuad
from engine.render.shader import ShaderSources
from engine.render.target import OffscreenTarget
from engine.render.uniforms import UNIFORM_NAMES
from engine.runtime.frame import RenderState
from engine.ui.parameters.registry import ParameterRegistry

from .utils import WindowOptions

logger = logging.getLogger(__name__)


def create_window_and_context(options: WindowOptions):
    """ウィンドウと ModernGL コンテキストを生成して返す。

    Returns
    -------
    (rendering_window, mgl_ctx)

    Raises
    ------
    ContextUnavailable
        ウィンドウまたは GL 3.3 コンテキストを取得できない。
    """
    from engine.core.render_window import RenderWindow

    try:
        rendering_window = RenderWindow(
            options.width,
            options.height,
            caption=options.caption,
            vsync=options.vsync,
        )  # type: ignore[abstract]
    except Exception as e:
        raise ContextUnavailable(f"cannot create window: {e}") from e

    try:
        mgl_ctx: moderngl.Context = moderngl.create_context()
    except Exception as e:
        rendering_window.close()
        raise ContextUnavailable(f"cannot create GL context: {e}") from e
    logger.info(
        "window %dx%d, GL %s",
        options.width,
        options.height,
        mgl_ctx.info.get("GL_VERSION", "?"),
    )
    return rendering_window, mgl_ctx


def build_render_state(
    ctx: Any,
    rendering_window: Any,
    sources: ShaderSources,
    registry: ParameterRegistry,
    *,
    max_density: float,
) -> RenderState:
    """描画資源を初期化順に組み立てる。

    `rendering_window` は LayoutSource（`layout_size`/`pixel_density`）と `screen_size()` を持つこと。
    失敗時は途中まで確保した GPU 資源を解放してから例外を送出する。
    """
    program = ProgramBuilder(ctx).build(sources.vertex, sources.fragment, UNIFORM_NAMES)
    quad = FullscreenQuad(ctx)
    try:
        quad.upload(program)
        target = OffscreenTarget(ctx, quad, rendering_window.screen_size)
    except Exception:
        quad.release()
        program.release()
        raise
    surface = SurfaceManager(target, max_density=max_density)
    return RenderState(
        program=program,
        quad=quad,
        surface=surface,
        registry=registry,
        target=target,
        layout=rendering_window,
    )


def release_render_state(state: RenderState) -> None:
    """GPU 資源を生成の逆順に解放する。"""
    release = getattr(state.target, "release", None)
    if callable(release):
        release()
    state.quad.release()
    state.program.release()


def check_gl_error(ctx: Any) -> str | None:
    """GL エラーフラグを読み、エラーがあれば名前を返す（ログは warning）。"""
    err = ctx.error
    if err and err != "GL_NO_ERROR":
        logger.warning("GL error reported: %s", err)
        return str(err)
    return None


def schedule_gl_error_poll(ctx: Any, interval: float) -> Callable[[float], None]:
    """`pyglet.clock` で GL エラーを定期的に読む。戻り値は unschedule 用のハンドル。"""
    import pyglet

    def _poll(_dt: float) -> None:
        check_gl_error(ctx)

    pyglet.clock.schedule_interval(_poll, float(interval))
    logger.debug("GL error poll every %.2fs", interval)
    return _poll


__all__ = [
    "create_window_and_context",
    "build_render_state",
    "release_render_state",
    "check_gl_error",
    "schedule_gl_error_poll",
]
