"""
どこで: `api.lava`（実行ランナー）。
何を: 溶岩フィールドのシェーダを全画面クアッドで毎フレーム描画し、パラメータパネルの値を
    uniform として流し込む。設定解決/GL 初期化/フレーム駆動/終了処理を 1 本にまとめる。
なぜ: 少ない記述（`run_lava()` または `lavafield` コマンド）で対話的な描画を起動できるようにするため。

主エントリポイント:
- `run_lava(*, width=None, height=None, vertex_shader=None, fragment_shader=None, ...)`

実行フロー（概要）:
1) 設定解決: `util.utils.load_config()`（YAML）と `common.settings`（`LAVA_*` 環境変数）を読み、
   ログレベル/ウィンドウ寸法/シェーダパスを「引数 > 環境変数 > 設定 > 既定」で決める。
2) シェーダ読込: 既定は同梱の `engine/render/shaders/lava.{vert,frag}`。
3) パラメータ: 既定スキーマに設定の `parameters:` を適用し、`ParameterStore` を構築。
   `parameter_values`（CLI の `--set`）は初期 override として書き込む。
4) `init_only=True` ならここで終了（ウィンドウ/GL を作らない）。
5) ウィンドウ/GL: `RenderWindow`（pyglet）と ModernGL コンテキストを生成し、
   Program ビルド → クアッド転送 → 描画先/サーフェスの順に `RenderState` を構築。
   失敗は `RenderInitError` 系としてそのまま送出する（スケジューラは作らない）。
6) パネル: `use_parameter_gui` 有効時に Dear PyGui のパネルを開く（未導入なら警告して継続）。
7) フレーム駆動: `FrameScheduler.start()` 後に `pyglet.app.run()`。
   ウィンドウを閉じる（ESC を含む）とパネル/GL 資源を解放して終了する。

例:
    from api import run_lava
    run_lava(width=1280, height=720, parameter_values={"mode": "1", "palette": "2"})

注意/制限:
- ヘッドレス/仮想環境では `pyglet`/`ModernGL` の初期化に失敗する場合がある
  （`ContextUnavailable`）。
- 描画ループに停止 API は無い。ウィンドウ/プロセスの終了まで回り続ける。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from common import settings
from common.logging import setup_default_logging
from engine.render.shader import load_shader_sources
from engine.ui.parameters.registry import ParameterRegistry
from util.utils import load_config

from .lava_runner.panel import open_parameter_panel
from .lava_runner.params import build_parameter_store, resolve_schema
from .lava_runner.utils import (
    resolve_log_level,
    resolve_parameter_gui,
    resolve_shader_paths,
    resolve_window_options,
)

logger = logging.getLogger(__name__)


def run_lava(
    *,
    width: int | None = None,
    height: int | None = None,
    vertex_shader: str | Path | None = None,
    fragment_shader: str | Path | None = None,
    use_parameter_gui: bool | None = None,
    parameter_values: Mapping[str, Any] | None = None,
    config_path: str | Path | None = None,
    log_level: str | int | None = None,
    init_only: bool = False,
) -> None:
    """溶岩フィールドを描画するウィンドウを開き、閉じられるまで描画を続ける。

    Parameters
    ----------
    width, height : int | None
        ウィンドウ寸法（論理ピクセル）。None で設定 `window:` から解決（無ければ 960x600）。
    vertex_shader, fragment_shader : str | Path | None
        シェーダファイル。None で設定 `shaders:`、それも無ければ同梱シェーダ。
    use_parameter_gui : bool | None
        パラメータパネルの有効/無効。None で設定 `parameter_gui`（既定 True）。
    parameter_values : Mapping[str, Any] | None
        起動時の値（例: `{"octaves": "6"}`）。未知の名前は `ValueError`。
    config_path : str | Path | None
        既定設定の上に重ねる YAML。
    log_level : str | int | None
        ロギングレベル。None で `LAVA_LOG_LEVEL`、設定 `logging.level`、`INFO` の順。
    init_only : bool, default False
        True で設定/シェーダ/パラメータの検証のみ行い、ウィンドウを作らずに戻る。

    Raises
    ------
    RenderInitError
        コンテキスト取得・シェーダ読込・コンパイル・リンクのいずれかに失敗。
    """
    # ---- ① 設定 ---------------------------------------------------
    cfg = load_config(config_path)
    settings.reload_from_env()
    env = settings.get()
    setup_default_logging(resolve_log_level(cfg, explicit=log_level, env_level=env.LOG_LEVEL))

    options = resolve_window_options(cfg, width=width, height=height)
    vertex_path, fragment_path = resolve_shader_paths(
        cfg,
        vertex=str(vertex_shader) if vertex_shader is not None else None,
        fragment=str(fragment_shader) if fragment_shader is not None else None,
    )
    gui_enabled = resolve_parameter_gui(cfg, use_parameter_gui)

    # ---- ② シェーダソース -----------------------------------------
    sources = load_shader_sources(vertex_path, fragment_path)

    # ---- ③ パラメータ ---------------------------------------------
    schema = resolve_schema(cfg)
    store = build_parameter_store(schema, parameter_values)
    registry = ParameterRegistry(store, schema)

    if init_only:
        logger.info("init_only: %dx%d, %d parameters", options.width, options.height, len(schema))
        return None

    # 遅延インポート（ヘッドレス環境でのウィンドウ生成を避ける）
    import pyglet

    from engine.core.frame_scheduler import FrameScheduler

    from .lava_runner.render import (
        build_render_state,
        create_window_and_context,
        release_render_state,
        schedule_gl_error_poll,
    )

    # ---- ④ ウィンドウ/GL ------------------------------------------
    rendering_window, mgl_ctx = create_window_and_context(options)
    try:
        state = build_render_state(
            mgl_ctx,
            rendering_window,
            sources,
            registry,
            max_density=env.MAX_PIXEL_DENSITY,
        )
    except Exception:
        rendering_window.close()
        raise

    # ---- ⑤ パラメータパネル ---------------------------------------
    def abort() -> None:
        release_render_state(state)
        rendering_window.close()

    panel: Any | None = None
    if gui_enabled:
        panel = open_parameter_panel(store, registry, cleanup=abort)

    # ---- ⑥ フレーム駆動 -------------------------------------------
    scheduler = FrameScheduler(state, rendering_window.request_frame)
    scheduler.start()

    poll = None
    if env.GL_ERROR_POLL:
        poll = schedule_gl_error_poll(mgl_ctx, env.GL_ERROR_POLL_INTERVAL)

    @rendering_window.event
    def on_close():  # noqa: ANN001
        # 冪等なクリーンアップ
        if getattr(on_close, "_closed", False):
            return
        setattr(on_close, "_closed", True)
        if poll is not None:
            pyglet.clock.unschedule(poll)
        if panel is not None:
            try:
                panel.close()
            except Exception:
                logger.exception("parameter panel close failed")
        release_render_state(state)
        logger.info("closed after %d frames (%.2fs)", scheduler.frame_count, scheduler.elapsed)
        pyglet.app.exit()

    pyglet.app.run()
    return None


__all__ = ["run_lava"]
