"""
どこで: `engine.core` の描画ウィンドウ薄ラッパ。
何を: Pyglet Window（vsync/リサイズ可）に、レイアウト寸法・ピクセル密度の提供と、
    `requestAnimationFrame` 相当の 1 回限りのフレーム要求キューを持たせる。
なぜ: スケジューラ/サーフェス層から GUI 依存を切り離し、最小インターフェイスで統一するため。

使用例:
    win = RenderWindow(1280, 720)
    scheduler = FrameScheduler(state, win.request_frame)
    scheduler.start()
    pyglet.app.run()
"""

from __future__ import annotations

import time

import pyglet
from pyglet.gl import Config

from .tickable import FrameCallback


def now_ms() -> float:
    """単調時刻（ミリ秒）。"""
    return time.perf_counter() * 1000.0


class RenderWindow(pyglet.window.Window):
    def __init__(
        self,
        width: int,
        height: int,
        *,
        caption: str = "lavafield",
        vsync: bool = True,
    ):
        """ウィンドウを生成する。

        引数:
            width: ウィンドウ幅（論理ピクセル）。
            height: ウィンドウ高さ（論理ピクセル）。
            caption: タイトル。
            vsync: 垂直同期でフレームを駆動するか。
        """
        config = Config(
            double_buffer=True,
            major_version=3,
            minor_version=3,
            forward_compatible=True,
            vsync=vsync,
        )
        super().__init__(
            width=width, height=height, caption=caption, config=config, resizable=True
        )
        self._pending: list[FrameCallback] = []

    # ---- LayoutSource ----
    def layout_size(self) -> tuple[float, float]:
        w, h = self.get_size()
        return float(w), float(h)

    def pixel_density(self) -> float:
        return float(self.get_pixel_ratio())

    def screen_size(self) -> tuple[int, int]:
        """既定フレームバッファのピクセル寸法（OS の密度そのまま）。"""
        w, h = self.get_framebuffer_size()
        return int(w), int(h)

    # ---- frame requests ----
    def request_frame(self, callback: FrameCallback) -> None:
        """次の `on_draw` で `callback(timestamp_ms)` を 1 回だけ呼ぶ。"""
        self._pending.append(callback)

    def on_draw(self):  # Pyglet 既定のイベント名
        """保留中のフレーム要求を同一時刻で処理する（処理中の再要求は次回へ）。"""
        if not self._pending:
            return
        callbacks, self._pending = self._pending, []
        ts = now_ms()
        for cb in callbacks:
            cb(ts)
