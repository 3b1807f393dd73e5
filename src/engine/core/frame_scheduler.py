"""
どこで: `engine.core` のフレームドライバ。
何を: 表示リフレッシュ毎に 1 回、サーフェス同期 → 経過時間 → パラメータ読取 → uniform 書込 →
    6 頂点の描画 → 次フレーム要求、を固定順序で行う `FrameScheduler`。
なぜ: 描画ループの順序と状態（Idle/Running, 開始時刻）を 1 箇所に閉じ込め、
    `tick(timestamp)` の手動呼び出しで決定的にテストできるようにするため。
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING

from engine.render.types import UniformSnapshot
from engine.render.uniforms import push_uniforms

from .tickable import RequestFrame

if TYPE_CHECKING:
    from engine.runtime.frame import RenderState

logger = logging.getLogger(__name__)

MS_TO_SECONDS = 0.001


class SchedulerState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"


class FrameScheduler:
    """`RenderState` を毎フレーム GPU へ反映する協調的ループ。

    - 初回 tick の時刻を基準に経過秒を計算する（初回は 0.0）。
    - フレームの間引き/統合はしない。要求 1 回につき tick 1 回。
    - 停止 API は持たない（ウィンドウ/プロセス終了まで回り続ける）。
    """

    def __init__(self, state: "RenderState", request_frame: RequestFrame) -> None:
        self._state = state
        self._request_frame = request_frame
        self._status = SchedulerState.IDLE
        self._first_timestamp: float | None = None
        self._last_elapsed = 0.0
        self._frame_count = 0

    @property
    def status(self) -> SchedulerState:
        return self._status

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def elapsed(self) -> float:
        """直近 tick の経過秒。"""
        return self._last_elapsed

    def start(self) -> None:
        """最初のフレームを要求する（状態遷移は初回 tick で行う）。"""
        self._request_frame(self.tick)

    def tick(self, timestamp: float) -> None:
        """1 フレームを処理する。`timestamp` はミリ秒の単調時刻。"""
        st = self._state

        # (1) サーフェス寸法の追従
        st.surface.sync(st.layout)

        # (2) 経過時間
        elapsed = self._elapsed_seconds(timestamp)

        # (3) パラメータ読取
        params = st.registry.snapshot()

        # (4) uniform 書込
        st.target.use()
        snapshot = UniformSnapshot.compose(st.surface.state.resolution, elapsed, params)
        push_uniforms(st.program, snapshot)

        # (5) 描画と提示
        st.quad.render()
        st.target.present()
        self._frame_count += 1

        # (6) 次フレーム
        self._request_frame(self.tick)

    def _elapsed_seconds(self, timestamp: float) -> float:
        if self._first_timestamp is None:
            self._first_timestamp = float(timestamp)
            self._status = SchedulerState.RUNNING
            logger.debug("frame scheduler running (t0=%.3f ms)", self._first_timestamp)
        elapsed = (float(timestamp) - self._first_timestamp) * MS_TO_SECONDS
        # 単調非減少を保つ
        if elapsed < self._last_elapsed:
            elapsed = self._last_elapsed
        self._last_elapsed = elapsed
        return elapsed


__all__ = ["FrameScheduler", "SchedulerState", "MS_TO_SECONDS"]
