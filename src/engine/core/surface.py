"""
どこで: `engine.core.surface`。
何を: レイアウト寸法 × ピクセル密度（上限付き）から描画バッファ寸法を求め、変化時のみ
    バッファ再確保とビューポート再設定を行う `SurfaceManager`。
なぜ: バッファ寸法とビューポートを常に直近の計算結果に一致させつつ、変化が無いフレームでは
    GPU への書き込みを一切行わないため。
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Protocol

from common.settings import DEFAULT_MAX_PIXEL_DENSITY

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SurfaceState:
    """デバイスピクセル単位のバッファ寸法。"""

    width: int
    height: int

    @property
    def resolution(self) -> tuple[float, float]:
        return (float(self.width), float(self.height))


class LayoutSource(Protocol):
    """描画面のレイアウト寸法と表示密度を提供する（ウィンドウ等）。"""

    def layout_size(self) -> tuple[float, float]: ...

    def pixel_density(self) -> float: ...


class RenderTarget(Protocol):
    """寸法変更とビューポート設定を受け付ける描画先バッファ。"""

    @property
    def size(self) -> tuple[int, int]: ...

    def resize(self, width: int, height: int) -> None: ...

    def set_viewport(self, x: int, y: int, width: int, height: int) -> None: ...


def clamp_density(density: float | None, max_density: float = DEFAULT_MAX_PIXEL_DENSITY) -> float:
    """密度を `max_density` 以下に抑える。0 以下/不正値は 1.0 とみなす。"""
    try:
        d = float(density) if density is not None else 1.0
    except (TypeError, ValueError):
        d = 1.0
    if not d > 0.0 or math.isinf(d):
        d = 1.0
    return min(d, float(max_density))


def compute_surface_size(
    layout_size: tuple[float, float],
    density: float | None,
    max_density: float = DEFAULT_MAX_PIXEL_DENSITY,
) -> SurfaceState:
    """`floor(layout × clamp(density))` を返す（各辺 1 以上）。"""
    d = clamp_density(density, max_density)
    lw, lh = layout_size
    w = max(1, int(math.floor(float(lw) * d)))
    h = max(1, int(math.floor(float(lh) * d)))
    return SurfaceState(w, h)


class SurfaceManager:
    """描画先バッファの寸法をレイアウト/密度に追従させる。"""

    def __init__(
        self,
        target: RenderTarget,
        *,
        max_density: float = DEFAULT_MAX_PIXEL_DENSITY,
    ) -> None:
        self.target = target
        self.max_density = float(max_density)
        w, h = target.size
        self._state = SurfaceState(int(w), int(h))

    @property
    def state(self) -> SurfaceState:
        return self._state

    def sync(self, layout: LayoutSource) -> bool:
        """レイアウトから寸法を再計算し、変化していればバッファとビューポートを更新する。

        Returns
        -------
        bool
            再確保を行った場合 True。変化なしなら GPU 呼び出しを行わず False。
        """
        target = compute_surface_size(
            layout.layout_size(), layout.pixel_density(), self.max_density
        )
        if target == self._state:
            return False
        self.target.resize(target.width, target.height)
        self.target.set_viewport(0, 0, target.width, target.height)
        logger.debug(
            "surface resized: %dx%d -> %dx%d",
            self._state.width,
            self._state.height,
            target.width,
            target.height,
        )
        self._state = target
        return True


__all__ = [
    "SurfaceState",
    "LayoutSource",
    "RenderTarget",
    "SurfaceManager",
    "clamp_density",
    "compute_surface_size",
]
