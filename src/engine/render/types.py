"""
どこで: `engine.render` 型定義。
何を: 1 フレームぶんのパラメータ値 `ParameterSnapshot` と、解像度/時刻を加えた
    `UniformSnapshot`（GPU へ送る値の完全な組）。
なぜ: レジストリ→スケジューラ→uniform 書き込みの契約を明示し、フレーム間で状態を持ち越さないため。
"""

from __future__ import annotations

from dataclasses import dataclass, fields

Resolution = tuple[float, float]


@dataclass(frozen=True)
class ParameterSnapshot:
    """コントロールから読み取り、型変換済みのパラメータ値。"""

    mode: int
    octaves: int
    lacunarity: float
    gain: float
    fbm_scale: float
    voro_scale: float
    crack_width: float
    warp_strength: float
    flow_speed: float
    palette: int


@dataclass(frozen=True)
class UniformSnapshot:
    """1 フレームで push する uniform 値の組（永続化しない）。"""

    resolution: Resolution
    elapsed_time: float
    mode: int
    octaves: int
    lacunarity: float
    gain: float
    fbm_scale: float
    voro_scale: float
    crack_width: float
    warp_strength: float
    flow_speed: float
    palette: int

    @classmethod
    def compose(
        cls, resolution: Resolution, elapsed_time: float, params: ParameterSnapshot
    ) -> "UniformSnapshot":
        values = {f.name: getattr(params, f.name) for f in fields(ParameterSnapshot)}
        return cls(resolution=resolution, elapsed_time=elapsed_time, **values)


__all__ = ["ParameterSnapshot", "UniformSnapshot", "Resolution"]
