"""
どこで: `engine.core` のフレーム要求の型。
何を: 表示リフレッシュ 1 回ぶんのコールバック型と、「次フレームを要求する」能力の型。
なぜ: 実ディスプレイループとテスト用の手動駆動を同じ形で差し替えられるようにするため。
"""

from typing import Callable

FrameCallback = Callable[[float], None]
"""ミリ秒単位の単調時刻を受け取るフレームコールバック。"""

RequestFrame = Callable[[FrameCallback], None]
"""次の表示リフレッシュで 1 回だけ `FrameCallback` を呼ぶよう予約する関数。"""
