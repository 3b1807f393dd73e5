"""
どこで: `api` 入口（高レベル公開 API）。
何を: 描画ランナー `run_lava`（別名 `run`）と CLI エントリ `main` を再輸出。
なぜ: 利用者が単一名前空間から起動まで完結できるようにするため。

Usage:
    from api import run

    run(width=1280, height=720, parameter_values={"palette": "3"})
"""

from .cli import main
from .lava import run_lava

run = run_lava

__all__ = [
    "run",
    "run_lava",
    "main",
]
