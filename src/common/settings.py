"""
どこで: `common.settings`
何を: 環境変数（`LAVA_*`）を型付きで一元管理し、起動時に読み込む。
なぜ: `os.getenv` の散在を解消し、既定値/型の一貫性とテスト容易性を高めるため。
"""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool, env_float, env_str

DEFAULT_MAX_PIXEL_DENSITY = 2.0


@dataclass
class _Settings:
    # Surface
    MAX_PIXEL_DENSITY: float = DEFAULT_MAX_PIXEL_DENSITY

    # GL エラーのポーリング（描画ループとは別スケジュール）
    GL_ERROR_POLL: bool = False
    GL_ERROR_POLL_INTERVAL: float = 1.0

    # Logging（None なら設定ファイル/既定に従う）
    LOG_LEVEL: str | None = None


_settings = _Settings()


def reload_from_env() -> None:
    """環境変数から設定を再読込。

    - 密度上限は正値のみ受け付け、それ以外は既定値へ戻す。
    - ポーリング間隔は 0.05 秒を下限に丸める。
    """
    density = env_float("LAVA_MAX_PIXEL_DENSITY", DEFAULT_MAX_PIXEL_DENSITY)
    if density is None or density <= 0.0:
        density = DEFAULT_MAX_PIXEL_DENSITY
    _settings.MAX_PIXEL_DENSITY = float(density)

    _settings.GL_ERROR_POLL = env_bool("LAVA_GL_ERROR_POLL", False)
    _settings.GL_ERROR_POLL_INTERVAL = float(
        env_float("LAVA_GL_ERROR_POLL_INTERVAL", 1.0, min_value=0.05) or 1.0
    )

    _settings.LOG_LEVEL = env_str("LAVA_LOG_LEVEL")


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "DEFAULT_MAX_PIXEL_DENSITY", "_Settings"]
