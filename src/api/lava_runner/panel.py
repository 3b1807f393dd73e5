"""
どこで: `api.lava_runner.panel`。
何を: パラメータパネル（Dear PyGui）を開く。未導入なら警告して None、生成失敗時は後始末して再送出。
なぜ: GL 資源/ウィンドウを確保した後の失敗でも、それらを解放してから呼び出し元へ戻すため。
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from engine.ui.parameters.registry import ParameterRegistry
from engine.ui.parameters.state import ParameterStore

logger = logging.getLogger(__name__)


def open_parameter_panel(
    store: ParameterStore,
    registry: ParameterRegistry,
    *,
    cleanup: Callable[[], None],
    factory: Callable[..., Any] | None = None,
) -> Any | None:
    """パネルを生成して返す。

    `factory` 省略時は `engine.ui.parameters.panel.ParameterPanel`。その import に失敗した場合は
    パネル無しで続行する（None）。生成中の例外は `cleanup()` を呼んでから送出する。
    """
    if factory is None:
        try:
            from engine.ui.parameters.panel import ParameterPanel
        except ImportError as e:
            logger.warning("parameter panel unavailable (%s); continuing without it", e)
            return None
        factory = ParameterPanel
    try:
        return factory(store=store, registry=registry)
    except Exception:
        cleanup()
        raise


__all__ = ["open_parameter_panel"]
