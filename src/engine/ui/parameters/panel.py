"""
どこで: `engine.ui.parameters` の Dear PyGui 実装。
何を: スキーマの各パラメータにスライダー/コンボと値ラベルを 1 行ずつ並べたパネルを生成し、
    操作を ParameterStore の override へ書き込む。ラベルは `describe()` で更新する。
なぜ: 描画ループが読むコントロール面（Store）への唯一の書き手として、UI を描画コアから分離するため。
"""

from __future__ import annotations

import logging
from threading import Thread
from typing import Any, Iterable

import dearpygui.dearpygui as dpg  # type: ignore

from .registry import ParameterRegistry
from .state import ParameterDescriptor, ParameterStore

ROOT_TAG = "__lava_param_root__"
LABEL_SUFFIX = "::label"

logger = logging.getLogger("engine.ui.parameters.dpg")


class ParameterPanel:
    """Dear PyGui によるパラメータパネル。"""

    def __init__(
        self,
        *,
        store: ParameterStore,
        registry: ParameterRegistry,
        width: int = 360,
        height: int = 420,
        title: str = "Parameters",
        auto_show: bool = True,
    ) -> None:
        self._store = store
        self._registry = registry
        self._title = title
        self._visible = False
        self._driver: Any | None = None
        self._closing = False

        dpg.create_context()
        dpg.create_viewport(title=title, width=width, height=height)
        dpg.setup_dearpygui()

        with dpg.window(tag=ROOT_TAG, label=title, no_close=True):
            for desc in registry.schema:
                self._create_row(desc)
        dpg.set_primary_window(ROOT_TAG, True)

        self._store.subscribe(self._on_store_change)

        if auto_show:
            self.set_visible(True)

    # ---- rows ----
    def _create_row(self, desc: ParameterDescriptor) -> None:
        with dpg.group(horizontal=True):
            dpg.add_text(desc.label)
            self._create_widget(desc)
            dpg.add_text(self._registry.describe(desc), tag=desc.id + LABEL_SUFFIX)

    def _create_widget(self, desc: ParameterDescriptor) -> int | str:
        if desc.value_type == "enum":
            labels = [c.label for c in desc.choices or ()]
            current = desc.choice_label(int(self._registry.read_value(desc)))
            return dpg.add_combo(
                tag=desc.id,
                items=labels,
                default_value=current or (labels[0] if labels else ""),
                width=160,
                callback=self._on_enum_change,
                user_data=desc.id,
            )
        hint = desc.range_hint
        if desc.value_type == "int":
            return dpg.add_slider_int(
                tag=desc.id,
                default_value=int(self._registry.read_value(desc)),
                min_value=int(hint.min_value) if hint else 0,
                max_value=int(hint.max_value) if hint else 10,
                width=160,
                callback=self._on_widget_change,
                user_data=desc.id,
            )
        return dpg.add_slider_float(
            tag=desc.id,
            default_value=float(self._registry.read_value(desc)),
            min_value=float(hint.min_value) if hint else 0.0,
            max_value=float(hint.max_value) if hint else 1.0,
            format="%.3f",
            width=160,
            callback=self._on_widget_change,
            user_data=desc.id,
        )

    # ---- callbacks ----
    def _on_widget_change(self, sender: int, app_data: Any, user_data: Any) -> None:  # noqa: D401
        """ウィジェット変更イベントから Store の override を更新する。"""
        self._store.set_override(str(user_data), app_data)

    def _on_enum_change(self, sender: int, app_data: Any, user_data: Any) -> None:
        desc = self._registry.descriptor(str(user_data))
        for choice in desc.choices or ():
            if choice.label == app_data:
                self._store.set_override(desc.id, choice.value)
                return
        logger.warning("unknown choice for %s: %r", desc.id, app_data)

    def _on_store_change(self, ids: Iterable[str]) -> None:
        if self._closing:
            return
        for pid in ids:
            tag = pid + LABEL_SUFFIX
            if dpg.does_item_exist(tag):
                dpg.set_value(tag, self._registry.describe(pid))

    # ---- visibility / lifetime ----
    def set_visible(self, visible: bool) -> None:
        if visible and not self._visible:
            dpg.show_viewport()
            self._visible = True
            self._start_driver()
        elif not visible and self._visible:
            dpg.hide_viewport()
            self._visible = False
            self._stop_driver()

    def close(self) -> None:
        # 閉鎖フラグを最初に立て、以降の _tick を無害化
        self._closing = True
        self._store.unsubscribe(self._on_store_change)
        # ドライバ停止 → コンテキスト破棄（順序厳守）
        self._stop_driver()
        dpg.destroy_context()

    # ---- internal: drivers ----
    def _tick(self, _dt: float) -> None:  # noqa: ANN001
        if self._closing:
            return
        if not dpg.is_dearpygui_running():
            self._closing = True
            self._stop_driver()
            return
        dpg.render_dearpygui_frame()

    def _start_driver(self) -> None:
        if self._driver is not None:
            return
        # Prefer pyglet clock on main thread; fallback to background thread loop
        try:
            import pyglet  # type: ignore

            pyglet.clock.schedule_interval(self._tick, 1.0 / 60.0)
            self._driver = ("pyglet", self._tick)
            logger.debug("ParameterPanel: pyglet driver started")
        except ImportError:
            t = Thread(target=dpg.start_dearpygui, name="DPGLoop", daemon=True)
            t.start()
            self._driver = ("thread", t)
            logger.debug("ParameterPanel: thread driver started")

    def _stop_driver(self) -> None:
        drv = self._driver
        self._driver = None
        if drv is None:
            return
        kind, handle = drv
        if kind == "pyglet":
            import pyglet  # type: ignore

            pyglet.clock.unschedule(handle)
        elif kind == "thread":
            dpg.stop_dearpygui()


__all__ = ["ParameterPanel"]
