from __future__ import annotations

import logging
import sys

import pytest

from api.lava_runner.panel import open_parameter_panel
from engine.ui.parameters.registry import PARAMETERS, ParameterRegistry
from engine.ui.parameters.state import ParameterStore


@pytest.fixture()
def store() -> ParameterStore:
    s = ParameterStore()
    s.register_all(PARAMETERS)
    return s


def test_factory_receives_store_and_registry(store) -> None:
    registry = ParameterRegistry(store)
    cleaned: list[str] = []

    def factory(**kwargs):
        return kwargs

    panel = open_parameter_panel(
        store, registry, cleanup=lambda: cleaned.append("x"), factory=factory
    )
    assert panel == {"store": store, "registry": registry}
    assert cleaned == []


def test_failed_panel_runs_cleanup_then_reraises(store) -> None:
    order: list[str] = []

    def factory(**_kwargs):
        order.append("factory")
        raise RuntimeError("viewport creation failed")

    with pytest.raises(RuntimeError, match="viewport"):
        open_parameter_panel(
            store, ParameterRegistry(store), cleanup=lambda: order.append("cleanup"), factory=factory
        )
    assert order == ["factory", "cleanup"]


def test_missing_gui_toolkit_continues_without_panel(
    store, monkeypatch: pytest.MonkeyPatch, caplog
) -> None:
    caplog.set_level(logging.WARNING, logger="api.lava_runner.panel")
    # None を入れた sys.modules エントリは import 時に ImportError になる
    monkeypatch.setitem(sys.modules, "engine.ui.parameters.panel", None)
    cleaned: list[str] = []
    panel = open_parameter_panel(
        store, ParameterRegistry(store), cleanup=lambda: cleaned.append("x")
    )
    assert panel is None
    assert cleaned == []
    assert "parameter panel unavailable" in caplog.text
