from __future__ import annotations

import pytest

from api.lava_runner.params import build_parameter_store, parse_assignments, resolve_schema
from api.lava_runner.render import check_gl_error
from api.lava_runner.utils import (
    WindowOptions,
    resolve_log_level,
    resolve_parameter_gui,
    resolve_shader_paths,
    resolve_window_options,
)
from engine.ui.parameters.registry import PARAMETERS


def test_window_options_precedence() -> None:
    cfg = {"window": {"width": 1024, "height": 0, "caption": "hot", "vsync": False}}
    opts = resolve_window_options(cfg, height=480)
    assert opts == WindowOptions(width=1024, height=480, caption="hot", vsync=False)
    assert resolve_window_options(None) == WindowOptions()
    # 設定側の不正値は既定へ
    assert resolve_window_options(cfg).height == WindowOptions().height


def test_window_options_reject_non_positive_arguments() -> None:
    with pytest.raises(ValueError):
        resolve_window_options(None, width=0)


def test_shader_paths_prefer_arguments() -> None:
    cfg = {"shaders": {"vertex": "a.vert", "fragment": None}}
    assert resolve_shader_paths(cfg) == ("a.vert", None)
    assert resolve_shader_paths(cfg, fragment="b.frag") == ("a.vert", "b.frag")


def test_log_level_precedence() -> None:
    cfg = {"logging": {"level": "WARNING"}}
    assert resolve_log_level(cfg) == "WARNING"
    assert resolve_log_level(cfg, env_level="DEBUG") == "DEBUG"
    assert resolve_log_level(cfg, explicit="ERROR", env_level="DEBUG") == "ERROR"
    assert resolve_log_level(None) == "INFO"


def test_parameter_gui_precedence() -> None:
    assert resolve_parameter_gui(None) is True
    assert resolve_parameter_gui({"parameter_gui": False}) is False
    assert resolve_parameter_gui({"parameter_gui": False}, explicit=True) is True


def test_parse_assignments() -> None:
    assert parse_assignments(["octaves=6", " gain = 0.4 ", "mode="]) == {
        "octaves": "6",
        "gain": "0.4",
        "mode": "",
    }
    with pytest.raises(ValueError):
        parse_assignments(["octaves"])
    with pytest.raises(ValueError):
        parse_assignments(["=3"])


def test_store_applies_cli_values_as_overrides() -> None:
    store = build_parameter_store(PARAMETERS, {"octaves": "7", "palette": "3"})
    assert store.read("octaves") == "7"
    assert store.read("gain") == "0.5"
    assert store.read("palette") == "3"


def test_store_rejects_unknown_names() -> None:
    with pytest.raises(ValueError, match="unknown parameter"):
        build_parameter_store(PARAMETERS, {"speed": "1"})


def test_resolve_schema_uses_parameters_section() -> None:
    schema = resolve_schema({"parameters": {"gain": {"default": 0.3}}})
    assert {d.id: d for d in schema}["gain"].default_value == 0.3
    assert resolve_schema(None) == PARAMETERS


def test_check_gl_error(fake_ctx, caplog) -> None:
    assert check_gl_error(fake_ctx) is None
    fake_ctx.error = "GL_INVALID_OPERATION"
    assert check_gl_error(fake_ctx) == "GL_INVALID_OPERATION"
    assert "GL_INVALID_OPERATION" in caplog.text
