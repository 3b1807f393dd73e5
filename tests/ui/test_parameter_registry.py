from __future__ import annotations

import math

import pytest

from engine.render.types import ParameterSnapshot
from engine.ui.parameters.registry import (
    PARAMETERS,
    ParameterRegistry,
    apply_overrides,
    coerce,
)
from engine.ui.parameters.state import RangeHint


class DictSource:
    def __init__(self, values: dict[str, str]) -> None:
        self.values = values
        self.reads: list[str] = []

    def read(self, name: str) -> str:
        self.reads.append(name)
        return self.values[name]


def _defaults() -> dict[str, str]:
    return {d.id: str(d.default_value) for d in PARAMETERS}


def test_schema_has_ten_parameters_with_documented_defaults() -> None:
    by_id = {d.id: d for d in PARAMETERS}
    assert list(by_id) == [
        "mode",
        "octaves",
        "lacunarity",
        "gain",
        "fbmScale",
        "voroScale",
        "crackWidth",
        "warpStrength",
        "flowSpeed",
        "palette",
    ]
    assert by_id["mode"].default_value == 2
    assert by_id["octaves"].range_hint == RangeHint(1, 8, 1)
    assert by_id["crackWidth"].default_value == 0.06
    assert [c.label for c in by_id["palette"].choices] == ["Lava", "Ember", "Abyss", "Toxic"]


def test_snapshot_reads_each_control_once() -> None:
    src = DictSource(_defaults())
    snap = ParameterRegistry(src).snapshot()
    assert isinstance(snap, ParameterSnapshot)
    assert sorted(src.reads) == sorted(d.id for d in PARAMETERS)
    assert snap.mode == 2 and snap.octaves == 5
    assert snap.flow_speed == 0.35
    assert snap.palette == 0


def test_registry_is_a_live_view_not_a_cache() -> None:
    values = _defaults()
    reg = ParameterRegistry(DictSource(values))
    assert reg.snapshot().voro_scale == 5.0
    values["voroScale"] = "9.5"
    assert reg.snapshot().voro_scale == 9.5


def test_integers_truncate_and_out_of_range_passes_through() -> None:
    values = _defaults()
    values.update(octaves="5.7", mode="9", palette="-1")
    snap = ParameterRegistry(DictSource(values)).snapshot()
    assert snap.octaves == 5
    assert snap.mode == 9
    assert snap.palette == -1


def test_unparseable_values_fall_back() -> None:
    values = _defaults()
    values.update(octaves="abc", gain="")
    snap = ParameterRegistry(DictSource(values)).snapshot()
    assert snap.octaves == 0
    assert math.isnan(snap.gain)


@pytest.mark.parametrize(
    "name,text,expected",
    [
        ("gain", "0.25abc", 0.25),
        ("gain", " 1e-2", 0.01),
        ("gain", "-.5", -0.5),
        ("octaves", "+7px", 7),
        ("mode", "1", 1),
    ],
)
def test_coerce_prefix_parsing(name, text, expected) -> None:
    desc = {d.id: d for d in PARAMETERS}[name]
    assert coerce(desc, text) == expected


def test_describe_formats_for_display_only() -> None:
    values = _defaults()
    values.update(lacunarity="2.0", gain="0.456", octaves="6", mode="1", palette="7")
    reg = ParameterRegistry(DictSource(values))
    assert reg.describe("lacunarity") == "2.00"
    assert reg.describe("gain") == "0.46"
    assert reg.describe("octaves") == "6"
    assert reg.describe("mode") == "Cracks"
    # 選択肢に無い列挙値は数値のまま
    assert reg.describe("palette") == "7"
    assert reg.snapshot().gain == 0.456


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("0.125", "0.13"),
        ("0.625", "0.63"),
        ("-0.125", "-0.13"),
        ("0.005", "0.01"),
        ("1.005", "1.00"),  # 2 進では 1.00499...
        ("-0", "0.00"),
        ("nan", "nan"),
        ("-inf", "-inf"),
    ],
)
def test_describe_rounds_half_away_from_zero(text, expected) -> None:
    values = _defaults()
    values["crackWidth"] = text
    assert ParameterRegistry(DictSource(values)).describe("crackWidth") == expected


def test_apply_overrides_replaces_default_and_range() -> None:
    schema = apply_overrides(
        PARAMETERS,
        {"octaves": {"default": 6, "max": 10}, "flowSpeed": {"default": 0.2}},
    )
    by_id = {d.id: d for d in schema}
    assert by_id["octaves"].default_value == 6
    assert by_id["octaves"].range_hint == RangeHint(1, 10, 1)
    assert by_id["flowSpeed"].default_value == 0.2
    # 元のスキーマは変えない
    assert {d.id: d for d in PARAMETERS}["octaves"].default_value == 5


def test_apply_overrides_ignores_unknown_and_invalid(caplog) -> None:
    caplog.set_level("WARNING")
    schema = apply_overrides(
        PARAMETERS,
        {"bogus": {"default": 1}, "gain": {"min": 0.9, "max": 0.1}, "mode": 3},
    )
    assert schema == PARAMETERS
    assert "bogus" in caplog.text
    assert "gain" in caplog.text
