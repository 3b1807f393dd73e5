"""
どこで: `engine.ui.parameters.registry`。
何を: 固定スキーマ（10 パラメータの名前/型/値域/既定値）と、外部コントロールから毎フレーム
    読み取って型変換した `ParameterSnapshot` を返す `ParameterRegistry`。
なぜ: 描画コアを UI ツールキットから切り離し、`read(name) -> str` だけを介して値を受け取るため。

補足:
- レジストリ自身は値を保持しない（読み通しのビュー。キャッシュではない）。
- 値域外の値もクランプせずに通す。値域の強制はコントロール側の責務。
- `describe()` は表示専用で、`snapshot()` へは一切影響しない。
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterable, Mapping, Protocol

from engine.render.types import ParameterSnapshot

from .normalization import format_value, parse_float_prefix, parse_int_prefix
from .state import EnumChoice, ParameterDescriptor, RangeHint

logger = logging.getLogger(__name__)


class ControlSource(Protocol):
    """パラメータ名から現在の文字列値を返す能力。"""

    def read(self, name: str) -> str: ...


MODE_CHOICES = (
    EnumChoice(0, "Flow"),
    EnumChoice(1, "Cracks"),
    EnumChoice(2, "Fused"),
)
PALETTE_CHOICES = (
    EnumChoice(0, "Lava"),
    EnumChoice(1, "Ember"),
    EnumChoice(2, "Abyss"),
    EnumChoice(3, "Toxic"),
)

PARAMETERS: tuple[ParameterDescriptor, ...] = (
    ParameterDescriptor("mode", "Mode", "enum", 2, "mode", choices=MODE_CHOICES),
    ParameterDescriptor("octaves", "Octaves", "int", 5, "octaves", RangeHint(1, 8, 1)),
    ParameterDescriptor(
        "lacunarity", "Lacunarity", "float", 2.0, "lacunarity", RangeHint(1.2, 3.5, 0.01)
    ),
    ParameterDescriptor("gain", "Gain", "float", 0.5, "gain", RangeHint(0.2, 0.9, 0.01)),
    ParameterDescriptor(
        "fbmScale", "FBM Scale", "float", 2.5, "fbm_scale", RangeHint(0.5, 8.0, 0.01)
    ),
    ParameterDescriptor(
        "voroScale", "Voronoi Scale", "float", 5.0, "voro_scale", RangeHint(1.0, 16.0, 0.01)
    ),
    ParameterDescriptor(
        "crackWidth", "Crack Width", "float", 0.06, "crack_width", RangeHint(0.0, 0.25, 0.005)
    ),
    ParameterDescriptor(
        "warpStrength", "Warp Strength", "float", 1.0, "warp_strength", RangeHint(0.0, 3.0, 0.01)
    ),
    ParameterDescriptor(
        "flowSpeed", "Flow Speed", "float", 0.35, "flow_speed", RangeHint(0.0, 2.0, 0.01)
    ),
    ParameterDescriptor("palette", "Palette", "enum", 0, "palette", choices=PALETTE_CHOICES),
)


class ParameterRegistry:
    """スキーマに従ってコントロール値を読み取り、型変換する。"""

    def __init__(
        self,
        source: ControlSource,
        schema: Iterable[ParameterDescriptor] = PARAMETERS,
    ) -> None:
        self._source = source
        self._schema = {desc.id: desc for desc in schema}

    @property
    def schema(self) -> tuple[ParameterDescriptor, ...]:
        return tuple(self._schema.values())

    def descriptor(self, name: str) -> ParameterDescriptor:
        return self._schema[name]

    def snapshot(self) -> ParameterSnapshot:
        """全パラメータを 1 回ずつ読み取り、`ParameterSnapshot` にまとめる。"""
        values = {desc.field: self.read_value(desc) for desc in self._schema.values()}
        return ParameterSnapshot(**values)

    def read_value(self, desc: ParameterDescriptor) -> int | float:
        return coerce(desc, self._source.read(desc.id))

    def describe(self, parameter: str | ParameterDescriptor) -> str:
        """表示用文字列（整数は 10 進、float は小数 2 桁）。"""
        desc = parameter if isinstance(parameter, ParameterDescriptor) else self._schema[parameter]
        return format_value(desc, self.read_value(desc))


def coerce(desc: ParameterDescriptor, text: str) -> int | float:
    """文字列値を宣言型へ変換する。int/enum は切り捨て、float は前方一致パース。

    パースできない場合は int/enum が 0、float が NaN（描画ループは止めない）。
    """
    if desc.value_type == "float":
        fv = parse_float_prefix(text)
        if fv is None:
            logger.debug("unparseable float for %s: %r", desc.id, text)
            return float("nan")
        return fv
    iv = parse_int_prefix(text)
    if iv is None:
        logger.debug("unparseable integer for %s: %r", desc.id, text)
        return 0
    return iv


def apply_overrides(
    schema: Iterable[ParameterDescriptor],
    overrides: Mapping[str, Any] | None,
) -> tuple[ParameterDescriptor, ...]:
    """設定ファイルの `parameters:` セクションで既定値/値域を差し替えたスキーマを返す。

    形式: `{name: {default, min, max, step}}`。未知の名前や不正値は警告して無視する。
    """
    result = list(schema)
    if not overrides:
        return tuple(result)
    index = {desc.id: i for i, desc in enumerate(result)}
    for name, entry in overrides.items():
        if name not in index:
            logger.warning("unknown parameter in config: %s", name)
            continue
        if not isinstance(entry, Mapping):
            logger.warning("parameter config must be a mapping: %s=%r", name, entry)
            continue
        desc = result[index[name]]
        try:
            result[index[name]] = _override_descriptor(desc, entry)
        except (TypeError, ValueError) as e:
            logger.warning("invalid parameter config for %s: %s", name, e)
    return tuple(result)


def _override_descriptor(
    desc: ParameterDescriptor, entry: Mapping[str, Any]
) -> ParameterDescriptor:
    cast = float if desc.value_type == "float" else int
    changes: dict[str, Any] = {}
    if "default" in entry:
        changes["default_value"] = cast(entry["default"])
    if desc.range_hint is not None and any(k in entry for k in ("min", "max", "step")):
        hint = desc.range_hint
        lo = cast(entry.get("min", hint.min_value))
        hi = cast(entry.get("max", hint.max_value))
        if not lo < hi:
            raise ValueError(f"min must be < max (got {lo}, {hi})")
        step = entry.get("step", hint.step)
        changes["range_hint"] = RangeHint(lo, hi, cast(step) if step is not None else None)
    return replace(desc, **changes) if changes else desc


__all__ = [
    "ControlSource",
    "ParameterRegistry",
    "PARAMETERS",
    "MODE_CHOICES",
    "PALETTE_CHOICES",
    "coerce",
    "apply_overrides",
]
