"""
どこで: `engine.render.uniforms`。
何を: シェーダと取り交わす uniform 契約（名前/GLSL 型/スナップショット項目）と、
    `UniformSnapshot` を `Program` の各スロットへ書き込む `push_uniforms()`。
なぜ: 名前の対応表を 1 箇所に固定し、スケジューラ側は「全項目を送る」だけにするため。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from .program import Program
from .types import UniformSnapshot

GlslType = Literal["vec2", "float", "int"]


@dataclass(frozen=True)
class UniformBinding:
    uniform: str
    glsl_type: GlslType
    field: str


UNIFORM_CONTRACT: tuple[UniformBinding, ...] = (
    UniformBinding("iResolution", "vec2", "resolution"),
    UniformBinding("iTime", "float", "elapsed_time"),
    UniformBinding("uMode", "int", "mode"),
    UniformBinding("uOctaves", "int", "octaves"),
    UniformBinding("uLacunarity", "float", "lacunarity"),
    UniformBinding("uGain", "float", "gain"),
    UniformBinding("uFBMScale", "float", "fbm_scale"),
    UniformBinding("uVoroScale", "float", "voro_scale"),
    UniformBinding("uCrackWidth", "float", "crack_width"),
    UniformBinding("uWarpStrength", "float", "warp_strength"),
    UniformBinding("uFlowSpeed", "float", "flow_speed"),
    UniformBinding("uPalette", "int", "palette"),
)

UNIFORM_NAMES: tuple[str, ...] = tuple(b.uniform for b in UNIFORM_CONTRACT)


def push_uniforms(program: Program, snapshot: UniformSnapshot) -> None:
    """スナップショットの全項目を対応する uniform へ書き込む（不在スロットは無視）。"""
    for binding in UNIFORM_CONTRACT:
        value = getattr(snapshot, binding.field)
        program.write(binding.uniform, _as_glsl(binding.glsl_type, value))


def _as_glsl(glsl_type: GlslType, value: Any) -> Any:
    if glsl_type == "vec2":
        x, y = value
        return (float(x), float(y))
    if glsl_type == "int":
        return int(value)
    return float(value)


__all__ = ["UniformBinding", "UNIFORM_CONTRACT", "UNIFORM_NAMES", "push_uniforms"]
