from __future__ import annotations

import pytest

from engine.render.errors import CompileError, LinkError, RenderInitError
from engine.render.program import ABSENT, ProgramBuilder
from engine.render.shader import load_shader_sources
from engine.render.uniforms import UNIFORM_NAMES

VS = """#version 330
in vec2 aPos;
void main() { gl_Position = vec4(aPos, 0.0, 1.0); }
"""

FS = """#version 330
uniform float iTime;
out vec4 fragColor;
void main() { fragColor = vec4(iTime); }
"""


def test_build_resolves_all_contract_uniforms_for_bundled_shaders(fake_ctx) -> None:
    src = load_shader_sources()
    program = ProgramBuilder(fake_ctx).build(src.vertex, src.fragment, UNIFORM_NAMES)
    for name in UNIFORM_NAMES:
        assert program.has_uniform(name), name
    assert len(fake_ctx.programs) == 1


def test_inactive_uniform_resolves_to_absent_and_writes_are_noops(fake_ctx) -> None:
    program = ProgramBuilder(fake_ctx).build(VS, FS, ("iTime", "uCrackWidth"))
    assert program.slot("uCrackWidth") is ABSENT
    assert not program.has_uniform("uCrackWidth")
    program.write("uCrackWidth", 0.1)  # 例外にならない
    program.write("iTime", 1.5)
    assert program.slot("iTime").value == 1.5


def test_fragment_compile_error_reports_stage_and_log(fake_ctx) -> None:
    fake_ctx.fail_with = (
        "GLSL Compiler failed\n\nfragment_shader\n===============\n"
        "0:3(12): error: syntax error, unexpected ';'"
    )
    with pytest.raises(CompileError) as ei:
        ProgramBuilder(fake_ctx).build(VS, FS)
    err = ei.value
    assert err.stage == "fragment"
    assert "syntax error" in err.log
    assert err.source == FS
    assert isinstance(err, RenderInitError)


def test_vertex_compile_error_reports_vertex_stage(fake_ctx) -> None:
    fake_ctx.fail_with = "GLSL Compiler failed\n\nvertex_shader\n=============\n0:1: bad"
    with pytest.raises(CompileError) as ei:
        ProgramBuilder(fake_ctx).build(VS, FS)
    assert ei.value.stage == "vertex"
    assert ei.value.source == VS


def test_linker_failure_is_link_error(fake_ctx) -> None:
    fake_ctx.fail_with = "GLSL Linker failed\n\nProgram\n=======\nerror: undefined varying"
    with pytest.raises(LinkError) as ei:
        ProgramBuilder(fake_ctx).build(VS, FS)
    assert "undefined varying" in ei.value.log


def test_missing_position_attribute_is_link_error(fake_ctx) -> None:
    vs = """#version 330
in vec2 position;
void main() { gl_Position = vec4(position, 0.0, 1.0); }
"""
    with pytest.raises(LinkError):
        ProgramBuilder(fake_ctx).build(vs, FS)


def test_release_delegates_to_handle(fake_ctx) -> None:
    program = ProgramBuilder(fake_ctx).build(VS, FS)
    program.release()
    assert fake_ctx.programs[0].released
