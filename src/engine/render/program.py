"""
どこで: `engine.render.program`。
何を: 頂点/フラグメントの 2 ステージを ModernGL でコンパイル・リンクし、uniform スロットを
    名前で一度だけ解決した `Program` を返す。失敗は CompileError/LinkError で即時に止める。
なぜ: 壊れたシェーダは自己修復できないため、起動時に診断付きで確実に失敗させるため。

補足:
- ModernGL はコンパイルとリンクを 1 回の `ctx.program()` で行い、失敗を `moderngl.Error` の
  メッセージで報告する。ここではその見出し（"GLSL Compiler failed" / "GLSL Linker failed" と
  ステージ名）を解析して例外を分類する。
- 最適化で消えた uniform は `ABSENT` に解決し、書き込みは無視する（失敗にはしない）。
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

import moderngl

from .errors import CompileError, LinkError, Stage

logger = logging.getLogger(__name__)

REQUIRED_ATTRIBUTES: tuple[str, ...] = ("aPos",)

_STAGE_TOKENS: tuple[tuple[str, Stage], ...] = (
    ("vertex_shader", "vertex"),
    ("fragment_shader", "fragment"),
)


class _AbsentUniform:
    """存在しない uniform の番兵。`value` への代入は何もしない。"""

    __slots__ = ()

    @property
    def value(self) -> None:
        return None

    @value.setter
    def value(self, _value: Any) -> None:
        return None

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _AbsentUniform()


class Program:
    """リンク済みプログラムと、名前 → uniform スロットの対応表。"""

    def __init__(self, handle: Any, uniforms: Mapping[str, Any]) -> None:
        self.handle = handle
        self._uniforms = dict(uniforms)

    @property
    def uniforms(self) -> Mapping[str, Any]:
        return dict(self._uniforms)

    def slot(self, name: str) -> Any:
        """解決済みスロットを返す（未解決/不在は `ABSENT`）。"""
        return self._uniforms.get(name, ABSENT)

    def has_uniform(self, name: str) -> bool:
        return self.slot(name) is not ABSENT

    def write(self, name: str, value: Any) -> None:
        """uniform へ値を書き込む。不在スロットへの書き込みは no-op。"""
        self.slot(name).value = value

    def release(self) -> None:
        release = getattr(self.handle, "release", None)
        if callable(release):
            release()


class ProgramBuilder:
    """シェーダソースから `Program` を組み立てる。"""

    def __init__(self, ctx: Any, *, required_attributes: Iterable[str] = REQUIRED_ATTRIBUTES):
        self.ctx = ctx
        self._required_attributes = tuple(required_attributes)

    def build(
        self,
        vertex_source: str,
        fragment_source: str,
        uniform_names: Iterable[str] = (),
    ) -> Program:
        """2 ステージをコンパイル・リンクし、`uniform_names` を解決して返す。

        Raises
        ------
        CompileError
            いずれかのステージのコンパイルに失敗（頂点 → フラグメントの順に検出）。
        LinkError
            リンク失敗、または必須 attribute（`aPos`）が見つからない。
        """
        sources: dict[Stage, str] = {"vertex": vertex_source, "fragment": fragment_source}
        try:
            handle = self.ctx.program(
                vertex_shader=vertex_source,
                fragment_shader=fragment_source,
            )
        except moderngl.Error as e:
            err = _classify_error(str(e), sources)
            logger.error("%s", err)
            raise err from e

        for attr in self._required_attributes:
            if _lookup(handle, attr) is None:
                err = LinkError(f"required attribute '{attr}' is not an active input")
                logger.error("%s", err)
                raise err

        uniforms: dict[str, Any] = {}
        for name in uniform_names:
            slot = _lookup(handle, name)
            if slot is None:
                logger.debug("uniform '%s' is inactive; writes will be ignored", name)
                uniforms[name] = ABSENT
            else:
                uniforms[name] = slot
        return Program(handle, uniforms)


# ---------- helpers -------------------------------------------------------- #
def _lookup(handle: Any, name: str) -> Any | None:
    try:
        return handle[name]
    except KeyError:
        return None


def _classify_error(message: str, sources: Mapping[Stage, str]) -> CompileError | LinkError:
    """`moderngl.Error` のメッセージを CompileError/LinkError に分類する。"""
    head, log = _split_header(message)
    if "linker" in head.lower():
        return LinkError(log)
    for token, stage in _STAGE_TOKENS:
        if token in head:
            return CompileError(stage, log, sources[stage])
    if "compiler" in head.lower():
        # ステージ名が読めない場合は頂点から順に評価されたものとみなす
        return CompileError("vertex", log, sources["vertex"])
    return LinkError(log)


def _split_header(message: str) -> tuple[str, str]:
    """見出し部（見出し行 + ステージ名 + 下線）と診断ログ本体を分ける。"""
    lines = message.strip().splitlines()
    for i, line in enumerate(lines):
        stripped = line.strip()
        if stripped and set(stripped) == {"="}:
            return "\n".join(lines[:i]), "\n".join(lines[i + 1 :]).strip()
    # 下線が無い形式: 先頭の数行を見出しとみなし、ログは全文を残す
    return "\n".join(lines[:3]), message.strip()


__all__ = ["ABSENT", "Program", "ProgramBuilder", "REQUIRED_ATTRIBUTES"]
