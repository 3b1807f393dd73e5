"""
どこで: `api.lava_runner.params`
何を: スキーマ（設定ファイルの上書き込み）から ParameterStore を組み立て、CLI の
    `name=value` 指定を初期 override として適用する。
なぜ: 起動時の値の出所（既定/設定/CLI）をここで確定させ、描画ループは Store を読むだけにするため。
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from engine.ui.parameters.registry import PARAMETERS, apply_overrides
from engine.ui.parameters.state import ParameterDescriptor, ParameterStore
from util.utils import config_section


def resolve_schema(cfg: Mapping[str, Any] | None) -> tuple[ParameterDescriptor, ...]:
    """既定スキーマに設定の `parameters:` セクションを適用して返す。"""
    return apply_overrides(PARAMETERS, config_section(cfg, "parameters"))


def parse_assignments(items: Iterable[str]) -> dict[str, str]:
    """`["octaves=6", "gain=0.4"]` を辞書へ変換する（値は文字列のまま）。"""
    result: dict[str, str] = {}
    for item in items:
        name, sep, value = str(item).partition("=")
        name = name.strip()
        if not sep or not name:
            raise ValueError(f"expected NAME=VALUE, got {item!r}")
        result[name] = value.strip()
    return result


def build_parameter_store(
    schema: Iterable[ParameterDescriptor],
    values: Mapping[str, Any] | None = None,
) -> ParameterStore:
    """スキーマを登録した Store を返す。`values` は CLI 由来の override として適用する。

    未知のパラメータ名は `ValueError`。値そのものは検証しない（コントロールと同じく生値を保持）。
    """
    store = ParameterStore()
    descriptors = list(schema)
    store.register_all(descriptors)
    known = {d.id for d in descriptors}
    for name, value in (values or {}).items():
        if name not in known:
            allowed = ", ".join(sorted(known))
            raise ValueError(f"unknown parameter: {name}; allowed={allowed}")
        store.set_override(name, value, source="cli")
    return store


__all__ = ["resolve_schema", "parse_assignments", "build_parameter_store"]
