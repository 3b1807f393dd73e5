"""
どこで: `engine.ui.parameters` パッケージの公開入口。
何を: ParameterStore/ParameterRegistry/ParameterDescriptor など UI パラメータ機構の主要型を再輸出。
なぜ: 外部から薄いファサードを提供し、Dear PyGui 依存（panel）を必要時まで読み込まないため。
"""

from .registry import PARAMETERS, ControlSource, ParameterRegistry, apply_overrides
from .state import (
    EnumChoice,
    ParameterDescriptor,
    ParameterStore,
    RangeHint,
)

__all__ = [
    "PARAMETERS",
    "ControlSource",
    "ParameterRegistry",
    "apply_overrides",
    "EnumChoice",
    "ParameterDescriptor",
    "ParameterStore",
    "RangeHint",
]
