"""
どこで: `engine.ui.parameters` の値変換レイヤ。
何を: コントロールの文字列値を数値へ変換する前方一致パース（整数は切り捨て）と、表示用の整形。
なぜ: "5.7" → 5 のような切り捨てや末尾ゴミの無視を一貫させ、表示用整形が描画値へ
    逆流しないよう別関数に分けるため。

補足:
- 本レイヤではクランプしない（値域外もそのまま返す）。
- パースできない文字列は None を返し、既定の代替値の選択は呼び出し側に委ねる。
"""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any

from .state import ParameterDescriptor

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:inf(?:inity)?|nan|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))",
    re.IGNORECASE,
)
_CENTS = Decimal("0.01")
# 倍精度の有限値はすべて 400 桁に収まる
_FIXED_CONTEXT = Context(prec=400)


def parse_int_prefix(text: str) -> int | None:
    """先頭の整数部分を読む（"5.7" → 5, "-3px" → -3）。読めなければ None。"""
    m = _INT_PREFIX.match(text)
    if m is None:
        return None
    return int(m.group(1))


def parse_float_prefix(text: str) -> float | None:
    """先頭の浮動小数部分を読む（"0.25abc" → 0.25, "1e3" → 1000.0）。読めなければ None。"""
    m = _FLOAT_PREFIX.match(text)
    if m is None:
        return None
    return float(m.group(1))


def format_value(desc: ParameterDescriptor, value: Any) -> str:
    """表示用文字列を返す。整数は 10 進、float は小数 2 桁、enum は表示名。"""
    if desc.value_type == "float":
        return to_fixed2(float(value))
    iv = int(value)
    if desc.value_type == "enum":
        label = desc.choice_label(iv)
        if label is not None:
            return label
    return str(iv)


def to_fixed2(value: float) -> str:
    """小数 2 桁へ四捨五入した文字列（0.125 → "0.13", -0.125 → "-0.13"）。

    2 進値そのものを基準に、ちょうど中間なら絶対値の大きい側へ丸める。
    `format(v, ".2f")` の偶数丸め（0.125 → "0.12"）とは異なる。非有限値は "nan"/"inf"/"-inf"。
    """
    if not math.isfinite(value):
        return f"{value:.2f}"
    if value == 0:
        value = 0.0  # "-0.00" にしない
    exact = Decimal(value)
    return str(exact.quantize(_CENTS, rounding=ROUND_HALF_UP, context=_FIXED_CONTEXT))


__all__ = ["parse_int_prefix", "parse_float_prefix", "format_value", "to_fixed2"]
