"""
どこで: `engine.ui.parameters` の状態管理層。
何を: ParameterDescriptor/RangeHint のメタと、ParameterStore による値（original/override）を集中管理。
    各コントロールの「現在の文字列値」を返す `read(name)` を提供する（ControlSource 実装）。
なぜ: GUI/CLI/設定が書き込み、描画ループが読むだけの単一の真実源として状態を一元化するため。

補足:
- `set_override()` は実値をそのまま保持し、クランプしない（表示上のクランプは GUI レイヤの責務）。
- 読み手（FrameScheduler）は 1 人、書き手は GUI のみ。ロックは GUI ドライバが別スレッドの場合に備える。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import RLock
from typing import Any, Callable, Iterable, Literal

ValueType = Literal["int", "float", "enum"]
OverrideSource = Literal["gui", "cli"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RangeHint:
    """コントロールの値域（実レンジ）。"""

    min_value: float | int
    max_value: float | int
    step: float | int | None = None


@dataclass(frozen=True)
class EnumChoice:
    """列挙値 1 件（shader に渡す整数と表示名）。"""

    value: int
    label: str


@dataclass(frozen=True)
class ParameterDescriptor:
    """パラメータのメタ情報（スキーマ 1 行）。

    - `id` はコントロール名（`octaves`, `fbmScale` 等）。
    - `field` は `ParameterSnapshot` 上の属性名。
    """

    id: str
    label: str
    value_type: ValueType
    default_value: Any
    field: str
    range_hint: RangeHint | None = None
    choices: tuple[EnumChoice, ...] | None = None

    def choice_label(self, value: int) -> str | None:
        for choice in self.choices or ():
            if choice.value == value:
                return choice.label
        return None


@dataclass
class ParameterValue:
    """登録時の値と override を保持する。"""

    original: Any
    override: Any | None = None

    def resolve(self) -> Any:
        # override > original
        if self.override is not None:
            return self.override
        return self.original


Subscriber = Callable[[Iterable[str]], None]


class ParameterStore:
    """パラメータメタデータと値を集中管理する。"""

    def __init__(self) -> None:
        self._descriptors: dict[str, ParameterDescriptor] = {}
        self._values: dict[str, ParameterValue] = {}
        self._listeners: list[Subscriber] = []
        self._lock = RLock()

    # --- 登録 ---
    def register(self, descriptor: ParameterDescriptor, value: Any | None = None) -> None:
        """Descriptor を登録し、初期値（省略時は既定値）を保存する。"""
        initial = descriptor.default_value if value is None else value
        changed: set[str] = set()
        with self._lock:
            if self._descriptors.get(descriptor.id) != descriptor:
                self._descriptors[descriptor.id] = descriptor
                changed.add(descriptor.id)
            current = self._values.get(descriptor.id)
            if current is None:
                self._values[descriptor.id] = ParameterValue(original=initial)
                changed.add(descriptor.id)
            elif current.original != initial:
                current.original = initial
                changed.add(descriptor.id)
        if changed:
            self._notify(changed)

    def register_all(self, descriptors: Iterable[ParameterDescriptor]) -> None:
        for desc in descriptors:
            self.register(desc)

    # --- 値操作 ---
    def read(self, name: str) -> str:
        """コントロールの現在値を文字列で返す（未登録は KeyError）。

        float は `repr` で書き出すため、読み手がパースすると元の値に一致する。
        """
        with self._lock:
            entry = self._values.get(name)
            if entry is None:
                raise KeyError(name)
            value = entry.resolve()
        return _as_text(value)

    def set_override(
        self,
        param_id: str,
        value: Any,
        *,
        source: OverrideSource = "gui",
    ) -> None:
        # 実値はそのまま保持し、ここではクランプしない
        with self._lock:
            entry = self._values.setdefault(param_id, ParameterValue(original=value))
            entry.override = value
        logger.debug("override %s=%r (%s)", param_id, value, source)
        self._notify({param_id})

    # --- リスナー ---
    def subscribe(self, listener: Subscriber) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Subscriber) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def _notify(self, param_ids: Iterable[str]) -> None:
        ids = list(param_ids)
        if not ids:
            return
        for listener in list(self._listeners):
            try:
                listener(ids)
            except Exception:
                logger.exception("parameter listener failed: ids=%s", ids)


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float):
        return repr(value)
    return str(value)


__all__ = [
    "ValueType",
    "RangeHint",
    "EnumChoice",
    "ParameterDescriptor",
    "ParameterValue",
    "ParameterStore",
]
