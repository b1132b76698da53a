"""
Matchers — 函式 metadata 與執行結果 (Outcome) 的語意化斷言

用法：
    from core.assertions import Outcome, expect_function, expect_outcome

    # 函式 annotation
    expect_function(parse).to_have_annotations()
    expect_function(parse).to_have_annotations(3)
    expect_function(parse).to_be_annotated_with("return")
    expect_function(parse).to_have_return_type(dict)
    expect_function(helper).not_to.to_have_annotations()

    # 執行結果
    outcome = Outcome.of(int, "42")
    expect_outcome(outcome).to_be_success()
    expect_outcome(outcome).to_be_success(42)
    expect_outcome(Outcome.of(int, "x")).to_be_failure_of_type(ValueError)
    expect_outcome(outcome).to_be_success(block=lambda v: ...)   # 通過後再檢查值
"""

from __future__ import annotations

import inspect
import typing
from dataclasses import dataclass
from typing import Any, Callable

_MISSING = object()


@dataclass(frozen=True)
class Outcome:
    """成功的值或失敗的例外，二擇一"""

    value: Any = None
    error: BaseException | None = None

    @classmethod
    def success(cls, value: Any) -> "Outcome":
        return cls(value=value)

    @classmethod
    def failure(cls, error: BaseException) -> "Outcome":
        return cls(error=error)

    @classmethod
    def of(cls, fn: Callable, *args, **kwargs) -> "Outcome":
        """執行 fn，把回傳值或 Exception 包成 Outcome"""
        try:
            return cls.success(fn(*args, **kwargs))
        except Exception as e:
            return cls.failure(e)

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    def __repr__(self) -> str:
        if self.is_success:
            return f"Success({self.value!r})"
        return f"Failure({type(self.error).__name__}: {self.error})"


class Expect:
    """
    可鏈式呼叫的斷言基底

    子類別用 _assert(passed, 正向訊息, 反向訊息)。
    """

    def __init__(self, actual: Any, label: str = ""):
        self._actual = actual
        self._label = label
        self._negated = False

    @property
    def not_to(self):
        """反向斷言: expect_function(fn).not_to.to_have_annotations()"""
        # 回傳新物件避免污染
        clone = type(self)(self._actual, self._label)
        clone._negated = True
        return clone

    def _assert(self, passed: bool, message: str, negated_message: str) -> None:
        if self._negated:
            passed = not passed
            message = negated_message

        if not passed:
            label = f"[{self._label}] " if self._label else ""
            raise AssertionError(f"{label}{message}")


class FunctionExpect(Expect):
    """函式 annotation / 回傳型別"""

    @property
    def _name(self) -> str:
        return getattr(self._actual, "__qualname__", repr(self._actual))

    def _annotations(self) -> dict[str, Any]:
        return dict(inspect.get_annotations(self._actual))

    def to_have_annotations(self, count: int | None = None) -> None:
        """有 annotation；指定 count 則需剛好 count 個（含 return）"""
        actual_count = len(self._annotations())
        if count is None:
            self._assert(
                actual_count > 0,
                f"函式 {self._name} 應該有 annotation",
                f"函式 {self._name} 不應該有 annotation",
            )
        else:
            self._assert(
                actual_count == count,
                f"函式 {self._name} 應該有 {count} 個 annotation，實際 {actual_count}",
                f"函式 {self._name} 不應該有 {count} 個 annotation",
            )

    def to_be_annotated_with(self, name: str, block: Callable[[Any], None] | None = None) -> None:
        """參數 (或 "return") 有 annotation；通過時把 annotation 交給 block"""
        annotations = self._annotations()
        self._assert(
            name in annotations,
            f"函式 {self._name} 的 {name} 應該有 annotation",
            f"函式 {self._name} 的 {name} 不應該有 annotation",
        )
        if block is not None and not self._negated:
            block(annotations[name])

    def to_have_return_type(self, expected: Any) -> None:
        """回傳型別 annotation 等於 expected（字串 annotation 會先解析）"""
        try:
            hints = typing.get_type_hints(self._actual)
        except (NameError, TypeError):
            hints = self._annotations()
        actual = hints.get("return", _MISSING)
        actual_repr = "無" if actual is _MISSING else _type_name(actual)
        self._assert(
            actual == expected,
            f"函式 {self._name} 的回傳型別應為 {_type_name(expected)}，實際 {actual_repr}",
            f"函式 {self._name} 的回傳型別不應為 {_type_name(expected)}",
        )


class OutcomeExpect(Expect):
    """Outcome 成功 / 失敗"""

    def to_be_success(self, expected: Any = _MISSING,
                      block: Callable[[Any], None] | None = None) -> None:
        outcome: Outcome = self._actual
        if not outcome.is_success or expected is _MISSING:
            self._assert(outcome.is_success, "Outcome 應為成功", "Outcome 不應為成功")
        else:
            self._assert(
                outcome.value == expected,
                f"Outcome 應為 Success({expected!r})，實際 {outcome!r}",
                f"Outcome 不應為 Success({expected!r})",
            )
        if block is not None and not self._negated:
            block(outcome.value)

    def to_be_failure(self, block: Callable[[BaseException], None] | None = None) -> None:
        outcome: Outcome = self._actual
        self._assert(outcome.is_failure, "Outcome 應為失敗", "Outcome 不應為失敗")
        if block is not None and not self._negated:
            block(outcome.error)

    def to_be_failure_of_type(self, exc_type: type[BaseException]) -> None:
        outcome: Outcome = self._actual
        if outcome.is_success:
            self._assert(False, "Outcome 應為失敗", "Outcome 應為失敗")
            return
        self._assert(
            isinstance(outcome.error, exc_type),
            f"Outcome 應為 Failure({exc_type.__name__})，實際 {outcome!r}",
            f"Outcome 不應為 Failure({exc_type.__name__})",
        )


def _type_name(tp: Any) -> str:
    return tp.__name__ if isinstance(tp, type) else repr(tp)


def expect_function(fn: Callable, label: str = "") -> FunctionExpect:
    """建立函式斷言物件"""
    return FunctionExpect(fn, label)


def expect_outcome(outcome: Outcome, label: str = "") -> OutcomeExpect:
    """建立 Outcome 斷言物件"""
    return OutcomeExpect(outcome, label)
