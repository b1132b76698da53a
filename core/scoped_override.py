"""
Scoped Override — 暫時覆寫環境變數 / 系統屬性，結束後原樣還原

流程：
    快照 original → 依 mode 合併 desired → 整表替換 → 執行 work
    → 不論成功、失敗或被中斷，一律把 original 寫回

用法：
    from core.scoped_override import with_environment, with_system_property

    # 傳入 block，直接回傳 block 的結果
    token = with_environment("API_TOKEN", "dummy", block=lambda: read_token())

    # with 語法
    with with_environment({"FOO": "bar", "UNWANTED": None}):
        assert os.getenv("FOO") == "bar"
        assert os.getenv("UNWANTED") is None

    # 當 decorator
    @with_system_property("app.mode", "test")
    def test_something():
        ...

    # 只補上不存在的 key，已存在的不動
    with with_environment("HOME", "/tmp", mode=OverrideMode.DENY_OVERRIDE):
        ...

**注意**：環境變數與系統屬性都是整個行程共用的單一表，沒有鎖。
多執行緒同時覆寫同一張表會互相踩到，結果不一致。
巢狀使用是安全的：內層只還原它自己拍的快照。
"""

from __future__ import annotations

from contextlib import ContextDecorator
from typing import Callable, Iterable, Mapping, TypeVar, Union

from config.config import Config
from core.exceptions import InvalidOverrideError, RestoreFailure, StateAccessDenied
from core.merge_policy import OverrideMode, compute_effective
from core.state_accessor import StateAccessor, environment, properties
from utils.logger import logger

T = TypeVar("T")

Overrides = Union[
    Mapping[str, Union[str, None]],
    Iterable[tuple[str, Union[str, None]]],
    tuple[str, Union[str, None]],
    str,
]

_MISSING = object()


def normalize_overrides(overrides: Overrides, value: object = _MISSING) -> dict[str, str | None]:
    """
    統一各種輸入形式為 dict。

    支援：
        normalize_overrides({"A": "1", "B": None})
        normalize_overrides([("A", "1"), ("B", None)])
        normalize_overrides(("A", "1"))
        normalize_overrides("A", "1")

    Raises:
        InvalidOverrideError: key 不是 str，或 value 不是 str / None
    """
    if isinstance(overrides, str):
        if value is _MISSING:
            raise InvalidOverrideError(key=overrides, value=None)
        items = [(overrides, value)]
    elif value is not _MISSING:
        raise InvalidOverrideError(key=overrides, value=value)
    elif isinstance(overrides, Mapping):
        items = list(overrides.items())
    elif isinstance(overrides, tuple) and len(overrides) == 2 and isinstance(overrides[0], str):
        items = [overrides]
    else:
        items = []
        for pair in overrides:
            if not isinstance(pair, tuple) or len(pair) != 2:
                raise InvalidOverrideError(key=pair, value=None)
            items.append(pair)

    result: dict[str, str | None] = {}
    for key, val in items:
        if not isinstance(key, str) or not (val is None or isinstance(val, str)):
            raise InvalidOverrideError(key=key, value=val)
        result[key] = val
    return result


class ScopedOverride(ContextDecorator):
    """
    對單一全域表做暫時覆寫。

    可當 context manager、decorator，或用 run(work) 直接執行。
    同一個實例可以重入：快照存在 stack 上，依序還原。
    """

    def __init__(self, accessor: StateAccessor, desired: Mapping[str, str | None],
                 mode: OverrideMode | None = None):
        self.accessor = accessor
        self.desired = {accessor.normalize_key(k): v for k, v in desired.items()}
        self.mode = mode or Config.default_mode()
        self._snapshots: list[Mapping[str, str]] = []

    @property
    def active(self) -> bool:
        return bool(self._snapshots)

    def run(self, work: Callable[[], T]) -> T:
        """在覆寫範圍內執行 work，回傳其結果"""
        with self:
            return work()

    def __enter__(self) -> "ScopedOverride":
        original = self.accessor.snapshot()
        effective = compute_effective(original, self.desired, self.mode)
        try:
            self.accessor.replace(effective)
        except BaseException as e:
            # 寫入可能做到一半；表有變動才退回快照
            if self._changed_since(original):
                self._restore(original, pending_error=e)
            raise
        self._snapshots.append(original)
        logger.debug(
            f"[Override] 套用 {self.accessor.name}: "
            f"keys={sorted(self.desired)} mode={self.mode.name}",
            extra=self._log_fields(),
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        original = self._snapshots.pop()
        self._restore(original, pending_error=exc_val)
        logger.debug(f"[Override] 已還原 {self.accessor.name}", extra=self._log_fields())
        return False

    def _log_fields(self) -> dict:
        return {
            "table": self.accessor.name,
            "keys": sorted(self.desired),
            "mode": self.mode.name,
        }

    def _changed_since(self, original: Mapping[str, str]) -> bool:
        try:
            return dict(self.accessor.snapshot()) != dict(original)
        except StateAccessDenied:
            return True

    def _restore(self, original: Mapping[str, str],
                 pending_error: BaseException | None = None) -> None:
        try:
            self.accessor.replace(original)
        except StateAccessDenied as e:
            logger.error(
                f"[Override] 還原 {self.accessor.name} 失敗: {e}", extra=self._log_fields()
            )
            raise RestoreFailure(
                table=self.accessor.name, pending_error=pending_error
            ) from e

    def __repr__(self) -> str:
        return (
            f"ScopedOverride({self.accessor!r}, keys={sorted(self.desired)}, "
            f"mode={self.mode.name})"
        )


def _scoped(accessor: StateAccessor, overrides: Overrides, value: object,
            mode: OverrideMode | None, block: Callable[[], T] | None):
    scope = ScopedOverride(accessor, normalize_overrides(overrides, value), mode)
    if block is None:
        return scope
    return scope.run(block)


def with_environment(overrides: Overrides, value: object = _MISSING, *,
                     mode: OverrideMode | None = None,
                     block: Callable[[], T] | None = None):
    """
    暫時覆寫環境變數。

    Args:
        overrides: mapping、(key, value) list、單一 (key, value)，或 key 字串
        value: overrides 為 key 字串時的值；None 代表移除該環境變數
        mode: 覆寫模式，預設取 Config.OVERRIDE_MODE
        block: 有給就在覆寫範圍內執行並回傳結果；沒給則回傳 ScopedOverride

    Raises:
        StateAccessDenied: 平台拒絕修改環境變數，block 不會執行
        RestoreFailure: 結束時無法還原
    """
    return _scoped(environment, overrides, value, mode, block)


def with_system_properties(overrides: Overrides, value: object = _MISSING, *,
                           mode: OverrideMode | None = None,
                           block: Callable[[], T] | None = None):
    """暫時覆寫系統屬性。參數同 with_environment"""
    return _scoped(properties, overrides, value, mode, block)


def with_system_property(key: str, value: str | None, *,
                         mode: OverrideMode | None = None,
                         block: Callable[[], T] | None = None):
    """暫時覆寫單一系統屬性"""
    return _scoped(properties, key, value, mode, block)
