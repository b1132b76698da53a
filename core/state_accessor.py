"""
State Accessor — 行程層級全域表的讀取 / 整表替換

ScopedOverride 只透過這個介面碰全域狀態，因此可以用 InMemoryAccessor
在不動到真實環境變數的情況下測試覆寫流程。

實作：
    EnvironmentAccessor       環境變數 (os.environ)
    SystemPropertiesAccessor  系統屬性 (core.system_properties)
    InMemoryAccessor          純記憶體表，測試用

環境變數的注意事項：
    os.environ 是 C 層 environ 的快取。直接呼叫 os.putenv() 不會更新
    os.environ，os.getenv() 就讀不到。所以一律經由 os.environ 寫入，
    它會同時呼叫 putenv / unsetenv，兩邊保持一致。
    POSIX 上 os.environb 與 os.environ 共用同一份資料；
    Windows 上 key 會被轉成大寫（不分大小寫）。
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Mapping, MutableMapping

from core.exceptions import InvalidOverrideError, StateAccessDenied
from core.system_properties import SystemProperties, system_properties

# 平台拒絕存取時可能拋出的例外。
# audit hook（sys.addaudithook）可在 os.putenv 事件中拋 RuntimeError。
_PLATFORM_ERRORS = (OSError, RuntimeError)


class StateAccessor(ABC):
    """全域字串表的存取介面"""

    name: str = "state"

    @abstractmethod
    def _read(self) -> dict[str, str]:
        """讀出整張表的複本"""

    @abstractmethod
    def _write(self, table: dict[str, str]) -> None:
        """清空並以 table 重新填入"""

    def normalize_key(self, key: str) -> str:
        """轉成表內實際存放的 key 形式；預設分大小寫，原樣回傳"""
        return key

    def snapshot(self) -> Mapping[str, str]:
        """取得整張表的不可變複本，之後對全域表的修改不會反映在這裡"""
        try:
            table = self._read()
        except _PLATFORM_ERRORS as e:
            raise StateAccessDenied(table=self.name, operation="snapshot", original=e) from e
        return MappingProxyType(table)

    def replace(self, new_table: Mapping[str, str | None]) -> None:
        """
        整表替換。值為 None 的 key 不寫入。

        Raises:
            StateAccessDenied: 平台拒絕寫入
            InvalidOverrideError: 內容無法寫入這張表（寫入前就擋下，表不變）
        """
        table = {k: v for k, v in new_table.items() if v is not None}
        try:
            self._write(table)
        except StateAccessDenied:
            raise
        except _PLATFORM_ERRORS as e:
            raise StateAccessDenied(table=self.name, operation="replace", original=e) from e

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class EnvironmentAccessor(StateAccessor):
    """
    環境變數

    case_insensitive 預設依平台決定（Windows 為 True），
    此時 key 一律轉大寫，與 os.environ 的存放方式一致。
    """

    name = "environment"

    def __init__(self, environ: MutableMapping[str, str] | None = None,
                 case_insensitive: bool | None = None):
        self._environ = os.environ if environ is None else environ
        self.case_insensitive = os.name == "nt" if case_insensitive is None else case_insensitive

    def normalize_key(self, key: str) -> str:
        return key.upper() if self.case_insensitive else key

    def _read(self) -> dict[str, str]:
        return dict(self._environ)

    def _write(self, table: dict[str, str]) -> None:
        # putenv 會拒絕的內容要在 clear() 之前擋下，否則表會被清到一半
        for key, value in table.items():
            _check_entry(key, value)
        # clear() 會逐一 unsetenv，update() 逐一 putenv
        self._environ.clear()
        self._environ.update(table)


def _check_entry(key: str, value: str) -> None:
    """os.putenv 不接受空 key、含 = 的 key，以及含 NUL 的 key / value"""
    # Windows 允許開頭的 =（例如隱藏的 =C: 變數）
    name = key[1:] if os.name == "nt" else key
    if not key or "=" in name or "\0" in key:
        raise InvalidOverrideError(key=key, value=value, reason="環境變數名稱不合法")
    if "\0" in value:
        raise InvalidOverrideError(key=key, value=value, reason="環境變數值不可含 NUL 字元")


class SystemPropertiesAccessor(StateAccessor):
    """系統屬性"""

    name = "system properties"

    def __init__(self, store: SystemProperties | None = None):
        self._store = system_properties if store is None else store

    def _read(self) -> dict[str, str]:
        return self._store.get_properties()

    def _write(self, table: dict[str, str]) -> None:
        self._store.set_properties(table)


class InMemoryAccessor(StateAccessor):
    """純記憶體表，不碰任何行程狀態"""

    def __init__(self, initial: Mapping[str, str] | None = None, name: str = "in-memory"):
        self.name = name
        self.table: dict[str, str] = dict(initial or {})
        self.replace_count = 0

    def _read(self) -> dict[str, str]:
        return dict(self.table)

    def _write(self, table: dict[str, str]) -> None:
        self.table = dict(table)
        self.replace_count += 1


# 全域 singleton
environment = EnvironmentAccessor()
properties = SystemPropertiesAccessor()
