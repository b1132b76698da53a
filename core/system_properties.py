"""
System Properties — 行程層級的屬性表

Python 沒有內建「系統屬性」表，這裡提供一份：
整個行程共用、key / value 都是字串，啟動時預先填入執行環境資訊。

內建屬性：
    python.version          3.12.1
    python.implementation   cpython
    os.name                 posix / nt
    sys.platform            linux / darwin / win32
    user.dir                目前工作目錄
    user.home               使用者家目錄
    file.encoding           檔案系統編碼
    line.separator          \\n / \\r\\n
    path.separator          : / ;

用法：
    from core.system_properties import system_properties

    system_properties.get_property("python.version")
    system_properties.set_property("app.mode", "test")

    # 模擬受限 sandbox：鎖住後任何寫入都會拋 StateAccessDenied
    system_properties.lock()

**注意**：這是單一共用表，沒有任何鎖保護並行覆寫。
"""

from __future__ import annotations

import os
import platform
import sys
from pathlib import Path
from typing import Mapping

from core.exceptions import StateAccessDenied

_TABLE_NAME = "system properties"


def _default_properties() -> dict[str, str]:
    return {
        "python.version": platform.python_version(),
        "python.implementation": sys.implementation.name,
        "os.name": os.name,
        "sys.platform": sys.platform,
        "user.dir": os.getcwd(),
        "user.home": str(Path.home()),
        "file.encoding": sys.getfilesystemencoding(),
        "line.separator": os.linesep,
        "path.separator": os.pathsep,
    }


class SystemProperties:
    """行程層級的字串屬性表"""

    def __init__(self, initial: Mapping[str, str] | None = None):
        self._properties: dict[str, str] = (
            dict(initial) if initial is not None else _default_properties()
        )
        self._locked = False

    @property
    def locked(self) -> bool:
        return self._locked

    def lock(self) -> None:
        """禁止寫入（模擬受限環境）"""
        self._locked = True

    def unlock(self) -> None:
        self._locked = False

    def get_property(self, key: str, default: str | None = None) -> str | None:
        return self._properties.get(key, default)

    def set_property(self, key: str, value: str) -> str | None:
        """設定屬性，回傳舊值"""
        self._check_writable("set_property")
        previous = self._properties.get(key)
        self._properties[key] = value
        return previous

    def clear_property(self, key: str) -> str | None:
        """移除屬性，回傳舊值"""
        self._check_writable("clear_property")
        return self._properties.pop(key, None)

    def get_properties(self) -> dict[str, str]:
        """取得整張表的複本"""
        return dict(self._properties)

    def set_properties(self, properties: Mapping[str, str | None] | None) -> None:
        """
        整張表替換。

        Args:
            properties: 新的屬性表；值為 None 的 key 不寫入。
                        傳 None 則重設為內建屬性。
        """
        self._check_writable("set_properties")
        if properties is None:
            self._properties = _default_properties()
            return
        self._properties = {k: v for k, v in properties.items() if v is not None}

    def __contains__(self, key: object) -> bool:
        return key in self._properties

    def __len__(self) -> int:
        return len(self._properties)

    def _check_writable(self, operation: str) -> None:
        if self._locked:
            raise StateAccessDenied(
                table=_TABLE_NAME,
                operation=operation,
                original=PermissionError("system properties are locked"),
            )


# 全域 singleton
system_properties = SystemProperties()
