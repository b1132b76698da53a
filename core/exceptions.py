"""
自訂 Exception 體系

所有覆寫 (override) 相關的失敗都有明確分類。
上層可以 catch 大類別 (如 OverrideFrameworkError)，
也可以精準 catch 子類別 (如 StateAccessDenied)。

注意：呼叫端 work() 自己拋出的例外不會被包裝，原樣往外拋。

Exception 樹：
    OverrideFrameworkError
    ├── StateAccessError
    │   ├── StateAccessDenied
    │   └── RestoreFailure
    ├── ConfigError
    │   ├── InvalidConfigError
    │   └── InvalidOverrideError
    └── TestDataError
        └── DataFileNotFoundError
"""

from __future__ import annotations


class OverrideFrameworkError(Exception):
    """框架所有例外的基底，catch 這個就能攔截一切框架錯誤"""

    def __init__(self, message: str = "", context: dict | None = None):
        self.context = context or {}
        super().__init__(message)


# ── 全域狀態存取 ──

class StateAccessError(OverrideFrameworkError):
    """讀寫全域表 (環境變數 / 系統屬性) 相關錯誤"""


class StateAccessDenied(StateAccessError):
    """平台拒絕讀寫全域表（例如受限的 sandbox）"""

    def __init__(self, table: str = "", operation: str = "",
                 original: BaseException | None = None):
        self.original = original
        msg = f"無法存取 {table}"
        if operation:
            msg += f" ({operation})"
        if original:
            msg += f": {type(original).__name__}: {original}"
        super().__init__(msg, context={"table": table, "operation": operation})


class RestoreFailure(StateAccessError):
    """
    還原原始狀態失敗 — 全域表已無法回到原本的樣子。

    pending_error 為 work() 當時正在傳遞的例外（若有），兩者都會被回報。
    """

    def __init__(self, table: str = "", pending_error: BaseException | None = None):
        self.pending_error = pending_error
        msg = f"還原 {table} 失敗，全域狀態已不一致"
        if pending_error is not None:
            msg += f" (work 同時失敗: {type(pending_error).__name__}: {pending_error})"
        super().__init__(msg, context={"table": table})


# ── Config 相關 ──

class ConfigError(OverrideFrameworkError):
    """設定相關錯誤"""


class InvalidConfigError(ConfigError):
    """設定值無效"""

    def __init__(self, key: str = "", value: str = "", reason: str = ""):
        msg = f"設定值無效: {key}={value}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg, context={"key": key, "value": value})


class InvalidOverrideError(ConfigError):
    """覆寫內容格式錯誤：key 必須是 str，value 必須是 str 或 None"""

    def __init__(self, key: object = None, value: object = None,
                 reason: str = "key 需為 str，value 需為 str 或 None"):
        super().__init__(
            f"無效的覆寫項目: {key!r}={value!r} ({reason})",
            context={"key": key, "value": value},
        )


# ── Test Data 相關 ──

class TestDataError(OverrideFrameworkError):
    """覆寫檔案相關錯誤"""

    __test__ = False


class DataFileNotFoundError(TestDataError):
    """找不到覆寫檔案"""

    def __init__(self, path: str = ""):
        super().__init__(f"找不到覆寫檔案: {path}", context={"path": path})
