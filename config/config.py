"""
設定管理模組
統一管理預設覆寫模式、日誌等設定。
全部透過環境變數提供，方便 CI/CD 整合。

注意：設定在 import 時讀取一次，之後的環境變數覆寫不會影響這裡。
"""

import os


class Config:
    """框架全域設定"""

    # 覆寫模式: ALLOW_OVERRIDE / DENY_OVERRIDE
    OVERRIDE_MODE = os.getenv("OVERRIDE_MODE", "ALLOW_OVERRIDE")

    # 日誌
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_DIR = os.getenv("LOG_DIR", "")
    LOG_JSON = os.getenv("LOG_JSON", "").strip() == "1"

    @classmethod
    def default_mode(cls):
        """
        取得預設覆寫模式。

        Returns:
            OverrideMode

        Raises:
            InvalidConfigError: OVERRIDE_MODE 不是合法的模式名稱
        """
        from core.merge_policy import OverrideMode

        return OverrideMode.parse(cls.OVERRIDE_MODE, key="OVERRIDE_MODE")
