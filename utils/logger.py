"""
日誌模組
統一的 logging 設定，輸出到 console，可選擇同時寫入檔案。

支援：
- Console 輸出（人類可讀格式）
- 檔案輸出（純文字 + 可選 JSON 結構化格式）
- 環境變數控制:
    LOG_LEVEL: console 日誌等級 (預設 INFO)
    LOG_DIR:   設定後才寫入日誌檔 (overrides.log)
    LOG_JSON:  設為 "1" 且有 LOG_DIR 時，額外寫入 JSON 結構化日誌檔
               覆寫相關紀錄另帶 table / keys / mode 欄位

覆寫的環境變數值可能含有密碼或 token，只記錄 key，不記錄 value。
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from config.config import Config

_OVERRIDE_FIELDS = ("table", "keys", "mode")


class JsonFormatter(logging.Formatter):
    """JSON 結構化日誌格式器，適合 ELK / Loki 等日誌系統"""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        # ScopedOverride 經由 extra= 帶入的覆寫資訊（只有 key，沒有 value）
        for field in _OVERRIDE_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False)


def _create_logger() -> logging.Logger:
    _logger = logging.Logger("system_overrides")
    _logger.setLevel(logging.DEBUG)

    console_level = getattr(logging, Config.LOG_LEVEL, logging.INFO)

    fmt = logging.Formatter(
        "[%(asctime)s] %(levelname)-7s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Console handler（人類可讀）
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    _logger.addHandler(console)

    if not Config.LOG_DIR:
        return _logger

    log_dir = Path(Config.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)

    # File handler（純文字）
    file_handler = logging.FileHandler(log_dir / "overrides.log", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(fmt)
    _logger.addHandler(file_handler)

    # JSON file handler（可選，設 LOG_JSON=1 啟用）
    if Config.LOG_JSON:
        json_handler = logging.FileHandler(
            log_dir / "overrides.json.log", encoding="utf-8"
        )
        json_handler.setLevel(logging.DEBUG)
        json_handler.setFormatter(JsonFormatter())
        _logger.addHandler(json_handler)

    return _logger


logger = _create_logger()
