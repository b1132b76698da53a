"""
覆寫檔載入器
支援從 .env / JSON / YAML 載入一組覆寫，給 listener 或 with_environment 使用。

用法：
    from utils.data_loader import load_overrides

    overrides = load_overrides("ci.env")
    overrides = load_overrides("overrides.json")
    overrides = load_overrides("overrides.yaml")

格式：
    .env     KEY=value；只寫 KEY（沒有 =）代表移除該 key
             ${VAR} 不展開，原樣保留
    .json    {"KEY": "value", "REMOVED": null}
    .yaml    KEY: value / REMOVED: null

數字與布林會轉成字串（true / false 採小寫）。
"""

import json
from pathlib import Path

from dotenv import dotenv_values

from core.exceptions import DataFileNotFoundError, InvalidConfigError, InvalidOverrideError


def load_env_file(path: str | Path) -> dict[str, str | None]:
    """從 .env 檔載入覆寫"""
    filepath = _existing(path)
    # 不展開 ${VAR}：否則會讀到當下（可能正被覆寫中）的 os.environ
    return dict(dotenv_values(filepath, interpolate=False, encoding="utf-8"))


def load_json(path: str | Path) -> dict[str, str | None]:
    """從 JSON 檔載入覆寫"""
    filepath = _existing(path)
    with open(filepath, "r", encoding="utf-8") as f:
        data = json.load(f)
    return _stringify(data, filepath)


def load_yaml(path: str | Path) -> dict[str, str | None]:
    """
    從 YAML 檔載入覆寫。

    需要安裝 PyYAML: pip install pyyaml
    """
    try:
        import yaml
    except ImportError:
        raise ImportError(
            "載入 YAML 需要 PyYAML 套件，請執行: pip install pyyaml"
        )
    filepath = _existing(path)
    with open(filepath, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return _stringify(data or {}, filepath)


def load_overrides(path: str | Path) -> dict[str, str | None]:
    """
    自動偵測檔案格式並載入覆寫。

    支援副檔名: .env, .json, .yaml, .yml（檔名為 .env 也可）
    """
    filepath = Path(path)
    suffix = ".env" if filepath.name == ".env" else filepath.suffix.lower()
    loaders = {
        ".env": load_env_file,
        ".json": load_json,
        ".yaml": load_yaml,
        ".yml": load_yaml,
    }
    loader = loaders.get(suffix)
    if loader is None:
        raise ValueError(
            f"不支援的檔案格式: {suffix} "
            f"(支援: {', '.join(loaders.keys())})"
        )
    return loader(filepath)


def _existing(path: str | Path) -> Path:
    filepath = Path(path)
    if not filepath.is_file():
        raise DataFileNotFoundError(str(filepath))
    return filepath


def _stringify(data, filepath: Path) -> dict[str, str | None]:
    if not isinstance(data, dict):
        raise InvalidConfigError(
            key=str(filepath), value=type(data).__name__, reason="頂層必須是 key/value mapping"
        )

    result: dict[str, str | None] = {}
    for key, value in data.items():
        if value is None:
            result[str(key)] = None
        elif isinstance(value, bool):
            result[str(key)] = "true" if value else "false"
        elif isinstance(value, (str, int, float)):
            result[str(key)] = str(value)
        else:
            raise InvalidOverrideError(key=key, value=value)
    return result
