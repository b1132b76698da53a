from utils.logger import logger
from utils.data_loader import load_env_file, load_json, load_yaml, load_overrides

__all__ = [
    "logger",
    "load_env_file",
    "load_json",
    "load_yaml",
    "load_overrides",
]
