"""
pytest 全域 fixtures

提供：
- override_environment / override_system_properties：測試內暫時覆寫，結束自動還原
- system_properties：行程層級的系統屬性表
- pytester：listener 端對端測試用
- 每個測試結束時檢查環境變數與系統屬性沒有被洩漏
"""

import os

import pytest

from core.system_properties import system_properties
from utils.logger import logger

pytest_plugins = ["core.pytest_plugin", "pytester"]

# pytest 在 setup / call / teardown 各階段會改寫這個變數
_VOLATILE_ENV = {"PYTEST_CURRENT_TEST"}


def _environment() -> dict[str, str]:
    return {k: v for k, v in os.environ.items() if k not in _VOLATILE_ENV}


@pytest.fixture(autouse=True)
def _no_global_state_leak(request):
    """測試前後的環境變數與系統屬性必須一致"""
    env_before = _environment()
    props_before = system_properties.get_properties()
    yield
    if _environment() != env_before:
        logger.error(f"環境變數洩漏: {request.node.nodeid}")
        for key in set(_environment()) - set(env_before):
            del os.environ[key]
        os.environ.update(env_before)
        pytest.fail("測試結束後環境變數未還原", pytrace=False)
    if system_properties.get_properties() != props_before:
        logger.error(f"系統屬性洩漏: {request.node.nodeid}")
        system_properties.unlock()
        system_properties.set_properties(props_before)
        pytest.fail("測試結束後系統屬性未還原", pytrace=False)
