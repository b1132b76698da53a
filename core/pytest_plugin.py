"""
pytest fixtures — 在測試中暫時覆寫環境變數 / 系統屬性

在根目錄 conftest.py 啟用：
    pytest_plugins = ["core.pytest_plugin"]

用法：
    def test_reads_token(override_environment):
        override_environment({"API_TOKEN": "dummy", "PROXY": None})
        assert os.getenv("API_TOKEN") == "dummy"

    def test_mode(override_system_properties, system_properties):
        override_system_properties("app.mode", "test")
        assert system_properties.get_property("app.mode") == "test"

每次呼叫都疊一層覆寫，測試結束時依相反順序全部還原。
"""

from contextlib import ExitStack

import pytest

from core.scoped_override import ScopedOverride, _MISSING, normalize_overrides
from core.state_accessor import environment, properties
from core.system_properties import system_properties as _system_properties


def _override_factory(accessor, stack: ExitStack):
    def _apply(overrides, value=_MISSING, mode=None) -> ScopedOverride:
        scope = ScopedOverride(accessor, normalize_overrides(overrides, value), mode)
        return stack.enter_context(scope)
    return _apply


@pytest.fixture
def override_environment():
    """環境變數覆寫 fixture"""
    with ExitStack() as stack:
        yield _override_factory(environment, stack)


@pytest.fixture
def override_system_properties():
    """系統屬性覆寫 fixture"""
    with ExitStack() as stack:
        yield _override_factory(properties, stack)


@pytest.fixture
def system_properties():
    """行程層級的系統屬性表"""
    return _system_properties
