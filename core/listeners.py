"""
Override Listeners — 把覆寫拆成 before / after 兩個 lifecycle hook

與 ScopedOverride 相同的快照 / 合併 / 還原邏輯，只是分成兩次呼叫：
before 拍快照並套用，after 不論測試結果一律還原。

範圍：
    EnvironmentTestListener / SystemPropertyTestListener
        每個測試前套用、測試後還原
    EnvironmentProjectListener / SystemPropertyProjectListener
        整個測試 session 開始時套用一次、結束時還原

用法：
    # 1) 當 fixture（只影響這個 module / class）
    from core.listeners import EnvironmentTestListener

    env_foo = EnvironmentTestListener("FOO", "bar").as_fixture()

    # 2) 註冊到 pytest（影響整個 session 的所有測試）
    # conftest.py
    def pytest_configure(config):
        register_listeners(
            config,
            EnvironmentProjectListener({"APP_ENV": "test"}),
            SystemPropertyTestListener([("app.mode", "test")]),
        )

    # 3) 從檔案建立
    EnvironmentProjectListener.from_file("ci.env")

**注意**：快照存在實例上，同一個實例的 before / after 不可交錯使用。
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

import pytest

from core.merge_policy import OverrideMode
from core.scoped_override import _MISSING, Overrides, ScopedOverride, normalize_overrides
from core.state_accessor import StateAccessor, environment, properties
from utils.data_loader import load_overrides
from utils.logger import logger


class OverrideListener:
    """
    Listener 基底類別

    子類別決定 accessor（哪張表）與 hook 的時機（測試 / session）。
    """

    accessor: StateAccessor = environment

    def __init__(self, overrides: Overrides, value: object = _MISSING,
                 mode: OverrideMode | None = None, accessor: StateAccessor | None = None):
        if accessor is not None:
            self.accessor = accessor
        self._scope = ScopedOverride(self.accessor, normalize_overrides(overrides, value), mode)

    @classmethod
    def from_file(cls, path: str | Path, mode: OverrideMode | None = None,
                  accessor: StateAccessor | None = None) -> "OverrideListener":
        """從 .env / .json / .yaml 檔建立 listener"""
        return cls(load_overrides(path), mode=mode, accessor=accessor)

    @property
    def desired(self) -> Mapping[str, str | None]:
        return self._scope.desired

    @property
    def mode(self) -> OverrideMode:
        return self._scope.mode

    @property
    def active(self) -> bool:
        return self._scope.active

    def apply(self) -> None:
        """拍快照並套用覆寫"""
        if self._scope.active:
            logger.warning(f"[Listener] {type(self).__name__} 已套用，略過重複 apply")
            return
        self._scope.__enter__()

    def reset(self) -> None:
        """還原到 apply 之前的狀態；沒 apply 過則不做事"""
        if not self._scope.active:
            return
        self._scope.__exit__(None, None, None)

    def _fixture_body(self):
        self.apply()
        try:
            yield self
        finally:
            self.reset()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(keys={sorted(self.desired)}, mode={self.mode.name})"


class TestScopedListener(OverrideListener):
    """每個測試前套用、測試後還原"""

    __test__ = False

    def before_test(self) -> None:
        self.apply()

    def after_test(self) -> None:
        self.reset()

    def as_fixture(self, autouse: bool = True, name: str | None = None):
        """產生 function scope 的 pytest fixture"""
        def _override():
            yield from self._fixture_body()
        return pytest.fixture(scope="function", autouse=autouse, name=name)(_override)

    # ── pytest hooks ──

    @pytest.hookimpl(tryfirst=True)
    def pytest_runtest_setup(self, item):
        self.before_test()

    @pytest.hookimpl(wrapper=True)
    def pytest_runtest_teardown(self, item, nextitem):
        try:
            return (yield)
        finally:
            self.after_test()


class ProjectScopedListener(OverrideListener):
    """整個測試 session 套用一次"""

    def before_project(self) -> None:
        self.apply()

    def after_project(self) -> None:
        self.reset()

    def as_fixture(self, autouse: bool = True, name: str | None = None):
        """產生 session scope 的 pytest fixture"""
        def _override():
            yield from self._fixture_body()
        return pytest.fixture(scope="session", autouse=autouse, name=name)(_override)

    # ── pytest hooks ──

    @pytest.hookimpl(tryfirst=True)
    def pytest_sessionstart(self, session):
        self.before_project()

    @pytest.hookimpl(wrapper=True)
    def pytest_sessionfinish(self, session, exitstatus):
        try:
            return (yield)
        finally:
            self.after_project()


class EnvironmentTestListener(TestScopedListener):
    """每個測試期間覆寫環境變數"""

    accessor = environment


class EnvironmentProjectListener(ProjectScopedListener):
    """整個 session 期間覆寫環境變數"""

    accessor = environment


class SystemPropertyTestListener(TestScopedListener):
    """每個測試期間覆寫系統屬性"""

    accessor = properties


class SystemPropertyProjectListener(ProjectScopedListener):
    """整個 session 期間覆寫系統屬性"""

    accessor = properties


def register_listeners(config, *listeners: OverrideListener) -> None:
    """
    註冊 listener 到 pytest plugin manager。

    在 conftest.py 的 pytest_configure 內呼叫（早於 pytest_sessionstart）。
    """
    for listener in listeners:
        config.pluginmanager.register(listener)
        logger.info(f"Override listener 已註冊: {listener!r}")
