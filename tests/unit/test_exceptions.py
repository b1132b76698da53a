"""
core/exceptions.py 單元測試

驗證自訂例外體系的繼承關係、訊息格式、context 欄位。
"""

import pytest

from core.exceptions import (
    ConfigError,
    DataFileNotFoundError,
    InvalidConfigError,
    InvalidOverrideError,
    OverrideFrameworkError,
    RestoreFailure,
    StateAccessDenied,
    StateAccessError,
    TestDataError,
)


@pytest.mark.unit
class TestExceptionHierarchy:
    """測試例外繼承關係"""

    @pytest.mark.unit
    def test_all_inherit_from_base(self):
        """所有例外都繼承 OverrideFrameworkError"""
        classes = [
            StateAccessError, StateAccessDenied, RestoreFailure,
            ConfigError, InvalidConfigError, InvalidOverrideError,
            TestDataError, DataFileNotFoundError,
        ]
        for cls in classes:
            assert issubclass(cls, OverrideFrameworkError), f"{cls.__name__} 未繼承 OverrideFrameworkError"

    @pytest.mark.unit
    def test_state_errors_inherit_state_access_error(self):
        assert issubclass(StateAccessDenied, StateAccessError)
        assert issubclass(RestoreFailure, StateAccessError)

    @pytest.mark.unit
    def test_restore_failure_is_not_access_denied(self):
        """RestoreFailure 不會被 except StateAccessDenied 吞掉"""
        assert not issubclass(RestoreFailure, StateAccessDenied)

    @pytest.mark.unit
    def test_catch_base_catches_all(self):
        with pytest.raises(OverrideFrameworkError):
            raise StateAccessDenied("environment", "replace")

        with pytest.raises(OverrideFrameworkError):
            raise InvalidOverrideError("A", 1)


@pytest.mark.unit
class TestExceptionMessages:
    """測試例外訊息格式"""

    @pytest.mark.unit
    def test_access_denied_with_original(self):
        orig = PermissionError("not permitted")
        e = StateAccessDenied(table="environment", operation="replace", original=orig)
        msg = str(e)
        assert "environment" in msg
        assert "replace" in msg
        assert "PermissionError" in msg
        assert e.original is orig

    @pytest.mark.unit
    def test_restore_failure_without_pending(self):
        e = RestoreFailure(table="environment")
        assert "environment" in str(e)
        assert "work" not in str(e)
        assert e.pending_error is None

    @pytest.mark.unit
    def test_restore_failure_with_pending(self):
        pending = ValueError("bad input")
        e = RestoreFailure(table="environment", pending_error=pending)
        assert "ValueError" in str(e)
        assert "bad input" in str(e)
        assert e.pending_error is pending

    @pytest.mark.unit
    def test_invalid_config_with_reason(self):
        e = InvalidConfigError(key="OVERRIDE_MODE", value="merge", reason="未知模式")
        msg = str(e)
        assert "OVERRIDE_MODE" in msg
        assert "merge" in msg
        assert "未知模式" in msg

    @pytest.mark.unit
    def test_invalid_override_repr(self):
        e = InvalidOverrideError(key="A", value=1)
        assert "'A'=1" in str(e)

    @pytest.mark.unit
    def test_data_file_not_found(self):
        assert "ci.env" in str(DataFileNotFoundError("ci.env"))


@pytest.mark.unit
class TestExceptionContext:
    """測試 context 欄位"""

    @pytest.mark.unit
    def test_base_context_default_empty(self):
        assert OverrideFrameworkError("test").context == {}

    @pytest.mark.unit
    def test_access_denied_context(self):
        e = StateAccessDenied(table="system properties", operation="set_properties")
        assert e.context == {"table": "system properties", "operation": "set_properties"}

    @pytest.mark.unit
    def test_invalid_override_context(self):
        e = InvalidOverrideError(key=1, value="x")
        assert e.context == {"key": 1, "value": "x"}
