"""
core/merge_policy.py 單元測試

驗證 ALLOW_OVERRIDE / DENY_OVERRIDE 合併規則與模式解析。
"""

import pytest

from core.exceptions import InvalidConfigError
from core.merge_policy import OverrideMode, compute_effective


@pytest.mark.unit
class TestAllowOverride:
    """ALLOW_OVERRIDE"""

    @pytest.mark.unit
    def test_override_and_remove_missing(self):
        """覆蓋既有 key；移除不存在的 key 不影響結果"""
        result = compute_effective(
            {"A": "1", "B": "2"}, {"A": "9", "C": None}, OverrideMode.ALLOW_OVERRIDE
        )
        assert result == {"A": "9", "B": "2"}

    @pytest.mark.unit
    def test_none_removes_existing_key(self):
        """值為 None 時移除既有 key"""
        result = compute_effective({"A": "1", "B": "2"}, {"A": None}, OverrideMode.ALLOW_OVERRIDE)
        assert result == {"B": "2"}

    @pytest.mark.unit
    def test_adds_new_key(self):
        """新增不存在的 key"""
        result = compute_effective({"A": "1"}, {"D": "5"}, OverrideMode.ALLOW_OVERRIDE)
        assert result == {"A": "1", "D": "5"}

    @pytest.mark.unit
    def test_empty_desired_is_copy(self):
        """沒有覆寫時等於原表"""
        original = {"A": "1"}
        assert compute_effective(original, {}, OverrideMode.ALLOW_OVERRIDE) == original


@pytest.mark.unit
class TestDenyOverride:
    """DENY_OVERRIDE"""

    @pytest.mark.unit
    def test_existing_key_untouched(self):
        """既有 key 不被覆蓋，新 key 補上"""
        result = compute_effective({"A": "1"}, {"A": "9", "D": "5"}, OverrideMode.DENY_OVERRIDE)
        assert result == {"A": "1", "D": "5"}

    @pytest.mark.unit
    def test_removal_ignored(self):
        """DENY 模式忽略移除要求"""
        result = compute_effective({"A": "1"}, {"A": None, "B": None}, OverrideMode.DENY_OVERRIDE)
        assert result == {"A": "1"}


@pytest.mark.unit
class TestPurity:
    """純函式"""

    @pytest.mark.unit
    @pytest.mark.parametrize("mode", list(OverrideMode))
    def test_inputs_not_mutated(self, mode):
        """不改動 original 與 desired"""
        original = {"A": "1", "B": "2"}
        desired = {"A": None, "C": "3"}
        compute_effective(original, desired, mode)
        assert original == {"A": "1", "B": "2"}
        assert desired == {"A": None, "C": "3"}

    @pytest.mark.unit
    @pytest.mark.parametrize("mode", list(OverrideMode))
    def test_returns_new_dict(self, mode):
        """回傳新的 dict"""
        original = {"A": "1"}
        assert compute_effective(original, {}, mode) is not original


@pytest.mark.unit
class TestOverrideModeParse:
    """OverrideMode.parse"""

    @pytest.mark.unit
    @pytest.mark.parametrize("text, expected", [
        ("ALLOW_OVERRIDE", OverrideMode.ALLOW_OVERRIDE),
        ("deny_override", OverrideMode.DENY_OVERRIDE),
        ("  Deny_Override ", OverrideMode.DENY_OVERRIDE),
    ])
    def test_parse(self, text, expected):
        """不分大小寫"""
        assert OverrideMode.parse(text) is expected

    @pytest.mark.unit
    def test_parse_invalid(self):
        """無效模式拋 InvalidConfigError"""
        with pytest.raises(InvalidConfigError, match="OVERRIDE_MODE=merge") as exc_info:
            OverrideMode.parse("merge", key="OVERRIDE_MODE")
        assert exc_info.value.context["value"] == "merge"
