"""
utils.data_loader 單元測試
驗證 .env / JSON / YAML 載入與自動偵測。
"""

import json

import pytest

from core.exceptions import DataFileNotFoundError, InvalidConfigError, InvalidOverrideError
from utils.data_loader import load_env_file, load_json, load_overrides, load_yaml


@pytest.mark.unit
class TestLoadEnvFile:
    """load_env_file"""

    @pytest.mark.unit
    def test_values_and_removals(self, tmp_path):
        """只寫 KEY 代表移除，KEY= 代表空字串"""
        path = tmp_path / "ci.env"
        path.write_text("FOO=bar\n# comment\nQUOTED=\"a b\"\nEMPTY=\nREMOVED\n", encoding="utf-8")
        assert load_env_file(path) == {
            "FOO": "bar",
            "QUOTED": "a b",
            "EMPTY": "",
            "REMOVED": None,
        }

    @pytest.mark.unit
    def test_dotenv_name(self, tmp_path):
        """檔名就是 .env 也能自動偵測"""
        path = tmp_path / ".env"
        path.write_text("FOO=bar\n", encoding="utf-8")
        assert load_overrides(path) == {"FOO": "bar"}

    @pytest.mark.unit
    def test_variables_not_expanded(self, tmp_path, monkeypatch):
        """${VAR} 原樣保留，不受當下環境變數影響"""
        monkeypatch.setenv("OVERRIDE_BASE", "from-environment")
        path = tmp_path / "ci.env"
        path.write_text("URL=${OVERRIDE_BASE}/api\n", encoding="utf-8")
        assert load_env_file(path) == {"URL": "${OVERRIDE_BASE}/api"}


@pytest.mark.unit
class TestLoadJson:
    """load_json"""

    @pytest.mark.unit
    def test_load_json(self, tmp_path):
        path = tmp_path / "overrides.json"
        path.write_text(json.dumps({"A": "1", "B": None, "C": 3, "D": True}), encoding="utf-8")
        assert load_json(path) == {"A": "1", "B": None, "C": "3", "D": "true"}

    @pytest.mark.unit
    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "overrides.json"
        path.write_text(json.dumps(["A", "B"]), encoding="utf-8")
        with pytest.raises(InvalidConfigError):
            load_json(path)

    @pytest.mark.unit
    def test_nested_value_rejected(self, tmp_path):
        path = tmp_path / "overrides.json"
        path.write_text(json.dumps({"A": {"nested": "x"}}), encoding="utf-8")
        with pytest.raises(InvalidOverrideError):
            load_json(path)


@pytest.mark.unit
class TestLoadYaml:
    """load_yaml"""

    @pytest.mark.unit
    def test_load_yaml(self, tmp_path):
        path = tmp_path / "overrides.yaml"
        path.write_text("A: hello\nB: null\nC: 1.5\nD: false\n", encoding="utf-8")
        assert load_yaml(path) == {"A": "hello", "B": None, "C": "1.5", "D": "false"}

    @pytest.mark.unit
    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "overrides.yml"
        path.write_text("", encoding="utf-8")
        assert load_overrides(path) == {}


@pytest.mark.unit
class TestLoadOverrides:
    """自動偵測"""

    @pytest.mark.unit
    def test_unsupported_suffix(self, tmp_path):
        with pytest.raises(ValueError, match="不支援的檔案格式"):
            load_overrides(tmp_path / "overrides.toml")

    @pytest.mark.unit
    def test_missing_file(self, tmp_path):
        with pytest.raises(DataFileNotFoundError) as exc_info:
            load_overrides(tmp_path / "missing.json")
        assert exc_info.value.context["path"].endswith("missing.json")
