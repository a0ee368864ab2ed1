"""
Tests for YAML configuration loading.
"""

import pytest

from backend.condparser.config import ConfigError, load_config, load_flag_table, parse_config

CONFIG_YAML = """\
settings:
  id_length: 16
  require_end: false
flags:
  isWindows: true
  isDebug: false
default_flag: false
rules:
  match_strategy: priority
  items:
    - id: windows-release
      when: "isWindows && !isDebug"
      then:
        renderer: d3d12
      priority: 2
    - id: debug
      when: isDebug
      then:
        renderer: reference
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "condparser.yaml"
    path.write_text(CONFIG_YAML, encoding="utf-8")
    return path


class TestLoadConfig:
    """Tests for load_config."""

    def test_load(self, config_file):
        """Test loading a full configuration."""
        config = load_config(config_file)
        assert config.settings.id_length == 16
        assert config.settings.require_end is False
        assert config.flags == {"isWindows": True, "isDebug": False}
        assert config.rules.match_strategy == "priority"
        assert [r.id for r in config.rules.items] == ["windows-release", "debug"]
        assert config.rules.items[0].then == {"renderer": "d3d12"}

    def test_accepts_str_path(self, config_file):
        """Test string paths are accepted."""
        assert load_config(str(config_file)).flags["isWindows"] is True

    def test_missing_file(self, tmp_path):
        """Test a missing file raises ConfigError."""
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path / "nope.yaml")
        assert "not found" in str(exc_info.value)

    def test_empty_file(self, tmp_path):
        """Test an empty file gives the defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        config = load_config(path)
        assert config.flags == {}
        assert config.settings.id_length == 32

    def test_yaml_error(self, tmp_path):
        """Test malformed YAML raises ConfigError."""
        path = tmp_path / "bad.yaml"
        path.write_text("flags: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        assert "YAML parse error" in str(exc_info.value)

    def test_non_mapping(self, tmp_path):
        """Test a top-level list is rejected."""
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        assert "Expected a mapping" in str(exc_info.value)

    def test_invalid_content(self, tmp_path):
        """Test validation errors are wrapped in ConfigError."""
        path = tmp_path / "invalid.yaml"
        path.write_text("flags:\n  is-debug: true\n", encoding="utf-8")
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        assert "Invalid configuration" in str(exc_info.value)

    def test_config_error_is_value_error(self):
        """Test ConfigError can be caught as ValueError."""
        with pytest.raises(ValueError):
            parse_config({"unknown_section": {}})


class TestLoadFlagTable:
    """Tests for load_flag_table."""

    def test_default_flag(self, tmp_path):
        """Test default_flag applies to names missing from flags."""
        path = tmp_path / "defaults.yaml"
        path.write_text("flags:\n  isDebug: false\ndefault_flag: true\n", encoding="utf-8")
        table = load_flag_table(path)
        assert table.resolve("isDebug") is False
        assert table.resolve("isWindows") is True

    def test_load(self, config_file):
        """Test loading only the flags."""
        table = load_flag_table(config_file)
        assert table.resolve("isWindows") is True
        assert table.resolve("unknown") is False
