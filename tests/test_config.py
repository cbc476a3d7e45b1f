"""
Unit tests for ConfigManager: YAML defaults, file values and environment overrides
"""
import os
import shutil
import sys
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from playpro_admin.api.client import ApiSettings
from playpro_admin.infra.config import ENV_OVERRIDES, ConfigManager
from playpro_admin.infra.exceptions import ConfigError


class TestConfigManager:
    """Configuration manager tests"""

    def setup_method(self):
        self.config_dir = Path(tempfile.mkdtemp())
        # keep the developer's own PLAYPRO_* variables out of the tests
        self.env = patch.dict(os.environ, {})
        self.env.start()
        for key in ENV_OVERRIDES:
            os.environ.pop(key, None)

    def teardown_method(self):
        self.env.stop()
        shutil.rmtree(self.config_dir, ignore_errors=True)

    def write_yaml(self, text):
        (self.config_dir / "app.yaml").write_text(text, encoding="utf-8")

    def test_defaults_without_files(self):
        config = ConfigManager(config_dir=self.config_dir)
        assert config.get_config_value("page_size", None, "table") == 10
        assert config.get_config_value("token_ttl_hours", None, "session") == 24
        assert config.get_config_value("missing", "fallback") == "fallback"

    def test_yaml_values_override_defaults(self):
        self.write_yaml("api:\n  base_url: https://api.example.id\ntable:\n  page_size: 25\n")
        config = ConfigManager(config_dir=self.config_dir)
        assert config.get_config_value("base_url") == "https://api.example.id"
        assert config.get_config_value("page_size", None, "table") == 25
        # untouched keys in the same section keep their defaults
        assert config.get_config_value("pagination_delta", None, "table") == 2

    def test_environment_wins_over_yaml(self):
        self.write_yaml("api:\n  base_url: https://api.example.id\n")
        os.environ["PLAYPRO_API_URL"] = "https://staging.example.id"
        os.environ["PLAYPRO_HTTP_TIMEOUT"] = "5"
        config = ConfigManager(config_dir=self.config_dir)
        assert config.get_config_value("base_url") == "https://staging.example.id"
        assert config.get_config_value("timeout") == 5.0

    def test_dotenv_file_is_loaded(self):
        (self.config_dir / ".env.local").write_text("PLAYPRO_PAGE_SIZE=50\n", encoding="utf-8")
        config = ConfigManager(config_dir=self.config_dir)
        assert config.get_config_value("page_size", None, "table") == 50

    def test_invalid_env_value(self):
        os.environ["PLAYPRO_PAGE_SIZE"] = "lots"
        with pytest.raises(ConfigError):
            ConfigManager(config_dir=self.config_dir).load_config()

    def test_invalid_yaml(self):
        self.write_yaml("api: [unclosed\n")
        with pytest.raises(ConfigError):
            ConfigManager(config_dir=self.config_dir).load_config()

    def test_non_mapping_yaml(self):
        self.write_yaml("- just\n- a list\n")
        with pytest.raises(ConfigError):
            ConfigManager(config_dir=self.config_dir).load_config()

    def test_config_caching(self):
        self.write_yaml("table:\n  page_size: 25\n")
        config = ConfigManager(config_dir=self.config_dir)
        first = config.load_config()
        self.write_yaml("table:\n  page_size: 30\n")
        assert config.load_config() is first
        config.clear_cache()
        assert config.get_config_value("page_size", None, "table") == 30

    def test_get_section_returns_copy(self):
        config = ConfigManager(config_dir=self.config_dir)
        section = config.get_section("import")
        section["max_upload_mb"] = 99
        assert config.get_config_value("max_upload_mb", None, "import") == 10

    def test_api_settings_from_config(self):
        self.write_yaml("api:\n  base_url: https://api.example.id/\n  timeout: 12\n")
        settings = ApiSettings.from_config(ConfigManager(config_dir=self.config_dir), token="abc")
        assert settings.base_url == "https://api.example.id"
        assert settings.timeout == 12.0
        assert settings.url("/admin/branch") == "https://api.example.id/admin/branch"


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
