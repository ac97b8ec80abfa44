"""Tests for settings loading."""

import json
import logging

from esmresolve import Resolver, ResolverSettings, load_settings
from esmresolve.config import load_config_file


class TestLoadConfigFile:
    """Tests for reading YAML and JSON config files."""

    def test_yaml_resolver_section(self, tmp_path):
        """Test reading the resolver section of a YAML file."""
        path = tmp_path / "esmresolve.yml"
        path.write_text(
            "resolver:\n"
            "  conditions: [browser, import]\n"
            "  enable_cache: false\n"
            "other:\n"
            "  ignored: true\n",
            encoding="utf-8",
        )
        assert load_config_file(str(path)) == {"conditions": ["browser", "import"], "enable_cache": False}

    def test_yaml_top_level(self, tmp_path):
        """Test a file without a resolver section."""
        path = tmp_path / "esmresolve.yaml"
        path.write_text("log_level: debug\n", encoding="utf-8")
        assert load_config_file(str(path)) == {"log_level": "debug"}

    def test_json(self, tmp_path):
        """Test a JSON file."""
        path = tmp_path / "esmresolve.json"
        path.write_text(json.dumps({"resolver": {"experimental_flags": ["--experimental-wasm-modules"]}}))
        assert load_config_file(str(path)) == {"experimental_flags": ["--experimental-wasm-modules"]}

    def test_missing_file(self, tmp_path, caplog):
        """Test that a missing file is logged and ignored."""
        with caplog.at_level(logging.WARNING):
            assert load_config_file(str(tmp_path / "missing.yml")) == {}
        assert "Config file not found" in caplog.text

    def test_malformed_file(self, tmp_path, caplog):
        """Test that a malformed file is logged and ignored."""
        path = tmp_path / "broken.yml"
        path.write_text("resolver: [unclosed\n", encoding="utf-8")
        with caplog.at_level(logging.ERROR):
            assert load_config_file(str(path)) == {}
        assert "Failed to load config" in caplog.text

    def test_non_mapping(self, tmp_path):
        """Test that a scalar document is ignored."""
        path = tmp_path / "scalar.yml"
        path.write_text("just text\n", encoding="utf-8")
        assert load_config_file(str(path)) == {}

    def test_no_path(self):
        """Test that no path means no values."""
        assert load_config_file(None) == {}


class TestLoadSettings:
    """Tests for settings precedence."""

    def test_defaults(self):
        """Test built-in defaults."""
        settings = load_settings(environ={})
        assert settings == ResolverSettings()
        assert settings.conditions == ["node", "import", "require"]
        assert settings.experimental_flags is None
        assert settings.enable_cache is True
        assert settings.log_level == "INFO"

    def test_file_values(self, tmp_path):
        """Test values from a config file."""
        path = tmp_path / "config.yml"
        path.write_text("resolver:\n  conditions: browser, default\n  log_level: warning\n", encoding="utf-8")
        settings = load_settings(config_path=str(path), environ={})
        assert settings.conditions == ["browser", "default"]
        assert settings.log_level == "WARNING"

    def test_config_path_from_environment(self, tmp_path):
        """Test ESMRESOLVE_CONFIG."""
        path = tmp_path / "config.yml"
        path.write_text("enable_cache: no\n", encoding="utf-8")
        settings = load_settings(environ={"ESMRESOLVE_CONFIG": str(path)})
        assert settings.enable_cache is False

    def test_environment_over_file(self, tmp_path):
        """Test that the environment beats the config file."""
        path = tmp_path / "config.yml"
        path.write_text("conditions: [browser]\nenable_cache: true\n", encoding="utf-8")
        settings = load_settings(
            config_path=str(path),
            environ={
                "ESMRESOLVE_CONDITIONS": "deno,import",
                "ESMRESOLVE_EXPERIMENTAL_FLAGS": "--experimental-wasm-modules",
                "ESMRESOLVE_DISABLE_CACHE": "1",
                "ESMRESOLVE_LOG_LEVEL": "debug",
            },
        )
        assert settings.conditions == ["deno", "import"]
        assert settings.experimental_flags == ["--experimental-wasm-modules"]
        assert settings.enable_cache is False
        assert settings.log_level == "DEBUG"

    def test_overrides_win(self):
        """Test that explicit overrides beat the environment."""
        settings = load_settings(
            overrides={"conditions": ["worker"], "log_level": None},
            environ={"ESMRESOLVE_CONDITIONS": "deno", "ESMRESOLVE_LOG_LEVEL": "ERROR"},
        )
        assert settings.conditions == ["worker"]
        assert settings.log_level == "ERROR"

    def test_invalid_values_ignored(self, tmp_path, caplog):
        """Test that invalid values keep the defaults."""
        path = tmp_path / "config.yml"
        path.write_text("conditions: 3\nenable_cache: maybe\nlog_level: loud\n", encoding="utf-8")
        with caplog.at_level(logging.WARNING):
            settings = load_settings(config_path=str(path), environ={})
        assert settings == ResolverSettings()
        assert "Ignoring invalid conditions" in caplog.text

    def test_create_resolver(self):
        """Test building a resolver from settings."""
        settings = ResolverSettings(conditions=["browser"], experimental_flags=["--experimental-wasm-modules"])
        resolver = settings.create_resolver()
        assert isinstance(resolver, Resolver)
        assert resolver.conditions == ["browser"]
        assert resolver.exec_argv == ["--experimental-wasm-modules"]
