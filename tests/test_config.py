"""Tests for configuration loading."""

import json

import pytest

from flutter_codegen.codegen.core.config import (
    API_BASE_URL_ENV,
    ConfigError,
    ConfigManager,
    FlutterConfig,
    load_config,
)


class TestLoadConfig:
    """Tests for merging defaults, environment, file and overrides."""

    def test_defaults(self, config):
        assert config.output.base_path == "flutter_output"
        assert config.output.models_path == "models"
        assert config.api.base_url == "http://localhost:8000/api"
        assert config.api.auth_type == "bearer"
        assert config.generation.null_safety
        assert config.generation.use_json_annotation
        assert not config.model_analysis.probe_accessors
        assert config.excluded_attributes == {"password", "remember_token", "email_verified_at"}

    def test_environment_overrides_base_url(self):
        config = load_config(environ={API_BASE_URL_ENV: "https://api.example.com"})
        assert config.api.base_url == "https://api.example.com"

    def test_custom_overrides_environment(self):
        config = load_config(
            {"api": {"base_url": "https://override.test"}},
            environ={API_BASE_URL_ENV: "https://api.example.com"},
        )
        assert config.api.base_url == "https://override.test"

    def test_file_with_camel_case_keys(self, tmp_path):
        path = tmp_path / "codegen.json"
        path.write_text(
            json.dumps(
                {
                    "output": {"basePath": "mobile/lib"},
                    "generation": {"nullSafety": False},
                    "modelAnalysis": {"excludedAttributes": ["secret"]},
                    "excludedModels": ["App\\Models\\AuditLog"],
                }
            )
        )
        config = load_config(config_file=path, environ={})
        assert config.output.base_path == "mobile/lib"
        assert config.output.screens_path == "screens"
        assert not config.generation.null_safety
        assert config.excluded_attributes == {"secret"}
        assert config.excluded_models == ["App\\Models\\AuditLog"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(config_file=tmp_path / "missing.json", environ={})

    def test_non_json_extension(self, tmp_path):
        path = tmp_path / "codegen.yaml"
        path.write_text("output: {}")
        with pytest.raises(ConfigError):
            load_config(config_file=path, environ={})

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "codegen.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            load_config(config_file=path, environ={})

    def test_section_must_be_object(self):
        with pytest.raises(ConfigError):
            load_config({"output": "somewhere"}, environ={})

    def test_unknown_keys_are_ignored(self):
        config = load_config({"output": {"colour": "blue"}}, environ={})
        assert config.output.base_path == "flutter_output"


class TestConfigManager:
    def test_validate_config_warnings(self):
        manager = ConfigManager(environ={})
        config = FlutterConfig()
        config.api.auth_type = "oauth"
        config.api.timeout = 0
        warnings = manager.validate_config(config, {"bogus": 1, "api": {"retries": 3}})
        assert "Unknown configuration key: bogus" in warnings
        assert "Unknown configuration key: api.retries" in warnings
        assert "Invalid api.auth_type: oauth" in warnings
        assert "Invalid api.timeout: 0" in warnings

    def test_valid_config_has_no_warnings(self):
        assert ConfigManager(environ={}).validate_config(FlutterConfig()) == []

    def test_save_and_reload(self, tmp_path):
        manager = ConfigManager(environ={})
        config = manager.get_config({"api": {"timeout": 10}})
        path = tmp_path / "saved.json"
        manager.save_config(config, path)

        saved = json.loads(path.read_text())
        assert saved["api"]["timeout"] == 10
        assert sorted(saved["model_analysis"]["excluded_attributes"]) == saved[
            "model_analysis"
        ]["excluded_attributes"]

        reloaded = manager.get_config(config_file=path)
        assert reloaded.api.timeout == 10
        assert reloaded.excluded_attributes == config.excluded_attributes
