"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files, providing
defaults and validation for generator settings. The resulting
``FlutterConfig`` is passed explicitly to analyzers and generators.
"""

import copy
import json
import os
import re
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Union

from ...logging_config import get_logger

logger = get_logger(__name__)

API_BASE_URL_ENV = "FLUTTER_API_BASE_URL"


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


@dataclass
class OutputConfig:
    """Where generated files are written."""

    base_path: str = "flutter_output"
    models_path: str = "models"
    services_path: str = "services"
    widgets_path: str = "widgets"
    screens_path: str = "screens"
    utils_path: str = "utils"  # accepted in config files; nothing is generated there yet


@dataclass
class ApiConfig:
    """Settings baked into the generated transport base."""

    base_url: str = "http://localhost:8000/api"
    timeout: int = 30
    auth_type: str = "bearer"  # bearer, basic, none
    auth_header: str = "Authorization"


@dataclass
class GenerationConfig:
    """Code style switches for generated Dart."""

    # architecture and use_freezed are loaded and saved but do not change output
    architecture: str = "provider"  # provider, bloc, riverpod
    null_safety: bool = True
    use_freezed: bool = False
    use_json_annotation: bool = True
    generate_documentation: bool = True


@dataclass
class ModelAnalysisConfig:
    """Model analyzer behavior."""

    include_relationships: bool = True
    probe_accessors: bool = False
    strict: bool = False
    excluded_attributes: Set[str] = field(
        default_factory=lambda: {"password", "remember_token", "email_verified_at"}
    )


@dataclass
class TemplateConfig:
    """Template override location."""

    path: Optional[str] = None
    extension: str = ".dart.j2"


@dataclass
class FlutterConfig:
    """Complete generator configuration."""

    output: OutputConfig = field(default_factory=OutputConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    model_analysis: ModelAnalysisConfig = field(default_factory=ModelAnalysisConfig)
    templates: TemplateConfig = field(default_factory=TemplateConfig)
    excluded_models: List[str] = field(default_factory=list)

    @property
    def excluded_attributes(self) -> Set[str]:
        return set(self.model_analysis.excluded_attributes)

    def to_dict(self) -> Dict[str, Any]:
        """Plain JSON-compatible representation."""
        data = asdict(self)
        data["model_analysis"]["excluded_attributes"] = sorted(
            self.model_analysis.excluded_attributes
        )
        return data


_SECTIONS = {
    "output": OutputConfig,
    "api": ApiConfig,
    "generation": GenerationConfig,
    "model_analysis": ModelAnalysisConfig,
    "templates": TemplateConfig,
}

_TOP_LEVEL_KEYS = set(_SECTIONS) | {"excluded_models"}


def _normalize_key(key: str) -> str:
    """Accept camelCase keys (``basePath``) as well as snake_case."""
    return re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", key).lower()


def _normalize_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {_normalize_key(str(k)): _normalize_keys(v) for k, v in value.items()}
    return value


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge ``override`` into a copy of ``base``, recursing into dicts."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        """
        Initialize configuration manager.

        Args:
            environ: Environment mapping consulted for overrides
                (defaults to ``os.environ``)
        """
        self._environ = os.environ if environ is None else environ
        self._defaults: Dict[str, Any] = FlutterConfig().to_dict()

    def get_config(
        self,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> FlutterConfig:
        """
        Get the complete configuration.

        Precedence, lowest first: defaults, environment, config file,
        custom overrides.

        Args:
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration
        """
        merged = copy.deepcopy(self._defaults)

        base_url = self._environ.get(API_BASE_URL_ENV)
        if base_url:
            merged["api"]["base_url"] = base_url

        if config_file:
            merged = _deep_merge(merged, self._load_config_file(config_file))

        if custom_config:
            merged = _deep_merge(merged, _normalize_keys(custom_config))

        return self._dict_to_config(merged)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if path.suffix.lower() != ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        logger.info(f"Loaded configuration from {path}")
        return _normalize_keys(config)

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> FlutterConfig:
        """Convert dictionary to FlutterConfig instance, ignoring unknown keys."""
        sections = {}
        for name, section_cls in _SECTIONS.items():
            raw = config_dict.get(name) or {}
            if not isinstance(raw, dict):
                raise ConfigError(f"Configuration section '{name}' must be an object")
            known = {f.name for f in fields(section_cls)}
            sections[name] = section_cls(**{k: v for k, v in raw.items() if k in known})

        sections["model_analysis"].excluded_attributes = set(
            sections["model_analysis"].excluded_attributes or ()
        )

        config = FlutterConfig(
            excluded_models=list(config_dict.get("excluded_models") or []),
            **sections,
        )

        for warning in self.validate_config(config, config_dict):
            logger.warning(warning)

        return config

    def save_config(self, config: FlutterConfig, output_path: Union[str, Path]):
        """Save configuration to JSON file."""
        path = Path(output_path)
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {e}") from e

    def validate_config(
        self, config: FlutterConfig, raw: Optional[Dict[str, Any]] = None
    ) -> List[str]:
        """
        Validate configuration values.

        Returns:
            List of validation warnings
        """
        warnings = []

        if raw:
            for key, value in raw.items():
                if key not in _TOP_LEVEL_KEYS:
                    warnings.append(f"Unknown configuration key: {key}")
                    continue
                section_cls = _SECTIONS.get(key)
                if section_cls and isinstance(value, dict):
                    known = {f.name for f in fields(section_cls)}
                    for sub_key in value:
                        if sub_key not in known:
                            warnings.append(f"Unknown configuration key: {key}.{sub_key}")

        if config.api.auth_type not in {"bearer", "basic", "none"}:
            warnings.append(f"Invalid api.auth_type: {config.api.auth_type}")

        if config.generation.architecture not in {"provider", "bloc", "riverpod"}:
            warnings.append(
                f"Invalid generation.architecture: {config.generation.architecture}"
            )

        if not isinstance(config.api.timeout, int) or config.api.timeout <= 0:
            warnings.append(f"Invalid api.timeout: {config.api.timeout}")

        if not config.templates.extension.startswith("."):
            warnings.append(f"Invalid templates.extension: {config.templates.extension}")

        return warnings


def load_config(
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
    environ: Optional[Dict[str, str]] = None,
) -> FlutterConfig:
    """
    Convenience function to load configuration.

    Args:
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file
        environ: Environment mapping (defaults to ``os.environ``)

    Returns:
        Merged configuration
    """
    return ConfigManager(environ).get_config(custom_config, config_file)
