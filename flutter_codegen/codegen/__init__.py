"""
Flutter code generation module.

Turns analyzed model and route descriptors into Dart source files.
"""

from .core.config import ConfigManager, FlutterConfig, load_config
from .core.generator import CodeGenerator, GeneratorError, UnsupportedVariantError
from .registry import (
    GeneratorRegistry,
    RegistryError,
    create_default_registry,
    get_generator,
    list_supported_components,
)

__all__ = [
    "CodeGenerator",
    "ConfigManager",
    "FlutterConfig",
    "GeneratorError",
    "GeneratorRegistry",
    "RegistryError",
    "UnsupportedVariantError",
    "create_default_registry",
    "get_generator",
    "list_supported_components",
    "load_config",
]
