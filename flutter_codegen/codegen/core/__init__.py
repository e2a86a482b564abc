"""
Core code generation components.

Provides the intermediate representation, base generator and utilities
used by all artifact generators.
"""

from .generator import (
    SYSTEM_ATTRIBUTES,
    CodeGenerator,
    GeneratorError,
    UnsupportedVariantError,
)
from .schema import (
    AttributeDescriptor,
    EndpointKind,
    EndpointType,
    ModelDescriptor,
    ParameterType,
    PathParameter,
    RelationshipDescriptor,
    RouteAnalysis,
    RouteDescriptor,
    TargetType,
    map_source_type,
)
from .naming import (
    NameSanitizer,
    NamingCase,
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
    to_snake_case,
)
from .config import ConfigError, ConfigManager, FlutterConfig, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GeneratorError",
    "UnsupportedVariantError",
    "SYSTEM_ATTRIBUTES",
    # Intermediate representation
    "AttributeDescriptor",
    "EndpointKind",
    "EndpointType",
    "ModelDescriptor",
    "ParameterType",
    "PathParameter",
    "RelationshipDescriptor",
    "RouteAnalysis",
    "RouteDescriptor",
    "TargetType",
    "map_source_type",
    # Naming utilities
    "NameSanitizer",
    "NamingCase",
    "to_camel_case",
    "to_kebab_case",
    "to_pascal_case",
    "to_snake_case",
    # Configuration system
    "FlutterConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
