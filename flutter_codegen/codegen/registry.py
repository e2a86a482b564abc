"""
Generator registry for the Flutter artifact generators.

Maps component names (``model``, ``service``, ``widget``, ``screen``,
``api_base``) to generator classes and builds configured instances.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Type, Union

from .core.config import FlutterConfig, load_config
from .core.generator import CodeGenerator


class RegistryError(Exception):
    """Exception raised for registry-related errors."""

    pass


ConfigSource = Optional[Union[FlutterConfig, Dict[str, Any], str, Path]]


class GeneratorRegistry:
    """Registry for managing available code generators."""

    def __init__(self):
        self._generators: Dict[str, Type[CodeGenerator]] = {}
        self._aliases: Dict[str, str] = {}

    def register(
        self,
        component: str,
        generator_class: Type[CodeGenerator],
        aliases: Optional[List[str]] = None,
        replace: bool = False,
    ):
        """
        Register a generator for a component.

        Args:
            component: Primary component name (e.g., 'model', 'screen')
            generator_class: Generator class implementing CodeGenerator
            aliases: Alternative names for this component
            replace: If True, replace existing registration. If False, skip if exists.

        Raises:
            RegistryError: If generator class is invalid or an alias conflicts
        """
        if not (isinstance(generator_class, type) and issubclass(generator_class, CodeGenerator)):
            raise RegistryError("Generator class must inherit from CodeGenerator")

        key = component.lower()
        if key in self._generators and not replace:
            return

        self._generators[key] = generator_class

        for alias in aliases or []:
            alias_key = alias.lower()
            if alias_key == key:
                continue
            if not replace:
                if alias_key in self._generators:
                    raise RegistryError(
                        f"Alias '{alias}' conflicts with existing component"
                    )
                if alias_key in self._aliases and self._aliases[alias_key] != key:
                    raise RegistryError(
                        f"Alias '{alias}' already points to '{self._aliases[alias_key]}'"
                    )
            self._aliases[alias_key] = key

    def unregister(self, component: str):
        """Unregister a generator and its aliases."""
        key = component.lower()
        self._generators.pop(key, None)
        for alias in [a for a, target in self._aliases.items() if target == key]:
            del self._aliases[alias]

    def get_generator_class(self, component: str) -> Type[CodeGenerator]:
        """
        Get generator class for a component.

        Args:
            component: Component name or alias

        Returns:
            Generator class

        Raises:
            RegistryError: If component not found
        """
        key = component.lower()
        if key in self._generators:
            return self._generators[key]
        if key in self._aliases:
            return self._generators[self._aliases[key]]

        raise RegistryError(
            f"No generator registered for component: {component}. "
            f"Available: {', '.join(self.list_components())}"
        )

    def create_generator(self, component: str, config: ConfigSource = None) -> CodeGenerator:
        """
        Create a generator instance for a component.

        Args:
            component: Component name
            config: FlutterConfig, dict of overrides, or config file path

        Returns:
            Configured generator instance

        Raises:
            RegistryError: If the component is unknown or the config is invalid
        """
        generator_class = self.get_generator_class(component)

        if isinstance(config, FlutterConfig):
            final_config = config
        elif isinstance(config, (str, Path)):
            final_config = load_config(config_file=config)
        elif isinstance(config, dict):
            final_config = load_config(custom_config=config)
        elif config is None:
            final_config = load_config()
        else:
            raise RegistryError(f"Invalid config type: {type(config)}")

        return generator_class(final_config)

    def list_components(self) -> List[str]:
        """Get list of registered primary component names."""
        return sorted(self._generators.keys())

    def get_aliases(self, component: str) -> List[str]:
        key = component.lower()
        return sorted(alias for alias, target in self._aliases.items() if target == key)

    def is_supported(self, component: str) -> bool:
        key = component.lower()
        return key in self._generators or key in self._aliases

    def get_component_info(self, component: str) -> Dict[str, Any]:
        """
        Get information about a registered component.

        Returns:
            Dict with name, class, file extension, aliases and module
        """
        generator_class = self.get_generator_class(component)
        key = component.lower()
        key = self._aliases.get(key, key)
        generator = generator_class(FlutterConfig())
        return {
            "name": generator.component_name,
            "class": generator_class.__name__,
            "file_extension": generator.get_file_extension(),
            "output_directory": str(generator.get_output_directory()),
            "aliases": self.get_aliases(key),
            "module": generator_class.__module__,
        }


def create_default_registry() -> GeneratorRegistry:
    """Build a registry holding every built-in Flutter generator."""
    from .flutter import (
        ApiClientBaseGenerator,
        ApiServiceGenerator,
        DartModelGenerator,
        ScreenGenerator,
        WidgetGenerator,
    )

    registry = GeneratorRegistry()
    registry.register("model", DartModelGenerator, aliases=["data_class"])
    registry.register("service", ApiServiceGenerator, aliases=["api_client"])
    registry.register("widget", WidgetGenerator, aliases=["component"])
    registry.register("screen", ScreenGenerator)
    registry.register("api_base", ApiClientBaseGenerator, aliases=["transport"])
    return registry


def get_generator(component: str, config: ConfigSource = None) -> CodeGenerator:
    """Create a built-in generator by component name."""
    return create_default_registry().create_generator(component, config)


def list_supported_components() -> List[str]:
    return create_default_registry().list_components()
