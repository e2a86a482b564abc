"""
Shared base for the Flutter/Dart generators.

Wires the built-in template directory, Dart naming and type mapping into
``CodeGenerator`` and provides the cross-file import helpers.
"""

from pathlib import Path
from typing import List, Optional

from ..core.config import FlutterConfig
from ..core.generator import SYSTEM_ATTRIBUTES, CodeGenerator
from ..core.naming import pluralize, to_snake_case
from ..core.schema import ModelDescriptor
from .naming import create_dart_sanitizer, dart_class_name
from .types import DartField, DartTypeMapper

TEMPLATE_DIR = Path(__file__).parent / "templates"


class DartGenerator(CodeGenerator):
    """Base class for generators emitting Dart source."""

    def __init__(self, config: Optional[FlutterConfig] = None):
        super().__init__(config)
        self.sanitizer = create_dart_sanitizer()
        self.type_mapper = DartTypeMapper(
            self.sanitizer, null_safety=self.config.generation.null_safety
        )

    def get_template_directory(self) -> Optional[Path]:
        """Return the Dart templates directory."""
        return TEMPLATE_DIR if TEMPLATE_DIR.exists() else None

    @property
    def null_safety(self) -> bool:
        return self.config.generation.null_safety

    def class_name(self, descriptor: ModelDescriptor) -> str:
        return dart_class_name(self.sanitizer, descriptor.class_name)

    def dart_fields(self, descriptor: ModelDescriptor) -> List[DartField]:
        """Dart fields for every non-excluded attribute, in schema order."""
        return [
            self.type_mapper.map_attribute(attribute)
            for attribute in self.included_attributes(descriptor)
        ]

    def input_fields(self, descriptor: ModelDescriptor) -> List[DartField]:
        """Fields a user can edit: excludes backend-managed columns."""
        return [
            field
            for field in self.dart_fields(descriptor)
            if field.json_key not in SYSTEM_ATTRIBUTES
        ]

    def endpoint(self, descriptor: ModelDescriptor) -> str:
        """REST collection path for a model (``BlogPost`` -> ``blog_posts``)."""
        return pluralize(to_snake_case(descriptor.class_name))

    def instance_name(self, descriptor: ModelDescriptor) -> str:
        """Local variable name for one instance (``BlogPost`` -> ``blogPost``)."""
        name = self.class_name(descriptor)
        return name[0].lower() + name[1:]

    # Imports between generated files

    def _package_dir(self, section: str) -> str:
        return getattr(self.config.output, f"{section}_path")

    def import_path(self, section: str, file_stem: str) -> str:
        """Relative import of a generated file from this generator's folder."""
        target = self._package_dir(section)
        if section == self.output_section:
            return f"{file_stem}.dart"
        return f"../{target}/{file_stem}.dart"

    def model_import(self, descriptor: ModelDescriptor) -> str:
        return self.import_path("models", to_snake_case(descriptor.class_name))

    def service_import(self, descriptor: ModelDescriptor) -> str:
        return self.import_path("services", f"{to_snake_case(descriptor.class_name)}_service")

    def api_service_import(self) -> str:
        return self.import_path("services", "api_service")
