"""
Dart data class generator.

Renders a ModelDescriptor into an immutable Dart class with constructor,
JSON (de)serialization, copyWith, equality, hashCode and toString.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from ...logging_config import get_logger
from ..core.naming import to_snake_case
from ..core.schema import ModelDescriptor
from .base import DartGenerator
from .types import DartField

logger = get_logger(__name__)


@dataclass
class DartModelSpec:
    """Structure of a generated data class."""

    class_name: str
    fields: List[DartField] = field(default_factory=list)
    imports: List[str] = field(default_factory=list)
    part_directive: Optional[str] = None
    use_json_annotation: bool = False
    required_keyword: str = "required "
    doc: str = ""

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    @property
    def to_string_body(self) -> str:
        return ", ".join(f"{f.name}: ${f.name}" for f in self.fields)


class DartModelGenerator(DartGenerator):
    """Generates Dart data classes from model descriptors."""

    output_section = "models"

    @property
    def component_name(self) -> str:
        return "model"

    def build_spec(self, descriptor: ModelDescriptor) -> DartModelSpec:
        """Build the class structure without rendering it."""
        class_name = self.class_name(descriptor)
        use_annotation = self.config.generation.use_json_annotation

        return DartModelSpec(
            class_name=class_name,
            fields=self.dart_fields(descriptor),
            imports=self.get_imports(descriptor),
            part_directive=(
                f"part '{to_snake_case(descriptor.class_name)}.g.dart';"
                if use_annotation
                else None
            ),
            use_json_annotation=use_annotation,
            required_keyword="required " if self.null_safety else "",
            doc=self.format_doc_comment(
                f"{class_name} model generated from the `{descriptor.table_name}` table."
            ),
        )

    def get_imports(self, descriptor: ModelDescriptor) -> List[str]:
        imports = []
        if self.config.generation.use_json_annotation:
            imports.append("import 'package:json_annotation/json_annotation.dart';")

        related = sorted(
            {
                to_snake_case(relationship.related_class_name)
                for relationship in descriptor.relationships.values()
            }
            - {to_snake_case(descriptor.class_name)}
        )
        imports.extend(f"import '{name}.dart';" for name in related)
        return imports

    def generate(
        self, descriptor: ModelDescriptor, options: Optional[Mapping[str, Any]] = None
    ) -> str:
        """Generate the Dart data class for ``descriptor``."""
        for warning in self.validate_descriptor(descriptor):
            logger.warning(warning)

        spec = self.build_spec(descriptor)
        code = self.render_template(self.template_name("model"), {"model": spec})
        return self.format_code(code)
