"""
Flutter screen generator.

Renders the list, detail, create and edit screens for a model. Each screen
wires the generated service to the generated widgets and keeps its own
``_isLoading`` / ``_error`` state.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from ...logging_config import get_logger
from ..core.generator import UnsupportedVariantError
from ..core.naming import pluralize, to_pascal_case, to_snake_case, to_title_words
from ..core.schema import ModelDescriptor, TargetType
from .base import DartGenerator
from .widget import display_expression

logger = get_logger(__name__)

SCREEN_TYPES = ("list", "detail", "create", "edit")

# Screens each screen type navigates to.
SCREEN_LINKS = {
    "list": ("detail", "create", "edit"),
    "detail": ("edit",),
    "create": (),
    "edit": (),
}

# Widgets each screen type renders.
SCREEN_WIDGETS = {
    "list": ("list",),
    "detail": (),
    "create": ("form",),
    "edit": ("form",),
}


@dataclass
class DetailRow:
    label: str
    expression: str


@dataclass
class DartScreenSpec:
    """Structure of a generated screen."""

    screen_type: str
    class_name: str
    model_class: str
    service_class: str
    title: str
    label: str = ""
    imports: List[str] = field(default_factory=list)
    rows: List[DetailRow] = field(default_factory=list)
    id_field: Optional[str] = None
    id_nullable: bool = False
    nullable_suffix: str = "?"
    service_modifier: str = "late final "
    doc: str = ""

    def id_expression(self, receiver: str) -> str:
        """Dart expression for the integer id of ``receiver``."""
        if self.id_field is None:
            return "0"
        access = f"{receiver}.{self.id_field}"
        return f"({access} ?? 0)" if self.id_nullable else access

    def screen_class(self, screen_type: str) -> str:
        return f"{self.model_class}{to_pascal_case(screen_type)}Screen"

    def widget_class(self, widget_type: str) -> str:
        return f"{self.model_class}{to_pascal_case(widget_type)}"


class ScreenGenerator(DartGenerator):
    """Generates the CRUD screens for a model."""

    output_section = "screens"
    supported_types = SCREEN_TYPES

    @property
    def component_name(self) -> str:
        return "screen"

    def output_name(self, descriptor: ModelDescriptor, screen_type: str) -> str:
        """File stem for a screen (``user_list_screen``)."""
        return f"{to_snake_case(descriptor.class_name)}_{screen_type}_screen"

    def resolve_type(self, options: Optional[Mapping[str, Any]]) -> str:
        options = options or {}
        screen_type = options.get("screen_type") or options.get("type") or "list"
        if screen_type not in self.supported_types:
            raise UnsupportedVariantError("screen", screen_type, self.supported_types)
        return screen_type

    def get_imports(self, descriptor: ModelDescriptor, screen_type: str) -> List[str]:
        snake = to_snake_case(descriptor.class_name)
        imports = [
            "import 'package:flutter/material.dart';",
            "",
        ]
        relative = []
        if screen_type != "create":
            relative.append(self.model_import(descriptor))
        relative.append(self.api_service_import())
        relative.append(self.service_import(descriptor))
        for widget_type in SCREEN_WIDGETS[screen_type]:
            relative.append(self.import_path("widgets", f"{snake}_{widget_type}"))
        for linked in SCREEN_LINKS[screen_type]:
            relative.append(self.import_path("screens", self.output_name(descriptor, linked)))
        imports.extend(f"import '{path}';" for path in relative)
        return imports

    def build_spec(self, descriptor: ModelDescriptor, screen_type: str) -> DartScreenSpec:
        if screen_type not in self.supported_types:
            raise UnsupportedVariantError("screen", screen_type, self.supported_types)

        model = self.class_name(descriptor)
        words = to_title_words(descriptor.class_name)
        titles = {
            "list": to_title_words(pluralize(to_snake_case(descriptor.class_name))),
            "detail": f"{words} Details",
            "create": f"Create {words}",
            "edit": f"Edit {words}",
        }
        docs = {
            "list": f"Lists every {model} with create, edit and delete actions.",
            "detail": f"Shows a single {model} loaded by id.",
            "create": f"Creates a new {model}.",
            "edit": f"Edits an existing {model}.",
        }

        fields = self.dart_fields(descriptor)
        spec = DartScreenSpec(
            screen_type=screen_type,
            class_name=f"{model}{to_pascal_case(screen_type)}Screen",
            model_class=model,
            service_class=f"{model}Service",
            title=titles[screen_type],
            label=words,
            imports=self.get_imports(descriptor, screen_type),
            nullable_suffix="?" if self.null_safety else "",
            service_modifier="late final " if self.null_safety else "",
            doc=self.format_doc_comment(docs[screen_type]),
        )

        id_field = next((f for f in fields if f.json_key == descriptor.primary_key), None)
        if id_field is not None and id_field.target_type is TargetType.INT:
            spec.id_field = id_field.name
            spec.id_nullable = id_field.nullable
        elif screen_type in ("list", "edit"):
            logger.warning(
                f"{descriptor.class_name} has no integer '{descriptor.primary_key}' "
                f"attribute; {screen_type} screen uses 0 as the id"
            )

        if screen_type == "detail":
            spec.rows = [DetailRow(f.label, display_expression(f, "item")) for f in fields]
        return spec

    def generate(
        self, descriptor: ModelDescriptor, options: Optional[Mapping[str, Any]] = None
    ) -> str:
        """
        Generate one screen.

        Args:
            descriptor: Analyzed model
            options: ``{"screen_type": "list" | "detail" | "create" | "edit"}``

        Raises:
            UnsupportedVariantError: For any other screen type.
        """
        screen_type = self.resolve_type(options)
        spec = self.build_spec(descriptor, screen_type)
        code = self.render_template(self.template_name(f"screen_{screen_type}"), {"screen": spec})
        return self.format_code(code)
