"""
Flutter widget generator.

Renders the form, list and card widgets for a model.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from ...logging_config import get_logger
from ..core.generator import UnsupportedVariantError
from ..core.naming import to_pascal_case, to_snake_case
from ..core.schema import ModelDescriptor
from .base import DartGenerator
from .types import DartField

logger = get_logger(__name__)

WIDGET_TYPES = ("form", "list", "card")

PRIMARY_FIELD_CANDIDATES = ("name", "title", "email", "username")
SECONDARY_FIELD_CANDIDATES = ("description", "email", "phone", "created_at")


def display_expression(field: DartField, receiver: str = "item") -> str:
    """Dart expression rendering ``receiver.field`` as a String."""
    access = f"{receiver}.{field.name}"
    if field.nullable:
        return f"{access}?.toString() ?? ''"
    if field.is_string:
        return access
    return f"{access}.toString()"


def select_primary_field(fields: List[DartField]) -> Optional[DartField]:
    """First of name/title/email/username, else first non-id String, else first."""
    by_key = {f.json_key: f for f in fields}
    for candidate in PRIMARY_FIELD_CANDIDATES:
        if candidate in by_key:
            return by_key[candidate]
    for f in fields:
        if f.is_string and f.json_key != "id":
            return f
    return fields[0] if fields else None


def select_secondary_field(
    fields: List[DartField], primary: Optional[DartField]
) -> Optional[DartField]:
    by_key = {f.json_key: f for f in fields}
    for candidate in SECONDARY_FIELD_CANDIDATES:
        if candidate in by_key and (primary is None or candidate != primary.json_key):
            return by_key[candidate]
    return None


@dataclass
class FormControl:
    """One input of the generated form."""

    field: DartField
    kind: str
    state_name: str
    picker_name: str = ""
    validator_message: str = ""

    @property
    def uses_controller(self) -> bool:
        return self.kind != "toggle"


@dataclass
class DartWidgetSpec:
    """Structure of a generated widget."""

    widget_type: str
    class_name: str
    model_class: str
    imports: List[str] = field(default_factory=list)
    controls: List[FormControl] = field(default_factory=list)
    primary: Optional[DartField] = None
    secondary: Optional[DartField] = None
    primary_expression: str = ""
    secondary_expression: str = ""
    nullable_suffix: str = "?"
    doc: str = ""

    @property
    def control_names(self) -> List[str]:
        return [control.field.json_key for control in self.controls]


class WidgetGenerator(DartGenerator):
    """Generates reusable Flutter widgets for a model."""

    output_section = "widgets"
    supported_types = WIDGET_TYPES

    @property
    def component_name(self) -> str:
        return "widget"

    def output_name(self, descriptor: ModelDescriptor, widget_type: str) -> str:
        """File stem for a widget (``user_form``)."""
        return f"{to_snake_case(descriptor.class_name)}_{widget_type}"

    def resolve_type(self, options: Optional[Mapping[str, Any]]) -> str:
        options = options or {}
        widget_type = options.get("widget_type") or options.get("type") or "form"
        if widget_type not in self.supported_types:
            raise UnsupportedVariantError("widget", widget_type, self.supported_types)
        return widget_type

    def build_spec(self, descriptor: ModelDescriptor, widget_type: str) -> DartWidgetSpec:
        if widget_type not in self.supported_types:
            raise UnsupportedVariantError("widget", widget_type, self.supported_types)

        model = self.class_name(descriptor)
        class_name = f"{model}{to_pascal_case(widget_type)}"
        imports = [
            "import 'package:flutter/material.dart';",
            "",
            f"import '{self.model_import(descriptor)}';",
        ]
        if widget_type == "list":
            imports.append(f"import '{self.import_path('widgets', self.output_name(descriptor, 'card'))}';")

        spec = DartWidgetSpec(
            widget_type=widget_type,
            class_name=class_name,
            model_class=model,
            imports=imports,
            nullable_suffix="?" if self.null_safety else "",
        )

        if widget_type == "form":
            spec.controls = [self._form_control(f) for f in self.input_fields(descriptor)]
            spec.doc = self.format_doc_comment(f"Form for creating and editing a {model}.")
        elif widget_type == "card":
            fields = self.dart_fields(descriptor)
            spec.primary = select_primary_field(fields)
            spec.secondary = select_secondary_field(fields, spec.primary)
            spec.primary_expression = (
                display_expression(spec.primary) if spec.primary else f"'{model}'"
            )
            if spec.secondary:
                spec.secondary_expression = display_expression(spec.secondary)
            spec.doc = self.format_doc_comment(f"Summary card for a single {model}.")
        else:
            spec.doc = self.format_doc_comment(f"Scrollable list of {model} cards.")
        return spec

    def _form_control(self, dart_field: DartField) -> FormControl:
        return FormControl(
            field=dart_field,
            kind=dart_field.control,
            state_name=(
                f"_{dart_field.name}"
                if dart_field.control == "toggle"
                else f"_{dart_field.name}Controller"
            ),
            picker_name=(
                f"_select{to_pascal_case(dart_field.json_key)}"
                if dart_field.control == "date"
                else ""
            ),
            validator_message=(
                f"Please enter {dart_field.label}" if dart_field.required else ""
            ),
        )

    def generate(
        self, descriptor: ModelDescriptor, options: Optional[Mapping[str, Any]] = None
    ) -> str:
        """
        Generate one widget.

        Args:
            descriptor: Analyzed model
            options: ``{"widget_type": "form" | "list" | "card"}``

        Raises:
            UnsupportedVariantError: For any other widget type.
        """
        widget_type = self.resolve_type(options)
        spec = self.build_spec(descriptor, widget_type)
        code = self.render_template(self.template_name(f"widget_{widget_type}"), {"widget": spec})
        return self.format_code(code)
