"""
Dart type mapping for generated Flutter code.

Turns attribute descriptors into ``DartField`` records that carry every
snippet the templates need: declared type, JSON decode/encode expressions
and the form control kind.
"""

from dataclasses import dataclass
from typing import Dict

from ..core.naming import NameSanitizer, to_title_words
from ..core.schema import AttributeDescriptor, ParameterType, TargetType
from .naming import dart_field_name

DART_TYPES: Dict[TargetType, str] = {
    TargetType.INT: "int",
    TargetType.DOUBLE: "double",
    TargetType.BOOL: "bool",
    TargetType.DATETIME: "DateTime",
    TargetType.JSON: "Map<String, dynamic>",
    TargetType.STRING: "String",
}

PARAMETER_TYPES: Dict[ParameterType, str] = {
    ParameterType.INT: "int",
    ParameterType.STRING: "String",
}

# Form control per target type; anything not listed is a text field.
FORM_CONTROLS: Dict[TargetType, str] = {
    TargetType.INT: "number",
    TargetType.DOUBLE: "number",
    TargetType.BOOL: "toggle",
    TargetType.DATETIME: "date",
}


@dataclass(frozen=True)
class DartField:
    """One generated Dart property."""

    name: str
    json_key: str
    dart_type: str
    target_type: TargetType
    nullable: bool
    type_annotation: str
    copy_with_type: str
    from_json: str
    to_json: str
    label: str

    @property
    def required(self) -> bool:
        return not self.nullable

    @property
    def control(self) -> str:
        return FORM_CONTROLS.get(self.target_type, "text")

    @property
    def is_numeric(self) -> bool:
        return self.target_type in (TargetType.INT, TargetType.DOUBLE)

    @property
    def is_string(self) -> bool:
        return self.target_type == TargetType.STRING


class DartTypeMapper:
    """Maps attributes to Dart types and JSON conversion snippets."""

    def __init__(self, sanitizer: NameSanitizer, null_safety: bool = True):
        self.sanitizer = sanitizer
        self.null_safety = null_safety

    def dart_type(self, target_type: TargetType) -> str:
        return DART_TYPES.get(target_type, "String")

    def parameter_type(self, parameter_type: ParameterType) -> str:
        return PARAMETER_TYPES.get(parameter_type, "String")

    def nullable(self, dart_type: str) -> str:
        """``dart_type`` with a nullable marker when null safety is on."""
        return f"{dart_type}?" if self.null_safety else dart_type

    def map_attribute(self, attribute: AttributeDescriptor) -> DartField:
        name = dart_field_name(self.sanitizer, attribute.name)
        dart_type = self.dart_type(attribute.target_type)
        annotation = self.nullable(dart_type) if attribute.nullable else dart_type

        return DartField(
            name=name,
            json_key=attribute.name,
            dart_type=dart_type,
            target_type=attribute.target_type,
            nullable=attribute.nullable,
            type_annotation=annotation,
            copy_with_type=self.nullable(dart_type),
            from_json=self.from_json_expression(attribute.name, attribute),
            to_json=self.to_json_expression(name, attribute),
            label=to_title_words(attribute.name),
        )

    def from_json_expression(self, key: str, attribute: AttributeDescriptor) -> str:
        """Expression decoding ``json['key']`` into the field's Dart type."""
        value = f"json['{key}']"
        target = attribute.target_type
        nullable = attribute.nullable

        if target == TargetType.DATETIME:
            if nullable:
                return f"{value} != null ? DateTime.parse({value} as String) : null"
            return f"DateTime.parse({value} as String)"

        if target == TargetType.INT:
            if nullable:
                return f"({value} as {self.nullable('num')})?.toInt()"
            return f"({value} as num).toInt()"

        if target == TargetType.DOUBLE:
            if nullable:
                return f"({value} as {self.nullable('num')})?.toDouble()"
            return f"({value} as num).toDouble()"

        dart_type = self.dart_type(target)
        return f"{value} as {self.nullable(dart_type) if nullable else dart_type}"

    def to_json_expression(self, name: str, attribute: AttributeDescriptor) -> str:
        if attribute.target_type == TargetType.DATETIME:
            return f"{name}?.toIso8601String()" if attribute.nullable else f"{name}.toIso8601String()"
        return name
