"""
Dart-specific naming utilities.

Handles Dart reserved words and the identifiers Flutter code commonly
shadows.
"""

from ..core.naming import NameSanitizer, NamingCase

# Dart reserved words and built-in identifiers
DART_RESERVED_WORDS = {
    "abstract",
    "as",
    "assert",
    "async",
    "await",
    "break",
    "case",
    "catch",
    "class",
    "const",
    "continue",
    "covariant",
    "default",
    "deferred",
    "do",
    "dynamic",
    "else",
    "enum",
    "export",
    "extends",
    "extension",
    "external",
    "factory",
    "false",
    "final",
    "finally",
    "for",
    "get",
    "if",
    "implements",
    "import",
    "in",
    "interface",
    "is",
    "late",
    "library",
    "mixin",
    "new",
    "null",
    "operator",
    "part",
    "required",
    "rethrow",
    "return",
    "set",
    "static",
    "super",
    "switch",
    "this",
    "throw",
    "true",
    "try",
    "typedef",
    "var",
    "void",
    "while",
    "with",
    "yield",
}

# Core types and members a generated field must not shadow
DART_BUILTIN_NAMES = {
    "bool",
    "double",
    "int",
    "num",
    "hashCode",
    "runtimeType",
    "toString",
    "toJson",
    "copyWith",
}


def create_dart_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for Dart."""
    return NameSanitizer(DART_RESERVED_WORDS, DART_BUILTIN_NAMES)


def dart_field_name(sanitizer: NameSanitizer, name: str) -> str:
    """camelCase Dart identifier for a column name."""
    return sanitizer.sanitize_name(name, NamingCase.CAMEL_CASE)


def dart_class_name(sanitizer: NameSanitizer, name: str) -> str:
    """PascalCase Dart type name for a model name."""
    return sanitizer.sanitize_name(name, NamingCase.PASCAL_CASE, suffix_on_conflict="Model")
