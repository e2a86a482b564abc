"""
Naming utilities for code generation.

Pure case conversions shared by every generator, plus a sanitizer that
keeps generated identifiers clear of target-language reserved words.
"""

import re
from enum import Enum
from typing import Dict, Optional, Set

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_SEPARATORS = re.compile(r"[^a-zA-Z0-9]+")


class NamingCase(Enum):
    """Different naming case styles."""

    SNAKE_CASE = "snake"  # user_name
    CAMEL_CASE = "camel"  # userName
    PASCAL_CASE = "pascal"  # UserName
    KEBAB_CASE = "kebab"  # user-name


def _words(name: str) -> list:
    """Split any snake, camel, kebab or spaced token into lowercase words."""
    if not name:
        return []
    name = _ACRONYM_BOUNDARY.sub(r"\1_\2", str(name))
    name = _WORD_BOUNDARY.sub(r"\1_\2", name)
    return [part.lower() for part in _SEPARATORS.split(name) if part]


def to_snake_case(name: str) -> str:
    """Convert to snake_case (``UserProfile`` -> ``user_profile``)."""
    return "_".join(_words(name))


def to_kebab_case(name: str) -> str:
    """Convert to kebab-case (``UserProfile`` -> ``user-profile``)."""
    return "-".join(_words(name))


def to_camel_case(name: str) -> str:
    """Convert to camelCase (``created_at`` -> ``createdAt``)."""
    words = _words(name)
    if not words:
        return ""
    return words[0] + "".join(word.capitalize() for word in words[1:])


def to_pascal_case(name: str) -> str:
    """Convert to PascalCase (``blog_post`` -> ``BlogPost``)."""
    return "".join(word.capitalize() for word in _words(name))


def to_title_words(name: str) -> str:
    """Human readable label (``created_at`` -> ``Created At``)."""
    return " ".join(word.capitalize() for word in _words(name))


def pluralize(word: str) -> str:
    """Naive English plural used for endpoint and resource names."""
    if not word:
        return ""
    lower = word.lower()
    if lower.endswith(("s", "x", "z", "ch", "sh")):
        return f"{word}es"
    if lower.endswith("y") and len(word) > 1 and lower[-2] not in "aeiou":
        return f"{word[:-1]}ies"
    return f"{word}s"


def singularize(word: str) -> str:
    """Inverse of :func:`pluralize` for the common suffixes."""
    lower = word.lower()
    if lower.endswith("ies") and len(word) > 3:
        return f"{word[:-3]}y"
    if lower.endswith(("ses", "xes", "zes", "ches", "shes")):
        return word[:-2]
    if lower.endswith("s") and not lower.endswith("ss"):
        return word[:-1]
    return word


def convert_case(name: str, target_case: NamingCase) -> str:
    """Dispatch to the converter for ``target_case``."""
    converters = {
        NamingCase.SNAKE_CASE: to_snake_case,
        NamingCase.CAMEL_CASE: to_camel_case,
        NamingCase.PASCAL_CASE: to_pascal_case,
        NamingCase.KEBAB_CASE: to_kebab_case,
    }
    return converters[target_case](name)


class NameSanitizer:
    """Case conversion plus reserved-word escaping for one target language."""

    def __init__(
        self,
        reserved_words: Optional[Set[str]] = None,
        builtin_types: Optional[Set[str]] = None,
    ):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            builtin_types: Set of builtin type names that might conflict
        """
        self.reserved_words = reserved_words or set()
        self.builtin_types = builtin_types or set()
        self._name_cache: Dict[str, str] = {}

    def sanitize_name(
        self,
        name: str,
        target_case: NamingCase = NamingCase.CAMEL_CASE,
        suffix_on_conflict: str = "Value",
    ) -> str:
        """
        Convert ``name`` to ``target_case`` and escape reserved words.

        Unlike a plain case conversion, the result is always a usable
        identifier: leading digits are prefixed and empty input becomes
        ``field``.

        Args:
            name: Original name to sanitize
            target_case: Desired case style
            suffix_on_conflict: Suffix appended to reserved words

        Returns:
            Sanitized name safe for use
        """
        cache_key = f"{name}_{target_case.value}_{suffix_on_conflict}"
        if cache_key in self._name_cache:
            return self._name_cache[cache_key]

        converted = convert_case(name, target_case) or "field"
        if converted[0].isdigit():
            converted = f"n{converted}"

        if converted in self.reserved_words or converted in self.builtin_types:
            converted = f"{converted}{suffix_on_conflict}"

        self._name_cache[cache_key] = converted
        return converted
