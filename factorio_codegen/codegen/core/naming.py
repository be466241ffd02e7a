"""
Naming utilities for safe code generation.

Maps schema names onto identifiers that are valid in a target language,
converting case and escaping reserved words and builtins.
"""

import re
from typing import Set, Dict
from enum import Enum


class NamingCase(Enum):
    """Different naming case styles."""
    PRESERVE = "preserve"     # item_prototypes (only invalid chars replaced)
    SNAKE_CASE = "snake"      # item_prototypes
    CAMEL_CASE = "camel"      # itemPrototypes
    PASCAL_CASE = "pascal"    # ItemPrototypes
    KEBAB_CASE = "kebab"      # item-prototypes
    SCREAMING_SNAKE = "screaming_snake"  # ITEM_PROTOTYPES


class NameSanitizer:
    """Handles name sanitization and case conversion within one scope."""

    def __init__(self, reserved_words: Set[str] = None, builtin_types: Set[str] = None,
                 digit_prefix: str = "field_"):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            builtin_types: Set of builtin names that must not be shadowed
            digit_prefix: Prefix for names that would start with a digit
        """
        self.reserved_words = reserved_words or set()
        self.builtin_types = builtin_types or set()
        self.digit_prefix = digit_prefix
        self._name_cache: Dict[str, str] = {}
        self._used_names: Set[str] = set()

    def sanitize_name(self, name: str, target_case: NamingCase = NamingCase.SNAKE_CASE,
                      suffix_on_conflict: str = "_") -> str:
        """
        Sanitize a name for safe use in target language.

        The same input always maps to the same output within a scope; distinct
        inputs that collide after conversion get a numbered suffix.

        Args:
            name: Original name to sanitize
            target_case: Desired case style
            suffix_on_conflict: Suffix to add for conflicts

        Returns:
            Sanitized name safe for use
        """
        cache_key = f"{name}_{target_case.value}_{suffix_on_conflict}"
        if cache_key in self._name_cache:
            return self._name_cache[cache_key]

        cleaned = self._clean_basic(name)
        converted = self._convert_case(cleaned, target_case)
        if converted[0].isdigit():
            converted = f"{self.digit_prefix}{converted}"
        final_name = self._resolve_conflicts(converted, suffix_on_conflict)

        self._name_cache[cache_key] = final_name
        self._used_names.add(final_name)

        return final_name

    def is_reserved(self, name: str) -> bool:
        """Check whether a name clashes with a keyword or builtin."""
        return name in self.reserved_words or name in self.builtin_types

    def _clean_basic(self, name: str) -> str:
        """Basic name cleanup - remove invalid characters."""
        cleaned = re.sub(r'[^a-zA-Z0-9_-]', '_', name)
        cleaned = cleaned.strip('_-')

        if not cleaned:
            cleaned = "field"

        return cleaned

    def _convert_case(self, name: str, target_case: NamingCase) -> str:
        """Convert name to target case style."""
        if target_case == NamingCase.PRESERVE:
            return name.replace('-', '_')
        elif target_case == NamingCase.SNAKE_CASE:
            return self._to_snake_case(name)
        elif target_case == NamingCase.CAMEL_CASE:
            return self._to_camel_case(name)
        elif target_case == NamingCase.PASCAL_CASE:
            return self._to_pascal_case(name)
        elif target_case == NamingCase.KEBAB_CASE:
            return self._to_kebab_case(name)
        elif target_case == NamingCase.SCREAMING_SNAKE:
            return self._to_snake_case(name).upper()
        else:
            return name

    def _to_snake_case(self, name: str) -> str:
        """Convert to snake_case."""
        name = name.replace('-', '_')
        name = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', name)
        name = name.lower()
        name = re.sub(r'_+', '_', name)

        return name.strip('_')

    def _to_camel_case(self, name: str) -> str:
        """Convert to camelCase."""
        parts = self._to_snake_case(name).split('_')
        return parts[0] + ''.join(part.capitalize() for part in parts[1:])

    def _to_pascal_case(self, name: str) -> str:
        """Convert to PascalCase."""
        # Split on existing boundaries but keep inner capitals (LuaGameScript)
        parts = re.split(r'[_-]+', name)
        return ''.join(part[0].upper() + part[1:] for part in parts if part)

    def _to_kebab_case(self, name: str) -> str:
        """Convert to kebab-case."""
        return self._to_snake_case(name).replace('_', '-')

    def _resolve_conflicts(self, name: str, suffix: str) -> str:
        """Resolve naming conflicts with reserved words and existing names."""
        if self.is_reserved(name):
            name = f"{name}{suffix}"

        original_name = name
        counter = 1
        while name in self._used_names:
            if suffix == "_":
                name = f"{original_name}{suffix}{counter}"
            else:
                name = f"{original_name}{counter}"
            counter += 1

        return name

    def reset_used_names(self):
        """Start a new scope: forget used names and cached mappings."""
        self._used_names.clear()
        self._name_cache.clear()

    def add_used_name(self, name: str):
        """Manually add a name to the used names set."""
        self._used_names.add(name)


def convert_case(name: str, target_case: NamingCase) -> str:
    """Clean and convert a name without scope tracking or escaping."""
    sanitizer = NameSanitizer()
    return sanitizer._convert_case(sanitizer._clean_basic(name), target_case)


def to_upper_camel(name: str) -> str:
    """
    UpperCamelCase a schema attribute name (``item_prototypes`` -> ``ItemPrototypes``).

    Used to build synthetic entity names such as ``<Owner><UpperCamel(attr)>``.
    """
    return convert_case(name, NamingCase.PASCAL_CASE)
