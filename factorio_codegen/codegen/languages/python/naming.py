"""
Python-specific naming utilities and sanitization.

Handles Python reserved words, builtins, and names that would shadow
pydantic ``BaseModel`` members in generated models.
"""

from ...core.naming import NameSanitizer


# Python reserved keywords
PYTHON_RESERVED_WORDS = {
    "False",
    "None",
    "True",
    "and",
    "as",
    "assert",
    "async",
    "await",
    "break",
    "class",
    "continue",
    "def",
    "del",
    "elif",
    "else",
    "except",
    "finally",
    "for",
    "from",
    "global",
    "if",
    "import",
    "in",
    "is",
    "lambda",
    "nonlocal",
    "not",
    "or",
    "pass",
    "raise",
    "return",
    "try",
    "while",
    "with",
    "yield",
}

# Python built-in types and functions
PYTHON_BUILTIN_TYPES = {
    # Types
    "int",
    "float",
    "str",
    "bool",
    "list",
    "dict",
    "set",
    "tuple",
    "bytes",
    "bytearray",
    "frozenset",
    "range",
    "object",
    "type",
    "complex",
    "memoryview",
    # Special attributes
    "property",
    "staticmethod",
    "classmethod",
    "super",
    # Common functions
    "len",
    "print",
    "input",
    "open",
    "all",
    "any",
    "abs",
    "min",
    "max",
    "sum",
    "sorted",
    "reversed",
    "enumerate",
    "zip",
    "map",
    "filter",
    "isinstance",
    "issubclass",
    "hasattr",
    "getattr",
    "setattr",
    "delattr",
    "dir",
    "vars",
    "id",
    "hash",
    "repr",
    "format",
    "iter",
    "next",
    "slice",
    "callable",
    # Exceptions
    "Exception",
    "BaseException",
    "ValueError",
    "TypeError",
    "KeyError",
    "AttributeError",
    "IndexError",
    "RuntimeError",
    "NotImplementedError",
    "StopIteration",
}

# Members of pydantic.BaseModel that fields must not shadow
PYDANTIC_MODEL_ATTRIBUTES = {
    "construct",
    "copy",
    "dict",
    "from_orm",
    "json",
    "model_computed_fields",
    "model_config",
    "model_construct",
    "model_copy",
    "model_dump",
    "model_dump_json",
    "model_extra",
    "model_fields",
    "model_fields_set",
    "model_json_schema",
    "model_parametrized_name",
    "model_post_init",
    "model_rebuild",
    "model_validate",
    "model_validate_json",
    "model_validate_strings",
    "parse_file",
    "parse_obj",
    "parse_raw",
    "schema",
    "schema_json",
    "update_forward_refs",
    "validate",
}

# Names imported by every generated module
GENERATED_MODULE_NAMES = {
    "Any",
    "BaseModel",
    "ConfigDict",
    "Field",
    "Union",
    "annotations",
    "model_validator",
}


def create_field_sanitizer() -> NameSanitizer:
    """Create a sanitizer for pydantic model fields, one per model."""
    return NameSanitizer(
        PYTHON_RESERVED_WORDS, PYTHON_BUILTIN_TYPES | PYDANTIC_MODEL_ATTRIBUTES
    )


def create_class_sanitizer() -> NameSanitizer:
    """Create a sanitizer for model class names, shared by a whole module."""
    return NameSanitizer(
        PYTHON_RESERVED_WORDS,
        PYTHON_BUILTIN_TYPES | GENERATED_MODULE_NAMES,
        digit_prefix="Model",
    )
