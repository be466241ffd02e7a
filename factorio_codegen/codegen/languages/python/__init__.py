"""
Python code generator module.

Generates pydantic v2 models that validate exported documents.
"""

from .generator import (
    PythonGenerator,
    create_python_generator,
    create_strict_generator,
)
from .naming import create_class_sanitizer, create_field_sanitizer
from .config import PythonConfig

__all__ = [
    # Generator
    "PythonGenerator",
    "create_python_generator",
    "create_strict_generator",
    # Naming
    "create_class_sanitizer",
    "create_field_sanitizer",
    # Configuration
    "PythonConfig",
]
