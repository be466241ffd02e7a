"""
Core code generation components.

Provides the schema model, the shared traversal and the base classes used
by all backends.
"""

from .generator import CodeGenerator, GeneratorError, GenerationResult, generate_code
from .types import (
    Attribute,
    PrimitiveKind,
    Type,
    TypeParseError,
    VariantParameterGroup,
    is_number,
    parse_type,
    scalar_kind,
)
from .schema import Api, Class, Concept, SchemaValidationError, load_api, parse_api
from .traversal import MissingIdentifyingFieldError, Traversal
from .naming import NameSanitizer, NamingCase
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config, validate_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GeneratorError",
    "GenerationResult",
    "generate_code",
    # Type algebra
    "Attribute",
    "PrimitiveKind",
    "Type",
    "TypeParseError",
    "VariantParameterGroup",
    "is_number",
    "parse_type",
    "scalar_kind",
    # Schema model
    "Api",
    "Class",
    "Concept",
    "SchemaValidationError",
    "load_api",
    "parse_api",
    # Traversal
    "MissingIdentifyingFieldError",
    "Traversal",
    # Naming utilities - language-agnostic
    "NameSanitizer",
    "NamingCase",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    "validate_config",
    # Template system - language-agnostic
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
