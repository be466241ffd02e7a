"""
Factorio runtime API code generation.

Generates the Lua extraction script and the matching pydantic models from
one traversal of ``runtime-api.json``.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

from .registry import GeneratorRegistry, RegistryError, get_generator, get_registry, list_supported_languages
from .core.generator import CodeGenerator, GeneratorError, GenerationResult, generate_code
from .core.schema import Api, SchemaValidationError, load_api, parse_api
from .core.traversal import MissingIdentifyingFieldError, Traversal
from .core.config import GeneratorConfig, ConfigError, ConfigManager, load_config


def generate_from_api(
    api: Api,
    language: str = "lua",
    config: Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]] = None,
) -> GenerationResult:
    """
    Generate an artifact from a parsed API.

    Args:
        api: Parsed runtime API
        language: Backend name or alias
        config: Generator configuration, dict of overrides, or config file path

    Returns:
        GenerationResult with generated code
    """
    generator = get_generator(language, config)
    settings = generator.config

    return generate_code(
        generator,
        api,
        root_attribute_suffix=settings.root_attribute_suffix,
        root_class=settings.root_class,
        identifying_field=settings.identifying_field,
    )


def quick_generate(document: Union[Dict[str, Any], str], language: str = "lua", **options) -> str:
    """
    Generate code straight from a raw API document.

    Args:
        document: Decoded API document, or its JSON text
        language: Backend name or alias
        **options: Configuration overrides

    Returns:
        Generated code string
    """
    if isinstance(document, str):
        import json

        document = json.loads(document)

    return generate_from_api(parse_api(document), language, options or None).code


# Export main interfaces
__all__ = [
    "Api",
    "CodeGenerator",
    "ConfigError",
    "ConfigManager",
    "GenerationResult",
    "GeneratorConfig",
    "GeneratorError",
    "GeneratorRegistry",
    "MissingIdentifyingFieldError",
    "RegistryError",
    "SchemaValidationError",
    "Traversal",
    "generate_code",
    "generate_from_api",
    "get_generator",
    "get_registry",
    "list_supported_languages",
    "load_api",
    "load_config",
    "parse_api",
    "quick_generate",
]
