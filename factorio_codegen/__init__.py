"""
factorio-codegen: schema-driven exporters for the Factorio runtime API.

Reads ``runtime-api.json`` and generates a Lua script that dumps live
prototype data, plus pydantic models that validate the dump.
"""

__version__ = "0.1.0"

from .codegen import (
    GenerationResult,
    GeneratorError,
    generate_from_api,
    load_api,
    parse_api,
    quick_generate,
)
from .utils import SchemaLoaderError, load_api_document

__all__ = [
    "__version__",
    "GenerationResult",
    "GeneratorError",
    "SchemaLoaderError",
    "generate_from_api",
    "load_api",
    "load_api_document",
    "parse_api",
    "quick_generate",
]
