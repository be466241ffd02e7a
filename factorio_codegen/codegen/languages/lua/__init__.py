"""
Lua code generator module.

Generates the extraction script and its runtime library, and parses the
output they print.
"""

from .generator import LuaGenerator, create_lua_generator
from .naming import create_lua_sanitizer, lua_string
from .output import (
    ExportOutputError,
    find_section,
    parse_export_output,
    patch_icons,
    sanitize_strings,
)

__all__ = [
    # Generator
    "LuaGenerator",
    "create_lua_generator",
    # Naming
    "create_lua_sanitizer",
    "lua_string",
    # Output parsing
    "ExportOutputError",
    "find_section",
    "parse_export_output",
    "patch_icons",
    "sanitize_strings",
]
