"""
Backend code generators.

This module contains the extraction script and declaration backends.
"""

from .lua import LuaGenerator, create_lua_generator
from .python import PythonGenerator, create_python_generator, create_strict_generator

__all__ = [
    "LuaGenerator",
    "create_lua_generator",
    "PythonGenerator",
    "create_python_generator",
    "create_strict_generator",
]
