"""
Python-specific configuration and type mappings.

Maps primitive kinds of the runtime API onto Python annotations and holds
the pydantic options of the declaration backend.
"""

from typing import Dict

from ...core.types import PrimitiveKind


# Python type mappings
PYTHON_TYPE_MAP: Dict[PrimitiveKind, str] = {
    PrimitiveKind.INT8: "int",
    PrimitiveKind.INT16: "int",
    PrimitiveKind.INT: "int",
    PrimitiveKind.INT64: "int",
    PrimitiveKind.UINT8: "int",
    PrimitiveKind.UINT16: "int",
    PrimitiveKind.UINT: "int",
    PrimitiveKind.UINT64: "int",
    PrimitiveKind.FLOAT: "float",
    PrimitiveKind.DOUBLE: "float",
    PrimitiveKind.NUMBER: "float",
    PrimitiveKind.STRING: "str",
    PrimitiveKind.BOOLEAN: "bool",
}


class PythonConfig:
    """Python-specific configuration."""

    def __init__(self, **kwargs):
        """Initialize Python configuration."""
        # Pydantic options
        self.pydantic_use_alias = kwargs.get("pydantic_use_alias", True)
        self.pydantic_extra_forbid = kwargs.get("pydantic_extra_forbid", False)

        # Put attribute descriptions into Field(description=...)
        self.field_descriptions = kwargs.get("field_descriptions", False)

    def get_python_type(self, kind: PrimitiveKind) -> str:
        """Get the annotation for a primitive kind."""
        return PYTHON_TYPE_MAP[kind]
