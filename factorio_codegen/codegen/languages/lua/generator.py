"""
Lua code generator implementation.

Generates the extraction script that walks live runtime objects. Every
leaf becomes a call into the ``export`` runtime library, every compound
attribute a callback receiving the nested object as ``value``.
"""

from typing import Dict, List, Any, Optional
from pathlib import Path

from ...core.generator import CodeGenerator, GeneratorError
from ...core.naming import NamingCase
from ...core.config import GeneratorConfig
from ...core.types import PrimitiveKind
from ....logging_config import get_logger
from .naming import create_lua_sanitizer, lua_string

logger = get_logger(__name__)

# Runtime library function family per primitive kind
_SCALAR_FUNCTIONS = {
    PrimitiveKind.STRING: "String",
    PrimitiveKind.BOOLEAN: "Bool",
}

VALUE_VARIABLE = "value"


class LuaGenerator(CodeGenerator):
    """Code generator for the Lua extraction script."""

    def __init__(self, config: GeneratorConfig):
        """Initialize Lua generator with configuration."""
        super().__init__(config)

        self.sanitizer = create_lua_sanitizer()
        self.module_name = config.language_config.get("runtime_module", "export")
        self.module_var = self.sanitizer.sanitize_name(self.module_name, NamingCase.PRESERVE)
        self.root_var = self.sanitizer.sanitize_name(config.root_object, NamingCase.PRESERVE)

        self._lines: List[str] = []
        self._indentation = 0
        self._scopes: List[int] = []
        self._root_name = config.root_class

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "lua"

    @property
    def file_extension(self) -> str:
        """Return Lua file extension."""
        return ".lua"

    @property
    def metadata(self) -> Dict[str, Any]:
        return {
            "locale": self.config.locale,
            "export_icons": self.config.export_icons,
            "runtime_module": self.module_name,
        }

    def get_template_directory(self) -> Path:
        """Return the Lua templates directory."""
        return Path(__file__).parent / "templates"

    # Document lifecycle

    def begin_document(self, root_name: str):
        self._lines = []
        self._indentation = 0
        self._scopes = []
        self._root_name = root_name

    def end_document(self) -> str:
        if self._scopes:
            raise GeneratorError(f"{len(self._scopes)} unclosed scopes at end of script")
        logger.debug(f"Generated {len(self._lines)} script lines for {self._root_name}")
        return self.render_template(
            "prototypes.lua.j2",
            {
                "module_name": lua_string(self.module_name),
                "module_var": self.module_var,
                "root_var": self.root_var,
                "root_name": self._root_name,
                "locale": lua_string(self.config.locale),
                "export_icons": "true" if self.config.export_icons else "false",
                "body": "\n".join(self._lines),
                "indent_size": self.config.indent_size,
            },
        )

    def render_runtime(self) -> str:
        """Render the ``export`` runtime library the script depends on."""
        return self.format_code(self.render_template("export.lua.j2", {}))

    # Structural hooks

    def begin_table(self, name: str, optional: bool = False, description: str = ""):
        self._comment(description)
        self._open(f"{self.module_var}.Table({self._object}, {lua_string(name)}, "
                   f"function({VALUE_VARIABLE})")

    def end_table(self):
        self._close()

    def begin_array(self, name: Optional[str] = None, optional: bool = False,
                    description: str = ""):
        if name is not None:
            self.begin_table(name, optional, description)
        self._open(f"{self.module_var}.Array({VALUE_VARIABLE}, function({VALUE_VARIABLE})")
        if name is not None:
            # Close the attribute scope together with the array
            outer = self._scopes.pop(-2)
            self._scopes[-1] += outer

    def end_array(self):
        self._close()

    def begin_mapping(self):
        self._open(f"{self.module_var}.Mapping({VALUE_VARIABLE}, function({VALUE_VARIABLE})")

    def end_mapping(self):
        self._close()

    def export_scalar(self, name: Optional[str], kind: PrimitiveKind,
                      optional: bool = False, description: str = ""):
        family = _SCALAR_FUNCTIONS.get(kind, "Number")
        if name is None:
            self._line(f"{self.module_var}.{family}Value({VALUE_VARIABLE})")
        else:
            self._comment(description)
            self._line(f"{self.module_var}.{family}Attr({self._object}, {lua_string(name)})")

    # Helpers

    @property
    def _object(self) -> str:
        """Variable holding the object whose attributes are read."""
        return VALUE_VARIABLE if self._scopes else self.root_var

    def _line(self, text: str):
        self._lines.append(" " * (self._indentation * self.config.indent_size) + text)

    def _comment(self, description: str):
        if self.config.add_comments and description:
            self._line(f"-- {description.strip().splitlines()[0]}")

    def _open(self, text: str):
        self._line(text)
        self._indentation += 1
        self._scopes.append(1)

    def _close(self):
        if not self._scopes:
            raise GeneratorError("Closing a scope that was never opened")
        for _ in range(self._scopes.pop()):
            self._indentation -= 1
            self._line("end)")


def create_lua_generator(config: GeneratorConfig = None) -> LuaGenerator:
    """Create a Lua script generator."""
    if config is None:
        config = GeneratorConfig(add_comments=False)

    return LuaGenerator(config)
