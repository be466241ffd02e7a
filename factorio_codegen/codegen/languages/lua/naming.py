"""
Lua-specific naming utilities.

Attribute names are always passed to the runtime library as string
literals, so only the variables of the generated script need sanitizing.
"""

from ...core.naming import NameSanitizer


# Lua 5.2 reserved words
LUA_RESERVED_WORDS = {
    "and",
    "break",
    "do",
    "else",
    "elseif",
    "end",
    "false",
    "for",
    "function",
    "goto",
    "if",
    "in",
    "local",
    "nil",
    "not",
    "or",
    "repeat",
    "return",
    "then",
    "true",
    "until",
    "while",
}

# Globals of the scripting environment, plus locals of the generated script
LUA_BUILTINS = {
    "_G",
    "_ENV",
    "assert",
    "error",
    "ipairs",
    "next",
    "pairs",
    "pcall",
    "print",
    "localised_print",
    "require",
    "select",
    "string",
    "table",
    "math",
    "tostring",
    "tonumber",
    "type",
    "prototypes",
    "value",
}


def create_lua_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for Lua."""
    return NameSanitizer(LUA_RESERVED_WORDS, LUA_BUILTINS, digit_prefix="v_")


def lua_string(value: str) -> str:
    """Quote a value as a double-quoted Lua string literal."""
    escaped = (
        str(value)
        .replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f'"{escaped}"'
