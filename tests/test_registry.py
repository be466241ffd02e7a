"""Tests for backend registration and lookup."""

import pytest

from factorio_codegen.codegen.core.config import ConfigError, GeneratorConfig
from factorio_codegen.codegen.languages.lua import LuaGenerator
from factorio_codegen.codegen.languages.python import PythonGenerator
from factorio_codegen.codegen.registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_language_info,
    get_registry,
    list_all_language_info,
    list_supported_languages,
)


def test_builtin_backends():
    assert list_supported_languages() == ["lua", "python"]


@pytest.mark.parametrize(
    "name, cls",
    [
        ("lua", LuaGenerator),
        ("script", LuaGenerator),
        ("Python", PythonGenerator),
        ("py", PythonGenerator),
        ("pydantic", PythonGenerator),
        ("struct", PythonGenerator),
    ],
)
def test_aliases(name, cls):
    assert get_registry().resolve_name(name) == cls(GeneratorConfig()).language_name
    assert isinstance(get_generator(name), cls)


def test_unknown_backend():
    with pytest.raises(RegistryError, match="Available: lua, python"):
        get_generator("go")


def test_config_forms(tmp_path):
    generator = get_generator("python", {"root_name": "Export"})
    assert generator.config.root_name == "Export"

    config = GeneratorConfig(locale="ja")
    assert get_generator("lua", config).config is config

    path = tmp_path / "lua.json"
    path.write_text('{"locale": "cs"}', encoding="utf-8")
    assert get_generator("lua", path).config.locale == "cs"
    assert get_generator("lua", str(path)).config.locale == "cs"


def test_language_info():
    info = get_language_info("pydantic")
    assert info["name"] == "python"
    assert info["class"] == "PythonGenerator"
    assert info["file_extension"] == ".py"
    assert info["expands_references"] is False
    assert info["aliases"] == ["py", "pydantic", "struct"]

    assert set(list_all_language_info()) == {"lua", "python"}


class TestRegistry:
    def test_register_with_aliases(self):
        registry = GeneratorRegistry()
        registry.register("lua", LuaGenerator, aliases=["script", "LUA"])
        assert registry.resolve_name("SCRIPT") == "lua"
        assert registry.list_languages() == ["lua"]
        assert registry.get_aliases_for_language("lua") == ["script"]
        with pytest.raises(RegistryError, match="No generator registered"):
            registry.resolve_name("python")

    def test_rejects_non_generators(self):
        with pytest.raises(RegistryError, match="CodeGenerator"):
            GeneratorRegistry().register("text", str)

    def test_alias_conflicts(self):
        registry = GeneratorRegistry()
        registry.register("lua", LuaGenerator)
        with pytest.raises(RegistryError, match="conflicts"):
            registry.register("python", PythonGenerator, aliases=["lua"])

        registry.register("python", PythonGenerator, aliases=["py"])
        with pytest.raises(RegistryError, match="already points"):
            registry.register("pydantic", PythonGenerator, aliases=["py"])

    def test_existing_registration_kept_unless_replaced(self):
        registry = GeneratorRegistry()
        registry.register("backend", LuaGenerator)
        registry.register("backend", PythonGenerator)
        assert registry.get_generator_class("backend") is LuaGenerator

        registry.register("backend", PythonGenerator, replace=True)
        assert registry.get_generator_class("backend") is PythonGenerator

    def test_invalid_config_type(self):
        registry = GeneratorRegistry()
        registry.register("lua", LuaGenerator)
        with pytest.raises(ConfigError, match="Invalid config type"):
            registry.create_generator("lua", 42)
