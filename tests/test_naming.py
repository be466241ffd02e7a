"""Tests for identifier sanitization in both backends."""

import pytest

from factorio_codegen.codegen.core.naming import (
    NameSanitizer,
    NamingCase,
    convert_case,
    to_upper_camel,
)
from factorio_codegen.codegen.languages.lua.naming import create_lua_sanitizer, lua_string
from factorio_codegen.codegen.languages.python.naming import (
    create_class_sanitizer,
    create_field_sanitizer,
)


@pytest.mark.parametrize(
    "name, case, expected",
    [
        ("item_prototypes", NamingCase.PRESERVE, "item_prototypes"),
        ("item-prototypes", NamingCase.PRESERVE, "item_prototypes"),
        ("ItemPrototypes", NamingCase.SNAKE_CASE, "item_prototypes"),
        ("item_prototypes", NamingCase.CAMEL_CASE, "itemPrototypes"),
        ("item_prototypes", NamingCase.PASCAL_CASE, "ItemPrototypes"),
        ("LuaGameScript", NamingCase.PASCAL_CASE, "LuaGameScript"),
        ("AmmoCategory", NamingCase.KEBAB_CASE, "ammo-category"),
        ("max_health", NamingCase.SCREAMING_SNAKE, "MAX_HEALTH"),
    ],
)
def test_convert_case(name, case, expected):
    assert convert_case(name, case) == expected


def test_to_upper_camel():
    assert to_upper_camel("items_to_place_this") == "ItemsToPlaceThis"
    assert to_upper_camel("bounding_box") == "BoundingBox"


class TestNameSanitizer:
    def test_reserved_words_get_suffix(self):
        sanitizer = NameSanitizer({"class"}, {"type"})
        assert sanitizer.sanitize_name("class", NamingCase.PRESERVE) == "class_"
        assert sanitizer.sanitize_name("type", NamingCase.PRESERVE) == "type_"
        assert sanitizer.is_reserved("class")
        assert not sanitizer.is_reserved("name")

    def test_same_input_same_output(self):
        sanitizer = NameSanitizer()
        first = sanitizer.sanitize_name("stack_size", NamingCase.PRESERVE)
        assert sanitizer.sanitize_name("stack_size", NamingCase.PRESERVE) == first

    def test_collisions_are_numbered(self):
        sanitizer = NameSanitizer()
        assert sanitizer.sanitize_name("fuel_value", NamingCase.PRESERVE) == "fuel_value"
        assert sanitizer.sanitize_name("fuel-value", NamingCase.PRESERVE) == "fuel_value_1"
        assert sanitizer.sanitize_name("fuel value", NamingCase.PRESERVE) == "fuel_value_2"

    def test_digit_prefix(self):
        assert NameSanitizer().sanitize_name("1st", NamingCase.PRESERVE) == "field_1st"
        assert (
            NameSanitizer(digit_prefix="v_").sanitize_name("2d", NamingCase.PRESERVE)
            == "v_2d"
        )

    def test_invalid_characters(self):
        sanitizer = NameSanitizer()
        assert sanitizer.sanitize_name("__", NamingCase.PRESERVE) == "field"
        assert sanitizer.sanitize_name("a.b", NamingCase.PRESERVE) == "a_b"

    def test_reset(self):
        sanitizer = NameSanitizer()
        sanitizer.sanitize_name("name", NamingCase.PRESERVE)
        sanitizer.reset_used_names()
        assert sanitizer.sanitize_name("name", NamingCase.PRESERVE) == "name"

    def test_add_used_name(self):
        sanitizer = NameSanitizer()
        sanitizer.add_used_name("value")
        assert sanitizer.sanitize_name("value", NamingCase.PRESERVE) == "value_1"


class TestPythonNames:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("type", "type_"),
            ("from", "from_"),
            ("json", "json_"),
            ("model_config", "model_config_"),
            ("name", "name"),
        ],
    )
    def test_field_names(self, name, expected):
        assert create_field_sanitizer().sanitize_name(name, NamingCase.PRESERVE) == expected

    def test_class_names(self):
        sanitizer = create_class_sanitizer()
        assert sanitizer.sanitize_name("LuaItemPrototype", NamingCase.PASCAL_CASE) == (
            "LuaItemPrototype"
        )
        assert sanitizer.sanitize_name("Trigger_area", NamingCase.PASCAL_CASE) == "TriggerArea"
        assert sanitizer.sanitize_name("Field", NamingCase.PASCAL_CASE) == "Field_"
        assert sanitizer.sanitize_name("8Way", NamingCase.PASCAL_CASE) == "Model8Way"


class TestLuaNames:
    def test_reserved(self):
        sanitizer = create_lua_sanitizer()
        assert sanitizer.sanitize_name("end", NamingCase.PRESERVE) == "end_"
        assert sanitizer.sanitize_name("game", NamingCase.PRESERVE) == "game"
        assert sanitizer.sanitize_name("value", NamingCase.PRESERVE) == "value_"

    def test_lua_string(self):
        assert lua_string("name") == '"name"'
        assert lua_string('say "hi"\n') == '"say \\"hi\\"\\n"'
        assert lua_string("a\\b") == '"a\\\\b"'
