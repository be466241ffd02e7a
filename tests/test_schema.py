"""Tests for parsing and validating the API document."""

import json

import pytest

from factorio_codegen.codegen.core.schema import (
    ApplicationVersion,
    Class,
    Concept,
    SchemaValidationError,
    load_api,
    parse_api,
)
from factorio_codegen.codegen.core.generator import GeneratorError
from factorio_codegen.codegen.core.types import NamedType, TableType

from .conftest import attr, game_class, make_class, make_concept, make_document, table


def test_parse_sample(sample_api):
    assert str(sample_api.application_version) == "1.1.62"
    assert set(sample_api.classes) == {
        "LuaGameScript",
        "LuaItemPrototype",
        "LuaEntityPrototype",
        "LuaGroup",
    }
    assert isinstance(sample_api.classes["LuaItemPrototype"], Class)
    assert isinstance(sample_api.concepts["Color"], Concept)
    assert isinstance(sample_api.concepts["Color"].type, TableType)


def test_lookup_prefers_classes():
    document = make_document(
        [make_class("Shared", attr("name", "string"))],
        [make_concept("Shared", "string"), make_concept("Other", "uint")],
    )
    api = parse_api(document)
    assert isinstance(api.lookup("Shared"), Class)
    assert isinstance(api.lookup("Other"), Concept)
    assert api.lookup("Missing") is None


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"application": "minecraft"}, "Unsupported application"),
        ({"api_version": 4}, "Unsupported api_version"),
        ({"api_version": "3"}, "Unsupported api_version"),
        ({"api_version": True}, "Unsupported api_version"),
        ({"stage": "prototype"}, "Unsupported stage"),
        ({"application_version": "1.1"}, "Invalid application_version"),
    ],
)
def test_metadata_validation(overrides, message):
    with pytest.raises(SchemaValidationError, match=message):
        parse_api(make_document(**overrides))


@pytest.mark.parametrize("key", ["application", "api_version", "stage", "application_version"])
def test_missing_metadata(key):
    document = make_document()
    del document[key]
    with pytest.raises(SchemaValidationError, match=key):
        parse_api(document)


def test_not_an_object():
    with pytest.raises(SchemaValidationError):
        parse_api(["factorio"])


def test_errors_are_generator_errors():
    with pytest.raises(GeneratorError):
        parse_api(make_document(stage="settings"))


def test_unknown_complex_type():
    document = make_document(
        [make_class("LuaGameScript", attr("f", {"complex_type": "function"}))]
    )
    with pytest.raises(SchemaValidationError, match="complex_type"):
        parse_api(document)


def test_malformed_class_entry():
    document = make_document([{"attributes": []}])
    with pytest.raises(SchemaValidationError, match="Malformed"):
        parse_api(document)


def test_duplicate_names():
    document = make_document([make_class("LuaGroup"), make_class("LuaGroup")])
    with pytest.raises(SchemaValidationError, match="Duplicate class"):
        parse_api(document)


def test_duplicate_attribute_names():
    document = make_document(
        [make_class("LuaGroup", attr("name", "string"), attr("name", "uint"))]
    )
    with pytest.raises(SchemaValidationError, match="Duplicate attribute"):
        parse_api(document)


def test_class_view_drops_unreadable_and_subclass_attributes():
    document = make_document(
        [
            make_class(
                "LuaEntity",
                attr("name", "string", order=2),
                attr("health", "float", order=1),
                attr("speed", "float", order=0, read=False, write=True),
                attr("fuel_value", "float", order=0, subclasses=["Item"]),
                attr("amount", "uint", order=1),
            )
        ]
    )
    entity = parse_api(document).classes["LuaEntity"]
    assert [a.name for a in entity.ordered_attributes()] == ["amount", "health", "name"]


def test_concept_views():
    document = make_document(
        concepts=[
            make_concept("Position", table(attr("y", "double", order=1), attr("x", "double"))),
            make_concept("ItemName", "string"),
            make_concept("Ref", "LuaEntity"),
        ]
    )
    api = parse_api(document)
    assert [a.name for a in api.concepts["Position"].ordered_attributes()] == ["x", "y"]
    assert api.concepts["ItemName"].ordered_attributes() == ()
    assert api.concepts["Ref"].type == NamedType("LuaEntity")


def test_optional_class_fields():
    raw = make_class("LuaGroup", attr("name", "string"))
    raw["base_classes"] = ["LuaControl"]
    raw["notes"] = ["A note"]
    group = parse_api(make_document([raw])).classes["LuaGroup"]
    assert group.base_classes == ("LuaControl",)
    assert group.notes == ("A note",)
    assert group.examples == ()


def test_application_version():
    version = ApplicationVersion.parse("1.1.62")
    assert (version.major, version.minor, version.patch) == (1, 1, 62)
    assert str(version) == "1.1.62"
    with pytest.raises(SchemaValidationError):
        ApplicationVersion.parse("latest")


def test_load_api(tmp_path):
    path = tmp_path / "runtime-api.json"
    path.write_text(json.dumps(make_document([game_class()])), encoding="utf-8")
    api = load_api(path)
    assert "LuaGameScript" in api.classes


def test_load_api_invalid_json(tmp_path):
    path = tmp_path / "runtime-api.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(SchemaValidationError, match="Invalid JSON"):
        load_api(path)
