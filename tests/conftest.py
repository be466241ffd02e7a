"""Shared fixtures: small runtime API documents built in the raw JSON shape."""

import json

import pytest

from factorio_codegen.codegen.core.schema import parse_api


def attr(name, type_, order=0, optional=False, **extra):
    """Raw attribute or parameter entry."""
    raw = {"name": name, "type": type_, "order": order, "optional": optional}
    raw.update(extra)
    return raw


def custom_table(value, key="string"):
    return {"complex_type": "LuaCustomTable", "key": key, "value": value}


def array(value):
    return {"complex_type": "array", "value": value}


def union(*options):
    return {"complex_type": "union", "options": list(options), "full_format": False}


def table(*parameters, groups=None):
    raw = {"complex_type": "table", "parameters": list(parameters)}
    if groups is not None:
        raw["variant_parameter_groups"] = groups
    return raw


def make_class(name, *attributes, order=0, description=""):
    return {
        "name": name,
        "order": order,
        "description": description,
        "attributes": list(attributes),
        "notes": [],
        "examples": [],
    }


def make_concept(name, type_, order=0, description=""):
    return {"name": name, "order": order, "description": description, "type": type_}


def make_document(classes=(), concepts=(), **overrides):
    document = {
        "application": "factorio",
        "application_version": "1.1.62",
        "api_version": 3,
        "stage": "runtime",
        "classes": list(classes),
        "concepts": list(concepts),
        "events": [],
        "defines": [],
    }
    document.update(overrides)
    return document


def game_class(*attributes):
    """Root class holding the given attributes."""
    return make_class("LuaGameScript", *attributes)


@pytest.fixture
def sample_document():
    """
    Item and entity prototype tables with a cycle between the two, a
    self-referencing group class, table concepts and some unsupported types.
    """
    classes = [
        game_class(
            attr("item_prototypes", custom_table("LuaItemPrototype"), order=0),
            attr("entity_prototypes", custom_table("LuaEntityPrototype"), order=1),
            attr("tick", "uint", order=2),
        ),
        make_class(
            "LuaItemPrototype",
            attr("name", "string", order=0),
            attr("icon", "string", order=1, optional=True),
            attr("stack_size", "uint", order=2),
            attr("place_result", "LuaEntityPrototype", order=3, optional=True),
            attr("weight", union("uint", "double"), order=4),
            attr("flags", array("string"), order=5),
            attr("color", "Color", order=6, optional=True),
            attr("subgroup", "LuaGroup", order=7),
            description="Prototype of an item.",
        ),
        make_class(
            "LuaEntityPrototype",
            attr("name", "string", order=0),
            attr("type", "string", order=1),
            attr(
                "bounding_box",
                table(attr("x", "double", order=0), attr("y", "double", order=1)),
                order=2,
            ),
            attr("items_to_place_this", array("ItemStackDefinition"), order=3, optional=True),
            attr("max_health", "float", order=4),
            attr("mystery", union("string", "uint"), order=5),
            attr("mined_by", "LuaItemPrototype", order=6, optional=True),
        ),
        make_class(
            "LuaGroup",
            attr("name", "string", order=0),
            attr("group", "LuaGroup", order=1, optional=True),
            attr("subgroups", array("LuaGroup"), order=2, optional=True),
        ),
    ]
    concepts = [
        make_concept(
            "Color",
            table(
                attr("r", "float", order=0),
                attr("g", "float", order=1),
                attr("b", "float", order=2),
                attr("a", "float", order=3, optional=True),
            ),
            description="Red, green, blue and alpha values.",
        ),
        make_concept(
            "ItemStackDefinition",
            table(attr("name", "string", order=0), attr("count", "uint", order=1)),
        ),
    ]
    return make_document(classes, concepts)


@pytest.fixture
def sample_api(sample_document):
    return parse_api(sample_document)


@pytest.fixture
def sample_document_file(tmp_path, sample_document):
    path = tmp_path / "runtime-api.json"
    path.write_text(json.dumps(sample_document), encoding="utf-8")
    return path


@pytest.fixture
def variant_document():
    """A root table whose prototypes use a concept with variant groups."""
    trigger = table(
        attr("type", "string", order=0),
        attr("a", "uint", order=1),
        groups=[
            {
                "name": "direct",
                "order": 1,
                "description": "",
                "parameters": [attr("target", "string", order=0)],
            },
            {
                "name": "area",
                "order": 0,
                "description": "",
                "parameters": [
                    attr("a", "uint", order=0),
                    attr("radius", "double", order=1),
                ],
            },
        ],
    )
    classes = [
        game_class(attr("ammo_prototypes", custom_table("LuaAmmoPrototype"))),
        make_class(
            "LuaAmmoPrototype",
            attr("name", "string", order=0),
            attr("trigger", "Trigger", order=1, optional=True),
        ),
    ]
    return make_document(classes, [make_concept("Trigger", trigger)])


@pytest.fixture
def cycle_document():
    """Two classes outside the root set that refer to each other."""
    classes = [
        game_class(attr("item_prototypes", custom_table("LuaItemPrototype"))),
        make_class(
            "LuaItemPrototype",
            attr("name", "string", order=0),
            attr("a", "A", order=1, optional=True),
            attr("b", "B", order=2, optional=True),
        ),
        make_class("A", attr("name", "string", order=0), attr("b", "B", order=1, optional=True)),
        make_class("B", attr("name", "string", order=0), attr("a", "A", order=1, optional=True)),
    ]
    return make_document(classes)


@pytest.fixture
def box_document():
    """A concept whose two variant groups declare differently shaped ``box`` tables."""
    spec = table(
        attr("kind", "string", order=0),
        groups=[
            {
                "name": "a",
                "order": 0,
                "description": "",
                "parameters": [attr("box", table(attr("x", "double")))],
            },
            {
                "name": "b",
                "order": 1,
                "description": "",
                "parameters": [attr("box", table(attr("label", "string")))],
            },
        ],
    )
    classes = [
        game_class(attr("item_prototypes", custom_table("LuaItemPrototype"))),
        make_class(
            "LuaItemPrototype",
            attr("name", "string", order=0),
            attr("spec", "Spec", order=1, optional=True),
        ),
    ]
    return make_document(classes, [make_concept("Spec", spec)])
