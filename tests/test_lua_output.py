"""Tests for parsing the captured output of the extraction script."""

import math
import textwrap

import pytest

from factorio_codegen.codegen.languages.lua.output import (
    ExportOutputError,
    find_section,
    parse_export_output,
    patch_icons,
    sanitize_strings,
)


def wrap(body, icons=None):
    text = "Loading mod core\n<EXPORT>\n" + textwrap.dedent(body) + "</EXPORT>\n"
    if icons is not None:
        text += "<ICONS>\n" + textwrap.dedent(icons) + "</ICONS>\n"
    return text + "Goodbye\n"


class TestSections:
    def test_find_section(self):
        assert find_section("a<X>body</X>b", "X") == "body"

    def test_missing_start(self):
        with pytest.raises(ExportOutputError, match="<EXPORT>") as excinfo:
            find_section("no markers here", "EXPORT")
        assert excinfo.value.output == "no markers here"

    def test_missing_end(self):
        with pytest.raises(ExportOutputError, match="</EXPORT>"):
            find_section("<EXPORT>\nitem_prototypes: {}\n", "EXPORT")


class TestStrings:
    def test_quotes_and_escapes(self):
        assert sanitize_strings('name: <STRING>say "hi"</STRING>') == 'name: "say \\"hi\\""'

    def test_multiline_and_unicode(self):
        assert sanitize_strings("<STRING>a\nb</STRING>") == '"a\\nb"'
        assert sanitize_strings("<STRING>Eisenplatte ü</STRING>") == '"Eisenplatte ü"'

    def test_each_pair_separately(self):
        assert sanitize_strings("<STRING>a</STRING>: <STRING>b</STRING>") == '"a": "b"'


class TestParse:
    def test_wrapped_attribute_names_stay_strings(self):
        data = parse_export_output(
            wrap(
                """\
                <STRING>item_prototypes</STRING>:
                  <STRING>switch</STRING>:
                    <STRING>on</STRING>: true
                    <STRING>no</STRING>: 2
                    <STRING>off</STRING>: <STRING>yes</STRING>
                """
            )
        )
        assert data == {"item_prototypes": {"switch": {"on": True, "no": 2, "off": "yes"}}}

    def test_document(self):
        data = parse_export_output(
            wrap(
                """\
                item_prototypes:
                  <STRING>iron-plate</STRING>:
                    name: <STRING>iron-plate</STRING>
                    localised_name: <STRING>Iron plate: "basic"</STRING>
                    stack_size: 100
                    weight: 0.5
                    hidden: false
                    flags:
                      -
                        <STRING>yes</STRING>
                    empty_list:
                      []
                    empty_map:
                      {}
                entity_prototypes:
                  {}
                """
            )
        )
        plate = data["item_prototypes"]["iron-plate"]
        assert plate == {
            "name": "iron-plate",
            "localised_name": 'Iron plate: "basic"',
            "stack_size": 100,
            "weight": 0.5,
            "hidden": False,
            "flags": ["yes"],
            "empty_list": [],
            "empty_map": {},
        }
        assert data["entity_prototypes"] == {}

    def test_special_numbers(self):
        data = parse_export_output(
            wrap(
                """\
                values:
                  a: .inf
                  b: -.inf
                  c: .nan
                  d: 1.0e+300
                  e: -12
                """
            )
        )
        values = data["values"]
        assert values["a"] == math.inf
        assert values["b"] == -math.inf
        assert math.isnan(values["c"])
        assert values["d"] == 1e300
        assert values["e"] == -12

    def test_empty_export(self):
        assert parse_export_output("<EXPORT>\n</EXPORT>") == {}

    def test_not_a_mapping(self):
        with pytest.raises(ExportOutputError, match="mapping"):
            parse_export_output("<EXPORT>\n- a\n</EXPORT>")

    def test_invalid_yaml(self):
        with pytest.raises(ExportOutputError, match="Invalid export"):
            parse_export_output("<EXPORT>\na: [\n</EXPORT>")

    def test_icons_require_section(self):
        with pytest.raises(ExportOutputError, match="<ICONS>"):
            parse_export_output(wrap("item_prototypes:\n  {}\n"), export_icons=True)


class TestIcons:
    def test_patch_by_type_and_object_name(self):
        output = wrap(
            """\
            item_prototypes:
              <STRING>iron-plate</STRING>:
                name: <STRING>iron-plate</STRING>
                type: <STRING>item</STRING>
            ammo_category_prototypes:
              <STRING>bullet</STRING>:
                name: <STRING>bullet</STRING>
                object_name: <STRING>LuaAmmoCategoryPrototype</STRING>
              <STRING>rocket</STRING>:
                name: <STRING>rocket</STRING>
                object_name: <STRING>LuaAmmoCategoryPrototype</STRING>
            """,
            icons="""\
            - {name: iron-plate, section: item, path: __base__/graphics/icons/iron-plate.png}
            - {name: bullet, section: ammo-category, path: __base__/graphics/icons/bullet.png}
            """,
        )
        data = parse_export_output(output, export_icons=True)
        assert data["item_prototypes"]["iron-plate"]["icon"] == (
            "__base__/graphics/icons/iron-plate.png"
        )
        assert data["ammo_category_prototypes"]["bullet"]["icon"] == (
            "__base__/graphics/icons/bullet.png"
        )
        assert "icon" not in data["ammo_category_prototypes"]["rocket"]

    def test_icons_ignored_unless_requested(self):
        output = wrap(
            "item_prototypes:\n  <STRING>a</STRING>:\n    type: <STRING>item</STRING>\n",
            icons="- {name: a, section: item, path: a.png}\n",
        )
        assert "icon" not in parse_export_output(output)["item_prototypes"]["a"]

    def test_patch_count(self):
        data = {"items": {"a": {"type": "item"}, "b": {"type": "fluid"}}, "tick": 5}
        icons = [
            {"name": "a", "section": "item", "path": "a.png"},
            {"name": "b", "section": "item", "path": "b.png"},
        ]
        assert patch_icons(data, icons) == 1
        assert data["items"]["a"]["icon"] == "a.png"

    def test_malformed_icon(self):
        with pytest.raises(ExportOutputError, match="Malformed icon"):
            patch_icons({}, [{"name": "a"}])
