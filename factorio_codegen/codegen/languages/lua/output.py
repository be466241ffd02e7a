"""
Parsing of captured extraction script output.

The script prints a YAML block document between ``<EXPORT>`` markers with
every string wrapped in ``<STRING>`` markers. Icon paths, which only exist
in the data stage, arrive as a separate ``<ICONS>`` list.
"""

import json
import re
from typing import Any, Dict, List, Optional

import yaml

from ...core.generator import GeneratorError
from ...core.naming import NamingCase, convert_case
from ....logging_config import get_logger

logger = get_logger(__name__)

STRING_PATTERN = re.compile(r"<STRING>(.*?)</STRING>", re.DOTALL)
OBJECT_NAME_PATTERN = re.compile(r"^Lua(.*)Prototype$")


class ExportOutputError(GeneratorError):
    """Raised when captured output cannot be parsed."""

    def __init__(self, message: str, output: Optional[str] = None):
        super().__init__(message)
        self.output = output


def find_section(output: str, marker: str) -> str:
    """
    Return the text between ``<marker>`` and ``</marker>``.

    Raises:
        ExportOutputError: If either marker is missing
    """
    start_marker = f"<{marker}>"
    stop_marker = f"</{marker}>"

    start = output.find(start_marker)
    if start < 0:
        raise ExportOutputError(f"Didn't find {start_marker} marker", output)
    stop = output.find(stop_marker, start)
    if stop < 0:
        raise ExportOutputError(f"Didn't find {stop_marker} marker", output)

    return output[start + len(start_marker):stop]


def sanitize_strings(text: str) -> str:
    """Replace every ``<STRING>`` pair with a double-quoted YAML scalar."""
    return STRING_PATTERN.sub(
        lambda match: json.dumps(match.group(1), ensure_ascii=False), text
    )


def parse_export_output(output: str, export_icons: bool = False) -> Dict[str, Any]:
    """
    Parse the captured standard output of an export run.

    Args:
        output: Complete captured output
        export_icons: Whether an ``<ICONS>`` section should be merged in

    Returns:
        The exported document, one mapping per root attribute

    Raises:
        ExportOutputError: If a marker is missing or the YAML is invalid
    """
    logger.debug("Parsing export output")
    sanitized = sanitize_strings(find_section(output, "EXPORT"))
    try:
        data = yaml.safe_load(sanitized)
    except yaml.YAMLError as e:
        raise ExportOutputError(f"Invalid export document: {e}", output) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ExportOutputError("Export document must be a mapping", output)

    for name, section in data.items():
        if isinstance(section, dict):
            logger.debug(f"Found {len(section)} entries in {name}")

    if export_icons:
        try:
            icons = yaml.safe_load(find_section(output, "ICONS")) or []
        except yaml.YAMLError as e:
            raise ExportOutputError(f"Invalid icons section: {e}", output) from e
        patched = patch_icons(data, icons)
        logger.debug(f"Patched {patched} icons into prototypes")

    return data


def patch_icons(data: Dict[str, Any], icons: List[Dict[str, str]]) -> int:
    """
    Add an ``icon`` path to every prototype with a matching icon entry.

    A prototype matches an icon when its key equals the icon ``name`` and
    either its ``type`` or the kebab-cased middle of its ``object_name``
    (``LuaAmmoCategoryPrototype`` -> ``ammo-category``) equals the icon
    ``section``.

    Returns:
        Number of prototypes that received an icon
    """
    index = {}
    for icon in icons:
        try:
            index[(icon["name"], icon["section"])] = icon["path"]
        except (KeyError, TypeError) as e:
            raise ExportOutputError(f"Malformed icon entry {icon!r}") from e

    patched = 0
    for section in data.values():
        if not isinstance(section, dict):
            continue
        for name, prototype in section.items():
            if not isinstance(prototype, dict):
                continue
            path = index.get((name, prototype.get("type")))
            if path is None:
                section_name = _object_name_section(prototype.get("object_name"))
                if section_name:
                    path = index.get((name, section_name))
            if path is not None:
                prototype["icon"] = path
                patched += 1
    return patched


def _object_name_section(object_name: Any) -> Optional[str]:
    if not isinstance(object_name, str):
        return None
    match = OBJECT_NAME_PATTERN.match(object_name)
    if not match or not match.group(1):
        return None
    return convert_case(match.group(1), NamingCase.KEBAB_CASE)
