"""
Schema model for the runtime API document.

Turns the raw ``runtime-api.json`` document (classes and concepts in list
form) into an immutable ``Api`` with name-keyed maps, and exposes the
ordered attribute views the traversal walks.
"""

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .generator import GeneratorError
from .types import (
    Attribute,
    TableType,
    Type,
    TypeParseError,
    ordered,
    parse_attribute,
    parse_type,
    table_attributes,
)
from ...logging_config import get_logger

logger = get_logger(__name__)

EXPECTED_APPLICATION = "factorio"
EXPECTED_API_VERSION = 3
EXPECTED_STAGE = "runtime"

_VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")


class SchemaValidationError(GeneratorError):
    """Raised when the API document is malformed or has unexpected metadata."""

    pass


@dataclass(frozen=True)
class ApplicationVersion:
    """Three-part application version (``1.1.62``)."""

    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, raw: Any) -> "ApplicationVersion":
        match = _VERSION_RE.match(str(raw))
        if not match:
            raise SchemaValidationError(f"Invalid application_version: {raw!r}")
        return cls(*(int(part) for part in match.groups()))

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True)
class Class:
    """A runtime class with its attribute map."""

    name: str
    attributes: Dict[str, Attribute]
    description: str = ""
    order: int = 0
    base_classes: Optional[Tuple[str, ...]] = None
    notes: Tuple[str, ...] = ()
    examples: Tuple[str, ...] = ()

    def ordered_attributes(self) -> Tuple[Attribute, ...]:
        """
        Readable attributes sorted by ``(order, name)``.

        Attributes that are write-only or restricted to subclasses are left
        out, since they cannot be read from every instance.
        """
        return ordered(
            a
            for a in self.attributes.values()
            if a.is_readable and a.subclasses is None
        )


@dataclass(frozen=True)
class Concept:
    """A named type that is not a class."""

    name: str
    type: Type
    description: str = ""
    order: int = 0
    notes: Tuple[str, ...] = ()
    examples: Tuple[str, ...] = ()

    def ordered_attributes(self) -> Tuple[Attribute, ...]:
        """Merged table view for table concepts, empty otherwise."""
        if isinstance(self.type, TableType):
            return table_attributes(self.type)
        return ()


@dataclass(frozen=True)
class Api:
    """Parsed runtime API: classes and concepts keyed by name."""

    application_version: ApplicationVersion
    classes: Dict[str, Class] = field(default_factory=dict)
    concepts: Dict[str, Concept] = field(default_factory=dict)

    def lookup(self, name: str) -> Union[Class, Concept, None]:
        """Resolve a name against classes first, then concepts."""
        if name in self.classes:
            return self.classes[name]
        return self.concepts.get(name)


def parse_api(document: Dict[str, Any]) -> Api:
    """
    Build an ``Api`` from the raw JSON document.

    Args:
        document: Decoded ``runtime-api.json`` content

    Returns:
        Parsed API

    Raises:
        SchemaValidationError: If metadata does not match the supported
            application, API version and stage, or an entry is malformed
    """
    if not isinstance(document, dict):
        raise SchemaValidationError("API document must be a JSON object")

    for key in ("application", "api_version", "stage", "application_version"):
        if key not in document:
            raise SchemaValidationError(f"API document is missing '{key}'")

    if document["application"] != EXPECTED_APPLICATION:
        raise SchemaValidationError(
            f"Unsupported application: {document['application']!r}"
        )
    api_version = document["api_version"]
    if isinstance(api_version, bool) or api_version != EXPECTED_API_VERSION:
        raise SchemaValidationError(f"Unsupported api_version: {api_version!r}")
    if document["stage"] != EXPECTED_STAGE:
        raise SchemaValidationError(f"Unsupported stage: {document['stage']!r}")

    version = ApplicationVersion.parse(document["application_version"])

    try:
        classes = _index(
            (_parse_class(raw) for raw in document.get("classes", [])), "class"
        )
        concepts = _index(
            (_parse_concept(raw) for raw in document.get("concepts", [])), "concept"
        )
    except TypeParseError as e:
        raise SchemaValidationError(str(e)) from e
    except (KeyError, TypeError, ValueError) as e:
        raise SchemaValidationError(f"Malformed API entry: {e}") from e

    logger.info(
        f"Parsed API {version}: {len(classes)} classes, {len(concepts)} concepts"
    )
    return Api(application_version=version, classes=classes, concepts=concepts)


def load_api(path: Union[str, Path]) -> Api:
    """
    Load and parse an API document from disk.

    Raises:
        SchemaValidationError: If the file is not valid JSON or fails validation
    """
    path = Path(path)
    logger.debug(f"Loading API from {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except json.JSONDecodeError as e:
        raise SchemaValidationError(f"Invalid JSON in {path}: {e}") from e
    return parse_api(document)


def _index(entities, kind: str) -> Dict:
    result = {}
    for entity in entities:
        if entity.name in result:
            raise SchemaValidationError(f"Duplicate {kind} name: {entity.name}")
        result[entity.name] = entity
    return result


def _parse_class(raw: Dict[str, Any]) -> Class:
    attributes = _index(
        (parse_attribute(a) for a in raw.get("attributes", [])), "attribute"
    )
    base_classes = raw.get("base_classes")
    return Class(
        name=raw["name"],
        attributes=attributes,
        description=raw.get("description") or "",
        order=int(raw.get("order", 0)),
        base_classes=None if base_classes is None else tuple(base_classes),
        notes=_strings(raw.get("notes")),
        examples=_strings(raw.get("examples")),
    )


def _parse_concept(raw: Dict[str, Any]) -> Concept:
    return Concept(
        name=raw["name"],
        type=parse_type(raw["type"]),
        description=raw.get("description") or "",
        order=int(raw.get("order", 0)),
        notes=_strings(raw.get("notes")),
        examples=_strings(raw.get("examples")),
    )


def _strings(raw: Optional[List[str]]) -> Tuple[str, ...]:
    return tuple(raw) if raw else ()
