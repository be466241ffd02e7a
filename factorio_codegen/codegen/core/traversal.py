"""
Schema traversal shared by every backend.

Walks the API graph from the prototype tables of the root class and reports
structure to a backend through the hooks defined on ``CodeGenerator``.
Expanding backends get every attribute inlined at its point of use;
declaring backends get each entity once, memoized per run.

Cycles are broken in two ways. Classes stored in one of the root tables are
cut down to their identifying field once they appear deeper than
``CYCLE_DEPTH``, since the exported document holds them in full at the top
level. Any other entity that is re-entered while it is still being expanded
is cut the same way, or dropped when it has no identifying field.

Both rules apply to every backend, so declarations describe exactly what
the script prints. A cut entity is declared as ``<Entity>Reference``. An
entity expanded while some of the entities it can reach are already open
is declared separately as ``<Entity>From<Open...>``, because its own
references back to them are cut.
"""

from typing import Callable, Dict, FrozenSet, Iterator, List, Optional, Set, Tuple, Union

from .generator import CodeGenerator, GeneratorError
from .naming import to_upper_camel
from .schema import Api, Class, Concept, SchemaValidationError
from .types import (
    ArrayType,
    Attribute,
    DictionaryType,
    KeyedTableType,
    NamedType,
    PrimitiveKind,
    TableType,
    Type,
    dedup_by_name,
    ordered,
    scalar_kind,
    table_attributes,
)
from ...logging_config import get_logger

logger = get_logger(__name__)

# Depth past which root-table classes are referenced by identifier only
CYCLE_DEPTH = 2

DEFAULT_ROOT_CLASS = "LuaGameScript"
IDENTIFYING_FIELD = "name"

Entity = Union[Class, Concept]


class MissingIdentifyingFieldError(GeneratorError):
    """Raised when a class must be referenced by identifier but has none."""

    def __init__(self, class_name: str, field_name: str = IDENTIFYING_FIELD):
        super().__init__(
            f"Cannot reference class '{class_name}' without a '{field_name}' attribute"
        )
        self.class_name = class_name
        self.field_name = field_name


class Traversal:
    """One generation run over an ``Api`` with a single backend."""

    def __init__(
        self,
        api: Api,
        backend: CodeGenerator,
        root_class: str = DEFAULT_ROOT_CLASS,
        root_attribute_suffix: Optional[str] = None,
        identifying_field: str = IDENTIFYING_FIELD,
    ):
        """
        Args:
            api: Parsed runtime API
            backend: Generator receiving the structural hooks
            root_class: Class whose prototype tables form the root set
            root_attribute_suffix: Keep only root attributes with this suffix
            identifying_field: Attribute kept when a reference is cut short

        Raises:
            SchemaValidationError: If the root class is not in the API
        """
        self.api = api
        self.backend = backend
        self.root_class = root_class
        self.identifying_field = identifying_field

        if root_class not in api.classes:
            raise SchemaValidationError(f"Root class '{root_class}' not found")

        self.root_attributes = self._find_root_attributes(root_attribute_suffix)
        self.root_classes: Set[str] = {a.type.value.name for a in self.root_attributes}

        self.entities: Dict[str, Optional[str]] = {}
        self.warnings: List[str] = []
        self._path: List[str] = []
        self._reachable_cache: Dict[str, FrozenSet[str]] = {}

    @property
    def memoizes(self) -> bool:
        return not self.backend.expands_references

    def run(self) -> str:
        """
        Generate the complete artifact.

        Returns:
            Backend output, including memoized declarations sorted by name
        """
        self.entities = {}
        self.warnings = []
        self._path = []

        logger.info(
            f"Generating {self.backend.language_name} output for "
            f"{len(self.root_attributes)} root attributes of {self.root_class}"
        )

        self.backend.begin_document(self.root_class)
        self.export_attrs(self.root_attributes, 0, self.root_class)
        document = self.backend.end_document()

        declarations = [self.entities[name] for name in sorted(self.entities)]
        if self.warnings:
            logger.info(f"Omitted {len(self.warnings)} unsupported attributes")
        return self.backend.finalize(document, declarations)

    def export_attrs(self, attrs, depth: int, owner: str):
        """Export each attribute as a leaf or as a nested scope."""
        for attr in attrs:
            kind = scalar_kind(self.resolve(attr.type))
            if kind is not None:
                self.backend.export_scalar(
                    attr.name, kind, optional=attr.optional, description=attr.description
                )
                continue

            if not self._is_exportable(attr.type, depth):
                self._omit(owner, attr)
                continue

            self.backend.begin_table(
                attr.name, optional=attr.optional, description=attr.description
            )
            self.export_value(attr.type, depth, owner, attr.name)
            self.backend.end_table()

    def export_value(self, type_: Type, depth: int, owner: str, attr_name: str):
        """Export the value of the enclosing scope."""
        depth += 1
        resolved = self.resolve(type_)

        kind = scalar_kind(resolved)
        if kind is not None:
            self.backend.export_scalar(None, kind)

        elif isinstance(resolved, NamedType):
            self._export_entity(self.api.lookup(resolved.name), depth)

        elif isinstance(resolved, (DictionaryType, KeyedTableType)):
            self.backend.begin_mapping()
            self.export_value(resolved.value, depth, owner, attr_name)
            self.backend.end_mapping()

        elif isinstance(resolved, ArrayType):
            self.backend.begin_array(None)
            self.export_value(resolved.value, depth, owner, attr_name)
            self.backend.end_array()

        elif isinstance(resolved, TableType):
            if self.memoizes:
                name = f"{owner}{to_upper_camel(attr_name)}"
                self._declare(name, "", lambda: self._export_table(resolved, depth, name))
                self.backend.export_reference(name)
            else:
                self.export_attrs(table_attributes(resolved), depth, owner)

    def resolve(self, type_: Type) -> Type:
        """
        Replace references to non-table concepts with the concept's type.

        Classes, table concepts and unknown names stay references. A chain
        of aliases that loops back on itself is left unresolved.
        """
        seen = set()
        while isinstance(type_, NamedType) and type_.name not in self.api.classes:
            concept = self.api.concepts.get(type_.name)
            if concept is None or isinstance(concept.type, TableType):
                break
            if type_.name in seen:
                logger.debug(f"Alias cycle through concept {type_.name}")
                break
            seen.add(type_.name)
            type_ = concept.type
        return type_

    def _find_root_attributes(self, suffix: Optional[str]) -> Tuple[Attribute, ...]:
        root = self.api.classes[self.root_class]
        selected = []
        for attr in root.ordered_attributes():
            if suffix and not attr.name.endswith(suffix):
                continue
            type_ = attr.type
            if not isinstance(type_, (DictionaryType, KeyedTableType)):
                continue
            if not isinstance(type_.value, NamedType) or type_.value.name not in self.api.classes:
                continue
            if scalar_kind(self.resolve(type_.key)) != PrimitiveKind.STRING:
                logger.debug(f"Skipping root attribute {attr.name}: key is not a string")
                continue
            selected.append(attr)
        return tuple(selected)

    def _entity_view(self, entity: Entity, depth: int) -> Optional[Tuple[Attribute, ...]]:
        """
        Attributes to export for an entity at a given depth.

        Returns None when the entity must be dropped from its parent.

        Raises:
            MissingIdentifyingFieldError: If a root-table class has to be cut
                short but has no identifying field
        """
        attrs = entity.ordered_attributes()
        if not self._is_cut(entity, depth):
            return attrs

        identifier = tuple(a for a in attrs if a.name == self.identifying_field)
        if identifier:
            return identifier
        if self._is_root_cut(entity, depth):
            raise MissingIdentifyingFieldError(entity.name, self.identifying_field)
        return None

    def _is_root_cut(self, entity: Entity, depth: int) -> bool:
        return (
            isinstance(entity, Class)
            and depth > CYCLE_DEPTH
            and entity.name in self.root_classes
        )

    def _is_cut(self, entity: Entity, depth: int) -> bool:
        """Whether an entity is reduced to its identifying field at this point."""
        return self._is_root_cut(entity, depth) or entity.name in self._path

    def _is_exportable(self, type_: Type, depth: int) -> bool:
        """Check, without emitting anything, whether a value can be exported."""
        depth += 1
        resolved = self.resolve(type_)

        if scalar_kind(resolved) is not None:
            return True
        if isinstance(resolved, NamedType):
            entity = self.api.lookup(resolved.name)
            if entity is None:
                return False
            if isinstance(entity, Concept) and not isinstance(entity.type, TableType):
                return False
            return self._entity_view(entity, depth) is not None
        if isinstance(resolved, (DictionaryType, KeyedTableType)):
            if scalar_kind(self.resolve(resolved.key)) != PrimitiveKind.STRING:
                return False
            return self._is_exportable(resolved.value, depth)
        if isinstance(resolved, ArrayType):
            if not isinstance(resolved.value, NamedType):
                return False
            return self._is_exportable(resolved.value, depth)
        return isinstance(resolved, TableType)

    def _export_entity(self, entity: Entity, depth: int):
        attrs = self._entity_view(entity, depth)

        if not self.memoizes:
            self._path.append(entity.name)
            try:
                self.export_attrs(attrs, depth, entity.name)
            finally:
                self._path.pop()
            return

        if self._is_cut(entity, depth):
            name = f"{entity.name}Reference"
            self._declare(
                name,
                entity.description,
                lambda: self.export_attrs(attrs, depth, name),
            )
        else:
            name = self._declaration_name(entity)
            self._declare(
                name,
                entity.description,
                lambda: self._declare_expanded(entity, attrs, depth, name),
            )
        self.backend.export_reference(name)

    def _declare_expanded(self, entity: Entity, attrs, depth: int, name: str):
        self._path.append(entity.name)
        try:
            if isinstance(entity, Class):
                self.export_attrs(attrs, depth, name)
            else:
                self._export_table(entity.type, depth, name)
        finally:
            self._path.pop()

    def _declaration_name(self, entity: Entity) -> str:
        """
        Name of the declaration for an entity expanded at the current path.

        Entities on the path that the entity can reach are cut inside it,
        so each distinct set of them gets a declaration of its own.
        """
        open_entities = sorted(set(self._path) & self._reachable(entity.name))
        if not open_entities:
            return entity.name
        return f"{entity.name}From{''.join(open_entities)}"

    def _reachable(self, name: str) -> FrozenSet[str]:
        """Entities other than root-table classes that an entity refers to, transitively."""
        if name not in self._reachable_cache:
            found: Set[str] = set()
            pending = [name]
            while pending:
                for type_ in _entity_types(self.api.lookup(pending.pop())):
                    for reference in _references(type_):
                        if reference in found or reference in self.root_classes:
                            continue
                        found.add(reference)
                        pending.append(reference)
            self._reachable_cache[name] = frozenset(found)
        return self._reachable_cache[name]

    def _export_table(self, table: TableType, depth: int, owner: str):
        """
        Declare a table's shared parameters, then one variant per group.

        Variant groups only list parameters that are not already shared.
        Inline tables inside a group are named after the group as well.
        """
        shared = ordered(dedup_by_name(table.parameters))
        self.export_attrs(shared, depth, owner)

        if not table.variant_parameter_groups:
            return

        shared_names = {a.name for a in shared}
        groups = sorted(table.variant_parameter_groups, key=lambda g: (g.order, g.name))
        for group in groups:
            params = ordered(
                dedup_by_name(p for p in group.parameters if p.name not in shared_names)
            )
            self.backend.begin_variant(group.name)
            self.export_attrs(params, depth, f"{owner}{to_upper_camel(group.name)}")
            self.backend.end_variant()

    def _declare(self, name: str, description: str, build: Callable[[], None]):
        """Emit an entity declaration once per run."""
        if name in self.entities:
            return

        # Placeholder so that references back to this entity terminate
        self.entities[name] = None
        logger.debug(f"Declaring {name}")
        self.backend.begin_entity(name, description)
        build()
        self.entities[name] = self.backend.end_entity()

    def _omit(self, owner: str, attr: Attribute):
        message = f"{owner}.{attr.name}: unsupported type {_describe(self.resolve(attr.type))}"
        if message not in self.warnings:
            logger.debug(f"Omitting {message}")
            self.warnings.append(message)


def _describe(type_: Type) -> str:
    if isinstance(type_, NamedType):
        return f"reference to {type_.name}"
    if isinstance(type_, ArrayType):
        return f"array of {_describe(type_.value)}"
    if isinstance(type_, (DictionaryType, KeyedTableType)):
        return f"mapping of {_describe(type_.key)} to {_describe(type_.value)}"
    return type(type_).__name__


def _entity_types(entity: Optional[Entity]) -> Iterator[Type]:
    """Every attribute type of an entity, variant group parameters included."""
    if isinstance(entity, Class):
        for attr in entity.ordered_attributes():
            yield attr.type
    elif isinstance(entity, Concept):
        yield entity.type


def _references(type_: Type) -> Iterator[str]:
    """Names referenced by a type through the shapes the traversal exports."""
    if isinstance(type_, NamedType):
        yield type_.name
    elif isinstance(type_, (ArrayType, DictionaryType, KeyedTableType)):
        yield from _references(type_.value)
    elif isinstance(type_, TableType):
        parameters = list(type_.parameters)
        for group in type_.variant_parameter_groups or ():
            parameters.extend(group.parameters)
        for parameter in parameters:
            yield from _references(parameter.type)
