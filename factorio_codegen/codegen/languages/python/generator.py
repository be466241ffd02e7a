"""
Python code generator implementation.

Generates pydantic v2 models that validate the document printed by the
extraction script. Each class or concept is declared once; references
between them are plain annotations resolved by ``model_rebuild``.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional
from pathlib import Path

from ...core.generator import CodeGenerator, GeneratorError
from ...core.naming import NameSanitizer, NamingCase
from ...core.config import GeneratorConfig
from ...core.types import PrimitiveKind
from ....logging_config import get_logger
from .naming import create_class_sanitizer, create_field_sanitizer
from .config import PythonConfig

logger = get_logger(__name__)


@dataclass
class _Slot:
    """A compound attribute whose annotation is being assembled."""

    name: str
    optional: bool
    description: str
    wrappers: List[str] = field(default_factory=list)
    inner: Optional[str] = None


@dataclass
class _FieldSet:
    """Fields of one generated class."""

    class_name: str
    description: str = ""
    fields: List[Dict[str, Any]] = field(default_factory=list)
    sanitizer: NameSanitizer = field(default_factory=create_field_sanitizer)


@dataclass
class _Declaration(_FieldSet):
    """A model being declared, with its variant groups."""

    variants: List[_FieldSet] = field(default_factory=list)
    current_variant: Optional[_FieldSet] = None
    slots: List[_Slot] = field(default_factory=list)

    @property
    def target(self) -> _FieldSet:
        return self.current_variant or self


class PythonGenerator(CodeGenerator):
    """Code generator for pydantic v2 models."""

    def __init__(self, config: GeneratorConfig):
        """Initialize Python generator with configuration."""
        super().__init__(config)

        self.python_config = PythonConfig(**config.language_config)
        self.class_sanitizer = create_class_sanitizer()

        self._stack: List[_Declaration] = []
        self._class_names: List[str] = []
        # One entry per open array, True when it opened its own attribute slot
        self._named_arrays: List[bool] = []

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "python"

    @property
    def file_extension(self) -> str:
        """Return Python file extension."""
        return ".py"

    @property
    def expands_references(self) -> bool:
        return False

    @property
    def metadata(self) -> Dict[str, Any]:
        return {"root_name": self.config.root_name, "models": len(self._class_names)}

    def get_template_directory(self) -> Path:
        """Return the Python templates directory."""
        return Path(__file__).parent / "templates"

    # Document lifecycle

    def begin_document(self, root_name: str):
        self.class_sanitizer.reset_used_names()
        self._class_names = []
        self._named_arrays = []
        self._stack = [self._new_declaration(self.config.root_name, "")]

    def end_document(self) -> str:
        if len(self._stack) != 1:
            raise GeneratorError("Unbalanced declarations at end of document")
        return self._render_declaration(self._stack.pop())

    def finalize(self, document: str, declarations: List[str]) -> str:
        """Render the module: root model first, then every declaration by name."""
        return self.render_template(
            "models.py.j2",
            {
                "root_name": self.config.root_name,
                "declarations": [document] + [d for d in declarations if d],
                "rebuild": self._class_names,
            },
        )

    # Entities

    def begin_entity(self, name: str, description: str = ""):
        self._stack.append(self._new_declaration(name, description))

    def end_entity(self) -> str:
        return self._render_declaration(self._stack.pop())

    def begin_variant(self, name: str):
        declaration = self._current
        variant_name = self.class_sanitizer.sanitize_name(
            f"{declaration.class_name}_{name}", NamingCase.PASCAL_CASE
        )
        declaration.current_variant = _FieldSet(class_name=variant_name)

    def end_variant(self):
        declaration = self._current
        declaration.variants.append(declaration.current_variant)
        declaration.current_variant = None

    def export_reference(self, entity_name: str):
        self._set_inner(self._class_name(entity_name))

    # Structural hooks

    def begin_table(self, name: str, optional: bool = False, description: str = ""):
        self._current.slots.append(_Slot(name, optional, description))

    def end_table(self):
        slot = self._current.slots.pop()
        if slot.inner is None:
            logger.debug(f"No value type for {self._current.class_name}.{slot.name}")
            return
        annotation = slot.inner
        for wrapper in reversed(slot.wrappers):
            annotation = wrapper.format(annotation)
        self._add_field(slot.name, annotation, slot.optional, slot.description)

    def begin_array(self, name: Optional[str] = None, optional: bool = False,
                    description: str = ""):
        if name is not None:
            self.begin_table(name, optional, description)
        self._named_arrays.append(name is not None)
        self._current.slots[-1].wrappers.append("list[{}]")

    def end_array(self):
        if not self._named_arrays:
            raise GeneratorError("end_array called without an open array")
        if self._named_arrays.pop():
            self.end_table()

    def begin_mapping(self):
        self._current.slots[-1].wrappers.append("dict[str, {}]")

    def end_mapping(self):
        pass

    def export_scalar(self, name: Optional[str], kind: PrimitiveKind,
                      optional: bool = False, description: str = ""):
        annotation = self.python_config.get_python_type(kind)
        if name is None:
            self._set_inner(annotation)
        else:
            self._add_field(name, annotation, optional, description)

    # Helpers

    @property
    def _current(self) -> _Declaration:
        return self._stack[-1]

    def _class_name(self, entity_name: str) -> str:
        return self.class_sanitizer.sanitize_name(entity_name, NamingCase.PASCAL_CASE)

    def _new_declaration(self, name: str, description: str) -> _Declaration:
        class_name = self._class_name(name)
        return _Declaration(class_name=class_name, description=description)

    def _set_inner(self, annotation: str):
        slots = self._current.slots
        if not slots:
            raise GeneratorError("Value exported outside of an attribute")
        slots[-1].inner = annotation

    def _add_field(self, name: str, annotation: str, optional: bool, description: str):
        target = self._current.target
        field_name = target.sanitizer.sanitize_name(name, NamingCase.PRESERVE)

        arguments = []
        if optional:
            annotation = f"{annotation} | None"
            arguments.append("default=None")
        if field_name != name and self.python_config.pydantic_use_alias:
            arguments.append(f"alias={name!r}")
        if description and self.python_config.field_descriptions:
            arguments.append(f"description={_first_line(description)!r}")

        if arguments == ["default=None"]:
            line = f"{field_name}: {annotation} = None"
        elif arguments:
            line = f"{field_name}: {annotation} = Field({', '.join(arguments)})"
        else:
            line = f"{field_name}: {annotation}"

        comment = None
        if self.config.add_comments and description and not self.python_config.field_descriptions:
            comment = _first_line(description)

        target.fields.append(
            {"name": field_name, "original_name": name, "line": line, "comment": comment}
        )

    def _render_declaration(self, declaration: _Declaration) -> str:
        """Render variant classes, their union alias and the model itself."""
        if declaration.slots or declaration.current_variant is not None:
            raise GeneratorError(f"Unfinished declaration {declaration.class_name}")

        parts = [self._render_class(v, None) for v in declaration.variants]

        variant = None
        if declaration.variants:
            alias = self.class_sanitizer.sanitize_name(
                f"{declaration.class_name}Variant", NamingCase.PASCAL_CASE
            )
            members = ", ".join(v.class_name for v in declaration.variants)
            parts.append(f"{alias} = Union[{members}]")

            field_name = declaration.sanitizer.sanitize_name("variant", NamingCase.PRESERVE)
            shared_keys = set()
            for f in declaration.fields:
                shared_keys.update((f["name"], f["original_name"]))
            variant = {
                "field_name": field_name,
                "line": f"{field_name}: {alias} | None = None",
                "shared_keys": tuple(sorted(shared_keys)),
            }

        parts.append(self._render_class(declaration, variant))
        return "\n\n\n".join(parts)

    def _render_class(self, field_set: _FieldSet, variant: Optional[Dict[str, Any]]) -> str:
        self._class_names.append(field_set.class_name)
        description = field_set.description if self.config.add_comments else ""
        return self.render_template(
            "model.py.j2",
            {
                "class_name": field_set.class_name,
                "description": description.strip(),
                "fields": field_set.fields,
                "variant": variant,
                "extra_forbid": self.python_config.pydantic_extra_forbid,
            },
        ).rstrip("\n")


def _first_line(text: str) -> str:
    return text.strip().split("\n", 1)[0].strip()


# Factory functions
def create_python_generator(config: GeneratorConfig = None) -> PythonGenerator:
    """Create a pydantic model generator."""
    if config is None:
        config = GeneratorConfig(add_comments=True)

    return PythonGenerator(config)


def create_strict_generator() -> PythonGenerator:
    """Create a generator whose models forbid unknown keys."""
    config = GeneratorConfig(
        add_comments=True,
        language_config={"pydantic_extra_forbid": True},
    )

    return PythonGenerator(config)
