"""
Base generator interface for all code generation targets.

Defines the structural-emission contract a backend implements. The schema
traversal calls these hooks in document order; each backend turns them into
its own artifact (an extraction script or static declarations).
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Any, Optional
from pathlib import Path

from .templates import TemplateEngine, create_template_engine
from .types import PrimitiveKind


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize generator with optional configuration."""
        self.config = config or {}
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        template_dir = self.get_template_directory()
        if template_dir:
            self._template_engine = create_template_engine(template_dir)
        else:
            # Fallback to in-memory templates
            self._template_engine = create_template_engine()

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'lua', 'python')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.lua', '.py')."""
        pass

    @property
    def expands_references(self) -> bool:
        """
        Whether references are expanded in place.

        True for backends that inline every reachable attribute at its point
        of use (the extraction script). False for backends that declare each
        entity once and refer to it by name; those also implement the entity,
        variant and reference hooks.
        """
        return True

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Subclasses should override this to provide their template directory.
        Return None to use in-memory templates only.

        Returns:
            Path to template directory or None
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    # Document lifecycle

    @abstractmethod
    def begin_document(self, root_name: str):
        """
        Reset state and start a new artifact.

        Args:
            root_name: Name of the root class being exported
        """
        pass

    @abstractmethod
    def end_document(self) -> str:
        """Close the artifact body and return it."""
        pass

    def finalize(self, document: str, declarations: List[str]) -> str:
        """
        Combine the document body with memoized declarations.

        Args:
            document: Text returned by ``end_document``
            declarations: Entity declarations sorted by entity name

        Returns:
            Complete artifact text
        """
        return "\n\n".join([document] + [d for d in declarations if d])

    # Structural hooks

    @abstractmethod
    def begin_table(self, name: str, optional: bool = False, description: str = ""):
        """Open a named compound attribute."""
        pass

    @abstractmethod
    def end_table(self):
        pass

    @abstractmethod
    def begin_array(self, name: Optional[str] = None, optional: bool = False,
                    description: str = ""):
        """Open an array; ``name`` is None for the value of the enclosing scope."""
        pass

    @abstractmethod
    def end_array(self):
        pass

    @abstractmethod
    def begin_mapping(self):
        """Open a string-keyed mapping over the value of the enclosing scope."""
        pass

    @abstractmethod
    def end_mapping(self):
        pass

    @abstractmethod
    def export_scalar(self, name: Optional[str], kind: PrimitiveKind,
                      optional: bool = False, description: str = ""):
        """
        Emit a leaf.

        Args:
            name: Attribute name, or None for the value of the enclosing scope
            kind: Primitive kind of the leaf
            optional: Whether the attribute may be absent
            description: Attribute documentation
        """
        pass

    # Declaration hooks, only called when expands_references is False

    def begin_entity(self, name: str, description: str = ""):
        """Start the declaration of a class or concept."""
        raise NotImplementedError(f"{self.language_name} does not declare entities")

    def end_entity(self) -> str:
        """Finish the current declaration and return its text."""
        raise NotImplementedError(f"{self.language_name} does not declare entities")

    def begin_variant(self, name: str):
        """Start the attribute set of one variant parameter group."""
        raise NotImplementedError(f"{self.language_name} does not declare variants")

    def end_variant(self):
        raise NotImplementedError(f"{self.language_name} does not declare variants")

    def export_reference(self, entity_name: str):
        """Use a declared entity as the value of the enclosing scope."""
        raise NotImplementedError(f"{self.language_name} does not declare entities")

    def format_code(self, code: str) -> str:
        """
        Apply language-specific formatting to generated code.

        Args:
            code: Raw generated code

        Returns:
            Formatted code
        """
        # Basic cleanup - remove excessive blank lines
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 2:  # Allow max 2 consecutive blank lines
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines).strip("\n") + "\n"

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with context.

        Args:
            template_name: Template file name
            context: Template variables

        Returns:
            Rendered content
        """
        return self.template_engine.render_template(template_name, context)

    def template_exists(self, template_name: str) -> bool:
        """Check if a template exists."""
        return self.template_engine.template_exists(template_name)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self, code: str, warnings: List[str] = None, metadata: Dict[str, Any] = None
    ):
        """
        Initialize generation result.

        Args:
            code: Generated code
            warnings: Attributes that were left out, one message each
            metadata: Additional metadata about generation
        """
        self.code = code
        self.warnings = warnings or []
        self.metadata = metadata or {}


def generate_code(generator: CodeGenerator, api, root_attribute_suffix: Optional[str] = None,
                  **kwargs) -> GenerationResult:
    """
    Generate an artifact for the runtime API with the given backend.

    Schema errors and missing identifying fields propagate to the caller.

    Args:
        generator: Backend instance
        api: Parsed ``Api``
        root_attribute_suffix: Only export root attributes ending with this
        **kwargs: Overrides for root class and identifying field names

    Returns:
        GenerationResult with code, omission warnings, and metadata
    """
    from .traversal import Traversal

    traversal = Traversal(
        api, generator, root_attribute_suffix=root_attribute_suffix, **kwargs
    )
    code = generator.format_code(traversal.run())

    metadata = {
        "language": generator.language_name,
        "file_extension": generator.file_extension,
        "application_version": str(api.application_version),
        "root_class": traversal.root_class,
        "root_attributes": [a.name for a in traversal.root_attributes],
        "entity_count": len(traversal.entities),
    }
    metadata.update(getattr(generator, "metadata", {}))

    return GenerationResult(code, traversal.warnings, metadata)
