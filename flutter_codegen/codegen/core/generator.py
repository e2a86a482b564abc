"""
Base generator interface for all code generation targets.

Defines the contract every artifact generator implements, together with
the helpers they share: output path resolution, attribute exclusion,
doc-comment formatting and blank-line collapsing.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from ...logging_config import get_logger
from .config import FlutterConfig
from .naming import to_snake_case
from .schema import AttributeDescriptor, ModelDescriptor
from .templates import TemplateEngine, create_template_engine

logger = get_logger(__name__)

# Columns managed by the backend; never offered as form input.
SYSTEM_ATTRIBUTES = frozenset({"id", "created_at", "updated_at", "deleted_at"})


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class UnsupportedVariantError(GeneratorError, ValueError):
    """Raised for an unknown widget or screen type."""

    def __init__(self, kind: str, variant: str, supported):
        self.kind = kind
        self.variant = variant
        self.supported = tuple(supported)
        super().__init__(
            f"Unsupported {kind} type: {variant!r} "
            f"(expected one of: {', '.join(self.supported)})"
        )


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    # Name of the ``OutputConfig`` attribute holding this generator's folder.
    output_section: str = ""
    file_suffix: str = ""

    def __init__(self, config: Optional[FlutterConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or FlutterConfig()
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        overrides = []
        if self.config.templates.path:
            overrides.append(Path(self.config.templates.path))
        self._template_engine = create_template_engine(
            self.get_template_directory(), overrides
        )

    @property
    @abstractmethod
    def component_name(self) -> str:
        """Return the artifact family (e.g. 'model', 'service')."""
        pass

    @property
    def file_extension(self) -> str:
        """Return the file extension for generated files."""
        return ".dart"

    def get_file_extension(self) -> str:
        return self.file_extension

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Subclasses should override this to provide their template directory.
        Return None to use in-memory templates only.
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @abstractmethod
    def generate(
        self, descriptor: ModelDescriptor, options: Optional[Mapping[str, Any]] = None
    ) -> str:
        """
        Generate source text for one model.

        Args:
            descriptor: Analyzed model
            options: Generator specific options (e.g. ``{"type": "form"}``)

        Returns:
            Generated code as a string
        """
        pass

    # Paths

    def get_base_output_path(self) -> Path:
        return Path(self.config.output.base_path)

    def get_output_directory(self) -> Path:
        subdir = getattr(self.config.output, f"{self.output_section}_path", "")
        return self.get_base_output_path() / subdir

    def get_output_path(self, name: str) -> str:
        """
        Deterministic output path for ``name``.

        Names that snake-case to the same value share a path.
        """
        file_name = f"{to_snake_case(name)}{self.file_suffix}{self.get_file_extension()}"
        return str(self.get_output_directory() / file_name)

    # Shared helpers

    @property
    def excluded_attributes(self):
        return self.config.model_analysis.excluded_attributes

    def included_attributes(self, descriptor: ModelDescriptor) -> List[AttributeDescriptor]:
        """Attributes in schema order, minus the configured exclusions."""
        excluded = self.excluded_attributes
        return [
            attribute
            for name, attribute in descriptor.attributes.items()
            if name not in excluded
        ]

    def validate_descriptor(self, descriptor: ModelDescriptor) -> List[str]:
        """
        Validate a descriptor for basic structural issues.

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []
        if not descriptor.attributes:
            warnings.append(
                f"Model '{descriptor.class_name}' has no attributes "
                f"(table '{descriptor.table_name}' missing or empty)"
            )
        for name in sorted(descriptor.fillable | descriptor.hidden | set(descriptor.casts)):
            if name not in descriptor.attributes:
                warnings.append(
                    f"{descriptor.class_name}.{name} is declared on the model "
                    "but is not a column; no field is generated for it"
                )
        return warnings

    def format_doc_comment(self, text: str, indent: int = 0) -> str:
        """Render ``text`` as a Dart doc comment, or nothing if docs are off."""
        if not text or not self.config.generation.generate_documentation:
            return ""
        pad = " " * indent
        return "\n".join(f"{pad}/// {line}".rstrip() for line in text.splitlines())

    def format_code(self, code: str) -> str:
        """
        Apply basic formatting to generated code.

        Trailing whitespace is stripped, runs of blank lines collapse to a
        single blank line, and the result ends with exactly one newline.
        """
        formatted_lines = []
        previous_blank = True

        for line in code.split("\n"):
            stripped = line.rstrip()
            if not stripped:
                if not previous_blank:
                    formatted_lines.append("")
                previous_blank = True
            else:
                formatted_lines.append(stripped)
                previous_blank = False

        while formatted_lines and not formatted_lines[-1]:
            formatted_lines.pop()

        return "\n".join(formatted_lines) + "\n"

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
        return self.template_engine.template_exists(template_name)

    def template_name(self, stem: str) -> str:
        """Template file name for ``stem`` using the configured extension."""
        return f"{stem}{self.config.templates.extension}"
