"""
Template engine wrapper for code generation.

Provides a simple interface for Jinja2 template rendering with the case
filters generators rely on. An optional override directory is searched
before the built-in templates so projects can replace individual files.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from jinja2 import (
    ChoiceLoader,
    DictLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
)
from jinja2 import TemplateError as JinjaTemplateError

from ...logging_config import get_logger
from .naming import (
    pluralize,
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
    to_snake_case,
    to_title_words,
)

logger = get_logger(__name__)


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    pass


class TemplateEngine:
    """Wrapper for Jinja2 template engine with code generation utilities."""

    def __init__(
        self,
        template_dir: Optional[Path] = None,
        override_dirs: Sequence[Path] = (),
    ):
        """
        Initialize template engine.

        Args:
            template_dir: Directory containing the built-in template files
            override_dirs: Directories searched first for same-named templates
        """
        self.template_dir = template_dir
        self.override_dirs = [Path(d) for d in override_dirs]
        self._memory = DictLoader({})
        self._env = self._setup_environment()

    def _setup_environment(self) -> Environment:
        """Setup Jinja2 environment with code generation utilities."""
        loaders = [self._memory]
        for directory in self.override_dirs:
            if directory.is_dir():
                loaders.append(FileSystemLoader(str(directory)))
            else:
                logger.warning(f"Template override directory not found: {directory}")
        if self.template_dir and self.template_dir.exists():
            loaders.append(FileSystemLoader(str(self.template_dir)))

        env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

        env.filters["snake_case"] = to_snake_case
        env.filters["camel_case"] = to_camel_case
        env.filters["pascal_case"] = to_pascal_case
        env.filters["kebab_case"] = to_kebab_case
        env.filters["title_words"] = to_title_words
        env.filters["plural"] = pluralize
        env.filters["indent_code"] = self._indent_filter
        env.filters["doc_comment"] = self._doc_comment_filter
        return env

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with the given context.

        Args:
            template_name: Name of template file
            context: Variables to pass to template

        Returns:
            Rendered template content
        """
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except TemplateNotFound as e:
            raise TemplateError(f"Template not found: {template_name}") from e
        except JinjaTemplateError as e:
            raise TemplateError(f"Failed to render template {template_name}: {e}") from e

    def render_string(self, template_string: str, context: Dict[str, Any]) -> str:
        """
        Render a template string with the given context.

        Args:
            template_string: Template content as string
            context: Variables to pass to template

        Returns:
            Rendered content
        """
        try:
            return self._env.from_string(template_string).render(**context)
        except JinjaTemplateError as e:
            raise TemplateError(f"Failed to render template string: {e}") from e

    def add_template(self, name: str, content: str):
        """
        Add an in-memory template; it takes precedence over files.

        Args:
            name: Template name
            content: Template content
        """
        self._memory.mapping[name] = content

    def template_exists(self, template_name: str) -> bool:
        try:
            self._env.get_template(template_name)
            return True
        except TemplateNotFound:
            return False

    # Template filters for code generation

    def _indent_filter(self, value: str, spaces: int = 2) -> str:
        """Indent all non-blank lines in a string."""
        indent = " " * spaces
        lines = str(value).split("\n")
        return "\n".join(indent + line if line.strip() else line for line in lines)

    def _doc_comment_filter(self, value: str, indent: int = 0) -> str:
        """Prefix each line with a Dart doc-comment marker."""
        pad = " " * indent
        lines = str(value).split("\n")
        return "\n".join(f"{pad}/// {line}".rstrip() for line in lines)


def create_template_engine(
    template_dir: Optional[Path] = None, override_dirs: Sequence[Path] = ()
) -> TemplateEngine:
    """Factory function to create a template engine."""
    return TemplateEngine(template_dir, override_dirs)
