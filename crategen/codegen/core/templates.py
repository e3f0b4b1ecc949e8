"""
Jinja2 rendering for the Rust templates.

The bundled templates live in ``crategen/codegen/templates``; each one
renders a single construct (a struct, a method body, an error enum) and
the pipeline stitches the pieces together.
"""

from typing import Dict, Any, Optional
from pathlib import Path

import jinja2
from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .errors import GeneratorError
from .naming import to_snake_case

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


class TemplateError(GeneratorError):
    """A Rust template could not be found or rendered."""

    pass


def indent_lines(value: str, spaces: int = 4) -> str:
    """Indent every non-blank line by ``spaces``."""
    pad = " " * spaces
    lines = str(value).split("\n")
    return "\n".join(pad + line if line.strip() else line for line in lines)


def doc_comment(value: str, marker: str = "///") -> str:
    """Turn documentation text into Rust doc comment lines."""
    lines = [line.strip() for line in str(value).strip().split("\n")]
    return "\n".join(f"{marker} {line}" if line else marker for line in lines)


def rust_string(value: str) -> str:
    """Quote a value as a Rust string literal."""
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class TemplateEngine:
    """Loads Rust templates from a directory and renders them strictly.

    Undefined context variables raise instead of rendering as empty text,
    so a missing key surfaces as a TemplateError.
    """

    def __init__(self, template_dir: Optional[Path] = None):
        self.template_dir = Path(template_dir or TEMPLATE_DIR)
        if not self.template_dir.is_dir():
            raise TemplateError(f"Template directory not found: {self.template_dir}")

        self._env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
            undefined=StrictUndefined,
        )
        self._env.filters.update(
            {
                "indent": indent_lines,
                "doc_comment": doc_comment,
                "rust_string": rust_string,
                "snake_case": to_snake_case,
            }
        )

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render one template.

        Args:
            template_name: File name relative to the template directory
            context: Variables exposed to the template

        Returns:
            Rendered text

        Raises:
            TemplateError: If the template is missing or fails to render
        """
        try:
            return self._env.get_template(template_name).render(**context)
        except jinja2.TemplateNotFound as e:
            raise TemplateError(f"Unknown template: {template_name}") from e
        except jinja2.TemplateError as e:
            raise TemplateError(f"Failed to render {template_name}: {e}") from e

    def list_templates(self) -> list:
        return sorted(self._env.list_templates(extensions=["j2"]))


def create_template_engine(template_dir: Optional[Path] = None) -> TemplateEngine:
    """Create a template engine, defaulting to the bundled Rust templates."""
    return TemplateEngine(template_dir)


_default_engine = None


def get_default_template_engine() -> TemplateEngine:
    """Shared engine over the bundled templates."""
    global _default_engine
    if _default_engine is None:
        _default_engine = create_template_engine()
    return _default_engine
