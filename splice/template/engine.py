"""Jinja2 template engine wrapper for Splice."""

from typing import Any

from jinja2 import (
    BaseLoader,
    Environment,
    StrictUndefined,
    TemplateError,
    TemplateSyntaxError,
    UndefinedError,
)

from splice.template.filters import CUSTOM_FILTERS


class TemplateRenderError(Exception):
    """Error rendering a template."""

    def __init__(self, message: str, source: str | None = None, line: int | None = None):
        self.source = source
        self.line = line
        super().__init__(message)


class StringLoader(BaseLoader):
    """Jinja2 loader for string templates."""

    def get_source(self, environment: Environment, template: str) -> tuple[str, str | None, Any]:
        """Return the template source.

        For string templates, the template name IS the source.
        """
        return template, None, lambda: True


class TemplateEngine:
    """Jinja2-based engine for rendering generated source files.

    Undefined variables are errors: a template that references something the
    plan did not provide must fail before anything is written.
    """

    def __init__(self) -> None:
        self._env = Environment(
            loader=StringLoader(),
            autoescape=False,  # source code, not HTML
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self._env.filters.update(CUSTOM_FILTERS)

    def render_string(self, template_str: str, context: dict[str, Any]) -> str:
        """Render a template string.

        Args:
            template_str: Template content with Jinja2 syntax
            context: Context dictionary for variable substitution

        Returns:
            Rendered template string

        Raises:
            TemplateRenderError: If rendering fails
        """
        try:
            template = self._env.from_string(template_str)
            return template.render(context)
        except TemplateSyntaxError as e:
            raise TemplateRenderError(
                f"Template syntax error: {e.message}",
                source=template_str[:100],
                line=e.lineno,
            ) from e
        except UndefinedError as e:
            raise TemplateRenderError(
                f"Undefined variable in template: {e}",
                source=template_str[:100],
            ) from e
        except TemplateError as e:
            raise TemplateRenderError(f"Template error: {e}") from e

    def check_syntax(self, template_str: str) -> list[str]:
        """Check template syntax without rendering.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []
        try:
            self._env.parse(template_str)
        except TemplateSyntaxError as e:
            errors.append(f"Line {e.lineno}: {e.message}")
        return errors
