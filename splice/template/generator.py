"""Default content generator.

Renders the new content for one selected plan item from the built-in
templates. New modules are rendered whole; when the target already has
content, the item's block is appended unless it is already present.
"""

import logging
import re

from splice.config.schemas import ProviderConfig
from splice.core.planner import ItemKind, RecommendationDescriptor
from splice.template import snippets
from splice.template.engine import TemplateEngine

logger = logging.getLogger("splice.generator")

_IMPORT_LINE = re.compile(
    r"""^import\s[^;]*?(?:from\s+)?["'][^"'\n]+["'][ \t]*;?[ \t]*$""", re.MULTILINE
)
_CHILDREN_SLOT = "{children}"
DEFAULT_TOOL_SCHEMA = "z.object({})"


class TemplateContentGenerator:
    """Generates file content for plan items with Jinja2 templates."""

    def __init__(self, provider: ProviderConfig | None = None, engine: TemplateEngine | None = None):
        self.provider = provider or ProviderConfig()
        self.engine = engine or TemplateEngine()

    def generate(self, descriptor: RecommendationDescriptor, existing_content: str) -> str:
        """Return the full new content of the item's target file.

        Raises:
            TemplateRenderError: If a template cannot be rendered
        """
        kind = descriptor.kind
        if kind is ItemKind.PROVIDER_SETUP:
            return self._provider_setup(existing_content)
        if _marker(descriptor) in existing_content:
            logger.debug("%s already present, leaving content unchanged", descriptor.item_id)
            return existing_content

        rec = descriptor.recommendation
        if kind is ItemKind.CHAT_WIDGET:
            block = self._render(
                snippets.CHAT_WIDGET_BLOCK,
                position_classes=snippets.POSITION_CLASSES[rec.position],
            )
            if not existing_content.strip():
                return f"{snippets.CHAT_WIDGET_HEADER}\n{snippets.CHAT_WIDGET_IMPORT}\n{block}"
            with_import = _insert_import(existing_content, snippets.CHAT_WIDGET_IMPORT)
            return _append(with_import, "", block)
        if kind is ItemKind.TOOL:
            block = self._render(
                snippets.TOOL_BLOCK, rec=rec, schema=rec.suggested_schema or DEFAULT_TOOL_SCHEMA
            )
            header = snippets.TOOL_HEADER
        elif kind is ItemKind.INTERACTABLE:
            block = self._render(snippets.INTERACTABLE_BLOCK, rec=rec)
            header = self._render(snippets.INTERACTABLE_HEADER)
        else:
            block = self._render(snippets.COMPONENT_BLOCK, rec=rec)
            header = ""
        return _append(existing_content, header, block)

    def expected_markers(self, descriptor: RecommendationDescriptor) -> list[str]:
        """Strings the written file must contain for the item to count as applied."""
        if descriptor.kind is ItemKind.PROVIDER_SETUP:
            return [f"<{self.provider.component}"]
        markers = [_marker(descriptor)]
        if descriptor.kind is ItemKind.TOOL:
            name = descriptor.recommendation.name
            markers += [f"export const {name}Schema", f"export async function {name}"]
        return markers

    def _render(self, template: str, **context: object) -> str:
        return self.engine.render_string(template, {"provider": self.provider, **context})

    def _provider_setup(self, existing: str) -> str:
        component = self.provider.component
        import_line = self._render(snippets.PROVIDER_IMPORT)
        open_tag = self._render(snippets.PROVIDER_OPEN)

        if not existing.strip():
            return self._render(snippets.PROVIDER_LAYOUT, import_line=import_line, open_tag=open_tag)
        if f"<{component}" in existing:
            return existing

        content = existing
        if _CHILDREN_SLOT in content:
            content = content.replace(
                _CHILDREN_SLOT, f"{open_tag}{_CHILDREN_SLOT}</{component}>", 1
            )
        else:
            logger.warning("No {children} slot found, only adding the %s import", component)

        if import_line.strip() not in content:
            content = _insert_import(content, import_line)
        return content


def _marker(descriptor: RecommendationDescriptor) -> str:
    if descriptor.kind is ItemKind.CHAT_WIDGET:
        return "// splice:chat-widget"
    return f"// splice:{descriptor.kind.value}:{descriptor.recommendation.name}"


def _insert_import(content: str, import_line: str) -> str:
    """Insert an import after the last top-level import, or at the top."""
    matches = list(_IMPORT_LINE.finditer(content))
    if not matches:
        return import_line + content
    end = matches[-1].end()
    return content[:end] + "\n" + import_line.rstrip("\n") + content[end:]


def _append(existing: str, header: str, block: str) -> str:
    if not existing.strip():
        return f"{header}\n{block}" if header else block
    if header and header.strip() not in existing:
        existing = header + existing
    return existing.rstrip("\n") + "\n\n" + block
