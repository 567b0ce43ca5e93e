"""Turn an approved plan and its selected items into file operations.

Item identifiers are parsed exactly once here, into a
``RecommendationDescriptor`` with an ``ItemKind``. Everything downstream works with the resolved form.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol, runtime_checkable

from splice.config.schemas import InstallationPlan, Recommendation
from splice.core.models import FileOperation
from splice.utils.filesystem import read_existing_text, resolve_project_path

logger = logging.getLogger("splice.planner")


class ItemKind(str, Enum):
    """Kinds of selectable plan items."""

    PROVIDER_SETUP = "provider-setup"
    COMPONENT = "component"
    TOOL = "tool"
    INTERACTABLE = "interactable"
    CHAT_WIDGET = "chat-widget"


_SINGLETONS = {
    ItemKind.PROVIDER_SETUP.value: ItemKind.PROVIDER_SETUP,
    ItemKind.CHAT_WIDGET.value: ItemKind.CHAT_WIDGET,
}

_COLLECTIONS = {
    ItemKind.COMPONENT: "component_recommendations",
    ItemKind.TOOL: "tool_recommendations",
    ItemKind.INTERACTABLE: "interactable_recommendations",
}


@dataclass(frozen=True)
class RecommendationDescriptor:
    """Payload handed to the content generator for one selected item."""

    kind: ItemKind
    item_id: str
    recommendation: Recommendation


@runtime_checkable
class ContentGenerator(Protocol):
    """Produces the full new content for one selected item."""

    def generate(self, descriptor: RecommendationDescriptor, existing_content: str) -> str: ...

    def expected_markers(self, descriptor: RecommendationDescriptor) -> list[str]: ...


GeneratorFunc = Callable[[RecommendationDescriptor, str], str]


class FunctionContentGenerator:
    """Adapts a plain ``(descriptor, existing_content) -> str`` callable."""

    def __init__(self, func: GeneratorFunc) -> None:
        self._func = func

    def generate(self, descriptor: RecommendationDescriptor, existing_content: str) -> str:
        return self._func(descriptor, existing_content)

    def expected_markers(self, descriptor: RecommendationDescriptor) -> list[str]:
        return []


def as_generator(generator: ContentGenerator | GeneratorFunc) -> ContentGenerator:
    """Accept either a ContentGenerator or a bare callable."""
    if isinstance(generator, ContentGenerator):
        return generator
    return FunctionContentGenerator(generator)


def resolve_item(plan: InstallationPlan, item_id: str) -> RecommendationDescriptor | None:
    """Resolve a selected item identifier against the plan.

    Identifiers are ``provider-setup``, ``chat-widget``, or
    ``<component|tool|interactable>-<index or name>``.

    Returns:
        The resolved item, or None if the identifier does not match anything
        in the plan
    """
    if item_id in _SINGLETONS:
        kind = _SINGLETONS[item_id]
        single = plan.provider_setup if kind is ItemKind.PROVIDER_SETUP else plan.chat_widget_setup
        if single is None:
            return None
        return RecommendationDescriptor(kind=kind, item_id=item_id, recommendation=single)

    prefix, sep, key = item_id.partition("-")
    if not sep or not key:
        return None
    try:
        kind = ItemKind(prefix)
    except ValueError:
        return None
    if kind not in _COLLECTIONS:
        return None

    candidates = getattr(plan, _COLLECTIONS[kind])
    if key.isdigit():
        index = int(key)
        if index >= len(candidates):
            return None
        return RecommendationDescriptor(
            kind=kind, item_id=item_id, recommendation=candidates[index]
        )

    for candidate in candidates:
        if candidate.name == key:
            return RecommendationDescriptor(kind=kind, item_id=item_id, recommendation=candidate)
    return None


def resolve_selected_items(
    plan: InstallationPlan, selected_items: list[str]
) -> list[RecommendationDescriptor]:
    """Resolve every selected identifier, skipping unknown ones and repeats."""
    resolved: list[RecommendationDescriptor] = []
    seen: set[str] = set()
    for item_id in selected_items:
        if item_id in seen:
            continue
        seen.add(item_id)
        item = resolve_item(plan, item_id)
        if item is None:
            logger.warning("Skipping unknown plan item: %s", item_id)
            continue
        resolved.append(item)
    return resolved


def build_operations(
    plan: InstallationPlan,
    selected_items: list[str],
    generator: ContentGenerator | GeneratorFunc,
    project_root: Path,
) -> list[FileOperation]:
    """Build the ordered file operations for the selected items.

    Existing content is read once per target. When several items target the
    same file, later items see the pending content of earlier ones and the
    results collapse into a single operation.

    Args:
        plan: The approved plan
        selected_items: Item identifiers chosen for this run
        generator: Content generator (or plain callable)
        project_root: Root used to resolve relative plan paths

    Returns:
        File operations in selection order

    Raises:
        Exception: Whatever the content generator raises
    """
    gen = as_generator(generator)
    operations: list[FileOperation] = []
    by_path: dict[Path, int] = {}

    for item in resolve_selected_items(plan, selected_items):
        target = resolve_project_path(project_root, item.recommendation.file_path)
        markers = tuple(gen.expected_markers(item))

        if target in by_path:
            index = by_path[target]
            pending = operations[index]
            content = gen.generate(item, pending.content)
            merged = tuple(dict.fromkeys((*pending.expected_markers, *markers)))
            operations[index] = FileOperation(
                file_path=target,
                content=content,
                is_new=pending.is_new,
                item_id=f"{pending.item_id},{item.item_id}",
                expected_markers=merged,
            )
            continue

        existing = read_existing_text(target)
        # An unreadable file that exists still counts as existing and gets a backup
        is_new = existing is None and not target.exists()
        content = gen.generate(item, existing or "")
        by_path[target] = len(operations)
        operations.append(
            FileOperation(
                file_path=target,
                content=content,
                is_new=is_new,
                item_id=item.item_id,
                expected_markers=markers,
            )
        )
        logger.debug("Planned %s for %s (new=%s)", target, item.item_id, is_new)

    return operations
