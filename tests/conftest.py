"""Shared fixtures for Splice tests."""

import json
import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from splice.config.schemas import (
    ChatWidgetRecommendation,
    ComponentRecommendation,
    ConfirmationResult,
    InstallationPlan,
    InteractableRecommendation,
    ProviderSetupRecommendation,
    ToolRecommendation,
)
from splice.core.planner import RecommendationDescriptor
from splice.core.project import Project


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory."""
    path = Path(tempfile.mkdtemp(prefix="splice_test_"))
    yield path
    if path.exists():
        shutil.rmtree(path)


@pytest.fixture
def temp_project(temp_dir: Path) -> Path:
    """Create a temporary host project with a package.json."""
    project_dir = temp_dir / "test-project"
    project_dir.mkdir()
    (project_dir / "package.json").write_text(
        json.dumps(
            {
                "name": "test-project",
                "dependencies": {"react": "^18.0.0", "next": "^14.0.0"},
                "devDependencies": {"typescript": "^5.0.0"},
            }
        )
    )
    return project_dir


@pytest.fixture
def project(temp_project: Path) -> Project:
    """Load the temporary host project."""
    return Project.load(temp_project)


@pytest.fixture
def sample_plan() -> InstallationPlan:
    """Plan with one item of every kind."""
    return InstallationPlan(
        provider_setup=ProviderSetupRecommendation(
            file_path="app/layout.tsx",
            nesting_level=0,
            rationale="Root layout wraps every page",
            dependencies=["@tambo-ai/react"],
        ),
        component_recommendations=[
            ComponentRecommendation(
                name="UserCard",
                file_path="src/tambo/components.ts",
                reason="Displays a user profile",
            ),
        ],
        tool_recommendations=[
            ToolRecommendation(
                name="getUser",
                file_path="src/tambo/tools.ts",
                type="exported-function",
                reason="Fetch a user by id",
                suggested_schema="z.object({ id: z.string() })",
                dependencies=["zod"],
            ),
        ],
        interactable_recommendations=[
            InteractableRecommendation(
                name="Counter",
                file_path="src/tambo/interactables.tsx",
                reason="Lets the assistant change the count",
            ),
        ],
        chat_widget_setup=ChatWidgetRecommendation(
            file_path="src/tambo/chat-widget.tsx",
            position="bottom-right",
        ),
        dependencies=["@tambo-ai/react"],
        dev_dependencies=["@types/node"],
    )


@pytest.fixture
def sample_confirmation(sample_plan: InstallationPlan) -> ConfirmationResult:
    """Approved confirmation selecting every item of the sample plan."""
    return ConfirmationResult(
        approved=True,
        selected_items=[
            "provider-setup",
            "component-0",
            "tool-0",
            "interactable-0",
            "chat-widget",
        ],
        plan=sample_plan,
    )


@pytest.fixture
def sample_plan_data() -> dict:
    """A plan as an upstream JavaScript planner writes it (camelCase keys)."""
    return {
        "providerSetup": {
            "filePath": "app/layout.tsx",
            "nestingLevel": 0,
            "rationale": "Root layout",
            "confidence": 0.9,
        },
        "componentRecommendations": [
            {"name": "UserCard", "filePath": "src/tambo/components.ts", "reason": "Profile"},
        ],
        "toolRecommendations": [],
        "interactableRecommendations": [],
        "chatWidgetSetup": {"filePath": "src/tambo/chat-widget.tsx", "position": "bottom-left"},
        "dependencies": ["@tambo-ai/react"],
        "devDependencies": [],
    }


def write_generator(descriptor: RecommendationDescriptor, existing: str) -> str:
    """Plain-callable generator: tags the content with the item id."""
    return f"{existing}// {descriptor.item_id}\n"


@pytest.fixture
def simple_generator():
    """A plain callable usable as a content generator."""
    return write_generator
