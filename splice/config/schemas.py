"""Pydantic schemas for Splice documents.

This module defines the data models for:
- splice.yaml (project configuration)
- the installation plan produced by the upstream planner
- the confirmation result produced by the approval step
- package.json (host project manifest, dependency fields only)
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# =============================================================================
# Common Types
# =============================================================================

PackageManagerName = Literal["npm", "yarn", "pnpm", "bun"]
ToolType = Literal["server-action", "fetch", "exported-function", "api-route", "other"]
WidgetPosition = Literal["bottom-right", "bottom-left", "top-right", "top-left", "inline"]


class PlanModel(BaseModel):
    """Base for plan documents.

    Plans are usually written by JavaScript tooling, so camelCase keys are
    accepted alongside the snake_case field names.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Recommendation Models
# =============================================================================


class Recommendation(PlanModel):
    """Fields shared by every plan item that targets a file."""

    file_path: str
    confidence: float = 1.0
    dependencies: list[str] = Field(default_factory=list)
    dev_dependencies: list[str] = Field(default_factory=list)

    @field_validator("confidence")
    @classmethod
    def validate_confidence(cls, v: float) -> float:
        """Confidence is a probability."""
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"confidence must be between 0 and 1, got {v}")
        return v

    @field_validator("file_path")
    @classmethod
    def validate_file_path(cls, v: str) -> str:
        """File path cannot be blank."""
        if not v.strip():
            raise ValueError("file_path cannot be empty")
        return v


class ProviderSetupRecommendation(Recommendation):
    """Where to wrap the application in the provider component."""

    nesting_level: int = 0
    rationale: str = ""

    @field_validator("nesting_level")
    @classmethod
    def validate_nesting_level(cls, v: int) -> int:
        if v < 0:
            raise ValueError("nesting_level cannot be negative")
        return v


class ComponentRecommendation(Recommendation):
    """An existing UI component to register."""

    name: str
    reason: str = ""


class ToolRecommendation(Recommendation):
    """A function to expose as a tool."""

    name: str
    type: ToolType = "exported-function"
    reason: str = ""
    suggested_schema: str | None = None


class InteractableRecommendation(Recommendation):
    """A component to make interactable."""

    name: str
    reason: str = ""


class ChatWidgetRecommendation(Recommendation):
    """Where to mount the chat widget."""

    position: WidgetPosition = "bottom-right"
    rationale: str = ""


# =============================================================================
# Installation Plan
# =============================================================================


class InstallationPlan(PlanModel):
    """Approved description of intended changes.

    Plan-level dependencies are required whenever anything from the plan is
    executed; item-level dependencies only when that item is selected.
    """

    provider_setup: ProviderSetupRecommendation | None = None
    component_recommendations: list[ComponentRecommendation] = Field(default_factory=list)
    tool_recommendations: list[ToolRecommendation] = Field(default_factory=list)
    interactable_recommendations: list[InteractableRecommendation] = Field(
        default_factory=list
    )
    chat_widget_setup: ChatWidgetRecommendation | None = None
    dependencies: list[str] = Field(default_factory=list)
    dev_dependencies: list[str] = Field(default_factory=list)


class ConfirmationResult(PlanModel):
    """Output of the approval step."""

    approved: bool
    selected_items: list[str] = Field(default_factory=list)
    plan: InstallationPlan


# =============================================================================
# Project Configuration (splice.yaml)
# =============================================================================


class ProviderConfig(BaseModel):
    """Provider component inserted by the default content generator."""

    component: str = "TamboProvider"
    package: str = "@tambo-ai/react"
    api_key_env: str = "NEXT_PUBLIC_TAMBO_API_KEY"


class ProjectConfig(BaseModel):
    """Project configuration (splice.yaml) schema."""

    package_manager: PackageManagerName | None = None
    legacy_peer_deps: bool = False
    install_args: list[str] = Field(default_factory=list)
    install: bool = True
    verify: bool = True
    provider: ProviderConfig = Field(default_factory=ProviderConfig)


# =============================================================================
# Host Project Manifest (package.json)
# =============================================================================


class PackageManifest(BaseModel):
    """The dependency-related subset of a host project's package.json."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str | None = None
    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict, alias="devDependencies")
    peer_dependencies: dict[str, str] = Field(default_factory=dict, alias="peerDependencies")

    def declared(self) -> set[str]:
        """All package names the project already declares."""
        return set(self.dependencies) | set(self.dev_dependencies) | set(self.peer_dependencies)
