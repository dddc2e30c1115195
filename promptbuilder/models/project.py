"""Project-related data models."""

from datetime import datetime
from enum import Enum

from pydantic import ConfigDict, Field

from promptbuilder.models.common import CamelModel, utcnow
from promptbuilder.models.deployment import DeploymentPlatform
from promptbuilder.models.generation import GeneratedCode, GenerationResult, ProjectType


class ProjectKind(str, Enum):
    """Stored project type: a single target or both."""

    WEBSITE = "website"
    MOBILE_APP = "mobile-app"
    BOTH = "both"


class ProjectStatus(str, Enum):
    """Project publication status."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


# For "both" projects the snapshot keeps one GeneratedCode per type
Snapshot = GeneratedCode | dict[ProjectType, GeneratedCode]


class ProjectVersion(CamelModel):
    """An immutable entry in a project's history."""

    model_config = ConfigDict(frozen=True)

    code: Snapshot
    timestamp: datetime = Field(default_factory=utcnow)
    description: str = Field(..., max_length=200)


class NewProject(CamelModel):
    """Project fields supplied by the caller before storage assigns an id."""

    owner_id: str
    name: str = Field(..., min_length=2, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    prompt: str
    type: ProjectKind
    framework: str | None = None
    generated_code: Snapshot
    versions: list[ProjectVersion] = Field(default_factory=list)
    status: ProjectStatus = ProjectStatus.DRAFT

    deployment_url: str | None = None
    deployment_platform: DeploymentPlatform | None = None
    deployment_id: str | None = None


class Project(NewProject):
    """A stored project."""

    id: str
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def current_version(self) -> ProjectVersion | None:
        """The most recent version entry."""
        return self.versions[-1] if self.versions else None


class ProjectCreate(CamelModel):
    """Request model for saving generation results as a project."""

    name: str = Field(..., min_length=2, max_length=100)
    prompt: str = Field(..., min_length=1)
    description: str | None = Field(default=None, max_length=500)
    framework: str | None = None
    generated_code: dict[ProjectType, GenerationResult] = Field(..., min_length=1)
    version_description: str | None = Field(default=None, max_length=200)


class ProjectUpdate(CamelModel):
    """Request model for updating a project."""

    name: str | None = Field(default=None, min_length=2, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    status: ProjectStatus | None = None
    generated_code: Snapshot | None = None
    version_description: str | None = Field(default=None, max_length=200)


class ProjectEnhance(CamelModel):
    """Request model for enhancing a stored project."""

    enhancement_prompt: str = Field(..., min_length=1)
    target: ProjectType | None = None
    description: str | None = Field(default=None, max_length=200)
