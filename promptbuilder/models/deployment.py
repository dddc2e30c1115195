"""Deployment data models."""

from enum import Enum

from pydantic import BaseModel, Field


class DeploymentPlatform(str, Enum):
    """Supported hosting platforms."""

    VERCEL = "vercel"
    NETLIFY = "netlify"


class DeploymentInput(BaseModel):
    """Input for deployment."""

    platform: DeploymentPlatform
    project_name: str = Field(..., min_length=1)
    files: dict[str, str] = Field(..., min_length=1)


class DeploymentResult(BaseModel):
    """Result of a successful deployment."""

    platform: DeploymentPlatform
    url: str
    deployment_id: str = ""
    duration_ms: int = 0
