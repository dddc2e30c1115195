"""Deployment endpoints."""

from fastapi import APIRouter

from promptbuilder.api.deps import CurrentUserDep, DeployerDep, StorageDep, load_owned_project
from promptbuilder.core.normalizer import flatten_files
from promptbuilder.models.common import CamelModel
from promptbuilder.models.deployment import DeploymentInput, DeploymentPlatform
from promptbuilder.models.project import ProjectStatus

router = APIRouter()


class DeployRequest(CamelModel):
    """Which project to deploy, and under what name."""

    project_id: str
    project_name: str | None = None


class DeployResponse(CamelModel):
    """Deployment outcome."""

    success: bool = True
    url: str
    deployment_id: str
    message: str


@router.post(
    "/{platform}",
    response_model=DeployResponse,
    summary="Deploy a project",
    description="Publishes the project's current files and marks the project as published.",
)
async def deploy_project(
    platform: DeploymentPlatform,
    data: DeployRequest,
    user: CurrentUserDep,
    storage: StorageDep,
    deployer: DeployerDep,
) -> DeployResponse:
    """Deploy a project to Vercel or Netlify."""
    project = await load_owned_project(storage, data.project_id, user)

    result = await deployer.deploy(
        DeploymentInput(
            platform=platform,
            project_name=data.project_name or project.name,
            files=flatten_files(project.generated_code),
        )
    )

    await storage.update_project(
        project.id,
        {
            "deployment_url": result.url,
            "deployment_platform": platform,
            "deployment_id": result.deployment_id,
            "status": ProjectStatus.PUBLISHED,
        },
    )

    return DeployResponse(
        url=result.url,
        deployment_id=result.deployment_id,
        message=f"Successfully deployed to {platform.value.capitalize()}",
    )
