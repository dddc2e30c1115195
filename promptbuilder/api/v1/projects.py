"""Project management endpoints."""

from typing import Any

from fastapi import APIRouter, Response, status

from promptbuilder.api.deps import (
    CurrentUserDep,
    EnhancerDep,
    NormalizerDep,
    ProjectDep,
    StorageDep,
)
from promptbuilder.models.common import CamelModel
from promptbuilder.models.generation import EnhancementInput
from promptbuilder.models.project import (
    Project,
    ProjectCreate,
    ProjectEnhance,
    ProjectUpdate,
    ProjectVersion,
)
from promptbuilder.services.export_service import build_project_archive, export_filename
from promptbuilder.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


class ProjectResponse(CamelModel):
    """A single project."""

    success: bool = True
    project: Project


class ProjectListResponse(CamelModel):
    """Response for listing projects."""

    success: bool = True
    count: int
    projects: list[Project]


class VersionListResponse(CamelModel):
    """A project's version history, oldest first."""

    success: bool = True
    count: int
    versions: list[ProjectVersion]


class MessageResponse(CamelModel):
    """Plain acknowledgement."""

    success: bool = True
    message: str


@router.get("", response_model=ProjectListResponse, summary="List my projects")
async def list_projects(user: CurrentUserDep, storage: StorageDep) -> ProjectListResponse:
    """List the current user's projects, newest first."""
    projects = await storage.list_projects(user.id)
    return ProjectListResponse(count=len(projects), projects=projects)


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save generated code as a project",
)
async def create_project(
    data: ProjectCreate,
    user: CurrentUserDep,
    normalizer: NormalizerDep,
) -> ProjectResponse:
    """Create a project from generation results."""
    project = await normalizer.create_project(
        owner_id=user.id,
        name=data.name,
        prompt=data.prompt,
        results=data.generated_code,
        description=data.description,
        framework=data.framework,
        version_description=data.version_description,
    )
    return ProjectResponse(project=project)


@router.get("/{project_id}", response_model=ProjectResponse, summary="Get a project")
async def get_project(project: ProjectDep) -> ProjectResponse:
    """Get a project the current user owns."""
    return ProjectResponse(project=project)


@router.put("/{project_id}", response_model=ProjectResponse, summary="Update a project")
async def update_project(
    project: ProjectDep,
    data: ProjectUpdate,
    storage: StorageDep,
    normalizer: NormalizerDep,
) -> ProjectResponse:
    """Update project fields; new code is recorded as a new version."""
    changes: dict[str, Any] = {}
    if data.name:
        changes["name"] = data.name
    if data.description is not None:
        changes["description"] = data.description
    if data.status is not None:
        changes["status"] = data.status

    if data.generated_code is not None:
        project = await normalizer.update_snapshot(
            project,
            data.generated_code,
            data.version_description,
            changes=changes,
        )
    elif changes:
        project = await storage.update_project(project.id, changes)

    return ProjectResponse(project=project)


@router.delete("/{project_id}", response_model=MessageResponse, summary="Delete a project")
async def delete_project(project: ProjectDep, storage: StorageDep) -> MessageResponse:
    """Delete a project and its history."""
    await storage.delete_project(project.id)
    logger.info("project.deleted", project_id=project.id)
    return MessageResponse(message="Project deleted successfully")


@router.get(
    "/{project_id}/versions",
    response_model=VersionListResponse,
    summary="List project versions",
)
async def list_versions(project: ProjectDep) -> VersionListResponse:
    """Get the full version history of a project."""
    return VersionListResponse(count=len(project.versions), versions=project.versions)


@router.post(
    "/{project_id}/enhance",
    response_model=ProjectResponse,
    summary="Enhance a project",
)
async def enhance_project(
    project: ProjectDep,
    data: ProjectEnhance,
    enhancer: EnhancerDep,
    normalizer: NormalizerDep,
) -> ProjectResponse:
    """Enhance the project's code and store the result as a new version."""
    existing = normalizer.select_part(project, data.target)
    enhanced = await enhancer.execute(
        EnhancementInput(
            existing_code=existing,
            enhancement_prompt=data.enhancement_prompt,
        )
    )
    description = data.description or f"Enhanced: {data.enhancement_prompt}"[:200]
    project = await normalizer.replace_part(project, data.target, enhanced, description)
    return ProjectResponse(project=project)


@router.get("/{project_id}/export", summary="Download the project as a ZIP archive")
async def export_project(project: ProjectDep) -> Response:
    """Export the current snapshot's files as a ZIP archive."""
    archive = build_project_archive(project)
    logger.info("project.exported", project_id=project.id, size=len(archive))
    return Response(
        content=archive,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(project)}"'},
    )
