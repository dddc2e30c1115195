"""Dependency injection for API endpoints."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from promptbuilder.agents.enhancement_agent import EnhancementAgent
from promptbuilder.core.exceptions import AuthError, OwnershipError, ProjectNotFoundError
from promptbuilder.core.normalizer import ProjectNormalizer
from promptbuilder.core.orchestrator import GenerationOrchestrator
from promptbuilder.core.security import decode_access_token, decode_admin_token
from promptbuilder.core.storage import Storage, get_storage
from promptbuilder.models.admin import Admin
from promptbuilder.models.project import Project
from promptbuilder.models.user import User
from promptbuilder.services.completion_service import CompletionClient, get_completion_client
from promptbuilder.services.deployment_service import DeploymentService, get_deployment_service

bearer_scheme = HTTPBearer(auto_error=False)


async def get_store() -> Storage:
    """Get the storage backend."""
    return get_storage()


async def get_completion() -> CompletionClient:
    """Get the completion service client."""
    return get_completion_client()


async def get_deployer() -> DeploymentService:
    """Get the deployment service."""
    return get_deployment_service()


StorageDep = Annotated[Storage, Depends(get_store)]
CompletionDep = Annotated[CompletionClient, Depends(get_completion)]
DeployerDep = Annotated[DeploymentService, Depends(get_deployer)]


async def get_orchestrator(client: CompletionDep) -> GenerationOrchestrator:
    """Get a generation orchestrator bound to the completion client."""
    return GenerationOrchestrator(client=client)


async def get_enhancer(client: CompletionDep) -> EnhancementAgent:
    """Get the enhancement agent."""
    return EnhancementAgent(client=client)


async def get_normalizer(storage: StorageDep) -> ProjectNormalizer:
    """Get the project normalizer bound to storage."""
    return ProjectNormalizer(storage=storage)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    storage: StorageDep,
) -> User:
    """Resolve the bearer token to a user or raise 401."""
    if credentials is None:
        raise AuthError("Not authorized, no token provided")

    user_id = decode_access_token(credentials.credentials)
    user = await storage.get_user(user_id)
    if user is None:
        raise AuthError("User not found")
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]


async def get_current_admin(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    storage: StorageDep,
) -> Admin:
    """Resolve the bearer token to an admin with a live session or raise 401."""
    if credentials is None:
        raise AuthError("Admin authentication required")

    token = credentials.credentials
    try:
        admin_id = decode_admin_token(token)
    except AuthError as e:
        raise AuthError("Invalid admin token") from e

    session = await storage.get_admin_session(token)
    if session is None or session.is_expired:
        raise AuthError("Session expired")

    admin = await storage.get_admin(admin_id)
    if admin is None or session.admin_id != admin.id:
        raise AuthError("Invalid admin token")
    return admin


AdminDep = Annotated[Admin, Depends(get_current_admin)]


async def load_owned_project(storage: Storage, project_id: str, user: User) -> Project:
    """Get a project the user owns, or raise 404/403."""
    project = await storage.get_project(project_id)
    if project is None:
        raise ProjectNotFoundError(project_id)
    if project.owner_id != user.id:
        raise OwnershipError("project", project_id)
    return project


async def get_owned_project(
    project_id: str,
    user: CurrentUserDep,
    storage: StorageDep,
) -> Project:
    """Path dependency for project routes."""
    return await load_owned_project(storage, project_id, user)


# Type aliases for cleaner signatures
OrchestratorDep = Annotated[GenerationOrchestrator, Depends(get_orchestrator)]
EnhancerDep = Annotated[EnhancementAgent, Depends(get_enhancer)]
NormalizerDep = Annotated[ProjectNormalizer, Depends(get_normalizer)]
ProjectDep = Annotated[Project, Depends(get_owned_project)]
