"""Admin console endpoints: login, users, prompts, code and analytics."""

from datetime import datetime, timedelta
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials

from promptbuilder.api.deps import AdminDep, StorageDep, bearer_scheme
from promptbuilder.config import settings
from promptbuilder.core.exceptions import (
    AuthError,
    ProjectNotFoundError,
    UserNotFoundError,
    ValidationError,
)
from promptbuilder.core.security import create_admin_token, hash_password, verify_password
from promptbuilder.core.storage import Storage
from promptbuilder.models.admin import (
    Admin,
    AdminLogin,
    AdminPublic,
    AdminSession,
    NewAdmin,
    UserActivity,
)
from promptbuilder.models.common import CamelModel, utcnow
from promptbuilder.models.project import Project, ProjectKind, Snapshot
from promptbuilder.models.user import User, UserPublic
from promptbuilder.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()

UNKNOWN = "Unknown"
RECENT_ACTIVITY_LIMIT = 10


class AdminTokenResponse(CamelModel):
    """Issued admin token plus the admin it belongs to."""

    success: bool = True
    token: str
    admin: AdminPublic


class MessageResponse(CamelModel):
    """Plain acknowledgement."""

    success: bool = True
    message: str


class UserSummary(UserPublic):
    """A user as listed in the admin console."""

    created_at: datetime
    project_count: int
    activity: UserActivity


class UserListResponse(CamelModel):
    success: bool = True
    count: int
    users: list[UserSummary]


class UserDetailResponse(CamelModel):
    success: bool = True
    user: UserSummary
    projects: list[Project]
    activity: UserActivity


class PromptEntry(CamelModel):
    """One project's prompt with its owner."""

    id: str
    user_id: str
    user_name: str
    user_email: str
    prompt: str
    type: ProjectKind
    created_at: datetime
    project_name: str


class PromptListResponse(CamelModel):
    success: bool = True
    count: int
    prompts: list[PromptEntry]


class OwnedProject(Project):
    """A project with its owner's name and email."""

    user_name: str
    user_email: str


class ProjectCodeResponse(CamelModel):
    success: bool = True
    project: OwnedProject
    code: Snapshot


class RecentActivity(CamelModel):
    project_id: str
    project_name: str
    user_name: str
    type: ProjectKind
    created_at: datetime


class ProjectStats(CamelModel):
    """Projects per target; "both" projects count toward each."""

    website_projects: int
    mobile_projects: int
    dual_projects: int


class AnalyticsResponse(CamelModel):
    success: bool = True
    total_users: int
    total_projects: int
    total_generations: int
    recent_activity: list[RecentActivity]
    stats: ProjectStats


async def ensure_default_admin(storage: Storage) -> Admin | None:
    """Create the configured admin account unless it exists or is disabled."""
    if not settings.admin_password:
        return None
    existing = await storage.find_admin_by_username(settings.admin_username)
    if existing is not None:
        return existing

    admin = await storage.create_admin(
        NewAdmin(
            username=settings.admin_username,
            password_hash=hash_password(settings.admin_password),
            email=settings.admin_email,
        )
    )
    logger.info("admin.seeded", admin_id=admin.id, username=admin.username)
    return admin


async def _summarize(storage: Storage, user: User) -> UserSummary:
    projects = await storage.list_projects(user.id)
    return UserSummary(
        **UserPublic.from_user(user).model_dump(),
        created_at=user.created_at,
        project_count=len(projects),
        activity=await _activity_of(storage, user),
    )


async def _activity_of(storage: Storage, user: User) -> UserActivity:
    activity = await storage.get_user_activity(user.id)
    return activity or UserActivity(user_id=user.id, last_active=user.created_at)


async def _prompt_entry(storage: Storage, project: Project) -> PromptEntry:
    owner = await storage.get_user(project.owner_id)
    return PromptEntry(
        id=project.id,
        user_id=project.owner_id,
        user_name=owner.name if owner else UNKNOWN,
        user_email=owner.email if owner else UNKNOWN,
        prompt=project.prompt,
        type=project.type,
        created_at=project.created_at,
        project_name=project.name,
    )


@router.post("/login", response_model=AdminTokenResponse, summary="Admin login")
async def login(data: AdminLogin, storage: StorageDep) -> AdminTokenResponse:
    """Exchange admin credentials for a 24-hour session token."""
    if not data.username or not data.password:
        raise ValidationError("Username and password required")

    admin = await storage.find_admin_by_username(data.username)
    if admin is None or not verify_password(data.password, admin.password_hash):
        logger.info("admin.login_rejected")
        raise AuthError("Invalid credentials")

    token = create_admin_token(admin.id)
    await storage.create_admin_session(
        AdminSession(
            admin_id=admin.id,
            token=token,
            expires_at=utcnow() + timedelta(hours=settings.admin_token_expire_hours),
        )
    )
    await storage.touch_admin_login(admin.id)

    logger.info("admin.logged_in", admin_id=admin.id)
    return AdminTokenResponse(token=token, admin=AdminPublic.from_admin(admin))


@router.post("/logout", response_model=MessageResponse, summary="Admin logout")
async def logout(
    admin: AdminDep,
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    storage: StorageDep,
) -> MessageResponse:
    """End the current admin session."""
    await storage.delete_admin_session(credentials.credentials)
    logger.info("admin.logged_out", admin_id=admin.id)
    return MessageResponse(message="Logged out successfully")


@router.get("/users", response_model=UserListResponse, summary="List users")
async def list_users(admin: AdminDep, storage: StorageDep) -> UserListResponse:
    """Every user with project count and generation activity."""
    users = [await _summarize(storage, user) for user in await storage.list_users()]
    return UserListResponse(count=len(users), users=users)


@router.get("/users/{user_id}", response_model=UserDetailResponse, summary="Get user details")
async def get_user(user_id: str, admin: AdminDep, storage: StorageDep) -> UserDetailResponse:
    """A user with their projects and activity."""
    user = await storage.get_user(user_id)
    if user is None:
        raise UserNotFoundError(user_id)

    return UserDetailResponse(
        user=await _summarize(storage, user),
        projects=await storage.list_projects(user.id),
        activity=await _activity_of(storage, user),
    )


@router.get("/prompts", response_model=PromptListResponse, summary="List all prompts")
async def list_prompts(admin: AdminDep, storage: StorageDep) -> PromptListResponse:
    """The prompt behind every project, newest first."""
    prompts = [await _prompt_entry(storage, p) for p in await storage.list_projects()]
    return PromptListResponse(count=len(prompts), prompts=prompts)


@router.get(
    "/prompts/user/{user_id}",
    response_model=PromptListResponse,
    summary="List a user's prompts",
)
async def list_user_prompts(
    user_id: str, admin: AdminDep, storage: StorageDep
) -> PromptListResponse:
    """The prompts behind one user's projects, newest first."""
    prompts = [await _prompt_entry(storage, p) for p in await storage.list_projects(user_id)]
    return PromptListResponse(count=len(prompts), prompts=prompts)


@router.get(
    "/code/{project_id}",
    response_model=ProjectCodeResponse,
    summary="Get a project's code",
)
async def get_project_code(
    project_id: str, admin: AdminDep, storage: StorageDep
) -> ProjectCodeResponse:
    """Any project's current code, regardless of owner."""
    project = await storage.get_project(project_id)
    if project is None:
        raise ProjectNotFoundError(project_id)

    owner = await storage.get_user(project.owner_id)
    return ProjectCodeResponse(
        project=OwnedProject(
            **dict(project),
            user_name=owner.name if owner else UNKNOWN,
            user_email=owner.email if owner else UNKNOWN,
        ),
        code=project.generated_code,
    )


@router.get("/analytics", response_model=AnalyticsResponse, summary="Usage analytics")
async def analytics(admin: AdminDep, storage: StorageDep) -> AnalyticsResponse:
    """Totals, project mix and the latest projects."""
    users = await storage.list_users()
    projects = await storage.list_projects()
    activities = await storage.list_user_activity()

    recent = []
    for project in projects[:RECENT_ACTIVITY_LIMIT]:
        owner = await storage.get_user(project.owner_id)
        recent.append(
            RecentActivity(
                project_id=project.id,
                project_name=project.name,
                user_name=owner.name if owner else UNKNOWN,
                type=project.type,
                created_at=project.created_at,
            )
        )

    kinds = [p.type for p in projects]
    return AnalyticsResponse(
        total_users=len(users),
        total_projects=len(projects),
        total_generations=sum(a.total_generations for a in activities),
        recent_activity=recent,
        stats=ProjectStats(
            website_projects=sum(k in (ProjectKind.WEBSITE, ProjectKind.BOTH) for k in kinds),
            mobile_projects=sum(k in (ProjectKind.MOBILE_APP, ProjectKind.BOTH) for k in kinds),
            dual_projects=sum(k == ProjectKind.BOTH for k in kinds),
        ),
    )
