"""Data models for One-Prompt Builder."""

from promptbuilder.models.admin import (
    Admin,
    AdminLogin,
    AdminPublic,
    AdminSession,
    NewAdmin,
    PromptRecord,
    UserActivity,
)
from promptbuilder.models.deployment import (
    DeploymentInput,
    DeploymentPlatform,
    DeploymentResult,
)
from promptbuilder.models.generation import (
    DEFAULT_FRAMEWORKS,
    EnhancementInput,
    GeneratedCode,
    GenerationFailure,
    GenerationRequest,
    GenerationResult,
    ProjectType,
)
from promptbuilder.models.project import (
    NewProject,
    Project,
    ProjectCreate,
    ProjectEnhance,
    ProjectKind,
    ProjectStatus,
    ProjectUpdate,
    ProjectVersion,
    Snapshot,
)
from promptbuilder.models.user import (
    NewUser,
    User,
    UserLogin,
    UserPublic,
    UserRegister,
)

__all__ = [
    # Generation models
    "DEFAULT_FRAMEWORKS",
    "EnhancementInput",
    "GeneratedCode",
    "GenerationFailure",
    "GenerationRequest",
    "GenerationResult",
    "ProjectType",
    # Project models
    "NewProject",
    "Project",
    "ProjectCreate",
    "ProjectEnhance",
    "ProjectKind",
    "ProjectStatus",
    "ProjectUpdate",
    "ProjectVersion",
    "Snapshot",
    # User models
    "NewUser",
    "User",
    "UserLogin",
    "UserPublic",
    "UserRegister",
    # Admin models
    "Admin",
    "AdminLogin",
    "AdminPublic",
    "AdminSession",
    "NewAdmin",
    "PromptRecord",
    "UserActivity",
    # Deployment models
    "DeploymentInput",
    "DeploymentPlatform",
    "DeploymentResult",
]
