"""Admin console models: admin accounts, sessions and per-user activity."""

from datetime import datetime

from pydantic import Field

from promptbuilder.models.common import CamelModel, utcnow


class NewAdmin(CamelModel):
    """Admin fields before storage assigns an id."""

    username: str
    password_hash: str
    email: str


class Admin(NewAdmin):
    """A stored admin account."""

    id: str
    created_at: datetime = Field(default_factory=utcnow)
    last_login: datetime | None = None


class AdminPublic(CamelModel):
    """Admin fields safe to return to clients."""

    id: str
    username: str
    email: str

    @classmethod
    def from_admin(cls, admin: Admin) -> "AdminPublic":
        return cls(id=admin.id, username=admin.username, email=admin.email)


class AdminSession(CamelModel):
    """A live admin login; the token is only honoured while a session exists."""

    admin_id: str
    token: str
    expires_at: datetime

    @property
    def is_expired(self) -> bool:
        return self.expires_at <= utcnow()


class AdminLogin(CamelModel):
    """Request model for admin login."""

    username: str = ""
    password: str = ""


class PromptRecord(CamelModel):
    """One prompt a user generated a project from."""

    id: str
    text: str
    project_id: str
    timestamp: datetime = Field(default_factory=utcnow)


class UserActivity(CamelModel):
    """Generation history of one user."""

    user_id: str
    prompts: list[PromptRecord] = Field(default_factory=list)
    projects: list[str] = Field(default_factory=list)
    total_generations: int = 0
    last_active: datetime | None = None
