"""Storage for users, projects and the admin console."""

from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any
from uuid import uuid4

from promptbuilder.core.exceptions import ConflictError, ProjectNotFoundError
from promptbuilder.models.admin import Admin, AdminSession, NewAdmin, PromptRecord, UserActivity
from promptbuilder.models.common import utcnow
from promptbuilder.models.project import NewProject, Project, ProjectVersion
from promptbuilder.models.user import NewUser, User


class Storage(ABC):
    """Create/read/update/delete interface over users and projects.

    Identifiers are opaque strings chosen by the implementation.
    """

    @abstractmethod
    async def create_user(self, data: NewUser) -> User:
        """Create a user. Raises ConflictError if the email is taken."""

    @abstractmethod
    async def get_user(self, user_id: str) -> User | None:
        """Get a user by ID."""

    @abstractmethod
    async def find_user_by_email(self, email: str) -> User | None:
        """Get a user by email (case-insensitive)."""

    @abstractmethod
    async def list_users(self) -> list[User]:
        """List every user, newest first."""

    @abstractmethod
    async def create_project(self, data: NewProject) -> Project:
        """Create a project."""

    @abstractmethod
    async def get_project(self, project_id: str) -> Project | None:
        """Get a project by ID."""

    @abstractmethod
    async def list_projects(self, owner_id: str | None = None) -> list[Project]:
        """List projects newest first, all of them or one user's."""

    @abstractmethod
    async def update_project(
        self,
        project_id: str,
        changes: dict[str, Any] | None = None,
        new_version: ProjectVersion | None = None,
    ) -> Project:
        """Apply field changes and optionally append a version in one write.

        Raises:
            ProjectNotFoundError: If the project does not exist.
        """

    @abstractmethod
    async def delete_project(self, project_id: str) -> bool:
        """Delete a project. Returns False if it did not exist."""

    @abstractmethod
    async def record_prompt(self, user_id: str, text: str, project_id: str) -> UserActivity:
        """Add a generation to a user's activity, creating the record if needed."""

    @abstractmethod
    async def get_user_activity(self, user_id: str) -> UserActivity | None:
        """Get a user's activity record."""

    @abstractmethod
    async def list_user_activity(self) -> list[UserActivity]:
        """List every user's activity record."""

    @abstractmethod
    async def create_admin(self, data: NewAdmin) -> Admin:
        """Create an admin. Raises ConflictError if the username is taken."""

    @abstractmethod
    async def get_admin(self, admin_id: str) -> Admin | None:
        """Get an admin by ID."""

    @abstractmethod
    async def find_admin_by_username(self, username: str) -> Admin | None:
        """Get an admin by username."""

    @abstractmethod
    async def touch_admin_login(self, admin_id: str) -> Admin | None:
        """Set an admin's last login to now."""

    @abstractmethod
    async def create_admin_session(self, session: AdminSession) -> AdminSession:
        """Store an admin session keyed by its token."""

    @abstractmethod
    async def get_admin_session(self, token: str) -> AdminSession | None:
        """Get the session for a token."""

    @abstractmethod
    async def delete_admin_session(self, token: str) -> bool:
        """End a session. Returns False if it did not exist."""


class InMemoryStorage(Storage):
    """Storage kept in process memory.

    Note: Data is lost on restart; production deployments should provide a
    database-backed Storage.
    """

    def __init__(self):
        self._users: dict[str, User] = {}
        self._projects: dict[str, Project] = {}
        self._activity: dict[str, UserActivity] = {}
        self._admins: dict[str, Admin] = {}
        self._admin_sessions: dict[str, AdminSession] = {}

    def _new_id(self) -> str:
        return uuid4().hex

    async def create_user(self, data: NewUser) -> User:
        if await self.find_user_by_email(data.email):
            raise ConflictError(
                "User already exists with this email",
                {"email": data.email},
            )
        user = User(id=self._new_id(), **data.model_dump())
        self._users[user.id] = user
        return user

    async def get_user(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    async def find_user_by_email(self, email: str) -> User | None:
        wanted = email.strip().lower()
        for user in self._users.values():
            if user.email.lower() == wanted:
                return user
        return None

    async def list_users(self) -> list[User]:
        users = list(reversed(self._users.values()))
        users.sort(key=lambda u: u.created_at, reverse=True)
        return users

    async def create_project(self, data: NewProject) -> Project:
        project = Project(id=self._new_id(), **dict(data))
        self._projects[project.id] = project
        return project.model_copy(deep=True)

    async def get_project(self, project_id: str) -> Project | None:
        project = self._projects.get(project_id)
        return project.model_copy(deep=True) if project else None

    async def list_projects(self, owner_id: str | None = None) -> list[Project]:
        # Newest insert first so equal timestamps still sort newest first
        projects = [
            p
            for p in reversed(self._projects.values())
            if owner_id is None or p.owner_id == owner_id
        ]
        projects.sort(key=lambda p: p.created_at, reverse=True)
        return [p.model_copy(deep=True) for p in projects]

    async def update_project(
        self,
        project_id: str,
        changes: dict[str, Any] | None = None,
        new_version: ProjectVersion | None = None,
    ) -> Project:
        # No await between read and write: the update is atomic per event loop
        current = self._projects.get(project_id)
        if current is None:
            raise ProjectNotFoundError(project_id)

        update: dict[str, Any] = dict(changes or {})
        if new_version is not None:
            update["versions"] = [*current.versions, new_version]
        update["updated_at"] = utcnow()

        updated = current.model_copy(update=update)
        self._projects[project_id] = updated
        return updated.model_copy(deep=True)

    async def delete_project(self, project_id: str) -> bool:
        if project_id in self._projects:
            del self._projects[project_id]
            return True
        return False

    async def record_prompt(self, user_id: str, text: str, project_id: str) -> UserActivity:
        activity = self._activity.get(user_id) or UserActivity(user_id=user_id)
        record = PromptRecord(id=self._new_id(), text=text, project_id=project_id)
        updated = activity.model_copy(
            update={
                "prompts": [*activity.prompts, record],
                "projects": [*activity.projects, project_id],
                "total_generations": activity.total_generations + 1,
                "last_active": record.timestamp,
            }
        )
        self._activity[user_id] = updated
        return updated.model_copy(deep=True)

    async def get_user_activity(self, user_id: str) -> UserActivity | None:
        activity = self._activity.get(user_id)
        return activity.model_copy(deep=True) if activity else None

    async def list_user_activity(self) -> list[UserActivity]:
        return [a.model_copy(deep=True) for a in self._activity.values()]

    async def create_admin(self, data: NewAdmin) -> Admin:
        if await self.find_admin_by_username(data.username):
            raise ConflictError(
                "Admin already exists with this username",
                {"username": data.username},
            )
        admin = Admin(id=self._new_id(), **data.model_dump())
        self._admins[admin.id] = admin
        return admin

    async def get_admin(self, admin_id: str) -> Admin | None:
        return self._admins.get(admin_id)

    async def find_admin_by_username(self, username: str) -> Admin | None:
        for admin in self._admins.values():
            if admin.username == username:
                return admin
        return None

    async def touch_admin_login(self, admin_id: str) -> Admin | None:
        admin = self._admins.get(admin_id)
        if admin is None:
            return None
        admin = admin.model_copy(update={"last_login": utcnow()})
        self._admins[admin_id] = admin
        return admin

    async def create_admin_session(self, session: AdminSession) -> AdminSession:
        self._admin_sessions[session.token] = session
        return session

    async def get_admin_session(self, token: str) -> AdminSession | None:
        return self._admin_sessions.get(token)

    async def delete_admin_session(self, token: str) -> bool:
        return self._admin_sessions.pop(token, None) is not None

    def clear(self) -> None:
        """Remove all records."""
        self._users.clear()
        self._projects.clear()
        self._activity.clear()
        self._admins.clear()
        self._admin_sessions.clear()


@lru_cache
def get_storage() -> Storage:
    """Get the storage singleton."""
    return InMemoryStorage()
