"""User and authentication models."""

from datetime import datetime

from pydantic import EmailStr, Field

from promptbuilder.models.common import CamelModel, utcnow


class NewUser(CamelModel):
    """User fields before storage assigns an id."""

    name: str
    email: str
    password_hash: str
    role: str = "user"


class User(NewUser):
    """A stored user."""

    id: str
    created_at: datetime = Field(default_factory=utcnow)


class UserPublic(CamelModel):
    """User fields safe to return to clients."""

    id: str
    name: str
    email: str
    role: str

    @classmethod
    def from_user(cls, user: User) -> "UserPublic":
        return cls(id=user.id, name=user.name, email=user.email, role=user.role)


class UserRegister(CamelModel):
    """Request model for registration."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)


class UserLogin(CamelModel):
    """Request model for login."""

    email: str
    password: str
