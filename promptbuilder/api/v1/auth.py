"""Registration, login and current-user endpoints."""

from fastapi import APIRouter, status

from promptbuilder.api.deps import CurrentUserDep, StorageDep
from promptbuilder.core.exceptions import AuthError
from promptbuilder.core.security import create_access_token, hash_password, verify_password
from promptbuilder.models.common import CamelModel
from promptbuilder.models.user import NewUser, UserLogin, UserPublic, UserRegister
from promptbuilder.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


class TokenResponse(CamelModel):
    """Issued token plus the user it belongs to."""

    success: bool = True
    token: str
    user: UserPublic


class UserResponse(CamelModel):
    """Current user."""

    success: bool = True
    user: UserPublic


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
async def register(data: UserRegister, storage: StorageDep) -> TokenResponse:
    """Create an account and return an access token."""
    user = await storage.create_user(
        NewUser(
            name=data.name.strip(),
            email=str(data.email).lower(),
            password_hash=hash_password(data.password),
        )
    )
    logger.info("auth.registered", user_id=user.id)
    return TokenResponse(token=create_access_token(user.id), user=UserPublic.from_user(user))


@router.post("/login", response_model=TokenResponse, summary="Log in")
async def login(data: UserLogin, storage: StorageDep) -> TokenResponse:
    """Exchange email and password for an access token."""
    user = await storage.find_user_by_email(data.email)
    if user is None or not verify_password(data.password, user.password_hash):
        logger.info("auth.login_rejected")
        raise AuthError("Invalid credentials")

    logger.info("auth.logged_in", user_id=user.id)
    return TokenResponse(token=create_access_token(user.id), user=UserPublic.from_user(user))


@router.get("/me", response_model=UserResponse, summary="Get current user")
async def me(user: CurrentUserDep) -> UserResponse:
    """Return the authenticated user."""
    return UserResponse(user=UserPublic.from_user(user))
