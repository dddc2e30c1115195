"""Custom exceptions for One-Prompt Builder."""

from typing import Any


class BuilderError(Exception):
    """Base exception for One-Prompt Builder."""

    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(BuilderError):
    """Missing or invalid request fields."""

    status_code = 400

    def __init__(self, message: str, field: str | None = None, **details: Any):
        if field is not None:
            details["field"] = field
        super().__init__(message, details)
        self.field = field


class AuthError(BuilderError):
    """Missing or invalid credential."""

    status_code = 401


class OwnershipError(BuilderError):
    """Actor does not own the resource."""

    status_code = 403

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            f"Not authorized to access this {resource}",
            {f"{resource}_id": resource_id},
        )


class NotFoundError(BuilderError):
    """Requested record does not exist."""

    status_code = 404


class ProjectNotFoundError(NotFoundError):
    """Project not found."""

    def __init__(self, project_id: str):
        super().__init__(
            f"Project not found: {project_id}",
            {"project_id": project_id},
        )


class UserNotFoundError(NotFoundError):
    """User not found."""

    def __init__(self, user_id: str):
        super().__init__(f"User not found: {user_id}", {"user_id": user_id})


class ConflictError(BuilderError):
    """Record already exists."""

    status_code = 409


class CompletionServiceError(BuilderError):
    """The completion service call failed or returned an unusable body."""

    status_code = 502

    def __init__(self, message: str, status: int | None = None):
        details = {}
        if status is not None:
            details["status"] = status
        super().__init__(message, details)
        self.status = status


class UpstreamGenerationError(BuilderError):
    """Generation failed for one project type."""

    status_code = 502

    def __init__(self, project_type: str, message: str):
        super().__init__(
            f"Failed to generate {project_type}: {message}",
            {"type": project_type},
        )
        self.project_type = project_type
        self.reason = message


class GenerationBatchError(BuilderError):
    """Every requested type failed to generate."""

    status_code = 502


class DeploymentError(BuilderError):
    """Deployment to a hosting platform failed."""

    status_code = 502

    def __init__(self, platform: str, message: str, status: int | None = None):
        details: dict[str, Any] = {"platform": platform}
        if status is not None:
            details["status"] = status
        super().__init__(f"Deployment failed: {message}", details)
        self.platform = platform
