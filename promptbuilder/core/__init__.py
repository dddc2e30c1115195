"""Core functionality for One-Prompt Builder."""

from promptbuilder.core.exceptions import (
    AuthError,
    BuilderError,
    CompletionServiceError,
    ConflictError,
    DeploymentError,
    GenerationBatchError,
    NotFoundError,
    OwnershipError,
    ProjectNotFoundError,
    UpstreamGenerationError,
    UserNotFoundError,
    ValidationError,
)

__all__ = [
    "AuthError",
    "BuilderError",
    "CompletionServiceError",
    "ConflictError",
    "DeploymentError",
    "GenerationBatchError",
    "NotFoundError",
    "OwnershipError",
    "ProjectNotFoundError",
    "UpstreamGenerationError",
    "UserNotFoundError",
    "ValidationError",
]
