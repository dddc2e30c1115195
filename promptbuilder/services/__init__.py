"""Services for One-Prompt Builder."""

from promptbuilder.services.completion_service import CompletionClient, get_completion_client
from promptbuilder.services.deployment_service import DeploymentService, get_deployment_service

__all__ = [
    "CompletionClient",
    "get_completion_client",
    "DeploymentService",
    "get_deployment_service",
]
