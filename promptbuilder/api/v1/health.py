"""Health check endpoint."""

from datetime import datetime

from fastapi import APIRouter

from promptbuilder import __version__
from promptbuilder.api.deps import CompletionDep, DeployerDep
from promptbuilder.config import settings
from promptbuilder.models.common import CamelModel, utcnow
from promptbuilder.models.deployment import DeploymentPlatform

router = APIRouter()


class HealthResponse(CamelModel):
    """Service status plus which upstreams have credentials."""

    status: str = "healthy"
    version: str
    environment: str
    timestamp: datetime
    generation_enabled: bool
    deployment_platforms: list[DeploymentPlatform]


@router.get("/health", response_model=HealthResponse)
async def health_check(completion: CompletionDep, deployer: DeployerDep) -> HealthResponse:
    """Report API status.

    The service stays "healthy" without an API key or hosting tokens; the
    flags tell clients which features will work.
    """
    return HealthResponse(
        version=__version__,
        environment=settings.app_env,
        timestamp=utcnow(),
        generation_enabled=completion.is_configured(),
        deployment_platforms=[p for p in DeploymentPlatform if deployer.token_for(p)],
    )
