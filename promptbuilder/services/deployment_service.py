"""Deployment service.

Publishes a project's files to Vercel or Netlify and returns the live URL.
"""

import base64
import re
import time
from functools import lru_cache
from typing import Any

import httpx

from promptbuilder.config import Settings, settings
from promptbuilder.core.exceptions import DeploymentError
from promptbuilder.models.deployment import (
    DeploymentInput,
    DeploymentPlatform,
    DeploymentResult,
)
from promptbuilder.utils.logging import get_logger

logger = get_logger("deployment_service")


def slugify_project_name(name: str) -> str:
    """Turn a project name into a hosting-safe slug."""
    slug = re.sub(r"[^a-z0-9-]+", "-", name.lower()).strip("-")
    return re.sub(r"-{2,}", "-", slug)[:100] or "project"


def _encode(content: str) -> str:
    return base64.b64encode(content.encode("utf-8")).decode("ascii")


class DeploymentService:
    """Thin wrapper over the Vercel and Netlify REST APIs."""

    def __init__(
        self,
        config: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.config = config or settings
        self._http_client = http_client

    def token_for(self, platform: DeploymentPlatform) -> str:
        """Get the configured API token for a platform."""
        if platform == DeploymentPlatform.VERCEL:
            return self.config.vercel_token
        return self.config.netlify_token

    async def deploy(self, input_data: DeploymentInput) -> DeploymentResult:
        """Deploy files to the requested platform.

        Raises:
            DeploymentError: If the token is missing or the platform rejects
                the deployment.
        """
        platform = input_data.platform
        token = self.token_for(platform)
        if not token:
            raise DeploymentError(
                platform.value, f"{platform.value.capitalize()} token not configured"
            )

        start_time = time.time()
        logger.info(
            "deployment.started",
            platform=platform.value,
            project=input_data.project_name,
            files=len(input_data.files),
        )

        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

        try:
            if self._http_client is not None:
                result = await self._dispatch(self._http_client, input_data, headers)
            else:
                timeout = httpx.Timeout(self.config.deployment_timeout_seconds)
                async with httpx.AsyncClient(timeout=timeout) as client:
                    result = await self._dispatch(client, input_data, headers)
        except httpx.HTTPStatusError as e:
            message = self._error_message(e.response)
            logger.error(
                "deployment.rejected",
                platform=platform.value,
                status_code=e.response.status_code,
                error=message,
            )
            raise DeploymentError(platform.value, message, status=e.response.status_code) from e
        except httpx.HTTPError as e:
            logger.error("deployment.transport_error", platform=platform.value, error=str(e))
            raise DeploymentError(platform.value, str(e)) from e
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            # 2xx body that is not JSON or lacks the fields we need
            logger.error(
                "deployment.bad_response",
                platform=platform.value,
                error=f"{type(e).__name__}: {e}",
            )
            raise DeploymentError(
                platform.value, f"Unexpected response from {platform.value}"
            ) from e

        result.duration_ms = int((time.time() - start_time) * 1000)
        logger.info(
            "deployment.completed",
            platform=platform.value,
            url=result.url,
            deployment_id=result.deployment_id,
            duration_ms=result.duration_ms,
        )
        return result

    async def _dispatch(
        self,
        client: httpx.AsyncClient,
        input_data: DeploymentInput,
        headers: dict[str, str],
    ) -> DeploymentResult:
        if input_data.platform == DeploymentPlatform.VERCEL:
            return await self._deploy_to_vercel(client, input_data, headers)
        return await self._deploy_to_netlify(client, input_data, headers)

    async def _deploy_to_vercel(
        self,
        client: httpx.AsyncClient,
        input_data: DeploymentInput,
        headers: dict[str, str],
    ) -> DeploymentResult:
        payload = {
            "name": slugify_project_name(input_data.project_name),
            "files": [
                {"file": path, "data": _encode(content), "encoding": "base64"}
                for path, content in input_data.files.items()
            ],
            "projectSettings": {"framework": None},
        }
        response = await client.post(
            f"{self.config.vercel_api_url.rstrip('/')}/v13/deployments",
            json=payload,
            headers=headers,
        )
        response.raise_for_status()
        data = response.json()

        url = data.get("url", "")
        if url and not url.startswith("http"):
            url = f"https://{url}"
        return DeploymentResult(
            platform=DeploymentPlatform.VERCEL,
            url=url,
            deployment_id=str(data.get("id", "")),
        )

    async def _deploy_to_netlify(
        self,
        client: httpx.AsyncClient,
        input_data: DeploymentInput,
        headers: dict[str, str],
    ) -> DeploymentResult:
        base_url = self.config.netlify_api_url.rstrip("/")

        # Create a site first, then deploy the files into it
        site_response = await client.post(
            f"{base_url}/sites",
            json={"name": slugify_project_name(input_data.project_name)},
            headers=headers,
        )
        site_response.raise_for_status()
        site = site_response.json()

        deploy_response = await client.post(
            f"{base_url}/sites/{site['id']}/deploys",
            json={
                "files": {
                    path: _encode(content) for path, content in input_data.files.items()
                }
            },
            headers=headers,
        )
        deploy_response.raise_for_status()
        deploy = deploy_response.json()

        return DeploymentResult(
            platform=DeploymentPlatform.NETLIFY,
            url=site.get("ssl_url") or site.get("url", ""),
            deployment_id=str(deploy.get("id", "")),
        )

    def _error_message(self, response: httpx.Response) -> str:
        try:
            body: Any = response.json()
        except ValueError:
            return response.text[:500] or f"HTTP {response.status_code}"

        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
            if body.get("message"):
                return str(body["message"])
        return f"HTTP {response.status_code}"


@lru_cache
def get_deployment_service() -> DeploymentService:
    """Get the deployment service singleton."""
    return DeploymentService()
