"""Generation Orchestrator.

Runs one generation agent per requested project type and collects each
type's result or failure without letting one type abort the others.
"""

import asyncio
import time

from promptbuilder.agents.base import GenerationInput
from promptbuilder.agents.registry import AgentRegistry, get_agent_registry
from promptbuilder.config import settings
from promptbuilder.core.exceptions import UpstreamGenerationError
from promptbuilder.models.generation import (
    GeneratedCode,
    GenerationFailure,
    GenerationRequest,
    GenerationResult,
    ProjectType,
)
from promptbuilder.services.completion_service import CompletionClient, get_completion_client
from promptbuilder.utils.logging import get_logger


class GenerationOrchestrator:
    """Orchestrates per-type generation for a request.

    Types run concurrently. Each is bounded by ``timeout`` seconds; a timeout
    or upstream failure is recorded as a GenerationFailure for that type and
    is never retried. Results keep the order of ``request.types``.
    """

    def __init__(
        self,
        client: CompletionClient | None = None,
        registry: AgentRegistry | None = None,
        timeout: float | None = None,
    ):
        self.client = client or get_completion_client()
        self.registry = registry or get_agent_registry()
        self.timeout = timeout if timeout is not None else settings.generation_timeout_seconds
        self.logger = get_logger("orchestrator")

    async def run(self, request: GenerationRequest) -> dict[ProjectType, GenerationResult]:
        """Generate every requested type.

        Args:
            request: A validated generation request

        Returns:
            Mapping from each requested type to its GeneratedCode or failure
        """
        start_time = time.perf_counter()
        self.logger.info(
            "orchestrator.batch.started",
            types=[t.value for t in request.types],
            framework=request.framework,
        )

        # Cancelling this coroutine cancels the pending per-type tasks too
        outcomes = await asyncio.gather(
            *(self._generate_one(project_type, request) for project_type in request.types)
        )
        results = dict(zip(request.types, outcomes))

        succeeded = [t.value for t, r in results.items() if isinstance(r, GeneratedCode)]
        self.logger.info(
            "orchestrator.batch.completed",
            succeeded=succeeded,
            failed=[t.value for t in results if t.value not in succeeded],
            duration_ms=int((time.perf_counter() - start_time) * 1000),
        )
        return results

    async def _generate_one(
        self, project_type: ProjectType, request: GenerationRequest
    ) -> GenerationResult:
        agent = self.registry.create(project_type, client=self.client)
        input_data = GenerationInput(
            prompt=request.prompt,
            framework=request.framework,
            features=request.features,
        )

        try:
            return await asyncio.wait_for(agent.execute(input_data), timeout=self.timeout)
        except asyncio.TimeoutError:
            self.logger.error(
                "orchestrator.type.timeout",
                type=project_type.value,
                timeout_s=self.timeout,
            )
            return self._failure(
                project_type, f"Generation timed out after {self.timeout:g} seconds"
            )
        except UpstreamGenerationError as e:
            return self._failure(project_type, e.reason)

    def _failure(self, project_type: ProjectType, details: str) -> GenerationFailure:
        return GenerationFailure(
            error=f"Failed to generate {project_type.value}",
            details=details,
        )


def successful_results(
    results: dict[ProjectType, GenerationResult],
) -> dict[ProjectType, GeneratedCode]:
    """Keep only the types that generated successfully, in order."""
    return {t: r for t, r in results.items() if isinstance(r, GeneratedCode)}
