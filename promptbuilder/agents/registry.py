"""Agent registry mapping project types to generation agents."""

from functools import lru_cache

from promptbuilder.agents.base import GenerationAgent
from promptbuilder.agents.mobile_app_agent import MobileAppAgent
from promptbuilder.agents.website_agent import WebsiteAgent
from promptbuilder.models.generation import ProjectType
from promptbuilder.services.completion_service import CompletionClient
from promptbuilder.utils.logging import get_logger

logger = get_logger(__name__)


class AgentRegistry:
    """Registry for per-type generation agents."""

    def __init__(self):
        self._agents: dict[ProjectType, type[GenerationAgent]] = {}

    def register(self, agent_class: type[GenerationAgent]) -> None:
        """Register an agent class under its project type."""
        project_type = agent_class.project_type

        if project_type in self._agents:
            logger.warning("agent_registry.overwrite", type=project_type.value)

        self._agents[project_type] = agent_class
        logger.debug("agent_registry.registered", type=project_type.value)

    def get(self, project_type: ProjectType) -> type[GenerationAgent] | None:
        """Get an agent class by project type."""
        return self._agents.get(project_type)

    def create(
        self,
        project_type: ProjectType,
        client: CompletionClient | None = None,
    ) -> GenerationAgent:
        """Create an agent instance for a project type.

        Raises:
            KeyError: If no agent is registered for the type.
        """
        agent_class = self.get(project_type)
        if agent_class is None:
            raise KeyError(f"No agent registered for type: {project_type.value}")
        return agent_class(client=client)

    def list_types(self) -> list[ProjectType]:
        """List all registered project types."""
        return list(self._agents.keys())


@lru_cache
def get_agent_registry() -> AgentRegistry:
    """Get the agent registry singleton with the built-in agents."""
    registry = AgentRegistry()
    registry.register(WebsiteAgent)
    registry.register(MobileAppAgent)
    return registry
