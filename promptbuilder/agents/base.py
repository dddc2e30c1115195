"""Base agent class for all AI agents."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from promptbuilder.core.exceptions import CompletionServiceError, UpstreamGenerationError
from promptbuilder.models.generation import DEFAULT_FRAMEWORKS, GeneratedCode, ProjectType
from promptbuilder.parsers.response import ResponseParser
from promptbuilder.services.completion_service import CompletionClient, get_completion_client
from promptbuilder.utils.logging import get_logger

InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT", bound=BaseModel)


class BaseAgent(ABC, Generic[InputT, OutputT]):
    """Base class for agents that talk to the completion service.

    All agents should inherit from this class and implement:
    - name: Agent identifier
    - description: What the agent does
    - execute(): Main execution logic
    """

    def __init__(
        self,
        client: CompletionClient | None = None,
        parser: ResponseParser | None = None,
    ):
        self.client = client or get_completion_client()
        self.parser = parser or ResponseParser()
        self.logger = get_logger(f"agent.{self.name}")

    @property
    @abstractmethod
    def name(self) -> str:
        """Agent name/identifier."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what this agent does."""
        pass

    @property
    def system_prompt(self) -> str | None:
        """System message sent with every request; None uses the client default."""
        return None

    @abstractmethod
    async def execute(self, input_data: InputT) -> OutputT:
        """Execute the agent's main task.

        Args:
            input_data: Typed input for this agent

        Returns:
            Typed output from this agent
        """
        pass


class GenerationInput(BaseModel):
    """Input for a per-type generation agent."""

    prompt: str
    framework: str | None = None
    features: list[str] = Field(default_factory=list)


class GenerationAgent(BaseAgent[GenerationInput, GeneratedCode]):
    """Generates one project type from a user prompt."""

    project_type: ProjectType

    @property
    def name(self) -> str:
        return self.project_type.value

    @property
    def default_framework(self) -> str:
        return DEFAULT_FRAMEWORKS[self.project_type]

    @abstractmethod
    def build_prompt(self, framework: str, user_prompt: str, features: list[str]) -> str:
        """Build the generation prompt sent to the model."""
        pass

    async def execute(self, input_data: GenerationInput) -> GeneratedCode:
        """Generate code for this agent's project type.

        Raises:
            UpstreamGenerationError: If the completion service call fails.
        """
        framework = input_data.framework or self.default_framework
        prompt = self.build_prompt(framework, input_data.prompt, input_data.features)

        self.logger.info(
            "generation.started",
            type=self.project_type.value,
            framework=framework,
        )

        try:
            response = await self.client.complete(prompt, system_prompt=self.system_prompt)
        except CompletionServiceError as e:
            self.logger.error(
                "generation.failed",
                type=self.project_type.value,
                error=e.message,
            )
            raise UpstreamGenerationError(self.project_type.value, e.message) from e

        outcome = self.parser.parse(response)
        self.logger.info(
            "generation.completed",
            type=self.project_type.value,
            files=outcome.code.file_count,
            fallback=outcome.used_fallback,
        )
        return outcome.code


def format_features(features: list[str]) -> str:
    """Render requested features as a prompt section, or nothing."""
    if not features:
        return ""
    lines = "\n".join(f"- {feature}" for feature in features)
    return f"\nRequested features:\n{lines}\n"
