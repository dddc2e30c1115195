"""Enhancement Agent.

Re-runs the model over existing generated code with a follow-up instruction.
"""

import json

from promptbuilder.agents.base import BaseAgent
from promptbuilder.core.exceptions import CompletionServiceError, UpstreamGenerationError
from promptbuilder.models.generation import EnhancementInput, GeneratedCode


class EnhancementAgent(BaseAgent[EnhancementInput, GeneratedCode]):
    """Agent for enhancing previously generated code.

    Returns a fresh GeneratedCode; deciding whether to store it as a new
    project version is left to the caller.
    """

    @property
    def name(self) -> str:
        return "enhancement"

    @property
    def description(self) -> str:
        return "Applies a follow-up instruction to existing generated code"

    def build_prompt(self, input_data: EnhancementInput) -> str:
        existing = json.dumps(_to_jsonable(input_data.existing_code), indent=2, default=str)
        return f"""Enhance the following code based on this request: "{input_data.enhancement_prompt}"

Existing code:
{existing}

Return the enhanced code in the same JSON structure format."""

    async def execute(self, input_data: EnhancementInput) -> GeneratedCode:
        """Enhance existing code.

        Raises:
            UpstreamGenerationError: If the completion service call fails.
        """
        self.logger.info(
            "enhancement.started",
            instruction_chars=len(input_data.enhancement_prompt),
        )

        try:
            response = await self.client.complete(
                self.build_prompt(input_data),
                system_prompt=self.system_prompt,
            )
        except CompletionServiceError as e:
            self.logger.error("enhancement.failed", error=e.message)
            raise UpstreamGenerationError(self.name, e.message) from e

        outcome = self.parser.parse(response)
        self.logger.info(
            "enhancement.completed",
            files=outcome.code.file_count,
            fallback=outcome.used_fallback,
        )
        return outcome.code


def _to_jsonable(value):
    if isinstance(value, GeneratedCode):
        return value.model_dump(exclude_none=True)
    if isinstance(value, dict):
        return {str(getattr(k, "value", k)): _to_jsonable(v) for k, v in value.items()}
    return value
