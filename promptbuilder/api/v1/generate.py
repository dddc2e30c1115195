"""Code generation endpoints."""

from typing import Any

from fastapi import APIRouter
from pydantic import Field

from promptbuilder.api.deps import CurrentUserDep, EnhancerDep, NormalizerDep, OrchestratorDep
from promptbuilder.core.exceptions import GenerationBatchError, ValidationError
from promptbuilder.core.orchestrator import successful_results
from promptbuilder.models.common import CamelModel
from promptbuilder.models.generation import (
    EnhancementInput,
    GeneratedCode,
    GenerationRequest,
    GenerationResult,
    ProjectType,
)
from promptbuilder.models.project import Project

router = APIRouter()


class GenerateRequest(CamelModel):
    """Request body for generation.

    Accepts either a single ``type`` or a ``types`` list. When ``name`` is
    given the successful results are also saved as a project.
    """

    prompt: str = ""
    type: str | None = None
    types: list[str] | None = None
    framework: str | None = None
    features: list[str] | None = None

    name: str | None = Field(default=None, min_length=2, max_length=100)
    description: str | None = Field(default=None, max_length=500)

    def type_tokens(self) -> list[str]:
        if self.type:
            return [self.type]
        if self.types is not None:
            return self.types
        raise ValidationError("Please provide type or types array", field="types")


class GenerateResponse(CamelModel):
    """Per-type generation results."""

    success: bool = True
    generated_code: dict[ProjectType, GenerationResult]
    types: list[ProjectType]
    message: str
    project: Project | None = None


class EnhanceRequest(CamelModel):
    """Request body for enhancing existing code."""

    existing_code: Any = None
    enhancement_prompt: str | None = None


class EnhanceResponse(CamelModel):
    """Enhanced code."""

    success: bool = True
    enhanced_code: GeneratedCode
    message: str = "Code enhanced successfully"


def _summary(types: list[ProjectType], succeeded: dict[ProjectType, GeneratedCode]) -> str:
    failed = [t.value for t in types if t not in succeeded]
    if failed:
        generated = ", ".join(t.value for t in succeeded)
        return f"Generated {generated}; failed to generate {', '.join(failed)}"
    if len(types) > 1:
        return "Website and mobile app generated successfully"
    return "Project generated successfully"


@router.post(
    "",
    response_model=GenerateResponse,
    summary="Generate a website and/or mobile app",
    description="Runs one generation per requested type. Partial failures are reported per type.",
)
async def generate(
    data: GenerateRequest,
    user: CurrentUserDep,
    orchestrator: OrchestratorDep,
    normalizer: NormalizerDep,
) -> GenerateResponse:
    """Generate code for each requested type."""
    request = GenerationRequest.from_tokens(
        data.prompt,
        data.type_tokens(),
        framework=data.framework,
        features=data.features,
    )

    results = await orchestrator.run(request)
    succeeded = successful_results(results)

    if not succeeded:
        raise GenerationBatchError(
            "Failed to generate project",
            {
                "generatedCode": {
                    t.value: r.model_dump(by_alias=True) for t, r in results.items()
                }
            },
        )

    project = None
    if data.name:
        project = await normalizer.create_project(
            owner_id=user.id,
            name=data.name,
            prompt=request.prompt,
            results=results,
            description=data.description,
            framework=request.framework,
        )

    return GenerateResponse(
        generated_code=results,
        types=request.types,
        message=_summary(request.types, succeeded),
        project=project,
    )


@router.post(
    "/enhance",
    response_model=EnhanceResponse,
    summary="Enhance existing code",
)
async def enhance(
    data: EnhanceRequest,
    user: CurrentUserDep,
    enhancer: EnhancerDep,
) -> EnhanceResponse:
    """Apply a follow-up instruction to existing code."""
    if not data.existing_code or not data.enhancement_prompt:
        raise ValidationError("Please provide existing code and enhancement prompt")

    enhanced = await enhancer.execute(
        EnhancementInput(
            existing_code=data.existing_code,
            enhancement_prompt=data.enhancement_prompt,
        )
    )
    return EnhanceResponse(enhanced_code=enhanced)
