"""Code generation data models."""

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from promptbuilder.core.exceptions import ValidationError
from promptbuilder.models.common import CamelModel


class ProjectType(str, Enum):
    """A single generation target."""

    WEBSITE = "website"
    MOBILE_APP = "mobile-app"


DEFAULT_FRAMEWORKS: dict[ProjectType, str] = {
    ProjectType.WEBSITE: "html",
    ProjectType.MOBILE_APP: "react-native",
}


class GeneratedCode(CamelModel):
    """A generated multi-file project for one type."""

    type: str
    framework: str
    files: dict[str, str] = Field(..., min_length=1)
    dependencies: dict[str, str] | None = None
    structure: list[str] | None = None
    instructions: str | None = None

    @field_validator("files", mode="before")
    @classmethod
    def serialize_structured_contents(cls, value: Any) -> Any:
        # Models sometimes emit package.json and friends as nested objects
        if not isinstance(value, dict):
            return value
        return {
            path: content if isinstance(content, str) else json.dumps(content, indent=2)
            for path, content in value.items()
        }

    @field_validator("dependencies", mode="before")
    @classmethod
    def stringify_versions(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {name: str(version) for name, version in value.items()}

    @property
    def file_count(self) -> int:
        """Get total number of files."""
        return len(self.files)


class GenerationFailure(CamelModel):
    """Error descriptor recorded for a type that failed to generate."""

    error: str
    details: str


GenerationResult = GeneratedCode | GenerationFailure


class GenerationRequest(BaseModel):
    """A validated request to generate one or more project types."""

    prompt: str = Field(..., min_length=1)
    types: list[ProjectType] = Field(..., min_length=1)
    framework: str | None = None
    features: list[str] = Field(default_factory=list)

    @field_validator("types")
    @classmethod
    def drop_duplicate_types(cls, value: list[ProjectType]) -> list[ProjectType]:
        return list(dict.fromkeys(value))

    @classmethod
    def from_tokens(
        cls,
        prompt: str,
        tokens: list[str],
        framework: str | None = None,
        features: list[str] | None = None,
    ) -> "GenerationRequest":
        """Build a request from raw type tokens, rejecting unknown ones.

        Raises:
            ValidationError: If the prompt is blank, no types were given,
                or any token is not a known project type.
        """
        if not prompt or not prompt.strip():
            raise ValidationError("Please provide a prompt", field="prompt")
        if not tokens:
            raise ValidationError("Please provide type or types array", field="types")

        known = {t.value for t in ProjectType}
        invalid = [token for token in tokens if token not in known]
        if invalid:
            raise ValidationError(
                f"Invalid types: {', '.join(map(str, invalid))}. "
                f'Must be "website" or "mobile-app"',
                field="types",
                invalid=invalid,
            )

        return cls(
            prompt=prompt.strip(),
            types=[ProjectType(token) for token in tokens],
            framework=framework or None,
            features=features or [],
        )


class EnhancementInput(BaseModel):
    """Existing code plus a follow-up instruction."""

    existing_code: Any
    enhancement_prompt: str = Field(..., min_length=1)
