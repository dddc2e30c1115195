"""Completion response parser.

Turns the free-text completion returned by the model into a structured
GeneratedCode. The model is an untrusted text source: anything that does not
parse into the expected schema degrades to a single-file HTML project holding
the raw text, so callers always get something renderable.
"""

import json
import re
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from promptbuilder.models.generation import GeneratedCode
from promptbuilder.utils.logging import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS = ("type", "framework", "files")

FALLBACK_FILE = "index.html"
FALLBACK_INSTRUCTIONS = "Manual setup required"

# Raw responses can be huge; keep the log line readable
MAX_LOGGED_RESPONSE_CHARS = 2000

_OPENING_FENCE = re.compile(r"^```(?:json)?[ \t]*\r?\n?", re.IGNORECASE)
_CLOSING_FENCE = re.compile(r"\r?\n?```$")


class ResponseStructureError(ValueError):
    """Parsed JSON does not have the GeneratedCode shape."""


@dataclass
class ParseOutcome:
    """Parsed code plus whether the fallback was used."""

    code: GeneratedCode
    used_fallback: bool = False
    reason: str | None = None


class ResponseParser:
    """Parser for model completions that should contain a project as JSON."""

    def parse(self, response: str) -> ParseOutcome:
        """Parse a completion. Never raises."""
        try:
            payload = self._load(response)
            self._validate_structure(payload)
            code = GeneratedCode.model_validate(payload)
        except (ValueError, TypeError, RecursionError) as e:
            # json.JSONDecodeError and pydantic's ValidationError are ValueErrors;
            # pathologically nested arrays exhaust the decoder's recursion limit
            reason = self._describe(e)
            logger.warning(
                "response_parser.fallback",
                reason=reason,
                response_length=len(response) if isinstance(response, str) else None,
                raw_response=str(response)[:MAX_LOGGED_RESPONSE_CHARS],
            )
            return ParseOutcome(
                code=self.fallback(response),
                used_fallback=True,
                reason=reason,
            )

        logger.debug(
            "response_parser.parsed",
            type=code.type,
            framework=code.framework,
            files=code.file_count,
        )
        return ParseOutcome(code=code)

    def strip_fences(self, text: str) -> str:
        """Remove a surrounding Markdown code fence, if any."""
        cleaned = text.strip()
        if cleaned.startswith("```"):
            cleaned = _OPENING_FENCE.sub("", cleaned, count=1)
            cleaned = _CLOSING_FENCE.sub("", cleaned, count=1)
        return cleaned.strip()

    def fallback(self, response: Any) -> GeneratedCode:
        """Wrap unparseable output as a single HTML file."""
        raw = response if isinstance(response, str) else str(response)
        return GeneratedCode(
            type="website",
            framework="html",
            files={FALLBACK_FILE: raw},
            structure=[FALLBACK_FILE],
            instructions=FALLBACK_INSTRUCTIONS,
        )

    def _load(self, response: str) -> Any:
        if not isinstance(response, str):
            raise TypeError(f"Expected text, got {type(response).__name__}")
        return json.loads(self.strip_fences(response))

    def _validate_structure(self, payload: Any) -> None:
        if not isinstance(payload, dict):
            raise ResponseStructureError(
                f"Expected a JSON object, got {type(payload).__name__}"
            )
        missing = [name for name in REQUIRED_FIELDS if not payload.get(name)]
        if missing:
            raise ResponseStructureError(
                f"Invalid generated code structure, missing: {', '.join(missing)}"
            )
        if not isinstance(payload["files"], dict):
            raise ResponseStructureError("'files' must be an object of path to contents")

    def _describe(self, error: Exception) -> str:
        if isinstance(error, json.JSONDecodeError):
            return f"invalid JSON: {error.msg} (line {error.lineno}, column {error.colno})"
        if isinstance(error, PydanticValidationError):
            return f"schema mismatch: {error.error_count()} error(s)"
        if isinstance(error, RecursionError):
            return "JSON nested too deeply"
        return str(error)


# Module-level parser instance
_parser = ResponseParser()


def parse_generated_code(response: str) -> GeneratedCode:
    """Parse a model completion into GeneratedCode, falling back on failure."""
    return _parser.parse(response).code
