"""Model response parsers."""

from promptbuilder.parsers.response import (
    ParseOutcome,
    ResponseParser,
    ResponseStructureError,
    parse_generated_code,
)

__all__ = [
    "ParseOutcome",
    "ResponseParser",
    "ResponseStructureError",
    "parse_generated_code",
]
