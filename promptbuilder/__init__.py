"""One-Prompt Builder: generate websites and mobile apps from a single prompt."""

__version__ = "1.0.0"
