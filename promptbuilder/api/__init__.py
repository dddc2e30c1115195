"""HTTP API for One-Prompt Builder."""
