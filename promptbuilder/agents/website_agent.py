"""Website Agent.

Generates a static website (markup, stylesheet, script) from a prompt.
"""

from promptbuilder.agents.base import GenerationAgent, format_features
from promptbuilder.models.generation import ProjectType


class WebsiteAgent(GenerationAgent):
    """Agent for generating websites.

    The prompt anchors the file set on ``index.html``, ``styles.css`` and
    ``script.js`` and asks for the JSON schema the response parser expects.
    """

    project_type = ProjectType.WEBSITE

    @property
    def description(self) -> str:
        return "Generates a responsive website from a natural-language prompt"

    def build_prompt(self, framework: str, user_prompt: str, features: list[str]) -> str:
        return f"""Generate a complete, production-ready {framework} website based on this requirement: "{user_prompt}"
{format_features(features)}
IMPORTANT: Return ONLY a valid JSON object with this exact structure (no markdown, no code blocks, just raw JSON):

{{
  "type": "website",
  "framework": "{framework}",
  "files": {{
    "index.html": "<!DOCTYPE html>...",
    "styles.css": "/* CSS code */",
    "script.js": "// JavaScript code",
    "package.json": "{{ ... }}" (if applicable)
  }},
  "dependencies": {{
    "package-name": "version"
  }},
  "structure": ["index.html", "styles.css", "script.js"],
  "instructions": "Setup and deployment instructions"
}}

Requirements:
1. Generate complete, working code for all files
2. Include modern, responsive design with CSS
3. Add interactive JavaScript functionality
4. Follow best practices and clean code principles
5. Make it production-ready with proper error handling
6. Include comments explaining key sections
7. Ensure cross-browser compatibility
8. Add meta tags for SEO if HTML

Generate the complete project now:"""
