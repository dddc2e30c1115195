"""Mobile App Agent.

Generates a cross-platform mobile app (React Native with Expo) from a prompt.
"""

from promptbuilder.agents.base import GenerationAgent, format_features
from promptbuilder.models.generation import ProjectType


class MobileAppAgent(GenerationAgent):
    """Agent for generating mobile apps laid out as screens, components and navigation."""

    project_type = ProjectType.MOBILE_APP

    @property
    def description(self) -> str:
        return "Generates a React Native mobile app from a natural-language prompt"

    def build_prompt(self, framework: str, user_prompt: str, features: list[str]) -> str:
        return f"""Generate a complete, production-ready {framework} mobile app based on this requirement: "{user_prompt}"
{format_features(features)}
IMPORTANT: Return ONLY a valid JSON object with this exact structure (no markdown, no code blocks, just raw JSON):

{{
  "type": "mobile-app",
  "framework": "{framework}",
  "files": {{
    "App.js": "import React from 'react'...",
    "package.json": "{{ ... }}",
    "app.json": "{{ ... }}",
    "screens/HomeScreen.js": "...",
    "components/Header.js": "...",
    "navigation/AppNavigator.js": "..."
  }},
  "dependencies": {{
    "react": "18.2.0",
    "react-native": "0.72.0",
    "@react-navigation/native": "^6.0.0"
  }},
  "structure": ["App.js", "screens/", "components/", "navigation/"],
  "instructions": "Setup: npm install && npx expo start"
}}

Requirements:
1. Generate complete React Native code with Expo
2. Include proper navigation setup
3. Create reusable components
4. Add proper styling with StyleSheet
5. Include error boundaries
6. Follow React Native best practices
7. Make it production-ready
8. Add comments for clarity

Generate the complete mobile app project now:"""
