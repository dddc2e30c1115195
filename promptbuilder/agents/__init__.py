"""AI Agents for One-Prompt Builder."""

from promptbuilder.agents.base import BaseAgent, GenerationAgent, GenerationInput
from promptbuilder.agents.enhancement_agent import EnhancementAgent
from promptbuilder.agents.mobile_app_agent import MobileAppAgent
from promptbuilder.agents.registry import AgentRegistry, get_agent_registry
from promptbuilder.agents.website_agent import WebsiteAgent

__all__ = [
    "BaseAgent",
    "GenerationAgent",
    "GenerationInput",
    "AgentRegistry",
    "get_agent_registry",
    "WebsiteAgent",
    "MobileAppAgent",
    "EnhancementAgent",
]
