"""Built-in agents."""

from crazyeights.agents.base import AgentProtocol, fallback_action
from crazyeights.agents.llm_agent import LLMAgent
from crazyeights.agents.random_agent import RandomAgent

__all__ = ["AgentProtocol", "fallback_action", "LLMAgent", "RandomAgent"]
