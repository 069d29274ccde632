"""Agent orchestrator: the tool-calling conversation loop.

Usage::

    from agentloop.orchestrator import Agent, AgentConfig

    agent = Agent(client, AgentConfig(model="gpt-4o-mini", tools=(my_tool,)))
    completion = agent.chat_completion(messages)
"""

from agentloop.orchestrator.config import DEFAULT_MAX_ITERATIONS, AgentConfig
from agentloop.orchestrator.loop import Agent
from agentloop.orchestrator.models import Completion

__all__ = [
    "Agent",
    "AgentConfig",
    "Completion",
    "DEFAULT_MAX_ITERATIONS",
]
