"""Shared test fixtures for agentloop.

Provides a scripted completion client and agent factory so that no test
talks to a real endpoint.
"""

import pytest

from agentloop import Agent, AgentConfig
from agentloop.llm.client import API_KEY_ENV, BASE_URL_ENV
from tests.helpers import ScriptedClient


@pytest.fixture
def clean_env(monkeypatch):
    """Remove agentloop environment variables for the duration of a test."""
    for name in (API_KEY_ENV, BASE_URL_ENV, "AGENTLOOP_MODEL"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def make_agent():
    """Factory: ``make_agent(responses, **config)`` -> (agent, client)."""

    def _make(responses, model: str = "test-model", **config):
        client = ScriptedClient(responses)
        return Agent(client, AgentConfig(model=model, **config)), client

    return _make
