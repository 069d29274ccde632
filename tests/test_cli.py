"""CLI tests for agentloop via Click's CliRunner.

The endpoint is replaced by patching ``agentloop.cli._get_agent`` to return
an Agent around a ScriptedClient.
"""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from agentloop import Agent, AgentConfig, TransportError
from agentloop.cli import cli
from tests.helpers import ScriptedClient, chat_response


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def runner():
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def fake_agent(clean_env):
    """Patch the CLI's agent factory; returns a dict describing the last build."""
    built: dict = {"responses": [chat_response("4", prompt_tokens=10, completion_tokens=2)]}

    def _get_agent(ctx, model, **options):
        client = ScriptedClient(built["responses"])
        built.update(client=client, model=model, options=options, obj=dict(ctx.obj))
        return Agent(client, AgentConfig(model=model, **options), owns_client=True)

    clean_env.setattr("agentloop.cli._get_agent", _get_agent)
    return built


# ---------------------------------------------------------------------------
# chat
# ---------------------------------------------------------------------------


class TestChat:
    def test_prints_reply_and_usage(self, runner, fake_agent):
        result = runner.invoke(cli, ["chat", "What is 2+2?"])
        assert result.exit_code == 0, result.output
        assert "4" in result.output
        assert "Calls" in result.output
        assert "completed" in result.output
        assert fake_agent["client"].closed

    def test_sends_prompt_as_user_turn(self, runner, fake_agent):
        runner.invoke(cli, ["chat", "hello there"])
        sent = fake_agent["client"].calls[0]["messages"]
        assert sent == [{"role": "user", "content": "hello there"}]

    def test_options_reach_agent(self, runner, fake_agent):
        result = runner.invoke(
            cli,
            [
                "--api-key",
                "sk-test",
                "chat",
                "--model",
                "gpt-4o",
                "--system",
                "Be terse.",
                "--instructions",
                "Numbers only.",
                "--max-iterations",
                "3",
                "hi",
            ],
        )
        assert result.exit_code == 0, result.output
        assert fake_agent["model"] == "gpt-4o"
        assert fake_agent["options"] == {
            "system_prompt": "Be terse.",
            "instructions": "Numbers only.",
            "max_iterations": 3,
        }
        assert fake_agent["obj"]["api_key"] == "sk-test"
        roles = [t["role"] for t in fake_agent["client"].calls[0]["messages"]]
        assert roles == ["system", "user", "user"]

    def test_model_from_env(self, runner, fake_agent, monkeypatch):
        monkeypatch.setenv("AGENTLOOP_MODEL", "env-model")
        runner.invoke(cli, ["chat", "hi"])
        assert fake_agent["model"] == "env-model"

    def test_no_usage(self, runner, fake_agent):
        result = runner.invoke(cli, ["chat", "--no-usage", "hi"])
        assert result.exit_code == 0
        assert "Calls" not in result.output

    def test_verbose_prints_per_call_usage(self, runner, fake_agent):
        result = runner.invoke(cli, ["-v", "chat", "hi"])
        assert result.exit_code == 0, result.output
        assert "call 1: 10 prompt + 2 completion = 12 tokens" in result.output

    def test_nothing_to_send(self, runner, fake_agent):
        result = runner.invoke(cli, ["chat"])
        assert result.exit_code == 2
        assert "Nothing to send" in result.output

    def test_negative_max_iterations_rejected(self, runner, fake_agent):
        result = runner.invoke(cli, ["chat", "--max-iterations", "-1", "hi"])
        assert result.exit_code == 2

    def test_run_error_exits_1(self, runner, fake_agent):
        fake_agent["responses"] = [TransportError("connection reset")]
        result = runner.invoke(cli, ["chat", "hi"])
        assert result.exit_code == 1
        assert "Error: connection reset" in result.output
        assert fake_agent["client"].closed

    def test_missing_api_key(self, runner, clean_env):
        result = runner.invoke(cli, ["chat", "hi"])
        assert result.exit_code == 1
        assert "No API key" in result.output


# ---------------------------------------------------------------------------
# Attachments and history
# ---------------------------------------------------------------------------


class TestAttachments:
    def test_image_and_file(self, runner, fake_agent):
        with runner.isolated_filesystem():
            with open("chart.png", "wb") as f:
                f.write(b"\x89PNG")
            with open("notes.txt", "wb") as f:
                f.write(b"some notes")
            result = runner.invoke(
                cli,
                ["chat", "--image", "chart.png", "--file", "notes.txt", "Describe these."],
            )
        assert result.exit_code == 0, result.output
        sent = fake_agent["client"].calls[0]["messages"]
        assert sent[0]["content"][0]["type"] == "image_url"
        assert sent[1]["content"][0]["file"]["filename"] == "notes.txt"
        assert sent[2] == {"role": "user", "content": "Describe these."}

    def test_history(self, runner, fake_agent):
        history = [
            {"role": "user", "text": "My name is Ada."},
            {"kind": "text", "role": "assistant", "text": "Nice to meet you, Ada."},
        ]
        with runner.isolated_filesystem():
            with open("history.json", "w", encoding="utf-8") as f:
                json.dump(history, f)
            result = runner.invoke(cli, ["chat", "--history", "history.json", "What is my name?"])
        assert result.exit_code == 0, result.output
        sent = fake_agent["client"].calls[0]["messages"]
        assert [t["content"] for t in sent] == [
            "My name is Ada.",
            "Nice to meet you, Ada.",
            "What is my name?",
        ]

    def test_history_alone_is_enough(self, runner, fake_agent):
        with runner.isolated_filesystem():
            with open("history.json", "w", encoding="utf-8") as f:
                json.dump([{"text": "hi"}], f)
            result = runner.invoke(cli, ["chat", "--history", "history.json"])
        assert result.exit_code == 0, result.output

    @pytest.mark.parametrize(
        "payload",
        ['{"text": "not a list"}', "[{\"kind\": \"audio\"}]", "not json"],
    )
    def test_bad_history(self, runner, fake_agent, payload):
        with runner.isolated_filesystem():
            with open("history.json", "w", encoding="utf-8") as f:
                f.write(payload)
            result = runner.invoke(cli, ["chat", "--history", "history.json", "hi"])
        assert result.exit_code == 2
        assert "--history" in result.output
