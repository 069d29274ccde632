"""agentloop CLI -- run a conversation against a chat completion endpoint.

This module is NEVER imported from agentloop/__init__.py.
It is only loaded via the ``agentloop`` entry point defined in pyproject.toml.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

try:
    import click
except ImportError:
    raise ImportError(
        "CLI dependencies not installed. Install with: pip install agentloop[cli]"
    ) from None

if TYPE_CHECKING:
    from agentloop.orchestrator import Agent


@click.group()
@click.option(
    "--api-key",
    default=None,
    envvar="AGENTLOOP_OPENAI_API_KEY",
    help="API key for the completion endpoint.",
)
@click.option(
    "--base-url",
    default=None,
    envvar="AGENTLOOP_OPENAI_BASE_URL",
    help="Base URL of the OpenAI-compatible endpoint.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log loop progress to stderr.")
@click.pass_context
def cli(ctx: click.Context, api_key: str | None, base_url: str | None, verbose: bool) -> None:
    """agentloop: tool-calling conversations with chat completion models."""
    ctx.ensure_object(dict)
    ctx.obj["api_key"] = api_key
    ctx.obj["base_url"] = base_url
    ctx.obj["verbose"] = verbose
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def _get_agent(ctx: click.Context, model: str, **options: Any) -> Agent:
    """Build an Agent from the group-level connection options."""
    from agentloop.orchestrator import Agent

    return Agent.open(
        model,
        api_key=ctx.obj["api_key"],
        base_url=ctx.obj["base_url"],
        **options,
    )


# Register subcommands after cli group is defined
from agentloop.cli.commands.chat import chat  # noqa: E402

cli.add_command(chat)
