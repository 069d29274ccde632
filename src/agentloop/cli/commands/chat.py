"""agentloop chat -- send a prompt and stream the model's replies."""

from __future__ import annotations

import json
from pathlib import Path

import click

from agentloop.cli.formatting import (
    format_content,
    format_error,
    format_iteration,
    format_usage,
    get_console,
)
from agentloop.context import RunContext
from agentloop.exceptions import MessageValidationError
from agentloop.messages import (
    File,
    Image,
    parse_message,
    user_file_message,
    user_image_message,
    user_text_message,
)
from agentloop.orchestrator.config import DEFAULT_MAX_ITERATIONS

_existing_file = click.Path(exists=True, dir_okay=False, path_type=Path)


def _load_history(path: Path) -> list:
    """Load a JSON list of message objects (``{"role", "text"}`` etc.)."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise ValueError("expected a JSON list of messages")
        return [parse_message(item) for item in data]
    except (ValueError, MessageValidationError) as exc:
        raise click.BadParameter(str(exc), param_hint="--history") from exc


@click.command()
@click.argument("prompt", required=False)
@click.option("--model", envvar="AGENTLOOP_MODEL", default="gpt-4o-mini", show_default=True)
@click.option("--system", "system_prompt", default="", help="System prompt.")
@click.option("--instructions", default="", help="Standing instructions (first user turn).")
@click.option(
    "--max-iterations",
    type=click.IntRange(min=0),
    default=DEFAULT_MAX_ITERATIONS,
    show_default=True,
)
@click.option("--image", "images", multiple=True, type=_existing_file, help="Attach an image.")
@click.option("--file", "files", multiple=True, type=_existing_file, help="Attach a file.")
@click.option("--history", type=_existing_file, default=None, help="JSON conversation to prepend.")
@click.option("--timeout", type=float, default=None, help="Deadline for the whole run, in seconds.")
@click.option("--usage/--no-usage", "show_usage", default=True, help="Print the token summary.")
@click.pass_context
def chat(
    ctx: click.Context,
    prompt: str | None,
    model: str,
    system_prompt: str,
    instructions: str,
    max_iterations: int,
    images: tuple[Path, ...],
    files: tuple[Path, ...],
    history: Path | None,
    timeout: float | None,
    show_usage: bool,
) -> None:
    """Send PROMPT (plus any attachments) and print each reply as it arrives."""
    from agentloop.cli import _get_agent

    console = get_console()

    messages = _load_history(history) if history is not None else []
    messages += [user_image_message(Image(data=p.read_bytes(), name=p.name)) for p in images]
    messages += [user_file_message(File(data=p.read_bytes(), name=p.name)) for p in files]
    if prompt:
        messages.append(user_text_message(prompt))
    if not messages:
        raise click.UsageError("Nothing to send: give a PROMPT, --history or attachments.")

    try:
        agent = _get_agent(
            ctx,
            model,
            system_prompt=system_prompt,
            instructions=instructions,
            max_iterations=max_iterations,
        )
        run_ctx = RunContext(timeout=timeout)
        try:
            with agent.stream_chat_completion(messages, ctx=run_ctx) as stream:
                for event in stream:
                    if event.is_usage() and ctx.obj["verbose"]:
                        format_iteration(stream.iterations, event.usage, console)
                    elif event.is_content():
                        format_content(event.content, console)
                    elif event.is_error():
                        format_error(str(event.error), console)
                        raise SystemExit(1)
        finally:
            agent.close()
        if show_usage:
            format_usage(stream.usage, stream.iterations, stream.stop_reason, console)
    except SystemExit:
        raise
    except Exception as e:
        format_error(str(e), console)
        raise SystemExit(1) from None
