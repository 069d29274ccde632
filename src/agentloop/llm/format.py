"""Conversion of agentloop types to the OpenAI chat wire format."""

from __future__ import annotations

import base64
import logging
import mimetypes
from typing import TYPE_CHECKING

from agentloop.messages import MessageKind, Role

if TYPE_CHECKING:
    from collections.abc import Sequence

    from agentloop.messages import Message
    from agentloop.toolkit.models import Parameters

logger = logging.getLogger(__name__)

_DEFAULT_IMAGE_MIME = "image/png"


def _image_mime(name: str) -> str:
    mime, _ = mimetypes.guess_type(name) if name else (None, None)
    if mime is None or not mime.startswith("image/"):
        return _DEFAULT_IMAGE_MIME
    return mime


def convert_message(msg: Message) -> dict:
    """Convert one message to a wire-format turn.

    System and assistant messages become plain text turns. User messages
    become text, file or image turns depending on their kind. Anything else
    falls back to a user text turn.
    """
    if msg.role == Role.SYSTEM:
        return {"role": "system", "content": msg.text}
    if msg.role == Role.ASSISTANT:
        return {"role": "assistant", "content": msg.text}
    if msg.role == Role.USER:
        if msg.kind == MessageKind.FILE:
            return {
                "role": "user",
                "content": [
                    {
                        "type": "file",
                        "file": {
                            "file_data": base64.b64encode(msg.file.data).decode("ascii"),
                            "filename": msg.file.name,
                        },
                    }
                ],
            }
        if msg.kind == MessageKind.IMAGE:
            encoded = base64.b64encode(msg.image.data).decode("ascii")
            return {
                "role": "user",
                "content": [
                    {
                        "type": "image_url",
                        "image_url": {
                            "url": f"data:{_image_mime(msg.image.name)};base64,{encoded}",
                        },
                    }
                ],
            }
    return {"role": "user", "content": msg.text}


def convert_messages(messages: Sequence[Message]) -> list[dict]:
    """Convert caller messages to wire-format turns, preserving order."""
    return [convert_message(m) for m in messages]


def build_messages(
    messages: Sequence[Message],
    *,
    system_prompt: str = "",
    instructions: str = "",
) -> list[dict]:
    """Seed a conversation history.

    The system prompt (if any) goes first as a system turn, followed by the
    standing instructions (if any) as a user turn, then the caller messages.
    """
    history: list[dict] = []
    if system_prompt:
        history.append({"role": "system", "content": system_prompt})
    if instructions:
        history.append({"role": "user", "content": instructions})
    history.extend(convert_messages(messages))
    return history


def convert_parameters(parameters: Parameters) -> dict:
    """Render a tool's parameters as a JSON Schema object."""
    return parameters.to_schema()


def tool_result_turn(call_id: str, content: str) -> dict:
    """Build the tool-result turn answering the call ``call_id``."""
    return {"role": "tool", "tool_call_id": call_id, "content": content}
