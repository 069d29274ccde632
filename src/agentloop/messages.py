"""Message model for conversation input.

Defines the three message variants as frozen Pydantic models joined in a
discriminated union (Message) keyed on ``kind``. Every variant answers the
``text``, ``file`` and ``image`` accessors; asking for a payload the variant
does not carry returns the zero value instead of failing.

Content correctness (valid image bytes, sensible file names) is the
caller's responsibility.
"""

from __future__ import annotations

import enum
from typing import Annotated, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from agentloop.exceptions import MessageValidationError


class Role(str, enum.Enum):
    """Author of a conversation turn."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class MessageKind(str, enum.Enum):
    """Payload kind carried by a message."""

    TEXT = "text"
    FILE = "file"
    IMAGE = "image"


# ---------------------------------------------------------------------------
# Binary payloads
# ---------------------------------------------------------------------------


class File(BaseModel):
    """A named binary attachment."""

    model_config = ConfigDict(frozen=True)

    data: bytes = b""
    name: str = ""


class Image(BaseModel):
    """A named image. The MIME type is inferred from ``name`` when sent."""

    model_config = ConfigDict(frozen=True)

    data: bytes = b""
    name: str = ""


# ---------------------------------------------------------------------------
# Message variants
# ---------------------------------------------------------------------------


def _require_user(role: Role) -> Role:
    if role != Role.USER:
        raise ValueError(f"binary payloads are only sent by the user, not {role.value}")
    return role


class TextMessage(BaseModel):
    """A plain text turn from any role."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[MessageKind.TEXT] = MessageKind.TEXT
    role: Role
    text: str

    @property
    def file(self) -> File:
        return File()

    @property
    def image(self) -> Image:
        return Image()


class FileMessage(BaseModel):
    """A user turn carrying a file attachment."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[MessageKind.FILE] = MessageKind.FILE
    role: Role = Role.USER
    file: File

    @field_validator("role")
    @classmethod
    def check_role(cls, role: Role) -> Role:
        return _require_user(role)

    @property
    def text(self) -> str:
        return ""

    @property
    def image(self) -> Image:
        return Image()


class ImageMessage(BaseModel):
    """A user turn carrying an image."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[MessageKind.IMAGE] = MessageKind.IMAGE
    role: Role = Role.USER
    image: Image

    @field_validator("role")
    @classmethod
    def check_role(cls, role: Role) -> Role:
        return _require_user(role)

    @property
    def text(self) -> str:
        return ""

    @property
    def file(self) -> File:
        return File()


Message = Annotated[
    Union[TextMessage, FileMessage, ImageMessage],
    Field(discriminator="kind"),
]

_message_adapter = TypeAdapter(Message)


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------


def system_message(text: str) -> TextMessage:
    return TextMessage(role=Role.SYSTEM, text=text)


def user_text_message(text: str) -> TextMessage:
    return TextMessage(role=Role.USER, text=text)


def assistant_text_message(text: str) -> TextMessage:
    return TextMessage(role=Role.ASSISTANT, text=text)


def user_file_message(file: File) -> FileMessage:
    return FileMessage(file=file)


def user_image_message(image: Image) -> ImageMessage:
    return ImageMessage(image=image)


def parse_message(data: dict) -> TextMessage | FileMessage | ImageMessage:
    """Validate a dict into the matching message variant.

    Text messages default to the user role when ``role`` is omitted.
    Binary payload ``data`` may be given as bytes or as a str.

    Raises:
        MessageValidationError: If the data matches no variant.
    """
    if isinstance(data, dict) and data.get("kind", "text") == "text":
        data = {"kind": "text", "role": "user", **data}
    try:
        return _message_adapter.validate_python(data)
    except ValidationError as exc:
        raise MessageValidationError(f"Invalid message: {exc}") from exc
