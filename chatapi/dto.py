"""Request and response bodies of the HTTP API."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from chatapi.entities import Chat, Message


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON literal {name}")


_DECODER = json.JSONDecoder(parse_constant=_reject_constant)


def _string_field(data: str | bytes | bytearray, name: str) -> str:
    """Decode the first JSON value of ``data`` and take its field ``name``."""
    if isinstance(data, (bytes, bytearray)):
        data = bytes(data).decode("utf-8", errors="replace")
    text = data.lstrip(" \t\r\n")
    if not text:
        raise ValueError("unexpected end of JSON input")
    try:
        document, _ = _DECODER.raw_decode(text)
    except json.JSONDecodeError as exc:
        raise ValueError(str(exc)) from exc
    if document is None:
        return ""
    if not isinstance(document, dict):
        raise ValueError("cannot decode JSON value into a request object")
    result = ""
    for key, value in document.items():
        if key.casefold() == name and value is not None:
            if not isinstance(value, str):
                raise ValueError(f"field {name!r} must be a string")
            result = value
    return result


def format_time(value: datetime | None) -> str:
    """Format ``value`` as RFC 3339 without trailing fractional zeros; naive means UTC."""
    if value is None:
        return "0001-01-01T00:00:00Z"
    text = value.replace(tzinfo=None).isoformat(timespec="seconds")
    if value.microsecond:
        text += "." + f"{value.microsecond:06d}".rstrip("0")
    offset = value.utcoffset()
    if not offset:
        return text + "Z"
    minutes = int(abs(offset) / timedelta(minutes=1))
    sign = "+" if offset > timedelta(0) else "-"
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass
class CreateChatRequest:
    title: str = ""

    @classmethod
    def from_json(cls, data: str | bytes | bytearray) -> CreateChatRequest:
        """Decode a request body; raises ValueError if it is not valid."""
        return cls(title=_string_field(data, "title"))


@dataclass
class SendMessageRequest:
    text: str = ""

    @classmethod
    def from_json(cls, data: str | bytes | bytearray) -> SendMessageRequest:
        """Decode a request body; raises ValueError if it is not valid."""
        return cls(text=_string_field(data, "text"))


@dataclass
class MessageResponse:
    id: int = 0
    chat_id: int = 0
    text: str = ""
    created_at: datetime | None = None

    @classmethod
    def from_entity(cls, msg: Message) -> MessageResponse:
        return cls(msg.id, msg.chat_id, msg.text, msg.created_at)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "chat_id": self.chat_id,
            "text": self.text,
            "created_at": format_time(self.created_at),
        }


@dataclass
class ChatResponse:
    """A chat as sent to clients; messages are left out when there are none."""

    id: int = 0
    title: str = ""
    created_at: datetime | None = None
    messages: list[MessageResponse] = field(default_factory=list)

    @classmethod
    def from_entity(cls, chat: Chat) -> ChatResponse:
        messages = [MessageResponse.from_entity(msg) for msg in chat.messages]
        return cls(chat.id, chat.title, chat.created_at, messages)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "created_at": format_time(self.created_at),
        }
        if self.messages:
            body["messages"] = [msg.to_dict() for msg in self.messages]
        return body