"""Domain objects handled by the service layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(kw_only=True)
class Message:
    id: int = 0
    chat_id: int = 0
    text: str = ""
    created_at: datetime | None = None


@dataclass(kw_only=True)
class Chat:
    id: int = 0
    title: str = ""
    created_at: datetime | None = None
    messages: list[Message] = field(default_factory=list)