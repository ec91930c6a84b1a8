"""Persistence of chats and messages."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from chatapi.entities import Chat, Message
from chatapi.models import ChatModel, MessageModel


class ChatNotFoundError(LookupError):
    """Raised when a chat does not exist."""

    def __init__(self, message: str = "chat not found") -> None:
        super().__init__(message)


def _to_chat(model: ChatModel) -> Chat:
    return Chat(id=model.id, title=model.title, created_at=model.created_at)


def _to_message(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        chat_id=model.chat_id,
        text=model.text,
        created_at=model.created_at,
    )


class ChatRepository:
    """Stores and loads chats."""

    def __init__(self, engine: Engine) -> None:
        self._sessions = sessionmaker(bind=engine, expire_on_commit=False)

    def create(self, chat: Chat) -> Chat:
        """Insert ``chat`` and return it as stored."""
        with self._sessions.begin() as session:
            model = ChatModel(title=chat.title)
            session.add(model)
            session.flush()
            session.refresh(model)
            return _to_chat(model)

    def get_by_id(self, chat_id: int) -> Chat:
        """Return the chat with ``chat_id``, without messages."""
        with self._sessions() as session:
            model = session.get(ChatModel, chat_id)
            if model is None:
                raise ChatNotFoundError()
            return _to_chat(model)

    def delete(self, chat_id: int) -> None:
        """Delete the chat with ``chat_id``."""
        with self._sessions.begin() as session:
            result = session.execute(delete(ChatModel).where(ChatModel.id == chat_id))
            if result.rowcount == 0:
                raise ChatNotFoundError()


class MessageRepository:
    """Stores and loads messages."""

    def __init__(self, engine: Engine) -> None:
        self._sessions = sessionmaker(bind=engine, expire_on_commit=False)

    def create(self, msg: Message) -> Message:
        """Insert ``msg`` and return it as stored."""
        with self._sessions.begin() as session:
            model = MessageModel(chat_id=msg.chat_id, text=msg.text)
            session.add(model)
            session.flush()
            session.refresh(model)
            return _to_message(model)

    def get_last_by_chat_id(self, chat_id: int, limit: int) -> list[Message]:
        """Return up to ``limit`` newest messages of a chat, newest first.

        A negative ``limit`` returns all of them.
        """
        query = (
            select(MessageModel)
            .where(MessageModel.chat_id == chat_id)
            .order_by(MessageModel.created_at.desc(), MessageModel.id.desc())
        )
        if limit >= 0:
            query = query.limit(limit)
        with self._sessions() as session:
            return [_to_message(model) for model in session.scalars(query)]


class Repository:
    """All repositories sharing one engine."""

    def __init__(self, engine: Engine) -> None:
        self.chats = ChatRepository(engine)
        self.messages = MessageRepository(engine)