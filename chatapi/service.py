"""Business rules for chats and messages."""

from __future__ import annotations

from chatapi import repository
from chatapi.entities import Chat, Message

MAX_TITLE_BYTES = 200
MAX_MESSAGE_BYTES = 5000


class ServiceError(Exception):
    """Base class of the errors the service layer raises."""

    default_message = "service error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class EmptyTitleError(ServiceError, ValueError):
    """The chat title is blank."""

    default_message = "chat title is empty"


class TitleTooLongError(ServiceError, ValueError):
    """The chat title is longer than allowed."""

    default_message = "chat title exceeds 200 characters"


class ChatNotFoundError(ServiceError, LookupError):
    """The chat does not exist."""

    default_message = "chat not found"


class EmptyMessageError(ServiceError, ValueError):
    """The message text is empty."""

    default_message = "message is empty"


class MessageTooLongError(ServiceError, ValueError):
    """The message text is longer than allowed."""

    default_message = "message exceeds 5000 characters"


def _byte_length(text: str) -> int:
    return len(text.encode("utf-8"))


class ChatService:
    """Creates, reads and deletes chats."""

    def __init__(
        self,
        chat_repo: repository.ChatRepository,
        msg_repo: repository.MessageRepository,
    ) -> None:
        self._chats = chat_repo
        self._messages = msg_repo

    def create_chat(self, title: str) -> Chat:
        """Create a chat with the trimmed ``title``."""
        title = title.strip()
        if not title:
            raise EmptyTitleError()
        if _byte_length(title) > MAX_TITLE_BYTES:
            raise TitleTooLongError()
        return self._chats.create(Chat(title=title))

    def get_by_id(self, chat_id: int, limit: int) -> Chat:
        """Return a chat with up to ``limit`` of its newest messages."""
        try:
            chat = self._chats.get_by_id(chat_id)
        except repository.ChatNotFoundError as exc:
            raise ChatNotFoundError() from exc
        chat.messages = self._messages.get_last_by_chat_id(chat_id, limit)
        return chat

    def delete(self, chat_id: int) -> None:
        """Delete the chat with ``chat_id``."""
        try:
            self._chats.delete(chat_id)
        except repository.ChatNotFoundError as exc:
            raise ChatNotFoundError() from exc


class MessageService:
    """Posts messages to chats."""

    def __init__(self, msg_repo: repository.MessageRepository) -> None:
        self._messages = msg_repo

    def send(self, chat_id: int, text: str) -> Message:
        """Store ``text`` as a new message of chat ``chat_id``."""
        if text == "":
            raise EmptyMessageError()
        if _byte_length(text) > MAX_MESSAGE_BYTES:
            raise MessageTooLongError()
        try:
            return self._messages.create(Message(chat_id=chat_id, text=text))
        except repository.ChatNotFoundError as exc:
            raise ChatNotFoundError() from exc


class Service:
    """All services built over one repository set."""

    def __init__(self, repo: repository.Repository) -> None:
        self.chats = ChatService(repo.chats, repo.messages)
        self.messages = MessageService(repo.messages)