import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import StaticPool

from chatapi.entities import Chat, Message
from chatapi.models import Base
from chatapi.repository import (
    ChatNotFoundError,
    ChatRepository,
    MessageRepository,
    Repository,
)


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def chats(engine):
    return ChatRepository(engine)


@pytest.fixture
def messages(engine):
    return MessageRepository(engine)


def test_create_chat_assigns_id_and_timestamp(chats):
    created = chats.create(Chat(title="general"))
    assert created.id >= 1
    assert created.title == "general"
    assert created.created_at is not None
    assert created.messages == []


def test_get_by_id_round_trip(chats):
    created = chats.create(Chat(title="random"))
    assert chats.get_by_id(created.id) == created


def test_get_missing_chat(chats):
    with pytest.raises(ChatNotFoundError, match="chat not found"):
        chats.get_by_id(999)


def test_delete_chat(chats):
    created = chats.create(Chat(title="temp"))
    chats.delete(created.id)
    with pytest.raises(ChatNotFoundError):
        chats.get_by_id(created.id)


def test_delete_missing_chat(chats):
    with pytest.raises(ChatNotFoundError):
        chats.delete(12345)


def test_create_message(chats, messages):
    chat = chats.create(Chat(title="room"))
    msg = messages.create(Message(chat_id=chat.id, text="hello"))
    assert msg.id >= 1
    assert (msg.chat_id, msg.text) == (chat.id, "hello")
    assert msg.created_at is not None


def test_create_message_too_long(messages):
    with pytest.raises(IntegrityError):
        messages.create(Message(chat_id=1, text="x" * 5001))


def test_last_messages_newest_first_and_limited(chats, messages):
    chat = chats.create(Chat(title="room"))
    for text in ("first", "second", "third"):
        messages.create(Message(chat_id=chat.id, text=text))
    last = messages.get_last_by_chat_id(chat.id, 2)
    assert [m.text for m in last] == ["third", "second"]


def test_last_messages_filters_by_chat(chats, messages):
    one = chats.create(Chat(title="one"))
    two = chats.create(Chat(title="two"))
    messages.create(Message(chat_id=one.id, text="a"))
    messages.create(Message(chat_id=two.id, text="b"))
    result = messages.get_last_by_chat_id(one.id, 10)
    assert [m.text for m in result] == ["a"]
    assert all(m.chat_id == one.id for m in result)


def test_zero_limit_and_negative_limit(chats, messages):
    chat = chats.create(Chat(title="room"))
    for text in ("a", "b", "c"):
        messages.create(Message(chat_id=chat.id, text=text))
    assert messages.get_last_by_chat_id(chat.id, 0) == []
    assert len(messages.get_last_by_chat_id(chat.id, -1)) == 3


def test_repository_shares_engine(engine):
    repo = Repository(engine)
    chat = repo.chats.create(Chat(title="shared"))
    repo.messages.create(Message(chat_id=chat.id, text="hi"))
    assert [m.text for m in repo.messages.get_last_by_chat_id(chat.id, 5)] == ["hi"]
    assert repo.chats.get_by_id(chat.id).title == "shared"