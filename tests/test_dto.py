from datetime import datetime, timedelta, timezone

import pytest

from chatapi.dto import (
    ChatResponse,
    CreateChatRequest,
    MessageResponse,
    SendMessageRequest,
)
from chatapi.entities import Chat, Message


def test_create_chat_request_reads_title():
    assert CreateChatRequest.from_json('{"title": "room"}').title == "room"


def test_create_chat_request_accepts_bytes():
    assert CreateChatRequest.from_json(b'{"title": "room"}').title == "room"


def test_keys_match_case_insensitively():
    assert CreateChatRequest.from_json('{"TITLE": "room"}').title == "room"


def test_unknown_fields_are_ignored():
    assert SendMessageRequest.from_json('{"text": "hi", "extra": [1, 2]}').text == "hi"


def test_null_body_gives_empty_request():
    assert SendMessageRequest.from_json("null").text == ""


def test_null_field_leaves_default():
    assert CreateChatRequest.from_json('{"title": null}').title == ""


def test_data_after_first_value_is_ignored():
    assert SendMessageRequest.from_json('{"text": "hi"} trailing').text == "hi"


@pytest.mark.parametrize(
    "body",
    ["", "   ", "not json", '{"title": 5}', "[1]", '"room"', '{"title": "x"', "NaN"],
)
def test_invalid_bodies_raise(body):
    with pytest.raises(ValueError):
        CreateChatRequest.from_json(body)


def test_message_response_utc_format():
    created = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    body = MessageResponse(id=1, chat_id=2, text="hi", created_at=created).to_dict()
    assert body == {"id": 1, "chat_id": 2, "text": "hi", "created_at": "2024-01-02T03:04:05Z"}


def test_fraction_drops_trailing_zeros():
    created = datetime(2024, 1, 2, 3, 4, 5, 120000)
    assert MessageResponse(created_at=created).to_dict()["created_at"].endswith(":05.12Z")


def test_offset_round_trips():
    created = datetime(2024, 1, 2, 3, 4, 5, 250, tzinfo=timezone(timedelta(hours=3)))
    text = MessageResponse(created_at=created).to_dict()["created_at"]
    assert datetime.fromisoformat(text) == created


def test_missing_time_is_zero_time():
    assert ChatResponse().to_dict()["created_at"] == "0001-01-01T00:00:00Z"


def test_chat_response_omits_empty_messages():
    body = ChatResponse.from_entity(Chat(id=3, title="room")).to_dict()
    assert list(body) == ["id", "title", "created_at"]


def test_chat_response_includes_messages_in_order():
    chat = Chat(
        id=3,
        title="room",
        messages=[Message(id=9, chat_id=3, text="b"), Message(id=8, chat_id=3, text="a")],
    )
    body = ChatResponse.from_entity(chat).to_dict()
    assert list(body) == ["id", "title", "created_at", "messages"]
    assert [m["id"] for m in body["messages"]] == [9, 8]
    assert body["messages"][0]["chat_id"] == 3


def test_message_response_from_entity_round_trip():
    msg = Message(id=4, chat_id=5, text="hey", created_at=datetime(2024, 1, 1))
    resp = MessageResponse.from_entity(msg)
    assert (resp.id, resp.chat_id, resp.text, resp.created_at) == (
        msg.id,
        msg.chat_id,
        msg.text,
        msg.created_at,
    )