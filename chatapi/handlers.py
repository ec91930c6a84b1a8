"""HTTP handlers and routing of the chat API."""

from __future__ import annotations

import json
import re
from typing import Any

from flask import Flask, Response, request
from werkzeug.routing import BaseConverter

from chatapi.dto import ChatResponse, CreateChatRequest, MessageResponse, SendMessageRequest
from chatapi.service import (
    ChatNotFoundError,
    ChatService,
    EmptyMessageError,
    EmptyTitleError,
    MessageService,
    MessageTooLongError,
    Service,
    TitleTooLongError,
)

DEFAULT_LIMIT = 20
MAX_LIMIT = 100

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_HTML_ESCAPES = (
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("&", "\\u0026"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)


def _atoi(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"invalid integer {text!r}")
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"integer out of range {text!r}")
    return value


def _error(message: str, status: int) -> Response:
    return Response(
        message + "\n",
        status=status,
        content_type="text/plain; charset=utf-8",
        headers={"X-Content-Type-Options": "nosniff"},
    )


def _json(payload: Any) -> Response:
    body = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    for char, escape in _HTML_ESCAPES:
        body = body.replace(char, escape)
    return Response(body + "\n", status=200, content_type="application/json")


class ChatHandler:
    """Endpoints that create, read and delete chats."""

    def __init__(self, svc: ChatService) -> None:
        self._svc = svc

    def create_chat(self) -> Response:
        try:
            req = CreateChatRequest.from_json(request.get_data())
        except ValueError:
            return _error("invalid json", 400)

        try:
            chat = self._svc.create_chat(req.title)
        except (EmptyTitleError, TitleTooLongError) as exc:
            return _error(str(exc), 400)
        except Exception:
            return _error("internal error", 500)

        return _json(ChatResponse(id=chat.id, title=chat.title, created_at=chat.created_at).to_dict())

    def get_chat_by_id(self, chat_id: str) -> Response:
        try:
            ident = _atoi(chat_id)
        except ValueError:
            return _error("invalid chat id", 400)

        limit_text = request.args.get("limit", "")
        if limit_text == "":
            limit = DEFAULT_LIMIT
        else:
            try:
                limit = _atoi(limit_text)
            except ValueError:
                return _error("invalid limit", 400)
            if limit < 0 or limit > MAX_LIMIT:
                limit = DEFAULT_LIMIT

        try:
            chat = self._svc.get_by_id(ident, limit)
        except ChatNotFoundError as exc:
            return _error(str(exc), 404)
        except Exception:
            return _error("internal error", 500)

        return _json(ChatResponse.from_entity(chat).to_dict())

    def delete(self, chat_id: str) -> Response:
        try:
            ident = _atoi(chat_id)
        except ValueError:
            return _error("invalid chat id", 400)

        try:
            self._svc.delete(ident)
        except ChatNotFoundError as exc:
            return _error(str(exc), 404)
        except Exception:
            return _error("internal error", 500)

        return Response(status=204)


class MessageHandler:
    """Endpoint that posts messages."""

    def __init__(self, svc: MessageService) -> None:
        self._svc = svc

    def send_message(self, chat_id: str) -> Response:
        try:
            ident = _atoi(chat_id)
        except ValueError:
            return _error("invalid chat id", 400)

        try:
            req = SendMessageRequest.from_json(request.get_data())
        except ValueError:
            return _error("invalid json", 400)

        try:
            msg = self._svc.send(ident, req.text)
        except (EmptyMessageError, MessageTooLongError) as exc:
            return _error(str(exc), 400)
        except ChatNotFoundError as exc:
            return _error(str(exc), 404)
        except Exception:
            return _error("internal error", 500)

        return _json(MessageResponse.from_entity(msg).to_dict())


class Handler:
    """All HTTP handlers built over one service set."""

    def __init__(self, svc: Service) -> None:
        self.chat = ChatHandler(svc.chats)
        self.message = MessageHandler(svc.messages)


class _DigitsConverter(BaseConverter):
    regex = "[0-9]+"


def _not_found(_: Exception) -> Response:
    return _error("404 page not found", 404)


def _method_not_allowed(_: Exception) -> Response:
    return Response(status=405)


def new_router(handler: Handler) -> Flask:
    """Build the WSGI application routing requests to ``handler``."""
    app = Flask("chatapi")
    app.url_map.converters["digits"] = _DigitsConverter

    app.add_url_rule("/chats/", "create_chat", handler.chat.create_chat, methods=["POST"])
    app.add_url_rule(
        "/chats/<digits:chat_id>", "get_chat", handler.chat.get_chat_by_id, methods=["GET"]
    )
    app.add_url_rule(
        "/chats/<digits:chat_id>", "delete_chat", handler.chat.delete, methods=["DELETE"]
    )
    app.add_url_rule(
        "/chats/<digits:chat_id>/messages/",
        "send_message",
        handler.message.send_message,
        methods=["POST"],
    )

    app.register_error_handler(404, _not_found)
    app.register_error_handler(405, _method_not_allowed)
    return app