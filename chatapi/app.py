"""Application entry point."""

from __future__ import annotations

import argparse
import logging
import signal
import threading

from flask import Flask
from sqlalchemy.engine import Engine

from chatapi.config import Config, load_config
from chatapi.db import new_postgres
from chatapi.handlers import Handler, new_router
from chatapi.repository import Repository
from chatapi.server import Server
from chatapi.service import Service

log = logging.getLogger("chatapi")


def build_app(cfg: Config, engine: Engine | None = None) -> Flask:
    """Wire repositories, services and handlers into a WSGI application."""
    if engine is None:
        engine = new_postgres(cfg.db)
    return new_router(Handler(Service(Repository(engine))))


def main(argv: list[str] | None = None) -> int:
    """Run the chat API server until SIGINT or SIGTERM."""
    parser = argparse.ArgumentParser(prog="chatapi")
    parser.add_argument("--config", default="config/config.yaml")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")

    try:
        cfg = load_config(args.config)
        print(cfg)
        engine = new_postgres(cfg.db)
        server = Server(cfg.http, build_app(cfg, engine))
    except (OSError, ValueError) as exc:
        log.error("%s", exc)
        return 1

    stop = threading.Event()

    def serve() -> None:
        try:
            server.run()
        except Exception:
            log.exception("server error")
            stop.set()

    previous = {sig: signal.signal(sig, lambda *_: stop.set()) for sig in (signal.SIGTERM, signal.SIGINT)}
    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    log.info("server started")
    try:
        while not stop.wait(0.5):
            pass
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)
        server.shutdown()
        thread.join()
        engine.dispose()
    return 0