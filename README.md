# chatapi

A small HTTP JSON API for creating chats, posting messages to them and reading
back a chat with its most recent messages. Data is stored in PostgreSQL through
SQLAlchemy, and requests are served by a Flask application.

## Installation

```
pip install .
```

Install the test dependencies with `pip install .[test]`.

The package does not install a PostgreSQL driver. The engine is created from a
`postgresql://` URL, so SQLAlchemy's default PostgreSQL driver (psycopg2) must
be installed separately. Without it the server does not start: it reports
`failed to connect to db` and exits.

## Configuration

By default the server reads `config/config.yaml` relative to the working
directory. Another file can be given with `--config`. The file must end in
`.yaml`, `.yml` or `.json`.

```yaml
http:
  port: "8080"
  read_timeout: 5s
  write_timeout: 10s
  idle_timeout: 60s
  shutdown_timeout: 5s

db:
  host: localhost
  port: "5432"
  sslmode: disable
  max_open_conns: 10
  max_idle_conns: 5
  conn_max_lifetime: 30m
```

Durations are strings such as `500ms`, `5s`, `1m30s` or `2h` (units `ns`, `us`,
`ms`, `s`, `m`, `h`); a bare integer is taken as nanoseconds. Missing keys keep
their zero values. `http.port` may be a number or a service name; an empty port
makes the server pick a free one.

Of the HTTP timeouts, only `read_timeout` is applied (as the per-connection
socket timeout). `write_timeout`, `idle_timeout` and `shutdown_timeout` are read
but not used.

The database name and credentials are taken from the environment. When set,
these variables override any `db.name`, `db.user` or `db.password` in the file:

| Variable      | Meaning           |
|---------------|-------------------|
| `DB_NAME`     | database name     |
| `DB_USER`     | database user     |
| `DB_PASSWORD` | database password |

## Database tables

The server does not create its tables. Create the `chats` and `messages` tables
once, for example from the package's models:

```python
from chatapi.config import load_config
from chatapi.db import new_postgres
from chatapi.models import Base

engine = new_postgres(load_config("config/config.yaml").db)
Base.metadata.create_all(engine)
```

## Running

```
chatapi
chatapi --config path/to/config.yaml
```

The command prints the loaded configuration, connects to the database and
listens on all interfaces at the configured port. It stops on SIGINT or
SIGTERM. If the configuration cannot be read or the database cannot be reached,
it logs the error and exits with status 1.

## API

| Method | Path                    | Body               | Result                                |
|--------|-------------------------|--------------------|---------------------------------------|
| POST   | `/chats/`               | `{"title": "..."}` | the created chat                      |
| GET    | `/chats/{id}?limit=N`   |                    | the chat with its latest `N` messages |
| DELETE | `/chats/{id}`           |                    | `204 No Content`                      |
| POST   | `/chats/{id}/messages/` | `{"text": "..."}`  | the created message                   |

Rules:

- A request body that is not valid JSON gives `400 invalid json`.
- A chat title is trimmed of surrounding whitespace. It must not be empty and
  must be at most 200 bytes long in UTF-8. Otherwise the response is `400`.
- A message text must not be empty and must be at most 5000 bytes long in
  UTF-8. Otherwise the response is `400`. The text is not trimmed.
- `limit` defaults to 20. A value below 0 or above 100 falls back to 20. A value
  that is not an integer gives `400 invalid limit`.
- Messages come back newest first. The `messages` key is left out when the chat
  has none.
- Reading or deleting an unknown chat gives `404 chat not found`.
- Times are RFC 3339 strings in UTC.
- Unknown paths give `404 page not found`; a known path with the wrong method
  gives an empty `405`.

Limits worth knowing:

- Posting a message does not check that the chat exists; the message is stored
  under the given chat id either way.
- Deleting a chat does not delete its messages.

Example:

```
$ curl -X POST localhost:8080/chats/ -d '{"title": "general"}'
{"id":1,"title":"general","created_at":"2024-01-01T12:00:00Z"}

$ curl -X POST localhost:8080/chats/1/messages/ -d '{"text": "hello"}'
{"id":1,"chat_id":1,"text":"hello","created_at":"2024-01-01T12:00:05Z"}

$ curl 'localhost:8080/chats/1?limit=10'
{"id":1,"title":"general","created_at":"2024-01-01T12:00:00Z","messages":[{"id":1,"chat_id":1,"text":"hello","created_at":"2024-01-01T12:00:05Z"}]}
```

## Using it as a library

- `chatapi.config.load_config(path)` reads a configuration file into a `Config`
  holding `http` (`HTTPConfig`) and `db` (`DBConfig`).
  `chatapi.config.parse_duration(value)` turns a duration string into a
  `timedelta`.
- `chatapi.db.new_postgres(cfg.db)` creates a SQLAlchemy engine and checks that
  the database answers; `chatapi.db.build_dsn(cfg.db)` returns the connection
  string it uses.
- `chatapi.app.build_app(cfg, engine)` wires repositories, services and
  handlers into a Flask application. Any SQLAlchemy engine works, which makes it
  easy to test with Flask's test client.
- `chatapi.server.Server(cfg.http, app)` serves a WSGI application;
  `run()` blocks until `shutdown()` is called, and `port` tells the bound port.
- `chatapi.service.Service` offers `chats.create_chat`, `chats.get_by_id`,
  `chats.delete` and `messages.send`, raising `EmptyTitleError`,
  `TitleTooLongError`, `ChatNotFoundError`, `EmptyMessageError` or
  `MessageTooLongError` (all `ServiceError`) on bad input.