# wtracker

`wtracker` is a small error tracking client. It captures exceptions and messages. Each one is
captured with a stack trace, the user, breadcrumbs and custom context. It then posts them as JSON to
an ingest endpoint. Each send runs in its own background thread. `flush()` waits until every pending
send has finished.

The package uses only the standard library.

## Quick start

```python
from wtracker import tracker
from wtracker.types import Breadcrumb, Config, Level, UserContext

tracker.init(Config(api_key="placeholder", environment="staging", release="1.4.2"))

tracker.set_user(UserContext(id="u1", email="alice@example.com", name="Alice"))
tracker.with_context("requestId", "req-123")
tracker.add_breadcrumb(Breadcrumb(message="clicked button", category="ui"))

try:
    1 / 0
except ZeroDivisionError as exc:
    tracker.capture_error(exc, {"job": "nightly"})

tracker.capture_message("cache warmed", Level.INFO)

tracker.flush(timeout=2.0)
```

Until `init()` has been called, the functions in `wtracker.tracker` do nothing: no payload is
built and no send is made. Calling `init()` again replaces the client. `reset()` drops the client.
`get_client()` returns the current `Client`, or `None` before `init()` has been called.

## Modules

- `wtracker.tracker` holds one process-wide client behind module-level functions. These are
  `init`, `init_with_endpoint`, `get_client`, `capture_error`, `capture_message`, `set_user`,
  `add_breadcrumb`, `with_context`, `recover`, `flush` and `reset`.
- `wtracker.client` holds `Client`, which you can also use directly without the global one.
- `wtracker.types` holds the payload types, `Config` and `Level`.
- `wtracker.stack` has three functions. `capture_stack(skip)` and `frames_from_traceback(tb)` turn
  the live stack or a traceback into `StackFrame` lists, innermost first. Standard-library frames
  are left out of both. `is_stdlib_file(path)` tells whether a path is one of those frames.
- `wtracker.osinfo` has `os_name()`, which returns the lower-case `platform.system()`. It also has
  `os_version()`, which returns the output of `uname -r`. On Windows, or when the command fails,
  `os_version()` returns `""`.
- `wtracker.middleware` has the WSGI middleware (see below).

## Configuration

`Config` is a frozen dataclass with these fields:

| Field         | Meaning                                    | Default                     |
|---------------|--------------------------------------------|-----------------------------|
| `api_key`     | Key sent with every payload (required)     | —                           |
| `environment` | Environment name                           | `""`, sent as `"production"` |
| `release`     | Version tag or commit hash                 | `""` (omitted from payload) |
| `debug`       | Print `[tracker] ...` lines to stdout      | `False`                     |

`tracker.init_with_endpoint(config, endpoint)` posts payloads to a URL you choose instead of the
built-in default. `Client(config, endpoint)` does the same. This is useful in tests that run a
local HTTP server.

## Levels

`Level` is a string enum with three members: `Level.INFO` (`"info"`), `Level.WARN` (`"warn"`)
and `Level.ERROR` (`"error"`). A message captured with `capture_message("hello", Level.WARN)` has
the error type `Message[warn]`.

## Capturing exceptions from a block

`tracker.recover()` is a context manager. It reports any `Exception` raised inside the block and
then raises it again, so the program still fails as it normally would. The stack is taken from the
exception's traceback.

```python
with tracker.recover():
    risky()
```

## Breadcrumbs, user and context

- Only the last 20 breadcrumbs are kept. A breadcrumb without a timestamp gets the current UTC
  time, in the form `2024-01-31T12:00:00Z`.
- `with_context(key, value)` adds to the `custom` context of every later payload. Extra context
  passed to `capture_error` is merged on top, for that one payload only.
- `set_user(None)` clears the user.

## Flushing

`flush(timeout=None)` waits for every send that is still in flight. With a timeout, it raises
`TimeoutError` if sends are still pending when the timeout runs out. A failed delivery never
raises in your code: connection errors and HTTP error statuses are only printed when `debug` is on.

## WSGI middleware

`TrackerMiddleware` wraps any WSGI application. It reports exceptions raised by the application,
then raises them again. The payload's custom context holds three values:

- `method`, taken from `REQUEST_METHOD`
- `path`, which is `SCRIPT_NAME` followed by `PATH_INFO`
- `status`, which is 500

Handlers can also report an error without raising it, through `record_error(environ, error)`. Once
the response has been fully iterated, the middleware reports the last recorded error. Its `status`
is the one passed to `start_response`, or 200 if `start_response` was never called.

```python
from wtracker.middleware import TrackerMiddleware, record_error

def app(environ, start_response):
    record_error(environ, LookupError("named cookie not present"))
    start_response("500 Internal Server Error", [("Content-Type", "text/plain")])
    return [b"failed"]

application = TrackerMiddleware(app)
```

## Payload

Each payload is an `ErrorPayload` and is posted as compact JSON. It holds:

- `id` and `sessionId`. Both are random UUIDs; the session id is fixed for each client.
- `apiKey`, `timestamp` and `environment`. It also holds `release`, but only when `release` is set.
- `source`, which is always `"backend"`.
- `error`, with `message`, `type` and `stackTrace`. Each stack frame has `file`, `line`, `col`
  (always 0) and `fn`.
- `context`, with `os` (holding `name` and `version`) and `custom`.
- `user`, which is `null` when no user is set, and `breadcrumbs`.

The error type is the exception class name, prefixed with its module unless it is a built-in. For
example, a `ValueError` gives `ValueError`.

`ErrorPayload.to_json()` serialises a payload. `ErrorPayload.from_dict()` builds one back from the
decoded JSON. Requests carry the header `Authorization: Bearer <api key>` and time out after
10 seconds.

## What it does not do

This package is only the sending side. It has no ingest server and does not store payloads. A
payload that fails to send is dropped, not retried. The only framework hook is the WSGI middleware.