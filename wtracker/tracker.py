"""Process-wide tracker: a single client behind module-level functions."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from .client import Client
from .types import Breadcrumb, Config, Level, UserContext

_lock = threading.Lock()
_client: Client | None = None


def init(config: Config) -> None:
    """Initialise the global client; calling it again replaces the client."""
    global _client
    with _lock:
        _client = Client(config)


def init_with_endpoint(config: Config, endpoint: str) -> None:
    """Initialise the global client with an explicit ingest URL, for tests."""
    global _client
    with _lock:
        _client = Client(config, endpoint)


def get_client() -> Client | None:
    """Return the global client, or None before init."""
    with _lock:
        return _client


def capture_error(error: BaseException, context: dict[str, Any] | None = None) -> None:
    """Send an error with the current stack; context merges into the custom context."""
    client = get_client()
    if client is not None:
        client.capture_error(error, context)


def capture_message(message: str, level: Level | str) -> None:
    """Send a message as an error payload."""
    client = get_client()
    if client is not None:
        client.capture_message(message, level)


def set_user(user: UserContext | None) -> None:
    """Attach a user to subsequent payloads; None clears it."""
    client = get_client()
    if client is not None:
        client.set_user(user)


def add_breadcrumb(breadcrumb: Breadcrumb) -> None:
    """Append a breadcrumb to the trail (capped at 20)."""
    client = get_client()
    if client is not None:
        client.add_breadcrumb(breadcrumb)


def with_context(key: str, value: Any) -> None:
    """Attach a key-value pair to all subsequent payloads."""
    client = get_client()
    if client is not None:
        client.with_context(key, value)


@contextmanager
def recover() -> Iterator[None]:
    """Capture any exception raised in the block, then re-raise it."""
    try:
        yield
    except Exception as exc:
        client = get_client()
        if client is not None:
            client.capture_recovered(exc)
        raise


def flush(timeout: float | None = None) -> None:
    """Wait for in-flight sends; raise TimeoutError if they outlast the timeout."""
    client = get_client()
    if client is not None:
        client.flush(timeout)


def reset() -> None:
    """Drop the global client."""
    global _client
    with _lock:
        _client = None