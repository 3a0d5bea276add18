"""Tracker client: holds user, breadcrumbs and custom context, and posts error payloads."""

from __future__ import annotations

import dataclasses
import itertools
import os
import threading
import urllib.error
import urllib.request
import uuid
from collections import deque
from datetime import datetime, timezone
from typing import Any

from .osinfo import os_name, os_version
from .stack import capture_stack, frames_from_traceback
from .types import (
    Breadcrumb,
    Config,
    ErrorDetail,
    ErrorPayload,
    Level,
    NodeContext,
    OSInfo,
    StackFrame,
    UserContext,
)

DEFAULT_ENDPOINT = "https://wtracker.example.com/errors/ingest"
DEFAULT_ENVIRONMENT = "production"
MAX_BREADCRUMBS = 20

_PACKAGE_DIR = os.path.normcase(os.path.dirname(os.path.realpath(__file__))) + os.sep


def _utc_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _type_name(value: Any) -> str:
    cls = type(value)
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def _caller_stack() -> list[StackFrame]:
    """Stack of the code that called into the package, package frames left out."""
    return list(
        itertools.dropwhile(
            lambda f: os.path.normcase(os.path.realpath(f.file)).startswith(_PACKAGE_DIR),
            capture_stack(1),
        )
    )


class Client:
    """Holds tracker state and delivers payloads in background threads."""

    def __init__(self, config: Config, endpoint: str | None = None) -> None:
        self.api_key = config.api_key
        self.endpoint = endpoint or DEFAULT_ENDPOINT
        self.environment = config.environment or DEFAULT_ENVIRONMENT
        self.release = config.release
        self.debug = config.debug
        self.session_id = str(uuid.uuid4())
        self._lock = threading.Lock()
        self._user: UserContext | None = None
        self._breadcrumbs: deque[Breadcrumb] = deque(maxlen=MAX_BREADCRUMBS)
        self._custom: dict[str, Any] = {}
        self._idle = threading.Condition()
        self._pending = 0

    def set_user(self, user: UserContext | None) -> None:
        """Attach a user to subsequent payloads; None clears it."""
        with self._lock:
            self._user = user

    def add_breadcrumb(self, breadcrumb: Breadcrumb) -> None:
        """Append a breadcrumb, keeping only the most recent ones."""
        stamped = dataclasses.replace(breadcrumb, timestamp=breadcrumb.timestamp or _utc_now())
        with self._lock:
            self._breadcrumbs.append(stamped)

    def with_context(self, key: str, value: Any) -> None:
        """Attach a key-value pair to the custom context of subsequent payloads."""
        with self._lock:
            self._custom[key] = value

    def capture_error(self, error: BaseException, extra: dict[str, Any] | None = None) -> None:
        """Send an error with the caller's stack and optional extra context."""
        self._log(f"Capturing error: {error}")
        self.send(self.build_payload(str(error), _type_name(error), _caller_stack(), extra))

    def capture_message(self, message: str, level: Level | str) -> None:
        """Send a plain message as an error payload."""
        self._log(f"Capturing message: {message}")
        self.send(self.build_payload(message, f"Message[{level}]", _caller_stack(), None))

    def capture_recovered(self, value: Any) -> None:
        """Send an exception (or any value) that was caught by the caller."""
        tb = getattr(value, "__traceback__", None)
        if isinstance(value, BaseException) and tb is not None:
            stack = frames_from_traceback(tb)
        else:
            stack = _caller_stack()
        self._log(f"Capturing panic: {value}")
        self.send(self.build_payload(str(value), _type_name(value), stack, None))

    def build_payload(
        self,
        message: str,
        error_type: str,
        stack: list[StackFrame],
        extra: dict[str, Any] | None = None,
    ) -> ErrorPayload:
        """Assemble a payload from the current state and the given error details."""
        with self._lock:
            user = self._user
            breadcrumbs = list(self._breadcrumbs)
            custom = dict(self._custom)
        custom.update(extra or {})
        return ErrorPayload(
            id=str(uuid.uuid4()),
            api_key=self.api_key,
            timestamp=_utc_now(),
            environment=self.environment,
            release=self.release,
            error=ErrorDetail(message=message, type=error_type, stack_trace=list(stack)),
            context=NodeContext(os=OSInfo(os_name(), os_version()), custom=custom),
            user=user,
            breadcrumbs=breadcrumbs,
            session_id=self.session_id,
        )

    def send(self, payload: ErrorPayload) -> None:
        """Post the payload in a background thread."""
        with self._idle:
            self._pending += 1
        threading.Thread(target=self._deliver, args=(payload,), daemon=True).start()

    def flush(self, timeout: float | None = None) -> None:
        """Wait for in-flight sends; raise TimeoutError if they outlast the timeout."""
        with self._idle:
            if not self._idle.wait_for(lambda: self._pending == 0, timeout):
                raise TimeoutError(f"{self._pending} payload(s) still in flight")

    def _deliver(self, payload: ErrorPayload) -> None:
        try:
            self._post(payload)
        finally:
            with self._idle:
                self._pending -= 1
                self._idle.notify_all()

    def _post(self, payload: ErrorPayload) -> None:
        try:
            request = urllib.request.Request(
                self.endpoint,
                data=payload.to_json().encode("utf-8"),
                method="POST",
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {self.api_key}",
                },
            )
            with urllib.request.urlopen(request, timeout=10.0) as response:
                response.read()
                status = response.status
        except urllib.error.HTTPError as exc:
            status = exc.code
            exc.close()
        except Exception as exc:  # delivery must never break the caller
            self._log(f"send error: {exc}")
            return
        self._log(f"sent: status {status}")

    def _log(self, message: str) -> None:
        if self.debug:
            print(f"[tracker] {message}")