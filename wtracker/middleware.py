"""WSGI middleware that reports unhandled exceptions and recorded request errors."""

from __future__ import annotations

from typing import Any

from . import tracker

ERRORS_ENVIRON_KEY = "wtracker.errors"


def record_error(environ: dict[str, Any], error: BaseException) -> None:
    """Record an error for the current request; the middleware reports the last one."""
    environ.setdefault(ERRORS_ENVIRON_KEY, []).append(error)


def _capture(environ: dict[str, Any], error: BaseException, status: int) -> None:
    tracker.capture_error(error, {
        "method": environ.get("REQUEST_METHOD", ""),
        "path": environ.get("SCRIPT_NAME", "") + environ.get("PATH_INFO", ""),
        "status": status,
    })


class TrackerMiddleware:
    """Wraps a WSGI application, capturing exceptions and recorded errors.

    Exceptions are captured and re-raised so outer handlers still see them.
    """

    def __init__(self, app) -> None:
        self.app = app

    def __call__(self, environ, start_response):
        environ[ERRORS_ENVIRON_KEY] = []
        status = 200

        def tracking_start_response(status_line, headers, exc_info=None):
            nonlocal status
            status = int(status_line.split()[0])
            return start_response(status_line, headers, exc_info)

        try:
            result = self.app(environ, tracking_start_response)
            try:
                yield from result
            finally:
                if hasattr(result, "close"):
                    result.close()
        except Exception as exc:
            _capture(environ, exc, 500)
            raise
        if environ[ERRORS_ENVIRON_KEY]:
            _capture(environ, environ[ERRORS_ENVIRON_KEY][-1], status)