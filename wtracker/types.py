"""Data types that make up the error payload sent to the ingest endpoint."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Level(str, Enum):
    """Severity level for captured messages."""

    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Config:
    """Options used to initialise a tracker client."""

    api_key: str
    environment: str = ""
    release: str = ""
    debug: bool = False


@dataclass
class UserContext:
    """Identifies the user associated with an error."""

    id: str
    email: str = ""
    name: str = ""

    def to_dict(self) -> dict[str, Any]:
        optional = {"email": self.email, "name": self.name}
        return {"id": self.id, **{k: v for k, v in optional.items() if v}}


@dataclass
class Breadcrumb:
    """A single entry in the breadcrumb trail."""

    message: str
    category: str = ""
    data: dict[str, Any] | None = None
    timestamp: str = ""

    def to_dict(self) -> dict[str, Any]:
        optional = {"category": self.category, "data": self.data}
        result = {"message": self.message, **{k: v for k, v in optional.items() if v}}
        result["timestamp"] = self.timestamp
        return result


@dataclass
class StackFrame:
    """One frame of a stack trace; the column is always 0."""

    file: str
    line: int
    col: int = 0
    fn: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"file": self.file, "line": self.line, "col": self.col, "fn": self.fn}


@dataclass
class ErrorDetail:
    """The inner error object of a payload."""

    message: str
    type: str
    stack_trace: list[StackFrame] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "type": self.type,
            "stackTrace": [frame.to_dict() for frame in self.stack_trace],
        }


@dataclass
class OSInfo:
    """Operating system name and version."""

    name: str
    version: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "version": self.version}


@dataclass
class NodeContext:
    """Operating system and custom context attached to a payload."""

    os: OSInfo
    custom: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"os": self.os.to_dict(), "custom": dict(self.custom)}


@dataclass
class ErrorPayload:
    """The JSON body posted to the ingest endpoint."""

    id: str
    api_key: str
    timestamp: str
    environment: str
    error: ErrorDetail
    context: NodeContext
    session_id: str
    release: str = ""
    source: str = "backend"
    user: UserContext | None = None
    breadcrumbs: list[Breadcrumb] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id,
            "apiKey": self.api_key,
            "timestamp": self.timestamp,
            "environment": self.environment,
        }
        if self.release:
            result["release"] = self.release
        result.update(
            source=self.source,
            error=self.error.to_dict(),
            context=self.context.to_dict(),
            user=self.user.to_dict() if self.user is not None else None,
            breadcrumbs=[crumb.to_dict() for crumb in self.breadcrumbs],
            sessionId=self.session_id,
        )
        return result

    def to_json(self) -> str:
        """Serialise the payload to compact JSON."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ErrorPayload:
        """Build a payload from its decoded JSON form."""
        error = data.get("error") or {}
        context = data.get("context") or {}
        os_data = context.get("os") or {}
        user = data.get("user")
        return cls(
            id=data.get("id", ""),
            api_key=data.get("apiKey", ""),
            timestamp=data.get("timestamp", ""),
            environment=data.get("environment", ""),
            release=data.get("release", ""),
            source=data.get("source", ""),
            error=ErrorDetail(
                error.get("message", ""),
                error.get("type", ""),
                [StackFrame(**f) for f in error.get("stackTrace") or []],
            ),
            context=NodeContext(OSInfo(**os_data), dict(context.get("custom") or {})),
            user=None if user is None else UserContext(**user),
            breadcrumbs=[Breadcrumb(**b) for b in data.get("breadcrumbs") or []],
            session_id=data.get("sessionId", ""),
        )