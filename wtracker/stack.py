"""Stack capture and traceback conversion into stack frames."""

from __future__ import annotations

import inspect
import itertools
import os
import sysconfig
import traceback
from pathlib import PurePath
from types import FrameType, TracebackType

from .types import StackFrame

_MAX_FRAMES = 64
_THIRD_PARTY_DIRS = frozenset({"site-packages", "dist-packages"})


def _normalise(path: str) -> str:
    return os.path.normcase(os.path.realpath(path))


_STDLIB_DIRS = tuple(
    sorted(
        {
            _normalise(path)
            for key in ("stdlib", "platstdlib")
            if (path := sysconfig.get_paths().get(key))
        }
    )
)


def is_stdlib_file(path: str) -> bool:
    """Tell whether a source path belongs to the interpreter's own library."""
    if not path:
        return False
    if path.startswith("<") and path.endswith(">"):
        return True
    normalised = _normalise(path)
    for root in _STDLIB_DIRS:
        if normalised == root or normalised.startswith(root + os.sep):
            relative_parts = PurePath(normalised[len(root):]).parts
            return not _THIRD_PARTY_DIRS.intersection(relative_parts)
    return False


def _to_stack_frame(frame: FrameType, lineno: int) -> StackFrame:
    code = frame.f_code
    qualname = getattr(code, "co_qualname", code.co_name)
    module = inspect.getmodulename(code.co_filename) or ""
    fn = f"{module}.{qualname}" if module else qualname
    return StackFrame(file=code.co_filename, line=lineno, col=0, fn=fn)


def capture_stack(skip: int = 0) -> list[StackFrame]:
    """Capture the caller's stack, innermost first.

    ``skip`` is the number of frames above the caller to leave out: 0 starts
    at the function that called ``capture_stack``, 1 at its caller, and so on.
    Standard-library frames are filtered out.
    """
    current = inspect.currentframe()
    try:
        start = current.f_back if current is not None else None
        for _ in range(skip):
            if start is None:
                break
            start = start.f_back
        if start is None:
            return []
        walked = itertools.islice(traceback.walk_stack(start), _MAX_FRAMES)
        return [
            _to_stack_frame(frame, lineno)
            for frame, lineno in walked
            if not is_stdlib_file(frame.f_code.co_filename)
        ]
    finally:
        del current


def frames_from_traceback(tb: TracebackType | None) -> list[StackFrame]:
    """Convert a traceback into frames, innermost first, without stdlib frames."""
    walked = list(traceback.walk_tb(tb))
    return [
        _to_stack_frame(frame, lineno)
        for frame, lineno in reversed(walked)
        if not is_stdlib_file(frame.f_code.co_filename)
    ]