"""Convenience constructors for complete message sequences."""

from __future__ import annotations

from typing import List

from .builder import Text
from .message import Error, Eot, ExitStatus, Message, Stderr, Stdout


def response(status: int, out: bytes = b"", err: bytes = b"") -> List[Message]:
    """The messages a helper sends for a command that ran to completion."""
    return [ExitStatus(status), Stdout(out), Stderr(err), Eot()]


def startup_failure(text: Text) -> List[Message]:
    """The lone message a helper sends when the command could not start."""
    return [Error(text)]
