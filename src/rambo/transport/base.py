"""Transport interface.

This is the (small) contract that transport implementations should follow.
It lives outside :mod:`rambo.protocol` so the protocol remains transport-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..protocol.message import Message


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportTimeout(TransportError):
    """An invocation did not complete within its timeout."""


class TransportSpawnError(TransportError):
    """The helper program itself could not be started."""


class TransportClosed(TransportError):
    """The channel closed before the response was complete.

    *code* is the helper's exit status, or None if it is unknown.
    """

    def __init__(self, code: Optional[int], detail: str = "channel closed"):
        self.code = code
        super().__init__(f"{detail} (helper exit status {code})")


class Transport(ABC):
    """Minimal contract for a one-shot channel to a helper program."""

    @abstractmethod
    def open(self) -> None:
        """Start the helper and establish the channel."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the channel and reap the helper."""

    @abstractmethod
    def send(self, msg: Message) -> None:
        """Send a protocol Message."""

    @abstractmethod
    def recv(self) -> Message:
        """Receive the next protocol Message.

        Raises TransportClosed if the channel ends before a message arrives.
        """

    @property
    def is_open(self) -> bool:
        """Whether the transport is currently connected."""
        return False

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, *exc_info):
        self.close()
