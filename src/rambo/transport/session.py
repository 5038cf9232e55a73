"""Transport-agnostic session layer."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..protocol.fields import MsgType
from ..protocol.message import Message, ProtocolError, SequenceError
from ..result import AbnormalTermination, Failure, Outcome, Result, StartupError, Success
from .base import Transport, TransportClosed


logger = logging.getLogger(__name__)


class ResponseAggregator:
    """Fold response messages, one at a time, into an :class:`Outcome`.

    ExitStatus, Stdout and Stderr may arrive in any order, any subset, and
    more than once; each overwrites its field of the accumulated Result.
    Error and Eot are terminal, as is an abrupt end of the channel reported
    through :meth:`terminate`.
    """

    def __init__(self):
        self.result = Result()
        self.outcome: Optional[Outcome] = None

    @property
    def done(self) -> bool:
        return self.outcome is not None

    def feed(self, msg: Message) -> Optional[Outcome]:
        """Apply one message. Returns the Outcome once terminal, else None."""

        if self.outcome is not None:
            raise SequenceError(f"response already complete, cannot accept {msg!r}")

        if msg.type == MsgType.EXIT_STATUS:
            self.result = self.result.replace(status=msg.code)
        elif msg.type == MsgType.STDOUT:
            self.result = self.result.replace(out=msg.payload)
        elif msg.type == MsgType.STDERR:
            self.result = self.result.replace(err=msg.payload)
        elif msg.type == MsgType.ERROR:
            self.outcome = Failure(StartupError(msg.text))
        elif msg.type == MsgType.EOT:
            if self.result.status == 0:
                self.outcome = Success(self.result)
            else:
                self.outcome = Failure(self.result)
        else:
            raise ProtocolError(f"helper sent a request-only message: {msg!r}")

        return self.outcome

    def terminate(self, code: Optional[int]) -> Outcome:
        """The channel closed before Error or Eot arrived."""

        if self.outcome is not None:
            raise SequenceError("response already complete")

        self.outcome = Failure(AbnormalTermination(code))
        return self.outcome


class InvocationSession:
    """Client-side request/response logic for a single invocation.

    The entire request is sent without waiting for any reply, then the
    response is read until the aggregator reaches a terminal state. The
    transport is opened and closed here; one session, one transport.
    """

    def __init__(self, transport: Transport):
        self.transport = transport
        self.aggregator = ResponseAggregator()
        self._sealed = False

    def send(self, msg: Message) -> None:
        if self._sealed:
            raise SequenceError(f"cannot send {msg!r} after Eot")

        self.transport.send(msg)

        if msg.type == MsgType.EOT:
            self._sealed = True

    def receive(self) -> Outcome:
        aggregator = self.aggregator

        while not aggregator.done:
            aggregator.feed(self.transport.recv())

        return aggregator.outcome

    def invoke(self, messages: Iterable[Message]) -> Outcome:
        with self.transport:
            try:
                for msg in messages:
                    self.send(msg)

                if not self._sealed:
                    raise SequenceError("request must end with Eot")

                outcome = self.receive()
            except TransportClosed as closed:
                outcome = self.aggregator.terminate(closed.code)

        logger.debug("invocation complete: %s", outcome.__class__.__name__)
        return outcome
