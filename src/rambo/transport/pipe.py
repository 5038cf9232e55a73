"""Subprocess pipe transport.

Each instance spawns one helper program and speaks the framed protocol over
the helper's stdin (requests) and stdout (responses). The helper's stderr is
inherited so its diagnostics remain visible. An instance is good for exactly
one invocation.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from typing import List, Optional, Sequence, Union

from ..protocol import wire
from ..protocol.message import Message
from .base import Transport, TransportClosed, TransportSpawnError, TransportTimeout


logger = logging.getLogger(__name__)


class PipeTransport(Transport):
    """Spawn a helper with :class:`subprocess.Popen` and exchange messages."""

    grace = 5.0

    def __init__(self, helper: Union[str, Sequence[str]], timeout: Optional[float] = None):
        if isinstance(helper, (str, bytes)):
            helper = [helper]

        self.argv: List[str] = list(helper)
        self.timeout = timeout
        self.process: Optional[subprocess.Popen] = None
        self.expired = False

        self._closed = False
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self.process is not None and not self._closed

    def open(self) -> None:
        if self.process is not None:
            raise RuntimeError("a PipeTransport can only be opened once")

        logger.debug("spawning helper: %s", self.argv)

        try:
            self.process = subprocess.Popen(
                self.argv,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
            )
        except OSError as exc:
            raise TransportSpawnError(f"cannot start helper {self.argv!r}: {exc}") from exc

        if self.timeout is not None:
            self._timer = threading.Timer(self.timeout, self._expire)
            self._timer.daemon = True
            self._timer.start()

    def _expire(self) -> None:
        with self._lock:
            if self._closed or self.process is None:
                return
            self.expired = True

        logger.warning("helper %d exceeded %.2f sec, killing it", self.process.pid, self.timeout)
        self.process.kill()

    def send(self, msg: Message) -> None:
        logger.debug("send %s", msg.__class__.__name__)

        try:
            wire.write_frame(self.process.stdin, msg)
            self.process.stdin.flush()
        except OSError:
            self._lost("helper stopped reading")

    def recv(self) -> Message:
        try:
            msg = wire.read_frame(self.process.stdout)
        except EOFError as exc:
            self._lost(str(exc))

        if msg is None:
            self._lost("helper closed its output")

        logger.debug("recv %s", msg.__class__.__name__)
        return msg

    def _lost(self, detail: str) -> None:
        """The channel ended early. Reap the helper and raise accordingly."""

        code = self._reap()

        if self.expired:
            raise TransportTimeout(f"invocation exceeded {self.timeout:.2f} sec")

        logger.warning("%s, helper exit status %s", detail, code)
        raise TransportClosed(code, detail)

    def _reap(self) -> Optional[int]:
        process = self.process

        # The helper may be blocked reading a request that will never finish.
        try:
            process.stdin.close()
        except OSError:
            pass

        try:
            process.wait(self.grace)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()

        return process.returncode

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True

        if self._timer is not None:
            self._timer.cancel()

        if self.process is None:
            return

        for stream in (self.process.stdin, self.process.stdout):
            try:
                stream.close()
            except OSError:
                pass

        if self.process.returncode is None:
            self._reap()

        logger.debug("helper %d exited with %s", self.process.pid, self.process.returncode)
