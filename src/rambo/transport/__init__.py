"""Transport layer implementations."""

from .base import (
    Transport,
    TransportError,
    TransportTimeout,
    TransportClosed,
    TransportSpawnError,
)

from .pipe import PipeTransport
from . import session
