from __future__ import annotations

import struct
from typing import BinaryIO, Optional

from . import message
from .fields import LENGTH_BYTES, LENGTH_FORMAT, MsgType
from .message import Message, ProtocolError


def pack_frame(msg: Message) -> bytes:
    """
    Serialize Message -> bytes

    Layout:
        [length, 4 bytes big-endian][discriminant, 1 byte][payload...]

    The length counts the discriminant and the payload, not itself.
    """

    packet = msg.encapsulate()
    return struct.pack(LENGTH_FORMAT, len(packet)) + packet


def unpack_payload(packet: bytes) -> Message:
    """
    Deserialize an unframed packet (discriminant + payload) -> Message
    """

    if len(packet) == 0:
        raise ProtocolError("empty packet, no discriminant")

    try:
        msg_type = MsgType(packet[0])
    except ValueError:
        raise ProtocolError(f"unknown message discriminant: {packet[0]}") from None

    cls = message.types[msg_type]
    return cls.from_payload(packet[1:])


def unpack_frame(frame: bytes) -> Message:
    """
    Deserialize one complete framed packet -> Message
    """

    if len(frame) < LENGTH_BYTES:
        raise ProtocolError(f"frame shorter than its length prefix: {len(frame)} bytes")

    length = struct.unpack(LENGTH_FORMAT, frame[:LENGTH_BYTES])[0]
    packet = frame[LENGTH_BYTES:]

    if len(packet) != length:
        raise ProtocolError(f"frame length prefix says {length} bytes, got {len(packet)}")

    return unpack_payload(packet)


def write_frame(stream: BinaryIO, msg: Message) -> None:
    stream.write(pack_frame(msg))


def read_frame(stream: BinaryIO) -> Optional[Message]:
    """
    Read exactly one framed packet from a blocking binary stream.

    Returns None on a clean end-of-stream at a packet boundary; raises
    EOFError if the stream ends partway through a packet.
    """

    header = _read_exactly(stream, LENGTH_BYTES)

    if len(header) == 0:
        return None
    if len(header) < LENGTH_BYTES:
        raise EOFError(f"stream closed inside a length prefix ({len(header)} of {LENGTH_BYTES} bytes)")

    length = struct.unpack(LENGTH_FORMAT, header)[0]
    packet = _read_exactly(stream, length)

    if len(packet) < length:
        raise EOFError(f"stream closed inside a packet ({len(packet)} of {length} bytes)")

    return unpack_payload(packet)


def _read_exactly(stream: BinaryIO, count: int) -> bytes:
    # read() on a pipe may return short; keep going until EOF.
    chunks = []
    remaining = count

    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)

    return b"".join(chunks)
