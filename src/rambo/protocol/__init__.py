"""
rambo Protocol Layer
====================

This package defines the binary message protocol spoken between the
controlling process and the helper program that actually runs commands.
It provides the message model, the framed wire codec, and the request
builder; it does not know how the helper is spawned or how bytes move.

The protocol layer MUST NOT depend on any transport implementation.

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

Invocation Chain (rambo.chain)
    run() / pipe()

    │
    ▼
Request Builder (builder.py, factory.py)
    Ordered construction of request messages
    - Command, Arg*, Stdin?, Env*, CurrentDir?, Eot
    - Refuses anything after Eot

    │
    ▼
Message Model (message.py)
    One class per variant, fixed discriminant
    - Command, Arg, Stdin, Env, CurrentDir
    - Error, ExitStatus, Stdout, Stderr
    - Eot (both directions)

    │
    ▼
Wire Codec (wire.py)
    [length: 4 bytes big-endian][discriminant: 1 byte][payload]

    │
    ▼
Field Vocabulary (fields.py)
    Discriminant table and size constants

---------------------------------------------------------------------

Below the Protocol Layer (for context)
--------------------------------------

Session Layer (rambo.transport.session)
    Sends a request, folds the response into an outcome

Transport Layer (rambo.transport.pipe)
    Spawns the helper, moves framed bytes over its stdin/stdout

---------------------------------------------------------------------
"""

from . import fields
from . import message
from . import wire
from . import builder
from . import factory

from .fields import MsgType
from .message import Message, ProtocolError, SequenceError


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
