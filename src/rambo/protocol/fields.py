"""Protocol constants.

The discriminant values are part of the wire contract with the helper
program. Keep them in one place, and never renumber them.
"""

from enum import IntEnum


class MsgType(IntEnum):
    COMMAND = 0
    ARG = 1
    STDIN = 2
    ENV = 3
    CURRENT_DIR = 4
    ERROR = 5
    EXIT_STATUS = 6
    STDOUT = 7
    STDERR = 8
    EOT = 9


# Requests flow from the controller to the helper, responses flow back.
# EOT travels in both directions.

REQUEST_TYPES = frozenset((
    MsgType.COMMAND,
    MsgType.ARG,
    MsgType.STDIN,
    MsgType.ENV,
    MsgType.CURRENT_DIR,
    MsgType.EOT,
))

RESPONSE_TYPES = frozenset((
    MsgType.ERROR,
    MsgType.EXIT_STATUS,
    MsgType.STDOUT,
    MsgType.STDERR,
    MsgType.EOT,
))

# Request messages that may appear at most once in a request.
SINGLETON_TYPES = frozenset((
    MsgType.COMMAND,
    MsgType.STDIN,
    MsgType.CURRENT_DIR,
    MsgType.EOT,
))

LENGTH_FORMAT = '>I'    # packet length prefix
NAME_FORMAT = '>I'      # Env name length prefix
STATUS_FORMAT = '>i'    # ExitStatus payload, signed

LENGTH_BYTES = 4
NAME_BYTES = 4
STATUS_BYTES = 4


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
