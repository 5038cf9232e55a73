""" A class representation of a rambo protocol message, including one
    subclass for each message variant exchanged with the helper program.
"""

import struct

from .fields import MsgType, NAME_BYTES, NAME_FORMAT, STATUS_BYTES, STATUS_FORMAT


class ProtocolError(ValueError):
    """ A packet or payload does not conform to the message protocol.
    """


class SequenceError(RuntimeError):
    """ A message was sent or received out of the permitted order, such as
        any request message following the terminal EOT.
    """


def _to_bytes(value):
    """ Return *value* as bytes. Text is encoded as UTF-8; anything else
        that is not already a byte sequence is rejected.
    """

    if isinstance(value, str):
        return value.encode('utf-8')

    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)

    raise TypeError('expected str or bytes, got ' + type(value).__name__)


def _to_text(value):
    return value.decode('utf-8', errors='replace')



class Message:
    """ The :class:`Message` is a very thin encapsulation of one message on
        the wire: a one-byte discriminant *type* followed by the variant
        *payload* bytes. Subclasses fix the *type* and provide convenient
        accessors for the payload contents; the base class is not meant to
        be instantiated directly.

        :ivar payload: The variant-specific payload, as bytes.
    """

    type = None

    def __init__(self, payload=b''):

        if self.type is None:
            raise TypeError('Message is abstract; use one of the variant subclasses')

        self.payload = _to_bytes(payload)


    def __eq__(self, other):

        if isinstance(other, Message):
            return self.type == other.type and self.payload == other.payload

        return NotImplemented


    __hash__ = None


    def __repr__(self):
        return '%s(%r)' % (self.__class__.__name__, self.payload)


    @classmethod
    def from_payload(cls, payload):
        """ Construct an instance from the variant *payload* bytes, the
            portion of a packet following the discriminant byte.
        """

        return cls(payload)


    def encapsulate(self):
        """ Return the packet payload for this message: the discriminant
            byte followed by the variant payload. Framing is handled by
            :mod:`rambo.protocol.wire`.
        """

        return bytes((self.type,)) + self.payload


# end of class Message



class Command(Message):
    """ The executable to run. Always the first message of a request.
    """

    type = MsgType.COMMAND

    @property
    def executable(self):
        return _to_text(self.payload)



class Arg(Message):
    """ One command-line argument; one message is sent per argument.
    """

    type = MsgType.ARG

    @property
    def value(self):
        return _to_text(self.payload)



class Stdin(Message):
    """ The entire standard input for the command, never chunked.
    """

    type = MsgType.STDIN



class Env(Message):
    """ A single environment override. The payload carries a 4-byte
        big-endian length of the name, the name itself, and the value
        extending to the end of the payload.
    """

    type = MsgType.ENV

    def __init__(self, name, value):

        name = _to_bytes(name)
        value = _to_bytes(value)

        if len(name) == 0:
            raise ValueError('environment variable name cannot be empty')

        self.name_bytes = name
        self.value_bytes = value

        payload = struct.pack(NAME_FORMAT, len(name)) + name + value
        Message.__init__(self, payload)


    def __repr__(self):
        return 'Env(%r, %r)' % (self.name_bytes, self.value_bytes)


    @classmethod
    def from_payload(cls, payload):

        payload = bytes(payload)

        if len(payload) < NAME_BYTES:
            raise ProtocolError('Env payload too short for name length: %d bytes' % (len(payload)))

        length = struct.unpack(NAME_FORMAT, payload[:NAME_BYTES])[0]
        end = NAME_BYTES + length

        if end > len(payload):
            raise ProtocolError('Env name length %d exceeds payload' % (length))

        return cls(payload[NAME_BYTES:end], payload[end:])


    @property
    def name(self):
        return _to_text(self.name_bytes)


    @property
    def value(self):
        return _to_text(self.value_bytes)



class CurrentDir(Message):
    """ The working directory for the command.
    """

    type = MsgType.CURRENT_DIR

    @property
    def path(self):
        return _to_text(self.payload)



class Error(Message):
    """ Sent by the helper, as the only message of its response, when the
        command could not be started.
    """

    type = MsgType.ERROR

    @property
    def text(self):
        return _to_text(self.payload)



class ExitStatus(Message):
    """ The exit status of the command, a signed 32-bit integer.
    """

    type = MsgType.EXIT_STATUS

    def __init__(self, code):

        code = int(code)

        try:
            payload = struct.pack(STATUS_FORMAT, code)
        except struct.error:
            raise ValueError('exit status out of range for a signed 32-bit integer: %d' % (code)) from None

        self.code = code
        Message.__init__(self, payload)


    def __repr__(self):
        return 'ExitStatus(%d)' % (self.code)


    @classmethod
    def from_payload(cls, payload):

        if len(payload) != STATUS_BYTES:
            raise ProtocolError('ExitStatus payload must be %d bytes, got %d' % (STATUS_BYTES, len(payload)))

        code = struct.unpack(STATUS_FORMAT, bytes(payload))[0]
        return cls(code)



class Stdout(Message):
    """ The complete captured standard output of the command.
    """

    type = MsgType.STDOUT



class Stderr(Message):
    """ The complete captured standard error of the command.
    """

    type = MsgType.STDERR



class Eot(Message):
    """ End of transmission. The controller sends it to start execution;
        the helper echoes it to conclude a successful response.
    """

    type = MsgType.EOT

    def __init__(self):
        Message.__init__(self, b'')


    def __repr__(self):
        return 'Eot()'


    @classmethod
    def from_payload(cls, payload):

        if len(payload) != 0:
            raise ProtocolError('Eot carries no payload, got %d bytes' % (len(payload)))

        return cls()



# The decoder selects the class to instantiate based on the discriminant.

types = {
    MsgType.COMMAND: Command,
    MsgType.ARG: Arg,
    MsgType.STDIN: Stdin,
    MsgType.ENV: Env,
    MsgType.CURRENT_DIR: CurrentDir,
    MsgType.ERROR: Error,
    MsgType.EXIT_STATUS: ExitStatus,
    MsgType.STDOUT: Stdout,
    MsgType.STDERR: Stderr,
    MsgType.EOT: Eot,
}


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
