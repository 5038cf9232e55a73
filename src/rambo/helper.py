""" Reference implementation of the helper program. The controlling process
    spawns it, writes one complete request to its stdin, and reads the
    response from its stdout; see :mod:`rambo.protocol` for the messages.

    Run it as ``python -m rambo.helper``. Nothing but protocol frames is
    ever written to stdout; set ``RAMBO_HELPER_DEBUG`` in the environment to
    get diagnostics on stderr.
"""

import logging
import os
import subprocess
import sys

from .protocol import factory
from .protocol import wire
from .protocol.fields import MsgType
from .protocol.message import ProtocolError


logger = logging.getLogger('rambo.helper')


class Request:
    """ Everything the controller asked for, accumulated message by message
        until the terminal EOT arrives.
    """

    def __init__(self):

        self.executable = None
        self.arguments = list()
        self.stdin = None
        self.env = dict()
        self.cd = None


    def argv(self):
        return [self.executable] + self.arguments


    def environment(self):
        """ The inherited environment with the requested overrides applied.
        """

        environment = dict(os.environ)
        environment.update(self.env)
        return environment


# end of class Request



def receive(stream):
    """ Read request messages from *stream* until EOT and return the
        assembled :class:`Request`. Returns None if the stream ends first.
    """

    request = Request()

    while True:
        try:
            msg = wire.read_frame(stream)
        except EOFError:
            return None

        if msg is None:
            return None

        logger.debug('received %r', msg.__class__.__name__)

        type = msg.type

        if type == MsgType.COMMAND:
            request.executable = os.fsdecode(msg.payload)
        elif type == MsgType.ARG:
            request.arguments.append(os.fsdecode(msg.payload))
        elif type == MsgType.STDIN:
            request.stdin = msg.payload
        elif type == MsgType.ENV:
            name = os.fsdecode(msg.name_bytes)
            request.env[name] = os.fsdecode(msg.value_bytes)
        elif type == MsgType.CURRENT_DIR:
            request.cd = os.fsdecode(msg.payload)
        elif type == MsgType.EOT:
            break
        else:
            raise ProtocolError('controller sent a response-only message: %r' % (msg))

    if request.executable is None:
        raise ProtocolError('request ended without a Command message')

    return request



def execute(request):
    """ Run the command described by *request* and return the response
        messages to send back. A command that cannot be started yields a
        lone Error message; anything else yields the exit status, both
        captured streams, and EOT.
    """

    arguments = dict()
    arguments['stdout'] = subprocess.PIPE
    arguments['stderr'] = subprocess.PIPE
    arguments['env'] = request.environment()
    arguments['cwd'] = request.cd

    if request.stdin is None:
        arguments['stdin'] = subprocess.DEVNULL
    else:
        arguments['input'] = request.stdin

    try:
        completed = subprocess.run(request.argv(), **arguments)
    except OSError as e:
        logger.debug('cannot start %r: %s', request.executable, e)
        return factory.startup_failure(str(e))

    # A negative return code means the command was killed by a signal; that
    # is still a non-zero status from the controller's point of view.

    status = completed.returncode
    logger.debug('%r exited with %d', request.executable, status)

    return factory.response(status, completed.stdout, completed.stderr)



def main(stdin=None, stdout=None):
    """ Serve exactly one request. The streams default to the binary
        versions of the process stdin and stdout.
    """

    if stdin is None:
        stdin = sys.stdin.buffer
    if stdout is None:
        stdout = sys.stdout.buffer

    try:
        request = receive(stdin)
    except ProtocolError as e:
        logger.error('malformed request: %s', e)
        return 2

    if request is None:
        logger.error('request ended before EOT')
        return 1

    for msg in execute(request):
        wire.write_frame(stdout, msg)

    stdout.flush()
    return 0



if __name__ == '__main__':

    if os.environ.get('RAMBO_HELPER_DEBUG'):
        logging.basicConfig(stream=sys.stderr, level=logging.DEBUG)

    sys.exit(main())


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
