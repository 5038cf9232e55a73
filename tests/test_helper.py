import io
import os
import pytest
import sys

import rambo
from rambo import helper
from rambo.protocol import builder, message, wire


posix = pytest.mark.skipif(os.name != 'posix', reason='needs POSIX utilities (echo, cat, sh)')


def encode(messages):
    return io.BytesIO(b''.join(wire.pack_frame(msg) for msg in messages))


def decode(raw):
    stream = io.BytesIO(raw)
    messages = list()

    while True:
        msg = wire.read_frame(stream)
        if msg is None:
            return messages
        messages.append(msg)


def test_receive():

    request = builder.build(
        'sh',
        ['-c', 'cat'],
        stdin=b'\x00binary',
        env={'JOHN': 'rambo'},
        cd='/tmp',
    )

    received = helper.receive(encode(request))

    assert received.argv() == ['sh', '-c', 'cat']
    assert received.stdin == b'\x00binary'
    assert received.env == {'JOHN': 'rambo'}
    assert received.cd == '/tmp'
    assert received.environment()['JOHN'] == 'rambo'


def test_receive_without_eot():

    request = builder.build('echo', 'john')[:-1]
    assert helper.receive(encode(request)) is None

    truncated = wire.pack_frame(message.Command('echo'))[:-1]
    assert helper.receive(io.BytesIO(truncated)) is None


def test_receive_rejects_responses():

    with pytest.raises(rambo.protocol.ProtocolError):
        helper.receive(encode((message.Command('echo'), message.Stdout(b''), message.Eot())))

    with pytest.raises(rambo.protocol.ProtocolError):
        helper.receive(encode((message.Eot(),)))


def test_execute_startup_failure():

    request = helper.Request()
    request.executable = 'rambo-there-is-no-such-command'

    response = helper.execute(request)

    assert len(response) == 1
    assert response[0].type == rambo.protocol.MsgType.ERROR
    assert response[0].text != ''


def test_execute_python():

    request = helper.Request()
    request.executable = sys.executable
    request.arguments = ['-c', 'import sys; sys.stdout.write(sys.stdin.read()); sys.exit(4)']
    request.stdin = b'round trip'

    response = helper.execute(request)

    assert response == [
        message.ExitStatus(4),
        message.Stdout(b'round trip'),
        message.Stderr(b''),
        message.Eot(),
    ]


@posix
def test_main():

    stdin = encode(builder.build('echo', ['-n', 'john']))
    stdout = io.BytesIO()

    assert helper.main(stdin, stdout) == 0
    assert decode(stdout.getvalue()) == [
        message.ExitStatus(0),
        message.Stdout(b'john'),
        message.Stderr(b''),
        message.Eot(),
    ]


def test_main_incomplete_request():

    stdout = io.BytesIO()

    assert helper.main(encode((message.Command('echo'),)), stdout) == 1
    assert stdout.getvalue() == b''

    assert helper.main(encode((message.Error('backwards'),)), stdout) == 2
    assert stdout.getvalue() == b''


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
