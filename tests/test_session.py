import itertools
import pytest

import rambo
from rambo.protocol import builder, message
from rambo.transport.session import InvocationSession, ResponseAggregator


def aggregate(messages):
    aggregator = ResponseAggregator()
    outcome = None

    for msg in messages:
        outcome = aggregator.feed(msg)

    return outcome


def test_initial_state():

    aggregator = ResponseAggregator()
    assert aggregator.result == rambo.Result(0, b'', b'')
    assert aggregator.done == False


def test_success():

    outcome = aggregate((message.ExitStatus(0), message.Stdout(b'john\n'), message.Stderr(b''), message.Eot()))

    assert isinstance(outcome, rambo.Success)
    assert outcome.ok
    assert outcome.result == rambo.Result(0, b'john\n', b'')


def test_nonzero_exit():

    outcome = aggregate((message.ExitStatus(3), message.Stdout(b'partial'), message.Stderr(b'oops'), message.Eot()))

    assert isinstance(outcome, rambo.Failure)
    assert outcome.ok == False
    assert outcome.reason == rambo.Result(3, b'partial', b'oops')
    assert outcome.result.status == 3


def test_any_field_order():
    """ The helper is free to send the three field messages in any order;
        every permutation must fold into the same Result.
    """

    fields = (message.ExitStatus(7), message.Stdout(b'out'), message.Stderr(b'err'))
    expected = rambo.Failure(rambo.Result(7, b'out', b'err'))

    for ordering in itertools.permutations(fields):
        outcome = aggregate(ordering + (message.Eot(),))
        assert outcome == expected


def test_any_subset():

    for count in range(4):
        for subset in itertools.combinations((message.ExitStatus(0), message.Stdout(b'out'), message.Stderr(b'err')), count):
            outcome = aggregate(subset + (message.Eot(),))
            assert isinstance(outcome, rambo.Success)

    outcome = aggregate((message.Eot(),))
    assert outcome == rambo.Success(rambo.Result())


def test_duplicates_overwrite():

    outcome = aggregate((
        message.Stdout(b'first'),
        message.ExitStatus(1),
        message.Stdout(b'second'),
        message.ExitStatus(0),
        message.Eot(),
    ))

    assert outcome == rambo.Success(rambo.Result(0, b'second', b''))


def test_startup_error_is_terminal():

    aggregator = ResponseAggregator()
    outcome = aggregator.feed(message.Error('No such file or directory'))

    assert aggregator.done
    assert outcome == rambo.Failure(rambo.StartupError('No such file or directory'))
    assert outcome.result is None

    with pytest.raises(rambo.protocol.SequenceError):
        aggregator.feed(message.Eot())


def test_terminate():

    aggregator = ResponseAggregator()
    aggregator.feed(message.Stdout(b'lost'))
    outcome = aggregator.terminate(-9)

    assert outcome == rambo.Failure(rambo.AbnormalTermination(-9))

    with pytest.raises(rambo.protocol.SequenceError):
        aggregator.terminate(0)


def test_request_messages_rejected():

    aggregator = ResponseAggregator()

    with pytest.raises(rambo.protocol.ProtocolError):
        aggregator.feed(message.Arg('nope'))


def test_invoke(fake_transport):

    responses = (message.Stdout(b'john\n'), message.ExitStatus(0), message.Eot())
    transport = fake_transport(responses)
    request = builder.build('echo', 'john')

    outcome = InvocationSession(transport).invoke(request)

    assert outcome == rambo.Success(rambo.Result(0, b'john\n', b''))
    assert transport.sent == request
    assert transport.opened
    assert transport.closed


def test_invoke_stops_at_error(fake_transport):

    responses = (message.Error('cannot start'), message.Stdout(b'never read'))
    transport = fake_transport(responses)

    outcome = InvocationSession(transport).invoke(builder.build('missing'))

    assert outcome == rambo.Failure(rambo.StartupError('cannot start'))
    assert transport.responses == [message.Stdout(b'never read')]
    assert transport.closed


def test_invoke_abnormal_termination(fake_transport):

    transport = fake_transport((message.ExitStatus(0),), exit_code=101)

    outcome = InvocationSession(transport).invoke(builder.build('echo'))

    assert outcome == rambo.Failure(rambo.AbnormalTermination(101))
    assert str(outcome.reason) == 'rambo exited with 101'
    assert transport.closed


def test_invoke_requires_eot(fake_transport):

    transport = fake_transport()

    with pytest.raises(rambo.protocol.SequenceError):
        InvocationSession(transport).invoke([message.Command('echo')])

    assert transport.closed


def test_nothing_sent_after_eot(fake_transport):

    transport = fake_transport()
    session = InvocationSession(transport)

    for msg in builder.build('echo'):
        session.send(msg)

    with pytest.raises(rambo.protocol.SequenceError):
        session.send(message.Arg('late'))

    assert len(transport.sent) == 2


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
