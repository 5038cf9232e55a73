""" Implementation of the top-level :func:`run` and :func:`pipe` methods.
    These are the principal entry points for users running commands.
"""

import logging

from . import config
from .protocol import builder
from .result import Options, Outcome
from .transport import PipeTransport
from .transport.session import InvocationSession


logger = logging.getLogger(__name__)


def run(command, args=None, options=None, **kwargs):
    """ Run *command* to completion and return its :class:`Outcome`.

        *args* is a single string or a sequence of strings, passed to the
        command in order. *options* is an :class:`Options` instance; the
        keyword arguments *stdin*, *env*, *cd*, *timeout* and *helper* are
        accepted as a shorthand, and override any matching field in
        *options*.

        The return value is :class:`Success` if the command exited with
        status 0. Otherwise it is a :class:`Failure` whose reason is the
        :class:`Result` (non-zero exit), a :class:`StartupError` (the
        command could not be started), or an :class:`AbnormalTermination`
        (the helper program died).

            >>> rambo.run('echo')
            Success(result=Result(status=0, out=b'\\n', err=b''))
            >>> rambo.run('echo', ['-n', 'john']).result.out
            b'john'
            >>> rambo.run('cat', stdin='john').result.out
            b'john'

        Each call spawns a fresh helper program and waits for it; nothing is
        shared between calls, which may safely run in separate threads.
    """

    if isinstance(command, Outcome):
        raise TypeError('run() takes a command; use pipe() to chain from a previous outcome')

    options = _options(options, kwargs)

    messages = builder.build(
        command,
        args,
        stdin=options.stdin,
        env=options.env,
        cd=options.cd,
    )

    timeout = options.timeout
    if timeout is None:
        timeout = config.timeout()

    helper = config.helper(options.helper)
    transport = PipeTransport(helper, timeout=timeout)
    session = InvocationSession(transport)

    logger.debug("run %r with %d request messages", command, len(messages))
    return session.invoke(messages)



def pipe(previous, command, args=None, options=None, **kwargs):
    """ Run *command* with the output of a *previous* invocation as its
        standard input, emulating a Unix pipe:

            >>> rambo.pipe(rambo.run('ls'), 'sort')

        If *previous* is a :class:`Failure` it is returned unchanged and
        *command* is never started; the first failure in a chain is what
        the caller sees.

        The piped output takes the stdin slot ahead of any *stdin* given in
        *options* or the keyword arguments, so the piped value wins when
        both are present.
    """

    if isinstance(previous, Outcome):
        pass
    else:
        raise TypeError('pipe() requires a previous Outcome, got ' + type(previous).__name__)

    if previous.ok == False:
        logger.debug("not running %r, previous invocation failed", command)
        return previous

    options = _options(options, kwargs)
    options = options.replace(stdin=previous.result.out)

    return run(command, args, options)



def _options(options, overrides):

    if options is None:
        return Options(**overrides)

    if isinstance(options, Options):
        pass
    else:
        raise TypeError('options must be an Options instance, got ' + type(options).__name__)

    if overrides:
        options = options.replace(**overrides)

    return options


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
