""" Value types describing the outcome of an invocation. Failures are
    values, not exceptions: :func:`rambo.run` returns a :class:`Failure`
    rather than raising when a command cannot start, exits non-zero, or
    the helper program dies.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from collections.abc import Mapping
from typing import Any, Optional, Sequence, Union


@dataclass(frozen=True)
class Result:
    """ The captured exit *status*, standard output *out*, and standard
        error *err* of one command. The byte sequences are held fully in
        memory; this is not the tool for multi-gigabyte output.
    """

    status: int = 0
    out: bytes = b''
    err: bytes = b''

    @property
    def stdout(self) -> str:
        return self.out.decode('utf-8', errors='replace')

    @property
    def stderr(self) -> str:
        return self.err.decode('utf-8', errors='replace')

    def replace(self, **changes) -> 'Result':
        return dataclasses.replace(self, **changes)



@dataclass(frozen=True)
class Options:
    """ Per-invocation options. A field left as None is omitted from the
        request entirely.

        *stdin* is piped to the command as one block; *env* is a mapping or
        a sequence of (name, value) pairs merged over the helper's inherited
        environment; *cd* is the working directory. *timeout*, in seconds,
        bounds the whole invocation; *helper* overrides the helper program
        for this call only.
    """

    stdin: Optional[Union[str, bytes]] = None
    env: Optional[Any] = None
    cd: Optional[str] = None
    timeout: Optional[float] = None
    helper: Optional[Union[str, Sequence[str]]] = None

    def __post_init__(self):

        if self.timeout is not None:
            timeout = float(self.timeout)
            if timeout < 0:
                raise ValueError('timeout must be non-negative, got %r' % (self.timeout))
            object.__setattr__(self, 'timeout', timeout)

        if self.env is not None and not isinstance(self.env, Mapping):
            # Freeze iterables of pairs so the options can be reused.
            object.__setattr__(self, 'env', tuple(tuple(pair) for pair in self.env))

    def replace(self, **changes) -> 'Options':
        return dataclasses.replace(self, **changes)



@dataclass(frozen=True)
class StartupError:
    """ The helper could not start the command; *message* is its diagnostic.
    """

    message: str

    def __str__(self):
        return self.message



@dataclass(frozen=True)
class AbnormalTermination:
    """ The helper's channel closed without completing the response. *code*
        is the helper's own exit status as reported by the operating system.
    """

    code: Optional[int]

    def __str__(self):
        return 'rambo exited with %s' % (self.code)



class CommandFailed(RuntimeError):
    """ Raised by :func:`Outcome.unwrap` for any failure outcome.
    """

    def __init__(self, outcome):
        self.outcome = outcome
        RuntimeError.__init__(self, _describe(outcome.reason))



class Outcome:
    """ Common behavior of :class:`Success` and :class:`Failure`. Chain
        invocations with :func:`pipe`, which mimics a Unix pipe:

            rambo.run('ls').pipe('sort').pipe('head')

        The first failure is carried through the rest of the chain unchanged,
        and no further commands are run.
    """

    ok = False

    def pipe(self, command, args=None, options=None, **kwargs) -> 'Outcome':
        from . import chain
        return chain.pipe(self, command, args, options, **kwargs)


    def unwrap(self) -> Result:
        """ Return the :class:`Result` of a successful outcome, or raise
            :class:`CommandFailed` for any failure.
        """

        if self.ok:
            return self.result

        raise CommandFailed(self)



@dataclass(frozen=True)
class Success(Outcome):
    result: Result

    ok = True



@dataclass(frozen=True)
class Failure(Outcome):
    reason: Union[Result, StartupError, AbnormalTermination]

    @property
    def result(self) -> Optional[Result]:
        """ The :class:`Result` when the command ran but exited non-zero,
            otherwise None.
        """

        if isinstance(self.reason, Result):
            return self.reason
        return None



def _describe(reason):

    if isinstance(reason, Result):
        message = 'command exited with status %d' % (reason.status)
        err = reason.stderr.strip()
        if err:
            message = message + ': ' + err
        return message

    return str(reason)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
