from __future__ import annotations

from collections.abc import Mapping
from typing import Iterable, List, Optional, Tuple, Union

from .fields import MsgType, SINGLETON_TYPES
from .message import (
    Arg,
    Command,
    CurrentDir,
    Env,
    Eot,
    Message,
    SequenceError,
    Stdin,
)


Text = Union[str, bytes]
Arguments = Union[None, Text, Iterable[Text]]
Environment = Union[None, Mapping, Iterable[Tuple[Text, Text]]]


class RequestBuilder:
    """Fluent construction of the outgoing message sequence for one request.

    The helper expects the messages in a fixed order: Command, Arg*, Stdin?,
    Env*, CurrentDir?, Eot. The discriminants happen to be numbered in that
    order, with Eot last, so the builder only has to check that the type
    never decreases.
    """

    def __init__(self, executable: Text):
        self._messages: List[Message] = []
        self._append(Command(executable))

    @property
    def sealed(self) -> bool:
        return self._messages[-1].type == MsgType.EOT

    def _append(self, msg: Message) -> None:
        if self._messages:
            last = self._messages[-1]

            if last.type == MsgType.EOT:
                raise SequenceError(f"cannot add {msg!r} after Eot")

            if msg.type < last.type:
                raise SequenceError(f"{msg!r} cannot follow {last!r}")

            if msg.type == last.type and msg.type in SINGLETON_TYPES:
                raise SequenceError(f"only one {msg.type.name} message is allowed")

        self._messages.append(msg)

    # Request contents
    def arg(self, value: Text):
        self._append(Arg(value))
        return self

    def args(self, values: Arguments):
        for value in _arguments(values):
            self.arg(value)
        return self

    def stdin(self, data: Text):
        self._append(Stdin(data))
        return self

    def env(self, name: Text, value: Text):
        self._append(Env(name, value))
        return self

    def envs(self, pairs: Environment):
        for name, value in _environment(pairs):
            self.env(name, value)
        return self

    def cd(self, path: Text):
        self._append(CurrentDir(path))
        return self

    # Finalize
    def eot(self):
        self._append(Eot())
        return self

    def build(self) -> List[Message]:
        if not self.sealed:
            self.eot()

        return list(self._messages)


def build(
    command: Text,
    args: Arguments = None,
    *,
    stdin: Optional[Text] = None,
    env: Environment = None,
    cd: Optional[Text] = None,
) -> List[Message]:
    """Return the ordered request messages for one invocation.

    Absent options produce no message at all; they are not sent as empty.
    """

    builder = RequestBuilder(command)
    builder.args(args)

    if stdin is not None:
        builder.stdin(stdin)
    if env is not None:
        builder.envs(env)
    if cd is not None:
        builder.cd(cd)

    return builder.build()


def _arguments(values: Arguments) -> List[Text]:
    # A lone string is one argument, not a sequence of characters.
    if values is None:
        return []
    if isinstance(values, (str, bytes)):
        return [values]

    values = list(values)
    for value in values:
        if not isinstance(value, (str, bytes)):
            raise TypeError(f"arguments must be str or bytes, got {type(value).__name__}")

    return values


def _environment(pairs: Environment) -> List[Tuple[Text, Text]]:
    if pairs is None:
        return []
    if isinstance(pairs, Mapping):
        return list(pairs.items())

    result = []
    for pair in pairs:
        name, value = pair
        result.append((name, value))

    return result
