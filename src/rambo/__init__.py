""" Python implementation of rambo: run external commands to completion,
    capturing their exit status, standard output, and standard error, with
    optional piped input, environment overrides, and working directory.
    Invocations can be chained so one command's output becomes the next
    command's input, much like a Unix pipeline.

    Commands are executed by a helper program spawned fresh for every
    invocation; the two sides speak the framed message protocol defined
    in :mod:`rambo.protocol`.
"""

# Utility components.

from . import json

# Submodules used by multiple other components.

from . import protocol
from . import config
home = config.directory

from . import transport

# Primary public-facing interfaces.

from .result import (
    AbnormalTermination,
    CommandFailed,
    Failure,
    Options,
    Outcome,
    Result,
    StartupError,
    Success,
)

from . import chain
run = chain.run
pipe = chain.pipe

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
