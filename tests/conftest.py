import os
import pytest
import sys

import rambo
from rambo.transport import Transport, TransportClosed


@pytest.fixture(autouse=True)
def rambo_home(tmp_path, monkeypatch):
    """ Point the configuration directory at an empty temporary location so
        that a user's own ~/.rambo never leaks into the tests.
    """

    home = tmp_path / 'rambo-home'
    monkeypatch.setenv('RAMBO_HOME', str(home))
    monkeypatch.delenv('RAMBO_HELPER', raising=False)

    # The reference helper runs as 'python -m rambo.helper' and needs to
    # import the same rambo package as the tests, installed or not.

    source = os.path.dirname(os.path.dirname(os.path.abspath(rambo.__file__)))
    path = os.environ.get('PYTHONPATH')
    if path:
        path = source + os.pathsep + path
    else:
        path = source
    monkeypatch.setenv('PYTHONPATH', path)

    rambo.config.directory.found = None
    rambo.config.load.settings = None

    yield home

    rambo.config.directory.found = None
    rambo.config.load.settings = None


@pytest.fixture
def python_helper():
    """ The argument vector for the bundled reference helper.
    """

    return [sys.executable, '-m', 'rambo.helper']


class FakeTransport(Transport):
    """ A scripted stand-in for a helper process. *responses* are handed out
        one per recv(); once they run out the channel reports closure with
        *exit_code*.
    """

    def __init__(self, responses=(), exit_code=None):
        self.responses = list(responses)
        self.exit_code = exit_code
        self.sent = list()
        self.opened = False
        self.closed = False

    @property
    def is_open(self):
        return self.opened and not self.closed

    def open(self):
        self.opened = True

    def close(self):
        self.closed = True

    def send(self, msg):
        self.sent.append(msg)

    def recv(self):
        if self.responses:
            return self.responses.pop(0)
        raise TransportClosed(self.exit_code)


@pytest.fixture
def fake_transport():
    return FakeTransport


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
