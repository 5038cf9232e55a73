""" Configuration handling: where the configuration directory lives, what
    the optional ``rambo.json`` file in that directory says, and which
    helper program should be spawned for each invocation.
"""

import os
import platform
import shlex
import sys

from . import json


def directory(default=None):
    """ Return the directory location where we should be loading and/or saving
        configuration files. This defaults to ``$HOME/.rambo``, but can be
        overridden by calling this method with a valid path, or by setting
        the ``RAMBO_HOME`` environment variable. Note that changes to the
        environment variable will be ignored unless it is set prior to the
        first invocation of this method.
    """

    if default is not None:
        default = str(default)
        default = os.path.expandvars(default)

        if os.path.isabs(default):
            pass
        else:
            raise ValueError('the default directory must be an absolute path')

        os.environ['RAMBO_HOME'] = default
        directory.found = default
        load.settings = None


    found = directory.found

    if found is not None:
        return found

    try:
        found = os.environ['RAMBO_HOME']
    except KeyError:
        pass
    else:
        directory.found = found
        return found

    try:
        home = os.environ['HOME']
    except KeyError:
        home = os.path.expanduser('~')

        if home == '~':
            raise RuntimeError('RAMBO_HOME and HOME environment variables not set, cannot determine rambo configuration directory')

    found = os.path.join(home, '.rambo')

    directory.found = found
    return found

directory.found = None



def filename():
    """ Return the full path to the ``rambo.json`` configuration file. The
        file is not required to exist.
    """

    return os.path.join(directory(), 'rambo.json')



def load(reload=False):
    """ Return the settings dictionary from the configuration file, or an
        empty dictionary if there is no configuration file. The contents are
        cached after the first successful load; set *reload* to True to read
        the file again.
    """

    settings = load.settings

    if settings is not None and reload == False:
        return settings

    path = filename()

    try:
        raw = open(path, 'rb').read()
    except FileNotFoundError:
        settings = dict()
    else:
        try:
            settings = json.loads(raw)
        except json.DecodeError as e:
            raise ValueError('invalid configuration file %s: %s' % (path, e)) from e

        if isinstance(settings, dict):
            pass
        else:
            raise ValueError('configuration file %s must contain a JSON object' % (path))

    load.settings = settings
    return settings

load.settings = None



def save(settings):
    """ Write the *settings* dictionary to the configuration file, replacing
        any previous contents, and refresh the cached copy.
    """

    settings = dict(settings)
    path = filename()
    base_directory = os.path.dirname(path)

    if os.path.exists(base_directory):
        pass
    else:
        os.makedirs(base_directory, mode=0o775)

    raw = json.dumps(settings)

    with open(path, 'wb') as output:
        output.write(raw)

    load.settings = settings



def executable():
    """ Return the name of the pre-built helper binary appropriate for the
        host platform. A RuntimeError is raised if no binary is built for
        this platform; :func:`helper` will then fall back to the Python
        reference helper.
    """

    system = platform.system()

    if system == 'Darwin':
        return 'rambo-mac'
    if system == 'Linux':
        return 'rambo-linux'
    if system == 'Windows':
        return 'rambo.exe'

    raise RuntimeError('no pre-built rambo helper for platform: ' + repr(system))



def priv():
    """ Return the directory where pre-built helper binaries are shipped.
    """

    here = os.path.dirname(os.path.abspath(__file__))
    return os.path.join(here, 'priv')



def helper(override=None):
    """ Return the argument vector used to spawn the helper program. The
        first of these that is set wins:

            1. the *override* argument;
            2. the ``RAMBO_HELPER`` environment variable;
            3. the ``helper`` field of the configuration file;
            4. a pre-built binary in :func:`priv` matching :func:`executable`;
            5. the Python reference helper, run with the current interpreter.

        A string value is taken as a path if such a file exists, otherwise
        it is split as a shell-style command line.
    """

    if override is not None:
        return _argv(override)

    try:
        found = os.environ['RAMBO_HELPER']
    except KeyError:
        pass
    else:
        if found:
            return _argv(found)

    settings = load()

    try:
        found = settings['helper']
    except KeyError:
        pass
    else:
        return _argv(found)

    try:
        name = executable()
    except RuntimeError:
        name = None

    if name is not None:
        bundled = os.path.join(priv(), name)
        if os.path.isfile(bundled) and os.access(bundled, os.X_OK):
            return [bundled]

    return [sys.executable, '-m', 'rambo.helper']



def timeout():
    """ Return the default invocation timeout in seconds from the
        configuration file, or None to wait indefinitely.
    """

    settings = load()

    try:
        value = settings['timeout']
    except KeyError:
        return None

    if value is None:
        return None

    value = float(value)
    if value < 0:
        raise ValueError('timeout in %s must be non-negative, got %r' % (filename(), value))

    return value



def _argv(value):

    if isinstance(value, str):
        if os.path.exists(value):
            return [value]
        argv = shlex.split(value)
    else:
        argv = [str(part) for part in value]

    if len(argv) == 0:
        raise ValueError('the helper command cannot be empty')

    return argv


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
