import os
import sys


# Computed at load time, so that tests which chdir around still find the
# VERSION file next to this module.
MODULE_ROOT = os.path.abspath(os.path.dirname(__file__))


def makedirs(path):
    '''Like os.makedirs(path, exist_ok=True), but tolerates an existing
    directory with non-default permissions, and accepts pathlib paths.'''
    path = str(path)
    if not os.path.isdir(path):
        os.makedirs(path, exist_ok=True)


def is_fancy_terminal():
    '''The Windows terminal does not support the ANSI colors we use for error
    lines. This is a quick and dirty way to make sure we default to plain
    output on Windows and when output is piped into a build log.'''
    return sys.stdout.isatty() and os.name != 'nt'
