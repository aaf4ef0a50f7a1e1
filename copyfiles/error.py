from contextlib import contextmanager
from textwrap import indent


class PrintableError(Exception):
    def __init__(self, message, *args, **kwargs):
        self.message = message.format(*args, **kwargs)

    def __str__(self):
        return self.message

    def add_context(self, context):
        self.message = 'In {}:\n{}'.format(context, indent(self.message, '  '))


class ConfigurationError(PrintableError):
    '''Raised when a job's copy configuration can't be turned into concrete
    paths. The wrapper reports these as build log errors instead of failing
    the build.'''
    pass


@contextmanager
def error_context(context):
    '''Prefix any PrintableError raised inside the block with `context`, so
    that nested failures read like "In copyfiles.yaml:\\n  In ...:".'''
    try:
        yield
    except PrintableError as e:
        e.add_context(context)
        raise
