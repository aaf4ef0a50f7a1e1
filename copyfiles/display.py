import sys

# The display classes are the build log. Everything the copy step wants the
# user to see goes through one of three methods:
#
#   info()   informational lines, like which files were copied
#   error()  error lines, prefixed with 'ERROR: ' like the CI runtime does
#   debug()  detail that's only interesting with --verbose
#
# QuietDisplay drops info and debug lines but never drops errors, since errors
# are the only way a failed copy becomes visible (the build itself is never
# failed). VerboseDisplay prints everything. FancyDisplay is the default on a
# terminal and paints error lines red.
#
# print() is for output that isn't part of the build log, like the result of
# the `resolve` command, and is never suppressed.

ERROR_PREFIX = 'ERROR: '
LOG_TAG = '[copy-files]'

ANSI_RED = '\x1b[31m'
ANSI_DEFAULT_COLOR = '\x1b[39m'


def tagged(message):
    return '{} {}'.format(LOG_TAG, message)


class BaseDisplay:
    def __init__(self, output=None):
        self.output = output or sys.stdout
        # Errors are counted so callers can tell whether anything went wrong
        # without parsing the log.
        self.error_count = 0

    def print(self, *args, **kwargs):
        print(*args, file=self.output, **kwargs)

    def info(self, line):
        self._info(line)

    def debug(self, line):
        self._debug(line)

    def error(self, line):
        self.error_count += 1
        self._error(ERROR_PREFIX + line)

    # Callbacks that get overridden by subclasses.

    def _info(self, line):
        self.print(line)

    def _debug(self, line):
        pass

    def _error(self, line):
        self.print(line)


class QuietDisplay(BaseDisplay):
    '''Prints only errors.'''

    def _info(self, line):
        pass


class VerboseDisplay(BaseDisplay):
    '''Prints everything, including debug lines.'''

    def _debug(self, line):
        self.print(line)


class FancyDisplay(BaseDisplay):
    '''Colors error lines, for a terminal.'''

    def _error(self, line):
        self.output.write(ANSI_RED)
        self.print(line, end='')
        self.output.write(ANSI_DEFAULT_COLOR)
        self.output.write('\n')
        self.output.flush()
