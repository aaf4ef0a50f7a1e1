import collections

from .config import split_file_names
from .display import tagged
from .glob import GlobError

# One outcome per entry in the file list (or a single SourceMissing for the
# whole batch). Callers look at these instead of catching exceptions.
Copied = collections.namedtuple('Copied',
                                ['file', 'count', 'source', 'destination'])
SourceMissing = collections.namedtuple('SourceMissing', ['source'])
ZeroMatched = collections.namedtuple('ZeroMatched',
                                     ['file', 'source', 'destination'])
IOFailure = collections.namedtuple('IOFailure', ['file', 'source', 'cause'])
InvalidPattern = collections.namedtuple('InvalidPattern', ['file', 'cause'])


def copy_all(source_dir, dest_dir, file_names, display):
    '''Copy each entry of the comma separated file_names from source_dir into
    dest_dir. Entries are independent: a failed entry is logged and the next
    one is still tried. Returns the list of outcomes. OSErrors never escape,
    but anything else (like KeyboardInterrupt) does, so a cancelled build
    stops here.'''
    if not source_dir.exists():
        outcome = SourceMissing(source_dir)
        report(outcome, display)
        return [outcome]

    outcomes = []
    for file in split_file_names(file_names):
        outcome = copy_one(source_dir, dest_dir, file)
        report(outcome, display)
        outcomes.append(outcome)
    return outcomes


def copy_one(source_dir, dest_dir, file):
    try:
        count = source_dir.copy_recursive_to(file, dest_dir)
    except GlobError as e:
        return InvalidPattern(file, e)
    except OSError as e:
        return IOFailure(file, source_dir, e)
    if count == 0:
        return ZeroMatched(file, source_dir, dest_dir)
    return Copied(file, count, source_dir, dest_dir)


def report(outcome, display):
    if isinstance(outcome, Copied):
        display.info(tagged("Copy file: '{}' from controller: {} to worker: {}"
                            .format(outcome.file, outcome.source,
                                    outcome.destination)))
        display.debug(tagged('{} file(s) matched {!r}.'.format(
            outcome.count, outcome.file)))
    elif isinstance(outcome, SourceMissing):
        display.error(tagged("Specified file directory '{}' does not exist."
                             .format(outcome.source)))
    elif isinstance(outcome, ZeroMatched):
        display.error(tagged(
            "Directory '{}' exists but failed copying '{}' to '{}'.".format(
                outcome.source, outcome.file, outcome.destination)))
    elif isinstance(outcome, IOFailure):
        display.error(tagged("Fail to copy '{}' from '{}': {}".format(
            outcome.file, outcome.source, outcome.cause)))
    elif isinstance(outcome, InvalidPattern):
        display.error(tagged("Can't copy '{}': {}".format(
            outcome.file, outcome.cause)))
    else:
        raise TypeError('Not a copy outcome: {!r}'.format(outcome))
