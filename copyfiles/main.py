#! /usr/bin/env python3

import collections
import json
import os
import sys

import docopt

from . import compat
from .error import PrintableError, error_context
from . import resolver
from .runtime import Runtime
from .wrapper import CopyFilesWrapper

__doc__ = '''\
Usage:
    copyfiles [-hqv] [--file=<file>] [--home=<dir>] [--job-dir=<dir>]
              [--workspace=<dir>] [--worker=<name>] [--worker-root=<dir>]
              [-p <param>]... <command> [<args>...]
    copyfiles [--help|--version]

Commands:
    run       copy files to the worker before a build
    resolve   show where files would be copied from and to
    help      show help for subcommands, same as -h/--help

Options:
    -h --help             so much help
    -q --quiet            only print errors
    -v --verbose          print everything
    -p --param <param>    a build parameter, KEY=VALUE, for $KEY expansion

    --file=<file>
        The copy config to use instead of searching the current directory and
        its parents for 'copyfiles.yaml'.
    --home=<dir>
        The controller's root directory, which holds userContent. Defaults to
        $COPYFILES_HOME, or '~/.copyfiles'.
    --job-dir=<dir>
        The job's directory on the controller. Its 'workspace' subdirectory is
        the controller-side workspace. Defaults to $COPYFILES_JOB_DIR, or the
        directory containing the copy config.
    --workspace=<dir>
        The build's workspace, as a path on the worker. Defaults to
        $WORKSPACE, or the current directory.
    --worker=<name>
        The name of the worker node running the build.
    --worker-root=<dir>
        Where the worker's filesystem is mounted on this machine. Without it,
        the worker is this machine.
'''


def copyfiles_command(name, doc):
    def decorator(f):
        COMMAND_FNS[name] = f
        COMMAND_DOCS[name] = doc
        return f

    return decorator


COMMAND_FNS = {}
COMMAND_DOCS = {}


@copyfiles_command('run', '''\
Usage:
    copyfiles run [-hqv]

Copies the files named in the copy config from the controller to the
worker, then tears down. Missing files, unmatched names and I/O errors
are reported as ERROR lines, but never fail the run: the exit code is 0
unless the config itself can't be read.

Options:
    -h --help      this again?
    -q --quiet     only print errors
    -v --verbose   print everything
''')
def do_run(params):
    wrapper = CopyFilesWrapper(params.config, params.runtime.controller)
    build = params.runtime.get_build()
    display = params.runtime.display
    environment = wrapper.before_build(build, display)
    wrapper.after_build(build, display, environment)


@copyfiles_command('resolve', '''\
Usage:
    copyfiles resolve [-hqv] [--json]

Prints the source directory on the controller and the destination
directory on the worker, without copying anything.

Options:
    -h --help      where do the files go?
    --json         print output as JSON
    -q --quiet     only print errors
    -v --verbose   print everything
''')
def do_resolve(params):
    runtime = params.runtime
    paths = resolver.resolve_paths(params.config, runtime.get_build(),
                                   runtime.controller, runtime.display)
    if params.args['--json']:
        runtime.display.print(json.dumps({
            'source': str(paths.source),
            'source_node': paths.source.node.name,
            'destination': str(paths.destination),
            'destination_node': paths.destination.node.name,
        }))
    else:
        runtime.display.print('source: {} (on {})'.format(
            paths.source, paths.source.node.name))
        runtime.display.print('destination: {} (on {})'.format(
            paths.destination, paths.destination.node.name))


def get_version():
    version_file = os.path.join(compat.MODULE_ROOT, 'VERSION')
    with open(version_file) as f:
        return f.read().strip()


def print_red(*args, **kwargs):
    if compat.is_fancy_terminal():
        sys.stdout.write('\x1b[31m')
    print(*args, **kwargs)
    if compat.is_fancy_terminal():
        sys.stdout.write('\x1b[39m')


def maybe_print_help_and_return(args):
    # `copyfiles --version`
    if args['--version']:
        print(get_version())
        return 0

    help = args['--help']
    command = args['<command>']
    if command == "help":
        help = True
        help_args = args['<args>']
        command = help_args[0] if help_args else None

    # no explicit command, just print toplevel help
    if command is None:
        print(__doc__, end='')
        return 0

    # bad command, or help for a bad command
    if command not in COMMAND_DOCS:
        print(__doc__, end='', file=sys.stderr)
        return 1

    # help for a specific command that actually exists
    if help:
        doc = COMMAND_DOCS.get(command, __doc__)
        print(doc, end='')
        return 0

    # otherwise help is not called for
    return None


def merged_args_dicts(global_args, subcommand_args):
    '''We deal with docopt args from the toplevel parse and the subcommand
    parse. We don't want False values for a flag in the subcommand to override
    True values if that flag was given at the top level. This function
    specifically handles that case.'''
    merged = global_args.copy()
    for key, val in subcommand_args.items():
        if key not in merged:
            merged[key] = val
        elif type(merged[key]) is type(val) is bool:
            merged[key] = merged[key] or val
        else:
            raise RuntimeError("Unmergable args.")
    return merged


def docopt_parse_args(argv):
    args = docopt.docopt(__doc__, argv, help=False, options_first=True)
    command = args['<command>']
    # Skip further parsing for cases like `copyfiles badcommand` (because
    # there is no docopt), `copyfiles help <cmd>` (because help is a fake
    # command also with no docopt), and `copyfiles --help run`.
    if command in COMMAND_DOCS and not args['--help']:
        command_doc = COMMAND_DOCS[command]
        command_argv = [command] + args['<args>']
        command_args = docopt.docopt(command_doc, command_argv, help=False)
        args = merged_args_dicts(args, command_args)
    return args


CommandParams = collections.namedtuple('CommandParams',
                                       ['args', 'runtime', 'config'])


# Called as a setup.py entry point, or from __main__.py
# (`python3 -m copyfiles`).
def main(*, argv=None, env=None, nocatch=False):
    if argv is None:
        argv = sys.argv[1:]
    if env is None:
        env = os.environ.copy()

    args = docopt_parse_args(argv)
    command = args['<command>']

    ret = maybe_print_help_and_return(args)
    if ret is not None:
        return ret

    try:
        runtime = Runtime(args, env)
        with error_context(runtime.config_file):
            config = runtime.load_config()
        params = CommandParams(args, runtime, config)
        command_fn = COMMAND_FNS[command]
        command_fn(params)
    except PrintableError as e:
        if args['--verbose'] or nocatch:
            # Just allow the stacktrace to print if verbose, or in testing.
            raise
        print_red(e.message, end='' if e.message.endswith('\n') else '\n')
        return 1
