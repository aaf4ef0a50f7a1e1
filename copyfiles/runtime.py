import os

from . import compat
from . import config
from .error import PrintableError
from . import display
from .filepath import LOCAL, LocalNode, MountedNode
from .resolver import Build, ControllerEnvironment

DEFAULT_HOME_DIR_NAME = '.copyfiles'


class Runtime:
    '''Turns command line args and environment variables into the contexts the
    copy step works with: the parsed job config, the controller, and the
    build.'''

    def __init__(self, args, env):
        if args['--quiet'] and args['--verbose']:
            raise CommandLineError(
                "copyfiles can't be quiet and verbose at the same time.")
        self.quiet = args['--quiet']
        self.display = get_display(args)

        self._env = env
        self._set_paths(args, env)
        self.node = get_node(args)
        self.params = parse_params(args.get('--param') or [])
        self.controller = ControllerEnvironment(self.home_dir)

    def _set_paths(self, args, env):
        self.config_file = (args['--file'] or find_project_file(
            os.getcwd(), config.DEFAULT_CONFIG_FILE_NAME))
        self.home_dir = (args['--home'] or env.get('COPYFILES_HOME')
                         or os.path.join(os.path.expanduser('~'),
                                         DEFAULT_HOME_DIR_NAME))
        self.job_dir = (args['--job-dir'] or env.get('COPYFILES_JOB_DIR')
                        or os.path.dirname(os.path.abspath(self.config_file)))
        self.workspace = (args['--workspace'] or env.get('WORKSPACE')
                          or os.getcwd())

    def build_environment(self):
        '''The mapping $PARAMS are expanded against. Build parameters given
        with -p win over everything else.'''
        environment = dict(self._env)
        environment.update({
            'WORKSPACE': self.workspace,
            'COPYFILES_HOME': self.home_dir,
            'JOB_DIR': self.job_dir,
            'NODE_NAME': self.node.name,
        })
        environment.update(self.params)
        return environment

    def get_build(self):
        return Build(
            environment=self.build_environment(),
            project_dir=self.job_dir,
            built_on=self.node,
            workspace=self.node.create_path(self.workspace))

    def load_config(self):
        if not self.quiet:
            config.warn_duplicate_keys(self.config_file)
        return config.parse_file(self.config_file)


def find_project_file(start_dir, basename):
    '''Walk up the directory tree until we find a file of the given name.'''
    prefix = os.path.abspath(start_dir)
    while True:
        candidate = os.path.join(prefix, basename)
        if os.path.isfile(candidate):
            return candidate
        if os.path.exists(candidate):
            raise PrintableError("Found {}, but it's not a file.", candidate)
        if os.path.dirname(prefix) == prefix:
            # We've walked all the way to the top. Bail.
            raise PrintableError("Can't find {}", basename)
        # Not found at this level. We must go...shallower.
        prefix = os.path.dirname(prefix)


def get_node(args):
    name = args.get('--worker')
    root = args.get('--worker-root')
    if root:
        return MountedNode(name or 'worker', root)
    if name:
        return LocalNode(name)
    return LOCAL


def parse_params(params):
    parsed = {}
    for param in params:
        key, sep, value = param.partition('=')
        if not sep or not key.strip():
            raise CommandLineError(
                'Build parameters must look like KEY=VALUE, got "{}".', param)
        parsed[key.strip()] = value
    return parsed


def get_display(args):
    if args['--quiet']:
        return display.QuietDisplay()
    elif args['--verbose']:
        return display.VerboseDisplay()
    elif compat.is_fancy_terminal():
        return display.FancyDisplay()
    else:
        return display.BaseDisplay()


class CommandLineError(PrintableError):
    pass
