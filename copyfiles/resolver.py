import collections
import os

from .config import MasterRelativeTo, SlaveRelativeTo
from .display import tagged
from .error import ConfigurationError
from .expand import expand_or_literal
from .filepath import FilePath

USER_CONTENT_DIR_NAME = 'userContent'
WORKSPACE_DIR_NAME = 'workspace'

ResolvedPaths = collections.namedtuple('ResolvedPaths',
                                       ['source', 'destination'])


class ControllerEnvironment:
    '''The parts of the controller the resolver needs. Passed in explicitly,
    so that tests (and embedders) can point it anywhere.'''

    def __init__(self, root_path):
        if not isinstance(root_path, FilePath):
            root_path = FilePath.local(root_path)
        self.root_path = root_path

    @property
    def user_content_path(self):
        return self.root_path.child(USER_CONTENT_DIR_NAME)


class Build:
    '''Everything about one build that the copy step looks at.

    environment: mapping used to expand $PARAMS in configured strings
    project_dir: the job's directory on the controller
    built_on:    the Node the build runs on
    workspace:   the build's workspace, a FilePath on built_on (or None)
    '''

    def __init__(self, environment, project_dir, built_on, workspace):
        self.environment = environment
        self.project_dir = project_dir
        self.built_on = built_on
        self.workspace = workspace

    @property
    def master_workspace(self):
        return FilePath.local(os.path.join(self.project_dir,
                                           WORKSPACE_DIR_NAME))


def resolve_source_dir(config, build, controller, display):
    file_dir = expand_or_literal(config.master_file_dir, build.environment,
                                 display)
    relative_to = config.master_relative_to
    if relative_to is MasterRelativeTo.USER_CONTENT:
        base = controller.user_content_path
    elif relative_to is MasterRelativeTo.HOME:
        base = controller.root_path
    elif relative_to is MasterRelativeTo.MASTER_WORKSPACE:
        base = build.master_workspace
    else:
        base = None

    if base is None:
        # Only reachable on the controller's own disk, even when the
        # controller handle itself points somewhere else.
        return FilePath.local(file_dir)
    if file_dir:
        return base.child(file_dir)
    return base


def resolve_destination_dir(config, build, display):
    file_dir = expand_or_literal(config.slave_file_dir, build.environment,
                                 display)
    relative_to = config.slave_relative_to
    if relative_to is SlaveRelativeTo.SLAVE_WORKSPACE:
        if build.workspace is None:
            raise UnresolvedDestinationError(
                'The build has no workspace on {} to copy files into.',
                _node_name(build))
        if file_dir:
            return build.workspace.child(file_dir)
        return build.workspace
    elif relative_to is SlaveRelativeTo.SLAVE_ANY_DIR:
        if not file_dir:
            raise UnresolvedDestinationError(
                'A destination directory is required when copying to any '
                'directory on the worker.')
        if build.built_on is None:
            raise UnresolvedDestinationError(
                'The build is not running on any node.')
        return build.built_on.create_path(file_dir)
    raise UnresolvedDestinationError(
        'Destination is not relative to anything. Set "slave relative to" to '
        'one of: {}.', ', '.join(
            m.value for m in SlaveRelativeTo
            if m is not SlaveRelativeTo.UNSPECIFIED))


def resolve_paths(config, build, controller, display):
    source = resolve_source_dir(config, build, controller, display)
    destination = resolve_destination_dir(config, build, display)
    display.debug(tagged('Resolved source {!r} and destination {!r}.'.format(
        source, destination)))
    return ResolvedPaths(source, destination)


def _node_name(build):
    return build.built_on.name if build.built_on else 'any node'


class UnresolvedDestinationError(ConfigurationError):
    pass
