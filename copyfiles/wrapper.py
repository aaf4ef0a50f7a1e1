from . import copier
from .config import split_file_names
from .display import tagged
from .error import ConfigurationError
from .expand import expand_or_literal
from . import resolver


class Environment:
    '''What before_build hands back to the pipeline. Tearing it down always
    succeeds: copying auxiliary files must never fail or block a build.'''

    def __init__(self, outcomes=()):
        self.outcomes = list(outcomes)

    def tear_down(self, build, display):
        return True


class CopyFilesWrapper:
    '''Copies the configured files to the worker before a build runs. The
    pipeline calls before_build() ahead of the build steps and after_build()
    once they're done.'''

    def __init__(self, config, controller):
        self.config = config
        self.controller = controller

    def before_build(self, build, display):
        try:
            paths = resolver.resolve_paths(self.config, build, self.controller,
                                           display)
        except ConfigurationError as e:
            display.error(tagged(e.message))
            return Environment()
        file_names = expand_or_literal(self.config.master_file_name,
                                       build.environment, display)
        if not split_file_names(file_names):
            display.info(tagged('No files configured to copy.'))
            return Environment()
        outcomes = copier.copy_all(paths.source, paths.destination,
                                   file_names, display)
        return Environment(outcomes)

    def after_build(self, build, display, environment=None):
        environment = environment or Environment()
        return environment.tear_down(build, display)
