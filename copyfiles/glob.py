from pathlib import PurePosixPath
import re

from .error import PrintableError

UNESCAPED_STAR_EXPR = (
    r'(?<!\\)'  # negative lookbehind assertion for more backslashes
    r'(?:\\\\)*'  # non-capturing group of an even number of backslashes
    r'\*'  # literal *
)

# Version control metadata and editor droppings. Masks never match these, even
# when an entry names one of them directly.
DEFAULT_EXCLUDES = (
    '**/*~',
    '**/#*#',
    '**/.#*',
    '**/%*%',
    '**/._*',
    '**/.DS_Store',
    '**/CVS/**',
    '**/.cvsignore',
    '**/SCCS/**',
    '**/.svn/**',
    '**/.git/**',
    '**/.gitignore',
    '**/.gitattributes',
    '**/.hg/**',
    '**/.hgignore',
    '**/.bzr/**',
    '**/.bzrignore',
)


def contains_unescaped_stars(glob):
    return re.search(UNESCAPED_STAR_EXPR, glob) is not None


def unglobbed_prefix(glob):
    '''Returns all the path components, starting from the beginning, up to the
    first one with any kind of glob. So for example, if glob is 'a/b/c*/d',
    return 'a/b'.'''
    parts = []
    for part in PurePosixPath(glob).parts:
        if contains_unescaped_stars(part):
            break
        else:
            parts.append(part)
    return str(PurePosixPath(*parts)) if parts else ''


def _split_on_indices(s, indices):
    start = 0
    for i in indices:
        yield s[start:i]
        start = i + 1
    yield s[start:]


def split_on_stars_interpreting_backslashes(s):
    r'''Split the string on unescaped *'s, so that the rest can be
    regex-escaped and then rejoined with the right regex. Backslash-escaped *'s
    and \'s are left in as literals.'''

    star_indices = [
        match.end() - 1 for match in re.finditer(UNESCAPED_STAR_EXPR, s)
    ]
    literalized_parts = [
        part.replace(r'\*', '*').replace(r'\\', '\\')
        for part in _split_on_indices(s, star_indices)
    ]
    return literalized_parts


def normalize_file_mask(mask):
    '''File masks follow the Ant conventions of the CI runtime: a trailing
    slash means "everything below this directory", and so does a trailing
    **. Leading './' is dropped. The result is a glob whose last component
    matches files.'''
    mask = mask.strip()
    while mask.startswith('./'):
        mask = mask[2:]
    if mask.endswith('/'):
        mask += '**'
    canonical = str(PurePosixPath(mask)) if mask else ''
    if canonical == '**' or canonical.endswith('/**'):
        canonical += '/*'
    return canonical


def glob_to_path_regex(glob):
    '''Supports * and **. Backslashes can escape stars or other backslashes.
    ** may not adjoin any characters other than slash, and it matches zero or
    more whole path components. Paths get canonicalized before they're
    converted, so duplicate and trailing slashes get dropped. The paths you
    match against must be relative and in Posix form.'''

    canonical_glob = str(PurePosixPath(glob))

    # The final regex starts with ^ and ends with $ to force it to match the
    # whole path.
    regex = '^'
    components = canonical_glob.split('/')
    for i, component in enumerate(components):
        if component == '**':
            if i == len(components) - 1:
                raise GlobError(glob,
                                '** may not be the last component in a path.')
            else:
                regex += r'(?:[^/]+/)*'
        elif '**' in component:
            raise GlobError(glob, '** must be an entire path component.')
        else:
            if component == '*':
                # A lone * may not match empty.
                regex += r'[^/]+'
            else:
                # A * with other characters may match empty. Escape all other
                # regex special characters.
                star_parts = split_on_stars_interpreting_backslashes(component)
                escaped_parts = map(re.escape, star_parts)
                regex += r'[^/]*'.join(escaped_parts)
            # Add a trailing slash for every component except **.
            if i < len(components) - 1:
                regex += '/'

    regex += '$'
    return regex


class FileMask:
    '''A compiled include mask plus the default excludes. `prefix` is the
    part of the mask before any wildcard, so a walk can start there instead
    of at the root.'''

    def __init__(self, mask, excludes=DEFAULT_EXCLUDES):
        self.mask = normalize_file_mask(mask)
        if not self.mask:
            raise GlobError(mask, 'empty file mask.')
        path = PurePosixPath(self.mask)
        if path.is_absolute():
            raise GlobError(mask, 'file masks must be relative paths.')
        if '..' in path.parts:
            raise GlobError(mask, 'file masks may not contain "..".')
        self.prefix = unglobbed_prefix(self.mask)
        self._include = re.compile(glob_to_path_regex(self.mask))
        self.excludes = excludes
        self._excludes = [
            re.compile(glob_to_path_regex(normalize_file_mask(e)))
            for e in excludes
        ]

    def matches(self, relpath):
        if not self._include.match(relpath):
            return False
        return not any(e.match(relpath) for e in self._excludes)

    def as_directory(self):
        '''The mask for the whole subtree, when the mask names a directory.'''
        return FileMask(self.mask + '/', self.excludes)


class GlobError(PrintableError):
    def __init__(self, glob, message):
        super().__init__('Glob error in "{}": {}', glob, message)
