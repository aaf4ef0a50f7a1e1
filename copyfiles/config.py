import collections
import enum
import sys

import yaml

from .error import PrintableError

DEFAULT_CONFIG_FILE_NAME = 'copyfiles.yaml'


class MasterRelativeTo(enum.Enum):
    '''Where on the controller the source directory is looked up.'''
    USER_CONTENT = 'UserContent'
    HOME = 'Home'
    MASTER_WORKSPACE = 'MasterWorkspace'
    # Not a symbolic base: master_file_dir is a literal path.
    OTHER = 'Other'

    @classmethod
    def parse(cls, value):
        return _parse_enum(cls, value, cls.OTHER)


class SlaveRelativeTo(enum.Enum):
    '''Where on the worker the files are copied to.'''
    SLAVE_WORKSPACE = 'SlaveWorkspace'
    SLAVE_ANY_DIR = 'SlaveAnyDir'
    UNSPECIFIED = 'Unspecified'

    @classmethod
    def parse(cls, value):
        return _parse_enum(cls, value, cls.UNSPECIFIED)


def _parse_enum(enum_type, value, fallback):
    if isinstance(value, enum_type):
        return value
    for member in enum_type:
        if member.value == _clean(value):
            return member
    return fallback


_CopyConfiguration = collections.namedtuple('CopyConfiguration', [
    'master_file_dir', 'master_file_name', 'slave_file_dir',
    'master_relative_to', 'slave_relative_to'
])


class CopyConfiguration(_CopyConfiguration):
    '''The five fields of a job's copy step. Built once when the job is
    configured and shared, read-only, by every build of the job. Strings are
    trimmed and the relative-to fields are parsed into enums here, so nothing
    downstream needs to deal with raw values.'''

    __slots__ = ()

    def __new__(cls, master_file_dir='', master_file_name='',
                slave_file_dir='', master_relative_to=None,
                slave_relative_to=None):
        return super().__new__(
            cls,
            _clean(master_file_dir),
            _clean(master_file_name),
            _clean(slave_file_dir),
            MasterRelativeTo.parse(master_relative_to),
            SlaveRelativeTo.parse(slave_relative_to))

    def file_names(self):
        '''The trimmed, non-blank entries of master_file_name.'''
        return split_file_names(self.master_file_name)


def split_file_names(file_names):
    return [name.strip() for name in file_names.split(',') if name.strip()]


def _clean(value):
    if value is None:
        return ''
    if isinstance(value, bool):
        # Avoid the Python-specific True/False capitalization, to be
        # consistent with what people will usually type in YAML.
        return 'true' if value else 'false'
    return str(value).strip()


class ParserError(PrintableError):
    pass


# YAML field names, mapped to CopyConfiguration fields.
FIELDS = collections.OrderedDict([
    ('master relative to', 'master_relative_to'),
    ('master file dir', 'master_file_dir'),
    ('master file name', 'master_file_name'),
    ('slave relative to', 'slave_relative_to'),
    ('slave file dir', 'slave_file_dir'),
])


def parse_file(file_path):
    with open(file_path) as f:
        return parse_string(f.read())


def parse_string(yaml_str):
    try:
        blob = yaml.safe_load(yaml_str)
    except yaml.error.YAMLError as e:
        raise PrintableError('YAML parser error:\n\n{}', e) from e
    if blob is None:
        blob = {}
    return _parse_toplevel(blob)


def _parse_toplevel(blob):
    kwargs = {}
    for yaml_name, field in FIELDS.items():
        value = typesafe_pop(blob, yaml_name, None)
        if isinstance(value, (dict, list)):
            raise ParserError('"{}" field must be a string.', yaml_name)
        kwargs[field] = value
    if blob:
        raise ParserError('Unknown toplevel fields: {}',
                          ', '.join(str(key) for key in blob.keys()))
    return CopyConfiguration(**kwargs)


def typesafe_pop(d, field, default=object()):
    if not isinstance(d, dict):
        raise ParserError('Error parsing copy config: {!r} is not a map.', d)
    if default == typesafe_pop.__defaults__[0]:
        return d.pop(field)
    else:
        return d.pop(field, default)


# Code for the duplicate keys warning

DuplicatedKey = collections.namedtuple('DuplicatedKey',
                                       ['key', 'first_line', 'second_line'])


def _get_duplicate_keys_approximate(yaml_text):
    '''PyYAML silently keeps the last of two identical keys. This finds
    top-level duplicates well enough to warn about them.'''
    duplicates = []
    seen = {}
    for _line_index, line in enumerate(yaml_text.split('\n')):
        line_num = _line_index + 1
        # Strip comments. This does the wrong thing for quoted keys containing
        # '#', but it's only for the sake of a warning.
        if '#' in line:
            line = line[:line.index('#')]
        # Only unindented dictionary keys matter, the config file is flat.
        if ':' not in line or line[:1] in (' ', '-'):
            continue
        key = line.split(':')[0].strip()
        if key in seen:
            duplicates.append(DuplicatedKey(key, seen[key], line_num))
        seen[key] = line_num
    return duplicates


def _warn(s, *args, **kwargs):
    print(s.format(*args, **kwargs), file=sys.stderr)


def warn_duplicate_keys(file_path):
    with open(file_path) as f:
        text = f.read()
    duplicates = _get_duplicate_keys_approximate(text)
    if not duplicates:
        return
    _warn(
        'WARNING: Duplicate keys found in {}\n'
        'These will overwrite each other:', file_path)
    for duplicate in duplicates:
        _warn('  "{}" on lines {} and {}', *duplicate)
