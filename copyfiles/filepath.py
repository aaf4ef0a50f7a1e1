import os
import shutil

from . import glob
from .compat import makedirs

# Nodes are the machines a build touches. The controller is always the machine
# we're running on. A worker is either the same machine, or a machine whose
# filesystem the controller can reach through a mount point (an NFS or SMB
# share, a bind mount into a container, and so on). Either way, a FilePath
# pairs a node with a path as that node sees it, and all the actual file
# operations go through node.local_path() to find the bytes.


class Node:
    def __init__(self, name):
        self.name = name

    def local_path(self, path):
        '''Where the node-side `path` can be reached from this process.'''
        raise NotImplementedError

    def create_path(self, path):
        return FilePath(self, path)

    def __repr__(self):
        return '{}({!r})'.format(type(self).__name__, self.name)


class LocalNode(Node):
    def __init__(self, name='controller'):
        super().__init__(name)

    def local_path(self, path):
        return path


class MountedNode(Node):
    def __init__(self, name, mount_root):
        super().__init__(name)
        self.mount_root = os.path.abspath(mount_root)

    def local_path(self, path):
        # Node paths are absolute on the node. Relative ones are taken from the
        # node's root, since there is no remote working directory to go by.
        relative = os.path.splitdrive(path)[1].lstrip('/\\')
        return os.path.join(self.mount_root, relative)

    def __repr__(self):
        return 'MountedNode({!r}, {!r})'.format(self.name, self.mount_root)


LOCAL = LocalNode()


class FilePath:
    '''A directory (or file) on some node. This is the handle the resolver
    hands to the copier, so it only needs the few operations the copy
    uses.'''

    def __init__(self, node, path):
        self.node = node
        self.path = path

    @classmethod
    def local(cls, path):
        '''A path on the local disk of the controller process.'''
        return cls(LOCAL, path)

    def child(self, relpath):
        return FilePath(self.node, os.path.join(self.path, relpath))

    def exists(self):
        return os.path.exists(self.node.local_path(self.path))

    def is_dir(self):
        return os.path.isdir(self.node.local_path(self.path))

    def copy_recursive_to(self, file_mask, target):
        '''Copy every file under this directory that matches file_mask into
        target, keeping paths relative to this directory. Returns the number
        of files copied. Existing files in target are overwritten, and nothing
        else in target is touched. Raises OSError on I/O problems and
        glob.GlobError for unusable masks, including ones that would reach
        outside either directory.'''
        root = self.node.local_path(self.path)
        dest_root = target.node.local_path(target.path)
        mask = glob.FileMask(file_mask)
        # A plain directory name means the whole directory.
        if (not glob.contains_unescaped_stars(mask.mask)
                and self.child(mask.mask).is_dir()):
            mask = mask.as_directory()
        count = 0
        for relpath in _matching_files(root, mask):
            source = os.path.join(root, *relpath.split('/'))
            dest = os.path.join(dest_root, *relpath.split('/'))
            if not (_is_within(source, root) and _is_within(dest, dest_root)):
                raise glob.GlobError(file_mask,
                                     'matched a path outside the directory.')
            makedirs(os.path.dirname(dest))
            shutil.copy2(source, dest)
            count += 1
        return count

    def __eq__(self, other):
        return (isinstance(other, FilePath) and self.node is other.node
                and self.path == other.path)

    def __hash__(self):
        return hash((id(self.node), self.path))

    def __str__(self):
        return self.path

    def __repr__(self):
        return 'FilePath({!r}, {!r})'.format(self.node, self.path)


def _raise(error):
    raise error


def _is_within(path, root):
    root = os.path.abspath(root)
    return os.path.commonpath([os.path.abspath(path), root]) == root


def _matching_files(root, mask):
    '''Yield the Posix relative paths of all the files under root that the
    mask matches, in a stable order. The walk starts at the mask's unglobbed
    prefix, which is the whole mask when it names a single file.'''
    start = os.path.join(root, *mask.prefix.split('/')) if mask.prefix \
        else root
    if os.path.isfile(start):
        if mask.matches(mask.prefix):
            yield mask.prefix
        return
    if not os.path.isdir(start):
        return
    for dirpath, dirnames, filenames in os.walk(start, onerror=_raise):
        dirnames.sort()
        reldir = os.path.relpath(dirpath, root)
        for filename in sorted(filenames):
            if reldir == os.curdir:
                relpath = filename
            else:
                relpath = '/'.join(reldir.split(os.sep) + [filename])
            if not os.path.isfile(os.path.join(dirpath, filename)):
                continue
            if mask.matches(relpath):
                yield relpath
