# What it does: Provides the repository handle that every engine function receives, plus finding and initializing the `.subsys` directory
# How it does: `Repository` derives all metadata paths (objects, snapshots, log, config) from the working-tree root once, so no module builds `.subsys` paths on its own. `find_repo_root` walks up the directory tree to locate the `.subsys` directory
# What data structure it uses: Uses recursion (linear recursion) to find the repo root. The handle itself is a plain record of paths

import os

META_DIR = '.subsys'
IGNORE_FILE = '.subsysignore'
SNAPSHOT_EXTENSION = '.gz'
LOG_FILE = 'logTrack.json'
CONFIG_FILE = 'config'

# Names never included in a snapshot, whatever the ignore file says
RESERVED_NAMES = frozenset({META_DIR, 'config.json', 'node_modules'})


class Repository:
    def __init__(self, root):
        self.root = os.path.abspath(root)
        self.meta_dir = os.path.join(self.root, META_DIR)
        self.objects_dir = os.path.join(self.meta_dir, 'objects')
        self.snapshots_dir = os.path.join(self.meta_dir, 'snapshots')
        self.log_path = os.path.join(self.snapshots_dir, LOG_FILE)
        self.config_path = os.path.join(self.meta_dir, CONFIG_FILE)
        self.head_path = os.path.join(self.meta_dir, 'HEAD')

    def __repr__(self):
        return f"Repository({self.root!r})"

    def __eq__(self, other):
        return isinstance(other, Repository) and other.root == self.root

    def __hash__(self):
        return hash(self.root)


def find_repo_root(path='.'): # Recursively searches for the .subsys directory to find the repository root
    path = os.path.abspath(path)
    if os.path.isdir(os.path.join(path, META_DIR)):
        return path
    parent_path = os.path.dirname(path)
    if parent_path == path:
        return None
    return find_repo_root(parent_path)


def open_repository(path='.'): # Returns a Repository for the enclosing .subsys directory, or None outside a repository
    repo_root = find_repo_root(path)
    if not repo_root:
        return None
    return Repository(repo_root)


def init_repository(path='.'):
    """
    Creates the .subsys layout under `path`.
    Returns (repo, created); created is False when the directory already existed.
    """
    repo = Repository(path)
    created = not os.path.exists(repo.meta_dir)

    os.makedirs(repo.objects_dir, exist_ok=True)
    os.makedirs(repo.snapshots_dir, exist_ok=True)
    if not os.path.exists(repo.head_path):
        with open(repo.head_path, 'w') as f:
            f.write('ref: refs/heads/master\n')

    return repo, created
