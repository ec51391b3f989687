# What it does: Creates snapshots (hash the tree, refuse duplicates, store blobs, write the compressed artifact, log it) and loads them back
# How it does: An artifact is gzip-compressed JSON holding the Merkle Tree plus a flat list of every file's relative path and digest. Loading validates the file and its shape and returns None instead of raising, so scans over many artifacts can skip bad ones
# What data structure it uses: Merkle Tree (the snapshot's structure), List (the flat file list used for restoration)

import os
import re
import sys
import gzip
import json
import zlib

from . import objects, snapshot_log
from .ignore import get_ignored_names
from .repository import SNAPSHOT_EXTENSION
from .tree import TreeNode, TREE, hash_tree, list_files

DUPLICATE_NAME = 'duplicate-name'
DUPLICATE_CONTENT = 'duplicate-content'

REFUSAL_MESSAGES = {
    DUPLICATE_NAME: "Snapshot with the same name already exists.",
    DUPLICATE_CONTENT: "Snapshot with the same content already exists.",
}


class SnapshotArtifact:
    """
    One snapshot as persisted: the root TreeNode and the flat
    [(relative_path, digest)] list of every blob it contains.
    """

    def __init__(self, tree, files):
        self.tree = tree
        self.files = list(files)

    @property
    def digest(self):
        return self.tree.digest

    def to_dict(self):
        return {
            'tree': self.tree.to_dict(),
            'files': [{'name': rel_path, 'hash': digest} for rel_path, digest in self.files],
        }

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict) or 'tree' not in data or 'files' not in data:
            raise ValueError("snapshot payload must be an object with 'tree' and 'files'")
        tree = TreeNode.from_dict(data['tree'])
        if tree.kind != TREE:
            raise ValueError("snapshot root must be a tree")
        if not isinstance(data['files'], list):
            raise ValueError("snapshot 'files' must be a list")

        files = []
        for entry in data['files']:
            if not isinstance(entry, dict):
                raise ValueError("file record must be an object")
            rel_path, digest = entry.get('name'), entry.get('hash')
            if not isinstance(rel_path, str) or not isinstance(digest, str):
                raise ValueError("file record needs string 'name' and 'hash'")
            if not objects.is_digest(digest):
                raise ValueError(f"file record {rel_path!r} has an invalid digest: {digest!r}")
            files.append((rel_path, digest))
        return cls(tree, files)


def slugify(name): # Runs of anything but ASCII letters and digits become '-', then lowercase
    return re.sub(r'[^a-zA-Z0-9]+', '-', name).lower()


def validate_name(name):
    if not name or slugify(name) != name:
        raise ValueError(
            f"Snapshot name '{name}' contains invalid characters. "
            "Please use a slug (lowercase letters, digits and hyphens)."
        )


def snapshot_path(repo, name):
    return os.path.join(repo.snapshots_dir, name + SNAPSHOT_EXTENSION)


def list_snapshots(repo): # Names of the stored artifacts, sorted
    if not os.path.isdir(repo.snapshots_dir):
        return []
    return sorted(
        entry[:-len(SNAPSHOT_EXTENSION)]
        for entry in os.listdir(repo.snapshots_dir)
        if entry.endswith(SNAPSHOT_EXTENSION)
        and os.path.isfile(os.path.join(repo.snapshots_dir, entry))
    )


def create_snapshot(repo, directory, name):
    """
    Snapshots `directory` under `name`.

    Returns (artifact, None) on success, or (None, reason) where reason is
    DUPLICATE_NAME or DUPLICATE_CONTENT; nothing is written on refusal.
    Raises ValueError for an invalid name or unsupported entry, OSError on I/O failure.
    The directory must not change while the snapshot is taken.
    """
    validate_name(name)

    ignored_names = get_ignored_names(directory)
    tree = hash_tree(directory, ignored_names)

    artifact_path = snapshot_path(repo, name)
    if snapshot_log.name_exists(repo, name) or os.path.exists(artifact_path):
        return None, DUPLICATE_NAME
    if snapshot_log.digest_exists(repo, tree.digest):
        return None, DUPLICATE_CONTENT

    files = list_files(tree)
    for rel_path, digest in files:
        objects.put_file(repo, digest, os.path.join(directory, *rel_path.split('/')))

    artifact = SnapshotArtifact(tree, files)
    payload = json.dumps(artifact.to_dict(), separators=(',', ':')).encode('utf-8')

    os.makedirs(repo.snapshots_dir, exist_ok=True)
    with open(artifact_path, 'wb') as f:
        f.write(gzip.compress(payload, mtime=0))

    snapshot_log.append_entry(repo, name, tree.digest)
    return artifact, None


def load_snapshot(artifact_path):
    """
    Reads a stored artifact. Returns a SnapshotArtifact, or None after printing
    a diagnostic if the path is not a .gz file or its payload is unusable.
    """
    artifact_path = os.fspath(artifact_path)
    if not artifact_path.endswith(SNAPSHOT_EXTENSION) or not os.path.isfile(artifact_path):
        print(f"error: '{artifact_path}' is not a snapshot file", file=sys.stderr)
        return None

    try:
        with open(artifact_path, 'rb') as f:
            payload = gzip.decompress(f.read())
        return SnapshotArtifact.from_dict(json.loads(payload.decode('utf-8')))
    except (OSError, EOFError, zlib.error, ValueError) as e:
        # gzip.BadGzipFile is an OSError; JSON and shape errors are ValueErrors
        print(f"error: could not load snapshot '{artifact_path}': {e}", file=sys.stderr)
        return None


def load_named_snapshot(repo, name):
    return load_snapshot(snapshot_path(repo, name))
