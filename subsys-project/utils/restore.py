# What it does: Recreates a snapshot's files and directories from the object store
# How it does: Two passes. The flat file list restores every blob directly; then the tree is walked to create directories (empty ones included) and any blob the list did not cover. A missing object is reported for that file only and the rest carries on
# What data structure it uses: List (flat file list), Stack (tree walk via `tree.iter_nodes`), Set (paths already handled by the first pass)

import os
import sys

from . import objects
from .snapshot import list_snapshots, load_named_snapshot
from .tree import iter_nodes


def _target_path(destination, rel_path): # Maps an artifact path under destination, or None if it would escape it
    parts = rel_path.split('/')
    if not rel_path or any(part in ('', '.', '..') or os.sep in part for part in parts):
        return None
    if os.path.isabs(rel_path):
        return None
    return os.path.join(destination, *parts)


def _describe(rel_path, snapshot_name):
    if snapshot_name:
        return f"'{rel_path}' of snapshot '{snapshot_name}'"
    return f"'{rel_path}'"


def _restore_blob(repo, destination, rel_path, digest, missing, snapshot_name=None):
    target = _target_path(destination, rel_path)
    if target is None:
        print(f"error: refusing to restore {_describe(rel_path, snapshot_name)}: path leaves the destination", file=sys.stderr)
        missing.append((rel_path, digest))
        return

    try:
        content = objects.get(repo, digest)
    except FileNotFoundError:
        print(f"error: cannot recreate {_describe(rel_path, snapshot_name)}: object {digest} not found", file=sys.stderr)
        missing.append((rel_path, digest))
        return

    os.makedirs(os.path.dirname(target), exist_ok=True)
    with open(target, 'wb') as f:
        f.write(content)


def restore_snapshot(repo, artifact, destination, snapshot_name=None):
    """
    Materializes `artifact` under `destination`.
    Returns the [(relative_path, digest)] entries that could not be restored,
    each reported once on stderr (naming `snapshot_name` when given).
    Failing to create directories or write files raises OSError.
    """
    os.makedirs(destination, exist_ok=True)
    missing = []
    handled = set()

    for rel_path, digest in artifact.files:
        handled.add(rel_path)
        _restore_blob(repo, destination, rel_path, digest, missing, snapshot_name)

    for rel_path, node in iter_nodes(artifact.tree):
        if rel_path in handled:
            continue
        if node.is_tree:
            target = _target_path(destination, rel_path)
            if target is None:
                print(f"error: refusing to create {_describe(rel_path, snapshot_name)}: path leaves the destination", file=sys.stderr)
                continue
            os.makedirs(target, exist_ok=True)
        else:
            handled.add(rel_path)
            _restore_blob(repo, destination, rel_path, node.digest, missing, snapshot_name)

    return missing


def restore_all(repo, destination_root):
    """
    Restores every stored snapshot into destination_root/<name>, skipping artifacts
    that fail to load. Returns {name: unresolved entries} for the ones restored.
    """
    results = {}
    for name in list_snapshots(repo):
        artifact = load_named_snapshot(repo, name)
        if artifact is None:
            continue
        results[name] = restore_snapshot(repo, artifact, os.path.join(destination_root, name), name)
    return results
