# The command: subsys restore [--snapshot <name>] [--output <dir>]
# What it does: Rebuilds the file tree of one stored snapshot, or of every stored snapshot, from the object store
# How it does: It decompresses the snapshot artifact and hands it to `utils/restore.py`. Files whose objects are missing are reported and skipped; everything else is still restored
# What data structure it uses: List (the artifact's flat file list), Tree Traversal (walking the snapshot's Merkle Tree)

import os
import sys
from utils import repository, snapshot, restore

def run(args):
    repo = repository.open_repository()
    if not repo:
        print("fatal: not a subsys repository", file=sys.stderr)
        sys.exit(1)

    try:
        if args.snapshot:
            unresolved = _restore_one(repo, args.snapshot, args.output)
        else:
            unresolved = _restore_every(repo, args.output)
    except OSError as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)

    if unresolved:
        sys.exit(1)

def _restore_one(repo, name, output):
    try:
        snapshot.validate_name(name)
    except ValueError as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)

    artifact = snapshot.load_named_snapshot(repo, name)
    if artifact is None:
        print(f"fatal: snapshot '{name}' could not be loaded", file=sys.stderr)
        sys.exit(1)

    destination = output or os.path.join(repo.snapshots_dir, name)
    missing = restore.restore_snapshot(repo, artifact, destination, name)
    _report(name, destination, missing)
    return len(missing)

def _restore_every(repo, output):
    destination_root = output or repo.snapshots_dir
    results = restore.restore_all(repo, destination_root)
    if not results:
        print("No snapshots to restore.")
        return 0

    for name, missing in sorted(results.items()):
        _report(name, os.path.join(destination_root, name), missing)
    return sum(len(missing) for missing in results.values())

def _report(name, destination, missing):
    if missing:
        print(f"Recreated tree '{name}' in {destination} with {len(missing)} missing file(s).")
    else:
        print(f"Recreated tree '{name}' in {destination} successfully.")
