# The command: subsys snap --name <snapshot-name>
# What it does: Creates a permanent, uniquely named snapshot of the working directory
# How it does: It hashes the whole working tree into a Merkle Tree, refuses the snapshot if the name or the root digest is already logged, stores every file's bytes in the object store and writes the compressed artifact
# What data structure it uses: Merkle Tree (the project's file structure), Hash Table / Dictionary (the underlying object store), List (the snapshot log)

import sys
from utils import repository, snapshot

def run(args):
    repo = repository.open_repository()
    if not repo:
        print("fatal: not a subsys repository", file=sys.stderr)
        sys.exit(1)

    try:
        artifact, refusal = snapshot.create_snapshot(repo, repo.root, args.name)
    except (ValueError, OSError) as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)

    if refusal:
        if refusal == snapshot.DUPLICATE_CONTENT:
            print("Everything is up to date.")
        print(snapshot.REFUSAL_MESSAGES[refusal], file=sys.stderr)
        sys.exit(1)

    print(f"Snapshot '{args.name}' created successfully. [{artifact.digest[:7]}, {len(artifact.files)} file(s)]")
