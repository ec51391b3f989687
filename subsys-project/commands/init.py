# The command: subsys init
# What it does: Initializes a new, empty snapshot repository by creating the hidden `.subsys` directory and its internal structure
# How it does: It creates the `objects` and `snapshots` subdirectories and the `HEAD` marker. Running it again leaves existing data alone
# What data structure it uses: Tree (the file system directory structure is a tree). It lays the foundation for a Hash Table (the object database) and a List (the snapshot log)

import os
import sys
from utils import repository

def run(args):
    try:
        repo, created = repository.init_repository(os.getcwd())
    except OSError as e:
        print(f"Error initializing repository: {e}", file=sys.stderr)
        sys.exit(1)

    if created:
        print(f"Initialized empty snapshot repository in {repo.meta_dir}/")
    else:
        print(f"Reinitialized existing snapshot repository in {repo.meta_dir}/")
