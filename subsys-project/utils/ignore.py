# What it does: Implements the `.subsysignore` functionality
# How it does: Literal lines are kept as entry names, lines with wildcards are expanded with glob against the snapshot directory. Matching is by entry name, so an ignored name is skipped at any depth
# What data structure it uses: Set (to store the ignored names for efficient, near O(1) average time complexity lookups)

import os
import glob

from .repository import IGNORE_FILE, RESERVED_NAMES

WILDCARDS = ('*', '?', '[')


def get_ignored_names(directory):
    """
    Reads the .subsysignore file of `directory` and returns the set of names to skip.
    A missing file is fine; a file that exists but cannot be read raises OSError.
    """
    ignored = set(RESERVED_NAMES) # Always ignore these
    ignore_file = os.path.join(directory, IGNORE_FILE)

    if not os.path.exists(ignore_file):
        return ignored

    with open(ignore_file, 'r', encoding='utf-8') as f:
        lines = f.read().splitlines()

    for line in lines:
        line = line.strip()
        if not line:
            continue
        if any(char in line for char in WILDCARDS):
            for match in glob.glob(line, root_dir=directory):
                ignored.add(os.path.basename(os.path.normpath(match)))
        else:
            ignored.add(line)
    return ignored


def is_ignored(name, ignored_names): # Returns True if the entry name was excluded
    return name in ignored_names
