# The command: subsys log
# What it does: Lists every snapshot recorded in the snapshot log, oldest first
# How it does: It reads `.subsys/snapshots/logTrack.json` and prints each snapshot name with its abbreviated root digest, flagging entries whose artifact file is gone
# What data structure it uses: List (the ordered snapshot log)

import os
import sys
from utils import repository, snapshot, snapshot_log

def run(args):
    repo = repository.open_repository()
    if not repo: #Check if inside a subsys repository
        print("fatal: not a subsys repository", file=sys.stderr)
        sys.exit(1)

    try:
        entries = snapshot_log.read_log(repo)
    except (OSError, ValueError) as e:
        print(f"fatal: could not read snapshot log: {e}", file=sys.stderr)
        sys.exit(1)

    if not entries:
        print("No snapshots yet.")
        return

    for entry in entries:
        name = entry.get(snapshot_log.NAME_KEY, '')
        digest = entry.get(snapshot_log.DIGEST_KEY, '')
        marker = '' if os.path.isfile(snapshot.snapshot_path(repo, name)) else '  (artifact missing)'
        print(f"{digest[:7]}  {name}{marker}")
