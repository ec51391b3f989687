# The command: subsys config [<key> [<value>]]
# What it does: A user-facing command to set or show configuration values (e.g., submission.student_id)
# How it does: It acts as a simple dispatcher over `utils/config.py`, which handles the file I/O and parsing logic. Without arguments it shows the submission settings
# What data structure it uses: None directly, but it provides the interface to the underlying Map / Dictionary structure managed by `utils/config.py`

import sys
from utils import repository, config as config_utils

def run(args):
    repo = repository.open_repository()
    if not repo:
        print("fatal: not a subsys repository", file=sys.stderr)
        sys.exit(1)

    try:
        if args.key is None:
            student_id, assignment_code = config_utils.get_submission_config(repo)
            print(f"submission.student_id = {student_id or '(not set)'}")
            print(f"submission.assignment_code = {assignment_code or '(not set)'}")
        elif args.value is None:
            value = config_utils.get_config_value(repo, args.key)
            if value is None:
                sys.exit(1)
            print(value)
        else: # Set the configuration key-value pair
            config_utils.write_config(repo, args.key, args.value)
            print(f"Set {args.key} to '{args.value}'")
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
