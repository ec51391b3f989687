import argparse
from commands import init, snap, restore, log, config
# The main entry point for the subsys snapshot tool
def main(argv=None):
    # The main parser
    parser = argparse.ArgumentParser(description="subsys: snapshot a working directory and restore it later.")
    subparsers = parser.add_subparsers(dest="command", help="Available commands", required=True)

    # Command: init
    init_parser = subparsers.add_parser("init", help="Initialize a directory as a snapshot repository.")
    init_parser.set_defaults(func=init.run)

    # Command: snap
    snap_parser = subparsers.add_parser("snap", help="Create a snapshot of the working directory.")
    snap_parser.add_argument("--name", required=True, help="Name of the snapshot (a slug, e.g. week-3).")
    snap_parser.set_defaults(func=snap.run)

    # Command: restore
    restore_parser = subparsers.add_parser("restore", help="Recreate a snapshot's files from the object store.")
    restore_parser.add_argument("-s", "--snapshot", help="Snapshot to restore. Restores every snapshot when omitted.")
    restore_parser.add_argument("-o", "--output", help="Destination directory (default: .subsys/snapshots/<name>).")
    restore_parser.set_defaults(func=restore.run)

    # Command: log
    log_parser = subparsers.add_parser("log", help="List recorded snapshots.")
    log_parser.set_defaults(func=log.run)

    # Command: config
    config_parser = subparsers.add_parser("config", help="Show or set configuration values.")
    config_parser.add_argument("key", nargs="?", help="The configuration key (e.g., submission.student_id).")
    config_parser.add_argument("value", nargs="?", help="The configuration value.")
    config_parser.set_defaults(func=config.run)

    # Parse the arguments
    args = parser.parse_args(argv)

    # If a command was specified, run its function
    if hasattr(args, 'func'):
        args.func(args)
    else:
        parser.print_help()

if __name__ == "__main__":
    main()
