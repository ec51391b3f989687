# What it does: Keeps the record of every snapshot taken (`.subsys/snapshots/logTrack.json`) and answers "is this name or content already taken?"
# How it does: The log is a JSON list of {treeName, SHA} records, rewritten in full on each append. The membership checks fail closed: if the log cannot be read, the answer is "duplicate" so history is never silently overwritten
# What data structure it uses: List (the ordered log), linear search for membership

import os
import sys
import json

NAME_KEY = 'treeName'
DIGEST_KEY = 'SHA'


def read_log(repo):
    """
    Returns the list of log entries. A missing log is an empty history;
    unreadable or malformed logs raise OSError / ValueError.
    """
    if not os.path.exists(repo.log_path):
        return []
    with open(repo.log_path, 'r', encoding='utf-8') as f:
        entries = json.load(f)
    if not isinstance(entries, list) or not all(isinstance(entry, dict) for entry in entries):
        raise ValueError(f"malformed snapshot log: {repo.log_path}")
    return entries


def _exists(repo, key, value, label):
    try:
        entries = read_log(repo)
    except (OSError, ValueError) as e:
        print(f"error: could not read snapshot log while checking for duplicate {label}: {e}", file=sys.stderr)
        return True
    return any(entry.get(key) == value for entry in entries)


def name_exists(repo, name):
    return _exists(repo, NAME_KEY, name, 'name')


def digest_exists(repo, digest):
    return _exists(repo, DIGEST_KEY, digest, 'content')


def append_entry(repo, name, digest): # Any read or write failure here propagates: the log must stay trustworthy
    entries = read_log(repo)
    entries.append({NAME_KEY: name, DIGEST_KEY: digest})

    os.makedirs(os.path.dirname(repo.log_path), exist_ok=True)
    with open(repo.log_path, 'w', encoding='utf-8') as f:
        json.dump(entries, f, indent=2)
    return entries
