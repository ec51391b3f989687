# Shared pytest fixtures for subsys tests

import pytest
import os
import sys
import shutil
import tempfile

# Add subsys-project to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'subsys-project'))

from utils import repository


def write_file(root, rel_path, content):
    # Writes bytes or text to root/rel_path, creating parent directories
    path = os.path.join(root, *rel_path.split('/'))
    os.makedirs(os.path.dirname(path), exist_ok=True)
    mode = 'wb' if isinstance(content, bytes) else 'w'
    with open(path, mode) as f:
        f.write(content)
    return path


@pytest.fixture
def make_file():
    return write_file


@pytest.fixture
def temp_dir():
    # Creates a temporary directory that is cleaned up after the test
    # Also saves/restores cwd to prevent issues when tests change directories
    original_dir = os.getcwd()
    tmp = os.path.realpath(tempfile.mkdtemp())
    yield tmp
    os.chdir(original_dir)
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def temp_repo(temp_dir):
    # Creates an initialized repository in a temporary directory and returns its handle
    original_dir = os.getcwd()
    os.chdir(temp_dir)

    repo, _ = repository.init_repository(temp_dir)

    yield repo

    os.chdir(original_dir)


@pytest.fixture
def populated_repo(temp_repo):
    # Repository with a small nested project, including a duplicate file and an empty directory
    root = temp_repo.root
    write_file(root, 'README.md', '# Assignment\n')
    write_file(root, 'src/main.py', 'print("hello")\n')
    write_file(root, 'src/util/helpers.py', 'def helper():\n    return 42\n')
    write_file(root, 'src/copy_of_readme.md', '# Assignment\n')
    write_file(root, 'data/blob.bin', bytes(range(256)))
    os.makedirs(os.path.join(root, 'empty'))
    return temp_repo

