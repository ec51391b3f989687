# Unit tests for utils/tree.py

import pytest
import os
import sys
import hashlib
import inspect

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'subsys-project'))

from utils import tree as tree_utils
from utils.tree import TreeNode, BLOB, TREE

RESERVED = {'.subsys', 'config.json', 'node_modules'}
EMPTY_DIGEST = 'da39a3ee5e6b4b0d3255bfef95601890afd80709'


def _sha1(data):
    return hashlib.sha1(data).hexdigest()


class _ReversedScandir:
    # Stands in for os.scandir, listing entries in reverse order
    real_scandir = os.scandir

    def __init__(self, path):
        with self.real_scandir(path) as entries:
            self._entries = list(entries)[::-1]

    def __enter__(self):
        return iter(self._entries)

    def __exit__(self, *exc_info):
        return False


class TestHashTree:
    # Tests for tree_utils.hash_tree()

    def test_empty_directory(self, temp_dir):
        root = tree_utils.hash_tree(temp_dir, RESERVED)

        assert root.kind == TREE
        assert root.name == ''
        assert root.children == []
        assert root.digest == EMPTY_DIGEST

    def test_blob_digest_is_hash_of_bytes(self, temp_dir, make_file):
        make_file(temp_dir, 'a.txt', b'A')

        root = tree_utils.hash_tree(temp_dir, RESERVED)

        (child,) = root.children
        assert child.kind == BLOB
        assert child.name == 'a.txt'
        assert child.digest == _sha1(b'A')
        assert child.children is None

    def test_tree_digest_covers_sorted_records(self, temp_dir, make_file):
        make_file(temp_dir, 'b.txt', b'B')
        make_file(temp_dir, 'a/inner.txt', b'I')

        root = tree_utils.hash_tree(temp_dir, RESERVED)

        inner = _sha1(b'I')
        sub = _sha1(b'blob inner.txt\0' + inner.encode())
        expected = _sha1(b'tree a\0' + sub.encode() + b'blob b.txt\0' + _sha1(b'B').encode())
        assert [child.name for child in root.children] == ['a', 'b.txt']
        assert root.children[0].digest == sub
        assert root.digest == expected

    def test_children_sorted_by_bytes(self, temp_dir, make_file):
        for name in ('b.txt', 'B.txt', 'a.txt', '_x'):
            make_file(temp_dir, name, name)

        root = tree_utils.hash_tree(temp_dir, RESERVED)

        assert [child.name for child in root.children] == ['B.txt', '_x', 'a.txt', 'b.txt']

    def test_invariant_under_listing_order(self, temp_dir, make_file, monkeypatch):
        make_file(temp_dir, 'z.txt', 'z')
        make_file(temp_dir, 'a.txt', 'a')
        make_file(temp_dir, 'm/one.txt', '1')
        make_file(temp_dir, 'm/two.txt', '2')
        make_file(temp_dir, 'm/deeper/three.txt', '3')
        os.makedirs(os.path.join(temp_dir, 'empty'))

        forward = tree_utils.hash_tree(temp_dir, RESERVED)
        monkeypatch.setattr(tree_utils.os, 'scandir', _ReversedScandir)
        backward = tree_utils.hash_tree(temp_dir, RESERVED)

        assert forward.digest == backward.digest
        assert forward == backward

    def test_content_change_changes_root(self, temp_dir, make_file):
        make_file(temp_dir, 'src/deep/file.txt', 'v1')
        before = tree_utils.hash_tree(temp_dir, RESERVED).digest

        make_file(temp_dir, 'src/deep/file.txt', 'v2')
        after = tree_utils.hash_tree(temp_dir, RESERVED).digest

        assert before != after

    def test_same_content_same_digest_at_different_paths(self, temp_dir, make_file):
        make_file(temp_dir, 'x/copy.txt', 'shared')
        make_file(temp_dir, 'y/z/copy2.txt', 'shared')

        root = tree_utils.hash_tree(temp_dir, RESERVED)

        digests = {path: digest for path, digest in tree_utils.list_files(root)}
        assert digests['x/copy.txt'] == digests['y/z/copy2.txt']

    def test_empty_subdirectory_is_a_tree(self, temp_dir):
        os.makedirs(os.path.join(temp_dir, 'empty'))

        root = tree_utils.hash_tree(temp_dir, RESERVED)

        (child,) = root.children
        assert child.kind == TREE
        assert child.digest == EMPTY_DIGEST

    def test_ignored_names_skipped_at_every_depth(self, temp_dir, make_file):
        make_file(temp_dir, 'keep.txt', 'k')
        make_file(temp_dir, 'secret.env', 's')
        make_file(temp_dir, 'src/secret.env', 's')
        make_file(temp_dir, 'src/node_modules/lib.js', 'x')
        make_file(temp_dir, 'src/config.json', '{}')
        make_file(temp_dir, '.subsys/objects/aa/bb', 'x')

        root = tree_utils.hash_tree(temp_dir, RESERVED | {'secret.env'})

        paths = [path for path, _ in tree_utils.iter_nodes(root)]
        assert paths == ['keep.txt', 'src']

    def test_deep_tree_does_not_recurse(self, temp_dir, make_file):
        depth = 150
        rel_path = '/'.join(['d'] * depth) + '/leaf.txt'
        make_file(temp_dir, rel_path, 'leaf')

        # Leave far less headroom than the tree is deep
        original_limit = sys.getrecursionlimit()
        sys.setrecursionlimit(len(inspect.stack()) + 60)
        try:
            root = tree_utils.hash_tree(temp_dir, RESERVED)
            files = tree_utils.list_files(root)
            rebuilt = TreeNode.from_dict(root.to_dict())
        finally:
            sys.setrecursionlimit(original_limit)

        assert files == [(rel_path, _sha1(b'leaf'))]
        assert rebuilt.digest == root.digest


@pytest.mark.skipif(sys.platform == 'win32', reason="symlinks and FIFOs need POSIX")
class TestSpecialEntries:
    # Links to files are opaque files; everything else that is not a file or directory fails

    def test_symlink_to_file_hashes_target_bytes(self, temp_dir, make_file):
        make_file(temp_dir, 'real.txt', 'target bytes')
        os.symlink(os.path.join(temp_dir, 'real.txt'), os.path.join(temp_dir, 'link.txt'))

        root = tree_utils.hash_tree(temp_dir, RESERVED)

        digests = dict(tree_utils.list_files(root))
        assert digests['link.txt'] == digests['real.txt'] == _sha1(b'target bytes')

    def test_symlink_to_directory_fails(self, temp_dir, make_file):
        make_file(temp_dir, 'real/file.txt', 'x')
        os.symlink(os.path.join(temp_dir, 'real'), os.path.join(temp_dir, 'alias'))

        with pytest.raises(ValueError, match='unsupported file type'):
            tree_utils.hash_tree(temp_dir, RESERVED)

    def test_dangling_symlink_fails(self, temp_dir):
        os.symlink(os.path.join(temp_dir, 'nowhere'), os.path.join(temp_dir, 'broken'))

        with pytest.raises(ValueError, match='broken'):
            tree_utils.hash_tree(temp_dir, RESERVED)

    @pytest.mark.skipif(not hasattr(os, 'mkfifo'), reason="no mkfifo")
    def test_fifo_fails(self, temp_dir):
        os.mkfifo(os.path.join(temp_dir, 'pipe'))

        with pytest.raises(ValueError, match='unsupported file type'):
            tree_utils.hash_tree(temp_dir, RESERVED)

    def test_ignored_special_entry_is_fine(self, temp_dir):
        os.symlink(os.path.join(temp_dir, 'nowhere'), os.path.join(temp_dir, 'broken'))

        root = tree_utils.hash_tree(temp_dir, RESERVED | {'broken'})

        assert root.digest == EMPTY_DIGEST


class TestListFiles:
    # Tests for tree_utils.list_files() and iter_nodes()

    def test_lists_every_blob_with_relative_path(self, temp_dir, make_file):
        make_file(temp_dir, 'b.txt', 'b')
        make_file(temp_dir, 'a/x.txt', 'x')
        make_file(temp_dir, 'a/y/z.txt', 'z')
        os.makedirs(os.path.join(temp_dir, 'a', 'empty'))

        root = tree_utils.hash_tree(temp_dir, RESERVED)

        assert tree_utils.list_files(root) == [
            ('a/x.txt', _sha1(b'x')),
            ('a/y/z.txt', _sha1(b'z')),
            ('b.txt', _sha1(b'b')),
        ]

    def test_iter_nodes_includes_directories(self, temp_dir, make_file):
        make_file(temp_dir, 'a/x.txt', 'x')
        os.makedirs(os.path.join(temp_dir, 'a', 'empty'))

        root = tree_utils.hash_tree(temp_dir, RESERVED)

        kinds = [(path, node.kind) for path, node in tree_utils.iter_nodes(root)]
        assert kinds == [('a', TREE), ('a/empty', TREE), ('a/x.txt', BLOB)]


class TestExchangeForm:
    # Tests for TreeNode.to_dict() / from_dict()

    def test_to_dict_shape(self):
        root = TreeNode(TREE, '', 'r', [TreeNode(BLOB, 'a.txt', 'h1'), TreeNode(TREE, 'd', 'h2')])

        assert root.to_dict() == {
            'type': 'tree', 'name': '', 'hash': 'r',
            'children': [
                {'type': 'blob', 'name': 'a.txt', 'hash': 'h1'},
                {'type': 'tree', 'name': 'd', 'hash': 'h2', 'children': []},
            ],
        }

    def test_from_dict_rebuilds_hashed_tree(self, temp_dir, make_file):
        make_file(temp_dir, 'a/b/c.txt', 'c')
        make_file(temp_dir, 'd.txt', 'd')
        root = tree_utils.hash_tree(temp_dir, RESERVED)

        assert TreeNode.from_dict(root.to_dict()) == root

    @pytest.mark.parametrize('data', [
        [],
        {'type': 'folder', 'name': '', 'hash': ''},
        {'type': 'blob', 'name': 3, 'hash': ''},
        {'type': 'tree', 'name': '', 'hash': ''},
        {'type': 'tree', 'name': '', 'hash': '', 'children': [{'type': 'blob'}]},
        {'type': 'blob', 'name': 'a.txt', 'hash': '../etc/passwd'},
        {'type': 'tree', 'name': '', 'hash': 'F' * 40, 'children': []},
    ])
    def test_from_dict_rejects_malformed(self, data):
        with pytest.raises(ValueError):
            TreeNode.from_dict(data)
