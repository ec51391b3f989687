# What it does: Builds the Merkle Tree of a working directory and computes every node's digest
# How it does: It walks the directory with an explicit stack instead of recursion, hashes each file's bytes, and hashes each directory over its children's sorted (kind, name, digest) records once all of them are known
# What data structure it uses: Merkle Tree (each directory digest covers its children's digests), Stack (post-order traversal without recursion depth limits)

import os

from . import objects
from .ignore import is_ignored

BLOB = 'blob'
TREE = 'tree'
KINDS = (BLOB, TREE)


class TreeNode:
    """
    A file ("blob") or directory ("tree") at snapshot time.
    `name` is relative to the parent; the root node's name is ''.
    """

    def __init__(self, kind, name, digest='', children=None):
        self.kind = kind
        self.name = name
        self.digest = digest
        if kind == TREE:
            self.children = list(children) if children is not None else []
        else:
            self.children = None

    @property
    def is_tree(self):
        return self.kind == TREE

    def __repr__(self):
        return f"TreeNode({self.kind!r}, {self.name!r}, {self.digest[:7]!r})"

    def __eq__(self, other):
        if not isinstance(other, TreeNode):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def to_dict(self): # Exchange form: {"type", "name", "hash"} plus "children" for trees
        result = _node_fields(self)
        stack = [(self, result)]
        while stack:
            node, data = stack.pop()
            if not node.is_tree:
                continue
            for child in node.children:
                child_data = _node_fields(child)
                data['children'].append(child_data)
                stack.append((child, child_data))
        return result

    @classmethod
    def from_dict(cls, data):
        """
        Rebuilds a tree from its exchange form. Raises ValueError on malformed input.
        """
        root = _node_from_fields(cls, data)
        stack = [(root, data)]
        while stack:
            node, node_data = stack.pop()
            if not node.is_tree:
                continue
            for child_data in node_data['children']:
                child = _node_from_fields(cls, child_data)
                node.children.append(child)
                stack.append((child, child_data))
        return root


def _node_fields(node):
    data = {'type': node.kind, 'name': node.name, 'hash': node.digest}
    if node.is_tree:
        data['children'] = []
    return data


def _node_from_fields(cls, data):
    if not isinstance(data, dict):
        raise ValueError(f"tree node must be an object, got {type(data).__name__}")
    kind = data.get('type')
    name = data.get('name')
    digest = data.get('hash')
    if kind not in KINDS:
        raise ValueError(f"unknown node type: {kind!r}")
    if not isinstance(name, str) or not isinstance(digest, str):
        raise ValueError("tree node needs string 'name' and 'hash'")
    if not objects.is_digest(digest):
        raise ValueError(f"tree node {name!r} has an invalid digest: {digest!r}")
    if kind == TREE and not isinstance(data.get('children'), list):
        raise ValueError(f"tree node {name!r} has no children list")
    return cls(kind, name, digest)


def sort_key(node): # Byte order of the entry name, independent of locale
    return os.fsencode(node.name)


def serialize_children(children):
    """
    Concatenates "<kind> <name>\\0<digest>" records. Names never hold NUL or '/',
    and digests have a fixed length, so no two child lists serialize the same way.
    """
    return b''.join(
        child.kind.encode() + b' ' + os.fsencode(child.name) + b'\0' + child.digest.encode()
        for child in children
    )


def hash_children(children):
    return objects.hash_bytes(serialize_children(children))


def hash_tree(directory, ignored_names):
    """
    Returns the root TreeNode for `directory`, skipping ignored names at every depth.

    Symbolic links to regular files are hashed by their target's bytes. Anything
    else that is not a directory or regular file (dangling links, links to
    directories, FIFOs, sockets, devices) raises ValueError.
    """
    root = TreeNode(TREE, '')
    stack = [(directory, root, False)]

    while stack:
        path, node, expanded = stack.pop()

        if expanded:
            # Every child below this marker has been hashed by now
            node.children.sort(key=sort_key)
            node.digest = hash_children(node.children)
            continue

        stack.append((path, node, True))
        with os.scandir(path) as entries:
            for entry in entries:
                if is_ignored(entry.name, ignored_names):
                    continue
                if entry.is_dir(follow_symlinks=False):
                    child = TreeNode(TREE, entry.name)
                    node.children.append(child)
                    stack.append((entry.path, child, False))
                elif entry.is_file():
                    node.children.append(TreeNode(BLOB, entry.name, objects.hash_file(entry.path)))
                else:
                    raise ValueError(f"unsupported file type: {entry.path}")

    return root


def iter_nodes(tree):
    """
    Yields (relative_path, node) for every node below `tree` in sorted depth-first order.
    Paths are joined with '/'.
    """
    stack = [('', child) for child in reversed(tree.children or [])]
    while stack:
        prefix, node = stack.pop()
        rel_path = f"{prefix}/{node.name}" if prefix else node.name
        yield rel_path, node
        if node.is_tree:
            stack.extend((rel_path, child) for child in reversed(node.children))


def list_files(tree): # Flat [(relative_path, digest)] of every blob reachable from `tree`
    return [(rel_path, node.digest) for rel_path, node in iter_nodes(tree) if not node.is_tree]
