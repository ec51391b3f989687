# What it does: Manages the object database, storing and retrieving the raw bytes of every blob
# How it does: It implements a content-addressed storage system. `put` saves content under its digest and `get` retrieves it. Objects are sharded two levels deep: the first two hex characters name a directory, the rest name the file
# What data structure it uses: Hash Table / Dictionary (the entire object store is a content-addressed dictionary where the SHA-1 digest is the key)

import os
import re
import hashlib
import tempfile

# Fixed for the life of a store: changing it invalidates every stored digest
DIGEST_ALGORITHM = 'sha1'
CHUNK_SIZE = 64 * 1024
DIGEST_RE = re.compile(r'[0-9a-f]{40}')


def new_hasher():
    return hashlib.new(DIGEST_ALGORITHM)


def hash_bytes(content): # Returns the hex digest of raw bytes
    hasher = new_hasher()
    hasher.update(content)
    return hasher.hexdigest()


def hash_file(file_path): # Returns the hex digest of a file's exact byte content, read in chunks
    hasher = new_hasher()
    with open(file_path, 'rb') as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b''):
            hasher.update(chunk)
    return hasher.hexdigest()


def is_digest(value): # Lowercase hex of the store-wide digest length
    return isinstance(value, str) and DIGEST_RE.fullmatch(value) is not None


def object_path(repo, digest):
    if not is_digest(digest):
        raise ValueError(f"invalid object digest: {digest!r}")
    return os.path.join(repo.objects_dir, digest[:2], digest[2:])


def has_object(repo, digest):
    return os.path.isfile(object_path(repo, digest))


def put(repo, digest, content):
    """
    Stores `content` under `digest`. Returns True if a new object was written.
    Existing objects are left untouched: equal digests mean equal bytes.
    """
    path = object_path(repo, digest)
    if os.path.exists(path):
        return False

    object_dir = os.path.dirname(path)
    os.makedirs(object_dir, exist_ok=True)

    # Write next to the final path and rename, so a digest never names a partial file
    fd, tmp_path = tempfile.mkstemp(dir=object_dir, prefix='.tmp-')
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(content)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
    return True


def put_file(repo, digest, file_path): # Stores a working-tree file under its already computed digest
    if has_object(repo, digest):
        return False
    with open(file_path, 'rb') as f:
        content = f.read()
    return put(repo, digest, content)


def get(repo, digest): # Reads an object by its digest and returns its bytes
    path = object_path(repo, digest)

    if not os.path.isfile(path):
        raise FileNotFoundError(f"Object not found: {digest}")

    with open(path, 'rb') as f:
        return f.read()
