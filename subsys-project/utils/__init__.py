# This file makes the 'utils' directory a Python package
# The snapshot engine: repository handle, ignore rules, object store, tree hashing, snapshot log, artifacts and restoration
