"""Infrastructure Layer — request snapshotting and logging setup.

Invariants:
    - The only async code in the package lives here (reading the body, parsing forms)
"""
