"""Core Layer — pure binding logic, no IO, no async.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - All functions are deterministic; the only shared state is immutable cached type tables
"""
