"""reqbind — tag-driven request data binding for Starlette/FastAPI applications.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
