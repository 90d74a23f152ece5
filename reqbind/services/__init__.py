"""Services Layer — binding phases, source extraction and body dispatch.

Invariants:
    - Services orchestrate core functions; all type introspection lives in core/
    - Phase order and phase error context are owned by binder.DefaultBinder
"""
