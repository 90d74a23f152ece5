"""API Layer — FastAPI dependencies and error handlers.

Invariants:
    - Routes receive bound records through Bind(Model); they never read raw request data
    - All binding errors return structured JSON responses
"""
