"""API Layer — FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Success bodies use the {success, message, data} envelope

Design Decisions:
    - Thin routes delegate to services
"""
