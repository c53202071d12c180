"""Infrastructure Layer — database session management and logging setup.

Invariants:
    - Infrastructure never imports domain logic from core/ beyond the error types
    - Every storage failure leaves this layer as a core.errors.DatabaseError
"""
