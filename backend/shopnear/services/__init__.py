"""Services Layer — auth guard, directory, proximity search, subscription ledger, products.

Invariants:
    - Services take sessions (or the session manager) explicitly; no globals
    - Services raise core.errors types, never raw SQLAlchemy exceptions
"""
