"""Database Declarations — SQLAlchemy declarative Base.

Invariants:
    - All models inherit from db.base.Base
    - All sessions are async (AsyncSession)
"""
