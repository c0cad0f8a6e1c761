"""Infrastructure Layer — database access, snapshot storage and logging setup.

Invariants:
    - Infrastructure never imports registry logic beyond core/ errors
    - All database failures mapped to DatabaseError

Design Decisions:
    - Thin wrappers over SQLAlchemy (ADR: single responsibility)
"""
