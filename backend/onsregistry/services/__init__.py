"""Services Layer — the owning registry object that orchestrates core tables.

Invariants:
    - Access checks, locking and notifications live here, never in core/

Design Decisions:
    - One owning object for all three tables (ADR: no global mutable tables)
"""
