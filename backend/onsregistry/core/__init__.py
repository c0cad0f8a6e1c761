"""Core Layer — pure registry bookkeeping, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Every mutation either completes or leaves its tables untouched

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
