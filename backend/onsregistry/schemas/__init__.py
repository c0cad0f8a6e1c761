"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Key length limits enforced here, not in core/

Design Decisions:
    - Separate from core dataclasses: schemas are API contracts (ADR: DDD boundary)
"""
