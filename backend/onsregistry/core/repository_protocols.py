"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Access control and persistence reached only through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
      (ADR: composition replaces the Ownable → Authorizable chain)
    - Async only where implementations do IO (snapshot persistence); the gate is
      called inside the registry lock and stays synchronous
"""

from typing import Protocol

from onsregistry.core.domain_types import CallerId


class AccessGate(Protocol):
    """Capability check consulted before gated mutations."""
    def is_owner(self, caller: CallerId) -> bool: ...
    def is_authorized(self, caller: CallerId) -> bool: ...


class SnapshotRepository(Protocol):
    """Contract for registry snapshot persistence — implemented by shell."""
    async def load_latest(self) -> dict | None: ...
    async def save(self, snapshot: dict) -> None: ...
