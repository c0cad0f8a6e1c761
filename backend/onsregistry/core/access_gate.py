"""Static Access Gate — owner plus authorizer roster, fixed at construction.

Invariants:
    - Exactly one owner; the owner is always authorized
    - Roster membership is exact string match on CallerId

Design Decisions:
    - Roster management (ownership transfer, adding authorizers) is not exposed over
      the registry API (ADR: access control policy lives outside this service)
"""

from dataclasses import dataclass, field

from onsregistry.core.domain_types import CallerId


@dataclass(frozen=True)
class StaticAccessGate:
    """AccessGate backed by configuration."""
    owner: CallerId
    authorizers: frozenset[CallerId] = field(default_factory=frozenset)

    def is_owner(self, caller: CallerId) -> bool:
        return caller == self.owner

    def is_authorized(self, caller: CallerId) -> bool:
        return self.is_owner(caller) or caller in self.authorizers
