"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - EntityKey is an opaque, caller-supplied token — the registry never generates keys
    - CallerId names whoever invokes a mutation — threaded explicitly, never ambient
    - RecordFlag values fit in one unsigned byte (0–255)
    - All event kinds encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum, IntEnum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

EntityKey = NewType("EntityKey", str)
CallerId = NewType("CallerId", str)

ANONYMOUS_CALLER = CallerId("anonymous")

# Keys were 32-byte words in the source registry; the HTTP boundary enforces this
MAX_KEY_BYTES: int = 32


# ─── Value Types ─────────────────────────────────────────────────

MAX_RECORD_FLAGS: int = 255


class RecordFlag(IntEnum):
    """Named ONS record flag values (NAPTR-style resolution terminality)."""
    NON_TERMINAL = 0
    TERMINAL = 1


# ─── Enums ───────────────────────────────────────────────────────

class EntityType(str, Enum):
    """The three registry tables — used in error messages and events."""
    GS1_CODE = "GS1 code"
    ONS_RECORD = "ONS record"
    SERVICE_TYPE = "service type"


class EventKind(str, Enum):
    """Notification kinds emitted on the side-channel after a successful mutation."""
    GS1_CODE_CREATED = "gs1_code_created"
    GS1_CODE_DELETED = "gs1_code_deleted"
    ONS_RECORD_CREATED = "ons_record_created"
    ONS_RECORD_DELETED = "ons_record_deleted"
    SERVICE_TYPE_CREATED = "service_type_created"
    SERVICE_TYPE_DELETED = "service_type_deleted"
    SERVICE_TYPE_UPDATED = "service_type_updated"
