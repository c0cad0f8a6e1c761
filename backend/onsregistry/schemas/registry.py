"""Registry Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - Every key is 1–32 UTF-8 bytes after stripping whitespace
    - ONS record flags fit in one unsigned byte
    - Response models mirror core dataclasses; they never carry position/index data

Design Decisions:
    - field_validator for key checks: byte length, not character length, matches the
      fixed-width keys of the registry this service replaces
"""

from pydantic import BaseModel, Field, field_validator

from onsregistry.core.domain_types import MAX_KEY_BYTES, MAX_RECORD_FLAGS
from onsregistry.core.ons_record_registry import ONSRecord
from onsregistry.core.registry_events import RegistryEvent
from onsregistry.core.service_type_registry import ServiceTypeView


def validate_key(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("key cannot be empty or whitespace")
    if len(v.encode("utf-8")) > MAX_KEY_BYTES:
        raise ValueError(f"key must be at most {MAX_KEY_BYTES} bytes")
    return v


# --- GS1 codes ---------------------------------------------------------------

class GS1CodeCreate(BaseModel):
    """GS1 code creation — the key is the whole entity."""
    key: str

    @field_validator("key")
    @classmethod
    def check_key(cls, v: str) -> str:
        return validate_key(v)


class GS1CodeResponse(BaseModel):
    key: str
    child_count: int
    records: list[str]


class GS1CodeList(BaseModel):
    count: int
    keys: list[str]


# --- ONS records -------------------------------------------------------------

class ONSRecordCreate(BaseModel):
    """ONS record creation — parent code must exist, service type is not checked."""
    key: str
    gs1_code: str
    flags: int = Field(0, ge=0, le=MAX_RECORD_FLAGS)
    service_type: str
    pattern: str = Field("", max_length=2048)

    @field_validator("key", "gs1_code", "service_type")
    @classmethod
    def check_keys(cls, v: str) -> str:
        return validate_key(v)


class ONSRecordResponse(BaseModel):
    key: str
    gs1_code: str
    flags: int
    service_type: str
    pattern: str

    @classmethod
    def from_record(cls, record: ONSRecord) -> "ONSRecordResponse":
        return cls(
            key=record.key, gs1_code=record.gs1_code_key, flags=record.flags,
            service_type=record.service_type_key, pattern=record.pattern,
        )


class ONSRecordList(BaseModel):
    count: int
    keys: list[str]


# --- Service types -----------------------------------------------------------

class ServiceTypeCreate(BaseModel):
    """Service type creation — documentation entry optional, references unchecked."""
    key: str
    is_abstract: bool = False
    extends: str | None = None
    wsdl_uri: str = Field("", max_length=2048)
    homepage_uri: str = Field("", max_length=2048)
    language_code: str | None = Field(None, max_length=35)
    location: str | None = Field(None, max_length=2048)
    obsoletes: list[str] = Field(default_factory=list)
    obsoleted_by: list[str] = Field(default_factory=list)

    @field_validator("key")
    @classmethod
    def check_key(cls, v: str) -> str:
        return validate_key(v)

    @field_validator("extends")
    @classmethod
    def check_extends(cls, v: str | None) -> str | None:
        return validate_key(v) if v is not None else None

    @field_validator("obsoletes", "obsoleted_by")
    @classmethod
    def check_key_lists(cls, v: list[str]) -> list[str]:
        return [validate_key(k) for k in v]


class DocumentationUpdate(BaseModel):
    language_code: str = Field(min_length=1, max_length=35)
    location: str = Field(max_length=2048)


class ServiceTypeReference(BaseModel):
    key: str

    @field_validator("key")
    @classmethod
    def check_key(cls, v: str) -> str:
        return validate_key(v)


class ServiceTypeResponse(BaseModel):
    key: str
    is_abstract: bool
    extends: str | None
    wsdl_uri: str
    homepage_uri: str
    language_code: str | None
    documentation_location: str | None
    languages: list[str]
    obsoletes: list[str]
    obsoleted_by: list[str]

    @classmethod
    def from_view(cls, view: ServiceTypeView) -> "ServiceTypeResponse":
        return cls(
            key=view.key, is_abstract=view.is_abstract, extends=view.extends,
            wsdl_uri=view.wsdl_uri, homepage_uri=view.homepage_uri,
            language_code=view.language_code,
            documentation_location=view.documentation_location,
            languages=list(view.languages),
            obsoletes=list(view.obsoletes),
            obsoleted_by=list(view.obsoleted_by),
        )


class ServiceTypeList(BaseModel):
    count: int
    keys: list[str]


# --- Events ------------------------------------------------------------------

class RegistryEventResponse(BaseModel):
    sequence: int
    kind: str
    caller: str
    keys: dict[str, str]
    timestamp: str

    @classmethod
    def from_event(cls, event: RegistryEvent) -> "RegistryEventResponse":
        return cls(**event.to_dict())
