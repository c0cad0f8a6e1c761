"""Registry Snapshot — serialization / deserialization of the three registry tables.

Invariants:
    - tables_to_snapshot produces a JSON-safe dict (lists and dicts of str/int/bool)
    - Index maps are not stored: each key's position is its place in the stored list
    - tables_from_snapshot replays inserts through the normal add paths, so every
      duplicate / foreign-key check applies to restored data too
    - A snapshot whose child lists disagree with the records' parent codes is rejected
      with RegistryCorruptionError

Design Decisions:
    - Record list order is restored exactly; child-set order follows record order
      (ADR: ordering carries no meaning, membership does)
    - Missing top-level keys fall back to empty tables (forward-compatible)
"""

from onsregistry.core.domain_types import EntityKey
from onsregistry.core.errors import OnsRegistryError, RegistryCorruptionError
from onsregistry.core.gs1_code_registry import GS1CodeRegistry
from onsregistry.core.ons_record_registry import ONSRecordRegistry
from onsregistry.core.service_type_registry import ServiceTypeRegistry

SNAPSHOT_VERSION: int = 1


def tables_to_snapshot(
    gs1_codes: GS1CodeRegistry,
    ons_records: ONSRecordRegistry,
    service_types: ServiceTypeRegistry,
) -> dict:
    """Serialize all three tables to a JSON-safe dict. Pure, no IO."""
    return {
        "version": SNAPSHOT_VERSION,
        "gs1_codes": [
            {"key": code, "records": gs1_codes.child_keys(code)}
            for code in gs1_codes.keys()
        ],
        "ons_records": [
            {
                "key": record.key,
                "gs1_code": record.gs1_code_key,
                "flags": record.flags,
                "service_type": record.service_type_key,
                "pattern": record.pattern,
            }
            for record in (ons_records.get(k) for k in ons_records.keys())
        ],
        "service_types": [
            _serialize_service_type(service_types, key)
            for key in service_types.keys()
        ],
    }


def _serialize_service_type(service_types: ServiceTypeRegistry, key: EntityKey) -> dict:
    entry = service_types.raw(key)
    return {
        "key": entry.key,
        "is_abstract": entry.is_abstract,
        "extends": entry.extends,
        "wsdl_uri": entry.wsdl_uri,
        "homepage_uri": entry.homepage_uri,
        "documentation": dict(entry.documentation),
        "obsoletes": list(entry.obsoletes),
        "obsoleted_by": list(entry.obsoleted_by),
    }


def tables_from_snapshot(
    data: dict,
    gs1_codes: GS1CodeRegistry,
    ons_records: ONSRecordRegistry,
    service_types: ServiceTypeRegistry,
) -> None:
    """Fill empty tables from a snapshot dict. Pure, no IO.

    Raises RegistryCorruptionError if the snapshot is malformed or inconsistent.
    """
    if gs1_codes.count() or ons_records.count() or service_types.count():
        raise RegistryCorruptionError("snapshot can only be restored into empty tables")
    if not data:
        return
    version = data.get("version", SNAPSHOT_VERSION)
    if version != SNAPSHOT_VERSION:
        raise RegistryCorruptionError(f"unsupported snapshot version {version}")

    try:
        for entry in data.get("gs1_codes", []):
            gs1_codes.add(EntityKey(entry["key"]))
        for entry in data.get("ons_records", []):
            ons_records.add(
                EntityKey(entry["key"]),
                EntityKey(entry["gs1_code"]),
                int(entry.get("flags", 0)),
                EntityKey(entry.get("service_type", "")),
                entry.get("pattern", ""),
            )
        for entry in data.get("service_types", []):
            _restore_service_type(service_types, entry)
    except OnsRegistryError as e:
        raise RegistryCorruptionError(f"snapshot rejected: {e.message}") from e
    except (KeyError, TypeError, ValueError) as e:
        raise RegistryCorruptionError(f"malformed snapshot: {e!r}") from e

    for entry in data.get("gs1_codes", []):
        stored = set(entry.get("records", []))
        restored = set(gs1_codes.child_keys(EntityKey(entry["key"])))
        if stored != restored:
            raise RegistryCorruptionError(
                f"GS1 code '{entry['key']}' child list does not match its records",
            )


def _restore_service_type(service_types: ServiceTypeRegistry, entry: dict) -> None:
    key = EntityKey(entry["key"])
    service_types.add(
        key,
        is_abstract=bool(entry.get("is_abstract", False)),
        extends=entry.get("extends"),
        wsdl_uri=entry.get("wsdl_uri", ""),
        homepage_uri=entry.get("homepage_uri", ""),
        obsoletes=entry.get("obsoletes", []),
        obsoleted_by=entry.get("obsoleted_by", []),
    )
    for language_code, location in entry.get("documentation", {}).items():
        service_types.set_documentation(key, language_code, location)
