import uuid
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

UNKNOWN = "Unknown"
ON_PREMISES = "On-Premises"
CLOUD = "Cloud"

# Extension attribute slot on the cloud device for each reconciled field, in write order
EXTENSION_ATTRIBUTE_SLOTS = (
    ("site", "extensionAttribute1"),
    ("department", "extensionAttribute2"),
    ("device_type", "extensionAttribute3"),
    ("infrastructure", "extensionAttribute4"),
)


def _first_value(value: Any) -> Any:
    """LDAP attributes may come back as single values or lists."""
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def _guid_to_string(value: Any) -> str:
    """Render an objectGUID as text; ldap3 returns raw little-endian bytes when no schema is loaded."""
    value = _first_value(value)
    if value is None:
        return ""
    if isinstance(value, bytes):
        if len(value) == 16:
            return str(uuid.UUID(bytes_le=value))
        return value.decode("utf-8", errors="ignore").strip()
    return str(value).strip()


@dataclass(frozen=True)
class DirectoryComputerRecord:
    """A computer object read from the on-premises directory."""
    name: str
    object_guid: str
    distinguished_name: str
    description: Optional[str] = None

    @classmethod
    def from_ldap_entry(cls, entry: Dict[str, Any]) -> "DirectoryComputerRecord":
        """Build a record from an LDAPAdapter search result dictionary."""
        description = _first_value(entry.get("description"))
        return cls(
            name=str(_first_value(entry.get("name")) or "").strip(),
            object_guid=_guid_to_string(entry.get("objectGUID")),
            distinguished_name=str(
                _first_value(entry.get("distinguishedName")) or entry.get("dn") or ""
            ),
            description=str(description) if description else None,
        )


@dataclass(frozen=True)
class ClassificationResult:
    """Labels derived from a computer's directory placement."""
    site: str = UNKNOWN
    department: str = UNKNOWN
    device_type: str = UNKNOWN


@dataclass(frozen=True)
class CloudDeviceRecord:
    """
    A device as stored in the cloud directory.

    The four classification slots are read from the device's
    extensionAttributes according to EXTENSION_ATTRIBUTE_SLOTS. A slot that
    has never been written is None, which is distinct from "Unknown".
    """
    object_id: str
    device_id: Optional[str]
    display_name: str
    trust_type: Optional[str] = None
    site: Optional[str] = None
    department: Optional[str] = None
    device_type: Optional[str] = None
    infrastructure: Optional[str] = None

    @classmethod
    def from_graph(cls, device: Dict[str, Any]) -> "CloudDeviceRecord":
        """Build a record from a Graph /devices/{id} response."""
        extension_attributes = device.get("extensionAttributes") or {}
        slots = {
            field_name: extension_attributes.get(graph_name)
            for field_name, graph_name in EXTENSION_ATTRIBUTE_SLOTS
        }
        return cls(
            object_id=device["id"],
            device_id=device.get("deviceId"),
            display_name=device.get("displayName") or "",
            trust_type=device.get("trustType"),
            **slots,
        )


@dataclass(frozen=True)
class UpdatePayload:
    """
    The extension attributes that need to change on one cloud device.

    A field is None when the cloud value already matches.
    """
    site: Optional[str] = None
    department: Optional[str] = None
    device_type: Optional[str] = None
    infrastructure: Optional[str] = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def changed_slots(self) -> Dict[str, str]:
        """Map of Graph extension attribute name to new value for every set field."""
        return {
            graph_name: getattr(self, field_name)
            for field_name, graph_name in EXTENSION_ATTRIBUTE_SLOTS
            if getattr(self, field_name) is not None
        }

    def to_graph(self) -> Dict[str, Dict[str, str]]:
        """Request body for PATCH /devices/{id}."""
        return {"extensionAttributes": self.changed_slots()}
