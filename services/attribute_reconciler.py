"""
Attribute Reconciler

Compares the labels derived from Active Directory with the extension
attributes stored on a cloud device and produces the minimal update.

Infrastructure origin is "On-Premises" when either:
- the cloud deviceId equals the on-prem objectGUID after normalization
  (braces and surrounding whitespace removed, lowercased), or
- the device's trustType is ServerAd (hybrid joined)
and "Cloud" otherwise. Both checks are always evaluated.
"""

import logging
from typing import Optional

from services.models.device_records import (
    CLOUD,
    ON_PREMISES,
    ClassificationResult,
    CloudDeviceRecord,
    UpdatePayload,
)

logger = logging.getLogger(__name__)

HYBRID_TRUST_TYPE = "serverad"


def normalize_identifier(value: Optional[str]) -> str:
    """Normalize a GUID string for comparison: '{ABC-123}' -> 'abc-123'."""
    if not value:
        return ""
    return value.strip().strip("{}").strip().lower()


def determine_infrastructure(
    on_prem_guid: Optional[str], device: CloudDeviceRecord
) -> str:
    """
    Decide whether a cloud device originates from the on-prem directory.

    Args:
        on_prem_guid: objectGUID of the on-prem computer
        device: Current cloud device record

    Returns:
        "On-Premises" or "Cloud"
    """
    on_prem_id = normalize_identifier(on_prem_guid)
    cloud_id = normalize_identifier(device.device_id)
    id_match = bool(on_prem_id) and on_prem_id == cloud_id
    hybrid_trust = (device.trust_type or "").strip().lower() == HYBRID_TRUST_TYPE

    if id_match or hybrid_trust:
        logger.debug(
            f"{device.display_name}: On-Premises (id_match={id_match}, trust_type={device.trust_type})"
        )
        return ON_PREMISES
    return CLOUD


def _changed(current: Optional[str], desired: str) -> Optional[str]:
    return desired if current != desired else None


def build_update_payload(
    desired: ClassificationResult, infrastructure: str, current: CloudDeviceRecord
) -> UpdatePayload:
    """
    Build the update containing only the slots whose value differs.

    Comparison is exact and case-sensitive; a missing cloud value never
    equals "Unknown".

    Args:
        desired: Labels derived from Active Directory
        infrastructure: Desired infrastructure origin label
        current: The cloud device as it is now

    Returns:
        UpdatePayload, empty when the device is already up to date
    """
    return UpdatePayload(
        site=_changed(current.site, desired.site),
        department=_changed(current.department, desired.department),
        device_type=_changed(current.device_type, desired.device_type),
        infrastructure=_changed(current.infrastructure, infrastructure),
    )


def reconcile(
    desired: ClassificationResult, on_prem_guid: Optional[str], current: CloudDeviceRecord
) -> UpdatePayload:
    """Compute infrastructure origin for a device and diff it with the desired labels."""
    infrastructure = determine_infrastructure(on_prem_guid, current)
    return build_update_payload(desired, infrastructure, current)
