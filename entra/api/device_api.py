import logging
from typing import Any, Dict, List

from .graph_api import GraphAPI, GraphAPIError
from services.models.device_records import CloudDeviceRecord, UpdatePayload

logger = logging.getLogger(__name__)

DEVICE_DETAIL_FIELDS = "id,deviceId,displayName,trustType,extensionAttributes"


class DeviceAPI(GraphAPI):
    def find_devices_by_name_prefix(self, name: str) -> List[Dict[str, Any]]:
        """
        Finds devices whose display name starts with the given name.

        Args:
            name: The on-prem computer name.

        Returns:
            Matching device summaries (id and displayName). Empty when none match.
        """
        escaped = name.replace("'", "''")
        params = {
            "$filter": f"startswith(displayName,'{escaped}')",
            "$select": "id,displayName",
        }
        response = self.get("devices", params=params)
        return (response or {}).get("value", [])

    def get_device(self, object_id: str) -> CloudDeviceRecord:
        """
        Gets the current state of a device directly by its object ID.

        Args:
            object_id: The device's directory object ID.
        """
        response = self.get(
            f"devices/{object_id}", params={"$select": DEVICE_DETAIL_FIELDS}
        )
        if not response or "id" not in response:
            raise GraphAPIError(f"Device {object_id} returned no data")
        return CloudDeviceRecord.from_graph(response)

    def update_extension_attributes(
        self, object_id: str, payload: UpdatePayload
    ) -> bool:
        """
        Writes the changed extension attributes of a device in a single call.

        Args:
            object_id: The device's directory object ID.
            payload: The attributes to change.

        Returns:
            True if an update was sent, False when the payload was empty.
        """
        if payload.is_empty():
            return False
        self.patch(f"devices/{object_id}", payload.to_graph())
        logger.debug(f"Updated {object_id}: {payload.changed_slots()}")
        return True
