import unittest
from unittest.mock import MagicMock

from entra.api.device_api import DEVICE_DETAIL_FIELDS, DeviceAPI
from entra.api.graph_api import GraphAPIError
from services.models.device_records import CloudDeviceRecord, UpdatePayload


class TestDeviceAPI(unittest.TestCase):
    """
    Unit tests for the DeviceAPI class.

    HTTP is stubbed at the get/patch level; GraphAPI response handling is
    covered in test_graph_api.
    """

    def setUp(self):
        """Set up test fixtures before each test method."""
        self.api = DeviceAPI("https://graph.example.com/v1.0", {"Authorization": "Bearer t"})
        self.api.get = MagicMock()
        self.api.patch = MagicMock(return_value=None)

    def test_find_devices_by_name_prefix(self):
        """Test prefix search builds the startswith filter."""
        self.api.get.return_value = {
            "value": [
                {"id": "obj-1", "displayName": "WKS-07"},
                {"id": "obj-2", "displayName": "WKS-07-OLD"},
            ]
        }

        result = self.api.find_devices_by_name_prefix("WKS-07")

        self.api.get.assert_called_once_with(
            "devices",
            params={
                "$filter": "startswith(displayName,'WKS-07')",
                "$select": "id,displayName",
            },
        )
        self.assertEqual([d["id"] for d in result], ["obj-1", "obj-2"])

    def test_find_devices_escapes_quotes(self):
        self.api.get.return_value = {"value": []}
        self.api.find_devices_by_name_prefix("O'BRIEN-PC")
        params = self.api.get.call_args.kwargs["params"]
        self.assertEqual(params["$filter"], "startswith(displayName,'O''BRIEN-PC')")

    def test_find_devices_no_match(self):
        """Test zero candidates is an empty list, not an error."""
        self.api.get.return_value = {"value": []}
        self.assertEqual(self.api.find_devices_by_name_prefix("WKS-99"), [])

    def test_get_device(self):
        """Test fetching a device by object ID."""
        self.api.get.return_value = {
            "id": "obj-1",
            "deviceId": "0f1e2d3c-4b5a-6978-8796-a5b4c3d2e1f0",
            "displayName": "WKS-07",
            "trustType": "ServerAd",
            "extensionAttributes": {
                "extensionAttribute1": "DEN",
                "extensionAttribute2": "IT",
                "extensionAttribute3": "Laptop",
                "extensionAttribute4": None,
            },
        }

        device = self.api.get_device("obj-1")

        self.api.get.assert_called_once_with(
            "devices/obj-1", params={"$select": DEVICE_DETAIL_FIELDS}
        )
        self.assertIsInstance(device, CloudDeviceRecord)
        self.assertEqual(device.site, "DEN")
        self.assertEqual(device.device_type, "Laptop")
        self.assertIsNone(device.infrastructure)

    def test_get_device_empty_response(self):
        self.api.get.return_value = None
        with self.assertRaises(GraphAPIError):
            self.api.get_device("obj-1")

    def test_update_extension_attributes(self):
        """Test a non-empty payload is sent in one PATCH."""
        payload = UpdatePayload(site="DEN", infrastructure="On-Premises")

        self.assertTrue(self.api.update_extension_attributes("obj-1", payload))

        self.api.patch.assert_called_once_with(
            "devices/obj-1",
            {
                "extensionAttributes": {
                    "extensionAttribute1": "DEN",
                    "extensionAttribute4": "On-Premises",
                }
            },
        )

    def test_update_empty_payload_makes_no_call(self):
        """Test an empty payload never reaches the network."""
        self.assertFalse(self.api.update_extension_attributes("obj-1", UpdatePayload()))
        self.api.patch.assert_not_called()

    def test_update_failure_propagates(self):
        self.api.patch.side_effect = GraphAPIError("Network unreachable")
        with self.assertRaises(GraphAPIError):
            self.api.update_extension_attributes("obj-1", UpdatePayload(site="DEN"))


if __name__ == "__main__":
    unittest.main()
