import uuid

from services.models.device_records import (
    CloudDeviceRecord,
    DirectoryComputerRecord,
    UpdatePayload,
)


class TestDirectoryComputerRecord:
    def test_from_ldap_entry(self):
        entry = {
            "dn": "CN=WKS-07,OU=DEN,DC=corp,DC=example,DC=com",
            "name": "WKS-07",
            "objectGUID": "{0f1e2d3c-4b5a-6978-8796-a5b4c3d2e1f0}",
            "distinguishedName": "CN=WKS-07,OU=DEN,DC=corp,DC=example,DC=com",
            "description": ["Front desk laptop"],
        }

        record = DirectoryComputerRecord.from_ldap_entry(entry)

        assert record.name == "WKS-07"
        assert record.object_guid == "{0f1e2d3c-4b5a-6978-8796-a5b4c3d2e1f0}"
        assert record.distinguished_name == entry["distinguishedName"]
        assert record.description == "Front desk laptop"

    def test_binary_guid(self):
        guid = uuid.UUID("0f1e2d3c-4b5a-6978-8796-a5b4c3d2e1f0")
        record = DirectoryComputerRecord.from_ldap_entry(
            {"dn": "CN=X,DC=corp", "name": "X", "objectGUID": guid.bytes_le}
        )
        assert record.object_guid == str(guid)

    def test_falls_back_to_dn(self):
        record = DirectoryComputerRecord.from_ldap_entry({"dn": "CN=X,DC=corp", "name": "X"})
        assert record.distinguished_name == "CN=X,DC=corp"
        assert record.object_guid == ""
        assert record.description is None


class TestCloudDeviceRecord:
    def test_from_graph_without_extension_attributes(self):
        device = CloudDeviceRecord.from_graph({"id": "obj-1", "displayName": "WKS-07"})
        assert device.object_id == "obj-1"
        assert device.device_id is None
        assert device.site is None
        assert device.infrastructure is None


class TestUpdatePayload:
    def test_empty(self):
        assert UpdatePayload().is_empty()
        assert not UpdatePayload(department="IT").is_empty()

    def test_slot_order(self):
        payload = UpdatePayload(infrastructure="Cloud", site="LAX", device_type="Desktop")
        assert list(payload.changed_slots()) == [
            "extensionAttribute1",
            "extensionAttribute3",
            "extensionAttribute4",
        ]
