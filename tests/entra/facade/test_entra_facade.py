from unittest.mock import MagicMock

import pytest

from entra.api.device_api import DeviceAPI
from entra.api.graph_api import GraphAPIError
from entra.facade.entra_facade import EntraFacade
from services.exceptions import CloudSessionError


class TestEntraFacade:
    """Tests for EntraFacade session setup."""

    def test_builds_device_api(self):
        facade = EntraFacade("https://graph.example.com/v1.0", "token", timeout=5)
        assert isinstance(facade.devices, DeviceAPI)
        assert facade.devices.headers["Authorization"] == "Bearer token"
        assert facade.devices.timeout == 5

    def test_missing_token_is_fatal(self):
        with pytest.raises(CloudSessionError):
            EntraFacade("https://graph.example.com/v1.0", None)

    def test_test_connection_failure(self):
        """Test a failed connectivity check surfaces as CloudSessionError."""
        facade = EntraFacade("https://graph.example.com/v1.0", "token")
        facade.devices.get = MagicMock(side_effect=GraphAPIError("401 Unauthorized", 401))

        with pytest.raises(CloudSessionError):
            facade.test_connection()

    def test_test_connection_success(self):
        facade = EntraFacade("https://graph.example.com/v1.0", "token")
        facade.devices.get = MagicMock(return_value={"value": []})

        facade.test_connection()

        facade.devices.get.assert_called_once_with(
            "devices", params={"$top": "1", "$select": "id"}
        )
