import logging
from typing import Optional

from ..api.graph_api import GraphAPIError, create_headers
from ..api.device_api import DeviceAPI
from services.exceptions import CloudSessionError

logger = logging.getLogger(__name__)


class EntraFacade:
    def __init__(self, base_url: str, access_token: Optional[str], timeout: int = 30):
        if not access_token:
            raise CloudSessionError(
                "No Graph access token available (set GRAPH_ACCESS_TOKEN)"
            )
        headers = create_headers(access_token)
        self.devices = DeviceAPI(base_url, headers, timeout=timeout)

    def test_connection(self) -> None:
        """
        Verifies the token can read the device directory.

        Raises:
            CloudSessionError: If the connectivity check request fails.
        """
        try:
            self.devices.get("devices", params={"$top": "1", "$select": "id"})
        except GraphAPIError as e:
            raise CloudSessionError(f"Could not connect to the cloud directory: {e}")
        logger.info("Connected to the cloud device directory")
