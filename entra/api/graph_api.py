import logging
from typing import Any, Dict, List, Optional, Union

import requests

from services.exceptions import DeviceSyncError

# Set up logging
logger = logging.getLogger(__name__)


class GraphAPIError(DeviceSyncError):
    """Raised when a Microsoft Graph request fails or returns an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def create_headers(access_token: str) -> Dict[str, str]:
    """
    Create HTTP headers for Microsoft Graph API requests.

    Args:
        access_token (str): The bearer token for authentication.

    Returns:
        Dict[str, str]: A dictionary containing the required HTTP headers.
    """
    return {
        "Authorization": f"Bearer {access_token}",
        "Content-Type": "application/json",
        # Required for $filter on directory objects such as devices
        "ConsistencyLevel": "eventual",
    }


class GraphAPI:
    """
    Base class for interacting with the Microsoft Graph API.

    Attributes:
        base_url (str): The base URL for the Graph API (e.g. https://graph.microsoft.com/v1.0).
        headers (Dict[str, str]): HTTP headers to use for API requests.
        timeout (int): Per-request timeout in seconds.
    """

    def __init__(self, base_url: str, headers: Dict[str, str], timeout: int = 30):
        """
        Initialize the Graph API client.

        Args:
            base_url (str): The base URL for the Graph API.
            headers (Dict[str, str]): HTTP headers to use for API requests.
            timeout (int): Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.headers = headers
        self.timeout = timeout

    def get(
        self, url_suffix: str, params: Optional[Dict[str, str]] = None
    ) -> Optional[Union[Dict[str, Any], List[Dict[str, Any]]]]:
        """
        Perform a GET request to the specified Graph API endpoint.

        Args:
            url_suffix (str): The API endpoint path to append to the base URL.
            params (Optional[Dict[str, str]]): Query string parameters.

        Returns:
            Optional[Union[Dict[str, Any], List[Dict[str, Any]]]]: The JSON response.

        Raises:
            GraphAPIError: If the request cannot be sent or returns an error status.
        """
        url = f"{self.base_url}/{url_suffix}"
        try:
            response = requests.get(
                url, headers=self.headers, params=params, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"GET {url_suffix} failed: {e}")
            raise GraphAPIError(f"GET {url_suffix} failed: {e}")
        return self._handle_response(response)

    def patch(
        self, url_suffix: str, data: Any
    ) -> Optional[Union[Dict[str, Any], List[Dict[str, Any]]]]:
        """
        Perform a PATCH request to the specified Graph API endpoint.

        Args:
            url_suffix (str): The API endpoint path to append to the base URL.
            data (Any): Data to be sent in the request body as JSON.

        Returns:
            Optional[Union[Dict[str, Any], List[Dict[str, Any]]]]: The JSON response
            if one was returned, None for 204 No Content.

        Raises:
            GraphAPIError: If the request cannot be sent or returns an error status.
        """
        url = f"{self.base_url}/{url_suffix}"
        try:
            response = requests.patch(
                url, json=data, headers=self.headers, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"PATCH {url_suffix} failed: {e}")
            raise GraphAPIError(f"PATCH {url_suffix} failed: {e}")
        return self._handle_response(response)

    def _handle_response(
        self, response: requests.Response
    ) -> Optional[Union[Dict[str, Any], List[Dict[str, Any]]]]:
        """
        Handle the HTTP response from the Graph API.

        Args:
            response (requests.Response): The HTTP response object.

        Returns:
            Optional[Union[Dict[str, Any], List[Dict[str, Any]]]]: The JSON response
            if successful, None when the body is empty.

        Raises:
            GraphAPIError: For any non-2xx status.
        """
        if response.status_code in (200, 201):
            logger.debug(f"{response.status_code} | Successful Request!")
            try:
                return response.json()
            except requests.exceptions.JSONDecodeError:
                return None
        elif response.status_code == 204:
            logger.debug(f"{response.status_code} | Successful Update!")
            return None

        message = self._error_message(response)
        logger.error(f"Request failed: {response.status_code}")
        logger.error(f"Response text: {response.text}")
        raise GraphAPIError(
            f"Graph request failed ({response.status_code}): {message}",
            status_code=response.status_code,
        )

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Extract Graph's error.message from a failed response, falling back to the raw text."""
        try:
            body = response.json()
        except requests.exceptions.JSONDecodeError:
            return response.text
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            return body["error"].get("message") or response.text
        return response.text
