import getpass
import logging
from typing import Any, Dict, List, Optional

import keyring
from ldap3 import ALL, BASE, SUBTREE, Connection, Server
from ldap3.core.exceptions import LDAPException
from ldap3.utils.conv import escape_filter_chars

logger = logging.getLogger(__name__)

# Attributes needed to classify a computer and match it to a cloud device
COMPUTER_ATTRIBUTES = ["name", "objectGUID", "distinguishedName", "description"]


class LDAPAdapter:
    """
    LDAP connection adapter for the on-premises Active Directory.

    This class handles LDAP server connections, authentication, and the
    computer queries the device sync needs. A fresh connection is created
    for each search and unbound when the search completes.
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize LDAP adapter with configuration settings.

        Args:
            config: Dictionary containing LDAP connection settings.
                   Required keys:
                   - 'server': LDAP server hostname
                   - 'search_base': Base DN for searches
                   - 'user': Username for authentication
                   - 'keyring_service': Keyring service name for password

                   Optional keys with defaults:
                   - 'password': Explicit password (skips keyring lookup)
                   - 'port': LDAP port (default: 636 for SSL, 389 for non-SSL)
                   - 'use_ssl': Enable SSL/TLS (default: True)
                   - 'timeout': Connection timeout in seconds (default: 600)
                   - 'auto_bind': Auto-bind on connection (default: True)
                   - 'get_info': Server info level (default: ALL)
                   - 'default_page_size': Page size for paged searches (default: 1000)

        Raises:
            ValueError: If required configuration keys are missing
            TypeError: If configuration is not a dictionary
        """
        if not isinstance(config, dict):
            raise TypeError("Configuration must be a dictionary")

        required_keys = ["server", "search_base", "user", "keyring_service"]
        missing_keys = [key for key in required_keys if not config.get(key)]
        if missing_keys:
            raise ValueError(f"Missing required configuration keys: {missing_keys}")

        self.server_hostname = config["server"]
        self.search_base = config["search_base"]
        self.user = config["user"]
        self.keyring_service = config["keyring_service"]

        self.use_ssl = config.get("use_ssl", True)
        self.port = config.get("port", 636 if self.use_ssl else 389)
        self.timeout = config.get("timeout", 600)  # AD is very slow, needs long timeout
        self.auto_bind = config.get("auto_bind", True)
        self.get_info = config.get("get_info", ALL)
        self.default_page_size = config.get("default_page_size", 1000)

        self._server = None
        self._password = config.get("password")

        logger.debug(f"LDAP adapter initialized for server: {self.server_hostname}")

    def _get_password(self) -> str:
        """
        Retrieve password from configuration, keyring, or prompt user.

        Returns:
            str: The password for LDAP authentication

        Raises:
            KeyboardInterrupt: If user cancels password prompt
        """
        if self._password:
            return self._password

        try:
            password = keyring.get_password(self.keyring_service, self.user)
            if password:
                logger.debug("Using password from keyring")
                self._password = password
                return password
        except Exception as e:
            logger.warning(f"Could not retrieve password from keyring: {e}")

        try:
            password = getpass.getpass(f"Enter LDAP password for {self.user}: ")
            self._password = password

            try:
                save_password = (
                    input("Save password to keyring? (y/n): ").lower().strip()
                )
                if save_password == "y":
                    keyring.set_password(self.keyring_service, self.user, password)
                    logger.info("Password saved to keyring")
            except Exception as e:
                logger.warning(f"Could not save password to keyring: {e}")

            return password

        except KeyboardInterrupt:
            logger.info("Password prompt cancelled by user")
            raise

    def _create_server(self) -> Server:
        """
        Create LDAP server object with current configuration.

        Returns:
            Server: Configured ldap3 Server object

        Raises:
            LDAPException: If server creation fails
        """
        if not self._server:
            try:
                self._server = Server(
                    self.server_hostname,
                    use_ssl=self.use_ssl,
                    port=self.port,
                    get_info=self.get_info,
                    connect_timeout=self.timeout,
                )
                logger.debug(
                    f"LDAP server object created: {self.server_hostname}:{self.port}"
                )
            except Exception as e:
                logger.error(f"Failed to create LDAP server object: {e}")
                raise LDAPException(f"Server creation failed: {e}")

        return self._server

    def _create_connection(self) -> Connection:
        """
        Create and bind LDAP connection.

        Returns:
            Connection: Authenticated ldap3 Connection object

        Raises:
            LDAPException: If connection or authentication fails
        """
        try:
            server = self._create_server()
            password = self._get_password()

            connection = Connection(
                server, user=self.user, password=password, auto_bind=self.auto_bind
            )

            if connection.bound:
                logger.info(f"Successfully connected to {self.server_hostname}")
                return connection
            else:
                raise LDAPException("Failed to bind to LDAP server")

        except Exception as e:
            logger.error(f"LDAP connection failed: {e}")
            raise LDAPException(f"Connection failed: {e}")

    def test_connection(self) -> bool:
        """
        Test LDAP connection with a minimal base-scope read of the search base.

        Returns:
            bool: True if connection test succeeds, False otherwise
        """
        conn = None
        try:
            conn = self._create_connection()
            success = conn.search(
                search_base=self.search_base,
                search_filter="(objectClass=*)",
                search_scope=BASE,
                attributes=["objectClass"],
            )
            if success:
                logger.info(f"Connection test successful for {self.search_base}")
                return True

            logger.warning(f"Search operation failed: {conn.result}")
            return False

        except LDAPException as e:
            logger.error(f"LDAP connection test failed: {e}")
            return False
        finally:
            if conn:
                try:
                    conn.unbind()
                except LDAPException as e:
                    logger.debug(f"Error closing test connection: {e}")

    def __str__(self) -> str:
        """String representation of the LDAP adapter."""
        ssl_status = "SSL" if self.use_ssl else "non-SSL"
        return f"LDAPAdapter({self.server_hostname}:{self.port}, {ssl_status}, user={self.user})"

    # Core Search Infrastructure

    def search(
        self,
        search_filter: str,
        search_base: Optional[str] = None,
        attributes: Optional[List[str]] = None,
        use_pagination: bool = True,
        page_size: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Core search method returning entries as dictionaries.

        Each result dictionary has a 'dn' key plus one key per returned
        attribute. Paged search is used by default so Active Directory's
        server-side size limit does not truncate the computer inventory.

        Args:
            search_filter: LDAP filter string (e.g., '(objectClass=computer)')
            search_base: Base DN for search (defaults to adapter's search_base)
            attributes: List of attributes to retrieve (None for all available)
            use_pagination: Enable paged search (default: True)
            page_size: Page size for pagination (defaults to adapter's configured size)

        Returns:
            List[Dict[str, Any]]: One dictionary per matching entry

        Raises:
            LDAPException: If search operation fails
            ValueError: If parameters are invalid
        """
        if not search_filter or not isinstance(search_filter, str):
            raise ValueError("search_filter must be a non-empty string")

        search_kwargs = {
            "search_base": search_base if search_base is not None else self.search_base,
            "search_filter": search_filter,
            "search_scope": SUBTREE,
            "attributes": attributes if attributes else ["*"],
        }

        conn = None
        try:
            conn = self._create_connection()

            logger.debug(
                f"Executing search: filter='{search_filter}', base='{search_kwargs['search_base']}', "
                f"pagination={use_pagination}"
            )

            if use_pagination:
                response = conn.extend.standard.paged_search(
                    paged_size=page_size or self.default_page_size,
                    generator=False,
                    **search_kwargs,
                )
            else:
                if not conn.search(**search_kwargs):
                    logger.warning(f"Search returned no results: {conn.result}")
                    return []
                response = conn.response

            results = [
                self._response_to_dict(item)
                for item in response or []
                if isinstance(item, dict) and item.get("type") == "searchResEntry"
            ]

            logger.info(f"Search completed successfully: {len(results)} results returned")
            return results

        except LDAPException as e:
            logger.error(f"LDAP search failed: {e}")
            raise
        finally:
            if conn:
                try:
                    conn.unbind()
                    logger.debug("Search connection closed")
                except LDAPException as e:
                    logger.debug(f"Error closing search connection: {e}")

    @staticmethod
    def _response_to_dict(item: Dict[str, Any]) -> Dict[str, Any]:
        """Flatten an ldap3 response item into {'dn': ..., attribute: value}."""
        entry = {"dn": item.get("dn")}
        for attr_name, attr_value in (item.get("attributes") or {}).items():
            entry[attr_name] = attr_value
        return entry

    # Computer queries

    def search_computers(
        self,
        search_filter: str = "(objectClass=computer)",
        attributes: Optional[List[str]] = None,
    ) -> List[Dict[str, Any]]:
        """
        List computer objects under the adapter's search base.

        Args:
            search_filter: LDAP filter (default: every computer object)
            attributes: Attributes to retrieve (defaults to COMPUTER_ATTRIBUTES)

        Returns:
            List[Dict[str, Any]]: Computer entries as dictionaries
        """
        return self.search(
            search_filter=search_filter,
            attributes=attributes or COMPUTER_ATTRIBUTES,
        )

    def get_computer(
        self, name: str, attributes: Optional[List[str]] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Get a single computer object by name.

        Args:
            name: The computer's name (CN)
            attributes: Attributes to retrieve (defaults to COMPUTER_ATTRIBUTES)

        Returns:
            Optional[Dict[str, Any]]: The computer entry, or None if not found
        """
        search_filter = f"(&(objectClass=computer)(name={escape_filter_chars(name)}))"
        results = self.search(
            search_filter=search_filter,
            attributes=attributes or COMPUTER_ATTRIBUTES,
            use_pagination=False,
        )
        if not results:
            logger.info(f"Computer '{name}' not found in Active Directory")
            return None
        if len(results) > 1:
            logger.warning(
                f"Found {len(results)} computers named '{name}', using {results[0]['dn']}"
            )
        return results[0]
