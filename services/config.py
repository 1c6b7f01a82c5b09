import os
from typing import Any, Dict

from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "y", "on")


class SyncConfig:
    """Centralized device sync configuration management."""

    @staticmethod
    def get_ad_config() -> Dict[str, Any]:
        """Get on-premises Active Directory LDAP configuration from environment variables."""
        use_ssl = _as_bool(os.getenv('AD_USE_SSL', 'true'))
        return {
            'server': os.getenv('AD_SERVER'),
            'search_base': os.getenv('AD_SEARCH_BASE'),
            'user': os.getenv('AD_USER'),
            'password': os.getenv('AD_PASSWORD'),
            'keyring_service': os.getenv('AD_KEYRING_SERVICE', 'ldap_device_sync'),
            'port': int(os.getenv('AD_PORT', '636' if use_ssl else '389')),
            'use_ssl': use_ssl,
        }

    @staticmethod
    def get_graph_config() -> Dict[str, Any]:
        """Get Microsoft Graph configuration from environment variables."""
        return {
            'base_url': os.getenv('GRAPH_BASE_URL', 'https://graph.microsoft.com/v1.0'),
            'access_token': os.getenv('GRAPH_ACCESS_TOKEN'),
            'timeout': int(os.getenv('GRAPH_TIMEOUT', '30')),
        }

    @staticmethod
    def get_log_config() -> Dict[str, Any]:
        """Get run log location and retention from environment variables."""
        return {
            'log_dir': os.getenv('DEVICE_SYNC_LOG_DIR', 'logs'),
            'retention_days': int(os.getenv('LOG_RETENTION_DAYS', '7')),
        }
