from services.config import SyncConfig


class TestSyncConfig:
    def test_ad_config_from_environment(self, monkeypatch):
        monkeypatch.setenv("AD_SERVER", "dc01.corp.example.com")
        monkeypatch.setenv("AD_SEARCH_BASE", "DC=corp,DC=example,DC=com")
        monkeypatch.setenv("AD_USER", "CORP\\svc-devicesync")
        monkeypatch.setenv("AD_USE_SSL", "false")
        monkeypatch.delenv("AD_PORT", raising=False)

        config = SyncConfig.get_ad_config()

        assert config["server"] == "dc01.corp.example.com"
        assert config["use_ssl"] is False
        assert config["port"] == 389

    def test_graph_defaults(self, monkeypatch):
        monkeypatch.delenv("GRAPH_BASE_URL", raising=False)
        monkeypatch.delenv("GRAPH_TIMEOUT", raising=False)
        monkeypatch.setenv("GRAPH_ACCESS_TOKEN", "token")

        config = SyncConfig.get_graph_config()

        assert config["base_url"] == "https://graph.microsoft.com/v1.0"
        assert config["access_token"] == "token"
        assert config["timeout"] == 30

    def test_log_config(self, monkeypatch):
        monkeypatch.setenv("DEVICE_SYNC_LOG_DIR", "/var/log/device-sync")
        monkeypatch.setenv("LOG_RETENTION_DAYS", "14")

        config = SyncConfig.get_log_config()

        assert config == {"log_dir": "/var/log/device-sync", "retention_days": 14}
