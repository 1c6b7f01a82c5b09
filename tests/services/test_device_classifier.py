"""
Unit tests for the device classifier.

Covers rule precedence and the Unknown fallback.
"""

import pytest

from services.device_classifier import (
    DEVICE_TYPE_RULES,
    ClassificationRule,
    classify,
    first_match,
)
from services.models.device_records import ClassificationResult


class TestClassify:
    """Tests for classify()."""

    def test_laptop_in_it_at_den(self):
        dn = "CN=WKS-07,OU=DEN,OU=IT Computers,OU=Laptop Computers,DC=corp,DC=example,DC=com"
        assert classify(dn) == ClassificationResult(
            site="DEN", department="IT", device_type="Laptop"
        )

    def test_desktop_in_accounting_at_nyc(self):
        dn = "CN=ACC-12,OU=NYC,OU=Accounting Computers,OU=Desktop Computers,DC=corp,DC=example,DC=com"
        result = classify(dn)
        assert result.site == "NYC"
        assert result.department == "Accounting"
        assert result.device_type == "Desktop"

    @pytest.mark.parametrize(
        "dn",
        [
            "CN=SRV-01,OU=Desktop Servers,OU=PDX,DC=corp,DC=example,DC=com",
            "CN=SRV-02,OU=LAX,OU=Desktop Servers,OU=Desktop Computers,DC=corp,DC=example,DC=com",
        ],
    )
    def test_desktop_servers_are_servers(self, dn):
        """A server placed under a desktop OU is still a Server."""
        assert classify(dn).device_type == "Server"

    def test_servers_ou_is_it_department(self):
        dn = "CN=SRV-03,OU=Servers,OU=LAX,DC=corp,DC=example,DC=com"
        result = classify(dn)
        assert result.department == "IT"
        assert result.device_type == "Server"

    @pytest.mark.parametrize(
        "dn",
        [
            "CN=WKS-01,OU=Laptop Computers,DC=corp,DC=example,DC=com",
            "CN=WKS-02,OU=SEA,OU=IT Computers,DC=corp,DC=example,DC=com",
            "CN=WKS-03,OU=den,DC=corp,DC=example,DC=com",
        ],
    )
    def test_unknown_site(self, dn):
        assert classify(dn).site == "Unknown"

    def test_unrecognized_path_is_all_unknown(self):
        assert classify("CN=KIOSK-1,OU=Lobby,DC=corp,DC=example,DC=com") == ClassificationResult()

    @pytest.mark.parametrize("dn", [None, ""])
    def test_missing_path(self, dn):
        assert classify(dn) == ClassificationResult("Unknown", "Unknown", "Unknown")


class TestFirstMatch:
    """Tests for ordered rule evaluation."""

    def test_first_rule_wins(self):
        rules = [ClassificationRule("Lab", "First"), ClassificationRule("Lab", "Second")]
        assert first_match("OU=Lab", rules) == "First"

    def test_order_is_preserved(self):
        assert [rule.pattern for rule in DEVICE_TYPE_RULES] == [
            "Desktop Servers",
            "Servers",
            "Desktop",
            "Laptop",
        ]

    def test_no_match(self):
        assert first_match("OU=Other", DEVICE_TYPE_RULES) == "Unknown"
