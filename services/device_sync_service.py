"""
Device Sync Service

Pushes classification labels derived from Active Directory onto the
matching cloud devices.

For every computer object in Active Directory:
1. Classify its distinguished name into site, department and device type
2. Find cloud devices whose display name starts with the computer name
3. For each candidate, re-read the device by ID, work out the desired
   infrastructure origin and diff the four extension attributes
4. Send a single update containing only the differing attributes

Lookup and write failures are logged against the computer or device and
processing moves on to the next one. Only a failure to reach the cloud
directory or Active Directory at startup stops the run.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from active_directory.adapters.ldap_adapter import LDAPAdapter
from entra.api.graph_api import GraphAPIError
from entra.facade.entra_facade import EntraFacade
from services.attribute_reconciler import reconcile
from services.exceptions import DirectorySessionError
from services.device_classifier import classify
from services.models.device_records import (
    ClassificationResult,
    DirectoryComputerRecord,
)
from services.run_log import RunLog

logger = logging.getLogger(__name__)


class DeviceSyncService:
    """Service for syncing Active Directory placement onto cloud device extension attributes."""

    def __init__(self, ad: LDAPAdapter, entra: EntraFacade, run_log: RunLog):
        """
        Initialize the sync service.

        Args:
            ad: On-prem Active Directory adapter
            entra: Cloud directory facade
            run_log: Open run log for this session
        """
        self.ad = ad
        self.entra = entra
        self.run_log = run_log

    def fetch_computers(
        self, computer_name: Optional[str] = None
    ) -> List[DirectoryComputerRecord]:
        """
        Read the on-prem computer inventory.

        Args:
            computer_name: Optional single computer to process

        Returns:
            Directory records for every computer to reconcile
        """
        if computer_name:
            entry = self.ad.get_computer(computer_name)
            entries = [entry] if entry else []
        else:
            entries = self.ad.search_computers()

        computers = [DirectoryComputerRecord.from_ldap_entry(e) for e in entries]
        self.run_log.info(f"Found {len(computers)} computers in Active Directory")
        return computers

    def sync(
        self, computer_name: Optional[str] = None, dry_run: bool = False
    ) -> Dict[str, Any]:
        """
        Run one reconciliation pass.

        Args:
            computer_name: Optional single computer to process
            dry_run: Log intended updates without writing them

        Returns:
            Dictionary with run statistics

        Raises:
            CloudSessionError: If the cloud directory cannot be reached
            DirectorySessionError: If Active Directory cannot be reached
        """
        results = {
            "started_at": datetime.now(timezone.utc),
            "dry_run": dry_run,
            "computers_processed": 0,
            "computers_without_match": 0,
            "candidates_processed": 0,
            "devices_updated": 0,
            "devices_unchanged": 0,
            "errors": [],
        }

        self.entra.test_connection()
        if not self.ad.test_connection():
            raise DirectorySessionError(f"Could not connect to Active Directory ({self.ad})")
        self.run_log.info(f"Starting device attribute sync (dry_run={dry_run})")

        for computer in self.fetch_computers(computer_name):
            self.process_computer(computer, results, dry_run)

        results["completed_at"] = datetime.now(timezone.utc)
        self.run_log.info(
            f"Sync complete: {results['computers_processed']} computers, "
            f"{results['candidates_processed']} devices checked, "
            f"{results['devices_updated']} updated, "
            f"{results['devices_unchanged']} unchanged, "
            f"{len(results['errors'])} errors"
        )
        return results

    def process_computer(
        self,
        computer: DirectoryComputerRecord,
        results: Dict[str, Any],
        dry_run: bool = False,
    ) -> None:
        """Classify one computer and reconcile every cloud device that matches its name."""
        results["computers_processed"] += 1

        # An empty prefix would match every device in the tenant
        if not computer.name:
            self._record_error(
                results,
                computer.distinguished_name or computer.object_guid or "<unnamed>",
                "Computer has no name, skipping cloud lookup",
            )
            return

        classification = classify(computer.distinguished_name)
        self.run_log.info(
            f"{computer.name}: site={classification.site}, "
            f"department={classification.department}, type={classification.device_type}"
        )

        try:
            candidates = self.entra.devices.find_devices_by_name_prefix(computer.name)
        except GraphAPIError as e:
            self._record_error(results, computer.name, f"Device lookup failed: {e}")
            return

        if not candidates:
            results["computers_without_match"] += 1
            self.run_log.warning(
                f"{computer.name}: no matching cloud device found, skipping"
            )
            return

        for candidate in candidates:
            self.process_candidate(computer, classification, candidate, results, dry_run)

    def process_candidate(
        self,
        computer: DirectoryComputerRecord,
        classification: ClassificationResult,
        candidate: Dict[str, Any],
        results: Dict[str, Any],
        dry_run: bool = False,
    ) -> None:
        """Fetch, diff and update a single cloud device."""
        object_id = candidate.get("id")
        label = candidate.get("displayName") or object_id
        results["candidates_processed"] += 1

        try:
            device = self.entra.devices.get_device(object_id)
        except GraphAPIError as e:
            self._record_error(results, label, f"Could not read device {object_id}: {e}")
            return

        payload = reconcile(classification, computer.object_guid, device)
        logger.debug(f"{device.display_name} (trust_type={device.trust_type}): {payload}")

        if payload.is_empty():
            results["devices_unchanged"] += 1
            self.run_log.info(f"{device.display_name}: attributes already up to date")
            return

        changes = payload.changed_slots()
        if dry_run:
            results["devices_updated"] += 1
            self.run_log.info(f"[DRY RUN] {device.display_name}: would update {changes}")
            return

        try:
            self.entra.devices.update_extension_attributes(device.object_id, payload)
        except GraphAPIError as e:
            self._record_error(results, device.display_name, f"Update failed: {e}")
            return

        results["devices_updated"] += 1
        self.run_log.info(f"{device.display_name}: updated {changes}")

    def _record_error(self, results: Dict[str, Any], target: str, message: str) -> None:
        results["errors"].append({"target": target, "error": message})
        self.run_log.error(f"{target}: {message}")
