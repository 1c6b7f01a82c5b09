#!/usr/bin/env python3
"""
Script to sync Active Directory placement onto cloud device extension attributes.

This script:
1. Reads every computer object from on-prem Active Directory
2. Derives site, department and device type from each computer's OU path
3. Finds the matching devices in the cloud directory by display name
4. Updates extensionAttribute1-4 only where the stored value differs

Extension attribute mapping:
- extensionAttribute1: Site (DEN, LAX, NYC, PDX)
- extensionAttribute2: Department
- extensionAttribute3: Device type (Desktop, Laptop, Server)
- extensionAttribute4: Infrastructure origin (On-Premises, Cloud)
"""

import argparse
import logging
import sys

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from active_directory.adapters.ldap_adapter import LDAPAdapter
from entra.facade.entra_facade import EntraFacade
from services.config import SyncConfig
from services.device_sync_service import DeviceSyncService
from services.exceptions import DeviceSyncError
from services.run_log import LOG_FORMAT, RunLog

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Sync Active Directory classification onto cloud device extension attributes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Live sync for all computers
  device-attribute-sync

  # Preview changes without writing
  device-attribute-sync --dry-run

  # Sync a single computer
  device-attribute-sync --computer WKS-07
        """,
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log intended updates without writing to the cloud directory",
    )

    parser.add_argument("--computer", help="Specific computer name to process")

    parser.add_argument(
        "--log-dir",
        help="Directory for run logs and transcripts (default: DEVICE_SYNC_LOG_DIR or ./logs)",
    )

    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    # The transcript lowers the root level to DEBUG, so the console filters for itself
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.DEBUG if args.verbose else logging.INFO)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=[console],
        force=True,
    )

    try:
        log_config = SyncConfig.get_log_config()
        graph_config = SyncConfig.get_graph_config()
        ad_config = SyncConfig.get_ad_config()

        with RunLog(
            args.log_dir or log_config["log_dir"],
            retention_days=log_config["retention_days"],
        ) as run_log:
            entra = EntraFacade(
                graph_config["base_url"],
                graph_config["access_token"],
                timeout=graph_config["timeout"],
            )
            ad = LDAPAdapter(ad_config)
            service = DeviceSyncService(ad, entra, run_log)
            results = service.sync(computer_name=args.computer, dry_run=args.dry_run)
    except (DeviceSyncError, ValueError) as e:
        logger.error(f"Device attribute sync failed: {e}", exc_info=True)
        sys.exit(1)

    duration = (results["completed_at"] - results["started_at"]).total_seconds()

    print("\n" + "=" * 60)
    print("DEVICE ATTRIBUTE SYNC SUMMARY")
    print("=" * 60)
    print(f"Mode:                {'DRY RUN' if args.dry_run else 'LIVE'}")
    print(f"Computers Processed: {results['computers_processed']:>6,}")
    print(f"  └─ No Cloud Match: {results['computers_without_match']:>6,}")
    print(f"Devices Checked:     {results['candidates_processed']:>6,}")
    print(f"Devices Updated:     {results['devices_updated']:>6,}")
    print(f"Devices Unchanged:   {results['devices_unchanged']:>6,}")
    print(f"Errors:              {len(results['errors']):>6,}")
    print(f"Duration:            {duration:.2f}s")
    print("=" * 60)

    for error in results["errors"]:
        print(f"   - {error['target']}: {error['error']}")


if __name__ == "__main__":
    main()
