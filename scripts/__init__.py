"""
Scripts package for Device Attribute Sync.

This package contains command-line scripts.

Modules:
- sync_device_attributes: Reconcile AD placement onto cloud device extension attributes
"""

__version__ = "0.1.0"
