"""
Device sync services: classification, reconciliation, run logging and the
run driver that ties the on-prem directory to the cloud device directory.
"""
