class DeviceSyncError(Exception):
    """Base exception for device sync errors."""
    pass

class CloudSessionError(DeviceSyncError):
    """Raised when the cloud directory session cannot be established."""
    pass

class RunLogError(DeviceSyncError):
    """Raised when the run log or transcript cannot be opened."""
    pass

class DirectorySessionError(DeviceSyncError):
    """Raised when the on-premises directory cannot be reached."""
    pass
