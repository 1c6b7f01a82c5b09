from .device_records import (
    CLOUD,
    EXTENSION_ATTRIBUTE_SLOTS,
    ON_PREMISES,
    UNKNOWN,
    ClassificationResult,
    CloudDeviceRecord,
    DirectoryComputerRecord,
    UpdatePayload,
)

__all__ = [
    'CLOUD',
    'EXTENSION_ATTRIBUTE_SLOTS',
    'ON_PREMISES',
    'UNKNOWN',
    'ClassificationResult',
    'CloudDeviceRecord',
    'DirectoryComputerRecord',
    'UpdatePayload',
]
