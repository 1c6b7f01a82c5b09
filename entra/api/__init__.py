from .graph_api import GraphAPI, GraphAPIError, create_headers
from .device_api import DeviceAPI

__all__ = [
    'GraphAPI',
    'GraphAPIError',
    'create_headers',
    'DeviceAPI'
]
