from .facade.entra_facade import EntraFacade
from .api.graph_api import GraphAPI, GraphAPIError, create_headers
from .api.device_api import DeviceAPI

__all__ = ['EntraFacade', 'GraphAPI', 'GraphAPIError', 'create_headers', 'DeviceAPI']
