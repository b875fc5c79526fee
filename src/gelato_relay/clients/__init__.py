from .http_client import GelatoClient

__all__ = ["GelatoClient"]
