from .mongo import get_client, get_database

__all__ = ["get_client", "get_database"]
