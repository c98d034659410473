from jsonapi_datastore.services.store import Store

__all__ = ["Store"]
