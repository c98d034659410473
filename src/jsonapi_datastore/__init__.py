"""In-memory graph store for JSON:API documents."""

from jsonapi_datastore.config import Settings, get_settings
from jsonapi_datastore.models import Dependent, Model
from jsonapi_datastore.schemas import SerializeOptions, SyncResult
from jsonapi_datastore.services import Store

__all__ = [
    "Dependent",
    "Model",
    "SerializeOptions",
    "Settings",
    "Store",
    "SyncResult",
    "get_settings",
]
