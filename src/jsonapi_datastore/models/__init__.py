from jsonapi_datastore.models.resource import Dependent, Model, build_placeholder

__all__ = [
    "Dependent",
    "Model",
    "build_placeholder",
]
