"""Pydantic schemas for JSON:API documents and store results."""

from jsonapi_datastore.schemas.jsonapi import (
    JSONAPIDocument,
    JSONAPIError,
    JSONAPILinkage,
    JSONAPIRelationship,
    JSONAPIResource,
    SerializeOptions,
    SyncResult,
)

__all__ = [
    "JSONAPIDocument",
    "JSONAPIError",
    "JSONAPILinkage",
    "JSONAPIRelationship",
    "JSONAPIResource",
    "SerializeOptions",
    "SyncResult",
]
