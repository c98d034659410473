"""JSON:API envelope models using Pydantic v2.

Describes the document shape the store ingests and produces. These models
are used for optional strict validation of incoming documents and for the
store's typed return values; the lenient ingest path reads plain mappings
and never depends on them.

Reference: https://jsonapi.org/format/
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

# ---------------------------------------------------------------------------
# Incoming document
# ---------------------------------------------------------------------------


class JSONAPILinkage(BaseModel):
    """A resource identifier inside relationship ``data``."""

    model_config = ConfigDict(extra="allow")

    type: str
    id: str
    meta: dict[str, Any] | None = None


class JSONAPIRelationship(BaseModel):
    """A relationship object: linkage data and/or links and meta."""

    model_config = ConfigDict(extra="allow")

    data: JSONAPILinkage | list[JSONAPILinkage] | None = None
    links: dict[str, Any] | None = None
    meta: dict[str, Any] | None = None


class JSONAPIResource(BaseModel):
    """A single JSON:API resource object. ``id`` is absent on new resources."""

    model_config = ConfigDict(extra="allow")

    type: str
    id: str | None = None
    attributes: dict[str, Any] | None = None
    relationships: dict[str, JSONAPIRelationship] | None = None
    links: dict[str, Any] | None = None
    meta: dict[str, Any] | None = None


class JSONAPIError(BaseModel):
    """A single JSON:API error object. Every member is optional."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    links: dict[str, Any] | None = None
    status: str | None = None
    code: str | None = None
    title: str | None = None
    detail: str | None = None
    source: dict[str, Any] | None = None
    meta: dict[str, Any] | None = None


class JSONAPIDocument(BaseModel):
    """Top-level JSON:API document."""

    model_config = ConfigDict(extra="allow")

    data: JSONAPIResource | list[JSONAPIResource] | None = None
    included: list[JSONAPIResource] | None = None
    errors: list[JSONAPIError] | None = None
    meta: dict[str, Any] | None = None
    links: dict[str, Any] | None = None
    jsonapi: dict[str, Any] | None = None


# ---------------------------------------------------------------------------
# Store inputs and outputs
# ---------------------------------------------------------------------------


class SerializeOptions(BaseModel):
    """Name subsets for ``Model.serialize``. ``None`` means everything known."""

    model_config = ConfigDict(extra="forbid")

    attributes: list[str] | None = None
    relationships: list[str] | None = None
    links: list[str] | None = None
    meta: list[str] | None = None


class SyncResult(BaseModel):
    """Primary data plus the top-level members of a synced document.

    Only members present in the payload are set, so
    ``model_dump(exclude_unset=True)`` mirrors the document's own shape.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    data: Any = None
    meta: dict[str, Any] | None = None
    links: dict[str, Any] | None = None
    jsonapi: dict[str, Any] | None = None
    errors: list[Any] | None = None
