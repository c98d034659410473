"""In-memory JSON:API data store.

Normalizes resources from JSON:API documents into one ``Model`` per
``(type, id)``, links relationships between models in place, and keeps a
per-type enumeration order in which the most recently synced id comes last.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from jsonapi_datastore.config import Settings, get_settings
from jsonapi_datastore.models.resource import Model, build_placeholder
from jsonapi_datastore.schemas.jsonapi import JSONAPIDocument, SyncResult

logger = logging.getLogger(__name__)

_TOP_LEVEL_MEMBERS = ("meta", "links", "jsonapi", "errors")


class Store:
    """Graph of models keyed by type and id.

    ``graph[type][id]`` gives constant-time lookup; ``order[type]`` lists ids
    in ``find_all`` order. The ``meta``, ``links``, ``jsonapi`` and ``errors``
    attributes hold the top-level members of the last synced document.

    Args:
        settings: Store settings. Defaults to the cached environment settings.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.graph: dict[str, dict[str, Model]] = {}
        self.order: dict[str, list[str]] = {}
        self.meta: dict[str, Any] | None = None
        self.links: dict[str, Any] | None = None
        self.jsonapi: dict[str, Any] | None = None
        self.errors: list[Any] | None = None

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find(self, type: str, id: str) -> Model | None:
        """Retrieve a model by type and id.

        Returns:
            The model, or None if the type or id is unknown.
        """
        return self.graph.get(type, {}).get(id)

    def find_all(self, type: str) -> list[Model]:
        """Retrieve every model of ``type``, most recently synced last."""
        models = self.graph.get(type)
        if not models:
            return []
        return [models[model_id] for model_id in self.order.get(type, [])]

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def init_model(self, type: str, id: str) -> Model:
        """Find or create the model at ``(type, id)`` and move it to the end of the order."""
        models = self.graph.setdefault(type, {})
        order = self.order.setdefault(type, [])

        model = models.get(id)
        if model is None:
            model = Model(type, id)
            models[id] = model
        else:
            order.remove(id)
            logger.debug("Moved %s/%s to end of order", type, id)
        order.append(id)
        return model

    def sync_record(self, record: Mapping[str, Any]) -> Model | None:
        """Sync one resource object into the graph.

        Related resources that are not in the store yet are created as
        placeholders and filled in place when their own record arrives.

        Returns:
            The synced model (unindexed when the record has no id), or
            None if the record has no type.
        """
        if not isinstance(record, Mapping) or record.get("type") is None:
            logger.warning("Skipping resource record without a type: %r", record)
            return None

        if record.get("id") is None:
            # Transient resources cannot be looked up, so they stay unindexed.
            model = Model(record["type"])
        else:
            model = self.init_model(record["type"], record["id"])

        def find_or_init(linkage: Mapping[str, Any]) -> Model:
            if linkage.get("id") is None:
                return build_placeholder(linkage)
            related = self.find(linkage.get("type"), linkage.get("id"))
            if related is None:
                related = self.init_model(linkage.get("type"), linkage.get("id"))
                related.placeholder = True
                logger.debug(
                    "Created placeholder %s/%s", related.type, related.id
                )
            return related

        return model.sync(record, find_or_init)

    def sync(
        self,
        payload: Mapping[str, Any],
        *,
        top_level: bool | None = None,
        strict: bool | None = None,
    ) -> Model | list[Model] | SyncResult | None:
        """Sync a JSON:API document with the store.

        ``included`` resources are synced before the primary data. A document
        carrying ``errors`` is not ingested at all; its errors are exposed on
        ``store.errors``.

        Args:
            payload: The JSON:API document.
            top_level: Return a SyncResult with the top-level members instead
                of the bare primary data. Defaults to ``settings.top_level``.
            strict: Validate the document first. Defaults to
                ``settings.strict``.

        Returns:
            The model or list of models for the primary data (None when the
            document has no primary data or carries errors), or a SyncResult
            when ``top_level`` is set.

        Raises:
            ValueError: If ``strict`` is set and the document is malformed.
        """
        if top_level is None:
            top_level = self.settings.top_level
        if strict is None:
            strict = self.settings.strict
        if strict:
            _validate_document(payload)

        result = SyncResult()
        for member in _TOP_LEVEL_MEMBERS:
            value = payload.get(member)
            setattr(self, member, value)
            if member in payload:
                setattr(result, member, value)

        if payload.get("errors") is not None:
            logger.warning(
                "Document carries %d error(s); skipping data",
                len(payload["errors"]),
            )
            return result if top_level else None

        included = payload.get("included")
        if isinstance(included, list):
            for record in included:
                self.sync_record(record)

        data = payload.get("data")
        if isinstance(data, list):
            synced = [self.sync_record(record) for record in data]
            result.data = [model for model in synced if model is not None]
        elif isinstance(data, Mapping):
            result.data = self.sync_record(data)

        return result if top_level else result.data

    def destroy(self, model: Model | None) -> None:
        """Remove a model from the store and detach it from its dependents.

        Dependents keep existing; only their reference to ``model`` is
        cleared. No-op for None, id-less models and models not in the store.
        """
        if model is None or model.id is None:
            return
        models = self.graph.get(model.type, {})
        if models.get(model.id) is not model:
            logger.debug(
                "Model %s/%s is not in the store; nothing to destroy",
                model.type,
                model.id,
            )
            return

        model.unlink_dependence(self.find)
        model.destroyed = True
        del models[model.id]
        self.order[model.type].remove(model.id)
        logger.info("Destroyed %s/%s", model.type, model.id)

    def reset(self) -> None:
        """Empty the store. Models already handed out are left untouched."""
        self.graph = {}
        self.order = {}
        for member in _TOP_LEVEL_MEMBERS:
            setattr(self, member, None)
        logger.info("Store reset")


def _validate_document(payload: Mapping[str, Any]) -> None:
    try:
        JSONAPIDocument.model_validate(payload)
    except ValidationError as exc:
        msg = f"Invalid JSON:API document: {exc}"
        raise ValueError(msg) from exc
