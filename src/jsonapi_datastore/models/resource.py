"""In-memory JSON:API resource model.

A ``Model`` holds one resource's attributes, relationships, links and meta,
plus the reverse edges (``dependents``) naming every resource that points at
it. Relationships are direct object references to other ``Model`` instances;
the reverse edges are plain ``(type, id, relation)`` records used only to
sever those references when a model is destroyed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from copy import deepcopy
from typing import Any, NamedTuple

from jsonapi_datastore.schemas.jsonapi import SerializeOptions

logger = logging.getLogger(__name__)

ModelFactory = Callable[[Mapping[str, Any]], "Model"]
ModelResolver = Callable[[str, str], "Model | None"]

_MISSING = object()


class Dependent(NamedTuple):
    """Reverse edge: the resource ``(type, id)`` references us under ``relation``.

    Ids are kept as given and compared by value, so a numeric id on the edge
    matches the same numeric id on the model.
    """

    type: Any
    id: Any
    relation: str


def build_placeholder(linkage: Mapping[str, Any]) -> Model:
    """Default relationship factory: a disconnected stub for ``linkage``."""
    model = Model(linkage.get("type"), linkage.get("id"))
    model.placeholder = True
    return model


class Model:
    """A single JSON:API resource.

    Args:
        type: Resource type. Immutable once constructed.
        id: Resource id. ``None`` for a transient, not yet persisted resource.
    """

    def __init__(self, type: str, id: str | None = None) -> None:
        self._type = type
        self._id = id
        self.attributes: dict[str, Any] = {}
        self.relationships: dict[str, Model | list[Model] | None] = {}
        self.links: dict[str, Any] = {}
        self.meta: dict[str, Any] = {}
        self.relationship_links: dict[str, Any] = {}
        self.relationship_meta: dict[str, Any] = {}
        self.dependents: list[Dependent] = []
        self.placeholder = False
        self.destroyed = False

    @property
    def type(self) -> str:
        return self._type

    @property
    def id(self) -> str | None:
        return self._id

    @id.setter
    def id(self, value: str | None) -> None:
        if self._id is not None and value != self._id:
            raise AttributeError(
                f"Cannot change id of {self._type}/{self._id} once assigned"
            )
        self._id = value

    @property
    def attribute_names(self) -> list[str]:
        return list(self.attributes)

    @property
    def relationship_names(self) -> list[str]:
        return list(self.relationships)

    def identifier(self) -> dict[str, Any]:
        """Return the ``{type, id}`` resource identifier for this model."""
        return {"type": self._type, "id": self._id}

    def get(self, name: str, default: Any = None) -> Any:
        """Look up an attribute, then a relationship, by name."""
        if name in self.attributes:
            return self.attributes[name]
        return self.relationships.get(name, default)

    def __getitem__(self, name: str) -> Any:
        value = self.get(name, _MISSING)
        if value is _MISSING:
            raise KeyError(name)
        return value

    def __contains__(self, name: object) -> bool:
        return name in self.attributes or name in self.relationships

    def __repr__(self) -> str:
        state = " placeholder" if self.placeholder else ""
        return f"<Model {self._type}/{self._id}{state}>"

    # ------------------------------------------------------------------
    # Field mutation
    # ------------------------------------------------------------------

    def set_attribute(self, name: str, value: Any) -> None:
        """Set or add an attribute. Always overwrites."""
        self.attributes[name] = value

    def set_relationship(
        self, name: str, value: Model | Sequence[Model] | None
    ) -> None:
        """Set or extend a relationship.

        A new name, or a slot holding ``None`` or a single model, is
        overwritten with ``value``. When the slot already holds a list, a
        model is appended to it and a sequence of models extends it; ``None``
        clears the slot.

        Raises:
            TypeError: If ``value`` is not ``None``, a Model, or a sequence
                of Models.
        """
        if value is not None and not isinstance(value, Model):
            if isinstance(value, (str, bytes, Mapping)) or not isinstance(
                value, Sequence
            ):
                raise TypeError(
                    f"Relationship '{name}' expects a Model, a sequence of "
                    f"Models or None, got {type(value).__name__}"
                )
            value = list(value)
            if not all(isinstance(item, Model) for item in value):
                raise TypeError(
                    f"Relationship '{name}' sequence must contain only Models"
                )

        current = self.relationships.get(name)
        if isinstance(current, list) and value is not None:
            if isinstance(value, Model):
                current.append(value)
            else:
                current.extend(value)
            return
        self.relationships[name] = value

    # ------------------------------------------------------------------
    # Reverse dependencies
    # ------------------------------------------------------------------

    def add_dependence(self, type: str, id: str, relation: str) -> None:
        """Record that ``(type, id)`` references this model under ``relation``."""
        dependent = Dependent(type=type, id=id, relation=relation)
        if dependent not in self.dependents:
            self.dependents.append(dependent)

    def remove_dependence(
        self, type: str, id: str, relation: str | None = None
    ) -> None:
        """Drop reverse edges from ``(type, id)``, optionally for one relation."""
        self.dependents = [
            dependent
            for dependent in self.dependents
            if not (
                dependent.type == type
                and dependent.id == id
                and (relation is None or dependent.relation == relation)
            )
        ]

    def remove_relationship(self, type: str, id: str, relation: str) -> None:
        """Sever every reference to ``(type, id)`` held under ``relation``."""
        self.remove_dependence(type, id)
        current = self.relationships.get(relation)
        if isinstance(current, list):
            # In place, so callers holding the list see the removal.
            current[:] = [
                model
                for model in current
                if not (model.type == type and model.id == id)
            ]
        elif (
            isinstance(current, Model)
            and current.type == type
            and current.id == id
        ):
            self.relationships[relation] = None

    def unlink_dependence(self, resolve: ModelResolver) -> None:
        """Ask every dependent to drop its reference to this model.

        Args:
            resolve: Lookup ``(type, id) -> Model | None`` for dependents.
        """
        for dependent in list(self.dependents):
            model = resolve(dependent.type, dependent.id)
            if model is None:
                logger.warning(
                    "Dependent %s/%s of %s/%s no longer resolvable",
                    dependent.type,
                    dependent.id,
                    self._type,
                    self._id,
                )
                continue
            logger.debug(
                "Severing %s/%s.%s -> %s/%s",
                dependent.type,
                dependent.id,
                dependent.relation,
                self._type,
                self._id,
            )
            model.remove_relationship(self._type, self._id, dependent.relation)

    # ------------------------------------------------------------------
    # Sync / serialize
    # ------------------------------------------------------------------

    def sync(
        self,
        record: Mapping[str, Any],
        model_factory: ModelFactory | None = None,
    ) -> Model:
        """Populate this model from a JSON:API resource object.

        Attributes are merged key by key; ``links`` and ``meta`` are replaced
        wholesale when present. Relationship linkages are resolved through
        ``model_factory`` (a disconnected placeholder per linkage when omitted)
        and each resolved model gets a reverse edge back to this one, provided
        this model has an id.

        Args:
            record: The resource object.
            model_factory: Resolver ``linkage -> Model``.

        Returns:
            This model.
        """
        factory = model_factory or build_placeholder
        self.placeholder = False

        attributes = record.get("attributes")
        if isinstance(attributes, Mapping):
            for name, value in attributes.items():
                self.set_attribute(name, value)

        if record.get("links") is not None:
            self.links = record["links"]
        if record.get("meta") is not None:
            self.meta = record["meta"]

        relationships = record.get("relationships")
        if isinstance(relationships, Mapping):
            for name, relationship in relationships.items():
                if isinstance(relationship, Mapping):
                    self._sync_relationship(name, relationship, factory)
        return self

    def _sync_relationship(
        self,
        name: str,
        relationship: Mapping[str, Any],
        factory: ModelFactory,
    ) -> None:
        if "data" in relationship:
            data = relationship["data"]
            if data is None:
                self._replace_relationship(name, None)
            elif isinstance(data, list):
                models = [
                    factory(linkage)
                    for linkage in data
                    if isinstance(linkage, Mapping)
                ]
                self._replace_relationship(name, models)
            elif isinstance(data, Mapping):
                self._replace_relationship(name, factory(data))

        if relationship.get("links") is not None:
            self.relationship_links[name] = relationship["links"]
        if relationship.get("meta") is not None:
            self.relationship_meta[name] = relationship["meta"]

    def _replace_relationship(
        self, name: str, value: Model | list[Model] | None
    ) -> None:
        previous = self.relationships.get(name)
        self.relationships[name] = value
        if self._id is None:
            return

        current = _as_list(value)
        for model in _as_list(previous):
            if not any(model is other for other in current):
                logger.debug(
                    "Dropping stale edge %s/%s.%s -> %s/%s",
                    self._type,
                    self._id,
                    name,
                    model.type,
                    model.id,
                )
                model.remove_dependence(self._type, self._id, name)
        for model in current:
            model.add_dependence(self._type, self._id, name)

    def serialize(
        self, options: SerializeOptions | Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """Serialize this model into a JSON:API document.

        Args:
            options: Optional name subsets for ``attributes``,
                ``relationships``, ``links`` and ``meta``. Omitted categories
                serialize everything known.

        Returns:
            ``{"data": {type, id?, attributes?, relationships?, links?, meta?}}``
        """
        if options is None:
            options = SerializeOptions()
        elif not isinstance(options, SerializeOptions):
            options = SerializeOptions.model_validate(options)

        attribute_names = (
            self.attribute_names
            if options.attributes is None
            else options.attributes
        )
        relationship_names = (
            self.relationship_names
            if options.relationships is None
            else options.relationships
        )

        data: dict[str, Any] = {"type": self._type}
        if self._id is not None:
            data["id"] = self._id

        if attribute_names:
            data["attributes"] = {
                name: deepcopy(self.attributes.get(name))
                for name in attribute_names
            }

        if relationship_names:
            data["relationships"] = {
                name: self._serialize_relationship(name)
                for name in relationship_names
            }

        links = _select(self.links, options.links)
        if links is not None:
            data["links"] = links
        meta = _select(self.meta, options.meta)
        if meta is not None:
            data["meta"] = meta

        return {"data": data}

    def _serialize_relationship(self, name: str) -> dict[str, Any]:
        value = self.relationships.get(name)
        if value is None:
            serialized: dict[str, Any] = {"data": None}
        elif isinstance(value, list):
            serialized = {
                "data": [
                    model.identifier() for model in value if model.id is not None
                ]
            }
        else:
            serialized = {"data": value.identifier()}

        if name in self.relationship_links:
            serialized["links"] = deepcopy(self.relationship_links[name])
        if name in self.relationship_meta:
            serialized["meta"] = deepcopy(self.relationship_meta[name])
        return serialized


def _as_list(value: Model | list[Model] | None) -> list[Model]:
    if value is None:
        return []
    if isinstance(value, Model):
        return [value]
    return list(value)


def _select(
    source: Mapping[str, Any], keys: list[str] | None
) -> dict[str, Any] | None:
    """Whole mapping when ``keys`` is None, the key subset when non-empty."""
    if not source:
        return None
    if keys is None:
        return deepcopy(dict(source))
    if not keys:
        return None
    return {key: deepcopy(source.get(key)) for key in keys}
