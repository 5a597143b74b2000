"""Type mapping definitions passed through to ``_mapping``."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from typing import Any

from esdocs.models import InvalidArgumentError


class Mapping:
    """Field properties and type-level settings for one document type.

    Usage::

        mapping = Mapping("post", {"title": {"type": "string", "boost": 2.0}})
        mapping.set_param("_source", {"enabled": True})
        doc_type.set_mapping(mapping)
    """

    def __init__(
        self,
        type_name: str | None = None,
        properties: MappingABC[str, Any] | None = None,
    ) -> None:
        self.type_name = type_name
        self._properties: dict[str, Any] = dict(properties or {})
        self._params: dict[str, Any] = {}

    @property
    def properties(self) -> dict[str, Any]:
        return dict(self._properties)

    def set_properties(self, properties: MappingABC[str, Any]) -> Mapping:
        self._properties = dict(properties)
        return self

    def set_property(self, name: str, definition: MappingABC[str, Any]) -> Mapping:
        self._properties[name] = dict(definition)
        return self

    def set_param(self, key: str, value: Any) -> Mapping:
        self._params[key] = value
        return self

    def get_param(self, key: str, default: Any = None) -> Any:
        return self._params.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        if not self.type_name:
            raise InvalidArgumentError("mapping has no type name")
        body: dict[str, Any] = dict(self._params)
        body["properties"] = dict(self._properties)
        return {self.type_name: body}

    @classmethod
    def create(
        cls,
        mapping: Mapping | MappingABC[str, Any],
        type_name: str | None = None,
    ) -> Mapping:
        """Normalize *mapping* into a :class:`Mapping` for *type_name*.

        A plain dict is read as the properties definition, unless it is
        already shaped as ``{"properties": ...}``.
        """
        if isinstance(mapping, Mapping):
            if type_name and not mapping.type_name:
                mapping.type_name = type_name
            return mapping
        if not isinstance(mapping, MappingABC):
            raise InvalidArgumentError(
                f"mapping must be a Mapping or a dict, got {type(mapping).__name__}"
            )
        if "properties" in mapping:
            created = cls(type_name, mapping["properties"])
            for key, value in mapping.items():
                if key != "properties":
                    created.set_param(key, value)
            return created
        return cls(type_name, mapping)
