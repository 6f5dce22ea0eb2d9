"""Endpoint catalog — a file-backed stand-in for an IDE's URL index.

The catalog is a YAML (or JSON) document::

    types:
      com.example.User:
        fields: [id, name]
        extends: com.example.Entity
    endpoints:
      - path: /users/{id}
        method: PUT
        handler: com.example.UserController#update
        parameters:
          - name: user
            type: com.example.User
            annotations:
              - qualified_name: org.springframework.web.bind.annotation.RequestBody
"""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from spring_http_requests.errors import CatalogError, ResolutionMiss
from spring_http_requests.parser.base import (
    EndpointSignature,
    FieldDescriptor,
    RawParameter,
    TypeDefinition,
)

logger = logging.getLogger(__name__)


class EndpointCatalog:
    """Resolves request paths to handler signatures and types to their fields."""

    def __init__(
        self,
        endpoints: list[EndpointSignature],
        types: dict[str, TypeDefinition] | None = None,
    ):
        self.endpoints = endpoints
        self.types = types or {}

    def resolve(self, path: str, method: str | None = None) -> EndpointSignature:
        """Find the single endpoint serving ``path``.

        Raises ResolutionMiss when nothing matches or the match is ambiguous.
        """
        candidates = [e for e in self.endpoints if _path_matches(e.path, path)]
        if method:
            candidates = [
                e for e in candidates
                if e.method is None or e.method.upper() == method.upper()
            ]
        # A literal path beats a template, e.g. /users/me over /users/{id}
        literal = [e for e in candidates if _normalize(e.path) == _normalize(path)]
        if literal:
            candidates = literal

        if not candidates:
            raise ResolutionMiss(f"No endpoint for {method or '*'} {path}")
        if len(candidates) > 1:
            handlers = ", ".join(e.handler or e.path for e in candidates)
            raise ResolutionMiss(f"Ambiguous endpoint for {method or '*'} {path}: {handlers}")

        endpoint = candidates[0]
        logger.debug("Resolved %s %s to %s", method or "*", path, endpoint.handler)
        return endpoint

    def fields_of(self, type_name: str | None) -> list[FieldDescriptor] | None:
        """Own fields followed by inherited ones; None if the type is unknown."""
        type_def = self._find_type(type_name)
        if type_def is None:
            return None

        fields: list[FieldDescriptor] = []
        seen: set[str] = set()
        while type_def is not None and type_def.name not in seen:
            seen.add(type_def.name)
            fields.extend(type_def.fields)
            type_def = self._find_type(type_def.extends)
        return fields

    def _find_type(self, type_name: str | None) -> TypeDefinition | None:
        if not type_name:
            return None
        type_name = type_name.split("<", 1)[0].strip()
        if type_name in self.types:
            return self.types[type_name]
        simple_name = type_name.rsplit(".", 1)[-1]
        matches = [t for name, t in self.types.items() if name.rsplit(".", 1)[-1] == simple_name]
        if len(matches) == 1:
            return matches[0]
        return None


def load_catalog(file_path: Path) -> EndpointCatalog:
    """Load an endpoint catalog from a YAML or JSON file."""
    text = file_path.read_text(encoding="utf-8")
    try:
        doc = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise CatalogError(f"Cannot parse {file_path}: {e}") from e
    if not isinstance(doc, dict):
        raise CatalogError(f"{file_path}: expected a mapping at the top level")
    return parse_catalog(doc)


def parse_catalog(doc: dict) -> EndpointCatalog:
    try:
        types = {
            name: TypeDefinition(name=name, **(body or {}))
            for name, body in (doc.get("types") or {}).items()
        }
        endpoints = [_parse_endpoint(e) for e in doc.get("endpoints") or []]
    except (ValidationError, KeyError, TypeError, AttributeError) as e:
        raise CatalogError(f"Invalid endpoint catalog: {e}") from e
    return EndpointCatalog(endpoints, types)


def _parse_endpoint(entry: dict) -> EndpointSignature:
    params = [
        RawParameter(
            name=p["name"],
            type_name=p.get("type"),
            annotations=p.get("annotations") or [],
        )
        for p in entry.get("parameters") or []
    ]
    return EndpointSignature(
        path=entry["path"],
        method=entry.get("method"),
        handler=entry.get("handler", ""),
        parameters=params,
    )


def _normalize(path: str) -> list[str]:
    return [s for s in path.split("/") if s]


def _is_variable(segment: str) -> bool:
    return segment.startswith("{") and segment.endswith("}")


def _path_matches(template: str, path: str) -> bool:
    template_parts = _normalize(template)
    path_parts = _normalize(path)
    if len(template_parts) != len(path_parts):
        return False
    for expected, actual in zip(template_parts, path_parts):
        if _is_variable(expected):
            continue
        if expected != actual:
            return False
    return True
