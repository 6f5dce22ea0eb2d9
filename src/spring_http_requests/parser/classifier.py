"""Endpoint parameter classifier.

Decides, for each handler parameter, whether it binds to the query string,
the request body, or a multipart file field.
"""

import logging
from collections.abc import Sequence

from spring_http_requests.config import GeneratorConfig
from spring_http_requests.parser.base import (
    AnnotationKind,
    ParameterDescriptor,
    RawAnnotation,
    RawParameter,
)

logger = logging.getLogger(__name__)

NAME_ATTRIBUTES = ("value", "name")


def classify(
    parameters: Sequence[RawParameter], config: GeneratorConfig | None = None
) -> list[ParameterDescriptor]:
    """Classify raw parameters; those without a recognized annotation are dropped."""
    config = config or GeneratorConfig()
    result = []
    for param in parameters:
        descriptor = _classify_one(param, config)
        if descriptor is None:
            logger.debug("Skipping parameter %s: no binding annotation", param.name)
            continue
        result.append(descriptor)
    return result


def _classify_one(param: RawParameter, config: GeneratorConfig) -> ParameterDescriptor | None:
    kinds = {
        config.query_annotation: AnnotationKind.QUERY,
        config.body_annotation: AnnotationKind.BODY,
    }
    annotation = next((a for a in param.annotations if a.qualified_name in kinds), None)
    if annotation is None:
        return None

    kind = kinds[annotation.qualified_name]
    type_name = param.type_name or ""
    if kind == AnnotationKind.BODY:
        return ParameterDescriptor(
            name=param.name,
            declared_type_name=type_name,
            annotation_kind=kind,
        )

    return ParameterDescriptor(
        name=param.name,
        declared_type_name=type_name,
        is_file_type=is_file_type(type_name, config),
        annotation_kind=kind,
        override_name=_override_name(annotation),
        file_name_text=annotation.attributes.get("value"),
    )


def is_file_type(type_name: str, config: GeneratorConfig) -> bool:
    """Match the simple type name against the known upload types."""
    if not type_name:
        return False
    simple_name = type_name.split("<", 1)[0].rsplit(".", 1)[-1]
    return simple_name in config.file_type_names


def _override_name(annotation: RawAnnotation) -> str | None:
    for attr in NAME_ATTRIBUTES:
        text = annotation.attributes.get(attr)
        if text is None:
            continue
        name = unwrap_literal(text)
        if name:
            return name
    return None


def unwrap_literal(text: str) -> str:
    """Strip the quotes around a string literal's source text."""
    text = text.strip()
    if text.startswith('"'):
        text = text[1:]
    if text.endswith('"'):
        text = text[:-1]
    return text
