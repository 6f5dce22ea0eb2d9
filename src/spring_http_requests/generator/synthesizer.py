"""Request text synthesizer — turns classified parameters into .http text."""

import logging
from collections.abc import Iterable, Sequence

from spring_http_requests.config import (
    CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    MULTIPART_CONTENT_TYPE,
    GeneratorConfig,
)
from spring_http_requests.parser.base import (
    FieldDescriptor,
    GenerationRequest,
    HeaderField,
    ParameterDescriptor,
    SynthesisResult,
)

logger = logging.getLogger(__name__)

EMPTY_SKELETON = "{\n}"


def synthesize(
    request: GenerationRequest,
    config: GeneratorConfig | None = None,
    existing_headers: Iterable[HeaderField] = (),
) -> SynthesisResult:
    """Build headers, JSON body, query string and multipart form for a request.

    Headers already present in ``existing_headers`` are not emitted again.
    """
    config = config or GeneratorConfig()
    existing = list(existing_headers)
    result = SynthesisResult()

    if request.body_parameter is not None:
        _add_header(result, existing, CONTENT_TYPE, JSON_CONTENT_TYPE)
        result.body_text = render_json_skeleton(request.body_type_fields)

    result.query_string = render_query_string(request.query_parameters)

    file_param = request.file_parameter
    if file_param is not None:
        _add_header(
            result,
            existing,
            CONTENT_TYPE,
            f"{MULTIPART_CONTENT_TYPE}; boundary={config.boundary}",
            match_value=MULTIPART_CONTENT_TYPE,
        )
        result.form_text = render_form_section(file_param, config.boundary)

    return result


def header_exists(existing: Iterable[HeaderField], name: str, value: str) -> bool:
    """True if a header with this name already contains ``value`` (case-insensitive)."""
    needle = value.lower()
    for header in existing:
        if header.name == name and needle in header.value.lower():
            return True
    return False


def render_json_skeleton(fields: Sequence[FieldDescriptor] | None) -> str:
    if not fields:
        return EMPTY_SKELETON
    lines = ["{"]
    last = len(fields) - 1
    for i, field in enumerate(fields):
        lines.append(f'\t"{field.name}": {"" if i == last else ","}')
    lines.append("}")
    return "\n".join(lines)


def render_query_string(params: Sequence[ParameterDescriptor]) -> str | None:
    if not params:
        return None
    return "?" + "&".join(f"{p.request_name}=" for p in params)


def render_form_section(param: ParameterDescriptor, boundary: str) -> str:
    file_name = param.file_name_text if param.file_name_text is not None else '""'
    return "\n".join([
        f"--{boundary}",
        f'Content-Disposition: form-data; name="{param.request_name}"; filename={file_name}',
        "<",
    ])


def _add_header(
    result: SynthesisResult,
    existing: list[HeaderField],
    name: str,
    value: str,
    match_value: str | None = None,
) -> None:
    if header_exists(existing, name, match_value or value):
        logger.debug("Header %s: %s already present", name, value)
        return
    result.headers.append(HeaderField(name=name, value=value))
