"""Generate-requests action — the end-to-end flow behind the editor command.

Locates the request under the caret, resolves its endpoint, classifies the
handler parameters and splices the synthesized text into the document as
one edit.
"""

import logging

from pydantic import BaseModel

from spring_http_requests.config import GeneratorConfig
from spring_http_requests.errors import GenerationError, NotWritable, ResolutionMiss
from spring_http_requests.generator.editor import TextEdit, apply_edits, plan_edits
from spring_http_requests.generator.synthesizer import synthesize
from spring_http_requests.parser.base import (
    EndpointSignature,
    GenerationRequest,
    SynthesisResult,
)
from spring_http_requests.parser.catalog import EndpointCatalog
from spring_http_requests.parser.classifier import classify
from spring_http_requests.parser.httpfile import HttpDocument, parse_http_document

logger = logging.getLogger(__name__)


class GenerationOutcome(BaseModel):
    endpoint: EndpointSignature
    result: SynthesisResult
    edits: list[TextEdit]
    text: str


class GenerateRequestsAction:
    """Fills the request under the caret with scaffolding for its endpoint."""

    def __init__(self, catalog: EndpointCatalog, config: GeneratorConfig | None = None):
        self.catalog = catalog
        self.config = config or GeneratorConfig()

    def is_enabled(self, document: HttpDocument, caret: int) -> bool:
        return document.request_at(caret) is not None

    def perform(self, text: str, caret: int, writable: bool = True) -> GenerationOutcome | None:
        """Run one generation; returns None when there is nothing to do."""
        try:
            return self._perform(text, caret, writable)
        except GenerationError as e:
            logger.info("Skipping generation: %s", e)
            return None

    def build_request(self, endpoint: EndpointSignature) -> GenerationRequest:
        params = classify(endpoint.parameters, self.config)
        request = GenerationRequest(parameters=tuple(params))
        body_param = request.body_parameter
        if body_param is None:
            return request

        fields = self.catalog.fields_of(body_param.declared_type_name)
        if fields is None:
            logger.warning(
                "Body type %s of %s is unknown; emitting an empty skeleton",
                body_param.declared_type_name or "?",
                endpoint.handler or endpoint.path,
            )
            return request
        return request.model_copy(update={"body_type_fields": tuple(fields)})

    def _perform(self, text: str, caret: int, writable: bool) -> GenerationOutcome | None:
        if not writable:
            raise NotWritable("Document is read-only")

        document = parse_http_document(text)
        block = document.request_at(caret)
        if block is None:
            raise ResolutionMiss(f"No request without a body before offset {caret}")

        endpoint = self.catalog.resolve(block.path, block.method)
        request = self.build_request(endpoint)

        result = synthesize(request, self.config, block.header_fields)
        if result.is_empty:
            logger.info("Nothing to generate for %s", endpoint.handler or endpoint.path)
            return None

        edits = plan_edits(block, caret, result, document.newline)
        return GenerationOutcome(
            endpoint=endpoint,
            result=result,
            edits=edits,
            text=apply_edits(text, edits),
        )
